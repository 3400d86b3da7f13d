from django.urls import path

from . import views

doctor_patterns = [
    path("reports/", views.upload_report, name="upload_report"),
]

patient_patterns = [
    path("reports/", views.patient_reports, name="reports"),
]
