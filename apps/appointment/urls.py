from django.urls import path

from . import views

# Doctor appointment operations
doctor_patterns = [
    path("dashboard/", views.doctor_dashboard, name="dashboard"),
    path("appointments/", views.doctor_appointments, name="appointments"),
    path(
        "appointments/<uuid:appointment_id>/",
        views.doctor_appointment_detail,
        name="appointment_detail",
    ),
    path(
        "appointments/<uuid:appointment_id>/status/",
        views.doctor_appointment_status,
        name="appointment_status",
    ),
]

# Patient appointment operations
patient_patterns = [
    path("dashboard/", views.patient_dashboard, name="dashboard"),
    path("appointments/", views.patient_appointments, name="appointments"),
    path(
        "appointments/<uuid:appointment_id>/",
        views.patient_appointment_detail,
        name="appointment_detail",
    ),
]
