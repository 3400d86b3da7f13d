from django.urls import path

from . import views

doctor_patterns = [
    path(
        "appointments/<uuid:appointment_id>/prescription/",
        views.upsert_prescription,
        name="appointment_prescription",
    ),
]

patient_patterns = [
    path("prescriptions/", views.patient_prescriptions, name="prescriptions"),
    path(
        "prescriptions/<uuid:prescription_id>/",
        views.patient_prescription_detail,
        name="prescription_detail",
    ),
]
