from django.urls import path

from . import views

# Doctor slot management
doctor_patterns = [
    path("slots/", views.doctor_slots, name="slots"),
    path("slots/available/", views.doctor_available_slots, name="available_slots"),
    path("slots/<uuid:slot_id>/", views.delete_slot, name="delete_slot"),
]

# Patient-facing availability
patient_patterns = [
    path(
        "doctors/<uuid:doctor_id>/slots/",
        views.bookable_slots,
        name="doctor_slots",
    ),
]
