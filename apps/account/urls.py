from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import views

# Authentication URLs
auth_patterns = [
    path("signup/", views.signup, name="signup"),
    path("login/", views.login, name="login"),
    path("logout/", views.logout, name="logout"),
    # JWT Token Management
    path("refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("profile/", views.profile, name="profile"),
]

# Doctor: followed patients
doctor_patterns = [
    path("patients/", views.doctor_patients, name="patients"),
    path("patients/link/", views.link_patient, name="link_patient"),
    path(
        "patients/<uuid:patient_id>/",
        views.doctor_patient_detail,
        name="patient_detail",
    ),
]

# Patient: doctor directory
patient_patterns = [
    path("doctors/", views.doctor_directory, name="doctors"),
]

# Admin URLs (Admin only endpoints)
admin_patterns = [
    path("profile/", views.admin_profile, name="profile"),
    path("users/", views.admin_users, name="users"),
]
