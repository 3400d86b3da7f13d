from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from apps.account import urls as account_urls
from apps.account.views import health_check
from apps.appointment import urls as appointment_urls
from apps.prescription import urls as prescription_urls
from apps.report import urls as report_urls
from apps.slot import urls as slot_urls

# Swagger Urls
swagger_urlpatterns = [
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/swagger/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger_ui",
    ),
    path(
        "api/schema/redoc/",
        SpectacularRedocView.as_view(url_name="schema"),
        name="redoc",
    ),
]

# Role-scoped route groups, assembled from each app
doctor_patterns = (
    slot_urls.doctor_patterns
    + appointment_urls.doctor_patterns
    + prescription_urls.doctor_patterns
    + account_urls.doctor_patterns
    + report_urls.doctor_patterns
)

patient_patterns = (
    appointment_urls.patient_patterns
    + account_urls.patient_patterns
    + slot_urls.patient_patterns
    + prescription_urls.patient_patterns
    + report_urls.patient_patterns
)

# Custom Apps Urls
api_urlpatterns = [
    path("api/auth/", include((account_urls.auth_patterns, "auth"))),
    path("api/doctor/", include((doctor_patterns, "doctor"))),
    path("api/patient/", include((patient_patterns, "patient"))),
    path("api/admin/", include((account_urls.admin_patterns, "admin_api"))),
    path("api/health/", health_check, name="health_check"),
]

urlpatterns = [path("admin/", admin.site.urls)] + swagger_urlpatterns + api_urlpatterns
