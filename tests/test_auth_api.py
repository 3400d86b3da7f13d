import pytest

from apps.account.models import Doctor, Patient, User
from core.enum import UserType


@pytest.mark.django_db
class TestSignup:
    """POST /api/auth/signup/"""

    def test_patient_is_default_role(self, api_client):
        response = api_client.post(
            "/api/auth/signup/",
            {"full_name": "New Patient", "email": "New@Example.com", "password": "secret123"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["user"]["role"] == UserType.PATIENT.value
        assert response.data["tokens"]["access_token"]
        user = User.objects.get(email="new@example.com")
        assert Patient.objects.filter(user=user).exists()

    def test_doctor_signup_creates_profile(self, api_client):
        response = api_client.post(
            "/api/auth/signup/",
            {
                "full_name": "Dr. New",
                "email": "dr.new@example.com",
                "password": "secret123",
                "role": "doctor",
                "specialization": "Dermatology",
            },
            format="json",
        )

        assert response.status_code == 201
        doctor = Doctor.objects.get(user__email="dr.new@example.com")
        assert doctor.specialization == "Dermatology"

    def test_duplicate_email(self, api_client, patient):
        response = api_client.post(
            "/api/auth/signup/",
            {"full_name": "Again", "email": patient.user.email, "password": "secret123"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["message"] == "User already exists with this email"

    def test_admin_role_is_rejected(self, api_client):
        response = api_client.post(
            "/api/auth/signup/",
            {
                "full_name": "Sneaky",
                "email": "sneaky@example.com",
                "password": "secret123",
                "role": "ADMIN",
            },
            format="json",
        )

        assert response.status_code == 400
        assert not User.objects.filter(email="sneaky@example.com").exists()

    def test_missing_fields(self, api_client):
        response = api_client.post(
            "/api/auth/signup/", {"email": "x@example.com"}, format="json"
        )

        assert response.status_code == 400


@pytest.mark.django_db
class TestLogin:
    """Login, refresh and logout"""

    def test_login_returns_tokens(self, api_client, patient):
        response = api_client.post(
            "/api/auth/login/",
            {"email": "PATIENT@medsi.com", "password": "secret123"},
            format="json",
        )

        assert response.status_code == 200
        assert response.data["access_token"]
        assert response.data["refresh_token"]
        assert response.data["user"]["email"] == "patient@medsi.com"

    def test_login_records_last_login(self, api_client, patient_client, patient):
        api_client.post(
            "/api/auth/login/",
            {"email": "patient@medsi.com", "password": "secret123"},
            format="json",
        )

        patient.user.refresh_from_db()
        assert patient.user.last_login is not None
        profile = patient_client.get("/api/auth/profile/")
        assert profile.data["profile"]["last_login"] == patient.user.last_login

    def test_bad_credentials(self, api_client, patient):
        response = api_client.post(
            "/api/auth/login/",
            {"email": "patient@medsi.com", "password": "wrong"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["message"] == "Invalid credentials"

    def test_logout_blacklists_refresh_token(self, api_client, client_for, patient):
        login = api_client.post(
            "/api/auth/login/",
            {"email": "patient@medsi.com", "password": "secret123"},
            format="json",
        )
        refresh_token = login.data["refresh_token"]

        response = client_for(patient.user).post(
            "/api/auth/logout/", {"refresh_token": refresh_token}, format="json"
        )
        assert response.status_code == 200

        refreshed = api_client.post(
            "/api/auth/refresh/", {"refresh": refresh_token}, format="json"
        )
        assert refreshed.status_code == 401


@pytest.mark.django_db
class TestProfile:
    """GET/PUT /api/auth/profile/"""

    def test_requires_authentication(self, api_client):
        assert api_client.get("/api/auth/profile/").status_code == 401

    def test_read_profile(self, patient_client):
        response = patient_client.get("/api/auth/profile/")

        assert response.status_code == 200
        assert response.data["profile"]["patient"]["blood_group"] == "B+"

    def test_update_profile(self, patient_client, patient):
        response = patient_client.put(
            "/api/auth/profile/",
            {"mobile_number": "555-0100", "blood_group": "o+"},
            format="json",
        )

        assert response.status_code == 200
        patient.refresh_from_db()
        patient.user.refresh_from_db()
        assert patient.blood_group == "O+"
        assert patient.user.mobile_number == "555-0100"

    def test_invalid_blood_group(self, patient_client):
        response = patient_client.put(
            "/api/auth/profile/", {"blood_group": "Z"}, format="json"
        )

        assert response.status_code == 400


@pytest.mark.django_db
class TestAdminAndHealth:
    """Admin placeholder routes and health check"""

    def test_health(self, api_client):
        response = api_client.get("/api/health/")

        assert response.status_code == 200
        assert response.data["status"] == "ok"

    def test_admin_users(self, admin_client, doctor, patient):
        response = admin_client.get("/api/admin/users/", {"role": "doctor"})

        assert response.status_code == 200
        assert response.data["meta"]["total"] == 1
        assert response.data["data"][0]["email"] == doctor.user.email

    def test_admin_profile(self, admin_client):
        response = admin_client.get("/api/admin/profile/")

        assert response.status_code == 200
        assert response.data["message"] == "Welcome, Admin User"

    def test_non_admin_is_denied(self, patient_client):
        response = patient_client.get("/api/admin/users/")

        assert response.status_code == 403
        assert response.data["detail"] == "Access denied: insufficient privileges"
