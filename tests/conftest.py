"""
Shared pytest fixtures for all tests.

Provides users with their role profiles, authenticated API clients and
slot factories. Times are fixed or offset from the current clock so that
the expiry sweep never touches slots a test expects to be bookable.
"""

from datetime import datetime, timedelta, timezone as dt_timezone

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.account.models import Doctor, DoctorPatient, Patient, User
from apps.account.tokens import issue_tokens
from apps.slot.models import DoctorSlot
from core.enum import SlotStatus, UserType

# ============================================================================
# CLOCK
# ============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """The day before the reference booking window."""
    return datetime(2024, 12, 31, 9, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def soon() -> datetime:
    """A start time safely in the future, aligned to the minute."""
    return (timezone.now() + timedelta(days=2)).replace(second=0, microsecond=0)


# ============================================================================
# USERS AND PROFILES
# ============================================================================


def _create_user(email, full_name, user_type, password="secret123"):
    return User.objects.create_user(
        username=email,
        email=email,
        password=password,
        full_name=full_name,
        user_type=user_type.value,
    )


@pytest.fixture
def doctor(db) -> Doctor:
    user = _create_user("doctor@medsi.com", "Meena Sharma", UserType.DOCTOR)
    return Doctor.objects.create(user=user, specialization="Cardiology")


@pytest.fixture
def other_doctor(db) -> Doctor:
    user = _create_user("second.doctor@medsi.com", "Arjun Rao", UserType.DOCTOR)
    return Doctor.objects.create(user=user, specialization="Neurology")


@pytest.fixture
def patient(db) -> Patient:
    user = _create_user("patient@medsi.com", "Soumya Tiwari", UserType.PATIENT)
    return Patient.objects.create(user=user, gender="Female", blood_group="B+")


@pytest.fixture
def other_patient(db) -> Patient:
    user = _create_user("second.patient@medsi.com", "Ravi Kumar", UserType.PATIENT)
    return Patient.objects.create(user=user)


@pytest.fixture
def admin_user(db) -> User:
    return _create_user("admin@medsi.com", "Admin User", UserType.ADMIN)


@pytest.fixture
def linked_patient(doctor, patient) -> Patient:
    DoctorPatient.objects.create(doctor=doctor, patient=patient)
    return patient


# ============================================================================
# API CLIENTS
# ============================================================================


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def client_for():
    """Build an APIClient authenticated as the given user."""

    def _client_for(user) -> APIClient:
        client = APIClient()
        token = issue_tokens(user)["access_token"]
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client

    return _client_for


@pytest.fixture
def doctor_client(client_for, doctor) -> APIClient:
    return client_for(doctor.user)


@pytest.fixture
def patient_client(client_for, patient) -> APIClient:
    return client_for(patient.user)


@pytest.fixture
def admin_client(client_for, admin_user) -> APIClient:
    return client_for(admin_user)


# ============================================================================
# SLOTS
# ============================================================================


@pytest.fixture
def make_slot():
    """Create an AVAILABLE slot directly, bypassing creation-time checks."""

    def _make_slot(doctor, start, minutes=30, status=SlotStatus.AVAILABLE):
        return DoctorSlot.objects.create(
            doctor=doctor,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            duration=minutes,
            status=status.value,
        )

    return _make_slot


@pytest.fixture
def open_slot(make_slot, doctor, soon) -> DoctorSlot:
    return make_slot(doctor, soon)
