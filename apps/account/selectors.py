import uuid
from typing import Optional

from django.db.models import Q, QuerySet

from .models import Doctor, DoctorPatient, Patient, User


class UserSelector:
    """Selector class for user-related queries"""

    @staticmethod
    def get_user_by_id(user_id: uuid) -> Optional[User]:
        """Get user by ID with role profiles"""
        try:
            return User.objects.select_related(
                "doctor_profile", "patient_profile"
            ).get(id=user_id)
        except User.DoesNotExist:
            return None

    @staticmethod
    def get_user_by_email(email: str) -> Optional[User]:
        """Get user by email"""
        try:
            return User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            return None

    @staticmethod
    def check_email_exists(email: str, exclude_id: uuid = None) -> bool:
        """Check if email already exists"""
        queryset = User.objects.filter(email__iexact=email)
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    @staticmethod
    def get_users(filters: dict = None) -> QuerySet:
        """Users for the admin listing, optionally filtered by role or search"""
        queryset = User.objects.all()

        if filters:
            if filters.get("user_type"):
                queryset = queryset.filter(user_type=filters["user_type"])
            if filters.get("search"):
                search = filters["search"]
                queryset = queryset.filter(
                    Q(full_name__icontains=search) | Q(email__icontains=search)
                )

        return queryset.order_by("full_name")


class DoctorSelector:
    """Selector class for doctor-related queries"""

    @staticmethod
    def get_doctor_by_id(doctor_id: uuid) -> Optional[Doctor]:
        try:
            return Doctor.objects.select_related("user").get(id=doctor_id)
        except Doctor.DoesNotExist:
            return None

    @staticmethod
    def get_doctor_by_user(user) -> Optional[Doctor]:
        """Get doctor by user"""
        try:
            return Doctor.objects.select_related("user").get(user=user)
        except Doctor.DoesNotExist:
            return None

    @staticmethod
    def get_all_doctors() -> QuerySet:
        """Get all doctors with user details"""
        return Doctor.objects.select_related("user").order_by("user__full_name")


class PatientSelector:
    """Selector class for patient-related queries"""

    @staticmethod
    def get_patient_by_id(patient_id: uuid) -> Optional[Patient]:
        try:
            return Patient.objects.select_related("user").get(id=patient_id)
        except Patient.DoesNotExist:
            return None

    @staticmethod
    def get_patient_by_user(user) -> Optional[Patient]:
        try:
            return Patient.objects.select_related("user").get(user=user)
        except Patient.DoesNotExist:
            return None

    @staticmethod
    def get_patient_by_user_id(user_id: uuid) -> Optional[Patient]:
        try:
            return Patient.objects.select_related("user").get(user_id=user_id)
        except Patient.DoesNotExist:
            return None

    @staticmethod
    def get_patient_by_email(email: str) -> Optional[Patient]:
        try:
            return Patient.objects.select_related("user").get(
                user__email__iexact=email
            )
        except Patient.DoesNotExist:
            return None


class DoctorPatientSelector:
    """Selector class for doctor/patient follow links"""

    @staticmethod
    def is_linked(doctor_id: uuid, patient_id: uuid) -> bool:
        return DoctorPatient.objects.filter(
            doctor_id=doctor_id, patient_id=patient_id
        ).exists()

    @staticmethod
    def get_linked_patients(doctor_id: uuid, search: str = "") -> QuerySet:
        """Patients followed by a doctor, optionally matching a name/email search"""
        queryset = Patient.objects.filter(doctor_links__doctor_id=doctor_id)

        if search:
            queryset = queryset.filter(
                Q(user__full_name__icontains=search) | Q(user__email__icontains=search)
            )

        return queryset.select_related("user").order_by("user__full_name")

    @staticmethod
    def get_linked_patient(doctor_id: uuid, patient_id: uuid) -> Optional[Patient]:
        try:
            return Patient.objects.select_related("user").get(
                id=patient_id, doctor_links__doctor_id=doctor_id
            )
        except Patient.DoesNotExist:
            return None

    @staticmethod
    def get_linked_patients_count(doctor_id: uuid) -> int:
        return DoctorPatient.objects.filter(doctor_id=doctor_id).count()
