import logging
import re
import uuid
from typing import Any, Dict, List

from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from django.db import transaction
from django.utils.crypto import get_random_string
from django.utils.dateparse import parse_date

from apps.appointment.selectors import AppointmentSelector
from apps.prescription.selectors import PrescriptionSelector
from apps.report.selectors import ReportSelector
from core.enum import UserType
from core.exceptions import (
    NotFound,
    ServiceError,
    ValidationFailed,
    internal_error,
)
from core.pagination import paginate

from .models import Doctor, DoctorPatient, Patient, User
from .selectors import (
    DoctorPatientSelector,
    DoctorSelector,
    PatientSelector,
    UserSelector,
)
from .tokens import issue_tokens

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
PATIENT_FIELDS = ["date_of_birth", "gender", "blood_group", "medical_notes"]
DOCTOR_FIELDS = ["specialization", "license_number", "experience_years"]


def format_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "mobile_number": user.mobile_number,
        "role": user.user_type,
    }


def format_doctor(doctor: Doctor) -> Dict[str, Any]:
    return {
        "id": doctor.id,
        "user_id": doctor.user_id,
        "full_name": doctor.user.full_name,
        "email": doctor.user.email,
        "specialization": doctor.specialization,
        "license_number": doctor.license_number,
        "experience_years": doctor.experience_years,
    }


def format_patient(patient: Patient) -> Dict[str, Any]:
    return {
        "id": patient.id,
        "user_id": patient.user_id,
        "full_name": patient.user.full_name,
        "email": patient.user.email,
        "mobile_number": patient.user.mobile_number,
        "date_of_birth": patient.date_of_birth,
        "gender": patient.gender,
        "blood_group": patient.blood_group,
        "medical_notes": patient.medical_notes,
    }


def apply_patient_fields(patient: Patient, data: Dict[str, Any]) -> List[str]:
    """
    Copy patient profile fields present in data onto the instance.
    Returns the names of the fields that were set.
    """
    updated = []

    for field in PATIENT_FIELDS:
        if field not in data:
            continue
        value = data[field]

        if field == "date_of_birth":
            if value:
                parsed = parse_date(str(value)[:10])
                if parsed is None:
                    raise ValidationFailed("Invalid date_of_birth. Use YYYY-MM-DD")
                value = parsed
            else:
                value = None
        elif field == "blood_group":
            value = (value or "").strip().upper()
            valid_groups = [choice[0] for choice in Patient.BLOOD_GROUP_CHOICES]
            if value and value not in valid_groups:
                raise ValidationFailed("Invalid blood group")
        else:
            value = (value or "").strip()

        setattr(patient, field, value)
        updated.append(field)

    return updated


def apply_doctor_fields(doctor: Doctor, data: Dict[str, Any]) -> List[str]:
    updated = []

    for field in DOCTOR_FIELDS:
        if field not in data:
            continue
        value = data[field]

        if field == "experience_years":
            if value in (None, ""):
                value = None
            else:
                try:
                    value = int(value)
                except (TypeError, ValueError):
                    raise ValidationFailed("Invalid experience_years")
                if value < 0:
                    raise ValidationFailed("Invalid experience_years")
        else:
            value = (value or "").strip()

        setattr(doctor, field, value)
        updated.append(field)

    return updated


class UserServices:
    """Service class for signup, login and own-profile operations"""

    @staticmethod
    def register_user(user_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a user with its doctor or patient profile and issue tokens.
        The role is parsed here once; PATIENT is the default.
        """
        try:
            with transaction.atomic():
                full_name = (user_data.get("full_name") or "").strip()
                email = (user_data.get("email") or "").strip().lower()
                password = user_data.get("password") or ""

                if not all([full_name, email, password]):
                    raise ValidationFailed("Name, email, and password are required")

                if not re.match(EMAIL_PATTERN, email):
                    raise ValidationFailed("Invalid email format")

                if len(password) < 6:
                    raise ValidationFailed("Password must be at least 6 characters long")

                try:
                    role = UserType.parse(user_data.get("role") or UserType.PATIENT.value)
                except ValueError:
                    raise ValidationFailed("Invalid role")

                if role == UserType.ADMIN:
                    raise ValidationFailed("Admin accounts cannot be created through signup")

                if UserSelector.check_email_exists(email):
                    raise ValidationFailed("User already exists with this email")

                user = User.objects.create_user(
                    username=email,
                    email=email,
                    password=password,
                    full_name=full_name,
                    mobile_number=(user_data.get("mobile_number") or "").strip(),
                    user_type=role.value,
                )

                if role == UserType.DOCTOR:
                    doctor = Doctor(user=user)
                    apply_doctor_fields(doctor, user_data)
                    doctor.save()
                else:
                    patient = Patient(user=user)
                    apply_patient_fields(patient, user_data)
                    patient.save()

            logger.info(f"User registered successfully: {email} as {role.value}")

            user = UserSelector.get_user_by_id(user.id)
            return {
                "success": True,
                "message": "Signup successful",
                "user": format_user(user),
                "tokens": issue_tokens(user),
            }

        except ServiceError as e:
            logger.warning(f"User registration rejected: {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Unexpected error during user registration: {str(e)}")
            return internal_error("Server error during signup")

    @staticmethod
    def authenticate_user(email: str, password: str) -> Dict[str, Any]:
        """
        Authenticate user and generate JWT tokens
        """
        try:
            email = (email or "").strip().lower()

            if not email or not password:
                raise ValidationFailed("Email and password are required")

            user = authenticate(username=email, password=password)
            if not user:
                raise ValidationFailed("Invalid credentials")

            update_last_login(None, user)
            user = UserSelector.get_user_by_id(user.id)
            tokens = issue_tokens(user)

            logger.info(f"User authenticated successfully: {email}")

            return {
                "success": True,
                "message": "Login successful",
                "user": format_user(user),
                **tokens,
            }

        except ServiceError as e:
            logger.warning(f"Login rejected for {email}: {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Authentication error: {str(e)}")
            return internal_error("Authentication failed due to server error")

    @staticmethod
    def get_user_profile(user_id: uuid) -> Dict[str, Any]:
        try:
            user = UserSelector.get_user_by_id(user_id)
            if not user:
                raise NotFound("User not found")

            profile = format_user(user)
            profile["created_at"] = user.created_at
            profile["last_login"] = user.last_login

            doctor = getattr(user, "doctor_profile", None)
            patient = getattr(user, "patient_profile", None)
            if doctor:
                profile["doctor"] = format_doctor(doctor)
            if patient:
                profile["patient"] = format_patient(patient)

            return {
                "success": True,
                "message": "Profile retrieved successfully",
                "profile": profile,
            }

        except ServiceError as e:
            return e.as_result()
        except Exception as e:
            logger.error(f"Get profile error for {user_id}: {str(e)}")
            return internal_error("Failed to retrieve profile")

    @staticmethod
    def update_user_profile(user_id: uuid, update_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update name, mobile number and the role-specific profile fields
        """
        try:
            with transaction.atomic():
                user = UserSelector.get_user_by_id(user_id)
                if not user:
                    raise NotFound("User not found")

                updated_fields = []
                for field in ["full_name", "mobile_number"]:
                    if field in update_data:
                        value = (update_data[field] or "").strip()
                        if field == "full_name" and not value:
                            raise ValidationFailed("Name cannot be empty")
                        setattr(user, field, value)
                        updated_fields.append(field)

                if updated_fields:
                    user.save(update_fields=updated_fields + ["updated_at"])

                doctor = getattr(user, "doctor_profile", None)
                patient = getattr(user, "patient_profile", None)
                if doctor:
                    profile_fields = apply_doctor_fields(doctor, update_data)
                    if profile_fields:
                        doctor.save(update_fields=profile_fields + ["updated_at"])
                    updated_fields.extend(profile_fields)
                elif patient:
                    profile_fields = apply_patient_fields(patient, update_data)
                    if profile_fields:
                        patient.save(update_fields=profile_fields + ["updated_at"])
                    updated_fields.extend(profile_fields)

            logger.info(f"User profile updated: {user.email}, fields: {updated_fields}")

            return {
                "success": True,
                "message": "Profile updated",
                "updated_fields": updated_fields,
            }

        except ServiceError as e:
            logger.warning(f"Profile update rejected for {user_id}: {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Profile update error: {str(e)}")
            return internal_error("Profile update failed due to server error")

    @staticmethod
    def list_users(filters: Dict[str, Any], page: int, limit: int) -> Dict[str, Any]:
        """Admin user listing"""
        try:
            users, meta = paginate(UserSelector.get_users(filters), page, limit)
            return {
                "success": True,
                "message": "Users retrieved successfully",
                "meta": meta,
                "data": [format_user(user) for user in users],
            }
        except Exception as e:
            logger.error(f"Error listing users: {str(e)}")
            return internal_error("Failed to retrieve users")

    @staticmethod
    def list_doctors() -> Dict[str, Any]:
        """Doctor directory shown to patients"""
        try:
            doctors = DoctorSelector.get_all_doctors()
            return {
                "success": True,
                "message": "Doctors retrieved successfully",
                "data": [format_doctor(doctor) for doctor in doctors],
            }
        except Exception as e:
            logger.error(f"Error listing doctors: {str(e)}")
            return internal_error("Failed to retrieve doctors")


class DoctorPatientServices:
    """A doctor's followed patients: create, link, update and unlink"""

    @staticmethod
    def list_linked_patients(doctor, search: str, page: int, limit: int) -> Dict[str, Any]:
        try:
            patients, meta = paginate(
                DoctorPatientSelector.get_linked_patients(doctor.id, search), page, limit
            )
            return {
                "success": True,
                "message": "Patients retrieved successfully",
                "meta": meta,
                "data": [format_patient(p) for p in patients],
            }
        except Exception as e:
            logger.error(f"Error listing patients for doctor {doctor.id}: {str(e)}")
            return internal_error("Failed to retrieve patients")

    @staticmethod
    def get_linked_patient_detail(doctor, patient_id: uuid) -> Dict[str, Any]:
        """A linked patient with this doctor's appointments, prescriptions and reports"""
        try:
            patient = DoctorPatientSelector.get_linked_patient(doctor.id, patient_id)
            if not patient:
                raise NotFound("Patient not found")

            data = format_patient(patient)
            data["appointments"] = [
                {
                    "id": a.id,
                    "appointment_date": a.appointment_date,
                    "status": a.status,
                    "reason": a.reason,
                }
                for a in AppointmentSelector.get_doctor_patient_appointments(
                    doctor.id, patient.id
                )
            ]
            data["prescriptions"] = [
                {
                    "id": p.id,
                    "appointment_id": p.appointment_id,
                    "diagnosis": p.diagnosis,
                    "medicines": p.medicines,
                    "notes": p.notes,
                    "created_at": p.created_at,
                }
                for p in PrescriptionSelector.get_doctor_patient_prescriptions(
                    doctor.id, patient.id
                )
            ]
            data["reports"] = [
                {
                    "id": r.id,
                    "file_url": r.file_url,
                    "file_type": r.file_type,
                    "description": r.description,
                    "uploaded_at": r.uploaded_at,
                }
                for r in ReportSelector.get_doctor_patient_reports(doctor.id, patient.id)
            ]

            return {
                "success": True,
                "message": "Patient retrieved successfully",
                "patient": data,
            }

        except ServiceError as e:
            return e.as_result()
        except Exception as e:
            logger.error(f"Error fetching patient {patient_id}: {str(e)}")
            return internal_error("Failed to retrieve patient")

    @staticmethod
    def create_or_link_patient(doctor, patient_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Link the patient owning the email, or create a new patient account
        with a random password and link it
        """
        try:
            with transaction.atomic():
                email = (patient_data.get("email") or "").strip().lower()
                full_name = (patient_data.get("full_name") or "").strip()

                if not email:
                    raise ValidationFailed("Email is required")

                existing_user = UserSelector.get_user_by_email(email)
                if existing_user:
                    patient = getattr(existing_user, "patient_profile", None)
                    if not patient:
                        raise ValidationFailed(
                            "This email belongs to an account that is not a patient"
                        )
                    created = False
                else:
                    if not full_name:
                        raise ValidationFailed("Name and email are required")
                    if not re.match(EMAIL_PATTERN, email):
                        raise ValidationFailed("Invalid email format")

                    user = User.objects.create_user(
                        username=email,
                        email=email,
                        password=get_random_string(16),
                        full_name=full_name,
                        mobile_number=(patient_data.get("mobile_number") or "").strip(),
                        user_type=UserType.PATIENT.value,
                    )
                    patient = Patient(user=user)
                    apply_patient_fields(patient, patient_data)
                    patient.save()
                    created = True

                DoctorPatient.objects.get_or_create(doctor=doctor, patient=patient)

            logger.info(
                f"Patient {'created and ' if created else ''}linked: {email} -> doctor {doctor.id}"
            )

            patient = PatientSelector.get_patient_by_id(patient.id)
            return {
                "success": True,
                "message": "Patient created and linked" if created else "Patient linked",
                "created": created,
                "patient": format_patient(patient),
            }

        except ServiceError as e:
            logger.warning(f"Patient create/link rejected: {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Error creating or linking patient: {str(e)}")
            return internal_error("Failed to create patient")

    @staticmethod
    def link_existing_patient(doctor, email: str) -> Dict[str, Any]:
        try:
            email = (email or "").strip().lower()
            if not email:
                raise ValidationFailed("Email is required")

            patient = PatientSelector.get_patient_by_email(email)
            if not patient:
                raise NotFound("Patient not found")

            _, created = DoctorPatient.objects.get_or_create(
                doctor=doctor, patient=patient
            )

            logger.info(f"Existing patient linked: {email} -> doctor {doctor.id}")
            return {
                "success": True,
                "message": "Patient linked" if created else "Patient already linked",
                "patient": format_patient(patient),
            }

        except ServiceError as e:
            return e.as_result()
        except Exception as e:
            logger.error(f"Error linking patient {email}: {str(e)}")
            return internal_error("Failed to link patient")

    @staticmethod
    def update_linked_patient(
        doctor, patient_id: uuid, update_data: Dict[str, Any]
    ) -> Dict[str, Any]:
        try:
            with transaction.atomic():
                patient = DoctorPatientSelector.get_linked_patient(doctor.id, patient_id)
                if not patient:
                    raise NotFound("Patient not found")

                user_fields = []
                for field in ["full_name", "mobile_number"]:
                    if field in update_data:
                        value = (update_data[field] or "").strip()
                        if field == "full_name" and not value:
                            raise ValidationFailed("Name cannot be empty")
                        setattr(patient.user, field, value)
                        user_fields.append(field)
                if user_fields:
                    patient.user.save(update_fields=user_fields + ["updated_at"])

                profile_fields = apply_patient_fields(patient, update_data)
                if profile_fields:
                    patient.save(update_fields=profile_fields + ["updated_at"])

            logger.info(f"Linked patient updated: {patient_id} by doctor {doctor.id}")
            return {
                "success": True,
                "message": "Patient updated",
                "patient": format_patient(patient),
            }

        except ServiceError as e:
            return e.as_result()
        except Exception as e:
            logger.error(f"Error updating patient {patient_id}: {str(e)}")
            return internal_error("Failed to update patient")

    @staticmethod
    def unlink_patient(doctor, patient_id: uuid) -> Dict[str, Any]:
        """Remove the follow link; the patient account itself is kept"""
        try:
            deleted, _ = DoctorPatient.objects.filter(
                doctor=doctor, patient_id=patient_id
            ).delete()
            if not deleted:
                raise NotFound("Patient not found")

            logger.info(f"Patient unlinked: {patient_id} from doctor {doctor.id}")
            return {"success": True, "message": "Patient unlinked"}

        except ServiceError as e:
            return e.as_result()
        except Exception as e:
            logger.error(f"Error unlinking patient {patient_id}: {str(e)}")
            return internal_error("Failed to unlink patient")
