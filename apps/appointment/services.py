import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from django.db import transaction
from django.utils import timezone

from apps.account.models import DoctorPatient
from apps.account.selectors import DoctorPatientSelector, PatientSelector, UserSelector
from apps.slot.selectors import SlotSelector
from apps.slot.services import SlotServices
from core.enum import AppointmentStatus, SlotStatus, UserType
from core.exceptions import (
    Conflict,
    Forbidden,
    NotFound,
    ServiceError,
    ValidationFailed,
    internal_error,
)
from core.pagination import paginate
from core.utils import parse_iso_datetime, parse_uuid

from .models import Appointment
from .selectors import AppointmentSelector

logger = logging.getLogger(__name__)


class AppointmentServices:
    """Service class for appointment booking and lifecycle operations"""

    # UPCOMING is left only through these; reschedule re-opens CANCELLED
    VALID_TRANSITIONS = {
        AppointmentStatus.UPCOMING: [
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
        ],
        AppointmentStatus.COMPLETED: [],
        AppointmentStatus.CANCELLED: [],
    }

    @staticmethod
    def format_appointment(appointment: Appointment) -> Dict[str, Any]:
        slot = getattr(appointment, "slot", None)
        prescription = getattr(appointment, "prescription", None)

        return {
            "id": appointment.id,
            "doctor": {
                "id": appointment.doctor.id,
                "full_name": appointment.doctor.user.full_name,
                "specialization": appointment.doctor.specialization,
            },
            "patient": {
                "id": appointment.patient.id,
                "full_name": appointment.patient.user.full_name,
                "email": appointment.patient.user.email,
            },
            "appointment_date": appointment.appointment_date,
            "reason": appointment.reason,
            "status": appointment.status,
            "slot_id": slot.id if slot else None,
            "prescription_id": prescription.id if prescription else None,
            "created_at": appointment.created_at,
            "updated_at": appointment.updated_at,
        }

    @staticmethod
    def _get_owned_appointment(appointment_id: uuid, user_id: uuid):
        """
        Load an appointment and the acting user's role on it.
        Only the appointment's doctor or patient may act on it.
        """
        appointment = AppointmentSelector.get_appointment_by_id(appointment_id)
        if not appointment:
            raise NotFound("Appointment not found")

        user = UserSelector.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found")

        role = user.role
        doctor = getattr(user, "doctor_profile", None)
        patient = getattr(user, "patient_profile", None)

        if role == UserType.DOCTOR and doctor and appointment.doctor_id == doctor.id:
            return appointment, role
        if role == UserType.PATIENT and patient and appointment.patient_id == patient.id:
            return appointment, role

        raise Forbidden("You are not authorized to modify this appointment")

    @classmethod
    def book_appointment(
        cls,
        patient_user_id: uuid,
        doctor_id,
        slot_id,
        reason: str = "",
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Book a slot for the patient. The appointment is created and the slot
        claimed in one transaction; the claim is a conditional update on the
        slot's status, so concurrent bookers cannot both succeed.
        """
        try:
            if not doctor_id or not slot_id:
                raise ValidationFailed("Missing fields")

            slot_uuid = parse_uuid(slot_id)
            doctor_uuid = parse_uuid(doctor_id)
            if not slot_uuid or not doctor_uuid:
                raise ValidationFailed("Invalid doctor_id or slot_id")

            patient = PatientSelector.get_patient_by_user_id(patient_user_id)
            if not patient:
                raise NotFound("Patient profile not found")

            with transaction.atomic():
                SlotServices.expire_slots(now or timezone.now())

                slot = SlotSelector.get_slot_by_id(slot_uuid)
                if not slot:
                    raise NotFound("Slot not found")

                if slot.doctor_id != doctor_uuid:
                    raise ValidationFailed("Slot does not belong to this doctor")

                if slot.status != SlotStatus.AVAILABLE.value:
                    raise Conflict("Slot not available")

                if AppointmentSelector.has_conflicting_appointment(
                    slot.doctor_id, slot.start_time
                ):
                    raise Conflict("Doctor already has an appointment at this time")

                appointment = Appointment.objects.create(
                    doctor_id=slot.doctor_id,
                    patient=patient,
                    appointment_date=slot.start_time,
                    reason=(reason or "").strip(),
                    status=AppointmentStatus.UPCOMING.value,
                )

                # Lost the race: raising rolls the appointment back
                if not SlotServices.claim_slot(slot.id, appointment.id):
                    raise Conflict("Slot not available")

                DoctorPatient.objects.get_or_create(
                    doctor_id=slot.doctor_id, patient=patient
                )

            logger.info(
                f"Appointment booked: ID {appointment.id}, Patient {patient.user.email}, Slot {slot.id}"
            )

            appointment = AppointmentSelector.get_appointment_by_id(appointment.id)
            return {
                "success": True,
                "message": "Appointment booked successfully",
                "appointment": cls.format_appointment(appointment),
            }

        except ServiceError as e:
            logger.warning(f"Appointment booking rejected: {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Unexpected error during appointment booking: {str(e)}")
            return internal_error("Appointment booking failed due to server error")

    @classmethod
    def _apply_status(
        cls, appointment: Appointment, raw_status, role: UserType
    ) -> AppointmentStatus:
        try:
            new_status = AppointmentStatus.parse(raw_status)
        except ValueError:
            raise ValidationFailed("Invalid appointment status")

        if role == UserType.PATIENT and new_status != AppointmentStatus.CANCELLED:
            raise Forbidden("Patients can only cancel their appointments")

        current_status = AppointmentStatus(appointment.status)
        if new_status not in cls.VALID_TRANSITIONS[current_status]:
            raise ValidationFailed(
                f"Cannot change appointment status from {current_status.value} to {new_status.value}"
            )

        if new_status == AppointmentStatus.CANCELLED:
            SlotServices.release_slot(appointment.id)

        appointment.status = new_status.value
        appointment.save(update_fields=["status", "updated_at"])
        return new_status

    @classmethod
    def _apply_reschedule(cls, appointment: Appointment, raw_date) -> datetime:
        try:
            new_date = parse_iso_datetime(raw_date)
        except ValueError:
            new_date = None
        if new_date is None:
            raise ValidationFailed("Invalid appointment_date")

        if appointment.status == AppointmentStatus.COMPLETED.value:
            raise ValidationFailed("Completed appointments cannot be rescheduled")

        if AppointmentSelector.has_conflicting_appointment(
            appointment.doctor_id, new_date, exclude_id=appointment.id
        ):
            raise Conflict("Selected new slot is already booked for this doctor")

        # The old slot no longer matches the appointment time
        if new_date != appointment.appointment_date:
            SlotServices.release_slot(appointment.id)

        # Hold a free slot starting at the new time so it cannot be booked twice
        if not SlotSelector.get_slot_by_appointment(appointment.id):
            slot = SlotSelector.get_available_slot_at(appointment.doctor_id, new_date)
            if slot:
                SlotServices.claim_slot(slot.id, appointment.id)

        appointment.appointment_date = new_date
        appointment.status = AppointmentStatus.UPCOMING.value
        appointment.save(update_fields=["appointment_date", "status", "updated_at"])
        return new_date

    @classmethod
    def update_appointment(
        cls, appointment_id: uuid, user_id: uuid, update_data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Update an appointment from the doctor or patient side.
        Accepts {"status": ...}, {"action": "cancel"} or {"appointment_date": ...}
        """
        try:
            with transaction.atomic():
                appointment, role = cls._get_owned_appointment(appointment_id, user_id)

                raw_status = update_data.get("status")
                if update_data.get("action") == "cancel":
                    raw_status = AppointmentStatus.CANCELLED.value

                if raw_status:
                    old_status = appointment.status
                    new_status = cls._apply_status(appointment, raw_status, role)
                    message = (
                        "Appointment cancelled"
                        if new_status == AppointmentStatus.CANCELLED
                        else f"Appointment status updated to {new_status.value}"
                    )
                    logger.info(
                        f"Appointment status updated: ID {appointment.id}, {old_status} -> {new_status.value}, by {role.value}"
                    )
                elif update_data.get("appointment_date"):
                    old_date = appointment.appointment_date
                    new_date = cls._apply_reschedule(
                        appointment, update_data["appointment_date"]
                    )
                    message = "Appointment rescheduled"
                    logger.info(
                        f"Appointment rescheduled: ID {appointment.id}, {old_date.isoformat()} -> {new_date.isoformat()}"
                    )
                else:
                    raise ValidationFailed("No valid action provided")

            appointment = AppointmentSelector.get_appointment_by_id(appointment.id)
            return {
                "success": True,
                "message": message,
                "appointment": cls.format_appointment(appointment),
            }

        except ServiceError as e:
            logger.warning(f"Appointment update rejected: ID {appointment_id}, {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Error updating appointment {appointment_id}: {str(e)}")
            return internal_error("Failed to update appointment")

    @classmethod
    def update_appointment_status(
        cls, appointment_id: uuid, new_status, user_id: uuid
    ) -> Dict[str, Any]:
        """Status-only update"""
        if not new_status:
            return ValidationFailed("Status is required").as_result()
        return cls.update_appointment(appointment_id, user_id, {"status": new_status})

    @classmethod
    def reschedule_appointment(
        cls, appointment_id: uuid, new_date, user_id: uuid
    ) -> Dict[str, Any]:
        if not new_date:
            return ValidationFailed("appointment_date is required").as_result()
        return cls.update_appointment(
            appointment_id, user_id, {"appointment_date": new_date}
        )

    @classmethod
    def cancel_appointment(cls, appointment_id: uuid, user_id: uuid) -> Dict[str, Any]:
        return cls.update_appointment(appointment_id, user_id, {"action": "cancel"})

    @classmethod
    def delete_appointment(cls, appointment_id: uuid, user_id: uuid) -> Dict[str, Any]:
        """
        Permanently delete an appointment, releasing its slot first.
        Prescriptions and reports keep existing with the link cleared.
        """
        try:
            with transaction.atomic():
                appointment, role = cls._get_owned_appointment(appointment_id, user_id)
                SlotServices.release_slot(appointment.id)
                appointment.delete()

            logger.info(f"Appointment deleted: ID {appointment_id}, by {role.value}")
            return {"success": True, "message": "Appointment deleted"}

        except ServiceError as e:
            logger.warning(f"Appointment deletion rejected: ID {appointment_id}, {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Error deleting appointment {appointment_id}: {str(e)}")
            return internal_error("Failed to delete appointment")

    @staticmethod
    def build_filters(query_params) -> Dict[str, Any]:
        """
        Parse listing filters (status, date_from, date_to).
        Raises ValidationFailed on malformed values.
        """
        filters = {}

        status_filter = (query_params.get("status") or "").strip()
        if status_filter:
            try:
                filters["status"] = AppointmentStatus.parse(status_filter).value
            except ValueError:
                raise ValidationFailed("Invalid appointment status")

        try:
            filters["date_from"] = parse_iso_datetime(query_params.get("date_from"))
            filters["date_to"] = parse_iso_datetime(
                query_params.get("date_to"), end_of_day=True
            )
        except ValueError:
            raise ValidationFailed("Invalid date filter. Use ISO-8601 dates")

        return filters

    @classmethod
    def list_appointments(
        cls, user_id: uuid, query_params, page: int = 1, limit: int = 10
    ) -> Dict[str, Any]:
        """Paginated appointments of the requesting doctor or patient"""
        try:
            filters = cls.build_filters(query_params)

            user = UserSelector.get_user_by_id(user_id)
            if not user:
                raise NotFound("User not found")

            if user.role == UserType.DOCTOR and getattr(user, "doctor_profile", None):
                queryset = AppointmentSelector.get_doctor_appointments(
                    user.doctor_profile.id, filters
                )
            elif user.role == UserType.PATIENT and getattr(
                user, "patient_profile", None
            ):
                queryset = AppointmentSelector.get_patient_appointments(
                    user.patient_profile.id, filters
                )
            else:
                raise NotFound("Profile not found")

            appointments, meta = paginate(queryset, page, limit)
            return {
                "success": True,
                "message": "Appointments retrieved successfully",
                "meta": meta,
                "data": [cls.format_appointment(a) for a in appointments],
            }

        except ServiceError as e:
            return e.as_result()
        except Exception as e:
            logger.error(f"Error listing appointments for user {user_id}: {str(e)}")
            return internal_error("Failed to retrieve appointments")

    @classmethod
    def get_appointment_detail(cls, appointment_id: uuid, user_id: uuid) -> Dict[str, Any]:
        try:
            appointment, _ = cls._get_owned_appointment(appointment_id, user_id)
            data = cls.format_appointment(appointment)

            prescription = getattr(appointment, "prescription", None)
            data["prescription"] = (
                {
                    "id": prescription.id,
                    "diagnosis": prescription.diagnosis,
                    "medicines": prescription.medicines,
                    "notes": prescription.notes,
                    "updated_at": prescription.updated_at,
                }
                if prescription
                else None
            )
            data["patient"].update(
                {
                    "gender": appointment.patient.gender,
                    "blood_group": appointment.patient.blood_group,
                    "date_of_birth": appointment.patient.date_of_birth,
                    "medical_notes": appointment.patient.medical_notes,
                }
            )

            return {
                "success": True,
                "message": "Appointment details retrieved successfully",
                "appointment": data,
            }

        except ServiceError as e:
            return e.as_result()
        except Exception as e:
            logger.error(f"Error fetching appointment {appointment_id}: {str(e)}")
            return internal_error("Failed to retrieve appointment details")


class DashboardServices:
    """Summary counts for the doctor and patient dashboards"""

    @staticmethod
    def get_doctor_dashboard(doctor) -> Dict[str, Any]:
        try:
            now = timezone.now()
            SlotServices.expire_slots(now)

            day_start = timezone.localtime(now).replace(
                hour=0, minute=0, second=0, microsecond=0
            )

            stats = {
                "total_patients": DoctorPatientSelector.get_linked_patients_count(
                    doctor.id
                ),
                "today_appointments": AppointmentSelector.count_doctor_appointments_between(
                    doctor.id, day_start, day_start + timedelta(days=1)
                ),
                "upcoming_appointments": AppointmentSelector.count_upcoming_for_doctor(
                    doctor.id, now
                ),
                "available_slots": SlotSelector.get_upcoming_available_slots(
                    doctor.id, now
                ).count(),
            }

            return {"success": True, "message": "Dashboard retrieved", "stats": stats}

        except Exception as e:
            logger.error(f"Doctor dashboard error for {doctor.id}: {str(e)}")
            return internal_error("Failed to retrieve dashboard data")

    @staticmethod
    def get_patient_dashboard(patient) -> Dict[str, Any]:
        try:
            now = timezone.now()
            counts = AppointmentSelector.count_patient_appointments_by_status(patient.id)
            next_appointment = AppointmentSelector.get_next_patient_appointment(
                patient.id, now
            )

            stats = {
                "upcoming_appointments": counts[AppointmentStatus.UPCOMING.value],
                "completed_appointments": counts[AppointmentStatus.COMPLETED.value],
                "cancelled_appointments": counts[AppointmentStatus.CANCELLED.value],
                "total_prescriptions": patient.prescriptions.count(),
            }

            return {
                "success": True,
                "message": "Dashboard retrieved",
                "stats": stats,
                "next_appointment": (
                    {
                        "id": next_appointment.id,
                        "appointment_date": next_appointment.appointment_date,
                        "doctor_name": next_appointment.doctor.user.full_name,
                    }
                    if next_appointment
                    else None
                ),
            }

        except Exception as e:
            logger.error(f"Patient dashboard error for {patient.id}: {str(e)}")
            return internal_error("Failed to retrieve dashboard data")
