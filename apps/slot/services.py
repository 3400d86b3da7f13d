import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from django.db import transaction
from django.utils import timezone

from core.enum import SlotStatus
from core.exceptions import (
    Conflict,
    Forbidden,
    NotFound,
    ServiceError,
    ValidationFailed,
    internal_error,
)
from core.utils import parse_iso_datetime

from .models import DoctorSlot
from .selectors import SlotSelector

logger = logging.getLogger(__name__)


class SlotServices:
    """
    Lifecycle of doctor slots: AVAILABLE -> BOOKED -> AVAILABLE on release,
    AVAILABLE -> EXPIRED once the slot has ended. A slot is BOOKED exactly
    when it references an appointment.
    """

    @staticmethod
    def format_slot(slot: DoctorSlot, include_appointment: bool = False) -> Dict[str, Any]:
        data = {
            "id": slot.id,
            "doctor_id": slot.doctor_id,
            "start_time": slot.start_time,
            "end_time": slot.end_time,
            "duration": slot.duration,
            "status": slot.status,
            "appointment_id": slot.appointment_id,
        }

        if include_appointment:
            appointment = slot.appointment
            data["appointment"] = (
                {
                    "id": appointment.id,
                    "status": appointment.status,
                    "reason": appointment.reason,
                    "patient": {
                        "id": appointment.patient.id,
                        "full_name": appointment.patient.user.full_name,
                        "email": appointment.patient.user.email,
                    },
                }
                if appointment
                else None
            )

        return data

    @staticmethod
    def create_slot(
        doctor_id: uuid,
        start_time,
        end_time,
        duration,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Create an AVAILABLE slot after validating its interval
        """
        try:
            if not all([start_time, end_time, duration]):
                raise ValidationFailed("Missing fields")

            try:
                start = parse_iso_datetime(start_time)
                end = parse_iso_datetime(end_time)
            except ValueError:
                raise ValidationFailed("Invalid start_time or end_time format")

            try:
                duration = int(duration)
            except (TypeError, ValueError):
                raise ValidationFailed("Duration must be a number of minutes")

            if duration <= 0:
                raise ValidationFailed("Duration must be a positive number of minutes")

            if end <= start:
                raise ValidationFailed("End time must be after start time")

            now = now or timezone.now()
            if end <= now:
                raise ValidationFailed("Slot must end in the future")

            slot = DoctorSlot.objects.create(
                doctor_id=doctor_id,
                start_time=start,
                end_time=end,
                duration=duration,
                status=SlotStatus.AVAILABLE.value,
            )

            logger.info(
                f"Slot created: ID {slot.id}, Doctor {doctor_id}, {start.isoformat()} - {end.isoformat()}"
            )

            return {
                "success": True,
                "message": "Slot created",
                "slot": SlotServices.format_slot(slot),
            }

        except ServiceError as e:
            logger.warning(f"Slot creation rejected: {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Unexpected error creating slot: {str(e)}")
            return internal_error("Failed to create slot")

    @staticmethod
    def expire_slots(now: datetime) -> int:
        """
        Mark every AVAILABLE slot that ended before `now` as EXPIRED.
        Only ever narrows the AVAILABLE set, so repeated sweeps are harmless.
        """
        expired = DoctorSlot.objects.filter(
            status=SlotStatus.AVAILABLE.value, end_time__lt=now
        ).update(status=SlotStatus.EXPIRED.value, updated_at=now)

        if expired:
            logger.info(f"Expired {expired} slot(s) ended before {now.isoformat()}")

        return expired

    @staticmethod
    def delete_slot(slot_id: uuid, requesting_doctor_id: uuid) -> Dict[str, Any]:
        """
        Delete a slot owned by the requesting doctor. Booked slots are kept;
        the appointment has to be cancelled first.
        """
        try:
            with transaction.atomic():
                slot = (
                    DoctorSlot.objects.select_for_update().filter(id=slot_id).first()
                )
                if not slot:
                    raise NotFound("Slot not found")

                if slot.doctor_id != requesting_doctor_id:
                    raise Forbidden("Not your slot")

                if slot.status == SlotStatus.BOOKED.value:
                    raise Conflict("Cannot delete a booked slot")

                slot.delete()

            logger.info(f"Slot deleted: ID {slot_id}, Doctor {requesting_doctor_id}")
            return {"success": True, "message": "Slot deleted"}

        except ServiceError as e:
            logger.warning(f"Slot deletion rejected: ID {slot_id}, {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Unexpected error deleting slot {slot_id}: {str(e)}")
            return internal_error("Failed to delete slot")

    @staticmethod
    def claim_slot(slot_id: uuid, appointment_id: uuid) -> bool:
        """
        Atomically move a slot from AVAILABLE to BOOKED for an appointment.
        Returns False when another request claimed it first.
        """
        claimed = DoctorSlot.objects.filter(
            id=slot_id, status=SlotStatus.AVAILABLE.value
        ).update(
            status=SlotStatus.BOOKED.value,
            appointment_id=appointment_id,
            updated_at=timezone.now(),
        )
        return claimed == 1

    @staticmethod
    def release_slot(appointment_id: uuid) -> int:
        """
        Return the slot held by an appointment to AVAILABLE.
        No-op when no slot references the appointment.
        """
        released = DoctorSlot.objects.filter(appointment_id=appointment_id).update(
            appointment=None,
            status=SlotStatus.AVAILABLE.value,
            updated_at=timezone.now(),
        )

        if released:
            logger.info(f"Slot released for appointment {appointment_id}")

        return released

    @staticmethod
    def get_doctor_slots(doctor_id: uuid, available_only: bool = False) -> Dict[str, Any]:
        """Slots shown to the owning doctor, after an expiry sweep"""
        try:
            now = timezone.now()
            SlotServices.expire_slots(now)

            if available_only:
                slots = [
                    SlotServices.format_slot(slot)
                    for slot in SlotSelector.get_upcoming_available_slots(doctor_id, now)
                ]
            else:
                slots = [
                    SlotServices.format_slot(slot, include_appointment=True)
                    for slot in SlotSelector.get_doctor_slots(doctor_id)
                ]

            return {"success": True, "message": "Slots retrieved", "slots": slots}

        except Exception as e:
            logger.error(f"Error fetching slots for doctor {doctor_id}: {str(e)}")
            return internal_error("Failed to fetch slots")

    @staticmethod
    def get_bookable_slots(doctor_id: uuid) -> Dict[str, Any]:
        """AVAILABLE slots of a doctor, as offered to patients"""
        try:
            SlotServices.expire_slots(timezone.now())
            slots = [
                SlotServices.format_slot(slot)
                for slot in SlotSelector.get_bookable_slots(doctor_id)
            ]
            return {"success": True, "message": "Slots retrieved", "slots": slots}

        except Exception as e:
            logger.error(f"Error fetching bookable slots for doctor {doctor_id}: {str(e)}")
            return internal_error("Failed to fetch slots")
