import uuid
from datetime import datetime
from typing import Optional

from django.db.models import QuerySet

from core.enum import SlotStatus

from .models import DoctorSlot


class SlotSelector:
    """Selector class for doctor slot queries"""

    @staticmethod
    def get_slot_by_id(slot_id: uuid) -> Optional[DoctorSlot]:
        try:
            return DoctorSlot.objects.select_related("doctor__user").get(id=slot_id)
        except DoctorSlot.DoesNotExist:
            return None

    @staticmethod
    def get_slot_by_appointment(appointment_id: uuid) -> Optional[DoctorSlot]:
        return DoctorSlot.objects.filter(appointment_id=appointment_id).first()

    @staticmethod
    def get_available_slot_at(doctor_id: uuid, start_time: datetime) -> Optional[DoctorSlot]:
        return DoctorSlot.objects.filter(
            doctor_id=doctor_id,
            start_time=start_time,
            status=SlotStatus.AVAILABLE.value,
        ).first()

    @staticmethod
    def get_doctor_slots(doctor_id: uuid) -> QuerySet:
        """All of a doctor's slots, booked ones with their patient"""
        return (
            DoctorSlot.objects.filter(doctor_id=doctor_id)
            .select_related("appointment__patient__user")
            .order_by("start_time")
        )

    @staticmethod
    def get_upcoming_available_slots(doctor_id: uuid, now: datetime) -> QuerySet:
        """Available slots that have not started yet"""
        return DoctorSlot.objects.filter(
            doctor_id=doctor_id,
            status=SlotStatus.AVAILABLE.value,
            start_time__gte=now,
        ).order_by("start_time")

    @staticmethod
    def get_bookable_slots(doctor_id: uuid) -> QuerySet:
        """Slots a patient may book"""
        return (
            DoctorSlot.objects.filter(
                doctor_id=doctor_id, status=SlotStatus.AVAILABLE.value
            )
            .select_related("doctor__user")
            .order_by("start_time")
        )
