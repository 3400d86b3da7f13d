import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from django.db.models import Count, QuerySet

from core.enum import AppointmentStatus

from .models import Appointment


class AppointmentSelector:
    """Selector class for appointment-related queries"""

    @staticmethod
    def get_appointment_by_id(appointment_id: uuid) -> Optional[Appointment]:
        """Get appointment by ID with related data"""
        try:
            return Appointment.objects.select_related(
                "patient__user", "doctor__user"
            ).get(id=appointment_id)
        except Appointment.DoesNotExist:
            return None

    @staticmethod
    def apply_filters(queryset: QuerySet, filters: Dict[str, Any] = None) -> QuerySet:
        """Narrow a queryset by status and appointment date range"""
        if not filters:
            return queryset

        if filters.get("status"):
            queryset = queryset.filter(status=filters["status"])
        if filters.get("date_from"):
            queryset = queryset.filter(appointment_date__gte=filters["date_from"])
        if filters.get("date_to"):
            queryset = queryset.filter(appointment_date__lte=filters["date_to"])

        return queryset

    @staticmethod
    def get_doctor_appointments(doctor_id: uuid, filters: Dict[str, Any] = None) -> QuerySet:
        queryset = Appointment.objects.filter(doctor_id=doctor_id).select_related(
            "patient__user", "doctor__user", "slot"
        )
        return AppointmentSelector.apply_filters(queryset, filters).order_by(
            "appointment_date"
        )

    @staticmethod
    def get_patient_appointments(
        patient_id: uuid, filters: Dict[str, Any] = None
    ) -> QuerySet:
        queryset = Appointment.objects.filter(patient_id=patient_id).select_related(
            "patient__user", "doctor__user", "slot"
        )
        return AppointmentSelector.apply_filters(queryset, filters).order_by(
            "appointment_date"
        )

    @staticmethod
    def get_doctor_patient_appointments(doctor_id: uuid, patient_id: uuid) -> QuerySet:
        return Appointment.objects.filter(
            doctor_id=doctor_id, patient_id=patient_id
        ).order_by("-appointment_date")

    @staticmethod
    def has_conflicting_appointment(
        doctor_id: uuid, appointment_date: datetime, exclude_id: uuid = None
    ) -> bool:
        """Whether the doctor already has an UPCOMING appointment at this instant"""
        queryset = Appointment.objects.filter(
            doctor_id=doctor_id,
            appointment_date=appointment_date,
            status=AppointmentStatus.UPCOMING.value,
        )
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()

    @staticmethod
    def count_doctor_appointments_between(
        doctor_id: uuid, start: datetime, end: datetime
    ) -> int:
        return Appointment.objects.filter(
            doctor_id=doctor_id,
            appointment_date__gte=start,
            appointment_date__lt=end,
        ).count()

    @staticmethod
    def count_upcoming_for_doctor(doctor_id: uuid, now: datetime) -> int:
        return Appointment.objects.filter(
            doctor_id=doctor_id,
            status=AppointmentStatus.UPCOMING.value,
            appointment_date__gte=now,
        ).count()

    @staticmethod
    def count_patient_appointments_by_status(patient_id: uuid) -> Dict[str, int]:
        counts = {status: 0 for status in AppointmentStatus.value_list()}
        rows = (
            Appointment.objects.filter(patient_id=patient_id)
            .values("status")
            .annotate(total=Count("id"))
        )
        for row in rows:
            counts[row["status"]] = row["total"]
        return counts

    @staticmethod
    def get_next_patient_appointment(
        patient_id: uuid, now: datetime
    ) -> Optional[Appointment]:
        return (
            Appointment.objects.filter(
                patient_id=patient_id,
                status=AppointmentStatus.UPCOMING.value,
                appointment_date__gte=now,
            )
            .select_related("doctor__user")
            .order_by("appointment_date")
            .first()
        )
