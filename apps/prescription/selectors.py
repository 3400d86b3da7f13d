import uuid
from typing import Optional

from django.db.models import QuerySet

from .models import Prescription


class PrescriptionSelector:
    """Selector class for prescription queries"""

    @staticmethod
    def get_prescription_by_id(prescription_id: uuid) -> Optional[Prescription]:
        try:
            return Prescription.objects.select_related(
                "doctor__user", "patient__user", "appointment"
            ).get(id=prescription_id)
        except Prescription.DoesNotExist:
            return None

    @staticmethod
    def get_patient_prescriptions(patient_id: uuid) -> QuerySet:
        return (
            Prescription.objects.filter(patient_id=patient_id)
            .select_related("doctor__user", "appointment")
            .order_by("-created_at")
        )

    @staticmethod
    def get_doctor_patient_prescriptions(doctor_id: uuid, patient_id: uuid) -> QuerySet:
        return Prescription.objects.filter(
            doctor_id=doctor_id, patient_id=patient_id
        ).order_by("-created_at")
