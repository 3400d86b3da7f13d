import uuid

from django.db.models import QuerySet

from .models import Report


class ReportSelector:
    """Selector class for medical report queries"""

    @staticmethod
    def get_patient_reports(patient_id: uuid) -> QuerySet:
        return (
            Report.objects.filter(patient_id=patient_id)
            .select_related("doctor__user")
            .order_by("-uploaded_at")
        )

    @staticmethod
    def get_doctor_patient_reports(doctor_id: uuid, patient_id: uuid) -> QuerySet:
        return Report.objects.filter(
            doctor_id=doctor_id, patient_id=patient_id
        ).order_by("-uploaded_at")
