import logging
from typing import Any, Dict

from django.core.exceptions import ValidationError
from django.core.validators import URLValidator

from apps.account.selectors import DoctorPatientSelector
from apps.appointment.selectors import AppointmentSelector
from core.exceptions import (
    Forbidden,
    NotFound,
    ServiceError,
    ValidationFailed,
    internal_error,
)
from core.utils import parse_uuid

from .models import Report
from .selectors import ReportSelector

logger = logging.getLogger(__name__)


class ReportServices:
    """Service class for medical reports"""

    @staticmethod
    def format_report(report: Report) -> Dict[str, Any]:
        return {
            "id": report.id,
            "doctor": {
                "id": report.doctor.id,
                "full_name": report.doctor.user.full_name,
            },
            "patient_id": report.patient_id,
            "appointment_id": report.appointment_id,
            "file_url": report.file_url,
            "file_type": report.file_type,
            "description": report.description,
            "uploaded_at": report.uploaded_at,
        }

    @staticmethod
    def upload_report(doctor, report_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Attach a report to one of the doctor's linked patients
        """
        try:
            patient_id = parse_uuid(report_data.get("patient_id"))
            file_url = (report_data.get("file_url") or "").strip()

            if not patient_id or not file_url:
                raise ValidationFailed("patient_id and file_url are required")

            try:
                URLValidator()(file_url)
            except ValidationError:
                raise ValidationFailed("Invalid file_url")

            if not DoctorPatientSelector.is_linked(doctor.id, patient_id):
                raise Forbidden("Patient is not linked to this doctor")

            appointment_id = None
            if report_data.get("appointment_id"):
                appointment = AppointmentSelector.get_appointment_by_id(
                    parse_uuid(report_data["appointment_id"])
                )
                if (
                    not appointment
                    or appointment.doctor_id != doctor.id
                    or appointment.patient_id != patient_id
                ):
                    raise NotFound("Appointment not found")
                appointment_id = appointment.id

            report = Report.objects.create(
                doctor=doctor,
                patient_id=patient_id,
                appointment_id=appointment_id,
                file_url=file_url,
                file_type=(report_data.get("file_type") or "").strip(),
                description=(report_data.get("description") or "").strip(),
            )

            logger.info(f"Report uploaded: ID {report.id}, Patient {patient_id}")
            return {
                "success": True,
                "message": "Report uploaded",
                "report": ReportServices.format_report(report),
            }

        except ServiceError as e:
            logger.warning(f"Report upload rejected: {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Error uploading report: {str(e)}")
            return internal_error("Failed to upload report")

    @staticmethod
    def list_patient_reports(patient) -> Dict[str, Any]:
        try:
            reports = ReportSelector.get_patient_reports(patient.id)
            return {
                "success": True,
                "message": "Reports retrieved successfully",
                "data": [ReportServices.format_report(r) for r in reports],
            }
        except Exception as e:
            logger.error(f"Error listing reports for patient {patient.id}: {str(e)}")
            return internal_error("Failed to retrieve reports")
