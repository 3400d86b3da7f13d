import logging
import uuid
from typing import Any, Dict

from django.db import transaction

from apps.appointment.selectors import AppointmentSelector
from core.exceptions import (
    Forbidden,
    NotFound,
    ServiceError,
    ValidationFailed,
    internal_error,
)
from core.pagination import paginate

from .models import Prescription
from .selectors import PrescriptionSelector

logger = logging.getLogger(__name__)


class PrescriptionServices:
    """Service class for prescriptions, one per appointment"""

    @staticmethod
    def format_prescription(prescription: Prescription) -> Dict[str, Any]:
        appointment = prescription.appointment
        return {
            "id": prescription.id,
            "doctor": {
                "id": prescription.doctor.id,
                "full_name": prescription.doctor.user.full_name,
                "specialization": prescription.doctor.specialization,
            },
            "patient_id": prescription.patient_id,
            "appointment": (
                {
                    "id": appointment.id,
                    "appointment_date": appointment.appointment_date,
                    "status": appointment.status,
                }
                if appointment
                else None
            ),
            "diagnosis": prescription.diagnosis,
            "medicines": prescription.medicines,
            "notes": prescription.notes,
            "created_at": prescription.created_at,
            "updated_at": prescription.updated_at,
        }

    @staticmethod
    def upsert_prescription(
        appointment_id: uuid, doctor, prescription_data: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Create the appointment's prescription, or update it when one exists.
        Only the appointment's doctor may write it.
        """
        try:
            diagnosis = (prescription_data.get("diagnosis") or "").strip()
            medicines = prescription_data.get("medicines") or []
            notes = (prescription_data.get("notes") or "").strip()

            if not isinstance(medicines, list):
                raise ValidationFailed("Medicines must be a list")

            if not diagnosis and not medicines:
                raise ValidationFailed("Diagnosis or medicines are required")

            with transaction.atomic():
                appointment = AppointmentSelector.get_appointment_by_id(appointment_id)
                if not appointment:
                    raise NotFound("Appointment not found")

                if appointment.doctor_id != doctor.id:
                    raise Forbidden("Not your appointment")

                prescription, created = Prescription.objects.update_or_create(
                    appointment=appointment,
                    defaults={
                        "doctor": doctor,
                        "patient_id": appointment.patient_id,
                        "diagnosis": diagnosis,
                        "medicines": medicines,
                        "notes": notes,
                    },
                )

            logger.info(
                f"Prescription {'created' if created else 'updated'}: ID {prescription.id}, Appointment {appointment_id}"
            )

            prescription = PrescriptionSelector.get_prescription_by_id(prescription.id)
            return {
                "success": True,
                "message": "Prescription created" if created else "Prescription updated",
                "created": created,
                "prescription": PrescriptionServices.format_prescription(prescription),
            }

        except ServiceError as e:
            logger.warning(f"Prescription rejected for appointment {appointment_id}: {e.message}")
            return e.as_result()
        except Exception as e:
            logger.error(f"Error saving prescription for appointment {appointment_id}: {str(e)}")
            return internal_error("Failed to save prescription")

    @staticmethod
    def list_patient_prescriptions(patient, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        try:
            prescriptions, meta = paginate(
                PrescriptionSelector.get_patient_prescriptions(patient.id), page, limit
            )
            return {
                "success": True,
                "message": "Prescriptions retrieved successfully",
                "meta": meta,
                "data": [
                    PrescriptionServices.format_prescription(p) for p in prescriptions
                ],
            }
        except Exception as e:
            logger.error(f"Error listing prescriptions for patient {patient.id}: {str(e)}")
            return internal_error("Failed to retrieve prescriptions")

    @staticmethod
    def get_patient_prescription(prescription_id: uuid, patient) -> Dict[str, Any]:
        try:
            prescription = PrescriptionSelector.get_prescription_by_id(prescription_id)
            if not prescription:
                raise NotFound("Prescription not found")

            if prescription.patient_id != patient.id:
                raise Forbidden("Not your prescription")

            return {
                "success": True,
                "message": "Prescription retrieved successfully",
                "prescription": PrescriptionServices.format_prescription(prescription),
            }

        except ServiceError as e:
            return e.as_result()
        except Exception as e:
            logger.error(f"Error fetching prescription {prescription_id}: {str(e)}")
            return internal_error("Failed to retrieve prescription")
