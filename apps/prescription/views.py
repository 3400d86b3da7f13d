import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from apps.account.utils import doctor_profile_required, patient_profile_required
from core.pagination import parse_pagination
from core.permissions import IsDoctor, IsPatient
from core.response import error_response, standardize_response

from .services import PrescriptionServices

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([IsDoctor])
@doctor_profile_required
def upsert_prescription(request, appointment_id, doctor):
    """
    Create or update the prescription of an appointment
    POST /api/doctor/appointments/<id>/prescription/

    Expected payload:
    {
        "diagnosis": "Seasonal flu",
        "medicines": [{"name": "Paracetamol", "dosage": "500mg", "frequency": "3x daily"}],
        "notes": "Plenty of fluids"
    }
    """
    result = PrescriptionServices.upsert_prescription(
        appointment_id, doctor, request.data
    )
    if not result["success"]:
        return error_response(result)

    return standardize_response(
        True,
        result["message"],
        {"prescription": result["prescription"]},
        status_code=status.HTTP_201_CREATED if result["created"] else status.HTTP_200_OK,
    )


@api_view(["GET"])
@permission_classes([IsPatient])
@patient_profile_required
def patient_prescriptions(request, patient):
    """GET /api/patient/prescriptions/?page=&limit="""
    try:
        page, limit = parse_pagination(request.query_params)
    except ValueError:
        return standardize_response(False, "Invalid pagination parameters")

    result = PrescriptionServices.list_patient_prescriptions(patient, page, limit)
    if not result["success"]:
        return error_response(result)
    return standardize_response(
        True, result["message"], {"meta": result["meta"], "data": result["data"]}
    )


@api_view(["GET"])
@permission_classes([IsPatient])
@patient_profile_required
def patient_prescription_detail(request, prescription_id, patient):
    """GET /api/patient/prescriptions/<id>/"""
    result = PrescriptionServices.get_patient_prescription(prescription_id, patient)
    if not result["success"]:
        return error_response(result)
    return standardize_response(
        True, result["message"], {"prescription": result["prescription"]}
    )
