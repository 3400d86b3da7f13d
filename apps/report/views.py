import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from apps.account.utils import doctor_profile_required, patient_profile_required
from core.permissions import IsDoctor, IsPatient
from core.response import error_response, standardize_response

from .services import ReportServices

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([IsDoctor])
@doctor_profile_required
def upload_report(request, doctor):
    """
    Attach a report to a linked patient
    POST /api/doctor/reports/

    Expected payload:
    {
        "patient_id": "<uuid>",
        "file_url": "https://files.example.com/cbc.pdf",
        "file_type": "pdf",
        "description": "Complete blood count",
        "appointment_id": "<uuid>"   // optional
    }
    """
    result = ReportServices.upload_report(doctor, request.data)
    if not result["success"]:
        return error_response(result)

    return standardize_response(
        True,
        result["message"],
        {"report": result["report"]},
        status_code=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([IsPatient])
@patient_profile_required
def patient_reports(request, patient):
    """GET /api/patient/reports/"""
    result = ReportServices.list_patient_reports(patient)
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"], {"data": result["data"]})
