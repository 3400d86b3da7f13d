import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from apps.account.selectors import DoctorSelector
from apps.account.utils import doctor_profile_required
from core.enum import ErrorKind
from core.permissions import IsDoctor, IsPatient
from core.response import error_response, standardize_response

from .services import SlotServices

logger = logging.getLogger(__name__)


@api_view(["GET", "POST"])
@permission_classes([IsDoctor])
@doctor_profile_required
def doctor_slots(request, doctor):
    """
    GET  /api/doctor/slots/  all own slots with their booking, if any
    POST /api/doctor/slots/  create a slot

    Expected payload:
    {
        "start_time": "2025-01-01T10:00:00Z",
        "end_time": "2025-01-01T10:30:00Z",
        "duration": 30
    }
    """
    if request.method == "POST":
        result = SlotServices.create_slot(
            doctor.id,
            request.data.get("start_time"),
            request.data.get("end_time"),
            request.data.get("duration"),
        )
        if not result["success"]:
            return error_response(result)
        return standardize_response(
            True,
            result["message"],
            {"slot": result["slot"]},
            status_code=status.HTTP_201_CREATED,
        )

    result = SlotServices.get_doctor_slots(doctor.id)
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"], {"slots": result["slots"]})


@api_view(["GET"])
@permission_classes([IsDoctor])
@doctor_profile_required
def doctor_available_slots(request, doctor):
    """GET /api/doctor/slots/available/"""
    result = SlotServices.get_doctor_slots(doctor.id, available_only=True)
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"], {"slots": result["slots"]})


@api_view(["DELETE"])
@permission_classes([IsDoctor])
@doctor_profile_required
def delete_slot(request, slot_id, doctor):
    """DELETE /api/doctor/slots/<id>/"""
    result = SlotServices.delete_slot(slot_id, doctor.id)

    if not result["success"]:
        # A booked slot is reported as a bad request, not a conflict
        if result.get("error") == ErrorKind.CONFLICT.value:
            return error_response(result, status_code=status.HTTP_400_BAD_REQUEST)
        return error_response(result)

    return standardize_response(True, result["message"])


@api_view(["GET"])
@permission_classes([IsPatient])
def bookable_slots(request, doctor_id):
    """
    AVAILABLE slots of a doctor
    GET /api/patient/doctors/<doctor_id>/slots/
    """
    if not DoctorSelector.get_doctor_by_id(doctor_id):
        return standardize_response(
            False, "Doctor not found", status_code=status.HTTP_404_NOT_FOUND
        )

    result = SlotServices.get_bookable_slots(doctor_id)
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"], {"slots": result["slots"]})
