import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from apps.account.utils import doctor_profile_required, patient_profile_required
from core.pagination import parse_pagination
from core.permissions import IsDoctor, IsPatient
from core.response import error_response, standardize_response

from .services import AppointmentServices, DashboardServices

logger = logging.getLogger(__name__)


def _list_response(request):
    try:
        page, limit = parse_pagination(request.query_params)
    except ValueError:
        return standardize_response(False, "Invalid pagination parameters")

    result = AppointmentServices.list_appointments(
        request.user.id, request.query_params, page, limit
    )
    if not result["success"]:
        return error_response(result)

    return standardize_response(
        True, result["message"], {"meta": result["meta"], "data": result["data"]}
    )


def _detail_response(request, appointment_id):
    """GET/PUT/DELETE on one appointment, shared by the doctor and patient routes"""
    if request.method == "GET":
        result = AppointmentServices.get_appointment_detail(
            appointment_id, request.user.id
        )
        if not result["success"]:
            return error_response(result)
        return standardize_response(
            True, result["message"], {"appointment": result["appointment"]}
        )

    if request.method == "PUT":
        result = AppointmentServices.update_appointment(
            appointment_id, request.user.id, request.data
        )
        if not result["success"]:
            return error_response(result)
        return standardize_response(
            True, result["message"], {"appointment": result["appointment"]}
        )

    result = AppointmentServices.delete_appointment(appointment_id, request.user.id)
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"])


# Doctor side


@api_view(["GET"])
@permission_classes([IsDoctor])
@doctor_profile_required
def doctor_dashboard(request, doctor):
    """GET /api/doctor/dashboard/"""
    result = DashboardServices.get_doctor_dashboard(doctor)
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"], {"stats": result["stats"]})


@api_view(["GET"])
@permission_classes([IsDoctor])
def doctor_appointments(request):
    """
    GET /api/doctor/appointments/

    Query parameters:
    - status: UPCOMING | COMPLETED | CANCELLED
    - date_from, date_to: ISO date or datetime
    - page, limit
    """
    return _list_response(request)


@api_view(["GET", "PUT", "DELETE"])
@permission_classes([IsDoctor])
def doctor_appointment_detail(request, appointment_id):
    """
    GET    /api/doctor/appointments/<id>/
    PUT    /api/doctor/appointments/<id>/  {"status"} or {"appointment_date"}
    DELETE /api/doctor/appointments/<id>/
    """
    return _detail_response(request, appointment_id)


@api_view(["PUT"])
@permission_classes([IsDoctor])
def doctor_appointment_status(request, appointment_id):
    """
    PUT /api/doctor/appointments/<id>/status/

    Expected payload:
    {
        "status": "COMPLETED"
    }
    """
    result = AppointmentServices.update_appointment_status(
        appointment_id, request.data.get("status"), request.user.id
    )
    if not result["success"]:
        return error_response(result)
    return standardize_response(
        True, result["message"], {"appointment": result["appointment"]}
    )


# Patient side


@api_view(["GET"])
@permission_classes([IsPatient])
@patient_profile_required
def patient_dashboard(request, patient):
    """GET /api/patient/dashboard/"""
    result = DashboardServices.get_patient_dashboard(patient)
    if not result["success"]:
        return error_response(result)
    return standardize_response(
        True,
        result["message"],
        {"stats": result["stats"], "next_appointment": result["next_appointment"]},
    )


@api_view(["GET", "POST"])
@permission_classes([IsPatient])
def patient_appointments(request):
    """
    GET  /api/patient/appointments/  own appointments, same filters as the doctor list
    POST /api/patient/appointments/  book a slot

    Expected payload:
    {
        "doctor_id": "<uuid>",
        "slot_id": "<uuid>",
        "reason": "Follow-up"
    }
    """
    if request.method == "GET":
        return _list_response(request)

    result = AppointmentServices.book_appointment(
        request.user.id,
        request.data.get("doctor_id"),
        request.data.get("slot_id"),
        request.data.get("reason", ""),
    )
    if not result["success"]:
        return error_response(result)

    return standardize_response(
        True,
        result["message"],
        {"appointment": result["appointment"]},
        status_code=status.HTTP_201_CREATED,
    )


@api_view(["GET", "PUT", "DELETE"])
@permission_classes([IsPatient])
def patient_appointment_detail(request, appointment_id):
    """
    GET    /api/patient/appointments/<id>/
    PUT    /api/patient/appointments/<id>/  {"action": "cancel"} or {"appointment_date"}
    DELETE /api/patient/appointments/<id>/
    """
    return _detail_response(request, appointment_id)
