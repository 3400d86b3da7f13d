import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.enum import UserType
from core.pagination import parse_pagination
from core.permissions import IsAdmin, IsDoctor, IsPatient
from core.response import error_response, standardize_response

from .services import DoctorPatientServices, UserServices
from .utils import doctor_profile_required

logger = logging.getLogger(__name__)


@api_view(["POST"])
@permission_classes([AllowAny])
def signup(request):
    """
    User registration endpoint
    POST /api/auth/signup/

    Expected payload:
    {
        "full_name": "John Doe",
        "email": "user@example.com",
        "password": "secret123",
        "role": "PATIENT",
        // optional profile fields for the chosen role
        "specialization": "Cardiology",
        "date_of_birth": "1990-04-12"
    }
    """
    result = UserServices.register_user(request.data)

    if not result["success"]:
        return error_response(result)

    return standardize_response(
        True,
        result["message"],
        {"user": result["user"], "tokens": result["tokens"]},
        status_code=status.HTTP_201_CREATED,
    )


@api_view(["POST"])
@permission_classes([AllowAny])
def login(request):
    """
    User login endpoint
    POST /api/auth/login/
    """
    result = UserServices.authenticate_user(
        request.data.get("email", ""), request.data.get("password", "")
    )

    if not result["success"]:
        return error_response(result)

    return standardize_response(
        True,
        result["message"],
        {
            "user": result["user"],
            "access_token": result["access_token"],
            "refresh_token": result["refresh_token"],
        },
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def logout(request):
    """
    Blacklist the given refresh token, if any
    POST /api/auth/logout/
    """
    refresh_token = request.data.get("refresh_token") or request.data.get("refresh")

    if refresh_token:
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError as e:
            logger.warning(f"Token blacklist error for {request.user.email}: {str(e)}")
            return standardize_response(
                True, "Logout successful (token may already be invalid)"
            )

    logger.info(f"User logged out: {request.user.email}")
    return standardize_response(True, "Logout successful")


@api_view(["GET", "PUT"])
@permission_classes([IsAuthenticated])
def profile(request):
    """
    GET  /api/auth/profile/  own profile
    PUT  /api/auth/profile/  update name, mobile and role profile fields
    """
    if request.method == "GET":
        result = UserServices.get_user_profile(request.user.id)
        if not result["success"]:
            return error_response(result)
        return standardize_response(
            True, result["message"], {"profile": result["profile"]}
        )

    result = UserServices.update_user_profile(request.user.id, request.data)
    if not result["success"]:
        return error_response(result)
    return standardize_response(
        True, result["message"], {"updated_fields": result["updated_fields"]}
    )


# Doctor: patient management


@api_view(["GET", "POST"])
@permission_classes([IsDoctor])
@doctor_profile_required
def doctor_patients(request, doctor):
    """
    GET  /api/doctor/patients/?search=&page=&limit=
    POST /api/doctor/patients/  create a patient account or link an existing one
    """
    if request.method == "POST":
        result = DoctorPatientServices.create_or_link_patient(doctor, request.data)
        if not result["success"]:
            return error_response(result)
        return standardize_response(
            True,
            result["message"],
            {"patient": result["patient"]},
            status_code=(
                status.HTTP_201_CREATED if result["created"] else status.HTTP_200_OK
            ),
        )

    try:
        page, limit = parse_pagination(request.query_params)
    except ValueError:
        return standardize_response(False, "Invalid pagination parameters")

    search = (request.query_params.get("search") or "").strip()
    result = DoctorPatientServices.list_linked_patients(doctor, search, page, limit)
    if not result["success"]:
        return error_response(result)
    return standardize_response(
        True, result["message"], {"meta": result["meta"], "data": result["data"]}
    )


@api_view(["POST"])
@permission_classes([IsDoctor])
@doctor_profile_required
def link_patient(request, doctor):
    """
    Link an existing patient by email
    POST /api/doctor/patients/link/
    """
    result = DoctorPatientServices.link_existing_patient(
        doctor, request.data.get("email", "")
    )
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"], {"patient": result["patient"]})


@api_view(["GET", "PUT", "DELETE"])
@permission_classes([IsDoctor])
@doctor_profile_required
def doctor_patient_detail(request, patient_id, doctor):
    """
    GET    /api/doctor/patients/<id>/  patient with history for this doctor
    PUT    /api/doctor/patients/<id>/  update profile fields
    DELETE /api/doctor/patients/<id>/  unlink
    """
    if request.method == "GET":
        result = DoctorPatientServices.get_linked_patient_detail(doctor, patient_id)
        if not result["success"]:
            return error_response(result)
        return standardize_response(
            True, result["message"], {"patient": result["patient"]}
        )

    if request.method == "PUT":
        result = DoctorPatientServices.update_linked_patient(
            doctor, patient_id, request.data
        )
        if not result["success"]:
            return error_response(result)
        return standardize_response(
            True, result["message"], {"patient": result["patient"]}
        )

    result = DoctorPatientServices.unlink_patient(doctor, patient_id)
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"])


# Patient: doctor directory


@api_view(["GET"])
@permission_classes([IsPatient])
def doctor_directory(request):
    """GET /api/patient/doctors/"""
    result = UserServices.list_doctors()
    if not result["success"]:
        return error_response(result)
    return standardize_response(True, result["message"], {"data": result["data"]})


# Admin


@api_view(["GET"])
@permission_classes([IsAdmin])
def admin_profile(request):
    """GET /api/admin/profile/"""
    return standardize_response(
        True,
        f"Welcome, {request.user.full_name}",
        {
            "user": {
                "id": request.user.id,
                "email": request.user.email,
                "role": request.user.user_type,
            }
        },
    )


@api_view(["GET"])
@permission_classes([IsAdmin])
def admin_users(request):
    """
    Paginated user list
    GET /api/admin/users/?role=&search=&page=&limit=
    """
    try:
        page, limit = parse_pagination(request.query_params)
    except ValueError:
        return standardize_response(False, "Invalid pagination parameters")

    filters = {"search": (request.query_params.get("search") or "").strip()}
    role = request.query_params.get("role")
    if role:
        try:
            filters["user_type"] = UserType.parse(role).value
        except ValueError:
            return standardize_response(False, "Invalid role")

    result = UserServices.list_users(filters, page, limit)
    if not result["success"]:
        return error_response(result)
    return standardize_response(
        True, result["message"], {"meta": result["meta"], "data": result["data"]}
    )


@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """GET /api/health/"""
    return standardize_response(True, "Service is healthy", {"status": "ok"})
