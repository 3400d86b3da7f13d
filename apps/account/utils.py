from functools import wraps

from rest_framework import status

from core.response import standardize_response

from .selectors import DoctorSelector, PatientSelector


def doctor_profile_required(view_func):
    """
    Resolve the requesting user's Doctor profile and pass it to the view
    as the `doctor` keyword argument
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        doctor = DoctorSelector.get_doctor_by_user(request.user)
        if not doctor:
            return standardize_response(
                False, "Doctor profile not found", status_code=status.HTTP_403_FORBIDDEN
            )
        return view_func(request, *args, doctor=doctor, **kwargs)

    return wrapper


def patient_profile_required(view_func):
    """Same as doctor_profile_required, for the Patient profile"""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        patient = PatientSelector.get_patient_by_user(request.user)
        if not patient:
            return standardize_response(
                False, "Patient profile not found", status_code=status.HTTP_403_FORBIDDEN
            )
        return view_func(request, *args, patient=patient, **kwargs)

    return wrapper
