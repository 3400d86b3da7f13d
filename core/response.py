from typing import Any, Dict

from rest_framework import status
from rest_framework.response import Response

from core.enum import ErrorKind

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION.value: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN.value: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFLICT.value: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL.value: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def standardize_response(success: bool, message: str, data=None, status_code=None):
    """
    Standardize API response format
    """
    response_data = {"success": success, "message": message}

    if data is not None:
        if isinstance(data, dict):
            response_data.update(data)
        else:
            response_data["data"] = data

    if status_code is None:
        status_code = status.HTTP_200_OK if success else status.HTTP_400_BAD_REQUEST

    return Response(response_data, status=status_code)


def error_response(result: Dict[str, Any], status_code=None):
    """
    Build a failure response from a service result, choosing the HTTP status
    from the result's error kind unless one is given explicitly
    """
    if status_code is None:
        status_code = ERROR_STATUS_CODES.get(
            result.get("error"), status.HTTP_400_BAD_REQUEST
        )
    return standardize_response(False, result["message"], status_code=status_code)
