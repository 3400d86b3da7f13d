from typing import Any, Dict

from core.enum import ErrorKind


class ServiceError(Exception):
    """Base class for errors raised by service operations"""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_result(self) -> Dict[str, Any]:
        return {"success": False, "message": self.message, "error": self.kind.value}


class ValidationFailed(ServiceError):
    """Missing or malformed input"""

    kind = ErrorKind.VALIDATION


class NotFound(ServiceError):
    """Referenced entity is absent"""

    kind = ErrorKind.NOT_FOUND


class Forbidden(ServiceError):
    """Role or ownership mismatch"""

    kind = ErrorKind.FORBIDDEN


class Conflict(ServiceError):
    """Request is incompatible with the current state"""

    kind = ErrorKind.CONFLICT


def internal_error(message: str) -> Dict[str, Any]:
    return {"success": False, "message": message, "error": ErrorKind.INTERNAL.value}
