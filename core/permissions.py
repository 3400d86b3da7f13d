from rest_framework.permissions import BasePermission

from core.enum import UserType


class RolePermission(BasePermission):
    """Allows access only to authenticated users of one role"""

    role = None
    message = "Access denied: insufficient privileges"

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and getattr(user, "user_type", None) == self.role.value
        )


class IsAdmin(RolePermission):
    role = UserType.ADMIN


class IsDoctor(RolePermission):
    role = UserType.DOCTOR


class IsPatient(RolePermission):
    role = UserType.PATIENT
