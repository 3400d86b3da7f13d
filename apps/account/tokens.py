from rest_framework_simplejwt.tokens import RefreshToken


class RoleRefreshToken(RefreshToken):
    """Refresh token whose access tokens carry the user's role and profile id"""

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token["role"] = user.user_type
        token["email"] = user.email

        doctor = getattr(user, "doctor_profile", None)
        if doctor is not None:
            token["doctor_id"] = str(doctor.id)

        patient = getattr(user, "patient_profile", None)
        if patient is not None:
            token["patient_id"] = str(patient.id)

        return token


def issue_tokens(user) -> dict:
    refresh = RoleRefreshToken.for_user(user)
    return {"access_token": str(refresh.access_token), "refresh_token": str(refresh)}
