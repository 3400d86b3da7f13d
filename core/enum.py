from enum import Enum


class BaseEnum(Enum):
    """
    Global Enum base class with utility methods:
    - choices(): for Django model field choices
    - value_list(): returns all enum values
    - parse(): resolves a raw string to a member
    """

    def __str__(self):
        # Default human-readable label
        return self.name.capitalize()

    @classmethod
    def choices(cls):
        """
        Returns a list of tuples for Django model fields:
        [(value, label), ...]
        """
        return [(member.value, str(member)) for member in cls]

    @classmethod
    def value_list(cls):
        """
        Returns a list of all enum values:
        [value1, value2, ...]
        """
        return [member.value for member in cls]

    @classmethod
    def parse(cls, raw):
        """
        Case-insensitive lookup by value.
        Example: UserType.parse("doctor") -> UserType.DOCTOR
        Raises ValueError for unknown values.
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise ValueError(f"Invalid {cls.__name__}: {raw!r}")
        return cls(raw.strip().upper())


class UserType(BaseEnum):
    ADMIN = "ADMIN"
    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"


class AppointmentStatus(BaseEnum):
    UPCOMING = "UPCOMING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class SlotStatus(BaseEnum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    EXPIRED = "EXPIRED"


class ErrorKind(BaseEnum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"
