import uuid
from datetime import datetime, time
from typing import Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


def parse_iso_datetime(value, end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime or date string into an aware datetime.
    A bare date resolves to the start of the day, or to its last moment when
    end_of_day is set. Returns None for empty input, raises ValueError for
    malformed input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        value = str(value).strip()
        parsed = parse_datetime(value.replace("Z", "+00:00"))
        if parsed is None:
            parsed_date = parse_date(value)
            if parsed_date is None:
                raise ValueError(f"Invalid datetime: {value}")
            parsed = datetime.combine(
                parsed_date, time.max if end_of_day else time.min
            )

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_default_timezone())
    return parsed


def parse_uuid(value) -> Optional[uuid.UUID]:
    """Return value as a UUID, or None when it is not a valid UUID string"""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None
