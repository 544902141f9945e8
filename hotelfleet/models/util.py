import re
from datetime import datetime, timezone
from typing import Tuple

_DIGITS = re.compile(r"\d+")


def utcnow() -> datetime:
    """The current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(time: datetime) -> datetime:
    """Treats naive datetimes as UTC."""
    if time.tzinfo is None:
        return time.replace(tzinfo=timezone.utc)
    return time.astimezone(timezone.utc)


def bike_number_key(number: str) -> Tuple[float, str]:
    """
    Sorts bike numbers by their numeric value rather than lexicographically,
    such that "B2" comes before "B10". Numbers without any digits go last.
    """
    match = _DIGITS.search(number)
    return (int(match.group()) if match else float("inf")), number
