"""Date-time literals accepted by the application."""

import re
from datetime import datetime

MESSAGE_INVALID_DATE = "Date is of an invalid format"

DEFAULT_DATE_REGEX = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")
FULL_DATE_REGEX = re.compile(r"\d{4}-\d{1,2}-\d{1,2} \d{4}")
DATE_ONLY_REGEX = re.compile(r"\d{4}-\d{1,2}-\d{1,2}")

DEFAULT_DATE_PATTERN = "%Y-%m-%dT%H:%M"
FULL_DATE_PATTERN = "%Y-%m-%d %H%M"


def to_datetime(date_string: str) -> datetime:
    """
    Convert a date literal to a datetime.

    The following formats are tried in order:
    - yyyy-MM-ddTHH:mm
    - yyyy-M-d HHmm
    - yyyy-M-d (midnight)

    Raises:
        ValueError: If the literal has another shape or is not a real date
    """
    if DEFAULT_DATE_REGEX.fullmatch(date_string):
        return datetime.strptime(date_string, DEFAULT_DATE_PATTERN)
    if FULL_DATE_REGEX.fullmatch(date_string):
        return datetime.strptime(date_string, FULL_DATE_PATTERN)
    if DATE_ONLY_REGEX.fullmatch(date_string):
        return datetime.strptime(f"{date_string} 0000", FULL_DATE_PATTERN)
    raise ValueError(MESSAGE_INVALID_DATE)
