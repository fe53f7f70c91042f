"""
Validated value objects of the vaccination management domain.

Every value object is immutable and checks its input on construction.
"""
import re
from dataclasses import dataclass
from datetime import date, datetime

from vms.domain.exceptions import InvalidFormatError

_NAME_REGEX = re.compile(r"[^\W_](?:[^\W_]| )*")
_PHONE_REGEX = re.compile(r"\d{3,}")

MAX_LABEL_LENGTH = 30


@dataclass(frozen=True)
class Name:
    """Patient name."""
    value: str

    MESSAGE_CONSTRAINTS = "Names should only contain alphanumeric characters and spaces, and it should not be blank"

    def __post_init__(self):
        if not Name.is_valid(self.value):
            raise InvalidFormatError(Name.MESSAGE_CONSTRAINTS)

    @staticmethod
    def is_valid(value) -> bool:
        return isinstance(value, str) and _NAME_REGEX.fullmatch(value) is not None

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Phone:
    """Patient contact number."""
    value: str

    MESSAGE_CONSTRAINTS = "Phone numbers should only contain numbers, and it should be at least 3 digits long"

    def __post_init__(self):
        if not Phone.is_valid(self.value):
            raise InvalidFormatError(Phone.MESSAGE_CONSTRAINTS)

    @staticmethod
    def is_valid(value) -> bool:
        return isinstance(value, str) and _PHONE_REGEX.fullmatch(value) is not None

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Dob:
    """Date of birth, bounded by 1900-01-01 and today."""
    value: date

    MIN_DATE = date(1900, 1, 1)
    MESSAGE_CONSTRAINTS = "Date of birth should be a valid date between 1900-1-1 and today"

    def __post_init__(self):
        if not Dob.is_valid(self.value):
            raise InvalidFormatError(Dob.MESSAGE_CONSTRAINTS)

    @staticmethod
    def is_valid(value) -> bool:
        return (
            isinstance(value, date)
            and not isinstance(value, datetime)
            and Dob.MIN_DATE <= value <= date.today()
        )

    def __str__(self):
        return self.value.isoformat()


@dataclass(frozen=True)
class BloodType:
    value: str

    BLOOD_TYPES = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")
    MESSAGE_CONSTRAINTS = "Blood type should be one of " + ", ".join(BLOOD_TYPES)

    def __post_init__(self):
        if not BloodType.is_valid(self.value):
            raise InvalidFormatError(BloodType.MESSAGE_CONSTRAINTS)

    @staticmethod
    def is_valid(value) -> bool:
        return value in BloodType.BLOOD_TYPES

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class _Label:
    """Short free-text label: non-empty, trimmed, single line."""
    value: str

    MESSAGE_CONSTRAINTS = "Value should not be blank"

    def __post_init__(self):
        if not self.is_valid(self.value):
            raise InvalidFormatError(self.MESSAGE_CONSTRAINTS)

    @staticmethod
    def is_valid(value) -> bool:
        return (
            isinstance(value, str)
            and 0 < len(value) <= MAX_LABEL_LENGTH
            and value == value.strip()
            and "\n" not in value
            and "\r" not in value
        )

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Allergy(_Label):
    MESSAGE_CONSTRAINTS = (
        f"Allergies should not be blank and be at most {MAX_LABEL_LENGTH} characters on a single line"
    )


@dataclass(frozen=True)
class Vaccine(_Label):
    MESSAGE_CONSTRAINTS = (
        f"Vaccine names should not be blank and be at most {MAX_LABEL_LENGTH} characters on a single line"
    )


@dataclass(frozen=True)
class GroupName(_Label):
    """Name of a vaccination group an appointment is booked for."""
    MESSAGE_CONSTRAINTS = (
        f"Group names should not be blank and be at most {MAX_LABEL_LENGTH} characters on a single line"
    )


@dataclass(frozen=True)
class VaxName(_Label):
    """Name of a vaccination type as recorded in a patient's history."""
    MESSAGE_CONSTRAINTS = (
        f"Vaccination names should not be blank and be at most {MAX_LABEL_LENGTH} characters on a single line"
    )
