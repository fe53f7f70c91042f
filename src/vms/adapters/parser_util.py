"""Helpers converting raw argument strings into typed domain values."""

import logging
import re
from datetime import datetime
from typing import FrozenSet, Iterable

from vms.domain import dates
from vms.domain.exceptions import IllegalValueError
from vms.domain.model import Index
from vms.domain.values import Allergy, BloodType, Dob, GroupName, Name, Phone, Vaccine, VaxName

logger = logging.getLogger(__name__)

MESSAGE_INVALID_INDEX = "Index is not a non-zero unsigned integer."
MESSAGE_INVALID_DATE = dates.MESSAGE_INVALID_DATE
MESSAGE_INVALID_BOOLEAN = "Value should be one of true, false, yes, no"

_NON_ZERO_UNSIGNED_INTEGER = re.compile(r"0*[1-9]\d*")
_TRUE_WORDS = ("true", "yes")
_FALSE_WORDS = ("false", "no")


class ParseError(Exception):
    """Exception raised when user input does not match the expected format."""
    pass


def parse_index(one_based_index: str) -> Index:
    """
    Parse a one-based index. Leading and trailing whitespace is trimmed.

    Raises:
        ParseError: If the index is not a non-zero unsigned integer
    """
    trimmed = one_based_index.strip()
    if not _NON_ZERO_UNSIGNED_INTEGER.fullmatch(trimmed):
        raise ParseError(MESSAGE_INVALID_INDEX)
    return Index.from_one_based(int(trimmed))


def parse_date(date_string: str) -> datetime:
    """
    Parse a date literal into a datetime.

    Supported formats, tried in order:
    - yyyy-MM-ddTHH:mm
    - yyyy-M-d HHmm
    - yyyy-M-d (midnight)

    Raises:
        ParseError: If the literal has another shape or names no real date
    """
    try:
        return dates.to_datetime(date_string.strip())
    except ValueError as e:
        raise ParseError(str(e)) from e


def parse_name(name: str) -> Name:
    return _build(Name, name.strip())


def parse_phone(phone: str) -> Phone:
    return _build(Phone, phone.strip())


def parse_dob(dob: str) -> Dob:
    """Parse a date of birth; any accepted date literal works and its date part is kept."""
    return _build(Dob, parse_date(dob).date())


def parse_blood_type(blood_type: str) -> BloodType:
    return _build(BloodType, blood_type.strip().upper())


def parse_allergy(allergy: str) -> Allergy:
    return _build(Allergy, allergy.strip())


def parse_allergies(allergies: Iterable[str]) -> FrozenSet[Allergy]:
    """Parse every allergy; the first invalid one aborts the whole parse."""
    return frozenset(parse_allergy(allergy) for allergy in allergies)


def parse_vaccine(vaccine: str) -> Vaccine:
    return _build(Vaccine, vaccine.strip())


def parse_vaccines(vaccines: Iterable[str]) -> FrozenSet[Vaccine]:
    """Parse every vaccine; the first invalid one aborts the whole parse."""
    return frozenset(parse_vaccine(vaccine) for vaccine in vaccines)


def parse_group_name(group_name: str) -> GroupName:
    return _build(GroupName, group_name.strip())


def parse_vax_name(vax_name: str) -> VaxName:
    return _build(VaxName, vax_name.strip())


def parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ParseError(MESSAGE_INVALID_BOOLEAN)


def _build(value_type, value):
    try:
        return value_type(value)
    except IllegalValueError as e:
        logger.debug(f"Rejected {value_type.__name__} input {value!r}")
        raise ParseError(str(e)) from e
