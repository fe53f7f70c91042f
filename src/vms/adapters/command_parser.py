"""
Parsers turning user input into command objects.

User input has the shape ``GROUP WORD [PREAMBLE] [--x VALUE]...``. The whole
argument string is validated before a command is constructed, so a parse
failure never touches the model.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from vms.adapters import parser_util
from vms.adapters.parser_util import ParseError
from vms.domain.commands.appointment import (
    AddAppointmentCommand,
    DeleteAppointmentCommand,
    EditAppointmentCommand,
    EditAppointmentDescriptor,
    FindAppointmentDescriptor,
    FindCommand,
    ListAppointmentCommand,
    MarkAppointmentCommand,
)
from vms.domain.commands.base import Command
from vms.domain.commands.keyword import AddKeywordCommand, DeleteKeywordCommand, ListKeywordCommand
from vms.domain.commands.patient import (
    AddPatientCommand,
    DeletePatientCommand,
    EditPatientCommand,
    EditPatientDescriptor,
    FindPatientCommand,
    ListPatientCommand,
)
from vms.domain.exceptions import IllegalValueError
from vms.domain.model import Appointment, Patient
from vms.domain.predicates import (
    BloodTypePredicate,
    NameContainsKeywordsPredicate,
    PatientVaccineContainsKeywordsPredicate,
)

logger = logging.getLogger(__name__)

MESSAGE_INVALID_COMMAND_FORMAT = "Invalid command format! \n{}"
MESSAGE_UNKNOWN_COMMAND = "Unknown command"

PREFIX_NAME = "--n"
PREFIX_PHONE = "--p"
PREFIX_DOB = "--d"
PREFIX_BLOOD_TYPE = "--b"
PREFIX_ALLERGY = "--a"
PREFIX_VACCINATION = "--v"
PREFIX_PATIENT = "--p"
PREFIX_START_TIME = "--s"
PREFIX_END_TIME = "--e"
PREFIX_COMPLETED = "--c"
PREFIX_CATEGORY = "--c"
PREFIX_KEYWORD = "--k"

_COMMAND_FORMAT = re.compile(r"(?P<group>\S+)(?:\s+(?P<word>\S+))?(?P<arguments>.*)", re.DOTALL)


@dataclass
class ArgumentMultimap:
    """Values of each prefix in input order, plus the text before the first prefix."""
    preamble: str = ""
    values: Dict[str, List[str]] = field(default_factory=dict)

    def get_value(self, prefix: str) -> Optional[str]:
        """Last value given for the prefix, if any."""
        values = self.values.get(prefix)
        return values[-1] if values else None

    def get_all_values(self, prefix: str) -> List[str]:
        return list(self.values.get(prefix, []))

    def has(self, *prefixes: str) -> bool:
        return all(prefix in self.values for prefix in prefixes)


def tokenize(arguments: str, *prefixes: str) -> ArgumentMultimap:
    """
    Split an argument string on the given prefixes.

    A prefix only counts when it stands alone as a word; unknown prefixes are
    kept as part of the surrounding value.
    """
    multimap = ArgumentMultimap()
    if not prefixes:
        multimap.preamble = arguments.strip()
        return multimap

    alternatives = "|".join(re.escape(p) for p in sorted(set(prefixes), key=len, reverse=True))
    marker = re.compile(rf"(?:(?<=\s)|^)({alternatives})(?=\s|$)")
    matches = list(marker.finditer(arguments))
    multimap.preamble = arguments[:matches[0].start()].strip() if matches else arguments.strip()
    for current, following in zip(matches, matches[1:] + [None]):
        end = following.start() if following else len(arguments)
        value = arguments[current.end():end].strip()
        multimap.values.setdefault(current.group(1), []).append(value)
    return multimap


def _invalid_format(usage: str) -> ParseError:
    return ParseError(MESSAGE_INVALID_COMMAND_FORMAT.format(usage))


def _require(multimap: ArgumentMultimap, usage: str, *prefixes: str) -> None:
    if not multimap.has(*prefixes):
        raise _invalid_format(usage)


def _require_empty_preamble(multimap: ArgumentMultimap, usage: str) -> None:
    if multimap.preamble:
        raise _invalid_format(usage)


def _parse_preamble_index(multimap: ArgumentMultimap, usage: str):
    try:
        return parser_util.parse_index(multimap.preamble)
    except ParseError as e:
        raise ParseError(MESSAGE_INVALID_COMMAND_FORMAT.format(usage)) from e


def _parse_optional_set(multimap: ArgumentMultimap, prefix: str, parse: Callable):
    """A set given with a single empty value clears it; absent means unchanged."""
    values = multimap.get_all_values(prefix)
    if not values:
        return None
    if values == [""]:
        return frozenset()
    return parse(values)


# ---------- patient ----------

def parse_add_patient(arguments: str) -> AddPatientCommand:
    usage = AddPatientCommand.MESSAGE_USAGE
    multimap = tokenize(
        arguments, PREFIX_NAME, PREFIX_PHONE, PREFIX_DOB, PREFIX_BLOOD_TYPE, PREFIX_ALLERGY, PREFIX_VACCINATION
    )
    _require(multimap, usage, PREFIX_NAME, PREFIX_PHONE, PREFIX_DOB, PREFIX_BLOOD_TYPE)
    _require_empty_preamble(multimap, usage)

    patient = Patient(
        name=parser_util.parse_name(multimap.get_value(PREFIX_NAME)),
        phone=parser_util.parse_phone(multimap.get_value(PREFIX_PHONE)),
        dob=parser_util.parse_dob(multimap.get_value(PREFIX_DOB)),
        blood_type=parser_util.parse_blood_type(multimap.get_value(PREFIX_BLOOD_TYPE)),
        allergies=parser_util.parse_allergies(multimap.get_all_values(PREFIX_ALLERGY)),
        vaccines=parser_util.parse_vaccines(multimap.get_all_values(PREFIX_VACCINATION)),
    )
    return AddPatientCommand(patient)


def parse_edit_patient(arguments: str) -> EditPatientCommand:
    usage = EditPatientCommand.MESSAGE_USAGE
    multimap = tokenize(
        arguments, PREFIX_NAME, PREFIX_PHONE, PREFIX_DOB, PREFIX_BLOOD_TYPE, PREFIX_ALLERGY, PREFIX_VACCINATION
    )
    index = _parse_preamble_index(multimap, usage)

    def optional(prefix, parse):
        value = multimap.get_value(prefix)
        return parse(value) if value is not None else None

    descriptor = EditPatientDescriptor(
        name=optional(PREFIX_NAME, parser_util.parse_name),
        phone=optional(PREFIX_PHONE, parser_util.parse_phone),
        dob=optional(PREFIX_DOB, parser_util.parse_dob),
        blood_type=optional(PREFIX_BLOOD_TYPE, parser_util.parse_blood_type),
        allergies=_parse_optional_set(multimap, PREFIX_ALLERGY, parser_util.parse_allergies),
        vaccines=_parse_optional_set(multimap, PREFIX_VACCINATION, parser_util.parse_vaccines),
    )
    if not descriptor.is_any_field_edited():
        raise ParseError(EditPatientCommand.MESSAGE_NOT_EDITED)
    return EditPatientCommand(index, descriptor)


def parse_delete_patient(arguments: str) -> DeletePatientCommand:
    multimap = tokenize(arguments)
    return DeletePatientCommand(_parse_preamble_index(multimap, DeletePatientCommand.MESSAGE_USAGE))


def parse_find_patient(arguments: str) -> FindPatientCommand:
    usage = FindPatientCommand.MESSAGE_USAGE
    multimap = tokenize(arguments, PREFIX_BLOOD_TYPE, PREFIX_VACCINATION)

    name_keywords = tuple(multimap.preamble.split())
    blood_type = multimap.get_value(PREFIX_BLOOD_TYPE)
    vaccine_keywords = tuple(
        keyword for value in multimap.get_all_values(PREFIX_VACCINATION) for keyword in value.split()
    )
    if not (name_keywords or blood_type is not None or vaccine_keywords):
        raise _invalid_format(usage)

    return FindPatientCommand(
        name_predicate=NameContainsKeywordsPredicate(name_keywords) if name_keywords else None,
        blood_type_predicate=(
            BloodTypePredicate(parser_util.parse_blood_type(blood_type)) if blood_type is not None else None
        ),
        vaccine_predicate=PatientVaccineContainsKeywordsPredicate(vaccine_keywords) if vaccine_keywords else None,
    )


def parse_list_patient(arguments: str) -> ListPatientCommand:
    _require_empty_preamble(tokenize(arguments), ListPatientCommand.MESSAGE_USAGE)
    return ListPatientCommand()


# ---------- appointment ----------

def parse_add_appointment(arguments: str) -> AddAppointmentCommand:
    usage = AddAppointmentCommand.MESSAGE_USAGE
    multimap = tokenize(arguments, PREFIX_PATIENT, PREFIX_START_TIME, PREFIX_END_TIME, PREFIX_VACCINATION)
    _require(multimap, usage, PREFIX_PATIENT, PREFIX_START_TIME, PREFIX_END_TIME, PREFIX_VACCINATION)
    _require_empty_preamble(multimap, usage)

    try:
        appointment = Appointment(
            patient_id=parser_util.parse_index(multimap.get_value(PREFIX_PATIENT)),
            start_time=parser_util.parse_date(multimap.get_value(PREFIX_START_TIME)),
            end_time=parser_util.parse_date(multimap.get_value(PREFIX_END_TIME)),
            vaccine=parser_util.parse_group_name(multimap.get_value(PREFIX_VACCINATION)),
        )
    except IllegalValueError as e:
        raise ParseError(str(e)) from e
    return AddAppointmentCommand(appointment)


def parse_edit_appointment(arguments: str) -> EditAppointmentCommand:
    usage = EditAppointmentCommand.MESSAGE_USAGE
    multimap = tokenize(arguments, PREFIX_PATIENT, PREFIX_START_TIME, PREFIX_END_TIME, PREFIX_VACCINATION)
    index = _parse_preamble_index(multimap, usage)

    descriptor = EditAppointmentDescriptor(**_appointment_fields(multimap))
    if not descriptor.is_any_field_edited():
        raise ParseError(EditAppointmentCommand.MESSAGE_NOT_EDITED)
    return EditAppointmentCommand(index, descriptor)


def parse_delete_appointment(arguments: str) -> DeleteAppointmentCommand:
    multimap = tokenize(arguments)
    return DeleteAppointmentCommand(_parse_preamble_index(multimap, DeleteAppointmentCommand.MESSAGE_USAGE))


def parse_mark_appointment(arguments: str) -> MarkAppointmentCommand:
    multimap = tokenize(arguments)
    return MarkAppointmentCommand(_parse_preamble_index(multimap, MarkAppointmentCommand.MESSAGE_USAGE))


def parse_find_appointment(arguments: str) -> FindCommand:
    usage = FindCommand.MESSAGE_USAGE
    multimap = tokenize(
        arguments, PREFIX_PATIENT, PREFIX_START_TIME, PREFIX_END_TIME, PREFIX_VACCINATION, PREFIX_COMPLETED
    )
    _require_empty_preamble(multimap, usage)

    completed = multimap.get_value(PREFIX_COMPLETED)
    descriptor = FindAppointmentDescriptor(
        is_completed=parser_util.parse_bool(completed) if completed is not None else None,
        **_appointment_fields(multimap),
    )
    if not descriptor.is_any_field_edited():
        raise _invalid_format(usage)
    return FindCommand(descriptor)


def parse_list_appointment(arguments: str) -> ListAppointmentCommand:
    _require_empty_preamble(tokenize(arguments), ListAppointmentCommand.MESSAGE_USAGE)
    return ListAppointmentCommand()


def _appointment_fields(multimap: ArgumentMultimap) -> dict:
    parsers = {
        "patient_id": (PREFIX_PATIENT, parser_util.parse_index),
        "start_time": (PREFIX_START_TIME, parser_util.parse_date),
        "end_time": (PREFIX_END_TIME, parser_util.parse_date),
        "vaccine": (PREFIX_VACCINATION, parser_util.parse_group_name),
    }
    fields_ = {}
    for name, (prefix, parse) in parsers.items():
        value = multimap.get_value(prefix)
        fields_[name] = parse(value) if value is not None else None
    return fields_


# ---------- keyword ----------

def _parse_keyword_arguments(arguments: str, usage: str) -> Tuple[str, str]:
    multimap = tokenize(arguments, PREFIX_CATEGORY, PREFIX_KEYWORD)
    _require(multimap, usage, PREFIX_CATEGORY, PREFIX_KEYWORD)
    _require_empty_preamble(multimap, usage)
    category, keyword = multimap.get_value(PREFIX_CATEGORY), multimap.get_value(PREFIX_KEYWORD)
    if not category or not keyword:
        raise _invalid_format(usage)
    return category, keyword


def parse_add_keyword(arguments: str) -> AddKeywordCommand:
    return AddKeywordCommand(*_parse_keyword_arguments(arguments, AddKeywordCommand.MESSAGE_USAGE))


def parse_delete_keyword(arguments: str) -> DeleteKeywordCommand:
    return DeleteKeywordCommand(*_parse_keyword_arguments(arguments, DeleteKeywordCommand.MESSAGE_USAGE))


def parse_list_keyword(arguments: str) -> ListKeywordCommand:
    usage = ListKeywordCommand.MESSAGE_USAGE
    multimap = tokenize(arguments, PREFIX_CATEGORY, PREFIX_KEYWORD)
    _require(multimap, usage, PREFIX_CATEGORY)
    _require_empty_preamble(multimap, usage)
    category = multimap.get_value(PREFIX_CATEGORY)
    if not category:
        raise _invalid_format(usage)
    return ListKeywordCommand(category, multimap.get_value(PREFIX_KEYWORD) or "")


# Command parsers - one parser per (group, command word)
COMMAND_PARSERS = {
    ("patient", AddPatientCommand.COMMAND_WORD): parse_add_patient,
    ("patient", EditPatientCommand.COMMAND_WORD): parse_edit_patient,
    ("patient", DeletePatientCommand.COMMAND_WORD): parse_delete_patient,
    ("patient", FindPatientCommand.COMMAND_WORD): parse_find_patient,
    ("patient", ListPatientCommand.COMMAND_WORD): parse_list_patient,
    ("appointment", AddAppointmentCommand.COMMAND_WORD): parse_add_appointment,
    ("appointment", EditAppointmentCommand.COMMAND_WORD): parse_edit_appointment,
    ("appointment", DeleteAppointmentCommand.COMMAND_WORD): parse_delete_appointment,
    ("appointment", FindCommand.COMMAND_WORD): parse_find_appointment,
    ("appointment", ListAppointmentCommand.COMMAND_WORD): parse_list_appointment,
    ("appointment", MarkAppointmentCommand.COMMAND_WORD): parse_mark_appointment,
    ("keyword", AddKeywordCommand.COMMAND_WORD): parse_add_keyword,
    ("keyword", DeleteKeywordCommand.COMMAND_WORD): parse_delete_keyword,
    ("keyword", ListKeywordCommand.COMMAND_WORD): parse_list_keyword,
}  # type: Dict[Tuple[str, str], Callable[[str], Command]]


def parse_command(user_input: str) -> Command:
    """
    Parse a full line of user input into a command.

    Raises:
        ParseError: If the input is blank, names no known command or has invalid arguments
    """
    match = _COMMAND_FORMAT.fullmatch(user_input.strip())
    if not match or not match.group("word"):
        raise ParseError(MESSAGE_INVALID_COMMAND_FORMAT.format(_help_text()))

    key = (match.group("group").lower(), match.group("word").lower())
    parser = COMMAND_PARSERS.get(key)
    if parser is None:
        raise ParseError(MESSAGE_UNKNOWN_COMMAND)

    logger.debug(f"Parsing {key[0]} {key[1]} command")
    return parser(match.group("arguments"))


def _help_text() -> str:
    return "Commands: " + ", ".join(f"{group} {word}" for group, word in COMMAND_PARSERS)
