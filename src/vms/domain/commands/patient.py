"""Commands acting on the patient records of the model."""

import logging
from dataclasses import dataclass, fields, replace
from typing import FrozenSet, Optional

from vms.domain.commands.base import Command, CommandError, CommandMessage
from vms.domain.exceptions import IllegalValueError
from vms.domain.model import Index, Model, Patient
from vms.domain.predicates import (
    BloodTypePredicate,
    NameContainsKeywordsPredicate,
    PatientVaccineContainsKeywordsPredicate,
)
from vms.domain.values import Allergy, BloodType, Dob, Name, Phone, Vaccine

logger = logging.getLogger(__name__)

COMMAND_GROUP = "patient"

MESSAGE_PATIENTS_LISTED_OVERVIEW = "{} patients listed!"


@dataclass(frozen=True)
class AddPatientCommand(Command):
    COMMAND_WORD = "add"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Adds a patient to the patient manager.\n"
        "Parameters: --n NAME --p PHONE --d DATE_OF_BIRTH --b BLOOD_TYPE [--a ALLERGY]... [--v VACCINE]...\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} --n John Doe --p 98765432 --d 2001-03-19 --b B+ --a catfur --v covax"
    )
    MESSAGE_SUCCESS = "New patient added: {}"

    patient: Patient

    def _execute(self, model: Model) -> CommandMessage:
        index = model.add_patient(self.patient)
        logger.info(f"Added patient {index.one_based}")
        return CommandMessage(self.MESSAGE_SUCCESS.format(format_patient(index, self.patient)))


@dataclass(frozen=True)
class EditPatientDescriptor:
    """Fields to replace on a patient; None leaves the field unchanged."""
    name: Optional[Name] = None
    phone: Optional[Phone] = None
    dob: Optional[Dob] = None
    blood_type: Optional[BloodType] = None
    allergies: Optional[FrozenSet[Allergy]] = None
    vaccines: Optional[FrozenSet[Vaccine]] = None

    def is_any_field_edited(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))

    def apply_to(self, patient: Patient) -> Patient:
        changes = {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}
        return replace(patient, **changes)


@dataclass(frozen=True)
class EditPatientCommand(Command):
    COMMAND_WORD = "edit"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Edits the details of the patient identified by the index number. "
        "Existing values will be overwritten by the input values.\n"
        "Parameters: INDEX [--n NAME] [--p PHONE] [--d DATE_OF_BIRTH] [--b BLOOD_TYPE] [--a ALLERGY]... [--v VACCINE]...\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} 1 --p 91234567 --b O+"
    )
    MESSAGE_SUCCESS = "Edited patient: {}"
    MESSAGE_NOT_EDITED = "At least one field to edit must be provided."

    index: Index
    descriptor: EditPatientDescriptor

    def _execute(self, model: Model) -> CommandMessage:
        try:
            patient = model.get_patient(self.index)
        except IllegalValueError as e:
            raise CommandError(str(e)) from e
        edited = self.descriptor.apply_to(patient)
        model.set_patient(self.index, edited)
        return CommandMessage(self.MESSAGE_SUCCESS.format(format_patient(self.index, edited)))


@dataclass(frozen=True)
class DeletePatientCommand(Command):
    COMMAND_WORD = "delete"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Deletes the patient identified by the index number, "
        "together with their appointments.\n"
        "Parameters: INDEX (must be a positive integer)\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} 1"
    )
    MESSAGE_SUCCESS = "Deleted patient: {}"

    index: Index

    def _execute(self, model: Model) -> CommandMessage:
        try:
            patient = model.delete_patient(self.index)
        except IllegalValueError as e:
            raise CommandError(str(e)) from e
        return CommandMessage(self.MESSAGE_SUCCESS.format(format_patient(self.index, patient)))


@dataclass(frozen=True)
class FindPatientCommand(Command):
    """Lists patients matching every given criterion; name keywords match whole words."""
    COMMAND_WORD = "find"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Finds all patients whose names contain any of "
        "the specified keywords (case-insensitive) and displays them as a list with index numbers.\n"
        "Parameters: [KEYWORD]... [--b BLOOD_TYPE] [--v VACCINE_KEYWORD]...\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} alice bob charlie"
    )

    name_predicate: Optional[NameContainsKeywordsPredicate] = None
    blood_type_predicate: Optional[BloodTypePredicate] = None
    vaccine_predicate: Optional[PatientVaccineContainsKeywordsPredicate] = None

    def _execute(self, model: Model) -> CommandMessage:
        filters = [
            p for p in (self.name_predicate, self.blood_type_predicate, self.vaccine_predicate)
            if p is not None
        ]
        model.set_patient_filters(filters)
        return CommandMessage(MESSAGE_PATIENTS_LISTED_OVERVIEW.format(len(model.get_filtered_patient_map())))


@dataclass(frozen=True)
class ListPatientCommand(Command):
    COMMAND_WORD = "list"
    MESSAGE_USAGE = f"{COMMAND_GROUP} {COMMAND_WORD}: Lists all patients."
    MESSAGE_SUCCESS = "Listed all patients"

    def _execute(self, model: Model) -> CommandMessage:
        model.set_patient_filters([])
        return CommandMessage(self.MESSAGE_SUCCESS)


def format_patient(index: Index, patient: Patient) -> str:
    parts = [
        f"#{index.one_based} {patient.name}",
        f"Phone: {patient.phone}",
        f"Date of birth: {patient.dob}",
        f"Blood type: {patient.blood_type}",
    ]
    if patient.allergies:
        parts.append("Allergies: " + ", ".join(sorted(str(a) for a in patient.allergies)))
    if patient.vaccines:
        parts.append("Vaccines: " + ", ".join(sorted(str(v) for v in patient.vaccines)))
    return "; ".join(parts)
