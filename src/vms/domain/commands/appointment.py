"""Commands acting on the appointment records of the model."""

import logging
from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Optional, Union

from vms.domain.commands.base import Command, CommandError, CommandMessage
from vms.domain.exceptions import IllegalValueError
from vms.domain.model import Appointment, Index, Model, VaxRecordKey
from vms.domain.predicates import (
    CompletionStatusPredicate,
    EndTimePredicate,
    IndexPredicate,
    StartTimePredicate,
    VaccineContainsKeywordsPredicate,
)
from vms.domain.values import GroupName, VaxName

logger = logging.getLogger(__name__)

COMMAND_GROUP = "appointment"

MESSAGE_APPOINTMENTS_LISTED_OVERVIEW = "{} appointments listed!"


@dataclass(frozen=True)
class AddAppointmentCommand(Command):
    COMMAND_WORD = "add"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Adds an appointment for a patient.\n"
        "Parameters: --p PATIENT_INDEX --s START_TIME --e END_TIME --v VACCINATION\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} --p 1 --s 2024-3-5 0700 --e 2024-3-5 0800 --v Dose 1 (Pfizer)"
    )
    MESSAGE_SUCCESS = "New appointment added: {}"

    appointment: Appointment

    def _execute(self, model: Model) -> CommandMessage:
        try:
            index = model.add_appointment(self.appointment)
        except IllegalValueError as e:
            raise CommandError(str(e)) from e
        logger.info(f"Added appointment {index.one_based} for patient {self.appointment.patient_id.one_based}")
        return CommandMessage(self.MESSAGE_SUCCESS.format(format_appointment(index, self.appointment)))


@dataclass(frozen=True)
class EditAppointmentDescriptor:
    """Fields to replace on an appointment; None leaves the field unchanged."""
    patient_id: Optional[Index] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    vaccine: Optional[GroupName] = None

    def is_any_field_edited(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))

    def apply_to(self, appointment: Appointment) -> Appointment:
        changes = {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}
        return replace(appointment, **changes)


@dataclass(frozen=True)
class EditAppointmentCommand(Command):
    COMMAND_WORD = "edit"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Edits the appointment identified by the index number.\n"
        "Parameters: INDEX [--p PATIENT_INDEX] [--s START_TIME] [--e END_TIME] [--v VACCINATION]\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} 1 --s 2024-3-5 0900 --e 2024-3-5 1000"
    )
    MESSAGE_SUCCESS = "Edited appointment: {}"
    MESSAGE_NOT_EDITED = "At least one field to edit must be provided."
    MESSAGE_COMPLETED = "Appointment {} is already completed and can no longer be edited"

    index: Index
    descriptor: EditAppointmentDescriptor

    def _execute(self, model: Model) -> CommandMessage:
        try:
            appointment = model.get_appointment(self.index)
            if appointment.is_completed:
                raise CommandError(self.MESSAGE_COMPLETED.format(self.index.one_based))
            edited = self.descriptor.apply_to(appointment)
            model.set_appointment(self.index, edited)
        except IllegalValueError as e:
            raise CommandError(str(e)) from e
        return CommandMessage(self.MESSAGE_SUCCESS.format(format_appointment(self.index, edited)))


@dataclass(frozen=True)
class DeleteAppointmentCommand(Command):
    COMMAND_WORD = "delete"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Deletes the appointment identified by the index number.\n"
        "Parameters: INDEX (must be a positive integer)\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} 1"
    )
    MESSAGE_SUCCESS = "Deleted appointment: {}"

    index: Index

    def _execute(self, model: Model) -> CommandMessage:
        try:
            appointment = model.delete_appointment(self.index)
        except IllegalValueError as e:
            raise CommandError(str(e)) from e
        return CommandMessage(self.MESSAGE_SUCCESS.format(format_appointment(self.index, appointment)))


@dataclass(frozen=True)
class MarkAppointmentCommand(Command):
    """Marks an appointment as done and records the vaccination in the patient's history."""
    COMMAND_WORD = "mark"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Marks the appointment identified by the index number as completed.\n"
        "Parameters: INDEX (must be a positive integer)\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} 1"
    )
    MESSAGE_SUCCESS = "Marked appointment as completed: {}"
    MESSAGE_ALREADY_COMPLETED = "Appointment {} has already been marked as completed"

    index: Index

    def _execute(self, model: Model) -> CommandMessage:
        try:
            appointment = model.get_appointment(self.index)
            if appointment.is_completed:
                raise CommandError(self.MESSAGE_ALREADY_COMPLETED.format(self.index.one_based))
            patient = model.get_patient(appointment.patient_id)
            record = VaxRecordKey(VaxName(appointment.vaccine.value), appointment.start_time)
            model.set_patient(appointment.patient_id, patient.with_vax_record(record))
            completed = appointment.mark_completed()
            model.set_appointment(self.index, completed)
        except IllegalValueError as e:
            raise CommandError(str(e)) from e
        return CommandMessage(self.MESSAGE_SUCCESS.format(format_appointment(self.index, completed)))


@dataclass(frozen=True)
class FindAppointmentDescriptor:
    """Search criteria for appointments; every set field must match."""
    patient_id: Optional[Index] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    vaccine: Optional[GroupName] = None
    is_completed: Optional[bool] = None

    def is_any_field_edited(self) -> bool:
        return any(getattr(self, f.name) is not None for f in fields(self))


class FindCommand(Command):
    """
    Filters the appointment list by patient, time range, vaccine and completion status.

    Two find commands are equal when their patient and vaccine criteria are
    equal; the time and completion criteria do not take part in equality.
    """
    COMMAND_WORD = "find"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Finds all appointments matching every given criterion "
        "and displays them as a list with index numbers.\n"
        "Parameters: [--p PATIENT_INDEX] [--s START_TIME] [--e END_TIME] [--v VACCINATION] [--c COMPLETED]\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} --p 1 --v Pfizer"
    )

    def __init__(self, criteria: Union[FindAppointmentDescriptor, IndexPredicate]):
        if isinstance(criteria, IndexPredicate):
            criteria = FindAppointmentDescriptor(patient_id=criteria.index)
        self.index_predicate = _optional(IndexPredicate, criteria.patient_id)
        self.start_time_predicate = _optional(StartTimePredicate, criteria.start_time)
        self.end_time_predicate = _optional(EndTimePredicate, criteria.end_time)
        self.vaccine_predicate = _optional(VaccineContainsKeywordsPredicate, criteria.vaccine)
        self.status_predicate = _optional(CompletionStatusPredicate, criteria.is_completed)

    def _execute(self, model: Model) -> CommandMessage:
        optional_filters = [
            self.index_predicate,
            self.start_time_predicate,
            self.end_time_predicate,
            self.vaccine_predicate,
            self.status_predicate,
        ]
        model.set_appointment_filters([f for f in optional_filters if f is not None])
        return CommandMessage(
            MESSAGE_APPOINTMENTS_LISTED_OVERVIEW.format(len(model.get_filtered_appointment_map()))
        )

    def __eq__(self, other):
        if other is self:
            return True
        if not isinstance(other, FindCommand):
            return NotImplemented
        return (
            self.index_predicate == other.index_predicate
            and self.vaccine_predicate == other.vaccine_predicate
        )

    def __hash__(self):
        return hash((self.index_predicate, self.vaccine_predicate))

    def __repr__(self):
        return (
            f"FindCommand(index={self.index_predicate!r}, start={self.start_time_predicate!r}, "
            f"end={self.end_time_predicate!r}, vaccine={self.vaccine_predicate!r}, "
            f"status={self.status_predicate!r})"
        )


@dataclass(frozen=True)
class ListAppointmentCommand(Command):
    COMMAND_WORD = "list"
    MESSAGE_USAGE = f"{COMMAND_GROUP} {COMMAND_WORD}: Lists all appointments."
    MESSAGE_SUCCESS = "Listed all appointments"

    def _execute(self, model: Model) -> CommandMessage:
        model.set_appointment_filters([])
        return CommandMessage(self.MESSAGE_SUCCESS)


def format_appointment(index: Index, appointment: Appointment) -> str:
    status = "completed" if appointment.is_completed else "pending"
    return (
        f"#{index.one_based} patient {appointment.patient_id.one_based}; "
        f"{appointment.start_time:%Y-%m-%d %H%M} to {appointment.end_time:%Y-%m-%d %H%M}; "
        f"{appointment.vaccine} ({status})"
    )


def _optional(predicate_type, value):
    return predicate_type(value) if value is not None else None
