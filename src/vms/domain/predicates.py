"""
Composable filters over appointments and patients.

Each predicate is an immutable callable returning True for records it
keeps; predicates compare by value so commands built from them do too.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Tuple

from vms.domain.model import Appointment, Index, Patient
from vms.domain.values import BloodType, GroupName


@dataclass(frozen=True)
class IndexPredicate:
    """Appointments booked for the patient at the given index."""
    index: Index

    def __call__(self, appointment: Appointment) -> bool:
        return appointment.patient_id == self.index


@dataclass(frozen=True)
class StartTimePredicate:
    """Appointments starting at or after the boundary."""
    start_time: datetime

    def __call__(self, appointment: Appointment) -> bool:
        return appointment.start_time >= self.start_time


@dataclass(frozen=True)
class EndTimePredicate:
    """Appointments ending at or before the boundary."""
    end_time: datetime

    def __call__(self, appointment: Appointment) -> bool:
        return appointment.end_time <= self.end_time


@dataclass(frozen=True)
class VaccineContainsKeywordsPredicate:
    """Appointments whose vaccine name contains every keyword of the group name, ignoring case."""
    vaccine: GroupName

    @property
    def keywords(self) -> Tuple[str, ...]:
        return tuple(self.vaccine.value.lower().split())

    def __call__(self, appointment: Appointment) -> bool:
        name = appointment.vaccine.value.lower()
        return all(keyword in name for keyword in self.keywords)


@dataclass(frozen=True)
class CompletionStatusPredicate:
    is_completed: bool

    def __call__(self, appointment: Appointment) -> bool:
        return appointment.is_completed == self.is_completed


@dataclass(frozen=True)
class NameContainsKeywordsPredicate:
    """Patients with a name word equal to any keyword, ignoring case."""
    keywords: Tuple[str, ...]

    def __call__(self, patient: Patient) -> bool:
        words = {word.lower() for word in patient.name.value.split()}
        return any(keyword.lower() in words for keyword in self.keywords)


@dataclass(frozen=True)
class BloodTypePredicate:
    blood_type: BloodType

    def __call__(self, patient: Patient) -> bool:
        return patient.blood_type == self.blood_type


@dataclass(frozen=True)
class PatientVaccineContainsKeywordsPredicate:
    """Patients with an administered vaccine containing any keyword, ignoring case."""
    keywords: Tuple[str, ...]

    def __call__(self, patient: Patient) -> bool:
        names = [vaccine.value.lower() for vaccine in patient.vaccines]
        return any(keyword.lower() in name for keyword in self.keywords for name in names)


def all_of(predicates: Iterable[Callable]) -> Callable:
    """Conjunction of predicates; matches everything when empty."""
    predicates = tuple(predicates)
    return lambda record: all(p(record) for p in predicates)
