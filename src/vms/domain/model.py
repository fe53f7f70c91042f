"""
In-memory domain model of the vaccination management system.

Patients and appointments are immutable records stored in maps keyed by
their zero-based id. The Model owns both maps, the keyword manager and the
active filters of the two list views.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence

from vms.domain.events import PatientDeleted
from vms.domain.exceptions import IllegalValueError
from vms.domain.keyword import KeywordManager
from vms.domain.values import Allergy, BloodType, Dob, GroupName, Name, Phone, Vaccine, VaxName


@dataclass(frozen=True, order=True)
class Index:
    """Zero-based position of a record; users see it one-based."""
    zero_based: int

    def __post_init__(self):
        if self.zero_based < 0:
            raise ValueError(f"Index must not be negative: {self.zero_based}")

    @classmethod
    def from_zero_based(cls, zero_based: int) -> "Index":
        return cls(zero_based)

    @classmethod
    def from_one_based(cls, one_based: int) -> "Index":
        return cls(one_based - 1)

    @property
    def one_based(self) -> int:
        return self.zero_based + 1


@dataclass(frozen=True)
class VaxRecordKey:
    """Identity of a single vaccination event in a patient's history."""
    vax_name: VaxName
    time_taken: datetime

    def __post_init__(self):
        if self.vax_name is None or self.time_taken is None:
            raise TypeError("VaxRecordKey needs both a vaccination name and the time it was taken")

    @property
    def vax_type_key(self) -> str:
        return str(self.vax_name)


@dataclass(frozen=True)
class Patient:
    name: Name
    phone: Phone
    dob: Dob
    blood_type: BloodType
    allergies: FrozenSet[Allergy] = frozenset()
    vaccines: FrozenSet[Vaccine] = frozenset()
    vax_records: FrozenSet[VaxRecordKey] = frozenset()

    def __post_init__(self):
        # accept any iterable but store immutable sets
        object.__setattr__(self, "allergies", frozenset(self.allergies))
        object.__setattr__(self, "vaccines", frozenset(self.vaccines))
        object.__setattr__(self, "vax_records", frozenset(self.vax_records))

    def with_vax_record(self, record: VaxRecordKey) -> "Patient":
        """Return a copy with the record added to its history and vaccines."""
        if record in self.vax_records:
            raise IllegalValueError(
                f"{self.name} already has a {record.vax_type_key} vaccination at {record.time_taken:%Y-%m-%d %H%M}"
            )
        return replace(
            self,
            vaccines=self.vaccines | {Vaccine(record.vax_type_key)},
            vax_records=self.vax_records | {record},
        )


@dataclass(frozen=True)
class Appointment:
    patient_id: Index
    start_time: datetime
    end_time: datetime
    vaccine: GroupName
    is_completed: bool = False

    MESSAGE_TIME_ORDER = "Appointment start time must not be after its end time"

    def __post_init__(self):
        if self.start_time > self.end_time:
            raise IllegalValueError(Appointment.MESSAGE_TIME_ORDER)

    def mark_completed(self) -> "Appointment":
        return replace(self, is_completed=True)


PatientFilter = Callable[[Patient], bool]
AppointmentFilter = Callable[[Appointment], bool]


class Model:
    """The mutable collection of patients, appointments and keywords of a session."""

    def __init__(
        self,
        patients: Optional[Dict[int, Patient]] = None,
        appointments: Optional[Dict[int, Appointment]] = None,
        keywords: Optional[KeywordManager] = None,
    ):
        self.patients: Dict[int, Patient] = dict(patients or {})
        self.appointments: Dict[int, Appointment] = dict(appointments or {})
        self.keywords = keywords if keywords is not None else KeywordManager()
        self.events: List = []
        self._patient_filters: List[PatientFilter] = []
        self._appointment_filters: List[AppointmentFilter] = []

    # ---------- patients ----------

    def has_patient(self, index: Index) -> bool:
        return index.zero_based in self.patients

    def get_patient(self, index: Index) -> Patient:
        try:
            return self.patients[index.zero_based]
        except KeyError:
            raise IllegalValueError(f"No patient with index {index.one_based}") from None

    def add_patient(self, patient: Patient) -> Index:
        patient_id = _next_id(self.patients)
        self.patients[patient_id] = patient
        return Index(patient_id)

    def set_patient(self, index: Index, patient: Patient) -> None:
        self.get_patient(index)
        self.patients[index.zero_based] = patient

    def delete_patient(self, index: Index) -> Patient:
        """Remove a patient together with every appointment booked for them."""
        patient = self.get_patient(index)
        orphaned = tuple(
            appointment_id
            for appointment_id, appointment in sorted(self.appointments.items())
            if appointment.patient_id == index
        )
        for appointment_id in orphaned:
            del self.appointments[appointment_id]
        del self.patients[index.zero_based]
        self.events.append(PatientDeleted(patient_id=index.zero_based, appointment_ids=orphaned))
        return patient

    # ---------- appointments ----------

    def get_appointment(self, index: Index) -> Appointment:
        try:
            return self.appointments[index.zero_based]
        except KeyError:
            raise IllegalValueError(f"No appointment with index {index.one_based}") from None

    def add_appointment(self, appointment: Appointment) -> Index:
        self._check_patient_reference(appointment)
        appointment_id = _next_id(self.appointments)
        self.appointments[appointment_id] = appointment
        return Index(appointment_id)

    def set_appointment(self, index: Index, appointment: Appointment) -> None:
        self.get_appointment(index)
        self._check_patient_reference(appointment)
        self.appointments[index.zero_based] = appointment

    def delete_appointment(self, index: Index) -> Appointment:
        appointment = self.get_appointment(index)
        del self.appointments[index.zero_based]
        return appointment

    def _check_patient_reference(self, appointment: Appointment) -> None:
        if not self.has_patient(appointment.patient_id):
            raise IllegalValueError(f"No patient with index {appointment.patient_id.one_based}")

    # ---------- filtered views ----------

    def set_patient_filters(self, filters: Sequence[PatientFilter]) -> None:
        self._patient_filters = list(filters)

    def set_appointment_filters(self, filters: Sequence[AppointmentFilter]) -> None:
        self._appointment_filters = list(filters)

    def get_filtered_patient_map(self) -> Dict[int, Patient]:
        return {
            patient_id: patient
            for patient_id, patient in sorted(self.patients.items())
            if all(f(patient) for f in self._patient_filters)
        }

    def get_filtered_appointment_map(self) -> Dict[int, Appointment]:
        return {
            appointment_id: appointment
            for appointment_id, appointment in sorted(self.appointments.items())
            if all(f(appointment) for f in self._appointment_filters)
        }

    # ---------- state ----------

    def reset_data(self, other: "Model") -> None:
        """Replace the stored records with those of another model, keeping filters."""
        self.patients = dict(other.patients)
        self.appointments = dict(other.appointments)
        self.keywords = KeywordManager(other.keywords.as_dict())
        self.events.clear()

    def __eq__(self, other):
        if not isinstance(other, Model):
            return NotImplemented
        return (
            self.patients == other.patients
            and self.appointments == other.appointments
            and self.keywords == other.keywords
        )

    def __repr__(self):
        return f"Model(patients={len(self.patients)}, appointments={len(self.appointments)})"


def _next_id(records: Dict[int, object]) -> int:
    return max(records) + 1 if records else 0
