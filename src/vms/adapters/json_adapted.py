"""
Serializable JSON representations of the model.

Each class mirrors one JSON object and converts to the domain type with
``to_model_type``, validating every field on the way.
"""
from datetime import date, datetime
from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel

from vms.domain.exceptions import DuplicateIdError, IllegalValueError
from vms.domain.keyword import KeywordManager
from vms.domain.model import Appointment, Index, Model, Patient, VaxRecordKey
from vms.domain.values import Allergy, BloodType, Dob, GroupName, Name, Phone, Vaccine, VaxName

MISSING_FIELD_MESSAGE_FORMAT = "{}'s {} field is missing!"
INVALID_DATE_MESSAGE_FORMAT = "{}'s {} field is not a valid ISO date: {}"
TIMEZONE_MESSAGE_FORMAT = "{}'s {} field must be a local time without UTC offset: {}"


def _require(owner: str, field_name: str, value):
    if value is None:
        raise IllegalValueError(MISSING_FIELD_MESSAGE_FORMAT.format(owner, field_name))
    return value


def _iso_datetime(owner: str, field_name: str, value: Optional[str]) -> datetime:
    """Parse a naive ISO timestamp; all times of the address book are local."""
    text = _require(owner, field_name, value)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise IllegalValueError(INVALID_DATE_MESSAGE_FORMAT.format(owner, field_name, value)) from e
    if parsed.tzinfo is not None:
        raise IllegalValueError(TIMEZONE_MESSAGE_FORMAT.format(owner, field_name, value))
    return parsed


def _iso_date(owner: str, field_name: str, value: Optional[str]) -> date:
    text = _require(owner, field_name, value)
    try:
        return date.fromisoformat(text)
    except ValueError as e:
        raise IllegalValueError(INVALID_DATE_MESSAGE_FORMAT.format(owner, field_name, value)) from e


class JsonAdaptedVaxRecord(BaseModel):
    vax_name: Optional[str] = None
    time_taken: Optional[str] = None

    @classmethod
    def from_model(cls, record: VaxRecordKey) -> "JsonAdaptedVaxRecord":
        return cls(vax_name=record.vax_type_key, time_taken=record.time_taken.isoformat())

    def to_model_type(self) -> VaxRecordKey:
        vax_name = VaxName(_require("Vaccination record", "vax_name", self.vax_name))
        return VaxRecordKey(vax_name, _iso_datetime("Vaccination record", "time_taken", self.time_taken))


class JsonAdaptedPatient(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    dob: Optional[str] = None
    blood_type: Optional[str] = None
    allergies: List[str] = []
    vaccines: List[str] = []
    vax_records: List[JsonAdaptedVaxRecord] = []

    DUPLICATE_RECORD: ClassVar[str] = "Patient {} contains duplicate vaccination record(s)"

    @classmethod
    def from_model(cls, patient_id: int, patient: Patient) -> "JsonAdaptedPatient":
        return cls(
            id=patient_id,
            name=patient.name.value,
            phone=patient.phone.value,
            dob=patient.dob.value.isoformat(),
            blood_type=patient.blood_type.value,
            allergies=sorted(a.value for a in patient.allergies),
            vaccines=sorted(v.value for v in patient.vaccines),
            vax_records=[
                JsonAdaptedVaxRecord.from_model(r)
                for r in sorted(patient.vax_records, key=lambda r: (r.time_taken, r.vax_type_key))
            ],
        )

    def to_model_type(self) -> Patient:
        """
        Convert to a Patient.

        Raises:
            IllegalValueError: If a field is missing or invalid
            DuplicateIdError: If the same vaccination record appears twice
        """
        patient_id = _require("Patient", "id", self.id)
        if patient_id < 0:
            raise IllegalValueError(f"Patient id must not be negative: {patient_id}")

        records = [r.to_model_type() for r in self.vax_records]
        if len(set(records)) != len(records):
            raise DuplicateIdError(self.DUPLICATE_RECORD.format(patient_id))

        return Patient(
            name=Name(_require("Patient", "name", self.name)),
            phone=Phone(_require("Patient", "phone", self.phone)),
            dob=Dob(_iso_date("Patient", "dob", self.dob)),
            blood_type=BloodType(_require("Patient", "blood_type", self.blood_type)),
            allergies=[Allergy(a) for a in self.allergies],
            vaccines=[Vaccine(v) for v in self.vaccines],
            vax_records=records,
        )


class JsonAdaptedAppointment(BaseModel):
    id: Optional[int] = None
    patient_id: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    vaccine: Optional[str] = None
    is_completed: bool = False

    @classmethod
    def from_model(cls, appointment_id: int, appointment: Appointment) -> "JsonAdaptedAppointment":
        return cls(
            id=appointment_id,
            patient_id=appointment.patient_id.zero_based,
            start_time=appointment.start_time.isoformat(),
            end_time=appointment.end_time.isoformat(),
            vaccine=appointment.vaccine.value,
            is_completed=appointment.is_completed,
        )

    def to_model_type(self) -> Appointment:
        appointment_id = _require("Appointment", "id", self.id)
        if appointment_id < 0:
            raise IllegalValueError(f"Appointment id must not be negative: {appointment_id}")
        patient_id = _require("Appointment", "patient_id", self.patient_id)
        if patient_id < 0:
            raise IllegalValueError(f"Appointment patient id must not be negative: {patient_id}")

        return Appointment(
            patient_id=Index(patient_id),
            start_time=_iso_datetime("Appointment", "start_time", self.start_time),
            end_time=_iso_datetime("Appointment", "end_time", self.end_time),
            vaccine=GroupName(_require("Appointment", "vaccine", self.vaccine)),
            is_completed=self.is_completed,
        )


class JsonSerializableAddressBook(BaseModel):
    """Patients and appointments document."""
    patients: List[JsonAdaptedPatient] = []
    appointments: List[JsonAdaptedAppointment] = []

    DUPLICATE_ID: ClassVar[str] = "Patients list contains duplicate patient id(s)."
    DUPLICATE_APPOINTMENT_ID: ClassVar[str] = "Appointments list contains duplicate appointment id(s)."
    MISSING_PATIENT: ClassVar[str] = "Appointment {} refers to patient {} which does not exist."

    @classmethod
    def from_model(cls, model: Model) -> "JsonSerializableAddressBook":
        return cls(
            patients=[JsonAdaptedPatient.from_model(i, p) for i, p in sorted(model.patients.items())],
            appointments=[JsonAdaptedAppointment.from_model(i, a) for i, a in sorted(model.appointments.items())],
        )

    def to_model_type(self, keywords: Optional[KeywordManager] = None) -> Model:
        """
        Convert the whole document; nothing is returned unless every record is valid.

        Raises:
            IllegalValueError: If any record is invalid or refers to a missing patient
            DuplicateIdError: If two patients or two appointments share an id
        """
        patients: Dict[int, Patient] = {}
        for json_patient in self.patients:
            patient = json_patient.to_model_type()
            if json_patient.id in patients:
                raise DuplicateIdError(self.DUPLICATE_ID)
            patients[json_patient.id] = patient

        appointments: Dict[int, Appointment] = {}
        for json_appointment in self.appointments:
            appointment = json_appointment.to_model_type()
            if json_appointment.id in appointments:
                raise DuplicateIdError(self.DUPLICATE_APPOINTMENT_ID)
            if appointment.patient_id.zero_based not in patients:
                raise IllegalValueError(self.MISSING_PATIENT.format(json_appointment.id, json_appointment.patient_id))
            appointments[json_appointment.id] = appointment

        return Model(patients, appointments, keywords)


class JsonSerializableKeywordManager(BaseModel):
    """Keyword suggestions document."""
    keywords: Dict[str, List[str]] = {}

    @classmethod
    def from_model(cls, manager: KeywordManager) -> "JsonSerializableKeywordManager":
        return cls(keywords=manager.as_dict())

    def to_model_type(self) -> KeywordManager:
        """
        Raises:
            IllegalValueError: If a category or keyword is blank
        """
        return KeywordManager(self.keywords)
