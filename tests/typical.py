"""Typical records shared by the tests."""
from datetime import date, datetime

from vms.domain.keyword import KeywordManager
from vms.domain.model import Appointment, Index, Model, Patient, VaxRecordKey
from vms.domain.values import Allergy, BloodType, Dob, GroupName, Name, Phone, Vaccine, VaxName

ALICE = Patient(
    name=Name("Alice Pauline"),
    phone=Phone("94351253"),
    dob=Dob(date(2000, 1, 1)),
    blood_type=BloodType("A+"),
    allergies={Allergy("catfur")},
    vaccines={Vaccine("Moderna")},
    vax_records={VaxRecordKey(VaxName("Moderna"), datetime(2023, 3, 1, 10, 0))},
)
BENSON = Patient(
    name=Name("Benson Meier"),
    phone=Phone("98765432"),
    dob=Dob(date(1985, 7, 14)),
    blood_type=BloodType("B-"),
    vaccines={Vaccine("Pfizer")},
)
CARL = Patient(
    name=Name("Carl Kurz"),
    phone=Phone("95352563"),
    dob=Dob(date(1990, 2, 28)),
    blood_type=BloodType("O+"),
    allergies={Allergy("pollen"), Allergy("peanuts")},
)

ALICE_FIRST_DOSE = Appointment(
    patient_id=Index(0),
    start_time=datetime(2023, 3, 1, 10, 0),
    end_time=datetime(2023, 3, 1, 10, 30),
    vaccine=GroupName("Moderna"),
    is_completed=True,
)
BENSON_FIRST_DOSE = Appointment(
    patient_id=Index(1),
    start_time=datetime(2024, 5, 2, 9, 0),
    end_time=datetime(2024, 5, 2, 9, 30),
    vaccine=GroupName("Dose 1 (Pfizer)"),
)
ALICE_BOOSTER = Appointment(
    patient_id=Index(0),
    start_time=datetime(2024, 6, 10, 14, 0),
    end_time=datetime(2024, 6, 10, 14, 30),
    vaccine=GroupName("Moderna Booster"),
)


def typical_keywords() -> KeywordManager:
    return KeywordManager({"vaccine": ["Moderna", "Pfizer"], "allergy": ["catfur"]})


def typical_model() -> Model:
    """The model stored in tests/data/typicalAddressBook.json and typicalKeywords.json."""
    return Model(
        patients={0: ALICE, 1: BENSON, 2: CARL},
        appointments={0: ALICE_FIRST_DOSE, 1: BENSON_FIRST_DOSE, 2: ALICE_BOOSTER},
        keywords=typical_keywords(),
    )

