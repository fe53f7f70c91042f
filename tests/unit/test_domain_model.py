"""Unit tests for the in-memory domain model"""
from datetime import datetime

import pytest

from tests.typical import ALICE, ALICE_BOOSTER, BENSON, BENSON_FIRST_DOSE, CARL
from vms.domain.events import PatientDeleted
from vms.domain.exceptions import IllegalValueError
from vms.domain.model import Appointment, Index, Model, VaxRecordKey
from vms.domain.values import GroupName, Vaccine, VaxName

SAMPLE_NAME = VaxName("UNCHI")
SAMPLE_TIME = datetime.now()
SAMPLE_RECORD = VaxRecordKey(SAMPLE_NAME, SAMPLE_TIME)


class TestVaxRecordKey:

    def test_constructor_rejects_missing_fields(self):
        """Test both fields are required"""
        with pytest.raises(TypeError):
            VaxRecordKey(None, datetime.now())
        with pytest.raises(TypeError):
            VaxRecordKey(SAMPLE_NAME, None)

    def test_vax_type_key(self):
        """Test the type key is the vaccination name"""
        assert SAMPLE_RECORD.vax_type_key == str(SAMPLE_NAME)

    def test_time_taken(self):
        """Test the time taken is kept as given"""
        assert SAMPLE_RECORD.time_taken == SAMPLE_TIME

    def test_equality(self):
        """Test records are equal only when name and time match"""
        assert SAMPLE_RECORD == SAMPLE_RECORD
        assert SAMPLE_RECORD == VaxRecordKey(SAMPLE_NAME, SAMPLE_TIME)
        assert SAMPLE_RECORD != VaxRecordKey(SAMPLE_NAME, datetime.min)
        assert SAMPLE_RECORD != VaxRecordKey(VaxName("BANANA"), SAMPLE_TIME)
        assert SAMPLE_RECORD != 445

    def test_hashing(self):
        """Test equal records collide in a set and different ones do not"""
        records = {SAMPLE_RECORD}

        assert VaxRecordKey(SAMPLE_NAME, SAMPLE_TIME) in records
        assert VaxRecordKey(VaxName("BANANA"), SAMPLE_TIME) not in records
        assert VaxRecordKey(SAMPLE_NAME, datetime.min) not in records


class TestIndex:

    def test_one_based_conversion(self):
        """Test conversion between one-based and zero-based positions"""
        index = Index.from_one_based(1)
        assert index.zero_based == 0
        assert index.one_based == 1
        assert index == Index.from_zero_based(0)

    def test_negative_index_is_rejected(self):
        """Test an index below zero cannot be built"""
        with pytest.raises(ValueError):
            Index.from_one_based(0)


def test_appointment_start_must_not_be_after_end():
    """Test an appointment ending before it starts is illegal"""
    with pytest.raises(IllegalValueError, match="start time"):
        Appointment(
            patient_id=Index(0),
            start_time=datetime(2024, 1, 1, 10, 0),
            end_time=datetime(2024, 1, 1, 9, 0),
            vaccine=GroupName("Pfizer"),
        )


def test_appointment_may_start_and_end_at_the_same_time():
    """Test a zero-length appointment is allowed and can be completed"""
    moment = datetime(2024, 1, 1, 10, 0)
    appointment = Appointment(Index(0), moment, moment, GroupName("Pfizer"))
    assert not appointment.is_completed
    assert appointment.mark_completed().is_completed


def test_patient_with_vax_record_adds_history_and_vaccine():
    """Test adding a vaccination record also adds the vaccine, leaving the original untouched"""
    record = VaxRecordKey(VaxName("Sinovac"), datetime(2024, 2, 2, 8, 0))

    updated = CARL.with_vax_record(record)

    assert record in updated.vax_records
    assert Vaccine("Sinovac") in updated.vaccines
    assert CARL.vax_records == frozenset()


def test_patient_rejects_duplicate_vax_record():
    """Test the same vaccination cannot be recorded twice"""
    [record] = ALICE.vax_records
    with pytest.raises(IllegalValueError):
        ALICE.with_vax_record(record)


class TestModel:

    def test_add_patient_uses_next_free_id(self, model):
        """Test a new patient gets the highest id plus one"""
        index = model.add_patient(BENSON)
        assert index == Index(3)
        assert model.get_patient(index) == BENSON

    def test_first_patient_gets_id_zero(self):
        """Test ids start at zero"""
        assert Model().add_patient(ALICE) == Index(0)

    def test_get_missing_patient(self, model):
        """Test looking up an unknown patient names the one-based index"""
        with pytest.raises(IllegalValueError, match="No patient with index 10"):
            model.get_patient(Index(9))

    def test_delete_patient_raises_event(self, model):
        """Test deleting a patient raises an event naming the removed appointments"""
        deleted = model.delete_patient(Index(1))

        assert deleted == BENSON
        assert not model.has_patient(Index(1))
        assert model.events == [PatientDeleted(patient_id=1, appointment_ids=(1,))]

    def test_delete_patient_removes_their_appointments(self, model):
        """Test no appointment is left referring to a deleted patient"""
        model.delete_patient(Index(0))

        assert model.appointments == {1: BENSON_FIRST_DOSE}
        assert model.events == [PatientDeleted(patient_id=0, appointment_ids=(0, 2))]

    def test_delete_patient_without_appointments(self, model):
        """Test deleting a patient without appointments keeps every appointment"""
        model.delete_patient(Index(2))

        assert len(model.appointments) == 3
        assert model.events == [PatientDeleted(patient_id=2)]

    def test_appointment_must_refer_to_existing_patient(self, model):
        """Test appointments for unknown patients are refused on add and on replace"""
        orphan = Appointment(Index(7), BENSON_FIRST_DOSE.start_time, BENSON_FIRST_DOSE.end_time, GroupName("Pfizer"))

        with pytest.raises(IllegalValueError):
            model.add_appointment(orphan)
        with pytest.raises(IllegalValueError):
            model.set_appointment(Index(1), orphan)
        assert model.get_appointment(Index(1)) == BENSON_FIRST_DOSE

    def test_filters_are_combined(self, model):
        """Test every appointment filter must match and an empty list shows everything"""
        model.set_appointment_filters([
            lambda a: a.patient_id == Index(0),
            lambda a: not a.is_completed,
        ])
        assert model.get_filtered_appointment_map() == {2: ALICE_BOOSTER}

        model.set_appointment_filters([])
        assert len(model.get_filtered_appointment_map()) == 3

    def test_filtered_view_follows_mutations(self, model):
        """Test the filtered view includes records added after the filter was set"""
        model.set_patient_filters([lambda p: p.blood_type.value.startswith("A")])
        assert list(model.get_filtered_patient_map()) == [0]

        model.add_patient(ALICE)
        assert list(model.get_filtered_patient_map()) == [0, 3]

    def test_equality_ignores_filters_and_events(self, model):
        """Test models compare by their records only"""
        other = Model(dict(model.patients), dict(model.appointments), model.keywords)
        model.set_patient_filters([lambda p: False])
        model.events.append(PatientDeleted(patient_id=0))

        assert model == other

    def test_reset_data_restores_records(self, model):
        """Test resetting copies records and keywords and drops pending events"""
        snapshot = Model(dict(model.patients), dict(model.appointments))
        model.delete_patient(Index(0))
        model.keywords.add("vaccine", "Novavax")

        model.reset_data(snapshot)

        assert model.patients == snapshot.patients
        assert model.appointments == snapshot.appointments
        assert model.keywords.get("vaccine") == frozenset()
        assert model.events == []
