"""Unit tests for the appointment and patient filters"""
from datetime import datetime

import pytest

from tests.typical import ALICE, ALICE_BOOSTER, ALICE_FIRST_DOSE, BENSON, BENSON_FIRST_DOSE, CARL
from vms.domain.model import Index
from vms.domain.predicates import (
    BloodTypePredicate,
    CompletionStatusPredicate,
    EndTimePredicate,
    IndexPredicate,
    NameContainsKeywordsPredicate,
    PatientVaccineContainsKeywordsPredicate,
    StartTimePredicate,
    VaccineContainsKeywordsPredicate,
    all_of,
)
from vms.domain.values import BloodType, GroupName


def test_index_predicate_matches_patient_of_appointment():
    """Test appointments are matched by their patient"""
    predicate = IndexPredicate(Index(0))

    assert predicate(ALICE_FIRST_DOSE)
    assert predicate(ALICE_BOOSTER)
    assert not predicate(BENSON_FIRST_DOSE)


def test_start_time_boundary_is_inclusive():
    """Test appointments starting at the given time match"""
    assert StartTimePredicate(datetime(2024, 5, 2, 9, 0))(BENSON_FIRST_DOSE)
    assert StartTimePredicate(datetime(2024, 1, 1))(BENSON_FIRST_DOSE)
    assert not StartTimePredicate(datetime(2024, 5, 2, 9, 1))(BENSON_FIRST_DOSE)


def test_end_time_boundary_is_inclusive():
    """Test appointments ending at the given time match"""
    assert EndTimePredicate(datetime(2024, 5, 2, 9, 30))(BENSON_FIRST_DOSE)
    assert not EndTimePredicate(datetime(2024, 5, 2, 9, 29))(BENSON_FIRST_DOSE)


@pytest.mark.parametrize("group", ["Pfizer", "pfizer", "Dose 1", "(PFIZER)", "dose pfizer"])
def test_vaccine_predicate_matches_when_every_keyword_is_contained(group):
    """Test vaccine keywords match case-insensitively"""
    assert VaccineContainsKeywordsPredicate(GroupName(group))(BENSON_FIRST_DOSE)


def test_vaccine_predicate_needs_every_keyword():
    """Test a vaccine matches only if it contains every keyword"""
    assert not VaccineContainsKeywordsPredicate(GroupName("Pfizer Booster"))(BENSON_FIRST_DOSE)
    assert VaccineContainsKeywordsPredicate(GroupName("moderna booster"))(ALICE_BOOSTER)
    assert not VaccineContainsKeywordsPredicate(GroupName("Moderna Booster"))(ALICE_FIRST_DOSE)


def test_completion_status_predicate():
    """Test appointments are matched by completion status"""
    assert CompletionStatusPredicate(True)(ALICE_FIRST_DOSE)
    assert not CompletionStatusPredicate(True)(ALICE_BOOSTER)
    assert CompletionStatusPredicate(False)(ALICE_BOOSTER)


def test_predicates_compare_by_value():
    """Test predicates of the same kind and value are equal"""
    assert IndexPredicate(Index(1)) == IndexPredicate(Index(1))
    assert IndexPredicate(Index(1)) != IndexPredicate(Index(2))
    assert VaccineContainsKeywordsPredicate(GroupName("Pfizer")) == VaccineContainsKeywordsPredicate(GroupName("Pfizer"))
    assert StartTimePredicate(datetime(2024, 1, 1)) != EndTimePredicate(datetime(2024, 1, 1))


def test_name_predicate_matches_whole_words_of_any_keyword():
    """Test a patient matches on a whole name word of any keyword"""
    predicate = NameContainsKeywordsPredicate(("alice", "carl"))

    assert predicate(ALICE)
    assert predicate(CARL)
    assert not predicate(BENSON)
    assert not NameContainsKeywordsPredicate(("Ali",))(ALICE)


def test_blood_type_predicate():
    """Test patients are matched by exact blood type"""
    assert BloodTypePredicate(BloodType("B-"))(BENSON)
    assert not BloodTypePredicate(BloodType("B+"))(BENSON)


def test_patient_vaccine_predicate_matches_substrings():
    """Test patients are matched by part of a vaccine name"""
    predicate = PatientVaccineContainsKeywordsPredicate(("pfiz",))

    assert predicate(BENSON)
    assert not predicate(ALICE)
    assert not predicate(CARL)


def test_all_of_combines_predicates():
    """Test combined predicates must all match and none matches everything"""
    matches = all_of([IndexPredicate(Index(0)), CompletionStatusPredicate(False)])

    assert matches(ALICE_BOOSTER)
    assert not matches(ALICE_FIRST_DOSE)
    assert all_of([])(BENSON_FIRST_DOSE)
