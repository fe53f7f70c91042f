"""Unit tests for the keyword manager and keyword commands"""
import pytest

from tests.typical import typical_keywords
from vms.domain.commands import CommandError
from vms.domain.commands.keyword import AddKeywordCommand, DeleteKeywordCommand, ListKeywordCommand
from vms.domain.exceptions import IllegalValueError
from vms.domain.keyword import KeywordManager


class TestKeywordManager:

    def test_add_reports_new_values(self):
        """Test adding reports whether the keyword was new"""
        keywords = KeywordManager()

        assert keywords.add("vaccine", "Pfizer")
        assert not keywords.add("vaccine", "Pfizer")
        assert keywords.get("vaccine") == {"Pfizer"}

    @pytest.mark.parametrize("category, value", [("", "Pfizer"), ("vaccine", "  "), ("vaccine", " Pfizer")])
    def test_add_rejects_blank_or_padded_text(self, category, value):
        """Test blank or padded categories and keywords are refused"""
        with pytest.raises(IllegalValueError):
            KeywordManager().add(category, value)

    def test_remove_drops_empty_categories(self):
        """Test a category disappears with its last keyword"""
        keywords = KeywordManager({"allergy": ["catfur"]})

        assert keywords.remove("allergy", "catfur")
        assert not keywords.remove("allergy", "catfur")
        assert keywords.categories() == []

    def test_suggest_by_prefix_ignoring_case(self):
        """Test suggestions match a prefix regardless of case"""
        keywords = KeywordManager({"vaccine": ["Pfizer", "Moderna", "pfizer booster"]})

        assert keywords.suggest("vaccine", "PF") == ["Pfizer", "pfizer booster"]
        assert keywords.suggest("vaccine") == ["Moderna", "Pfizer", "pfizer booster"]
        assert keywords.suggest("allergy", "p") == []

    def test_as_dict_is_sorted(self):
        """Test the dictionary form lists keywords in order"""
        assert typical_keywords().as_dict() == {"allergy": ["catfur"], "vaccine": ["Moderna", "Pfizer"]}

    def test_equality(self):
        """Test managers compare by their keywords"""
        assert typical_keywords() == KeywordManager({"allergy": ["catfur"], "vaccine": ["Pfizer", "Moderna"]})
        assert typical_keywords() != KeywordManager()


def test_add_keyword_command(model):
    """Test the add command stores the keyword"""
    result = AddKeywordCommand("vaccine", "Novavax").execute(model)

    assert result.message == "Added keyword 'Novavax' to vaccine"
    assert "Novavax" in model.keywords.get("vaccine")


def test_add_duplicate_keyword(model):
    """Test an existing keyword cannot be added again"""
    with pytest.raises(CommandError, match="already exists"):
        AddKeywordCommand("vaccine", "Pfizer").execute(model)


def test_add_blank_keyword(model):
    """Test a blank keyword is refused"""
    with pytest.raises(CommandError, match="should not be blank"):
        AddKeywordCommand("vaccine", " ").execute(model)


def test_delete_keyword_command(model):
    """Test the delete command removes the keyword once"""
    DeleteKeywordCommand("allergy", "catfur").execute(model)
    assert model.keywords.get("allergy") == frozenset()

    with pytest.raises(CommandError, match="does not exist"):
        DeleteKeywordCommand("allergy", "catfur").execute(model)


def test_list_keywords(model):
    """Test keywords are listed by category and prefix"""
    assert ListKeywordCommand("vaccine").execute(model).message == "vaccine: Moderna, Pfizer"
    assert ListKeywordCommand("vaccine", "mod").execute(model).message == "vaccine: Moderna"
    assert ListKeywordCommand("blood").execute(model).message == "No keywords found in blood"
