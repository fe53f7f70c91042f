"""Commands maintaining the keyword suggestions."""

from dataclasses import dataclass

from vms.domain.commands.base import Command, CommandError, CommandMessage
from vms.domain.exceptions import IllegalValueError
from vms.domain.model import Model

COMMAND_GROUP = "keyword"


@dataclass(frozen=True)
class AddKeywordCommand(Command):
    COMMAND_WORD = "add"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Adds a keyword to a suggestion category.\n"
        "Parameters: --c CATEGORY --k KEYWORD\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} --c vaccine --k Pfizer"
    )
    MESSAGE_SUCCESS = "Added keyword '{}' to {}"
    MESSAGE_DUPLICATE = "Keyword '{}' already exists in {}"

    category: str
    keyword: str

    def _execute(self, model: Model) -> CommandMessage:
        try:
            added = model.keywords.add(self.category, self.keyword)
        except IllegalValueError as e:
            raise CommandError(str(e)) from e
        if not added:
            raise CommandError(self.MESSAGE_DUPLICATE.format(self.keyword, self.category))
        return CommandMessage(self.MESSAGE_SUCCESS.format(self.keyword, self.category))


@dataclass(frozen=True)
class DeleteKeywordCommand(Command):
    COMMAND_WORD = "delete"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Removes a keyword from a suggestion category.\n"
        "Parameters: --c CATEGORY --k KEYWORD\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} --c vaccine --k Pfizer"
    )
    MESSAGE_SUCCESS = "Removed keyword '{}' from {}"
    MESSAGE_NOT_FOUND = "Keyword '{}' does not exist in {}"

    category: str
    keyword: str

    def _execute(self, model: Model) -> CommandMessage:
        if not model.keywords.remove(self.category, self.keyword):
            raise CommandError(self.MESSAGE_NOT_FOUND.format(self.keyword, self.category))
        return CommandMessage(self.MESSAGE_SUCCESS.format(self.keyword, self.category))


@dataclass(frozen=True)
class ListKeywordCommand(Command):
    """Shows the suggestions of a category, optionally narrowed to a prefix."""
    COMMAND_WORD = "list"
    MESSAGE_USAGE = (
        f"{COMMAND_GROUP} {COMMAND_WORD}: Lists the keywords of a category starting with an optional prefix.\n"
        "Parameters: --c CATEGORY [--k PREFIX]\n"
        f"Example: {COMMAND_GROUP} {COMMAND_WORD} --c vaccine --k pf"
    )
    MESSAGE_EMPTY = "No keywords found in {}"

    category: str
    prefix: str = ""

    def _execute(self, model: Model) -> CommandMessage:
        suggestions = model.keywords.suggest(self.category, self.prefix)
        if not suggestions:
            return CommandMessage(self.MESSAGE_EMPTY.format(self.category))
        return CommandMessage(f"{self.category}: " + ", ".join(suggestions))
