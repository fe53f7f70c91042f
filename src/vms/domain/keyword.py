"""Keyword categories used to drive input suggestions."""

from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set

from vms.domain.exceptions import IllegalValueError


class KeywordManager:
    """Mapping of keyword category to the set of values known for it."""

    MESSAGE_CONSTRAINTS = "Keyword categories and values should not be blank"

    def __init__(self, keywords: Optional[Mapping[str, Iterable[str]]] = None):
        self._keywords: Dict[str, Set[str]] = {}
        for category, values in (keywords or {}).items():
            for value in values:
                self.add(category, value)

    @staticmethod
    def is_valid_keyword(text) -> bool:
        return isinstance(text, str) and bool(text.strip()) and text == text.strip()

    def add(self, category: str, value: str) -> bool:
        """Add a value under a category; returns False if it was already known."""
        if not (self.is_valid_keyword(category) and self.is_valid_keyword(value)):
            raise IllegalValueError(self.MESSAGE_CONSTRAINTS)
        values = self._keywords.setdefault(category, set())
        if value in values:
            return False
        values.add(value)
        return True

    def remove(self, category: str, value: str) -> bool:
        """Remove a value; empty categories are dropped. Returns False if absent."""
        values = self._keywords.get(category)
        if not values or value not in values:
            return False
        values.remove(value)
        if not values:
            del self._keywords[category]
        return True

    def get(self, category: str) -> FrozenSet[str]:
        return frozenset(self._keywords.get(category, ()))

    def categories(self) -> List[str]:
        return sorted(self._keywords)

    def suggest(self, category: str, prefix: str = "") -> List[str]:
        """Values of a category starting with prefix, case-insensitive, sorted."""
        prefix = prefix.lower()
        return sorted(v for v in self._keywords.get(category, ()) if v.lower().startswith(prefix))

    def as_dict(self) -> Dict[str, List[str]]:
        return {category: sorted(values) for category, values in sorted(self._keywords.items())}

    def __eq__(self, other):
        if not isinstance(other, KeywordManager):
            return NotImplemented
        return self._keywords == other._keywords

    def __repr__(self):
        return f"KeywordManager({self.as_dict()!r})"
