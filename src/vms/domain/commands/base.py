"""Base command and event interfaces."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vms.domain.model import Model


@dataclass(frozen=True)
class CommandMessage:
    """Result of executing a command, shown to the user."""
    message: str

    def __str__(self):
        return self.message


class CommandError(Exception):
    """Exception raised when a command cannot be applied to the model."""
    pass


class Command(abc.ABC):
    """Base class for all commands: one user intent applied to the model."""

    def execute(self, model: Model) -> CommandMessage:
        if model is None:
            raise TypeError(f"{type(self).__name__} needs a model to execute against")
        return self._execute(model)

    @abc.abstractmethod
    def _execute(self, model: Model) -> CommandMessage:
        raise NotImplementedError


@dataclass
class Event:
    """Base class for all domain events."""
    pass
