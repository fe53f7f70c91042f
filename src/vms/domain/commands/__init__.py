from vms.domain.commands.base import Command, CommandError, CommandMessage, Event

__all__ = ["Command", "CommandError", "CommandMessage", "Event"]
