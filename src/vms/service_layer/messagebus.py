# pylint: disable=broad-except
"""Message bus running commands against the unit of work and dispatching the events they raise."""

from __future__ import annotations
import logging
from typing import Callable, Dict, List, Type, Union, TYPE_CHECKING

from vms.domain.commands.base import Command, CommandError, CommandMessage, Event
from vms.domain.events import PatientDeleted
from vms.service_layer import handlers

if TYPE_CHECKING:
    from vms.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

Message = Union[Command, Event]


def handle(
    message: Message,
    uow: AbstractUnitOfWork,
) -> List[CommandMessage]:
    """Handle message (command or event) and every event it raises."""
    results = []
    queue = [message]

    while queue:
        message = queue.pop(0)

        if isinstance(message, Event):
            handle_event(message, queue, uow)
        elif isinstance(message, Command):
            cmd_result = handle_command(message, queue, uow)
            results.append(cmd_result)
        else:
            raise Exception(f"{message} was not an Event or Command")

    return results


def handle_event(
    event: Event,
    queue: List[Message],
    uow: AbstractUnitOfWork,
):
    """Handle event by calling all registered event handlers."""
    logger.info(f"handling event {type(event).__name__} with {len(EVENT_HANDLERS.get(type(event), []))} handlers")
    for handler in EVENT_HANDLERS.get(type(event), []):
        try:
            logger.info(f"calling handler {handler.__name__} for event {type(event).__name__}")
            handler(event, uow=uow)
            queue.extend(uow.collect_new_events())
        except Exception:
            logger.exception("Exception handling event %s", event)
            continue


def handle_command(
    command: Command,
    queue: List[Message],
    uow: AbstractUnitOfWork,
) -> CommandMessage:
    """Execute the command against the model and commit its changes."""
    logger.info(f"handling command {type(command).__name__}")
    try:
        with uow:
            result = command.execute(uow.model)
            new_events = uow.collect_new_events()
            uow.commit()
        logger.info(f"Collected {len(new_events)} events after command: {[type(e).__name__ for e in new_events]}")
        queue.extend(new_events)
        return result
    except CommandError as e:
        logger.warning(f"Command {type(command).__name__} rejected: {e}")
        raise
    except Exception:
        logger.exception("Exception handling command %s", command)
        raise


# Event handlers - individual event handlers
EVENT_HANDLERS = {
    PatientDeleted: [
        handlers.log_patient_deletion,
    ],
}  # type: Dict[Type[Event], List[Callable]]
