"""
Interactive text session - one command per line, results printed back.
"""
import logging
import sys
from typing import Callable, Iterable

from vms import config
from vms.adapters.command_parser import parse_command
from vms.adapters.parser_util import ParseError
from vms.adapters.repository import DataLoadingError
from vms.domain.commands.appointment import FindCommand, ListAppointmentCommand, format_appointment
from vms.domain.commands.base import CommandError
from vms.domain.commands.patient import FindPatientCommand, ListPatientCommand, format_patient
from vms.domain.exceptions import IllegalValueError
from vms.domain.model import Index
from vms.service_layer import messagebus
from vms.service_layer.unit_of_work import AbstractUnitOfWork, JsonUnitOfWork

logger = logging.getLogger(__name__)

EXIT_WORDS = ("exit", "quit")
PROMPT = "vms> "


def execute_line(line: str, uow: AbstractUnitOfWork) -> str:
    """Parse and run one line of input, returning the text to show the user."""
    try:
        command = parse_command(line)
        [result] = messagebus.handle(command, uow)
    except (ParseError, CommandError) as e:
        return str(e)
    except DataLoadingError as e:
        return f"Changes were not saved: {e}"

    lines = [result.message]
    if isinstance(command, (FindPatientCommand, ListPatientCommand)):
        lines += [format_patient(Index(i), p) for i, p in uow.model.get_filtered_patient_map().items()]
    elif isinstance(command, (FindCommand, ListAppointmentCommand)):
        lines += [format_appointment(Index(i), a) for i, a in uow.model.get_filtered_appointment_map().items()]
    return "\n".join(lines)


def run(lines: Iterable[str], uow: AbstractUnitOfWork, out: Callable[[str], None] = print) -> None:
    """Run every line until the input ends or an exit word is read."""
    for line in lines:
        if not line.strip():
            continue
        if line.strip().lower() in EXIT_WORDS:
            break
        out(execute_line(line, uow))


def _read_lines():
    while True:
        try:
            yield input(PROMPT)
        except EOFError:
            return


def main():
    """Main entry point for the interactive VMS session."""
    logging.basicConfig(
        level=getattr(logging, config.get_log_level()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    uow = JsonUnitOfWork()
    try:
        uow.load()
    except (DataLoadingError, IllegalValueError) as e:
        logger.error(f"Could not load data: {e}")
        print(f"Could not load data, fix or remove the data files first: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("VMS session started")
    run(_read_lines(), uow)
    logger.info("VMS session ended")


if __name__ == "__main__":
    main()
