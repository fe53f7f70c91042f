"""Domain events raised by the in-memory model."""

from dataclasses import dataclass
from typing import Tuple

from vms.domain.commands.base import Event


@dataclass
class PatientDeleted(Event):
    """Event raised when a patient and their appointments have been removed from the model."""
    patient_id: int
    appointment_ids: Tuple[int, ...] = ()
