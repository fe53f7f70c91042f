import logging

from vms.domain.events import PatientDeleted
from vms.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def log_patient_deletion(event: PatientDeleted, uow: AbstractUnitOfWork) -> None:
    """
    Record the removal of a patient and their appointments.

    The appointments are removed by the model in the same commit as the
    patient, so this handler does not touch the unit of work.
    """
    removed = ", ".join(str(i + 1) for i in event.appointment_ids) or "none"
    logger.info(f"Patient {event.patient_id + 1} deleted, removed appointments: {removed}")
