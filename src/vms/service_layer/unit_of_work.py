# pylint: disable=attribute-defined-outside-init
from __future__ import annotations

"""Unit of Work owning the session model and its persistence."""

import abc
import copy
import logging
from typing import List, Optional

from vms import config
from vms.adapters import repository
from vms.domain.commands.base import Event
from vms.domain.model import Model

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(abc.ABC):
    """
    Coordinates one command against the model.

    Changes made inside a ``with uow:`` block are kept only if ``commit`` is
    called; otherwise the model is restored to its last committed state.
    """
    model: Model

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args):
        self.rollback()

    def commit(self):
        self._commit()

    def collect_new_events(self) -> List[Event]:
        """Collect domain events raised by the model and clear them."""
        events = []
        while self.model.events:
            events.append(self.model.events.pop(0))
        return events

    @abc.abstractmethod
    def _commit(self):
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self):
        raise NotImplementedError


class JsonUnitOfWork(AbstractUnitOfWork):
    """Unit of Work persisting the model to JSON documents on every commit."""

    def __init__(
        self,
        address_book: Optional[repository.AbstractAddressBookRepository] = None,
        keywords: Optional[repository.AbstractKeywordRepository] = None,
    ):
        paths = config.get_storage_paths()
        self.address_book = address_book or repository.JsonAddressBookRepository(paths["address_book"])
        self.keywords = keywords or repository.JsonKeywordRepository(paths["keywords"])
        self.model = None  # loaded on first use
        self._snapshot = None

    def load(self) -> Model:
        """Load the model from storage; called once per session."""
        if self.model is None:
            model = self.address_book.read()
            if model is None:
                logger.info("No address book found, starting with an empty one")
                model = Model()
            keywords = self.keywords.read()
            if keywords is not None:
                model.keywords = keywords
            self.model = model
            self._snapshot = copy.deepcopy(model)
        return self.model

    def __enter__(self):
        self.load()
        self._committed = False
        return super().__enter__()

    def _commit(self):
        if self.model == self._snapshot:
            logger.debug("Model unchanged, nothing to save")
            self._committed = True
            return
        self.address_book.save(self.model)
        try:
            self.keywords.save(self.model.keywords)
        except repository.DataLoadingError:
            # both documents must describe the same committed state
            logger.error("Saving keywords failed, restoring the previous address book")
            self.address_book.save(self._snapshot)
            raise
        self._snapshot = copy.deepcopy(self.model)
        self._snapshot.events.clear()
        self._committed = True

    def rollback(self):
        """Restore the last committed state unless the block was committed."""
        if getattr(self, "_committed", False):
            return
        if self.model is not None and self._snapshot is not None:
            logger.info("Rolling back uncommitted changes")
            self.model.reset_data(self._snapshot)
