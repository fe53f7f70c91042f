"""JSON file repositories for the address book and the keyword suggestions."""

import abc
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from vms.adapters.json_adapted import JsonSerializableAddressBook, JsonSerializableKeywordManager
from vms.domain.exceptions import IllegalValueError
from vms.domain.keyword import KeywordManager
from vms.domain.model import Model

logger = logging.getLogger(__name__)

Document = TypeVar("Document", bound=BaseModel)


class DataLoadingError(Exception):
    """Exception raised when a data file cannot be read or written."""
    pass


class AbstractAddressBookRepository(abc.ABC):
    """Stores the patients and appointments of a model."""

    def read(self) -> Optional[Model]:
        """Return the stored model, or None when nothing has been stored yet."""
        return self._read()

    def save(self, model: Model) -> None:
        self._save(model)

    @abc.abstractmethod
    def _read(self) -> Optional[Model]:
        raise NotImplementedError

    @abc.abstractmethod
    def _save(self, model: Model) -> None:
        raise NotImplementedError


class AbstractKeywordRepository(abc.ABC):
    """Stores the keyword suggestions of a model."""

    def read(self) -> Optional[KeywordManager]:
        return self._read()

    def save(self, manager: KeywordManager) -> None:
        self._save(manager)

    @abc.abstractmethod
    def _read(self) -> Optional[KeywordManager]:
        raise NotImplementedError

    @abc.abstractmethod
    def _save(self, manager: KeywordManager) -> None:
        raise NotImplementedError


class JsonAddressBookRepository(AbstractAddressBookRepository):
    """Address book kept in a single JSON document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Optional[Model]:
        document = read_json_file(self.path, JsonSerializableAddressBook)
        if document is None:
            return None
        model = document.to_model_type()
        logger.info(f"Loaded {len(model.patients)} patients and {len(model.appointments)} appointments from {self.path}")
        return model

    def _save(self, model: Model) -> None:
        save_json_file(self.path, JsonSerializableAddressBook.from_model(model))
        logger.info(f"Saved {len(model.patients)} patients and {len(model.appointments)} appointments to {self.path}")


class JsonKeywordRepository(AbstractKeywordRepository):
    """Keyword suggestions kept in their own JSON document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Optional[KeywordManager]:
        document = read_json_file(self.path, JsonSerializableKeywordManager)
        if document is None:
            return None
        return document.to_model_type()

    def _save(self, manager: KeywordManager) -> None:
        save_json_file(self.path, JsonSerializableKeywordManager.from_model(manager))
        logger.info(f"Saved keywords to {self.path}")


def read_json_file(path: Path, document_type: Type[Document]) -> Optional[Document]:
    """
    Read and validate a JSON document.

    Returns:
        The parsed document, or None if the file does not exist

    Raises:
        DataLoadingError: If the file cannot be read, is not UTF-8 or is not valid JSON
        IllegalValueError: If the JSON does not have the document's structure
    """
    if not path.exists():
        logger.info(f"Data file not found at {path}")
        return None

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read data file {path}: {e}")
        raise DataLoadingError(f"Could not read data file {path}: {e}") from e

    try:
        return document_type.model_validate(data)
    except ValidationError as e:
        logger.error(f"Data file {path} has an illegal structure: {e}")
        raise IllegalValueError(f"Illegal values found in {path}: {e}") from e


def save_json_file(path: Path, document: BaseModel) -> None:
    """
    Write a JSON document, replacing the target file atomically.

    Missing parent directories are created.

    Raises:
        DataLoadingError: If the file cannot be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document.model_dump_json(indent=2))
            os.replace(tmp_name, path)
        except BaseException:
            os.unlink(tmp_name)
            raise
    except OSError as e:
        logger.error(f"Failed to save data file {path}: {e}")
        raise DataLoadingError(f"Could not save data file {path}: {e}") from e
