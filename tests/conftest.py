# pylint: disable=redefined-outer-name
from pathlib import Path

import pytest

from tests.typical import typical_model
from vms.adapters.repository import JsonAddressBookRepository, JsonKeywordRepository
from vms.service_layer.unit_of_work import JsonUnitOfWork

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def model():
    return typical_model()


@pytest.fixture
def data_dir():
    return DATA_DIR


@pytest.fixture
def storage_paths(tmp_path):
    """Storage paths in a fresh temporary directory."""
    return dict(
        address_book=tmp_path / "data" / "addressbook.json",
        keywords=tmp_path / "data" / "keyword.json",
    )


@pytest.fixture
def json_uow(storage_paths):
    """Unit of work backed by an empty temporary data directory."""
    return JsonUnitOfWork(
        address_book=JsonAddressBookRepository(storage_paths["address_book"]),
        keywords=JsonKeywordRepository(storage_paths["keywords"]),
    )


@pytest.fixture
def typical_uow(storage_paths):
    """Unit of work whose data files hold the typical model."""
    address_book = JsonAddressBookRepository(storage_paths["address_book"])
    keywords = JsonKeywordRepository(storage_paths["keywords"])
    stored = typical_model()
    address_book.save(stored)
    keywords.save(stored.keywords)
    return JsonUnitOfWork(address_book=address_book, keywords=keywords)
