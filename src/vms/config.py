"""Configuration settings for the vaccination management system."""

import os


def get_data_dir():
    """Get the directory holding the data files from environment variables."""
    return os.environ.get("VMS_DATA_DIR", "data")


def get_storage_paths():
    """Get the paths of the JSON data files from environment variables."""
    data_dir = get_data_dir()
    address_book = os.environ.get("VMS_ADDRESS_BOOK_FILE", os.path.join(data_dir, "addressbook.json"))
    keywords = os.environ.get("VMS_KEYWORD_FILE", os.path.join(data_dir, "keyword.json"))

    return dict(
        address_book=address_book,
        keywords=keywords,
    )


def get_log_level():
    """Get the logging level name from environment variables."""
    return os.environ.get("LOG_LEVEL", "INFO").upper()
