"""Notebook persistence.

Public re-exports so callers can write::

    from nexia.storage import JsonStorage, StorageNotFound
"""

from nexia.storage.base import (
    Storage,
    StorageError,
    StorageFormatError,
    StorageIOError,
    StorageNotFound,
)
from nexia.storage.codec import notebook_from_dict, notebook_to_dict
from nexia.storage.json_storage import JsonStorage

__all__ = [
    "JsonStorage",
    "Storage",
    "StorageError",
    "StorageFormatError",
    "StorageIOError",
    "StorageNotFound",
    "notebook_from_dict",
    "notebook_to_dict",
]
