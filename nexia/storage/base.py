"""Storage capability for notebook persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from os import PathLike
from pathlib import Path
from typing import Union

from nexia.core.notebook import Notebook

StoragePath = Union[str, PathLike]


class StorageError(Exception):
    """Base class for persistence failures.  ``path`` names the destination."""

    def __init__(self, path: StoragePath, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class StorageNotFound(StorageError):
    """The destination does not exist at load time."""

    def __init__(self, path: StoragePath) -> None:
        super().__init__(path, f"File not found: {path}")


class StorageIOError(StorageError):
    """The underlying read or write failed."""

    def __init__(self, path: StoragePath, error: OSError) -> None:
        self.error = error
        super().__init__(path, f"IO error: {error}")


class StorageFormatError(StorageError):
    """The content exists but is not a valid serialized notebook."""

    def __init__(self, path: StoragePath, detail: str) -> None:
        self.detail = detail
        super().__init__(path, f"Invalid notebook file {path}: {detail}")


class Storage(ABC):
    """Swappable persistence backend.

    Implementations must replace the destination completely on ``save`` and
    leave prior content intact when a save fails.
    """

    @abstractmethod
    def save(self, notebook: Notebook, path: StoragePath) -> None:
        """Serialize *notebook* to *path*, overwriting existing content."""

    @abstractmethod
    def load(self, path: StoragePath) -> Notebook:
        """Reconstruct the notebook most recently saved to *path*.

        Raises:
            StorageNotFound: *path* does not exist.
            StorageIOError: *path* cannot be read.
            StorageFormatError: *path* does not hold a valid notebook.
        """
