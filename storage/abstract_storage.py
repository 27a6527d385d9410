"""Storage abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO


class AbstractStorage(ABC):
    """Interface for uploaded-document storage backends."""

    @abstractmethod
    def save(self, file_obj: IO[bytes], filename: str, folder: str | None = None) -> str:
        """Persist a file under ``folder`` and return its stored (relative) path.

        Saving the same name twice replaces the earlier file.
        """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return whether the given relative path exists in storage."""

    @abstractmethod
    def absolute_path(self, path: str) -> Path:
        """Resolve a stored relative path for sending it back to a client."""
