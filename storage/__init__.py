"""Storage backends."""

from flask import current_app

from .abstract_storage import AbstractStorage
from .local_storage import LocalStorage

__all__ = ["AbstractStorage", "LocalStorage", "storage_for"]


def storage_for() -> AbstractStorage:
    """Return the storage backend configured for the current app."""

    return LocalStorage(current_app.config.get("UPLOAD_DIR"))
