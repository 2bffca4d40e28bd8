# src/caldo/storage/errors.py

from __future__ import annotations


class StorageError(RuntimeError):
    """A task storage backend could not complete a load/save/clear."""

    def __init__(self, message: str, *, date_key: str | None = None) -> None:
        super().__init__(message)
        self.date_key = date_key
