from __future__ import annotations

from pathlib import Path


class DocumentStoreError(Exception):
    """Base class for failures surfaced by a YAML document."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class StoreReadError(DocumentStoreError):
    """The backing file exists but could not be read."""


class StoreWriteError(DocumentStoreError):
    """The serialized document could not be written to the backing file."""


class DocumentClosedError(DocumentStoreError):
    """Background work was submitted after the document was closed."""
