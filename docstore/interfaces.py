from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Protocol


class DocumentCodec(Protocol):
    """
    Translates between the in-memory tree and its on-disk text form.
    """

    def parse(self, text: str) -> Mapping[str, Any] | None:
        """Parse text into a root mapping, or None when there is no usable mapping."""
        ...

    def serialize(self, doc: Mapping[str, Any]) -> str:
        """Render the full document as text."""
        ...


class DurableStore(Protocol):
    """
    Path-addressed text storage backing a document between process runs.
    """

    def read_text(self, path: Path) -> str | None:
        """Return the full text at path, or None when nothing is stored there."""
        ...

    def write_text(self, path: Path, text: str) -> None:
        """Replace whatever is stored at path with text, creating it if needed."""
        ...
