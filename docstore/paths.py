from __future__ import annotations

import os
from pathlib import Path


def document_path(path: str | os.PathLike[str]) -> Path:
    """Normalise a caller-supplied file location (``~`` expanded, not resolved)."""
    return Path(path).expanduser()


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def ensure_parent_dir(path: Path) -> Path:
    ensure_dir(path.parent)
    return path
