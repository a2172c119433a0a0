from __future__ import annotations

import os
from pathlib import Path


def read_text(path: Path) -> str | None:
    """
    Read a whole text document from disk.

    Returns None for missing files. Any other OSError (permissions, a directory
    sitting at the path, ...) propagates to the caller.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


def atomic_write_text(path: Path, text: str) -> None:
    """
    Atomically write text to disk by writing to a temp file then replacing.

    The parent directory must already exist. Line endings are written verbatim.
    """
    tmp_path = path.with_suffix(path.suffix + f".{os.getpid()}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
