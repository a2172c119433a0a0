from __future__ import annotations

from pathlib import Path

from text_store import atomic_write_text, read_text

from .errors import StoreReadError, StoreWriteError
from .interfaces import DurableStore
from .locks import GLOBAL_PATH_LOCKS, PathLockRegistry
from .paths import ensure_parent_dir


class DiskTextStore(DurableStore):
    """
    Stores whole text documents on the local filesystem.

    - Missing files read as None.
    - Writes are atomic and serialized per resolved path.
    - OS-level failures are re-raised as StoreReadError / StoreWriteError.
    """

    def __init__(self, locks: PathLockRegistry | None = None):
        self._locks = locks or GLOBAL_PATH_LOCKS

    def read_text(self, path: Path) -> str | None:
        with self._locks.lock_for(path):
            try:
                return read_text(path)
            except OSError as e:
                raise StoreReadError(f"cannot read {path}: {e}", path) from e

    def write_text(self, path: Path, text: str) -> None:
        with self._locks.lock_for(path):
            try:
                atomic_write_text(ensure_parent_dir(path), text)
            except OSError as e:
                raise StoreWriteError(f"cannot write {path}: {e}", path) from e
