from __future__ import annotations

import threading
from pathlib import Path


class PathLockRegistry:
    """
    Hands out one re-entrant lock per resolved file path, so every writer in the
    process that targets the same YAML file goes through the same lock.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Path, threading.RLock] = {}

    def lock_for(self, path: Path) -> threading.RLock:
        key = path.resolve()
        with self._guard:
            return self._locks.setdefault(key, threading.RLock())


GLOBAL_PATH_LOCKS = PathLockRegistry()
