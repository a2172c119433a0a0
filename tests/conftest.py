from __future__ import annotations

import threading
from pathlib import Path
import sys


import pytest


# Ensure the repository root (parent of ./tests) is importable during pytest collection,
# so `import docstore` / `import settings` resolve without an editable install.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


from docstore.disk_store import DiskTextStore  # noqa: E402


class SignallingStore(DiskTextStore):
    """
    Disk store that counts completed writes so async tests can wait for
    background work without sleeping.
    """

    def __init__(self) -> None:
        super().__init__()
        self._cond = threading.Condition()
        self.write_count = 0

    def write_text(self, path: Path, text: str) -> None:
        super().write_text(path, text)
        with self._cond:
            self.write_count += 1
            self._cond.notify_all()

    def wait_for_writes(self, n: int, timeout: float = 5.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: self.write_count >= n, timeout=timeout)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """
    Keep DOCSTORE_* variables from the developer's shell out of the tests.
    """
    for name in (
        "DOCSTORE_ASYNC",
        "DOCSTORE_ORDERED_SAVES",
        "DOCSTORE_LOAD_WORKERS",
        "DOCSTORE_INDENT",
        "DOCSTORE_WIDTH",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def doc_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "settings.yml"


@pytest.fixture
def signalling_store() -> SignallingStore:
    return SignallingStore()
