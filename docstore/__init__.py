from __future__ import annotations

from .codec import DumperOptions, YamlCodec
from .controller import PersistenceController
from .disk_store import DiskTextStore
from .document import YamlDocument
from .errors import DocumentClosedError, DocumentStoreError, StoreReadError, StoreWriteError
from .interfaces import DocumentCodec, DurableStore
from .values import MISSING, ValueKind, kind_of

__all__ = [
    "YamlDocument",
    "PersistenceController",
    "DocumentCodec",
    "YamlCodec",
    "DumperOptions",
    "DurableStore",
    "DiskTextStore",
    "DocumentStoreError",
    "StoreReadError",
    "StoreWriteError",
    "DocumentClosedError",
    "MISSING",
    "ValueKind",
    "kind_of",
]
