from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

from settings import Settings, get_settings

from .codec import DumperOptions, YamlCodec
from .controller import PersistenceController
from .disk_store import DiskTextStore
from .interfaces import DocumentCodec, DurableStore
from .keypath import ensure_parent, lookup, split_path, walk
from .paths import document_path
from .values import MISSING, Value, ValueKind, kind_of

logger = logging.getLogger(__name__)


class YamlDocument:
    """
    A YAML file held in memory as nested dicts and lists, addressed with
    dot-notation paths (``"server.http.port"``).

    Every mutating call is followed by a save of the whole document. Building a
    document loads the file (a missing, blank or unparseable file gives an
    empty document) and immediately writes it back in normalised form.

    In asynchronous mode loads and saves run on background workers and the
    calls return at once; I/O errors are only logged. Callers must not mutate
    the document from other threads while it is in use, and mutations made
    before the initial background load lands are overwritten by it.

    Mappings and lists returned by get() are live references into the tree.
    Changing them in place is allowed, is not locked, and reaches the file on
    the next save.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        asynchronous: bool | None = None,
        ordered_saves: bool | None = None,
        codec: DocumentCodec | None = None,
        store: DurableStore | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self._data: dict[str, Any] = {}
        self._codec = codec or YamlCodec(DumperOptions(indent=settings.indent, width=settings.width))
        self._controller = PersistenceController(
            document_path(path),
            codec=self._codec,
            store=store or DiskTextStore(),
            get_tree=lambda: self._data,
            set_tree=self._replace_tree,
            asynchronous=settings.asynchronous if asynchronous is None else asynchronous,
            ordered_saves=settings.ordered_saves if ordered_saves is None else ordered_saves,
            load_workers=settings.load_workers,
        )
        self.load()
        self.save()

    def _replace_tree(self, doc: dict[str, Any]) -> None:
        self._data = doc

    # ---- accessors ----------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._controller.path

    @property
    def asynchronous(self) -> bool:
        return self._controller.asynchronous

    @property
    def codec(self) -> DocumentCodec:
        return self._codec

    @property
    def data(self) -> dict[str, Any]:
        """The live root mapping."""
        return self._data

    def to_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._data)

    def __contains__(self, path: str) -> bool:
        return lookup(self._data, path, MISSING) is not MISSING

    def __repr__(self) -> str:
        mode = "async" if self.asynchronous else "sync"
        return f"YamlDocument({str(self.path)!r}, {mode})"

    # ---- path operations ----------------------------------------------------

    def get(self, path: str, default: Any = None) -> Value:
        """
        Value at a dotted path, or ``default`` if any segment along the way is
        missing or is not a mapping.
        """
        return lookup(self._data, path, default)

    def set(self, path: str, value: Value) -> None:
        """
        Bind ``value`` at a dotted path. Intermediate segments that are missing
        or hold a non-mapping value are replaced by empty mappings.
        """
        self._controller.ensure_open()
        segments = split_path(path)
        ensure_parent(self._data, segments)[segments[-1]] = value
        self.save()

    def remove(self, path: str) -> None:
        """Delete the value at a dotted path; unreachable paths are ignored."""
        self._controller.ensure_open()
        segments = split_path(path)
        parent = walk(self._data, segments)
        if parent is None:
            return
        parent.pop(segments[-1], None)
        self.save()

    # ---- sections -----------------------------------------------------------

    def add_to_section(self, section: str, key: str | None, value: Value) -> None:
        """
        Add ``value`` to the top-level ``section``.

        - mapping section: stored under ``key`` (required)
        - list section: appended, ``key`` is ignored
        - anything else: replaced by ``[value]`` when ``key`` is None,
          otherwise by ``{key: value}``
        """
        self._controller.ensure_open()
        current = self._data.get(section, MISSING)
        kind = kind_of(current)
        if kind is ValueKind.MAPPING:
            if key is None:
                raise ValueError(f"section {section!r} is a mapping; a key is required")
            current[key] = value
        elif kind is ValueKind.SEQUENCE:
            current.append(value)
        elif key is None:
            self._data[section] = [value]
        else:
            self._data[section] = {key: value}
        self.save()

    def create_section(self, section: str) -> None:
        """Make ``section`` (a dotted path) an empty mapping unless it already is one."""
        self._controller.ensure_open()
        if self.has_section(section):
            return
        self.set(section, {})

    def create_sequence(self, section: str) -> None:
        """Make the top-level ``section`` an empty list unless it already is one."""
        self._controller.ensure_open()
        if kind_of(self._data.get(section, MISSING)) is ValueKind.SEQUENCE:
            return
        self._data[section] = []
        self.save()

    def has_section(self, path: str) -> bool:
        return kind_of(self.get(path, MISSING)) is ValueKind.MAPPING

    def rename_section(self, old: str, new: str) -> None:
        self._controller.ensure_open()
        if not self.has_section(old):
            return
        section = self.get(old)
        old_segments = split_path(old)
        walk(self._data, old_segments).pop(old_segments[-1])
        new_segments = split_path(new)
        ensure_parent(self._data, new_segments)[new_segments[-1]] = section
        logger.debug("DOCUMENT %s: renamed section %s -> %s", self.path, old, new)
        self.save()

    # ---- persistence --------------------------------------------------------

    def load(self) -> None:
        self._controller.load()

    def save(self) -> None:
        self._controller.save()

    def close(self, wait: bool = True) -> None:
        """Shut down background workers; waits for queued loads/saves by default."""
        self._controller.close(wait=wait)

    def __enter__(self) -> "YamlDocument":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
