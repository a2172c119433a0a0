from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable

from .errors import DocumentClosedError, DocumentStoreError
from .interfaces import DocumentCodec, DurableStore

logger = logging.getLogger(__name__)

TreeGetter = Callable[[], dict[str, Any]]
TreeSetter = Callable[[dict[str, Any]], None]


class PersistenceController:
    """
    Moves a document tree between memory and its backing file.

    Synchronous controllers do the I/O on the caller's thread and raise
    DocumentStoreError subclasses on failure.

    Asynchronous controllers return immediately and only log failures. With
    ``ordered_saves`` (the default) every load and save goes through one
    dedicated worker in submission order, so the last save to run has seen
    every mutation made before it was issued. Without it, loads share a small
    pool, every save gets its own throwaway worker, and nothing orders one
    write against another. Either way a save renders the tree when it runs,
    not when it was requested.
    """

    def __init__(
        self,
        path: Path,
        *,
        codec: DocumentCodec,
        store: DurableStore,
        get_tree: TreeGetter,
        set_tree: TreeSetter,
        asynchronous: bool = False,
        ordered_saves: bool = True,
        load_workers: int = 2,
    ):
        self._path = path
        self._codec = codec
        self._store = store
        self._get_tree = get_tree
        self._set_tree = set_tree
        self._asynchronous = asynchronous
        self._ordered_saves = ordered_saves
        self._load_workers = load_workers

        self._guard = threading.Lock()
        self._closed = False
        self._writer: ThreadPoolExecutor | None = None
        self._loaders: ThreadPoolExecutor | None = None
        self._pending: set[ThreadPoolExecutor] = set()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def asynchronous(self) -> bool:
        return self._asynchronous

    @property
    def ordered_saves(self) -> bool:
        return self._ordered_saves

    @property
    def closed(self) -> bool:
        return self._closed

    # ---- load -------------------------------------------------------------

    def load(self) -> None:
        if not self._asynchronous:
            self._load_now()
            return
        if self._ordered_saves:
            self._submit(self._writer_executor, self._load_now, "load")
        else:
            self._submit(self._loader_executor, self._load_now, "load")

    def _load_now(self) -> None:
        text = self._store.read_text(self._path)
        doc = self._codec.parse(text) if text is not None else None
        if doc is None:
            logger.debug("DOCUMENT LOAD: %s has no usable mapping; starting empty", self._path)
            doc = {}
        self._set_tree(doc)
        logger.debug("DOCUMENT LOAD: %s (%d top-level keys)", self._path, len(doc))

    # ---- save -------------------------------------------------------------

    def save(self) -> None:
        if not self._asynchronous:
            self._save_now()
            return
        if self._ordered_saves:
            self._submit(self._writer_executor, self._save_now, "save")
        else:
            self._submit_detached(self._save_now, "save")

    def _save_now(self) -> None:
        self._write(self._render())

    def _render(self) -> str:
        return self._codec.serialize(self._get_tree())

    def _write(self, text: str) -> None:
        self._store.write_text(self._path, text)
        logger.debug("DOCUMENT SAVE: wrote %d bytes to %s", len(text), self._path)

    # ---- background execution ----------------------------------------------

    # Executor accessors expect self._guard to be held.

    def _writer_executor(self) -> ThreadPoolExecutor:
        if self._writer is None:
            self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="docstore-writer")
        return self._writer

    def _loader_executor(self) -> ThreadPoolExecutor:
        if self._loaders is None:
            self._loaders = ThreadPoolExecutor(
                max_workers=self._load_workers, thread_name_prefix="docstore-loader"
            )
        return self._loaders

    def ensure_open(self) -> None:
        """Raise DocumentClosedError if an asynchronous controller has been closed."""
        if self._asynchronous:
            with self._guard:
                self._ensure_open()

    def _ensure_open(self) -> None:
        if self._closed:
            raise DocumentClosedError(f"document {self._path} is closed", self._path)

    def _submit(
        self, get_executor: Callable[[], Executor], fn: Callable[[], None], what: str
    ) -> None:
        with self._guard:
            self._ensure_open()
            get_executor().submit(self._run_logged, fn, what)

    def _submit_detached(self, fn: Callable[[], None], what: str) -> None:
        # One-shot worker per call; it winds down as soon as its task is done.
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="docstore-saver")

        def _task() -> None:
            try:
                self._run_logged(fn, what)
            finally:
                with self._guard:
                    self._pending.discard(executor)

        with self._guard:
            self._ensure_open()
            self._pending.add(executor)
            executor.submit(_task)
        executor.shutdown(wait=False)

    def _run_logged(self, fn: Callable[[], None], what: str) -> None:
        try:
            fn()
        except DocumentStoreError:
            logger.warning("DOCUMENT %s: background %s failed", self._path, what, exc_info=True)
        except Exception:
            logger.exception("DOCUMENT %s: unexpected error during background %s", self._path, what)

    def close(self, wait: bool = True) -> None:
        """
        Stop accepting background work. With ``wait`` the call blocks until
        every load/save already handed to a worker has finished.
        """
        with self._guard:
            if self._closed:
                return
            self._closed = True
            executors = [e for e in (self._writer, self._loaders) if e is not None]
            executors.extend(self._pending)
        for executor in executors:
            executor.shutdown(wait=wait)
