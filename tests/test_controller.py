from __future__ import annotations

import logging
import threading
from pathlib import Path

import pytest
import yaml

from docstore import DocumentClosedError, PersistenceController, StoreWriteError, YamlCodec, YamlDocument


class MemoryStore:
    """In-memory durable store recording every write and the thread that did it."""

    def __init__(self, initial: str | None = None, fail_writes: bool = False):
        self._lock = threading.Lock()
        self.text = initial
        self.writes: list[str] = []
        self.threads: list[str] = []
        self.fail_writes = fail_writes

    def read_text(self, path: Path) -> str | None:
        with self._lock:
            self.threads.append(threading.current_thread().name)
            return self.text

    def write_text(self, path: Path, text: str) -> None:
        with self._lock:
            self.threads.append(threading.current_thread().name)
            if self.fail_writes:
                raise StoreWriteError(f"cannot write {path}", path)
            self.text = text
            self.writes.append(text)


def _controller(store: MemoryStore, holder: dict, **kwargs) -> PersistenceController:
    def _set(doc):
        holder["tree"] = doc

    return PersistenceController(
        Path("mem.yml"),
        codec=YamlCodec(),
        store=store,
        get_tree=lambda: holder["tree"],
        set_tree=_set,
        **kwargs,
    )


def test_sync_controller_raises_write_failures():
    holder = {"tree": {"a": 1}}
    controller = _controller(MemoryStore(fail_writes=True), holder)

    with pytest.raises(StoreWriteError):
        controller.save()


def test_sync_controller_runs_on_caller_thread():
    store = MemoryStore("a: 1\n")
    holder = {"tree": {}}
    controller = _controller(store, holder)

    controller.load()
    controller.save()
    assert holder["tree"] == {"a": 1}
    assert store.threads == [threading.current_thread().name] * 2


def test_ordered_saves_converge_on_last_tree():
    store = MemoryStore()
    holder = {"tree": {}}
    controller = _controller(store, holder, asynchronous=True, ordered_saves=True)

    for i in range(20):
        holder["tree"] = {"n": i}
        controller.save()
    controller.close()

    seen = [yaml.safe_load(text)["n"] for text in store.writes]
    assert len(seen) == 20
    assert seen == sorted(seen)
    assert seen[-1] == 19
    assert all(name.startswith("docstore-writer") for name in store.threads)


def test_ordered_load_runs_before_following_save():
    store = MemoryStore("a: 1\n")
    holder = {"tree": {}}
    controller = _controller(store, holder, asynchronous=True)

    controller.load()
    controller.save()
    controller.close()

    assert holder["tree"] == {"a": 1}
    assert store.writes == ["a: 1\n"]


def test_unordered_mode_uses_loader_pool_and_detached_savers():
    store = MemoryStore("a: 1\n")
    holder = {"tree": {"a": 1}}
    controller = _controller(store, holder, asynchronous=True, ordered_saves=False, load_workers=2)

    controller.load()
    for _ in range(5):
        controller.save()
    controller.close()

    assert len(store.writes) == 5
    assert all(text == "a: 1\n" for text in store.writes)
    assert sum(name.startswith("docstore-loader") for name in store.threads) == 1
    assert sum(name.startswith("docstore-saver") for name in store.threads) == 5


def test_async_failures_are_logged_not_raised(caplog):
    caplog.set_level(logging.WARNING, logger="docstore.controller")
    holder = {"tree": {"a": 1}}
    controller = _controller(MemoryStore(fail_writes=True), holder, asynchronous=True, ordered_saves=False)

    controller.save()
    controller.close()

    assert any("background save failed" in r.getMessage() for r in caplog.records)


def test_closed_controller_rejects_background_work():
    holder = {"tree": {}}
    controller = _controller(MemoryStore(), holder, asynchronous=True)
    controller.close()
    controller.close()

    assert controller.closed
    with pytest.raises(DocumentClosedError):
        controller.save()
    with pytest.raises(DocumentClosedError):
        controller.load()


def test_async_document_round_trip(doc_path, signalling_store):
    doc_path.parent.mkdir(parents=True)
    doc_path.write_text("a: 1\n", encoding="utf-8")

    doc = YamlDocument(doc_path, asynchronous=True, store=signalling_store)
    # the constructor's save is queued behind its load
    assert signalling_store.wait_for_writes(1)
    assert doc.data == {"a": 1}

    doc.set("b.c", 2)
    doc.set("b.d", 3)
    doc.remove("a")
    # visible in memory straight away
    assert doc.get("b.d") == 3
    doc.close()

    assert yaml.safe_load(doc_path.read_text(encoding="utf-8")) == {"b": {"c": 2, "d": 3}}
    with pytest.raises(DocumentClosedError):
        doc.set("x", 1)


def test_async_document_io_failures_only_logged(tmp_path, caplog):
    caplog.set_level(logging.WARNING, logger="docstore.controller")
    path = tmp_path / "a_directory.yml"
    path.mkdir()

    with YamlDocument(path, asynchronous=True) as doc:
        assert doc.asynchronous is True

    messages = [r.getMessage() for r in caplog.records]
    assert any("background load failed" in m for m in messages)
    assert any("background save failed" in m for m in messages)


def test_unordered_async_document_normalises_file(doc_path):
    doc = YamlDocument(doc_path, asynchronous=True, ordered_saves=False)
    doc.close()

    assert yaml.safe_load(doc_path.read_text(encoding="utf-8")) == {}


def test_sync_document_ignores_close(doc_path):
    doc = YamlDocument(doc_path, asynchronous=False)
    doc.close()

    doc.set("a", 1)
    assert yaml.safe_load(doc_path.read_text(encoding="utf-8")) == {"a": 1}


def test_closed_async_document_rejects_mutations_untouched(doc_path):
    doc_path.parent.mkdir(parents=True)
    doc_path.write_text("m:\n    k: 1\n", encoding="utf-8")

    doc = YamlDocument(doc_path, asynchronous=True)
    doc.close()
    before = doc.to_dict()
    assert before == {"m": {"k": 1}}

    with pytest.raises(DocumentClosedError):
        doc.set("x", 1)
    with pytest.raises(DocumentClosedError):
        doc.add_to_section("s", "k", 1)
    with pytest.raises(DocumentClosedError):
        doc.create_sequence("items")
    with pytest.raises(DocumentClosedError):
        doc.create_section("sec")
    with pytest.raises(DocumentClosedError):
        doc.remove("m.k")
    with pytest.raises(DocumentClosedError):
        doc.rename_section("m", "n")

    assert "x" not in doc
    assert doc.data == before
