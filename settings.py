from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw.strip())


@dataclass(frozen=True)
class Settings:
    # Execution mode for load/save
    asynchronous: bool
    ordered_saves: bool
    load_workers: int

    # YAML output formatting
    indent: int
    width: int


def get_settings(env_file: str | Path | None = None) -> Settings:
    if env_file is not None:
        # Values already present in the process environment win.
        load_dotenv(env_file, override=False)

    asynchronous = _env_bool("DOCSTORE_ASYNC", False)

    # Ordered saves are the safe default; opt out to get fire-and-forget writers.
    ordered_saves = _env_bool("DOCSTORE_ORDERED_SAVES", True)
    load_workers = max(1, _env_int("DOCSTORE_LOAD_WORKERS", 2))

    indent = _env_int("DOCSTORE_INDENT", 4)
    width = _env_int("DOCSTORE_WIDTH", 80)

    return Settings(
        asynchronous=asynchronous,
        ordered_saves=ordered_saves,
        load_workers=load_workers,
        indent=indent,
        width=width,
    )
