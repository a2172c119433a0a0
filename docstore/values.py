from __future__ import annotations

import enum
from typing import Any

# Anything the codec can hand back: scalars, nested mappings and sequences.
Value = Any


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class ValueKind(enum.Enum):
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    ABSENT = "absent"


def kind_of(value: Any) -> ValueKind:
    """Classify a tree value. Only ``MISSING`` is absent; ``None`` is a scalar."""
    if value is MISSING:
        return ValueKind.ABSENT
    if isinstance(value, dict):
        return ValueKind.MAPPING
    if isinstance(value, list):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR
