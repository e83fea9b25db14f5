"""Typed render context.

Callers pass a plain mapping; the engine normalizes it once per render into
a tagged union so the loop and interpolation stages never inspect arbitrary
objects:

    ContextValue = Scalar | Sequence
    Scalar       = string form of a str/int/float/bool
    Sequence     = tuple of records, each a mapping of property → string

Values that fit neither shape (``None``, nested mappings, lists of plain
values) are dropped: the interpolator leaves references to them unresolved
and a loop over them fails as a missing collection.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

Record = Mapping[str, str]


@dataclass(frozen=True, slots=True)
class Scalar:
    """A single value, already converted to its string form."""

    value: str


@dataclass(frozen=True, slots=True)
class Sequence:
    """An ordered collection of records for ``{% for %}`` iteration."""

    items: tuple[Record, ...]

    def __len__(self) -> int:
        return len(self.items)


ContextValue = Scalar | Sequence


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float))


def _record(item: Any) -> dict[str, str] | None:
    """Convert one sequence element to a record of string properties, or None."""
    if isinstance(item, Mapping):
        fields = item
    elif hasattr(item, "__dict__"):
        fields = vars(item)
    elif hasattr(item, "__slots__"):
        fields = {slot: getattr(item, slot) for slot in item.__slots__ if hasattr(item, slot)}
    else:
        return None
    return {str(k): str(v) for k, v in fields.items() if v is not None}


def coerce_value(value: Any) -> ContextValue | None:
    """Classify one context value; return None when it is neither shape."""
    if isinstance(value, (Scalar, Sequence)):
        return value
    if _is_scalar(value):
        return Scalar(str(value))
    if isinstance(value, (list, tuple)):
        records = [_record(item) for item in value]
        if any(record is None for record in records):
            return None
        return Sequence(tuple(records))
    return None


def coerce_context(data: Mapping[str, Any] | None) -> dict[str, ContextValue]:
    """Normalize a caller-supplied mapping into typed context values.

    Args:
        data: Variable name → value. Scalars are str/int/float/bool;
            sequences are lists or tuples of dicts (or plain objects).

    Returns:
        New dict; the input mapping is not modified.
    """
    context: dict[str, ContextValue] = {}
    if not data:
        return context
    for key, value in data.items():
        coerced = coerce_value(value)
        if coerced is None:
            logger.debug("Skipping context key %r: %s is not renderable", key, type(value).__name__)
            continue
        context[key] = coerced
    return context
