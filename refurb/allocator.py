"""
refurb.allocator
================

Monotonic identifier allocation (``XBX-101``, ``XBX-102``, ...).

The counter lives in the blob store under its own key and only ever moves
forward: deleting an entity never frees its number.  When the stored
counter is missing, non‑positive or behind the data (stale import, manual
edits) it is recomputed from the highest numeric suffix in use.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

from .models import Entity, to_number
from .store import BlobStore

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")


def suffix_of(entity_id: Any) -> int:
    """
    Numeric part of an id: every non‑digit is stripped.

    >>> suffix_of("XBX-150")
    150
    >>> suffix_of("junk")
    0
    """
    digits = _NON_DIGITS.sub("", str(entity_id or ""))
    return int(digits) if digits else 0


def compute_next_id(entities: Iterable[Entity], floor: int) -> int:
    """
    Return a suffix strictly greater than every suffix in *entities*, never below *floor*.

    >>> compute_next_id([], 101)
    101
    """
    observed = max((suffix_of(e.id) for e in entities), default=0)
    return max(floor - 1, observed) + 1


def parse_counter(raw: Any) -> int:
    """Stored / imported counter → int; anything non‑positive or non‑numeric is ``0``."""
    value = int(to_number(raw))
    return value if value > 0 else 0


class IdAllocator:
    """
    Store‑backed counter handing out ``"<prefix>-<n>"`` ids.

    Parameters
    ----------
    store : BlobStore
        Where the counter is persisted (as a decimal string).
    key : str
        Store key, e.g. ``"nextId"``.
    prefix : str
        Id prefix, e.g. ``"XBX"``.
    floor : int
        Lowest suffix ever handed out.
    """

    def __init__(self, store: BlobStore, key: str, prefix: str, floor: int) -> None:
        self._store = store
        self.key = key
        self.prefix = prefix
        self.floor = floor
        self._next = floor

    # ------------------------------------------------------------------
    # Seeding / repair
    # ------------------------------------------------------------------
    def seed(self, entities: Iterable[Entity], raw: Optional[Any] = None) -> int:
        """
        Set the counter from *raw* (stored or imported value) when usable.

        *raw* is rejected, and the counter recomputed from *entities*, when
        it is absent, non‑positive, or not above the highest suffix in use.
        The resulting value is persisted.
        """
        entities = list(entities)
        minimum = compute_next_id(entities, self.floor)
        value = parse_counter(raw)
        if value <= 0:
            value = minimum
        elif value < minimum:
            logger.warning("%s counter %d is stale; using %d", self.prefix, value, minimum)
            value = minimum
        self._set(value)
        return value

    def recalculate(self, entities: Iterable[Entity]) -> int:
        """Explicit "recalc next id" action: max existing suffix + 1 (not below floor)."""
        value = compute_next_id(entities, self.floor)
        self._set(value)
        logger.info("%s counter recalculated to %d", self.prefix, value)
        return value

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def next(self) -> int:
        return self._next

    def peek(self) -> str:
        """The id :meth:`allocate` would return next."""
        return f"{self.prefix}-{self._next}"

    def allocate(self) -> str:
        """Return a fresh id and advance the persisted counter by exactly one."""
        new_id = self.peek()
        self._set(self._next + 1)
        return new_id

    def _set(self, value: int) -> None:
        self._next = value
        self._store.set(self.key, str(value))
