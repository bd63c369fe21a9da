"""
refurb.store
============

Key/value blob store used for all persisted state.

Every key holds one whole string value (a JSON document or a decimal
counter).  Reads and writes are synchronous and whole‑value; there are no
partial updates and no transactions spanning keys.

Concrete stores:

* :class:`MemoryStore` – dict backed, handy for tests and scratch work
* :class:`refurb.db.SQLiteStore` – persistent, SQLModel backed
"""

from __future__ import annotations

__all__ = ["BlobStore", "MemoryStore"]

from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional


class BlobStore(ABC):
    """
    Abstract base for all blob stores.

    Concrete subclasses implement :meth:`get` and :meth:`set`.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or ``None`` if *key* was never written."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the value stored under *key*."""


class MemoryStore(BlobStore):
    """
    Dictionary‑backed store.

    Example
    -------
    >>> s = MemoryStore({"nextId": "105"})
    >>> s.get("nextId")
    '105'
    >>> s.get("units") is None
    True
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._blobs: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value

    # ------------------------------------------------------ dunder helpers
    def __iter__(self) -> Iterator[str]:
        return iter(self._blobs)

    def __contains__(self, key: object) -> bool:
        return key in self._blobs
