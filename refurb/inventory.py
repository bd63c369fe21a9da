"""
refurb.inventory
================

Create / update / delete / undo over one collection of entities (units or
controllers), kept in sync with the blob store on every mutation.

All operations are synchronous and single‑threaded.  Unknown ids are
treated as no‑ops: the call returns ``None`` and nothing is written.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Iterator, List, Optional, Type, Union

from .allocator import IdAllocator
from .checklist import default_tasks, toggled
from .models import Entity
from .store import BlobStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Single‑slot deletion buffer: Empty | LastDeleted(entity)
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Empty:
    """Nothing to undo."""


@dataclass(frozen=True)
class LastDeleted:
    """The most recently deleted entity; overwritten by the next delete."""
    entity: Entity


DeletionSlot = Union[Empty, LastDeleted]
EMPTY = Empty()


def load_entities(store: BlobStore, key: str, entity_cls: Type[Entity]) -> List[Entity]:
    """Read a persisted JSON array of entities; unreadable or non‑array blobs load as empty."""
    raw = store.get(key)
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("stored %r is not valid JSON; starting empty", key)
        return []
    if not isinstance(data, list):
        return []
    return [entity_cls.from_dict(item) for item in data if isinstance(item, dict)]


def load_slot(store: BlobStore, key: str, entity_cls: Type[Entity]) -> DeletionSlot:
    """Read a persisted undo slot (an entity object or ``null``)."""
    raw = store.get(key)
    if not raw:
        return EMPTY
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("stored %r is not valid JSON; nothing to undo", key)
        return EMPTY
    return LastDeleted(entity_cls.from_dict(data)) if isinstance(data, dict) else EMPTY


def tracked_entities(entities: Iterable[Entity], slot: DeletionSlot) -> List[Entity]:
    """Collection plus the entity waiting in the undo slot; ids must stay clear of both."""
    out = list(entities)
    if isinstance(slot, LastDeleted):
        out.append(slot.entity)
    return out


class Inventory:
    """
    List‑backed collection of one entity type.

    Example
    -------
    >>> from refurb.store import MemoryStore
    >>> from refurb.models import Unit
    >>> store = MemoryStore()
    >>> inv = Inventory(store, "units", Unit, IdAllocator(store, "nextId", "XBX", 101))
    >>> inv.create(version="1.0").id
    'XBX-101'
    >>> inv.delete("XBX-101").id
    'XBX-101'
    >>> len(inv), inv.undo_delete().id, len(inv)
    (0, 'XBX-101', 1)
    """

    def __init__(
        self,
        store: BlobStore,
        key: str,
        entity_cls: Type[Entity],
        allocator: IdAllocator,
        entities: Optional[Iterable[Entity]] = None,
        slot_key: Optional[str] = None,
        last_deleted: DeletionSlot = EMPTY,
    ) -> None:
        self._store = store
        self.key = key
        # without a slot key the undo slot lives in memory only
        self.slot_key = slot_key
        self.entity_cls = entity_cls
        self.allocator = allocator
        self._entities: List[Entity] = list(entities or [])
        self._slot: DeletionSlot = last_deleted

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _persist(self) -> None:
        payload = [e.to_dict() for e in self._entities]
        self._store.set(self.key, json.dumps(payload))

    def _set_slot(self, slot: DeletionSlot) -> None:
        self._slot = slot
        if self.slot_key:
            data = slot.entity.to_dict() if isinstance(slot, LastDeleted) else None
            self._store.set(self.slot_key, json.dumps(data))

    def _index(self, entity_id: str) -> Optional[int]:
        for i, ent in enumerate(self._entities):
            if ent.id == entity_id:
                return i
        return None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def create(self, **fields: Any) -> Entity:
        """
        Append a new entity with a freshly allocated id.

        The checklist starts all‑``False``; caller fields win, so a supplied
        ``tasks`` map replaces it wholesale.  Unknown fields (including
        ``id``) are ignored.
        """
        values: Dict[str, Any] = {"tasks": default_tasks(self.entity_cls.TASKS)}
        values.update(self.entity_cls.clean_fields(fields))
        ent = self.entity_cls(id=self.allocator.allocate(), **values)
        self._entities.append(ent)
        self._persist()
        logger.info("created %s", ent.id)
        return ent

    def update(self, entity_id: str, **fields: Any) -> Optional[Entity]:
        """
        Shallow‑merge *fields* into the entity with *entity_id*.

        ``tasks`` is replaced wholesale, not deep‑merged; use
        :meth:`toggle_task` for a single checklist item.
        """
        i = self._index(entity_id)
        if i is None:
            logger.debug("update: %s not found", entity_id)
            return None
        # replace() re-runs __post_init__, which coerces cost/sale/status
        ent = replace(self._entities[i], **self.entity_cls.clean_fields(fields))
        self._entities[i] = ent
        self._persist()
        return ent

    def delete(self, entity_id: str) -> Optional[Entity]:
        """Remove an entity, keeping it in the undo slot (replacing whatever was there)."""
        i = self._index(entity_id)
        if i is None:
            logger.debug("delete: %s not found", entity_id)
            return None
        ent = self._entities.pop(i)
        self._persist()
        self._set_slot(LastDeleted(ent))
        logger.info("deleted %s", ent.id)
        return ent

    def undo_delete(self) -> Optional[Entity]:
        """
        Re‑append the last deleted entity (at the end) and empty the slot.

        The counter is pushed past the restored suffix if it has fallen
        behind, so the restored id is never handed out again.
        """
        if not isinstance(self._slot, LastDeleted):
            return None
        ent = self._slot.entity
        self._set_slot(EMPTY)
        if self._index(ent.id) is not None:
            logger.warning("undo: %s is already in use; dropping the deleted copy", ent.id)
            return None
        self._entities.append(ent)
        self._persist()
        self.allocator.seed(self._entities, self.allocator.next)
        logger.info("restored %s", ent.id)
        return ent

    @property
    def can_undo(self) -> bool:
        return isinstance(self._slot, LastDeleted)

    @property
    def last_deleted(self) -> DeletionSlot:
        return self._slot

    def toggle_task(self, entity_id: str, key: str) -> Optional[Entity]:
        """Flip one checklist item (read‑modify‑write against the current map)."""
        ent = self.get(entity_id)
        if ent is None:
            logger.debug("toggle: %s not found", entity_id)
            return None
        return self.update(entity_id, tasks=toggled(ent.tasks, self.entity_cls.TASKS, key))

    # ------------------------------------------------------------------
    # Bulk / counter
    # ------------------------------------------------------------------
    def recalc_next_id(self) -> int:
        """Max suffix + 1 over the collection and the undo slot."""
        return self.allocator.recalculate(tracked_entities(self._entities, self._slot))

    def replace_all(self, entities: Iterable[Entity], next_id: Any = None) -> None:
        """Swap in a whole new collection (import), drop the undo slot and reseed the counter."""
        self._entities = list(entities)
        self._persist()
        self._set_slot(EMPTY)
        self.allocator.seed(self._entities, next_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, entity_id: str) -> Optional[Entity]:
        i = self._index(entity_id)
        return self._entities[i] if i is not None else None

    def find_by_status(self, status: Any) -> List[Entity]:
        """Return all entities currently at *status* (enum member or string)."""
        wanted = str(status)
        return [e for e in self._entities if e.status == wanted]

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities))

    def __len__(self) -> int:
        return len(self._entities)
