"""
refurb.tracker
==============

Process‑wide state root.

:meth:`Tracker.open` loads every blob from a :class:`refurb.store.BlobStore`
and seeds the id counters; from then on each mutation writes the affected
blob straight back.  There is no teardown: the store keeps the last write.
"""

from __future__ import annotations

import logging
from typing import Optional, Type

from .allocator import IdAllocator
from .inventory import Inventory, load_entities, load_slot, tracked_entities
from .models import Controller, Entity, Unit
from .scorecard import Scorecard, load_weeks
from .settings import Settings, settings as default_settings
from .store import BlobStore

logger = logging.getLogger(__name__)

# Store keys
UNITS_KEY = "units"
CONTROLLERS_KEY = "controllers"
SCORECARD_KEY = "scorecard"
NEXT_UNIT_KEY = "nextId"
NEXT_CONTROLLER_KEY = "nextControllerId"
UNIT_SLOT_KEY = "lastDeleted"
CONTROLLER_SLOT_KEY = "lastDeletedController"


def _open_inventory(
    store: BlobStore,
    entity_cls: Type[Entity],
    key: str,
    slot_key: str,
    counter_key: str,
    prefix: str,
    floor: int,
) -> Inventory:
    entities = load_entities(store, key, entity_cls)
    slot = load_slot(store, slot_key, entity_cls)
    ids = IdAllocator(store, counter_key, prefix, floor)
    ids.seed(tracked_entities(entities, slot), store.get(counter_key))
    return Inventory(store, key, entity_cls, ids, entities, slot_key=slot_key, last_deleted=slot)


class Tracker:
    """
    Units, controllers and the scorecard, all bound to one store.

    Attributes
    ----------
    units : Inventory
        Console units (``XBX-<n>``).
    controllers : Inventory
        Controllers (``CTL-<n>``).
    scorecard : Scorecard
        Weekly log.
    """

    def __init__(self, store: BlobStore, units: Inventory, controllers: Inventory, scorecard: Scorecard) -> None:
        self.store = store
        self.units = units
        self.controllers = controllers
        self.scorecard = scorecard

    @classmethod
    def open(cls, store: BlobStore, config: Optional[Settings] = None) -> "Tracker":
        """
        Load state from *store*.

        Counters are seeded from the stored value or recomputed; either way
        they stay above every suffix in the collection and its undo slot.
        """
        config = config or default_settings

        tracker = cls(
            store,
            _open_inventory(store, Unit, UNITS_KEY, UNIT_SLOT_KEY, NEXT_UNIT_KEY,
                            config.unit_prefix, config.unit_id_floor),
            _open_inventory(store, Controller, CONTROLLERS_KEY, CONTROLLER_SLOT_KEY, NEXT_CONTROLLER_KEY,
                            config.controller_prefix, config.controller_id_floor),
            Scorecard(store, SCORECARD_KEY, load_weeks(store, SCORECARD_KEY)),
        )
        logger.info(
            "opened tracker: %d units, %d controllers, %d weeks",
            len(tracker.units), len(tracker.controllers), len(tracker.scorecard),
        )
        return tracker

    def inventory(self, kind: str) -> Inventory:
        """``"units"`` or ``"controllers"`` → the matching :class:`Inventory`."""
        if kind == UNITS_KEY:
            return self.units
        if kind == CONTROLLERS_KEY:
            return self.controllers
        raise ValueError(f"unknown collection {kind!r}")
