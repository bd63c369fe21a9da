"""
tests/test_inventory.py
=======================

Unit tests for refurb.inventory.Inventory
"""

import json

import pytest

from refurb.allocator import IdAllocator
from refurb.checklist import UNIT_TASKS
from refurb.inventory import EMPTY, Empty, Inventory, LastDeleted, load_entities, load_slot, tracked_entities
from refurb.models import Unit, UnitStatus
from refurb.store import MemoryStore


def _inventory(store=None):
    store = store or MemoryStore()
    ids = IdAllocator(store, "nextId", "XBX", 101)
    ids.seed([])
    return Inventory(store, "units", Unit, ids)


def _demo_inventory():
    inv = _inventory()
    inv.create(version="1.0", cost=50, sale=80)
    inv.create(version="1.4", status=UnitStatus.SOLD)
    inv.create(version="1.6", status="Needs Part")
    return inv


def test_create_assigns_sequential_ids():
    inv = _demo_inventory()
    assert [u.id for u in inv] == ["XBX-101", "XBX-102", "XBX-103"]


def test_create_initialises_checklist():
    ent = _inventory().create(version="1.0")
    assert set(ent.tasks) == set(UNIT_TASKS)
    assert not any(ent.tasks.values())


def test_create_caller_tasks_replace_default():
    ent = _inventory().create(tasks={"recap": True})
    assert ent.tasks == {"recap": True}


def test_create_ignores_caller_id_and_coerces_money():
    ent = _inventory().create(id="XBX-999", cost="abc", sale="12")
    assert ent.id == "XBX-101"
    assert ent.cost == 0.0
    assert ent.sale == 12.0


def test_create_persists():
    store = MemoryStore()
    inv = _inventory(store)
    inv.create(version="1.0")
    assert json.loads(store.get("units"))[0]["id"] == "XBX-101"
    assert store.get("nextId") == "102"


def test_update_merges_fields():
    inv = _demo_inventory()
    ent = inv.update("XBX-101", notes="recapped", sale="95")
    assert ent.notes == "recapped"
    assert ent.sale == 95.0
    assert ent.version == "1.0"
    assert inv.get("XBX-101") is ent


def test_update_replaces_tasks_wholesale():
    inv = _demo_inventory()
    inv.toggle_task("XBX-101", "recap")
    ent = inv.update("XBX-101", tasks={"finalTest": True})
    assert ent.tasks == {"finalTest": True}


def test_update_missing_is_noop():
    inv = _demo_inventory()
    assert inv.update("XBX-999", notes="x") is None
    assert len(inv) == 3


def test_update_cannot_change_id():
    inv = _demo_inventory()
    inv.update("XBX-101", id="XBX-500")
    assert inv.get("XBX-101") is not None
    assert inv.get("XBX-500") is None


def test_delete_then_undo_restores_same_entity():
    inv = _demo_inventory()
    before = inv.get("XBX-102")
    deleted = inv.delete("XBX-102")
    assert deleted == before
    assert inv.get("XBX-102") is None
    assert isinstance(inv.last_deleted, LastDeleted)

    restored = inv.undo_delete()
    assert restored == before
    # appended at the end, not at its old position
    assert [u.id for u in inv] == ["XBX-101", "XBX-103", "XBX-102"]
    assert isinstance(inv.last_deleted, Empty)


def test_second_undo_is_noop():
    inv = _demo_inventory()
    inv.delete("XBX-101")
    inv.undo_delete()
    assert inv.undo_delete() is None
    assert len(inv) == 3


def test_only_one_level_of_undo():
    inv = _demo_inventory()
    inv.delete("XBX-101")
    inv.delete("XBX-102")
    assert inv.undo_delete().id == "XBX-102"
    assert inv.undo_delete() is None
    assert inv.get("XBX-101") is None


def test_delete_missing_leaves_buffer():
    inv = _demo_inventory()
    inv.delete("XBX-101")
    assert inv.delete("XBX-999") is None
    assert inv.can_undo
    assert inv.undo_delete().id == "XBX-101"


def test_ids_never_reused_after_delete():
    inv = _demo_inventory()
    inv.delete("XBX-103")
    assert inv.create().id == "XBX-104"


def test_toggle_task_read_modify_write():
    inv = _inventory()
    inv.create(tasks={"recap": True})
    ent = inv.toggle_task("XBX-101", "finalTest")
    assert ent.tasks["recap"] is True
    assert ent.tasks["finalTest"] is True
    assert ent.tasks["dvdBelt"] is False
    assert inv.toggle_task("XBX-101", "finalTest").tasks["finalTest"] is False


def test_toggle_task_missing_id_and_unknown_key():
    inv = _demo_inventory()
    assert inv.toggle_task("XBX-999", "recap") is None
    with pytest.raises(KeyError):
        inv.toggle_task("XBX-101", "notATask")


def test_find_by_status():
    inv = _demo_inventory()
    sold = inv.find_by_status(UnitStatus.SOLD)
    assert [u.id for u in sold] == ["XBX-102"]
    assert len(inv.find_by_status("Needs Part")) == 1


def test_recalc_next_id():
    inv = _demo_inventory()
    inv.allocator.seed(list(inv), 500)
    assert inv.recalc_next_id() == 104
    assert inv.create().id == "XBX-104"


def test_load_entities_tolerates_bad_blobs():
    store = MemoryStore({"a": "not json", "b": '{"x": 1}', "c": '[{"id": "XBX-1"}, 5]'})
    assert load_entities(store, "a", Unit) == []
    assert load_entities(store, "b", Unit) == []
    assert load_entities(store, "missing", Unit) == []
    assert [u.id for u in load_entities(store, "c", Unit)] == ["XBX-1"]


def _persisted_inventory(store):
    ids = IdAllocator(store, "nextId", "XBX", 101)
    ids.seed([])
    return Inventory(store, "units", Unit, ids, slot_key="lastDeleted")


def test_recalc_then_undo_never_duplicates():
    inv = _demo_inventory()
    inv.delete("XBX-103")
    # the buffered XBX-103 still counts as in use
    assert inv.recalc_next_id() == 104
    assert inv.create().id == "XBX-104"
    assert inv.undo_delete().id == "XBX-103"
    ids = [u.id for u in inv]
    assert sorted(ids) == ["XBX-101", "XBX-102", "XBX-103", "XBX-104"]
    assert inv.create().id == "XBX-105"


def test_undo_advances_counter_past_restored_id():
    store = MemoryStore()
    ids = IdAllocator(store, "nextId", "XBX", 101)
    ids.seed([])
    slot = LastDeleted(Unit("XBX-150"))
    inv = Inventory(store, "units", Unit, ids, last_deleted=slot)
    assert inv.undo_delete().id == "XBX-150"
    assert inv.allocator.next == 151
    assert store.get("nextId") == "151"
    assert inv.create().id == "XBX-151"


def test_undo_drops_copy_when_id_is_taken():
    store = MemoryStore()
    ids = IdAllocator(store, "nextId", "XBX", 101)
    ids.seed([])
    slot = LastDeleted(Unit("XBX-101", notes="old"))
    inv = Inventory(store, "units", Unit, ids, [Unit("XBX-101")], last_deleted=slot)
    assert inv.undo_delete() is None
    assert [u.id for u in inv] == ["XBX-101"]
    assert inv.get("XBX-101").notes == ""
    assert not inv.can_undo


def test_replace_all_clears_undo_slot():
    inv = _demo_inventory()
    inv.delete("XBX-103")
    inv.replace_all([Unit("XBX-101")])
    assert inv.last_deleted is EMPTY
    assert inv.undo_delete() is None
    assert inv.create().id == "XBX-102"


def test_slot_is_persisted_under_its_key():
    store = MemoryStore()
    inv = _persisted_inventory(store)
    inv.create(version="1.0")
    inv.delete("XBX-101")
    assert json.loads(store.get("lastDeleted"))["id"] == "XBX-101"
    assert load_slot(store, "lastDeleted", Unit) == LastDeleted(inv.last_deleted.entity)

    inv.undo_delete()
    assert json.loads(store.get("lastDeleted")) is None
    assert load_slot(store, "lastDeleted", Unit) is EMPTY


def test_in_memory_slot_writes_nothing():
    store = MemoryStore()
    inv = _inventory(store)
    inv.create()
    inv.delete("XBX-101")
    assert store.get("lastDeleted") is None


def test_load_slot_tolerates_bad_blobs():
    store = MemoryStore({"a": "not json", "b": "[1]", "c": "null", "d": '{"version": "1.0"}'})
    assert load_slot(store, "a", Unit) is EMPTY
    assert load_slot(store, "b", Unit) is EMPTY
    assert load_slot(store, "c", Unit) is EMPTY
    assert load_slot(store, "missing", Unit) is EMPTY
    assert load_slot(store, "d", Unit).entity.id == ""


def test_load_entities_without_id():
    store = MemoryStore({"units": '[{"version": "1.0"}]'})
    [u] = load_entities(store, "units", Unit)
    assert (u.id, u.version) == ("", "1.0")


def test_tracked_entities_includes_slot():
    units = [Unit("XBX-101")]
    assert tracked_entities(units, EMPTY) == units
    assert [u.id for u in tracked_entities(units, LastDeleted(Unit("XBX-109")))] == ["XBX-101", "XBX-109"]
