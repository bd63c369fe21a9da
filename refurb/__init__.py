"""
Refurb
======

A small single‑user toolkit for tracking refurbished game consoles and
controllers from intake to sale: repair checklists, profit, a weekly
productivity scorecard, and JSON/CSV backups.

Import structure
----------------
`import refurb` is intentionally cheap: only the stdlib-based
sub‑modules are imported by default.  *sqlmodel* is only pulled in by
:pymod:`refurb.db` and *matplotlib* only by :pymod:`refurb.viz`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`refurb.models`      – ``Unit`` / ``Controller`` dataclasses, status enums, ``ScorecardWeek``
- :pymod:`refurb.checklist`   – fixed repair checklists + completion percentage
- :pymod:`refurb.allocator`   – monotonic ``XBX-<n>`` id allocation
- :pymod:`refurb.inventory`   – ``Inventory`` create/update/delete/undo manager
- :pymod:`refurb.scorecard`   – append‑only weekly scorecard log
- :pymod:`refurb.views`       – status histogram, total profit, summary bar
- :pymod:`refurb.backup`      – JSON backup/restore + CSV export
- :pymod:`refurb.store`       – key/value blob store interface (+ in‑memory store)
- :pymod:`refurb.db`          – SQLite blob store (SQLModel)
- :pymod:`refurb.settings`    – `REFURB_` environment / .env settings
- :pymod:`refurb.tracker`     – ``Tracker`` process state root
- :pymod:`refurb.viz`         – status bar chart
- :pymod:`refurb.cli`         – `refurb` command‑line entry point

Quick start
-----------
>>> from refurb.store import MemoryStore
>>> from refurb.tracker import Tracker
>>> t = Tracker.open(MemoryStore())
>>> t.units.create(version="1.0", cost=50, sale=80).id
'XBX-101'
>>> t.units.create(version="1.4").id
'XBX-102'

"""

__all__ = [
    "models",
    "checklist",
    "allocator",
    "inventory",
    "scorecard",
    "views",
    "backup",
    "store",
    "db",
    "settings",
    "tracker",
    "viz",
    "cli",
]

__version__ = "0.1.0"
