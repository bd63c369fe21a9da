"""
refurb.checklist
================

Fixed repair checklists for consoles and controllers.

Each checklist is an *ordered* mapping ``key → label``.  Entities store a
``tasks`` dict of ``key → bool``; keys that are missing read as ``False``.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, Mapping

# ---------------------------------------------------------------------
# Checklists (order is display order)
# ---------------------------------------------------------------------
UNIT_TASKS: Dict[str, str] = {
    "intakePhotos": "Intake photos",
    "versionCheck": "Version check",
    "smokeCorrosionCheck": "Smoke / corrosion check",
    "clockCapRemoved": "Clock capacitor removed",
    "recap": "Recap",
    "traceRepair": "Trace repair",
    "thermalPaste": "Thermal paste",
    "fanService": "Fan service",
    "psuJackReflow": "PSU jack reflow",
    "hddHealthLock": "HDD health / lock check",
    "eepromBackup": "EEPROM backup",
    "dvdBelt": "DVD belt",
    "dvdLaserService": "DVD laser service",
    "dvdLube": "DVD lube",
    "portsClean": "Ports cleaned",
    "finalTest": "Final test",
    "listingPhotos": "Listing photos",
}

CONTROLLER_TASKS: Dict[str, str] = {
    "shellClean": "Shell cleaned (inside/out)",
    "cableTest": "Cable/Breakaway tested",
    "portFit": "Port fit & wiggle test",
    "stickL": "Left stick drift test",
    "stickR": "Right stick drift test",
    "buttonsABXY": "A/B/X/Y test",
    "dpad": "D-Pad test",
    "bumpers": "Black/White buttons test",
    "triggers": "Triggers analog test",
    "rumble": "Rumble motors test",
    "boardInspect": "Board inspect (cold joints)",
    "reflowFix": "Reflow small fixes",
    "stickCaps": "Stick caps replaced (if worn)",
    "lubeService": "Stick shaft lube/service",
    "finalTest": "Final QA (10-min play)",
    "listingPhotos": "Listing photos",
}


def default_tasks(keys: Iterable[str]) -> Dict[str, bool]:
    """Return an all‑``False`` task map for *keys*."""
    return {k: False for k in keys}


def completion_percent(tasks: Mapping[str, bool] | None, keys: Iterable[str]) -> int:
    """
    Percentage of checklist items done, rounded half‑up to an int.

    Only keys that belong to the checklist are counted, so stray keys in
    an imported task map cannot push the result past 100.  An empty
    checklist yields ``0``.

    >>> completion_percent({"a": True, "b": False}, ["a", "b"])
    50
    """
    keys = list(keys)
    if not keys:
        return 0
    tasks = tasks or {}
    done = sum(1 for k in keys if tasks.get(k))
    return math.floor(100 * done / len(keys) + 0.5)


def toggled(tasks: Mapping[str, bool] | None, keys: Iterable[str], key: str) -> Dict[str, bool]:
    """
    Return a new task map with *key* flipped.

    Missing keys are filled in as ``False`` first (read‑modify‑write
    against the current values).  Raise :class:`KeyError` if *key* is not
    part of the checklist.
    """
    keys = list(keys)
    if key not in keys:
        raise KeyError(key)
    merged = {**default_tasks(keys), **(tasks or {})}
    merged[key] = not merged[key]
    return merged
