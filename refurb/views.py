"""
refurb.views
============

Pure aggregations over an entity collection, recomputed on every call.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Dict, Iterable, Type

from .models import Entity, UnitStatus


def status_histogram(entities: Iterable[Entity]) -> Dict[str, int]:
    """
    Count entities per status, in first‑seen order.

    >>> from refurb.models import Unit
    >>> status_histogram([Unit("a", status="Sold"), Unit("b", status="Sold"), Unit("c")])
    {'Sold': 2, 'Intake': 1}
    """
    return dict(Counter(e.status for e in entities))


def status_counts(entities: Iterable[Entity], statuses: Type[Enum]) -> Dict[str, int]:
    """Like :func:`status_histogram` but ordered by *statuses* with zeroes filled in."""
    counts = status_histogram(entities)
    ordered = {s.value: counts.pop(s.value, 0) for s in statuses}
    # imported statuses outside the enum go last
    ordered.update(counts)
    return ordered


def total_profit(entities: Iterable[Entity]) -> float:
    """Sum of ``sale - cost`` over *entities*."""
    return sum(e.profit for e in entities)


def format_money(amount: float) -> str:
    """
    Two decimal places.

    >>> format_money(30)
    '30.00'
    """
    return f"{amount:.2f}"


def inventory_summary(entities: Iterable[Entity]) -> Dict[str, object]:
    """Summary bar: total, ready to sell, sold and total profit."""
    entities = list(entities)
    counts = status_histogram(entities)
    return {
        "total": len(entities),
        "ready_to_sell": counts.get(UnitStatus.READY_TO_SELL.value, 0),
        "sold": counts.get(UnitStatus.SOLD.value, 0),
        "total_profit": total_profit(entities),
    }
