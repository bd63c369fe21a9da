"""
refurb.scorecard
================

Append‑only weekly productivity log.

Entries are immutable once logged.  Percentages and averages are always
recomputed from the raw counters at read time.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .models import ScorecardWeek
from .store import BlobStore

logger = logging.getLogger(__name__)


def format_pct(value: float) -> str:
    """
    One decimal place plus ``%``.

    >>> format_pct(40)
    '40.0%'
    """
    return f"{value:.1f}%"


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def load_weeks(store: BlobStore, key: str) -> List[ScorecardWeek]:
    raw = store.get(key)
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("stored %r is not valid JSON; starting empty", key)
        return []
    return weeks_from_list(data)


def weeks_from_list(data: Any) -> List[ScorecardWeek]:
    """Persisted / imported array → weeks; anything that is not an array is empty."""
    if not isinstance(data, list):
        return []
    return [
        ScorecardWeek.from_dict(item, position=i)
        for i, item in enumerate(data, start=1)
        if isinstance(item, dict)
    ]


class Scorecard:
    """
    Store‑backed list of :class:`~refurb.models.ScorecardWeek`.

    Example
    -------
    >>> from refurb.store import MemoryStore
    >>> sc = Scorecard(MemoryStore())
    >>> wk = sc.add_week(units_started=10, units_completed=4, revived=3, parted=1)
    >>> format_pct(wk.completion_rate), format_pct(wk.success_rate)
    ('40.0%', '75.0%')
    """

    def __init__(
        self,
        store: BlobStore,
        key: str = "scorecard",
        weeks: Optional[Iterable[ScorecardWeek]] = None,
    ) -> None:
        self._store = store
        self.key = key
        self._weeks: List[ScorecardWeek] = list(weeks or [])

    def _persist(self) -> None:
        self._store.set(self.key, json.dumps([w.to_dict() for w in self._weeks]))

    def _new_id(self) -> int:
        # creation timestamp in ms, bumped if two weeks land in the same ms
        now = time.time_ns() // 1_000_000
        last = max((w.id for w in self._weeks), default=0)
        return max(now, last + 1)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add_week(self, week: str = "", **counters: Any) -> ScorecardWeek:
        """
        Log one period.  *week* defaults to ``"Week <n>"``; counters are the
        :class:`ScorecardWeek` fields (``units_started``, ``avg_price``, ...).
        """
        entry = ScorecardWeek(
            id=self._new_id(),
            week=week or f"Week {len(self._weeks) + 1}",
            **counters,
        )
        self._weeks.append(entry)
        self._persist()
        logger.info("logged scorecard week %r", entry.week)
        return entry

    def replace_all(self, weeks: Iterable[ScorecardWeek]) -> None:
        self._weeks = list(weeks)
        self._persist()

    @property
    def weeks(self) -> List[ScorecardWeek]:
        return list(self._weeks)

    # Rolling figures ---------------------------------------------------
    def avg_hours(self) -> float:
        return _mean([w.avg_hours for w in self._weeks])

    def avg_price(self) -> float:
        return _mean([w.avg_price for w in self._weeks])

    def units_sold(self) -> int:
        return sum(w.units_sold for w in self._weeks)

    def units_listed(self) -> int:
        return sum(w.units_listed for w in self._weeks)

    def summary(self) -> Dict[str, Any]:
        """KPI block: weeks logged, units sold / listed, average hours and price."""
        return {
            "weeks_logged": len(self._weeks),
            "units_sold": self.units_sold(),
            "units_listed": self.units_listed(),
            "avg_hours": self.avg_hours(),
            "avg_price": self.avg_price(),
        }

    def __iter__(self) -> Iterator[ScorecardWeek]:
        return iter(list(self._weeks))

    def __len__(self) -> int:
        return len(self._weeks)
