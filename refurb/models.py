"""
refurb.models
=============

Dataclasses and enums representing a tracked unit (console or controller)
and a weekly scorecard entry.  These objects are intentionally lightweight;
they carry **no** external‑library dependencies so that importing `refurb`
stays fast.

Persisted / exported documents use the same key names as the dataclass
fields for entities, and camelCase keys for scorecard weeks.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Mapping, Optional, Type

from .checklist import CONTROLLER_TASKS, UNIT_TASKS, completion_percent

logger = logging.getLogger(__name__)


class UnitStatus(str, Enum):
    """Ordered life‑cycle states for a console unit."""
    INTAKE = "Intake"
    DISASSEMBLED = "Disassembled"
    RECAPPED = "Recapped"
    NEEDS_PART = "Needs Part"
    READY_TO_SELL = "Ready to Sell"
    LISTED = "Listed"
    SOLD = "Sold"
    PARTED_OUT = "Parted Out"

    def __str__(self) -> str:        # persisted / displayed form
        return self.value


class ControllerStatus(str, Enum):
    """Ordered life‑cycle states for a controller."""
    INTAKE = "Intake"
    NEEDS_PART = "Needs Part"
    REFURB = "Refurb"
    READY_TO_SELL = "Ready to Sell"
    LISTED = "Listed"
    SOLD = "Sold"
    PARTED_OUT = "Parted Out"

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------
def to_number(value: Any) -> float:
    """Coerce *value* to a finite float; anything else becomes ``0.0``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


# ---------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------
@dataclass
class Entity:
    """
    Shared shape of every tracked item.

    Parameters
    ----------
    id : str
        ``"<PREFIX>-<N>"``; assigned by :class:`refurb.allocator.IdAllocator`
        and never changed afterwards.  Imported records without one get ``""``.
    condition : str
        Condition on arrival.
    status : str
        One of the subclass' ``STATUSES`` values (imported data may carry
        other strings; they are kept verbatim).
    notes, parts : str
        Free text.
    cost, sale : float
        Currency amounts; non‑numeric input is coerced to ``0``.
    tasks : dict[str, bool]
        Checklist state; missing keys read as ``False``.
    """
    id: str = ""
    condition: str = ""
    status: str = "Intake"
    notes: str = ""
    parts: str = ""
    cost: float = 0.0
    sale: float = 0.0
    tasks: Dict[str, bool] = field(default_factory=dict)

    # Per-type configuration, overridden by subclasses
    KIND: ClassVar[str] = "entities"
    LABEL_FIELD: ClassVar[str] = ""
    STATUSES: ClassVar[Type[Enum]] = UnitStatus
    TASKS: ClassVar[Dict[str, str]] = {}
    # Fields a caller may set on create/update; everything else is ignored.
    UPDATABLE: ClassVar[FrozenSet[str]] = frozenset(
        {"condition", "status", "notes", "parts", "cost", "sale", "tasks"}
    )

    def __post_init__(self) -> None:
        self.id = _text(self.id)
        self.status = _text(self.status) or self.default_status()
        for name in ("condition", "notes", "parts"):
            setattr(self, name, _text(getattr(self, name)))
        if self.LABEL_FIELD:
            setattr(self, self.LABEL_FIELD, _text(getattr(self, self.LABEL_FIELD)))
        self.cost = to_number(self.cost)
        self.sale = to_number(self.sale)
        self.tasks = dict(self.tasks) if isinstance(self.tasks, Mapping) else {}

    # Convenience helpers -------------------------------------------------
    @classmethod
    def default_status(cls) -> str:
        return next(iter(cls.STATUSES)).value

    @property
    def profit(self) -> float:
        """``sale - cost``; may be negative."""
        return self.sale - self.cost

    @property
    def checklist_pct(self) -> int:
        return completion_percent(self.tasks, self.TASKS)

    @property
    def label(self) -> str:
        """Version (units) or model (controllers)."""
        return getattr(self, self.LABEL_FIELD, "") if self.LABEL_FIELD else ""

    # Conversion ----------------------------------------------------------
    @classmethod
    def clean_fields(cls, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Keep only the updatable keys of *data*."""
        unknown = set(data) - cls.UPDATABLE
        if unknown:
            logger.debug("ignoring unknown %s fields: %s", cls.KIND, sorted(unknown))
        return {k: v for k, v in data.items() if k in cls.UPDATABLE}

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Entity":
        """Build an entity from a persisted / imported mapping; unknown keys are dropped."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class Unit(Entity):
    """A console unit (``XBX-<n>``)."""
    version: str = ""

    KIND: ClassVar[str] = "units"
    LABEL_FIELD: ClassVar[str] = "version"
    STATUSES: ClassVar[Type[Enum]] = UnitStatus
    TASKS: ClassVar[Dict[str, str]] = UNIT_TASKS
    UPDATABLE: ClassVar[FrozenSet[str]] = Entity.UPDATABLE | {"version"}


@dataclass
class Controller(Entity):
    """A controller (``CTL-<n>``)."""
    model: str = ""

    KIND: ClassVar[str] = "controllers"
    LABEL_FIELD: ClassVar[str] = "model"
    STATUSES: ClassVar[Type[Enum]] = ControllerStatus
    TASKS: ClassVar[Dict[str, str]] = CONTROLLER_TASKS
    UPDATABLE: ClassVar[FrozenSet[str]] = Entity.UPDATABLE | {"model"}


# ---------------------------------------------------------------------
# Scorecard
# ---------------------------------------------------------------------
# dataclass field → persisted key
_WEEK_KEYS = {
    "id": "id",
    "week": "week",
    "units_started": "unitsStarted",
    "units_completed": "unitsCompleted",
    "avg_hours": "avgHours",
    "revived": "revived",
    "parted": "parted",
    "units_listed": "unitsListed",
    "units_sold": "unitsSold",
    "avg_days": "avgDays",
    "avg_price": "avgPrice",
}
_COUNTERS = ("units_started", "units_completed", "revived", "parted", "units_listed", "units_sold")
_AVERAGES = ("avg_hours", "avg_days", "avg_price")


@dataclass(frozen=True)
class ScorecardWeek:
    """
    Raw counters for one reporting period.

    Rates are derived on read (:pyattr:`completion_rate`,
    :pyattr:`success_rate`) and never stored, so they cannot drift from
    the counters.
    """
    id: int
    week: str
    units_started: int = 0
    units_completed: int = 0
    avg_hours: float = 0.0
    revived: int = 0
    parted: int = 0
    units_listed: int = 0
    units_sold: int = 0
    avg_days: float = 0.0
    avg_price: float = 0.0

    def __post_init__(self) -> None:
        # frozen: coerce through object.__setattr__
        for name in _COUNTERS:
            object.__setattr__(self, name, int(to_number(getattr(self, name))))
        for name in _AVERAGES:
            object.__setattr__(self, name, to_number(getattr(self, name)))
        object.__setattr__(self, "id", int(to_number(self.id)))
        object.__setattr__(self, "week", _text(self.week))

    @property
    def completion_rate(self) -> float:
        """``units_completed / units_started * 100`` (0 when nothing started)."""
        if self.units_started <= 0:
            return 0.0
        return self.units_completed / self.units_started * 100

    @property
    def success_rate(self) -> float:
        """``revived / (revived + parted) * 100`` (0 when both are zero)."""
        attempts = self.revived + self.parted
        if attempts <= 0:
            return 0.0
        return self.revived / attempts * 100

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, name) for name, key in _WEEK_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], position: Optional[int] = None) -> "ScorecardWeek":
        """
        Build a week from its persisted form.

        *position* (1‑based) supplies the ``"Week <n>"`` label when the
        document carries none.
        """
        kwargs = {name: data[key] for name, key in _WEEK_KEYS.items() if key in data}
        if not kwargs.get("week"):
            kwargs["week"] = f"Week {position}" if position is not None else ""
        kwargs.setdefault("id", 0)
        return cls(**kwargs)
