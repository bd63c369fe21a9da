"""
refurb.backup
=============

Backup / restore of the whole tracker state.

* JSON backup – ``{"units", "controllers", "weeks", "nextId",
  "nextControllerId"}``, indented for humans.
* CSV export – one row per entity, fixed column order per entity type.
* JSON import – full replacement (never a merge).  A document that cannot
  be parsed raises :class:`BackupError` before anything is touched.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Type

from .models import Controller, Entity, Unit
from .scorecard import weeks_from_list
from .views import format_money

logger = logging.getLogger(__name__)


class BackupError(ValueError):
    """Raised when an import document is not a readable backup."""


# ---------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------
def backup_filename(day: Optional[date] = None) -> str:
    """``refurb-backup-YYYY-MM-DD.json``"""
    return f"refurb-backup-{(day or date.today()).isoformat()}.json"


def csv_filename(kind: str, day: Optional[date] = None) -> str:
    """``<kind>-YYYY-MM-DD.csv``"""
    return f"{kind}-{(day or date.today()).isoformat()}.csv"


# ---------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------
def export_payload(tracker) -> Dict[str, Any]:
    return {
        "units": [u.to_dict() for u in tracker.units],
        "controllers": [c.to_dict() for c in tracker.controllers],
        "weeks": [w.to_dict() for w in tracker.scorecard],
        "nextId": tracker.units.allocator.next,
        "nextControllerId": tracker.controllers.allocator.next,
    }


def export_json(tracker) -> str:
    """Serialize the full tracker state as an indented JSON document."""
    return json.dumps(export_payload(tracker), indent=2)


# ---------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------
def csv_header(entity_cls: Type[Entity]) -> list[str]:
    return ["id", entity_cls.LABEL_FIELD, "condition", "status", "notes", "parts",
            "cost", "sale", "profit", "checklist_pct"]


def _one_line(text: str) -> str:
    return text.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")


def export_csv(entities: Iterable[Entity], entity_cls: Type[Entity]) -> str:
    """
    Project *entities* to CSV.

    Newlines in notes/parts become spaces; fields holding a comma or a
    quote are quoted with doubled inner quotes; money has two decimals.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(csv_header(entity_cls))
    for e in entities:
        writer.writerow([
            e.id,
            e.label,
            e.condition,
            e.status,
            _one_line(e.notes),
            _one_line(e.parts),
            format_money(e.cost),
            format_money(e.sale),
            format_money(e.profit),
            f"{e.checklist_pct}%",
        ])
    return buf.getvalue()


# ---------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------
def _array(data: Dict[str, Any], key: str) -> list:
    value = data.get(key)
    return value if isinstance(value, list) else []


def import_json(tracker, text: str | bytes) -> None:
    """
    Replace *tracker* state with the backup document *text*.

    Non‑array collections are treated as empty.  A counter is kept when it
    is positive and ahead of every imported id, otherwise it is recomputed.
    Raise :class:`BackupError` (state untouched) on malformed JSON or a
    document that is not a JSON object.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise BackupError(f"invalid backup file: {exc}") from exc
    if not isinstance(data, dict):
        raise BackupError("invalid backup file: expected a JSON object")

    # build everything before touching the tracker
    units = [Unit.from_dict(d) for d in _array(data, "units") if isinstance(d, dict)]
    controllers = [Controller.from_dict(d) for d in _array(data, "controllers") if isinstance(d, dict)]
    weeks = weeks_from_list(data.get("weeks"))

    tracker.units.replace_all(units, data.get("nextId"))
    tracker.controllers.replace_all(controllers, data.get("nextControllerId"))
    tracker.scorecard.replace_all(weeks)
    logger.info(
        "imported %d units, %d controllers, %d weeks",
        len(units), len(controllers), len(weeks),
    )


# ---------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------
def save_json(tracker, out_path: str | Path) -> Path:
    out_path = Path(out_path)
    out_path.write_text(export_json(tracker), encoding="utf-8")
    return out_path


def save_csv(entities: Iterable[Entity], entity_cls: Type[Entity], out_path: str | Path) -> Path:
    out_path = Path(out_path)
    out_path.write_text(export_csv(entities, entity_cls), encoding="utf-8", newline="")
    return out_path


def load_json(tracker, in_path: str | Path) -> None:
    """Import from a file; unreadable bytes count as a malformed backup."""
    try:
        text = Path(in_path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise BackupError(f"invalid backup file: {exc}") from exc
    import_json(tracker, text)
