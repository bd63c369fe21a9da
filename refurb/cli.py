"""
refurb.cli
==========

Command‑line front end.

Examples
--------
$ refurb unit add --version 1.0 --condition "no power" --cost 45
$ refurb unit toggle XBX-101 recap
$ refurb unit delete XBX-101          # asks for confirmation
$ refurb unit undo
$ refurb week add --week 2025-W35 --started 10 --completed 4 --revived 3 --parted 1
$ refurb summary
$ refurb export json
$ refurb export csv units
$ refurb import refurb-backup-2025-09-01.json
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from . import __version__
from .backup import BackupError, backup_filename, csv_filename, load_json, save_csv, save_json
from .db import SQLiteStore, make_engine
from .models import Controller, Entity, Unit
from .scorecard import format_pct
from .settings import settings
from .tracker import Tracker
from .views import format_money, inventory_summary, status_counts

logger = logging.getLogger(__name__)

_KINDS: Dict[str, Type[Entity]] = {"unit": Unit, "controller": Controller}


# ---------------------------------------------------------------------
# Entity commands
# ---------------------------------------------------------------------
def _entity_fields(args: argparse.Namespace, entity_cls: Type[Entity]) -> Dict[str, Any]:
    """Collect the options that were actually given."""
    names = ["condition", "status", "notes", "parts", "cost", "sale", entity_cls.LABEL_FIELD]
    return {n: getattr(args, n) for n in names if getattr(args, n, None) is not None}


def _print_entities(entities: List[Entity], entity_cls: Type[Entity]) -> None:
    if not entities:
        print(f"No {entity_cls.KIND} yet.")
        return
    for e in entities:
        print(
            f"{e.id:<10} {e.label or '-':<12} {e.status:<14} "
            f"cost ${format_money(e.cost):>8}  sale ${format_money(e.sale):>8}  "
            f"profit ${format_money(e.profit):>8}  {e.checklist_pct:>3}%"
        )


def cmd_add(tracker: Tracker, args: argparse.Namespace) -> int:
    inv = tracker.inventory(args.entity_cls.KIND)
    ent = inv.create(**_entity_fields(args, args.entity_cls))
    print(f"Added {ent.id}")
    return 0


def cmd_update(tracker: Tracker, args: argparse.Namespace) -> int:
    inv = tracker.inventory(args.entity_cls.KIND)
    inv.update(args.id, **_entity_fields(args, args.entity_cls))
    return 0


def cmd_delete(tracker: Tracker, args: argparse.Namespace) -> int:
    inv = tracker.inventory(args.entity_cls.KIND)
    if not args.yes:
        answer = input(f"Delete {args.id}? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted.")
            return 1
    if inv.delete(args.id) is not None:
        print(f"Deleted {args.id} (undo available)")
    return 0


def cmd_undo(tracker: Tracker, args: argparse.Namespace) -> int:
    ent = tracker.inventory(args.entity_cls.KIND).undo_delete()
    print(f"Restored {ent.id}" if ent else "Nothing to undo.")
    return 0


def cmd_toggle(tracker: Tracker, args: argparse.Namespace) -> int:
    ent = tracker.inventory(args.entity_cls.KIND).toggle_task(args.id, args.task)
    if ent is not None:
        state = "done" if ent.tasks[args.task] else "not done"
        print(f"{ent.id}: {args.entity_cls.TASKS[args.task]} → {state} ({ent.checklist_pct}%)")
    return 0


def cmd_list(tracker: Tracker, args: argparse.Namespace) -> int:
    _print_entities(list(tracker.inventory(args.entity_cls.KIND)), args.entity_cls)
    return 0


def cmd_checklist(tracker: Tracker, args: argparse.Namespace) -> int:
    ent = tracker.inventory(args.entity_cls.KIND).get(args.id)
    if ent is None:
        print(f"{args.id} not found.")
        return 1
    for key, label in args.entity_cls.TASKS.items():
        print(f"[{'x' if ent.tasks.get(key) else ' '}] {key:<20} {label}")
    print(f"{ent.checklist_pct}% complete")
    return 0


def cmd_recalc(tracker: Tracker, args: argparse.Namespace) -> int:
    inv = tracker.inventory(args.entity_cls.KIND)
    inv.recalc_next_id()
    print(f"Next ID: {inv.allocator.peek()}")
    return 0


# ---------------------------------------------------------------------
# Scorecard / summary
# ---------------------------------------------------------------------
_WEEK_OPTIONS = {
    "started": "units_started",
    "completed": "units_completed",
    "hours": "avg_hours",
    "revived": "revived",
    "parted": "parted",
    "listed": "units_listed",
    "sold": "units_sold",
    "days": "avg_days",
    "price": "avg_price",
}


def cmd_week_add(tracker: Tracker, args: argparse.Namespace) -> int:
    counters = {field: getattr(args, opt) for opt, field in _WEEK_OPTIONS.items()}
    wk = tracker.scorecard.add_week(args.week or "", **counters)
    print(f"Logged {wk.week}: completion {format_pct(wk.completion_rate)}, success {format_pct(wk.success_rate)}")
    return 0


def cmd_week_list(tracker: Tracker, args: argparse.Namespace) -> int:
    if not len(tracker.scorecard):
        print("No scorecard data yet.")
        return 0
    for w in tracker.scorecard:
        print(
            f"{w.week:<12} started {w.units_started:>3}  completed {w.units_completed:>3} "
            f"({format_pct(w.completion_rate):>6})  revived {w.revived:>3}  parted {w.parted:>3} "
            f"({format_pct(w.success_rate):>6})  listed {w.units_listed:>3}  sold {w.units_sold:>3}  "
            f"hours {w.avg_hours:.1f}  days {w.avg_days:.1f}  price ${w.avg_price:.2f}"
        )
    return 0


def cmd_summary(tracker: Tracker, args: argparse.Namespace) -> int:
    for entity_cls in (Unit, Controller):
        inv = tracker.inventory(entity_cls.KIND)
        s = inventory_summary(inv)
        print(
            f"{entity_cls.KIND.title()}: {s['total']} total, {s['ready_to_sell']} ready to sell, "
            f"{s['sold']} sold, profit ${format_money(s['total_profit'])}  (next {inv.allocator.peek()})"
        )
        counts = status_counts(inv, entity_cls.STATUSES)
        print("  " + ", ".join(f"{k}: {v}" for k, v in counts.items() if v))
    kpi = tracker.scorecard.summary()
    print(
        f"Scorecard: {kpi['weeks_logged']} weeks, {kpi['units_sold']} sold, "
        f"avg hours/unit {kpi['avg_hours']:.1f}, avg sale price ${kpi['avg_price']:.1f}"
    )
    return 0


# ---------------------------------------------------------------------
# Backup / chart
# ---------------------------------------------------------------------
def cmd_export_json(tracker: Tracker, args: argparse.Namespace) -> int:
    out = save_json(tracker, args.out or settings.export_dir / backup_filename())
    print(f"Wrote {out}")
    return 0


def cmd_export_csv(tracker: Tracker, args: argparse.Namespace) -> int:
    entity_cls = _KINDS[args.kind]
    out = args.out or settings.export_dir / csv_filename(entity_cls.KIND)
    out = save_csv(tracker.inventory(entity_cls.KIND), entity_cls, out)
    print(f"Wrote {out}")
    return 0


def cmd_import(tracker: Tracker, args: argparse.Namespace) -> int:
    try:
        load_json(tracker, args.path)
    except (BackupError, OSError) as exc:
        logger.error("import of %s failed: %s", args.path, exc)
        print("Import failed: invalid file.", file=sys.stderr)
        return 1
    print("Import complete ✅")
    return 0


def cmd_chart(tracker: Tracker, args: argparse.Namespace) -> int:
    import matplotlib

    matplotlib.use("Agg")  # file output only, no display needed
    from .viz import status_summary  # matplotlib only when asked for

    entity_cls = _KINDS[args.kind]
    out = status_summary(
        tracker.inventory(entity_cls.KIND),
        entity_cls.STATUSES,
        out_path=args.out or settings.image_dir / f"{entity_cls.KIND}_status.png",
        title=f"{entity_cls.KIND.title()} by Status",
    )
    print(f"Wrote {out}")
    return 0


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------
def _add_field_options(p: argparse.ArgumentParser, entity_cls: Type[Entity]) -> None:
    p.add_argument(f"--{entity_cls.LABEL_FIELD}", dest=entity_cls.LABEL_FIELD)
    p.add_argument("--condition")
    p.add_argument("--status", choices=[s.value for s in entity_cls.STATUSES])
    p.add_argument("--notes")
    p.add_argument("--parts")
    # kept as text: non-numeric amounts are coerced to 0 by the model
    p.add_argument("--cost")
    p.add_argument("--sale")


def _add_entity_parser(sub, name: str, entity_cls: Type[Entity]) -> None:
    p = sub.add_parser(name, help=f"manage {entity_cls.KIND}")
    p.set_defaults(entity_cls=entity_cls)
    actions = p.add_subparsers(dest="action", required=True)

    a = actions.add_parser("add", help=f"add a {name}")
    _add_field_options(a, entity_cls)
    a.set_defaults(func=cmd_add)

    u = actions.add_parser("update", help=f"edit a {name}")
    u.add_argument("id")
    _add_field_options(u, entity_cls)
    u.set_defaults(func=cmd_update)

    d = actions.add_parser("delete", help=f"delete a {name} (undoable once)")
    d.add_argument("id")
    d.add_argument("-y", "--yes", action="store_true", help="skip the confirmation prompt")
    d.set_defaults(func=cmd_delete)

    actions.add_parser("undo", help="restore the last deleted entry").set_defaults(func=cmd_undo)

    t = actions.add_parser("toggle", help="flip one checklist item")
    t.add_argument("id")
    t.add_argument("task", choices=list(entity_cls.TASKS))
    t.set_defaults(func=cmd_toggle)

    c = actions.add_parser("checklist", help="show the checklist")
    c.add_argument("id")
    c.set_defaults(func=cmd_checklist)

    actions.add_parser("list", help=f"list {entity_cls.KIND}").set_defaults(func=cmd_list)
    actions.add_parser("recalc-id", help="set next id = max existing + 1").set_defaults(func=cmd_recalc)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refurb",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Refurb tracker
            --------------
            Console / controller intake‑to‑sale tracking, repair
            checklists, weekly scorecard and JSON/CSV backups.
            """
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--db", type=Path, help=f"SQLite file (default {settings.db_file})")
    parser.add_argument("-v", "--verbose", action="store_true", help="log at INFO level")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, entity_cls in _KINDS.items():
        _add_entity_parser(sub, name, entity_cls)

    wk = sub.add_parser("week", help="weekly scorecard")
    wk_actions = wk.add_subparsers(dest="action", required=True)
    wa = wk_actions.add_parser("add", help="log a week")
    wa.add_argument("--week", help="label, e.g. 2025-W35 (default 'Week <n>')")
    for opt in _WEEK_OPTIONS:
        wa.add_argument(f"--{opt}", default=0)
    wa.set_defaults(func=cmd_week_add)
    wk_actions.add_parser("list", help="show logged weeks").set_defaults(func=cmd_week_list)

    sub.add_parser("summary", help="totals, status counts and scorecard KPIs").set_defaults(func=cmd_summary)

    ex = sub.add_parser("export", help="write a JSON backup or a CSV")
    ex_actions = ex.add_subparsers(dest="format", required=True)
    ej = ex_actions.add_parser("json")
    ej.add_argument("--out", type=Path)
    ej.set_defaults(func=cmd_export_json)
    ec = ex_actions.add_parser("csv")
    ec.add_argument("kind", choices=list(_KINDS))
    ec.add_argument("--out", type=Path)
    ec.set_defaults(func=cmd_export_csv)

    im = sub.add_parser("import", help="replace all data from a JSON backup")
    im.add_argument("path", type=Path)
    im.set_defaults(func=cmd_import)

    ch = sub.add_parser("chart", help="status bar chart (PNG)")
    ch.add_argument("kind", choices=list(_KINDS), nargs="?", default="unit")
    ch.add_argument("--out", type=Path)
    ch.set_defaults(func=cmd_chart)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    db_file = args.db or settings.db_file
    with SQLiteStore(bind=make_engine(db_file, echo=settings.db_echo)) as store:
        tracker = Tracker.open(store)
        return args.func(tracker, args)


if __name__ == "__main__":
    sys.exit(main())
