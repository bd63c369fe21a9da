"""
refurb.viz
==========

Minimal plotting helpers used by the ``refurb chart`` command.  Importing
this module pulls in *matplotlib*, so the rest of the package never imports
it at module level.

Outputs are PNGs written to ``settings.image_dir`` (auto‑created if
needed).  Filenames can be overridden via keyword argument.
"""
from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Type

import matplotlib.pyplot as plt

from .models import Entity
from .settings import settings
from .views import status_counts


# ---------------------------------------------------------------------
# Bar chart of entity counts by status
# ---------------------------------------------------------------------
def status_summary(
    entities: Iterable[Entity],
    statuses: Type[Enum],
    out_path: Optional[str | os.PathLike] = None,
    title: str = "Status Snapshot",
) -> Path:
    """
    Generate a bar chart of how many entities are in each status.

    Parameters
    ----------
    entities : iterable of Entity
        Units or controllers.
    statuses : Enum class
        Ordered status set of the entity type (zero bars included).
    out_path : str or Path, default='<image_dir>/status_snapshot.png'
        Where to save the PNG.

    Returns
    -------
    pathlib.Path
        Final image path for convenience.
    """
    if out_path is None:
        out_path = settings.image_dir / "status_snapshot.png"
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    counts = status_counts(entities, statuses)
    xs, ys = list(counts), list(counts.values())

    plt.figure()
    bars = plt.bar(xs, ys, color="#2b9348", edgecolor="#333")
    # add counts on top of each bar
    for rect, cnt in zip(bars, ys):
        plt.text(rect.get_x() + rect.get_width() / 2,
                 cnt + 0.05,
                 str(cnt),
                 ha="center", va="bottom",
                 fontsize=8, color="#333")
    plt.grid(axis="y", linestyle=":", alpha=0.3)
    plt.xticks(rotation=30, ha="right")
    plt.title(title)
    plt.ylabel("Count")
    plt.tight_layout()

    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path
