"""
Trend Chart
===========
Line chart of the most recent mood scores.

trend_series() decides what gets plotted; render_trend_chart() only
draws. A single point is not a trend, so fewer than two entries yields
an empty series and no chart at all.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from moodsense.models.mood import MAX_SCALE, MIN_SCALE, MoodEntry

logger = logging.getLogger(__name__)

TREND_WINDOW = 7

_BACKGROUND = "#1E293B"
_LINE = "#5196F4"
_GRID = "#334155"
_LABEL = "#E2E8F0"


def trend_series(history: Sequence[MoodEntry], limit: int = TREND_WINDOW) -> list[int]:
    """Scales of the newest `limit` entries, oldest first.

    `history` is newest-first. Returns [] when there are fewer than two
    entries.
    """
    if len(history) < 2:
        return []
    recent = list(history[:limit])
    recent.reverse()
    return [entry.scale for entry in recent]


def render_trend_chart(series: Sequence[int], path: Path | str) -> Optional[Path]:
    """Draw `series` as a line chart PNG at `path`.

    Returns the written path, or None when the series is too short to
    plot.
    """
    if len(series) < 2:
        return None

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(6, 3.2))
    try:
        fig.patch.set_facecolor(_BACKGROUND)
        ax.set_facecolor(_BACKGROUND)

        xs = list(range(len(series)))
        ax.plot(xs, list(series), color=_LINE, linewidth=2, marker="o", markersize=6)

        ax.set_ylim(MIN_SCALE - 0.5, MAX_SCALE + 0.5)
        ax.set_yticks(range(MIN_SCALE, MAX_SCALE + 1))
        ax.set_xticks([])
        ax.grid(axis="y", color=_GRID, linewidth=1)
        ax.tick_params(colors=_LABEL)
        for spine in ax.spines.values():
            spine.set_visible(False)

        fig.tight_layout()
        fig.savefig(out, dpi=150, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)

    logger.debug("Rendered %d-point trend chart to %s", len(series), out)
    return out
