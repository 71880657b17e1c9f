# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Equity curve chart.

Figures are created per call and returned to the caller, who owns them;
nothing here keeps a reference to a previously rendered chart. The
pyplot state machine is avoided so rendering is safe off the main thread.
"""

from __future__ import annotations

import io
from typing import Optional, Sequence

import numpy as np
from matplotlib.figure import Figure


def plot_equity_curves(curves: Sequence[np.ndarray],
                       title: Optional[str] = None,
                       max_legend_entries: int = 10) -> Figure:
    """Plot every curve against trade number.

    Args:
        curves: Equity curves in simulation order
        title: Optional chart title
        max_legend_entries: Legend is shown only for batches up to this size

    Returns:
        A new matplotlib Figure
    """
    fig = Figure(figsize=(10, 6))
    ax = fig.add_subplot(1, 1, 1)

    for idx, curve in enumerate(curves):
        ax.plot(np.arange(len(curve)), curve, lw=1, alpha=0.7, label=f"Simulation {idx + 1}")

    ax.set_xlabel("Trade Number")
    ax.set_ylabel("Equity")
    if title:
        ax.set_title(title)
    ax.grid(True, which='both', ls='--', lw=0.5, alpha=0.7)
    if 0 < len(curves) <= max_legend_entries:
        ax.legend(loc='upper left', fontsize='small')
    fig.tight_layout()
    return fig


def render_chart_png(curves: Sequence[np.ndarray],
                     title: Optional[str] = None,
                     dpi: int = 100) -> bytes:
    """Render the equity chart to PNG bytes."""
    fig = plot_equity_curves(curves, title=title)
    buffer = io.BytesIO()
    fig.savefig(buffer, format='png', dpi=dpi)
    return buffer.getvalue()
