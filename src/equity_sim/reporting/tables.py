# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tabular views of a simulation batch for display and export.

Every frame here is built from the typed BatchResult values. Formatting
to strings happens only at the edge, in ``format_value`` and
``formatted`` frames, and never feeds back into computation.
"""

from __future__ import annotations

import math
from typing import Dict, List

import pandas as pd

from ..config import DISPLAY_DECIMAL_PLACES
from ..simulation import BatchResult, ParameterSet
from ..simulation.results import AggregateReport


def format_value(value: float, decimals: int = DISPLAY_DECIMAL_PLACES, inf_text: str = "∞") -> str:
    """Render a metric value, spelling out non-finite results."""
    if value is None:
        return "n/a"
    value = float(value)
    if math.isnan(value):
        return "n/a"
    if math.isinf(value):
        return inf_text if value > 0 else f"-{inf_text}"
    return f"{value:,.{decimals}f}"


def parameter_rows(params: ParameterSet) -> List[List[str]]:
    """Parameter/value pairs in input-form order, formatted for display."""
    rows = [
        ["Starting Equity", f"{params.starting_equity:,.2f}"],
        ["Number of Trades", str(params.num_trades)],
        ["Number of Simulations", str(params.num_simulations)],
        ["Win Rate", f"{params.win_rate * 100:.1f}%"],
        ["Reward/Risk Ratio", f"{params.reward_risk:g}"],
        ["Risk Type", params.risk_type.value],
        ["Risk Size", f"{params.risk_size * 100:.1f}%"],
        ["Use Martingale", "Yes" if params.use_martingale else "No"],
    ]
    if params.use_martingale:
        rows.append(["Martingale Multiplier", f"{params.martingale_multiplier:g}"])
        rows.append(["Martingale Reset", str(params.martingale_reset)])
    return rows


def parameters_frame(params: ParameterSet) -> pd.DataFrame:
    """Raw parameter values (fractions as fractions) for spreadsheets."""
    rows = [
        ("Starting Equity", params.starting_equity),
        ("Number of Trades", params.num_trades),
        ("Number of Simulations", params.num_simulations),
        ("Win Rate", params.win_rate),
        ("Reward/Risk Ratio", params.reward_risk),
        ("Risk Type", params.risk_type.value),
        ("Risk Size", params.risk_size),
        ("Use Martingale", "Yes" if params.use_martingale else "No"),
        ("Martingale Multiplier", params.martingale_multiplier),
        ("Martingale Reset", params.martingale_reset),
    ]
    return pd.DataFrame(rows, columns=["Parameter", "Value"])


def summary_frame(report: AggregateReport) -> pd.DataFrame:
    return report.to_frame()


def results_frame(batch: BatchResult) -> pd.DataFrame:
    return batch.metrics_frame()


def formatted(df: pd.DataFrame, decimals: int = DISPLAY_DECIMAL_PLACES, inf_text: str = "∞") -> pd.DataFrame:
    """Copy of a numeric frame with every cell rendered by ``format_value``."""
    return df.apply(lambda col: col.map(lambda v: format_value(v, decimals, inf_text)))


def stat_cards(report: AggregateReport, decimals: int = DISPLAY_DECIMAL_PLACES) -> Dict[str, Dict[str, str]]:
    """Summary cards keyed by metric label: {'Avg': ..., 'Min': ..., 'Max': ...}."""
    cards = {}
    for label, row in report.to_frame().iterrows():
        cards[label] = {
            'Avg': format_value(row['Average'], decimals),
            'Min': format_value(row['Minimum'], decimals),
            'Max': format_value(row['Maximum'], decimals),
        }
    return cards
