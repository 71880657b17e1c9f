# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Per-curve performance and risk metrics.

All return-based metrics are computed from simple per-trade returns
``(equity[i] - equity[i-1]) / equity[i-1]``. Standard deviations are
population standard deviations (ddof=0).

Degenerate inputs produce non-finite values rather than errors:
profit factor is +inf with gains but no losses and NaN with neither;
Sharpe ratio is NaN and volatility is 0 when every return is the same
(up to rounding noise); every return-based metric is NaN for a curve
with no trades. Curves that pass through zero equity yield infinite
returns and propagate them without floating-point warnings.
"""

import math
from dataclasses import asdict, dataclass
from typing import ClassVar, Dict, Sequence, Tuple, Union

import numpy as np

from ..config import FLAT_RETURNS_RTOL, TRADING_DAYS_PER_YEAR

EquityLike = Union[np.ndarray, Sequence[float]]


@dataclass(frozen=True)
class Metrics:
    """Metrics for a single equity curve.

    Attributes:
        max_drawdown: Largest peak-to-trough decline, in percent
        sharpe_ratio: Mean over std of per-trade returns, annualized by sqrt(252)
        profit_factor: Sum of positive returns over |sum of negative returns|
        total_return: Final versus starting equity, in percent
        average_return: Mean per-trade return, in percent
        volatility: Population std of per-trade returns, in percent
    """
    FIELDS: ClassVar[Tuple[str, ...]] = (
        'max_drawdown',
        'sharpe_ratio',
        'profit_factor',
        'total_return',
        'average_return',
        'volatility',
    )

    max_drawdown: float
    sharpe_ratio: float
    profit_factor: float
    total_return: float
    average_return: float
    volatility: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


def trade_returns(equity: EquityLike) -> np.ndarray:
    """Simple returns between consecutive equity points."""
    eq = np.asarray(equity, dtype=np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.diff(eq) / eq[:-1]


def max_drawdown(equity: EquityLike) -> float:
    """Largest decline from the running peak, in percent (never negative).

    NaN when a peak is zero, since the decline has no relative size.
    """
    eq = np.asarray(equity, dtype=np.float64)
    if eq.size < 2:
        return 0.0
    peaks = np.maximum.accumulate(eq)
    with np.errstate(divide='ignore', invalid='ignore'):
        drawdowns = (peaks[1:] - eq[1:]) / peaks[1:] * 100
    worst = float(np.max(drawdowns))
    if math.isnan(worst):
        return worst
    return worst if worst > 0 else 0.0


def returns_are_flat(returns: np.ndarray) -> bool:
    """True when every return is the same value up to rounding noise."""
    if returns.size == 0:
        return False
    with np.errstate(invalid='ignore', over='ignore'):
        spread = float(np.ptp(returns))
        scale = max(abs(float(np.mean(returns))), 1.0)
    return spread <= FLAT_RETURNS_RTOL * scale


def sharpe_ratio(returns: np.ndarray) -> float:
    if returns.size == 0 or returns_are_flat(returns):
        return math.nan
    with np.errstate(invalid='ignore', over='ignore'):
        std = float(np.std(returns))
        mean = float(np.mean(returns))
    if std == 0 or math.isnan(std):
        return math.nan
    return mean / std * math.sqrt(TRADING_DAYS_PER_YEAR)


def profit_factor(returns: np.ndarray) -> float:
    with np.errstate(invalid='ignore'):
        gains = float(returns[returns > 0].sum())
        losses = abs(float(returns[returns < 0].sum()))
    if losses == 0:
        return math.inf if gains > 0 else math.nan
    return gains / losses


def volatility(returns: np.ndarray) -> float:
    if returns.size == 0:
        return math.nan
    if returns_are_flat(returns):
        return 0.0
    with np.errstate(invalid='ignore', over='ignore'):
        return float(np.std(returns)) * 100


def compute_metrics(equity: EquityLike) -> Metrics:
    """Compute the full metric set for one equity curve.

    Args:
        equity: Equity curve; element 0 is the starting equity

    Returns:
        Metrics for the curve

    Raises:
        ValueError: If the curve is empty
    """
    eq = np.asarray(equity, dtype=np.float64)
    if eq.size == 0:
        raise ValueError("Cannot compute metrics for an empty equity curve")

    returns = trade_returns(eq)
    with np.errstate(divide='ignore', invalid='ignore'):
        total_return = float((eq[-1] - eq[0]) / eq[0] * 100)
        average_return = float(np.mean(returns)) * 100 if returns.size else math.nan

    return Metrics(
        max_drawdown=max_drawdown(eq),
        sharpe_ratio=sharpe_ratio(returns),
        profit_factor=profit_factor(returns),
        total_return=total_return,
        average_return=average_return,
        volatility=volatility(returns),
    )
