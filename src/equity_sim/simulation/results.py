# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Batch-level aggregation of per-curve metrics.

This module provides the AggregateReport class, which holds the average,
minimum and maximum of every metric (and of final equity) across all
curves of a simulation batch.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import EmptyBatchError
from .metrics import Metrics

# Display order and labels shared by cards, tables and exports
METRIC_LABELS: Dict[str, str] = {
    'final_equity': 'Final Equity',
    'total_return': 'Total Return (%)',
    'max_drawdown': 'Max Drawdown (%)',
    'sharpe_ratio': 'Sharpe Ratio',
    'profit_factor': 'Profit Factor',
    'average_return': 'Average Return (%)',
    'volatility': 'Volatility (%)',
}


@dataclass(frozen=True)
class MetricSummary:
    """Average, minimum and maximum of one metric across a batch."""
    average: float
    minimum: float
    maximum: float

    @classmethod
    def from_values(cls, values: Sequence[float]) -> 'MetricSummary':
        arr = np.asarray(values, dtype=np.float64)
        if arr.size == 0:
            raise EmptyBatchError("Cannot summarize an empty collection of values")
        with np.errstate(invalid='ignore'):
            return cls(
                average=float(np.mean(arr)),
                minimum=float(np.min(arr)),
                maximum=float(np.max(arr)),
            )

    def as_dict(self) -> Dict[str, float]:
        return {'average': self.average, 'minimum': self.minimum, 'maximum': self.maximum}


class AggregateReport:
    """Summary statistics for a batch, keyed by metric name.

    Keys are ``final_equity`` plus every name in ``Metrics.FIELDS``.
    Iteration follows ``METRIC_LABELS`` order.

    Example:
        >>> report = aggregate_results(all_metrics, final_equities)
        >>> report['max_drawdown'].maximum
        23.7
        >>> report.to_frame().loc['Sharpe Ratio', 'Average']
        0.41
    """

    def __init__(self, summaries: Dict[str, MetricSummary], num_simulations: int):
        missing = set(METRIC_LABELS) - set(summaries)
        if missing:
            raise ValueError(f"Missing summaries for: {sorted(missing)}")
        self._summaries = {name: summaries[name] for name in METRIC_LABELS}
        self.num_simulations = num_simulations

    def __getitem__(self, name: str) -> MetricSummary:
        return self._summaries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._summaries)

    def __len__(self) -> int:
        return len(self._summaries)

    def items(self) -> List[Tuple[str, MetricSummary]]:
        return list(self._summaries.items())

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {name: summary.as_dict() for name, summary in self._summaries.items()}

    def to_frame(self) -> pd.DataFrame:
        """Summary as a DataFrame indexed by display label.

        Returns:
            DataFrame with columns Average, Minimum and Maximum holding the
            raw (unformatted) values
        """
        rows = [
            {
                'Metric': METRIC_LABELS[name],
                'Average': summary.average,
                'Minimum': summary.minimum,
                'Maximum': summary.maximum,
            }
            for name, summary in self._summaries.items()
        ]
        return pd.DataFrame(rows).set_index('Metric')

    def __repr__(self) -> str:
        return f"AggregateReport(num_simulations={self.num_simulations})"


def aggregate_results(metrics: Sequence[Metrics],
                      final_equities: Sequence[float]) -> AggregateReport:
    """Aggregate per-curve metrics into a batch report.

    Args:
        metrics: One Metrics record per simulated curve
        final_equities: Last equity value of each curve, same order

    Returns:
        AggregateReport covering every metric and final equity

    Raises:
        EmptyBatchError: If there are no curves
        ValueError: If the two inputs differ in length
    """
    if len(metrics) == 0:
        raise EmptyBatchError("Cannot aggregate results of an empty batch")
    if len(metrics) != len(final_equities):
        raise ValueError(
            f"Got {len(metrics)} metric records but {len(final_equities)} final equities"
        )

    summaries = {'final_equity': MetricSummary.from_values(final_equities)}
    for name in Metrics.FIELDS:
        summaries[name] = MetricSummary.from_values([getattr(m, name) for m in metrics])
    return AggregateReport(summaries, num_simulations=len(metrics))
