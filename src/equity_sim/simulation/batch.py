# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Batch entry point for presentation and export collaborators.

``run_batch`` ties the pipeline together: simulate every curve, compute
metrics per curve, then aggregate across the batch.
"""

import logging
import time
from dataclasses import dataclass
from typing import Iterator, List, Optional

import numpy as np
import pandas as pd

from .engine import CancellationToken, SimulationEngine
from .metrics import Metrics, compute_metrics
from .parameters import ParameterSet
from .randomness import RandomSource
from .results import METRIC_LABELS, AggregateReport, aggregate_results

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    """Everything one batch run produced.

    Unpacks as ``curves, metrics, report``. Simulation numbering for
    display is 1-based and follows list order.
    """
    params: ParameterSet
    curves: List[np.ndarray]
    metrics: List[Metrics]
    report: AggregateReport

    def __iter__(self) -> Iterator:
        return iter((self.curves, self.metrics, self.report))

    @property
    def num_simulations(self) -> int:
        return len(self.curves)

    @property
    def final_equities(self) -> List[float]:
        return [float(curve[-1]) for curve in self.curves]

    def curves_frame(self) -> pd.DataFrame:
        """Equity by trade number, one column per simulation."""
        data = {
            f"Simulation {idx + 1}": curve for idx, curve in enumerate(self.curves)
        }
        df = pd.DataFrame(data)
        df.index.name = 'Trade Number'
        return df

    def metrics_frame(self) -> pd.DataFrame:
        """Per-simulation final equity and metrics, indexed by simulation number."""
        rows = []
        for idx, (final_equity, m) in enumerate(zip(self.final_equities, self.metrics)):
            row = {'Simulation': idx + 1, METRIC_LABELS['final_equity']: final_equity}
            for name in Metrics.FIELDS:
                row[METRIC_LABELS[name]] = getattr(m, name)
            rows.append(row)
        return pd.DataFrame(rows).set_index('Simulation')


def run_batch(params: ParameterSet,
              random_source: Optional[RandomSource] = None,
              *,
              max_workers: Optional[int] = None,
              cancel_token: Optional[CancellationToken] = None) -> BatchResult:
    """Simulate a batch and compute its per-curve and aggregate metrics.

    Args:
        params: Validated batch parameters
        random_source: Source of randomness. Pass a seeded source for
            reproducible results; None uses fresh entropy.
        max_workers: Worker threads for curve generation (None runs
            sequentially)
        cancel_token: Optional cooperative cancellation token

    Returns:
        BatchResult with curves, metrics and the aggregate report

    Raises:
        BatchCancelledError: If cancelled before all curves were generated
    """
    started = time.perf_counter()
    engine = SimulationEngine(params, max_workers=max_workers)
    curves = engine.run(random_source, cancel_token=cancel_token)
    metrics = [compute_metrics(curve) for curve in curves]
    report = aggregate_results(metrics, [float(curve[-1]) for curve in curves])

    logger.info(
        "Simulated %d curves x %d trades in %.3fs (avg final equity %.2f)",
        params.num_simulations, params.num_trades,
        time.perf_counter() - started, report['final_equity'].average,
    )
    return BatchResult(params=params, curves=curves, metrics=metrics, report=report)

