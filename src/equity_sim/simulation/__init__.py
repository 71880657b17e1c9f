# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Monte Carlo equity curve simulation.

This module simulates trading equity curves under a Bernoulli win/loss
process with fixed or compounding risk sizing and optional martingale
scaling, and computes per-curve risk/performance metrics aggregated
across the batch.
"""

from .errors import ValidationError, EmptyBatchError, BatchCancelledError
from .parameters import ParameterSet, RiskType
from .randomness import RandomSource, NumpyRandomSource, ScriptedRandomSource
from .path_generator import PathGenerator
from .engine import SimulationEngine, CancellationToken
from .metrics import Metrics, compute_metrics
from .results import MetricSummary, AggregateReport, aggregate_results, METRIC_LABELS
from .batch import BatchResult, run_batch

__all__ = [
    'ValidationError',
    'EmptyBatchError',
    'BatchCancelledError',
    'ParameterSet',
    'RiskType',
    'RandomSource',
    'NumpyRandomSource',
    'ScriptedRandomSource',
    'PathGenerator',
    'SimulationEngine',
    'CancellationToken',
    'Metrics',
    'compute_metrics',
    'MetricSummary',
    'AggregateReport',
    'aggregate_results',
    'METRIC_LABELS',
    'BatchResult',
    'run_batch',
]
