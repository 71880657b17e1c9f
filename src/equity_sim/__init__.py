# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Equity Curve Simulator

Monte Carlo simulation of trading equity curves under a configurable
win rate, reward/risk ratio and risk-sizing rule, with per-curve risk
metrics, batch summaries, charts and report exports.

Example usage:
    from equity_sim import ParameterSet, NumpyRandomSource, run_batch

    params = ParameterSet(starting_equity=10000, num_trades=250,
                          num_simulations=100, win_rate=0.45, reward_risk=2)
    curves, metrics, report = run_batch(params, NumpyRandomSource(seed=42))
    print(report.to_frame())
"""

__version__ = "0.1.0"

# Core simulation
from .simulation import (
    ParameterSet,
    RiskType,
    ValidationError,
    EmptyBatchError,
    BatchCancelledError,
    NumpyRandomSource,
    ScriptedRandomSource,
    CancellationToken,
    Metrics,
    AggregateReport,
    BatchResult,
    compute_metrics,
    run_batch,
)

__all__ = [
    'ParameterSet',
    'RiskType',
    'ValidationError',
    'EmptyBatchError',
    'BatchCancelledError',
    'NumpyRandomSource',
    'ScriptedRandomSource',
    'CancellationToken',
    'Metrics',
    'AggregateReport',
    'BatchResult',
    'compute_metrics',
    'run_batch',
]
