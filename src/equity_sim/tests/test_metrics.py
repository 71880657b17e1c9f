# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tests for per-curve metrics and batch aggregation.
"""

import math
import unittest

import numpy as np

from ..simulation import EmptyBatchError, Metrics, compute_metrics
from ..simulation.metrics import (max_drawdown, profit_factor, returns_are_flat, sharpe_ratio,
                                  trade_returns, volatility)
from ..simulation.results import METRIC_LABELS, MetricSummary, aggregate_results


class TestComputeMetrics(unittest.TestCase):
    """Tests for compute_metrics on known curves."""

    def test_win_only_curve(self):
        metrics = compute_metrics([10000, 10200, 10404, 10612.08])
        self.assertAlmostEqual(metrics.total_return, 6.1208, places=6)
        self.assertEqual(metrics.max_drawdown, 0.0)
        self.assertTrue(math.isinf(metrics.profit_factor))
        self.assertGreater(metrics.profit_factor, 0)
        self.assertAlmostEqual(metrics.average_return, 2.0, places=6)
        self.assertTrue(math.isnan(metrics.sharpe_ratio))
        self.assertEqual(metrics.volatility, 0.0)

    def test_single_loss_curve(self):
        metrics = compute_metrics([1000, 900])
        self.assertAlmostEqual(metrics.total_return, -10.0)
        self.assertAlmostEqual(metrics.max_drawdown, 10.0)
        self.assertAlmostEqual(metrics.average_return, -10.0)
        self.assertEqual(metrics.volatility, 0.0)
        self.assertTrue(math.isnan(metrics.sharpe_ratio))
        self.assertEqual(metrics.profit_factor, 0.0)

    def test_no_trades(self):
        metrics = compute_metrics([500.0])
        self.assertEqual(metrics.total_return, 0.0)
        self.assertEqual(metrics.max_drawdown, 0.0)
        self.assertTrue(math.isnan(metrics.average_return))
        self.assertTrue(math.isnan(metrics.volatility))
        self.assertTrue(math.isnan(metrics.sharpe_ratio))
        self.assertTrue(math.isnan(metrics.profit_factor))

    def test_empty_curve_rejected(self):
        with self.assertRaises(ValueError):
            compute_metrics([])

    def test_as_dict_has_every_field(self):
        metrics = compute_metrics([100, 110, 99])
        self.assertEqual(tuple(metrics.as_dict()), Metrics.FIELDS)

    def test_no_warnings_for_degenerate_curves(self):
        with np.errstate(all='raise'):
            compute_metrics([1000, 1000, 1000])
            compute_metrics([1000, 900])
            compute_metrics([0.0, 0.0])
            metrics = compute_metrics([1000, 500, 0, -500])
        self.assertTrue(math.isnan(metrics.sharpe_ratio))
        self.assertTrue(math.isnan(metrics.volatility))
        self.assertEqual(metrics.profit_factor, 0.0)
        self.assertAlmostEqual(metrics.max_drawdown, 150.0)
        self.assertEqual(metrics.total_return, -150.0)


class TestMetricFunctions(unittest.TestCase):
    """Tests for the individual metric formulas."""

    def test_trade_returns(self):
        np.testing.assert_allclose(trade_returns([100, 110, 99]), [0.1, -0.1])

    def test_max_drawdown_from_running_peak(self):
        self.assertAlmostEqual(max_drawdown([100, 120, 90, 130, 117]), 25.0)

    def test_max_drawdown_rising_curve(self):
        self.assertEqual(max_drawdown([100, 101, 102]), 0.0)

    def test_max_drawdown_zero_peak_is_nan(self):
        self.assertTrue(math.isnan(max_drawdown([0.0, 0.0])))

    def test_flat_returns(self):
        """Returns equal up to rounding noise count as flat."""
        returns = trade_returns([10000, 10200, 10404, 10612.08])
        self.assertTrue(returns_are_flat(returns))
        self.assertTrue(math.isnan(sharpe_ratio(returns)))
        self.assertEqual(volatility(returns), 0.0)
        self.assertFalse(returns_are_flat(np.array([0.02, 0.0200001])))
        self.assertFalse(returns_are_flat(np.array([])))

    def test_sharpe_annualized_with_252(self):
        returns = np.array([0.02, -0.01, 0.03, 0.0])
        expected = returns.mean() / returns.std() * math.sqrt(252)
        self.assertAlmostEqual(sharpe_ratio(returns), expected)

    def test_sharpe_uses_population_std(self):
        returns = np.array([0.1, -0.1])
        self.assertAlmostEqual(sharpe_ratio(returns), 0.0)
        returns = np.array([0.2, 0.0])
        self.assertAlmostEqual(sharpe_ratio(returns), 0.1 / 0.1 * math.sqrt(252))

    def test_profit_factor(self):
        self.assertAlmostEqual(profit_factor(np.array([0.2, -0.1, 0.1, -0.1])), 1.5)
        self.assertTrue(math.isnan(profit_factor(np.array([0.0, 0.0]))))


class TestAggregation(unittest.TestCase):
    """Tests for the batch report."""

    def setUp(self):
        curves = [
            [1000, 1100, 1050],
            [1000, 900, 950],
            [1000, 1000, 1200],
        ]
        self.metrics = [compute_metrics(c) for c in curves]
        self.finals = [c[-1] for c in curves]
        self.report = aggregate_results(self.metrics, self.finals)

    def test_covers_every_metric_in_display_order(self):
        self.assertEqual(list(self.report), list(METRIC_LABELS))
        self.assertEqual(len(self.report), 7)

    def test_final_equity_summary(self):
        summary = self.report['final_equity']
        self.assertAlmostEqual(summary.average, 1066.6666666666667)
        self.assertEqual(summary.minimum, 950)
        self.assertEqual(summary.maximum, 1200)

    def test_min_le_avg_le_max(self):
        for name, summary in self.report.items():
            values = [getattr(m, name) for m in self.metrics] if name != 'final_equity' else self.finals
            if all(math.isfinite(v) for v in values):
                self.assertLessEqual(summary.minimum, summary.average + 1e-12, name)
                self.assertLessEqual(summary.average, summary.maximum + 1e-12, name)

    def test_total_return_average(self):
        expected = np.mean([m.total_return for m in self.metrics])
        self.assertAlmostEqual(self.report['total_return'].average, expected)

    def test_nan_propagates(self):
        """A single undefined Sharpe makes the batch statistic undefined."""
        report = aggregate_results([compute_metrics([1000, 900]), compute_metrics([1000, 1100, 1000])],
                                   [900, 1000])
        self.assertTrue(math.isnan(report['sharpe_ratio'].average))

    def test_to_frame(self):
        frame = self.report.to_frame()
        self.assertEqual(list(frame.columns), ['Average', 'Minimum', 'Maximum'])
        self.assertEqual(frame.index.name, 'Metric')
        self.assertEqual(frame.loc['Final Equity', 'Maximum'], 1200)

    def test_single_simulation(self):
        report = aggregate_results(self.metrics[:1], self.finals[:1])
        summary = report['total_return']
        self.assertEqual(summary.average, summary.minimum)
        self.assertEqual(summary.minimum, summary.maximum)

    def test_empty_batch(self):
        with self.assertRaises(EmptyBatchError):
            aggregate_results([], [])
        with self.assertRaises(EmptyBatchError):
            MetricSummary.from_values([])

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            aggregate_results(self.metrics, self.finals[:2])


if __name__ == '__main__':
    unittest.main()
