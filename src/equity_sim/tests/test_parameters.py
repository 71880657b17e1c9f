# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tests for parameter validation.
"""

import math
import unittest

import numpy as np

from ..simulation import ParameterSet, RiskType, ValidationError


class TestParameterSetDefaults(unittest.TestCase):
    """Tests for ParameterSet defaults and normalization."""

    def test_default_values(self):
        """Defaults mirror the input form."""
        params = ParameterSet()
        self.assertEqual(params.starting_equity, 10000.0)
        self.assertEqual(params.num_trades, 100)
        self.assertEqual(params.num_simulations, 10)
        self.assertEqual(params.win_rate, 0.5)
        self.assertEqual(params.reward_risk, 2.0)
        self.assertIs(params.risk_type, RiskType.FIXED)
        self.assertEqual(params.risk_size, 0.01)
        self.assertFalse(params.use_martingale)
        self.assertEqual(params.martingale_multiplier, 2.0)
        self.assertEqual(params.martingale_reset, 1)

    def test_risk_type_string_is_normalized(self):
        params = ParameterSet(risk_type='compounding')
        self.assertIs(params.risk_type, RiskType.COMPOUNDING)

    def test_numpy_integers_accepted(self):
        params = ParameterSet(num_trades=np.int64(5), num_simulations=np.int32(2))
        self.assertEqual(params.num_trades, 5)
        self.assertIsInstance(params.num_trades, int)

    def test_integral_float_accepted_for_counts(self):
        params = ParameterSet(num_trades=5.0)
        self.assertEqual(params.num_trades, 5)

    def test_immutable(self):
        params = ParameterSet()
        with self.assertRaises(AttributeError):
            params.win_rate = 0.9

    def test_boundaries_accepted(self):
        """Win rate 0 and 1 and risk size 1 are valid."""
        ParameterSet(win_rate=0.0)
        ParameterSet(win_rate=1.0)
        ParameterSet(risk_size=1.0)


class TestParameterSetValidation(unittest.TestCase):
    """Each invalid value is rejected with the offending field named."""

    def assertRejected(self, field, **kwargs):
        with self.assertRaises(ValidationError) as ctx:
            ParameterSet(**kwargs)
        self.assertEqual(ctx.exception.field, field)

    def test_non_positive_starting_equity(self):
        self.assertRejected('starting_equity', starting_equity=0)
        self.assertRejected('starting_equity', starting_equity=-100)

    def test_counts_below_one(self):
        self.assertRejected('num_trades', num_trades=0)
        self.assertRejected('num_simulations', num_simulations=0)
        self.assertRejected('num_simulations', num_simulations=-3)

    def test_fractional_counts(self):
        self.assertRejected('num_trades', num_trades=2.5)

    def test_win_rate_out_of_range(self):
        self.assertRejected('win_rate', win_rate=-0.01)
        self.assertRejected('win_rate', win_rate=1.01)

    def test_reward_risk_not_positive(self):
        self.assertRejected('reward_risk', reward_risk=0)

    def test_risk_size_out_of_range(self):
        self.assertRejected('risk_size', risk_size=0)
        self.assertRejected('risk_size', risk_size=1.5)

    def test_unknown_risk_type(self):
        self.assertRejected('risk_type', risk_type='doubling')

    def test_non_numbers(self):
        self.assertRejected('starting_equity', starting_equity=math.nan)
        self.assertRejected('reward_risk', reward_risk=math.inf)
        self.assertRejected('win_rate', win_rate=True)
        self.assertRejected('starting_equity', starting_equity='lots')

    def test_martingale_fields_checked_only_when_enabled(self):
        ParameterSet(use_martingale=False, martingale_reset=0, martingale_multiplier=0)
        self.assertRejected('martingale_reset', use_martingale=True, martingale_reset=0)
        self.assertRejected('martingale_multiplier', use_martingale=True, martingale_multiplier=0)

    def test_error_message_names_field(self):
        with self.assertRaises(ValidationError) as ctx:
            ParameterSet(win_rate=2)
        self.assertTrue(str(ctx.exception).startswith('win_rate:'))
        self.assertIsInstance(ctx.exception, ValueError)


class TestParameterSetFromDict(unittest.TestCase):
    """Tests for building parameters from raw input."""

    def test_camel_case_and_numeric_strings(self):
        params = ParameterSet.from_dict({
            'startingEquity': '5000',
            'numTrades': '20',
            'winRate': '0.6',
            'riskType': 'Compounding',
            'useMartingale': 'true',
            'martingaleReset': 2,
        })
        self.assertEqual(params.starting_equity, 5000.0)
        self.assertEqual(params.num_trades, 20)
        self.assertEqual(params.win_rate, 0.6)
        self.assertIs(params.risk_type, RiskType.COMPOUNDING)
        self.assertTrue(params.use_martingale)
        self.assertEqual(params.martingale_reset, 2)

    def test_missing_and_unknown_keys(self):
        params = ParameterSet.from_dict({'num_trades': 3, 'colour': 'blue', 'win_rate': None})
        self.assertEqual(params.num_trades, 3)
        self.assertEqual(params.win_rate, 0.5)

    def test_invalid_boolean(self):
        with self.assertRaises(ValidationError) as ctx:
            ParameterSet.from_dict({'use_martingale': 'maybe'})
        self.assertEqual(ctx.exception.field, 'use_martingale')

    def test_as_dict_round_trip(self):
        params = ParameterSet(num_trades=7, risk_type='compounding')
        values = params.as_dict()
        self.assertEqual(values['risk_type'], 'compounding')
        self.assertEqual(ParameterSet.from_dict(values), params)


if __name__ == '__main__':
    unittest.main()
