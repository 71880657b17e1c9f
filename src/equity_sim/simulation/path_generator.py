# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Equity path generator.

This module produces a single simulated equity curve: a Bernoulli
win/loss sequence applied trade by trade to a running account balance,
with optional martingale scaling of the amount risked after losses.
"""

import numpy as np

from .parameters import ParameterSet, RiskType
from .randomness import RandomSource


class PathGenerator:
    """Generates one equity curve per call from a ParameterSet.

    The risked amount starts at ``risk_size`` of the starting equity. After
    every win it is re-based on the post-trade equity. After every
    ``martingale_reset``-th consecutive loss it is multiplied by
    ``martingale_multiplier`` (cumulatively) when martingale is enabled.
    Equity is not floored; curves may go negative.

    Example:
        >>> params = ParameterSet(num_trades=3, win_rate=1.0)
        >>> curve = PathGenerator(params).generate(NumpyRandomSource(seed=1))
        >>> len(curve)
        4
    """

    def __init__(self, params: ParameterSet):
        self.params = params

    def initial_risk(self) -> float:
        p = self.params
        if p.risk_type is RiskType.FIXED:
            return p.risk_size * p.starting_equity
        # Compounding sizes the first trade off the initial equity as well
        return p.starting_equity * p.risk_size

    def generate(self, random_source: RandomSource) -> np.ndarray:
        """Simulate ``num_trades`` trades.

        Args:
            random_source: Source of uniform draws; a trade wins iff its
                draw is below ``win_rate``

        Returns:
            Read-only float64 array of length ``num_trades + 1`` whose first
            element is the starting equity
        """
        p = self.params
        equity = p.starting_equity
        trades = [equity]
        consecutive_losses = 0
        current_risk = self.initial_risk()

        for _ in range(p.num_trades):
            is_win = random_source.random() < p.win_rate
            reward = current_risk * p.reward_risk if is_win else -current_risk
            equity += reward
            trades.append(equity)

            if is_win:
                consecutive_losses = 0
                current_risk = p.risk_size * equity
            else:
                consecutive_losses += 1
                if p.use_martingale and consecutive_losses % p.martingale_reset == 0:
                    current_risk *= p.martingale_multiplier

        curve = np.array(trades, dtype=np.float64)
        curve.setflags(write=False)
        return curve
