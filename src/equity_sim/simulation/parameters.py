# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Simulation parameters and their validation.

A ParameterSet describes one simulation batch. It is validated on
construction and immutable afterwards; nothing downstream re-checks it.
"""

import math
import numbers
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Mapping

from .. import config
from .errors import ValidationError


class RiskType(str, Enum):
    """How the amount risked per trade is sized."""
    FIXED = 'fixed'
    COMPOUNDING = 'compounding'


# Original form ids -> field names
_CAMEL_CASE_KEYS = {
    'startingEquity': 'starting_equity',
    'numTrades': 'num_trades',
    'numSimulations': 'num_simulations',
    'winRate': 'win_rate',
    'rewardRisk': 'reward_risk',
    'riskType': 'risk_type',
    'riskSize': 'risk_size',
    'useMartingale': 'use_martingale',
    'martingaleMultiplier': 'martingale_multiplier',
    'martingaleReset': 'martingale_reset',
}

_TRUE_STRINGS = {'true', '1', 'yes', 'on'}
_FALSE_STRINGS = {'false', '0', 'no', 'off', ''}


def _require_real(field: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(field, f"must be a number, got {value!r}")
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        raise ValidationError(field, f"must be finite, got {value!r}")
    return value


def _require_int(field: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(field, f"must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real) and float(value).is_integer():
        return int(value)
    raise ValidationError(field, f"must be an integer, got {value!r}")


def _coerce_number(field: str, value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        try:
            return float(text)
        except ValueError:
            raise ValidationError(field, f"must be a number, got {value!r}") from None
    return value


def _coerce_bool(field: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValidationError(field, f"must be a boolean, got {value!r}")


@dataclass(frozen=True)
class ParameterSet:
    """Validated configuration for one simulation batch.

    Attributes:
        starting_equity: Account value before the first trade (> 0)
        num_trades: Trades per simulated curve (>= 1)
        num_simulations: Number of independent curves in the batch (>= 1)
        win_rate: Probability that a single trade wins, in [0, 1]
        reward_risk: Gain on a win as a multiple of the amount risked (> 0)
        risk_type: Fixed or compounding risk sizing
        risk_size: Fraction of equity risked per trade, in (0, 1]
        use_martingale: Scale risk up after consecutive losses
        martingale_multiplier: Factor applied to risk at each martingale step (> 0)
        martingale_reset: Consecutive losses between martingale steps (>= 1)

    Raises:
        ValidationError: If any field is malformed or out of range. The
            error's ``field`` attribute names the offending field.
    """
    starting_equity: float = config.DEFAULT_STARTING_EQUITY
    num_trades: int = config.DEFAULT_NUM_TRADES
    num_simulations: int = config.DEFAULT_NUM_SIMULATIONS
    win_rate: float = config.DEFAULT_WIN_RATE
    reward_risk: float = config.DEFAULT_REWARD_RISK
    risk_type: RiskType = RiskType.FIXED
    risk_size: float = config.DEFAULT_RISK_SIZE
    use_martingale: bool = False
    martingale_multiplier: float = config.DEFAULT_MARTINGALE_MULTIPLIER
    martingale_reset: int = config.DEFAULT_MARTINGALE_RESET

    def __post_init__(self):
        starting_equity = _require_real('starting_equity', self.starting_equity)
        if starting_equity <= 0:
            raise ValidationError('starting_equity', f"must be positive, got {starting_equity}")

        num_trades = _require_int('num_trades', self.num_trades)
        if num_trades < 1:
            raise ValidationError('num_trades', f"must be at least 1, got {num_trades}")

        num_simulations = _require_int('num_simulations', self.num_simulations)
        if num_simulations < 1:
            raise ValidationError('num_simulations', f"must be at least 1, got {num_simulations}")

        win_rate = _require_real('win_rate', self.win_rate)
        if not 0.0 <= win_rate <= 1.0:
            raise ValidationError('win_rate', f"must be between 0 and 1, got {win_rate}")

        reward_risk = _require_real('reward_risk', self.reward_risk)
        if reward_risk <= 0:
            raise ValidationError('reward_risk', f"must be positive, got {reward_risk}")

        try:
            risk_type = RiskType(self.risk_type)
        except ValueError:
            allowed = ", ".join(rt.value for rt in RiskType)
            raise ValidationError(
                'risk_type', f"must be one of {allowed}, got {self.risk_type!r}"
            ) from None

        risk_size = _require_real('risk_size', self.risk_size)
        if not 0.0 < risk_size <= 1.0:
            raise ValidationError('risk_size', f"must be in (0, 1], got {risk_size}")

        if not isinstance(self.use_martingale, bool):
            raise ValidationError('use_martingale', f"must be a boolean, got {self.use_martingale!r}")

        martingale_multiplier = _require_real('martingale_multiplier', self.martingale_multiplier)
        martingale_reset = _require_int('martingale_reset', self.martingale_reset)
        if self.use_martingale:
            if martingale_multiplier <= 0:
                raise ValidationError(
                    'martingale_multiplier', f"must be positive, got {martingale_multiplier}"
                )
            if martingale_reset < 1:
                raise ValidationError(
                    'martingale_reset', f"must be at least 1, got {martingale_reset}"
                )

        # Store normalized values on the frozen instance
        object.__setattr__(self, 'starting_equity', starting_equity)
        object.__setattr__(self, 'num_trades', num_trades)
        object.__setattr__(self, 'num_simulations', num_simulations)
        object.__setattr__(self, 'win_rate', win_rate)
        object.__setattr__(self, 'reward_risk', reward_risk)
        object.__setattr__(self, 'risk_type', risk_type)
        object.__setattr__(self, 'risk_size', risk_size)
        object.__setattr__(self, 'martingale_multiplier', martingale_multiplier)
        object.__setattr__(self, 'martingale_reset', martingale_reset)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> 'ParameterSet':
        """Build a ParameterSet from raw input values.

        Keys may be snake_case field names or the camelCase names used by
        the input form. Numeric strings are accepted; missing keys take
        their defaults. Unknown keys are ignored.

        Args:
            raw: Mapping of parameter names to raw values

        Returns:
            A validated ParameterSet

        Raises:
            ValidationError: If any value cannot be coerced or is out of range
        """
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in cls.__dataclass_fields__ or value is None:
                continue
            if name == 'risk_type':
                values[name] = value.strip().lower() if isinstance(value, str) else value
            elif name == 'use_martingale':
                values[name] = _coerce_bool(name, value)
            else:
                values[name] = _coerce_number(name, value)
        return cls(**values)

    def as_dict(self) -> Dict[str, Any]:
        """Plain-value view, with risk_type as its string value."""
        values = asdict(self)
        values['risk_type'] = self.risk_type.value
        return values
