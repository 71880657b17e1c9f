# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Request payload parsing for the simulation API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..simulation import ParameterSet, ValidationError

# Fields the input form expresses in percent
_PERCENT_FIELDS = {
    'win_rate': ['win_rate', 'winRate'],
    'risk_size': ['risk_size', 'riskSize'],
}
_VALID_UNITS = {'fraction', 'percent'}


@dataclass
class SimulationRequest:
    params: ParameterSet
    seed: Optional[int]
    workers: Optional[int] = None


def _nested_get(payload: Dict[str, Any], path: List[str], default: Any = None) -> Any:
    current: Any = payload
    for key in path:
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def _pick_first(payload: Dict[str, Any], paths: List[List[str]], default: Any = None) -> Any:
    for path in paths:
        value = _nested_get(payload, path, None)
        if value is not None:
            return value
    return default


def _to_optional_int(field: str, value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(field, f"must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(field, f"must be an integer, got {value!r}")


def _percent_to_fraction(field: str, value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationError(field, f"must be a number, got {value!r}") from None
    if isinstance(value, (int, float)):
        return value / 100.0
    return value


def parse_simulation_request(payload: Dict[str, Any]) -> SimulationRequest:
    """Turn a JSON request body into a validated simulation request.

    Parameters are read from ``payload["parameters"]`` when present, else
    from the top level. With ``"units": "percent"`` the win rate and risk
    size are given in percent, as the input form shows them.

    Raises:
        ValidationError: If any parameter, the seed or the units are invalid
    """
    raw = payload.get('parameters')
    if raw is None:
        raw = payload
    if not isinstance(raw, dict):
        raise ValidationError('parameters', "must be an object")
    raw = dict(raw)

    units = str(payload.get('units', 'fraction') or 'fraction').strip().lower()
    if units not in _VALID_UNITS:
        raise ValidationError('units', f"must be one of {sorted(_VALID_UNITS)}, got {units!r}")
    if units == 'percent':
        for field, keys in _PERCENT_FIELDS.items():
            for key in keys:
                if raw.get(key) is not None:
                    raw[key] = _percent_to_fraction(field, raw[key])

    seed = _to_optional_int('seed', _pick_first(payload, [['seed'], ['simulation_config', 'seed']]))
    if seed is not None and seed < 0:
        raise ValidationError('seed', f"must be non-negative, got {seed}")
    workers = _to_optional_int('workers', _pick_first(payload, [['workers'], ['simulation_config', 'workers']]))
    if workers is not None and workers < 1:
        raise ValidationError('workers', f"must be at least 1, got {workers}")

    return SimulationRequest(params=ParameterSet.from_dict(raw), seed=seed, workers=workers)
