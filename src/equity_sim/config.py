# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Configuration and Parameters for Equity Curve Simulation

This module contains the constants used by the simulation core and the
environment-driven settings used by the API and CLI entry points.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# ===== ANNUALIZATION =====
TRADING_DAYS_PER_YEAR = 252  # Fixed Sharpe annualization, independent of trade frequency
FLAT_RETURNS_RTOL = 1e-12  # Returns closer than this (relative) count as identical

# ===== PARAMETER DEFAULTS (match the input form) =====
DEFAULT_STARTING_EQUITY = 10000.0
DEFAULT_NUM_TRADES = 100
DEFAULT_NUM_SIMULATIONS = 10
DEFAULT_WIN_RATE = 0.5
DEFAULT_REWARD_RISK = 2.0
DEFAULT_RISK_TYPE = 'fixed'
DEFAULT_RISK_SIZE = 0.01
DEFAULT_MARTINGALE_MULTIPLIER = 2.0
DEFAULT_MARTINGALE_RESET = 1

# ===== OUTPUT FORMATTING =====
DISPLAY_DECIMAL_PLACES = 2  # Decimal places for cards, tables and exports
REPORT_TITLE = "Equity Curve Simulation Report"
REPORT_BASENAME = "simulation_report"

# ===== LOGGING =====
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _load_env_files() -> None:
    # Process environment wins over .env (override=False)
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the HTTP API and CLI.

    Attributes:
        host: Interface the API binds to
        port: Port the API listens on
        debug: Flask debug mode
        max_simulations: Upper bound on num_simulations accepted by the API
        max_trades: Upper bound on num_trades accepted by the API
        workers: Worker threads used per batch (1 runs sequentially)
        log_level: Root log level for entry points
    """
    host: str = "0.0.0.0"
    port: int = 8002
    debug: bool = False
    max_simulations: int = 5000
    max_trades: int = 100000
    workers: int = 1
    log_level: str = "INFO"

    def __post_init__(self):
        if self.max_simulations < 1:
            raise ValueError("EQUITY_SIM_MAX_SIMULATIONS must be at least 1")
        if self.max_trades < 1:
            raise ValueError("EQUITY_SIM_MAX_TRADES must be at least 1")
        if self.workers < 1:
            raise ValueError("EQUITY_SIM_WORKERS must be at least 1")

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from process environment (and a local .env file)."""
        _load_env_files()
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 8002),
            debug=os.getenv("FLASK_DEBUG", "false").strip().lower() in _TRUE_VALUES,
            max_simulations=_env_int("EQUITY_SIM_MAX_SIMULATIONS", 5000),
            max_trades=_env_int("EQUITY_SIM_MAX_TRADES", 100000),
            workers=_env_int("EQUITY_SIM_WORKERS", 1),
            log_level=os.getenv("EQUITY_SIM_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
