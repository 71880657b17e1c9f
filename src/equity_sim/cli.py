# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Command line front end.

Example:
    equity-sim run --win-rate 0.55 --reward-risk 1.5 --num-simulations 100 --seed 7 \\
        --excel out/report.xlsx --pdf out/report.pdf
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .api.inputs import parse_simulation_request
from .config import Settings, configure_logging
from .reporting import export_to_excel, export_to_html, export_to_pdf, formatted, parameter_rows, render_chart_png
from .simulation import BatchResult, NumpyRandomSource, ValidationError, run_batch

logger = logging.getLogger(__name__)

# (flag, parameter key, type, help)
_PARAMETER_FLAGS = [
    ("--starting-equity", "starting_equity", float, "Initial account equity (default: 10000)."),
    ("--num-trades", "num_trades", int, "Trades per simulation (default: 100)."),
    ("--num-simulations", "num_simulations", int, "Number of simulated curves (default: 10)."),
    ("--win-rate", "win_rate", float, "Probability of a winning trade (default: 0.5)."),
    ("--reward-risk", "reward_risk", float, "Win size as a multiple of the amount risked (default: 2)."),
    ("--risk-size", "risk_size", float, "Fraction of equity risked per trade (default: 0.01)."),
    ("--martingale-multiplier", "martingale_multiplier", float, "Factor applied to risk every N consecutive losses (default: 2)."),
    ("--martingale-reset", "martingale_reset", int, "Consecutive losses N between martingale steps (default: 1)."),
]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="equity-sim",
        description="Monte Carlo equity curve simulation with optional martingale sizing.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Log level (default: EQUITY_SIM_LOG_LEVEL or INFO).")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a simulation batch and print its summary.")
    run.add_argument(
        "--params",
        type=pathlib.Path,
        default=None,
        help="JSON file of parameters; flags given on the command line override it.",
    )
    for flag, _, kind, help_text in _PARAMETER_FLAGS:
        run.add_argument(flag, type=kind, default=None, help=help_text)
    run.add_argument("--risk-type", choices=["fixed", "compounding"], default=None,
                     help="Size risk from starting equity or current equity (default: fixed).")
    run.add_argument("--martingale", dest="use_martingale", action="store_true", default=None,
                     help="Enable martingale risk scaling.")
    run.add_argument("--units", choices=["fraction", "percent"], default="fraction",
                     help="Units of --win-rate and --risk-size (default: fraction).")
    run.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility (optional).")
    run.add_argument("--workers", type=int, default=None,
                     help="Worker threads (default: EQUITY_SIM_WORKERS or 1).")
    run.add_argument("--excel", type=pathlib.Path, default=None, help="Write an Excel workbook here.")
    run.add_argument("--html", type=pathlib.Path, default=None, help="Write an HTML report here.")
    run.add_argument("--pdf", type=pathlib.Path, default=None, help="Write a PDF report here.")
    return parser


def _load_params_file(path: pathlib.Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValidationError("params", f"{path} must contain a JSON object")
    return data


def _collect_payload(args: argparse.Namespace) -> Dict[str, Any]:
    raw: Dict[str, Any] = _load_params_file(args.params) if args.params else {}
    for _, key, _, _ in _PARAMETER_FLAGS:
        value = getattr(args, key)
        if value is not None:
            raw[key] = value
    if args.risk_type is not None:
        raw["risk_type"] = args.risk_type
    if args.use_martingale is not None:
        raw["use_martingale"] = args.use_martingale
    return {"parameters": raw, "units": args.units, "seed": args.seed, "workers": args.workers}


def format_summary(batch: BatchResult) -> str:
    """Plain-text parameters and summary statistics for the terminal."""
    lines = ["Parameters"]
    width = max(len(name) for name, _ in parameter_rows(batch.params))
    for name, value in parameter_rows(batch.params):
        lines.append(f"  {name:<{width}}  {value}")
    lines.append("")
    lines.append(f"Summary Statistics ({batch.num_simulations} simulations)")
    lines.append(formatted(batch.report.to_frame(), inf_text="inf").to_string())
    return "\n".join(lines)


def _write_exports(args: argparse.Namespace, batch: BatchResult) -> None:
    chart_png = render_chart_png(batch.curves) if (args.html or args.pdf) else None
    if args.excel:
        export_to_excel(args.excel, batch)
        print(f"Excel report written to {args.excel}")
    if args.html:
        export_to_html(args.html, batch, chart_png)
        print(f"HTML report written to {args.html}")
    if args.pdf:
        export_to_pdf(args.pdf, batch, chart_png)
        print(f"PDF report written to {args.pdf}")


def _run(args: argparse.Namespace, settings: Settings) -> int:
    try:
        request = parse_simulation_request(_collect_payload(args))
    except ValidationError as e:
        sys.stderr.write(f"ERROR: invalid parameter {e}\n")
        return 2
    except (OSError, json.JSONDecodeError) as e:
        sys.stderr.write(f"ERROR: could not read parameters file: {e}\n")
        return 1

    workers = request.workers if request.workers is not None else settings.workers
    batch = run_batch(request.params, NumpyRandomSource(request.seed), max_workers=workers)
    print(format_summary(batch))
    _write_exports(args, batch)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging((args.log_level or settings.log_level).upper())

    if args.command == "run":
        return _run(args, settings)
    parser.error(f"unknown command {args.command!r}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
