# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

from __future__ import annotations

import io
import logging
import math
from typing import Any, Dict, Optional, Tuple

from flask import Flask, current_app, jsonify, request, send_file

from ..config import REPORT_BASENAME, Settings, configure_logging
from ..reporting import export_to_excel, export_to_html, export_to_pdf
from ..simulation import BatchResult, NumpyRandomSource, ValidationError, run_batch
from .inputs import SimulationRequest, parse_simulation_request

logger = logging.getLogger(__name__)

_EXPORTERS = {
    "xlsx": (export_to_excel, "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    "html": (export_to_html, "text/html"),
    "pdf": (export_to_pdf, "application/pdf"),
}


def _json_float(value: float) -> Any:
    # Strict JSON has no literal for non-finite numbers
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return value


def _json_metrics(values: Dict[str, float]) -> Dict[str, Any]:
    return {key: _json_float(value) for key, value in values.items()}


def _serialize_batch(batch: BatchResult, seed: Optional[int], include_curves: bool) -> Dict[str, Any]:
    simulations = []
    for idx, (final_equity, metrics) in enumerate(zip(batch.final_equities, batch.metrics)):
        simulations.append(
            {
                "simulation": idx + 1,
                "final_equity": _json_float(final_equity),
                "metrics": _json_metrics(metrics.as_dict()),
            }
        )
    payload: Dict[str, Any] = {
        "success": True,
        "seed": seed,
        "parameters": batch.params.as_dict(),
        "summary": {name: _json_metrics(summary.as_dict()) for name, summary in batch.report.items()},
        "simulations": simulations,
    }
    if include_curves:
        payload["curves"] = [[_json_float(v) for v in curve.tolist()] for curve in batch.curves]
    return payload


def _error(message: str, field: Optional[str] = None, status: int = 400) -> Tuple[Any, int]:
    return jsonify({"success": False, "error": message, "field": field}), status


def _read_payload() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("body", "Request JSON body is required")
    if not isinstance(payload, dict):
        raise ValidationError("body", "Request JSON body must be an object")
    return payload


def _check_limits(sim_request: SimulationRequest, settings: Settings) -> None:
    params = sim_request.params
    if params.num_simulations > settings.max_simulations:
        raise ValidationError(
            "num_simulations",
            f"must be at most {settings.max_simulations}, got {params.num_simulations}",
        )
    if params.num_trades > settings.max_trades:
        raise ValidationError(
            "num_trades",
            f"must be at most {settings.max_trades}, got {params.num_trades}",
        )


def _run_request() -> Tuple[BatchResult, Optional[int]]:
    settings: Settings = current_app.config["EQUITY_SIM_SETTINGS"]
    sim_request = parse_simulation_request(_read_payload())
    _check_limits(sim_request, settings)
    # Requests may lower the worker count but never exceed the configured pool
    workers = settings.workers
    if sim_request.workers is not None:
        workers = min(sim_request.workers, settings.workers)
    batch = run_batch(sim_request.params, NumpyRandomSource(sim_request.seed), max_workers=workers)
    return batch, sim_request.seed


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask application.

    Args:
        settings: Runtime settings; read from the environment when None
    """
    settings = settings or Settings.from_env()
    app = Flask(__name__)
    app.config["EQUITY_SIM_SETTINGS"] = settings

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError) -> Tuple[Any, int]:
        logger.info("Rejected request: %s", error)
        return _error(error.message, error.field)

    @app.get("/health")
    def health() -> Tuple[Any, int]:
        return jsonify({"ok": True, "service": "equity-sim-api"}), 200

    @app.post("/api/v1/simulate")
    def simulate() -> Tuple[Any, int]:
        batch, seed = _run_request()
        include_curves = request.args.get("curves", "true").strip().lower() not in {"0", "false", "no"}
        return jsonify(_serialize_batch(batch, seed, include_curves)), 200

    @app.post("/api/v1/export/<fmt>")
    def export(fmt: str):
        fmt = fmt.lower()
        if fmt not in _EXPORTERS:
            return _error(f"Unsupported export format {fmt!r}; expected one of {sorted(_EXPORTERS)}", "format")
        exporter, mimetype = _EXPORTERS[fmt]
        batch, _ = _run_request()
        buffer = io.BytesIO()
        exporter(buffer, batch)
        buffer.seek(0)
        return send_file(
            buffer,
            mimetype=mimetype,
            as_attachment=True,
            download_name=f"{REPORT_BASENAME}.{fmt}",
        )

    return app


if __name__ == "__main__":
    _settings = Settings.from_env()
    configure_logging(_settings.log_level)
    create_app(_settings).run(host=_settings.host, port=_settings.port, debug=_settings.debug)
