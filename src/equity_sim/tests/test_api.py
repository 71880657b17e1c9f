# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Tests for the HTTP API and request parsing.
"""

import unittest

from ..api import create_app, parse_simulation_request
from ..config import Settings
from ..simulation import RiskType, ValidationError


class TestParseSimulationRequest(unittest.TestCase):
    """Tests for mapping JSON payloads to parameters."""

    def test_nested_parameters_and_seed(self):
        request = parse_simulation_request({
            "parameters": {"num_trades": 5, "num_simulations": 2, "risk_type": "compounding"},
            "seed": 7,
        })
        self.assertEqual(request.params.num_trades, 5)
        self.assertIs(request.params.risk_type, RiskType.COMPOUNDING)
        self.assertEqual(request.seed, 7)
        self.assertIsNone(request.workers)

    def test_top_level_camel_case(self):
        request = parse_simulation_request({"numTrades": "12", "winRate": 0.4})
        self.assertEqual(request.params.num_trades, 12)
        self.assertEqual(request.params.win_rate, 0.4)
        self.assertIsNone(request.seed)

    def test_percent_units(self):
        request = parse_simulation_request({
            "parameters": {"winRate": 55, "risk_size": "2"},
            "units": "percent",
        })
        self.assertAlmostEqual(request.params.win_rate, 0.55)
        self.assertAlmostEqual(request.params.risk_size, 0.02)

    def test_seed_from_simulation_config(self):
        request = parse_simulation_request({"simulation_config": {"seed": "3", "workers": 2}})
        self.assertEqual(request.seed, 3)
        self.assertEqual(request.workers, 2)

    def test_invalid_values(self):
        cases = [
            ({"parameters": {"win_rate": 1.5}}, "win_rate"),
            ({"parameters": []}, "parameters"),
            ({"units": "basis points"}, "units"),
            ({"seed": "abc"}, "seed"),
            ({"seed": -1}, "seed"),
            ({"workers": 0}, "workers"),
            ({"parameters": {"win_rate": "lots"}, "units": "percent"}, "win_rate"),
        ]
        for payload, field in cases:
            with self.subTest(payload=payload):
                with self.assertRaises(ValidationError) as ctx:
                    parse_simulation_request(payload)
                self.assertEqual(ctx.exception.field, field)


class TestApi(unittest.TestCase):
    """Tests for the Flask endpoints."""

    def setUp(self):
        settings = Settings(max_simulations=20, max_trades=200, workers=2)
        self.client = create_app(settings).test_client()
        self.payload = {"parameters": {"num_trades": 10, "num_simulations": 3}, "seed": 5}

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"ok": True, "service": "equity-sim-api"})

    def test_simulate(self):
        response = self.client.post("/api/v1/simulate", json=self.payload)
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["seed"], 5)
        self.assertEqual(len(body["curves"]), 3)
        self.assertEqual(len(body["curves"][0]), 11)
        self.assertEqual(body["curves"][0][0], 10000.0)
        self.assertEqual([s["simulation"] for s in body["simulations"]], [1, 2, 3])
        self.assertIn("final_equity", body["summary"])
        self.assertEqual(set(body["summary"]["sharpe_ratio"]), {"average", "minimum", "maximum"})
        self.assertEqual(body["parameters"]["risk_type"], "fixed")

    def test_simulate_is_reproducible(self):
        first = self.client.post("/api/v1/simulate", json=self.payload).get_json()
        second = self.client.post("/api/v1/simulate", json=self.payload).get_json()
        self.assertEqual(first["curves"], second["curves"])

    def test_simulate_without_curves(self):
        response = self.client.post("/api/v1/simulate?curves=false", json=self.payload)
        self.assertNotIn("curves", response.get_json())

    def test_non_finite_values_are_strings(self):
        payload = {"parameters": {"num_trades": 4, "num_simulations": 2, "win_rate": 1.0}, "seed": 1}
        body = self.client.post("/api/v1/simulate", json=payload).get_json()
        self.assertEqual(body["simulations"][0]["metrics"]["profit_factor"], "Infinity")
        self.assertEqual(body["summary"]["profit_factor"]["maximum"], "Infinity")

    def test_validation_error(self):
        payload = {"parameters": {"num_simulations": 0}}
        response = self.client.post("/api/v1/simulate", json=payload)
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertFalse(body["success"])
        self.assertEqual(body["field"], "num_simulations")

    def test_batch_limits(self):
        response = self.client.post("/api/v1/simulate", json={"parameters": {"num_simulations": 21}})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["field"], "num_simulations")
        response = self.client.post("/api/v1/simulate", json={"parameters": {"num_trades": 201}})
        self.assertEqual(response.get_json()["field"], "num_trades")

    def test_missing_body(self):
        response = self.client.post("/api/v1/simulate", data="not json", content_type="text/plain")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["field"], "body")

    def test_non_object_body(self):
        response = self.client.post("/api/v1/simulate", json=[1, 2])
        self.assertEqual(response.status_code, 400)

    def test_export_formats(self):
        expected = {
            "xlsx": (b"PK", "spreadsheetml"),
            "html": (b"<!DOCTYPE html>", "text/html"),
            "pdf": (b"%PDF", "application/pdf"),
        }
        for fmt, (magic, mimetype) in expected.items():
            with self.subTest(fmt=fmt):
                response = self.client.post(f"/api/v1/export/{fmt}", json=self.payload)
                self.assertEqual(response.status_code, 200)
                self.assertTrue(response.data.startswith(magic))
                self.assertIn(mimetype, response.mimetype)
                self.assertIn(f"simulation_report.{fmt}", response.headers["Content-Disposition"])

    def test_export_unknown_format(self):
        response = self.client.post("/api/v1/export/csv", json=self.payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["field"], "format")


if __name__ == '__main__':
    unittest.main()
