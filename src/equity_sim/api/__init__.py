# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""HTTP API for running and exporting simulation batches."""

from .app import create_app
from .inputs import SimulationRequest, parse_simulation_request

__all__ = ['create_app', 'SimulationRequest', 'parse_simulation_request']
