# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""
Simulation engine.

This module provides the SimulationEngine class which runs the path
generator once per simulation, each time with its own child random
source, optionally spread across worker threads.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import numpy as np

from .errors import BatchCancelledError
from .parameters import ParameterSet
from .path_generator import PathGenerator
from .randomness import NumpyRandomSource, RandomSource

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative abort flag checked by the engine between simulations."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class SimulationEngine:
    """Runs ``num_simulations`` independent equity paths.

    Each simulation receives a child of the batch random source created
    with ``spawn``, so no stream is shared between curves and the result
    for a given seed does not depend on ``max_workers``.

    Example:
        >>> engine = SimulationEngine(ParameterSet(num_simulations=100))
        >>> curves = engine.run(NumpyRandomSource(seed=7))
        >>> len(curves)
        100
    """

    def __init__(self, params: ParameterSet, max_workers: Optional[int] = None):
        """Initialize the engine.

        Args:
            params: Validated batch parameters
            max_workers: Worker threads to use. None or 1 runs sequentially.
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.params = params
        self.max_workers = max_workers or 1
        self.generator = PathGenerator(params)

    def run(self,
            random_source: Optional[RandomSource] = None,
            cancel_token: Optional[CancellationToken] = None) -> List[np.ndarray]:
        """Generate all curves of the batch.

        Args:
            random_source: Batch source to spawn per-simulation sources from.
                If None, a fresh unseeded NumpyRandomSource is used.
            cancel_token: Optional token checked before each simulation

        Returns:
            List of curves ordered by simulation index

        Raises:
            BatchCancelledError: If the token was cancelled before the batch
                completed
        """
        source = random_source if random_source is not None else NumpyRandomSource()
        n = self.params.num_simulations
        children = source.spawn(n)

        logger.debug(
            "Running %d simulations of %d trades on %d worker(s)",
            n, self.params.num_trades, self.max_workers,
        )

        if self.max_workers == 1:
            curves = []
            for child in children:
                if cancel_token is not None and cancel_token.cancelled:
                    raise BatchCancelledError(len(curves), n)
                curves.append(self.generator.generate(child))
            return curves

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(self._run_one, child, cancel_token) for child in children]
            results = [future.result() for future in futures]

        completed = [curve for curve in results if curve is not None]
        if len(completed) < n:
            raise BatchCancelledError(len(completed), n)
        return completed

    def _run_one(self,
                 random_source: RandomSource,
                 cancel_token: Optional[CancellationToken]) -> Optional[np.ndarray]:
        if cancel_token is not None and cancel_token.cancelled:
            return None
        return self.generator.generate(random_source)
