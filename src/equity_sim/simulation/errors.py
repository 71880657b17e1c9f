# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE

"""Error types raised by the simulation core."""


class ValidationError(ValueError):
    """Raised when a simulation parameter is malformed or out of range.

    Attributes:
        field: Name of the offending ParameterSet field
        message: Human-readable description of the problem
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class EmptyBatchError(ValueError):
    """Raised when results are aggregated over zero simulated curves."""


class BatchCancelledError(RuntimeError):
    """Raised when a batch is aborted through its cancellation token."""

    def __init__(self, completed: int, requested: int):
        self.completed = completed
        self.requested = requested
        super().__init__(
            f"Simulation batch cancelled after {completed} of {requested} simulations"
        )
