from __future__ import annotations

from typing import Iterable, List


class SchedulerError(Exception):
    """Base class for every error raised by schedsim."""


class UnknownAlgorithm(SchedulerError, ValueError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown or unimplemented algorithm '{name}'")


class InvalidInput(SchedulerError, ValueError):
    """
    Raised by the input layer when a workload cannot be simulated.

    All problems found are collected in ``errors`` so they can be reported
    together.
    """

    def __init__(self, errors: Iterable[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors))


class SimulationError(SchedulerError, RuntimeError):
    """An engine invariant did not hold; always a bug, never bad input."""
