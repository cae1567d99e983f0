"""Coordinator: spawn workers, multiplex their channels, aggregate results."""

from file_summer.solver.aggregate import Aggregator
from file_summer.solver.multiplex import ReadinessMultiplexer
from file_summer.solver.solve import main_solve, solve
from file_summer.solver.types import CoordinatorState, SumResult, WorkerHandle

__all__ = [
    "Aggregator",
    "CoordinatorState",
    "ReadinessMultiplexer",
    "SumResult",
    "WorkerHandle",
    "main_solve",
    "solve",
]
