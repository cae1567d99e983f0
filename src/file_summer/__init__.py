"""File Summer - sum three-digit numbers across a file with parallel workers."""

from file_summer.config import SumConfig
from file_summer.solver import SumResult, main_solve, solve

__version__ = "0.1.0"

__all__ = ["SumConfig", "SumResult", "__version__", "main_solve", "solve"]
