"""
Bounded exhaustive search for the strategic fleet size-and-mix.
"""

# Re-export public functions from core
from .core import (
    _solve_internal,
    optimize_fleet,
)

__all__ = [
    "_solve_internal",
    "optimize_fleet",
]
