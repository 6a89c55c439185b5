"""
Minute-by-minute operational schedule simulation.
"""

from .scheduler import simulate_schedule

__all__ = ["simulate_schedule"]
