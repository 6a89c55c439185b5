"""
Cost, distance and emission KPIs for a simulated schedule.
"""

from .aggregator import compute_kpis

__all__ = ["compute_kpis"]
