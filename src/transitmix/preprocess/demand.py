"""
Demand profile construction.

The two directions of a route are assumed to be served by disjoint vehicles, so
only the busier direction drives the capacity a route needs in a given hour.
Summing that figure across routes gives the concurrent, fleet-wide requirement
for the hour:

    system_demand[h] = Σ_routes max(demand_a_to_b[h], demand_b_to_a[h])

The busiest hour of that curve is what the strategic fleet optimizer sizes for.
"""

import numpy as np

from transitmix.core_types import HOURS_PER_DAY, PeakDemand, Route
from transitmix.utils.logging import TransitmixLogger

logger = TransitmixLogger.get_logger(__name__)


def _demand_matrix(routes: list[Route]) -> np.ndarray:
    """Return an array of shape (n_routes, 24, 2) with AtoB/BtoA counts."""
    matrix = np.zeros((len(routes), HOURS_PER_DAY, 2), dtype=float)
    for i, route in enumerate(routes):
        for demand in route.hourly_demand:
            matrix[i, demand.hour, 0] = demand.demand_a_to_b
            matrix[i, demand.hour, 1] = demand.demand_b_to_a
    return matrix


def system_demand_curve(routes: list[Route]) -> np.ndarray:
    """Hourly system demand (24 entries); hours without data count as zero."""
    if not routes:
        return np.zeros(HOURS_PER_DAY, dtype=float)
    matrix = _demand_matrix(routes)
    return matrix.max(axis=2).sum(axis=0)


def build_demand_profile(routes: list[Route]) -> PeakDemand:
    """Locate the busiest hour of the system-wide demand curve.

    Args:
        routes: Validated routes, each with 24 hourly demand entries.

    Returns:
        PeakDemand with the peak hour, its magnitude and the full curve. Ties
        resolve to the earliest hour.

    Example:
        >>> peak = build_demand_profile(routes)
        >>> peak.hour, peak.demand
        (7, 1840.0)
    """
    curve = system_demand_curve(routes)
    # argmax returns the first occurrence of the maximum
    peak_hour = int(np.argmax(curve))
    peak = PeakDemand(
        hour=peak_hour,
        demand=float(curve[peak_hour]),
        system_demand=tuple(float(v) for v in curve),
    )
    logger.info(
        f"System peak at {peak.hour:02d}:00 with {peak.demand:,.0f} passengers "
        f"across {len(routes)} routes"
    )
    return peak


def total_passengers(routes: list[Route]) -> float:
    """Design-level demand: every hourly entry, both directions, all routes."""
    if not routes:
        return 0.0
    return float(_demand_matrix(routes).sum())
