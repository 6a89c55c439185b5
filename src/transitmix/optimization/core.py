"""
core.py

Solves the **strategic fleet size-and-mix** problem: choose how many vehicles of
each class to field so that the combined capacity covers the system peak hour at
minimum relative cost.

Formulation
-----------
Objective: minimise  Σ_i n_i · c_i

subject to
* Coverage – Σ_i n_i · q_i ≥ D
* Availability – 0 ≤ n_i ≤ N_i, n_i integer

Key symbols
~~~~~~~~~~~
``D``    Peak system demand (passengers in the busiest hour).
``q_i``  Capacity of class *i*.
``N_i``  Units of class *i* available (``fleet_count``).
``c_i``  Per-km cost proxy ``fuel + maintenance + depreciation``; only used to
         rank mixes against each other, not as an absolute daily cost.

Search
------
Fleet sizes are small integers, so the problem is solved by bounded exhaustive
search instead of a MILP. Classes are sorted by ascending capacity. Every count
combination of the first k-1 classes is enumerated with
``n_i ≤ min(N_i, ceil(D / q_i))``; the count of the last class is then the
smallest one that covers the residual demand. The first combination reaching the
minimum cost wins, which keeps results deterministic for a fixed class order.

Typical usage
-------------
>>> from transitmix.preprocess.demand import build_demand_profile
>>> from transitmix.optimization import optimize_fleet
>>> peak = build_demand_profile(routes)
>>> result = optimize_fleet(peak, params.problem.vehicle_classes)
>>> result.plan.counts
{'minibus': 0, 'standard': 4, 'articulated': 2}
"""

import itertools
import math
import time
from collections.abc import Mapping

from transitmix.core_types import (
    FleetOptimizationResult,
    FleetPlan,
    PeakDemand,
    VehicleClass,
)
from transitmix.utils.logging import TransitmixLogger

logger = TransitmixLogger.get_logger(__name__)


def _ordered_classes(
    vehicle_classes: Mapping[str, VehicleClass] | list[VehicleClass],
) -> list[VehicleClass]:
    """Classes sorted smallest-capacity first; stable on input order."""
    if isinstance(vehicle_classes, Mapping):
        classes = list(vehicle_classes.values())
    else:
        classes = list(vehicle_classes)
    names = [vc.name for vc in classes]
    if len(set(names)) != len(names):
        raise ValueError(f"Duplicate vehicle class names: {names}")
    return sorted(classes, key=lambda vc: vc.capacity)


def _search_bound(vehicle_class: VehicleClass, demand: float) -> int:
    """Largest count worth trying for a non-last class."""
    if demand <= 0:
        return 0
    return min(vehicle_class.fleet_count, math.ceil(demand / vehicle_class.capacity))


def _required_units(residual: float, capacity: int) -> int:
    if residual <= 0:
        return 0
    return math.ceil(residual / capacity)


def optimize_fleet(
    peak_demand: PeakDemand | float,
    vehicle_classes: Mapping[str, VehicleClass] | list[VehicleClass],
    peak_hour: int | None = None,
) -> FleetOptimizationResult:
    """Find the minimum-cost vehicle class mix covering the peak demand.

    Args:
        peak_demand: Either a :class:`PeakDemand` from
            :func:`transitmix.preprocess.demand.build_demand_profile` or the raw
            peak passenger figure.
        vehicle_classes: Available classes with capacity, fleet size and
            per-km rates, keyed by name or given as a list.
        peak_hour: Hour to report when ``peak_demand`` is a plain number.

    Returns:
        FleetOptimizationResult: the chosen :class:`FleetPlan` and the peak
        descriptor. If even the whole fleet cannot cover the peak, the result has
        ``is_feasible=False`` and a best-effort plan using every available
        vehicle; this outcome is reported, never raised.

    Example:
        >>> result = optimize_fleet(1000, classes)
        >>> result.is_feasible, result.plan.total_capacity >= 1000
        (True, True)
    """
    if isinstance(peak_demand, PeakDemand):
        peak = peak_demand
    else:
        peak = PeakDemand(hour=-1 if peak_hour is None else peak_hour, demand=float(peak_demand))

    classes = _ordered_classes(vehicle_classes)
    class_lookup = {vc.name: vc for vc in classes}

    start_time = time.time()
    best_counts, best_cost, evaluated = _solve_internal(peak.demand, classes)
    runtime = time.time() - start_time

    if best_counts is None:
        # Cover as much as possible: every available unit of every class.
        plan = FleetPlan(
            counts={vc.name: vc.fleet_count for vc in classes},
            vehicle_classes=class_lookup,
        )
        result = FleetOptimizationResult(
            plan=plan,
            peak=peak,
            is_feasible=False,
            status="Infeasible",
            relative_cost=plan.relative_cost,
            combinations_evaluated=evaluated,
            runtime_sec=runtime,
        )
        logger.warning(
            f"Fleet cannot cover peak demand of {peak.demand:,.0f} passengers: "
            f"total available capacity is {plan.total_capacity:,} "
            f"(shortfall {result.capacity_shortfall:,.0f})"
        )
        return result

    plan = FleetPlan(counts=best_counts, vehicle_classes=class_lookup)
    logger.info(
        f"Fleet plan: {plan.total_vehicles} vehicles, capacity {plan.total_capacity:,} "
        f"for peak {peak.demand:,.0f} ({evaluated} combinations evaluated)"
    )
    logger.debug(f"Fleet counts: {plan.counts}, relative cost {best_cost:.2f}")
    return FleetOptimizationResult(
        plan=plan,
        peak=peak,
        is_feasible=True,
        status="Optimal",
        relative_cost=best_cost,
        combinations_evaluated=evaluated,
        runtime_sec=runtime,
    )


def _solve_internal(
    demand: float, classes: list[VehicleClass]
) -> tuple[dict[str, int] | None, float, int]:
    """Bounded exhaustive search over ``classes`` (already ordered).

    Returns the best counts (``None`` when infeasible), their cost and the number
    of combinations evaluated.
    """
    if not classes:
        if demand <= 0:
            return {}, 0.0, 1
        return None, math.inf, 0

    total_capacity = sum(vc.fleet_count * vc.capacity for vc in classes)
    if total_capacity < demand:
        return None, math.inf, 0

    *leading, last = classes
    ranges = [range(_search_bound(vc, demand) + 1) for vc in leading]

    best_counts: dict[str, int] | None = None
    best_cost = math.inf
    evaluated = 0

    for combo in itertools.product(*ranges):
        evaluated += 1
        covered = sum(n * vc.capacity for n, vc in zip(combo, leading))
        last_count = _required_units(demand - covered, last.capacity)
        if last_count > last.fleet_count:
            continue

        cost = sum(n * vc.unit_cost for n, vc in zip(combo, leading))
        cost += last_count * last.unit_cost
        if cost < best_cost:
            best_cost = cost
            best_counts = {vc.name: n for n, vc in zip(combo, leading)}
            best_counts[last.name] = last_count

    if best_counts is None:
        return None, math.inf, evaluated
    return best_counts, best_cost, evaluated
