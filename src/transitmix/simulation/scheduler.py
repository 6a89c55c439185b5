"""
scheduler.py

Turns a fleet plan into a day-long trip timetable by forward simulation, one
minute at a time.

Every (route, direction) pair keeps a real-valued ``pending`` passenger
accumulator. Each simulated minute the current clock hour's demand is spread
evenly (``demand / 60``) into the accumulators; once a pair has gathered
``trip_trigger_fraction × reference_capacity`` passengers a vehicle is
dispatched to it.

Vehicle choice is a linear scan over the idle vehicles with a heuristic cost::

    cost = (now - available_from) + interlining_penalty · [switching routes]

i.e. prefer the vehicle that became free most recently and avoid repositioning
a vehicle between routes (interlining) unless it pays off. Ties break on the
earliest ``available_from`` and then on vehicle id, so a run is fully
deterministic.

Time base
---------
Trip times and ``Vehicle.available_from`` are minutes since operation start.
Minute ``m`` maps to clock hour ``((operation_start_time + m) // 60) % 24``.

The loop is inherently sequential: availability and accumulators at minute
``m + 1`` depend on the decisions taken at minute ``m``. All assignments within
a minute happen in a single pass over routes (input order) and directions
(AtoB before BtoA).
"""

import copy
from dataclasses import dataclass, field

from transitmix.config.params import SimulationParams
from transitmix.core_types import (
    Direction,
    FleetPlan,
    Route,
    RouteEndpoint,
    ScheduleResult,
    ScheduleStats,
    Trip,
    Vehicle,
    VehicleUtilization,
    validate_routes,
)
from transitmix.utils.logging import TransitmixLogger
from transitmix.utils.vehicle_pool import create_vehicle_pool

logger = TransitmixLogger.get_logger(__name__)

MINUTES_PER_HOUR = 60
# Residues below this are floating point noise, not unmet passengers.
UNMET_EPSILON = 1e-9

DIRECTIONS = (Direction.A_TO_B, Direction.B_TO_A)


@dataclass
class _SimulationState:
    """Mutable bookkeeping owned by a single simulation run."""

    vehicles: list[Vehicle]
    pending: dict[tuple[str, Direction], float]
    trips: list[Trip] = field(default_factory=list)
    routes_served: dict[str, list[str]] = field(default_factory=dict)

    def next_trip_id(self) -> str:
        return f"T{len(self.trips) + 1:05d}"


def simulate_schedule(
    fleet_plan: FleetPlan,
    routes: list[Route],
    params: SimulationParams,
    vehicles: list[Vehicle] | None = None,
) -> ScheduleResult:
    """Simulate a full operating day and dispatch trips as demand accrues.

    Args:
        fleet_plan: Vehicle counts per class, normally the plan chosen by
            :func:`transitmix.optimization.optimize_fleet`.
        routes: Route table with hourly demand; route ids must be unique.
        params: Simulation settings (start time, horizon, turnaround buffer,
            interlining penalty, trigger fraction, ...).
        vehicles: Optional pre-built pool. It is copied, never mutated. When
            omitted the pool is built from ``fleet_plan`` with
            :func:`transitmix.utils.vehicle_pool.create_vehicle_pool`.

    Returns:
        ScheduleResult with every trip in dispatch order and aggregate
        statistics, including the demand still pending at the end of the
        horizon (``stats.unmet_demand``).
    """
    validate_routes(routes)

    pool = (
        copy.deepcopy(vehicles)
        if vehicles is not None
        else create_vehicle_pool(fleet_plan)
    )
    vehicle_ids = [v.vehicle_id for v in pool]
    if len(set(vehicle_ids)) != len(vehicle_ids):
        raise ValueError("Vehicle pool contains duplicate vehicle ids")

    state = _SimulationState(
        vehicles=pool,
        pending={(route.route_id, d): 0.0 for route in routes for d in DIRECTIONS},
        routes_served={v.vehicle_id: [] for v in pool},
    )

    reference_capacity = _reference_capacity(pool, params)
    threshold = (
        params.trip_trigger_fraction * reference_capacity
        if reference_capacity is not None
        else None
    )
    logger.debug(
        f"Simulating {params.operation_duration_minutes} minutes for {len(routes)} routes "
        f"with {len(pool)} vehicles (dispatch threshold {threshold})"
    )

    for minute in range(params.operation_duration_minutes):
        hour = ((params.operation_start_time + minute) // MINUTES_PER_HOUR) % 24
        _accrue_demand(state, routes, hour)

        if threshold is None:
            # No vehicles at all: demand only accumulates.
            continue

        for route in routes:
            for direction in DIRECTIONS:
                key = (route.route_id, direction)
                pending = state.pending[key]
                if pending <= 0 or pending < threshold:
                    continue
                _dispatch(state, route, direction, minute, params)

    result = ScheduleResult(
        trips=state.trips,
        stats=_calculate_schedule_statistics(state, routes),
    )

    if result.stats.unmet_demand:
        logger.warning(
            f"{result.stats.total_unmet_demand:,.1f} passengers left unserved at the end of "
            f"the horizon on {len(result.stats.unmet_demand)} route directions"
        )
    logger.info(
        f"Schedule: {result.stats.total_trips} trips, "
        f"{result.stats.total_distance:,.1f} km, "
        f"{sum(result.stats.vehicles_used.values())} vehicles used"
    )
    return result


def _reference_capacity(pool: list[Vehicle], params: SimulationParams) -> int | None:
    if params.reference_capacity is not None:
        return params.reference_capacity if pool else None
    if not pool:
        return None
    return min(v.vehicle_class.capacity for v in pool)


def _accrue_demand(state: _SimulationState, routes: list[Route], hour: int) -> None:
    for route in routes:
        for direction in DIRECTIONS:
            share = route.demand_at(hour, direction) / MINUTES_PER_HOUR
            if share:
                state.pending[(route.route_id, direction)] += share


def _dispatch_cost(
    vehicle: Vehicle, route_id: str, now: int, params: SimulationParams
) -> float:
    cost = now - vehicle.available_from
    if not vehicle.at_depot and vehicle.last_route != route_id:
        cost += params.interlining_penalty
    return cost


def _can_serve(
    state: _SimulationState, vehicle: Vehicle, route_id: str, params: SimulationParams
) -> bool:
    if params.max_routes_per_vehicle is None:
        return True
    served = state.routes_served[vehicle.vehicle_id]
    return route_id in served or len(served) < params.max_routes_per_vehicle


def _select_vehicle(
    state: _SimulationState, route_id: str, now: int, params: SimulationParams
) -> Vehicle | None:
    """Cheapest idle vehicle for ``route_id`` or None if every vehicle is busy."""
    best: Vehicle | None = None
    best_key: tuple[float, float, str] | None = None
    for vehicle in state.vehicles:
        if vehicle.available_from > now:
            continue
        if not _can_serve(state, vehicle, route_id, params):
            continue
        key = (
            _dispatch_cost(vehicle, route_id, now, params),
            vehicle.available_from,
            vehicle.vehicle_id,
        )
        if best_key is None or key < best_key:
            best, best_key = vehicle, key
    return best


def _dispatch(
    state: _SimulationState,
    route: Route,
    direction: Direction,
    now: int,
    params: SimulationParams,
) -> Trip | None:
    vehicle = _select_vehicle(state, route.route_id, now, params)
    if vehicle is None:
        return None

    key = (route.route_id, direction)
    boarded = min(state.pending[key], vehicle.vehicle_class.capacity)
    end_time = now + route.travel_time(direction)

    trip = Trip(
        trip_id=state.next_trip_id(),
        vehicle_id=vehicle.vehicle_id,
        vehicle_class=vehicle.vehicle_class.name,
        route_id=route.route_id,
        direction=direction,
        start_time=now,
        end_time=end_time,
        passengers=boarded,
    )
    state.trips.append(trip)

    vehicle.available_from = end_time + params.turnaround_buffer
    vehicle.location = RouteEndpoint(route.route_id, direction.destination)
    state.pending[key] -= boarded

    served = state.routes_served[vehicle.vehicle_id]
    if route.route_id not in served:
        served.append(route.route_id)
    return trip


def _calculate_schedule_statistics(
    state: _SimulationState, routes: list[Route]
) -> ScheduleStats:
    route_lookup = {route.route_id: route for route in routes}
    stats = ScheduleStats()

    for vehicle in state.vehicles:
        stats.vehicle_utilization[vehicle.vehicle_id] = VehicleUtilization(
            vehicle_class=vehicle.vehicle_class.name,
            routes_served=list(state.routes_served[vehicle.vehicle_id]),
        )

    for trip in state.trips:
        route = route_lookup[trip.route_id]
        stats.total_trips += 1
        stats.total_distance += route.length(trip.direction)
        stats.total_duration += trip.duration
        stats.passengers_served += trip.passengers

        util = stats.vehicle_utilization[trip.vehicle_id]
        util.trips += 1
        util.total_time_on_duty += trip.duration

    for util in stats.vehicle_utilization.values():
        if util.trips:
            stats.vehicles_used[util.vehicle_class] = (
                stats.vehicles_used.get(util.vehicle_class, 0) + 1
            )

    stats.unmet_demand = {
        key: pending
        for key, pending in state.pending.items()
        if pending > UNMET_EPSILON
    }
    return stats
