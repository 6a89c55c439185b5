import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

import pandas as pd

from transitmix.utils.time_measurement import TimeMeasurement

HOURS_PER_DAY = 24


class Direction(Enum):
    """Travel direction along a route."""

    A_TO_B = "AtoB"
    B_TO_A = "BtoA"

    @property
    def destination(self) -> str:
        """Endpoint reached at the end of a trip in this direction."""
        return "B" if self is Direction.A_TO_B else "A"


@dataclass(frozen=True)
class VehicleClass:
    """A vehicle class (minibus, standard, articulated, ...) and its per-km rates."""

    name: str
    capacity: int  # passengers
    fleet_count: int  # units available
    fuel_cost: float = 0.0  # per km
    maintenance_cost: float = 0.0  # per km
    depreciation_cost: float = 0.0  # per km
    carbon_emission: float = 0.0  # kg CO2 per km

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError(
                f"Vehicle class '{self.name}': capacity must be positive, got {self.capacity}"
            )
        if self.fleet_count < 0:
            raise ValueError(
                f"Vehicle class '{self.name}': fleet_count cannot be negative, got {self.fleet_count}"
            )
        for rate in ("fuel_cost", "maintenance_cost", "depreciation_cost", "carbon_emission"):
            if getattr(self, rate) < 0:
                raise ValueError(f"Vehicle class '{self.name}': {rate} cannot be negative")

    @property
    def unit_cost(self) -> float:
        """Per-km cost proxy used to compare class mixes."""
        return self.fuel_cost + self.maintenance_cost + self.depreciation_cost

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HourlyDemand:
    """Passenger counts for one hour of the day, both directions."""

    hour: int
    demand_a_to_b: float
    demand_b_to_a: float

    def __post_init__(self):
        if not 0 <= self.hour < HOURS_PER_DAY:
            raise ValueError(f"Hour must be in 0..23, got {self.hour}")
        for value in (self.demand_a_to_b, self.demand_b_to_a):
            if not math.isfinite(value) or value < 0:
                raise ValueError(
                    f"Demand for hour {self.hour} must be a finite non-negative number"
                )

    def for_direction(self, direction: Direction) -> float:
        if direction is Direction.A_TO_B:
            return self.demand_a_to_b
        return self.demand_b_to_a


@dataclass(frozen=True)
class Route:
    """A bidirectional route with its 24-hour demand profile."""

    route_id: str
    name: str
    length_a_to_b: float  # km
    length_b_to_a: float  # km
    time_a_to_b: int  # minutes
    time_b_to_a: int  # minutes
    hourly_demand: tuple[HourlyDemand, ...]

    def __post_init__(self):
        for attr in ("length_a_to_b", "length_b_to_a", "time_a_to_b", "time_b_to_a"):
            value = getattr(self, attr)
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"Route '{self.route_id}': {attr} must be positive")

        entries = tuple(sorted(self.hourly_demand, key=lambda d: d.hour))
        if len(entries) != HOURS_PER_DAY:
            raise ValueError(
                f"Route '{self.route_id}': expected {HOURS_PER_DAY} hourly demand entries, "
                f"got {len(entries)}"
            )
        if [d.hour for d in entries] != list(range(HOURS_PER_DAY)):
            raise ValueError(
                f"Route '{self.route_id}': hourly demand must cover each hour 0..23 exactly once"
            )
        object.__setattr__(self, "hourly_demand", entries)

    def length(self, direction: Direction) -> float:
        if direction is Direction.A_TO_B:
            return self.length_a_to_b
        return self.length_b_to_a

    def travel_time(self, direction: Direction) -> int:
        if direction is Direction.A_TO_B:
            return self.time_a_to_b
        return self.time_b_to_a

    def demand_at(self, hour: int, direction: Direction) -> float:
        return self.hourly_demand[hour].for_direction(direction)

    def total_demand(self) -> float:
        return sum(d.demand_a_to_b + d.demand_b_to_a for d in self.hourly_demand)

    @staticmethod
    def to_dataframe(routes: list["Route"]) -> pd.DataFrame:
        """Convert routes to the long (one row per route-hour) DataFrame layout."""
        if len(routes) == 0:
            return pd.DataFrame(
                columns=[
                    "Route_ID", "Route_Name", "Length_AtoB", "Length_BtoA",
                    "Time_AtoB", "Time_BtoA", "Hour", "Demand_AtoB", "Demand_BtoA",
                ]
            )

        data = []
        for route in routes:
            for demand in route.hourly_demand:
                data.append(
                    {
                        "Route_ID": route.route_id,
                        "Route_Name": route.name,
                        "Length_AtoB": route.length_a_to_b,
                        "Length_BtoA": route.length_b_to_a,
                        "Time_AtoB": route.time_a_to_b,
                        "Time_BtoA": route.time_b_to_a,
                        "Hour": demand.hour,
                        "Demand_AtoB": demand.demand_a_to_b,
                        "Demand_BtoA": demand.demand_b_to_a,
                    }
                )
        return pd.DataFrame(data)


def validate_routes(routes: list[Route]) -> None:
    """Reject route tables with duplicate identifiers."""
    seen: set[str] = set()
    duplicates = []
    for route in routes:
        if route.route_id in seen:
            duplicates.append(route.route_id)
        seen.add(route.route_id)
    if duplicates:
        raise ValueError(f"Duplicate route ids: {sorted(set(duplicates))}")


@dataclass(frozen=True)
class PeakDemand:
    """Busiest hour of the system-wide demand curve."""

    hour: int
    demand: float
    system_demand: tuple[float, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "hour": self.hour,
            "demand": self.demand,
            "system_demand": list(self.system_demand),
        }


@dataclass(frozen=True)
class FleetPlan:
    """Vehicle counts per class chosen to cover the peak hour."""

    counts: dict[str, int]
    vehicle_classes: dict[str, VehicleClass]

    def __post_init__(self):
        object.__setattr__(self, "counts", dict(self.counts))
        object.__setattr__(self, "vehicle_classes", dict(self.vehicle_classes))
        for name, count in self.counts.items():
            if name not in self.vehicle_classes:
                raise ValueError(f"FleetPlan references unknown vehicle class '{name}'")
            if count < 0:
                raise ValueError(f"FleetPlan count for '{name}' cannot be negative")
            if count > self.vehicle_classes[name].fleet_count:
                raise ValueError(
                    f"FleetPlan count for '{name}' ({count}) exceeds available fleet "
                    f"({self.vehicle_classes[name].fleet_count})"
                )

    @property
    def total_vehicles(self) -> int:
        return sum(self.counts.values())

    @property
    def total_capacity(self) -> int:
        return sum(
            count * self.vehicle_classes[name].capacity
            for name, count in self.counts.items()
        )

    @property
    def relative_cost(self) -> float:
        return sum(
            count * self.vehicle_classes[name].unit_cost
            for name, count in self.counts.items()
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "counts": dict(self.counts),
            "total_vehicles": self.total_vehicles,
            "total_capacity": self.total_capacity,
            "relative_cost": self.relative_cost,
        }


@dataclass
class FleetOptimizationResult:
    """Outcome of the strategic fleet search.

    When ``is_feasible`` is False the ``plan`` is a best-effort plan that uses
    every available vehicle; callers decide whether to proceed with it.
    """

    plan: FleetPlan
    peak: PeakDemand
    is_feasible: bool
    status: str = "Unknown"
    relative_cost: float = 0.0
    combinations_evaluated: int = 0
    runtime_sec: float = 0.0

    @property
    def capacity_shortfall(self) -> float:
        return max(0.0, self.peak.demand - self.plan.total_capacity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "is_feasible": self.is_feasible,
            "relative_cost": self.relative_cost,
            "capacity_shortfall": self.capacity_shortfall,
            "combinations_evaluated": self.combinations_evaluated,
            "runtime_sec": self.runtime_sec,
            "plan": self.plan.to_dict(),
            "peak": self.peak.to_dict(),
        }


@dataclass(frozen=True)
class RouteEndpoint:
    """Where a vehicle's last trip ended."""

    route_id: str
    endpoint: str  # "A" or "B"

    def __str__(self) -> str:
        return f"{self.route_id}:{self.endpoint}"


@dataclass
class Vehicle:
    """A single unit of the fleet as tracked by the schedule simulator."""

    vehicle_id: str
    vehicle_class: VehicleClass
    available_from: float = 0.0  # minutes since operation start
    location: RouteEndpoint | None = None  # None means the depot

    @property
    def at_depot(self) -> bool:
        return self.location is None

    @property
    def last_route(self) -> str | None:
        return None if self.location is None else self.location.route_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "vehicle_id": self.vehicle_id,
            "vehicle_class": self.vehicle_class.name,
            "available_from": self.available_from,
            "location": "depot" if self.location is None else str(self.location),
        }


@dataclass(frozen=True)
class Trip:
    """One dispatched trip; times are minutes since operation start."""

    trip_id: str
    vehicle_id: str
    vehicle_class: str
    route_id: str
    direction: Direction
    start_time: int
    end_time: int
    passengers: float = 0.0

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "Trip_ID": self.trip_id,
            "Vehicle_ID": self.vehicle_id,
            "Vehicle_Class": self.vehicle_class,
            "Route_ID": self.route_id,
            "Direction": self.direction.value,
            "Start_Time": self.start_time,
            "End_Time": self.end_time,
            "Passengers": self.passengers,
        }

    @staticmethod
    def to_dataframe(trips: list["Trip"]) -> pd.DataFrame:
        """Convert a trip list to a DataFrame (one row per trip)."""
        if len(trips) == 0:
            return pd.DataFrame(
                columns=[
                    "Trip_ID", "Vehicle_ID", "Vehicle_Class", "Route_ID",
                    "Direction", "Start_Time", "End_Time", "Passengers",
                ]
            )
        return pd.DataFrame([trip.to_dict() for trip in trips])


@dataclass
class VehicleUtilization:
    vehicle_class: str
    trips: int = 0
    total_time_on_duty: int = 0  # minutes
    routes_served: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ScheduleStats:
    """Aggregates over a simulated day."""

    total_trips: int = 0
    total_distance: float = 0.0
    total_duration: int = 0  # minutes
    passengers_served: float = 0.0
    vehicles_used: dict[str, int] = field(default_factory=dict)
    unmet_demand: dict[tuple[str, Direction], float] = field(default_factory=dict)
    vehicle_utilization: dict[str, VehicleUtilization] = field(default_factory=dict)

    @property
    def total_unmet_demand(self) -> float:
        return sum(self.unmet_demand.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_trips": self.total_trips,
            "total_distance": self.total_distance,
            "total_duration": self.total_duration,
            "passengers_served": self.passengers_served,
            "vehicles_used": dict(self.vehicles_used),
            "total_unmet_demand": self.total_unmet_demand,
            "unmet_demand": {
                f"{route_id}:{direction.value}": pending
                for (route_id, direction), pending in self.unmet_demand.items()
            },
            "vehicle_utilization": {
                vehicle_id: util.to_dict()
                for vehicle_id, util in self.vehicle_utilization.items()
            },
        }


@dataclass
class ScheduleResult:
    """Full-day trip list in dispatch order plus statistics."""

    trips: list[Trip] = field(default_factory=list)
    stats: ScheduleStats = field(default_factory=ScheduleStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "trips": [trip.to_dict() for trip in self.trips],
        }


@dataclass
class ClassKPI:
    trips: int = 0
    distance: float = 0.0
    fuel_cost: float = 0.0
    maintenance_cost: float = 0.0
    depreciation_cost: float = 0.0
    carbon_emission: float = 0.0


@dataclass
class KPIReport:
    """Rolled-up cost, distance and emission metrics for a schedule.

    ``total_passengers`` is the design demand (sum of every hourly entry);
    ``passengers_served`` is what the simulator actually boarded. The two differ
    whenever the schedule leaves unmet demand.
    """

    total_passengers: float = 0.0
    passengers_served: float = 0.0
    unmet_demand: float = 0.0
    total_distance: float = 0.0
    total_fuel_cost: float = 0.0
    total_maintenance_cost: float = 0.0
    total_depreciation_cost: float = 0.0
    total_driver_cost: float = 0.0
    total_operating_cost: float = 0.0
    total_carbon_emission: float = 0.0
    cost_per_km: float = 0.0
    cost_per_passenger: float = 0.0
    cost_per_served_passenger: float = 0.0
    carbon_per_passenger: float = 0.0
    class_breakdown: dict[str, ClassKPI] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TransitPlan:
    """Everything one planning run produces, stage by stage."""

    peak: PeakDemand
    fleet: FleetOptimizationResult
    schedule: ScheduleResult
    kpis: KPIReport
    time_measurements: list[TimeMeasurement] | None = None
    results_file: str | None = None

    @property
    def trips_df(self) -> pd.DataFrame:
        return Trip.to_dataframe(self.schedule.trips)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "peak": self.peak.to_dict(),
            "fleet": self.fleet.to_dict(),
            "schedule": self.schedule.to_dict(),
            "kpis": self.kpis.to_dict(),
        }
        if self.time_measurements:
            data["time_measurements"] = [m.to_dict() for m in self.time_measurements]
        return data
