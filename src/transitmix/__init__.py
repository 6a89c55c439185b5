"""Transitmix: fleet size, mix and schedule planner for urban bus networks."""

__version__ = "0.1.0"

# Main API
from .api import plan

# Core types
from .config.params import TransitmixParams
from .core_types import (
    Direction,
    FleetOptimizationResult,
    FleetPlan,
    HourlyDemand,
    KPIReport,
    PeakDemand,
    Route,
    ScheduleResult,
    TransitPlan,
    Trip,
    Vehicle,
    VehicleClass,
)
from .kpi.aggregator import compute_kpis
from .optimization.core import optimize_fleet

# Stage functions (for advanced users)
from .preprocess.demand import build_demand_profile
from .simulation.scheduler import simulate_schedule
from .utils.data_processing import load_route_demand as load_demand
from .utils.vehicle_pool import create_vehicle_pool

__all__ = [
    # Version
    "__version__",
    # Main API
    "plan",
    # Stage functions
    "load_demand",
    "build_demand_profile",
    "optimize_fleet",
    "create_vehicle_pool",
    "simulate_schedule",
    "compute_kpis",
    # Types
    "TransitmixParams",
    "TransitPlan",
    "Direction",
    "VehicleClass",
    "HourlyDemand",
    "Route",
    "PeakDemand",
    "FleetPlan",
    "FleetOptimizationResult",
    "Vehicle",
    "Trip",
    "ScheduleResult",
    "KPIReport",
]
