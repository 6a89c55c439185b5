"""Shared fixtures for the Transitmix test-suite."""

import pytest

from transitmix.config.params import (
    IOParams,
    ProblemParams,
    SimulationParams,
    TransitmixParams,
)
from transitmix.core_types import HourlyDemand, Route, VehicleClass


def build_route(
    route_id="R1",
    a_to_b=0,
    b_to_a=0,
    length_a_to_b=10.0,
    length_b_to_a=10.0,
    time_a_to_b=20,
    time_b_to_a=20,
):
    """Route with either a flat hourly demand or an explicit 24-entry profile."""
    a_profile = a_to_b if isinstance(a_to_b, (list, tuple)) else [a_to_b] * 24
    b_profile = b_to_a if isinstance(b_to_a, (list, tuple)) else [b_to_a] * 24
    return Route(
        route_id=route_id,
        name=f"Route {route_id}",
        length_a_to_b=length_a_to_b,
        length_b_to_a=length_b_to_a,
        time_a_to_b=time_a_to_b,
        time_b_to_a=time_b_to_a,
        hourly_demand=tuple(
            HourlyDemand(hour=h, demand_a_to_b=a_profile[h], demand_b_to_a=b_profile[h])
            for h in range(24)
        ),
    )


@pytest.fixture
def make_route():
    return build_route


@pytest.fixture
def vehicle_classes():
    return {
        "minibus": VehicleClass("minibus", 60, 5, 16, 2, 3, 0.7),
        "standard": VehicleClass("standard", 100, 5, 20, 3, 4, 1.1),
        "articulated": VehicleClass("articulated", 120, 5, 28, 4, 6, 1.4),
    }


@pytest.fixture
def small_params(vehicle_classes, tmp_path):
    """Parameters with a small fleet and results under tmp_path."""
    return TransitmixParams(
        problem=ProblemParams(
            vehicle_classes=vehicle_classes,
            driver_cost_per_hour=150.0,
        ),
        simulation=SimulationParams(),
        io=IOParams(results_dir=tmp_path / "results"),
    )


@pytest.fixture
def long_demand_csv(tmp_path):
    """Two-route CSV in the long (one row per route-hour) layout."""
    lines = [
        "Route_ID,Route_Name,Length_AtoB,Length_BtoA,Time_AtoB,Time_BtoA,Hour,Demand_AtoB,Demand_BtoA"
    ]
    for route_id, name, base in (("R1", "Downtown", 60), ("R2", "Harbour", 30)):
        for hour in range(24):
            peak = 3 if hour in (7, 8, 17) else 1
            lines.append(
                f"{route_id},{name},12.5,13.0,25,27,{hour},{base * peak},{base}"
            )
    path = tmp_path / "routes_long.csv"
    path.write_text("\n".join(lines) + "\n")
    return path
