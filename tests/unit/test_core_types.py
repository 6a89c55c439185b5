import pytest

from transitmix.core_types import (
    Direction,
    FleetPlan,
    HourlyDemand,
    Route,
    RouteEndpoint,
    Trip,
    Vehicle,
    VehicleClass,
    validate_routes,
)


def test_vehicle_class_validation():
    with pytest.raises(ValueError, match="capacity"):
        VehicleClass("bad", 0, 1)
    with pytest.raises(ValueError, match="fleet_count"):
        VehicleClass("bad", 10, -1)
    with pytest.raises(ValueError, match="fuel_cost"):
        VehicleClass("bad", 10, 1, fuel_cost=-1)


def test_unit_cost_sums_per_km_rates():
    vc = VehicleClass("standard", 100, 5, 20, 3, 4, 1.1)
    assert vc.unit_cost == 27


def test_route_requires_all_24_hours():
    hours = tuple(HourlyDemand(h, 1, 1) for h in range(23))
    with pytest.raises(ValueError, match="24"):
        Route("R1", "R1", 1.0, 1.0, 5, 5, hours)


def test_route_rejects_duplicate_hours():
    hours = tuple(HourlyDemand(h, 1, 1) for h in range(23)) + (HourlyDemand(0, 1, 1),)
    with pytest.raises(ValueError, match="exactly once"):
        Route("R1", "R1", 1.0, 1.0, 5, 5, hours)


def test_route_sorts_hours_and_reads_by_direction():
    hours = tuple(HourlyDemand(h, h, 2 * h) for h in reversed(range(24)))
    route = Route("R1", "R1", 3.0, 4.0, 5, 6, hours)

    assert [d.hour for d in route.hourly_demand] == list(range(24))
    assert route.demand_at(5, Direction.A_TO_B) == 5
    assert route.demand_at(5, Direction.B_TO_A) == 10
    assert route.length(Direction.B_TO_A) == 4.0
    assert route.travel_time(Direction.A_TO_B) == 5


@pytest.mark.parametrize("field", ["length_a_to_b", "time_b_to_a"])
def test_route_rejects_non_positive_lengths_and_times(make_route, field):
    with pytest.raises(ValueError, match=field):
        make_route(**{field: 0})


@pytest.mark.parametrize("field", ["length_a_to_b", "length_b_to_a", "time_a_to_b"])
@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_route_rejects_non_finite_lengths_and_times(make_route, field, value):
    with pytest.raises(ValueError, match=field):
        make_route(**{field: value})


@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_hourly_demand_rejected(value):
    with pytest.raises(ValueError, match="finite"):
        HourlyDemand(3, value, 0)
    with pytest.raises(ValueError, match="finite"):
        HourlyDemand(3, 0, value)


def test_negative_hourly_demand_rejected():
    with pytest.raises(ValueError, match="negative"):
        HourlyDemand(3, -1, 0)
    with pytest.raises(ValueError, match="Hour"):
        HourlyDemand(24, 0, 0)


def test_duplicate_route_ids_rejected(make_route):
    with pytest.raises(ValueError, match="Duplicate"):
        validate_routes([make_route("R1"), make_route("R1")])


def test_route_to_dataframe_long_layout(make_route):
    df = Route.to_dataframe([make_route("R1", a_to_b=3), make_route("R2")])

    assert len(df) == 48
    assert df.loc[0, "Demand_AtoB"] == 3
    assert list(df["Hour"][:24]) == list(range(24))


def test_fleet_plan_bounds(vehicle_classes):
    with pytest.raises(ValueError, match="exceeds"):
        FleetPlan(counts={"minibus": 6}, vehicle_classes=vehicle_classes)
    with pytest.raises(ValueError, match="unknown"):
        FleetPlan(counts={"tram": 1}, vehicle_classes=vehicle_classes)

    plan = FleetPlan(counts={"minibus": 2, "articulated": 1}, vehicle_classes=vehicle_classes)
    assert plan.total_vehicles == 3
    assert plan.total_capacity == 240
    assert plan.relative_cost == 2 * 21 + 38


def test_vehicle_location_tracks_last_route(vehicle_classes):
    vehicle = Vehicle("MINIBUS_001", vehicle_classes["minibus"])
    assert vehicle.at_depot
    assert vehicle.last_route is None

    vehicle.location = RouteEndpoint("R9", Direction.A_TO_B.destination)
    assert vehicle.last_route == "R9"
    assert vehicle.to_dict()["location"] == "R9:B"


def test_trip_serialisation():
    trip = Trip("T00001", "MINIBUS_001", "minibus", "R1", Direction.B_TO_A, 10, 35, 30.0)

    assert trip.duration == 25
    assert trip.to_dict()["Direction"] == "BtoA"
    assert list(Trip.to_dataframe([]).columns)[0] == "Trip_ID"
    assert Trip.to_dataframe([trip]).loc[0, "End_Time"] == 35
