"""Test the public API surface of transitmix."""

import inspect


def test_public_api_exports():
    import transitmix

    expected_exports = {
        "__version__",
        "plan",
        "load_demand",
        "build_demand_profile",
        "optimize_fleet",
        "create_vehicle_pool",
        "simulate_schedule",
        "compute_kpis",
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
    }

    actual_exports = set(transitmix.__all__)

    assert actual_exports == expected_exports, (
        f"Unexpected exports. "
        f"Missing: {expected_exports - actual_exports}, "
        f"Extra: {actual_exports - expected_exports}"
    )
    for name in transitmix.__all__:
        assert hasattr(transitmix, name), name


def test_plan_signature():
    from transitmix import plan

    params = inspect.signature(plan).parameters
    assert list(params) == [
        "demand",
        "config",
        "output_dir",
        "verbose",
        "infeasible_policy",
    ]
    assert params["output_dir"].default == "results"
    assert params["infeasible_policy"].default is None


def test_plan_returns_transit_plan(make_route, small_params):
    from transitmix import TransitPlan, plan

    result = plan([make_route("R1", a_to_b=20, b_to_a=20)], small_params, output_dir=None)

    assert isinstance(result, TransitPlan)
    assert set(result.to_dict()) == {"peak", "fleet", "schedule", "kpis", "time_measurements"}
    assert list(result.trips_df.columns)[:2] == ["Trip_ID", "Vehicle_ID"]
