import itertools
import math

import hypothesis.strategies as st
import pytest
from hypothesis import assume, given, settings

from transitmix.core_types import PeakDemand, VehicleClass
from transitmix.optimization import _solve_internal, optimize_fleet


def _brute_force_cost(demand, classes):
    """Reference minimum cost over every count combination, or None."""
    best = None
    for combo in itertools.product(*[range(vc.fleet_count + 1) for vc in classes]):
        capacity = sum(n * vc.capacity for n, vc in zip(combo, classes))
        if capacity < demand:
            continue
        cost = sum(n * vc.unit_cost for n, vc in zip(combo, classes))
        if best is None or cost < best:
            best = cost
    return best


class_strategy = st.lists(
    st.tuples(
        st.integers(min_value=1, max_value=150),  # capacity
        st.integers(min_value=0, max_value=6),  # fleet_count
        st.integers(min_value=1, max_value=40),  # fuel cost
    ),
    min_size=1,
    max_size=3,
)


def _classes(raw):
    return [
        VehicleClass(name=f"class_{i}", capacity=cap, fleet_count=count, fuel_cost=fuel)
        for i, (cap, count, fuel) in enumerate(raw)
    ]


def test_scenario_peak_1000_three_classes_is_feasible(vehicle_classes):
    result = optimize_fleet(PeakDemand(hour=7, demand=1000), vehicle_classes)

    assert result.is_feasible
    assert result.status == "Optimal"
    assert result.plan.total_capacity >= 1000
    for name, count in result.plan.counts.items():
        assert 0 <= count <= vehicle_classes[name].fleet_count
    assert result.relative_cost == pytest.approx(
        _brute_force_cost(1000, list(vehicle_classes.values()))
    )


def test_all_zero_fleet_is_infeasible_for_positive_peak():
    classes = [
        VehicleClass("minibus", 60, 0, 16, 2, 3),
        VehicleClass("standard", 100, 0, 20, 3, 4),
    ]

    result = optimize_fleet(10, classes)

    assert not result.is_feasible
    assert result.status == "Infeasible"
    assert result.plan.total_vehicles == 0
    assert result.capacity_shortfall == 10


def test_all_zero_fleet_covers_zero_peak():
    classes = [VehicleClass("minibus", 60, 0), VehicleClass("standard", 100, 0)]

    result = optimize_fleet(0, classes)

    assert result.is_feasible
    assert result.plan.counts == {"minibus": 0, "standard": 0}


def test_infeasible_plan_uses_full_fleet(vehicle_classes):
    result = optimize_fleet(5000, vehicle_classes)

    assert not result.is_feasible
    assert result.plan.counts == {name: vc.fleet_count for name, vc in vehicle_classes.items()}
    assert result.capacity_shortfall == 5000 - 1400


def test_plain_number_peak_keeps_reported_hour(vehicle_classes):
    result = optimize_fleet(250, vehicle_classes, peak_hour=8)

    assert result.peak.hour == 8
    assert result.peak.demand == 250


def test_cheapest_class_mix_is_chosen():
    classes = {
        "small": VehicleClass("small", 50, 10, fuel_cost=10),
        "large": VehicleClass("large", 100, 10, fuel_cost=30),
    }

    result = optimize_fleet(200, classes)

    # Four small (cost 40) beat two large (cost 60).
    assert result.plan.counts == {"small": 4, "large": 0}


def test_cost_ties_keep_first_combination_found():
    classes = [
        VehicleClass("a", 50, 4, fuel_cost=10),
        VehicleClass("b", 100, 4, fuel_cost=20),
    ]

    result = optimize_fleet(100, classes)

    # (a=0, b=1) is enumerated before (a=2, b=0) and costs the same.
    assert result.plan.counts == {"a": 0, "b": 1}


def test_duplicate_class_names_rejected():
    classes = [VehicleClass("a", 50, 1), VehicleClass("a", 60, 1)]

    with pytest.raises(ValueError, match="Duplicate"):
        optimize_fleet(10, classes)


def test_no_classes():
    assert _solve_internal(0, [])[0] == {}
    assert _solve_internal(1, [])[0] is None


@settings(max_examples=20, deadline=None)
@given(raw=class_strategy, demand=st.integers(min_value=0, max_value=600))
def test_plan_matches_brute_force(raw, demand):
    classes = _classes(raw)

    result = optimize_fleet(demand, classes)
    expected = _brute_force_cost(demand, classes)

    if expected is None:
        assert not result.is_feasible
    else:
        assert result.is_feasible
        assert result.plan.total_capacity >= demand
        assert result.relative_cost == pytest.approx(expected)
    for vc in classes:
        assert 0 <= result.plan.counts[vc.name] <= vc.fleet_count


@settings(max_examples=20, deadline=None)
@given(
    raw=class_strategy,
    demand=st.integers(min_value=1, max_value=600),
    index=st.integers(min_value=0, max_value=2),
    extra=st.integers(min_value=1, max_value=3),
)
def test_more_vehicles_never_increase_cost(raw, demand, index, extra):
    assume(index < len(raw))
    classes = _classes(raw)
    bigger = list(classes)
    vc = bigger[index]
    bigger[index] = VehicleClass(
        vc.name, vc.capacity, vc.fleet_count + extra, fuel_cost=vc.fuel_cost
    )

    base = optimize_fleet(demand, classes)
    grown = optimize_fleet(demand, bigger)

    if base.is_feasible:
        assert grown.is_feasible
        assert grown.relative_cost <= base.relative_cost + 1e-9
    assert math.isfinite(grown.relative_cost)
