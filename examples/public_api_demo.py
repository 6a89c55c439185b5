"""
Demo of the Transitmix public API.

This example shows how to:
1. Run the full planning pipeline in one call
2. Run the five stages individually
3. Try a what-if variant of the simulation settings

Run with:
    python examples/public_api_demo.py
"""

import dataclasses
from pathlib import Path

from transitmix import (
    # Main function
    plan,
    # Stage functions
    load_demand,
    build_demand_profile,
    optimize_fleet,
    create_vehicle_pool,
    simulate_schedule,
    compute_kpis,
    # Core types
    TransitmixParams,
)
from transitmix.config import load_transitmix_params

DEMAND_FILE = Path(__file__).parent / "sample_routes.csv"


def main():
    """Run the planning examples."""

    # Example 1: One call, default configuration
    print("=== Example 1: Full pipeline ===")

    result = plan(demand=DEMAND_FILE, output_dir=None, verbose=True)

    print(f"\nPeak hour: {result.peak.hour:02d}:00 ({result.peak.demand:,.0f} passengers)")
    print(f"Fleet: {result.fleet.plan.counts} [{result.fleet.status}]")
    print(f"Trips dispatched: {result.schedule.stats.total_trips}")
    print(f"Operating cost: {result.kpis.total_operating_cost:,.2f}")
    print(f"Cost per passenger: {result.kpis.cost_per_passenger:,.2f}")
    print(f"Carbon: {result.kpis.total_carbon_emission:,.1f} kg")

    print("\nFirst trips:")
    print(result.trips_df.head(10).to_string(index=False))

    # Example 2: The stages one by one
    print("\n\n=== Example 2: Individual stages ===")

    params: TransitmixParams = load_transitmix_params()
    routes = load_demand(DEMAND_FILE)

    peak = build_demand_profile(routes)
    print(f"\n1. Peak system demand {peak.demand:,.0f} at {peak.hour:02d}:00")

    fleet = optimize_fleet(peak, params.problem.vehicle_classes)
    print(f"2. Fleet mix {fleet.plan.counts}, capacity {fleet.plan.total_capacity:,}")

    vehicles = create_vehicle_pool(fleet.plan)
    print(f"3. Vehicle pool: {', '.join(v.vehicle_id for v in vehicles[:5])} ...")

    schedule = simulate_schedule(fleet.plan, routes, params.simulation, vehicles)
    print(f"4. {schedule.stats.total_trips} trips, {schedule.stats.total_distance:,.1f} km")

    kpis = compute_kpis(
        schedule,
        routes,
        params.problem.vehicle_classes,
        params.problem.driver_cost_per_hour,
    )
    print(f"5. Cost per km {kpis.cost_per_km:,.2f}")
    for name, breakdown in kpis.class_breakdown.items():
        print(f"   {name}: {breakdown.trips} trips, {breakdown.distance:,.1f} km")

    # Example 3: What if vehicles may only serve one route each?
    print("\n\n=== Example 3: No interlining ===")

    strict = dataclasses.replace(
        params,
        simulation=dataclasses.replace(params.simulation, max_routes_per_vehicle=1),
    )
    strict_result = plan(routes, strict, output_dir=None)
    print(f"Unmet demand without interlining: {strict_result.kpis.unmet_demand:,.1f}")
    print(f"Unmet demand with interlining:    {result.kpis.unmet_demand:,.1f}")


if __name__ == "__main__":
    main()
