"""
Roll a simulated schedule up into cost, distance and emission KPIs.

Distance is charged per trip using the direction-specific route length; fuel,
maintenance, depreciation and carbon are that distance times the trip's vehicle
class rate. Driver cost is paid for time spent on trips only.

Two passenger totals are reported side by side: ``total_passengers`` is the
design demand (every hourly entry of every route), ``passengers_served`` is what
the simulator actually boarded. Per-passenger ratios use the design total;
``cost_per_served_passenger`` uses the boarded total.
"""

from collections.abc import Mapping

from transitmix.core_types import (
    ClassKPI,
    KPIReport,
    Route,
    ScheduleResult,
    VehicleClass,
)
from transitmix.preprocess.demand import total_passengers as design_passengers
from transitmix.utils.logging import TransitmixLogger

logger = TransitmixLogger.get_logger(__name__)


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def compute_kpis(
    schedule: ScheduleResult,
    routes: list[Route],
    vehicle_classes: Mapping[str, VehicleClass],
    driver_cost_per_hour: float,
) -> KPIReport:
    """Compute the KPI report for a schedule.

    Args:
        schedule: Output of :func:`transitmix.simulation.simulate_schedule`.
        routes: Route table the schedule was built from.
        vehicle_classes: Per-class cost and emission rates keyed by class name.
        driver_cost_per_hour: Driver wage per hour on duty.

    Returns:
        KPIReport with totals, per-class breakdown and derived ratios. Ratios are
        zero when their denominator is zero.

    Raises:
        ValueError: If a trip references a route or vehicle class that is not
            in the lookup tables.
    """
    route_lookup = {route.route_id: route for route in routes}
    report = KPIReport()
    total_minutes = 0

    for trip in schedule.trips:
        route = route_lookup.get(trip.route_id)
        if route is None:
            raise ValueError(f"Trip {trip.trip_id} references unknown route '{trip.route_id}'")
        vehicle_class = vehicle_classes.get(trip.vehicle_class)
        if vehicle_class is None:
            raise ValueError(
                f"Trip {trip.trip_id} references unknown vehicle class '{trip.vehicle_class}'"
            )

        distance = route.length(trip.direction)
        breakdown = report.class_breakdown.setdefault(trip.vehicle_class, ClassKPI())
        breakdown.trips += 1
        breakdown.distance += distance
        breakdown.fuel_cost += distance * vehicle_class.fuel_cost
        breakdown.maintenance_cost += distance * vehicle_class.maintenance_cost
        breakdown.depreciation_cost += distance * vehicle_class.depreciation_cost
        breakdown.carbon_emission += distance * vehicle_class.carbon_emission

        report.passengers_served += trip.passengers
        total_minutes += trip.duration

    for breakdown in report.class_breakdown.values():
        report.total_distance += breakdown.distance
        report.total_fuel_cost += breakdown.fuel_cost
        report.total_maintenance_cost += breakdown.maintenance_cost
        report.total_depreciation_cost += breakdown.depreciation_cost
        report.total_carbon_emission += breakdown.carbon_emission

    report.total_driver_cost = (total_minutes / 60) * driver_cost_per_hour
    report.total_operating_cost = (
        report.total_fuel_cost
        + report.total_maintenance_cost
        + report.total_depreciation_cost
        + report.total_driver_cost
    )

    report.total_passengers = design_passengers(routes)
    report.unmet_demand = schedule.stats.total_unmet_demand

    report.cost_per_km = _safe_ratio(report.total_operating_cost, report.total_distance)
    report.cost_per_passenger = _safe_ratio(
        report.total_operating_cost, report.total_passengers
    )
    report.cost_per_served_passenger = _safe_ratio(
        report.total_operating_cost, report.passengers_served
    )
    report.carbon_per_passenger = _safe_ratio(
        report.total_carbon_emission, report.total_passengers
    )

    logger.info(
        f"KPIs: operating cost {report.total_operating_cost:,.2f}, "
        f"{report.cost_per_km:,.2f} per km, "
        f"{report.total_carbon_emission:,.1f} kg CO2"
    )
    return report
