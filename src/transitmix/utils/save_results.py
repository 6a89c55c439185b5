"""
save_results.py – persistence for a finished planning run

All disk output after a run goes through this module so the planning stages
themselves stay free of side effects. Results are written as a single JSON
document with a timestamped file name inside ``results_dir``.
"""

import json
from datetime import datetime
from pathlib import Path

import numpy as np

from transitmix.config.params import TransitmixParams
from transitmix.core_types import TransitPlan
from transitmix.utils.logging import TransitmixLogger

logger = TransitmixLogger.get_logger(__name__)


class NumpyEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return float(obj)
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def _build_summary(plan: TransitPlan) -> dict[str, object]:
    kpis = plan.kpis
    return {
        "Peak Hour": plan.peak.hour,
        "Peak Demand": plan.peak.demand,
        "Fleet Status": plan.fleet.status,
        "Fleet Feasible": plan.fleet.is_feasible,
        "Total Vehicles": plan.fleet.plan.total_vehicles,
        "Vehicles Used": sum(plan.schedule.stats.vehicles_used.values()),
        "Total Trips": plan.schedule.stats.total_trips,
        "Total Distance (km)": round(kpis.total_distance, 2),
        "Total Operating Cost": round(kpis.total_operating_cost, 2),
        "Cost per km": round(kpis.cost_per_km, 4),
        "Cost per Passenger": round(kpis.cost_per_passenger, 4),
        "Carbon Emission (kg)": round(kpis.total_carbon_emission, 2),
        "Unmet Demand": round(kpis.unmet_demand, 2),
    }


def save_plan_results(
    plan: TransitPlan,
    params: TransitmixParams,
    filename: str | Path | None = None,
) -> Path:
    """Write a planning run to JSON and return the file path."""
    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_filename = params.io.results_dir / f"transit_plan_{timestamp}.json"
    else:
        output_filename = Path(filename)

    output_filename.parent.mkdir(parents=True, exist_ok=True)

    json_data = {
        "Plan Summary": _build_summary(plan),
        "Parameters": params.to_dict(),
        "Peak Demand": plan.peak.to_dict(),
        "Fleet": plan.fleet.to_dict(),
        "Schedule Statistics": plan.schedule.stats.to_dict(),
        "KPIs": plan.kpis.to_dict(),
        "Trips": [trip.to_dict() for trip in plan.schedule.trips],
    }
    if plan.time_measurements:
        json_data["Time Measurements"] = [m.to_dict() for m in plan.time_measurements]

    with open(output_filename, "w") as f:
        json.dump(json_data, f, cls=NumpyEncoder, indent=2)

    logger.info(f"Results saved to {output_filename}")
    return output_filename
