"""
API facade for Transitmix - provides a single entry point for programmatic usage.
"""

import dataclasses
import time
from pathlib import Path

import pandas as pd

from transitmix.config import load_transitmix_params
from transitmix.config.params import INFEASIBLE_POLICIES, TransitmixParams
from transitmix.core_types import Route, TransitPlan, validate_routes
from transitmix.kpi import compute_kpis
from transitmix.optimization import optimize_fleet
from transitmix.preprocess.demand import build_demand_profile
from transitmix.simulation import simulate_schedule
from transitmix.utils.data_processing import load_route_demand, routes_from_dataframe
from transitmix.utils.logging import (
    ProgressTracker,
    TransitmixLogger,
    log_detail,
    log_progress,
    log_warning,
)
from transitmix.utils.save_results import save_plan_results
from transitmix.utils.time_measurement import TimeRecorder
from transitmix.utils.vehicle_pool import create_vehicle_pool

logger = TransitmixLogger.get_logger("transitmix.api")

PIPELINE_STAGES = [
    "Demand profile",
    "Fleet optimization",
    "Vehicle pool",
    "Schedule simulation",
    "KPI aggregation",
]


class _Budget:
    """Wall-clock limit checked between pipeline stages."""

    def __init__(self, limit_sec: float | None):
        self.limit_sec = limit_sec
        self.started = time.perf_counter()

    def check(self, next_stage: str) -> None:
        if self.limit_sec is None:
            return
        elapsed = time.perf_counter() - self.started
        if elapsed > self.limit_sec:
            raise TimeoutError(
                f"Time budget of {self.limit_sec:.1f}s exceeded after {elapsed:.1f}s, "
                f"before stage '{next_stage}'"
            )


def _advance(tracker: ProgressTracker | None, message: str, status: str = "success") -> None:
    if tracker is not None:
        tracker.advance(message, status)


def _load_routes(
    demand: str | Path | pd.DataFrame | list[Route], time_recorder: TimeRecorder
) -> list[Route]:
    if isinstance(demand, list):
        validate_routes(demand)
        logger.info(f"Using {len(demand)} provided routes")
        return list(demand)

    if isinstance(demand, pd.DataFrame):
        logger.info("Using provided DataFrame for route demand data")
        with time_recorder.measure("load_demand"):
            return routes_from_dataframe(demand)

    demand_path = Path(demand)
    if not demand_path.exists():
        raise FileNotFoundError(
            f"Demand file not found: {demand_path}\n"
            f"Please check the file path and ensure it exists."
        )
    try:
        with time_recorder.measure("load_demand"):
            return load_route_demand(demand_path)
    except ValueError as e:
        raise ValueError(
            f"Error loading demand data from {demand_path}:\n{e!s}\n"
            f"Please check the file format and ensure it contains valid route demand."
        ) from e


def _load_params(config: str | Path | TransitmixParams | None) -> TransitmixParams:
    if config is None:
        cwd_config = Path.cwd() / "config.yaml"
        return load_transitmix_params(cwd_config if cwd_config.exists() else None)
    if isinstance(config, TransitmixParams):
        return config

    config_path = Path(config)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Please check the file path and ensure it exists."
        )
    try:
        return load_transitmix_params(config_path)
    except (ValueError, TypeError) as e:
        raise ValueError(
            f"Error loading configuration from {config_path}:\n{e!s}\n"
            f"Please check the YAML syntax and required fields."
        ) from e


def plan(
    demand: str | Path | pd.DataFrame | list[Route],
    config: str | Path | TransitmixParams | None = None,
    output_dir: str | None = "results",
    verbose: bool = False,
    infeasible_policy: str | None = None,
) -> TransitPlan:
    """
    Plan fleet size, mix and a full-day schedule for the given route demand.

    Args:
        demand: Route demand - can be:
            - Path to a CSV file (long or wide layout)
            - Pandas DataFrame with the same columns
            - List of ``Route`` objects
        config: Configuration parameters - can be:
            - Path to YAML configuration file
            - TransitmixParams object
            - None (``./config.yaml`` if present, else the packaged defaults)
        output_dir: Directory to save results; ``None`` or ``""`` skips saving
        verbose: Enable verbose logging (default: False)
        infeasible_policy: Override ``problem.infeasible_policy`` - "proceed"
            simulates with the best-effort full fleet, "abort" raises

    Returns:
        TransitPlan: peak hour, fleet plan, schedule, KPIs and stage timings

    Raises:
        FileNotFoundError: If the demand or config file doesn't exist
        ValueError: If inputs are invalid, or the fleet cannot cover the peak
            under the "abort" policy
        TimeoutError: If ``runtime.time_budget_sec`` runs out between stages

    Example:
        >>> result = plan("routes.csv", "config.yaml")
        >>> print(f"Fleet: {result.fleet.plan.counts}")
        >>> print(f"Operating cost: {result.kpis.total_operating_cost:,.2f}")
    """
    time_recorder = TimeRecorder()

    with time_recorder.measure("global"):
        # Step 1: Load parameters and demand
        params = _load_params(config)
        budget = _Budget(params.runtime.time_budget_sec)
        routes = _load_routes(demand, time_recorder)

        if infeasible_policy is not None:
            if infeasible_policy not in INFEASIBLE_POLICIES:
                raise ValueError(
                    f"infeasible_policy must be one of {INFEASIBLE_POLICIES}, "
                    f"got '{infeasible_policy}'"
                )
            params = dataclasses.replace(
                params,
                problem=dataclasses.replace(
                    params.problem, infeasible_policy=infeasible_policy
                ),
            )

        if isinstance(demand, (str, Path)):
            params = dataclasses.replace(
                params, io=dataclasses.replace(params.io, demand_file=str(demand))
            )

        if output_dir:
            params = dataclasses.replace(
                params, io=dataclasses.replace(params.io, results_dir=Path(output_dir))
            )

        if verbose:
            params = dataclasses.replace(
                params, runtime=dataclasses.replace(params.runtime, verbose=True)
            )

        tracker = ProgressTracker(PIPELINE_STAGES) if params.runtime.verbose else None
        try:
            # Step 2: Peak hour
            budget.check("demand_profile")
            with time_recorder.measure("demand_profile"):
                peak = build_demand_profile(routes)
            _advance(tracker, f"Peak at {peak.hour:02d}:00 ({peak.demand:,.0f} passengers)")

            # Step 3: Strategic fleet size and mix
            budget.check("fleet_optimization")
            with time_recorder.measure("fleet_optimization"):
                fleet = optimize_fleet(peak, params.problem.vehicle_classes)

            if not fleet.is_feasible:
                if params.problem.infeasible_policy == "abort":
                    raise ValueError(
                        f"Fleet cannot cover the peak demand of {peak.demand:,.0f} passengers "
                        f"at hour {peak.hour}!\n"
                        f"Total available capacity is {fleet.plan.total_capacity:,} "
                        f"(shortfall {fleet.capacity_shortfall:,.0f}).\n"
                        f"Add vehicles to the configuration or use infeasible_policy='proceed'."
                    )
                log_warning(
                    "Proceeding with the full available fleet; expect unmet demand"
                )
            _advance(
                tracker,
                f"Fleet {fleet.status}: {fleet.plan.total_vehicles} vehicles",
                "success" if fleet.is_feasible else "warning",
            )

            # Step 4: Vehicle pool
            budget.check("vehicle_pool")
            with time_recorder.measure("vehicle_pool"):
                vehicles = create_vehicle_pool(fleet.plan)
            _advance(tracker, f"Created {len(vehicles)} vehicles")

            # Step 5: Operational schedule
            budget.check("simulation")
            with time_recorder.measure("simulation"):
                schedule = simulate_schedule(
                    fleet.plan, routes, params.simulation, vehicles=vehicles
                )
            _advance(tracker, f"Dispatched {schedule.stats.total_trips} trips")

            # Step 6: KPIs
            budget.check("kpi")
            with time_recorder.measure("kpi"):
                kpis = compute_kpis(
                    schedule,
                    routes,
                    params.problem.vehicle_classes,
                    params.problem.driver_cost_per_hour,
                )
            _advance(tracker, f"Operating cost {kpis.total_operating_cost:,.2f}")
        finally:
            if tracker is not None:
                tracker.close()

    if params.runtime.verbose:
        log_progress("Plan Results:")
        for name, count in fleet.plan.counts.items():
            log_detail(f"{name}: {count} planned, {schedule.stats.vehicles_used.get(name, 0)} used")
        log_detail(f"Total Distance: {kpis.total_distance:,.1f} km")
        log_detail(f"Operating Cost: {kpis.total_operating_cost:,.2f}")
        log_detail(f"Unmet Demand: {kpis.unmet_demand:,.1f}")

    result = TransitPlan(
        peak=peak,
        fleet=fleet,
        schedule=schedule,
        kpis=kpis,
        time_measurements=time_recorder.measurements,
    )

    # Step 7: Save results if output directory is specified
    if output_dir:
        try:
            result.results_file = str(save_plan_results(result, params))
        except OSError as e:
            log_warning(f"Failed to save results: {e!s}")

    return result
