from __future__ import annotations

"""Utilities for loading Transitmix configuration YAML files into the
parameter dataclass hierarchy.
"""

from pathlib import Path
from typing import Any

import yaml

from transitmix.core_types import VehicleClass
from transitmix.utils.logging import TransitmixLogger

from .params import IOParams, ProblemParams, SimulationParams, TransitmixParams

logger = TransitmixLogger.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.yaml"

_SIMULATION_KEYS = {
    "operation_start_time",
    "operation_duration_minutes",
    "turnaround_buffer",
    "interlining_penalty",
    "trip_trigger_fraction",
    "reference_capacity",
    "max_routes_per_vehicle",
}

# ---------------------------------------------------------------------------
# Helper parsing routines
# ---------------------------------------------------------------------------


def _parse_vehicle_classes(raw: dict[str, dict[str, Any]]) -> dict[str, VehicleClass]:
    """Convert YAML mapping of vehicle classes into `VehicleClass` instances."""

    if not isinstance(raw, dict):
        raise ValueError("'vehicle_classes' must be a mapping of class name to settings.")

    parsed: dict[str, VehicleClass] = {}
    for name, details in raw.items():
        details = dict(details or {})
        try:
            spec_kwargs: dict[str, Any] = {
                "capacity": details.pop("capacity"),
                "fleet_count": details.pop("fleet_count"),
            }
        except KeyError as exc:
            raise ValueError(
                f"Vehicle class '{name}' missing required key {exc.args[0]!r}."
            ) from exc

        for rate in ("fuel_cost", "maintenance_cost", "depreciation_cost", "carbon_emission"):
            spec_kwargs[rate] = details.pop(rate, 0.0)

        if details:
            raise ValueError(
                f"Vehicle class '{name}' has unknown keys: {', '.join(sorted(details))}"
            )

        parsed[name] = VehicleClass(name=name, **spec_kwargs)

    return parsed


def _parse_simulation(raw: dict[str, Any] | None) -> SimulationParams:
    raw = dict(raw or {})
    unknown = set(raw) - _SIMULATION_KEYS
    if unknown:
        raise ValueError(f"Unknown simulation keys in YAML: {', '.join(sorted(unknown))}")
    return SimulationParams(**raw)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_yaml(path: str | Path | None = None) -> TransitmixParams:
    """Load YAML configuration file into `TransitmixParams`.

    With no path the packaged ``default_config.yaml`` is used.
    """

    cfg_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)

    try:
        with cfg_path.open(encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Error parsing YAML configuration {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"YAML configuration {cfg_path} must be a mapping.")

    # ---------------------------------------------------------------------
    # Extract problem definition
    # ---------------------------------------------------------------------

    try:
        vehicles_raw = data.pop("vehicle_classes")
    except KeyError as exc:
        raise ValueError("YAML missing required key 'vehicle_classes'.") from exc

    problem = ProblemParams(
        vehicle_classes=_parse_vehicle_classes(vehicles_raw),
        driver_cost_per_hour=data.pop("driver_cost_per_hour", 0.0),
        infeasible_policy=data.pop("infeasible_policy", "proceed"),
    )

    # ---------------------------------------------------------------------
    # Simulation parameters
    # ---------------------------------------------------------------------

    simulation = _parse_simulation(data.pop("simulation", None))

    # ---------------------------------------------------------------------
    # IO parameters
    # ---------------------------------------------------------------------

    io_params = IOParams(
        demand_file=data.pop("demand_file", None),
        results_dir=Path(data.pop("results_dir", "results")),
    )

    # Any remaining unknown keys will raise an error to avoid silent mistakes.
    if data:
        unknown_keys = ", ".join(sorted(data.keys()))
        raise ValueError(f"Unknown top-level configuration keys in YAML: {unknown_keys}")

    logger.debug(
        "Loaded configuration – problem: %s simulation: %s io: %s",
        problem,
        simulation,
        io_params,
    )

    return TransitmixParams(problem=problem, simulation=simulation, io=io_params)
