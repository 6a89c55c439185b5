from __future__ import annotations

"""Parameter container dataclasses for the Transitmix configuration system.

Problem definition, simulation settings and I/O options live in separate
immutable dataclasses. A small mutable `RuntimeParams` bucket captures flags
that are never serialised to YAML but can be toggled programmatically.
"""

from dataclasses import dataclass, field
from pathlib import Path

from transitmix.core_types import VehicleClass

__all__ = [
    "ProblemParams",
    "SimulationParams",
    "IOParams",
    "RuntimeParams",
    "TransitmixParams",
    "INFEASIBLE_POLICIES",
]

INFEASIBLE_POLICIES = ("proceed", "abort")


# ---------------------------------------------------------------------------
# Problem definition parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProblemParams:
    """Capture the business problem independent from the algorithm used."""

    vehicle_classes: dict[str, VehicleClass]
    driver_cost_per_hour: float = 0.0
    infeasible_policy: str = "proceed"

    # Basic validation to surface common configuration errors early.
    def __post_init__(self):  # type: ignore[override]
        if not self.vehicle_classes:
            raise ValueError("ProblemParams.vehicle_classes cannot be empty.")

        for name, vehicle_class in self.vehicle_classes.items():
            if name != vehicle_class.name:
                raise ValueError(
                    f"Vehicle class key '{name}' does not match its name '{vehicle_class.name}'"
                )

        if self.driver_cost_per_hour < 0:
            raise ValueError("ProblemParams.driver_cost_per_hour must be non-negative.")

        if self.infeasible_policy not in INFEASIBLE_POLICIES:
            raise ValueError(
                f"ProblemParams.infeasible_policy must be one of {INFEASIBLE_POLICIES}, "
                f"got '{self.infeasible_policy}'"
            )


# ---------------------------------------------------------------------------
# Simulation parameters – things that influence dispatch behaviour
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SimulationParams:
    """Operational schedule simulation options (all times in minutes)."""

    operation_start_time: int = 240  # minutes since midnight (04:00)
    operation_duration_minutes: int = 1440
    turnaround_buffer: int = 5
    interlining_penalty: float = 15.0
    trip_trigger_fraction: float = 0.8
    reference_capacity: int | None = None  # None: smallest class in the pool
    max_routes_per_vehicle: int | None = None  # None: unlimited interlining

    def __post_init__(self):  # type: ignore[override]
        if not 0 <= self.operation_start_time < 1440:
            raise ValueError("SimulationParams.operation_start_time must be in [0, 1440).")

        if self.operation_duration_minutes <= 0:
            raise ValueError("SimulationParams.operation_duration_minutes must be positive.")

        for field_name in ("turnaround_buffer", "interlining_penalty"):
            if getattr(self, field_name) < 0:
                raise ValueError(f"SimulationParams.{field_name} must be non-negative.")

        if self.trip_trigger_fraction <= 0:
            raise ValueError("SimulationParams.trip_trigger_fraction must be positive.")

        if self.reference_capacity is not None and self.reference_capacity <= 0:
            raise ValueError("SimulationParams.reference_capacity must be positive.")

        if self.max_routes_per_vehicle is not None and self.max_routes_per_vehicle < 1:
            raise ValueError("SimulationParams.max_routes_per_vehicle must be at least 1.")


# ---------------------------------------------------------------------------
# IO parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IOParams:
    """Settings for data input and output pathways."""

    demand_file: str | None = None
    results_dir: Path = Path("results")

    def __post_init__(self):  # type: ignore[override]
        # Ensure results_dir is absolute
        results_dir = Path(self.results_dir)
        if not results_dir.is_absolute():
            results_dir = (Path.cwd() / results_dir).resolve()
        object.__setattr__(self, "results_dir", results_dir)


# ---------------------------------------------------------------------------
# Runtime parameters – toggles that are never serialized to yaml
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class RuntimeParams:
    verbose: bool = False
    debug: bool = False
    time_budget_sec: float | None = None  # checked between pipeline stages


# ---------------------------------------------------------------------------
# Aggregate container
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class TransitmixParams:
    """Aggregate parameter object passed throughout the codebase."""

    problem: ProblemParams
    simulation: SimulationParams = field(default_factory=SimulationParams)
    io: IOParams = field(default_factory=IOParams)
    runtime: RuntimeParams = field(default_factory=RuntimeParams)

    def to_dict(self) -> dict[str, object]:
        """Serialisable snapshot used when saving results."""
        return {
            "vehicle_classes": {
                name: vc.to_dict() for name, vc in self.problem.vehicle_classes.items()
            },
            "driver_cost_per_hour": self.problem.driver_cost_per_hour,
            "infeasible_policy": self.problem.infeasible_policy,
            "simulation": {
                "operation_start_time": self.simulation.operation_start_time,
                "operation_duration_minutes": self.simulation.operation_duration_minutes,
                "turnaround_buffer": self.simulation.turnaround_buffer,
                "interlining_penalty": self.simulation.interlining_penalty,
                "trip_trigger_fraction": self.simulation.trip_trigger_fraction,
                "reference_capacity": self.simulation.reference_capacity,
                "max_routes_per_vehicle": self.simulation.max_routes_per_vehicle,
            },
            "demand_file": self.io.demand_file,
            "results_dir": str(self.io.results_dir),
        }
