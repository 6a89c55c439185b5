"""Wall-clock and CPU time spans for pipeline stages."""

import os
import time
from contextlib import contextmanager
from dataclasses import dataclass, field

from transitmix.utils.logging import TransitmixLogger

logger = TransitmixLogger.get_logger(__name__)


@dataclass
class TimeMeasurement:
    span_name: str
    wall_time: float
    process_user_time: float
    process_system_time: float
    children_user_time: float
    children_system_time: float

    def to_dict(self) -> dict[str, float | str]:
        return {
            "span_name": self.span_name,
            "wall_time": self.wall_time,
            "process_user_time": self.process_user_time,
            "process_system_time": self.process_system_time,
            "children_user_time": self.children_user_time,
            "children_system_time": self.children_system_time,
        }


@dataclass
class TimeRecorder:
    """Collects one TimeMeasurement per measured span."""

    measurements: list[TimeMeasurement] = field(default_factory=list)

    @contextmanager
    def measure(self, span_name: str):
        start_wall = time.perf_counter()
        start_times = os.times()
        try:
            yield
        finally:
            end_wall = time.perf_counter()
            end_times = os.times()
            measurement = TimeMeasurement(
                span_name=span_name,
                wall_time=end_wall - start_wall,
                process_user_time=end_times.user - start_times.user,
                process_system_time=end_times.system - start_times.system,
                children_user_time=end_times.children_user - start_times.children_user,
                children_system_time=end_times.children_system - start_times.children_system,
            )
            self.measurements.append(measurement)
            logger.debug(f"Span '{span_name}' took {measurement.wall_time:.3f}s")

    def total(self, span_name: str) -> float:
        """Summed wall time of every span with this name."""
        return sum(m.wall_time for m in self.measurements if m.span_name == span_name)
