"""Configuration module for Transitmix parameters."""

# Structured parameter system
from .params import (
    ProblemParams,
    SimulationParams,
    IOParams,
    RuntimeParams,
    TransitmixParams,
)
from .loader import load_yaml as load_transitmix_params

__all__ = [
    "ProblemParams",
    "SimulationParams",
    "IOParams",
    "RuntimeParams",
    "TransitmixParams",
    "load_transitmix_params",
]
