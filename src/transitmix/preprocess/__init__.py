"""
Demand preprocessing for Transitmix.
"""

from .demand import build_demand_profile, system_demand_curve, total_passengers

__all__ = ["build_demand_profile", "system_demand_curve", "total_passengers"]
