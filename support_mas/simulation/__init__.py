"""Simulation package"""
from .engine import SimulationEngine
from .scenarios import (
    PRESENTATION_SCENARIOS,
    EDGE_CASE_SCENARIOS,
    get_all_scenarios,
    get_scenarios_by_category,
)

__all__ = [
    "SimulationEngine",
    "PRESENTATION_SCENARIOS",
    "EDGE_CASE_SCENARIOS",
    "get_all_scenarios",
    "get_scenarios_by_category",
]
