"""Frozen settings and tolerance tiers."""

from econ_scenarios.config.settings import (
    MONTHLY_DT,
    SETTINGS,
    CalibrationConfig,
    Settings,
    SimulationConfig,
)

__all__ = [
    "MONTHLY_DT",
    "SETTINGS",
    "CalibrationConfig",
    "Settings",
    "SimulationConfig",
]
