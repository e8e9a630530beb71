"""Tidy long-format scenario output."""

from econ_scenarios.scenarios.table import COLUMNS, ScenarioTable, frame_from_tables

__all__ = [
    "COLUMNS",
    "ScenarioTable",
    "frame_from_tables",
]
