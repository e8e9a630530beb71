"""
Scenario simulation.

Provides:
- RandomPathGenerator: seeded per-trial draw streams
- ShortRateSimulator: Vasicek (1 and 2 factor) and CIR level paths
- EquitySimulator: ILN and RSLN return paths
"""

from econ_scenarios.simulation.equity import (
    EquityScenarios,
    EquitySimulator,
    regime_paths,
    validate_iln_simulation,
    validate_rsln_simulation,
)
from econ_scenarios.simulation.random_paths import RandomPathGenerator, resolve_generator
from econ_scenarios.simulation.short_rate import (
    ShortRateSimulator,
    cir_paths,
    simulate_short_rate,
    vasicek_paths,
)

__all__ = [
    "RandomPathGenerator",
    "resolve_generator",
    # Short rates
    "ShortRateSimulator",
    "simulate_short_rate",
    "vasicek_paths",
    "cir_paths",
    # Equity
    "EquityScenarios",
    "EquitySimulator",
    "regime_paths",
    "validate_iln_simulation",
    "validate_rsln_simulation",
]
