"""
econ-scenarios: Calibrated economic scenario generation.

Short-rate (Vasicek one/two-factor, CIR) and equity (ILN, RSLN) models,
calibrated from historical series and simulated as tidy scenario tables.

Quick Start
-----------
>>> from econ_scenarios import Calibrator, ShortRateSimulator
>>> params = Calibrator().vasicek1f(rate_history)
>>> table = ShortRateSimulator().simulate(params, t_years=10, n_trials=1000, seed=42)
>>> table.to_frame().groupby("time")["value"].quantile([0.05, 0.5, 0.95])

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Parameter Sets
# =============================================================================
from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.models.params import (
    CAS_INFLATION_VAS1F,
    CAS_RATES_VAS2F,
    PRESETS,
    CIR1fParams,
    ILNParams,
    RSLNParams,
    Vasicek1fParams,
    Vasicek2fParams,
    params_from_dict,
)

# =============================================================================
# Calibration
# =============================================================================
from econ_scenarios.calibration import (
    CalibrationResult,
    Calibrator,
    ModelFamily,
    calibrate_cir1f,
    calibrate_iln,
    calibrate_iln_from_prices,
    calibrate_vasicek1f,
)

# =============================================================================
# Simulation
# =============================================================================
from econ_scenarios.scenarios.table import ScenarioTable
from econ_scenarios.simulation import (
    EquityScenarios,
    EquitySimulator,
    RandomPathGenerator,
    ShortRateSimulator,
    simulate_short_rate,
)

# =============================================================================
# Data
# =============================================================================
from econ_scenarios.data.loader import DataLoadError, load_series

__all__ = [
    "__version__",
    # Parameter sets
    "InvalidInput",
    "Vasicek1fParams",
    "Vasicek2fParams",
    "CIR1fParams",
    "ILNParams",
    "RSLNParams",
    "params_from_dict",
    "CAS_INFLATION_VAS1F",
    "CAS_RATES_VAS2F",
    "PRESETS",
    # Calibration
    "Calibrator",
    "CalibrationResult",
    "ModelFamily",
    "calibrate_iln",
    "calibrate_iln_from_prices",
    "calibrate_vasicek1f",
    "calibrate_cir1f",
    # Simulation
    "RandomPathGenerator",
    "ScenarioTable",
    "ShortRateSimulator",
    "simulate_short_rate",
    "EquitySimulator",
    "EquityScenarios",
    # Data
    "DataLoadError",
    "load_series",
]
