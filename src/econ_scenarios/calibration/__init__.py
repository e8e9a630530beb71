"""
Calibration of short-rate and equity models from historical series.

Provides:
- calibrate_iln: sample-moment ILN estimator
- calibrate_vasicek1f: AR(1) regression estimator
- calibrate_cir1f: variance-stabilized regression estimator
- Calibrator: model-family dispatch with injectable numeric routines
"""

from econ_scenarios.calibration.calibrator import (
    CalibrationResult,
    Calibrator,
    ModelFamily,
)
from econ_scenarios.calibration.equity import (
    calibrate_iln,
    calibrate_iln_from_prices,
    monthly_log_returns,
)
from econ_scenarios.calibration.estimators import (
    OLSResult,
    as_series,
    ols,
    sample_moments,
)
from econ_scenarios.calibration.short_rate import (
    calibrate_cir1f,
    calibrate_vasicek1f,
    fit_cir1f,
    fit_vasicek1f,
)

__all__ = [
    # Dispatch
    "Calibrator",
    "CalibrationResult",
    "ModelFamily",
    # Equity
    "calibrate_iln",
    "calibrate_iln_from_prices",
    "monthly_log_returns",
    # Short rate
    "calibrate_vasicek1f",
    "calibrate_cir1f",
    "fit_vasicek1f",
    "fit_cir1f",
    # Numeric routines
    "OLSResult",
    "as_series",
    "ols",
    "sample_moments",
]
