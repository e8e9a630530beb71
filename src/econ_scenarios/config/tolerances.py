"""
Centralized tolerance framework for calibration and scenario simulation.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Deterministic recursions and closed-form estimators
    Tier 2 (Numerical): Degeneracy thresholds inside the estimators
    Tier 3 (Stochastic): CLT-derived, round-trip calibration checks

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
    [T1] Glasserman (2003) Ch. 3-4 - Monte Carlo error bounds
"""

from typing import Final

import numpy as np

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================

#: Zero-noise recursions (v = 0) compared against their closed form.
#: 12-240 float64 multiply-adds accumulate well below 1e-12.
DETERMINISTIC_PATH_TOLERANCE: Final[float] = 1e-12

#: Closed-form calibration checks (ILN moments on a handful of points)
CLOSED_FORM_TOLERANCE: Final[float] = 1e-12


# =============================================================================
# Tier 2: Numerical Degeneracy Thresholds
# =============================================================================

#: |1 - beta1| below this makes the Vasicek reparameterization divide by ~0
#: (constant or unit-root series).
UNIT_ROOT_TOLERANCE: Final[float] = 1e-12

#: |beta2| below this makes the CIR mean-reversion level divide by ~0
CIR_SLOPE_TOLERANCE: Final[float] = 1e-14


# =============================================================================
# Tier 3: Stochastic Tolerances (CLT-Derived)
# =============================================================================


def mc_tolerance(n_samples: int, sigma: float = 1.0, confidence: float = 4.0) -> float:
    """
    Calculate CLT-derived Monte Carlo tolerance.

    [T1] Standard error of a sample mean is σ/√N. 4σ keeps seeded
    tests well away from the edge of the interval.

    Parameters
    ----------
    n_samples : int
        Number of independent samples
    sigma : float
        Standard deviation of one sample
    confidence : float
        Number of standard errors (default 4)

    Returns
    -------
    float
        Absolute tolerance for a sample mean

    Examples
    --------
    >>> mc_tolerance(10_000)
    0.04
    """
    return float(confidence * sigma / np.sqrt(n_samples))


#: Relative error allowed when recovering b and v from a long simulated
#: history (2000 years of monthly data, a single path).
ROUND_TRIP_RELATIVE_TOLERANCE: Final[float] = 0.05

#: Mean reversion speed is the slowest parameter to converge; the AR(1)
#: slope carries O(1/n) small-sample bias.
ROUND_TRIP_SPEED_TOLERANCE: Final[float] = 0.15


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    "deterministic_path": DETERMINISTIC_PATH_TOLERANCE,
    "closed_form": CLOSED_FORM_TOLERANCE,
    "unit_root": UNIT_ROOT_TOLERANCE,
    "cir_slope": CIR_SLOPE_TOLERANCE,
    "round_trip_relative": ROUND_TRIP_RELATIVE_TOLERANCE,
    "round_trip_speed": ROUND_TRIP_SPEED_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
