"""
Short-rate calibration by linear-regression reparameterization.

Both estimators are closed-form OLS fits of the Euler-discretized SDE; no
iterative optimizer is involved.

Vasicek (AR(1) form):
    r_{i+1} = β0 + β1 r_i + ε
    a = (1 - β1)/dt,  b = β0/(1 - β1),  v = sqrt(mean(ε²)/dt)

CIR (variance-stabilized form, no intercept):
    (r_i - r_{i-1})/sqrt(r_{i-1}) = β1 / sqrt(r_{i-1}) + β2 sqrt(r_{i-1}) + ε
    a = -β2/dt,  b = -β1/β2,  v = sqrt(mean(ε²)/dt)

See: Brigo & Mercurio (2006) "Interest Rate Models" Ch. 3
"""

import logging
from collections.abc import Sequence

import numpy as np

from econ_scenarios.calibration.estimators import (
    Estimator,
    OLSResult,
    as_series,
    ols,
)
from econ_scenarios.config.settings import SETTINGS
from econ_scenarios.config.tolerances import CIR_SLOPE_TOLERANCE, UNIT_ROOT_TOLERANCE
from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.models.params import CIR1fParams, Vasicek1fParams

logger = logging.getLogger(__name__)


def _check_dt(dt: float) -> None:
    if dt <= 0:
        raise InvalidInput(f"CRITICAL: dt must be > 0, got {dt}")


def fit_vasicek1f(
    levels: Sequence[float] | np.ndarray,
    dt: float = SETTINGS.calibration.dt,
    estimator: Estimator = ols,
) -> tuple[Vasicek1fParams, OLSResult]:
    """
    Fit one-factor Vasicek and return the regression alongside.

    See calibrate_vasicek1f for parameters.
    """
    _check_dt(dt)
    r = as_series(levels, "levels", SETTINGS.calibration.min_regression_observations)

    fit = estimator(r[:-1], r[1:], intercept=True)
    beta0, beta1 = fit.coefficients

    if abs(1.0 - beta1) < UNIT_ROOT_TOLERANCE:
        raise InvalidInput(
            f"CRITICAL: AR(1) slope is {beta1}; no mean reversion can be identified"
        )

    params = Vasicek1fParams(
        r0=float(r[-1]),
        a=float((1.0 - beta1) / dt),
        b=float(beta0 / (1.0 - beta1)),
        v=float(np.sqrt(fit.mean_squared_residual / dt)),
    )
    logger.info(
        f"Vasicek parameters calibrated with {len(r)} observations: "
        f"a={params.a:.4f}, b={params.b:.4f}, v={params.v:.4f} "
        f"(R²={fit.r_squared:.3f})"
    )
    return params, fit


def calibrate_vasicek1f(
    levels: Sequence[float] | np.ndarray,
    dt: float = SETTINGS.calibration.dt,
    estimator: Estimator = ols,
) -> Vasicek1fParams:
    """
    Calibrate one-factor Vasicek from a series of levels.

    Parameters
    ----------
    levels : array-like
        Rate (or inflation) levels observed every ``dt`` years
    dt : float, default 1/12
        Observation step in years
    estimator : callable
        Least squares solver, ``estimator(X, y, intercept=...) -> OLSResult``

    Returns
    -------
    Vasicek1fParams
        r0 = last observed level, annualized a, b, v; no floor

    Raises
    ------
    InvalidInput
        On fewer than 3 levels, non-numeric data, or degenerate input
        (constant series, β1 = 1)

    Examples
    --------
    >>> params = calibrate_vasicek1f([0.02, 0.025, 0.022, 0.027, 0.024, 0.026])
    >>> params.r0
    0.026
    """
    params, _ = fit_vasicek1f(levels, dt, estimator)
    return params


def fit_cir1f(
    levels: Sequence[float] | np.ndarray,
    dt: float = SETTINGS.calibration.dt,
    shift: float | None = 0.0,
    estimator: Estimator = ols,
) -> tuple[CIR1fParams, OLSResult]:
    """
    Fit one-factor CIR and return the regression alongside.

    See calibrate_cir1f for parameters.
    """
    _check_dt(dt)
    r = as_series(levels, "levels", SETTINGS.calibration.min_regression_observations)
    if shift:
        r = r + shift

    if np.any(r <= 0):
        raise InvalidInput(
            f"CRITICAL: CIR levels must be > 0 after shifting (min {r.min():.6g}); "
            "increase shift"
        )

    sqrt_prev = np.sqrt(r[:-1])
    y = np.diff(r) / sqrt_prev
    X = np.column_stack([1.0 / sqrt_prev, sqrt_prev])

    fit = estimator(X, y, intercept=False)
    beta1, beta2 = fit.coefficients

    if abs(beta2) < CIR_SLOPE_TOLERANCE:
        raise InvalidInput(
            f"CRITICAL: CIR slope coefficient is {beta2}; mean reversion level undefined"
        )

    params = CIR1fParams(
        r0=float(r[-1]),
        a=float(-beta2 / dt),
        b=float(-beta1 / beta2),
        v=float(np.sqrt(fit.mean_squared_residual / dt)),
    )
    logger.info(
        f"CIR parameters calibrated with {len(r)} observations (shift={shift or 0}): "
        f"a={params.a:.4f}, b={params.b:.4f}, v={params.v:.4f}"
    )
    if not params.feller_satisfied:
        logger.warning(
            f"Feller condition 2ab >= v² fails (2ab={2 * params.a * params.b:.6f}, "
            f"v²={params.v**2:.6f}); simulated paths will touch zero"
        )
    return params, fit


def calibrate_cir1f(
    levels: Sequence[float] | np.ndarray,
    dt: float = SETTINGS.calibration.dt,
    shift: float | None = 0.0,
    estimator: Estimator = ols,
) -> CIR1fParams:
    """
    Calibrate one-factor CIR from a series of levels.

    Parameters
    ----------
    levels : array-like
        Levels observed every ``dt`` years
    dt : float, default 1/12
        Observation step in years
    shift : float, optional
        Added to every level before fitting, for series that go negative
        (e.g. inflation). r0 is reported on the shifted scale.
    estimator : callable
        Least squares solver, ``estimator(X, y, intercept=...) -> OLSResult``

    Returns
    -------
    CIR1fParams
        r0 = last shifted level, annualized a, b, v

    Raises
    ------
    InvalidInput
        If fewer than 3 levels are given, any shifted level is <= 0, or the
        slope coefficient β2 is 0
    """
    params, _ = fit_cir1f(levels, dt, shift, estimator)
    return params
