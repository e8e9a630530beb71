"""
Explicit numeric routines used by the calibrators.

Calibrators take these as injectable collaborators instead of reaching for
global statistics calls, so each estimator can be tested in isolation:

- sample_moments: sample mean and standard deviation (ddof=1)
- ols: ordinary least squares with regression diagnostics

[T1] OLS: β = argmin ||y - Xβ||², solved by numpy.linalg.lstsq
[T1] Coefficient standard errors: se = sqrt(diag(s² (XᵀX)⁻¹)), s² = SSR/(n-k)
"""

import numbers
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np
from scipy import stats

from econ_scenarios.models.errors import InvalidInput


def as_series(
    data: Sequence[float] | np.ndarray,
    name: str = "series",
    min_observations: int = 2,
) -> np.ndarray:
    """
    Validate a historical series and return it as a float array.

    Accepts lists, tuples, numpy arrays and pandas Series (the index is
    ignored).

    Raises
    ------
    InvalidInput
        If the data is not 1-D numeric, contains NaN/inf, or is too short
    """
    if hasattr(data, "to_numpy"):
        data = data.to_numpy()
    try:
        raw = np.asarray(data)
    except ValueError as e:
        raise InvalidInput(f"CRITICAL: {name} must be 1-D numeric: {e}") from e
    if raw.dtype == bool or not (
        np.issubdtype(raw.dtype, np.integer)
        or np.issubdtype(raw.dtype, np.floating)
        or (raw.dtype == object and all(
            isinstance(x, numbers.Real) and not isinstance(x, bool) for x in raw.ravel()
        ))
    ):
        raise InvalidInput(f"CRITICAL: {name} must be numeric, got dtype {raw.dtype}")
    values = raw.astype(float)
    if values.ndim != 1:
        raise InvalidInput(f"CRITICAL: {name} must be 1-D, got shape {values.shape}")
    if len(values) < min_observations:
        raise InvalidInput(
            f"CRITICAL: {name} needs at least {min_observations} observations, got {len(values)}"
        )
    if not np.all(np.isfinite(values)):
        raise InvalidInput(f"CRITICAL: {name} contains NaN or infinite values")
    return values


def sample_moments(x: np.ndarray) -> tuple[float, float]:
    """
    Sample mean and standard deviation.

    [T1] Standard deviation uses the n-1 denominator.

    Returns
    -------
    tuple of float
        (mean, std)
    """
    x = np.asarray(x, dtype=float)
    if len(x) < 2:
        raise InvalidInput(f"CRITICAL: sample moments need >= 2 observations, got {len(x)}")
    return float(np.mean(x)), float(np.std(x, ddof=1))


@dataclass(frozen=True)
class OLSResult:
    """
    Result of an ordinary least squares fit.

    Attributes
    ----------
    coefficients : np.ndarray
        Fitted β, intercept first when fitted with one
    residuals : np.ndarray
        y - Xβ
    standard_errors : np.ndarray
        Coefficient standard errors (NaN with no residual degrees of freedom)
    p_values : np.ndarray
        Two-sided Student-t p-values for β = 0
    r_squared : float
        Centered R² with an intercept, uncentered without
    intercept : bool
        Whether an intercept column was added
    """

    coefficients: np.ndarray
    residuals: np.ndarray
    standard_errors: np.ndarray
    p_values: np.ndarray
    r_squared: float
    intercept: bool

    @property
    def n_observations(self) -> int:
        """Number of regression rows."""
        return len(self.residuals)

    @property
    def mean_squared_residual(self) -> float:
        """mean(ε²), the maximum likelihood residual variance."""
        return float(np.mean(self.residuals**2))

    @property
    def t_stats(self) -> np.ndarray:
        """Coefficient t-statistics."""
        return self.coefficients / self.standard_errors


def ols(
    X: np.ndarray,
    y: np.ndarray,
    intercept: bool = True,
) -> OLSResult:
    """
    Fit y = Xβ + ε by ordinary least squares.

    Parameters
    ----------
    X : np.ndarray
        Regressors, shape (n,) or (n, k)
    y : np.ndarray
        Response, shape (n,)
    intercept : bool, default True
        Prepend a column of ones

    Returns
    -------
    OLSResult
        Coefficients, residuals and diagnostics

    Raises
    ------
    InvalidInput
        If shapes disagree or the design matrix is rank deficient
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    if X.ndim == 1:
        X = X[:, np.newaxis]
    if X.shape[0] != y.shape[0]:
        raise InvalidInput(
            f"CRITICAL: regressors have {X.shape[0]} rows but response has {y.shape[0]}"
        )
    if intercept:
        X = np.column_stack([np.ones(X.shape[0]), X])

    n, k = X.shape
    beta, _, rank, _ = np.linalg.lstsq(X, y, rcond=None)
    if rank < k:
        raise InvalidInput(
            f"CRITICAL: design matrix is rank deficient (rank {rank} < {k} columns); "
            "the series is degenerate"
        )

    residuals = y - X @ beta
    ssr = float(residuals @ residuals)

    dof = n - k
    if dof > 0:
        s2 = ssr / dof
        cov = s2 * np.linalg.inv(X.T @ X)
        se = np.sqrt(np.diag(cov))
        with np.errstate(divide="ignore", invalid="ignore"):
            p_values = 2 * stats.t.sf(np.abs(beta / se), dof)
    else:
        se = np.full(k, np.nan)
        p_values = np.full(k, np.nan)

    if intercept:
        sst = float(np.sum((y - y.mean()) ** 2))
    else:
        sst = float(y @ y)
    r_squared = 1.0 - ssr / sst if sst > 0 else float("nan")

    return OLSResult(
        coefficients=beta,
        residuals=residuals,
        standard_errors=se,
        p_values=p_values,
        r_squared=r_squared,
        intercept=intercept,
    )


#: Signature of an injectable least squares solver
Estimator = Callable[..., OLSResult]

#: Signature of an injectable moment function
MomentFunction = Callable[[np.ndarray], tuple[float, float]]
