"""
Calibrator: model-family dispatch over the closed-form estimators.

The numeric routines (least squares solver, moment function) and the
observation step are bound once on the instance, so a Calibrator carries
no hidden global state and can be handed test doubles.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import numpy as np

from econ_scenarios.calibration.equity import calibrate_iln
from econ_scenarios.calibration.estimators import (
    Estimator,
    MomentFunction,
    OLSResult,
    ols,
    sample_moments,
)
from econ_scenarios.calibration.short_rate import fit_cir1f, fit_vasicek1f
from econ_scenarios.config.settings import SETTINGS
from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.models.params import CIR1fParams, ILNParams, Vasicek1fParams


class ModelFamily(Enum):
    """Model families the calibrator can fit."""

    ILN = "iln"
    VASICEK1F = "vasicek1f"
    CIR1F = "cir1f"

    @classmethod
    def parse(cls, model: "str | ModelFamily") -> "ModelFamily":
        """Accept an enum member or its (case-insensitive) name."""
        if isinstance(model, cls):
            return model
        try:
            return cls(str(model).lower())
        except ValueError:
            available = ", ".join(m.value for m in cls)
            raise InvalidInput(
                f"CRITICAL: cannot calibrate '{model}'. Available: {available}"
            ) from None


@dataclass(frozen=True)
class CalibrationResult:
    """
    Parameters plus the regression they were recovered from.

    Attributes
    ----------
    model : ModelFamily
        Family that was fitted
    params : ILNParams | Vasicek1fParams | CIR1fParams
        Calibrated parameter set
    n_observations : int
        Length of the input series
    regression : OLSResult, optional
        Underlying fit (None for ILN, which uses moments only)
    """

    model: ModelFamily
    params: ILNParams | Vasicek1fParams | CIR1fParams
    n_observations: int
    regression: OLSResult | None = None

    def to_dict(self) -> dict:
        """Summary for logging/serialization."""
        out = {
            "model": self.model.value,
            "params": self.params.to_dict(),
            "n_observations": self.n_observations,
        }
        if self.regression is not None:
            out["r_squared"] = self.regression.r_squared
            out["coefficients"] = [float(c) for c in self.regression.coefficients]
            out["p_values"] = [float(p) for p in self.regression.p_values]
        return out


class Calibrator:
    """
    Calibrate parameter sets from historical series.

    Parameters
    ----------
    dt : float, default 1/12
        Observation step in years
    estimator : callable
        Least squares solver used by the short-rate models
    moments : callable
        Mean/std function used by ILN

    Examples
    --------
    >>> calibrator = Calibrator()
    >>> result = calibrator.calibrate("iln", [0.01, -0.02, 0.03, 0.005])
    >>> result.model
    <ModelFamily.ILN: 'iln'>
    """

    def __init__(
        self,
        dt: float = SETTINGS.calibration.dt,
        estimator: Estimator = ols,
        moments: MomentFunction = sample_moments,
    ):
        if dt <= 0:
            raise InvalidInput(f"CRITICAL: dt must be > 0, got {dt}")
        self.dt = dt
        self.estimator = estimator
        self.moments = moments

    def calibrate(
        self,
        model: str | ModelFamily,
        series: Sequence[float] | np.ndarray,
        shift: float | None = None,
    ) -> CalibrationResult:
        """
        Calibrate the requested model family.

        Parameters
        ----------
        model : str or ModelFamily
            "iln", "vasicek1f" or "cir1f"
        series : array-like
            Log-returns (ILN) or levels (short-rate models)
        shift : float, optional
            Level shift, CIR only

        Returns
        -------
        CalibrationResult
            Parameters and diagnostics

        Raises
        ------
        InvalidInput
            On unknown model, bad data, or a shift passed to a non-CIR model
        """
        family = ModelFamily.parse(model)
        if shift is not None and family is not ModelFamily.CIR1F:
            raise InvalidInput(f"CRITICAL: shift only applies to cir1f, not {family.value}")

        if family is ModelFamily.ILN:
            params = calibrate_iln(series, dt=self.dt, moments=self.moments)
            return CalibrationResult(model=family, params=params, n_observations=len(series))
        if family is ModelFamily.VASICEK1F:
            params, fit = fit_vasicek1f(series, dt=self.dt, estimator=self.estimator)
        else:
            params, fit = fit_cir1f(series, dt=self.dt, shift=shift, estimator=self.estimator)
        return CalibrationResult(
            model=family,
            params=params,
            n_observations=len(series),
            regression=fit,
        )

    def iln(self, log_returns: Sequence[float] | np.ndarray) -> ILNParams:
        """Calibrate ILN parameters."""
        return self.calibrate(ModelFamily.ILN, log_returns).params  # type: ignore[return-value]

    def vasicek1f(self, levels: Sequence[float] | np.ndarray) -> Vasicek1fParams:
        """Calibrate one-factor Vasicek parameters."""
        return self.calibrate(ModelFamily.VASICEK1F, levels).params  # type: ignore[return-value]

    def cir1f(
        self,
        levels: Sequence[float] | np.ndarray,
        shift: float = 0.0,
    ) -> CIR1fParams:
        """Calibrate one-factor CIR parameters."""
        return self.calibrate(ModelFamily.CIR1F, levels, shift=shift).params  # type: ignore[return-value]
