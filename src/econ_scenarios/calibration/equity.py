"""
Independent lognormal (ILN) equity calibration.

[T1] Monthly log-returns X ~ N(μ, σ²). Annualized:
    mean = exp((μ + σ²/2) / dt) - 1      (arithmetic annual mean return)
    vol  = σ · sqrt(1/dt)                (annualized log-volatility)
"""

import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from econ_scenarios.calibration.estimators import (
    MomentFunction,
    as_series,
    sample_moments,
)
from econ_scenarios.config.settings import SETTINGS
from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.models.params import ILNParams

logger = logging.getLogger(__name__)


def calibrate_iln(
    log_returns: Sequence[float] | np.ndarray,
    dt: float = SETTINGS.calibration.dt,
    moments: MomentFunction = sample_moments,
) -> ILNParams:
    """
    Calibrate ILN parameters from historical log-returns.

    Parameters
    ----------
    log_returns : array-like
        Log-returns observed every ``dt`` years
    dt : float, default 1/12
        Observation step in years
    moments : callable
        Returns (mean, std) of a series; sample moments by default

    Returns
    -------
    ILNParams
        Annual arithmetic mean and annualized log-volatility

    Raises
    ------
    InvalidInput
        If fewer than 2 observations or non-numeric data

    Examples
    --------
    >>> params = calibrate_iln([0.01, -0.02, 0.03, 0.005])
    >>> round(params.vol, 4)
    0.0712
    """
    if dt <= 0:
        raise InvalidInput(f"CRITICAL: dt must be > 0, got {dt}")
    x = as_series(log_returns, "log_returns", SETTINGS.calibration.min_observations)

    mu, sigma = moments(x)
    mean_ann = float(np.exp((mu + 0.5 * sigma**2) / dt) - 1)
    vol_ann = float(sigma * np.sqrt(1 / dt))

    logger.info(
        f"ILN parameters calibrated with {len(x)} observations: "
        f"mean={mean_ann:.4f}, vol={vol_ann:.4f}"
    )
    return ILNParams(mean=mean_ann, vol=vol_ann)


def monthly_log_returns(prices: pd.Series) -> pd.Series:
    """
    Month-end to month-end log-returns of a dated price series.

    Parameters
    ----------
    prices : pd.Series
        Prices indexed by a DatetimeIndex (daily or coarser)

    Returns
    -------
    pd.Series
        Log-returns indexed by month end; the first month is dropped

    Raises
    ------
    InvalidInput
        If the index is not datetime-like or a price is not positive
    """
    if not isinstance(prices.index, pd.DatetimeIndex):
        raise InvalidInput("CRITICAL: prices must be indexed by a DatetimeIndex")
    prices = prices.dropna().sort_index()
    if (prices <= 0).any():
        raise InvalidInput("CRITICAL: prices must be > 0 to take logs")
    month_end = prices.resample("ME").last().dropna()
    return np.log(month_end).diff().dropna()


def calibrate_iln_from_prices(prices: pd.Series) -> ILNParams:
    """
    Calibrate ILN parameters from a dated price history.

    Prices are sampled at month end and converted to monthly log-returns,
    then annualized with dt = 1/12.

    Parameters
    ----------
    prices : pd.Series
        Adjusted prices indexed by date

    Returns
    -------
    ILNParams
        Calibrated parameters
    """
    returns = monthly_log_returns(prices)
    if len(returns):
        logger.info(
            f"Using monthly returns from {returns.index[0].date()} "
            f"through {returns.index[-1].date()}"
        )
    return calibrate_iln(returns, dt=1.0 / 12.0)
