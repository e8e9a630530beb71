"""
Centralized pytest fixtures for the econ-scenarios test suite.

Fixture Categories:
1. Tolerances - Tiered tolerances shared across test types
2. Parameter Sets - Representative parameters for each model family
3. Historical Series - Small hand-checkable series and long simulated histories
4. CSV Files - Temporary inputs for the loader and CLI
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from econ_scenarios.models.params import (
    CIR1fParams,
    ILNParams,
    RSLNParams,
    Vasicek1fParams,
)
from econ_scenarios.simulation.short_rate import ShortRateSimulator

# =============================================================================
# TOLERANCE TIERS
# =============================================================================


@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.

    Derived from precision requirements, not ad hoc.
    """

    # Deterministic recursions and closed forms
    analytical: float = 1e-12

    # Independent re-computation of the same estimator
    numerical: float = 1e-10

    # Statistical checks on seeded simulations
    stochastic: float = 0.05


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# PARAMETER SETS
# =============================================================================


@pytest.fixture
def vasicek_params() -> Vasicek1fParams:
    """Mean-reverting Vasicek without a floor."""
    return Vasicek1fParams(r0=0.03, a=1.0, b=0.05, v=0.02)


@pytest.fixture
def cir_params() -> CIR1fParams:
    """CIR with the Feller condition comfortably satisfied."""
    return CIR1fParams(r0=0.04, a=1.0, b=0.05, v=0.05)


@pytest.fixture
def iln_params() -> ILNParams:
    """Typical equity index ILN parameters."""
    return ILNParams(mean=0.08, vol=0.16)


@pytest.fixture
def rsln_params() -> RSLNParams:
    """Hardy (2001) style monthly RSLN parameters."""
    return RSLNParams(pswitch=(0.04, 0.2), means=(0.01, -0.02), vols=(0.035, 0.08))


# =============================================================================
# HISTORICAL SERIES
# =============================================================================

#: Four monthly log-returns with hand-checkable moments
SMALL_LOG_RETURNS = [0.01, -0.02, 0.03, 0.005]

#: Short monthly rate history with visible mean reversion
SMALL_RATE_HISTORY = [0.020, 0.025, 0.022, 0.027, 0.024, 0.026, 0.023, 0.028, 0.025]


@pytest.fixture
def small_log_returns() -> list[float]:
    """Log-return series used by the ILN closed-form checks."""
    return list(SMALL_LOG_RETURNS)


@pytest.fixture
def small_rate_history() -> list[float]:
    """Rate levels used by the regression checks."""
    return list(SMALL_RATE_HISTORY)


@pytest.fixture(scope="session")
def long_vasicek_history() -> tuple[Vasicek1fParams, np.ndarray]:
    """2000 years of monthly Vasicek levels from known parameters."""
    params = Vasicek1fParams(r0=0.05, a=1.0, b=0.05, v=0.02)
    table = ShortRateSimulator().simulate_vasicek1f(params, t_years=2000, n_trials=1, seed=2024)
    return params, table.trial(1)


@pytest.fixture(scope="session")
def long_cir_history() -> tuple[CIR1fParams, np.ndarray]:
    """2000 years of monthly CIR levels from known parameters."""
    params = CIR1fParams(r0=0.05, a=1.0, b=0.05, v=0.05)
    table = ShortRateSimulator().simulate_cir1f(params, t_years=2000, n_trials=1, seed=2024)
    return params, table.trial(1)


# =============================================================================
# CSV FILES
# =============================================================================


@pytest.fixture
def rates_csv(tmp_path: Path) -> Path:
    """CSV with a date column and a rate column."""
    path = tmp_path / "rates.csv"
    dates = pd.date_range("2020-01-31", periods=len(SMALL_RATE_HISTORY), freq="ME")
    pd.DataFrame({"date": dates, "rate": SMALL_RATE_HISTORY}).to_csv(path, index=False)
    return path


@pytest.fixture
def prices_csv(tmp_path: Path) -> Path:
    """CSV of month-end prices growing 1% (log) per month, rows unsorted."""
    path = tmp_path / "prices.csv"
    dates = pd.date_range("2020-01-31", periods=13, freq="ME")
    prices = 100.0 * np.exp(0.01 * np.arange(13))
    frame = pd.DataFrame({"date": dates, "close": prices}).iloc[::-1]
    frame.to_csv(path, index=False)
    return path
