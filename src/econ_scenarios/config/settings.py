"""
Frozen configuration settings for calibration and scenario generation.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
"""

import os
from dataclasses import dataclass

# =============================================================================
# Time Grid
# =============================================================================

#: Monthly time step in years. [T1]
MONTHLY_DT: float = 1.0 / 12.0


def _resolve_default_seed() -> int | None:
    """
    Resolve the default simulation seed with environment variable override.

    Priority:
    1. ECON_SCENARIOS_SEED environment variable (if set)
    2. Default: None (fresh OS entropy per run)

    Returns
    -------
    int or None
        Seed for RandomPathGenerator
    """
    env_seed = os.environ.get("ECON_SCENARIOS_SEED")
    if env_seed:
        return int(env_seed)
    return None


# =============================================================================
# Calibration Configuration
# =============================================================================

@dataclass(frozen=True)
class CalibrationConfig:
    """
    Immutable calibration configuration.

    Attributes
    ----------
    dt : float
        Time step of historical observations in years
    min_observations : int
        Smallest series length the moment estimator accepts
    min_regression_observations : int
        Smallest level series the regression estimators accept (two
        coefficients need at least two regression rows)
    """

    dt: float = MONTHLY_DT  # Monthly data [T1]
    min_observations: int = 2
    min_regression_observations: int = 3


# =============================================================================
# Simulation Configuration
# =============================================================================

@dataclass(frozen=True)
class SimulationConfig:
    """
    Immutable simulation configuration.

    Attributes
    ----------
    dt : float
        Simulation time step in years
    horizon_years : float
        Default projection horizon
    n_trials : int
        Default number of trials
    seed : int, optional
        Default seed. Override with ECON_SCENARIOS_SEED environment variable.
    """

    dt: float = MONTHLY_DT
    horizon_years: float = 1.0
    n_trials: int = 1
    seed: int | None = None  # type: ignore[assignment]  # Set in __post_init__

    def __post_init__(self) -> None:
        """Initialize seed using resolver function."""
        # Frozen dataclass workaround: use object.__setattr__
        if self.seed is None:
            object.__setattr__(self, "seed", _resolve_default_seed())


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from econ_scenarios.config.settings import SETTINGS
    >>> SETTINGS.simulation.dt
    0.08333333333333333
    """

    calibration: CalibrationConfig = CalibrationConfig()
    simulation: SimulationConfig = SimulationConfig()


# Singleton instance - import this
SETTINGS = Settings()
