"""
Short-rate path simulation: one- and two-factor Vasicek, one-factor CIR.

Euler-Maruyama on a monthly grid, vectorized across trials:

[T1] Vasicek: r' = r + a(b - r)dt + v sqrt(dt) Z, then r' = max(r', rmin)
[T1] CIR:     r' = r + a(b - r)dt + v sqrt(max(r, 0)) sqrt(dt) Z

Numerical safeguards are explicit policies on the simulator:

- apply_floor: clamp Vasicek levels at rmin after each step. The floored
  level is the base of the next step.
- truncate_diffusion: CIR full truncation. Only the diffusion coefficient
  sees max(r, 0); the level itself may stay negative.

Output is a ScenarioTable with time = step * dt, starting at dt.

See: Glasserman (2003) Ch. 3.3-3.4
See: Lord, Koekkoek & van Dijk (2010) for the full truncation scheme
"""

import logging
import math
import numbers

import numpy as np

from econ_scenarios.config.settings import SETTINGS
from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.models.params import CIR1fParams, Vasicek1fParams, Vasicek2fParams
from econ_scenarios.scenarios.table import ScenarioTable
from econ_scenarios.simulation.random_paths import RandomPathGenerator, resolve_generator

logger = logging.getLogger(__name__)


def horizon_steps(t_years: float, dt: float) -> int:
    """
    Number of steps covering ``t_years``: round(t_years / dt).

    Raises
    ------
    InvalidInput
        If the horizon is not a finite number or rounds to fewer than one step
    """
    if dt <= 0:
        raise InvalidInput(f"CRITICAL: dt must be > 0, got {dt}")
    if (
        isinstance(t_years, bool)
        or not isinstance(t_years, numbers.Real)
        or not math.isfinite(t_years)
    ):
        raise InvalidInput(f"CRITICAL: t_years must be a finite number, got {t_years!r}")
    t_steps = int(round(t_years / dt))
    if t_steps < 1:
        raise InvalidInput(
            f"CRITICAL: horizon of {t_years} years gives {t_steps} steps; need >= 1"
        )
    return t_steps


def check_trials(n_trials: int) -> int:
    """Validate the trial count."""
    if isinstance(n_trials, bool) or not isinstance(n_trials, numbers.Integral):
        raise InvalidInput(f"CRITICAL: n_trials must be an integer, got {n_trials!r}")
    if n_trials < 1:
        raise InvalidInput(f"CRITICAL: n_trials must be an integer >= 1, got {n_trials}")
    return int(n_trials)


# =============================================================================
# Path kernels (pure functions of parameters and shocks)
# =============================================================================


def vasicek_paths(
    params: Vasicek1fParams,
    shocks: np.ndarray,
    dt: float,
    apply_floor: bool = True,
) -> np.ndarray:
    """
    Vasicek levels driven by a given shock matrix.

    Parameters
    ----------
    params : Vasicek1fParams
        Model parameters
    shocks : np.ndarray
        Standard normal shocks, shape (n_trials, n_steps)
    dt : float
        Step size in years
    apply_floor : bool, default True
        Clamp at params.rmin after each step (no effect when rmin is None)

    Returns
    -------
    np.ndarray
        Levels after each step, shape (n_trials, n_steps)
    """
    n_trials, n_steps = shocks.shape
    rates = np.empty((n_trials, n_steps))

    floor = params.rmin if apply_floor else None
    vol_dt = params.v * np.sqrt(dt)

    r = np.full(n_trials, float(params.r0))
    for t in range(n_steps):
        r = r + params.a * (params.b - r) * dt + vol_dt * shocks[:, t]
        if floor is not None:
            r = np.maximum(r, floor)
        rates[:, t] = r

    return rates


def cir_paths(
    params: CIR1fParams,
    shocks: np.ndarray,
    dt: float,
    truncate_diffusion: bool = True,
) -> np.ndarray:
    """
    CIR levels driven by a given shock matrix.

    Parameters
    ----------
    params : CIR1fParams
        Model parameters
    shocks : np.ndarray
        Standard normal shocks, shape (n_trials, n_steps)
    dt : float
        Step size in years
    truncate_diffusion : bool, default True
        Use sqrt(max(r, 0)) in the diffusion term

    Returns
    -------
    np.ndarray
        Levels after each step, shape (n_trials, n_steps)

    Raises
    ------
    InvalidInput
        If truncation is off and a level goes negative (sqrt undefined)
    """
    n_trials, n_steps = shocks.shape
    rates = np.empty((n_trials, n_steps))

    sqrt_dt = np.sqrt(dt)

    r = np.full(n_trials, float(params.r0))
    for t in range(n_steps):
        if truncate_diffusion:
            diffusion_base = np.maximum(r, 0.0)
        else:
            if np.any(r < 0):
                raise InvalidInput(
                    f"CRITICAL: CIR level went negative at step {t} "
                    f"(min {r.min():.6g}); enable truncate_diffusion"
                )
            diffusion_base = r
        r = (
            r
            + params.a * (params.b - r) * dt
            + params.v * np.sqrt(diffusion_base) * sqrt_dt * shocks[:, t]
        )
        rates[:, t] = r

    return rates


# =============================================================================
# Simulator
# =============================================================================


class ShortRateSimulator:
    """
    Simulate short-rate scenarios for Vasicek (1 or 2 factors) and CIR.

    Parameters
    ----------
    dt : float, default 1/12
        Step size in years
    apply_floor : bool, default True
        Vasicek floor policy (rmin)
    truncate_diffusion : bool, default True
        CIR full-truncation policy

    Examples
    --------
    >>> from econ_scenarios.models.params import CAS_INFLATION_VAS1F
    >>> sim = ShortRateSimulator()
    >>> table = sim.simulate_vasicek1f(CAS_INFLATION_VAS1F, t_years=10, n_trials=500, seed=1)
    >>> len(table)
    60000
    """

    def __init__(
        self,
        dt: float = SETTINGS.simulation.dt,
        apply_floor: bool = True,
        truncate_diffusion: bool = True,
    ):
        if dt <= 0:
            raise InvalidInput(f"CRITICAL: dt must be > 0, got {dt}")
        self.dt = dt
        self.apply_floor = apply_floor
        self.truncate_diffusion = truncate_diffusion

    def _setup(
        self,
        t_years: float,
        n_trials: int,
        seed: int | None,
        generator: RandomPathGenerator | None,
    ) -> tuple[int, int, RandomPathGenerator]:
        n_trials = check_trials(n_trials)
        t_steps = horizon_steps(t_years, self.dt)
        return n_trials, t_steps, resolve_generator(generator, seed)

    def simulate_vasicek1f(
        self,
        params: Vasicek1fParams,
        t_years: float = SETTINGS.simulation.horizon_years,
        n_trials: int = SETTINGS.simulation.n_trials,
        seed: int | None = None,
        generator: RandomPathGenerator | None = None,
    ) -> ScenarioTable:
        """
        Simulate one-factor Vasicek levels.

        Parameters
        ----------
        params : Vasicek1fParams
            Model parameters
        t_years : float, default 1
            Horizon in years
        n_trials : int, default 1
            Number of independent trials
        seed : int, optional
            Run seed (mutually exclusive with generator)
        generator : RandomPathGenerator, optional
            Explicit draw stream

        Returns
        -------
        ScenarioTable
            One record per (trial, step)
        """
        n_trials, t_steps, generator = self._setup(t_years, n_trials, seed, generator)
        shocks = generator.normal_matrix(n_trials, t_steps)
        rates = vasicek_paths(params, shocks, self.dt, self.apply_floor)
        logger.debug(f"Simulated Vasicek1f: {n_trials} trials x {t_steps} steps")
        return ScenarioTable(values=rates, dt=self.dt)

    def simulate_vasicek2f(
        self,
        params: Vasicek2fParams,
        t_years: float = SETTINGS.simulation.horizon_years,
        n_trials: int = SETTINGS.simulation.n_trials,
        seed: int | None = None,
        generator: RandomPathGenerator | None = None,
    ) -> ScenarioTable:
        """
        Simulate two independent Vasicek factors and report their sum.

        Each factor draws from its own sub-stream and applies its own floor.

        Returns
        -------
        ScenarioTable
            short + long level per (trial, step)
        """
        n_trials, t_steps, generator = self._setup(t_years, n_trials, seed, generator)
        short_stream, long_stream = generator.spawn(2)

        short = vasicek_paths(
            params.short, short_stream.normal_matrix(n_trials, t_steps), self.dt, self.apply_floor
        )
        long = vasicek_paths(
            params.long, long_stream.normal_matrix(n_trials, t_steps), self.dt, self.apply_floor
        )
        logger.debug(f"Simulated Vasicek2f: {n_trials} trials x {t_steps} steps")
        return ScenarioTable(values=short + long, dt=self.dt)

    def simulate_cir1f(
        self,
        params: CIR1fParams,
        t_years: float = SETTINGS.simulation.horizon_years,
        n_trials: int = SETTINGS.simulation.n_trials,
        seed: int | None = None,
        generator: RandomPathGenerator | None = None,
    ) -> ScenarioTable:
        """
        Simulate one-factor CIR levels with full truncation.

        Returns
        -------
        ScenarioTable
            One record per (trial, step); never NaN under truncation
        """
        n_trials, t_steps, generator = self._setup(t_years, n_trials, seed, generator)
        shocks = generator.normal_matrix(n_trials, t_steps)
        rates = cir_paths(params, shocks, self.dt, self.truncate_diffusion)
        n_negative = int(np.sum(rates < 0))
        if n_negative:
            logger.debug(f"CIR discretization produced {n_negative} negative levels")
        logger.debug(f"Simulated CIR1f: {n_trials} trials x {t_steps} steps")
        return ScenarioTable(values=rates, dt=self.dt)

    def simulate(
        self,
        params: Vasicek1fParams | Vasicek2fParams | CIR1fParams,
        t_years: float = SETTINGS.simulation.horizon_years,
        n_trials: int = SETTINGS.simulation.n_trials,
        seed: int | None = None,
        generator: RandomPathGenerator | None = None,
    ) -> ScenarioTable:
        """
        Dispatch on the parameter type.

        Raises
        ------
        InvalidInput
            If params is not a short-rate parameter set
        """
        if isinstance(params, Vasicek2fParams):
            return self.simulate_vasicek2f(params, t_years, n_trials, seed, generator)
        if isinstance(params, Vasicek1fParams):
            return self.simulate_vasicek1f(params, t_years, n_trials, seed, generator)
        if isinstance(params, CIR1fParams):
            return self.simulate_cir1f(params, t_years, n_trials, seed, generator)
        raise InvalidInput(
            f"CRITICAL: no short-rate model for {type(params).__name__}"
        )


def simulate_short_rate(
    params: Vasicek1fParams | Vasicek2fParams | CIR1fParams,
    t_years: float = SETTINGS.simulation.horizon_years,
    n_trials: int = SETTINGS.simulation.n_trials,
    seed: int | None = None,
    generator: RandomPathGenerator | None = None,
    apply_floor: bool = True,
    truncate_diffusion: bool = True,
) -> ScenarioTable:
    """Simulate with a default-configured ShortRateSimulator."""
    simulator = ShortRateSimulator(
        apply_floor=apply_floor, truncate_diffusion=truncate_diffusion
    )
    return simulator.simulate(params, t_years, n_trials, seed, generator)
