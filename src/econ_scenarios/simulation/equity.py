"""
Equity return path simulation: ILN and two-regime RSLN.

[T1] ILN: monthly log-return X = μ_m + σ_m Z, with (μ_m, σ_m) inverted from
     the annual arithmetic mean and annualized vol (ILNParams.monthly_moments)
[T1] RSLN: regime s_t is a 2-state Markov chain with
     P(s_t = 1 - s | s_{t-1} = s) = pswitch[s], and X_t ~ N(means[s_t], vols[s_t])

Regime convention: at each step the transition is evaluated first and the
step's return is drawn under the post-transition regime. With
pswitch = (1, 1) and initial state 0 the recorded states are 1, 0, 1, 0, ...

Both models report three series per (trial, time):

- returns: the step's log-return
- cumulative: cumulative log-return since time 0
- wealth: exp(cumulative), the accumulated value of 1 invested at time 0

See: Hardy (2001) "A Regime-Switching Model of Long-Term Stock Returns"
"""

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from econ_scenarios.config.settings import SETTINGS
from econ_scenarios.models.errors import InvalidInput
from econ_scenarios.models.params import ILNParams, RSLNParams
from econ_scenarios.scenarios.table import ScenarioTable, frame_from_tables
from econ_scenarios.simulation.random_paths import RandomPathGenerator, resolve_generator
from econ_scenarios.simulation.short_rate import check_trials, horizon_steps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EquityScenarios:
    """
    Equity simulation output: three tables on a shared grid.

    Attributes
    ----------
    returns : ScenarioTable
        Per-step log-returns
    cumulative : ScenarioTable
        Cumulative log-returns
    wealth : ScenarioTable
        Wealth ratio exp(cumulative)
    """

    returns: ScenarioTable
    cumulative: ScenarioTable
    wealth: ScenarioTable

    @property
    def n_trials(self) -> int:
        """Number of trials."""
        return self.returns.n_trials

    @property
    def n_steps(self) -> int:
        """Number of steps per trial."""
        return self.returns.n_steps

    @property
    def states(self) -> np.ndarray | None:
        """Regime per (trial, step) when simulated with detail."""
        return self.returns.states

    def __len__(self) -> int:
        return len(self.returns)

    def to_frame(self) -> pd.DataFrame:
        """Wide DataFrame: trial, time, returns[, state], cumulative, wealth."""
        return frame_from_tables(
            {"returns": self.returns, "cumulative": self.cumulative, "wealth": self.wealth}
        )


def _build_scenarios(
    log_returns: np.ndarray,
    dt: float,
    states: np.ndarray | None = None,
) -> EquityScenarios:
    cumulative = np.cumsum(log_returns, axis=1)
    return EquityScenarios(
        returns=ScenarioTable(values=log_returns, dt=dt, states=states),
        cumulative=ScenarioTable(values=cumulative, dt=dt, states=states),
        wealth=ScenarioTable(values=np.exp(cumulative), dt=dt, states=states),
    )


def regime_paths(
    params: RSLNParams,
    uniforms: np.ndarray,
    initial_state: int = 0,
) -> np.ndarray:
    """
    Markov regime chain driven by a given uniform matrix.

    Parameters
    ----------
    params : RSLNParams
        Supplies the switching probabilities
    uniforms : np.ndarray
        U[0, 1) draws, shape (n_trials, n_steps)
    initial_state : int, default 0
        Regime before the first step

    Returns
    -------
    np.ndarray
        Post-transition regime per (trial, step), dtype int8
    """
    n_trials, n_steps = uniforms.shape
    pswitch = np.asarray(params.pswitch)
    states = np.empty((n_trials, n_steps), dtype=np.int8)

    s = np.full(n_trials, initial_state, dtype=np.int8)
    for t in range(n_steps):
        switch = uniforms[:, t] < pswitch[s]
        s = np.where(switch, 1 - s, s).astype(np.int8)
        states[:, t] = s

    return states


class EquitySimulator:
    """
    Simulate monthly equity return scenarios.

    Parameters
    ----------
    dt : float, default 1/12
        Step size in years. RSLN parameters are per step.

    Examples
    --------
    >>> sim = EquitySimulator()
    >>> out = sim.simulate_iln(ILNParams(mean=0.08, vol=0.16), t_years=5, n_trials=100, seed=7)
    >>> out.wealth.values.shape
    (100, 60)
    """

    def __init__(self, dt: float = SETTINGS.simulation.dt):
        if dt <= 0:
            raise InvalidInput(f"CRITICAL: dt must be > 0, got {dt}")
        self.dt = dt

    def simulate_iln(
        self,
        params: ILNParams,
        t_years: float = SETTINGS.simulation.horizon_years,
        n_trials: int = SETTINGS.simulation.n_trials,
        seed: int | None = None,
        generator: RandomPathGenerator | None = None,
    ) -> EquityScenarios:
        """
        Simulate independent lognormal returns.

        Parameters
        ----------
        params : ILNParams
            Annualized mean and vol
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
        EquityScenarios
            returns, cumulative and wealth tables
        """
        n_trials = check_trials(n_trials)
        t_steps = horizon_steps(t_years, self.dt)
        generator = resolve_generator(generator, seed)

        mu, sigma = params.monthly_moments(self.dt)
        z = generator.normal_matrix(n_trials, t_steps)
        log_returns = mu + sigma * z

        logger.debug(
            f"Simulated ILN: {n_trials} trials x {t_steps} steps "
            f"(step mu={mu:.6f}, sigma={sigma:.6f})"
        )
        return _build_scenarios(log_returns, self.dt)

    def simulate_rsln(
        self,
        params: RSLNParams,
        t_years: float = SETTINGS.simulation.horizon_years,
        n_trials: int = SETTINGS.simulation.n_trials,
        seed: int | None = None,
        generator: RandomPathGenerator | None = None,
        detail: bool = False,
        initial_state: int = 0,
    ) -> EquityScenarios:
        """
        Simulate regime-switching lognormal returns.

        Parameters
        ----------
        params : RSLNParams
            Per-step regime means/vols and switching probabilities
        t_years : float, default 1
            Horizon in years
        n_trials : int, default 1
            Number of independent trials
        seed : int, optional
            Run seed (mutually exclusive with generator)
        generator : RandomPathGenerator, optional
            Explicit draw stream
        detail : bool, default False
            Record the regime of each step in the output tables
        initial_state : int, default 0
            Regime before the first step

        Returns
        -------
        EquityScenarios
            returns, cumulative and wealth tables; with detail, every record
            carries ``state``

        Raises
        ------
        InvalidInput
            If initial_state is not 0 or 1, or counts are invalid
        """
        if initial_state not in (0, 1):
            raise InvalidInput(f"CRITICAL: initial_state must be 0 or 1, got {initial_state}")
        n_trials = check_trials(n_trials)
        t_steps = horizon_steps(t_years, self.dt)
        generator = resolve_generator(generator, seed)

        # One stream per trial; each trial takes its regime uniforms, then its normals
        streams = generator.trial_streams(n_trials)
        uniforms = np.vstack([stream.uniform(t_steps) for stream in streams])
        z = np.vstack([stream.draw(t_steps) for stream in streams])

        states = regime_paths(params, uniforms, initial_state)
        means = np.asarray(params.means)
        vols = np.asarray(params.vols)
        log_returns = means[states] + vols[states] * z

        logger.debug(
            f"Simulated RSLN: {n_trials} trials x {t_steps} steps, "
            f"regime 1 share {states.mean():.3f}"
        )
        return _build_scenarios(log_returns, self.dt, states if detail else None)

    def simulate(
        self,
        params: ILNParams | RSLNParams,
        t_years: float = SETTINGS.simulation.horizon_years,
        n_trials: int = SETTINGS.simulation.n_trials,
        seed: int | None = None,
        generator: RandomPathGenerator | None = None,
        detail: bool = False,
        initial_state: int = 0,
    ) -> EquityScenarios:
        """
        Dispatch on the parameter type.

        ``detail`` and ``initial_state`` apply to RSLN only.

        Raises
        ------
        InvalidInput
            If params is not an equity parameter set
        """
        if isinstance(params, ILNParams):
            return self.simulate_iln(params, t_years, n_trials, seed, generator)
        if isinstance(params, RSLNParams):
            return self.simulate_rsln(
                params,
                t_years,
                n_trials,
                seed,
                generator,
                detail=detail,
                initial_state=initial_state,
            )
        raise InvalidInput(f"CRITICAL: no equity model for {type(params).__name__}")


def validate_iln_simulation(
    params: ILNParams,
    n_trials: int = 20_000,
    seed: int = 42,
) -> dict:
    """
    Validate ILN simulation against its calibrated annual moments.

    [T1] One-year wealth ratio W satisfies E[W] = 1 + mean and
    sd(log W) = vol.

    Parameters
    ----------
    params : ILNParams
        Parameters to check
    n_trials : int, default 20000
        Trials for validation
    seed : int, default 42
        Random seed

    Returns
    -------
    dict
        Theoretical vs simulated values
    """
    out = EquitySimulator().simulate_iln(params, t_years=1.0, n_trials=n_trials, seed=seed)
    wealth = out.wealth.terminal_values
    log_wealth = out.cumulative.terminal_values

    simulated_mean = float(wealth.mean() - 1)
    se_mean = float(wealth.std(ddof=1) / np.sqrt(n_trials))
    simulated_vol = float(log_wealth.std(ddof=1))

    return {
        "n_trials": n_trials,
        "theoretical_mean": params.mean,
        "simulated_mean": simulated_mean,
        "mean_se": se_mean,
        "mean_z_score": (simulated_mean - params.mean) / se_mean if se_mean > 0 else 0.0,
        "theoretical_vol": params.vol,
        "simulated_vol": simulated_vol,
        "validation_passed": abs(simulated_mean - params.mean) <= 4 * se_mean,
    }


def validate_rsln_simulation(
    params: RSLNParams,
    t_years: float = 50.0,
    n_trials: int = 200,
    seed: int = 42,
) -> dict:
    """
    Compare simulated regime occupancy with the stationary distribution.

    [T1] π₁ = p12 / (p12 + p21)

    Returns
    -------
    dict
        Theoretical vs simulated share of time spent in regime 1
    """
    out = EquitySimulator().simulate_rsln(
        params, t_years=t_years, n_trials=n_trials, seed=seed, detail=True
    )
    _, pi1 = params.stationary_probabilities()
    simulated = float(out.states.mean())
    return {
        "n_trials": n_trials,
        "n_steps": out.n_steps,
        "theoretical_regime1_share": pi1,
        "simulated_regime1_share": simulated,
        "abs_error": abs(simulated - pi1),
    }
