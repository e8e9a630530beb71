"""
Simulated moments against closed forms.

[T1] Euler-discretized Vasicek without a floor is a Gaussian AR(1):
    E[r_n]   = b + (r0 - b) φ^n,              φ = 1 - a·dt
    Var[r_n] = v² dt Σ_{k<n} φ^{2k}
[T1] ILN: E[W_1] = 1 + mean, sd(log W_1) = vol
[T1] RSLN: long-run share of time in regime 1 is p12 / (p12 + p21)

Tolerances are CLT-derived (4 standard errors).

See: Glasserman (2003) Ch. 3
"""

import numpy as np
import pytest

from econ_scenarios.config.tolerances import mc_tolerance
from econ_scenarios.models.params import CIR1fParams, ILNParams, Vasicek1fParams
from econ_scenarios.simulation.equity import validate_iln_simulation, validate_rsln_simulation
from econ_scenarios.simulation.short_rate import ShortRateSimulator

DT = 1 / 12
N_TRIALS = 20_000


class TestVasicekMoments:
    """Terminal distribution of the Euler recursion."""

    @pytest.fixture(scope="class")
    def terminal(self):
        """One-year terminal levels for 20,000 trials."""
        params = Vasicek1fParams(r0=0.01, a=0.4, b=0.048, v=0.04)
        table = ShortRateSimulator().simulate_vasicek1f(params, t_years=1, n_trials=N_TRIALS, seed=101)
        return params, table.terminal_values

    @pytest.mark.validation
    def test_mean(self, terminal):
        """[T1] E[r_12] = b + (r0 - b) φ^12."""
        params, values = terminal
        phi = 1 - params.a * DT
        expected_mean = params.b + (params.r0 - params.b) * phi**12
        expected_var = params.v**2 * DT * np.sum(phi ** (2 * np.arange(12)))

        tol = mc_tolerance(N_TRIALS, sigma=np.sqrt(expected_var))
        assert abs(values.mean() - expected_mean) < tol

    @pytest.mark.validation
    def test_variance(self, terminal):
        """[T1] Var[r_12] = v² dt Σ φ^{2k}."""
        params, values = terminal
        phi = 1 - params.a * DT
        expected_var = params.v**2 * DT * np.sum(phi ** (2 * np.arange(12)))
        # Relative se of a sample variance is sqrt(2/(N-1)) ≈ 1%
        assert values.var(ddof=1) == pytest.approx(expected_var, rel=0.05)


class TestCIRMoments:
    """CIR mean when truncation never binds."""

    @pytest.mark.validation
    def test_mean(self):
        """[T1] E[r_n] = b + (r0 - b) φ^n while levels stay positive."""
        params = CIR1fParams(r0=0.03, a=1.0, b=0.05, v=0.05)
        table = ShortRateSimulator().simulate_cir1f(params, t_years=5, n_trials=N_TRIALS, seed=202)
        values = table.terminal_values

        expected = params.b + (params.r0 - params.b) * (1 - params.a * DT) ** 60
        tol = mc_tolerance(N_TRIALS, sigma=values.std(ddof=1))
        assert abs(values.mean() - expected) < tol


class TestILNMoments:
    """ILN annual moments."""

    @pytest.mark.validation
    def test_iln_validation_passes(self):
        """[T1] E[W_1] = 1 + mean within 4 standard errors, vol within 5%."""
        result = validate_iln_simulation(ILNParams(mean=0.08, vol=0.16), n_trials=N_TRIALS, seed=42)
        assert result["validation_passed"], (
            f"ILN mean {result['simulated_mean']:.5f} vs {result['theoretical_mean']:.5f} "
            f"(z={result['mean_z_score']:.2f})"
        )
        assert result["simulated_vol"] == pytest.approx(0.16, rel=0.05)


class TestRSLNOccupancy:
    """Regime occupancy against the stationary distribution."""

    @pytest.mark.validation
    @pytest.mark.slow
    def test_stationary_share(self, rsln_params):
        """[T1] Share of months in regime 1 ≈ p12 / (p12 + p21)."""
        result = validate_rsln_simulation(rsln_params, t_years=50, n_trials=200, seed=42)
        assert result["theoretical_regime1_share"] == pytest.approx(1 / 6)
        assert result["abs_error"] < 0.02
