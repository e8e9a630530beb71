"""
Anti-pattern test: Vectorized kernels must match a scalar step-by-step loop.

[T1] Both implementations must produce identical results.
This prevents bugs where the trial-vectorized recursion diverges from the
textbook one-path Euler scheme (floor placement, truncation placement).
"""

import math

import numpy as np
import pytest

from econ_scenarios.models.params import CIR1fParams, RSLNParams, Vasicek1fParams
from econ_scenarios.simulation.equity import regime_paths
from econ_scenarios.simulation.random_paths import RandomPathGenerator
from econ_scenarios.simulation.short_rate import cir_paths, vasicek_paths

DT = 1 / 12


def scalar_vasicek(params: Vasicek1fParams, shocks: list[float]) -> list[float]:
    """One path, one step at a time, floor after the step."""
    r = params.r0
    out = []
    for z in shocks:
        r = r + params.a * (params.b - r) * DT + params.v * math.sqrt(DT) * z
        if params.rmin is not None:
            r = max(r, params.rmin)
        out.append(r)
    return out


def scalar_cir(params: CIR1fParams, shocks: list[float]) -> list[float]:
    """One path, one step at a time, diffusion on max(r, 0)."""
    r = params.r0
    out = []
    for z in shocks:
        r = r + params.a * (params.b - r) * DT + params.v * math.sqrt(max(r, 0.0)) * math.sqrt(DT) * z
        out.append(r)
    return out


@pytest.mark.anti_pattern
class TestShortRateKernels:
    """Vectorized short-rate kernels must match scalar loops."""

    def test_vasicek_with_floor(self):
        """Floored Vasicek matches the scalar recursion."""
        params = Vasicek1fParams(r0=0.0, a=1.0, b=0.0, v=0.03, rmin=-0.01)
        shocks = RandomPathGenerator(seed=1).normal_matrix(5, 60)
        vectorized = vasicek_paths(params, shocks, DT)
        for k in range(5):
            np.testing.assert_allclose(vectorized[k], scalar_vasicek(params, shocks[k]), atol=1e-14)

    def test_cir_with_truncation(self):
        """Truncated CIR matches the scalar recursion, negative levels included."""
        params = CIR1fParams(r0=0.005, a=0.3, b=0.01, v=0.5)
        shocks = RandomPathGenerator(seed=2).normal_matrix(5, 120)
        vectorized = cir_paths(params, shocks, DT)
        assert vectorized.min() < 0  # the scheme is exercised below zero
        for k in range(5):
            np.testing.assert_allclose(vectorized[k], scalar_cir(params, shocks[k]), atol=1e-14)


@pytest.mark.anti_pattern
class TestRegimeKernel:
    """Vectorized regime chain must match a scalar chain."""

    def test_regime_chain(self):
        """Per-trial scalar transitions agree with the vectorized chain."""
        params = RSLNParams(pswitch=(0.3, 0.6), means=(0.0, 0.0), vols=(0.0, 0.0))
        uniforms = np.vstack([s.uniform(48) for s in RandomPathGenerator(seed=3).spawn(4)])
        vectorized = regime_paths(params, uniforms)
        for k in range(4):
            state = 0
            for t in range(48):
                if uniforms[k, t] < params.pswitch[state]:
                    state = 1 - state
                assert vectorized[k, t] == state


@pytest.mark.anti_pattern
class TestNoGlobalRandomState:
    """Simulations must not read or write numpy's global random state."""

    def test_global_seed_irrelevant(self):
        """np.random.seed has no effect on seeded scenarios."""
        params = Vasicek1fParams(r0=0.01, a=0.4, b=0.048, v=0.04)
        np.random.seed(0)
        first = vasicek_paths(params, RandomPathGenerator(seed=5).normal_matrix(3, 12), DT)
        np.random.seed(999)
        second = vasicek_paths(params, RandomPathGenerator(seed=5).normal_matrix(3, 12), DT)
        np.testing.assert_array_equal(first, second)

    def test_global_state_untouched(self):
        """Drawing scenarios leaves the global stream where it was."""
        np.random.seed(123)
        expected = np.random.random(3)
        np.random.seed(123)
        RandomPathGenerator(seed=5).normal_matrix(10, 12)
        np.testing.assert_array_equal(np.random.random(3), expected)
