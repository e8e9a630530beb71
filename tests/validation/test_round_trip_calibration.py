"""
Round-trip calibration: simulate from known parameters, calibrate, compare.

[T1] The regression estimators are exact for the Euler-discretized models,
so on a long history they recover the generating parameters up to sampling
error. 2000 years of monthly data keep the speed estimate within ~3% (1σ)
and b, v within ~1% (1σ).

See: Brigo & Mercurio (2006) Ch. 3
"""

import pytest

from econ_scenarios.calibration.calibrator import Calibrator
from econ_scenarios.calibration.short_rate import calibrate_cir1f, calibrate_vasicek1f
from econ_scenarios.config.tolerances import (
    ROUND_TRIP_RELATIVE_TOLERANCE,
    ROUND_TRIP_SPEED_TOLERANCE,
)


class TestVasicekRoundTrip:
    """Vasicek parameters are recovered from their own simulation."""

    @pytest.mark.validation
    @pytest.mark.slow
    def test_recovers_parameters(self, long_vasicek_history):
        """[T1] a, b, v within the round-trip tolerances."""
        true, levels = long_vasicek_history
        fitted = calibrate_vasicek1f(levels)

        assert fitted.a == pytest.approx(true.a, rel=ROUND_TRIP_SPEED_TOLERANCE)
        assert fitted.b == pytest.approx(true.b, rel=ROUND_TRIP_RELATIVE_TOLERANCE)
        assert fitted.v == pytest.approx(true.v, rel=ROUND_TRIP_RELATIVE_TOLERANCE)
        assert fitted.r0 == levels[-1]

    @pytest.mark.validation
    @pytest.mark.slow
    def test_regression_significant(self, long_vasicek_history):
        """Slope is highly significant on a long mean-reverting history."""
        _, levels = long_vasicek_history
        result = Calibrator().calibrate("vasicek1f", levels)
        assert result.regression.p_values[1] < 1e-6
        assert result.n_observations == len(levels)


class TestCIRRoundTrip:
    """CIR parameters are recovered from their own simulation."""

    @pytest.mark.validation
    @pytest.mark.slow
    def test_recovers_parameters(self, long_cir_history):
        """[T1] a, b, v within the round-trip tolerances."""
        true, levels = long_cir_history
        fitted = calibrate_cir1f(levels)

        assert fitted.a == pytest.approx(true.a, rel=ROUND_TRIP_SPEED_TOLERANCE)
        assert fitted.b == pytest.approx(true.b, rel=ROUND_TRIP_RELATIVE_TOLERANCE)
        assert fitted.v == pytest.approx(true.v, rel=ROUND_TRIP_RELATIVE_TOLERANCE)
        assert fitted.feller_satisfied
