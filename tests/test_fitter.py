"""Tests for the state-space recursion, point forecasts and simulation."""

import math

import numpy as np
import pytest

from autoets import ModelSpec, NonFiniteStateError, Parameters
from autoets.core.fitter import ets_fitter, ets_forecaster, simulate_paths


def _params(name, **kwargs):
    return Parameters.create(ModelSpec.from_string(name), **kwargs)


class TestEtsFitter:
    """Tests for the in-sample recursion."""

    def test_ann_by_hand(self):
        params = _params("ANN", alpha=0.5, level=1.0)
        result = ets_fitter(params.spec, params, [1.0, 2.0, 3.0])

        np.testing.assert_allclose(result.fitted, [1.0, 1.0, 1.5])
        np.testing.assert_allclose(result.residuals, [0.0, 1.0, 1.5])
        np.testing.assert_allclose(result.states[:, 0], [1.0, 1.0, 1.5, 2.25])
        assert result.states.shape == (4, 1)
        assert result.final_state[0] == 2.25
        assert result.sse == pytest.approx(3.25)
        expected = -0.5 * 3 * (math.log(2 * math.pi * 3.25 / 3) + 1)
        assert result.loglik == pytest.approx(expected)

    def test_mnn_relative_residuals(self):
        params = _params("MNN", alpha=0.5, level=10.0)
        result = ets_fitter(params.spec, params, [10.0, 12.0])

        np.testing.assert_allclose(result.residuals, [0.0, 0.2])
        assert result.final_state[0] == pytest.approx(11.0)
        expected = -0.5 * 2 * (math.log(2 * math.pi * 0.02) + 1) - 2 * math.log(10)
        assert result.loglik == pytest.approx(expected)

    def test_state_layout(self):
        params = _params(
            "AAdA",
            alpha=0.3,
            beta=0.1,
            gamma=0.2,
            phi=0.9,
            level=10,
            trend=1,
            season=[1, -1, 2, -2],
        )
        y = np.arange(12, dtype=float) + 10
        result = ets_fitter(params.spec, params, y)
        assert result.states.shape == (13, 6)
        np.testing.assert_array_equal(result.states[0], [10, 1, 1, -1, 2, -2])
        np.testing.assert_array_equal(result.final_state, result.states[-1])

    def test_seasonal_position_cycles(self):
        # With zero smoothing on the seasonals the fitted values repeat them
        params = _params(
            "ANA", alpha=0.0001, gamma=0.0001, level=0.0, season=[1.0, -1.0]
        )
        result = ets_fitter(params.spec, params, np.zeros(6))
        np.testing.assert_allclose(
            result.fitted, [1, -1, 1, -1, 1, -1], atol=1e-3
        )

    def test_perfect_fit_has_finite_likelihood(self):
        params = _params("ANN", alpha=0.3, level=5.0)
        result = ets_fitter(params.spec, params, np.full(6, 5.0))
        assert result.sse == 0
        assert np.isfinite(result.loglik)

    def test_huge_residuals_keep_finite_likelihood(self):
        params = _params("ANN", alpha=0.5, level=0.0)
        result = ets_fitter(params.spec, params, [1e200, -1e200, 1e200, 5e199])
        np.testing.assert_allclose(
            result.residuals, [1e200, -1.5e200, 1.25e200, 0.125e200]
        )
        # 1 + 2.25 + 1.5625 + 0.015625 in units of 1e200 squared
        log_sigma2 = math.log(4.828125) + 400 * math.log(10) - math.log(4)
        expected = -2 * (math.log(2 * math.pi) + log_sigma2 + 1)
        assert result.loglik == pytest.approx(expected, rel=1e-12)

    def test_non_finite_state_raises(self):
        params = _params("AMN", alpha=0.5, beta=0.1, level=1.0, trend=0.5)
        with pytest.raises(NonFiniteStateError):
            ets_fitter(params.spec, params, [-100.0, 1.0, 1.0])

    def test_does_not_modify_parameters(self):
        params = _params("ANA", alpha=0.3, gamma=0.1, level=5.0, season=[1, -1])
        ets_fitter(params.spec, params, [6.0, 3.0, 7.0, 4.0])
        np.testing.assert_array_equal(params.season, [1, -1])


class TestEtsForecaster:
    """Tests for point forecasts."""

    def test_level_only(self):
        params = _params("ANN", alpha=0.3, level=5.0)
        forecasts = ets_forecaster(params.spec, params, np.array([7.5]), 3, 10)
        np.testing.assert_array_equal(forecasts, [7.5, 7.5, 7.5])

    def test_linear_trend(self):
        params = _params("AAN", alpha=0.5, beta=0.1, level=0.0, trend=0.0)
        forecasts = ets_forecaster(params.spec, params, np.array([10.0, 2.0]), 3, 10)
        np.testing.assert_allclose(forecasts, [12, 14, 16])

    def test_damped_trend(self):
        params = _params(
            "AAdN", alpha=0.5, beta=0.1, phi=0.9, level=0.0, trend=0.0
        )
        forecasts = ets_forecaster(params.spec, params, np.array([10.0, 2.0]), 3, 10)
        np.testing.assert_allclose(forecasts, [11.8, 13.42, 14.878])

    def test_multiplicative_trend(self):
        params = _params("MMN", alpha=0.5, beta=0.1, level=1.0, trend=1.0)
        forecasts = ets_forecaster(params.spec, params, np.array([100.0, 1.1]), 2, 10)
        np.testing.assert_allclose(forecasts, [110.0, 121.0])

    @pytest.mark.parametrize("n_obs,expected", [(4, [6, 4, 6, 4]), (5, [4, 6, 4, 6])])
    def test_seasonal_continues_sample(self, n_obs, expected):
        params = _params("ANA", alpha=0.3, gamma=0.1, level=5.0, season=[1, -1])
        forecasts = ets_forecaster(
            params.spec, params, np.array([5.0, 1.0, -1.0]), 4, n_obs
        )
        np.testing.assert_allclose(forecasts, expected)


class TestSimulatePaths:
    """Tests for simulated sample paths."""

    def _params(self):
        return _params(
            "AAdA",
            alpha=0.3,
            beta=0.1,
            gamma=0.2,
            phi=0.9,
            level=10,
            trend=1,
            season=[1, -1, 2, -2],
        )

    def test_shape(self):
        params = self._params()
        state = params.initial_state()
        paths = simulate_paths(
            params.spec, params, state, 5, 12, 1.0, 50, np.random.default_rng(1)
        )
        assert paths.shape == (5, 50)

    def test_zero_variance_matches_point_forecast(self):
        params = self._params()
        state = params.initial_state()
        paths = simulate_paths(
            params.spec, params, state, 6, 12, 0.0, 3, np.random.default_rng(1)
        )
        forecasts = ets_forecaster(params.spec, params, state, 6, 12)
        for column in paths.T:
            np.testing.assert_allclose(column, forecasts)

    def test_reproducible(self):
        params = self._params()
        state = params.initial_state()
        first = simulate_paths(
            params.spec, params, state, 4, 12, 1.0, 20, np.random.default_rng(7)
        )
        second = simulate_paths(
            params.spec, params, state, 4, 12, 1.0, 20, np.random.default_rng(7)
        )
        np.testing.assert_array_equal(first, second)

    def test_broken_paths_are_nan(self):
        params = _params(
            "MMdN", alpha=0.9, beta=0.8, phi=0.9, level=1.0, trend=1.0
        )
        state = np.array([1.0, 1.0])
        paths = simulate_paths(
            params.spec, params, state, 3, 10, 5.0, 500, np.random.default_rng(0)
        )
        assert np.isnan(paths).any()
        assert not np.isinf(paths).any()
