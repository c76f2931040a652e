"""
Tests for parameter initialisation and maximum likelihood estimation.

Tests cover:
- Initial parameter vector and bounds
- Mapping of the optimiser vector back to parameters
- Cost function penalties
- Estimation of single models and failure modes
"""

import numpy as np
import pytest

from autoets import (
    InvalidParametersError,
    ModelSpec,
    NotConvergedError,
)
from autoets.core.creator.filler import filler
from autoets.core.creator.initialiser import initialiser
from autoets.core.creator.initialization import initialize_states
from autoets.core.estimator.cost_function import CF, PENALTY
from autoets.core.estimator.estimator import estimator
from autoets.core.estimator.optimization import _setup_maxeval
from autoets.core.parameters import ALPHA_BOUNDS, PHI_BOUNDS


class TestInitialiser:
    """Tests for the heuristic starting point."""

    def test_layout(self, quarterly_series):
        spec = ModelSpec("A", "A", "A", True)
        b_values = initialiser(spec, quarterly_series, 4)
        assert b_values["names"] == [
            "alpha",
            "beta",
            "gamma",
            "phi",
            "level",
            "trend",
            "seasonal_0",
            "seasonal_1",
            "seasonal_2",
        ]
        assert len(b_values["B"]) == len(b_values["Bl"]) == len(b_values["Bu"]) == 9

    def test_start_inside_bounds(self, multiplicative_series):
        spec = ModelSpec("M", "M", "M", True)
        b_values = initialiser(spec, multiplicative_series, 4)
        assert np.all(b_values["B"] >= b_values["Bl"])
        assert np.all(b_values["B"] <= b_values["Bu"])
        # Smoothing starting values satisfy the usual constraints
        alpha, beta, gamma = b_values["B"][:3]
        assert beta < alpha
        assert gamma < 1 - alpha

    def test_bounds(self, simple_series):
        spec = ModelSpec("A", "A", "N", True)
        b_values = initialiser(spec, simple_series)
        assert b_values["Bl"][0] == ALPHA_BOUNDS[0]
        assert b_values["Bl"][2] == PHI_BOUNDS[0]
        assert b_values["Bu"][2] == PHI_BOUNDS[1]
        assert b_values["Bl"][3] == -np.inf

    def test_initial_states_follow_data(self, quarterly_series):
        states = initialize_states(ModelSpec("A", "A", "A"), quarterly_series, 4)
        assert states["season"].shape == (4,)
        assert abs(np.sum(states["season"])) < 1e-8
        assert 90 < states["level"] < 115
        assert 0 < states["trend"] < 2

    def test_multiplicative_initial_seasonals(self, multiplicative_series):
        states = initialize_states(ModelSpec("M", "N", "M"), multiplicative_series, 4)
        assert np.all(states["season"] > 0)
        assert np.mean(states["season"]) == pytest.approx(1.0)

    def test_trend_starts_share_origin(self, simple_series):
        additive = initialize_states(ModelSpec("A", "A", "N"), simple_series)
        multiplicative = initialize_states(ModelSpec("M", "M", "N"), simple_series)
        assert multiplicative["level"] == pytest.approx(additive["level"])
        # Both give the same first one-step prediction
        assert multiplicative["level"] * multiplicative["trend"] == pytest.approx(
            additive["level"] + additive["trend"]
        )


class TestFiller:
    """Tests for mapping B back to parameters."""

    def test_additive_seasonal_normalisation(self):
        spec = ModelSpec("A", "N", "A")
        params = filler([0.3, 0.1, 10.0, 1.0, 2.0, -1.0], spec, 4)
        np.testing.assert_allclose(params.season, [1.0, 2.0, -1.0, -2.0])

    def test_multiplicative_seasonal_normalisation(self):
        spec = ModelSpec("M", "N", "M")
        params = filler([0.3, 0.1, 10.0, 1.1, 0.9, 1.2], spec, 4)
        np.testing.assert_allclose(params.season, [1.1, 0.9, 1.2, 0.8])

    def test_invalid_vector(self):
        with pytest.raises(InvalidParametersError):
            filler([0.3, 0.5, 10.0, 0.0], ModelSpec("A", "A", "N"), 1)


class TestCostFunction:
    """Tests for the optimiser objective."""

    def test_negative_loglik(self, simple_series):
        spec = ModelSpec("A", "N", "N")
        value = CF([0.3, 10.0], spec, simple_series)
        assert np.isfinite(value)
        assert value < PENALTY

    def test_penalty_outside_region(self, simple_series):
        spec = ModelSpec("A", "N", "N")
        assert CF([1.5, 10.0], spec, simple_series) == PENALTY

    def test_penalty_on_broken_recursion(self):
        spec = ModelSpec("A", "M", "N")
        y = np.array([-100.0, 1.0, 1.0, 1.0])
        assert CF([0.5, 0.1, 1.0, 0.5], spec, y) == PENALTY


class TestEstimator:
    """Tests for single-model estimation."""

    def test_estimate_ann(self, level_series):
        model = estimator(ModelSpec("A", "N", "N"), level_series)
        assert ALPHA_BOUNDS[0] <= model.params.alpha <= ALPHA_BOUNDS[1]
        assert np.isfinite(model.loglik)
        assert model.n_params == 3
        assert 45 < model.params.level < 55

    def test_better_than_start(self, simple_series):
        spec = ModelSpec("A", "A", "N")
        start = initialiser(spec, simple_series)["B"]
        model = estimator(spec, simple_series)
        assert -model.loglik <= CF(start, spec, simple_series) + 1e-8

    def test_replay_reproduces_statistics(self, quarterly_series):
        model = estimator(ModelSpec("A", "A", "A"), quarterly_series, 4, maxeval=20000)
        replay = model.replay()
        assert replay.loglik == pytest.approx(model.loglik, rel=1e-12)
        assert replay.sse == pytest.approx(model.sse, rel=1e-12)

    def test_seasonal_estimate(self, quarterly_series):
        model = estimator(ModelSpec("A", "A", "A"), quarterly_series, 4, maxeval=20000)
        assert model.params.season.shape == (4,)
        assert abs(np.sum(model.params.season)) < 1e-8
        assert model.params.beta < model.params.alpha
        assert model.params.gamma < 1 - model.params.alpha

    def test_fitted_model_is_read_only(self, level_series):
        model = estimator(ModelSpec("A", "N", "N"), level_series)
        with pytest.raises(ValueError):
            model.fitted[0] = 0.0
        with pytest.raises(AttributeError):
            model.sse = 0.0

    def test_budget_exhausted(self, simple_series):
        with pytest.raises(NotConvergedError, match="maximum number of evaluations"):
            estimator(ModelSpec("A", "A", "N"), simple_series, maxeval=5)

    def test_exact_fit_skips_optimisation(self, flat_series):
        model = estimator(ModelSpec("A", "N", "N"), flat_series)
        assert model.sse == 0
        assert model.params.level == 5.0

    def test_ic_accessor(self, level_series):
        model = estimator(ModelSpec("A", "N", "N"), level_series)
        assert model.ic("AICc") == model.aicc
        with pytest.raises(ValueError):
            model.ic("HQ")

    def test_estimate_is_scale_equivariant(self, level_series):
        spec = ModelSpec("A", "N", "N")
        model = estimator(spec, level_series)
        scaled = estimator(spec, level_series * 2.0**40)
        assert scaled.params.alpha == pytest.approx(model.params.alpha, rel=1e-12)
        assert scaled.params.level == pytest.approx(
            model.params.level * 2.0**40, rel=1e-12
        )

    def test_huge_values(self):
        y = np.array([1e200, -1e200, 1e200, 5e199])
        model = estimator(ModelSpec("A", "N", "N"), y)
        assert np.isfinite(model.loglik)
        assert np.isfinite(model.aicc)
        assert np.all(np.isfinite(model.fitted))


class TestOptimisationBudget:
    """Tests for the default evaluation budget."""

    def test_budget_grows_with_parameters(self):
        assert _setup_maxeval(np.zeros(3)) == 1000
        assert _setup_maxeval(np.zeros(16)) == 40 * 16**2

    def test_explicit_budget_is_kept(self):
        assert _setup_maxeval(np.zeros(16), maxeval=50) == 50
