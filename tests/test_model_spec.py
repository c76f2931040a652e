"""Tests for ModelSpec and Parameters."""

import numpy as np
import pytest

from autoets import InvalidModelError, InvalidParametersError, ModelSpec, Parameters


class TestModelSpec:
    """Tests for the model specification."""

    def test_from_string(self):
        spec = ModelSpec.from_string("AAdN")
        assert spec == ModelSpec("A", "A", "N", True)
        assert spec.name == "AAdN"
        assert str(spec) == "ETS(AAdN)"

    def test_from_string_undamped(self):
        spec = ModelSpec.from_string("MNM")
        assert (spec.error, spec.trend, spec.season, spec.damped) == (
            "M",
            "N",
            "M",
            False,
        )

    @pytest.mark.parametrize("name", ["ZZZ", "AA", "AAxN", "NNN", "ANdN", 3])
    def test_invalid_names(self, name):
        with pytest.raises(InvalidModelError):
            ModelSpec.from_string(name)

    def test_damped_requires_trend(self):
        with pytest.raises(InvalidModelError):
            ModelSpec("A", "N", "N", True)

    def test_counts(self):
        spec = ModelSpec("A", "A", "A", True)
        assert spec.n_smoothing == 4
        assert spec.n_initial_states(4) == 5
        assert ModelSpec("A").n_smoothing == 1
        assert ModelSpec("A").n_initial_states(12) == 1

    def test_is_additive(self):
        assert ModelSpec("A", "A", "A").is_additive
        assert not ModelSpec("A", "M", "N").is_additive
        assert not ModelSpec("M", "N", "N").is_additive

    def test_sort_key_orders_simpler_first(self):
        names = ["MNN", "AAdN", "ANA", "AAN", "ANN"]
        ordered = sorted((ModelSpec.from_string(n) for n in names), key=lambda s: s.sort_key)
        assert [s.name for s in ordered] == ["ANN", "ANA", "AAN", "AAdN", "MNN"]

    def test_hashable(self):
        assert len({ModelSpec("A"), ModelSpec("A", "N", "N", False)}) == 1


class TestParameters:
    """Tests for the validated parameter constructor."""

    def test_create_full(self):
        spec = ModelSpec("A", "A", "A", True)
        params = Parameters.create(
            spec,
            alpha=0.3,
            level=10,
            beta=0.1,
            gamma=0.2,
            phi=0.9,
            trend=1,
            season=[1, -1, 2, -2],
        )
        assert params.seasonal_period == 4
        assert params.phi_value == 0.9
        np.testing.assert_array_equal(
            params.initial_state(), [10, 1, 1, -1, 2, -2]
        )

    def test_season_is_read_only(self):
        spec = ModelSpec("A", "N", "A")
        params = Parameters.create(spec, alpha=0.3, level=1, gamma=0.1, season=[1, -1])
        with pytest.raises(ValueError):
            params.season[0] = 5

    @pytest.mark.parametrize("alpha", [0.0, 1.0, -0.5, 1.5, np.nan])
    def test_alpha_out_of_bounds(self, alpha):
        with pytest.raises(InvalidParametersError):
            Parameters.create(ModelSpec("A"), alpha=alpha, level=1)

    def test_beta_must_be_below_alpha(self):
        with pytest.raises(InvalidParametersError):
            Parameters.create(
                ModelSpec("A", "A"), alpha=0.2, level=1, beta=0.3, trend=0
            )

    def test_gamma_must_be_below_one_minus_alpha(self):
        with pytest.raises(InvalidParametersError):
            Parameters.create(
                ModelSpec("A", "N", "A"),
                alpha=0.8,
                level=1,
                gamma=0.3,
                season=[1, -1],
            )

    @pytest.mark.parametrize("phi", [0.5, 0.99, 1.0])
    def test_phi_out_of_bounds(self, phi):
        with pytest.raises(InvalidParametersError):
            Parameters.create(
                ModelSpec("A", "A", "N", True),
                alpha=0.3,
                level=1,
                beta=0.1,
                trend=0,
                phi=phi,
            )

    def test_missing_components(self):
        with pytest.raises(InvalidParametersError):
            Parameters.create(ModelSpec("A", "A"), alpha=0.3, level=1)
        with pytest.raises(InvalidParametersError):
            Parameters.create(ModelSpec("A"), alpha=0.3, level=1, beta=0.1, trend=1)

    def test_multiplicative_states_positive(self):
        with pytest.raises(InvalidParametersError):
            Parameters.create(ModelSpec("M"), alpha=0.3, level=-1)
        with pytest.raises(InvalidParametersError):
            Parameters.create(
                ModelSpec("A", "M"), alpha=0.3, level=1, beta=0.1, trend=-0.5
            )
        with pytest.raises(InvalidParametersError):
            Parameters.create(
                ModelSpec("A", "N", "M"),
                alpha=0.3,
                level=1,
                gamma=0.1,
                season=[1.5, -0.5],
            )

    def test_dict_round_trip(self):
        spec = ModelSpec("M", "A", "M", True)
        params = Parameters.create(
            spec,
            alpha=0.4,
            level=100,
            beta=0.05,
            gamma=0.1,
            phi=0.95,
            trend=2,
            season=[1.1, 0.9, 1.05, 0.95],
        )
        data = params.to_dict()
        assert data["initial_seasonal"] == [1.1, 0.9, 1.05, 0.95]
        restored = Parameters.from_dict(spec, data)
        assert restored.to_dict() == data
