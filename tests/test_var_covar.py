"""Tests for the analytic forecast variances of the additive models."""

import numpy as np
import pytest

from autoets import ModelSpec, Parameters
from autoets.core.utils.var_covar import var_anal

SIGMA2 = 2.5


def _direct_variance(params, h, s2):
    """Sum the squared error-correction coefficients term by term."""
    m = params.seasonal_period
    beta = params.beta or 0.0
    gamma = params.gamma or 0.0
    variances = []
    for step in range(1, h + 1):
        total = 1.0
        for j in range(1, step):
            if params.phi is None:
                trend_sum = j
            else:
                trend_sum = sum(params.phi**i for i in range(1, j + 1))
            seasonal_jump = gamma if params.spec.is_seasonal and j % m == 0 else 0.0
            total += (params.alpha + beta * trend_sum + seasonal_jump) ** 2
        variances.append(s2 * total)
    return np.array(variances)


def _make(name):
    spec = ModelSpec.from_string(name)
    kwargs = {"alpha": 0.3, "level": 10.0}
    if spec.is_trendy:
        kwargs.update(beta=0.1, trend=1.0)
    if spec.is_seasonal:
        kwargs.update(gamma=0.2, season=[1.0, -1.0, 2.0, -2.0])
    if spec.damped:
        kwargs.update(phi=0.9)
    return Parameters.create(spec, **kwargs)


@pytest.mark.parametrize("name", ["ANN", "AAN", "AAdN", "ANA", "AAA", "AAdA"])
class TestClosedFormVariance:
    """The closed forms agree with the defining sum for every family."""

    def test_matches_direct_sum(self, name):
        params = _make(name)
        np.testing.assert_allclose(
            var_anal(params.spec, params, 14, SIGMA2),
            _direct_variance(params, 14, SIGMA2),
            rtol=1e-10,
        )

    def test_first_step_is_residual_variance(self, name):
        params = _make(name)
        assert var_anal(params.spec, params, 1, SIGMA2)[0] == pytest.approx(SIGMA2)

    def test_non_decreasing(self, name):
        params = _make(name)
        variances = var_anal(params.spec, params, 30, SIGMA2)
        assert np.all(np.diff(variances) >= 0)


def test_multiplicative_models_rejected():
    spec = ModelSpec("M", "N", "N")
    params = Parameters.create(spec, alpha=0.3, level=10.0)
    with pytest.raises(ValueError, match="No analytic variance"):
        var_anal(spec, params, 5, 1.0)
