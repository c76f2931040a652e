"""Tests for information criteria."""

import numpy as np
import pytest

from autoets.core.utils.ic import AIC, AICc, BIC, calculate_ic_weights, ic_function


class TestInformationCriteria:
    """Tests for AIC, AICc and BIC."""

    def test_aic(self):
        assert AIC(-100.0, 50, 3) == pytest.approx(206.0)

    def test_aicc(self):
        assert AICc(-100.0, 50, 3) == pytest.approx(206.0 + 24 / 46)

    def test_aicc_falls_back_to_aic(self):
        # nobs - df - 1 <= 0
        assert AICc(-10.0, 5, 4) == AIC(-10.0, 5, 4)
        assert AICc(-10.0, 5, 6) == AIC(-10.0, 5, 6)

    def test_bic(self):
        assert BIC(-100.0, 50, 3) == pytest.approx(200.0 + np.log(50) * 3)

    def test_ic_function(self):
        assert ic_function("AICc", -100.0, 50, 3) == AICc(-100.0, 50, 3)
        assert ic_function("BIC", -100.0, 50, 3) == BIC(-100.0, 50, 3)
        with pytest.raises(ValueError, match="Invalid information criterion"):
            ic_function("HQ", -100.0, 50, 3)


class TestICWeights:
    """Tests for Akaike weights."""

    def test_weights_sum_to_one(self):
        weights = calculate_ic_weights({"ANN": 100.5, "AAN": 98.2, "AAA": 99.1})
        assert sum(weights.values()) == pytest.approx(1.0)
        assert max(weights, key=weights.get) == "AAN"

    def test_tiny_weights_zeroed(self):
        weights = calculate_ic_weights({"ANN": 0.0, "AAN": 100.0})
        assert weights == {"ANN": 1.0, "AAN": 0.0}

    def test_empty(self):
        assert calculate_ic_weights({}) == {}
