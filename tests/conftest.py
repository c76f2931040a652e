"""
Pytest configuration and shared fixtures for autoets tests.
"""

import numpy as np
import pandas as pd
import pytest


@pytest.fixture
def simple_series():
    """Simple linear time series with noise."""
    np.random.seed(42)
    n = 50
    t = np.arange(n)
    y = 10 + 0.5 * t + np.random.randn(n) * 2
    return y


@pytest.fixture
def level_series():
    """Noisy series around a constant level."""
    np.random.seed(42)
    return 50 + np.random.randn(60) * 3


@pytest.fixture
def quarterly_series():
    """Quarterly series with trend and additive seasonality (10 years)."""
    np.random.seed(42)
    n = 40
    t = np.arange(n)
    trend = 100 + 0.8 * t
    seasonal = np.tile([8.0, -3.0, -10.0, 5.0], n // 4)
    noise = np.random.randn(n) * 1.5
    return trend + seasonal + noise


@pytest.fixture
def multiplicative_series():
    """Quarterly series with multiplicative seasonality."""
    np.random.seed(42)
    n = 48
    t = np.arange(n)
    trend = 100 + 1.5 * t
    seasonal = np.tile([1.15, 0.95, 0.8, 1.1], n // 4)
    noise = 1 + np.random.randn(n) * 0.02
    return trend * seasonal * noise


@pytest.fixture
def short_series():
    """Short series from the end-to-end scenario (period 4, no visible pattern)."""
    return np.array([10.0, 12.0, 13.0, 12.0, 14.0, 15.0, 14.0, 16.0])


@pytest.fixture
def flat_series():
    """Perfectly constant series."""
    return np.array([5.0, 5.0, 5.0, 5.0, 5.0, 5.0])


@pytest.fixture
def monthly_series():
    """Noisy level series with a monthly DatetimeIndex."""
    np.random.seed(42)
    index = pd.date_range("2020-01-01", periods=40, freq="MS")
    return pd.Series(20 + np.random.randn(40), index=index)


@pytest.fixture
def multi_seasonal_series():
    """Series with two seasonal periods (4 and 12) around zero."""
    np.random.seed(42)
    n = 120
    t = np.arange(n)
    short = 3 * np.sin(2 * np.pi * t / 4)
    long = 6 * np.sin(2 * np.pi * t / 12)
    return 0.05 * t + short + long + np.random.randn(n) * 0.5


@pytest.fixture
def airpassengers():
    """Classic AirPassengers dataset (monthly airline passengers 1949-1960)."""
    return np.array([
        112, 118, 132, 129, 121, 135, 148, 148, 136, 119, 104, 118,
        115, 126, 141, 135, 125, 149, 170, 170, 158, 133, 114, 140,
        145, 150, 178, 163, 172, 178, 199, 199, 184, 162, 146, 166,
        171, 180, 193, 181, 183, 218, 230, 242, 209, 191, 172, 194,
        196, 196, 236, 235, 229, 243, 264, 272, 237, 211, 180, 201,
        204, 188, 235, 227, 234, 264, 302, 293, 259, 229, 203, 229,
        242, 233, 267, 269, 270, 315, 364, 347, 312, 274, 237, 278,
        284, 277, 317, 313, 318, 374, 413, 405, 355, 306, 271, 306,
        315, 301, 356, 348, 355, 422, 465, 467, 404, 347, 305, 336,
        340, 318, 362, 348, 363, 435, 491, 505, 404, 359, 310, 337,
        360, 342, 406, 396, 420, 472, 548, 559, 463, 407, 362, 405,
        417, 391, 419, 461, 472, 535, 622, 606, 508, 461, 390, 432
    ], dtype=float)
