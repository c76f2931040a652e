import time

import numpy as np
import pandas as pd

from autoets.core.checker.data_checks import check_horizon, check_series
from autoets.core.ets import AutoETS
from autoets.core.forecaster.result import ForecastResult

from .decomposition import mstl_decompose


class MSTLModel:
    """
    Forecasting with multiple seasonalities.

    The series is decomposed with :func:`mstl_decompose`, a non-seasonal model
    is fitted to the deseasonalised series (trend plus residuals) and the last
    cycle of every seasonal component is repeated over the horizon and added
    back to the forecasts and their bounds.

    Parameters
    ----------
    periods : int or sequence of int
        Seasonal periods, e.g. ``[24, 168]`` for hourly data.
    trend_model : object, optional
        Model for the deseasonalised series with ``fit(y)`` and
        ``predict(h, level=...)`` returning a ``ForecastResult``. Defaults to
        ``AutoETS(season_length=1)``.
    stl_kwargs : dict, optional
        Passed to :func:`mstl_decompose`.

    Examples
    --------
    >>> model = MSTLModel(periods=[24, 168]).fit(y)
    >>> fc = model.predict(h=48, level=0.9)
    """

    def __init__(self, periods, trend_model=None, stl_kwargs=None):
        self.periods = periods
        self.trend_model = trend_model
        self.stl_kwargs = stl_kwargs

    def fit(self, y):
        """
        Decompose ``y`` and fit the trend model to the deseasonalised series.

        Returns
        -------
        self : MSTLModel
        """
        start_time = time.time()
        observations = check_series(y)
        self.decomposition_ = mstl_decompose(
            observations["y"], self.periods, stl_kwargs=self.stl_kwargs
        )

        deseasonalized = self.decomposition_.deseasonalized
        if observations["index"] is not None:
            deseasonalized = pd.Series(deseasonalized, index=observations["index"])

        trend_model = self.trend_model
        if trend_model is None:
            trend_model = AutoETS(season_length=1)
        self.trend_model_ = trend_model.fit(deseasonalized)
        self.time_elapsed_ = time.time() - start_time
        return self

    def _check_is_fitted(self):
        if getattr(self, "trend_model_", None) is None:
            raise ValueError("Model has not been fitted. Call fit() first.")

    def _seasonal_forecast(self, h):
        """Sum over periods of the last seasonal cycle, repeated for ``h`` steps."""
        total = np.zeros(h)
        for period, component in self.decomposition_.seasonal.items():
            total += np.resize(component[-period:], h)
        return total

    @property
    def seasonal(self):
        self._check_is_fitted()
        return sum(self.decomposition_.seasonal.values())

    @property
    def fitted(self):
        """Fitted values of the trend model plus every seasonal component."""
        self._check_is_fitted()
        return np.asarray(self.trend_model_.fitted) + self.seasonal

    @property
    def residuals(self):
        self._check_is_fitted()
        return np.asarray(self.trend_model_.residuals)

    def predict(self, h, level=0.95):
        """
        Forecast ``h`` steps ahead.

        Parameters
        ----------
        h : int
            Forecast horizon.
        level : float or list of float, default=0.95
            Confidence level(s).

        Returns
        -------
        ForecastResult
            Seasonal forecasts with the same layout as the trend model's.
        """
        self._check_is_fitted()
        h = check_horizon(h)
        trend_forecast = self.trend_model_.predict(h, level=level)
        seasonal = pd.Series(
            self._seasonal_forecast(h), index=trend_forecast.mean.index
        )

        mean = (trend_forecast.mean + seasonal).rename("mean")
        lower = upper = None
        if trend_forecast.lower is not None:
            lower = trend_forecast.lower.add(seasonal, axis=0)
            upper = trend_forecast.upper.add(seasonal, axis=0)
        return ForecastResult(
            mean,
            lower,
            upper,
            trend_forecast.level,
            trend_forecast.interval,
            f"MSTL({trend_forecast.model})",
        )

    def __repr__(self):
        if getattr(self, "trend_model_", None) is not None:
            return f"MSTLModel(periods={list(self.decomposition_.periods)}, fitted=True)"
        return f"MSTLModel(periods={self.periods!r}, fitted=False)"
