import numpy as np
import pandas as pd

from autoets.core.checker.data_checks import check_horizon
from autoets.core.fitter import ets_forecaster

from .intervals import (
    ensure_level_format,
    generate_prediction_interval,
    generate_simulation_interval,
)
from .result import ForecastResult

INTERVAL_TYPES = ("prediction", "approximate", "simulated", "none")


def _prepare_forecast_index(index, h):
    """
    Index for the forecast periods.

    A ``DatetimeIndex`` with a known or inferable frequency is continued, a
    ``RangeIndex`` is extended. Anything else gives the steps ``1..h``.
    """
    if isinstance(index, pd.DatetimeIndex) and len(index) >= 3:
        freq = index.freq or pd.infer_freq(index)
        if freq is not None:
            return pd.date_range(start=index[-1], periods=h + 1, freq=freq)[1:]
    if isinstance(index, pd.RangeIndex):
        return pd.RangeIndex(
            start=index.stop, stop=index.stop + h * index.step, step=index.step
        )
    return pd.RangeIndex(start=1, stop=h + 1)


def _resolve_interval(interval, spec):
    if interval not in INTERVAL_TYPES:
        raise ValueError(
            f"Invalid interval type: {interval!r}. Must be one of {list(INTERVAL_TYPES)}"
        )
    if interval == "prediction":
        return "approximate" if spec.is_additive else "simulated"
    if interval == "approximate" and not spec.is_additive:
        raise ValueError(
            f"Approximate intervals need a purely additive model, got {spec}; "
            "use interval='simulated'"
        )
    return interval


def forecaster(
    model, h, level=(0.8, 0.95), interval="prediction", nsim=1000, seed=None
):
    """
    Point forecasts and prediction intervals from a fitted model.

    Point forecasts iterate the model forward with zero residuals: a damped
    trend contributes ``phi + ... + phi^j`` at step ``j`` and the seasonal
    indices keep cycling past the end of the sample.

    **Interval types**:

    - ``"approximate"``: normal intervals around the point forecast with the
      analytic h-step variance (purely additive models only).
    - ``"simulated"``: empirical quantiles of ``nsim`` simulated paths with
      normal residuals.
    - ``"prediction"``: ``"approximate"`` for purely additive models,
      ``"simulated"`` otherwise.
    - ``"none"``: point forecasts only.

    Parameters
    ----------
    model : FittedModel
        Fitted model.
    h : int
        Forecast horizon (>= 1).
    level : float or sequence of float, default=(0.8, 0.95)
        Confidence levels in (0, 1); percentages in (1, 100) are accepted.
    interval : str, default="prediction"
        Interval type, see above.
    nsim : int, default=1000
        Number of simulated paths for simulated intervals.
    seed : int, optional
        Random seed for simulated intervals. A fixed default seed is used when
        None, so repeated calls agree.

    Returns
    -------
    ForecastResult
        Point forecasts and bounds. Lower and upper bound columns are named
        after their quantiles, e.g. ``0.025`` and ``0.975`` for 95%.

    Raises
    ------
    InvalidHorizonError
        If ``h`` is not a positive integer.
    InvalidLevelError
        If a confidence level lies outside (0, 1).
    ValueError
        If ``interval`` is unknown, or ``"approximate"`` is requested for a
        model with a multiplicative component.
    """
    # Validate everything before computing
    h = check_horizon(h)
    levels, level_low, level_up = ensure_level_format(level)
    interval = _resolve_interval(interval, model.spec)

    index = _prepare_forecast_index(model.index, h)
    predictions = ets_forecaster(
        model.spec, model.params, model.final_state, h, model.nobs
    )
    mean = pd.Series(predictions, index=index, name="mean")

    if interval == "none":
        return ForecastResult(
            mean, None, None, tuple(levels.tolist()), interval, str(model.spec)
        )

    if interval == "approximate":
        y_lower, y_upper = generate_prediction_interval(
            predictions, model, level_low, level_up
        )
    else:
        y_lower, y_upper = generate_simulation_interval(
            predictions, model, level_low, level_up, nsim=nsim, seed=seed
        )

    lower = pd.DataFrame(np.asarray(y_lower), index=index, columns=level_low.tolist())
    upper = pd.DataFrame(np.asarray(y_upper), index=index, columns=level_up.tolist())
    return ForecastResult(
        mean, lower, upper, tuple(levels.tolist()), interval, str(model.spec)
    )
