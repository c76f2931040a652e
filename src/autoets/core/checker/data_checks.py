import numbers

import numpy as np
import pandas as pd

from autoets.core.errors import (
    InputError,
    InvalidHorizonError,
    InvalidLevelError,
    InvalidPeriodError,
    NonFiniteInputError,
    SeriesTooShortError,
)

from ._utils import _warn


def _is_integer(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def check_series(series):
    """
    Validate the observations and copy them into a read-only array.

    Parameters
    ----------
    series : array-like or pandas.Series
        Univariate time series. A ``pandas.Series`` keeps its index so that
        forecasts can continue it.

    Returns
    -------
    dict
        Dictionary with:

        - **'y'** (numpy.ndarray): read-only float copy of the observations
        - **'index'** (pandas.Index or None): index of a ``pandas.Series`` input
        - **'obs_in_sample'** (int): number of observations
        - **'positive'** (bool): whether every observation is strictly positive

    Raises
    ------
    InputError
        If the data is not one-dimensional or not numeric.
    SeriesTooShortError
        If fewer than two observations are given.
    NonFiniteInputError
        If any observation is NaN or infinite.
    """
    index = None
    if isinstance(series, pd.DataFrame):
        if series.shape[1] != 1:
            raise InputError(
                f"Only univariate series are supported, got {series.shape[1]} columns"
            )
        series = series.iloc[:, 0]
    if isinstance(series, pd.Series):
        index = series.index
        values = series.to_numpy()
    else:
        values = series

    try:
        y = np.array(values, dtype=float)
    except (TypeError, ValueError) as err:
        raise InputError(f"The series must be numeric: {err}") from err

    if y.ndim != 1:
        y = np.squeeze(y)
        if y.ndim != 1:
            raise InputError(
                f"Only univariate series are supported, got shape {np.shape(values)}"
            )

    obs_in_sample = y.shape[0]
    if obs_in_sample < 2:
        raise SeriesTooShortError(
            f"At least 2 observations are needed, got {obs_in_sample}"
        )
    if not np.all(np.isfinite(y)):
        n_bad = int(np.sum(~np.isfinite(y)))
        raise NonFiniteInputError(
            f"The series contains {n_bad} non-finite value(s) (NaN or infinity)"
        )

    y.flags.writeable = False
    return {
        "y": y,
        "index": index,
        "obs_in_sample": obs_in_sample,
        "positive": bool(np.all(y > 0)),
    }


def check_seasonal_period(seasonal_period, obs_in_sample, silent=False):
    """
    Validate the seasonal period against the sample size.

    Parameters
    ----------
    seasonal_period : int
        Seasonal period, 1 meaning no seasonality.
    obs_in_sample : int
        Number of observations.
    silent : bool, optional
        Whether to suppress warnings

    Returns
    -------
    int
        The seasonal period.

    Raises
    ------
    InvalidPeriodError
        If the period is not a positive integer.
    SeriesTooShortError
        If the series does not cover one full seasonal cycle.
    """
    if not _is_integer(seasonal_period) or seasonal_period < 1:
        raise InvalidPeriodError(
            f"The seasonal period must be a positive integer, got {seasonal_period!r}"
        )
    seasonal_period = int(seasonal_period)

    if seasonal_period > 1 and obs_in_sample < seasonal_period:
        raise SeriesTooShortError(
            f"The series has {obs_in_sample} observations, fewer than one "
            f"seasonal period of {seasonal_period}"
        )
    if seasonal_period > 1 and obs_in_sample < 2 * seasonal_period:
        _warn(
            f"The series has {obs_in_sample} observations, fewer than two seasonal "
            f"periods ({2 * seasonal_period}). Seasonal models are not considered.",
            silent,
        )
    return seasonal_period


def check_horizon(h):
    """
    Validate the forecast horizon.

    Raises
    ------
    InvalidHorizonError
        If ``h`` is not an integer of at least 1.
    """
    if not _is_integer(h) or h < 1:
        raise InvalidHorizonError(f"The horizon must be a positive integer, got {h!r}")
    return int(h)


def check_levels(level):
    """
    Validate confidence levels.

    Values in (1, 100) are read as percentages and divided by 100.

    Parameters
    ----------
    level : float or iterable of float
        Confidence level(s), e.g. 0.95 or [80, 95].

    Returns
    -------
    tuple
        Sorted, de-duplicated levels in (0, 1).

    Raises
    ------
    InvalidLevelError
        If a level is not a number or lies outside (0, 1) after conversion.

    Examples
    --------
    >>> check_levels([95, 0.8])
    (0.8, 0.95)
    """
    if isinstance(level, numbers.Real):
        level = [level]
    try:
        levels = [float(lv) for lv in level]
    except (TypeError, ValueError) as err:
        raise InvalidLevelError(f"Invalid confidence level(s): {level!r}") from err
    if len(levels) == 0:
        raise InvalidLevelError("At least one confidence level is needed")

    checked = []
    for lv in levels:
        if 1 < lv < 100:
            lv = round(lv / 100, 5)
        if not (0 < lv < 1):
            raise InvalidLevelError(
                f"Confidence levels must lie in (0, 1), got {lv!r}"
            )
        checked.append(lv)
    return tuple(sorted(set(checked)))
