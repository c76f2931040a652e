from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np
from statsmodels.tsa.seasonal import STL

from autoets.core.checker._utils import _warn
from autoets.core.checker.data_checks import check_series
from autoets.core.errors import InvalidPeriodError


@dataclass(frozen=True)
class MSTLDecomposition:
    """
    Result of :func:`mstl_decompose`.

    Attributes
    ----------
    trend : np.ndarray
        Trend component.
    seasonal : dict of int to np.ndarray
        Seasonal component per period, in ascending period order.
    residuals : np.ndarray
        What is left after removing the trend and every seasonal component.
    robust_weights : np.ndarray
        Robustness weights of the final STL pass (all ones unless
        ``robust=True`` is passed through ``stl_kwargs``).
    index : pandas.Index, optional
        Index of the decomposed series, when it had one.
    """

    trend: np.ndarray
    seasonal: Dict[int, np.ndarray]
    residuals: np.ndarray
    robust_weights: np.ndarray
    index: Optional[object] = None

    @property
    def periods(self):
        return tuple(self.seasonal)

    @property
    def deseasonalized(self):
        """Trend plus residuals."""
        return self.trend + self.residuals


def _check_periods(periods, obs_in_sample, silent=False):
    if np.isscalar(periods):
        periods = [periods]
    periods = list(periods)
    if len(periods) == 0:
        raise InvalidPeriodError("At least one seasonal period is required")
    for period in periods:
        if isinstance(period, bool) or int(period) != period or period <= 1:
            raise InvalidPeriodError(
                f"Seasonal periods must be integers greater than 1, got {period!r}"
            )
    periods = sorted({int(period) for period in periods})

    kept = [period for period in periods if period <= obs_in_sample / 2]
    dropped = [period for period in periods if period > obs_in_sample / 2]
    if dropped:
        _warn(
            f"Seasonal periods {dropped} exceed half of the sample size "
            f"({obs_in_sample}) and are dropped.",
            silent,
        )
    if not kept:
        raise InvalidPeriodError(
            f"No seasonal period fits twice into the {obs_in_sample} observations"
        )
    return kept


def mstl_decompose(y, periods, stl_kwargs=None, silent=False):
    """
    Multiple seasonal-trend decomposition using LOESS.

    Each seasonal component is extracted with an STL pass on the series with
    the other seasonal components removed. With several periods the whole
    cycle runs twice, so that the shorter periods are re-estimated after the
    longer ones are known.

    .. math::

        y_t = T_t + \\sum_i S^{(i)}_t + R_t

    Parameters
    ----------
    y : array-like or pandas.Series
        Time series of finite values.
    periods : int or sequence of int
        Seasonal periods, each greater than 1. Sorted ascending internally.
    stl_kwargs : dict, optional
        Extra arguments for ``statsmodels.tsa.seasonal.STL`` (e.g.
        ``robust=True``, ``trend=...``). ``period`` and ``seasonal`` are set
        per component: the seasonal window of the i-th period is
        ``7 + 4 * i`` for i = 1, 2, ...
    silent : bool, default=False
        Whether to suppress the warning about dropped periods.

    Returns
    -------
    MSTLDecomposition
        Trend, seasonal components, residuals and robustness weights.

    Raises
    ------
    InvalidPeriodError
        If ``periods`` is empty, holds a value not greater than 1, or no
        period fits twice into the series.
    """
    observations = check_series(y)
    y = np.asarray(observations["y"], dtype=float)
    obs_in_sample = observations["obs_in_sample"]
    periods = _check_periods(periods, obs_in_sample, silent)

    stl_kwargs = dict(stl_kwargs or {})
    stl_kwargs.pop("period", None)
    stl_kwargs.pop("seasonal", None)

    iterations = 1 if len(periods) == 1 else 2
    seasonals = np.zeros((len(periods), obs_in_sample))
    deseasonalized = y.copy()
    stl_fit = None

    for _ in range(iterations):
        for i, period in enumerate(periods):
            # Put the current estimate back before re-estimating it
            deseasonalized = deseasonalized + seasonals[i]
            stl_fit = STL(
                deseasonalized, period=period, seasonal=7 + 4 * (i + 1), **stl_kwargs
            ).fit()
            seasonals[i] = np.asarray(stl_fit.seasonal)
            deseasonalized = deseasonalized - seasonals[i]

    trend = np.asarray(stl_fit.trend)
    return MSTLDecomposition(
        trend=trend,
        seasonal={period: seasonals[i] for i, period in enumerate(periods)},
        residuals=deseasonalized - trend,
        robust_weights=np.asarray(stl_fit.weights),
        index=observations["index"],
    )
