import numpy as np


def _smoothing_function_ma(y, order):
    """Centred moving average smoother (2 x m for even orders)."""
    y = y.astype(float)
    if order % 2 != 0:
        k = order
        weights = np.ones(k) / order
    else:
        k = order + 1
        weights = np.array([0.5] + [1] * (order - 1) + [0.5]) / order
    half_k = (k - 1) // 2
    trend = np.full_like(y, np.nan)
    for i in range(half_k, len(y) - half_k):
        trend[i] = np.sum(y[i - half_k : i + half_k + 1] * weights)
    return trend


def classical_decompose(y, lag, type="additive"):
    """
    Classical seasonal decomposition with a single seasonal period.

    The trend is a centred moving average of order ``lag``. The seasonal
    indices are the per-position means of the detrended series, normalised to
    sum to zero (additive) or to average one (multiplicative).

    Parameters
    ----------
    y : array-like
        Time series, at least two full seasonal cycles long.
    lag : int
        Seasonal period (>= 2).
    type : str, default="additive"
        ``"additive"`` or ``"multiplicative"`` (requires y > 0).

    Returns
    -------
    dict
        - **'trend'** (numpy.ndarray): moving-average trend, NaN at the edges.
        - **'seasonal'** (numpy.ndarray): seasonal index per position, length
          ``lag``, position 0 aligned with the first observation.
        - **'deseasonalised'** (numpy.ndarray): ``y`` with the seasonal
          component removed.

    Raises
    ------
    ValueError
        If ``type`` is unknown, ``lag < 2`` or the series is shorter than two
        cycles.

    Examples
    --------
    >>> y = np.array([10, 14, 8, 12, 11, 15, 9, 13], dtype=float)
    >>> classical_decompose(y, 4)["seasonal"].shape
    (4,)
    """
    if type not in ["additive", "multiplicative"]:
        raise ValueError("type must be 'additive' or 'multiplicative'")
    y = np.asarray(y, dtype=float)
    obs_in_sample = len(y)
    if lag < 2:
        raise ValueError("Seasonal decomposition requires lag >= 2")
    if obs_in_sample < 2 * lag:
        raise ValueError(
            f"Seasonal decomposition requires at least {2 * lag} observations, "
            f"got {obs_in_sample}"
        )

    trend = _smoothing_function_ma(y, lag)
    if type == "additive":
        detrended = y - trend
    else:
        detrended = y / trend

    # Average the detrended values position by position
    positions = np.arange(obs_in_sample) % lag
    seasonal = np.array(
        [np.nanmean(detrended[positions == k]) for k in range(lag)], dtype=float
    )
    if type == "additive":
        seasonal = seasonal - np.mean(seasonal)
        deseasonalised = y - seasonal[positions]
    else:
        seasonal = seasonal / np.mean(seasonal)
        deseasonalised = y / seasonal[positions]

    return {"trend": trend, "seasonal": seasonal, "deseasonalised": deseasonalised}
