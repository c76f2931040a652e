import numpy as np

from autoets.core.utils.decomposition import classical_decompose


def _initialize_ets_seasonal_states(y, spec, seasonal_period):
    """
    Estimate initial seasonal indices from the first few full cycles.

    Args:
        y: Observations (at least two full cycles)
        spec: Model specification
        seasonal_period: Seasonal period m

    Returns:
        tuple: (seasonal indices of length m, seasonally adjusted series)
    """
    obs_in_sample = len(y)
    n_cycles = max(2, min(obs_in_sample // seasonal_period, 3))
    decomposition_type = "multiplicative" if spec.season == "M" else "additive"
    y_decomposition = classical_decompose(
        y[: n_cycles * seasonal_period], seasonal_period, type=decomposition_type
    )
    season = y_decomposition["seasonal"]

    positions = np.arange(obs_in_sample) % seasonal_period
    if spec.season == "A":
        y_adjusted = y - season[positions]
    else:
        y_adjusted = y / season[positions]
    return season, y_adjusted


def _initialize_ets_nonseasonal_states(y_adjusted, spec, seasonal_period):
    """
    Estimate the initial level and trend from the start of the adjusted series.

    Args:
        y_adjusted: Seasonally adjusted observations
        spec: Model specification
        seasonal_period: Seasonal period m (1 if non-seasonal)

    Returns:
        tuple: (level, trend or None)
    """
    max_n = min(max(10, 2 * seasonal_period), len(y_adjusted))
    head = y_adjusted[:max_n]

    if spec.trend == "N":
        return float(np.mean(head)), None

    slope, intercept = np.polyfit(np.arange(1, max_n + 1), head, 1)
    if spec.trend == "A":
        level, trend = intercept, slope
        # Keep the first one-step prediction away from zero
        if abs(level + trend) < 1e-8:
            level = level * (1 + 1e-3)
            trend = trend * (1 - 1e-3)
        return float(level), float(trend)

    # Multiplicative trend, anchored at the same origin as the additive one
    level = intercept
    trend = 1 + slope / intercept if intercept != 0 else np.inf
    if abs(trend) > 1e10:
        trend = np.sign(trend) * 1e10
    if level < 1e-8 or trend < 1e-8:
        trend = max(head[1] / head[0], 1e-3) if head[0] > 0 else 1.0
        level = max(head[0], 1e-3) / trend
    return float(level), float(trend)


def initialize_states(spec, y, seasonal_period=1):
    """
    Heuristic initial states for the optimiser.

    Seasonal indices come from a classical decomposition of the first cycles,
    level and trend from a straight line through the first
    ``max(10, 2m)`` seasonally adjusted observations.

    Args:
        spec: Model specification
        y: Observations
        seasonal_period: Seasonal period m

    Returns:
        dict: Dictionary with ``level``, ``trend`` and ``season`` (the last
        two None when the model lacks the component)
    """
    y = np.asarray(y, dtype=float)
    season = None
    y_adjusted = y
    if spec.is_seasonal:
        season, y_adjusted = _initialize_ets_seasonal_states(y, spec, seasonal_period)

    level, trend = _initialize_ets_nonseasonal_states(
        y_adjusted, spec, seasonal_period if spec.is_seasonal else 1
    )

    # Failsafe in case negatives were produced
    if (spec.error == "M" or spec.trend == "M") and level <= 0:
        level = float(y[0])

    return {"level": level, "trend": trend, "season": season}
