"""
State-space recursion for ETS models.

The measurement and transition equations are written in smoothing form,
dispatched on the component codes of the :class:`ModelSpec`. The same helper
functions work on python floats (in-sample fitting) and on numpy arrays
(simulation over many paths at once).

State vectors are laid out as ``[level, trend?, s_0, ..., s_{m-1}]`` where
``s_k`` is the seasonal state for every time index ``t`` with ``t mod m == k``.
"""

import math
from typing import NamedTuple

import numpy as np

from autoets.core.errors import NonFiniteStateError

# Smallest divisor allowed in multiplicative updates
_MIN_DIVISOR = 1e-10
# Floor on the residual variance, so that perfect fits keep a finite likelihood
_MIN_VARIANCE = np.finfo(float).tiny
_LOG_MIN_VARIANCE = math.log(_MIN_VARIANCE)


class FitterResult(NamedTuple):
    """Output of :func:`ets_fitter`."""

    fitted: np.ndarray
    residuals: np.ndarray
    states: np.ndarray
    final_state: np.ndarray
    loglik: float
    sse: float
    lik: float


def _trend_term(trend_type, level, trend, phi):
    """Return the level+trend combination ``q`` and the damped trend ``phib``."""
    if trend_type == "N":
        return level, 0.0
    if trend_type == "A":
        phib = phi * trend
        return level + phib, phib
    phib = trend**phi
    return level * phib, phib


def _season_combine(season_type, q, s):
    if season_type == "N":
        return q
    if season_type == "A":
        return q + s
    return q * s


def _update(spec, y, level, trend, s, q, phib, alpha, beta_star, gamma):
    """
    Apply the transition equations after observing ``y``.

    Returns the new level, trend and seasonal state for the current position.
    """
    if spec.season == "N":
        p = y
    elif spec.season == "A":
        p = y - s
    else:
        p = y / s
    new_level = q + alpha * (p - q)

    new_trend = trend
    if spec.trend == "A":
        new_trend = phib + beta_star * ((new_level - level) - phib)
    elif spec.trend == "M":
        new_trend = phib + beta_star * ((new_level / level) - phib)

    new_s = s
    if spec.season == "A":
        new_s = s + gamma * ((y - q) - s)
    elif spec.season == "M":
        new_s = s + gamma * ((y / q) - s)

    return new_level, new_trend, new_s


def _split_state(spec, state):
    level = float(state[0])
    trend = float(state[1]) if spec.is_trendy else 0.0
    offset = 1 + spec.is_trendy
    season = [float(v) for v in state[offset:]] if spec.is_seasonal else None
    return level, trend, season


def _join_state(spec, level, trend, season):
    parts = [level]
    if spec.is_trendy:
        parts.append(trend)
    if spec.is_seasonal:
        parts.extend(season)
    return parts


def _data_exponent(y):
    """Binary exponent of max|y|, 0 when every observation is zero."""
    largest = float(np.max(np.abs(y))) if y.size else 0.0
    if largest == 0.0 or not math.isfinite(largest):
        return 0
    return math.frexp(largest)[1]


def _smoothing_values(params):
    alpha = params.alpha
    beta_star = params.beta / alpha if params.beta is not None else 0.0
    gamma = params.gamma if params.gamma is not None else 0.0
    return alpha, beta_star, gamma


def ets_fitter(spec, params, y):
    """
    Replay a series through one ETS model.

    Parameters
    ----------
    spec : ModelSpec
        Model specification.
    params : Parameters
        Validated smoothing parameters and initial states.
    y : array-like
        Observations.

    Returns
    -------
    FitterResult
        One-step-ahead fitted values, residuals (relative for multiplicative
        error), the state matrix of shape ``(n + 1, n_states)`` where row
        ``t`` is the state before observation ``t``, the final state, the
        Gaussian log-likelihood, the sum of squared residuals and the
        concentrated criterion ``lik``.

    Raises
    ------
    NonFiniteStateError
        If a prediction, residual or state stops being finite, or a
        multiplicative update would divide by (almost) zero.
    """
    y = np.asarray(y, dtype=float)
    n = y.shape[0]
    m = params.seasonal_period
    phi = params.phi_value
    alpha, beta_star, gamma = _smoothing_values(params)

    level, trend, season = _split_state(spec, params.initial_state())
    n_states = 1 + spec.is_trendy + (m if spec.is_seasonal else 0)

    fitted = np.empty(n)
    residuals = np.empty(n)
    states = np.empty((n + 1, n_states))
    states[0] = _join_state(spec, level, trend, season)

    # Additive residuals are squared in units of a power of two near max|y|
    err_exp = _data_exponent(y) if spec.error == "A" else 0
    sse_scaled = 0.0
    sum_log_fitted = 0.0
    for t in range(n):
        i = t % m
        s = season[i] if season is not None else 0.0

        if spec.trend == "M" and (level <= _MIN_DIVISOR or trend <= 0):
            raise NonFiniteStateError(
                f"{spec.name}: non-positive level or trend at t={t}"
            )
        if spec.season == "M" and abs(s) < _MIN_DIVISOR:
            raise NonFiniteStateError(f"{spec.name}: seasonal state near zero at t={t}")

        try:
            q, phib = _trend_term(spec.trend, level, trend, phi)
        except OverflowError as err:
            raise NonFiniteStateError(f"{spec.name}: trend overflow at t={t}") from err
        y_hat = _season_combine(spec.season, q, s)

        if spec.error == "A":
            error = y[t] - y_hat
        else:
            if abs(y_hat) < _MIN_DIVISOR:
                raise NonFiniteStateError(f"{spec.name}: prediction near zero at t={t}")
            error = (y[t] - y_hat) / y_hat
            sum_log_fitted += math.log(abs(y_hat))
        if spec.season == "M" and abs(q) < _MIN_DIVISOR:
            raise NonFiniteStateError(f"{spec.name}: level near zero at t={t}")

        level_new, trend, s_new = _update(
            spec, y[t], level, trend, s, q, phib, alpha, beta_star, gamma
        )
        level = level_new
        if season is not None:
            season[i] = s_new

        if not (
            math.isfinite(y_hat)
            and math.isfinite(error)
            and math.isfinite(level)
            and math.isfinite(trend)
            and math.isfinite(s_new)
        ):
            raise NonFiniteStateError(f"{spec.name}: non-finite state at t={t}")

        fitted[t] = y_hat
        residuals[t] = error
        scaled_error = math.ldexp(error, -err_exp)
        sse_scaled += scaled_error * scaled_error
        states[t + 1] = _join_state(spec, level, trend, season)

    if not math.isfinite(sse_scaled):
        raise NonFiniteStateError(f"{spec.name}: sum of squared errors overflowed")

    with np.errstate(over="ignore"):
        sse = float(np.ldexp(sse_scaled, 2 * err_exp))
    if sse_scaled > 0:
        log_sse = math.log(sse_scaled) + 2 * err_exp * math.log(2)
    else:
        log_sse = _LOG_MIN_VARIANCE

    log_sigma2 = max(log_sse - math.log(n), _LOG_MIN_VARIANCE)
    loglik = -0.5 * n * (math.log(2 * math.pi) + log_sigma2 + 1) - sum_log_fitted
    # Concentrated criterion, n log(SSE) plus the Jacobian term for relative errors
    lik = n * max(log_sse, _LOG_MIN_VARIANCE) + 2 * sum_log_fitted

    return FitterResult(
        fitted=fitted,
        residuals=residuals,
        states=states,
        final_state=states[n].copy(),
        loglik=loglik,
        sse=sse,
        lik=lik,
    )


def ets_forecaster(spec, params, final_state, h, n_obs):
    """
    Produce point forecasts by iterating the model with zero residuals.

    Parameters
    ----------
    spec : ModelSpec
        Model specification.
    params : Parameters
        Model parameters (only smoothing parameters are used).
    final_state : array-like
        State after the last observation.
    h : int
        Forecast horizon.
    n_obs : int
        Number of in-sample observations, which fixes the seasonal position
        of the first forecast.

    Returns
    -------
    numpy.ndarray
        Point forecasts for steps ``1..h``.
    """
    m = params.seasonal_period
    phi = params.phi_value
    level, trend, season = _split_state(spec, final_state)

    forecasts = np.empty(h)
    for j in range(h):
        s = season[(n_obs + j) % m] if season is not None else 0.0
        q, phib = _trend_term(spec.trend, level, trend, phi)
        forecasts[j] = _season_combine(spec.season, q, s)
        # A zero residual leaves the seasonals untouched
        level = q
        trend = phib
    return forecasts


def simulate_paths(spec, params, final_state, h, n_obs, sigma, nsim, rng):
    """
    Simulate future sample paths with Gaussian residuals.

    Parameters
    ----------
    spec : ModelSpec
        Model specification.
    params : Parameters
        Model parameters.
    final_state : array-like
        State after the last observation.
    h : int
        Forecast horizon.
    n_obs : int
        Number of in-sample observations.
    sigma : float
        Standard deviation of the residuals (relative for multiplicative error).
    nsim : int
        Number of paths.
    rng : numpy.random.Generator
        Source of randomness.

    Returns
    -------
    numpy.ndarray
        Matrix of shape ``(h, nsim)``. Paths that break down (for example a
        multiplicative trend turning negative) contain NaN from that step on.
    """
    m = params.seasonal_period
    phi = params.phi_value
    alpha, beta_star, gamma = _smoothing_values(params)
    level0, trend0, season0 = _split_state(spec, final_state)

    level = np.full(nsim, level0)
    trend = np.full(nsim, trend0)
    season = None
    if season0 is not None:
        season = np.tile(np.asarray(season0, dtype=float)[:, None], (1, nsim))

    errors = rng.normal(0.0, sigma, size=(h, nsim))
    paths = np.empty((h, nsim))
    with np.errstate(all="ignore"):
        for j in range(h):
            i = (n_obs + j) % m
            s = season[i] if season is not None else 0.0
            q, phib = _trend_term(spec.trend, level, trend, phi)
            y_hat = _season_combine(spec.season, q, s)
            if spec.error == "A":
                y = y_hat + errors[j]
            else:
                y = y_hat * (1 + errors[j])
            paths[j] = y
            level, trend, s_new = _update(
                spec, y, level, trend, s, q, phib, alpha, beta_star, gamma
            )
            if season is not None:
                season[i] = s_new
    paths[~np.isfinite(paths)] = np.nan
    return paths
