"""
Analytic h-step forecast variances for the additive ETS models.

For a model in error-correction form the h-step forecast error variance is

.. math::

    v_h = \\sigma^2 \\left(1 + \\sum_{j=1}^{h-1} c_j^2\\right),
    \\qquad c_j = \\alpha + \\beta \\sum_{i=1}^{j} \\phi^i + \\gamma d_{j,m}

with :math:`d_{j,m} = 1` when ``j`` is a multiple of ``m``. The sum is
evaluated in closed form for each of the six additive families (ANN, AAN,
AAdN, ANA, AAA, AAdA); the smoothing-form beta and gamma used by the
recursion coincide with the error-correction ones.

References
----------
Hyndman, R.J., Koehler, A.B., Ord, J.K., and Snyder, R.D. (2008).
"Forecasting with Exponential Smoothing: The State Space Approach", ch. 6.
"""

import numpy as np


def _level_trend_sum(alpha, beta, phi, n):
    """Closed form of ``sum_{j=1}^{n} (alpha + beta * T_j)^2``."""
    if beta is None:
        return n * alpha**2
    if phi is None:
        # T_j = j
        return (
            n * alpha**2
            + alpha * beta * n * (n + 1)
            + beta**2 * n * (n + 1) * (2 * n + 1) / 6
        )
    # T_j = c (1 - phi^j) with c = phi / (1 - phi)
    c = phi / (1 - phi)
    a = alpha + beta * c
    geometric = phi * (1 - phi**n) / (1 - phi)
    geometric_sq = phi**2 * (1 - phi ** (2 * n)) / (1 - phi**2)
    return n * a**2 - 2 * a * beta * c * geometric + (beta * c) ** 2 * geometric_sq


def _seasonal_sum(alpha, beta, gamma, phi, n, m):
    """Extra terms contributed by the seasonal jumps at ``j = m, 2m, ..., km``."""
    k = np.floor(n / m)
    total = k * (2 * alpha * gamma + gamma**2)
    if beta is None:
        return total
    if phi is None:
        # sum_{i=1}^{k} T_{im} = m k (k + 1) / 2
        return total + beta * gamma * m * k * (k + 1)
    c = phi / (1 - phi)
    trend_at_seasons = c * (k - phi**m * (1 - phi ** (m * k)) / (1 - phi**m))
    return total + 2 * beta * gamma * trend_at_seasons


def _var_ann(params, n, m):
    return _level_trend_sum(params.alpha, None, None, n)


def _var_aan(params, n, m):
    return _level_trend_sum(params.alpha, params.beta, None, n)


def _var_aadn(params, n, m):
    return _level_trend_sum(params.alpha, params.beta, params.phi, n)


def _var_ana(params, n, m):
    return _level_trend_sum(params.alpha, None, None, n) + _seasonal_sum(
        params.alpha, None, params.gamma, None, n, m
    )


def _var_aaa(params, n, m):
    return _level_trend_sum(params.alpha, params.beta, None, n) + _seasonal_sum(
        params.alpha, params.beta, params.gamma, None, n, m
    )


def _var_aada(params, n, m):
    return _level_trend_sum(
        params.alpha, params.beta, params.phi, n
    ) + _seasonal_sum(params.alpha, params.beta, params.gamma, params.phi, n, m)


_FAMILY_VARIANCE = {
    "ANN": _var_ann,
    "AAN": _var_aan,
    "AAdN": _var_aadn,
    "ANA": _var_ana,
    "AAA": _var_aaa,
    "AAdA": _var_aada,
}


def var_anal(spec, params, h, s2):
    """
    Analytic forecast error variance for steps 1..h.

    Parameters
    ----------
    spec : ModelSpec
        Purely additive model specification.
    params : Parameters
        Model parameters.
    h : int
        Forecast horizon.
    s2 : float
        One-step residual variance.

    Returns
    -------
    numpy.ndarray
        Variances of shape ``(h,)``, non-decreasing in the horizon.

    Raises
    ------
    ValueError
        If the model has a multiplicative component.
    """
    if spec.name not in _FAMILY_VARIANCE:
        raise ValueError(
            f"No analytic variance for ETS({spec.name}); "
            "use simulated intervals instead"
        )
    n = np.arange(h, dtype=float)
    m = params.seasonal_period
    squares = _FAMILY_VARIANCE[spec.name](params, n, m)
    return s2 * (1 + squares)
