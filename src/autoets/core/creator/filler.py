import numpy as np

from autoets.core.parameters import Parameters


def filler(B, spec, seasonal_period=1):
    """
    Turn an optimiser vector B into validated model parameters.

    The seasonal block of B holds ``m - 1`` values; the last seasonal state
    is chosen so that additive indices sum to zero and multiplicative indices
    sum to ``m``.

    Parameters
    ----------
    B : array-like
        Parameter vector laid out as produced by :func:`initialiser`.
    spec : ModelSpec
        Model specification.
    seasonal_period : int, default=1
        Seasonal period m.

    Returns
    -------
    Parameters
        Validated parameters.

    Raises
    ------
    InvalidParametersError
        If B maps to a point outside the admissible region.
    """
    B = np.asarray(B, dtype=float)
    j = 0

    alpha = B[j]
    j += 1
    beta = gamma = phi = None
    if spec.is_trendy:
        beta = B[j]
        j += 1
    if spec.is_seasonal:
        gamma = B[j]
        j += 1
    if spec.damped:
        phi = B[j]
        j += 1

    level = B[j]
    j += 1
    trend = None
    if spec.is_trendy:
        trend = B[j]
        j += 1

    season = None
    if spec.is_seasonal:
        free = B[j : j + seasonal_period - 1]
        if spec.season == "A":
            last = -np.sum(free)
        else:
            last = seasonal_period - np.sum(free)
        season = np.append(free, last)

    return Parameters.create(
        spec,
        alpha=alpha,
        level=level,
        beta=beta,
        gamma=gamma,
        phi=phi,
        trend=trend,
        season=season,
    )
