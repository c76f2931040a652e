from autoets.core.creator.filler import filler
from autoets.core.errors import InvalidParametersError, NonFiniteStateError
from autoets.core.fitter import ets_fitter

# Returned for parameter vectors outside the admissible region
PENALTY = 1e100


def CF(B, spec, y, seasonal_period=1):  # noqa: N802
    """
    Cost function minimised by the optimiser: the negative log-likelihood.

    Parameters
    ----------
    B : array-like
        Parameter vector laid out as produced by ``initialiser``.
    spec : ModelSpec
        Model specification.
    y : numpy.ndarray
        Observations.
    seasonal_period : int, default=1
        Seasonal period m.

    Returns
    -------
    float
        ``-loglik``, or ``PENALTY`` when B violates the usual bounds or the
        recursion produces a non-finite state.
    """
    try:
        params = filler(B, spec, seasonal_period)
        result = ets_fitter(spec, params, y)
    except (InvalidParametersError, NonFiniteStateError):
        return PENALTY

    return -result.loglik
