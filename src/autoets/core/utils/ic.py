"""
Information criteria for likelihood-based model selection.

All functions take the maximised log-likelihood, the sample size and the
number of estimated parameters ``df`` (the residual variance included).
"""

import numpy as np

IC_NAMES = ("AIC", "AICc", "BIC")


def AIC(loglik, nobs=None, df=None):  # noqa: N802
    """Akaike criterion, ``2 df - 2 loglik``. ``nobs`` is not used."""
    return 2 * df - 2 * loglik


def AICc(loglik, nobs, df):  # noqa: N802
    """
    Small-sample corrected AIC.

    The correction ``2 df (df + 1) / (nobs - df - 1)`` is undefined for
    ``nobs <= df + 1``; plain AIC is returned there.
    """
    spare = nobs - df - 1
    if spare <= 0:
        return AIC(loglik, nobs, df)
    return AIC(loglik, nobs, df) + 2 * df * (df + 1) / spare


def BIC(loglik, nobs, df):  # noqa: N802
    """Schwarz criterion, ``df log(nobs) - 2 loglik``."""
    return df * np.log(nobs) - 2 * loglik


def ic_function(ic_name, loglik, nobs, df):
    """
    Evaluate the criterion called ``ic_name``.

    Parameters
    ----------
    ic_name : str
        One of ``IC_NAMES``.
    loglik : float
        Maximised log-likelihood.
    nobs : int
        Number of observations.
    df : int
        Number of estimated parameters.

    Returns
    -------
    float

    Raises
    ------
    ValueError
        For an unknown criterion name.
    """
    criteria = dict(zip(IC_NAMES, (AIC, AICc, BIC)))
    if ic_name not in criteria:
        raise ValueError(
            f"Invalid information criterion: {ic_name}. Must be one of {list(IC_NAMES)}"
        )
    return criteria[ic_name](loglik, nobs, df)


def calculate_ic_weights(ic_values, threshold=1e-5):
    """
    Akaike weights of a set of models.

    Each model gets ``exp(-delta / 2)`` normalised over all models, where
    ``delta`` is its distance to the smallest criterion. Weights under
    ``threshold`` are set to zero and the rest renormalised.

    Parameters
    ----------
    ic_values : dict
        Model name to criterion value.
    threshold : float, default=1e-5
        Smallest weight kept.

    Returns
    -------
    dict
        Model name to weight, in the order of ``ic_values``.

    Examples
    --------
    >>> w = calculate_ic_weights({"ANN": 100.5, "AAN": 98.2})
    >>> max(w, key=w.get)
    'AAN'
    """
    if not ic_values:
        return {}

    values = np.fromiter(ic_values.values(), dtype=float, count=len(ic_values))
    weights = np.exp(-0.5 * (values - values.min()))
    weights /= weights.sum()

    weights[weights < threshold] = 0.0
    weights /= weights.sum()

    return dict(zip(ic_values, weights.tolist()))
