import warnings

import numpy as np
from scipy.stats import norm

from autoets.core.checker.data_checks import check_levels
from autoets.core.fitter import simulate_paths
from autoets.core.utils.var_covar import var_anal

# Seed used for simulated intervals when none is given, so that repeated
# forecasts of the same model agree
DEFAULT_SEED = 42


def ensure_level_format(level):
    """Convert level scalar/list to numpy arrays of lower and upper quantiles.

    Parameters
    ----------
    level : float or list of float
        Confidence level(s), e.g. 0.95 or [0.9, 0.95, 0.99]. Percentages in
        (1, 100) are accepted.

    Returns
    -------
    levels, level_low, level_up : numpy arrays of shape (n_levels,)
    """
    levels = np.array(check_levels(level))
    level_low = (1 - levels) / 2
    level_up = (1 + levels) / 2
    return levels, np.round(level_low, 5), np.round(level_up, 5)


def generate_prediction_interval(predictions, model, level_low, level_up):
    """
    Normal prediction intervals from the analytic forecast variance.

    Parameters
    ----------
    predictions : numpy.ndarray
        Point forecasts, shape (h,).
    model : FittedModel
        Purely additive fitted model.
    level_low, level_up : numpy.ndarray
        Lower and upper quantile levels, shape (n_levels,).

    Returns
    -------
    tuple
        (y_lower, y_upper), each of shape (h, n_levels).
    """
    h = len(predictions)
    variance = var_anal(model.spec, model.params, h, model.sigma2)
    sd = np.sqrt(variance)[:, None]

    y_lower = predictions[:, None] + norm.ppf(level_low)[None, :] * sd
    y_upper = predictions[:, None] + norm.ppf(level_up)[None, :] * sd
    return y_lower, y_upper


def generate_simulation_interval(
    predictions, model, level_low, level_up, nsim=1000, seed=None
):
    """
    Prediction intervals from the empirical quantiles of simulated paths.

    Parameters
    ----------
    predictions : numpy.ndarray
        Point forecasts, shape (h,).
    model : FittedModel
        Fitted model.
    level_low, level_up : numpy.ndarray
        Lower and upper quantile levels, shape (n_levels,).
    nsim : int, default=1000
        Number of simulated paths.
    seed : int, optional
        Seed for :func:`numpy.random.default_rng`. ``DEFAULT_SEED`` if None.

    Returns
    -------
    tuple
        (y_lower, y_upper), each of shape (h, n_levels). Paths that broke
        down numerically are ignored; a step where every path broke down gets
        NaN bounds.
    """
    if seed is None:
        seed = DEFAULT_SEED
    rng = np.random.default_rng(seed)
    h = len(predictions)

    y_simulated = simulate_paths(
        model.spec,
        model.params,
        model.final_state,
        h,
        model.nobs,
        np.sqrt(model.sigma2),
        nsim,
        rng,
    )

    with warnings.catch_warnings():
        # All-NaN steps are reported as NaN bounds
        warnings.simplefilter("ignore", RuntimeWarning)
        y_lower = np.nanquantile(y_simulated, level_low, axis=1).T
        y_upper = np.nanquantile(y_simulated, level_up, axis=1).T
    return y_lower, y_upper
