"""NLopt plumbing shared by every estimation run."""

import nlopt
import numpy as np

from autoets.core.estimator.cost_function import CF

# Objective values at or above this level mean no admissible point was found
CF_LIMIT = 1e10

DEFAULT_MAXTIME = 1800


def _setup_maxeval(B, maxeval=None):
    """``maxeval`` if given, else ``40 * len(B) ** 2`` evaluations (at least 1000)."""
    if maxeval is not None:
        return int(maxeval)
    return max(1000, 40 * len(B) ** 2)


def _configure_optimizer(
    algorithm,
    n_params,
    lb,
    ub,
    maxeval_used,
    maxtime,
    objective,
    xtol_rel=1e-6,
    xtol_abs=1e-8,
    ftol_rel=1e-8,
    ftol_abs=0,
):
    """
    Build a bounded NLopt minimiser around ``objective``.

    Parameters
    ----------
    algorithm : int
        NLopt algorithm constant, e.g. ``nlopt.LN_NELDERMEAD``.
    n_params : int
        Length of the parameter vector.
    lb, ub : array-like
        Box bounds.
    maxeval_used : int
        Evaluation budget.
    maxtime : float or None
        Time budget in seconds, ``DEFAULT_MAXTIME`` when None.
    objective : callable
        ``f(x, grad)`` as returned by ``_create_objective_function``.
    xtol_rel, xtol_abs, ftol_rel, ftol_abs : float
        Stopping tolerances on the parameters and the objective.

    Returns
    -------
    nlopt.opt
    """
    opt = nlopt.opt(algorithm, n_params)
    opt.set_lower_bounds(lb)
    opt.set_upper_bounds(ub)
    opt.set_xtol_rel(xtol_rel)
    opt.set_xtol_abs(xtol_abs)
    opt.set_ftol_rel(ftol_rel)
    opt.set_ftol_abs(ftol_abs)
    opt.set_maxeval(maxeval_used)
    opt.set_maxtime(DEFAULT_MAXTIME if maxtime is None else maxtime)
    opt.set_min_objective(objective)
    return opt


def _create_objective_function(spec, y, seasonal_period, print_level=0):
    """
    Objective for NLopt: the cost function capped at ``CF_LIMIT``.

    Returns
    -------
    tuple
        ``(objective, tracker)``. ``tracker`` records the best point seen
        (``x``, ``cf``) and the number of ``evaluations`` across every run
        that shares the objective.
    """
    tracker = {"x": None, "cf": float("inf"), "evaluations": 0}

    def objective(x, grad):
        cf_value = CF(x, spec, y, seasonal_period)
        tracker["evaluations"] += 1

        if not np.isfinite(cf_value) or cf_value > CF_LIMIT:
            cf_value = CF_LIMIT

        if cf_value < tracker["cf"]:
            tracker["cf"] = cf_value
            tracker["x"] = np.array(x, dtype=float)

        if print_level > 0:
            values = ", ".join(f"{val:.4f}" for val in x)
            print(
                f"Iter {tracker['evaluations']:3d}: B=[{values}] -> "
                f"CF={cf_value:.6f}"
            )

        return cf_value

    return objective, tracker


def _run_optimization(opt, B, tracker):
    """
    Minimise from ``B``.

    Returns
    -------
    tuple
        ``(x, cf, code)``: the optimum, its cost and the NLopt result code.
        When Nelder-Mead stops on rounding errors the best point in
        ``tracker`` is returned with ``nlopt.ROUNDOFF_LIMITED``.
    """
    try:
        x = opt.optimize(B)
        cf_value = opt.last_optimum_value()
        return np.asarray(x, dtype=float), cf_value, opt.last_optimize_result()
    except nlopt.RoundoffLimited:
        if tracker["x"] is None:
            return np.array(B, dtype=float), CF_LIMIT, nlopt.ROUNDOFF_LIMITED
        return tracker["x"], tracker["cf"], nlopt.ROUNDOFF_LIMITED
