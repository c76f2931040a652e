import nlopt
import numpy as np

from autoets.core.creator.filler import filler
from autoets.core.creator.initialiser import initialiser
from autoets.core.errors import (
    InvalidParametersError,
    NonFiniteStateError,
    NotConvergedError,
)
from autoets.core.fitted import FittedModel
from autoets.core.fitter import _data_exponent, ets_fitter

from .optimization import (
    CF_LIMIT,
    _configure_optimizer,
    _create_objective_function,
    _run_optimization,
    _setup_maxeval,
)

_NOT_CONVERGED = {
    nlopt.MAXEVAL_REACHED: "maximum number of evaluations reached",
    nlopt.MAXTIME_REACHED: "maximum optimisation time reached",
}


def estimator(
    spec,
    y,
    seasonal_period=1,
    lb=None,
    ub=None,
    maxtime=None,
    print_level=0,
    maxeval=None,
    B_initial=None,
    index=None,
    max_restarts=4,
    restart_tol=1e-6,
    # NLopt parameters
    xtol_rel=1e-6,
    xtol_abs=1e-8,
    ftol_rel=1e-8,
    ftol_abs=0,
    algorithm="NLOPT_LN_NELDERMEAD",
):
    """
    Estimate one ETS model by maximum likelihood.

    **Estimation Algorithm**:

    1. **Scaling**: the series is divided by the power of two closest to its
       largest absolute value, so the search runs on values of order one.
       Level, additive trend and additive seasonal states are mapped back
       before the final replay on the original series.
    2. **Parameter Initialization**: ``initialiser()`` builds the initial
       parameter vector B (smoothing parameters followed by initial states)
       and its bounds.
    3. **Optimization Setup**: NLopt is configured with Nelder-Mead, the
       tolerances below and an evaluation budget.
    4. **Objective Function**: a wrapper around ``CF()``, the negative
       log-likelihood, which returns a large penalty for inadmissible points.
    5. **Optimization Execution**: NLopt minimises the objective. A starting
       point that already fits every observation exactly is returned as is.
       If no admissible point was found, the search is restarted once from
       small smoothing parameters. If the budget ran out, the search is
       restarted from the best point: once for a user supplied ``maxeval``,
       and up to ``max_restarts`` times for the default budget, where a
       restart that improves the objective by less than ``restart_tol``
       (relative) counts as converged.
    6. **Results Assembly**: the optimum is mapped back to ``Parameters`` and
       replayed to produce a :class:`FittedModel`.

    Parameters
    ----------
    spec : ModelSpec
        Model specification.
    y : numpy.ndarray
        Observations (read-only, shared between threads).
    seasonal_period : int, default=1
        Seasonal period m.
    lb, ub : numpy.ndarray, optional
        Lower and upper bounds for B, in the units of ``y``. Computed by
        ``initialiser()`` if None.
    maxtime : float, optional
        Maximum optimization time in seconds. Defaults to 1800 seconds.
    print_level : int, default=0
        Print each cost function evaluation when positive.
    maxeval : int, optional
        Maximum number of cost function evaluations per run. Defaults to
        ``max(1000, 40 * len(B) ** 2)``.
    B_initial : numpy.ndarray, optional
        Starting point, in the units of ``y``, overriding the heuristic
        initial values.
    index : pandas.Index, optional
        Index of the input series, stored on the fitted model.
    max_restarts : int, default=4
        Restarts from the best point allowed under the default budget.
    restart_tol : float, default=1e-6
        Relative improvement below which an exhausted restart is accepted.
    xtol_rel, xtol_abs, ftol_rel, ftol_abs : float
        NLopt stopping tolerances.
    algorithm : str, default="NLOPT_LN_NELDERMEAD"
        Name of the NLopt algorithm.

    Returns
    -------
    FittedModel
        The estimated model.

    Raises
    ------
    NotConvergedError
        If the evaluation or time budget ran out while the objective was
        still improving.
    NonFiniteStateError
        If every evaluated point was inadmissible or broke the recursion.
    """
    y = np.asarray(y, dtype=float)
    exponent = _data_exponent(y)
    y_scaled = np.ldexp(y, -exponent)

    b_values = initialiser(spec, y_scaled, seasonal_period)
    names = b_values["names"]

    if B_initial is not None:
        B = _rescale(np.array(B_initial, dtype=float), names, spec, -exponent)
    else:
        B = b_values["B"].copy()
    lb = b_values["Bl"] if lb is None else _rescale(lb, names, spec, -exponent)
    ub = b_values["Bu"] if ub is None else _rescale(ub, names, spec, -exponent)

    # Start strictly inside the box
    B = np.clip(B, lb, ub)

    # An exact fit cannot be improved upon
    if not _exact_fit(B, spec, y_scaled, seasonal_period):
        B = _minimise(
            spec,
            y_scaled,
            seasonal_period,
            B,
            lb,
            ub,
            names,
            maxeval=maxeval,
            maxtime=maxtime,
            print_level=print_level,
            max_restarts=max_restarts,
            restart_tol=restart_tol,
            xtol_rel=xtol_rel,
            xtol_abs=xtol_abs,
            ftol_rel=ftol_rel,
            ftol_abs=ftol_abs,
            algorithm=algorithm,
        )

    params = filler(_rescale(B, names, spec, exponent), spec, seasonal_period)
    return FittedModel.from_parameters(
        spec, params, y, seasonal_period=seasonal_period, index=index
    )


def _minimise(
    spec,
    y,
    seasonal_period,
    B,
    lb,
    ub,
    names,
    maxeval,
    maxtime,
    print_level,
    max_restarts,
    restart_tol,
    xtol_rel,
    xtol_abs,
    ftol_rel,
    ftol_abs,
    algorithm,
):
    """Run NLopt from B with the recovery rules of :func:`estimator`."""
    maxeval_used = _setup_maxeval(B, maxeval)
    nlopt_algorithm = getattr(
        nlopt, algorithm.replace("NLOPT_", ""), nlopt.LN_NELDERMEAD
    )
    objective, tracker = _create_objective_function(
        spec, y, seasonal_period, print_level
    )

    def run(start):
        opt = _configure_optimizer(
            nlopt_algorithm,
            len(start),
            lb,
            ub,
            maxeval_used,
            maxtime,
            objective,
            xtol_rel=xtol_rel,
            xtol_abs=xtol_abs,
            ftol_rel=ftol_rel,
            ftol_abs=ftol_abs,
        )
        return _run_optimization(opt, start, tracker)

    B, CF_value, code = run(B)

    # Retry from small smoothing parameters if nothing admissible was found
    if not np.isfinite(CF_value) or CF_value >= CF_LIMIT:
        B, CF_value, code = run(_reset_smoothing(B, names, lb, ub))

    if not np.isfinite(CF_value) or CF_value >= CF_LIMIT:
        raise NonFiniteStateError(
            f"{spec.name}: no admissible parameter vector found"
        )

    # A fresh simplex around the best point gets another budget
    restarts = max_restarts if maxeval is None else 1
    for _ in range(restarts):
        if code not in _NOT_CONVERGED:
            break
        previous = CF_value
        B, CF_value, code = run(B)
        stalled = previous - CF_value <= restart_tol * abs(previous)
        if maxeval is None and stalled:
            code = nlopt.FTOL_REACHED

    if code in _NOT_CONVERGED:
        raise NotConvergedError(
            f"{spec.name}: {_NOT_CONVERGED[code]} "
            f"after {tracker['evaluations']} evaluations"
        )
    return B


def _rescale(B, names, spec, exponent):
    """Multiply the states measured in units of y by ``2 ** exponent``."""
    B = np.array(B, dtype=float)
    for i, name in enumerate(names):
        if (
            name == "level"
            or (name == "trend" and spec.trend == "A")
            or (name.startswith("seasonal_") and spec.season == "A")
        ):
            B[i] = np.ldexp(B[i], exponent)
    return B


def _reset_smoothing(B, names, lb, ub):
    """Set the smoothing parameters to small admissible values."""
    B = np.array(B, dtype=float)
    small = {"alpha": 0.01, "beta": 0.001, "gamma": 0.001}
    for i, name in enumerate(names):
        if name in small:
            B[i] = small[name]
    return np.clip(B, lb, ub)


def _exact_fit(B, spec, y, seasonal_period):
    """Whether the parameters at B reproduce every observation."""
    try:
        params = filler(B, spec, seasonal_period)
        result = ets_fitter(spec, params, y)
    except (InvalidParametersError, NonFiniteStateError):
        return False
    return result.sse == 0
