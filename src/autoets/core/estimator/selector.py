from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict

import pandas as pd

from autoets.core.errors import FitError, NoViableModelError
from autoets.core.utils.ic import IC_NAMES, calculate_ic_weights

from .estimator import estimator


@dataclass(frozen=True)
class SelectionResult:
    """
    Outcome of a model selection run.

    Attributes
    ----------
    best : FittedModel
        The winning model.
    ic : str
        Information criterion used for ranking.
    candidates : dict
        Successfully fitted models keyed by model name, in pool order.
    failures : dict
        Reason for every model that could not be fitted, keyed by model name.
    """

    best: object
    ic: str
    candidates: Dict[str, object] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def ic_values(self):
        """Information criterion of every candidate, keyed by model name."""
        return {name: model.ic(self.ic) for name, model in self.candidates.items()}

    def ranking(self):
        """Candidates ordered from best to worst."""
        return sorted(self.candidates.values(), key=lambda m: _rank_key(m, self.ic))

    def ic_table(self):
        """
        Summary table of all fitted candidates.

        Returns
        -------
        pandas.DataFrame
            One row per candidate, indexed by model name and sorted by rank,
            with columns ``loglik``, ``n_params``, ``AIC``, ``AICc``, ``BIC``
            and ``weight`` (Akaike weight of the selection criterion).
        """
        ranked = self.ranking()
        weights = calculate_ic_weights({m.name: m.ic(self.ic) for m in ranked})
        rows = [
            {
                "model": m.name,
                "loglik": m.loglik,
                "n_params": m.n_params,
                "AIC": m.aic,
                "AICc": m.aicc,
                "BIC": m.bic,
                "weight": weights[m.name],
            }
            for m in ranked
        ]
        columns = ["model", "loglik", "n_params", "AIC", "AICc", "BIC", "weight"]
        return pd.DataFrame(rows, columns=columns).set_index("model")


def _rank_key(model, ic):
    # Smaller IC first, then fewer parameters, then the fixed model ordering
    return (model.ic(ic), model.n_params, model.spec.sort_key)


def _estimate_model(spec, y, seasonal_period, estimator_kwargs):
    """
    Estimate one model, turning a fit failure into a message.

    Returns
    -------
    tuple
        ``(FittedModel, None)`` on success, ``(None, reason)`` otherwise.
    """
    try:
        return estimator(spec, y, seasonal_period, **estimator_kwargs), None
    except FitError as err:
        return None, f"{type(err).__name__}: {err}"


def _print_progress(done, models_number, previous):
    percent = round(done / models_number * 100)
    print("\b" * (len(str(previous)) + 1), end="")
    print(f"{percent}%", end="", flush=True)
    return percent


def _estimate_all_models(
    models_pool, y, seasonal_period, n_jobs=None, silent=True, **estimator_kwargs
):
    """
    Estimate all models in the provided pool.

    Every model is estimated independently. With ``n_jobs=1`` the models are
    estimated one after another in the calling thread, otherwise in a thread
    pool with ``n_jobs`` workers (``None`` leaves the choice to
    :class:`concurrent.futures.ThreadPoolExecutor`).

    Returns
    -------
    list
        ``(FittedModel or None, failure reason or None)`` for each model, in
        pool order regardless of completion order.
    """
    models_number = len(models_pool)
    results = [None] * models_number

    if not silent:
        print("Estimation progress:    ", end="")
    previous = 0

    if n_jobs == 1:
        for j, spec in enumerate(models_pool):
            results[j] = _estimate_model(spec, y, seasonal_period, estimator_kwargs)
            if not silent:
                previous = _print_progress(j + 1, models_number, previous)
    else:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            futures = {
                executor.submit(
                    _estimate_model, spec, y, seasonal_period, estimator_kwargs
                ): j
                for j, spec in enumerate(models_pool)
            }
            for done, future in enumerate(as_completed(futures), start=1):
                results[futures[future]] = future.result()
                if not silent:
                    previous = _print_progress(done, models_number, previous)

    if not silent:
        print("... Done!")

    return results


def selector(
    y,
    seasonal_period,
    models_pool,
    ic="AICc",
    n_jobs=None,
    silent=True,
    index=None,
    print_level=0,
    maxeval=None,
    maxtime=None,
    # NLopt parameters
    xtol_rel=1e-6,
    xtol_abs=1e-8,
    ftol_rel=1e-8,
    ftol_abs=0,
    algorithm="NLOPT_LN_NELDERMEAD",
):
    """
    Estimate every model in the pool and pick the best by information criterion.

    All estimations finish before any comparison is made. The winner has the
    smallest criterion; ties go to the model with fewer parameters and then to
    the earlier model in the fixed (error, trend, damped, season) ordering, so
    the result never depends on which thread finished first.

    Parameters
    ----------
    y : numpy.ndarray
        Observations (read-only, shared by all workers).
    seasonal_period : int
        Seasonal period m.
    models_pool : sequence of ModelSpec
        Specifications to estimate, see ``generate_model_pool``.
    ic : str, default="AICc"
        Information criterion: ``"AIC"``, ``"AICc"`` or ``"BIC"``.
    n_jobs : int, optional
        Number of worker threads. ``1`` estimates serially in the calling
        thread, ``None`` uses the executor default.
    silent : bool, default=True
        Whether to suppress the progress indicator.
    index : pandas.Index, optional
        Index of the input series, stored on the fitted models.
    print_level, maxeval, maxtime, xtol_rel, xtol_abs, ftol_rel, ftol_abs, algorithm
        Passed to :func:`estimator`.

    Returns
    -------
    SelectionResult
        The best model, all candidates and the failure reasons.

    Raises
    ------
    ValueError
        If ``ic`` is unknown.
    NoViableModelError
        If no model in the pool could be fitted.

    Examples
    --------
    >>> pool = generate_model_pool(1, True, len(y))
    >>> result = selector(y, 1, pool)
    >>> result.best.name, result.ic_table().head()
    """
    if ic not in IC_NAMES:
        raise ValueError(
            f"Invalid information criterion: {ic}. Must be one of {list(IC_NAMES)}"
        )

    results = _estimate_all_models(
        models_pool,
        y,
        seasonal_period,
        n_jobs=n_jobs,
        silent=silent,
        index=index,
        print_level=print_level,
        maxeval=maxeval,
        maxtime=maxtime,
        xtol_rel=xtol_rel,
        xtol_abs=xtol_abs,
        ftol_rel=ftol_rel,
        ftol_abs=ftol_abs,
        algorithm=algorithm,
    )

    candidates = {}
    failures = {}
    for spec, (model, reason) in zip(models_pool, results):
        if model is None:
            failures[spec.name] = reason
        else:
            candidates[spec.name] = model

    if not candidates:
        details = "; ".join(f"{name}: {reason}" for name, reason in failures.items())
        raise NoViableModelError(
            f"None of the {len(models_pool)} candidate models could be fitted "
            f"({details})",
            failures=failures,
        )

    best = min(candidates.values(), key=lambda m: _rank_key(m, ic))
    return SelectionResult(best=best, ic=ic, candidates=candidates, failures=failures)
