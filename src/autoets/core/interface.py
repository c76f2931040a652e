"""
Functional entry points: ``fit``, ``forecast`` and ``model_summary``.
"""

from autoets.core.checker.data_checks import check_seasonal_period, check_series
from autoets.core.checker.model_checks import generate_model_pool
from autoets.core.estimator.selector import selector
from autoets.core.fitted import FittedModel
from autoets.core.forecaster.forecaster import forecaster
from autoets.core.model_spec import ModelSpec
from autoets.core.parameters import Parameters
from autoets.core.utils.ic import IC_NAMES

_KINDS = {"A": "additive", "M": "multiplicative", "N": "none"}
_CODES = {kind: code for code, kind in _KINDS.items()}


def select_model(
    series,
    seasonal_period=1,
    model="ZZZ",
    damped=None,
    ic="AICc",
    allow_multiplicative_trend=True,
    n_jobs=None,
    maxeval=None,
    maxtime=None,
    verbose=0,
):
    """
    Validate the input, enumerate the model pool and select the best model.

    Parameters
    ----------
    series : array-like or pandas.Series
        Univariate time series.
    seasonal_period : int, default=1
        Seasonal period, 1 meaning no seasonality.
    model : str, default="ZZZ"
        Model composition string. ``"Z"`` selects among all options of a
        component, ``"X"`` among additive ones, ``"Y"`` among multiplicative
        ones; ``"A"``, ``"M"``, ``"N"`` fix the component. ``"AAdN"`` fixes a
        damped trend.
    damped : bool or None, default=None
        Restrict trended models to damped (True) or undamped (False) ones.
        None tries both.
    ic : str, default="AICc"
        Selection criterion: ``"AIC"``, ``"AICc"`` or ``"BIC"``.
    allow_multiplicative_trend : bool, default=True
        Whether multiplicative trends are considered when selecting the trend.
    n_jobs : int, optional
        Number of worker threads for estimation, ``1`` for serial execution.
    maxeval : int, optional
        Cost function evaluations allowed per model.
    maxtime : float, optional
        Seconds allowed per model.
    verbose : int, default=0
        Print the model pool and estimation progress when positive, and
        every optimiser iteration when above 1.

    Returns
    -------
    SelectionResult
        Best model, all candidates and failure reasons.

    Raises
    ------
    SeriesTooShortError, NonFiniteInputError, InvalidPeriodError
        On invalid input, before any estimation.
    InvalidModelError
        If ``model`` cannot be parsed.
    NoViableModelError
        If no candidate model could be fitted.
    """
    if ic not in IC_NAMES:
        raise ValueError(
            f"Invalid information criterion: {ic}. Must be one of {list(IC_NAMES)}"
        )
    observations = check_series(series)
    seasonal_period = check_seasonal_period(
        seasonal_period, observations["obs_in_sample"]
    )

    models_pool = generate_model_pool(
        seasonal_period,
        observations["positive"],
        observations["obs_in_sample"],
        model=model,
        damped=damped,
        allow_multiplicative_trend=allow_multiplicative_trend,
    )
    if verbose > 0:
        print("Forming the pool of models based on... ", end="")
        print(", ".join(spec.name for spec in models_pool))

    return selector(
        observations["y"],
        seasonal_period,
        models_pool,
        ic=ic,
        n_jobs=n_jobs,
        silent=verbose <= 0,
        index=observations["index"],
        print_level=max(verbose - 1, 0),
        maxeval=maxeval,
        maxtime=maxtime,
    )


def fit(series, seasonal_period=1, **options):
    """
    Fit the best ETS model to a series.

    Parameters
    ----------
    series : array-like or pandas.Series
        Univariate time series of finite values.
    seasonal_period : int, default=1
        Seasonal period, 1 meaning no seasonality.
    **options
        Passed to :func:`select_model` (``model``, ``damped``, ``ic``,
        ``allow_multiplicative_trend``, ``n_jobs``, ``maxeval``, ``maxtime``,
        ``verbose``).

    Returns
    -------
    FittedModel
        The selected model.

    Examples
    --------
    >>> model = fit([10, 12, 13, 12, 14, 15, 14, 16], seasonal_period=4)
    >>> model.spec.trend
    'N'
    """
    return select_model(series, seasonal_period, **options).best


def forecast(model, horizon, confidence_levels=(0.95,)):
    """
    Forecast a fitted model.

    Parameters
    ----------
    model : FittedModel
        Model returned by :func:`fit`.
    horizon : int
        Number of steps ahead (>= 1).
    confidence_levels : iterable of float, default=(0.95,)
        Confidence levels in (0, 1).

    Returns
    -------
    ForecastResult
        Point forecasts with prediction intervals. Purely additive models get
        analytic intervals, others simulated ones.

    Raises
    ------
    InvalidHorizonError, InvalidLevelError
        Before any computation.
    """
    return forecaster(model, horizon, level=confidence_levels)


def model_summary(model):
    """
    Read-only projection of a fitted model into plain python values.

    Parameters
    ----------
    model : FittedModel
        Fitted model.

    Returns
    -------
    dict
        Keys ``model``, ``error_kind``, ``trend_kind``, ``season_kind``
        (``"additive"``, ``"multiplicative"`` or ``"none"``), ``damped``,
        ``seasonal_period``, ``parameters`` (smoothing parameters and initial
        states), ``aicc``, ``aic``, ``bic``, ``sigma2``, ``loglik``, ``sse``,
        ``n_obs`` and ``n_params``. Every value is JSON serialisable.
    """
    spec = model.spec
    return {
        "model": spec.name,
        "error_kind": _KINDS[spec.error],
        "trend_kind": _KINDS[spec.trend],
        "season_kind": _KINDS[spec.season],
        "damped": bool(spec.damped),
        "seasonal_period": int(model.seasonal_period),
        "parameters": model.params.to_dict(),
        "aicc": float(model.aicc),
        "aic": float(model.aic),
        "bic": float(model.bic),
        "sigma2": float(model.sigma2),
        "loglik": float(model.loglik),
        "sse": float(model.sse),
        "n_obs": int(model.nobs),
        "n_params": int(model.n_params),
    }


def model_from_summary(summary, series):
    """
    Rebuild a fitted model from :func:`model_summary` output and its series.

    The recursion is replayed from the stored parameters, so the rebuilt model
    reproduces the stored log-likelihood and SSE.

    Parameters
    ----------
    summary : dict
        Output of :func:`model_summary`, possibly after a JSON round trip.
    series : array-like or pandas.Series
        The series the model was fitted on.

    Returns
    -------
    FittedModel
    """
    spec = ModelSpec(
        _CODES[summary["error_kind"]],
        _CODES[summary["trend_kind"]],
        _CODES[summary["season_kind"]],
        bool(summary["damped"]),
    )
    params = Parameters.from_dict(spec, summary["parameters"])
    observations = check_series(series)
    return FittedModel.from_parameters(
        spec,
        params,
        observations["y"],
        seasonal_period=summary.get("seasonal_period", params.seasonal_period),
        index=observations["index"],
    )
