from autoets.core.errors import InvalidModelError
from autoets.core.model_spec import ModelSpec

from ._utils import _warn

# Extra observations needed on top of the parameter count
_MIN_EXTRA_OBS = 4

_FALLBACK = ModelSpec("A", "N", "N", False)


def _expand_component_code(comp_char, component):
    """
    Expand a single component character into a list of valid possibilities.

    Parameters
    ----------
    comp_char : str
        Component character: ``"Z"`` (select), ``"X"`` (additive only),
        ``"Y"`` (multiplicative only) or a concrete ``"A"``, ``"M"``, ``"N"``.
    component : str
        ``"error"``, ``"trend"`` or ``"season"``. Error has no ``"N"`` option.

    Returns
    -------
    list
        List of possible component values
    """
    none = [] if component == "error" else ["N"]
    if comp_char == "Z":
        return none + ["A", "M"]
    if comp_char == "X":
        return none + ["A"]
    if comp_char == "Y":
        return none + ["M"]
    return [comp_char]


def _check_model_composition(model_str, damped=None):
    """
    Parse and validate a model composition string.

    Parameters
    ----------
    model_str : str
        String like "ANN", "AAdN", "ZZZ" or "ZXY".
    damped : bool or None
        Damping requested by the caller. None means both variants.

    Returns
    -------
    dict
        Dictionary with the ``error_type``, ``trend_type`` and ``season_type``
        characters and the resolved ``damped`` option (True, False or None).

    Raises
    ------
    InvalidModelError
        If the string is not 3 characters long (4 with a ``"d"`` in third
        position) or contains an unknown code.
    """
    if not isinstance(model_str, str):
        raise InvalidModelError(f"Invalid model type: {model_str!r}. Should be a string.")

    if len(model_str) == 4:
        if model_str[2] != "d":
            raise InvalidModelError(
                f"Invalid damped trend specification in {model_str!r}"
            )
        error_type, trend_type, season_type = model_str[0], model_str[1], model_str[3]
        if damped is False:
            raise InvalidModelError(
                f"Model {model_str!r} is damped but damped=False was requested"
            )
        damped = True
    elif len(model_str) == 3:
        error_type, trend_type, season_type = model_str
    else:
        raise InvalidModelError(f"Invalid model string length: {model_str!r}")

    if error_type not in ["Z", "X", "Y", "A", "M"]:
        raise InvalidModelError(f"Invalid error type: {error_type!r}")
    if trend_type not in ["Z", "X", "Y", "N", "A", "M"]:
        raise InvalidModelError(f"Invalid trend type: {trend_type!r}")
    if season_type not in ["Z", "X", "Y", "N", "A", "M"]:
        raise InvalidModelError(f"Invalid seasonal type: {season_type!r}")
    if trend_type == "N" and damped:
        raise InvalidModelError("A damped model requires a trend component.")

    return {
        "error_type": error_type,
        "trend_type": trend_type,
        "season_type": season_type,
        "damped": damped,
    }


def _build_models_pool_from_components(
    error_type, trend_type, season_type, damped, allow_multiplicative_trend=True
):
    """
    Enumerate every specification matching the component characters.

    Returns
    -------
    list
        List of ``ModelSpec`` before any data-driven restriction.
    """
    trends = _expand_component_code(trend_type, "trend")
    if not allow_multiplicative_trend and trend_type != "M":
        trends = [t for t in trends if t != "M"]

    if damped is None:
        damped_options = [False, True]
    else:
        damped_options = [damped]

    pool = []
    for e in _expand_component_code(error_type, "error"):
        for t in trends:
            for s in _expand_component_code(season_type, "season"):
                for d in damped_options:
                    if d and t == "N":
                        continue
                    pool.append(ModelSpec(e, t, s, d))
    return pool


def _n_param(spec, seasonal_period):
    return spec.n_smoothing + spec.n_initial_states(seasonal_period)


def generate_model_pool(
    seasonal_period,
    positive,
    n_obs,
    model="ZZZ",
    damped=None,
    allow_multiplicative_trend=True,
    silent=False,
):
    """
    Generate the structurally admissible ETS specifications for a series.

    Rules applied to the candidates allowed by ``model`` and ``damped``:

    - multiplicative error, trend or season need strictly positive data;
    - a seasonal component needs ``seasonal_period >= 2`` and at least two
      full cycles of data;
    - a model with ``npar`` smoothing parameters and initial states needs
      more than ``npar + 4`` observations;
    - ``ANN`` (simple exponential smoothing) is always included.

    Parameters
    ----------
    seasonal_period : int
        Seasonal period, 1 meaning no seasonality.
    positive : bool
        Whether all observations are strictly positive.
    n_obs : int
        Number of observations.
    model : str, default="ZZZ"
        Model composition string, see :func:`_check_model_composition`.
    damped : bool or None, default=None
        Restrict to damped (True) or undamped (False) trends, or try both.
    allow_multiplicative_trend : bool, default=True
        Whether "Z" and "Y" trend codes include multiplicative trends.
    silent : bool, default=False
        Whether to suppress warnings.

    Returns
    -------
    tuple
        ``ModelSpec`` instances sorted by their deterministic ordering key.

    Examples
    --------
    >>> [spec.name for spec in generate_model_pool(1, False, 100)]
    ['ANN', 'AAN', 'AAdN']
    """
    composition = _check_model_composition(model, damped)
    candidates = _build_models_pool_from_components(
        composition["error_type"],
        composition["trend_type"],
        composition["season_type"],
        composition["damped"],
        allow_multiplicative_trend,
    )

    pool = []
    dropped = {}
    for spec in candidates:
        multiplicative = "M" in (spec.error, spec.trend, spec.season)
        if multiplicative and not positive:
            dropped[spec.name] = "the data is not strictly positive"
            continue
        if spec.is_seasonal and seasonal_period < 2:
            dropped[spec.name] = "the series has no seasonal period"
            continue
        if spec.is_seasonal and n_obs < 2 * seasonal_period:
            dropped[spec.name] = "the series is too short for seasonality"
            continue
        if n_obs <= _n_param(spec, seasonal_period) + _MIN_EXTRA_OBS:
            dropped[spec.name] = "there are too few observations for its parameters"
            continue
        pool.append(spec)

    # ETS(ANN) is only a fallback when it was not requested in the first place
    if not pool and _FALLBACK not in candidates:
        reasons = sorted(set(dropped.values()))
        _warn(
            f"None of the requested models can be fitted ({'; '.join(reasons)}). "
            "Falling back to ETS(ANN).",
            silent,
        )

    if _FALLBACK not in pool:
        pool.append(_FALLBACK)

    return tuple(sorted(set(pool), key=lambda spec: spec.sort_key))
