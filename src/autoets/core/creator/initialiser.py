import numpy as np

from autoets.core.creator.initialization import initialize_states
from autoets.core.parameters import (
    ALPHA_BOUNDS,
    BETA_BOUNDS,
    GAMMA_BOUNDS,
    PHI_BOUNDS,
)


def initialiser(spec, y, seasonal_period=1, initial_states=None):
    """
    Calculate the initial parameter vector B, its bounds and names.

    The vector is laid out as
    ``[alpha, beta?, gamma?, phi?, level, trend?, season_0 .. season_{m-2}]``.
    The last seasonal state is not estimated, it follows from the
    normalisation applied in :func:`filler`.

    Parameters
    ----------
    spec : ModelSpec
        Model specification.
    y : numpy.ndarray
        Observations.
    seasonal_period : int, default=1
        Seasonal period m.
    initial_states : dict, optional
        Precomputed initial states (``level``, ``trend``, ``season``). Computed
        by :func:`initialize_states` when not given.

    Returns
    -------
    dict
        Dictionary with ``B`` (initial values), ``Bl`` and ``Bu`` (lower and
        upper bounds) and ``names``.
    """
    m = seasonal_period if spec.is_seasonal else 1
    if initial_states is None:
        initial_states = initialize_states(spec, y, seasonal_period)

    B = []
    Bl = []
    Bu = []
    names = []

    # Smoothing parameters
    alpha = ALPHA_BOUNDS[0] + 0.2 * (ALPHA_BOUNDS[1] - ALPHA_BOUNDS[0]) / m
    B.append(alpha)
    Bl.append(ALPHA_BOUNDS[0])
    Bu.append(ALPHA_BOUNDS[1])
    names.append("alpha")

    if spec.is_trendy:
        B.append(BETA_BOUNDS[0] + 0.1 * (alpha - BETA_BOUNDS[0]))
        Bl.append(BETA_BOUNDS[0])
        Bu.append(BETA_BOUNDS[1])
        names.append("beta")

    if spec.is_seasonal:
        B.append(GAMMA_BOUNDS[0] + 0.05 * (1 - alpha - GAMMA_BOUNDS[0]))
        Bl.append(GAMMA_BOUNDS[0])
        Bu.append(GAMMA_BOUNDS[1])
        names.append("gamma")

    if spec.damped:
        B.append(PHI_BOUNDS[0] + 0.99 * (PHI_BOUNDS[1] - PHI_BOUNDS[0]))
        Bl.append(PHI_BOUNDS[0])
        Bu.append(PHI_BOUNDS[1])
        names.append("phi")

    # Initial states
    positive_level = spec.error == "M" or spec.trend == "M"
    B.append(initial_states["level"])
    Bl.append(0.0 if positive_level else -np.inf)
    Bu.append(np.inf)
    names.append("level")

    if spec.is_trendy:
        B.append(initial_states["trend"])
        Bl.append(0.0 if spec.trend == "M" else -np.inf)
        Bu.append(np.inf)
        names.append("trend")

    if spec.is_seasonal:
        season = np.asarray(initial_states["season"], dtype=float)
        for i in range(m - 1):
            B.append(season[i])
            Bl.append(0.0 if spec.season == "M" else -np.inf)
            Bu.append(np.inf)
            names.append(f"seasonal_{i}")

    return {
        "B": np.array(B, dtype=float),
        "Bl": np.array(Bl, dtype=float),
        "Bu": np.array(Bu, dtype=float),
        "names": names,
    }
