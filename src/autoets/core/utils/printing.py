"""
Printing utilities for fitted ETS models.

Produces the text returned by ``AutoETS.summary()``.
"""

from typing import Any, List, Optional

import numpy as np


def _format_named_values(names: List[str], values: List[float], digits: int) -> str:
    """Two aligned lines: a header of names and a row of values."""
    widths = [max(len(n), digits + 3) for n in names]
    header = " ".join(f"{n:>{w}}" for n, w in zip(names, widths))
    row = " ".join(f"{v:{w}.{digits}f}" for v, w in zip(values, widths))
    return f"{header}\n{row}"


def _format_persistence_vector(model: Any, digits: int = 4) -> str:
    """
    Format the smoothing parameters for display.

    Parameters
    ----------
    model : FittedModel
        Fitted model
    digits : int
        Number of decimal places

    Returns
    -------
    str
        Formatted persistence vector string
    """
    params = model.params
    names = ["alpha"]
    values = [params.alpha]
    if params.beta is not None:
        names.append("beta")
        values.append(params.beta)
    if params.gamma is not None:
        names.append("gamma")
        values.append(params.gamma)
    return _format_named_values(names, values, digits)


def _format_initial_states(model: Any, digits: int = 4) -> str:
    params = model.params
    names = ["level"]
    values = [params.level]
    if params.trend is not None:
        names.append("trend")
        values.append(params.trend)
    if params.season is not None:
        for i, value in enumerate(params.season):
            names.append(f"s{i + 1}")
            values.append(value)
    return _format_named_values(names, values, digits)


def _format_information_criteria(model: Any, digits: int = 4) -> str:
    """
    Format information criteria for display.

    Parameters
    ----------
    model : FittedModel
        Fitted model
    digits : int
        Number of decimal places

    Returns
    -------
    str
        Formatted information criteria string
    """
    width = max(digits + 5, 8)
    header = f"{'AIC':>{width}} {'AICc':>{width}} {'BIC':>{width}}"
    values = (
        f"{model.aic:{width}.{digits}f} "
        f"{model.aicc:{width}.{digits}f} "
        f"{model.bic:{width}.{digits}f}"
    )
    return f"{header}\n{values}"


def format_model_summary(
    model: Any, digits: int = 4, elapsed: Optional[float] = None
) -> str:
    """
    Generate a formatted summary of a fitted ETS model.

    Parameters
    ----------
    model : FittedModel
        Fitted model
    digits : int, default=4
        Number of decimal places for numeric output
    elapsed : float, optional
        Estimation time in seconds, printed when given

    Returns
    -------
    str
        Formatted model summary string
    """
    lines = []

    if elapsed is not None:
        lines.append(f"Time elapsed: {elapsed:.2f} seconds")

    lines.append(f"Model estimated: {model.spec}")
    lines.append("Distribution assumed in the model: Normal")
    lines.append(f"Log-likelihood: {model.loglik:.{digits}f}")

    lines.append("Persistence vector g:")
    lines.append(_format_persistence_vector(model, digits))
    if model.params.phi is not None:
        lines.append(f"Damping parameter: {model.params.phi:.{digits}f}")

    lines.append("Initial states:")
    lines.append(_format_initial_states(model, digits))

    lines.append(f"Sample size: {model.nobs}")
    lines.append(f"Number of estimated parameters: {model.n_params}")
    lines.append(f"Number of degrees of freedom: {model.nobs - model.n_params}")
    lines.append(f"Residual variance: {model.sigma2:.{digits}f}")
    lines.append(f"RMSE: {np.sqrt(model.sse / model.nobs):.{digits}f}")

    lines.append("Information criteria:")
    lines.append(_format_information_criteria(model, digits))

    return "\n".join(lines)
