"""
Validated parameter vector for ETS models.

``Parameters`` is only built through :meth:`Parameters.create`, which rejects
anything outside the admissible region, so an invalid vector never reaches
the recursion.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from autoets.core.errors import InvalidParametersError
from autoets.core.model_spec import ModelSpec

# Box constraints on the smoothing parameters
ALPHA_BOUNDS = (1e-4, 0.9999)
BETA_BOUNDS = (1e-4, 0.9999)
GAMMA_BOUNDS = (1e-4, 0.9999)
PHI_BOUNDS = (0.8, 0.98)


def _check_bounds(name, value, bounds):
    lower, upper = bounds
    if not np.isfinite(value) or value < lower or value > upper:
        raise InvalidParametersError(
            f"{name}={value} is outside the admissible range [{lower}, {upper}]"
        )


@dataclass(frozen=True, eq=False)
class Parameters:
    """
    Smoothing parameters and initial states of one ETS model.

    Attributes
    ----------
    spec : ModelSpec
        Model the parameters belong to.
    alpha : float
        Level smoothing parameter.
    beta : float or None
        Trend smoothing parameter, present iff the model has a trend.
    gamma : float or None
        Seasonal smoothing parameter, present iff the model is seasonal.
    phi : float or None
        Damping parameter, present iff the trend is damped.
    level : float
        Initial level.
    trend : float or None
        Initial trend (slope for additive, growth rate for multiplicative).
    season : numpy.ndarray or None
        Initial seasonal states, one per season position ``t mod m``.
    """

    spec: ModelSpec
    alpha: float
    beta: Optional[float]
    gamma: Optional[float]
    phi: Optional[float]
    level: float
    trend: Optional[float]
    season: Optional[np.ndarray]

    @classmethod
    def create(
        cls,
        spec,
        alpha,
        level,
        beta=None,
        gamma=None,
        phi=None,
        trend=None,
        season=None,
    ):
        """
        Build a parameter set, failing fast on inadmissible values.

        Raises
        ------
        InvalidParametersError
            If a parameter is missing, superfluous, non-finite or outside the
            usual ETS region (box bounds, ``beta < alpha``,
            ``gamma < 1 - alpha``, positive multiplicative states).
        """
        # Presence must match the model structure
        if spec.is_trendy != (beta is not None) or spec.is_trendy != (
            trend is not None
        ):
            raise InvalidParametersError(
                f"{spec.name}: beta and initial trend must be given iff the model "
                "has a trend"
            )
        if spec.is_seasonal != (gamma is not None) or spec.is_seasonal != (
            season is not None
        ):
            raise InvalidParametersError(
                f"{spec.name}: gamma and initial seasonals must be given iff the "
                "model is seasonal"
            )
        if spec.damped != (phi is not None):
            raise InvalidParametersError(
                f"{spec.name}: phi must be given iff the trend is damped"
            )

        alpha = float(alpha)
        _check_bounds("alpha", alpha, ALPHA_BOUNDS)
        if beta is not None:
            beta = float(beta)
            _check_bounds("beta", beta, BETA_BOUNDS)
            if beta >= alpha:
                raise InvalidParametersError(f"beta={beta} must be below alpha={alpha}")
        if gamma is not None:
            gamma = float(gamma)
            _check_bounds("gamma", gamma, GAMMA_BOUNDS)
            if gamma >= 1 - alpha:
                raise InvalidParametersError(
                    f"gamma={gamma} must be below 1 - alpha={1 - alpha}"
                )
        if phi is not None:
            phi = float(phi)
            _check_bounds("phi", phi, PHI_BOUNDS)

        level = float(level)
        if not np.isfinite(level):
            raise InvalidParametersError("Initial level must be finite")
        if spec.error == "M" and level <= 0:
            raise InvalidParametersError(
                "Initial level must be positive for multiplicative error"
            )
        if trend is not None:
            trend = float(trend)
            if not np.isfinite(trend):
                raise InvalidParametersError("Initial trend must be finite")
            if spec.trend == "M" and trend <= 0:
                raise InvalidParametersError(
                    "Initial trend must be positive for multiplicative trend"
                )
            if spec.trend == "M" and level <= 0:
                raise InvalidParametersError(
                    "Initial level must be positive for multiplicative trend"
                )
        if season is not None:
            season = np.array(season, dtype=float)
            if season.ndim != 1 or season.size < 2:
                raise InvalidParametersError(
                    "Initial seasonal states must be a vector of length >= 2"
                )
            if not np.all(np.isfinite(season)):
                raise InvalidParametersError("Initial seasonal states must be finite")
            if spec.season == "M" and np.any(season <= 0):
                raise InvalidParametersError(
                    "Initial seasonal states must be positive for multiplicative "
                    "seasonality"
                )
            season.flags.writeable = False

        return cls(spec, alpha, beta, gamma, phi, level, trend, season)

    @property
    def seasonal_period(self):
        return 1 if self.season is None else self.season.shape[0]

    @property
    def phi_value(self):
        """Damping factor to use in the recursion (1 when undamped)."""
        return 1.0 if self.phi is None else self.phi

    def initial_state(self):
        """Initial state vector laid out as ``[level, trend?, s_0 .. s_{m-1}]``."""
        parts = [self.level]
        if self.trend is not None:
            parts.append(self.trend)
        state = np.array(parts, dtype=float)
        if self.season is not None:
            state = np.concatenate([state, self.season])
        return state

    def to_dict(self) -> Dict[str, Any]:
        """Plain-python view of the parameters (JSON friendly)."""
        return {
            "alpha": self.alpha,
            "beta": self.beta,
            "gamma": self.gamma,
            "phi": self.phi,
            "initial_level": self.level,
            "initial_trend": self.trend,
            "initial_seasonal": None if self.season is None else self.season.tolist(),
        }

    @classmethod
    def from_dict(cls, spec, data):
        """Inverse of :meth:`to_dict`."""
        return cls.create(
            spec,
            alpha=data["alpha"],
            level=data["initial_level"],
            beta=data.get("beta"),
            gamma=data.get("gamma"),
            phi=data.get("phi"),
            trend=data.get("initial_trend"),
            season=data.get("initial_seasonal"),
        )
