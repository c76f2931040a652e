"""
Immutable container for one estimated ETS model.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from autoets.core.fitter import ets_fitter
from autoets.core.utils.ic import AIC, AICc, BIC, ic_function


def _read_only(array):
    array = np.array(array, dtype=float)
    array.flags.writeable = False
    return array


def n_param_estimated(spec, seasonal_period):
    """
    Number of estimated parameters of a model.

    Smoothing parameters, free initial states and the residual variance.
    """
    return spec.n_smoothing + spec.n_initial_states(seasonal_period) + 1


def residual_variance(sse, nobs, n_params):
    """Unbiased residual variance, falling back to ``sse / nobs``."""
    df = nobs - n_params
    if df <= 0:
        return sse / nobs
    return sse / df


@dataclass(frozen=True, eq=False)
class FittedModel:
    """
    An estimated ETS model.

    Instances are created by :meth:`from_parameters` and never change
    afterwards. All arrays are read-only.

    Attributes
    ----------
    spec : ModelSpec
        Model specification.
    params : Parameters
        Estimated smoothing parameters and initial states.
    y : numpy.ndarray
        In-sample observations.
    seasonal_period : int
        Seasonal period of the series.
    fitted : numpy.ndarray
        One-step-ahead in-sample predictions.
    residuals : numpy.ndarray
        In-sample residuals (relative for multiplicative error).
    states : numpy.ndarray
        State matrix, row ``t`` being the state before observation ``t``.
    final_state : numpy.ndarray
        State after the last observation.
    loglik : float
        Log-likelihood at the estimate.
    sse : float
        Sum of squared residuals.
    sigma2 : float
        Residual variance.
    n_params : int
        Number of estimated parameters, including the variance.
    aic, aicc, bic : float
        Information criteria.
    index : pandas.Index, optional
        Index of the input series when it was a ``pandas.Series``.
    """

    spec: object
    params: object
    y: np.ndarray
    seasonal_period: int
    fitted: np.ndarray
    residuals: np.ndarray
    states: np.ndarray
    final_state: np.ndarray
    loglik: float
    sse: float
    sigma2: float
    n_params: int
    aic: float
    aicc: float
    bic: float
    index: Optional[pd.Index] = None

    @classmethod
    def from_parameters(cls, spec, params, y, seasonal_period=1, index=None):
        """
        Replay the series with the given parameters and collect the statistics.

        Raises
        ------
        NonFiniteStateError
            If the recursion breaks down for these parameters.
        """
        y = _read_only(y)
        result = ets_fitter(spec, params, y)
        nobs = y.shape[0]
        k = n_param_estimated(spec, seasonal_period)
        return cls(
            spec=spec,
            params=params,
            y=y,
            seasonal_period=seasonal_period,
            fitted=_read_only(result.fitted),
            residuals=_read_only(result.residuals),
            states=_read_only(result.states),
            final_state=_read_only(result.final_state),
            loglik=result.loglik,
            sse=result.sse,
            sigma2=residual_variance(result.sse, nobs, k),
            n_params=k,
            aic=AIC(result.loglik, nobs, k),
            aicc=AICc(result.loglik, nobs, k),
            bic=BIC(result.loglik, nobs, k),
            index=index,
        )

    @property
    def nobs(self):
        return self.y.shape[0]

    @property
    def name(self):
        return self.spec.name

    def ic(self, ic_name):
        """Value of the information criterion ``"AIC"``, ``"AICc"`` or ``"BIC"``."""
        return ic_function(ic_name, self.loglik, self.nobs, self.n_params)

    def replay(self):
        """
        Run the recursion again from the stored parameters and initial state.

        Returns
        -------
        FitterResult
            Same log-likelihood and SSE as stored on the model.
        """
        return ets_fitter(self.spec, self.params, self.y)

    def __repr__(self):
        return (
            f"FittedModel({self.spec}, nobs={self.nobs}, "
            f"loglik={self.loglik:.4f}, aicc={self.aicc:.4f})"
        )
