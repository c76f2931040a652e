import time
from typing import Dict, Literal, Optional, Union

import numpy as np
from numpy.typing import NDArray

from autoets.core.forecaster.forecaster import forecaster
from autoets.core.interface import select_model
from autoets.core.utils.printing import format_model_summary

IC_OPTIONS = Literal["AIC", "AICc", "BIC"]
INTERVAL_OPTIONS = Literal["prediction", "approximate", "simulated", "none"]


class AutoETS:
    """
    Automatic exponential smoothing in state-space form.

    ``AutoETS`` enumerates the admissible ETS(Error, Trend, Season) models
    for a series, estimates each by maximum likelihood and keeps the one with
    the smallest information criterion.

    **Model family**:

    - Error: additive (A) or multiplicative (M)
    - Trend: none (N), additive (A), multiplicative (M), optionally damped (d)
    - Season: none (N), additive (A) or multiplicative (M)

    Multiplicative components are only considered for strictly positive data,
    seasonal ones only when the series covers two full seasonal periods, and
    models whose parameter count leaves fewer than five spare observations are
    skipped. ETS(ANN) is always a candidate.

    Parameters
    ----------
    season_length : int, default=1
        Seasonal period (e.g. 12 for monthly data with yearly seasonality).
        1 means no seasonality.
    model : str, default="ZZZ"
        Model composition string, e.g. ``"ZZZ"`` (select everything),
        ``"AZN"`` (additive error, selected trend, no season) or ``"MAdM"``
        (fixed model).
    damped : bool or None, default=None
        Restrict trended models to damped or undamped ones. None tries both.
    ic : {"AIC", "AICc", "BIC"}, default="AICc"
        Selection criterion.
    allow_multiplicative_trend : bool, default=True
        Whether multiplicative trends are considered.
    n_jobs : int, optional
        Worker threads for estimating candidates. ``1`` runs serially.
    maxeval : int, optional
        Cost function evaluations allowed per candidate. Defaults to
        ``max(1000, 40 * n_parameters ** 2)``, with restarts from the best
        point while the likelihood still improves.
    maxtime : float, optional
        Seconds allowed per candidate.
    verbose : int, default=0
        0 is silent, 1 prints the pool and the estimation progress, 2 also
        prints every optimiser iteration.

    Attributes
    ----------
    model_ : FittedModel
        The selected model (after ``fit``).
    selection_ : SelectionResult
        All candidates with their criteria and the failure reasons.
    time_elapsed_ : float
        Seconds spent in ``fit``.

    Examples
    --------
    >>> model = AutoETS(season_length=12).fit(y)
    >>> model.model_name
    'ETS(MAdM)'
    >>> fc = model.predict(h=12, level=[0.8, 0.95])
    >>> fc.to_dataframe().head()
    """

    def __init__(
        self,
        season_length: int = 1,
        model: str = "ZZZ",
        damped: Optional[bool] = None,
        ic: IC_OPTIONS = "AICc",
        allow_multiplicative_trend: bool = True,
        n_jobs: Optional[int] = None,
        maxeval: Optional[int] = None,
        maxtime: Optional[float] = None,
        verbose: int = 0,
    ):
        self.season_length = season_length
        self.model = model
        self.damped = damped
        self.ic = ic
        self.allow_multiplicative_trend = allow_multiplicative_trend
        self.n_jobs = n_jobs
        self.maxeval = maxeval
        self.maxtime = maxtime
        self.verbose = verbose

    def fit(self, y):
        """
        Select and estimate the best model for ``y``.

        Parameters
        ----------
        y : array-like or pandas.Series
            Time series. A ``pandas.Series`` with a regular ``DatetimeIndex``
            gives date-indexed forecasts.

        Returns
        -------
        self : AutoETS
            The fitted estimator.

        Raises
        ------
        SeriesTooShortError, NonFiniteInputError, InvalidPeriodError
            On invalid input.
        NoViableModelError
            If no candidate could be fitted.
        """
        start_time = time.time()
        self.selection_ = select_model(
            y,
            seasonal_period=self.season_length,
            model=self.model,
            damped=self.damped,
            ic=self.ic,
            allow_multiplicative_trend=self.allow_multiplicative_trend,
            n_jobs=self.n_jobs,
            maxeval=self.maxeval,
            maxtime=self.maxtime,
            verbose=self.verbose,
        )
        self.model_ = self.selection_.best
        self.time_elapsed_ = time.time() - start_time
        return self

    def predict(
        self,
        h: int,
        level: Union[float, list] = 0.95,
        interval: INTERVAL_OPTIONS = "prediction",
        nsim: int = 1000,
        seed: Optional[int] = None,
    ):
        """
        Forecast the selected model.

        Parameters
        ----------
        h : int
            Forecast horizon.
        level : float or list of float, default=0.95
            Confidence level(s) in (0, 1); percentages are accepted.
        interval : str, default="prediction"
            ``"prediction"`` (analytic for purely additive models, simulated
            otherwise), ``"approximate"``, ``"simulated"`` or ``"none"``.
        nsim : int, default=1000
            Number of paths for simulated intervals.
        seed : int, optional
            Seed for simulated intervals.

        Returns
        -------
        ForecastResult
            Point forecasts (``mean``) and bounds (``lower``, ``upper``).

        Raises
        ------
        ValueError
            If the model has not been fitted yet.
        InvalidHorizonError, InvalidLevelError
            On an invalid horizon or level.
        """
        self._check_is_fitted()
        return forecaster(
            self.model_, h, level=level, interval=interval, nsim=nsim, seed=seed
        )

    # =========================================================================
    # Fitted properties
    # =========================================================================

    def _check_is_fitted(self):
        """Check if model has been fitted."""
        if getattr(self, "model_", None) is None:
            raise ValueError("Model has not been fitted. Call fit() first.")

    @property
    def model_name(self) -> str:
        """Name of the selected model, e.g. ``"ETS(AAdN)"``."""
        self._check_is_fitted()
        return str(self.model_.spec)

    @property
    def alpha(self) -> float:
        """Level smoothing parameter."""
        self._check_is_fitted()
        return self.model_.params.alpha

    @property
    def beta(self) -> Optional[float]:
        """Trend smoothing parameter, None without a trend."""
        self._check_is_fitted()
        return self.model_.params.beta

    @property
    def gamma(self) -> Optional[float]:
        """Seasonal smoothing parameter, None without seasonality."""
        self._check_is_fitted()
        return self.model_.params.gamma

    @property
    def phi(self) -> Optional[float]:
        """Damping parameter, None without a damped trend."""
        self._check_is_fitted()
        return self.model_.params.phi

    @property
    def initial_states(self) -> Dict[str, object]:
        """Estimated initial level, trend and seasonal states."""
        self._check_is_fitted()
        params = self.model_.params.to_dict()
        return {
            "level": params["initial_level"],
            "trend": params["initial_trend"],
            "seasonal": params["initial_seasonal"],
        }

    @property
    def aic(self) -> float:
        self._check_is_fitted()
        return self.model_.aic

    @property
    def aicc(self) -> float:
        self._check_is_fitted()
        return self.model_.aicc

    @property
    def bic(self) -> float:
        self._check_is_fitted()
        return self.model_.bic

    @property
    def sigma2(self) -> float:
        """Residual variance (relative for multiplicative error)."""
        self._check_is_fitted()
        return self.model_.sigma2

    @property
    def loglik(self) -> float:
        self._check_is_fitted()
        return self.model_.loglik

    @property
    def fitted(self) -> NDArray:
        """One-step-ahead in-sample predictions."""
        self._check_is_fitted()
        return self.model_.fitted

    @property
    def residuals(self) -> NDArray:
        """In-sample residuals (relative for multiplicative error)."""
        self._check_is_fitted()
        return self.model_.residuals

    @property
    def states(self) -> NDArray:
        """
        State matrix of shape ``(nobs + 1, n_states)``.

        Columns are the level, the trend (if any) and the ``m`` seasonal
        states (if any). Row ``t`` holds the states before observation ``t``,
        the last row the states after the final observation.
        """
        self._check_is_fitted()
        return self.model_.states

    @property
    def nobs(self) -> int:
        self._check_is_fitted()
        return self.model_.nobs

    @property
    def nparam(self) -> int:
        """Number of estimated parameters, including the residual variance."""
        self._check_is_fitted()
        return self.model_.n_params

    @property
    def ic_weights(self) -> Dict[str, float]:
        """Akaike weights of all fitted candidates under the selection criterion."""
        self._check_is_fitted()
        return self.selection_.ic_table()["weight"].to_dict()

    # =========================================================================
    # Display
    # =========================================================================

    def summary(self, digits: int = 4) -> str:
        """
        Generate a formatted summary of the fitted model.

        Parameters
        ----------
        digits : int, default=4
            Number of decimal places for numeric output

        Returns
        -------
        str
            Formatted model summary
        """
        self._check_is_fitted()
        return format_model_summary(
            self.model_, digits=digits, elapsed=getattr(self, "time_elapsed_", None)
        )

    def __str__(self) -> str:
        if getattr(self, "model_", None) is None:
            return f"AutoETS(model={self.model}) - not fitted"
        return self.summary()

    def __repr__(self) -> str:
        if getattr(self, "model_", None) is not None:
            return f"AutoETS({self.model_.spec}, fitted=True)"
        return (
            f"AutoETS(season_length={self.season_length}, model={self.model!r}, "
            f"fitted=False)"
        )

    def __len__(self) -> int:
        self._check_is_fitted()
        return int(np.asarray(self.model_.y).shape[0])
