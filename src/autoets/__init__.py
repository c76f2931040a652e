from autoets.core.errors import (
    AutoETSError,
    FitError,
    InputError,
    InvalidHorizonError,
    InvalidLevelError,
    InvalidModelError,
    InvalidParametersError,
    InvalidPeriodError,
    NonFiniteInputError,
    NonFiniteStateError,
    NotConvergedError,
    NoViableModelError,
    SeriesTooShortError,
)
from autoets.core.ets import AutoETS
from autoets.core.fitted import FittedModel
from autoets.core.forecaster.result import ForecastResult
from autoets.core.interface import fit, forecast, model_from_summary, model_summary
from autoets.core.model_spec import ModelSpec
from autoets.core.parameters import Parameters
from autoets.mstl import MSTLModel, mstl_decompose

__all__ = [
    "AutoETS",
    "fit",
    "forecast",
    "model_summary",
    "model_from_summary",
    "ModelSpec",
    "Parameters",
    "FittedModel",
    "ForecastResult",
    "MSTLModel",
    "mstl_decompose",
    "AutoETSError",
    "InputError",
    "SeriesTooShortError",
    "NonFiniteInputError",
    "InvalidPeriodError",
    "InvalidHorizonError",
    "InvalidLevelError",
    "InvalidModelError",
    "InvalidParametersError",
    "FitError",
    "NonFiniteStateError",
    "NotConvergedError",
    "NoViableModelError",
]
