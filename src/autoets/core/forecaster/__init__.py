from .forecaster import forecaster
from .result import ForecastResult

__all__ = ["forecaster", "ForecastResult"]
