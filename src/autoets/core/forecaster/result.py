"""Container returned by ``forecaster`` and ``MSTLModel.predict``."""

import numpy as np
import pandas as pd


class ForecastResult:
    """Point forecasts of a fitted model and their prediction bounds.

    Attributes
    ----------
    mean : pd.Series
        Point forecasts over the forecast index.
    lower, upper : pd.DataFrame or None
        Interval bounds, one column per level. Columns are named by the
        quantile they hold, so level 0.95 gives ``lower[0.025]`` and
        ``upper[0.975]``. Both are None for ``interval="none"``.
    level : tuple of float
        Confidence levels as fractions, in the column order of the bounds.
    interval : str
        Interval type actually used: ``"none"``, ``"approximate"`` or
        ``"simulated"``.
    model : str
        Name of the forecasting model, e.g. ``"ETS(AAdN)"``.

    Notes
    -----
    Indexing and ``columns``/``shape``/``index`` act on
    ``to_dataframe()``, so ``result["mean"]`` works as on a frame.
    """

    __slots__ = ("mean", "lower", "upper", "level", "interval", "model")

    def __init__(self, mean, lower, upper, level, interval, model=None):
        self.mean = mean
        self.lower = lower
        self.upper = upper
        self.level = level
        self.interval = interval
        self.model = model

    def __len__(self):
        return len(self.mean)

    def __repr__(self):
        return repr(self.to_dataframe())

    def __getitem__(self, key):
        return self.to_dataframe()[key]

    @property
    def index(self):
        return self.mean.index

    @property
    def columns(self):
        return self.to_dataframe().columns

    @property
    def shape(self):
        return self.to_dataframe().shape

    def _column(self, level):
        """Position of ``level`` (fraction or percentage) among the bounds."""
        if 1 < level < 100:
            level = level / 100
        if self.lower is not None:
            matches = np.flatnonzero(np.isclose(self.level, level, rtol=0, atol=1e-8))
            if matches.size:
                return int(matches[0])
        raise KeyError(f"No interval with level {level} in {self.level}")

    def width(self, level):
        """
        Interval width ``upper - lower`` per forecast step.

        Parameters
        ----------
        level : float
            One of ``self.level``; percentages such as 95 are accepted.

        Returns
        -------
        pd.Series

        Raises
        ------
        KeyError
            If the result has no interval at that level.
        """
        i = self._column(level)
        return self.upper.iloc[:, i] - self.lower.iloc[:, i]

    def to_dataframe(self):
        """One frame with ``mean``, ``lower_<q>`` and ``upper_<q>`` columns."""
        frames = [self.mean.rename("mean").to_frame()]
        for prefix, bounds in (("lower", self.lower), ("upper", self.upper)):
            if bounds is not None:
                frames.append(bounds.add_prefix(f"{prefix}_").set_axis(self.index))
        return pd.concat(frames, axis=1)

    def to_dict(self):
        """Lists keyed by level, e.g. ``{"mean": [...], "lower": {0.95: [...]}}``."""
        lower, upper = {}, {}
        if self.lower is not None:
            for i, lv in enumerate(self.level):
                lower[lv] = self.lower.iloc[:, i].tolist()
                upper[lv] = self.upper.iloc[:, i].tolist()
        return {
            "model": self.model,
            "interval": self.interval,
            "mean": np.asarray(self.mean, dtype=float).tolist(),
            "lower": lower,
            "upper": upper,
        }
