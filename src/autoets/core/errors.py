"""
Exception hierarchy for autoets.

Input errors are raised before any estimation happens. Fit errors are raised
by a single candidate model and are recovered from by the selector. Only
``NoViableModelError`` escapes ``fit`` on otherwise well-formed input.
"""


class AutoETSError(Exception):
    """Base class for all autoets errors."""


class InputError(AutoETSError, ValueError):
    """The caller supplied invalid data or arguments."""


class SeriesTooShortError(InputError):
    """The series has too few observations for the requested model."""


class NonFiniteInputError(InputError):
    """The series contains NaN or infinite values."""


class InvalidPeriodError(InputError):
    """The seasonal period is not a positive integer."""


class InvalidHorizonError(InputError):
    """The forecast horizon is not a positive integer."""


class InvalidLevelError(InputError):
    """A confidence level lies outside (0, 1)."""


class InvalidModelError(InputError):
    """The model string cannot be parsed."""


class InvalidParametersError(AutoETSError, ValueError):
    """A parameter vector lies outside the admissible region."""


class FitError(AutoETSError, RuntimeError):
    """A single model specification could not be fitted."""


class NonFiniteStateError(FitError):
    """The recursion produced a non-finite state, prediction or residual."""


class NotConvergedError(FitError):
    """The optimiser exhausted its budget before meeting the tolerance."""


class NoViableModelError(AutoETSError, RuntimeError):
    """No candidate model produced a finite, converged fit.

    Parameters
    ----------
    message : str
        Error message.
    failures : dict, optional
        Mapping of model name to the reason it failed.
    """

    def __init__(self, message, failures=None):
        super().__init__(message)
        self.failures = dict(failures or {})
