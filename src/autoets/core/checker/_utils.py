import warnings


def _warn(msg, silent=False):
    """
    Emit a warning unless the caller asked for silence.

    Parameters
    ----------
    msg : str
        Warning message
    silent : bool, optional
        Whether to suppress warnings
    """
    if not silent:
        warnings.warn(msg, stacklevel=3)
