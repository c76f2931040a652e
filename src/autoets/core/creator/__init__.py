from .filler import filler
from .initialiser import initialiser
from .initialization import initialize_states

__all__ = ["filler", "initialiser", "initialize_states"]
