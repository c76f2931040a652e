from .decomposition import MSTLDecomposition, mstl_decompose
from .model import MSTLModel

__all__ = ["MSTLDecomposition", "mstl_decompose", "MSTLModel"]
