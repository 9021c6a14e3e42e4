from importlib.metadata import PackageNotFoundError, version

from dotkernel.kernels.dot_dispatch import (
    DotKernelError,
    OutOfBoundsError,
    OutOfRangeError,
    dot,
    dot_product,
    select_kernel,
    small_dot,
)
from dotkernel.kernels.dot_numba import MAX_SMALL_LENGTH, UNROLL_WIDTH


try:
    __version__ = version("dotkernel")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "MAX_SMALL_LENGTH",
    "UNROLL_WIDTH",
    "DotKernelError",
    "OutOfBoundsError",
    "OutOfRangeError",
    "dot",
    "dot_product",
    "select_kernel",
    "small_dot",
    "__version__",
]
