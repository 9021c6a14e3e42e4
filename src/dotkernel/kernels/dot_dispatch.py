"""
Checked entry points and length dispatch for the Numba dot kernels.

The raw kernels in dot_numba trust their caller. This module is that caller:
it checks buffer types and bounds, then routes short unit-offset products to
the fallthrough kernel and everything else to the unrolled kernel. The
unrolled kernel is correct for every length; the small kernel is only a
fast path and is never reached with a length it cannot handle.
"""

import operator

import numpy as np

from dotkernel.kernels.dot_numba import (
    MAX_SMALL_LENGTH,
    dot_f32,
    dot_f64,
    small_dot_f32,
    small_dot_f64,
)


class DotKernelError(Exception):
    """Base class for dot kernel contract violations."""


class OutOfBoundsError(DotKernelError, IndexError):
    """Negative length/offset, or offset + length past the end of a buffer."""


class OutOfRangeError(DotKernelError, ValueError):
    """Small kernel called with a length above MAX_SMALL_LENGTH."""


_SMALL_KERNELS = {
    np.dtype(np.float64): small_dot_f64,
    np.dtype(np.float32): small_dot_f32,
}

_GENERAL_KERNELS = {
    np.dtype(np.float64): dot_f64,
    np.dtype(np.float32): dot_f32,
}


def select_kernel(dtype, small=False):
    """Return the raw kernel for `dtype` (float32/float64)."""
    dtype = np.dtype(dtype)
    table = _SMALL_KERNELS if small else _GENERAL_KERNELS
    if dtype not in table:
        raise TypeError(f"Unsupported dtype {dtype}, expected float32 or float64")
    return table[dtype]


def _check_buffers(a, b):
    if not isinstance(a, np.ndarray) or not isinstance(b, np.ndarray):
        raise TypeError(
            f"Expected numpy arrays, got {type(a).__name__} and {type(b).__name__}"
        )
    if a.ndim != 1 or b.ndim != 1:
        raise TypeError(f"Expected 1D buffers, got ndim={a.ndim} and ndim={b.ndim}")
    if a.dtype != b.dtype:
        raise TypeError(f"Dtype mismatch: a.dtype={a.dtype} != b.dtype={b.dtype}")
    if a.dtype not in _GENERAL_KERNELS:
        raise TypeError(f"Unsupported dtype {a.dtype}, expected float32 or float64")


def _as_index(name, value):
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}") from None


def _resolve_length(a, b, offset_a, offset_b, length):
    offset_a = _as_index("offset_a", offset_a)
    offset_b = _as_index("offset_b", offset_b)
    if offset_a < 0 or offset_b < 0:
        raise OutOfBoundsError(f"Negative offset: offset_a={offset_a}, offset_b={offset_b}")
    if length is None:
        length = max(min(a.shape[0] - offset_a, b.shape[0] - offset_b), 0)
    else:
        length = _as_index("length", length)
    if length < 0:
        raise OutOfBoundsError(f"Negative length: {length}")
    if offset_a + length > a.shape[0]:
        raise OutOfBoundsError(
            f"a too short: offset_a + length = {offset_a + length} > len(a) = {a.shape[0]}"
        )
    if offset_b + length > b.shape[0]:
        raise OutOfBoundsError(
            f"b too short: offset_b + length = {offset_b + length} > len(b) = {b.shape[0]}"
        )
    return offset_a, offset_b, length


def small_dot(a, b, length=None):
    """
    Checked fallthrough dot product of a[:length] and b[:length].

    Args:
        a: 1D numpy array, dtype float32 or float64
        b: 1D numpy array, same dtype as a
        length: number of terms in [0, MAX_SMALL_LENGTH], defaults to len(a)

    Returns:
        Scalar dot product

    Raises:
        TypeError: buffers are not matching float32/float64 1D arrays, or a
            length/offset is not an integer
        OutOfRangeError: length > MAX_SMALL_LENGTH
        OutOfBoundsError: negative length or a buffer shorter than length
    """
    _check_buffers(a, b)
    length = a.shape[0] if length is None else _as_index("length", length)
    if length > MAX_SMALL_LENGTH:
        raise OutOfRangeError(
            f"length={length} exceeds MAX_SMALL_LENGTH={MAX_SMALL_LENGTH}"
        )
    _, _, length = _resolve_length(a, b, 0, 0, length)
    return _SMALL_KERNELS[a.dtype](a, b, length)


def dot(a, b, offset_a=0, offset_b=0, length=None):
    """
    Checked unrolled dot product of a[offset_a:offset_a+length] and b[offset_b:offset_b+length].

    The result may differ in the last bits from a left-to-right sum.

    Raises:
        TypeError: buffers are not matching float32/float64 1D arrays, or a
            length/offset is not an integer
        OutOfBoundsError: negative length/offset or a buffer too short
    """
    _check_buffers(a, b)
    offset_a, offset_b, length = _resolve_length(a, b, offset_a, offset_b, length)
    return _GENERAL_KERNELS[a.dtype](a, offset_a, b, offset_b, length)


def dot_product(a, b, offset_a=0, offset_b=0, length=None):
    """
    Dot product with kernel selection by length.

    Zero offsets and length <= MAX_SMALL_LENGTH go to the fallthrough kernel,
    anything else to the unrolled kernel.
    """
    _check_buffers(a, b)
    offset_a, offset_b, length = _resolve_length(a, b, offset_a, offset_b, length)
    if offset_a == 0 and offset_b == 0 and length <= MAX_SMALL_LENGTH:
        return _SMALL_KERNELS[a.dtype](a, b, length)
    return _GENERAL_KERNELS[a.dtype](a, offset_a, b, offset_b, length)
