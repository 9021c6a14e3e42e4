"""
Numba JIT dot-product micro-kernels.
Features:
- Length-specialized straight-line arms for small lengths, selected once (no loop counter)
- 8-way unrolling into eight independent accumulators
- Separate float64 and float32 routines, accumulators stay in the input precision
- Single-threaded, no validation: callers pass in-bounds buffers

Results of the unrolled kernel can differ in the last bits from a
left-to-right sum because the accumulators reorder the additions.
"""

import math

import numpy as np
from numba import njit


MAX_SMALL_LENGTH = 8
UNROLL_WIDTH = 8


@njit(cache=True)
def small_dot_f64(a, b, length):
    """
    Dot product of a[:length] and b[:length] for 0 <= length <= MAX_SMALL_LENGTH.

    The length is tested once. The arm for length k is straight-line code that
    sums the terms k-1, k-2, ..., 0, highest index first, with no loop counter.
    Lengths outside [0, MAX_SMALL_LENGTH] fall to the last arm and return 0.0,
    which is not the dot product.

    Args:
        a: 1D numpy array, dtype float64, at least `length` elements
        b: 1D numpy array, dtype float64, at least `length` elements
        length: number of terms

    Returns:
        float64 scalar
    """
    if length == 8:
        return (a[7] * b[7] + a[6] * b[6] + a[5] * b[5] + a[4] * b[4]
                + a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0])
    elif length == 7:
        return (a[6] * b[6] + a[5] * b[5] + a[4] * b[4]
                + a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0])
    elif length == 6:
        return (a[5] * b[5] + a[4] * b[4]
                + a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0])
    elif length == 5:
        return a[4] * b[4] + a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0]
    elif length == 4:
        return a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0]
    elif length == 3:
        return a[2] * b[2] + a[1] * b[1] + a[0] * b[0]
    elif length == 2:
        return a[1] * b[1] + a[0] * b[0]
    elif length == 1:
        return a[0] * b[0]
    else:
        return 0.0


@njit(cache=True)
def small_dot_f32(a, b, length):
    """
    float32 version of small_dot_f64. Every arm sums in float32.
    WARNING: returns 0.0 for length outside [0, MAX_SMALL_LENGTH].
    """
    if length == 8:
        return (a[7] * b[7] + a[6] * b[6] + a[5] * b[5] + a[4] * b[4]
                + a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0])
    elif length == 7:
        return (a[6] * b[6] + a[5] * b[5] + a[4] * b[4]
                + a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0])
    elif length == 6:
        return (a[5] * b[5] + a[4] * b[4]
                + a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0])
    elif length == 5:
        return a[4] * b[4] + a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0]
    elif length == 4:
        return a[3] * b[3] + a[2] * b[2] + a[1] * b[1] + a[0] * b[0]
    elif length == 3:
        return a[2] * b[2] + a[1] * b[1] + a[0] * b[0]
    elif length == 2:
        return a[1] * b[1] + a[0] * b[0]
    elif length == 1:
        return a[0] * b[0]
    else:
        return np.float32(0.0)


@njit(cache=True)
def dot_f64(a, offset_a, b, offset_b, length):
    """
    Compute sum(a[offset_a + i] * b[offset_b + i] for i in range(length)).

    Unrolled kernel:
    - Prologue: the first length % 8 terms go into accumulator 0
    - Main loop: blocks of 8 terms, one independent accumulator per lane
    - Reduction: pairwise sum of the 8 accumulators

    Splitting the running sum over eight accumulators breaks the serial
    add dependency so consecutive multiply-adds can overlap in the pipeline.

    Args:
        a: 1D numpy array, dtype float64
        offset_a: start index into a
        b: 1D numpy array, dtype float64
        offset_b: start index into b
        length: number of terms, >= 0

    Returns:
        float64 scalar, 0.0 for length == 0
    """
    remainder = length % UNROLL_WIDTH
    full_groups = length // UNROLL_WIDTH

    acc0 = 0.0
    acc1 = 0.0
    acc2 = 0.0
    acc3 = 0.0
    acc4 = 0.0
    acc5 = 0.0
    acc6 = 0.0
    acc7 = 0.0

    ia = offset_a
    ib = offset_b

    # Prologue
    for i in range(remainder):
        acc0 += a[ia + i] * b[ib + i]
    ia += remainder
    ib += remainder

    # Main loop, 8 lanes per block
    for _ in range(full_groups):
        acc0 += a[ia] * b[ib]
        acc1 += a[ia + 1] * b[ib + 1]
        acc2 += a[ia + 2] * b[ib + 2]
        acc3 += a[ia + 3] * b[ib + 3]
        acc4 += a[ia + 4] * b[ib + 4]
        acc5 += a[ia + 5] * b[ib + 5]
        acc6 += a[ia + 6] * b[ib + 6]
        acc7 += a[ia + 7] * b[ib + 7]
        ia += UNROLL_WIDTH
        ib += UNROLL_WIDTH

    return ((acc0 + acc1) + (acc2 + acc3)) + ((acc4 + acc5) + (acc6 + acc7))


@njit(cache=True)
def dot_f32(a, offset_a, b, offset_b, length):
    """
    float32 version of dot_f64. All eight accumulators are float32.
    """
    remainder = length % UNROLL_WIDTH
    full_groups = length // UNROLL_WIDTH

    acc0 = np.float32(0.0)
    acc1 = np.float32(0.0)
    acc2 = np.float32(0.0)
    acc3 = np.float32(0.0)
    acc4 = np.float32(0.0)
    acc5 = np.float32(0.0)
    acc6 = np.float32(0.0)
    acc7 = np.float32(0.0)

    ia = offset_a
    ib = offset_b

    for i in range(remainder):
        acc0 += a[ia + i] * b[ib + i]
    ia += remainder
    ib += remainder

    for _ in range(full_groups):
        acc0 += a[ia] * b[ib]
        acc1 += a[ia + 1] * b[ib + 1]
        acc2 += a[ia + 2] * b[ib + 2]
        acc3 += a[ia + 3] * b[ib + 3]
        acc4 += a[ia + 4] * b[ib + 4]
        acc5 += a[ia + 5] * b[ib + 5]
        acc6 += a[ia + 6] * b[ib + 6]
        acc7 += a[ia + 7] * b[ib + 7]
        ia += UNROLL_WIDTH
        ib += UNROLL_WIDTH

    return ((acc0 + acc1) + (acc2 + acc3)) + ((acc4 + acc5) + (acc6 + acc7))


# Single-accumulator versions for comparison
@njit(cache=True)
def dot_naive_f64(a, offset_a, b, offset_b, length):
    """Left-to-right loop with one accumulator."""
    acc = 0.0
    for i in range(length):
        acc += a[offset_a + i] * b[offset_b + i]
    return acc


@njit(cache=True)
def dot_naive_f32(a, offset_a, b, offset_b, length):
    acc = np.float32(0.0)
    for i in range(length):
        acc += a[offset_a + i] * b[offset_b + i]
    return acc


def reorder_tolerance(a, b, offset_a=0, offset_b=0, length=None):
    """
    Error bound for comparing a reordered sum against the exact dot product.

    Uses (length + 1) * eps * sum(|a_i * b_i|), with eps of the buffer dtype,
    doubled for slack, plus the smallest normal number so length 0 passes.
    """
    if length is None:
        length = min(len(a) - offset_a, len(b) - offset_b)
    eps = np.finfo(a.dtype).eps
    tiny = np.finfo(a.dtype).tiny
    xa = np.asarray(a[offset_a:offset_a + length], dtype=np.float64)
    xb = np.asarray(b[offset_b:offset_b + length], dtype=np.float64)
    magnitude = float(np.sum(np.abs(xa * xb)))
    return 2.0 * (length + 1) * float(eps) * magnitude + float(tiny)


def verify_correctness(result, a, b, offset_a=0, offset_b=0, length=None):
    """Verify that result matches the exact dot product within reordering error."""
    if length is None:
        length = min(len(a) - offset_a, len(b) - offset_b)
    xa = np.asarray(a[offset_a:offset_a + length], dtype=np.float64)
    xb = np.asarray(b[offset_b:offset_b + length], dtype=np.float64)
    # float32 products are exact in float64; fsum rounds once at the end
    exact = math.fsum((xa * xb).tolist())
    return abs(float(result) - exact) <= reorder_tolerance(a, b, offset_a, offset_b, length)


if __name__ == "__main__":
    a = np.arange(1, 9, dtype=np.float64)
    b = np.arange(8, 0, -1, dtype=np.float64)

    print("Running Numba dot kernels...")
    # Warmup / compile
    _ = small_dot_f64(a, b, 8)
    _ = dot_f64(a, 0, b, 0, 8)

    print(f"small_dot_f64: {small_dot_f64(a, b, 8)}")
    print(f"dot_f64:       {dot_f64(a, 0, b, 0, 8)}")
    print(f"dot_f32:       {dot_f32(a.astype(np.float32), 0, b.astype(np.float32), 0, 8)}")

    np.random.seed(42)
    x = np.random.randn(1027)
    y = np.random.randn(1027)
    if verify_correctness(dot_f64(x, 3, y, 3, 1024), x, y, 3, 3, 1024):
        print("Correctness check passed!")
    else:
        print("Correctness check failed!")
