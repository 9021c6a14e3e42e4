"""
Baseline dot product using a pure Python loop.
Single accumulator, strict left-to-right order: the reference the
reordered kernels are checked against.
"""

import numpy as np


def dot_baseline(a, b, offset_a=0, offset_b=0, length=None):
    """
    Compute sum(a[offset_a + i] * b[offset_b + i] for i in range(length)).

    Args:
        a: 1D numpy array, dtype float32 or float64
        b: 1D numpy array, same dtype as a
        offset_a: start index into a
        offset_b: start index into b
        length: number of terms, defaults to what both buffers allow

    Returns:
        Scalar of the input dtype
    """
    if length is None:
        length = min(len(a) - offset_a, len(b) - offset_b)

    # Accumulate in the input precision, one term at a time
    accumulator = np.zeros((), dtype=a.dtype)[()]
    for i in range(length):
        accumulator += a[offset_a + i] * b[offset_b + i]

    return accumulator


if __name__ == "__main__":
    from dotkernel.kernels.dot_numba import verify_correctness

    np.random.seed(42)
    n = 4096
    a = np.random.randn(n).astype(np.float32)
    b = np.random.randn(n).astype(np.float32)

    print("Running baseline dot...")
    result = dot_baseline(a, b)

    if verify_correctness(result, a, b):
        print("✓ Correctness check passed!")
    else:
        print("✗ Correctness check failed!")
