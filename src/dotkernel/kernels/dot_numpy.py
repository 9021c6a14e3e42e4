"""
NumPy vectorized dot product.
Uses np.dot (BLAS-backed) on the offset slices.
"""

import numpy as np


def dot_numpy(a, b, offset_a=0, offset_b=0, length=None):
    """
    Compute the dot product of a[offset_a:offset_a+length] and b[offset_b:offset_b+length].

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
    return np.dot(a[offset_a:offset_a + length], b[offset_b:offset_b + length])


if __name__ == "__main__":
    from dotkernel.kernels.dot_numba import verify_correctness

    np.random.seed(42)
    n = 4096
    a = np.random.randn(n).astype(np.float32)
    b = np.random.randn(n).astype(np.float32)

    print("Running NumPy dot...")
    result = dot_numpy(a, b)

    if verify_correctness(result, a, b):
        print("✓ Correctness check passed!")
    else:
        print("✗ Correctness check failed!")
