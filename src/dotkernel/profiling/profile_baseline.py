"""
Profiling script for the dot kernels.
Uses cProfile to show where time goes in the pure Python loop and in the
checked entry points around the Numba kernels.
"""

import cProfile
import pstats
import numpy as np

from dotkernel.kernels.dot_baseline import dot_baseline
from dotkernel.kernels.dot_dispatch import dot_product


def profile_dot_baseline(length=65536):
    """Profile the pure Python dot loop."""
    print("Profiling baseline dot...")
    np.random.seed(42)
    a = np.random.randn(length)
    b = np.random.randn(length)

    profiler = cProfile.Profile()
    profiler.enable()
    result = dot_baseline(a, b)
    profiler.disable()

    stats = pstats.Stats(profiler)
    stats.sort_stats('cumulative')
    print("\nTop 10 functions by cumulative time:")
    stats.print_stats(10)

    return stats


def profile_dot_dispatch(length=6, calls=10_000):
    """Profile many short checked calls, where validation overhead dominates."""
    print(f"\nProfiling dot_product dispatch (length={length}, calls={calls})...")
    np.random.seed(42)
    a = np.random.randn(length)
    b = np.random.randn(length)

    # Compile outside the profiled region
    dot_product(a, b)

    profiler = cProfile.Profile()
    profiler.enable()
    for _ in range(calls):
        dot_product(a, b)
    profiler.disable()

    stats = pstats.Stats(profiler)
    stats.sort_stats('tottime')
    print("\nTop 10 functions by total time:")
    stats.print_stats(10)

    return stats


if __name__ == "__main__":
    print("=" * 60)
    print("Dot Kernel Profiling")
    print("=" * 60)

    profile_dot_baseline()
    profile_dot_dispatch()

    print("\n" + "=" * 60)
    print("Profiling complete!")
    print("=" * 60)
