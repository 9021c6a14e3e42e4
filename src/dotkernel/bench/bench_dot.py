"""
Benchmark script for dot-product kernels.
Tests baseline, NumPy, Numba naive, Numba unrolled and the small fallthrough kernel.
"""

import os
import time
from pathlib import Path

# Set thread limits BEFORE importing NumPy to prevent BLAS thread contention
# This ensures fair comparison and stable results
os.environ["OMP_NUM_THREADS"] = "1"
os.environ["MKL_NUM_THREADS"] = "1"
os.environ["OPENBLAS_NUM_THREADS"] = "1"
os.environ["NUMEXPR_NUM_THREADS"] = "1"

import numpy as np
import pandas as pd

from dotkernel.kernels.dot_baseline import dot_baseline
from dotkernel.kernels.dot_numpy import dot_numpy
from dotkernel.kernels.dot_numba import (
    MAX_SMALL_LENGTH,
    dot_f32,
    dot_f64,
    dot_naive_f32,
    dot_naive_f64,
    small_dot_f32,
    small_dot_f64,
    verify_correctness,
)


KERNELS = {
    "float64": {
        "naive": dot_naive_f64,
        "unrolled": dot_f64,
        "small": small_dot_f64,
    },
    "float32": {
        "naive": dot_naive_f32,
        "unrolled": dot_f32,
        "small": small_dot_f32,
    },
}


def _time_kernel(fn, num_warmup, num_runs):
    """Run fn num_warmup times untimed, then num_runs times timed. Returns (result, times)."""
    result = None
    for _ in range(num_warmup):
        result = fn()

    times = []
    for _ in range(num_runs):
        t_start = time.perf_counter()
        result = fn()
        t_end = time.perf_counter()
        times.append(t_end - t_start)

    return result, np.array(times)


def _record(kernel, precision, length, times):
    # Two FLOPs (multiply + add) per term
    flops = 2 * length
    median = np.median(times)
    return {
        'kernel': kernel,
        'precision': precision,
        'length': length,
        'flops': flops,
        'bytes_moved': 2 * length * np.dtype(precision).itemsize,
        'latency_us': median * 1e6,
        'latency_p50_us': np.percentile(times, 50) * 1e6,
        'latency_p95_us': np.percentile(times, 95) * 1e6,
        'latency_p99_us': np.percentile(times, 99) * 1e6,
        'throughput_mflops': (flops / 1e6) / median if median > 0 else float('nan'),
    }


def benchmark_dot(lengths, precisions=("float64", "float32"), num_warmup=3, num_runs=100,
                  baseline_max_length=100_000):
    """
    Benchmark dot-product kernels.

    Args:
        lengths: List of vector lengths
        precisions: Element types to test ("float64", "float32")
        num_warmup: Number of warmup runs for JIT compilation
        num_runs: Number of timed runs
        baseline_max_length: Skip the pure Python loop above this length

    Returns:
        DataFrame with benchmark results
    """
    results = []

    for precision in precisions:
        kernels = KERNELS[precision]

        for length in lengths:
            print(f"\nBenchmarking dot: length={length}, precision={precision}")

            # Generate test data - contiguous buffers of the requested precision
            np.random.seed(42)
            a = np.ascontiguousarray(np.random.randn(length).astype(precision))
            b = np.ascontiguousarray(np.random.randn(length).astype(precision))

            # 1. Baseline (pure Python)
            print("  Testing baseline (pure Python)...")
            try:
                if length <= baseline_max_length:
                    result, times = _time_kernel(lambda: dot_baseline(a, b), 1, max(1, num_runs // 10))
                    if not verify_correctness(result, a, b):
                        raise AssertionError(f"Baseline correctness check failed: {result}")
                    results.append(_record('baseline', precision, length, times))
                else:
                    print(f"    Skipping baseline (problem too large)")
            except Exception as e:
                print(f"    Error: {e}")

            # 2. NumPy
            print("  Testing NumPy (BLAS)...")
            try:
                result, times = _time_kernel(lambda: dot_numpy(a, b), num_warmup, num_runs)
                results.append(_record('numpy', precision, length, times))
            except Exception as e:
                print(f"    Error: {e}")

            # 3. Numba single accumulator and 8-way unrolled
            for name in ("naive", "unrolled"):
                print(f"  Testing Numba ({name})...")
                try:
                    kernel = kernels[name]
                    result, times = _time_kernel(lambda: kernel(a, 0, b, 0, length), num_warmup, num_runs)
                    if not verify_correctness(result, a, b):
                        raise AssertionError(f"Numba {name} correctness check failed: {result}")
                    results.append(_record(f'numba_{name}', precision, length, times))
                except Exception as e:
                    print(f"    Error: {e}")

            # 4. Fallthrough kernel, only defined for short vectors
            if length <= MAX_SMALL_LENGTH:
                print("  Testing Numba (small fallthrough)...")
                try:
                    kernel = kernels["small"]
                    result, times = _time_kernel(lambda: kernel(a, b, length), num_warmup, num_runs)
                    if not verify_correctness(result, a, b):
                        raise AssertionError(f"Small kernel correctness check failed: {result}")
                    results.append(_record('numba_small', precision, length, times))
                except Exception as e:
                    print(f"    Error: {e}")

    return pd.DataFrame(results)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Benchmark dot-product kernels')
    parser.add_argument('--lengths', type=int, nargs='+',
                        default=[1, 4, 8, 16, 64, 256, 1024, 4096, 65536, 1_048_576],
                        help='Vector lengths to benchmark')
    parser.add_argument('--precision', choices=['float64', 'float32', 'both'], default='both',
                        help='Element type to benchmark')
    parser.add_argument('--warmup', type=int, default=3, help='Warmup runs per kernel')
    parser.add_argument('--runs', type=int, default=100, help='Timed runs per kernel')
    parser.add_argument('--output', type=str, default=None,
                        help='CSV output path (default: results/dot_results.csv)')
    args = parser.parse_args()

    precisions = ("float64", "float32") if args.precision == 'both' else (args.precision,)

    print("=" * 70)
    print("Dot Product Benchmark Suite - SINGLE-THREADED MODE")
    print("=" * 70)
    print("  - NumPy BLAS: 1 thread (limited via env vars set before import)")
    print("  - Numba: 1 thread (set via set_num_threads)")
    print(f"  - Small kernel used for length <= {MAX_SMALL_LENGTH}")
    print("=" * 70)

    # Set Numba threads to 1 before any JIT compilation
    from numba import set_num_threads
    set_num_threads(1)

    df = benchmark_dot(args.lengths, precisions=precisions,
                       num_warmup=args.warmup, num_runs=args.runs)
    df['mode'] = 'single_threaded'

    # Save results
    if args.output is None:
        output_dir = Path.cwd() / "results"
        output_dir.mkdir(exist_ok=True)
        output_path = output_dir / "dot_results.csv"
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    print(f"\nResults saved to: {output_path}")

    # Print summary
    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print(df.to_string(index=False))
