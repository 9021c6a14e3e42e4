"""
Utility script to plot dot benchmark results from CSV files.
Usage: python -m dotkernel.bench.plot_results [results_dir]
"""

import sys
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from pathlib import Path


MARKERS = {
    'baseline': 'o',
    'numpy': 's',
    'numba_naive': 'v',
    'numba_unrolled': '^',
    'numba_small': 'd',
}


def plot_dot_results(results_dir, plots_dir=None):
    """Plot dot benchmark results, one figure per precision. Returns saved paths."""
    results_dir = Path(results_dir)
    plots_dir = Path(plots_dir) if plots_dir is not None else results_dir / "plots"
    csv_path = results_dir / "dot_results.csv"
    if not csv_path.exists():
        print(f"Results file not found: {csv_path}")
        return []

    plots_dir.mkdir(parents=True, exist_ok=True)
    df = pd.read_csv(csv_path)
    saved = []

    for precision, group in df.groupby('precision'):
        fig, axes = plt.subplots(1, 2, figsize=(14, 5))

        for kernel, data in group.groupby('kernel'):
            data = data.sort_values('length')
            marker = MARKERS.get(kernel, 'o')
            axes[0].loglog(data['length'], data['latency_us'], '-', label=kernel, marker=marker)
            axes[1].semilogx(data['length'], data['throughput_mflops'], '-', label=kernel, marker=marker)

        # Latency comparison
        axes[0].set_xlabel('Vector Length')
        axes[0].set_ylabel('Latency (us)')
        axes[0].set_title(f'Dot Latency Comparison ({precision})')
        axes[0].legend()
        axes[0].grid(True, alpha=0.3)

        # Throughput comparison
        axes[1].set_xlabel('Vector Length')
        axes[1].set_ylabel('Throughput (MFLOPS)')
        axes[1].set_title(f'Dot Throughput Comparison ({precision})')
        axes[1].legend()
        axes[1].grid(True, alpha=0.3)

        plt.tight_layout()
        out_path = plots_dir / f"dot_results_{precision}.png"
        plt.savefig(out_path, dpi=150)
        print(f"Saved plot: {out_path}")
        plt.close(fig)
        saved.append(out_path)

    return saved


if __name__ == "__main__":
    results_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path.cwd() / "results"

    print("Generating plots from benchmark results...")
    plot_dot_results(results_dir)
    print("Plot generation complete!")
