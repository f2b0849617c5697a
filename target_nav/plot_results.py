#!/usr/bin/env python3
"""
Visualize recorded drive telemetry.

Loads telemetry.csv from a run directory and plots the commanded drive powers,
the encoder distance and the heading against time.
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .config import (
    PLOT_BLUE,
    PLOT_ORANGE,
    PLOT_TAUPE,
    TELEMETRY_FILENAME,
    TERM_BLUE,
    TERM_RESET,
)
from .data_collector import TELEMETRY_COLUMNS

TEXT_COLUMNS = ("status",)


def load_telemetry(filepath: Path) -> Dict[str, np.ndarray]:
    """Load a telemetry CSV into a dictionary of numpy arrays.

    Numeric columns become float arrays (unparseable values become NaN); the
    status column stays a string array.

    Args:
        filepath: Path to the telemetry CSV.

    Returns:
        Dictionary mapping column names to numpy arrays.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        ValueError: If the CSV headers are not the telemetry columns.
    """
    if not filepath.exists():
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    with open(filepath, newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames != TELEMETRY_COLUMNS:
            raise ValueError(f"Unexpected telemetry CSV headers: {reader.fieldnames}")
        data: Dict[str, List] = {key: [] for key in TELEMETRY_COLUMNS}
        for row in reader:
            for key in TELEMETRY_COLUMNS:
                value = row[key]
                if key in TEXT_COLUMNS:
                    data[key].append(value)
                    continue
                try:
                    data[key].append(float(value))
                except (ValueError, TypeError):
                    data[key].append(np.nan)

    return {key: np.array(values) for key, values in data.items()}


def _style_axis(ax: Axes, ylabel: str) -> None:
    ax.set_xlabel("Time (s)")
    ax.set_ylabel(ylabel)
    ax.grid(True, alpha=0.3, color=PLOT_TAUPE)


def plot_telemetry(
    data: Dict[str, np.ndarray], title: str = "Drive Telemetry", save_path: Optional[Path] = None
) -> Figure:
    """Plot drive powers, distance and yaw over time.

    Args:
        data: Telemetry arrays as returned by load_telemetry.
        title: Figure title.
        save_path: Optional path to save the figure.

    Returns:
        Matplotlib figure object.
    """
    fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 10), sharex=True)
    t = data["time"]

    ax1.plot(t, data["left"], label="Left", color=PLOT_ORANGE)
    ax1.plot(t, data["right"], label="Right", color=PLOT_BLUE)
    ax1.axhline(0.0, color=PLOT_TAUPE, linewidth=0.8)
    ax1.set_title(f"{title} - Drive Power", fontweight="bold")
    _style_axis(ax1, "Power")
    ax1.legend()

    ax2.plot(t, data["distance"], color=PLOT_ORANGE)
    ax2.set_title("Encoder Distance", fontweight="bold")
    _style_axis(ax2, "Distance (in)")

    ax3.plot(t, data["yaw"], color=PLOT_BLUE)
    ax3.set_title("Heading", fontweight="bold")
    _style_axis(ax3, "Yaw (deg)")

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_run_summary(run_dir: Path, save_plots: bool = False, show_plots: bool = True) -> Figure:
    """Generate the telemetry plot for a complete run.

    Args:
        run_dir: Directory containing telemetry.csv.
        save_plots: If True, save the plot to the run directory.
        show_plots: If True, display the plot interactively.

    Raises:
        FileNotFoundError: If the telemetry CSV is not found.
    """
    data = load_telemetry(run_dir / TELEMETRY_FILENAME)
    save_path = run_dir / "telemetry.png" if save_plots else None
    fig = plot_telemetry(data, title=run_dir.name, save_path=save_path)
    if show_plots:
        plt.show()
    else:
        plt.close(fig)
    return fig


def _run_dirs(results_dir: Path) -> List[Path]:
    return sorted(d for d in results_dir.iterdir() if d.is_dir() and d.name.startswith("run_"))


def find_latest_run(results_dir: Path) -> Path:
    """Find the most recent run directory.

    Raises:
        FileNotFoundError: If no run directories are found.
    """
    if not results_dir.exists():
        raise FileNotFoundError(f"Results directory not found: {results_dir}")

    run_dirs = _run_dirs(results_dir)
    if not run_dirs:
        raise FileNotFoundError(f"No run directories found in {results_dir}")

    return run_dirs[-1]


def list_available_runs(results_dir: Path) -> None:
    """Log all available run directories."""
    if not results_dir.exists():
        logging.error(f"Results directory not found: {results_dir}")
        return

    run_dirs = _run_dirs(results_dir)
    if not run_dirs:
        logging.info(f"No run directories found in {results_dir}")
        return

    logging.info("Available runs:")
    for i, run_dir in enumerate(run_dirs, 1):
        logging.info(f"  {i}. {run_dir.name}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for the plotting script."""
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    parser = argparse.ArgumentParser(
        description="Visualize drive telemetry from recorded runs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plot the most recent run
  python -m target_nav.plot_results

  # Plot a specific run and save the figure to its directory
  python -m target_nav.plot_results --run run_20250301_101500 --save

  # List all available runs
  python -m target_nav.plot_results --list
        """,
    )
    parser.add_argument(
        "--run",
        type=str,
        default=None,
        help="Name of the run directory to plot. If not specified, plots the most recent run.",
    )
    parser.add_argument(
        "--results-dir",
        type=str,
        default="results",
        help="Path to the results directory (default: results)",
    )
    parser.add_argument(
        "--save", action="store_true", help="Save the plot as a PNG file in the run directory"
    )
    parser.add_argument(
        "--no-show",
        action="store_true",
        help="Do not display plots interactively (useful with --save)",
    )
    parser.add_argument("--list", action="store_true", help="List all available runs and exit")

    args = parser.parse_args(argv)
    results_dir = Path(args.results_dir)

    if args.list:
        list_available_runs(results_dir)
        return

    if args.run:
        run_dir = results_dir / args.run
        if not run_dir.exists():
            logging.error(f"Error: Run directory not found: {run_dir}")
            list_available_runs(results_dir)
            sys.exit(1)
    else:
        try:
            run_dir = find_latest_run(results_dir)
            logging.info(f"{TERM_BLUE}Plotting most recent run: {run_dir.name}{TERM_RESET}")
        except FileNotFoundError as e:
            logging.error(f"Error: {e}")
            sys.exit(1)

    try:
        plot_run_summary(run_dir=run_dir, save_plots=args.save, show_plots=not args.no_show)
    except (FileNotFoundError, ValueError) as e:
        logging.error(f"Error: {e}")
        sys.exit(1)

    if args.save:
        logging.info(f"{TERM_BLUE}✓ Saved plot to {run_dir}/telemetry.png{TERM_RESET}")


if __name__ == "__main__":
    main()
