"""CSV telemetry logging for simulated drive runs.

One row is written per control tick with the commanded drive powers, the
distance reported by the drive encoders, the heading and the status of the
task being run.
"""

import csv
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from .config import TELEMETRY_FILENAME, TERM_BLUE, TERM_RESET

TELEMETRY_COLUMNS = ["tick", "time", "left", "right", "distance", "yaw", "status"]
"""Column headers of the telemetry CSV, in order."""


class TelemetryRecorder:
    """Manages the telemetry CSV of one run.

    Attributes:
        run_dir: Directory path for this run's output files.
        output_path: Path of the telemetry CSV.
        rows_written: Number of data rows written so far.
    """

    def __init__(self, output_dir: str = ".", run_dir: Optional[str] = None) -> None:
        """Initialize the recorder.

        Args:
            output_dir: Base directory for output files (default: current directory).
            run_dir: Optional specific run directory. If None, creates a timestamped
                directory under ``output_dir/results``. Can also be set via the
                RUN_DIR environment variable.

        Raises:
            ValueError: If output_dir exists but is not a directory.
        """
        output_path = Path(output_dir)
        if output_path.exists() and not output_path.is_dir():
            raise ValueError(f"Output path exists but is not a directory: {output_dir}")

        self.csv_file: Optional[TextIO] = None
        self.csv_writer: Any = None
        self.rows_written = 0

        if run_dir:
            self.run_dir: Path = Path(run_dir)
        elif env_run_dir := os.environ.get("RUN_DIR"):
            self.run_dir = Path(env_run_dir)
        else:
            # results/run_YYYYMMDD_HHMMSS/
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.run_dir = output_path / "results" / f"run_{timestamp}"

        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.output_path: Path = self.run_dir / TELEMETRY_FILENAME

    def setup(self) -> None:
        """Create the CSV file and write the header row."""
        self.csv_file = open(self.output_path, "w", newline="")
        self.csv_writer = csv.writer(self.csv_file)
        self.csv_writer.writerow(TELEMETRY_COLUMNS)
        self.csv_file.flush()
        print(f"{TERM_BLUE}✓ Initialized telemetry to {self.run_dir}/{TERM_RESET}")

    def log_tick(
        self,
        tick: int,
        time: float,
        left: float,
        right: float,
        distance: float,
        yaw: float,
        status: str,
    ) -> None:
        """Log one control tick.

        Args:
            tick: Tick number (1-based).
            time: Elapsed time (seconds).
            left: Commanded left power.
            right: Commanded right power.
            distance: Distance reported by the drive encoders.
            yaw: Heading (degrees, positive clockwise).
            status: Status name of the task being run.
        """
        if self.csv_writer is None:
            raise RuntimeError("TelemetryRecorder.setup() must be called before logging")
        self.csv_writer.writerow([tick, time, left, right, distance, yaw, status])
        self.rows_written += 1
        if self.csv_file:
            self.csv_file.flush()

    def cleanup(self) -> None:
        """Close the CSV file and report the output location."""
        if self.csv_file:
            self.csv_file.close()
            self.csv_file = None
            self.csv_writer = None
        print(f"{TERM_BLUE}✓ Saved {self.rows_written} telemetry rows to {self.run_dir}/{TERM_RESET}")

    def __enter__(self) -> "TelemetryRecorder":
        self.setup()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.cleanup()
