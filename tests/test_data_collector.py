import matplotlib.pyplot as plt
import numpy as np
import pytest

from target_nav.data_collector import TELEMETRY_COLUMNS, TelemetryRecorder
from target_nav.plot_results import (
    find_latest_run,
    load_telemetry,
    main,
    plot_run_summary,
    plot_telemetry,
)


@pytest.fixture(autouse=True)
def no_run_dir_env(monkeypatch):
    monkeypatch.delenv("RUN_DIR", raising=False)


def record_sample_run(run_dir):
    with TelemetryRecorder(run_dir=str(run_dir)) as recorder:
        recorder.log_tick(1, 0.02, 0.11, 0.11, 0.0, 0.0, "running")
        recorder.log_tick(2, 0.04, 0.12, 0.10, 0.3, -0.5, "running")
        recorder.log_tick(3, 0.06, 0.0, 0.0, 0.7, -0.4, "succeeded")
    return recorder


def test_timestamped_run_directory(tmp_path):
    recorder = TelemetryRecorder(output_dir=str(tmp_path))
    assert recorder.run_dir.parent == tmp_path / "results"
    assert recorder.run_dir.name.startswith("run_")
    assert recorder.run_dir.is_dir()


def test_output_dir_must_be_a_directory(tmp_path):
    path = tmp_path / "file.txt"
    path.write_text("x")
    with pytest.raises(ValueError):
        TelemetryRecorder(output_dir=str(path))


def test_log_before_setup_raises(tmp_path):
    recorder = TelemetryRecorder(run_dir=str(tmp_path / "run_a"))
    with pytest.raises(RuntimeError):
        recorder.log_tick(1, 0.02, 0.0, 0.0, 0.0, 0.0, "running")


def test_recorded_telemetry_loads_back(tmp_path):
    recorder = record_sample_run(tmp_path / "run_a")
    assert recorder.rows_written == 3

    data = load_telemetry(recorder.output_path)
    assert list(data) == TELEMETRY_COLUMNS
    np.testing.assert_allclose(data["tick"], [1, 2, 3])
    np.testing.assert_allclose(data["left"], [0.11, 0.12, 0.0])
    np.testing.assert_allclose(data["yaw"], [0.0, -0.5, -0.4])
    assert list(data["status"]) == ["running", "running", "succeeded"]


def test_load_telemetry_rejects_other_csv(tmp_path):
    path = tmp_path / "other.csv"
    path.write_text("timestamp,x,y\n1,2,3\n")
    with pytest.raises(ValueError):
        load_telemetry(path)
    with pytest.raises(FileNotFoundError):
        load_telemetry(tmp_path / "missing.csv")


def test_plot_telemetry(tmp_path):
    record_sample_run(tmp_path / "run_a")
    data = load_telemetry(tmp_path / "run_a" / "telemetry.csv")
    fig = plot_telemetry(data, save_path=tmp_path / "plot.png")
    assert len(fig.axes) == 3
    assert (tmp_path / "plot.png").exists()
    plt.close(fig)


def test_plot_run_summary_saves_into_run(tmp_path):
    run_dir = tmp_path / "run_a"
    record_sample_run(run_dir)
    plot_run_summary(run_dir, save_plots=True, show_plots=False)
    assert (run_dir / "telemetry.png").exists()


def test_find_latest_run(tmp_path):
    (tmp_path / "run_20250101_000000").mkdir()
    (tmp_path / "run_20250102_000000").mkdir()
    (tmp_path / "other").mkdir()
    assert find_latest_run(tmp_path).name == "run_20250102_000000"
    with pytest.raises(FileNotFoundError):
        find_latest_run(tmp_path / "missing")


def test_plot_cli(tmp_path):
    results = tmp_path / "results"
    record_sample_run(results / "run_20250101_000000")
    main(["--results-dir", str(results), "--save", "--no-show"])
    assert (results / "run_20250101_000000" / "telemetry.png").exists()


def test_plot_cli_unknown_run_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--results-dir", str(tmp_path), "--run", "run_missing", "--no-show"])
    assert exc.value.code == 1
