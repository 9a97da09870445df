import csv
import json

from aeroverse.core.controller import RunController
from aeroverse.core.logging_utils import RunLogger, RunRecorder
from aeroverse.core.model import RunStatus, SimulationParameters
from aeroverse.core.runner import run_until_outcome


def read_rows(path):
    with path.open("r", newline="") as fh:
        return list(csv.DictReader(fh))


def test_run_logger_writes_headers_and_last_run(tmp_path):
    with RunLogger(tmp_path, run_id="demo") as logger:
        logger.write_meta({"speed": 2.2})
        logger.log_ts([0.0, 4.0, 0.0, 0.0, 2.2, 4.0, 2.2, -2.58, 8.8, 0.03, 0.0])
        logger.log_event([0.0, "launch", 4.0, 2.2, json.dumps({"speed": 2.2, "angle": 0.0})])
    assert (tmp_path / "last_run.txt").read_text(encoding="utf-8") == "demo"
    ts_rows = read_rows(logger.timeseries_path)
    assert list(ts_rows[0].keys()) == RunLogger.TIMESERIES_HEADER
    assert float(ts_rows[0]["x"]) == 4.0
    events = read_rows(logger.events_path)
    assert events[0]["type"] == "launch"
    assert json.loads(events[0]["details"]) == {"speed": 2.2, "angle": 0.0}
    assert json.loads(logger.meta_path.read_text(encoding="utf-8")) == {"speed": 2.2}


def test_run_logger_never_reuses_a_run_dir(tmp_path):
    first = RunLogger(tmp_path, run_id="same")
    second = RunLogger(tmp_path, run_id="same")
    first.close()
    second.close()
    assert first.run_dir != second.run_dir
    assert second.run_id == "same_01"
    assert (tmp_path / "last_run.txt").read_text(encoding="utf-8") == "same_01"


def test_run_logger_buffers_until_threshold(tmp_path):
    logger = RunLogger(tmp_path, timeseries_flush_threshold=3)
    logger.log_ts([0.0] * 11)
    logger.log_ts([1.0] * 11)
    assert read_rows(logger.timeseries_path) == []
    logger.log_ts([2.0] * 11)
    assert len(read_rows(logger.timeseries_path)) == 3
    logger.close()
    logger.close()


def test_recorder_logs_launch_and_crash(tmp_path):
    controller = RunController(params=SimulationParameters(1.0, 0.0))
    recorder = RunRecorder(controller, tmp_path)
    controller.launch()
    run_until_outcome(controller, 30.0, 1.0 / 60.0, on_frame=lambda c, dt: recorder.record_frame(dt))
    controller.reset()
    assert recorder.logger is None
    assert len(recorder.run_dirs) == 1
    run_dir = recorder.run_dirs[0]

    meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
    assert meta["speed"] == 1.0
    assert meta["gm"] == 20.0
    assert meta["integrator"] == "symplectic_euler"
    assert meta["predicted"]["classification"] == "Low Earth Orbit"

    events = [row["type"] for row in read_rows(run_dir / "events.csv")]
    assert events == ["launch", "crash", "reset"]
    ts_rows = read_rows(run_dir / "timeseries.csv")
    assert len(ts_rows) >= 3
    assert float(ts_rows[0]["r"]) == 4.0
    assert float(ts_rows[-1]["r"]) < 2.1


def test_recorder_starts_a_new_run_per_launch(tmp_path):
    controller = RunController()
    recorder = RunRecorder(controller, tmp_path)
    controller.launch()
    controller.tick(0.1)
    controller.set_angle(10.0)
    controller.launch()
    controller.tick(0.1)
    recorder.detach()
    assert len(recorder.run_dirs) == 2
    assert recorder.run_dirs[0] != recorder.run_dirs[1]
    second_meta = json.loads((recorder.run_dirs[1] / "meta.json").read_text(encoding="utf-8"))
    assert second_meta["angle_deg"] == 10.0
    first_events = [row["type"] for row in read_rows(recorder.run_dirs[0] / "events.csv")]
    assert first_events == ["launch", "reset"]


def test_recorder_ignores_frames_without_a_run(tmp_path):
    controller = RunController()
    recorder = RunRecorder(controller, tmp_path)
    recorder.record_frame(0.1)
    assert recorder.run_dirs == []
    assert not any(tmp_path.iterdir())


def test_recorder_stops_sampling_after_crash(tmp_path):
    controller = RunController(params=SimulationParameters(1.0, 0.0))
    recorder = RunRecorder(controller, tmp_path)
    outcome = run_until_outcome(
        controller, 30.0, 1.0 / 60.0, on_frame=lambda c, dt: recorder.record_frame(dt)
    )
    assert outcome.status is RunStatus.CRASHED
    for _ in range(600):
        controller.tick(1.0 / 60.0)
        recorder.record_frame(1.0 / 60.0)
    controller.reset()

    ts_rows = read_rows(recorder.run_dirs[0] / "timeseries.csv")
    crash_time = float(ts_rows[-1]["t"])
    assert sum(float(row["t"]) == crash_time for row in ts_rows) == 1
    assert len(ts_rows) < 20


def test_event_booleans_are_written_as_words(tmp_path):
    with RunLogger(tmp_path, run_id="flags") as logger:
        logger.log_event([1.5, "escape", True, False, "{}"])
    row = read_rows(logger.events_path)[0]
    assert row["r"] == "true"
    assert row["v"] == "false"
    assert row["t"] == "1.5"
