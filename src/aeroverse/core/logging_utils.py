"""Run telemetry for the orbital lab, buffered to CSV files."""
from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence

from .model import RunStatus, SatelliteState
from .physics import angular_momentum, eccentricity, energy_specific

if TYPE_CHECKING:  # pragma: no cover
    from .controller import RunController


class RunLogger:
    """Buffered logger that stores one run as CSV time series plus events.

    Every run lives in its own folder below ``root_dir`` and the newest run
    id is written to ``last_run.txt``.
    """

    TIMESERIES_HEADER = [
        "t",
        "x",
        "y",
        "vx",
        "vy",
        "r",
        "v",
        "energy",
        "h",
        "e",
        "dt_eff",
    ]
    EVENTS_HEADER = ["t", "type", "r", "v", "details"]

    def __init__(
        self,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 20,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        base = run_id or f"{datetime.now().strftime('%Y%m%d_%H%M%S')}_run"
        candidate_id = base
        suffix = 1
        while (self.root_dir / candidate_id).exists():
            candidate_id = f"{base}_{suffix:02d}"
            suffix += 1

        self.run_id = candidate_id
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.timeseries_path = self.run_dir / "timeseries.csv"
        self.events_path = self.run_dir / "events.csv"
        self.meta_path = self.run_dir / "meta.json"

        self._ts_file = self.timeseries_path.open("w", newline="")
        self._ts_file.write(",".join(self.TIMESERIES_HEADER) + "\n")
        self._ev_file = self.events_path.open("w", newline="")
        self._ev_file.write(",".join(self.EVENTS_HEADER) + "\n")

        self._ts_buffer: list[str] = []
        self._ev_buffer: list[str] = []
        self._ts_threshold = max(1, timeseries_flush_threshold)
        self._ev_threshold = max(1, events_flush_threshold)
        self.closed = False

        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def log_ts(self, values: Sequence[float]) -> None:
        self._ts_buffer.append(",".join(self._format_value(v) for v in values))
        if len(self._ts_buffer) >= self._ts_threshold:
            self._flush_timeseries()

    def log_event(self, values: Sequence[object]) -> None:
        self._ev_buffer.append(",".join(self._format_event_value(v) for v in values))
        if len(self._ev_buffer) >= self._ev_threshold:
            self._flush_events()

    def close(self) -> None:
        if self.closed:
            return
        self._flush_timeseries()
        self._flush_events()
        self._ts_file.close()
        self._ev_file.close()
        self.closed = True

    def _flush_timeseries(self) -> None:
        if self._ts_buffer:
            self._ts_file.write("\n".join(self._ts_buffer) + "\n")
            self._ts_file.flush()
            self._ts_buffer.clear()

    def _flush_events(self) -> None:
        if self._ev_buffer:
            self._ev_file.write("\n".join(self._ev_buffer) + "\n")
            self._ev_file.flush()
            self._ev_buffer.clear()

    @staticmethod
    def _format_value(value: float) -> str:
        return f"{value:.10g}"

    @staticmethod
    def _format_event_value(value: object) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return f"{value:.10g}"
        text = str(value)
        if "," in text or '"' in text:
            return '"' + text.replace('"', '""') + '"'
        return text

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


class RunRecorder:
    """Controller listener that writes each launched run through a :class:`RunLogger`.

    A new logger is opened on launch and closed when the run is reset or a
    new launch starts. Crashes and the first escape are logged as events.
    """

    def __init__(
        self,
        controller: RunController,
        root_dir: str | Path | None = None,
    ) -> None:
        self._controller = controller
        self._root_dir = Path(root_dir or controller.lab_cfg.runs_dir)
        self._log_every = controller.lab_cfg.log_every_frames
        self._frame_counter = 0
        self.logger: RunLogger | None = None
        self.run_dirs: list[Path] = []
        controller.add_listener(self._on_transition)

    def detach(self) -> None:
        self._controller.remove_listener(self._on_transition)
        self.close()

    def close(self) -> None:
        if self.logger is not None:
            self.logger.close()
            self.logger = None

    def record_frame(self, dt_eff: float, *, force: bool = False) -> None:
        """Write a time series row every ``log_every_frames`` frames of an active run."""

        if self.logger is None or not self._controller.is_active:
            return
        self._frame_counter += 1
        if force or self._frame_counter >= self._log_every:
            self._log_state(self._controller.satellite, dt_eff)
            self._frame_counter = 0

    def _on_transition(
        self,
        previous: RunStatus,
        status: RunStatus,
        satellite: SatelliteState,
    ) -> None:
        if status is RunStatus.ORBITING and previous is RunStatus.IDLE:
            self._open_run(satellite)
        elif self.logger is None:
            return
        elif status is RunStatus.CRASHED:
            penetration = self._controller.cfg.impact_radius - satellite.radius
            self._log_event(satellite, "crash", {"penetration": penetration})
            self._log_state(satellite, 0.0)
        elif status is RunStatus.ESCAPED:
            eps = energy_specific(satellite.position, satellite.velocity, self._controller.cfg)
            self._log_event(satellite, "escape", {"energy": eps})
            self._log_state(satellite, 0.0)
        elif status is RunStatus.IDLE:
            self._log_event(satellite, "reset", {"from": previous.value})
            self.close()

    def _open_run(self, satellite: SatelliteState) -> None:
        self.close()
        self.logger = RunLogger(self._root_dir)
        self.run_dirs.append(self.logger.run_dir)
        controller = self._controller
        elements = controller.elements
        self.logger.write_meta(
            {
                "speed": controller.params.speed,
                "angle_deg": controller.params.angle_deg,
                "physics": asdict(controller.cfg),
                "gm": controller.cfg.gm,
                "integrator": "symplectic_euler",
                "predicted": {
                    "energy": elements.specific_energy,
                    "h": elements.angular_momentum,
                    "a": None if not elements.bound else elements.semi_major_axis,
                    "e": elements.eccentricity,
                    "apoapsis": None if not elements.bound else elements.apoapsis_distance,
                    "classification": elements.classification,
                },
                "log_strategy": f"every_{self._log_every}_frames",
            }
        )
        self._frame_counter = 0
        self._log_event(
            satellite,
            "launch",
            {"speed": controller.params.speed, "angle": controller.params.angle_deg},
        )
        self._log_state(satellite, 0.0)

    def _log_state(self, satellite: SatelliteState, dt_eff: float) -> None:
        if self.logger is None:
            return
        r_vec = satellite.position
        v_vec = satellite.velocity
        cfg = self._controller.cfg
        self.logger.log_ts(
            [
                satellite.time,
                float(r_vec[0]),
                float(r_vec[1]),
                float(v_vec[0]),
                float(v_vec[1]),
                satellite.radius,
                satellite.speed,
                energy_specific(r_vec, v_vec, cfg),
                angular_momentum(r_vec, v_vec),
                eccentricity(r_vec, v_vec, cfg),
                float(dt_eff),
            ]
        )

    def _log_event(self, satellite: SatelliteState, event_type: str, details: dict) -> None:
        if self.logger is None:
            return
        self.logger.log_event(
            [satellite.time, event_type, satellite.radius, satellite.speed, json.dumps(details)]
        )


__all__ = ["RunLogger", "RunRecorder"]
