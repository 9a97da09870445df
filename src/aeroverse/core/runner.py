"""Headless driver that plays the role of the render loop."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from .controller import RunController
from .model import RunStatus, SimulationParameters


@dataclass(frozen=True)
class RunOutcome:
    status: RunStatus
    time: float
    frames: int
    max_radius: float
    min_radius: float
    swept_angle: float
    escaped: bool

    @property
    def revolutions(self) -> float:
        return abs(self.swept_angle) / (2.0 * math.pi)


def run_until_outcome(
    controller: RunController,
    duration: float,
    frame_dt: float = 1.0 / 60.0,
    *,
    on_frame: Callable[[RunController, float], None] | None = None,
    stop_on_escape: bool = False,
) -> RunOutcome:
    """Launch (if idle) and tick ``controller`` with fixed frame intervals.

    Stops after ``duration`` simulated seconds, on a crash, or on the first
    escape when ``stop_on_escape`` is set.
    """

    if frame_dt <= 0.0:
        raise ValueError("frame_dt must be positive")
    if controller.status is RunStatus.IDLE:
        controller.launch()

    sat = controller.satellite
    prev_angle = math.atan2(sat.position[1], sat.position[0])
    swept = 0.0
    max_radius = min_radius = sat.radius
    escaped = controller.status is RunStatus.ESCAPED
    frames = 0
    max_frames = int(math.ceil(duration / frame_dt))

    while frames < max_frames and controller.is_active:
        controller.tick(frame_dt)
        frames += 1
        sat = controller.satellite
        angle = math.atan2(sat.position[1], sat.position[0])
        delta = angle - prev_angle
        if delta > math.pi:
            delta -= 2.0 * math.pi
        elif delta < -math.pi:
            delta += 2.0 * math.pi
        swept += delta
        prev_angle = angle
        max_radius = max(max_radius, sat.radius)
        min_radius = min(min_radius, sat.radius)
        if on_frame is not None:
            on_frame(controller, frame_dt)
        if controller.status is RunStatus.ESCAPED:
            escaped = True
            if stop_on_escape:
                break

    return RunOutcome(
        status=controller.status,
        time=controller.satellite.time,
        frames=frames,
        max_radius=max_radius,
        min_radius=min_radius,
        swept_angle=swept,
        escaped=escaped,
    )


def simulate(
    params: SimulationParameters,
    duration: float,
    frame_dt: float = 1.0 / 60.0,
    **controller_kwargs,
) -> RunOutcome:
    controller = RunController(params=params, **controller_kwargs)
    return run_until_outcome(controller, duration, frame_dt)


__all__ = ["RunOutcome", "run_until_outcome", "simulate"]
