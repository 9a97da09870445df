"""Run controller driving the orbital lab state machine."""
from __future__ import annotations

import math
from typing import Callable

from .config import LAB_CFG, PHYSICS_CFG, LabCfg, PhysicsCfg
from .model import (
    AdvanceEvent,
    OrbitalElements,
    RunStatus,
    SatelliteState,
    SimulationParameters,
)
from .physics import advance, clamp, initial_state
from .predictor import predict_parameters

TransitionListener = Callable[[RunStatus, RunStatus, SatelliteState], None]


class RunController:
    """Mediates launch, reset and parameter edits for a single satellite.

    ``IDLE -> ORBITING -> CRASHED`` is terminal, ``ORBITING -> ESCAPED`` only
    changes the badge and integration keeps running. ``reset`` and any
    parameter edit return the controller to ``IDLE``.
    """

    def __init__(
        self,
        cfg: PhysicsCfg = PHYSICS_CFG,
        lab_cfg: LabCfg = LAB_CFG,
        params: SimulationParameters | None = None,
    ) -> None:
        self._cfg = cfg
        self._lab_cfg = lab_cfg
        if params is None:
            params = SimulationParameters(lab_cfg.default_speed, lab_cfg.default_angle)
        self._params = self._clamped(params.speed, params.angle_deg)
        self._elements = predict_parameters(self._params, cfg)
        self._status = RunStatus.IDLE
        self._satellite = initial_state(self._params, cfg)
        self._listeners: list[TransitionListener] = []

    @property
    def cfg(self) -> PhysicsCfg:
        return self._cfg

    @property
    def lab_cfg(self) -> LabCfg:
        return self._lab_cfg

    @property
    def params(self) -> SimulationParameters:
        return self._params

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def elements(self) -> OrbitalElements:
        return self._elements

    @property
    def satellite(self) -> SatelliteState:
        return self._satellite

    @property
    def is_active(self) -> bool:
        return self._status in (RunStatus.ORBITING, RunStatus.ESCAPED)

    def add_listener(self, listener: TransitionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: TransitionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def launch(self) -> bool:
        if self._status is not RunStatus.IDLE:
            return False
        self._satellite = initial_state(self._params, self._cfg)
        self._set_status(RunStatus.ORBITING)
        return True

    def reset(self) -> None:
        self._satellite = initial_state(self._params, self._cfg)
        self._set_status(RunStatus.IDLE)

    def tick(self, dt: float) -> AdvanceEvent | None:
        """Advance the active run by one frame interval."""

        if not self.is_active:
            return None
        result = advance(self._satellite, dt, self._cfg)
        self._satellite = result.state
        if result.event is AdvanceEvent.CRASH:
            self._set_status(RunStatus.CRASHED)
        elif result.event is AdvanceEvent.ESCAPE and self._status is RunStatus.ORBITING:
            self._set_status(RunStatus.ESCAPED)
        return result.event

    def set_speed(self, speed: float) -> None:
        self._apply(speed, self._params.angle_deg)

    def set_angle(self, angle_deg: float) -> None:
        self._apply(self._params.speed, angle_deg)

    def set_parameters(self, params: SimulationParameters) -> None:
        self._apply(params.speed, params.angle_deg)

    def _apply(self, speed: float, angle_deg: float) -> None:
        # a rejected edit leaves the run untouched
        params = self._clamped(speed, angle_deg)
        if self._status is not RunStatus.IDLE:
            self.reset()
        self._params = params
        self._elements = predict_parameters(self._params, self._cfg)
        self._satellite = initial_state(self._params, self._cfg)

    def nudge_speed(self, steps: int) -> None:
        self.set_speed(round(self._params.speed + steps * self._lab_cfg.speed_step, 6))

    def nudge_angle(self, steps: int) -> None:
        self.set_angle(round(self._params.angle_deg + steps * self._lab_cfg.angle_step, 6))

    def _clamped(self, speed: float, angle_deg: float) -> SimulationParameters:
        if not (math.isfinite(speed) and math.isfinite(angle_deg)):
            raise ValueError("launch parameters must be finite numbers")
        return SimulationParameters(
            clamp(float(speed), *self._lab_cfg.speed_range),
            clamp(float(angle_deg), *self._lab_cfg.angle_range),
        )

    def _set_status(self, status: RunStatus) -> None:
        previous = self._status
        self._status = status
        for listener in list(self._listeners):
            listener(previous, status, self._satellite)


__all__ = ["RunController", "TransitionListener"]
