"""Data models for the orbital lab state."""
from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class RunStatus(Enum):
    """Run controller states as shown on the status badge."""

    IDLE = "IDLE"
    ORBITING = "ORBITING"
    CRASHED = "CRASHED"
    ESCAPED = "ESCAPED"


class AdvanceEvent(Enum):
    CRASH = "crash"
    ESCAPE = "escape"


@dataclass(frozen=True)
class SimulationParameters:
    """Launch conditions chosen by the operator before a run."""

    speed: float
    angle_deg: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.speed) and math.isfinite(self.angle_deg)):
            raise ValueError("launch parameters must be finite numbers")
        if self.speed < 0.0:
            raise ValueError(f"speed must not be negative, got {self.speed!r}")

    @property
    def angle_rad(self) -> float:
        return self.angle_deg * math.pi / 180.0


@dataclass
class SatelliteState:
    """Mutable point-mass state for the simulated satellite."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=float))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=float))
    trail: deque = field(default_factory=deque)
    crashed: bool = False
    time: float = 0.0

    @property
    def radius(self) -> float:
        return float(np.linalg.norm(self.position))

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))

    def copy(self) -> "SatelliteState":
        return SatelliteState(
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            trail=deque(self.trail, maxlen=self.trail.maxlen),
            crashed=self.crashed,
            time=self.time,
        )

    def trail_points(self) -> list[tuple[float, float]]:
        return [(float(x), float(y)) for x, y in self.trail]


@dataclass(frozen=True)
class OrbitalElements:
    """Orbit description derived analytically from the launch conditions."""

    specific_energy: float
    angular_momentum: float
    semi_major_axis: float
    eccentricity: float
    apoapsis_distance: float
    apoapsis_au: float
    periapsis_distance: float
    period: float | None
    classification: str

    @property
    def bound(self) -> bool:
        return self.specific_energy < 0.0

    @property
    def target_text(self) -> str:
        if not self.bound:
            return "Interstellar Space (Escape)"
        return self.classification


@dataclass(frozen=True)
class AdvanceResult:
    state: SatelliteState
    event: AdvanceEvent | None = None


__all__ = [
    "AdvanceEvent",
    "AdvanceResult",
    "OrbitalElements",
    "RunStatus",
    "SatelliteState",
    "SimulationParameters",
]
