"""Physics helpers and the trajectory integrator for the orbital lab."""
from __future__ import annotations

import math
from collections import deque

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .model import AdvanceEvent, AdvanceResult, SatelliteState, SimulationParameters


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def gravity_accel(r: np.ndarray, gm: float) -> np.ndarray:
    """Inverse-square acceleration toward the origin for position ``r``."""

    rmag = float(np.linalg.norm(r))
    if rmag <= 0.0:
        return np.zeros_like(r)
    return -gm * r / (rmag**3)


def symplectic_euler_step(
    r: np.ndarray,
    v: np.ndarray,
    dt: float,
    gm: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Advance ``(r, v)`` by one semi-implicit Euler step.

    The velocity is kicked from the current position first and the position
    then drifts with the updated velocity.
    """

    v_next = v + gravity_accel(r, gm) * dt
    r_next = r + v_next * dt
    return r_next, v_next


def energy_specific(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Specific orbital energy for position ``r`` and velocity ``v``."""

    rmag = float(np.linalg.norm(r))
    vmag2 = float(v[0] * v[0] + v[1] * v[1])
    return 0.5 * vmag2 - cfg.gm / rmag


def angular_momentum(r: np.ndarray, v: np.ndarray) -> float:
    """Out-of-plane component of the specific angular momentum ``r x v``."""

    return float(r[0] * v[1] - r[1] * v[0])


def eccentricity(r: np.ndarray, v: np.ndarray, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Return the orbital eccentricity for state ``(r, v)``."""

    r3 = np.array([r[0], r[1], 0.0])
    v3 = np.array([v[0], v[1], 0.0])
    h = np.cross(r3, v3)
    e_vec = np.cross(v3, h) / cfg.gm - r3 / np.linalg.norm(r3)
    return float(np.linalg.norm(e_vec[:2]))


def initial_velocity(speed: float, angle_deg: float) -> np.ndarray:
    """Injection velocity at ``(R0, 0)``: radial part ``sin``, tangential part ``cos``."""

    rads = angle_deg * math.pi / 180.0
    return np.array([math.sin(rads) * speed, math.cos(rads) * speed], dtype=float)


def initial_state(
    params: SimulationParameters,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> SatelliteState:
    """Fresh satellite at the injection radius with an empty trail."""

    return SatelliteState(
        position=np.array([cfg.initial_radius, 0.0], dtype=float),
        velocity=initial_velocity(params.speed, params.angle_deg),
        trail=deque(maxlen=cfg.trail_max_points),
    )


def advance(
    state: SatelliteState,
    dt: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> AdvanceResult:
    """Advance ``state`` by the frame interval ``dt``.

    ``dt`` is split into ``cfg.substeps`` equal sub-steps. Each sub-step
    first checks for an impact (terminal, the state freezes) and for the
    escape radius (reported, integration continues) before applying one
    semi-implicit Euler step. The input state is never mutated.
    """

    if dt < 0.0 or not math.isfinite(dt):
        raise ValueError(f"dt must be a finite non-negative number, got {dt!r}")
    if state.crashed or dt == 0.0:
        return AdvanceResult(state)

    new_state = state.copy()
    if new_state.trail.maxlen != cfg.trail_max_points:
        new_state.trail = deque(new_state.trail, maxlen=cfg.trail_max_points)

    sub_dt = dt / cfg.substeps
    r = new_state.position
    v = new_state.velocity
    event: AdvanceEvent | None = None

    for _ in range(cfg.substeps):
        rmag = float(np.linalg.norm(r))
        if rmag < cfg.impact_radius:
            new_state.position = r
            new_state.velocity = v
            new_state.crashed = True
            return AdvanceResult(new_state, AdvanceEvent.CRASH)
        if rmag > cfg.escape_radius:
            event = AdvanceEvent.ESCAPE
        r, v = symplectic_euler_step(r, v, sub_dt, cfg.gm)
        new_state.time += sub_dt

    new_state.position = r
    new_state.velocity = v

    trail = new_state.trail
    if not trail or math.hypot(r[0] - trail[-1][0], r[1] - trail[-1][1]) > cfg.trail_min_spacing:
        trail.append((float(r[0]), float(r[1])))

    return AdvanceResult(new_state, event)


__all__ = [
    "PHYSICS_CFG",
    "PhysicsCfg",
    "advance",
    "angular_momentum",
    "clamp",
    "eccentricity",
    "energy_specific",
    "gravity_accel",
    "initial_state",
    "initial_velocity",
    "symplectic_euler_step",
]
