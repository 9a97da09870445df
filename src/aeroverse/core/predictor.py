"""Analytic orbital element projection from launch conditions."""
from __future__ import annotations

import math

from .config import PHYSICS_CFG, PhysicsCfg
from .model import OrbitalElements, SimulationParameters

ESCAPE_CLASSIFICATION = "Escape"

# Ascending upper bounds in AU, first match wins.
REACH_ZONES: tuple[tuple[float, str], ...] = (
    (1.1, "Low Earth Orbit"),
    (1.4, "High Earth Orbit"),
    (1.8, "Reaching Mars"),
    (3.0, "Asteroid Belt"),
    (6.0, "Reaching Jupiter"),
    (12.0, "Reaching Saturn"),
    (25.0, "Reaching Uranus"),
    (math.inf, "Reaching Neptune/Pluto"),
)


def classify_reach(apoapsis_au: float, zones: tuple[tuple[float, str], ...] = REACH_ZONES) -> str:
    """Return the label of the first zone whose upper bound exceeds ``apoapsis_au``."""

    for upper, label in zones:
        if apoapsis_au < upper:
            return label
    return zones[-1][1]


def predict(
    speed: float,
    angle_deg: float,
    r0: float,
    gm: float,
    *,
    units_per_au: float = PHYSICS_CFG.units_per_au,
    eccentricity_margin: float = PHYSICS_CFG.eccentricity_margin,
) -> OrbitalElements:
    """Project the orbit reached by an injection at radius ``r0``.

    Uses the vis-viva energy ``v**2/2 - gm/r0`` and the angular momentum of
    the tangential speed component. Bound orbits have their eccentricity
    clamped into ``[0, 1 - eccentricity_margin]``; unbound orbits report an
    infinite apoapsis and the ``"Escape"`` classification.
    """

    if not (math.isfinite(r0) and r0 > 0.0):
        raise ValueError(f"r0 must be positive, got {r0!r}")
    if not (math.isfinite(gm) and gm > 0.0):
        raise ValueError(f"gm must be positive, got {gm!r}")

    theta = angle_deg * math.pi / 180.0
    v_t = speed * math.cos(theta)
    h = r0 * v_t
    energy = 0.5 * speed * speed - gm / r0
    radicand = max(0.0, 1.0 + 2.0 * energy * h * h / (gm * gm))

    if energy >= 0.0:
        e = math.sqrt(radicand)
        periapsis = h * h / (gm * (1.0 + e))
        return OrbitalElements(
            specific_energy=energy,
            angular_momentum=h,
            semi_major_axis=math.inf,
            eccentricity=e,
            apoapsis_distance=math.inf,
            apoapsis_au=math.inf,
            periapsis_distance=periapsis,
            period=None,
            classification=ESCAPE_CLASSIFICATION,
        )

    a = -gm / (2.0 * energy)
    e = min(math.sqrt(radicand), 1.0 - eccentricity_margin)
    apoapsis = a * (1.0 + e)
    apoapsis_au = apoapsis / units_per_au
    return OrbitalElements(
        specific_energy=energy,
        angular_momentum=h,
        semi_major_axis=a,
        eccentricity=e,
        apoapsis_distance=apoapsis,
        apoapsis_au=apoapsis_au,
        periapsis_distance=a * (1.0 - e),
        period=2.0 * math.pi * math.sqrt(a**3 / gm),
        classification=classify_reach(apoapsis_au),
    )


def predict_parameters(
    params: SimulationParameters,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> OrbitalElements:
    return predict(
        params.speed,
        params.angle_deg,
        cfg.initial_radius,
        cfg.gm,
        units_per_au=cfg.units_per_au,
        eccentricity_margin=cfg.eccentricity_margin,
    )


__all__ = [
    "ESCAPE_CLASSIFICATION",
    "REACH_ZONES",
    "classify_reach",
    "predict",
    "predict_parameters",
]
