"""Scenario definitions for preset launch conditions."""
from __future__ import annotations

from dataclasses import dataclass

from aeroverse.core.model import SimulationParameters


@dataclass(frozen=True)
class Scenario:
    key: str
    name: str
    speed: float
    angle_deg: float
    description: str

    def parameters(self) -> SimulationParameters:
        return SimulationParameters(self.speed, self.angle_deg)


SCENARIO_DEFINITIONS: tuple[Scenario, ...] = (
    Scenario(
        key="hold",
        name="Hold",
        speed=2.2,
        angle_deg=0.0,
        description="Near-circular tangential injection (~2.2, circular speed ~2.24).",
    ),
    Scenario(
        key="drop",
        name="Drop",
        speed=1.0,
        angle_deg=0.0,
        description="Far below circular speed - falls back onto the planet.",
    ),
    Scenario(
        key="escape",
        name="Escape",
        speed=3.2,
        angle_deg=0.0,
        description="Just above escape speed (~3.16) - leaves the gravity well.",
    ),
    Scenario(
        key="lob",
        name="Lob",
        speed=2.6,
        angle_deg=30.0,
        description="Outward-biased burn into a wide ellipse.",
    ),
    Scenario(
        key="dive",
        name="Dive",
        speed=2.2,
        angle_deg=-40.0,
        description="Inward-biased burn whose periapsis dips below the surface.",
    ),
)

SCENARIOS: dict[str, Scenario] = {scenario.key: scenario for scenario in SCENARIO_DEFINITIONS}
SCENARIO_DISPLAY_ORDER: list[str] = [scenario.key for scenario in SCENARIO_DEFINITIONS]
DEFAULT_SCENARIO_KEY = SCENARIO_DISPLAY_ORDER[0]


__all__ = [
    "DEFAULT_SCENARIO_KEY",
    "SCENARIO_DEFINITIONS",
    "SCENARIO_DISPLAY_ORDER",
    "SCENARIOS",
    "Scenario",
]
