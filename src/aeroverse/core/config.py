"""Configuration dataclasses for the orbital lab."""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicsCfg:
    """Physical constants and integrator settings, fixed for the whole process.

    Distances are simulation units; ``units_per_au`` maps them onto the
    astronomical-unit scale used by the mission projection readout.
    """

    gm: float = 20.0
    body_radius: float = 2.0
    initial_radius: float = 4.0
    escape_radius: float = 60.0
    impact_margin: float = 0.1
    substeps: int = 4
    trail_min_spacing: float = 0.2
    trail_max_points: int = 300
    units_per_au: float = 4.0
    eccentricity_margin: float = 1e-9

    def __post_init__(self) -> None:
        if not math.isfinite(self.gm) or self.gm <= 0.0:
            raise ValueError(f"gm must be positive, got {self.gm!r}")
        if self.body_radius <= 0.0:
            raise ValueError(f"body_radius must be positive, got {self.body_radius!r}")
        if self.initial_radius <= self.body_radius + self.impact_margin:
            raise ValueError("initial_radius must lie above the impact radius")
        if self.escape_radius <= self.initial_radius:
            raise ValueError("escape_radius must exceed initial_radius")
        if self.impact_margin < 0.0:
            raise ValueError("impact_margin must not be negative")
        if self.substeps < 1:
            raise ValueError("substeps must be at least 1")
        if self.trail_max_points < 1:
            raise ValueError("trail_max_points must be at least 1")
        if self.trail_min_spacing < 0.0:
            raise ValueError("trail_min_spacing must not be negative")
        if self.units_per_au <= 0.0:
            raise ValueError("units_per_au must be positive")
        if not 0.0 < self.eccentricity_margin < 1.0:
            raise ValueError("eccentricity_margin must lie in (0, 1)")

    @property
    def impact_radius(self) -> float:
        return self.body_radius + self.impact_margin

    @property
    def circular_speed(self) -> float:
        return math.sqrt(self.gm / self.initial_radius)

    @property
    def escape_speed(self) -> float:
        return math.sqrt(2.0 * self.gm / self.initial_radius)


@dataclass(frozen=True)
class LabCfg:
    """Operator input ranges, defaults and host loop settings."""

    speed_range: tuple[float, float] = (1.0, 3.5)
    angle_range: tuple[float, float] = (-45.0, 45.0)
    speed_step: float = 0.1
    angle_step: float = 1.0
    default_speed: float = 2.2
    default_angle: float = 0.0
    time_scale: float = 1.0
    max_frame_dt: float = 0.1
    log_every_frames: int = 10
    runs_dir: str = "data/runs"

    def __post_init__(self) -> None:
        lo, hi = self.speed_range
        if not 0.0 <= lo <= hi:
            raise ValueError(f"invalid speed_range {self.speed_range!r}")
        lo_a, hi_a = self.angle_range
        if not -90.0 < lo_a <= hi_a < 90.0:
            raise ValueError(f"invalid angle_range {self.angle_range!r}")
        if not lo <= self.default_speed <= hi:
            raise ValueError("default_speed lies outside speed_range")
        if not lo_a <= self.default_angle <= hi_a:
            raise ValueError("default_angle lies outside angle_range")
        if self.max_frame_dt <= 0.0 or self.time_scale <= 0.0:
            raise ValueError("max_frame_dt and time_scale must be positive")
        if self.log_every_frames < 1:
            raise ValueError("log_every_frames must be at least 1")


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1200
    height: int = 800
    panel_width: int = 320
    fps_limit: int = 60
    pixels_per_unit: float = 38.0
    min_pixels_per_unit: float = 4.0
    max_pixels_per_unit: float = 160.0
    num_stars: int = 220
    background_color: tuple[int, int, int] = (2, 6, 23)
    panel_color: tuple[int, int, int, int] = (15, 23, 42, 235)
    panel_border_color: tuple[int, int, int, int] = (6, 182, 212, 80)
    planet_color: tuple[int, int, int] = (30, 64, 175)
    atmosphere_color: tuple[int, int, int, int] = (96, 165, 250, 40)
    satellite_color: tuple[int, int, int] = (251, 191, 36)
    satellite_pixel_radius: int = 5
    trail_color: tuple[int, int, int] = (251, 191, 36)
    trail_crash_color: tuple[int, int, int] = (239, 68, 68)
    trail_width: int = 2
    start_ring_color: tuple[int, int, int, int] = (103, 232, 249, 60)
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_muted_color: tuple[int, int, int] = (148, 163, 184)
    label_background_color: tuple[int, int, int, int] = (0, 0, 0, 110)
    speed_label_color: tuple[int, int, int] = (34, 211, 238)
    angle_label_color: tuple[int, int, int] = (192, 132, 252)
    reach_bound_color: tuple[int, int, int] = (74, 222, 128)
    reach_escape_color: tuple[int, int, int] = (250, 204, 21)
    status_colors: tuple[tuple[str, tuple[int, int, int, int]], ...] = (
        ("IDLE", (31, 41, 55, 210)),
        ("ORBITING", (30, 58, 138, 210)),
        ("CRASHED", (127, 29, 29, 220)),
        ("ESCAPED", (113, 63, 18, 220)),
    )
    button_color: tuple[int, int, int, int] = (22, 163, 74, 230)
    button_hover_color: tuple[int, int, int, int] = (34, 197, 94, 240)
    button_disabled_color: tuple[int, int, int, int] = (55, 65, 81, 200)
    reset_button_color: tuple[int, int, int, int] = (51, 65, 85, 230)
    reset_button_hover_color: tuple[int, int, int, int] = (71, 85, 105, 240)
    button_text_color: tuple[int, int, int] = (255, 255, 255)
    button_radius: int = 8
    starfield_parallax: float = 0.12

    def status_color(self, status_name: str) -> tuple[int, int, int, int]:
        return dict(self.status_colors)[status_name]


PHYSICS_CFG = PhysicsCfg()
LAB_CFG = LabCfg()
RENDER_CFG = RenderCfg()


__all__ = ["LAB_CFG", "PHYSICS_CFG", "RENDER_CFG", "LabCfg", "PhysicsCfg", "RenderCfg"]
