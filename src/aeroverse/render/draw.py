from __future__ import annotations

import math
import random
from typing import Iterable, Sequence, TYPE_CHECKING

import numpy as np
import pygame

from .assets import Color, get_text_surface

if TYPE_CHECKING:  # pragma: no cover
    from aeroverse.core.config import RenderCfg


def draw_planet(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    *,
    render_cfg: RenderCfg,
) -> None:
    if radius <= 0:
        return
    glow_radius = int(radius * 1.2)
    glow = pygame.Surface((glow_radius * 2, glow_radius * 2), pygame.SRCALPHA)
    pygame.draw.circle(glow, render_cfg.atmosphere_color, (glow_radius, glow_radius), glow_radius)
    surface.blit(glow, glow.get_rect(center=position))
    pygame.draw.circle(surface, render_cfg.planet_color, position, radius)


def draw_satellite(
    surface: pygame.Surface,
    position: tuple[int, int],
    size: int,
    *,
    color: tuple[int, int, int],
    panel_color: tuple[int, int, int] = (31, 41, 55),
) -> None:
    """Small bus with two solar panels, drawn in screen space."""

    if size <= 0:
        return
    x, y = position
    panel_w = int(size * 1.6)
    panel_h = max(2, size // 3)
    pygame.draw.rect(surface, panel_color, (x - size - panel_w, y - panel_h // 2, panel_w, panel_h))
    pygame.draw.rect(surface, panel_color, (x + size, y - panel_h // 2, panel_w, panel_h))
    pygame.draw.rect(surface, color, (x - size, y - size, size * 2, size * 2))


def draw_ring(
    surface: pygame.Surface,
    position: tuple[int, int],
    radius: int,
    color: Color,
    *,
    segments: int = 72,
) -> None:
    """Dashed circle, used to mark the injection radius."""

    if radius <= 0:
        return
    for i in range(0, segments, 2):
        a0 = 2.0 * math.pi * i / segments
        a1 = 2.0 * math.pi * (i + 1) / segments
        start = (position[0] + radius * math.cos(a0), position[1] + radius * math.sin(a0))
        end = (position[0] + radius * math.cos(a1), position[1] + radius * math.sin(a1))
        pygame.draw.line(surface, color, start, end, 1)


def draw_trail(
    surface: pygame.Surface,
    color: tuple[int, int, int] | tuple[int, int, int, int],
    points: Sequence[tuple[int, int]],
    width: int,
) -> None:
    if len(points) < 2:
        return
    if width <= 1:
        pygame.draw.aalines(surface, color, False, points)
    else:
        pygame.draw.lines(surface, color, False, points, width)
        pygame.draw.aalines(surface, color, False, points)


def draw_tag(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    anchor: tuple[int, int],
    *,
    text_color: tuple[int, int, int],
    background_color: Color,
    border_color: tuple[int, int, int] | None = None,
) -> None:
    """Text badge centred above ``anchor``."""

    text_surf = get_text_surface(font, text, text_color)
    rect = text_surf.get_rect()
    rect.inflate_ip(12, 6)
    rect.midbottom = (anchor[0], anchor[1] - 8)
    tag = pygame.Surface(rect.size, pygame.SRCALPHA)
    pygame.draw.rect(tag, background_color, tag.get_rect(), border_radius=4)
    if border_color is not None:
        pygame.draw.rect(tag, border_color, tag.get_rect(), 1, border_radius=4)
    surface.blit(tag, rect.topleft)
    surface.blit(text_surf, text_surf.get_rect(center=rect.center))


def generate_starfield(
    num_stars: int,
    *,
    size: tuple[int, int],
    rng: random.Random | None = None,
) -> list[dict[str, object]]:
    rng = rng or random.Random()
    width, height = size
    stars: list[dict[str, object]] = []
    for _ in range(num_stars):
        radius = rng.choice([1, 1, 1, 2])
        base = rng.randint(200, 240)
        color = (base - rng.randint(10, 25), base - rng.randint(5, 15), base, rng.randint(80, 150))
        star_surface = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        pygame.draw.circle(star_surface, color, (radius, radius), radius)
        stars.append(
            {
                "pos": (rng.uniform(0, width), rng.uniform(0, height)),
                "surface": star_surface,
                "radius": radius,
            }
        )
    return stars


def draw_starfield(
    surface: pygame.Surface,
    starfield: Iterable[dict[str, object]],
    camera_center: np.ndarray,
    ppu: float,
    *,
    render_cfg: RenderCfg,
) -> None:
    width, height = surface.get_size()
    offset_x = camera_center[0] * ppu * render_cfg.starfield_parallax
    offset_y = camera_center[1] * ppu * render_cfg.starfield_parallax
    for star in starfield:
        base_x, base_y = star["pos"]  # type: ignore[misc]
        radius = star["radius"]  # type: ignore[assignment]
        sx = int((base_x - offset_x) % width)
        sy = int((base_y + offset_y) % height)
        surface.blit(star["surface"], (sx - radius, sy - radius))  # type: ignore[arg-type,operator]
