from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from aeroverse.core.physics import clamp

from .assets import Color, get_text_surface


@dataclass(frozen=True)
class ButtonVisualStyle:
    base_color: Color
    hover_color: Color
    text_color: tuple[int, int, int]
    radius: int
    disabled_color: Color | None = None


class Button:
    """Rectangular button with hover feedback, an optional enabled check and a callback."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        callback: Callable[[], None],
        *,
        style: ButtonVisualStyle,
        enabled: Callable[[], bool] | None = None,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self._callback = callback
        self._enabled = enabled
        self._style = style

    @property
    def is_enabled(self) -> bool:
        return self._enabled is None or self._enabled()

    def draw(
        self,
        surface: pygame.Surface,
        font: pygame.font.Font,
        mouse_pos: tuple[int, int] | None = None,
    ) -> None:
        if mouse_pos is None:
            mouse_pos = pygame.mouse.get_pos()
        style = self._style
        if not self.is_enabled and style.disabled_color is not None:
            color = style.disabled_color
        elif self.rect.collidepoint(mouse_pos):
            color = style.hover_color
        else:
            color = style.base_color
        button_surface = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        pygame.draw.rect(button_surface, color, button_surface.get_rect(), border_radius=style.radius)
        surface.blit(button_surface, self.rect.topleft)
        text_surf = get_text_surface(font, self.text, style.text_color)
        surface.blit(text_surf, text_surf.get_rect(center=self.rect.center))

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos) and self.is_enabled:
                self._callback()
                return True
        return False


class Slider:
    """Horizontal range slider snapping to ``step``; reports changes through ``on_change``."""

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        value_range: tuple[float, float],
        step: float,
        getter: Callable[[], float],
        on_change: Callable[[float], None],
        *,
        track_color: Color,
        knob_color: tuple[int, int, int],
    ) -> None:
        self.rect = pygame.Rect(rect)
        self._lo, self._hi = value_range
        self._step = step
        self._getter = getter
        self._on_change = on_change
        self._track_color = track_color
        self._knob_color = knob_color
        self._dragging = False

    def value_at(self, x: int) -> float:
        fraction = clamp((x - self.rect.left) / max(1, self.rect.width), 0.0, 1.0)
        raw = self._lo + fraction * (self._hi - self._lo)
        snapped = self._lo + round((raw - self._lo) / self._step) * self._step
        return round(clamp(snapped, self._lo, self._hi), 6)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.inflate(0, 16).collidepoint(event.pos):
                self._dragging = True
                self._emit(event.pos[0])
                return True
        elif event.type == pygame.MOUSEMOTION and self._dragging:
            self._emit(event.pos[0])
            return True
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1 and self._dragging:
            self._dragging = False
            return True
        return False

    def _emit(self, x: int) -> None:
        value = self.value_at(x)
        if value != self._getter():
            self._on_change(value)

    def draw(self, surface: pygame.Surface) -> None:
        track = self.rect.copy()
        track.height = 6
        track.centery = self.rect.centery
        pygame.draw.rect(surface, self._track_color, track, border_radius=3)
        span = self._hi - self._lo
        fraction = 0.0 if span <= 0 else (self._getter() - self._lo) / span
        knob_x = self.rect.left + int(fraction * self.rect.width)
        pygame.draw.circle(surface, self._knob_color, (knob_x, self.rect.centery), 8)


def build_text_panel(
    font: pygame.font.Font,
    lines: Sequence[tuple[str, tuple[int, int, int]]],
    *,
    background_color: Color,
    padding: tuple[int, int] = (14, 10),
    border_color: Color | None = None,
) -> pygame.Surface:
    if not lines:
        raise ValueError("lines must not be empty")
    padding_x, padding_y = padding
    line_height = font.get_linesize()
    width = max(font.size(text)[0] for text, _ in lines) + padding_x * 2
    height = line_height * len(lines) + padding_y * 2
    panel_surface = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.rect(panel_surface, background_color, panel_surface.get_rect(), border_radius=8)
    if border_color is not None:
        pygame.draw.rect(panel_surface, border_color, panel_surface.get_rect(), 1, border_radius=8)
    for idx, (text, color) in enumerate(lines):
        if not text:
            continue
        text_surf = get_text_surface(font, text, color)
        panel_surface.blit(text_surf, (padding_x, padding_y + idx * line_height))
    return panel_surface
