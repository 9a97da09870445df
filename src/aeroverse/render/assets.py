from __future__ import annotations

from collections import OrderedDict
from typing import Iterable

import pygame


Color = tuple[int, int, int] | tuple[int, int, int, int]

_TEXT_SURFACE_CACHE_MAX_SIZE = 256
_TEXT_SURFACE_CACHE: OrderedDict[tuple[int, str, Color], pygame.Surface] = OrderedDict()


def get_text_surface(font: pygame.font.Font, text: str, color: Color) -> pygame.Surface:
    """Return a cached rendered surface for the given font, text and color.

    Cached surfaces are shared, callers copy before changing alpha.
    """

    key = (id(font), text, color)
    cached = _TEXT_SURFACE_CACHE.get(key)
    if cached is not None:
        _TEXT_SURFACE_CACHE.move_to_end(key)
        return cached
    rendered = font.render(text, True, color)
    _TEXT_SURFACE_CACHE[key] = rendered
    if len(_TEXT_SURFACE_CACHE) > _TEXT_SURFACE_CACHE_MAX_SIZE:
        _TEXT_SURFACE_CACHE.popitem(last=False)
    return rendered


def load_font(preferred_names: Iterable[str], size: int, *, bold: bool = False) -> pygame.font.Font:
    names = list(preferred_names)
    for name in names:
        match = pygame.font.match_font(name, bold=bold)
        if match:
            return pygame.font.Font(match, size)
    return pygame.font.SysFont(names[0] if names else None, size, bold=bold)


class FontSet:
    """Fonts used by the lab HUD, loaded once after ``pygame.font.init``."""

    PREFERRED = ("Inter", "Segoe UI", "DejaVu Sans", "Arial")
    MONO = ("JetBrains Mono", "Consolas", "DejaVu Sans Mono", "Courier New")

    def __init__(self) -> None:
        self.title = load_font(self.PREFERRED, 26, bold=True)
        self.body = load_font(self.PREFERRED, 16)
        self.small = load_font(self.PREFERRED, 12)
        self.label = load_font(self.PREFERRED, 14, bold=True)
        self.mono = load_font(self.MONO, 18)
        self.mono_large = load_font(self.MONO, 24)
