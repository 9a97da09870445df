"""Rendering helpers for the orbital lab host."""

from .assets import FontSet, get_text_surface, load_font
from .camera import Camera
from .draw import (
    draw_planet,
    draw_ring,
    draw_satellite,
    draw_starfield,
    draw_tag,
    draw_trail,
    generate_starfield,
)
from .ui import Button, ButtonVisualStyle, Slider, build_text_panel

__all__ = [
    "Button",
    "ButtonVisualStyle",
    "Camera",
    "FontSet",
    "Slider",
    "build_text_panel",
    "draw_planet",
    "draw_ring",
    "draw_satellite",
    "draw_starfield",
    "draw_tag",
    "draw_trail",
    "generate_starfield",
    "get_text_surface",
    "load_font",
]
