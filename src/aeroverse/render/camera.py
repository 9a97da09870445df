from __future__ import annotations

import numpy as np

from aeroverse.core.physics import clamp


class Camera:
    """Top-down view of the orbital plane with smoothed zoom and drag panning.

    World units are simulation units, the zoom level is expressed in pixels
    per unit. The viewport may be narrower than the window when a side panel
    occupies part of it.
    """

    def __init__(
        self,
        viewport: tuple[int, int],
        ppu: float,
        *,
        min_ppu: float,
        max_ppu: float,
    ) -> None:
        self._viewport = viewport
        self._min_ppu = min_ppu
        self._max_ppu = max_ppu
        self._ppu = clamp(ppu, min_ppu, max_ppu)
        self._ppu_target = self._ppu
        self._center = np.zeros(2, dtype=float)
        self._pan_anchor: tuple[int, int] | None = None

    @property
    def viewport(self) -> tuple[int, int]:
        return self._viewport

    def update_viewport(self, viewport: tuple[int, int]) -> None:
        self._viewport = viewport

    @property
    def ppu(self) -> float:
        return self._ppu

    @property
    def center(self) -> np.ndarray:
        return self._center

    def zoom_by_factor(self, factor: float) -> None:
        self._ppu_target = clamp(self._ppu_target * factor, self._min_ppu, self._max_ppu)

    def recenter(self) -> None:
        self._center[:] = 0.0

    def update(self, smoothing: float = 0.15) -> None:
        self._ppu += (self._ppu_target - self._ppu) * smoothing
        self._ppu = clamp(self._ppu, self._min_ppu, self._max_ppu)

    def begin_pan(self, position: tuple[int, int]) -> None:
        self._pan_anchor = position

    def pan(self, position: tuple[int, int]) -> None:
        if self._pan_anchor is None:
            return
        dx = position[0] - self._pan_anchor[0]
        dy = position[1] - self._pan_anchor[1]
        self._center[0] -= dx / self._ppu
        self._center[1] += dy / self._ppu
        self._pan_anchor = position

    def end_pan(self) -> None:
        self._pan_anchor = None

    def world_to_screen(self, x: float, y: float) -> tuple[int, int]:
        width, height = self._viewport
        sx = width // 2 + int((x - self._center[0]) * self._ppu)
        sy = height // 2 - int((y - self._center[1]) * self._ppu)
        return sx, sy

    def scale_length(self, length: float) -> int:
        return max(1, int(round(length * self._ppu)))
