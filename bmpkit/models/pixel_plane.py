"""Плоскость одного цветового канала (8 бит на отсчёт)."""
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass
class PixelPlane:
    """Собственный буфер `height` x `width` байт, построчно, сверху вниз.

    Fields:
        pixels: Массив формы (height, width), dtype uint8, C-порядок.
        width: Ширина, px (дублируется для самоописания).
        height: Высота, px.
    """
    pixels: np.ndarray = field(default_factory=lambda: np.zeros((0, 0), dtype=np.uint8))
    width: int = 0
    height: int = 0

    @classmethod
    def allocate(cls, width: int, height: int) -> PixelPlane:
        """Выделяет обнулённую плоскость. Может выбросить `MemoryError`."""
        return cls(pixels=np.zeros((height, width), dtype=np.uint8), width=width, height=height)

    @property
    def flat(self) -> np.ndarray:
        """Плоское представление: индекс (y, x) соответствует `y * width + x`."""
        return self.pixels.reshape(-1)
