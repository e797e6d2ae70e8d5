"""Выделение цветов в пространстве HSI.

Принципы:
- SRP: преобразование RGB -> HSI и маскирование; владение буферами остаётся за моделью.
- Один и тот же векторизованный расчёт используется и для опорного цвета, и для
  пикселей изображения, поэтому точное совпадение цвета всегда попадает в окно.
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from bmpkit.models.color_model import Color, HSIColor

if TYPE_CHECKING:
    from bmpkit.models.image_model import BitmapImage

logger = logging.getLogger(__name__)

# Разброс max - min ниже порога считается серым: тон и насыщенность равны 0
NEAR_GRAY_THRESHOLD = 10


def hsi_planes(r: np.ndarray, g: np.ndarray, b: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """RGB (0..255) -> (H, S, I) поэлементно, float64."""
    r = np.asarray(r, dtype=np.float64)
    g = np.asarray(g, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    mx = np.maximum(np.maximum(r, g), b)
    mn = np.minimum(np.minimum(r, g), b)
    delta = mx - mn

    intensity = (r + g + b) / 765.0
    chromatic = delta >= NEAR_GRAY_THRESHOLD

    # для серых пикселей подставляем 1, чтобы не делить на 0; результат всё равно обнуляется
    safe_delta = np.where(chromatic, delta, 1.0)
    safe_i = np.where(chromatic, intensity, 1.0)

    saturation = np.where(chromatic, 1.0 - (mn / 255.0) / safe_i, 0.0)

    sector = np.where(
        mx == r,
        (g - b) / safe_delta,
        np.where(mx == g, 2.0 + (b - r) / safe_delta, 4.0 + (r - g) / safe_delta),
    )
    sector = np.where(sector < 0.0, sector + 6.0, sector)
    hue = np.where(chromatic, sector * (math.pi / 3.0), 0.0)
    return hue, saturation, intensity


class ColorService:
    def rgb_to_hsi(self, color: Color) -> HSIColor:
        h, s, i = hsi_planes(np.array([color.r]), np.array([color.g]), np.array([color.b]))
        return HSIColor(float(h[0]), float(s[0]), float(i[0]))

    def _image_hsi(self, image: BitmapImage) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return hsi_planes(image.red.pixels, image.green.pixels, image.blue.pixels)

    def _masked_copy(self, image: BitmapImage, mask: np.ndarray) -> Optional[BitmapImage]:
        """Новое изображение: пиксели под маской сохраняются, остальные — чёрные."""
        output = type(image).create(image.width, image.height)
        if output is None:
            return None
        for src, dst in zip(image.planes, output.planes):
            dst.pixels[...] = np.where(mask, src.pixels, 0)
        return output

    def select_color(self, image: BitmapImage, reference: Color, tolerance: HSIColor) -> Optional[BitmapImage]:
        """
        Оставляет пиксели, у которых каждая компонента HSI лежит в окне
        `reference ± tolerance` (независимо по осям); остальные закрашивает чёрным.
        """
        if not image.valid:
            logger.warning("select_color: изображение невалидно")
            return None
        if reference is None or tolerance is None:
            logger.warning("select_color: не задан цвет или допуск")
            return None
        if min(tolerance.h, tolerance.s, tolerance.i) < 0:
            logger.warning("select_color: допуск не может быть отрицательным: %s", tolerance)
            return None

        ref = self.rgb_to_hsi(reference)
        h, s, i = self._image_hsi(image)
        mask = (
            ((ref.h - tolerance.h) <= h) & (h <= (ref.h + tolerance.h))
            & ((ref.s - tolerance.s) <= s) & (s <= (ref.s + tolerance.s))
            & ((ref.i - tolerance.i) <= i) & (i <= (ref.i + tolerance.i))
        )
        return self._masked_copy(image, mask)

    def select_color_range(self, image: BitmapImage, color_a: Color, color_b: Color) -> Optional[BitmapImage]:
        """
        Оставляет пиксели внутри «коробки» HSI, натянутой на два цвета.
        Насыщенность и интенсивность — отрезок [min, max]; тон — кратчайшая дуга
        окружности между тонами концов (тон цикличен, 0 и 2π совпадают).
        """
        if not image.valid:
            logger.warning("select_color_range: изображение невалидно")
            return None
        if color_a is None or color_b is None:
            logger.warning("select_color_range: не заданы границы диапазона")
            return None

        a = self.rgb_to_hsi(color_a)
        b = self.rgb_to_hsi(color_b)
        h, s, i = self._image_hsi(image)

        h_lo, h_hi = min(a.h, b.h), max(a.h, b.h)
        if h_hi - h_lo <= math.pi:
            hue_ok = (h_lo <= h) & (h <= h_hi)
        else:
            # дуга проходит через 0
            hue_ok = (h >= h_hi) | (h <= h_lo)

        mask = (
            hue_ok
            & (min(a.s, b.s) <= s) & (s <= max(a.s, b.s))
            & (min(a.i, b.i) <= i) & (i <= max(a.i, b.i))
        )
        return self._masked_copy(image, mask)
