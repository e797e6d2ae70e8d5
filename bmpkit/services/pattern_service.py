"""Генераторы демонстрационных изображений."""
from __future__ import annotations

from typing import Optional

import numpy as np

from bmpkit.models.image_model import BitmapImage


class PatternService:
    def horizontal_gradient(self, width: int = 64, height: int = 64) -> Optional[BitmapImage]:
        """Серый градиент слева направо: 255 * x / width во всех каналах."""
        image = BitmapImage.create(width, height)
        if image is None:
            return None
        row = (255.0 * np.arange(width) / width).astype(np.uint8)
        for plane in image.planes:
            plane.pixels[...] = row[np.newaxis, :]
        return image

    def vertical_red_gradient(self, width: int = 64, height: int = 64) -> Optional[BitmapImage]:
        """Красный градиент сверху вниз, зелёный и синий каналы нулевые."""
        image = BitmapImage.create(width, height)
        if image is None:
            return None
        column = (255.0 * np.arange(height) / height).astype(np.uint8)
        image.red.pixels[...] = column[:, np.newaxis]
        return image

    def salt_and_pepper(self, width: int = 256, height: int = 256, seed: Optional[int] = None) -> Optional[BitmapImage]:
        """Независимый равномерный шум 0..255 в каждом канале."""
        image = BitmapImage.create(width, height)
        if image is None:
            return None
        rng = np.random.default_rng(seed)
        for plane in image.planes:
            plane.pixels[...] = rng.integers(0, 256, size=(height, width), dtype=np.uint8)
        return image
