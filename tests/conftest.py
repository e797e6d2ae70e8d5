from __future__ import annotations

import numpy as np
import pytest

from bmpkit.models.image_model import BitmapImage


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture
def random_image(rng):
    """Случайное изображение 7x5: ширина не кратна 4, строки с дополнением."""
    def _make(width: int = 7, height: int = 5) -> BitmapImage:
        arr = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
        image = BitmapImage.from_array(arr)
        assert image is not None
        return image
    return _make


@pytest.fixture
def solid_image():
    def _make(color, width: int = 4, height: int = 4) -> BitmapImage:
        arr = np.empty((height, width, 3), dtype=np.uint8)
        arr[...] = color
        image = BitmapImage.from_array(arr)
        assert image is not None
        return image
    return _make
