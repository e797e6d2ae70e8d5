from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from bmpkit.models.image_model import BitmapImage

logger = logging.getLogger(__name__)

# Весовые коэффициенты яркости Y в тысячных: 0.299, 0.587, 0.114
LUMA_WEIGHTS = (299, 587, 114)

KERNEL_PRESETS: Dict[str, List[float]] = {
    "identity": [0, 0, 0, 0, 1, 0, 0, 0, 0],
    "box_blur": [1 / 9] * 9,
    "gaussian_blur": [v / 16 for v in (1, 2, 1, 2, 4, 2, 1, 2, 1)],
    "sharpen": [0, -1, 0, -1, 5, -1, 0, -1, 0],
    "laplacian": [0, -2, 0, -2, 8, -2, 0, -2, 0],
    "edge_detect": [-1, -1, -1, -1, 8, -1, -1, -1, -1],
    "emboss": [-2, -1, 0, -1, 1, 1, 0, 1, 2],
}


class ProcessService:
    def to_grayscale(self, image: BitmapImage) -> bool:
        """
        Преобразование в оттенки серого на месте: Y = 0.299 R + 0.587 G + 0.114 B
        (с отбрасыванием дробной части) записывается во все три канала.
        Строки обходятся сверху вниз, изображение не переворачивается.
        """
        if not image.valid:
            logger.warning("to_grayscale: изображение невалидно")
            return False

        wr, wg, wb = LUMA_WEIGHTS
        # целочисленная арифметика: серый пиксель (v, v, v) переходит сам в себя
        y = (
            wr * image.red.pixels.astype(np.uint32)
            + wg * image.green.pixels.astype(np.uint32)
            + wb * image.blue.pixels.astype(np.uint32)
        ) // 1000
        gray = y.astype(np.uint8)
        image.red.pixels[...] = gray
        image.green.pixels[...] = gray
        image.blue.pixels[...] = gray
        return True

    # ---------- Вспомогательные функции ----------
    def _kernel_matrix(self, kernel: Sequence[float] | np.ndarray) -> Optional[np.ndarray]:
        """
        Проверяет ядро и возвращает его в виде квадратной матрицы dim x dim (float64).
        Требования: длина > 1, длина — точный квадрат, сторона нечётная, значения конечны.
        """
        try:
            flat = np.asarray(kernel, dtype=np.float64).reshape(-1)
        except (TypeError, ValueError):
            return None
        length = flat.size
        if length <= 1:
            return None
        dim = int(round(math.sqrt(length)))
        if dim * dim != length or dim % 2 != 1:
            return None
        if not np.all(np.isfinite(flat)):
            return None
        return flat.reshape(dim, dim)

    def _correlate(self, plane: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        """
        Сумма matrix[ky, kx] * plane[clamp(y + ky - pad), clamp(x + kx - pad)].
        Границы — повторение крайнего пикселя, векторизованно через сдвиги.
        """
        dim = matrix.shape[0]
        pad = (dim - 1) // 2
        h, w = plane.shape
        p = np.pad(plane.astype(np.float64), ((pad, pad), (pad, pad)), mode="edge")
        acc = np.zeros((h, w), dtype=np.float64)
        for ky in range(dim):
            for kx in range(dim):
                weight = matrix[ky, kx]
                if weight != 0.0:
                    acc += weight * p[ky : ky + h, kx : kx + w]
        return acc

    # ---------- Свёртка по каналам ----------
    def apply_filter(self, image: BitmapImage, kernel: Sequence[float] | np.ndarray) -> Optional[BitmapImage]:
        """
        Применяет квадратное ядро нечётного размера к каждому каналу независимо.
        Результат — новое изображение того же размера; каждый канал ограничен
        диапазоном [0, 255] и усечён до целого. `None` при неверных аргументах.
        """
        if not image.valid:
            logger.warning("apply_filter: изображение невалидно")
            return None
        matrix = self._kernel_matrix(kernel)
        if matrix is None:
            logger.warning("apply_filter: ядро должно быть нечётным квадратом длиной > 1")
            return None

        output = type(image).create(image.width, image.height)
        if output is None:
            return None
        for src, dst in zip(image.planes, output.planes):
            acc = self._correlate(src.pixels, matrix)
            dst.pixels[...] = np.clip(acc, 0.0, 255.0).astype(np.uint8)
        return output

    # ---------- Свёртка с объединением каналов ----------
    def allocate_feature_map(self, image: BitmapImage, dtype=np.float32) -> Optional[np.ndarray]:
        """Выделяет одноканальную карту признаков под размер изображения."""
        if not image.valid:
            return None
        return np.zeros((image.height, image.width), dtype=dtype)

    def apply_kernel(
        self,
        image: BitmapImage,
        weights: Sequence[Sequence[float] | np.ndarray],
        output: np.ndarray,
    ) -> bool:
        """
        Три ядра (для R, G, B) одного нечётного размера; в `output` записывается сумма
        взвешенных окон всех каналов, ограниченная [0, 255], без округления.

        `output` должен быть заранее выделен: форма (height, width), вещественный dtype.
        """
        if not image.valid:
            logger.warning("apply_kernel: изображение невалидно")
            return False
        if weights is None or len(weights) != 3:
            logger.warning("apply_kernel: нужно три ядра (R, G, B), получено %r", weights)
            return False
        matrices = [self._kernel_matrix(w) for w in weights]
        if any(m is None for m in matrices):
            logger.warning("apply_kernel: ядра должны быть нечётными квадратами длиной > 1")
            return False
        if len({m.shape for m in matrices}) != 1:
            logger.warning("apply_kernel: ядра разного размера")
            return False
        if (
            not isinstance(output, np.ndarray)
            or output.shape != (image.height, image.width)
            or not np.issubdtype(output.dtype, np.floating)
        ):
            logger.warning("apply_kernel: выход должен быть вещественной плоскостью %dx%d", image.width, image.height)
            return False

        total = np.zeros((image.height, image.width), dtype=np.float64)
        for plane, matrix in zip(image.planes, matrices):
            total += self._correlate(plane.pixels, matrix)
        output[...] = np.clip(total, 0.0, 255.0)
        return True
