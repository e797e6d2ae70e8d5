"""Модели данных для изображений.

Принципы:
- SRP: `BitmapImage` владеет плоскостями и заголовками и управляет их жизненным циклом;
  алгоритмы обработки живут в сервисах, модель лишь делегирует им.
- Чистый код: `ImageData` неизменяема (`frozen=True`) для предсказуемости.

Все операции `BitmapImage` сообщают о неудаче через `False`/`None` и пишут причину в лог;
исключения кодека и файловой системы не выходят наружу.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

import numpy as np

from bmpkit.models.bitmap_headers import (
    BitmapFileHeader,
    BitmapFormatError,
    DIBHeader,
    build_headers,
)
from bmpkit.models.color_model import Color, HSIColor
from bmpkit.models.pixel_plane import PixelPlane
from bmpkit.services.codec_service import CodecService
from bmpkit.services.color_service import ColorService
from bmpkit.services.process_service import ProcessService

logger = logging.getLogger(__name__)


class BitmapImage:
    """24-битное изображение, хранимое тремя плоскостями R, G, B.

    Пустой объект невалиден; валидным он становится после `initialize` или
    успешного `decode`. `destroy` всегда безопасен и возвращает объект в пустое состояние.
    """

    _codec = CodecService()
    _process = ProcessService()
    _color = ColorService()

    def __init__(self) -> None:
        self.red = PixelPlane()
        self.green = PixelPlane()
        self.blue = PixelPlane()
        self.file_header = BitmapFileHeader()
        self.dib_header = DIBHeader()
        self._valid = False

    def __enter__(self) -> BitmapImage:
        return self

    def __exit__(self, *exc_info) -> None:
        self.destroy()

    def __repr__(self) -> str:
        state = f"{self.width}x{self.height}" if self._valid else "empty"
        return f"<BitmapImage {state}>"

    # ---- Lifecycle ----
    @classmethod
    def create(cls, width: int, height: int) -> Optional[BitmapImage]:
        """Создаёт и инициализирует изображение; `None`, если размеры недопустимы."""
        image = cls()
        return image if image.initialize(width, height) else None

    @classmethod
    def open(cls, path: str | Path) -> Optional[BitmapImage]:
        """Создаёт изображение и декодирует в него файл; `None` при ошибке."""
        image = cls()
        return image if image.decode(path) else None

    @classmethod
    def from_array(cls, rgb: np.ndarray) -> Optional[BitmapImage]:
        """Строит изображение из массива (H, W, 3) uint8 в порядке RGB."""
        rgb = np.asarray(rgb)
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            logger.warning("Ожидается массив HxWx3, получено %s", rgb.shape)
            return None
        height, width = rgb.shape[:2]
        image = cls.create(width, height)
        if image is None:
            return None
        rgb = np.clip(rgb, 0, 255).astype(np.uint8, copy=False)
        image.red.pixels[...] = rgb[:, :, 0]
        image.green.pixels[...] = rgb[:, :, 1]
        image.blue.pixels[...] = rgb[:, :, 2]
        return image

    def initialize(self, width: int, height: int) -> bool:
        """Выделяет три плоскости `width` x `height` и заполняет заголовки.

        При недопустимых размерах ничего не меняет и возвращает `False`.
        """
        if width <= 0 or height <= 0:
            logger.warning("Недопустимые размеры изображения: %sx%s", width, height)
            return False
        width, height = int(width), int(height)

        self.destroy()
        try:
            red = PixelPlane.allocate(width, height)
            green = PixelPlane.allocate(width, height)
            blue = PixelPlane.allocate(width, height)
        except MemoryError:
            # частично выделенные плоскости освобождаются вместе с локальными именами
            logger.warning("Не удалось выделить память под %dx%d", width, height)
            return False

        self.red, self.green, self.blue = red, green, blue
        self.file_header, self.dib_header = build_headers(width, height)
        self._valid = True
        logger.debug("Инициализировано изображение %dx%d", width, height)
        return True

    def destroy(self) -> None:
        """Освобождает плоскости и сбрасывает заголовки. Идемпотентен."""
        self.red = PixelPlane()
        self.green = PixelPlane()
        self.blue = PixelPlane()
        self.file_header = BitmapFileHeader()
        self.dib_header = DIBHeader()
        self._valid = False

    def decode(self, path: str | Path) -> bool:
        """Читает 24-битный BMP. При любой ошибке изображение остаётся пустым."""
        path = Path(path)
        try:
            stream = path.open("rb")
        except OSError as exc:
            logger.warning("Не удалось открыть %s для чтения: %s", path, exc)
            return False

        with stream:
            self.destroy()
            try:
                _file_header, dib_header = self._codec.read_headers(stream)
                top_down = dib_header.height < 0
                if not self.initialize(dib_header.width, abs(dib_header.height)):
                    return False
                self._codec.read_rows(stream, self.planes, top_down=top_down)
            except (BitmapFormatError, OSError) as exc:
                logger.warning("Ошибка декодирования %s: %s", path, exc)
                self.destroy()
                return False

        logger.debug("Прочитан %s (%dx%d)", path, self.width, self.height)
        return True

    def encode(self, path: str | Path) -> bool:
        """Пишет изображение в 24-битный BMP."""
        if not self._valid:
            logger.warning("Попытка сохранить невалидное изображение в %s", path)
            return False

        path = Path(path)
        try:
            with path.open("wb") as stream:
                self._codec.write_headers(stream, self.file_header, self.dib_header)
                self._codec.write_rows(stream, self.planes)
        except OSError as exc:
            logger.warning("Ошибка записи %s: %s", path, exc)
            return False
        return True

    # ---- Accessors ----
    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def width(self) -> int:
        return self.red.width if self._valid else 0

    @property
    def height(self) -> int:
        return self.red.height if self._valid else 0

    @property
    def planes(self) -> Tuple[PixelPlane, PixelPlane, PixelPlane]:
        return self.red, self.green, self.blue

    def get_pixel(self, x: int, y: int) -> Color:
        """Цвет пикселя (x, y); `IndexError` вне границ или для невалидного изображения."""
        if not (self._valid and 0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Пиксель ({x}, {y}) вне изображения {self.width}x{self.height}")
        return Color(int(self.red.pixels[y, x]), int(self.green.pixels[y, x]), int(self.blue.pixels[y, x]))

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        if not (self._valid and 0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Пиксель ({x}, {y}) вне изображения {self.width}x{self.height}")
        self.red.pixels[y, x] = color.r
        self.green.pixels[y, x] = color.g
        self.blue.pixels[y, x] = color.b

    def to_array(self) -> np.ndarray:
        """Копия пикселей в виде (H, W, 3) uint8, порядок RGB; пустой массив для невалидного."""
        if not self._valid:
            return np.zeros((0, 0, 3), dtype=np.uint8)
        return np.stack([self.red.pixels, self.green.pixels, self.blue.pixels], axis=2)

    # ---- Processing ----
    def to_grayscale(self) -> bool:
        return self._process.to_grayscale(self)

    def apply_filter(self, kernel: Sequence[float] | np.ndarray) -> Optional[BitmapImage]:
        return self._process.apply_filter(self, kernel)

    def apply_kernel(self, weights: Sequence[Sequence[float] | np.ndarray], output: np.ndarray) -> bool:
        return self._process.apply_kernel(self, weights, output)

    def select_color(self, reference: Color, tolerance: HSIColor) -> Optional[BitmapImage]:
        return self._color.select_color(self, reference, tolerance)

    def select_color_range(self, color_a: Color, color_b: Color) -> Optional[BitmapImage]:
        return self._color.select_color_range(self, color_a, color_b)


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая запись о загруженном изображении и его метаданных.

    Fields:
        path: Путь к исходному файлу.
        image: Декодированное изображение.
        width: Ширина, px.
        height: Высота, px.
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    image: BitmapImage
    width: int
    height: int
    size_bytes: Optional[int]
