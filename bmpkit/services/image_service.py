"""Загрузка/сохранение изображений с диска и связь с Pillow.

Принципы:
- SRP: класс отвечает за файловый уровень и метаданные; сам кодек — в `CodecService`.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- В отличие от `BitmapImage`, ошибки здесь выражаются исключениями — так их удобнее
  показывать пользователю в CLI и UI.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from bmpkit.models.image_model import BitmapImage, ImageData


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает 24-битный BMP с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c декодированным `BitmapImage`, размерами и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не является поддерживаемым BMP.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        image = BitmapImage()
        if not image.decode(path):
            raise ValueError(f"Файл не является 24-битным BMP: {path}")

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        return ImageData(
            path=path,
            image=image,
            width=image.width,
            height=image.height,
            size_bytes=size_bytes,
        )

    def save_image(self, image: BitmapImage, file_path: str | Path) -> Path:
        """Сохраняет изображение в BMP.

        Raises:
            ValueError: если изображение невалидно или запись не удалась.
        """
        path = Path(file_path)
        if not image.encode(path):
            raise ValueError(f"Не удалось сохранить изображение: {path}")
        return path

    def import_image(self, file_path: str | Path) -> BitmapImage:
        """Читает любой формат, известный Pillow, и переводит его в `BitmapImage`.

        Raises:
            FileNotFoundError: если файла нет.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")
        try:
            with Image.open(path) as pil_image:
                return self.from_pil(pil_image)
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc
        except OSError as exc:
            # повреждённый или обрезанный файл известного формата
            raise ValueError(f"Не удалось прочитать изображение {path}: {exc}") from exc

    def to_pil(self, image: BitmapImage) -> Image.Image:
        """Переводит `BitmapImage` в `PIL.Image.Image` (режим RGB).

        Raises:
            ValueError: если изображение невалидно.
        """
        if not image.valid:
            raise ValueError("Изображение невалидно")
        return Image.fromarray(image.to_array())

    def from_pil(self, pil_image: Image.Image) -> BitmapImage:
        """Переводит изображение Pillow в `BitmapImage` (альфа-канал отбрасывается).

        Raises:
            ValueError: если изображение пустое.
        """
        arr = np.asarray(pil_image.convert("RGB"), dtype=np.uint8)
        image = BitmapImage.from_array(arr)
        if image is None:
            raise ValueError(f"Пустое изображение: {pil_image.size}")
        return image
