"""Заголовки файла BMP: BITMAPFILEHEADER и BITMAPINFOHEADER (DIB).

Принципы:
- SRP: только упаковка/распаковка фиксированных структур, без работы с пикселями.
- Чистый код: формат описан строками `struct`, размеры вычисляются из них.
"""
from __future__ import annotations

import struct
from dataclasses import astuple, dataclass
from typing import ClassVar, Tuple

BMP_MAGIC = 0x4D42  # "BM"
BITS_PER_PIXEL = 24
BI_RGB = 0
PIXELS_PER_METER = 2835  # 72 DPI


class BitmapFormatError(ValueError):
    """Файл не является поддерживаемым 24-битным BMP или данные обрезаны."""


def row_size(width: int, bits: int = BITS_PER_PIXEL) -> int:
    """Длина строки пикселей в байтах с выравниванием по 32 битам."""
    return ((bits * width + 31) // 32) * 4


@dataclass
class BitmapFileHeader:
    """BITMAPFILEHEADER, 14 байт."""
    FORMAT: ClassVar[str] = "<HIHHI"
    SIZE: ClassVar[int] = struct.calcsize("<HIHHI")

    type: int = 0
    size: int = 0
    reserved_1: int = 0
    reserved_2: int = 0
    offset: int = 0

    def pack(self) -> bytes:
        return struct.pack(self.FORMAT, *astuple(self))

    @classmethod
    def unpack(cls, data: bytes) -> BitmapFileHeader:
        """Разбирает заголовок из `SIZE` байт.

        Raises:
            BitmapFormatError: если данных меньше размера заголовка.
        """
        if len(data) < cls.SIZE:
            raise BitmapFormatError(f"Заголовок файла обрезан: {len(data)} из {cls.SIZE} байт")
        return cls(*struct.unpack(cls.FORMAT, data[: cls.SIZE]))


@dataclass
class DIBHeader:
    """BITMAPINFOHEADER, 40 байт."""
    FORMAT: ClassVar[str] = "<IiiHHIIiiII"
    SIZE: ClassVar[int] = struct.calcsize("<IiiHHIIiiII")

    size: int = 0
    width: int = 0
    height: int = 0  # < 0 для файлов, записанных сверху вниз
    planes: int = 0
    bits: int = 0
    compression: int = 0
    image_size: int = 0
    x_resolution: int = 0
    y_resolution: int = 0
    colors: int = 0
    important_colors: int = 0

    def pack(self) -> bytes:
        return struct.pack(self.FORMAT, *astuple(self))

    @classmethod
    def unpack(cls, data: bytes) -> DIBHeader:
        """Разбирает DIB-заголовок из `SIZE` байт.

        Raises:
            BitmapFormatError: если данных меньше размера заголовка.
        """
        if len(data) < cls.SIZE:
            raise BitmapFormatError(f"DIB-заголовок обрезан: {len(data)} из {cls.SIZE} байт")
        return cls(*struct.unpack(cls.FORMAT, data[: cls.SIZE]))


HEADERS_SIZE = BitmapFileHeader.SIZE + DIBHeader.SIZE


def build_headers(width: int, height: int) -> Tuple[BitmapFileHeader, DIBHeader]:
    """Заполняет оба заголовка для несжатого 24-битного изображения `width` x `height`."""
    image_size = row_size(width) * height
    file_header = BitmapFileHeader(
        type=BMP_MAGIC,
        size=HEADERS_SIZE + image_size,
        reserved_1=0,
        reserved_2=0,
        offset=HEADERS_SIZE,
    )
    dib_header = DIBHeader(
        size=DIBHeader.SIZE,
        width=width,
        height=height,
        planes=1,
        bits=BITS_PER_PIXEL,
        compression=BI_RGB,
        image_size=image_size,
        x_resolution=PIXELS_PER_METER,
        y_resolution=PIXELS_PER_METER,
        colors=0,  # без палитры
        important_colors=0,
    )
    return file_header, dib_header
