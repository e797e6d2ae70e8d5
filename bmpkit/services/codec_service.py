"""Кодек несжатого 24-битного BMP: заголовки и строки пикселей.

Принципы:
- SRP: только сериализация; владение буферами остаётся за `BitmapImage`.
- Ошибки формата — `BitmapFormatError`, ошибки файловой системы — `OSError`.

Строки в файле идут снизу вверх (если высота в DIB положительна), каждая строка —
`width` троек B, G, R и нулевое дополнение до кратности 4 байтам.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Tuple

import numpy as np

from bmpkit.models.bitmap_headers import (
    BI_RGB,
    BITS_PER_PIXEL,
    BMP_MAGIC,
    HEADERS_SIZE,
    BitmapFileHeader,
    BitmapFormatError,
    DIBHeader,
    row_size,
)
from bmpkit.models.pixel_plane import PixelPlane

logger = logging.getLogger(__name__)


class CodecService:
    def read_headers(self, stream: BinaryIO) -> Tuple[BitmapFileHeader, DIBHeader]:
        """Читает и проверяет оба заголовка, оставляя поток в начале пиксельных данных.

        Raises:
            BitmapFormatError: неверная сигнатура, глубина цвета, сжатие или размеры.
        """
        file_header = BitmapFileHeader.unpack(stream.read(BitmapFileHeader.SIZE))
        dib_header = DIBHeader.unpack(stream.read(DIBHeader.SIZE))

        if file_header.type != BMP_MAGIC:
            raise BitmapFormatError(f"Неверная сигнатура: 0x{file_header.type:04X}")
        if dib_header.size < DIBHeader.SIZE:
            raise BitmapFormatError(f"Неподдерживаемый DIB-заголовок: {dib_header.size} байт")
        if dib_header.bits != BITS_PER_PIXEL:
            raise BitmapFormatError(f"Поддерживается только 24 бит/пиксель, в файле {dib_header.bits}")
        if dib_header.compression != BI_RGB:
            raise BitmapFormatError(f"Сжатые BMP не поддерживаются (compression={dib_header.compression})")
        if dib_header.width <= 0 or dib_header.height == 0:
            raise BitmapFormatError(f"Недопустимые размеры: {dib_header.width}x{dib_header.height}")

        # V4/V5 заголовки длиннее; пиксели начинаются с offset
        if file_header.offset > HEADERS_SIZE:
            stream.seek(file_header.offset)
        return file_header, dib_header

    def read_rows(
        self,
        stream: BinaryIO,
        planes: Tuple[PixelPlane, PixelPlane, PixelPlane],
        top_down: bool = False,
    ) -> None:
        """Заполняет плоскости R, G, B строками из потока.

        Raises:
            BitmapFormatError: если какая-либо строка прочитана не полностью.
        """
        red, green, blue = planes
        width, height = red.width, red.height
        stride = row_size(width)
        payload = width * 3

        for file_row in range(height):
            y = file_row if top_down else height - 1 - file_row
            buffer = stream.read(stride)
            if len(buffer) != stride:
                raise BitmapFormatError(
                    f"Строка {file_row} обрезана: прочитано {len(buffer)} из {stride} байт"
                )
            bgr = np.frombuffer(buffer, dtype=np.uint8, count=payload).reshape(width, 3)
            blue.pixels[y] = bgr[:, 0]
            green.pixels[y] = bgr[:, 1]
            red.pixels[y] = bgr[:, 2]

    def write_headers(self, stream: BinaryIO, file_header: BitmapFileHeader, dib_header: DIBHeader) -> None:
        stream.write(file_header.pack())
        stream.write(dib_header.pack())

    def write_rows(self, stream: BinaryIO, planes: Tuple[PixelPlane, PixelPlane, PixelPlane]) -> None:
        """Пишет строки снизу вверх: строка 0 в памяти оказывается последней в файле.

        Raises:
            OSError: при неполной записи строки.
        """
        red, green, blue = planes
        width, height = red.width, red.height
        stride = row_size(width)
        payload = width * 3
        row = np.zeros(stride, dtype=np.uint8)  # хвост остаётся нулевым дополнением

        for y in range(height - 1, -1, -1):
            row[0:payload:3] = blue.pixels[y]
            row[1:payload:3] = green.pixels[y]
            row[2:payload:3] = red.pixels[y]
            written = stream.write(row.tobytes())
            if written != stride:
                raise OSError(f"Строка {height - 1 - y} записана не полностью: {written} из {stride} байт")
        logger.debug("Записано %d строк по %d байт", height, stride)
