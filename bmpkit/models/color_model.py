"""Цветовые модели: RGB-тройка и HSI (тон, насыщенность, интенсивность).

Принципы:
- SRP: только структуры данных; преобразования живут в `color_service`.
- Чистый код: неизменяемость (`frozen=True`).
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Color:
    """Цвет RGB, компоненты 0..255."""
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= int(value) <= 255:
                raise ValueError(f"Компонента {name}={value} вне диапазона 0..255")

    @classmethod
    def parse(cls, text: str) -> Color:
        """Разбирает строку вида "R,G,B" или "#RRGGBB"."""
        text = text.strip()
        if text.startswith("#") and len(text) == 7:
            return cls(int(text[1:3], 16), int(text[3:5], 16), int(text[5:7], 16))
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 3:
            raise ValueError(f"Ожидается R,G,B или #RRGGBB: {text!r}")
        r, g, b = (int(p) for p in parts)
        return cls(r, g, b)

    def to_hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


@dataclass(frozen=True)
class HSIColor:
    """Цвет в пространстве HSI.

    Fields:
        h: Тон, радианы в [0, 2π).
        s: Насыщенность, [0, 1].
        i: Интенсивность, [0, 1].
    """
    h: float
    s: float
    i: float

    @classmethod
    def parse(cls, text: str) -> HSIColor:
        """Разбирает строку вида "H,S,I" (используется для допусков)."""
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 3:
            raise ValueError(f"Ожидается H,S,I: {text!r}")
        h, s, i = (float(p) for p in parts)
        return cls(h, s, i)
