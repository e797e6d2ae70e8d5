"""Боковая панель: файл, информация, курсор, параметры обработки.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk

from bmpkit.models.color_model import Color, HSIColor
from bmpkit.models.image_model import ImageData
from bmpkit.services.process_service import KERNEL_PRESETS

PROCESSING_MODES = ("Нет", "Оттенки серого", "Фильтр", "Выделение цвета", "Диапазон цветов")


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, курсор, обработка."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_save_file: Optional[Callable[[], None]] = None
        self.on_processing_change: Optional[Callable[[str], None]] = None
        self.on_compare_mode_change: Optional[Callable[[str], None]] = None

        # Controls
        self._title = ctk.CTkLabel(self, text="Инструменты", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть BMP…", command=self._emit_open_file)
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._save_btn = ctk.CTkButton(self, text="Сохранить результат…", command=self._emit_save_file)
        self._save_btn.grid(row=2, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")

        ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left").grid(
            row=4, column=0, padx=8, pady=(0, 2), sticky="ew"
        )
        ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left").grid(
            row=5, column=0, padx=8, pady=(0, 2), sticky="ew"
        )
        ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left").grid(
            row=6, column=0, padx=8, pady=(0, 10), sticky="ew"
        )

        # Cursor section
        self._cursor_title = ctk.CTkLabel(self, text="Курсор", font=ctk.CTkFont(size=16, weight="bold"))
        self._cursor_title.grid(row=7, column=0, padx=8, pady=(8, 4), sticky="w")

        self._cursor_xy_val = ctk.StringVar(value="—")
        self._cursor_rgb_val = ctk.StringVar(value="—")
        self._cursor_hsi_val = ctk.StringVar(value="—")
        for row, var in ((8, self._cursor_xy_val), (9, self._cursor_rgb_val), (10, self._cursor_hsi_val)):
            ctk.CTkLabel(self, textvariable=var, anchor="w", justify="left").grid(
                row=row, column=0, padx=8, pady=(0, 2), sticky="ew"
            )

        # Обработка
        self._proc_title = ctk.CTkLabel(self, text="Обработка", font=ctk.CTkFont(size=16, weight="bold"))
        self._proc_title.grid(row=20, column=0, padx=8, pady=(8, 4), sticky="w")

        self._processing_mode = ctk.StringVar(value="Нет")
        self._mode_menu = ctk.CTkOptionMenu(
            self, values=list(PROCESSING_MODES), variable=self._processing_mode, command=self._emit_processing_change
        )
        self._mode_menu.grid(row=21, column=0, padx=8, pady=(0, 6), sticky="ew")

        # Фильтр
        self._preset = ctk.StringVar(value="sharpen")
        self._preset_menu = ctk.CTkOptionMenu(
            self, values=sorted(KERNEL_PRESETS), variable=self._preset, command=self._on_param_change
        )
        self._preset_menu.grid(row=22, column=0, padx=8, pady=(0, 6), sticky="ew")

        # Выделение цвета: опорный цвет и допуски H, S, I
        self._color_a = ctk.StringVar(value="254,254,183")
        self._color_b = ctk.StringVar(value="0,0,255")
        self._color_a_entry = ctk.CTkEntry(self, textvariable=self._color_a, placeholder_text="R,G,B")
        self._color_a_entry.grid(row=23, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._color_a_entry.bind("<Return>", self._on_param_change)
        self._color_b_entry = ctk.CTkEntry(self, textvariable=self._color_b, placeholder_text="R,G,B")
        self._color_b_entry.grid(row=24, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._color_b_entry.bind("<Return>", self._on_param_change)

        self._tol_sliders = []
        for row, (label, to, value) in enumerate((("H", 3.2, 0.8), ("S", 1.0, 0.1), ("I", 1.0, 0.5)), start=25):
            slider = ctk.CTkSlider(self, from_=0.0, to=to, number_of_steps=100, command=self._on_param_change)
            slider.set(value)
            slider.grid(row=row, column=0, padx=8, pady=(0, 4), sticky="ew")
            self._tol_sliders.append((label, slider))

        # filler
        self.grid_rowconfigure(99, weight=1)

        self._compare_mode = ctk.StringVar(value="Нет")
        self._compare_menu = ctk.CTkOptionMenu(
            self, values=["Нет", "2-up"], variable=self._compare_mode, command=self._emit_compare_mode_change
        )
        self._compare_menu.grid(row=100, column=0, padx=8, pady=(4, 8), sticky="ew")

    # ---- Public API ----
    def set_image_info(self, data: ImageData) -> None:
        self._path_val.set(str(data.path))
        self._size_val.set(self._format_size(data.size_bytes))
        self._dims_val.set(f"{data.width} x {data.height} px, 24 бит")

    def update_cursor_info(self, x: Optional[int], y: Optional[int], rgb: Optional[Color], hsi: Optional[HSIColor]) -> None:
        if x is None or y is None or rgb is None:
            self._cursor_xy_val.set("—")
            self._cursor_rgb_val.set("—")
            self._cursor_hsi_val.set("—")
            return
        self._cursor_xy_val.set(f"x={x}, y={y}")
        self._cursor_rgb_val.set(f"RGB {rgb.r}, {rgb.g}, {rgb.b}  {rgb.to_hex()}")
        if hsi is not None:
            self._cursor_hsi_val.set(f"HSI {hsi.h:.2f}, {hsi.s:.2f}, {hsi.i:.2f}")

    def get_processing_mode(self) -> str:
        return self._processing_mode.get()

    def get_preset(self) -> str:
        return self._preset.get()

    def get_colors(self) -> Tuple[Optional[Color], Optional[Color]]:
        """Возвращает (цвет A, цвет B); нераспознанные значения — None."""
        return self._parse_color(self._color_a.get()), self._parse_color(self._color_b.get())

    def get_tolerance(self) -> HSIColor:
        values = {label: float(slider.get()) for label, slider in self._tol_sliders}
        return HSIColor(values["H"], values["S"], values["I"])

    # ---- Internals ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()

    def _emit_save_file(self) -> None:
        if self.on_save_file:
            self.on_save_file()

    def _emit_processing_change(self, _value: object | None = None) -> None:
        if self.on_processing_change:
            self.on_processing_change(self._processing_mode.get())

    def _emit_compare_mode_change(self, _value: str) -> None:
        if self.on_compare_mode_change:
            self.on_compare_mode_change(self._compare_mode.get())

    def _on_param_change(self, _value: object | None = None) -> None:
        # пересчитываем немедленно, если режим уже выбран
        if self._processing_mode.get() != "Нет":
            self._emit_processing_change()

    @staticmethod
    def _parse_color(text: str) -> Optional[Color]:
        try:
            return Color.parse(text)
        except ValueError:
            return None

    def _format_size(self, size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        thresholds = [("Б", 1024), ("КБ", 1024**2), ("МБ", 1024**3), ("ГБ", 1024**4)]
        for label, limit in thresholds:
            if size_bytes < limit:
                if label == "Б":
                    return f"{size_bytes} {label}"
                value = size_bytes / (limit // 1024)
                return f"{value:.1f} {label}"
        value = size_bytes / (1024**4)
        return f"{value:.1f} ГБ"
