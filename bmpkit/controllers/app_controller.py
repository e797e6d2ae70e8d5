"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от абстрактных ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; тяжёлая логика вынесена в сервисы.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from tkinter import TclError, filedialog, messagebox
from typing import Optional

import customtkinter as ctk

from bmpkit.models.image_model import BitmapImage, ImageData
from bmpkit.services.color_service import ColorService
from bmpkit.services.image_service import ImageService
from bmpkit.services.process_service import KERNEL_PRESETS
from bmpkit.ui.image_viewer import ImageViewer
from bmpkit.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка и сохранение BMP через `ImageService`.
    - Применение выбранной пользователем обработки к копии изображения.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    window: ctk.CTk

    _image_service: ImageService = ImageService()
    _color_service: ColorService = ColorService()
    _current_image: Optional[ImageData] = None
    _processed: Optional[BitmapImage] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_save_file = self._handle_save_file
        self.sidebar.on_processing_change = self._handle_processing_change
        self.sidebar.on_compare_mode_change = self.viewer.set_compare_mode
        self.viewer.on_cursor_move = self._handle_cursor_move

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(("Bitmap", "*.bmp"), ("All files", "*.*")),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return

        try:
            image_data = self._image_service.load_image(file_path)
        except (FileNotFoundError, ValueError) as exc:
            messagebox.showerror("Ошибка", str(exc))
            return

        self._current_image = image_data
        self._processed = None
        self.viewer.set_image(self._image_service.to_pil(image_data.image))
        self.sidebar.set_image_info(image_data)
        self._apply_processing()

    def _handle_save_file(self) -> None:
        image = self._processed or (self._current_image.image if self._current_image else None)
        if image is None:
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить как", defaultextension=".bmp", filetypes=(("Bitmap", "*.bmp"),)
            )
        except TclError:
            return
        if not file_path:
            return
        try:
            self._image_service.save_image(image, file_path)
        except ValueError as exc:
            messagebox.showerror("Ошибка", str(exc))

    def _handle_processing_change(self, _mode: str) -> None:
        self._apply_processing()

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int]) -> None:
        if self._current_image is None or x is None or y is None:
            self.sidebar.update_cursor_info(None, None, None, None)
            return
        rgb = self._current_image.image.get_pixel(x, y)
        self.sidebar.update_cursor_info(x, y, rgb, self._color_service.rgb_to_hsi(rgb))

    # ---- Helpers ----
    def _apply_processing(self) -> None:
        """Применяет выбранный режим обработки к текущему изображению.

        Исходное изображение не мутирует: оттенки серого считаются на копии.
        """
        if self._current_image is None:
            return
        src = self._current_image.image
        mode = self.sidebar.get_processing_mode()
        processed: Optional[BitmapImage] = None

        if mode == "Оттенки серого":
            processed = BitmapImage.from_array(src.to_array())
            if processed is not None and not processed.to_grayscale():
                processed = None
        elif mode == "Фильтр":
            processed = src.apply_filter(KERNEL_PRESETS[self.sidebar.get_preset()])
        elif mode == "Выделение цвета":
            color_a, _color_b = self.sidebar.get_colors()
            if color_a is not None:
                processed = src.select_color(color_a, self.sidebar.get_tolerance())
        elif mode == "Диапазон цветов":
            color_a, color_b = self.sidebar.get_colors()
            if color_a is not None and color_b is not None:
                processed = src.select_color_range(color_a, color_b)

        if mode != "Нет" and processed is None:
            logger.warning("Режим %r не применён", mode)
        self._processed = processed
        self.viewer.set_processed_image(self._image_service.to_pil(processed) if processed is not None else None)
