"""Виджет просмотра изображений: вписывание в окно и режимы сравнения.

Принципы:
- SRP: отвечает только за представление и интеракции с изображением.
- Чистый код: чёткое разделение публичного API и внутренних обработчиков событий.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk


class ImageViewer(ctk.CTkFrame):
    """Канва с отображением «до/после» и side-by-side."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._original_image: Optional[Image.Image] = None
        self._processed_image: Optional[Image.Image] = None
        self._tk_image_before: Optional[ImageTk.PhotoImage] = None
        self._tk_image_after: Optional[ImageTk.PhotoImage] = None

        self._scale_factor: float = 1.0
        self._image_top_left: Tuple[int, int] = (0, 0)

        # (x, y) в координатах изображения либо None, если курсор вне его
        self.on_cursor_move: Optional[Callable[[Optional[int], Optional[int]], None]] = None

        # compare modes: "off" | "side_by_side"
        self._compare_mode: str = "off"
        self._hold_before_active: bool = False

        self._canvas.bind("<Configure>", self._on_canvas_resize)
        self._canvas.bind("<Motion>", self._on_mouse_move)
        self._canvas.bind("<Leave>", self._on_mouse_leave)

        # Hold space to preview "before"
        self._canvas.bind("<KeyPress-space>", self._on_space_down)
        self._canvas.bind("<KeyRelease-space>", self._on_space_up)
        self._canvas.bind("<Enter>", lambda _e: self._canvas.focus_set())

    # ---- Public API ----
    def set_image(self, image: Image.Image) -> None:
        """Устанавливает исходное изображение и сбрасывает обработанное."""
        self._original_image = image
        self._processed_image = None
        self._render_image()

    def set_processed_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает обработанное изображение (может быть None) и перерисовывает виджет."""
        self._processed_image = image
        self._render_image()

    def set_compare_mode(self, mode: str) -> None:
        """Устанавливает режим сравнения: 'Нет' | '2-up'."""
        mapping = {"Нет": "off", "2-up": "side_by_side"}
        self._compare_mode = mapping.get(mode, "off")
        self._render_image()

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        self._render_image()

    def _render_image(self) -> None:
        self._canvas.delete("all")
        if self._original_image is None:
            return

        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        side_by_side = self._compare_mode == "side_by_side" and self._processed_image is not None
        gap = 16

        img_w, img_h = self._original_image.size
        slots = 2 if side_by_side else 1
        avail_w = max(1, (canvas_w - gap * (slots - 1)) // slots)
        self._scale_factor = min(avail_w / img_w, canvas_h / img_h)
        scaled_w = max(1, int(img_w * self._scale_factor))
        scaled_h = max(1, int(img_h * self._scale_factor))

        content_w = scaled_w * slots + gap * (slots - 1)
        ox = (canvas_w - content_w) // 2
        oy = (canvas_h - scaled_h) // 2
        self._image_top_left = (ox, oy)

        show_after = self._processed_image is not None and not self._hold_before_active
        # пиксельная графика: без сглаживания
        before = self._original_image.resize((scaled_w, scaled_h), Image.Resampling.NEAREST)
        after = None
        if self._processed_image is not None:
            after = self._processed_image.resize((scaled_w, scaled_h), Image.Resampling.NEAREST)

        if side_by_side:
            self._tk_image_before = ImageTk.PhotoImage(before)
            self._canvas.create_image(ox, oy, image=self._tk_image_before, anchor="nw")
            self._tk_image_after = ImageTk.PhotoImage(after if show_after else before)
            self._canvas.create_image(ox + scaled_w + gap, oy, image=self._tk_image_after, anchor="nw")
        else:
            draw_img = after if (show_after and after is not None) else before
            self._tk_image_before = ImageTk.PhotoImage(draw_img)
            self._canvas.create_image(ox, oy, image=self._tk_image_before, anchor="nw")

    def _canvas_to_image_xy(self, cx: int, cy: int) -> Tuple[Optional[int], Optional[int]]:
        if self._original_image is None or self._scale_factor <= 0:
            return None, None
        ox, oy = self._image_top_left
        x = int((cx - ox) / self._scale_factor)
        y = int((cy - oy) / self._scale_factor)
        img_w, img_h = self._original_image.size
        if 0 <= x < img_w and 0 <= y < img_h:
            return x, y
        return None, None

    def _on_mouse_move(self, event: tk.Event) -> None:
        if self.on_cursor_move is None:
            return
        x, y = self._canvas_to_image_xy(event.x, event.y)
        self.on_cursor_move(x, y)

    def _on_mouse_leave(self, _event: tk.Event) -> None:
        if self.on_cursor_move is not None:
            self.on_cursor_move(None, None)

    def _on_space_down(self, _event: tk.Event) -> None:
        if not self._hold_before_active:
            self._hold_before_active = True
            self._render_image()

    def _on_space_up(self, _event: tk.Event) -> None:
        self._hold_before_active = False
        self._render_image()

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
