"""Точка входа: командная строка для кодека и операций над изображениями.

Команда `gui` запускает оконное приложение; остальные работают без графики.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from bmpkit.models.color_model import Color, HSIColor
from bmpkit.models.image_model import BitmapImage
from bmpkit.services.image_service import ImageService
from bmpkit.services.pattern_service import PatternService
from bmpkit.services.process_service import KERNEL_PRESETS, ProcessService

logger = logging.getLogger(__name__)

_image_service = ImageService()
_pattern_service = PatternService()
_process_service = ProcessService()


def _parse_kernel(text: str) -> List[float]:
    try:
        return [float(v) for v in text.split(",") if v.strip()]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Неверное ядро: {text!r}") from exc


def _parse_color(text: str) -> Color:
    try:
        return Color.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_hsi(text: str) -> HSIColor:
    try:
        return HSIColor.parse(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _load(path: Path) -> Optional[BitmapImage]:
    try:
        return _image_service.load_image(path).image
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return None


def _save(image: Optional[BitmapImage], path: Path) -> int:
    if image is None:
        logger.error("Операция не выполнена")
        return 1
    try:
        _image_service.save_image(image, path)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    print(f"Сохранено: {path} ({image.width}x{image.height})")
    return 0


# ---- Commands ----
def _cmd_info(args: argparse.Namespace) -> int:
    try:
        data = _image_service.load_image(args.input)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    image = data.image
    print(f"Файл:      {data.path}")
    print(f"Размер:    {data.size_bytes if data.size_bytes is not None else '—'} байт")
    print(f"Пиксели:   {data.width}x{data.height}")
    print(f"Смещение:  {image.file_header.offset}")
    print(f"Данные:    {image.dib_header.image_size} байт")
    return 0


def _cmd_grayscale(args: argparse.Namespace) -> int:
    image = _load(args.input)
    if image is None or not image.to_grayscale():
        return 1
    return _save(image, args.output)


def _cmd_filter(args: argparse.Namespace) -> int:
    image = _load(args.input)
    if image is None:
        return 1
    kernel = args.kernel if args.kernel is not None else KERNEL_PRESETS[args.preset]
    return _save(image.apply_filter(kernel), args.output)


def _cmd_feature(args: argparse.Namespace) -> int:
    image = _load(args.input)
    if image is None:
        return 1
    kernel = np.asarray(args.kernel if args.kernel is not None else KERNEL_PRESETS[args.preset], dtype=np.float64)
    weights = [kernel * w for w in args.weights]
    feature_map = _process_service.allocate_feature_map(image)
    if feature_map is None or not image.apply_kernel(weights, feature_map):
        logger.error("Операция не выполнена")
        return 1

    if args.output.suffix.lower() == ".npy":
        np.save(args.output, feature_map)
        print(f"Сохранено: {args.output} {feature_map.shape}")
        return 0
    # для BMP карта признаков показывается как серое изображение
    gray = feature_map.astype(np.uint8)
    return _save(BitmapImage.from_array(np.stack([gray, gray, gray], axis=2)), args.output)


def _cmd_select(args: argparse.Namespace) -> int:
    image = _load(args.input)
    if image is None:
        return 1
    return _save(image.select_color(args.color, args.tolerance), args.output)


def _cmd_select_range(args: argparse.Namespace) -> int:
    image = _load(args.input)
    if image is None:
        return 1
    return _save(image.select_color_range(args.color_from, args.color_to), args.output)


def _cmd_demo(args: argparse.Namespace) -> int:
    generators: Dict[str, Callable[[], Optional[BitmapImage]]] = {
        "gradient": lambda: _pattern_service.horizontal_gradient(args.width, args.height),
        "redscale": lambda: _pattern_service.vertical_red_gradient(args.width, args.height),
        "noise": lambda: _pattern_service.salt_and_pepper(args.width, args.height, seed=args.seed),
    }
    return _save(generators[args.pattern](), args.output)


def _cmd_convert(args: argparse.Namespace) -> int:
    try:
        image = _image_service.import_image(args.input)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return _save(image, args.output)


def _cmd_gui(_args: argparse.Namespace) -> int:
    # customtkinter тянет tkinter; импортируем только по требованию
    from bmpkit.app import BitmapInspectorApp

    app = BitmapInspectorApp()
    app.mainloop()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bmpkit", description="Инструменты для 24-битных BMP")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="уровень логирования (по умолчанию WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("info", help="показать заголовки BMP")
    p.add_argument("input", type=Path)
    p.set_defaults(func=_cmd_info)

    p = sub.add_parser("grayscale", help="перевести в оттенки серого")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(func=_cmd_grayscale)

    p = sub.add_parser("filter", help="свёртка каждого канала")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    group = p.add_mutually_exclusive_group()
    group.add_argument("--preset", choices=sorted(KERNEL_PRESETS), default="sharpen")
    group.add_argument("--kernel", type=_parse_kernel, help="значения через запятую, построчно")
    p.set_defaults(func=_cmd_filter)

    p = sub.add_parser("feature", help="свёртка с объединением каналов в одну карту")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path, help=".npy для вещественной карты, иначе серый BMP")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--preset", choices=sorted(KERNEL_PRESETS), default="laplacian")
    group.add_argument("--kernel", type=_parse_kernel)
    p.add_argument(
        "--weights",
        type=_parse_kernel,
        default=[0.299, 0.587, 0.114],
        help="множители ядра для R,G,B (по умолчанию 0.299,0.587,0.114)",
    )
    p.set_defaults(func=_cmd_feature)

    p = sub.add_parser("select", help="выделить цвет с допуском в HSI")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.add_argument("--color", type=_parse_color, required=True, help="R,G,B или #RRGGBB")
    p.add_argument("--tolerance", type=_parse_hsi, default=HSIColor(0.8, 0.1, 0.5), help="H,S,I")
    p.set_defaults(func=_cmd_select)

    p = sub.add_parser("select-range", help="выделить диапазон между двумя цветами")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.add_argument("--from", dest="color_from", type=_parse_color, required=True)
    p.add_argument("--to", dest="color_to", type=_parse_color, required=True)
    p.set_defaults(func=_cmd_select_range)

    p = sub.add_parser("demo", help="сгенерировать демонстрационное изображение")
    p.add_argument("pattern", choices=["gradient", "redscale", "noise"])
    p.add_argument("output", type=Path)
    p.add_argument("--width", type=int, default=64)
    p.add_argument("--height", type=int, default=64)
    p.add_argument("--seed", type=int, default=None)
    p.set_defaults(func=_cmd_demo)

    p = sub.add_parser("convert", help="перевести PNG/JPEG/... в 24-битный BMP")
    p.add_argument("input", type=Path)
    p.add_argument("output", type=Path)
    p.set_defaults(func=_cmd_convert)

    p = sub.add_parser("gui", help="открыть окно просмотра")
    p.set_defaults(func=_cmd_gui)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Разбирает аргументы, настраивает логирование и выполняет команду."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
