import math

import numpy as np
import pytest

from bmpkit.models.color_model import Color, HSIColor
from bmpkit.models.image_model import BitmapImage
from bmpkit.services.color_service import ColorService, hsi_planes

service = ColorService()


@pytest.mark.parametrize("value", [0, 1, 128, 255])
def test_near_gray_has_no_hue_or_saturation(value):
    hsi = service.rgb_to_hsi(Color(value, value, value))

    assert hsi.h == 0.0
    assert hsi.s == 0.0
    assert hsi.i == pytest.approx(value / 255)


def test_delta_below_threshold_counts_as_gray():
    hsi = service.rgb_to_hsi(Color(100, 109, 100))

    assert (hsi.h, hsi.s) == (0.0, 0.0)


@pytest.mark.parametrize(
    "color,hue",
    [
        (Color(255, 0, 0), 0.0),
        (Color(255, 255, 0), math.pi / 3),
        (Color(0, 255, 0), 2 * math.pi / 3),
        (Color(0, 0, 255), 4 * math.pi / 3),
        (Color(255, 0, 255), 5 * math.pi / 3),
    ],
)
def test_primary_hues(color, hue):
    hsi = service.rgb_to_hsi(color)

    assert hsi.h == pytest.approx(hue)
    assert hsi.s == pytest.approx(1.0)


def test_saturation_and_intensity_formula():
    hsi = service.rgb_to_hsi(Color(200, 100, 50))

    assert hsi.i == pytest.approx(350 / 765)
    assert hsi.s == pytest.approx(1 - (50 / 255) / (350 / 765))


def test_hue_stays_in_full_turn(rng):
    rgb = rng.integers(0, 256, size=(3, 10_000))

    h, s, i = hsi_planes(*rgb)

    assert h.min() >= 0.0 and h.max() < 2 * math.pi
    assert s.min() >= 0.0 and s.max() <= 1.0
    assert i.min() >= 0.0 and i.max() <= 1.0


def _two_block_image() -> BitmapImage:
    arr = np.zeros((64, 64, 3), dtype=np.uint8)
    arr[:, :32] = (254, 254, 183)
    return BitmapImage.from_array(arr)


def test_select_color_keeps_matching_block():
    image = _two_block_image()

    output = image.select_color(Color(254, 254, 183), HSIColor(0.8, 0.1, 0.5))

    assert output is not None
    out = output.to_array()
    assert (out[:, :32] == (254, 254, 183)).all()
    assert out[:, 32:].max() == 0


def test_select_color_blacks_out_other_hues():
    arr = np.zeros((2, 2, 3), dtype=np.uint8)
    arr[0, 0] = (254, 254, 183)
    arr[0, 1] = (40, 60, 220)
    arr[1, 0] = (250, 250, 240)  # почти серый: насыщенность ниже окна
    image = BitmapImage.from_array(arr)

    output = image.select_color(Color(254, 254, 183), HSIColor(0.8, 0.1, 0.5))

    assert output.get_pixel(0, 0) == Color(254, 254, 183)
    assert output.get_pixel(1, 0) == Color(0, 0, 0)
    assert output.get_pixel(0, 1) == Color(0, 0, 0)


def test_select_color_rejects_negative_tolerance():
    assert _two_block_image().select_color(Color(1, 1, 1), HSIColor(-0.1, 0.1, 0.1)) is None


def test_select_color_does_not_modify_source():
    image = _two_block_image()
    before = image.to_array().copy()

    output = image.select_color(Color(0, 0, 0), HSIColor(0.0, 0.0, 0.0))

    assert output is not image
    np.testing.assert_array_equal(image.to_array(), before)


def test_select_color_range_red_to_blue_drops_green():
    arr = np.array([[(255, 0, 0), (0, 0, 255), (0, 255, 0)]], dtype=np.uint8)
    image = BitmapImage.from_array(arr)

    output = image.select_color_range(Color(255, 0, 0), Color(0, 0, 255))

    assert output.get_pixel(0, 0) == Color(255, 0, 0)
    assert output.get_pixel(1, 0) == Color(0, 0, 255)
    assert output.get_pixel(2, 0) == Color(0, 0, 0)


def test_select_color_range_box_between_two_shades():
    arr = np.array([[(200, 0, 0), (150, 0, 0), (100, 0, 0), (40, 0, 0)]], dtype=np.uint8)
    image = BitmapImage.from_array(arr)

    output = image.select_color_range(Color(100, 0, 0), Color(200, 0, 0))

    kept = [output.get_pixel(x, 0) != Color(0, 0, 0) for x in range(4)]
    assert kept == [True, True, True, False]


def test_select_color_range_hue_arc_without_wrap():
    arr = np.array([[(255, 255, 0), (0, 255, 0), (0, 0, 255)]], dtype=np.uint8)
    image = BitmapImage.from_array(arr)

    # красный (0) и зелёный (2π/3): жёлтый (π/3) внутри, синий снаружи
    output = image.select_color_range(Color(255, 0, 0), Color(0, 255, 0))

    assert output.get_pixel(0, 0) == Color(0, 0, 0)  # интенсивность жёлтого выше диапазона
    assert output.get_pixel(1, 0) == Color(0, 255, 0)
    assert output.get_pixel(2, 0) == Color(0, 0, 0)


def test_selection_rejects_missing_colors():
    image = _two_block_image()

    assert image.select_color(Color(1, 2, 3), None) is None
    assert image.select_color(None, HSIColor(0.1, 0.1, 0.1)) is None
    assert image.select_color_range(Color(255, 0, 0), None) is None
