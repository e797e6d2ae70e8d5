import numpy as np

from bmpkit.models.color_model import Color
from bmpkit.services.pattern_service import PatternService

service = PatternService()


def test_horizontal_gradient_is_gray_and_increasing():
    image = service.horizontal_gradient(64, 8)

    assert image.get_pixel(0, 0) == Color(0, 0, 0)
    assert image.get_pixel(32, 7) == Color(127, 127, 127)
    assert (np.diff(image.red.pixels[0].astype(int)) >= 0).all()


def test_vertical_red_gradient_has_only_red():
    image = service.vertical_red_gradient(4, 64)

    assert image.green.pixels.max() == 0
    assert image.blue.pixels.max() == 0
    assert image.get_pixel(3, 63) == Color(251, 0, 0)


def test_salt_and_pepper_is_reproducible_with_seed():
    a = service.salt_and_pepper(16, 16, seed=7)
    b = service.salt_and_pepper(16, 16, seed=7)

    np.testing.assert_array_equal(a.to_array(), b.to_array())
    assert a.to_array().std() > 0


def test_generators_reject_empty_size():
    assert service.horizontal_gradient(0, 4) is None
    assert service.salt_and_pepper(4, 0) is None
