import numpy as np
import pytest

from bmpkit.models.color_model import Color
from bmpkit.models.image_model import BitmapImage
from bmpkit.services.process_service import KERNEL_PRESETS, ProcessService

IDENTITY_3 = [0, 0, 0, 0, 1, 0, 0, 0, 0]


# ---------- Оттенки серого ----------
def test_grayscale_uses_truncated_luminance(solid_image):
    image = solid_image((100, 150, 200), width=2, height=2)

    assert image.to_grayscale()

    # 0.299*100 + 0.587*150 + 0.114*200 = 140.75
    assert image.get_pixel(1, 1) == Color(140, 140, 140)


def test_grayscale_is_idempotent(random_image):
    image = random_image(9, 6)
    assert image.to_grayscale()
    once = image.to_array().copy()

    assert image.to_grayscale()

    np.testing.assert_array_equal(image.to_array(), once)


def test_grayscale_keeps_neutral_pixels(solid_image):
    image = solid_image((77, 77, 77))

    assert image.to_grayscale()

    assert image.get_pixel(0, 0) == Color(77, 77, 77)


def test_grayscale_does_not_flip_rows():
    arr = np.zeros((2, 3, 3), dtype=np.uint8)
    arr[0] = (255, 0, 0)
    arr[1] = (0, 0, 255)
    image = BitmapImage.from_array(arr)

    assert image.to_grayscale()

    assert image.get_pixel(0, 0) == Color(76, 76, 76)
    assert image.get_pixel(0, 1) == Color(29, 29, 29)


# ---------- Свёртка по каналам ----------
@pytest.mark.parametrize("dim", [3, 5])
def test_identity_kernel_preserves_every_pixel(random_image, dim):
    kernel = np.zeros((dim, dim))
    kernel[dim // 2, dim // 2] = 1.0
    image = random_image(6, 4)

    output = image.apply_filter(kernel.ravel())

    assert output is not None
    assert output is not image
    np.testing.assert_array_equal(output.to_array(), image.to_array())


@pytest.mark.parametrize("length", [0, 1, 2, 4, 8, 16])
def test_apply_filter_rejects_malformed_kernels(random_image, length):
    assert random_image().apply_filter([1.0] * length) is None


def test_apply_filter_accepts_three_by_three(random_image):
    assert random_image().apply_filter([1 / 9] * 9) is not None


def test_apply_filter_accepts_matrix_kernel(random_image):
    image = random_image()

    output = image.apply_filter(np.array(IDENTITY_3, dtype=float).reshape(3, 3))

    np.testing.assert_array_equal(output.to_array(), image.to_array())


def test_apply_filter_rejects_non_finite_kernel(random_image):
    kernel = list(IDENTITY_3)
    kernel[0] = float("nan")

    assert random_image().apply_filter(kernel) is None


def test_edge_clamp_repeats_border_samples():
    arr = np.zeros((1, 3, 3), dtype=np.uint8)
    arr[0, :, 0] = (0, 90, 180)
    image = BitmapImage.from_array(arr)
    take_left = [0, 0, 0, 1, 0, 0, 0, 0, 0]

    output = image.apply_filter(take_left)

    assert list(output.red.pixels[0]) == [0, 0, 90]


def test_output_is_clamped_to_byte_range(random_image):
    image = random_image(8, 8)

    brightened = image.apply_filter([10.0] * 9)
    darkened = image.apply_filter([-10.0] * 9)

    for output in (brightened, darkened):
        arr = output.to_array()
        assert arr.dtype == np.uint8
        assert arr.min() >= 0 and arr.max() <= 255
    assert darkened.to_array().max() == 0


def test_laplacian_of_flat_image_is_black(solid_image):
    image = solid_image((200, 120, 40), width=5, height=5)

    output = image.apply_filter(KERNEL_PRESETS["laplacian"])

    assert output.to_array().max() == 0


def test_laplacian_highlights_a_bright_dot():
    image = BitmapImage.create(5, 5)
    image.set_pixel(2, 2, Color(20, 20, 20))

    output = image.apply_filter(KERNEL_PRESETS["laplacian"])

    assert output.get_pixel(2, 2) == Color(160, 160, 160)
    assert output.get_pixel(2, 1) == Color(0, 0, 0)  # -40 ограничено нулём


def test_fractional_sums_are_truncated(solid_image):
    image = solid_image((10, 10, 10), width=3, height=3)

    output = image.apply_filter([0, 0, 0, 0, 0.55, 0, 0, 0, 0])

    assert output.get_pixel(1, 1) == Color(5, 5, 5)


def test_apply_filter_leaves_source_untouched(random_image):
    image = random_image()
    before = image.to_array().copy()

    image.apply_filter(KERNEL_PRESETS["sharpen"])

    np.testing.assert_array_equal(image.to_array(), before)


# ---------- Свёртка с объединением каналов ----------
def test_apply_kernel_sums_channels_without_truncation(solid_image):
    image = solid_image((3, 5, 7), width=3, height=2)
    half_identity = [v * 0.5 for v in IDENTITY_3]
    output = np.zeros((2, 3), dtype=np.float32)

    assert image.apply_kernel([half_identity, half_identity, half_identity], output)

    np.testing.assert_allclose(output, 7.5)


def test_apply_kernel_clamps_to_byte_range(solid_image):
    image = solid_image((200, 200, 200), width=2, height=2)
    output = np.zeros((2, 2), dtype=np.float64)

    assert image.apply_kernel([IDENTITY_3, IDENTITY_3, IDENTITY_3], output)

    np.testing.assert_array_equal(output, 255.0)


def test_apply_kernel_selects_single_channel(random_image):
    image = random_image(5, 3)
    zero = [0.0] * 9
    output = ProcessService().allocate_feature_map(image)

    assert image.apply_kernel([zero, IDENTITY_3, zero], output)

    np.testing.assert_array_equal(output, image.green.pixels.astype(np.float32))


def test_apply_kernel_requires_preallocated_float_plane(random_image):
    image = random_image(5, 3)
    weights = [IDENTITY_3] * 3

    assert not image.apply_kernel(weights, np.zeros((3, 4), dtype=np.float32))
    assert not image.apply_kernel(weights, np.zeros((3, 5), dtype=np.uint8))
    assert not image.apply_kernel(weights, None)


def test_apply_kernel_rejects_bad_weights(random_image):
    image = random_image(5, 3)
    output = np.zeros((3, 5), dtype=np.float32)

    assert not image.apply_kernel([IDENTITY_3, IDENTITY_3], output)
    assert not image.apply_kernel([IDENTITY_3, IDENTITY_3, [1.0] * 25], output)
    assert not image.apply_kernel([IDENTITY_3, IDENTITY_3, [1.0] * 4], output)


def test_apply_kernel_rejects_missing_weights(random_image):
    image = random_image(5, 3)

    assert not image.apply_kernel(None, np.zeros((3, 5), dtype=np.float32))
