import numpy as np
import pytest
from PIL import Image

from bmpkit.models.image_model import BitmapImage
from bmpkit.services.image_service import ImageService

service = ImageService()


def test_load_image_returns_metadata(random_image, tmp_path):
    path = tmp_path / "in.bmp"
    assert random_image(5, 3).encode(path)

    data = service.load_image(path)

    assert data.path == path
    assert (data.width, data.height) == (5, 3)
    assert data.size_bytes == 54 + 16 * 3
    assert data.image.valid


def test_load_image_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        service.load_image(tmp_path / "missing.bmp")


def test_load_image_invalid_file_raises(tmp_path):
    path = tmp_path / "bad.bmp"
    path.write_bytes(b"BM" + b"\x00" * 10)

    with pytest.raises(ValueError):
        service.load_image(path)


def test_save_image_invalid_raises(tmp_path):
    with pytest.raises(ValueError):
        service.save_image(BitmapImage(), tmp_path / "out.bmp")


def test_pil_conversion_round_trip(random_image):
    image = random_image(4, 6)

    pil_image = service.to_pil(image)
    back = service.from_pil(pil_image)

    assert pil_image.size == (4, 6)
    np.testing.assert_array_equal(back.to_array(), image.to_array())


def test_to_pil_rejects_invalid_image():
    with pytest.raises(ValueError):
        service.to_pil(BitmapImage())


def test_import_image_from_png_drops_alpha(tmp_path):
    path = tmp_path / "in.png"
    Image.new("RGBA", (3, 2), color=(10, 20, 30, 40)).save(path)

    image = service.import_image(path)

    assert (image.width, image.height) == (3, 2)
    assert (image.to_array() == (10, 20, 30)).all()


def test_import_image_rejects_garbage(tmp_path):
    path = tmp_path / "garbage.png"
    path.write_bytes(b"not an image")

    with pytest.raises(ValueError):
        service.import_image(path)


def test_import_image_rejects_truncated_png(rng, tmp_path):
    path = tmp_path / "cut.png"
    Image.fromarray(rng.integers(0, 256, size=(64, 64, 3), dtype=np.uint8)).save(path)
    path.write_bytes(path.read_bytes()[:60])

    with pytest.raises(ValueError):
        service.import_image(path)
