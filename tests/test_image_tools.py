from io import BytesIO

import pytest
from PIL import Image

from conftest import make_jpeg
from utils.image_tools import compress_image_bytes


def _open(data: bytes) -> Image.Image:
    img = Image.open(BytesIO(data))
    img.load()
    return img


def test_wide_image_is_scaled_to_max_width():
    out = _open(compress_image_bytes(make_jpeg(4000, 1000)))

    assert out.format == "JPEG"
    assert out.size == (1920, 480)


def test_small_image_is_never_enlarged():
    out = _open(compress_image_bytes(make_jpeg(640, 480), max_width=1920))
    assert out.size == (640, 480)


def test_alpha_channel_is_dropped():
    png = make_jpeg(300, 200, mode="RGBA", fmt="PNG")

    out = _open(compress_image_bytes(png, max_width=100))

    assert out.mode == "RGB"
    assert out.size == (100, 67)


def test_exif_orientation_is_applied():
    img = Image.new("RGB", (200, 100), color=(10, 20, 30))
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 CW on display
    buf = BytesIO()
    img.save(buf, "JPEG", exif=exif)

    out = _open(compress_image_bytes(buf.getvalue()))

    assert out.size == (100, 200)
    assert 0x0112 not in out.getexif()


@pytest.mark.parametrize("data", [b"", b"hello", b"<html></html>"])
def test_non_images_raise_value_error(data):
    with pytest.raises(ValueError, match="not an image"):
        compress_image_bytes(data)
