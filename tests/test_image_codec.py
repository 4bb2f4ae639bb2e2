"""Tests for RGBA decoding, encoding and preview scaling."""

from __future__ import annotations

import io

import numpy as np
from PIL import Image
import pytest

from contamination.contamination_errors import InvalidConfigError
from contamination.contamination_errors import UnsupportedFormatError
from contamination.image_codec import RasterImage
from contamination.image_codec import decode_image_bytes
from contamination.image_codec import encode_image_bytes
from contamination.image_codec import resize_preview
from contamination.image_codec import resolve_encode_format


def build_image_bytes(str_mode: str, str_format: str) -> bytes:
    """Encode a small flat image with Pillow."""
    image_source = Image.new(str_mode, (6, 3))
    obj_buffer = io.BytesIO()
    image_source.save(obj_buffer, format=str_format)
    return obj_buffer.getvalue()


@pytest.mark.parametrize("str_format", ["PNG", "JPEG", "TIFF", "WEBP"])
def test_decodes_supported_containers(str_format: str) -> None:
    """Every supported container decodes to a 4-channel buffer."""
    obj_image = decode_image_bytes(build_image_bytes("RGB", str_format))
    assert obj_image.array_pixels.shape == (3, 6, 4)


def test_rejects_unsupported_container() -> None:
    """BMP payloads are not among the decode formats."""
    with pytest.raises(UnsupportedFormatError):
        decode_image_bytes(build_image_bytes("RGB", "BMP"))


def test_grayscale_decodes_to_opaque_rgba() -> None:
    """Non-RGB modes are converted to RGBA."""
    obj_image = decode_image_bytes(build_image_bytes("L", "PNG"))
    assert np.all(obj_image.array_pixels[..., 3] == 255)


@pytest.mark.parametrize(
    ("str_path", "str_format", "str_expected"),
    [
        ("out.PNG", None, "PNG"),
        ("out.jpeg", None, "JPEG"),
        ("out.tif", None, "TIFF"),
        ("out", None, "PNG"),
        ("out.png", "jpg", "JPEG"),
    ],
)
def test_resolve_encode_format(str_path: str, str_format: str | None, str_expected: str) -> None:
    """Formats come from an explicit name or the path extension."""
    assert resolve_encode_format(str_path, str_format) == str_expected


def test_jpeg_encoding_drops_alpha() -> None:
    """JPEG output is RGB since the container has no alpha channel."""
    obj_image = RasterImage.from_array(np.full((2, 2, 4), 128, dtype=np.uint8))
    with Image.open(io.BytesIO(encode_image_bytes(obj_image, "JPEG"))) as image_encoded:
        assert image_encoded.mode == "RGB"


def test_raster_image_rejects_mismatched_shape() -> None:
    """Declared dimensions must match the pixel array."""
    with pytest.raises(ValueError):
        RasterImage(3, 2, np.zeros((3, 2, 4), dtype=np.uint8))


def test_resize_preview_rejects_zero_width() -> None:
    """Preview width must be positive."""
    obj_image = RasterImage.from_array(np.zeros((2, 2, 4), dtype=np.uint8))
    with pytest.raises(InvalidConfigError):
        resize_preview(obj_image, 0)
