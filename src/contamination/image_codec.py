"""Decode and encode RGBA8 raster buffers.

``RasterImage`` is the only pixel container that crosses module boundaries. It
wraps a read-only ``numpy`` array so a loaded source image can be shared with
in-flight generate calls without copying.
"""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from .contamination_errors import ImageIoError, InvalidConfigError, UnsupportedFormatError

logger_app = logging.getLogger(__name__)

TUPLE_DECODE_FORMATS: tuple[str, ...] = ("PNG", "JPEG", "TIFF", "WEBP")

DICT_EXTENSION_FORMATS: dict[str, str] = {
    ".png": "PNG",
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".tif": "TIFF",
    ".tiff": "TIFF",
    ".webp": "WEBP",
}

INT_DEFAULT_PREVIEW_WIDTH: int = 1024


@dataclass(frozen=True, eq=False)
class RasterImage:
    """Immutable RGBA8 pixel buffer with explicit dimensions.

    Inputs:
    - ``int_width``/``int_height``: image dimensions in pixels.
    - ``array_pixels``: ``uint8`` array shaped ``(height, width, 4)``.

    Output/Behavior:
    - The pixel array is flagged read-only on construction.
    """

    int_width: int
    int_height: int
    array_pixels: np.ndarray

    def __post_init__(self) -> None:
        """Validate the buffer shape and freeze the pixel array."""
        tuple_expected_shape: tuple[int, int, int] = (self.int_height, self.int_width, 4)
        if self.array_pixels.shape != tuple_expected_shape:
            raise ValueError(
                f"Pixel array shape {self.array_pixels.shape} does not match "
                f"{tuple_expected_shape}."
            )
        if self.array_pixels.dtype != np.uint8:
            raise ValueError(f"Pixel array must be uint8, got {self.array_pixels.dtype}.")
        self.array_pixels.flags.writeable = False

    @classmethod
    def from_array(cls, array_pixels: np.ndarray) -> RasterImage:
        """Build an image from a ``(height, width, 4)`` array, copying it."""
        array_copy: np.ndarray = np.array(array_pixels, dtype=np.uint8, copy=True)
        if array_copy.ndim != 3 or array_copy.shape[2] != 4:
            raise ValueError(f"Expected an RGBA array, got shape {array_copy.shape}.")
        int_height: int = int(array_copy.shape[0])
        int_width: int = int(array_copy.shape[1])
        return cls(int_width, int_height, array_copy)

    @classmethod
    def from_pil(cls, image_input: Image.Image) -> RasterImage:
        """Convert a Pillow image of any mode to an RGBA8 buffer."""
        image_rgba: Image.Image = image_input.convert("RGBA")
        array_pixels: np.ndarray = np.asarray(image_rgba, dtype=np.uint8).copy()
        return cls(image_rgba.width, image_rgba.height, array_pixels)

    def to_pil(self) -> Image.Image:
        """Return a new Pillow RGBA image holding a copy of the pixels."""
        return Image.fromarray(self.array_pixels.copy())

    def to_bytes(self) -> bytes:
        """Return the row-major RGBA byte sequence (``width * height * 4`` bytes)."""
        return self.array_pixels.tobytes()


def decode_image_bytes(bytes_image: bytes) -> RasterImage:
    """Decode one PNG, JPEG, TIFF, or WEBP payload into an RGBA buffer."""
    try:
        with Image.open(io.BytesIO(bytes_image), formats=list(TUPLE_DECODE_FORMATS)) as image_source:
            str_format: str | None = image_source.format
            obj_result: RasterImage = RasterImage.from_pil(image_source)
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc_error:
        logger_app.error("Failed to decode image buffer. Context: %s", exc_error)
        raise UnsupportedFormatError(
            f"Image data is not a readable {', '.join(TUPLE_DECODE_FORMATS)} container: {exc_error}"
        ) from exc_error

    logger_app.debug(
        "Decoded %s image (%dx%d).", str_format, obj_result.int_width, obj_result.int_height
    )
    return obj_result


def decode_image_path(str_path: str | os.PathLike[str]) -> RasterImage:
    """Read and decode an image file from disk."""
    try:
        bytes_image: bytes = Path(str_path).read_bytes()
    except OSError as exc_error:
        logger_app.error("Failed to read image file: %s. Context: %s", str_path, exc_error)
        raise ImageIoError(f"The file at {str_path} could not be opened: {exc_error}") from exc_error

    return decode_image_bytes(bytes_image)


def resolve_encode_format(
    str_path: str | os.PathLike[str], str_format: str | None = None
) -> str:
    """Return the Pillow format name for an explicit format or a path extension."""
    if str_format is not None:
        str_normalized: str = str_format.strip().upper()
        if str_normalized == "JPG":
            str_normalized = "JPEG"
        if str_normalized == "TIF":
            str_normalized = "TIFF"
        if str_normalized not in TUPLE_DECODE_FORMATS:
            logger_app.error("Unsupported output format requested: %s", str_format)
            raise UnsupportedFormatError(f"Unsupported output format: {str_format}")
        return str_normalized

    str_extension: str = os.path.splitext(os.fspath(str_path))[1].lower()
    if not str_extension:
        return "PNG"
    if str_extension not in DICT_EXTENSION_FORMATS:
        logger_app.error("Unsupported output extension: %s", str_extension)
        raise UnsupportedFormatError(f"Unsupported output file extension: {str_extension}")
    return DICT_EXTENSION_FORMATS[str_extension]


def encode_image_bytes(obj_image: RasterImage, str_format: str = "PNG") -> bytes:
    """Encode an RGBA buffer to bytes at its full resolution."""
    str_resolved_format: str = resolve_encode_format("", str_format)
    image_output: Image.Image = obj_image.to_pil()
    dict_save_options: dict[str, object] = {}
    if str_resolved_format == "JPEG":
        # JPEG has no alpha channel.
        image_output = image_output.convert("RGB")
        dict_save_options["quality"] = 95
    elif str_resolved_format == "WEBP":
        dict_save_options["lossless"] = True

    obj_buffer: io.BytesIO = io.BytesIO()
    try:
        image_output.save(obj_buffer, format=str_resolved_format, **dict_save_options)
    except (OSError, ValueError, KeyError) as exc_error:
        logger_app.error(
            "Failed to encode image as %s. Context: %s", str_resolved_format, exc_error
        )
        raise UnsupportedFormatError(
            f"Error encoding image as {str_resolved_format}: {exc_error}"
        ) from exc_error
    return obj_buffer.getvalue()


def encode_image_path(
    obj_image: RasterImage,
    str_path: str | os.PathLike[str],
    str_format: str | None = None,
) -> None:
    """Encode an image and write it to ``str_path``."""
    str_resolved_format: str = resolve_encode_format(str_path, str_format)
    bytes_encoded: bytes = encode_image_bytes(obj_image, str_resolved_format)
    try:
        Path(str_path).write_bytes(bytes_encoded)
    except OSError as exc_error:
        logger_app.error("Failed to save image to %s. Context: %s", str_path, exc_error)
        raise ImageIoError(f"Error saving image to {str_path}: {exc_error}") from exc_error
    logger_app.info("Saved %s image to %s", str_resolved_format, str_path)


def resize_preview(
    obj_image: RasterImage, int_preview_width: int = INT_DEFAULT_PREVIEW_WIDTH
) -> RasterImage:
    """Return a Lanczos-resized copy scaled to ``int_preview_width`` pixels wide.

    The aspect ratio is preserved. The result is for display only; exports
    always use the full-resolution buffer.
    """
    if int_preview_width < 1:
        raise InvalidConfigError("Preview width must be >= 1.")
    if obj_image.int_width == 0 or obj_image.int_height == 0:
        return obj_image

    float_scale: float = int_preview_width / float(obj_image.int_width)
    int_new_height: int = max(1, int(obj_image.int_height * float_scale))
    if int_preview_width == obj_image.int_width and int_new_height == obj_image.int_height:
        return obj_image

    image_resized: Image.Image = obj_image.to_pil().resize(
        (int_preview_width, int_new_height), Image.Resampling.LANCZOS
    )
    return RasterImage.from_pil(image_resized)
