"""Command-shaped entrypoints for the presentation layer.

The three commands mirror the operations a UI shell invokes: load an image,
generate a preview, and save the full-resolution result. They never raise the
engine's error kinds; failures come back as an ``ErrorReport`` inside the
``CommandResult`` so the caller can route them to its error display.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Generic, TypeVar

from .contamination_engine import ContaminationEngine
from .contamination_errors import ContaminationError
from .image_codec import RasterImage

logger_app = logging.getLogger(__name__)

TypeCommandValue = TypeVar("TypeCommandValue")

_obj_default_engine: ContaminationEngine | None = None


@dataclass(frozen=True)
class Picture:
    """Raw RGBA8 payload handed to a canvas (``len(data) == width * height * 4``)."""

    width: int
    height: int
    data: bytes

    @classmethod
    def from_image(cls, obj_image: RasterImage) -> Picture:
        return cls(obj_image.int_width, obj_image.int_height, obj_image.to_bytes())


@dataclass(frozen=True)
class ErrorReport:
    """Reported failure: error kind identifier plus a readable message."""

    kind: str
    message: str


@dataclass(frozen=True)
class CommandResult(Generic[TypeCommandValue]):
    """Outcome of one command: ``value`` on success, ``error`` otherwise."""

    value: TypeCommandValue | None = None
    error: ErrorReport | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def get_default_engine() -> ContaminationEngine:
    """Return the process-wide engine, creating it on first use."""
    global _obj_default_engine
    if _obj_default_engine is None:
        _obj_default_engine = ContaminationEngine()
    return _obj_default_engine


def reset_default_engine() -> None:
    """Drop the process-wide engine and its loaded image."""
    global _obj_default_engine
    _obj_default_engine = None


def _report_failure(str_command: str, exc_error: ContaminationError) -> ErrorReport:
    logger_app.error("%s failed. Context: %s", str_command, exc_error)
    return ErrorReport(kind=exc_error.str_kind, message=str(exc_error))


def _to_picture(obj_image: RasterImage, int_preview_width: int | None) -> Picture:
    if int_preview_width is not None:
        obj_image = ContaminationEngine.preview(obj_image, int_preview_width)
    return Picture.from_image(obj_image)


def load_image(
    str_path: str | os.PathLike[str],
    int_preview_width: int | None = None,
    obj_engine: ContaminationEngine | None = None,
) -> CommandResult[Picture]:
    """Load ``str_path`` into the engine and return it as a picture.

    With ``int_preview_width`` the returned picture is a resized display copy;
    the engine keeps the full-resolution source either way.
    """
    obj_target: ContaminationEngine = obj_engine or get_default_engine()
    try:
        obj_image: RasterImage = obj_target.load(str_path)
    except ContaminationError as exc_error:
        return CommandResult(error=_report_failure("load_image", exc_error))
    return CommandResult(value=_to_picture(obj_image, int_preview_width))


def generate_image(
    int_cell: int,
    int_preview_width: int | None = None,
    obj_engine: ContaminationEngine | None = None,
) -> CommandResult[Picture]:
    """Contaminate the loaded image with cell size ``int_cell``."""
    obj_target: ContaminationEngine = obj_engine or get_default_engine()
    try:
        obj_image: RasterImage = obj_target.generate(int_cell)
    except ContaminationError as exc_error:
        return CommandResult(error=_report_failure("generate_image", exc_error))
    return CommandResult(value=_to_picture(obj_image, int_preview_width))


def save_image(
    int_cell: int,
    str_path: str | os.PathLike[str],
    obj_engine: ContaminationEngine | None = None,
) -> CommandResult[None]:
    """Write the contaminated image at the source resolution to ``str_path``."""
    obj_target: ContaminationEngine = obj_engine or get_default_engine()
    try:
        obj_target.save(int_cell, str_path)
    except ContaminationError as exc_error:
        return CommandResult(error=_report_failure("save_image", exc_error))
    return CommandResult()
