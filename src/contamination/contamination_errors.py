"""Error kinds raised by the contamination engine.

Every exception carries a short ``str_kind`` identifier so the command layer
can report failures as structured results instead of raising them.
"""

from __future__ import annotations


class ContaminationError(RuntimeError):
    """Base class for all engine failures."""

    str_kind: str = "ContaminationError"


class UnsupportedFormatError(ContaminationError):
    """Decode or encode container was not recognized."""

    str_kind = "UnsupportedFormat"


class ImageIoError(ContaminationError):
    """Path could not be read or written."""

    str_kind = "IoError"


class NoImageLoadedError(ContaminationError):
    """Generate or save was invoked before a successful load."""

    str_kind = "NoImageLoaded"


class InvalidConfigError(ContaminationError, ValueError):
    """Cell size or simulation settings are out of range."""

    str_kind = "InvalidConfig"
