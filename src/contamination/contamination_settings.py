"""Settings and validation helpers for contamination synthesis.

This module isolates the per-run simulation settings from the engine facade so
`contamination_engine.py` stays focused on the load/generate/save pipeline.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .contamination_errors import InvalidConfigError

logger_app = logging.getLogger(__name__)

INT_DEFAULT_CELL_SIZE: int = 10
FLOAT_DEFAULT_MERGE_THRESHOLD: float = 24.0
INT_DEFAULT_MAX_GENERATIONS: int = 64


def validate_cell_size(int_cell_size: int, int_width: int, int_height: int) -> None:
    """Raise ``InvalidConfigError`` unless ``1 <= cell_size <= min(width, height)``.

    A zero-sized image has no valid cell size at all.
    """
    int_max_cell_size: int = min(int_width, int_height)
    if isinstance(int_cell_size, bool) or not isinstance(int_cell_size, int):
        logger_app.error("Cell size must be an integer. Received: %r", int_cell_size)
        raise InvalidConfigError(f"Cell size must be an integer, got {int_cell_size!r}.")
    if int_cell_size < 1 or int_cell_size > int_max_cell_size:
        logger_app.error(
            "Cell size %d outside [1, %d] for a %dx%d image.",
            int_cell_size,
            int_max_cell_size,
            int_width,
            int_height,
        )
        raise InvalidConfigError(
            f"Cell size must be within [1, {int_max_cell_size}] for a "
            f"{int_width}x{int_height} image, got {int_cell_size}."
        )


@dataclass
class ContaminationSettings:
    """Per-run settings for contamination synthesis.

    Inputs:
    - ``int_cell_size``: Edge length of one grid cell in pixels.
    - ``float_merge_threshold``: RGB distance below which neighboring regions
      merge.
    - ``int_max_generations``: Upper bound on simulation generations.

    Output/Behavior:
    - ``validate`` checks the simulation constants; ``validate_for`` also
      checks the cell size against concrete image dimensions.
    """

    int_cell_size: int = INT_DEFAULT_CELL_SIZE
    float_merge_threshold: float = FLOAT_DEFAULT_MERGE_THRESHOLD
    int_max_generations: int = INT_DEFAULT_MAX_GENERATIONS

    def validate(self) -> None:
        """Validate the simulation constants independently of any image."""
        if not math.isfinite(self.float_merge_threshold) or self.float_merge_threshold < 0.0:
            logger_app.error(
                "Merge threshold out of range. Received: %s", self.float_merge_threshold
            )
            raise InvalidConfigError(
                "Merge threshold must be a finite number >= 0."
            )
        if self.int_max_generations < 0:
            logger_app.error(
                "Generation cap must be >= 0. Received: %d", self.int_max_generations
            )
            raise InvalidConfigError("Generation cap must be >= 0.")

    def validate_for(self, int_width: int, int_height: int) -> None:
        """Validate all settings against the dimensions of one source image."""
        self.validate()
        validate_cell_size(self.int_cell_size, int_width, int_height)
