"""Paint a full-resolution buffer from per-cell region colors."""

from __future__ import annotations

import numpy as np

from .grid_partition import GridPartition
from .image_codec import RasterImage


def render_regions(
    int_width: int,
    int_height: int,
    obj_partition: GridPartition,
    array_cell_colors: np.ndarray,
) -> RasterImage:
    """Fill every pixel with the final region color of its cell.

    Inputs:
    - ``int_width``/``int_height``: source image dimensions.
    - ``obj_partition``: cell layout used for the simulation.
    - ``array_cell_colors``: ``(rows, cols, 4)`` uint8 colors.

    Output:
    - New ``RasterImage`` with the source dimensions.
    """
    if (int_width, int_height) != (obj_partition.int_width, obj_partition.int_height):
        raise ValueError("Partition dimensions do not match the requested output size.")
    tuple_expected_shape: tuple[int, int, int] = (
        obj_partition.int_rows,
        obj_partition.int_cols,
        4,
    )
    if array_cell_colors.shape != tuple_expected_shape:
        raise ValueError(
            f"Cell colors shaped {array_cell_colors.shape}, expected {tuple_expected_shape}."
        )

    # Border cells repeat fewer times, so truncated cells stay truncated.
    array_rows: np.ndarray = np.repeat(
        array_cell_colors.astype(np.uint8), obj_partition.row_heights(), axis=0
    )
    array_pixels: np.ndarray = np.repeat(array_rows, obj_partition.col_widths(), axis=1)
    return RasterImage(int_width, int_height, array_pixels)
