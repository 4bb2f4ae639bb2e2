"""Per-cell representative colors."""

from __future__ import annotations

import numpy as np

from .grid_partition import Cell, GridPartition
from .image_codec import RasterImage


def summarize_cells(obj_image: RasterImage, obj_partition: GridPartition) -> np.ndarray:
    """Compute the mean RGBA color of every cell.

    Inputs:
    - ``obj_image``: source buffer the partition was built for.
    - ``obj_partition``: cell layout.

    Output:
    - ``uint8`` array shaped ``(rows, cols, 4)``. Each channel is the
      arithmetic mean of the cell's pixels rounded to nearest, ties up.
    """
    if (obj_image.int_width, obj_image.int_height) != (
        obj_partition.int_width,
        obj_partition.int_height,
    ):
        raise ValueError("Partition dimensions do not match the image.")

    array_pixels: np.ndarray = obj_image.array_pixels.astype(np.int64)
    array_row_sums: np.ndarray = np.add.reduceat(
        array_pixels, obj_partition.row_starts(), axis=0
    )
    array_sums: np.ndarray = np.add.reduceat(
        array_row_sums, obj_partition.col_starts(), axis=1
    )
    array_counts: np.ndarray = np.outer(
        obj_partition.row_heights(), obj_partition.col_widths()
    )[:, :, np.newaxis]

    # floor(sum / n + 1/2) in exact integer arithmetic.
    array_means: np.ndarray = (2 * array_sums + array_counts) // (2 * array_counts)
    return array_means.astype(np.uint8)


def build_cells(obj_partition: GridPartition, array_means: np.ndarray) -> list[Cell]:
    """Materialize row-major ``Cell`` records from summarized colors."""
    list_cells: list[Cell] = []
    for int_row, int_col, tuple_bounds in obj_partition.iter_cell_bounds():
        array_color: np.ndarray = array_means[int_row, int_col]
        tuple_color: tuple[int, int, int, int] = (
            int(array_color[0]),
            int(array_color[1]),
            int(array_color[2]),
            int(array_color[3]),
        )
        list_cells.append(Cell(int_row, int_col, *tuple_bounds, tuple_color))
    return list_cells
