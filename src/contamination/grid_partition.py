"""Grid partitioning of an image into fixed-size cells.

Cells are laid out row-major. Cells on the right and bottom border keep only
the pixels that remain and are never padded or enlarged.
"""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass

import numpy as np

from .contamination_settings import validate_cell_size


@dataclass(frozen=True)
class Cell:
    """One grid cell with its pixel bounds and representative color.

    ``int_x1``/``int_y1`` are exclusive.
    """

    int_row: int
    int_col: int
    int_x0: int
    int_y0: int
    int_x1: int
    int_y1: int
    tuple_mean_color: tuple[int, int, int, int]

    @property
    def int_pixel_count(self) -> int:
        """Number of pixels covered by the cell."""
        return (self.int_x1 - self.int_x0) * (self.int_y1 - self.int_y0)


@dataclass(frozen=True)
class GridPartition:
    """Cell layout for one ``width x height`` buffer and cell size."""

    int_width: int
    int_height: int
    int_cell_size: int

    @property
    def int_rows(self) -> int:
        """Number of cell rows, ``ceil(height / cell_size)``."""
        return -(-self.int_height // self.int_cell_size)

    @property
    def int_cols(self) -> int:
        """Number of cell columns, ``ceil(width / cell_size)``."""
        return -(-self.int_width // self.int_cell_size)

    @property
    def int_cell_count(self) -> int:
        return self.int_rows * self.int_cols

    def row_starts(self) -> np.ndarray:
        """Top pixel coordinate of every cell row."""
        return np.arange(0, self.int_height, self.int_cell_size, dtype=np.int64)

    def col_starts(self) -> np.ndarray:
        """Left pixel coordinate of every cell column."""
        return np.arange(0, self.int_width, self.int_cell_size, dtype=np.int64)

    def row_heights(self) -> np.ndarray:
        """Pixel height of every cell row; the last row may be shorter."""
        array_ends: np.ndarray = np.minimum(
            self.row_starts() + self.int_cell_size, self.int_height
        )
        return array_ends - self.row_starts()

    def col_widths(self) -> np.ndarray:
        """Pixel width of every cell column; the last column may be narrower."""
        array_ends: np.ndarray = np.minimum(
            self.col_starts() + self.int_cell_size, self.int_width
        )
        return array_ends - self.col_starts()

    def cell_index(self, int_row: int, int_col: int) -> int:
        """Row-major index of a cell, also its initial region id."""
        return int_row * self.int_cols + int_col

    def cell_bounds(self, int_row: int, int_col: int) -> tuple[int, int, int, int]:
        """Return ``(x0, y0, x1, y1)`` pixel bounds for one cell."""
        if not (0 <= int_row < self.int_rows and 0 <= int_col < self.int_cols):
            raise IndexError(f"Cell ({int_row}, {int_col}) is outside the grid.")
        int_x0: int = int_col * self.int_cell_size
        int_y0: int = int_row * self.int_cell_size
        int_x1: int = min(int_x0 + self.int_cell_size, self.int_width)
        int_y1: int = min(int_y0 + self.int_cell_size, self.int_height)
        return int_x0, int_y0, int_x1, int_y1

    def iter_cell_bounds(
        self,
    ) -> Generator[tuple[int, int, tuple[int, int, int, int]], None, None]:
        """Yield ``(row, col, bounds)`` for every cell in row-major order."""
        for int_row in range(self.int_rows):
            for int_col in range(self.int_cols):
                yield int_row, int_col, self.cell_bounds(int_row, int_col)


def partition_grid(int_width: int, int_height: int, int_cell_size: int) -> GridPartition:
    """Divide a ``width x height`` buffer into cells of ``int_cell_size`` pixels.

    Raises ``InvalidConfigError`` when the cell size is outside
    ``[1, min(width, height)]``.
    """
    validate_cell_size(int_cell_size, int_width, int_height)
    return GridPartition(int_width, int_height, int_cell_size)
