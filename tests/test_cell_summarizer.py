"""Tests for per-cell mean colors."""

from __future__ import annotations

import numpy as np
from PIL import Image

from contamination.cell_summarizer import build_cells, summarize_cells
from contamination.grid_partition import partition_grid
from contamination.image_codec import RasterImage


def test_flat_quadrants_summarize_to_their_colors(image_quadrants: Image.Image) -> None:
    """Flat 2x2 quadrants produce their own color as the cell mean."""
    obj_image = RasterImage.from_pil(image_quadrants)
    array_means = summarize_cells(obj_image, partition_grid(4, 4, 2))

    assert array_means.shape == (2, 2, 4)
    assert array_means.dtype == np.uint8
    assert array_means[0, 0].tolist() == [200, 30, 30, 255]
    assert array_means[0, 1].tolist() == [204, 28, 33, 255]
    assert array_means[1, 0].tolist() == [20, 40, 220, 255]


def test_mean_rounds_ties_up_and_includes_alpha() -> None:
    """A mean of x.5 rounds up; alpha is averaged like the other channels."""
    array_pixels = np.array(
        [[[0, 10, 255, 0], [1, 11, 254, 255]]],
        dtype=np.uint8,
    )
    obj_image = RasterImage.from_array(array_pixels)
    array_means = summarize_cells(obj_image, partition_grid(2, 1, 1))
    assert array_means[0, 0].tolist() == [0, 10, 255, 0]

    obj_wide_image = RasterImage.from_array(
        np.array([[[0, 10, 255, 0], [1, 11, 254, 255]]] * 2, dtype=np.uint8)
    )
    array_wide_means = summarize_cells(obj_wide_image, partition_grid(2, 2, 2))
    assert array_wide_means[0, 0].tolist() == [1, 11, 255, 128]


def test_mean_rounds_down_below_half() -> None:
    """A mean below x.5 rounds down."""
    array_pixels = np.zeros((3, 3, 4), dtype=np.uint8)
    array_pixels[0, 0] = (1, 2, 4, 255)
    obj_image = RasterImage.from_array(array_pixels)
    array_means = summarize_cells(obj_image, partition_grid(3, 3, 3))
    # 1/9, 2/9, 4/9 and 255/9 = 28.33
    assert array_means[0, 0].tolist() == [0, 0, 0, 28]


def test_truncated_border_cells_average_only_their_pixels() -> None:
    """Border cells average the pixels they actually cover."""
    array_pixels = np.zeros((2, 3, 4), dtype=np.uint8)
    array_pixels[:, 2] = (90, 60, 30, 255)
    obj_image = RasterImage.from_array(array_pixels)
    array_means = summarize_cells(obj_image, partition_grid(3, 2, 2))
    assert array_means.shape == (1, 2, 4)
    assert array_means[0, 1].tolist() == [90, 60, 30, 255]


def test_build_cells_carries_bounds_and_colors(image_quadrants: Image.Image) -> None:
    """Cell records are row-major with bounds and mean colors."""
    obj_image = RasterImage.from_pil(image_quadrants)
    obj_partition = partition_grid(4, 4, 2)
    list_cells = build_cells(obj_partition, summarize_cells(obj_image, obj_partition))

    assert [(obj_cell.int_row, obj_cell.int_col) for obj_cell in list_cells] == [
        (0, 0),
        (0, 1),
        (1, 0),
        (1, 1),
    ]
    assert (list_cells[3].int_x0, list_cells[3].int_y0) == (2, 2)
    assert list_cells[3].int_pixel_count == 4
    assert list_cells[3].tuple_mean_color == (20, 40, 220, 255)
