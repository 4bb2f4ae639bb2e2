"""Shared pytest configuration and fixtures for the contamination test suite."""

from pathlib import Path
import sys

from PIL import Image
import pytest


path_project_root = Path(__file__).resolve().parents[1]
path_src = path_project_root / "src"
if str(path_src) not in sys.path:
    sys.path.insert(0, str(path_src))


TUPLE_WARM_A = (200, 30, 30, 255)
TUPLE_WARM_B = (204, 28, 33, 255)
TUPLE_COOL = (20, 40, 220, 255)


def build_quadrant_image() -> Image.Image:
    """Return a 4x4 RGBA image of four flat 2x2 quadrants.

    The top quadrants are near-identical warm colors, the bottom quadrants
    share one cool color far from both.
    """
    image_quadrants = Image.new("RGBA", (4, 4), TUPLE_COOL)
    for int_x in range(4):
        for int_y in range(2):
            tuple_color = TUPLE_WARM_A if int_x < 2 else TUPLE_WARM_B
            image_quadrants.putpixel((int_x, int_y), tuple_color)
    return image_quadrants


@pytest.fixture
def path_input_image(tmp_path: Path) -> Path:
    """Create a small deterministic RGB test image and return its path."""
    path_image = tmp_path / "input_image.png"
    image_input = Image.new("RGB", (20, 20), (200, 200, 200))
    for int_x in range(10):
        for int_y in range(20):
            image_input.putpixel((int_x, int_y), (10, 30, 80))
    image_input.save(path_image)
    return path_image


@pytest.fixture
def path_quadrant_image(tmp_path: Path) -> Path:
    """Write the 4x4 quadrant image as PNG and return its path."""
    path_image = tmp_path / "quadrants.png"
    build_quadrant_image().save(path_image)
    return path_image


@pytest.fixture
def image_quadrants() -> Image.Image:
    """Return the 4x4 quadrant image as a Pillow image."""
    return build_quadrant_image()
