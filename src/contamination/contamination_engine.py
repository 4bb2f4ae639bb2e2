"""Contamination engine facade and CLI entrypoint.

This module owns the load/generate/save pipeline consumed by the presentation
layer. It also contains the CLI entrypoint used by ``poetry run contamination``.
"""

from __future__ import annotations

import importlib.metadata
import logging
import os
import sys

from .cell_summarizer import summarize_cells
from .contamination_errors import ContaminationError, NoImageLoadedError
from .contamination_renderer import render_regions
from .contamination_settings import ContaminationSettings
from .contamination_settings import FLOAT_DEFAULT_MERGE_THRESHOLD
from .contamination_settings import INT_DEFAULT_CELL_SIZE
from .contamination_settings import INT_DEFAULT_MAX_GENERATIONS
from .contamination_simulator import SimulationResult
from .contamination_simulator import simulate_contamination
from .grid_partition import GridPartition
from .grid_partition import partition_grid
from .image_codec import INT_DEFAULT_PREVIEW_WIDTH
from .image_codec import RasterImage
from .image_codec import decode_image_bytes
from .image_codec import decode_image_path
from .image_codec import encode_image_path
from .image_codec import resize_preview
from .image_codec import resolve_encode_format

# Structured logging without timestamps for cleaner CLI output.
logging.basicConfig(format="%(levelname)s: %(message)s", level=logging.INFO)
logger_app = logging.getLogger(__name__)


def get_version() -> str:
    """Retrieve package version from installed metadata."""
    try:
        str_version_result: str = importlib.metadata.version("contamination")
        return str_version_result
    except importlib.metadata.PackageNotFoundError as exc_error:
        logger_app.warning(
            "Package 'contamination' not found. Using 'unknown' version. Context: %s",
            exc_error,
        )
        str_unknown_version: str = "unknown"
        return str_unknown_version


def synthesize_contamination(
    obj_image: RasterImage,
    obj_settings: ContaminationSettings,
    bool_show_progress: bool = False,
) -> tuple[RasterImage, SimulationResult]:
    """Run partition, summary, simulation and rendering for one source image.

    Output:
    - The stylized image at source resolution and the simulation result it
      was rendered from.
    """
    obj_settings.validate_for(obj_image.int_width, obj_image.int_height)
    obj_partition: GridPartition = partition_grid(
        obj_image.int_width, obj_image.int_height, obj_settings.int_cell_size
    )
    logger_app.info(
        "Contaminating %dx%d image with %dx%d cells of size %d...",
        obj_image.int_width,
        obj_image.int_height,
        obj_partition.int_cols,
        obj_partition.int_rows,
        obj_settings.int_cell_size,
    )
    obj_result: SimulationResult = simulate_contamination(
        summarize_cells(obj_image, obj_partition),
        float_merge_threshold=obj_settings.float_merge_threshold,
        int_max_generations=obj_settings.int_max_generations,
        bool_show_progress=bool_show_progress,
    )
    obj_output: RasterImage = render_regions(
        obj_image.int_width,
        obj_image.int_height,
        obj_partition,
        obj_result.array_cell_colors,
    )
    return obj_output, obj_result


class ContaminationEngine:
    """Hold the current source image and expose load, generate and save.

    Constructor Input:
    - ``float_merge_threshold``: RGB distance below which regions merge.
    - ``int_max_generations``: simulation generation cap.
    - ``bool_show_progress``: show a tqdm bar while simulating.

    Output/Behavior:
    - ``load`` replaces the current image only after a successful decode.
    - ``generate`` and ``save`` always start from the original source image
      and never replace it.
    """

    def __init__(
        self,
        float_merge_threshold: float = FLOAT_DEFAULT_MERGE_THRESHOLD,
        int_max_generations: int = INT_DEFAULT_MAX_GENERATIONS,
        bool_show_progress: bool = False,
    ) -> None:
        """Initialize simulation constants and an empty session."""
        self.float_merge_threshold: float = float_merge_threshold
        self.int_max_generations: int = int_max_generations
        self.bool_show_progress: bool = bool_show_progress
        ContaminationSettings(
            float_merge_threshold=float_merge_threshold,
            int_max_generations=int_max_generations,
        ).validate()

        # Replaced wholesale, never mutated; readers capture a local reference.
        self._image_current: RasterImage | None = None

    @property
    def image_current(self) -> RasterImage | None:
        """The loaded source image, or ``None`` before the first load."""
        return self._image_current

    def build_settings(self, int_cell_size: int) -> ContaminationSettings:
        """Combine a cell size with this engine's simulation constants."""
        obj_settings: ContaminationSettings = ContaminationSettings(
            int_cell_size=int_cell_size,
            float_merge_threshold=self.float_merge_threshold,
            int_max_generations=self.int_max_generations,
        )
        return obj_settings

    def _require_image(self) -> RasterImage:
        """Capture the current image or raise ``NoImageLoadedError``."""
        image_captured: RasterImage | None = self._image_current
        if image_captured is None:
            logger_app.error("No image is loaded. Load an image before generating.")
            raise NoImageLoadedError("No image is loaded. Load an image first.")
        return image_captured

    def load(self, str_path: str | os.PathLike[str]) -> RasterImage:
        """Decode an image file and make it the current source image."""
        obj_image: RasterImage = decode_image_path(str_path)
        self._image_current = obj_image
        logger_app.info(
            "Loaded %s (%dx%d).", str_path, obj_image.int_width, obj_image.int_height
        )
        return obj_image

    def load_bytes(self, bytes_image: bytes) -> RasterImage:
        """Decode an in-memory image payload and make it the current source image."""
        obj_image: RasterImage = decode_image_bytes(bytes_image)
        self._image_current = obj_image
        logger_app.info(
            "Loaded image buffer (%dx%d).", obj_image.int_width, obj_image.int_height
        )
        return obj_image

    def generate(self, int_cell_size: int) -> RasterImage:
        """Render the contaminated version of the current image."""
        image_source: RasterImage = self._require_image()
        obj_output: RasterImage
        obj_output, _ = synthesize_contamination(
            image_source,
            self.build_settings(int_cell_size),
            bool_show_progress=self.bool_show_progress,
        )
        return obj_output

    def save(
        self,
        int_cell_size: int,
        str_path: str | os.PathLike[str],
        str_format: str | None = None,
    ) -> None:
        """Regenerate at the source resolution and write the result to disk."""
        image_source: RasterImage = self._require_image()
        obj_settings: ContaminationSettings = self.build_settings(int_cell_size)
        str_resolved_format: str = resolve_encode_format(str_path, str_format)

        obj_output: RasterImage
        obj_output, _ = synthesize_contamination(
            image_source,
            obj_settings,
            bool_show_progress=self.bool_show_progress,
        )
        encode_image_path(obj_output, str_path, str_resolved_format)

    @staticmethod
    def preview(
        obj_image: RasterImage, int_preview_width: int = INT_DEFAULT_PREVIEW_WIDTH
    ) -> RasterImage:
        """Return a display-sized copy of ``obj_image``."""
        return resize_preview(obj_image, int_preview_width)


def main() -> None:
    """CLI entrypoint for contaminating one image file."""
    import argparse

    obj_parser = argparse.ArgumentParser(description="Contamination Image Generator")

    obj_parser.add_argument(
        "input_image",
        nargs="?",
        type=str,
        help="Path to a PNG, JPEG, TIFF, or WEBP source image.",
    )
    obj_parser.add_argument(
        "--version", "-v", action="store_true", help="Print version and exit"
    )
    obj_parser.add_argument(
        "--cell_size",
        type=int,
        default=INT_DEFAULT_CELL_SIZE,
        help="Edge length of one grid cell in pixels.",
    )
    obj_parser.add_argument(
        "--threshold",
        type=float,
        default=FLOAT_DEFAULT_MERGE_THRESHOLD,
        help="RGB distance below which neighboring regions merge.",
    )
    obj_parser.add_argument(
        "--max_generations",
        type=int,
        default=INT_DEFAULT_MAX_GENERATIONS,
        help="Maximum number of simulation generations.",
    )
    obj_parser.add_argument(
        "--output",
        type=str,
        help="Output path. Defaults to output/<name>_contaminated.png.",
    )
    obj_parser.add_argument(
        "--format",
        type=str,
        help="Output container (png, jpeg, tiff, webp). Defaults to the output extension.",
    )
    obj_parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while simulating.",
    )

    obj_args = obj_parser.parse_args()

    if obj_args.version:
        str_version_text: str = (
            f"contamination v{get_version()} (Python {sys.version.split()[0]})"
        )
        logger_app.info(str_version_text)
        sys.exit(0)

    if obj_args.input_image is None:
        logger_app.error("input_image is required.")
        sys.exit(1)
    if obj_args.max_generations < 0:
        logger_app.error("Generation cap must be >= 0.")
        sys.exit(1)

    str_output_file: str
    if obj_args.output is not None:
        str_output_file = obj_args.output
    else:
        str_output_dir: str = "output"
        if not os.path.exists(str_output_dir):
            os.makedirs(str_output_dir)
        str_filename: str = os.path.splitext(os.path.basename(obj_args.input_image))[0]
        str_output_file = os.path.join(str_output_dir, f"{str_filename}_contaminated.png")

    try:
        obj_engine: ContaminationEngine = ContaminationEngine(
            float_merge_threshold=obj_args.threshold,
            int_max_generations=obj_args.max_generations,
            bool_show_progress=obj_args.progress,
        )
        obj_engine.load(obj_args.input_image)
        obj_engine.save(obj_args.cell_size, str_output_file, str_format=obj_args.format)
    except ContaminationError as exc_error:
        logger_app.error("Contamination failed. Context: %s", exc_error)
        sys.exit(1)


if __name__ == "__main__":
    main()
