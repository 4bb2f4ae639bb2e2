"""Public package interface for the contamination image engine."""

from .__version__ import __version__
from .cell_summarizer import build_cells
from .cell_summarizer import summarize_cells
from .contamination_commands import CommandResult
from .contamination_commands import ErrorReport
from .contamination_commands import Picture
from .contamination_commands import generate_image
from .contamination_commands import load_image
from .contamination_commands import save_image
from .contamination_engine import ContaminationEngine
from .contamination_engine import get_version
from .contamination_engine import main
from .contamination_engine import synthesize_contamination
from .contamination_errors import ContaminationError
from .contamination_errors import ImageIoError
from .contamination_errors import InvalidConfigError
from .contamination_errors import NoImageLoadedError
from .contamination_errors import UnsupportedFormatError
from .contamination_renderer import render_regions
from .contamination_settings import ContaminationSettings
from .contamination_simulator import ContaminationSimulator
from .contamination_simulator import Region
from .contamination_simulator import SimulationResult
from .contamination_simulator import simulate_contamination
from .grid_partition import Cell
from .grid_partition import GridPartition
from .grid_partition import partition_grid
from .image_codec import RasterImage

__all__ = [
    "__version__",
    "Cell",
    "CommandResult",
    "ContaminationEngine",
    "ContaminationError",
    "ContaminationSettings",
    "ContaminationSimulator",
    "ErrorReport",
    "GridPartition",
    "ImageIoError",
    "InvalidConfigError",
    "NoImageLoadedError",
    "Picture",
    "RasterImage",
    "Region",
    "SimulationResult",
    "UnsupportedFormatError",
    "build_cells",
    "generate_image",
    "get_version",
    "load_image",
    "main",
    "partition_grid",
    "render_regions",
    "save_image",
    "simulate_contamination",
    "summarize_cells",
]
