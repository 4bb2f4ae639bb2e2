"""Generation-based contamination simulation over a cell grid.

Regions live in an arena of parallel arrays indexed by region id. A region's
id is the row-major index of the cell it started from, so ``region_of[cell]``
writes replace pointer juggling when regions merge.

Each generation reads a snapshot of the previous region map and writes a
fresh one, so the outcome never depends on the order cells are visited:

1. Every pair of 4-adjacent cells in different regions is examined. When the
   RGB distance between the two region colors is below the merge threshold
   the pair is a merge proposal.
2. The lower region id of a proposal is the absorber. A region claimed by
   several neighbors joins the lowest-id claimant; the other claims are
   dropped. When that claimant is itself absorbed in the same generation,
   the region follows it into its final owner.
3. Absorbed regions hand their cells, color sum and cell count to the owner,
   whose color becomes the cell-count-weighted average of all merged colors.

The lowest-id region holding any proposal is never claimed and always absorbs
something, so the region count strictly drops every generation until the
fixed point.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np
from tqdm import tqdm

from .contamination_settings import FLOAT_DEFAULT_MERGE_THRESHOLD
from .contamination_settings import INT_DEFAULT_MAX_GENERATIONS

logger_app = logging.getLogger(__name__)


def round_half_up(array_sums: np.ndarray, array_counts: np.ndarray) -> np.ndarray:
    """Divide integer sums by positive counts, rounding ties up."""
    return (2 * array_sums + array_counts) // (2 * array_counts)


@dataclass
class Region:
    """Accumulator for one region of merged cells."""

    int_region_id: int
    tuple_color_sum: tuple[int, int, int, int]
    int_cell_count: int
    bool_active: bool = True

    @property
    def tuple_color(self) -> tuple[int, int, int, int]:
        """Blended RGBA color rounded to 8-bit channels."""
        int_count: int = self.int_cell_count
        return tuple(  # type: ignore[return-value]
            (2 * int_sum + int_count) // (2 * int_count) for int_sum in self.tuple_color_sum
        )


@dataclass
class SimulationResult:
    """Converged region partition of one cell grid.

    - ``array_cell_region``: ``(rows, cols)`` region id of every cell.
    - ``array_cell_colors``: ``(rows, cols, 4)`` final region color per cell.
    - ``list_regions``: surviving regions sorted by id.
    - ``list_int_region_counts``: region count before the first generation
      followed by the count after each generation.
    """

    array_cell_region: np.ndarray
    array_cell_colors: np.ndarray
    list_regions: list[Region]
    int_generations: int
    bool_converged: bool
    list_int_region_counts: list[int] = field(default_factory=list)

    @property
    def int_region_count(self) -> int:
        return len(self.list_regions)


class ContaminationSimulator:
    """Run the merge simulation for one grid of cell mean colors.

    Constructor Input:
    - ``array_cell_means``: ``(rows, cols, 4)`` cell mean colors.
    - ``float_merge_threshold``: RGB distance below which regions merge.
    - ``int_max_generations``: generation cap.
    """

    def __init__(
        self,
        array_cell_means: np.ndarray,
        float_merge_threshold: float = FLOAT_DEFAULT_MERGE_THRESHOLD,
        int_max_generations: int = INT_DEFAULT_MAX_GENERATIONS,
    ) -> None:
        if array_cell_means.ndim != 3 or array_cell_means.shape[2] != 4:
            raise ValueError(
                f"Cell means must be shaped (rows, cols, 4), got {array_cell_means.shape}."
            )
        if int_max_generations < 0:
            raise ValueError("Generation cap must be >= 0.")

        self.int_rows: int = int(array_cell_means.shape[0])
        self.int_cols: int = int(array_cell_means.shape[1])
        self.float_merge_threshold: float = float(float_merge_threshold)
        self.int_max_generations: int = int_max_generations

        int_cell_count: int = self.int_rows * self.int_cols
        self.array_cell_region: np.ndarray = np.arange(
            int_cell_count, dtype=np.int64
        ).reshape(self.int_rows, self.int_cols)
        self.array_color_sums: np.ndarray = array_cell_means.reshape(
            int_cell_count, 4
        ).astype(np.int64)
        self.array_cell_counts: np.ndarray = np.ones(int_cell_count, dtype=np.int64)
        self.array_active: np.ndarray = np.ones(int_cell_count, dtype=bool)
        self.int_generation: int = 0
        self.list_int_region_counts: list[int] = [int_cell_count]

    @property
    def int_region_count(self) -> int:
        return int(np.count_nonzero(self.array_cell_counts))

    def find_merge_pairs(self) -> np.ndarray:
        """Return sorted unique ``(low_id, high_id)`` pairs of mergeable neighbors."""
        list_array_a: list[np.ndarray] = [
            self.array_cell_region[:, :-1].ravel(),
            self.array_cell_region[:-1, :].ravel(),
        ]
        list_array_b: list[np.ndarray] = [
            self.array_cell_region[:, 1:].ravel(),
            self.array_cell_region[1:, :].ravel(),
        ]
        array_a: np.ndarray = np.concatenate(list_array_a)
        array_b: np.ndarray = np.concatenate(list_array_b)
        array_border: np.ndarray = array_a != array_b
        if not np.any(array_border):
            return np.empty((0, 2), dtype=np.int64)

        array_low: np.ndarray = np.minimum(array_a[array_border], array_b[array_border])
        array_high: np.ndarray = np.maximum(array_a[array_border], array_b[array_border])
        array_pairs: np.ndarray = np.unique(np.stack([array_low, array_high], axis=1), axis=0)

        array_low_rgb: np.ndarray = (
            self.array_color_sums[array_pairs[:, 0], :3]
            / self.array_cell_counts[array_pairs[:, 0], np.newaxis]
        )
        array_high_rgb: np.ndarray = (
            self.array_color_sums[array_pairs[:, 1], :3]
            / self.array_cell_counts[array_pairs[:, 1], np.newaxis]
        )
        array_distance: np.ndarray = np.sqrt(
            np.sum((array_low_rgb - array_high_rgb) ** 2, axis=1)
        )
        return array_pairs[array_distance < self.float_merge_threshold]

    def resolve_absorptions(self, array_pairs: np.ndarray) -> np.ndarray:
        """Map every region id to the id that owns it after this generation."""
        int_slots: int = len(self.array_cell_counts)
        array_claimant: np.ndarray = np.full(int_slots, int_slots, dtype=np.int64)
        np.minimum.at(array_claimant, array_pairs[:, 1], array_pairs[:, 0])

        array_remap: np.ndarray = np.arange(int_slots, dtype=np.int64)
        array_is_target: np.ndarray = array_claimant < int_slots
        array_remap[array_is_target] = array_claimant[array_is_target]

        # Claimants always have lower ids than their targets, so chains end.
        while True:
            array_next: np.ndarray = array_remap[array_remap]
            if np.array_equal(array_next, array_remap):
                return array_remap
            array_remap = array_next

    def step(self) -> bool:
        """Advance one generation. Return ``False`` at the fixed point."""
        array_pairs: np.ndarray = self.find_merge_pairs()
        self.array_active[:] = False
        self.array_active[array_pairs.ravel()] = True
        if len(array_pairs) == 0:
            return False

        array_remap: np.ndarray = self.resolve_absorptions(array_pairs)

        array_next_sums: np.ndarray = np.zeros_like(self.array_color_sums)
        np.add.at(array_next_sums, array_remap, self.array_color_sums)
        array_next_counts: np.ndarray = np.zeros_like(self.array_cell_counts)
        np.add.at(array_next_counts, array_remap, self.array_cell_counts)

        self.array_cell_region = array_remap[self.array_cell_region]
        self.array_color_sums = array_next_sums
        self.array_cell_counts = array_next_counts
        self.int_generation += 1
        self.list_int_region_counts.append(self.int_region_count)
        logger_app.debug(
            "Generation %d: %d proposals, %d regions remain.",
            self.int_generation,
            len(array_pairs),
            self.int_region_count,
        )
        return True

    def run(self, bool_show_progress: bool = False) -> SimulationResult:
        """Iterate generations until the fixed point or the generation cap."""
        bool_converged: bool = False
        with tqdm(
            total=self.int_max_generations,
            desc="Contaminating",
            unit="gen",
            disable=not bool_show_progress,
        ) as obj_progress:
            while self.int_generation < self.int_max_generations:
                if not self.step():
                    bool_converged = True
                    break
                obj_progress.update(1)
                obj_progress.set_postfix(regions=self.int_region_count)

        if not bool_converged:
            # Cap reached; still a fixed point if nothing is left to merge.
            array_pairs: np.ndarray = self.find_merge_pairs()
            self.array_active[:] = False
            self.array_active[array_pairs.ravel()] = True
            bool_converged = len(array_pairs) == 0
            if not bool_converged:
                logger_app.warning(
                    "Generation cap %d reached with %d regions still active.",
                    self.int_max_generations,
                    int(np.count_nonzero(self.array_active)),
                )

        logger_app.info(
            "Contamination finished after %d generations with %d regions.",
            self.int_generation,
            self.int_region_count,
        )
        return self.build_result(bool_converged)

    def build_result(self, bool_converged: bool) -> SimulationResult:
        """Snapshot the current arena into a ``SimulationResult``."""
        array_safe_counts: np.ndarray = np.maximum(self.array_cell_counts, 1)
        array_region_colors: np.ndarray = round_half_up(
            self.array_color_sums, array_safe_counts[:, np.newaxis]
        ).astype(np.uint8)
        array_cell_colors: np.ndarray = array_region_colors[self.array_cell_region]

        list_regions: list[Region] = []
        for int_region_id in np.flatnonzero(self.array_cell_counts).tolist():
            array_sum: np.ndarray = self.array_color_sums[int_region_id]
            list_regions.append(
                Region(
                    int_region_id=int_region_id,
                    tuple_color_sum=(
                        int(array_sum[0]),
                        int(array_sum[1]),
                        int(array_sum[2]),
                        int(array_sum[3]),
                    ),
                    int_cell_count=int(self.array_cell_counts[int_region_id]),
                    bool_active=bool(self.array_active[int_region_id]),
                )
            )

        return SimulationResult(
            array_cell_region=self.array_cell_region.copy(),
            array_cell_colors=array_cell_colors,
            list_regions=list_regions,
            int_generations=self.int_generation,
            bool_converged=bool_converged,
            list_int_region_counts=list(self.list_int_region_counts),
        )


def simulate_contamination(
    array_cell_means: np.ndarray,
    float_merge_threshold: float = FLOAT_DEFAULT_MERGE_THRESHOLD,
    int_max_generations: int = INT_DEFAULT_MAX_GENERATIONS,
    bool_show_progress: bool = False,
) -> SimulationResult:
    """Run the contamination simulation to convergence or the generation cap."""
    obj_simulator: ContaminationSimulator = ContaminationSimulator(
        array_cell_means,
        float_merge_threshold=float_merge_threshold,
        int_max_generations=int_max_generations,
    )
    return obj_simulator.run(bool_show_progress=bool_show_progress)
