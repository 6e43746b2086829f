"""
Deterministic pseudo-random layout grids.

A LayoutGrid is a pure function of (seed, cell_count, success_probability):
cell i is good when the i-th uniform draw of a PCG64 stream keyed by `seed`
falls below p. The generator is built fresh per call, so nothing is carried
between calls and identical arguments give bit-identical arrays. Draws are
prefix-stable: cell i does not depend on cell_count.

Resampling means passing a new seed.
"""

import math
from dataclasses import dataclass, field
from typing import List

import numpy as np

_SEED_MASK = (1 << 64) - 1


@dataclass(frozen=True, eq=False)
class LayoutGrid:
    """
    Boolean grid of good (True) and defective (False) cells.

    Attributes:
        seed: Seed the grid was drawn from.
        success_probability: Clamped probability of a good cell.
        cells: 1-D bool array, row-major.
        columns: Cells per row for display (0 = unspecified).
    """
    seed: int
    success_probability: float
    cells: np.ndarray = field(repr=False)
    columns: int = 0

    @property
    def cell_count(self) -> int:
        return int(self.cells.size)

    @property
    def good_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    @property
    def defect_count(self) -> int:
        return self.cell_count - self.good_count

    @property
    def good_fraction(self) -> float:
        if self.cell_count == 0:
            return 0.0
        return self.good_count / self.cell_count

    def rows(self) -> List[List[bool]]:
        """Cells split into rows of `columns` (one row if columns is 0)."""
        width = self.columns if self.columns > 0 else max(1, self.cell_count)
        flat = self.cells.tolist()
        return [flat[start:start + width] for start in range(0, len(flat), width)]


def seeded_generator(seed: int) -> np.random.Generator:
    """PCG64 generator for `seed`; any int is accepted (masked to 64 bits)."""
    return np.random.Generator(np.random.PCG64(int(seed) & _SEED_MASK))


def clamp_probability(p: float) -> float:
    """Clamp to [0, 1]; NaN maps to 0."""
    try:
        p = float(p)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(p):
        return 0.0
    return min(1.0, max(0.0, p))


def cell_uniforms(seed: int, cell_count: int) -> np.ndarray:
    """Per-cell uniforms in [0, 1) for cells 0..cell_count-1."""
    n = max(0, int(cell_count))
    return seeded_generator(seed).random(n)


def cell_uniform(seed: int, index: int) -> float:
    """Uniform in [0, 1) for cell `index` under `seed`."""
    if index < 0:
        raise ValueError(f"Cell index must be non-negative, got {index}")
    return float(cell_uniforms(seed, index + 1)[index])


def generate_layout(seed: int, cell_count: int, success_probability: float, columns: int = 0) -> LayoutGrid:
    """
    Draw a layout grid.

    Args:
        seed: Integer seed; any int is accepted (reduced modulo 2**64).
        cell_count: Number of cells; negative counts give an empty grid.
        success_probability: Chance each cell is good; clamped to [0, 1].
        columns: Display width carried on the grid.

    Returns:
        LayoutGrid
    """
    p = clamp_probability(success_probability)
    cells = cell_uniforms(seed, cell_count) < p
    cells.setflags(write=False)
    return LayoutGrid(seed=int(seed), success_probability=p, cells=cells, columns=max(0, int(columns)))
