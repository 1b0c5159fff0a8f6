"""
Feature point placement for cellular noise.

The cubic volume is split into a grid_size^3 lattice of equal cells with
integer edge length size // grid_size. Exactly one feature point is placed
at a uniformly random integer offset inside each cell.

Points are enumerated i (x cell) outermost, then j, then k innermost.
"""

import numpy as np
from typing import Optional
from dataclasses import dataclass
import logging

from common.config import check_lattice_sizes
from common.vecmath import Coordinate3

logger = logging.getLogger(__name__)


def cell_edge_length(size: int, grid_size: int) -> int:
    """
    Integer cell edge length used to bound feature point placement.

    Raises:
        ValueError: if grid_size is not in [1, size]
    """
    check_lattice_sizes(size, grid_size)
    return int(size) // int(grid_size)


@dataclass(frozen=True)
class FeaturePointSet:
    """
    One feature point per lattice cell.

    points is a read-only (grid_size^3, 3) integer array; row n belongs to
    cell (i, j, k) with n = (i * grid_size + j) * grid_size + k.
    """
    points: np.ndarray
    size: int
    grid_size: int
    cell_edge: int

    def __len__(self) -> int:
        return len(self.points)

    @property
    def n_cells(self) -> int:
        return self.grid_size ** 3

    def cell_index(self, n: int) -> Coordinate3:
        """Lattice cell (i, j, k) owning point n."""
        i, rem = divmod(n, self.grid_size * self.grid_size)
        j, k = divmod(rem, self.grid_size)
        return (i, j, k)

    def cell_origin(self, n: int) -> Coordinate3:
        """Voxel coordinate of the lowest corner of point n's cell."""
        i, j, k = self.cell_index(n)
        e = self.cell_edge
        return (i * e, j * e, k * e)

    def as_lattice(self) -> np.ndarray:
        """View points as (grid_size, grid_size, grid_size, 3) indexed [i, j, k]."""
        g = self.grid_size
        return self.points.reshape(g, g, g, 3)


def generate_feature_points(
    size: int,
    grid_size: int,
    rng: Optional[np.random.Generator] = None
) -> FeaturePointSet:
    """
    Place one random feature point in every lattice cell.

    Args:
        size: Voxels per axis
        grid_size: Cells per axis
        rng: Random generator; a fresh unseeded one is used when None

    Returns:
        FeaturePointSet with grid_size^3 points
    """
    cell_edge = cell_edge_length(size, grid_size)
    if rng is None:
        rng = np.random.default_rng()

    # Local offsets in [0, cell_edge - 1], drawn (rx, ry, rz) per cell
    offsets = rng.integers(0, cell_edge, size=(grid_size, grid_size, grid_size, 3), dtype=np.int64)

    cells = np.arange(grid_size, dtype=np.int64)
    ii, jj, kk = np.meshgrid(cells, cells, cells, indexing='ij')
    origins = np.stack([ii, jj, kk], axis=-1) * cell_edge

    points = (origins + offsets).reshape(-1, 3)
    points.flags.writeable = False

    logger.debug(f"Generated {len(points)} feature points (grid={grid_size}^3, cell_edge={cell_edge})")

    return FeaturePointSet(
        points=points,
        size=int(size),
        grid_size=int(grid_size),
        cell_edge=cell_edge
    )
