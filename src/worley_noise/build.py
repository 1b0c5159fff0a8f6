"""
Worley Noise: inverted 3D cellular noise volume.

Every voxel's value depends on its distance to the nearest feature point,
where one feature point sits at a random position inside each lattice cell.

Algorithm:
1. Place one feature point per cell (feature_points.generate_feature_points)
2. For every voxel, find the minimum Euclidean distance to any feature point
3. Remap the distance from [0, max_cell_distance] to [out_min, out_max]
4. Invert (1 - mapped) so voxels near a feature point are bright

max_cell_distance is the diagonal of one cell using the real quotient
size / grid_size, while placement uses the truncated size // grid_size.
Results are NOT clamped: voxels farther than max_cell_distance from every
feature point come out negative.

Search methods (all return the true global nearest distance):
- brute_force: every voxel against every feature point (reference)
- neighborhood: only cells within a proven Chebyshev radius of the voxel's cell
- kdtree: scipy cKDTree query
"""

import itertools
import logging
import time
from typing import Optional, Tuple, Union

import numpy as np
from scipy.spatial import cKDTree

from common.config import NoiseConfig, NoiseMetadata, RandomMode, SearchMethod
from common.vecmath import map_value

from .feature_points import FeaturePointSet, generate_feature_points

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_VOXELS = 4096


def max_cell_distance(size: int, grid_size: int) -> np.float32:
    """Diagonal length of one cell, using the real-valued edge size / grid_size."""
    edge = np.float32(size / grid_size)
    return np.sqrt(edge * edge * np.float32(3.0))


def neighborhood_radius(cell_edge: int, leftover: int, grid_size: int) -> int:
    """
    Chebyshev cell radius that always contains the nearest feature point.

    A voxel is never farther than sqrt(3) * (cell_edge - 1 + leftover) from its
    own cell's point, and any point R + 1 cells away is at least
    R * cell_edge + 1 voxels away along one axis.
    """
    own_bound = np.sqrt(3.0) * (cell_edge - 1 + leftover)
    radius = 1
    while radius * cell_edge + 1 <= own_bound:
        radius += 1
    return min(radius, grid_size - 1)


def _voxel_coords(start: int, stop: int, size: int) -> np.ndarray:
    """(M, 3) integer (x, y, z) coordinates for flat indices [start, stop)."""
    idx = np.arange(start, stop, dtype=np.int64)
    x = idx % size
    y = (idx // size) % size
    z = idx // (size * size)
    return np.column_stack([x, y, z])


def _resolve_method(method: Union[SearchMethod, str]) -> SearchMethod:
    if isinstance(method, SearchMethod):
        return method
    try:
        return SearchMethod(method)
    except ValueError:
        raise ValueError(f"Unknown search method: {method!r}") from None


def _nearest_brute_force(feature_points: FeaturePointSet, chunk_voxels: int) -> np.ndarray:
    size = feature_points.size
    n_voxels = size ** 3
    pts = feature_points.points.astype(np.float32)
    result = np.empty(n_voxels, dtype=np.float32)

    for start in range(0, n_voxels, chunk_voxels):
        stop = min(start + chunk_voxels, n_voxels)
        vox = _voxel_coords(start, stop, size).astype(np.float32)

        dx = vox[:, None, 0] - pts[None, :, 0]
        dy = vox[:, None, 1] - pts[None, :, 1]
        dz = vox[:, None, 2] - pts[None, :, 2]
        dist = np.sqrt(dx * dx + dy * dy + dz * dz)

        result[start:stop] = dist.min(axis=1)

    return result


def _nearest_neighborhood(feature_points: FeaturePointSet, chunk_voxels: int) -> np.ndarray:
    size = feature_points.size
    g = feature_points.grid_size
    e = feature_points.cell_edge
    n_voxels = size ** 3

    leftover = size - g * e
    radius = neighborhood_radius(e, leftover, g)
    offsets = list(itertools.product(range(-radius, radius + 1), repeat=3))
    logger.debug(f"Neighborhood search radius={radius} ({len(offsets)} cells per voxel)")

    lattice = feature_points.as_lattice().astype(np.float32)
    result = np.empty(n_voxels, dtype=np.float32)

    # Batches are at least one z-slice
    chunk = max(chunk_voxels, size * size)

    for start in range(0, n_voxels, chunk):
        stop = min(start + chunk, n_voxels)
        vox = _voxel_coords(start, stop, size)
        cell = np.minimum(vox // e, g - 1)
        voxf = vox.astype(np.float32)

        best = np.full(stop - start, np.inf, dtype=np.float32)

        for offset in offsets:
            neighbor = cell + np.asarray(offset, dtype=np.int64)
            valid = np.all((neighbor >= 0) & (neighbor < g), axis=1)
            if not valid.any():
                continue

            nb = neighbor[valid]
            p = lattice[nb[:, 0], nb[:, 1], nb[:, 2]]
            v = voxf[valid]

            dx = v[:, 0] - p[:, 0]
            dy = v[:, 1] - p[:, 1]
            dz = v[:, 2] - p[:, 2]
            dist = np.sqrt(dx * dx + dy * dy + dz * dz)

            best[valid] = np.minimum(best[valid], dist)

        result[start:stop] = best

    return result


def _nearest_kdtree(feature_points: FeaturePointSet, chunk_voxels: int) -> np.ndarray:
    size = feature_points.size
    n_voxels = size ** 3
    tree = cKDTree(feature_points.points.astype(np.float64))
    result = np.empty(n_voxels, dtype=np.float32)

    chunk = max(chunk_voxels, size * size)
    for start in range(0, n_voxels, chunk):
        stop = min(start + chunk, n_voxels)
        vox = _voxel_coords(start, stop, size).astype(np.float64)
        dist, _ = tree.query(vox, k=1)
        result[start:stop] = dist.astype(np.float32)

    return result


_SEARCHES = {
    SearchMethod.BRUTE_FORCE: _nearest_brute_force,
    SearchMethod.NEIGHBORHOOD: _nearest_neighborhood,
    SearchMethod.KDTREE: _nearest_kdtree,
}


def nearest_distances(
    feature_points: FeaturePointSet,
    method: Union[SearchMethod, str] = SearchMethod.NEIGHBORHOOD,
    chunk_voxels: int = DEFAULT_CHUNK_VOXELS
) -> np.ndarray:
    """
    Minimum distance from every voxel to the feature point set.

    Args:
        feature_points: Feature points for a size^3 volume
        method: Nearest point search strategy
        chunk_voxels: Voxels per batch (bounds peak memory)

    Returns:
        Flat float32 array of length size^3 in linear index order
    """
    method = _resolve_method(method)
    if chunk_voxels < 1:
        raise ValueError(f"chunk_voxels must be at least 1, got {chunk_voxels}")
    return _SEARCHES[method](feature_points, chunk_voxels)


def evaluate_distance_field(
    feature_points: FeaturePointSet,
    method: Union[SearchMethod, str] = SearchMethod.NEIGHBORHOOD,
    out_min: float = 0.0,
    out_max: float = 1.0,
    chunk_voxels: int = DEFAULT_CHUNK_VOXELS
) -> np.ndarray:
    """
    Inverted, normalized nearest-distance field for a fixed feature point set.

    value = 1 - map_value(min_dist, 0, max_cell_distance, out_min, out_max)
    """
    max_dist = max_cell_distance(feature_points.size, feature_points.grid_size)
    min_dist = nearest_distances(feature_points, method=method, chunk_voxels=chunk_voxels)

    normalized = map_value(min_dist, 0.0, max_dist, out_min, out_max)
    return np.float32(1.0) - normalized


def worley_noise_3d(
    size: int,
    grid_size: int,
    rng: Optional[np.random.Generator] = None,
    method: Union[SearchMethod, str] = SearchMethod.NEIGHBORHOOD
) -> np.ndarray:
    """
    Generate inverted Worley noise.

    Points closer to feature points are lighter, points farther away are
    darker. Each grid cell has exactly one feature point placed randomly
    inside it.

    Args:
        size: Number of voxels in each dimension
        grid_size: Number of cells in each dimension
        rng: Random generator (fresh unseeded one if None)
        method: Nearest point search strategy

    Returns:
        Flat float32 array of size^3 noise values, index x + y*size + z*size^2
    """
    feature_points = generate_feature_points(size, grid_size, rng=rng)
    return evaluate_distance_field(feature_points, method=method)


def as_volume(noise: np.ndarray, size: int) -> np.ndarray:
    """View flat noise as a (z, y, x) volume."""
    return noise.reshape(size, size, size)


def build_worley_volume(
    config: Optional[NoiseConfig] = None
) -> Tuple[np.ndarray, FeaturePointSet, NoiseMetadata]:
    """
    Build one Worley volume from a configuration.

    Returns:
        Tuple of (noise, feature_points, metadata)
    """
    config = config or NoiseConfig()
    config.validate()

    logger.info(
        f"Building Worley volume: size={config.size}^3, grid={config.grid_size}^3, "
        f"method={config.method.value}, random={config.random_mode.value}"
    )

    t0 = time.perf_counter()
    rng = config.make_rng()

    feature_points = generate_feature_points(config.size, config.grid_size, rng=rng)
    max_dist = max_cell_distance(config.size, config.grid_size)
    logger.debug(f"cell_edge={feature_points.cell_edge}, max_cell_distance={max_dist:.4f}")

    noise = evaluate_distance_field(
        feature_points,
        method=config.method,
        out_min=config.out_min,
        out_max=config.out_max,
        chunk_voxels=config.chunk_voxels
    )
    elapsed = time.perf_counter() - t0

    n_negative = int((noise < 0).sum())
    if n_negative > 0:
        logger.debug(f"{n_negative} voxels fall below 0 (nearest point beyond max_cell_distance)")

    metadata = NoiseMetadata(
        size=config.size,
        grid_size=config.grid_size,
        cell_edge=feature_points.cell_edge,
        max_cell_distance=float(max_dist),
        method=config.method.value,
        random_mode=config.random_mode.value,
        seed=config.seed if config.random_mode == RandomMode.SEEDED else None,
        n_feature_points=len(feature_points),
        value_min=float(noise.min()),
        value_max=float(noise.max()),
        value_mean=float(noise.mean()),
        n_negative=n_negative,
        elapsed_s=elapsed,
        generation_params=config.to_dict()
    )

    logger.info(
        f"Worley volume: {noise.size} voxels, range=[{metadata.value_min:.4f}, {metadata.value_max:.4f}], "
        f"mean={metadata.value_mean:.4f} ({elapsed:.2f}s)"
    )

    return noise, feature_points, metadata
