"""
Small vector, distance and mapping helpers.

Voxel space conventions:
- Coordinate3: integer (x, y, z) voxel / lattice location
- Point3: real-valued (x, y, z) used for distance arithmetic
- Flat arrays use index(x, y, z) = x + y*size + z*size^2 (x fastest)

All distance and remap arithmetic is single precision (float32).
"""

import numpy as np
from typing import Tuple, Union

Coordinate3 = Tuple[int, int, int]
Point3 = Tuple[float, float, float]

ArrayOrScalar = Union[float, np.ndarray]


def to_point3(c: Coordinate3) -> Point3:
    """Convert an integer coordinate to a real-valued point."""
    return (float(c[0]), float(c[1]), float(c[2]))


def distance(p1: Point3, p2: Point3) -> np.float32:
    """Euclidean distance between two points, in float32."""
    dx = np.float32(p2[0]) - np.float32(p1[0])
    dy = np.float32(p2[1]) - np.float32(p1[1])
    dz = np.float32(p2[2]) - np.float32(p1[2])
    return np.sqrt(dx * dx + dy * dy + dz * dz)


def map_value(
    value: ArrayOrScalar,
    old_min: float,
    old_max: float,
    new_min: float,
    new_max: float
) -> ArrayOrScalar:
    """
    Affine remap of value from [old_min, old_max] to [new_min, new_max].

    No clamping: inputs outside the old range land outside the new one.
    """
    value = np.asarray(value, dtype=np.float32)
    old_min, old_max = np.float32(old_min), np.float32(old_max)
    new_min, new_max = np.float32(new_min), np.float32(new_max)
    result = new_min + (value - old_min) * (new_max - new_min) / (old_max - old_min)
    if result.ndim == 0:
        return np.float32(result)
    return result


def linear_index(x: int, y: int, z: int, size: int) -> int:
    """Flat array offset of voxel (x, y, z) in a size^3 volume."""
    return x + y * size + z * size * size


def voxel_coordinates(index: int, size: int) -> Coordinate3:
    """Inverse of linear_index."""
    z, rem = divmod(index, size * size)
    y, x = divmod(rem, size)
    return (x, y, z)
