"""
Common modules for Worley volume generation.

Randomness Model:
- AMBIENT (default): fresh unseeded generator per build
- SEEDED: reproducible generator from an explicit seed
"""

from .config import NoiseConfig, NoiseMetadata, RandomMode, SearchMethod
from .vecmath import distance, map_value, linear_index, voxel_coordinates, to_point3

__all__ = [
    'NoiseConfig', 'NoiseMetadata', 'RandomMode', 'SearchMethod',
    'distance', 'map_value', 'linear_index', 'voxel_coordinates', 'to_point3',
]
