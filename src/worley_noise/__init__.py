"""Worley Noise: inverted 3D cellular noise from one random feature point per lattice cell."""

from .feature_points import FeaturePointSet, generate_feature_points, cell_edge_length
from .build import (
    worley_noise_3d,
    evaluate_distance_field,
    nearest_distances,
    max_cell_distance,
    build_worley_volume,
    as_volume,
)

__all__ = [
    "FeaturePointSet", "generate_feature_points", "cell_edge_length",
    "worley_noise_3d", "evaluate_distance_field", "nearest_distances",
    "max_cell_distance", "build_worley_volume", "as_volume",
]
