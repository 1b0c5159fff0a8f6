"""
Configuration and constants for Worley volume generation.

Randomness Model:
- AMBIENT (default): fresh, unseeded generator per build (outputs differ run to run)
- SEEDED: generator built from an explicit seed (reproducible, used by tests)

Output values are never clamped, so a build may report values outside [0, 1].
"""

from enum import Enum
from dataclasses import dataclass, field, fields
from typing import Optional, Dict, Any
import json
from pathlib import Path

import numpy as np


def check_lattice_sizes(size: int, grid_size: int) -> None:
    """
    Shared precondition for a size^3 volume split into grid_size^3 cells.

    Raises:
        ValueError: if either is not a positive integer or grid_size > size
    """
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise ValueError(f"size must be an integer, got {size!r}")
    if isinstance(grid_size, bool) or not isinstance(grid_size, (int, np.integer)):
        raise ValueError(f"grid_size must be an integer, got {grid_size!r}")
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")
    if grid_size <= 0:
        raise ValueError(f"grid_size must be positive, got {grid_size}")
    if grid_size > size:
        raise ValueError(f"grid_size ({grid_size}) must not exceed size ({size})")


class RandomMode(Enum):
    """
    Source of randomness for feature point placement.

    AMBIENT: a fresh numpy Generator seeded from OS entropy
        - Successive builds with identical sizes produce different volumes

    SEEDED: numpy Generator built from NoiseConfig.seed
        - Same seed, same feature points, same volume
    """
    AMBIENT = "ambient"
    SEEDED = "seeded"


class SearchMethod(Enum):
    """Nearest feature point search used by the evaluator."""
    BRUTE_FORCE = "brute_force"
    NEIGHBORHOOD = "neighborhood"
    KDTREE = "kdtree"


@dataclass
class NoiseMetadata:
    """
    Summary of one generated volume.

    Values describe the flat noise array as returned, including any
    out-of-range samples.
    """
    size: int
    grid_size: int
    cell_edge: int
    max_cell_distance: float
    method: str
    random_mode: str
    n_feature_points: int
    value_min: float
    value_max: float
    value_mean: float
    n_negative: int
    seed: Optional[int] = None
    elapsed_s: Optional[float] = None
    generation_params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "grid_size": self.grid_size,
            "cell_edge": self.cell_edge,
            "max_cell_distance": self.max_cell_distance,
            "method": self.method,
            "random_mode": self.random_mode,
            "seed": self.seed,
            "n_feature_points": self.n_feature_points,
            "value_min": self.value_min,
            "value_max": self.value_max,
            "value_mean": self.value_mean,
            "n_negative": self.n_negative,
            "elapsed_s": self.elapsed_s,
            "generation_params": self.generation_params
        }

    def save(self, path: Path) -> None:
        """Save metadata to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoiseMetadata":
        return cls(**data)


@dataclass
class NoiseConfig:
    """
    Configuration for a single Worley volume build.

    size: voxels per axis of the cubic output volume
    grid_size: cells per axis of the feature point lattice (0 < grid_size <= size)
    """

    size: int = 64
    grid_size: int = 4

    random_mode: RandomMode = RandomMode.AMBIENT
    seed: Optional[int] = None

    method: SearchMethod = SearchMethod.NEIGHBORHOOD

    # Range the normalized distance is remapped into before inversion
    out_min: float = 0.0
    out_max: float = 1.0

    # Voxels evaluated per brute-force batch
    chunk_voxels: int = 4096

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot be built."""
        check_lattice_sizes(self.size, self.grid_size)
        if not isinstance(self.random_mode, RandomMode):
            raise ValueError(f"Unknown random mode: {self.random_mode!r}")
        if not isinstance(self.method, SearchMethod):
            raise ValueError(f"Unknown search method: {self.method!r}")
        if self.random_mode == RandomMode.SEEDED and self.seed is None:
            raise ValueError("Seeded random mode requires a seed")
        if self.chunk_voxels < 1:
            raise ValueError(f"chunk_voxels must be at least 1, got {self.chunk_voxels}")

    def make_rng(self) -> np.random.Generator:
        """Build the random generator for feature point placement."""
        if self.random_mode == RandomMode.SEEDED:
            if self.seed is None:
                raise ValueError("Seeded random mode requires a seed")
            return np.random.default_rng(self.seed)
        return np.random.default_rng()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "size": self.size,
            "grid_size": self.grid_size,
            "random_mode": self.random_mode.value,
            "seed": self.seed,
            "method": self.method.value,
            "out_min": self.out_min,
            "out_max": self.out_max,
            "chunk_voxels": self.chunk_voxels
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoiseConfig":
        data = dict(data)
        unknown = sorted(set(data) - {f.name for f in fields(cls)})
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        data["random_mode"] = RandomMode(data.get("random_mode", "ambient"))
        data["method"] = SearchMethod(data.get("method", "neighborhood"))
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> "NoiseConfig":
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)

    def save(self, path: Path) -> None:
        """Save config to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


# Global default config
DEFAULT_CONFIG = NoiseConfig()
