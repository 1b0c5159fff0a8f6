"""
Worley Volumes - 3D cellular noise generation.

One feature point per lattice cell; every voxel is shaded by its inverted,
normalized distance to the nearest feature point.

Usage:
    python src/generate_noise.py --size 64 --grid-size 4 --seed 7
"""

__version__ = "1.0.0"
