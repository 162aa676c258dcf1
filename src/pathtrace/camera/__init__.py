"""Camera module for primary ray generation.

Ray generation uses normalized image coordinates:
    u in [0, 1]: left to right across image
    v in [0, 1]: bottom to top across image

Each pixel is split into samples x samples sub-cells, and one jittered ray is
generated per sub-cell.
"""

from .pinhole import Camera, get_ray, get_ray_jittered

__all__ = [
    "Camera",
    "get_ray",
    "get_ray_jittered",
]
