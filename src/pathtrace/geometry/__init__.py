"""Geometry module for quad and sphere intersection.

Shapes are defined in the local space of a Frame:
    quad: square in the local XY plane, |x|, |y| <= radius, facing +Z
    sphere: centered at the frame origin

Intersections return a HitRecord with the geometric (outward) normal, which
is never flipped toward the incoming ray.
"""

from .quad import hit_quad, quad_area
from .sphere import HitRecord, hit_sphere, sphere_area, sphere_texcoord

__all__ = [
    "HitRecord",
    "hit_sphere",
    "sphere_area",
    "sphere_texcoord",
    "hit_quad",
    "quad_area",
]
