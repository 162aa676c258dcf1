"""Quad primitive with ray-quad intersection.

A quad is a square centered at the origin of its frame, lying in the local XY
plane and spanning [-radius, radius] along both local axes. Its geometric
normal is the local +Z axis.

Ray-quad intersection uses the parametric plane test:
1. Transform the ray into the quad's local frame
2. Find where the ray crosses the local z = 0 plane
3. Check that the crossing lies within the quad bounds

Example:
    >>> from src.pathtrace.core.ray import Frame, Ray, vec3
    >>> from src.pathtrace.geometry.quad import hit_quad
    >>> # Floor quad at y=0, facing up
    >>> floor = Frame.from_axes((0, 0, 0), (1, 0, 0), (0, 0, -1), (0, 1, 0))
    >>> rec = hit_quad(Ray(vec3(0, 3, 0), vec3(0, -1, 0)), floor, 1.0)
    >>> rec.t
    3.0
"""

from __future__ import annotations

from src.pathtrace.core.ray import (
    Frame,
    Ray,
    dot,
    ray_at,
    transform_direction_to_local,
    transform_point_to_local,
)
from src.pathtrace.geometry.sphere import HitRecord

# Rays closer than this to parallel with the quad plane never hit it
PARALLEL_EPSILON = 1e-8


def hit_quad(ray: Ray, frame: Frame, radius: float) -> HitRecord | None:
    """Test for ray-quad intersection within the ray's [tmin, tmax].

    Args:
        ray: The ray to test.
        frame: The quad frame (center and orientation).
        radius: Half the side length of the quad.

    Returns:
        A HitRecord with texture coordinates in [0, 1]^2 across the quad, or
        None on a miss.
    """
    o = transform_point_to_local(frame, ray.origin)
    d = transform_direction_to_local(frame, ray.direction)

    if abs(d[2]) < PARALLEL_EPSILON:
        return None

    t = -o[2] / d[2]
    if not (ray.tmin < t < ray.tmax):
        return None

    x = o[0] + t * d[0]
    y = o[1] + t * d[1]
    if abs(x) > radius or abs(y) > radius:
        return None

    normal = frame.z.copy()
    return HitRecord(
        t=t,
        point=ray_at(ray, t),
        normal=normal,
        texcoord=(0.5 * (x / radius + 1.0), 0.5 * (y / radius + 1.0)),
        front_face=dot(ray.direction, normal) < 0.0,
    )


def quad_area(radius: float) -> float:
    """Compute the area of a quad with the given half side length."""
    side = 2.0 * radius
    return side * side
