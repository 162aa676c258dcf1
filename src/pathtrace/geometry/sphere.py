"""Sphere primitive with robust ray-sphere intersection.

A sphere is centered at the origin of its frame. Intersection uses the robust
quadratic formula from Ray Tracing Gems to avoid floating-point artifacts when
b^2 is nearly equal to 4ac.

The returned normal is the geometric (outward) normal, never flipped toward
the ray; the integrator uses its orientation to decide which side emits.

Example:
    >>> from src.pathtrace.core.ray import Frame, Ray, vec3
    >>> from src.pathtrace.geometry.sphere import hit_sphere
    >>> rec = hit_sphere(Ray(vec3(0, 0, 5), vec3(0, 0, -1)), Frame.at((0, 0, 0)), 1.0)
    >>> rec.t
    4.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.pathtrace.core.ray import (
    Frame,
    Ray,
    Vec3,
    dot,
    ray_at,
    transform_point_to_local,
)


@dataclass(eq=False)
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        t: The parameter value along the ray where intersection occurred.
        point: The world-space intersection point.
        normal: The geometric surface normal (unit length, outward).
        texcoord: Surface texture coordinates of the hit point.
        front_face: Whether the ray arrived from the side the normal faces.
    """

    t: float
    point: Vec3
    normal: Vec3
    texcoord: tuple[float, float]
    front_face: bool


def _solve_quadratic_robust(h: float, a: float, c: float, sqrt_d: float) -> tuple[float, float]:
    """Solve a*t^2 + 2*h*t + c = 0 for its two roots (t0 <= t1).

    Uses q = -(h + sign(h) * sqrt(discriminant)) so that neither root is
    computed through a catastrophic cancellation.
    """
    sign_h = -1.0 if h < 0.0 else 1.0
    q = -(h + sign_h * sqrt_d)

    if abs(q) < 1e-10:
        # Tangent ray
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


def hit_sphere(ray: Ray, frame: Frame, radius: float) -> HitRecord | None:
    """Test for ray-sphere intersection within the ray's [tmin, tmax].

    Args:
        ray: The ray to test.
        frame: The sphere frame; its origin is the center.
        radius: The sphere radius (positive).

    Returns:
        The nearest HitRecord within the ray interval, or None on a miss.
    """
    oc = ray.origin - frame.origin
    a = dot(ray.direction, ray.direction)
    h = dot(ray.direction, oc)
    c = dot(oc, oc) - radius * radius

    discriminant = h * h - a * c
    if discriminant < 0.0 or a <= 0.0:
        return None

    t0, t1 = _solve_quadratic_robust(h, a, c, math.sqrt(discriminant))

    t = t0
    if not (ray.tmin < t < ray.tmax):
        t = t1
        if not (ray.tmin < t < ray.tmax):
            return None

    point = ray_at(ray, t)
    normal = (point - frame.origin) / radius
    return HitRecord(
        t=t,
        point=point,
        normal=normal,
        texcoord=sphere_texcoord(frame, point),
        front_face=dot(ray.direction, normal) < 0.0,
    )


def sphere_texcoord(frame: Frame, point: Vec3) -> tuple[float, float]:
    """Compute latitude-longitude texture coordinates of a point on a sphere."""
    local = transform_point_to_local(frame, point)
    r = math.sqrt(dot(local, local))
    if r <= 0.0:
        return 0.0, 0.0
    u = math.atan2(local[1], local[0]) / (2.0 * math.pi)
    v = math.acos(max(-1.0, min(1.0, local[2] / r))) / math.pi
    return u % 1.0, v


def sphere_area(radius: float) -> float:
    """Compute the surface area of a sphere."""
    return 4.0 * math.pi * radius * radius
