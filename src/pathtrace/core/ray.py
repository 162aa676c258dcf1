"""Ray, frame and vector utilities for CPU path tracing.

This module provides the fundamental Ray dataclass, the Frame type used to
place surfaces, lights and the camera in world space, and the small set of
vector helpers the integrator relies on. Vectors and colors are plain NumPy
arrays of shape (3,) with dtype float64.

Rays carry their own valid parameter interval [tmin, tmax] so that shadow
segments and secondary rays can avoid self-intersection without offsetting the
origin.

Example:
    >>> from src.pathtrace.core.ray import Ray, vec3
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
    >>> segment = Ray.make_segment(vec3(0, 0, 0), vec3(0, 4, 0))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

Vec3 = npt.NDArray[np.float64]

# Default t_min for rays leaving a surface (avoids self-intersection)
RAY_EPSILON = 5e-4

# Threshold below which a vector is treated as zero
NEAR_ZERO = 1e-8


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> Vec3:
    """Create a 3-component float64 vector."""
    return np.array([x, y, z], dtype=np.float64)


def as_vec3(value) -> Vec3:
    """Convert a tuple, list or array into a float64 vector of shape (3,).

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    result = np.asarray(value, dtype=np.float64).reshape(-1)
    if result.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {result.shape}")
    return result


def zero3() -> Vec3:
    """Return a new zero vector (also used as black)."""
    return np.zeros(3, dtype=np.float64)


def is_zero(v: Vec3) -> bool:
    """Check whether every component of v is exactly zero."""
    return not np.any(v)


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(a[0] * b[0] + a[1] * b[1] + a[2] * b[2])


def length_squared(v: Vec3) -> float:
    """Compute the squared length of a vector (avoids the sqrt)."""
    return dot(v, v)


def length(v: Vec3) -> float:
    """Compute the length (magnitude) of a vector."""
    return math.sqrt(length_squared(v))


def dist_squared(a: Vec3, b: Vec3) -> float:
    """Compute the squared distance between two points."""
    return length_squared(a - b)


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    A (near) zero vector is returned unchanged instead of producing NaNs.
    """
    n = length(v)
    if n < NEAR_ZERO:
        return v.copy()
    return v / n


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product of two vectors."""
    return vec3(
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The mirrored direction: incident - 2 * dot(incident, normal) * normal.
    """
    return incident - 2.0 * dot(incident, normal) * normal


def near_zero(v: Vec3) -> bool:
    """Check if a vector is near zero in all components."""
    return bool(np.all(np.abs(v) < NEAR_ZERO))


# =============================================================================
# Rays
# =============================================================================


@dataclass
class Ray:
    """A ray with an origin point, a direction and a valid parameter range.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Unit length for camera,
            secondary and environment shadow rays.
        tmin: Minimum t value considered a valid hit.
        tmax: Maximum t value considered a valid hit (inf for unbounded rays).
    """

    origin: Vec3
    direction: Vec3
    tmin: float = RAY_EPSILON
    tmax: float = math.inf

    @classmethod
    def make_segment(cls, a: Vec3, b: Vec3) -> Ray:
        """Create a finite ray from point a to point b.

        The direction is normalized and the interval is shrunk by RAY_EPSILON
        at both ends so that neither the shading point nor the light sample
        itself registers as an occluder.
        """
        d = b - a
        dist = length(d)
        if dist < NEAR_ZERO:
            return cls(a, vec3(0.0, 0.0, 1.0), RAY_EPSILON, 0.0)
        return cls(a, d / dist, RAY_EPSILON, dist - RAY_EPSILON)


def ray_at(ray: Ray, t: float) -> Vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


# =============================================================================
# Frames
# =============================================================================


def _identity_axes() -> npt.NDArray[np.float64]:
    return np.eye(3, dtype=np.float64)


@dataclass(frozen=True, eq=False)
class Frame:
    """An orthonormal coordinate frame (origin plus three axes).

    The axes are stored as the columns of a 3x3 rotation matrix so that
    transforming a local vector is a single matrix product.

    Attributes:
        origin: The frame origin in world space.
        axes: 3x3 matrix whose columns are the local x, y and z axes.
    """

    origin: Vec3 = field(default_factory=zero3)
    axes: npt.NDArray[np.float64] = field(default_factory=_identity_axes)

    @classmethod
    def from_axes(cls, origin, x, y, z) -> Frame:
        """Build a frame from an origin and three (orthonormal) axes."""
        axes = np.column_stack([as_vec3(x), as_vec3(y), as_vec3(z)])
        return cls(as_vec3(origin), axes)

    @classmethod
    def at(cls, origin) -> Frame:
        """Build an axis-aligned frame translated to origin."""
        return cls(as_vec3(origin), _identity_axes())

    @classmethod
    def lookat(cls, eye, target, up=(0.0, 1.0, 0.0)) -> Frame:
        """Build a frame at eye whose -z axis looks toward target.

        The basis follows the usual camera convention: z points from target
        toward eye, x points right and y points up.

        Raises:
            ValueError: If eye and target coincide or up is parallel to the
                view direction.
        """
        eye = as_vec3(eye)
        w = eye - as_vec3(target)
        if near_zero(w):
            raise ValueError("lookat frame requires distinct eye and target points")
        w = normalize(w)
        u = cross(as_vec3(up), w)
        if near_zero(u):
            raise ValueError("lookat frame up vector is parallel to the view direction")
        u = normalize(u)
        v = cross(w, u)
        return cls.from_axes(eye, u, v, w)

    @property
    def x(self) -> Vec3:
        return self.axes[:, 0]

    @property
    def y(self) -> Vec3:
        return self.axes[:, 1]

    @property
    def z(self) -> Vec3:
        return self.axes[:, 2]


def transform_point_from_local(frame: Frame, p: Vec3) -> Vec3:
    """Transform a point from frame-local coordinates to world space."""
    return frame.origin + frame.axes @ p


def transform_direction_from_local(frame: Frame, d: Vec3) -> Vec3:
    """Transform a direction from frame-local coordinates to world space."""
    return frame.axes @ d


def transform_normal_from_local(frame: Frame, n: Vec3) -> Vec3:
    """Transform a normal from frame-local coordinates to world space.

    Frames are orthonormal, so normals transform like directions.
    """
    return normalize(frame.axes @ n)


def transform_point_to_local(frame: Frame, p: Vec3) -> Vec3:
    """Transform a world-space point into frame-local coordinates."""
    return frame.axes.T @ (p - frame.origin)


def transform_direction_to_local(frame: Frame, d: Vec3) -> Vec3:
    """Transform a world-space direction into frame-local coordinates."""
    return frame.axes.T @ d


def transform_ray(frame: Frame, ray: Ray) -> Ray:
    """Transform a ray from frame-local coordinates to world space."""
    return Ray(
        transform_point_from_local(frame, ray.origin),
        transform_direction_from_local(frame, ray.direction),
        ray.tmin,
        ray.tmax,
    )


def build_onb_from_normal(normal: Vec3) -> Frame:
    """Build an orthonormal frame whose z axis is the given normal.

    Args:
        normal: The unit surface normal.

    Returns:
        A frame at the origin with z = normal.
    """
    w = normalize(normal)
    helper = vec3(0.0, 1.0, 0.0) if abs(w[0]) > 0.9 else vec3(1.0, 0.0, 0.0)
    v = normalize(cross(w, helper))
    u = cross(v, w)
    return Frame.from_axes(zero3(), u, v, w)
