"""Scene-level ray intersection queries.

This module provides the two queries the integrator makes against a scene:

- intersect: nearest hit over all surfaces, with material information
- intersect_shadow: any hit within the ray interval (visibility test)

Surfaces are tested by brute force, dispatching on their Shape. Shadow
queries return as soon as any occluder is found.

Example:
    >>> from src.pathtrace.core.ray import Ray, vec3
    >>> from src.pathtrace.scene.intersection import intersect, intersect_shadow
    >>> isec = intersect(scene, Ray(vec3(0, 0, 5), vec3(0, 0, -1)))
    >>> if isec.hit:
    ...     print(isec.pos, isec.norm, isec.mat)
    >>> blocked = intersect_shadow(scene, Ray.make_segment(vec3(0, 0, 0), vec3(0, 4, 0)))
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from src.pathtrace.core.ray import Ray, Vec3, zero3
from src.pathtrace.geometry.quad import hit_quad
from src.pathtrace.geometry.sphere import HitRecord, hit_sphere
from src.pathtrace.materials.material import Material
from src.pathtrace.scene.scene import Scene, Shape, Surface


@dataclass(eq=False)
class Intersection:
    """Result of a ray-scene intersection query.

    Attributes:
        hit: Whether the ray intersected any surface.
        ray_t: Ray parameter of the hit. Only valid if hit is True.
        pos: World-space hit position. Only valid if hit is True.
        norm: Geometric normal of the hit surface (not flipped toward the
            ray). Only valid if hit is True.
        texcoord: Surface texture coordinates. Only valid if hit is True.
        mat: Material of the hit surface (a reference, not a copy).
    """

    hit: bool = False
    ray_t: float = 0.0
    pos: Vec3 = field(default_factory=zero3)
    norm: Vec3 = field(default_factory=zero3)
    texcoord: tuple[float, float] = (0.0, 0.0)
    mat: Material | None = None


def _hit_surface(ray: Ray, surface: Surface) -> HitRecord | None:
    """Dispatch the primitive test on the surface shape."""
    if surface.shape is Shape.QUAD:
        return hit_quad(ray, surface.frame, surface.radius)
    return hit_sphere(ray, surface.frame, surface.radius)


def intersect(scene: Scene, ray: Ray) -> Intersection:
    """Find the nearest surface hit by the ray.

    Args:
        scene: The scene to query.
        ray: The ray; only hits with tmin < t < tmax are considered.

    Returns:
        An Intersection; hit is False when the ray escapes the scene.
    """
    closest = ray
    result = Intersection()
    for surface in scene.surfaces:
        rec = _hit_surface(closest, surface)
        if rec is None:
            continue
        closest = replace(closest, tmax=rec.t)
        result = Intersection(
            hit=True,
            ray_t=rec.t,
            pos=rec.point,
            norm=rec.normal,
            texcoord=rec.texcoord,
            mat=surface.material,
        )
    return result


def intersect_shadow(scene: Scene, ray: Ray) -> bool:
    """Test whether any surface blocks the ray within its interval.

    Args:
        scene: The scene to query.
        ray: A finite segment (point and area lights) or an unbounded ray
            (environment sampling).

    Returns:
        True if the ray is occluded.
    """
    return any(_hit_surface(ray, surface) is not None for surface in scene.surfaces)
