"""Direct lighting by next-event estimation.

At every path vertex the integrator asks this module for the light arriving
directly from:

- Point lights, with inverse-square falloff
- Emissive surfaces (area lights), by sampling one point on each surface
  uniformly by area and converting the area density to solid angle:

      L = ke * area * max(0, -l.n_light) / dist^2 * max(0, N.l) * f_r

Each contribution is gated by a shadow segment toward the light point when
shadows are enabled. Zero contributions are dropped before the shadow test.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.pathtrace.core.ray import (
    Ray,
    Vec3,
    dist_squared,
    dot,
    is_zero,
    normalize,
    transform_normal_from_local,
    transform_point_from_local,
    vec3,
    zero3,
)
from src.pathtrace.core.sampler import RandomStream, Vec2, sample_direction_spherical_uniform
from src.pathtrace.geometry.quad import quad_area
from src.pathtrace.geometry.sphere import sphere_area
from src.pathtrace.materials.brdf import eval_brdf
from src.pathtrace.materials.texture import lookup_scaled_texture
from src.pathtrace.scene.intersection import intersect_shadow
from src.pathtrace.scene.scene import Scene, Shape, Surface


@dataclass(frozen=True, eq=False)
class ShadingPoint:
    """Local shading state at a path vertex.

    Attributes:
        pos: World-space position.
        norm: Geometric normal.
        v: Unit direction toward the viewer (negated ray direction).
        kd: Diffuse color after texture lookup.
        ks: Specular color after texture lookup.
        n: Shininess exponent.
        microfacet: Shading model selector.
    """

    pos: Vec3
    norm: Vec3
    v: Vec3
    kd: Vec3
    ks: Vec3
    n: float
    microfacet: bool

    def brdfcos(self, l: Vec3) -> Vec3:
        """Evaluate BRDF times the clamped cosine for a light direction."""
        cos = max(dot(self.norm, l), 0.0)
        if cos == 0.0:
            return zero3()
        return cos * eval_brdf(self.kd, self.ks, self.n, self.v, l, self.norm, self.microfacet)


@dataclass(frozen=True, eq=False)
class LightSample:
    """A point drawn on an area light.

    Attributes:
        pos: Sampled point in world space.
        norm: Surface normal at the sampled point.
        area: Total area of the light surface.
        texcoord: Coordinates used for the emission texture lookup.
    """

    pos: Vec3
    norm: Vec3
    area: float
    texcoord: Vec2


def _sample_quad(surface: Surface, rn: Vec2) -> LightSample:
    """Sample a point uniformly on a quad light."""
    local = vec3((rn[0] - 0.5) * 2.0 * surface.radius, (rn[1] - 0.5) * 2.0 * surface.radius, 0.0)
    return LightSample(
        pos=transform_point_from_local(surface.frame, local),
        norm=transform_normal_from_local(surface.frame, vec3(0.0, 0.0, 1.0)),
        area=quad_area(surface.radius),
        texcoord=rn,
    )


def _sample_sphere(surface: Surface, rn: Vec2) -> LightSample:
    """Sample a point uniformly on a sphere light."""
    direction = sample_direction_spherical_uniform(rn)
    return LightSample(
        pos=transform_point_from_local(surface.frame, surface.radius * direction),
        norm=transform_normal_from_local(surface.frame, direction),
        area=sphere_area(surface.radius),
        texcoord=rn,
    )


_SAMPLERS = {
    Shape.QUAD: _sample_quad,
    Shape.SPHERE: _sample_sphere,
}


def sample_surface_light(surface: Surface, rn: Vec2) -> LightSample:
    """Draw a point on an emissive surface uniformly by area.

    Args:
        surface: The emissive surface.
        rn: Uniform 2D sample; it also serves as the emission texture
            coordinate of the sampled point.

    Returns:
        The sampled point, normal and the surface area.
    """
    return _SAMPLERS[surface.shape](surface, rn)


def _unoccluded(scene: Scene, pos: Vec3, light_pos: Vec3) -> bool:
    if not scene.settings.path_shadows:
        return True
    return not intersect_shadow(scene, Ray.make_segment(pos, light_pos))


def accumulate_point_lights(scene: Scene, sp: ShadingPoint) -> Vec3:
    """Sum the direct contribution of all point lights.

    Args:
        scene: The scene.
        sp: The shading point.

    Returns:
        The reflected radiance due to point lights.
    """
    c = zero3()
    for light in scene.lights:
        d2 = dist_squared(light.position, sp.pos)
        if d2 <= 0.0:
            continue
        cl = light.intensity / d2
        l = normalize(light.position - sp.pos)
        shade = cl * sp.brdfcos(l)
        if is_zero(shade):
            continue
        if _unoccluded(scene, sp.pos, light.position):
            c += shade
    return c


def accumulate_area_lights(scene: Scene, sp: ShadingPoint, rng: RandomStream) -> Vec3:
    """Sum one-sample estimates of the light from every emissive surface.

    One 2D sample is drawn from the pixel's stream for each emissive surface,
    including those whose contribution turns out to be zero, so the number of
    draws per vertex does not depend on the geometry.

    Args:
        scene: The scene.
        sp: The shading point.
        rng: The owning pixel's random stream.

    Returns:
        The reflected radiance due to area lights.
    """
    c = zero3()
    for surface in scene.surfaces:
        if not surface.is_emissive:
            continue
        sample = sample_surface_light(surface, rng.next_vec2f())
        d2 = dist_squared(sp.pos, sample.pos)
        if d2 <= 0.0:
            continue
        mat = surface.material
        ke = lookup_scaled_texture(mat.ke, mat.ke_txt, sample.texcoord)
        l = normalize(sample.pos - sp.pos)
        response = ke * (sample.area * max(-dot(l, sample.norm), 0.0) / d2)
        shade = response * sp.brdfcos(l)
        if is_zero(shade):
            continue
        if _unoccluded(scene, sp.pos, sample.pos):
            c += shade
    return c
