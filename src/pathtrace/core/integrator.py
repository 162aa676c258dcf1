"""Path tracing integrator for Monte Carlo light transport.

This module implements the recursive radiance estimator. For a ray it returns
an estimate of the radiance arriving along it, combining at every hit:

    - Emission of the hit surface (camera rays only)
    - A constant ambient term (ambient * kd)
    - Direct lighting from point lights and area lights
    - One BRDF-sampled environment lookup, when a background is set
    - One BRDF-sampled indirect bounce (optionally Russian roulette)
    - Perfect or blurry mirror reflection, for reflective materials

Rays that miss the scene return the environment radiance. Every recursive
call goes one level deeper and no secondary ray is traced once depth + 1
reaches RenderSettings.max_depth, whichever roulette policy is active.

Example:
    >>> from src.pathtrace.core.integrator import pathtrace_ray
    >>> from src.pathtrace.core.sampler import RandomStream
    >>> from src.pathtrace.camera.pinhole import get_ray
    >>> rng = RandomStream.from_seed(1)
    >>> color = pathtrace_ray(scene, get_ray(scene.camera, 0.5, 0.5), rng)
"""

from __future__ import annotations

import numpy as np

from src.pathtrace.core.lights import (
    ShadingPoint,
    accumulate_area_lights,
    accumulate_point_lights,
)
from src.pathtrace.core.ray import (
    Ray,
    Vec3,
    dot,
    is_zero,
    normalize,
    reflect,
    zero3,
)
from src.pathtrace.core.sampler import (
    RandomStream,
    sample_brdf,
    sample_direction_spherical_uniform,
)
from src.pathtrace.materials.texture import lookup_scaled_texture
from src.pathtrace.scene.environment import eval_env
from src.pathtrace.scene.intersection import intersect, intersect_shadow
from src.pathtrace.scene.scene import RoulettePolicy, Scene

# Smallest divisor used when compensating the legacy roulette test
LEGACY_MIN_CONTINUATION = 0.05


def roulette_continue(
    policy: RoulettePolicy,
    pdf: float,
    u: float,
    survival: float,
    threshold: float,
) -> tuple[bool, float]:
    """Decide whether an indirect bounce survives Russian roulette.

    Args:
        policy: The survival test to apply.
        pdf: Density of the sampled bounce direction.
        u: Uniform random number in [0, 1), used by the UNBIASED policy.
        survival: Survival probability of the UNBIASED policy.
        threshold: Density threshold of the LEGACY_DENSITY policy.

    Returns:
        Tuple of (survives, weight). The recursive estimate is multiplied by
        weight when the path survives.
    """
    if policy is RoulettePolicy.LEGACY_DENSITY:
        if pdf > threshold:
            return True, 1.0 / max(1.0 - pdf, LEGACY_MIN_CONTINUATION)
        return False, 0.0
    if u < survival:
        return True, 1.0 / survival
    return False, 0.0


def _sanitize(c: Vec3) -> Vec3:
    """Zero out non-finite channels of a radiance estimate."""
    if np.all(np.isfinite(c)):
        return c
    return np.where(np.isfinite(c), c, 0.0)


def _sample_environment(scene: Scene, sp: ShadingPoint, rng: RandomStream) -> Vec3:
    """Estimate environment light reflected at the shading point."""
    direction, pdf = sample_brdf(
        sp.kd, sp.ks, sp.n, sp.v, sp.norm, rng.next_vec2f(), rng.next_float()
    )
    if pdf <= 0.0:
        return zero3()
    brdfcos = sp.brdfcos(direction)
    if is_zero(brdfcos):
        return zero3()
    response = brdfcos * eval_env(scene.background, scene.background_txt, direction) / pdf
    if is_zero(response):
        return zero3()
    if scene.settings.path_shadows and intersect_shadow(scene, Ray(sp.pos, direction)):
        return zero3()
    return response


def _sample_indirect(scene: Scene, sp: ShadingPoint, rng: RandomStream, depth: int) -> Vec3:
    """Estimate indirect light with one BRDF-sampled bounce."""
    settings = scene.settings
    direction, pdf = sample_brdf(
        sp.kd, sp.ks, sp.n, sp.v, sp.norm, rng.next_vec2f(), rng.next_float()
    )

    weight = 1.0
    if settings.russian_roulette:
        survives, weight = roulette_continue(
            settings.roulette_policy,
            pdf,
            rng.next_float(),
            settings.roulette_survival,
            settings.roulette_threshold,
        )
        if not survives:
            return zero3()

    if pdf <= 0.0:
        return zero3()
    brdfcos = sp.brdfcos(direction)
    if is_zero(brdfcos):
        return zero3()
    radiance = pathtrace_ray(scene, Ray(sp.pos, direction), rng, depth + 1)
    return radiance * brdfcos * (weight / pdf)


def _sample_reflection(
    scene: Scene,
    ray: Ray,
    pos: Vec3,
    norm: Vec3,
    kr: Vec3,
    rng: RandomStream,
    depth: int,
) -> Vec3:
    """Trace the mirror reflection, sharp or blurred."""
    settings = scene.settings
    rdir = reflect(ray.direction, norm)
    if not settings.blurry_reflection:
        return kr * pathtrace_ray(scene, Ray(pos, rdir), rng, depth + 1)

    total = zero3()
    for _ in range(settings.blurry_samples):
        jitter = sample_direction_spherical_uniform(rng.next_vec2f())
        d = normalize(rdir + settings.blurry_spread * jitter)
        # keep jittered rays on the reflected side of the surface
        if dot(d, norm) * dot(rdir, norm) <= 0.0:
            d = rdir
        total += pathtrace_ray(scene, Ray(pos, d), rng, depth + 1)
    return kr * (total / settings.blurry_samples)


def pathtrace_ray(scene: Scene, ray: Ray, rng: RandomStream, depth: int = 0) -> Vec3:
    """Estimate the radiance arriving along a ray.

    Args:
        scene: The scene (read-only).
        ray: The ray to trace.
        rng: The random stream of the pixel being rendered.
        depth: Number of bounces that led to this ray (0 for camera rays).

    Returns:
        The estimated radiance (RGB). Non-finite channels are zeroed.
    """
    isec = intersect(scene, ray)
    if not isec.hit:
        return eval_env(scene.background, scene.background_txt, ray.direction).copy()

    mat = isec.mat
    pos = isec.pos
    norm = isec.norm
    v = -ray.direction

    ke = lookup_scaled_texture(mat.ke, mat.ke_txt, isec.texcoord)
    kd = lookup_scaled_texture(mat.kd, mat.kd_txt, isec.texcoord)
    ks = lookup_scaled_texture(mat.ks, mat.ks_txt, isec.texcoord)
    sp = ShadingPoint(pos, norm, v, kd, ks, mat.n, mat.microfacet)

    c = scene.ambient * kd

    if depth == 0 and dot(v, norm) > 0.0:
        c = c + ke

    c += accumulate_point_lights(scene, sp)
    c += accumulate_area_lights(scene, sp, rng)

    if scene.has_environment:
        c += _sample_environment(scene, sp, rng)

    if depth + 1 < scene.settings.max_depth:
        c += _sample_indirect(scene, sp, rng, depth)
        if mat.is_reflective:
            c += _sample_reflection(scene, ray, pos, norm, mat.kr, rng, depth)

    return _sanitize(c)
