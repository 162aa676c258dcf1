"""Core rendering module.

Components:
    ray: Vectors, rays, frames and frame transforms
    sampler: Per-pixel random streams and direction sampling
    lights: Direct lighting from point lights and area lights
    integrator: Recursive radiance estimator with Russian roulette
    renderer: Row-interleaved multi-threaded image rendering
"""

from .ray import (
    RAY_EPSILON,
    Frame,
    Ray,
    Vec3,
    as_vec3,
    build_onb_from_normal,
    cross,
    dist_squared,
    dot,
    is_zero,
    length,
    length_squared,
    near_zero,
    normalize,
    ray_at,
    reflect,
    transform_direction_from_local,
    transform_direction_to_local,
    transform_normal_from_local,
    transform_point_from_local,
    transform_point_to_local,
    transform_ray,
    vec3,
    zero3,
)
from .sampler import (
    RandomStream,
    RngImage,
    pdf_brdf,
    sample_brdf,
    sample_cosine_hemisphere,
    sample_direction_spherical_uniform,
)

# Note: lights, integrator and renderer are NOT imported here to avoid circular
# imports (they depend on the scene package, which depends on core.ray).
# Import them directly, e.g.:
#   from src.pathtrace.core.renderer import PathTraceRenderer

__all__ = [
    "RAY_EPSILON",
    "Vec3",
    "Ray",
    "Frame",
    "ray_at",
    "vec3",
    "as_vec3",
    "zero3",
    "is_zero",
    "dot",
    "cross",
    "length",
    "length_squared",
    "dist_squared",
    "normalize",
    "reflect",
    "near_zero",
    "transform_point_from_local",
    "transform_direction_from_local",
    "transform_normal_from_local",
    "transform_point_to_local",
    "transform_direction_to_local",
    "transform_ray",
    "build_onb_from_normal",
    "RandomStream",
    "RngImage",
    "sample_direction_spherical_uniform",
    "sample_cosine_hemisphere",
    "sample_brdf",
    "pdf_brdf",
]
