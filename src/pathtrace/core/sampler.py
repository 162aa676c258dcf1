"""Random number streams and direction sampling.

This module provides the per-pixel random streams used by the renderer and the
direction-sampling routines consumed by the integrator and light sampler:

- RandomStream: an independent generator of uniform floats and 2D points
- RngImage: one RandomStream per pixel, spawned from a single root seed
- sample_direction_spherical_uniform: uniform direction on the unit sphere
- sample_cosine_hemisphere: cosine-weighted direction around a normal
- sample_brdf: importance sampling of the Phong/microfacet BRDF lobes

Streams are spawned with numpy.random.SeedSequence, so pixel (i, j) always
receives the same stream for a given root seed regardless of which worker
thread renders it or in which order rows are processed.

Example:
    >>> from src.pathtrace.core.sampler import RngImage
    >>> rngs = RngImage(4, 3, seed=7)
    >>> rng = rngs.at(2, 1)
    >>> u = rng.next_float()
    >>> rn = rng.next_vec2f()
"""

from __future__ import annotations

import math

import numpy as np

from src.pathtrace.core.ray import (
    Vec3,
    build_onb_from_normal,
    dot,
    normalize,
    transform_direction_from_local,
    vec3,
    zero3,
)

# Type alias for a 2D random sample in [0, 1)^2
Vec2 = tuple[float, float]

# Guards the half-vector Jacobian in the specular pdf
PDF_EPSILON = 1e-6


class RandomStream:
    """A pseudo-random stream owned by a single pixel.

    Wraps a numpy Generator. A stream must only ever be advanced by the worker
    that owns its pixel.
    """

    __slots__ = ("_generator",)

    def __init__(self, generator: np.random.Generator) -> None:
        self._generator = generator

    @classmethod
    def from_seed(cls, seed: int | np.random.SeedSequence) -> RandomStream:
        """Create a stream from an integer seed or a SeedSequence."""
        return cls(np.random.default_rng(seed))

    def next_float(self) -> float:
        """Return a uniform float in [0, 1)."""
        return float(self._generator.random())

    def next_vec2f(self) -> Vec2:
        """Return a uniform 2D point in [0, 1)^2."""
        u, v = self._generator.random(2)
        return float(u), float(v)


class RngImage:
    """A grid of independent RandomStreams, one per pixel.

    Streams are laid out by row so that a worker can be handed an exclusive
    slice of rows (``rngs.rows[offset::stride]``).

    Attributes:
        width: Number of pixel columns.
        height: Number of pixel rows.
        rows: List of rows; rows[j][i] is the stream of pixel (i, j).
    """

    def __init__(self, width: int, height: int, seed: int | None = 0) -> None:
        """Spawn width * height child streams from a root seed.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            seed: Root seed. None draws fresh OS entropy (non-reproducible).

        Raises:
            ValueError: If width or height is not positive.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"RngImage dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        children = np.random.SeedSequence(seed).spawn(width * height)
        self.rows: list[list[RandomStream]] = [
            [RandomStream.from_seed(children[j * width + i]) for i in range(width)]
            for j in range(height)
        ]

    def at(self, i: int, j: int) -> RandomStream:
        """Get the stream of pixel column i, row j."""
        return self.rows[j][i]


# =============================================================================
# Direction Sampling
# =============================================================================


def sample_direction_spherical_uniform(rn: Vec2) -> Vec3:
    """Map a 2D uniform sample to a uniformly distributed unit direction.

    Args:
        rn: Uniform sample in [0, 1)^2.

    Returns:
        A unit vector; the pdf with respect to solid angle is 1 / (4 pi).
    """
    z = 1.0 - 2.0 * rn[1]
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2.0 * math.pi * rn[0]
    return vec3(r * math.cos(phi), r * math.sin(phi), z)


def sample_cosine_hemisphere(normal: Vec3, rn: Vec2) -> tuple[Vec3, float]:
    """Sample a cosine-weighted direction on the hemisphere around normal.

    Args:
        normal: The unit surface normal.
        rn: Uniform sample in [0, 1)^2.

    Returns:
        Tuple of (direction, pdf) with pdf = cos(theta) / pi.
    """
    z = math.sqrt(rn[1])
    r = math.sqrt(max(0.0, 1.0 - z * z))
    phi = 2.0 * math.pi * rn[0]
    local = vec3(r * math.cos(phi), r * math.sin(phi), z)
    direction = transform_direction_from_local(build_onb_from_normal(normal), local)
    return direction, z / math.pi


def _lobe_weights(kd: Vec3, ks: Vec3) -> tuple[float, float]:
    """Return the normalized (diffuse, specular) selection probabilities."""
    wd = float(np.mean(kd))
    ws = float(np.mean(ks))
    total = wd + ws
    if total <= 0.0:
        return 0.0, 0.0
    return wd / total, ws / total


def pdf_brdf(kd: Vec3, ks: Vec3, n: float, v: Vec3, norm: Vec3, l: Vec3) -> float:
    """Compute the mixture pdf of sample_brdf for a given direction.

    The diffuse lobe is cosine-weighted; the specular lobe samples the half
    vector from a normalized Phong distribution around the normal, converted
    to the solid angle of l with the 1 / (4 v.h) Jacobian.
    """
    wd, ws = _lobe_weights(kd, ks)
    pdf = 0.0
    cos_l = dot(norm, l)
    if wd > 0.0 and cos_l > 0.0:
        pdf += wd * cos_l / math.pi
    if ws > 0.0:
        h = normalize(v + l)
        cos_h = max(0.0, dot(norm, h))
        pdf += ws * (n + 1.0) / (2.0 * math.pi) * cos_h**n / (4.0 * max(dot(v, h), PDF_EPSILON))
    return pdf


def sample_brdf(
    kd: Vec3,
    ks: Vec3,
    n: float,
    v: Vec3,
    norm: Vec3,
    rn: Vec2,
    rl: float,
) -> tuple[Vec3, float]:
    """Importance sample an outgoing direction from the material lobes.

    The lobe is picked with rl using the mean of kd and ks as weights. The
    diffuse lobe draws a cosine-weighted direction; the specular lobe draws a
    half vector with density proportional to cos^n and mirrors v about it.

    Args:
        kd: Diffuse color.
        ks: Specular color.
        n: Shininess exponent.
        v: Unit direction toward the viewer.
        norm: Unit surface normal.
        rn: Uniform 2D sample for the direction.
        rl: Uniform 1D sample for lobe selection.

    Returns:
        Tuple of (direction, pdf). A zero direction with pdf 0 is returned
        when the material does not reflect at all.
    """
    wd, ws = _lobe_weights(kd, ks)
    if wd + ws <= 0.0:
        return zero3(), 0.0

    if rl < wd:
        direction, _ = sample_cosine_hemisphere(norm, rn)
    else:
        frame = build_onb_from_normal(norm)
        cos_t = rn[1] ** (1.0 / (n + 1.0))
        sin_t = math.sqrt(max(0.0, 1.0 - cos_t * cos_t))
        phi = 2.0 * math.pi * rn[0]
        h = transform_direction_from_local(
            frame, vec3(sin_t * math.cos(phi), sin_t * math.sin(phi), cos_t)
        )
        direction = normalize(2.0 * dot(v, h) * h - v)

    return direction, pdf_brdf(kd, ks, n, v, norm, direction)
