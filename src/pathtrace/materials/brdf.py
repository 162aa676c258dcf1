"""Reflectance models (BRDF) for surface shading.

Two closed-form models are supported:

Modified (normalized) Phong:
    f_r = kd / pi + ks * (n + 8) / (8 pi) * max(0, N.H)^n

Microfacet (Cook-Torrance style):
    D = (n + 2) / (2 pi) * max(0, N.H)^n
    F = ks + (1 - ks) * (1 - H.L)^5
    G = min(1, 2 (H.N)(V.N) / (V.H), 2 (H.N)(L.N) / (L.H))
    f_r = D * G * F / (4 (L.N)(V.N))

where H = normalize(V + L). The microfacet denominators are clamped to
BRDF_EPSILON so grazing directions yield large but finite values instead of
infinities or NaNs.

The BRDF does not include the cosine term; callers multiply by max(0, N.L).
"""

from __future__ import annotations

import math

import numpy as np

from src.pathtrace.core.ray import Vec3, dot, normalize

# Lower bound for cosines used as divisors in the microfacet model
BRDF_EPSILON = 1e-4

_ONE = np.ones(3, dtype=np.float64)


def eval_brdf(
    kd: Vec3,
    ks: Vec3,
    n: float,
    v: Vec3,
    l: Vec3,
    norm: Vec3,
    microfacet: bool,
) -> Vec3:
    """Evaluate the BRDF for a view/light direction pair.

    Args:
        kd: Diffuse color.
        ks: Specular color (Fresnel reflectance at normal incidence for the
            microfacet model).
        n: Shininess exponent.
        v: Unit direction toward the viewer.
        l: Unit direction toward the light.
        norm: Unit surface normal.
        microfacet: Use the microfacet model instead of Phong.

    Returns:
        The RGB reflectance value.
    """
    h = normalize(v + l)
    cos_nh = max(0.0, dot(norm, h))

    if not microfacet:
        return kd / math.pi + ks * ((n + 8.0) / (8.0 * math.pi) * cos_nh**n)

    cos_nv = max(dot(norm, v), 0.0)
    cos_nl = max(dot(norm, l), 0.0)
    cos_vh = max(dot(v, h), BRDF_EPSILON)
    cos_lh = max(dot(l, h), BRDF_EPSILON)

    d = (n + 2.0) / (2.0 * math.pi) * cos_nh**n
    f = ks + (_ONE - ks) * (1.0 - min(cos_lh, 1.0)) ** 5
    g = min(1.0, 2.0 * cos_nh * cos_nv / cos_vh, 2.0 * cos_nh * cos_nl / cos_lh)
    denom = 4.0 * max(cos_nl, BRDF_EPSILON) * max(cos_nv, BRDF_EPSILON)
    return f * (d * g / denom)
