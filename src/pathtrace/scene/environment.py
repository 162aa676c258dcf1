"""Environment (background) radiance lookup.

Rays that escape the scene pick up the environment radiance. The environment
is either a constant color or a latitude-longitude texture around the y axis,
tinted by the background color:

    u = atan2(d.x, d.z) / (2 pi)
    v = 1 - acos(d.y) / pi
"""

from __future__ import annotations

import math

from src.pathtrace.core.ray import Vec3
from src.pathtrace.materials.texture import Texture, lookup_scaled_texture


def env_texcoord(direction: Vec3) -> tuple[float, float]:
    """Map a unit direction to equirectangular texture coordinates."""
    u = math.atan2(direction[0], direction[2]) / (2.0 * math.pi)
    v = 1.0 - math.acos(max(-1.0, min(1.0, direction[1]))) / math.pi
    return u, v


def eval_env(ke: Vec3, ke_txt: Texture | None, direction: Vec3) -> Vec3:
    """Evaluate the environment radiance seen along a direction.

    Args:
        ke: Background color (tint of the texture when one is bound).
        ke_txt: Optional latitude-longitude texture.
        direction: Unit direction of the escaping ray.

    Returns:
        ke when there is no texture, otherwise the tiled texture lookup.
    """
    if ke_txt is None:
        return ke
    return lookup_scaled_texture(ke, ke_txt, env_texcoord(direction), tile=True)
