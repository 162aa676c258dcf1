"""Materials module.

Components:
    material: Material parameters (emission, diffuse, specular, reflection)
    texture: RGB textures with tiled bilinear or nearest lookup
    brdf: Phong and microfacet BRDF evaluation
"""

from .brdf import BRDF_EPSILON, eval_brdf
from .material import Material
from .texture import Texture, lookup_scaled_texture

__all__ = [
    "Material",
    "Texture",
    "lookup_scaled_texture",
    "eval_brdf",
    "BRDF_EPSILON",
]
