"""Image textures and filtered texture lookup.

A texture modulates a material coefficient: the coefficient acts as a tint and
the texture as a per-texel multiplier. When no texture is bound the coefficient
is returned unchanged.

Lookup supports:
- Tiling (wrap) addressing via the fractional part of uv, or clamp addressing
- Bilinear filtering over the four neighbouring texels, or nearest-texel fetch

Texel (i, j) is column i and row j; texture coordinate u runs along the width
and v along the height.

Example:
    >>> import numpy as np
    >>> from src.pathtrace.materials.texture import Texture, lookup_scaled_texture
    >>> checker = Texture(np.array([[[1, 1, 1], [0, 0, 0]],
    ...                             [[0, 0, 0], [1, 1, 1]]], dtype=np.float64))
    >>> color = lookup_scaled_texture(np.array([0.5, 0.5, 0.5]), checker, (0.25, 0.75))
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.pathtrace.core.ray import Vec3


@dataclass(frozen=True, eq=False)
class Texture:
    """An immutable RGB image used as a texture.

    Attributes:
        pixels: Float array of shape (height, width, 3).
    """

    pixels: npt.NDArray[np.float64]

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels, dtype=np.float64)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Texture pixels must have shape (H, W, 3), got {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError("Texture must contain at least one texel")
        pixels = pixels.copy()
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def from_image(cls, image: npt.NDArray[np.uint8], flip: bool = True) -> Texture:
        """Create a texture from an 8-bit image array (top-left origin).

        Args:
            image: Array of shape (H, W, 3) with values in [0, 255].
            flip: Flip vertically so that v = 0 maps to the bottom row.
        """
        pixels = np.asarray(image, dtype=np.float64) / 255.0
        if flip:
            pixels = np.flipud(pixels)
        return cls(pixels)

    @classmethod
    def load(cls, filepath: str) -> Texture:
        """Load a texture from an image file using Pillow."""
        from PIL import Image as PILImage

        with PILImage.open(filepath) as img:
            return cls.from_image(np.asarray(img.convert("RGB")))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def at(self, i: int, j: int) -> Vec3:
        """Fetch texel at column i, row j with edge clamping."""
        i = min(max(i, 0), self.width - 1)
        j = min(max(j, 0), self.height - 1)
        return self.pixels[j, i]


def lookup_scaled_texture(
    value: Vec3,
    texture: Texture | None,
    uv: tuple[float, float],
    tile: bool = True,
    bilinear: bool = True,
) -> Vec3:
    """Look up a texture and scale the result by a base coefficient.

    Args:
        value: The base coefficient (tint) of the material channel.
        texture: The texture, or None for an untextured channel.
        uv: Texture coordinates.
        tile: Wrap coordinates into [0, 1) before lookup. When False the
            coordinates are clamped to [0, 1].
        bilinear: Blend the four neighbouring texels instead of fetching one.

    Returns:
        value when no texture is bound, otherwise value times the filtered
        texel color.
    """
    if texture is None:
        return value

    u, v = uv
    if tile:
        return lookup_scaled_texture(
            value, texture, (u - math.floor(u), v - math.floor(v)), False, bilinear
        )

    u = min(max(u, 0.0), 1.0)
    v = min(max(v, 0.0), 1.0)
    w, h = texture.width, texture.height

    if not bilinear:
        return value * texture.at(min(int(u * w), w - 1), min(int(v * h), h - 1))

    i = min(int(u * w), w - 1)
    j = min(int(v * h), h - 1)
    s = u * w - i
    t = v * h - j

    cij = value * texture.at(i, j)
    cij1 = value * texture.at(i, j + 1)
    ci1j = value * texture.at(i + 1, j)
    ci1j1 = value * texture.at(i + 1, j + 1)
    return (
        cij * ((1.0 - s) * (1.0 - t))
        + cij1 * ((1.0 - s) * t)
        + ci1j * (s * (1.0 - t))
        + ci1j1 * (s * t)
    )
