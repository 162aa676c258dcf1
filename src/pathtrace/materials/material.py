"""Material description shared by surfaces.

A Material bundles the emissive, diffuse and specular coefficients (each an
RGB color optionally modulated by a texture), the shininess exponent, the
mirror reflection coefficient and the choice of shading model.

Materials are frozen and referenced (never copied) by every surface that uses
them, so one material can be shared by many surfaces and read concurrently by
all render workers.

Example:
    >>> from src.pathtrace.materials.material import Material
    >>> white = Material(kd=(0.7, 0.7, 0.7))
    >>> light = Material(ke=(10.0, 10.0, 10.0), kd=(0.0, 0.0, 0.0))
    >>> light.is_emissive
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.pathtrace.core.ray import Vec3, as_vec3, is_zero, zero3
from src.pathtrace.materials.texture import Texture


def _default_kd() -> Vec3:
    return as_vec3((0.75, 0.75, 0.75))


@dataclass(frozen=True, eq=False)
class Material:
    """Surface material parameters.

    Attributes:
        ke: Emitted radiance.
        kd: Diffuse reflectance.
        ks: Specular reflectance.
        n: Shininess exponent of the specular lobe.
        kr: Perfect mirror reflection coefficient.
        microfacet: Shade with the microfacet model instead of Phong.
        ke_txt: Optional emission texture.
        kd_txt: Optional diffuse texture.
        ks_txt: Optional specular texture.
    """

    ke: Vec3 = field(default_factory=zero3)
    kd: Vec3 = field(default_factory=_default_kd)
    ks: Vec3 = field(default_factory=zero3)
    n: float = 10.0
    kr: Vec3 = field(default_factory=zero3)
    microfacet: bool = False
    ke_txt: Texture | None = None
    kd_txt: Texture | None = None
    ks_txt: Texture | None = None

    def __post_init__(self) -> None:
        for name in ("ke", "kd", "ks", "kr"):
            object.__setattr__(self, name, as_vec3(getattr(self, name)))
        if self.n < 0.0:
            raise ValueError(f"Shininess exponent must be non-negative, got {self.n}")

    @property
    def is_emissive(self) -> bool:
        """Whether surfaces with this material act as area lights."""
        return not is_zero(self.ke)

    @property
    def is_reflective(self) -> bool:
        """Whether this material spawns mirror reflection rays."""
        return not is_zero(self.kr)
