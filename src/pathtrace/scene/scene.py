"""Scene description consumed by the renderer.

This module defines the data the path tracer reads while rendering:

- Shape: the kind of a surface (quad or sphere)
- Surface: a shape placed by a frame, with a shared Material
- Light: a point light
- RenderSettings: sampling, shadow, roulette, reflection and threading options
- Scene: everything above plus camera, ambient and background

A Scene is assembled once before a render and treated as read-only by every
render worker.

Example:
    >>> from src.pathtrace.core.ray import Frame
    >>> from src.pathtrace.camera.pinhole import Camera
    >>> from src.pathtrace.materials.material import Material
    >>> from src.pathtrace.scene.scene import Scene, Shape, Surface, Light
    >>> scene = Scene(
    ...     camera=Camera.lookat((0, 1, 4), (0, 0, 0)),
    ...     surfaces=[Surface(Shape.SPHERE, Frame.at((0, 0, 0)), 1.0, Material())],
    ...     lights=[Light(Frame.at((0, 5, 0)), (20.0, 20.0, 20.0))],
    ... )
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.pathtrace.camera.pinhole import Camera
from src.pathtrace.core.ray import Frame, Vec3, as_vec3, is_zero, zero3
from src.pathtrace.materials.material import Material
from src.pathtrace.materials.texture import Texture


class Shape(Enum):
    """Enumeration of supported surface shapes.

    Used to dispatch intersection and area-light sampling.
    """

    QUAD = "quad"
    SPHERE = "sphere"


class RoulettePolicy(Enum):
    """Survival test applied to the indirect bounce when roulette is enabled.

    UNBIASED draws a uniform number and continues with a fixed survival
    probability, dividing the estimate by that probability.

    LEGACY_DENSITY continues only when the sampled direction's density exceeds
    a threshold and divides by (1 - density). It reproduces older renders but
    is biased.
    """

    UNBIASED = "unbiased"
    LEGACY_DENSITY = "legacy_density"


@dataclass(frozen=True, eq=False)
class Surface:
    """A quad or sphere placed in the scene.

    Attributes:
        shape: Quad or sphere.
        frame: Placement; the quad lies in the local XY plane facing +Z, the
            sphere is centered at the frame origin.
        radius: Sphere radius, or half the side length of the quad.
        material: Shared material reference.
    """

    shape: Shape
    frame: Frame
    radius: float
    material: Material

    def __post_init__(self) -> None:
        if self.radius <= 0.0:
            raise ValueError(f"Surface radius must be positive, got {self.radius}")

    @property
    def is_emissive(self) -> bool:
        return self.material.is_emissive


@dataclass(frozen=True, eq=False)
class Light:
    """A point light.

    Attributes:
        frame: Light placement; only the origin is used.
        intensity: Radiant intensity (RGB).
    """

    frame: Frame
    intensity: Vec3

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", as_vec3(self.intensity))

    @property
    def position(self) -> Vec3:
        return self.frame.origin


@dataclass(frozen=True)
class RenderSettings:
    """Rendering parameters.

    Attributes:
        samples: Sub-pixel samples per axis (samples^2 per pixel).
        path_shadows: Trace shadow rays for light and environment sampling.
        russian_roulette: Apply the roulette policy to indirect bounces.
        roulette_policy: Which roulette survival test to use.
        roulette_survival: Survival probability for the UNBIASED policy.
        roulette_threshold: Density threshold for the LEGACY_DENSITY policy.
        blurry_reflection: Replace the mirror ray with jittered glossy rays.
        blurry_samples: Number of jittered reflection rays.
        blurry_spread: Radius of the direction jitter.
        max_depth: Maximum number of path vertices (1 = direct lighting only).
        parallel: Render with a pool of worker threads.
        num_threads: Worker count; None uses the hardware thread count.
        seed: Root seed for the per-pixel random streams.
    """

    samples: int = 1
    path_shadows: bool = True
    russian_roulette: bool = True
    roulette_policy: RoulettePolicy = RoulettePolicy.UNBIASED
    roulette_survival: float = 0.8
    roulette_threshold: float = 0.1
    blurry_reflection: bool = False
    blurry_samples: int = 10
    blurry_spread: float = 0.2
    max_depth: int = 8
    parallel: bool = True
    num_threads: int | None = None
    seed: int = 0

    def __post_init__(self) -> None:
        if self.samples < 1:
            raise ValueError(f"samples must be at least 1, got {self.samples}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {self.max_depth}")
        if not 0.0 < self.roulette_survival <= 1.0:
            raise ValueError(
                f"roulette_survival must be in (0, 1], got {self.roulette_survival}"
            )
        if not 0.0 <= self.roulette_threshold < 1.0:
            raise ValueError(
                f"roulette_threshold must be in [0, 1), got {self.roulette_threshold}"
            )
        if self.blurry_samples < 1:
            raise ValueError(f"blurry_samples must be at least 1, got {self.blurry_samples}")
        if self.blurry_spread < 0.0:
            raise ValueError(f"blurry_spread must be non-negative, got {self.blurry_spread}")
        if self.num_threads is not None and self.num_threads < 1:
            raise ValueError(f"num_threads must be at least 1, got {self.num_threads}")

    @property
    def thread_count(self) -> int:
        """Number of workers for a parallel render."""
        if self.num_threads is not None:
            return self.num_threads
        return os.cpu_count() or 1


@dataclass(eq=False)
class Scene:
    """Everything needed to render an image.

    Attributes:
        camera: The pinhole camera.
        surfaces: Quads and spheres; emissive ones also act as area lights.
        lights: Point lights.
        ambient: Constant ambient color, multiplied by the diffuse color.
        background: Environment radiance (or tint of background_txt).
        background_txt: Optional latitude-longitude environment texture.
        image_width: Output width in pixels.
        image_height: Output height in pixels.
        settings: Rendering parameters.
    """

    camera: Camera
    surfaces: list[Surface] = field(default_factory=list)
    lights: list[Light] = field(default_factory=list)
    ambient: Vec3 = field(default_factory=zero3)
    background: Vec3 = field(default_factory=zero3)
    background_txt: Texture | None = None
    image_width: int = 64
    image_height: int = 64
    settings: RenderSettings = field(default_factory=RenderSettings)

    def __post_init__(self) -> None:
        self.ambient = as_vec3(self.ambient)
        self.background = as_vec3(self.background)
        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.image_width}x{self.image_height}"
            )

    @property
    def emissive_surfaces(self) -> list[Surface]:
        """Surfaces that act as area lights."""
        return [surface for surface in self.surfaces if surface.is_emissive]

    @property
    def has_environment(self) -> bool:
        """Whether environment lighting is sampled at each hit."""
        return not is_zero(self.background)

    def set_resolution(self, height: int) -> None:
        """Override the image height, deriving the width from the camera aspect.

        Raises:
            ValueError: If height is not positive.
        """
        if height <= 0:
            raise ValueError(f"Image height must be positive, got {height}")
        self.image_height = height
        self.image_width = max(1, round(self.camera.width * height / self.camera.height))

    def summary(self) -> dict[str, Any]:
        """Return a short description of the scene for logging."""
        return {
            "size": (self.image_width, self.image_height),
            "surfaces": len(self.surfaces),
            "area_lights": len(self.emissive_surfaces),
            "point_lights": len(self.lights),
            "environment": self.has_environment,
            "samples": self.settings.samples,
        }
