"""Pinhole camera model for perspective projection ray generation.

The camera is a frame plus the size of a virtual sensor placed at unit
distance in front of the camera origin (along the frame's -z axis). Primary
rays go from the camera origin through a point on that sensor:

    direction = normalize(((u - 0.5) * width, (v - 0.5) * height, -1))

expressed in the camera frame, with normalized image coordinates:
- u = 0: left edge of image, u = 1: right edge
- v = 0: bottom edge of image, v = 1: top edge

Example:
    >>> from src.pathtrace.camera.pinhole import Camera, get_ray
    >>> camera = Camera.lookat((0.0, 0.0, 3.0), (0.0, 0.0, 0.0), vfov=60.0, aspect=1.0)
    >>> ray = get_ray(camera, 0.5, 0.5)  # Ray through image center
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.pathtrace.core.ray import (
    Frame,
    Ray,
    normalize,
    transform_ray,
    vec3,
    zero3,
)


@dataclass(frozen=True, eq=False)
class Camera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        frame: Camera position and orientation (looks along -z, y is up).
        width: Sensor width at unit distance.
        height: Sensor height at unit distance.
    """

    frame: Frame
    width: float = 1.0
    height: float = 1.0

    def __post_init__(self) -> None:
        if self.width <= 0.0 or self.height <= 0.0:
            raise ValueError(
                f"Camera sensor size must be positive, got {self.width}x{self.height}"
            )

    @classmethod
    def lookat(
        cls,
        lookfrom: tuple[float, float, float],
        lookat: tuple[float, float, float],
        vup: tuple[float, float, float] = (0.0, 1.0, 0.0),
        vfov: float = 45.0,
        aspect: float = 1.0,
    ) -> Camera:
        """Create a camera from look-at parameters and a vertical field of view.

        Args:
            lookfrom: Camera position in world space.
            lookat: Point the camera is looking at.
            vup: Up direction for camera orientation.
            vfov: Vertical field of view in degrees.
            aspect: Sensor width divided by height.
        """
        height = 2.0 * math.tan(math.radians(vfov) / 2.0)
        return cls(Frame.lookat(lookfrom, lookat, vup), aspect * height, height)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def get_ray(camera: Camera, u: float, v: float) -> Ray:
    """Generate a primary ray through normalized image coordinates (u, v).

    Args:
        camera: The camera.
        u: Horizontal coordinate in [0, 1] (left to right).
        v: Vertical coordinate in [0, 1] (bottom to top).

    Returns:
        A world-space ray starting at the camera origin.
    """
    direction = normalize(vec3((u - 0.5) * camera.width, (v - 0.5) * camera.height, -1.0))
    return transform_ray(camera.frame, Ray(zero3(), direction, 0.0))


def get_ray_jittered(
    camera: Camera,
    i: int,
    j: int,
    ii: int,
    jj: int,
    samples: int,
    width: int,
    height: int,
    jitter: tuple[float, float],
) -> Ray:
    """Generate the ray for sub-pixel sample (ii, jj) of pixel (i, j).

    The pixel is split into a samples x samples grid and the sample is
    jittered inside its cell for stratified anti-aliasing.

    Args:
        camera: The camera.
        i: Pixel column (0 = left).
        j: Pixel row (0 = bottom).
        ii: Sub-pixel column in [0, samples).
        jj: Sub-pixel row in [0, samples).
        samples: Sub-samples per axis.
        width: Image width in pixels.
        height: Image height in pixels.
        jitter: Uniform offsets in [0, 1)^2 within the sub-pixel cell.

    Returns:
        The jittered primary ray.
    """
    u = (i + (ii + jitter[0]) / samples) / width
    v = (j + (jj + jitter[1]) / samples) / height
    return get_ray(camera, u, v)
