"""Unit tests for the pinhole camera.

Tests cover:
- Camera construction and validation
- Primary ray directions
- Jittered sub-pixel ray generation
"""

import math

import numpy as np
import pytest


class TestCamera:
    """Tests for Camera construction."""

    def test_lookat_sensor(self):
        """Test the sensor size follows the field of view and aspect."""
        from src.pathtrace.camera.pinhole import Camera

        camera = Camera.lookat((0, 0, 5), (0, 0, 0), vfov=90.0, aspect=2.0)
        assert abs(camera.height - 2.0) < 1e-9
        assert abs(camera.width - 4.0) < 1e-9
        assert abs(camera.aspect_ratio - 2.0) < 1e-9

    @pytest.mark.parametrize("width,height", [(0.0, 1.0), (1.0, -1.0)])
    def test_invalid_sensor(self, width, height):
        """Test non-positive sensor sizes are rejected."""
        from src.pathtrace.camera.pinhole import Camera
        from src.pathtrace.core.ray import Frame

        with pytest.raises(ValueError):
            Camera(Frame(), width, height)


class TestRayGeneration:
    """Tests for get_ray and get_ray_jittered."""

    def test_center_ray_looks_at_target(self):
        """Test the image center ray points at the look-at target."""
        from src.pathtrace.camera.pinhole import Camera, get_ray

        camera = Camera.lookat((1, 2, 3), (0, 0, 0))
        ray = get_ray(camera, 0.5, 0.5)
        expected = -np.array([1.0, 2.0, 3.0]) / math.sqrt(14.0)
        assert np.allclose(ray.origin, [1.0, 2.0, 3.0])
        assert np.allclose(ray.direction, expected)

    def test_image_axes(self):
        """Test u grows to the right and v grows upward."""
        from src.pathtrace.camera.pinhole import Camera, get_ray

        camera = Camera.lookat((0, 0, 5), (0, 0, 0))
        assert get_ray(camera, 0.0, 0.5).direction[0] < 0.0
        assert get_ray(camera, 1.0, 0.5).direction[0] > 0.0
        assert get_ray(camera, 0.5, 0.0).direction[1] < 0.0
        assert get_ray(camera, 0.5, 1.0).direction[1] > 0.0

    def test_corner_direction(self):
        """Test the corner ray passes through the sensor corner at unit distance."""
        from src.pathtrace.camera.pinhole import Camera, get_ray
        from src.pathtrace.core.ray import Frame, normalize, vec3

        camera = Camera(Frame(), 2.0, 1.0)
        ray = get_ray(camera, 1.0, 1.0)
        assert np.allclose(ray.direction, normalize(vec3(1.0, 0.5, -1.0)))

    def test_primary_rays_start_at_zero(self):
        """Test camera rays accept hits right at the camera."""
        from src.pathtrace.camera.pinhole import Camera, get_ray

        camera = Camera.lookat((0, 0, 5), (0, 0, 0))
        assert get_ray(camera, 0.3, 0.7).tmin == 0.0

    def test_jittered_matches_center(self):
        """Test one centered sub-sample equals the pixel center ray."""
        from src.pathtrace.camera.pinhole import Camera, get_ray, get_ray_jittered

        camera = Camera.lookat((0, 0, 5), (0, 0, 0))
        a = get_ray_jittered(camera, 3, 1, 0, 0, 1, 8, 4, (0.5, 0.5))
        b = get_ray(camera, 3.5 / 8, 1.5 / 4)
        assert np.allclose(a.direction, b.direction)

    def test_jittered_stratification(self):
        """Test sub-sample (ii, jj) stays inside its cell."""
        from src.pathtrace.camera.pinhole import Camera, get_ray, get_ray_jittered

        camera = Camera.lookat((0, 0, 5), (0, 0, 0))
        lo = get_ray_jittered(camera, 0, 0, 1, 1, 2, 1, 1, (0.0, 0.0))
        hi = get_ray_jittered(camera, 0, 0, 1, 1, 2, 1, 1, (1.0, 1.0))
        assert np.allclose(lo.direction, get_ray(camera, 0.5, 0.5).direction)
        assert np.allclose(hi.direction, get_ray(camera, 1.0, 1.0).direction)
