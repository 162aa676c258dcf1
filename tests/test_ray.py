"""Unit tests for the ray module.

Tests cover:
- Vector helpers (dot, cross, normalize, reflect, as_vec3)
- Ray construction, ray_at and segments
- Frames, look-at bases and local/world transforms
"""

import math

import numpy as np
import pytest


class TestVectorHelpers:
    """Tests for vector utility functions."""

    def test_dot_and_cross(self):
        """Test dot and cross on the coordinate axes."""
        from src.pathtrace.core.ray import cross, dot, vec3

        x = vec3(1.0, 0.0, 0.0)
        y = vec3(0.0, 1.0, 0.0)
        assert abs(dot(x, y)) < 1e-12
        assert np.allclose(cross(x, y), [0.0, 0.0, 1.0])

    def test_normalize(self):
        """Test normalize produces a unit vector."""
        from src.pathtrace.core.ray import length, normalize, vec3

        n = normalize(vec3(3.0, 4.0, 0.0))
        assert abs(length(n) - 1.0) < 1e-12
        assert np.allclose(n, [0.6, 0.8, 0.0])

    def test_normalize_zero_vector(self):
        """Test normalize leaves the zero vector unchanged instead of NaN."""
        from src.pathtrace.core.ray import normalize, zero3

        n = normalize(zero3())
        assert np.all(np.isfinite(n))
        assert np.all(n == 0.0)

    def test_reflect(self):
        """Test reflection about the y axis normal."""
        from src.pathtrace.core.ray import reflect, vec3

        r = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))
        assert np.allclose(r, [1.0, 1.0, 0.0])

    def test_as_vec3_rejects_wrong_size(self):
        """Test as_vec3 raises on anything but three components."""
        from src.pathtrace.core.ray import as_vec3

        assert as_vec3((1, 2, 3)).dtype == np.float64
        with pytest.raises(ValueError):
            as_vec3((1.0, 2.0))

    def test_is_zero(self):
        """Test is_zero only accepts exact black."""
        from src.pathtrace.core.ray import is_zero, vec3

        assert is_zero(vec3())
        assert not is_zero(vec3(0.0, 1e-30, 0.0))


class TestRay:
    """Tests for Ray and ray_at."""

    def test_ray_at(self):
        """Test ray_at computes origin + t * direction."""
        from src.pathtrace.core.ray import Ray, ray_at, vec3

        ray = Ray(vec3(1.0, 2.0, 3.0), vec3(0.0, 0.0, -1.0))
        assert np.allclose(ray_at(ray, 0.0), [1.0, 2.0, 3.0])
        assert np.allclose(ray_at(ray, 2.5), [1.0, 2.0, 0.5])

    def test_default_interval(self):
        """Test new rays skip self-intersections and are unbounded."""
        from src.pathtrace.core.ray import RAY_EPSILON, Ray, vec3

        ray = Ray(vec3(), vec3(1.0, 0.0, 0.0))
        assert ray.tmin == RAY_EPSILON
        assert math.isinf(ray.tmax)

    def test_make_segment(self):
        """Test segments are unit length and shrunk at both ends."""
        from src.pathtrace.core.ray import RAY_EPSILON, Ray, length, vec3

        seg = Ray.make_segment(vec3(0.0, 0.0, 0.0), vec3(0.0, 3.0, 4.0))
        assert abs(length(seg.direction) - 1.0) < 1e-12
        assert abs(seg.tmin - RAY_EPSILON) < 1e-12
        assert abs(seg.tmax - (5.0 - RAY_EPSILON)) < 1e-12

    def test_make_segment_degenerate(self):
        """Test a zero-length segment has an empty interval."""
        from src.pathtrace.core.ray import Ray, vec3

        seg = Ray.make_segment(vec3(1.0, 1.0, 1.0), vec3(1.0, 1.0, 1.0))
        assert seg.tmax < seg.tmin


class TestFrame:
    """Tests for frames and transforms."""

    def test_lookat_basis(self):
        """Test the look-at frame is orthonormal with -z toward the target."""
        from src.pathtrace.core.ray import Frame

        frame = Frame.lookat((0.0, 0.0, 5.0), (0.0, 0.0, 0.0))
        assert np.allclose(frame.axes.T @ frame.axes, np.eye(3))
        assert np.allclose(frame.z, [0.0, 0.0, 1.0])
        assert np.allclose(frame.x, [1.0, 0.0, 0.0])
        assert np.allclose(frame.y, [0.0, 1.0, 0.0])

    def test_lookat_degenerate(self):
        """Test look-at raises for coincident points or a parallel up vector."""
        from src.pathtrace.core.ray import Frame

        with pytest.raises(ValueError):
            Frame.lookat((1.0, 1.0, 1.0), (1.0, 1.0, 1.0))
        with pytest.raises(ValueError):
            Frame.lookat((0.0, 5.0, 0.0), (0.0, 0.0, 0.0), up=(0.0, 1.0, 0.0))

    def test_point_roundtrip(self):
        """Test a point survives local -> world -> local."""
        from src.pathtrace.core.ray import (
            Frame,
            transform_point_from_local,
            transform_point_to_local,
            vec3,
        )

        frame = Frame.lookat((1.0, 2.0, 3.0), (0.0, -1.0, 0.5))
        p = vec3(0.3, -0.7, 2.0)
        back = transform_point_to_local(frame, transform_point_from_local(frame, p))
        assert np.allclose(back, p)

    def test_translation_only_moves_points(self):
        """Test directions ignore the frame origin."""
        from src.pathtrace.core.ray import (
            Frame,
            transform_direction_from_local,
            transform_point_from_local,
            vec3,
        )

        frame = Frame.at((1.0, 2.0, 3.0))
        d = vec3(0.0, 0.0, 1.0)
        assert np.allclose(transform_direction_from_local(frame, d), d)
        assert np.allclose(transform_point_from_local(frame, d), [1.0, 2.0, 4.0])

    def test_transform_ray_keeps_interval(self):
        """Test transform_ray maps origin and direction and keeps tmin/tmax."""
        from src.pathtrace.core.ray import Frame, Ray, transform_ray, vec3

        frame = Frame.at((0.0, 1.0, 0.0))
        ray = transform_ray(frame, Ray(vec3(), vec3(0.0, 0.0, -1.0), 0.0, 7.0))
        assert np.allclose(ray.origin, [0.0, 1.0, 0.0])
        assert np.allclose(ray.direction, [0.0, 0.0, -1.0])
        assert ray.tmin == 0.0
        assert ray.tmax == 7.0

    @pytest.mark.parametrize(
        "normal",
        [(0.0, 0.0, 1.0), (0.0, -1.0, 0.0), (1.0, 0.0, 0.0), (0.3, -0.5, 0.8)],
    )
    def test_build_onb_from_normal(self, normal):
        """Test the basis is right-handed and orthonormal with z = normal."""
        from src.pathtrace.core.ray import as_vec3, build_onb_from_normal, normalize

        n = normalize(as_vec3(normal))
        frame = build_onb_from_normal(n)
        assert np.allclose(frame.z, n)
        assert np.allclose(frame.axes.T @ frame.axes, np.eye(3))
        assert abs(np.linalg.det(frame.axes) - 1.0) < 1e-9
