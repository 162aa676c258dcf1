"""Unit tests for the render driver.

Tests cover:
- Row partitioning across workers
- Closed-form and all-black renders
- Determinism across thread counts and repeated renders
- Progress callbacks and error propagation
- PathTraceRenderer accessors and PNG output
"""

import math

import numpy as np
import pytest


class TestRowPartition:
    """Tests for row_partition."""

    @pytest.mark.parametrize("height,nthreads", [(1, 1), (7, 3), (8, 4), (5, 8), (64, 6)])
    def test_covers_every_row_once(self, height, nthreads):
        """Test every row belongs to exactly one worker."""
        from src.pathtrace.core.renderer import row_partition

        parts = row_partition(height, nthreads)
        rows = sorted(j for part in parts for j in part)
        assert rows == list(range(height))

    def test_interleaved(self):
        """Test worker t renders rows t, t + T, t + 2T, ..."""
        from src.pathtrace.core.renderer import row_partition

        parts = row_partition(7, 3)
        assert [list(p) for p in parts] == [[0, 3, 6], [1, 4], [2, 5]]


class TestPathtrace:
    """Tests for pathtrace."""

    def test_lit_quad(self, lit_quad_scene):
        """Test the single-pixel render matches kd / pi * I / d^2."""
        from src.pathtrace.core.renderer import pathtrace

        image = pathtrace(lit_quad_scene)
        assert image.shape == (1, 1, 3)
        assert np.allclose(image[0, 0], 0.5 / math.pi * 10.0 / 4.0, rtol=1e-6)

    def test_lit_quad_supersampled(self, lit_quad_scene):
        """Test S x S sub-samples are averaged, not summed."""
        import dataclasses

        from src.pathtrace.core.renderer import pathtrace

        lit_quad_scene.settings = dataclasses.replace(lit_quad_scene.settings, samples=3)
        image = pathtrace(lit_quad_scene)
        assert np.allclose(image[0, 0], 0.5 / math.pi * 10.0 / 4.0, rtol=1e-6)

    def test_dark_scene(self):
        """Test a scene without lights renders exactly black in parallel."""
        from src.pathtrace.core.renderer import pathtrace
        from src.pathtrace.scene.scene import RenderSettings
        from src.pathtrace.scene.test_scenes import create_dark_scene

        scene = create_dark_scene(6, 5, RenderSettings(samples=2, max_depth=3, num_threads=2))
        image = pathtrace(scene)
        assert image.shape == (5, 6, 3)
        assert np.all(image == 0.0)

    def test_parallel_matches_sequential(self, small_box_scene):
        """Test the image does not depend on the number of threads."""
        from src.pathtrace.core.renderer import pathtrace

        sequential = pathtrace(small_box_scene, parallel=False)
        parallel = pathtrace(small_box_scene, parallel=True, num_threads=3)
        many = pathtrace(small_box_scene, parallel=True, num_threads=16)
        assert np.array_equal(sequential, parallel)
        assert np.array_equal(sequential, many)

    def test_repeatable(self, small_box_scene):
        """Test two renders with the same seed are bit-identical."""
        from src.pathtrace.core.renderer import pathtrace

        a = pathtrace(small_box_scene, num_threads=2)
        b = pathtrace(small_box_scene, num_threads=2)
        assert np.array_equal(a, b)

    def test_seed_changes_noise(self, small_box_scene):
        """Test a different seed gives a different image."""
        import dataclasses

        from src.pathtrace.core.renderer import pathtrace

        a = pathtrace(small_box_scene, parallel=False)
        small_box_scene.settings = dataclasses.replace(small_box_scene.settings, seed=6)
        b = pathtrace(small_box_scene, parallel=False)
        assert not np.array_equal(a, b)

    def test_output_is_finite_and_non_negative(self, small_box_scene):
        """Test rendered radiance is finite and non-negative."""
        from src.pathtrace.core.renderer import pathtrace

        image = pathtrace(small_box_scene, num_threads=2)
        assert np.all(np.isfinite(image))
        assert np.all(image >= 0.0)
        assert np.any(image > 0.0)

    def test_invalid_thread_count(self, lit_quad_scene):
        """Test a non-positive worker count is rejected."""
        from src.pathtrace.core.renderer import pathtrace

        with pytest.raises(ValueError):
            pathtrace(lit_quad_scene, parallel=True, num_threads=0)

    def test_sequential_progress(self, small_box_scene):
        """Test the callback sees every row once on the calling thread."""
        from src.pathtrace.core.renderer import pathtrace

        calls = []
        pathtrace(small_box_scene, parallel=False, callback=lambda done, total: calls.append((done, total)))
        assert calls == [(j + 1, 6) for j in range(6)]

    def test_parallel_progress_from_first_worker(self, small_box_scene):
        """Test only the first worker reports progress."""
        from src.pathtrace.core.renderer import pathtrace

        calls = []
        pathtrace(small_box_scene, num_threads=3, callback=lambda done, total: calls.append(done))
        assert calls == [3, 6]

    def test_worker_error_propagates(self, monkeypatch, small_box_scene):
        """Test an exception in a worker surfaces from pathtrace."""
        from src.pathtrace.core import renderer

        def failing(*args, **kwargs):
            raise RuntimeError("worker failed")

        monkeypatch.setattr(renderer, "render_rows", failing)
        with pytest.raises(RuntimeError, match="worker failed"):
            renderer.pathtrace(small_box_scene, num_threads=2)


class TestPathTraceRenderer:
    """Tests for the PathTraceRenderer wrapper."""

    def test_not_rendered(self, lit_quad_scene):
        """Test accessing the image before rendering raises."""
        from src.pathtrace.core.renderer import PathTraceRenderer

        renderer = PathTraceRenderer(lit_quad_scene)
        assert not renderer.is_rendered
        with pytest.raises(RuntimeError):
            renderer.get_image()
        with pytest.raises(RuntimeError):
            renderer.get_image_numpy()

    def test_render_and_reset(self, lit_quad_scene):
        """Test render stores the image and reset discards it."""
        from src.pathtrace.core.renderer import PathTraceRenderer

        renderer = PathTraceRenderer(lit_quad_scene)
        image = renderer.render()
        assert renderer.is_rendered
        assert renderer.get_image() is image
        assert (renderer.width, renderer.height) == (1, 1)
        renderer.reset()
        assert not renderer.is_rendered

    def test_display_orientation(self, monkeypatch, lit_quad_scene):
        """Test get_image_numpy puts the bottom row last and clamps."""
        from src.pathtrace.core import renderer as renderer_module

        buffer = np.zeros((2, 3, 3))
        buffer[0] = 2.0  # bottom row
        monkeypatch.setattr(renderer_module, "pathtrace", lambda *args, **kwargs: buffer)

        renderer = renderer_module.PathTraceRenderer(lit_quad_scene)
        renderer.render()
        image = renderer.get_image_numpy()
        assert image.dtype == np.float32
        assert np.all(image[1] == 1.0)
        assert np.all(image[0] == 0.0)

    def test_uint8_gamma(self, monkeypatch, lit_quad_scene):
        """Test 8-bit conversion applies gamma."""
        from src.pathtrace.core import renderer as renderer_module

        buffer = np.full((1, 1, 3), 0.25)
        monkeypatch.setattr(renderer_module, "pathtrace", lambda *args, **kwargs: buffer)

        renderer = renderer_module.PathTraceRenderer(lit_quad_scene)
        renderer.render()
        assert renderer.get_image_uint8(gamma=1.0)[0, 0, 0] == 63
        assert renderer.get_image_uint8(gamma=2.0)[0, 0, 0] == 127

    def test_save_image(self, tmp_path, small_box_scene):
        """Test saving the render as a PNG of the right size."""
        from PIL import Image as PILImage

        from src.pathtrace.core.renderer import PathTraceRenderer

        renderer = PathTraceRenderer(small_box_scene)
        renderer.render(num_threads=2)
        path = tmp_path / "render.png"
        renderer.save_image(str(path))
        with PILImage.open(path) as img:
            assert img.size == (8, 6)
            assert img.mode == "RGB"

    def test_repr(self, lit_quad_scene):
        """Test the repr reports size and state."""
        from src.pathtrace.core.renderer import PathTraceRenderer

        text = repr(PathTraceRenderer(lit_quad_scene))
        assert "width=1" in text
        assert "rendered=False" in text
