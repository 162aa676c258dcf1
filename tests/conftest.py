"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including a
non-interactive Matplotlib backend and small scenes that render quickly.
"""

import matplotlib
import pytest

matplotlib.use("Agg")


@pytest.fixture(autouse=True)
def close_figures():
    """Close any Matplotlib figures a test left open."""
    yield
    import matplotlib.pyplot as plt

    plt.close("all")


@pytest.fixture
def rng():
    """A deterministic random stream."""
    from src.pathtrace.core.sampler import RandomStream

    return RandomStream.from_seed(1234)


@pytest.fixture
def direct_only():
    """Settings with one sample, no roulette and no secondary rays."""
    from src.pathtrace.scene.scene import RenderSettings

    return RenderSettings(
        samples=1,
        path_shadows=True,
        russian_roulette=False,
        max_depth=1,
        parallel=False,
    )


@pytest.fixture
def lit_quad_scene():
    """A 1x1 scene whose single pixel has a closed-form value."""
    from src.pathtrace.scene.test_scenes import create_lit_quad_scene

    return create_lit_quad_scene()


@pytest.fixture
def small_box_scene():
    """The area-light box at 8x6 with short paths."""
    from src.pathtrace.scene.scene import RenderSettings
    from src.pathtrace.scene.test_scenes import TestSceneParams, create_test_scene

    settings = RenderSettings(samples=1, max_depth=3, seed=5)
    return create_test_scene(1, TestSceneParams(width=8, height=6, settings=settings))


@pytest.fixture
def make_empty_scene():
    """Factory for a scene without surfaces."""
    from src.pathtrace.camera.pinhole import Camera
    from src.pathtrace.scene.scene import RenderSettings, Scene

    def _make(background=(0.0, 0.0, 0.0), background_txt=None, settings=None):
        return Scene(
            camera=Camera.lookat((0.0, 0.0, 1.0), (0.0, 0.0, 0.0)),
            background=background,
            background_txt=background_txt,
            image_width=4,
            image_height=4,
            settings=settings or RenderSettings(parallel=False),
        )

    return _make
