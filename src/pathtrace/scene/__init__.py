"""Scene module for scene description and ray-scene queries.

Components:
    scene: Surfaces, lights, render settings and the Scene container
    intersection: Nearest-hit and shadow queries over all surfaces
    environment: Background radiance for escaping rays
    test_scenes: Built-in scenes for examples and tests

Surfaces are tested linearly; there is no acceleration structure.
"""

from .environment import env_texcoord, eval_env
from .intersection import Intersection, intersect, intersect_shadow
from .scene import Light, RenderSettings, RoulettePolicy, Scene, Shape, Surface
from .test_scenes import (
    TestSceneParams,
    create_dark_scene,
    create_lit_quad_scene,
    create_test_scene,
)

__all__ = [
    # Scene description
    "Shape",
    "Surface",
    "Light",
    "RoulettePolicy",
    "RenderSettings",
    "Scene",
    # Queries
    "Intersection",
    "intersect",
    "intersect_shadow",
    "env_texcoord",
    "eval_env",
    # Test scenes
    "TestSceneParams",
    "create_test_scene",
    "create_lit_quad_scene",
    "create_dark_scene",
]
