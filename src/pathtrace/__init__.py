"""CPU Monte Carlo path tracer.

This package renders scenes made of quads and spheres with a recursive path
tracer, supporting:
- Point lights and emissive surfaces (area lights) with shadow rays
- Phong and microfacet BRDFs with optional textures
- Mirror and blurry reflection
- Latitude-longitude environment lighting
- Russian roulette path termination
- Deterministic multi-threaded rendering with per-pixel random streams

Subpackages:
    core: Vector math, ray/frame utilities, sampling, integrator and renderer
    geometry: Quad and sphere intersection
    materials: Materials, textures and BRDF evaluation
    scene: Scene description, intersection, environment and test scenes
    camera: Pinhole camera with jittered ray generation
    preview: Tone mapping, matplotlib preview and PNG export
"""

__version__ = "0.1.0"
