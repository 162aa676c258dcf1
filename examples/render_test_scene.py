#!/usr/bin/env python3
"""Render one of the built-in test scenes with the path tracer.

Usage:
    python -m examples.render_test_scene [options]

Options:
    --scene KIND        Test scene number, 0-2 (default: 0)
    --resolution H      Image height; width follows the camera aspect (default: 128)
    --samples S         Sub-pixel samples per axis, S*S per pixel (default: 2)
    --max-depth D       Maximum path length (default: 8)
    --roulette POLICY   unbiased, legacy or off (default: unbiased)
    --blurry            Enable blurry reflection
    --threads N         Worker threads (default: hardware count)
    --sequential        Render on the calling thread
    --seed SEED         Root seed of the per-pixel streams (default: 0)
    --envmap PATH       Optional latitude-longitude environment image
    --output OUTPUT     Output file path (default: pathtrace.png)
    --preview           Show the result in a Matplotlib window
    --verbose           Log per-row progress
    --quiet             Suppress progress output

Example:
    python -m examples.render_test_scene --scene 1 --resolution 96 --samples 3
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

ROULETTE_CHOICES = ("unbiased", "legacy", "off")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a built-in path tracing test scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--scene", type=int, default=0, help="Test scene number (default: 0)")
    parser.add_argument(
        "--resolution",
        type=int,
        default=128,
        help="Image height in pixels (default: 128)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=2,
        help="Sub-pixel samples per axis (default: 2)",
    )
    parser.add_argument("--max-depth", type=int, default=8, help="Maximum path length (default: 8)")
    parser.add_argument(
        "--roulette",
        choices=ROULETTE_CHOICES,
        default="unbiased",
        help="Russian roulette policy (default: unbiased)",
    )
    parser.add_argument("--blurry", action="store_true", help="Enable blurry reflection")
    parser.add_argument("--threads", type=int, default=None, help="Worker thread count")
    parser.add_argument("--sequential", action="store_true", help="Render on one thread")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument("--envmap", type=str, default=None, help="Environment image path")
    parser.add_argument(
        "--output",
        type=str,
        default="pathtrace.png",
        help="Output file path (default: pathtrace.png)",
    )
    parser.add_argument("--preview", action="store_true", help="Show a Matplotlib preview")
    parser.add_argument("--verbose", action="store_true", help="Log per-row progress")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output")
    return parser.parse_args()


def build_settings(args: argparse.Namespace):
    """Translate command-line options into RenderSettings."""
    from src.pathtrace.scene.scene import RenderSettings, RoulettePolicy

    policy = RoulettePolicy.LEGACY_DENSITY if args.roulette == "legacy" else RoulettePolicy.UNBIASED
    return RenderSettings(
        samples=args.samples,
        russian_roulette=args.roulette != "off",
        roulette_policy=policy,
        blurry_reflection=args.blurry,
        max_depth=args.max_depth,
        parallel=not args.sequential,
        num_threads=args.threads,
        seed=args.seed,
    )


def render_test_scene(args: argparse.Namespace) -> Path:
    """Render the selected scene and save it.

    Returns:
        Path to the saved image file.
    """
    from src.pathtrace.core.ray import vec3
    from src.pathtrace.core.renderer import PathTraceRenderer
    from src.pathtrace.materials.texture import Texture
    from src.pathtrace.preview.export import save_png
    from src.pathtrace.scene.test_scenes import create_test_scene

    scene = create_test_scene(args.scene)
    scene.settings = build_settings(args)
    scene.set_resolution(args.resolution)
    if args.envmap is not None:
        scene.background_txt = Texture.load(args.envmap)
        if not scene.has_environment:
            scene.background = vec3(1.0, 1.0, 1.0)

    if not args.quiet:
        print(f"Scene {args.scene}: {scene.summary()}")

    renderer = PathTraceRenderer(scene)
    start_time = time.time()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        if not args.quiet:
            pct = 100.0 * rows_done / total_rows if total_rows > 0 else 0.0
            print(
                f"\r  Progress: {rows_done}/{total_rows} rows ({pct:.1f}%)",
                end="",
                flush=True,
            )

    renderer.render(callback=progress_callback)

    if not args.quiet:
        print()

    output_file = Path(args.output)
    save_png(renderer, str(output_file), tone_map="none", gamma=2.2)

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    if args.preview:
        from src.pathtrace.preview.display import show_preview

        show_preview(renderer)

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    try:
        render_test_scene(args)
        return 0
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
