"""Preview module for output and visualization.

Components:
    display: Tone mapping, gamma and Matplotlib preview
    export: PNG export via Pillow and image comparison

Example:
    >>> from src.pathtrace.preview import show_preview, save_png
    >>> from src.pathtrace.core.renderer import PathTraceRenderer
    >>>
    >>> renderer = PathTraceRenderer(scene)
    >>> renderer.render()
    >>> show_preview(renderer, tone_map="reinhard")
    >>> save_png(renderer, "output.png", gamma=2.2)
"""

from src.pathtrace.preview.display import (
    ToneMapMethod,
    apply_gamma,
    get_display_image,
    process_image_for_display,
    show_comparison,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from src.pathtrace.preview.export import (
    compute_rmse,
    image_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    # Display functions
    "show_preview",
    "show_comparison",
    "get_display_image",
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    # Export functions
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
]
