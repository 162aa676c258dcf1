"""Image export utilities for rendered images.

Renders are written as 8-bit sRGB PNG files through Pillow, after the same
tone mapping and gamma pipeline the preview uses. Textures and environment
maps are read back through Texture.load.

Example:
    >>> from src.pathtrace.preview.export import save_png
    >>>
    >>> renderer = PathTraceRenderer(scene)
    >>> renderer.render()
    >>> save_png(renderer, "output.png", tone_map="reinhard")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.pathtrace.preview.display import (
    ToneMapMethod,
    get_display_image,
    process_image_for_display,
)

if TYPE_CHECKING:
    from src.pathtrace.core.renderer import PathTraceRenderer

logger = logging.getLogger(__name__)


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to uint8 with tone mapping and gamma.

    Values are rounded to the nearest 8-bit level.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping.

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    return np.round(processed * 255.0).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save a display-oriented linear image as an 8-bit PNG.

    Args:
        image: Linear HDR image array of shape (H, W, 3), row 0 on top.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping.
    """
    image_uint8 = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(image_uint8).save(filepath)
    logger.info("saved %dx%d image to %s", image_uint8.shape[1], image_uint8.shape[0], filepath)


def save_png(
    renderer: PathTraceRenderer,
    filepath: str,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save the renderer's image as an 8-bit PNG.

    Unlike PathTraceRenderer.save_image, the HDR values are tone mapped
    before clamping.

    Raises:
        RuntimeError: If the renderer has not rendered yet.
    """
    save_png_from_array(
        get_display_image(renderer),
        filepath,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
