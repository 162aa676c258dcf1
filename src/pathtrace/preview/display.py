"""Matplotlib-based preview of rendered images.

The path tracer produces linear HDR radiance with row 0 at the bottom of the
image. This module turns such buffers into displayable images:

    - Orientation fix (bottom-up buffer to top-down display array)
    - Tone mapping (Reinhard, exposure-based)
    - Gamma correction (sRGB 2.2)
    - Matplotlib preview and side-by-side comparison

Example:
    >>> from src.pathtrace.core.renderer import PathTraceRenderer
    >>> from src.pathtrace.preview.display import show_preview
    >>>
    >>> renderer = PathTraceRenderer(scene)
    >>> renderer.render()
    >>> show_preview(renderer, tone_map="reinhard")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Union

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from src.pathtrace.core.renderer import PathTraceRenderer

# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]

# Anything the preview functions can show
ImageSource = Union["PathTraceRenderer", npt.NDArray[np.floating]]


def get_display_image(source: ImageSource) -> npt.NDArray[np.float32]:
    """Get a linear, unclamped image in display orientation (row 0 on top).

    Args:
        source: A rendered PathTraceRenderer, or an array that is already in
            display orientation.

    Returns:
        Float32 array of shape (H, W, 3).

    Raises:
        ValueError: If an array does not have shape (H, W, 3).
        RuntimeError: If the renderer has not rendered yet.
    """
    if isinstance(source, np.ndarray):
        if source.ndim != 3 or source.shape[2] != 3:
            raise ValueError(f"Expected an image of shape (H, W, 3), got {source.shape}")
        return source.astype(np.float32)
    return np.flipud(source.get_image()).astype(np.float32)


def tone_map_reinhard(
    image: npt.NDArray[np.float32],
) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping: L / (1 + L)."""
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.float32],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Apply exposure-based tone mapping: 1 - exp(-c * exposure).

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        exposure: Exposure value. Higher values brighten the image.

    Returns:
        Tone mapped image in [0, 1) range.
    """
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 2.2,
) -> npt.NDArray[np.float32]:
    """Clamp to [0, 1] and gamma encode: out = in^(1/gamma).

    Gamma 1.0 returns the image unchanged.
    """
    if gamma == 1.0:
        return image
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Run the display pipeline: tone map, gamma encode, clamp to [0, 1].

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping.

    Returns:
        Processed float32 image in [0, 1] range.

    Raises:
        ValueError: If tone_map is not a known method.
    """
    result = image.copy()

    if tone_map == "reinhard":
        result = tone_map_reinhard(result)
    elif tone_map == "exposure":
        result = tone_map_exposure(result, exposure)
    elif tone_map != "none":
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def show_preview(
    source: ImageSource,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a render in a Matplotlib figure.

    Args:
        source: A rendered PathTraceRenderer or a display-oriented array.
        tone_map: Tone mapping method ("none", "reinhard", or "exposure").
        gamma: Gamma correction value (default 2.2 for sRGB).
        exposure: Exposure value for exposure tone mapping.
        title: Custom title; by default the title shows the resolution and,
            for a renderer, the samples per pixel.
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    image = get_display_image(source)
    display_image = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")

    if title is None:
        height, width = image.shape[:2]
        title = f"Path Trace - {width}x{height}"
        if not isinstance(source, np.ndarray):
            spp = source.scene.settings.samples ** 2
            title += f", {spp} SPP"
        if tone_map != "none":
            title += f" ({tone_map})"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.float32],
    image_b: npt.NDArray[np.float32],
    *,
    labels: tuple[str, str] = ("A", "B"),
    tone_map: ToneMapMethod = "none",
    gamma: float = 2.2,
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Show two display-oriented images and their amplified difference.

    Typically used to compare a parallel and a sequential render, or two
    roulette policies.

    Returns:
        RMSE between the two images in display space.

    Raises:
        ValueError: If the image shapes differ.
    """
    import matplotlib.pyplot as plt

    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    display_a = process_image_for_display(image_a, tone_map=tone_map, gamma=gamma)
    display_b = process_image_for_display(image_b, tone_map=tone_map, gamma=gamma)

    diff = display_a.astype(np.float64) - display_b.astype(np.float64)
    rmse = float(np.sqrt(np.mean(diff**2)))
    diff_amplified = np.clip(np.abs(diff) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)
    panels = [(display_a, labels[0]), (display_b, labels[1]),
              (diff_amplified, f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")]
    for ax, (panel, label) in zip(axes, panels):
        ax.imshow(panel)
        ax.set_title(label)
        ax.axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse
