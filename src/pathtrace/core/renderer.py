"""Image rendering driver for the path tracer.

This module turns a Scene into an image buffer:

- render_rows: renders an interleaved set of rows (the unit of work of one
  worker), S x S jittered sub-samples per pixel
- pathtrace: allocates the image and the per-pixel random streams, then
  renders either on a pool of worker threads or on the calling thread
- PathTraceRenderer: a convenience wrapper holding the scene and the last
  rendered image, with NumPy/uint8 accessors and PNG export

Worker t of T renders rows t, t + T, t + 2T, ... and receives exclusive
slices of the image buffer and of the random streams for exactly those rows,
so no pixel or stream is ever touched by two threads and no locking is
needed. Each pixel owns its random stream, so the image only depends on the
scene and its seed, never on the number of threads or on scheduling.

Example:
    >>> from src.pathtrace.core.renderer import PathTraceRenderer
    >>> from src.pathtrace.scene.test_scenes import create_test_scene
    >>>
    >>> scene = create_test_scene(0)
    >>> renderer = PathTraceRenderer(scene)
    >>> renderer.render()
    >>> image = renderer.get_image_numpy(gamma=2.2)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import numpy.typing as npt

from src.pathtrace.camera.pinhole import get_ray_jittered
from src.pathtrace.core.integrator import pathtrace_ray
from src.pathtrace.core.ray import zero3
from src.pathtrace.core.sampler import RandomStream, RngImage
from src.pathtrace.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


def render_rows(
    scene: Scene,
    image_rows: npt.NDArray[np.float64],
    rng_rows: Sequence[Sequence[RandomStream]],
    offset_row: int,
    skip_row: int,
    callback: ProgressCallback | None = None,
) -> None:
    """Render every skip_row-th image row starting at offset_row.

    Args:
        scene: The scene (read-only).
        image_rows: Writable view of the rows to fill, shape (rows, width, 3);
            image_rows[k] is image row offset_row + k * skip_row.
        rng_rows: The random streams of the same rows.
        offset_row: Index of the first row.
        skip_row: Stride between consecutive rows.
        callback: Optional progress callback, called after each row with
            (rows_done, total_rows) as estimated from this worker's position.
    """
    camera = scene.camera
    width, height = scene.image_width, scene.image_height
    samples = scene.settings.samples
    norm = 1.0 / (samples * samples)

    for k, (row, rngs) in enumerate(zip(image_rows, rng_rows)):
        j = offset_row + k * skip_row
        logger.debug("rendering row %d/%d", j, height)
        for i in range(width):
            rng = rngs[i]
            color = zero3()
            for jj in range(samples):
                for ii in range(samples):
                    jitter = (rng.next_float(), rng.next_float())
                    ray = get_ray_jittered(camera, i, j, ii, jj, samples, width, height, jitter)
                    color += pathtrace_ray(scene, ray, rng, 0)
            row[i] = color * norm
        if callback is not None:
            callback(min(j + skip_row, height), height)


def row_partition(height: int, nthreads: int) -> list[range]:
    """Return the rows rendered by each of nthreads workers."""
    return [range(t, height, nthreads) for t in range(nthreads)]


def pathtrace(
    scene: Scene,
    parallel: bool | None = None,
    num_threads: int | None = None,
    callback: ProgressCallback | None = None,
) -> npt.NDArray[np.float64]:
    """Render the scene into a new image buffer.

    Args:
        scene: The scene to render. It must not be modified during the render.
        parallel: Render on worker threads. Defaults to scene.settings.parallel.
        num_threads: Number of workers. Defaults to scene.settings.num_threads,
            or the hardware thread count when that is None.
        callback: Optional progress callback. In parallel mode it is only
            called by the first worker.

    Returns:
        Linear RGB image of shape (height, width, 3). Row 0 is the bottom of
        the image.

    Raises:
        ValueError: If num_threads is not positive.
    """
    settings = scene.settings
    if parallel is None:
        parallel = settings.parallel
    if num_threads is None:
        num_threads = settings.thread_count
    if num_threads < 1:
        raise ValueError(f"num_threads must be at least 1, got {num_threads}")

    width, height = scene.image_width, scene.image_height
    image = np.zeros((height, width, 3), dtype=np.float64)
    rngs = RngImage(width, height, settings.seed)

    nthreads = min(num_threads, height) if parallel else 1
    logger.info(
        "rendering %dx%d, %d spp, %d thread(s)",
        width,
        height,
        settings.samples * settings.samples,
        nthreads,
    )
    start_time = time.perf_counter()

    if nthreads > 1:
        with ThreadPoolExecutor(max_workers=nthreads, thread_name_prefix="pathtrace") as executor:
            futures = [
                executor.submit(
                    render_rows,
                    scene,
                    image[rows.start :: rows.step],
                    rngs.rows[rows.start :: rows.step],
                    rows.start,
                    rows.step,
                    callback if rows.start == 0 else None,
                )
                for rows in row_partition(height, nthreads)
            ]
            for future in futures:
                future.result()
    else:
        render_rows(scene, image, rngs.rows, 0, 1, callback)

    logger.info("rendering done in %.2fs", time.perf_counter() - start_time)
    return image


class PathTraceRenderer:
    """Renders a scene and keeps the resulting image.

    Attributes:
        scene: The scene being rendered.
    """

    def __init__(self, scene: Scene) -> None:
        """Initialize the renderer.

        Args:
            scene: The scene to render.
        """
        self.scene = scene
        self._image: npt.NDArray[np.float64] | None = None

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.scene.image_width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.scene.image_height

    @property
    def is_rendered(self) -> bool:
        return self._image is not None

    def reset(self) -> None:
        """Discard the rendered image."""
        self._image = None

    def render(
        self,
        parallel: bool | None = None,
        num_threads: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.float64]:
        """Render the scene, replacing any previous image.

        See pathtrace() for the arguments.

        Returns:
            The linear image buffer (bottom row first).
        """
        self._image = pathtrace(self.scene, parallel, num_threads, callback)
        return self._image

    def get_image(self) -> npt.NDArray[np.float64]:
        """Get the raw linear image buffer (row 0 is the bottom row).

        Raises:
            RuntimeError: If nothing has been rendered yet.
        """
        if self._image is None:
            raise RuntimeError("Nothing rendered yet. Call render() first.")
        return self._image

    def get_image_numpy(self, gamma: float = 1.0) -> npt.NDArray[np.float32]:
        """Get the rendered image as a NumPy array in display orientation.

        Returns the image with row 0 at the top, values clamped to [0, 1] and
        optionally gamma corrected. The array shape is (height, width, 3).

        Args:
            gamma: Gamma correction value. Default 1.0 (linear).
                Use 2.2 for sRGB display.

        Returns:
            NumPy array of shape (height, width, 3) with dtype float32.
        """
        image = np.clip(np.flipud(self.get_image()), 0.0, 1.0)

        if gamma != 1.0:
            image = np.power(image, 1.0 / gamma)

        return image.astype(np.float32)

    def get_image_uint8(self, gamma: float = 2.2) -> npt.NDArray[np.uint8]:
        """Get the rendered image as an 8-bit NumPy array.

        Args:
            gamma: Gamma correction value. Default 2.2 for sRGB.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        image = self.get_image_numpy(gamma=gamma)
        return (image * 255).astype(np.uint8)

    def save_image(self, filepath: str, gamma: float = 2.2) -> None:
        """Save the rendered image to a file.

        Args:
            filepath: Path to save the image (e.g., "output.png").
            gamma: Gamma correction value. Default 2.2 for sRGB.
        """
        from PIL import Image as PILImage

        pil_image = PILImage.fromarray(self.get_image_uint8(gamma=gamma))
        pil_image.save(filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"PathTraceRenderer(width={self.width}, height={self.height}, "
            f"samples={self.scene.settings.samples}, rendered={self.is_rendered})"
        )
