"""Renderer wrapping the Taichi integrator.

This module provides a convenient wrapper around the integrator that supports:
- Uploading the scene and configuring the camera in one place
- Rendering in row batches with progress callbacks
- Exporting the result as PPM or PNG

Example:
    >>> from whitted.core.runtime import init_taichi
    >>> init_taichi()
    >>> from whitted.camera.pinhole import PinholeCamera
    >>> from whitted.core.renderer import Renderer
    >>> from whitted.scene.reference import create_reference_scene
    >>>
    >>> renderer = Renderer(create_reference_scene(), PinholeCamera())
    >>> renderer.render()
    >>> renderer.save("out.ppm")
"""

from __future__ import annotations

from collections.abc import Callable, Generator, Sequence
from pathlib import Path

import numpy as np
import numpy.typing as npt

from whitted.camera.pinhole import PinholeCamera
from whitted.core.integrator import (
    clear_render_target,
    get_image_numpy,
    render_pixel,
    render_rows,
    setup_render_target,
)
from whitted.geometry.sphere import Sphere
from whitted.preview.export import image_to_uint8, save_image
from whitted.scene.intersection import upload_scene

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders a sphere scene through the parallel Taichi kernel.

    The renderer owns the global integrator state (scene fields and render
    target), so only one Renderer should be active at a time.

    Attributes:
        camera: The camera used for primary rays.
        spheres: The scene, in nearest-hit order.
    """

    def __init__(self, spheres: Sequence[Sphere], camera: PinholeCamera) -> None:
        """Upload the scene and set up the render target.

        Args:
            spheres: The scene.
            camera: The camera (image size and field of view).

        Raises:
            ValueError: If the image exceeds the maximum supported size.
            RuntimeError: If the scene has too many spheres.
        """
        self.camera = camera
        self.spheres = list(spheres)
        setup_render_target(camera)
        upload_scene(self.spheres)
        self._rows_done = 0

    @property
    def width(self) -> int:
        """Get the image width."""
        return self.camera.width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self.camera.height

    @property
    def is_complete(self) -> bool:
        """Whether every row has been rendered."""
        return self._rows_done >= self.height

    def reset(self) -> None:
        """Clear the color buffer so the next render starts from the top row."""
        clear_render_target()
        self._rows_done = 0

    def render(
        self,
        batch_rows: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the whole image.

        Args:
            batch_rows: Number of rows per kernel launch. None renders the
                image in a single launch.
            callback: Optional callback function called after each batch.
                Receives (rows_done, total_rows).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} rows")
            >>> renderer.render(batch_rows=48, callback=progress)
        """
        for done, total in self.render_progressive(batch_rows):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        batch_rows: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the image band by band, yielding progress after each band.

        This is a generator-based alternative to render() with callbacks.

        Args:
            batch_rows: Number of rows per kernel launch. None renders the
                image in a single launch.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If batch_rows is not positive.
        """
        if batch_rows is None:
            batch_rows = self.height
        if batch_rows <= 0:
            raise ValueError(f"batch_rows must be positive, got {batch_rows}")

        self.reset()
        while self._rows_done < self.height:
            row_end = min(self._rows_done + batch_rows, self.height)
            render_rows(self._rows_done, row_end)
            self._rows_done = row_end
            yield (self._rows_done, self.height)

    def render_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Trace the primary ray of one pixel and return its color."""
        return render_pixel(x, y)

    def get_image_numpy(self) -> npt.NDArray[np.float64]:
        """Get the linear, unclamped image of shape (height, width, 3)."""
        return get_image_numpy()

    def get_image_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the quantized 8-bit image of shape (height, width, 3)."""
        return image_to_uint8(self.get_image_numpy())

    def save(self, filepath: str | Path) -> None:
        """Save the rendered image (PNG for .png paths, PPM otherwise).

        Raises:
            OSError: If the file cannot be written.
        """
        save_image(self.get_image_numpy(), filepath)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"spheres={len(self.spheres)}, rows_done={self._rows_done})"
        )
