"""Pinhole camera model for primary ray generation.

The camera sits at a fixed position (the origin by default) and looks down
the negative Z axis. Each pixel center is mapped onto a virtual image plane
at unit distance:

    angle = tan(pi * 0.5 * fov / 180)
    xx = (2 * ((x + 0.5) / width) - 1) * angle * aspect_ratio
    yy = (1 - 2 * ((y + 0.5) / height)) * angle
    direction = normalize(xx, yy, -1)

Pixel (0, 0) is the top-left corner of the image.

``aspect_ratio`` is the true ratio ``width / height`` (4/3 at 640x480).
Renderers that divide the unsigned pixel counts get an integer ratio
(1 at 640x480) and a horizontally stretched view; this camera does not
reproduce that truncation.

The same mapping is available in pure Python (``PinholeCamera.ray_direction``)
for the reference tracer and as a Taichi function (``camera_ray_direction``)
for the parallel kernel. The Taichi function takes the camera parameters as
scalars so this module declares no Taichi fields.

Example:
    >>> from whitted.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera(width=640, height=480, fov=30.0)
    >>> direction = camera.ray_direction(320, 240)
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass

import taichi as ti

from whitted.core.ray import normalize, vec3
from whitted.core.vector import Vec3

# =============================================================================
# Camera Defaults
# =============================================================================

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480
DEFAULT_FOV = 30.0


# =============================================================================
# Camera Data Structure
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the fixed pinhole camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        fov: Vertical field of view in degrees.
        origin: Camera position in world space (x, y, z).
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fov: float = DEFAULT_FOV
    origin: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )
        if not 0.0 < self.fov < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {self.fov}")

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    @property
    def angle(self) -> float:
        """Half-height of the image plane at unit distance."""
        return math.tan(math.pi * 0.5 * self.fov / 180.0)

    @property
    def inv_width(self) -> float:
        return 1.0 / self.width

    @property
    def inv_height(self) -> float:
        return 1.0 / self.height

    def ray_origin(self) -> Vec3:
        """Return a fresh vector holding the camera position."""
        return Vec3(*self.origin)

    def ray_direction(self, x: int, y: int) -> Vec3:
        """Compute the normalized primary ray direction through pixel (x, y).

        Args:
            x: Pixel column (0 = left).
            y: Pixel row (0 = top).

        Returns:
            The unit direction from the camera through the pixel center.
        """
        angle = self.angle
        xx = (2.0 * ((x + 0.5) * self.inv_width) - 1.0) * angle * self.aspect_ratio
        yy = (1.0 - 2.0 * ((y + 0.5) * self.inv_height)) * angle
        direction = Vec3(xx, yy, -1.0)
        direction.normalize()
        return direction

    def primary_rays(self) -> Iterator[tuple[int, int, Vec3, Vec3]]:
        """Yield ``(x, y, origin, direction)`` for every pixel, top row first."""
        for y in range(self.height):
            for x in range(self.width):
                yield x, y, self.ray_origin(), self.ray_direction(x, y)


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def camera_ray_direction(
    x: ti.i32,
    y: ti.i32,
    inv_width: ti.f64,
    inv_height: ti.f64,
    angle: ti.f64,
    aspect_ratio: ti.f64,
) -> vec3:
    """Compute the normalized primary ray direction inside a Taichi kernel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        inv_width: 1 / image width.
        inv_height: 1 / image height.
        angle: Half-height of the image plane (see PinholeCamera.angle).
        aspect_ratio: Image width / height.

    Returns:
        The unit direction through the pixel center.
    """
    xx = (2.0 * ((ti.cast(x, ti.f64) + 0.5) * inv_width) - 1.0) * angle * aspect_ratio
    yy = (1.0 - 2.0 * ((ti.cast(y, ti.f64) + 0.5) * inv_height)) * angle
    return normalize(vec3(xx, yy, -1.0))
