"""Camera module for primary ray generation.

Pixel (0, 0) is the top-left corner; the camera looks down the negative
Z axis with a vertical field of view of 30 degrees by default.
"""

from .pinhole import (
    DEFAULT_FOV,
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    PinholeCamera,
    camera_ray_direction,
)

__all__ = [
    "PinholeCamera",
    "camera_ray_direction",
    "DEFAULT_WIDTH",
    "DEFAULT_HEIGHT",
    "DEFAULT_FOV",
]
