"""Reference six-sphere scene.

The scene consists of:
- A huge gray sphere acting as the ground plane
- A red reflective and half-transparent glass-like sphere in the middle
- Yellow, blue and white fully reflective spheres around it
- A small sphere above the others emitting light (the only light source)

Example:
    >>> from whitted.scene.reference import create_reference_scene
    >>> spheres = create_reference_scene()
    >>> [sphere.is_light for sphere in spheres]
    [False, False, False, False, False, True]
"""

from __future__ import annotations

from whitted.core.vector import Vec3
from whitted.geometry.sphere import Sphere

# =============================================================================
# Reference Scene Constants
# =============================================================================

GROUND_RADIUS = 10000.0
GROUND_CENTER = (0.0, -10004.0, -20.0)
GROUND_COLOR = (0.20, 0.20, 0.20)

LIGHT_CENTER = (0.0, 20.0, -30.0)
LIGHT_RADIUS = 3.0
LIGHT_EMISSION = 3.0


def create_reference_scene() -> list[Sphere]:
    """Create the reference scene.

    Returns:
        The ordered sphere list: ground, glass, yellow, blue, white, light.
    """
    return [
        Sphere(Vec3(*GROUND_CENTER), GROUND_RADIUS, Vec3(*GROUND_COLOR), 0.0, 0.0),
        Sphere(Vec3(0.0, 0.0, -20.0), 4.0, Vec3(1.00, 0.32, 0.36), 1.0, 0.5),
        Sphere(Vec3(5.0, -1.0, -15.0), 2.0, Vec3(0.90, 0.76, 0.46), 1.0, 0.0),
        Sphere(Vec3(5.0, 0.0, -25.0), 3.0, Vec3(0.65, 0.77, 0.97), 1.0, 0.0),
        Sphere(Vec3(-5.5, 0.0, -15.0), 3.0, Vec3(0.90, 0.90, 0.90), 1.0, 0.0),
        Sphere(
            Vec3(*LIGHT_CENTER),
            LIGHT_RADIUS,
            Vec3(0.0, 0.0, 0.0),
            0.0,
            0.0,
            Vec3.full(LIGHT_EMISSION),
        ),
    ]
