"""Recursive Whitted-style tracer (pure Python reference).

``trace`` follows one ray through a list of spheres and returns its color:

1. Find the nearest sphere hit by the ray. Rays that hit nothing return the
   background color (2, 2, 2), deliberately outside the displayable range.
2. Reflective or transparent surfaces spawn a reflection ray and, when
   transparent, a refraction ray. Both are traced recursively and blended
   with a Fresnel-like weight, then tinted by the surface color.
3. Other surfaces are lit directly by every light sphere that is not
   occluded (binary shadows).
4. The hit sphere's emission is added on top.

Recursion stops at ``MAX_RAY_DEPTH``: past it, every surface is shaded as
diffuse.

The scene is passed explicitly and never modified, so independent pixels can
be traced in any order. The Taichi kernel in ``whitted.core.integrator``
implements the same algorithm for parallel rendering.

Example:
    >>> from whitted.camera.pinhole import PinholeCamera
    >>> from whitted.core.tracer import trace
    >>> from whitted.scene.reference import create_reference_scene
    >>> spheres = create_reference_scene()
    >>> camera = PinholeCamera()
    >>> color = trace(camera.ray_origin(), camera.ray_direction(320, 240), spheres, 0)
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from whitted.core.vector import Vec3
from whitted.geometry.sphere import Sphere

if TYPE_CHECKING:
    from whitted.camera.pinhole import PinholeCamera

# =============================================================================
# Tracing Constants
# =============================================================================

# Maximum recursion depth for reflection/refraction rays
MAX_RAY_DEPTH = 5

# Offset along the normal for secondary ray origins
BIAS = 1e-4

# Index of refraction of every transparent sphere
INDEX_OF_REFRACTION = 1.1

# Initial nearest-hit distance
FAR_DISTANCE = 1e8

# Color returned by rays that escape the scene (every channel)
BACKGROUND_VALUE = 2.0

# Weight of full reflection in the Fresnel blend
FRESNEL_MIX = 0.1

# Called with (rows_done, total_rows) after each rendered row
RowCallback = Callable[[int, int], None]


def mix(a: float, b: float, t: float) -> float:
    """Linear blend: returns ``a`` when ``t == 0`` and ``b`` when ``t == 1``."""
    return b * t + a * (1 - t)


def _sqrt_or_nan(value: float) -> float:
    # math.sqrt raises on negative input; float arithmetic yields NaN instead.
    return math.sqrt(value) if value >= 0 else math.nan


def find_nearest(
    origin: Vec3,
    direction: Vec3,
    spheres: Sequence[Sphere],
) -> tuple[Sphere | None, float]:
    """Find the sphere hit first by a ray.

    When the ray starts inside a sphere the far root is used. The candidate
    distance is compared against the running minimum without discarding
    negative values, and ties keep the earlier sphere.

    Args:
        origin: The ray origin.
        direction: The unit ray direction.
        spheres: The scene.

    Returns:
        A tuple of (sphere, distance); sphere is None when nothing is hit.
    """
    tnear = FAR_DISTANCE
    nearest = None
    for sphere in spheres:
        hit, t0, t1 = sphere.intersect(origin, direction)
        if hit:
            if t0 < 0:
                t0 = t1
            if t0 < tnear:
                tnear = t0
                nearest = sphere
    return nearest, tnear


def is_occluded(
    origin: Vec3,
    direction: Vec3,
    spheres: Sequence[Sphere],
    light_index: int,
) -> bool:
    """Test whether any sphere other than the light blocks a shadow ray.

    Occlusion is binary and does not check whether the blocker lies beyond
    the light.
    """
    for j, sphere in enumerate(spheres):
        if j != light_index and sphere.intersect(origin, direction).hit:
            return True
    return False


def shade_diffuse(
    sphere: Sphere,
    hit_point: Vec3,
    normal: Vec3,
    spheres: Sequence[Sphere],
) -> Vec3:
    """Sum the direct illumination from every visible light sphere."""
    surface_color = Vec3()
    shadow_origin = hit_point + normal * BIAS
    for i, light in enumerate(spheres):
        if not light.is_light:
            continue
        light_direction = light.center - hit_point
        light_direction.normalize()
        transmission = 0.0 if is_occluded(shadow_origin, light_direction, spheres, i) else 1.0
        surface_color = surface_color + (
            sphere.surface_color
            * transmission
            * max(0.0, normal.dot(light_direction))
            * light.emission_color
        )
    return surface_color


def trace(origin: Vec3, direction: Vec3, spheres: Sequence[Sphere], depth: int) -> Vec3:
    """Trace a ray through the scene and return its color.

    Args:
        origin: The ray origin.
        direction: The ray direction. Must be unit length.
        spheres: The scene, read only.
        depth: Recursion depth of this ray (0 for primary rays).

    Returns:
        The RGB color carried back along the ray. Channels are not clamped.
    """
    sphere, tnear = find_nearest(origin, direction, spheres)
    if sphere is None:
        return Vec3.full(BACKGROUND_VALUE)

    hit_point = origin + direction * tnear
    normal = hit_point - sphere.center
    normal.normalize()
    inside = False
    if direction.dot(normal) > 0:
        normal = -normal
        inside = True

    if sphere.is_specular and depth < MAX_RAY_DEPTH:
        facing_ratio = -direction.dot(normal)
        fresnel = mix(math.pow(1 - facing_ratio, 3), 1, FRESNEL_MIX)

        reflection_direction = direction - normal * 2.0 * direction.dot(normal)
        reflection_direction.normalize()
        reflection = trace(hit_point + normal * BIAS, reflection_direction, spheres, depth + 1)

        refraction = Vec3()
        if abs(sphere.transparency) > 0:
            eta = INDEX_OF_REFRACTION if inside else 1 / INDEX_OF_REFRACTION
            cosi = -normal.dot(direction)
            k = 1 - eta * eta * (1 - cosi * cosi)
            refraction_direction = direction * eta + normal * (eta * cosi - _sqrt_or_nan(k))
            refraction_direction.normalize()
            refraction = trace(hit_point - normal * BIAS, refraction_direction, spheres, depth + 1)

        surface_color = (
            reflection * fresnel + refraction * (1 - fresnel) * sphere.transparency
        ) * sphere.surface_color
    else:
        surface_color = shade_diffuse(sphere, hit_point, normal, spheres)

    return surface_color + sphere.emission_color


def render_reference(
    spheres: Sequence[Sphere],
    camera: PinholeCamera,
    callback: RowCallback | None = None,
) -> npt.NDArray[np.float64]:
    """Render a full image with the pure Python tracer.

    Args:
        spheres: The scene.
        camera: The camera (image size and field of view).
        callback: Optional callback called after each row with
            (rows_done, total_rows).

    Returns:
        Linear float64 image of shape (height, width, 3), top row first.
    """
    image = np.zeros((camera.height, camera.width, 3), dtype=np.float64)
    for y in range(camera.height):
        for x in range(camera.width):
            color = trace(camera.ray_origin(), camera.ray_direction(x, y), spheres, 0)
            image[y, x] = color.to_tuple()
        if callback is not None:
            callback(y + 1, camera.height)
    return image
