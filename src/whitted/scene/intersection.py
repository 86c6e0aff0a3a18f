"""Scene storage and ray-sphere queries for the Taichi kernels.

The scene is uploaded once per render into Taichi fields (Structure of
Arrays layout) and stays read-only while the kernel runs, so every pixel can
query it in parallel.

The queries mirror ``Sphere.intersect`` and ``find_nearest`` from the
reference tracer, comparison for comparison, including the strict ``<``
tie-breaking and the use of raw (possibly negative) distances.

Note:
    This module declares Taichi fields at import time. Importing it before
    ``init_taichi()`` raises RuntimeError instead of letting Taichi
    auto-initialize with single precision defaults.

Example:
    >>> from whitted.core.runtime import init_taichi
    >>> init_taichi()
    >>> from whitted.scene.intersection import upload_scene
    >>> from whitted.scene.reference import create_reference_scene
    >>> upload_scene(create_reference_scene())
"""

from collections.abc import Sequence

import taichi as ti

from whitted.core.ray import vec3
from whitted.core.runtime import is_initialized
from whitted.core.tracer import FAR_DISTANCE
from whitted.geometry.sphere import Sphere

if not is_initialized():
    raise RuntimeError(
        "Taichi is not initialized. Call whitted.core.runtime.init_taichi() "
        "before importing the scene or integrator modules."
    )

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii2 = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_surface_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_reflections = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_transparencies = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_emission_colors = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(sphere: Sphere) -> int:
    """Append a sphere to the scene.

    Args:
        sphere: The sphere to store.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = sphere.center.to_tuple()
    sphere_radii2[idx] = sphere.radius2
    sphere_surface_colors[idx] = sphere.surface_color.to_tuple()
    sphere_reflections[idx] = sphere.reflection
    sphere_transparencies[idx] = sphere.transparency
    sphere_emission_colors[idx] = sphere.emission_color.to_tuple()
    num_spheres[None] = idx + 1
    return idx


def upload_scene(spheres: Sequence[Sphere]) -> None:
    """Replace the stored scene with ``spheres``, keeping their order.

    Raises:
        RuntimeError: If the scene has more than MAX_SPHERES spheres.
    """
    if len(spheres) > MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    clear_scene()
    for sphere in spheres:
        add_sphere(sphere)


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def hit_sphere(origin: vec3, direction: vec3, index: ti.i32):
    """Intersect a ray with the stored sphere at ``index``.

    Uses the geometric solution. Spheres whose center projects behind the
    ray origin are missed. NaN inputs fail both rejection tests and report
    a hit with NaN roots.

    Args:
        origin: The ray origin.
        direction: The unit ray direction.
        index: Index of the sphere in the scene fields.

    Returns:
        A tuple (hit, t0, t1) where hit is 1 on intersection and t0 <= t1.
    """
    hit = 0
    t0 = ti.cast(FAR_DISTANCE, ti.f64)
    t1 = ti.cast(FAR_DISTANCE, ti.f64)

    to_center = sphere_centers[index] - origin
    tca = to_center.dot(direction)
    radius2 = sphere_radii2[index]
    d2 = to_center.dot(to_center) - tca * tca

    behind = tca < 0.0
    outside = d2 > radius2
    if not (behind or outside):
        thc = ti.sqrt(radius2 - d2)
        t0 = tca - thc
        t1 = tca + thc
        hit = 1

    return hit, t0, t1


@ti.func
def nearest_hit(origin: vec3, direction: vec3):
    """Find the sphere hit first by a ray.

    When the ray starts inside a sphere the far root is used. Distances are
    compared with strict ``<`` in scene order, so ties keep the earlier
    sphere and a negative distance may win.

    Args:
        origin: The ray origin.
        direction: The unit ray direction.

    Returns:
        A tuple (index, t) where index is -1 if nothing was hit.
    """
    tnear = ti.cast(FAR_DISTANCE, ti.f64)
    nearest = -1

    for i in range(num_spheres[None]):
        hit, t0, t1 = hit_sphere(origin, direction, i)
        if hit == 1:
            t = t0
            if t0 < 0.0:
                t = t1
            if t < tnear:
                tnear = t
                nearest = i

    return nearest, tnear


@ti.func
def is_occluded(origin: vec3, direction: vec3, light_index: ti.i32) -> ti.i32:
    """Test whether any sphere other than the light blocks a shadow ray.

    Args:
        origin: The shadow ray origin (already offset from the surface).
        direction: The unit direction toward the light center.
        light_index: Index of the light sphere, skipped by the test.

    Returns:
        1 if some other sphere intersects the ray, 0 otherwise.
    """
    occluded = 0

    for j in range(num_spheres[None]):
        if occluded == 0 and j != light_index:
            hit, _, _ = hit_sphere(origin, direction, j)
            if hit == 1:
                occluded = 1

    return occluded
