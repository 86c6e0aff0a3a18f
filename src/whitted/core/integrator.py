"""Whitted ray tracing integrator running as a parallel Taichi kernel.

This module implements the same shading algorithm as the reference tracer in
``whitted.core.tracer`` and evaluates it for every pixel in parallel.

Taichi functions cannot recurse, so the reflection/refraction recursion is
converted to an explicit stack of pending rays. The tracer's result is linear
in the colors of its secondary rays:

    color = reflection * (fresnel * surface)
          + refraction * ((1 - fresnel) * transparency * surface)
          + local

so each pending ray carries a weight (the product of those factors from the
primary ray down to it) and its color is accumulated as weight * color. At
most one sibling per level is pending at a time, which bounds the stack to
MAX_RAY_DEPTH + 1 entries.

Key features:
    - Nearest-hit search with the reference tie-breaking
    - Fresnel-weighted reflection and refraction up to MAX_RAY_DEPTH
    - Diffuse direct lighting from emissive spheres with binary shadows
    - Row-batched rendering for progress reporting

Note:
    This module declares Taichi fields at import time. Import it only after
    ``ti.init()`` has been called (see ``whitted.core.runtime.init_taichi``).

Example:
    >>> from whitted.core.runtime import init_taichi
    >>> init_taichi()
    >>> from whitted.camera.pinhole import PinholeCamera
    >>> from whitted.core.integrator import render_image, setup_render_target
    >>> from whitted.scene.intersection import upload_scene
    >>> from whitted.scene.reference import create_reference_scene
    >>>
    >>> upload_scene(create_reference_scene())
    >>> setup_render_target(PinholeCamera())
    >>> render_image()
"""

import numpy as np
import numpy.typing as npt
import taichi as ti

from whitted.camera.pinhole import PinholeCamera, camera_ray_direction
from whitted.core.ray import mix, normalize, ray_at, reflect, refract, vec3
from whitted.core.tracer import (
    BACKGROUND_VALUE,
    BIAS,
    FRESNEL_MIX,
    INDEX_OF_REFRACTION,
    MAX_RAY_DEPTH,
)
from whitted.scene.intersection import (
    is_occluded,
    nearest_hit,
    num_spheres,
    sphere_centers,
    sphere_emission_colors,
    sphere_reflections,
    sphere_surface_colors,
    sphere_transparencies,
)

# Pending rays per pixel: one sibling per level plus the two children
# pushed by the deepest specular hit.
STACK_SIZE = MAX_RAY_DEPTH + 1

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Color buffer indexed [row, column], row 0 at the top of the image
_color_buffer = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

# Camera parameters for the active render target
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())
_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_inv_width = ti.field(dtype=ti.f64, shape=())
_inv_height = ti.field(dtype=ti.f64, shape=())
_angle = ti.field(dtype=ti.f64, shape=())
_aspect_ratio = ti.field(dtype=ti.f64, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(camera: PinholeCamera) -> None:
    """Initialize the render target for a camera.

    Sets the active image dimensions and camera parameters and clears the
    color buffer.

    Args:
        camera: The camera to render from.

    Raises:
        ValueError: If the image exceeds MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.
    """
    if camera.width > MAX_IMAGE_WIDTH or camera.height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({camera.width}x{camera.height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = camera.width
    _image_height[None] = camera.height
    _camera_origin[None] = camera.origin
    _inv_width[None] = camera.inv_width
    _inv_height[None] = camera.inv_height
    _angle[None] = camera.angle
    _aspect_ratio[None] = camera.aspect_ratio
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the color buffer to zero."""
    _color_buffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _shade_diffuse(index: ti.i32, hit_point: vec3, normal: vec3) -> vec3:
    """Sum the direct illumination of a diffuse hit from every visible light.

    Args:
        index: Index of the hit sphere.
        hit_point: The intersection point.
        normal: The surface normal facing the incoming ray.

    Returns:
        The diffuse surface color.
    """
    surface_color = vec3(0.0, 0.0, 0.0)
    shadow_origin = hit_point + normal * BIAS
    albedo = sphere_surface_colors[index]

    for i in range(num_spheres[None]):
        emission = sphere_emission_colors[i]
        if emission[0] > 0.0:
            light_direction = normalize(sphere_centers[i] - hit_point)
            transmission = 1.0
            if is_occluded(shadow_origin, light_direction, i) == 1:
                transmission = 0.0
            surface_color += (
                albedo * transmission * ti.max(0.0, normal.dot(light_direction)) * emission
            )

    return surface_color


@ti.func
def trace_ray(origin: vec3, direction: vec3) -> vec3:
    """Trace a primary ray and all of its secondary rays.

    Args:
        origin: The ray origin.
        direction: The unit ray direction.

    Returns:
        The RGB color of the ray, not clamped.
    """
    color = vec3(0.0, 0.0, 0.0)

    # Pending rays: rows are stack slots
    origins = ti.Matrix.zero(ti.f64, STACK_SIZE, 3)
    directions = ti.Matrix.zero(ti.f64, STACK_SIZE, 3)
    weights = ti.Matrix.zero(ti.f64, STACK_SIZE, 3)
    depths = ti.Vector.zero(ti.i32, STACK_SIZE)

    for c in ti.static(range(3)):
        origins[0, c] = origin[c]
        directions[0, c] = direction[c]
        weights[0, c] = 1.0
    depths[0] = 0
    top = 1

    while top > 0:
        top -= 1
        ray_origin = vec3(origins[top, 0], origins[top, 1], origins[top, 2])
        ray_direction = vec3(directions[top, 0], directions[top, 1], directions[top, 2])
        weight = vec3(weights[top, 0], weights[top, 1], weights[top, 2])
        depth = depths[top]

        index, tnear = nearest_hit(ray_origin, ray_direction)
        if index < 0:
            color += weight * BACKGROUND_VALUE
        else:
            hit_point = ray_at(ray_origin, ray_direction, tnear)
            normal = normalize(hit_point - sphere_centers[index])
            inside = 0
            if ray_direction.dot(normal) > 0.0:
                normal = -normal
                inside = 1

            reflection = sphere_reflections[index]
            transparency = sphere_transparencies[index]
            surface = sphere_surface_colors[index]

            if (reflection > 0.0 or transparency > 0.0) and depth < MAX_RAY_DEPTH:
                facing_ratio = -ray_direction.dot(normal)
                fresnel = mix((1.0 - facing_ratio) ** 3, 1.0, FRESNEL_MIX)

                reflection_origin = hit_point + normal * BIAS
                reflection_direction = reflect(ray_direction, normal)
                reflection_weight = weight * surface * fresnel
                for c in ti.static(range(3)):
                    origins[top, c] = reflection_origin[c]
                    directions[top, c] = reflection_direction[c]
                    weights[top, c] = reflection_weight[c]
                depths[top] = depth + 1
                top += 1

                if ti.abs(transparency) > 0.0:
                    eta = 1.0 / INDEX_OF_REFRACTION
                    if inside == 1:
                        eta = INDEX_OF_REFRACTION
                    refraction_origin = hit_point - normal * BIAS
                    refraction_direction = refract(ray_direction, normal, eta)
                    refraction_weight = weight * surface * ((1.0 - fresnel) * transparency)
                    for c in ti.static(range(3)):
                        origins[top, c] = refraction_origin[c]
                        directions[top, c] = refraction_direction[c]
                        weights[top, c] = refraction_weight[c]
                    depths[top] = depth + 1
                    top += 1
            else:
                color += weight * _shade_diffuse(index, hit_point, normal)

            color += weight * sphere_emission_colors[index]

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_rows(row_start: ti.i32, row_end: ti.i32, width: ti.i32):
    """Trace one primary ray per pixel for rows [row_start, row_end).

    Args:
        row_start: First row to render (0 = top).
        row_end: One past the last row to render.
        width: Image width in pixels.
    """
    for y, x in ti.ndrange((row_start, row_end), width):
        direction = camera_ray_direction(
            x, y, _inv_width[None], _inv_height[None], _angle[None], _aspect_ratio[None]
        )
        _color_buffer[y, x] = trace_ray(_camera_origin[None], direction)


@ti.kernel
def _render_single_pixel(x: ti.i32, y: ti.i32) -> vec3:
    """Trace the primary ray of one pixel without touching the color buffer."""
    direction = camera_ray_direction(
        x, y, _inv_width[None], _inv_height[None], _angle[None], _aspect_ratio[None]
    )
    return trace_ray(_camera_origin[None], direction)


@ti.kernel
def _trace_single_ray(
    ox: ti.f64, oy: ti.f64, oz: ti.f64, dx: ti.f64, dy: ti.f64, dz: ti.f64
) -> vec3:
    """Trace an arbitrary ray through the uploaded scene."""
    return trace_ray(vec3(ox, oy, oz), vec3(dx, dy, dz))


# =============================================================================
# Public Rendering API
# =============================================================================


def render_rows(row_start: int, row_end: int) -> None:
    """Render a band of rows into the color buffer.

    Args:
        row_start: First row to render (0 = top).
        row_end: One past the last row; clipped to the image height.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    row_end = min(row_end, height)
    if row_start < row_end:
        _render_rows(row_start, row_end, width)


def render_image() -> None:
    """Render every pixel of the image into the color buffer.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    _, height = get_image_dimensions()
    render_rows(0, height)


def render_pixel(x: int, y: int) -> tuple[float, float, float]:
    """Render the primary ray of a single pixel.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    color = _render_single_pixel(x, y)
    return (float(color[0]), float(color[1]), float(color[2]))


def trace_single_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[float, float, float]:
    """Trace one ray through the uploaded scene.

    Args:
        origin: The ray origin.
        direction: The ray direction. Must be unit length.

    Returns:
        Tuple of (R, G, B) color values.
    """
    color = _trace_single_ray(
        origin[0], origin[1], origin[2], direction[0], direction[1], direction[2]
    )
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.float64]:
    """Get the rendered image as a NumPy array.

    The values are linear and unclamped. The array shape is
    (height, width, 3), top row first.

    Returns:
        NumPy array of shape (height, width, 3) with dtype float64.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()
    return np.ascontiguousarray(full_image[:height, :width, :], dtype=np.float64)
