"""Vector utilities for the Taichi tracing kernels.

This module provides the Taichi-side counterparts of the reference tracer's
vector math. All helpers are ``@ti.func`` and work in double precision:
the ground sphere of the reference scene has a radius of 1e4, which leaves
single precision intersection roots far less accurate than the 1e-4 ray
bias.

Taichi must be initialized with ``default_fp=ti.f64`` so that literals and
``float`` annotations inside kernels match the f64 fields.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.core.ray import normalize, ray_at, vec3
"""

import taichi as ti

# Double precision 3D vector used by every kernel
vec3 = ti.types.vector(3, ti.f64)


@ti.func
def ray_at(origin: vec3, direction: vec3, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        origin: The ray origin.
        direction: The ray direction.
        t: The parameter value.

    Returns:
        The point origin + direction * t.
    """
    return origin + direction * t


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Unlike ``ti.math.normalize`` a zero-length vector is returned unchanged
    instead of producing NaN.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or v itself if its
        squared length is not positive.
    """
    result = v
    nor2 = v.dot(v)
    if nor2 > 0.0:
        result = v * (1.0 / ti.sqrt(nor2))
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident direction about a normal and normalize it.

    Args:
        incident: The incoming direction (pointing toward the surface).
        normal: The surface normal facing the incoming ray.

    Returns:
        The unit reflected direction.
    """
    return normalize(incident - normal * 2.0 * incident.dot(normal))


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f64) -> vec3:
    """Refract an incident direction through a surface and normalize it.

    Total internal reflection is not guarded: the square root of a negative
    discriminant yields NaN, and a NaN direction misses every sphere.

    Args:
        incident: The incoming direction (normalized).
        normal: The surface normal facing the incoming ray.
        eta: Ratio of refractive indices (incident side / transmitted side).

    Returns:
        The unit refracted direction, NaN under total internal reflection.
    """
    cosi = -normal.dot(incident)
    k = 1.0 - eta * eta * (1.0 - cosi * cosi)
    return normalize(incident * eta + normal * (eta * cosi - ti.sqrt(k)))


@ti.func
def mix(a: ti.f64, b: ti.f64, t: ti.f64) -> ti.f64:
    """Linear blend: returns a when t == 0 and b when t == 1."""
    return b * t + a * (1.0 - t)
