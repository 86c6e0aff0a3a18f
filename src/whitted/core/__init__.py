"""Core rendering module.

Components:
    vector: Vec3 arithmetic for points, directions and colors
    tracer: Recursive pure Python Whitted tracer (the reference)
    ray: Taichi vector utilities used by the kernels
    runtime: Taichi initialization (f64, IEEE semantics)
    integrator: Parallel Taichi kernel tracing every pixel
    renderer: Renderer wrapper with batched rendering and export
"""

from .tracer import (
    BACKGROUND_VALUE,
    BIAS,
    INDEX_OF_REFRACTION,
    MAX_RAY_DEPTH,
    find_nearest,
    mix,
    render_reference,
    trace,
)
from .vector import Vec3

# Note: integrator and renderer are NOT imported here because they declare
# Taichi fields at import time. Call whitted.core.runtime.init_taichi() first,
# then import whitted.core.renderer or whitted.core.integrator directly.

__all__ = [
    "Vec3",
    "trace",
    "find_nearest",
    "mix",
    "render_reference",
    "MAX_RAY_DEPTH",
    "BIAS",
    "INDEX_OF_REFRACTION",
    "BACKGROUND_VALUE",
]
