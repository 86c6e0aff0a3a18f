"""Geometry module: the sphere primitive.

Ray-sphere intersection uses the geometric solution:
    hit, t0, t1 = sphere.intersect(origin, direction)

The Taichi counterpart lives in whitted.scene.intersection.
"""

from .sphere import Sphere, SphereHit

__all__ = [
    "Sphere",
    "SphereHit",
]
