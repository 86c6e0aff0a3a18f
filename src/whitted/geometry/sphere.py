"""Sphere primitive with material properties and geometric ray intersection.

Spheres carry their own shading parameters (surface color, reflection,
transparency, emission), so a scene is simply an ordered list of spheres.
A sphere acts as a light source when the red channel of its emission is
positive.

The intersection test uses the geometric solution: project the vector from
the ray origin to the center onto the ray direction, reject spheres behind
the origin, then compare the squared distance between the center and the
ray against the squared radius.

Example:
    >>> from whitted.core.vector import Vec3
    >>> from whitted.geometry.sphere import Sphere
    >>> sphere = Sphere(Vec3(0.0, 0.0, -5.0), 1.0, Vec3(1.0, 0.0, 0.0))
    >>> sphere.intersect(Vec3(), Vec3(0.0, 0.0, -1.0))
    SphereHit(hit=True, t0=4.0, t1=6.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import NamedTuple

from whitted.core.vector import Vec3


class SphereHit(NamedTuple):
    """Result of a ray-sphere intersection test.

    Attributes:
        hit: Whether the ray intersects the sphere.
        t0: Distance to the near root. Negative when the ray starts inside.
        t1: Distance to the far root. Always ``t0 <= t1``.
    """

    hit: bool
    t0: float
    t1: float


_MISS = SphereHit(False, math.inf, math.inf)


@dataclass(frozen=True)
class Sphere:
    """A sphere with its surface material.

    Attributes:
        center: Position of the sphere center.
        radius: Sphere radius (positive).
        surface_color: Diffuse/tint color, components nominally in [0, 1].
        reflection: Reflection coefficient, nominally in [0, 1].
        transparency: Transparency coefficient, nominally in [0, 1].
        emission_color: Emitted light. A positive red channel makes the
            sphere a light source.
        radius2: Cached ``radius * radius``.
    """

    center: Vec3
    radius: float
    surface_color: Vec3
    reflection: float = 0.0
    transparency: float = 0.0
    emission_color: Vec3 = field(default_factory=Vec3)
    radius2: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "radius2", self.radius * self.radius)

    @property
    def is_light(self) -> bool:
        """Whether this sphere illuminates diffuse surfaces."""
        return self.emission_color.x > 0

    @property
    def is_specular(self) -> bool:
        """Whether rays hitting this sphere spawn reflection/refraction rays."""
        return self.reflection > 0 or self.transparency > 0

    def intersect(self, origin: Vec3, direction: Vec3) -> SphereHit:
        """Intersect a ray with this sphere.

        Spheres whose center projects behind the ray origin are reported as
        missed, even when the origin lies inside the sphere.

        Args:
            origin: The ray origin.
            direction: The ray direction. Must be unit length.

        Returns:
            A SphereHit with both roots when the ray intersects.
        """
        to_center = self.center - origin
        tca = to_center.dot(direction)
        if tca < 0:
            return _MISS
        d2 = to_center.dot(to_center) - tca * tca
        if d2 > self.radius2:
            return _MISS
        thc = math.sqrt(self.radius2 - d2)
        return SphereHit(True, tca - thc, tca + thc)
