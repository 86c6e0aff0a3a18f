"""Three-component vector used for points, directions and RGB colors.

This is the pure Python vector type used by the reference tracer. Every
arithmetic operator returns a new vector; ``normalize`` is the single
in-place operation.

Example:
    >>> from whitted.core.vector import Vec3
    >>> v = Vec3(3.0, 4.0, 0.0)
    >>> v.length()
    5.0
    >>> v.normalize()
    >>> v
    Vec3(0.6000000000000001, 0.8, 0.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterator


class Vec3:
    """A 3D vector with x, y, z components.

    Multiplying by a number scales the vector; multiplying by another
    ``Vec3`` multiplies component-wise (used to tint colors).

    Attributes:
        x: First component (red channel for colors).
        y: Second component (green channel for colors).
        z: Third component (blue channel for colors).
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self.x = x
        self.y = y
        self.z = z

    @classmethod
    def full(cls, value: float) -> Vec3:
        """Create a vector with all three components set to ``value``."""
        return cls(value, value, value)

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, other: Vec3 | float) -> Vec3:
        if isinstance(other, Vec3):
            return Vec3(self.x * other.x, self.y * other.y, self.z * other.z)
        return Vec3(self.x * other, self.y * other, self.z * other)

    def __rmul__(self, other: float) -> Vec3:
        return Vec3(self.x * other, self.y * other, self.z * other)

    def dot(self, other: Vec3) -> float:
        """Return the dot product with ``other``."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def length_squared(self) -> float:
        """Return the squared Euclidean length."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def length(self) -> float:
        """Return the Euclidean length."""
        return math.sqrt(self.length_squared())

    def normalize(self) -> None:
        """Scale this vector to unit length in place.

        A zero-length vector is left unchanged. NaN components are left
        as they are since the squared length comparison fails.
        """
        nor2 = self.length_squared()
        if nor2 > 0:
            inv_nor = 1.0 / math.sqrt(nor2)
            self.x *= inv_nor
            self.y *= inv_nor
            self.z *= inv_nor

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vec3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Vec3({self.x}, {self.y}, {self.z})"
