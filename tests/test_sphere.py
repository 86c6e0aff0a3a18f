"""Unit tests for the sphere primitive and its ray intersection.

Tests cover:
- Ray hitting a sphere from outside
- Ray missing a sphere
- Ray starting inside a sphere
- Sphere whose center lies behind the ray origin
- Tangent rays
"""

import math

import pytest

from whitted.core.vector import Vec3
from whitted.geometry.sphere import Sphere


def _sphere(center=(0.0, 0.0, -5.0), radius=1.0, **kwargs):
    return Sphere(Vec3(*center), radius, Vec3(1.0, 1.0, 1.0), **kwargs)


class TestSphereBasics:
    """Tests for the Sphere dataclass."""

    def test_radius2_is_cached(self):
        assert _sphere(radius=3.0).radius2 == 9.0

    def test_defaults(self):
        sphere = _sphere()
        assert sphere.reflection == 0.0
        assert sphere.transparency == 0.0
        assert sphere.emission_color == Vec3()
        assert not sphere.is_light
        assert not sphere.is_specular

    def test_is_light_uses_red_emission(self):
        assert _sphere(emission_color=Vec3(1.0, 0.0, 0.0)).is_light
        assert not _sphere(emission_color=Vec3(0.0, 1.0, 1.0)).is_light

    def test_is_specular(self):
        assert _sphere(reflection=1.0).is_specular
        assert _sphere(transparency=0.5).is_specular

    def test_frozen(self):
        sphere = _sphere()
        with pytest.raises(AttributeError):
            sphere.radius = 2.0


class TestSphereIntersection:
    """Tests for Sphere.intersect."""

    def test_direct_hit(self):
        hit, t0, t1 = _sphere().intersect(Vec3(), Vec3(0.0, 0.0, -1.0))
        assert hit
        assert t0 == pytest.approx(4.0)
        assert t1 == pytest.approx(6.0)

    def test_roots_lie_on_surface(self):
        sphere = _sphere(center=(1.0, 0.5, -8.0), radius=2.0)
        direction = Vec3(0.1, 0.05, -1.0)
        direction.normalize()
        hit, t0, t1 = sphere.intersect(Vec3(), direction)
        assert hit
        assert t0 <= t1
        for t in (t0, t1):
            point = direction * t
            assert (point - sphere.center).length() == pytest.approx(2.0)

    def test_miss(self):
        hit, t0, t1 = _sphere().intersect(Vec3(), Vec3(0.0, 1.0, 0.0))
        assert not hit
        assert math.isinf(t0) and math.isinf(t1)

    def test_sphere_behind_origin_is_missed(self):
        hit, _, _ = _sphere().intersect(Vec3(), Vec3(0.0, 0.0, 1.0))
        assert not hit

    def test_origin_at_center(self):
        """A ray starting at the center has a negative near root."""
        hit, t0, t1 = _sphere().intersect(Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, -1.0))
        assert hit
        assert t0 == pytest.approx(-1.0)
        assert t1 == pytest.approx(1.0)

    def test_origin_inside_past_center_is_missed(self):
        """The center projects behind the origin, so the sphere is rejected."""
        hit, _, _ = _sphere().intersect(Vec3(0.0, 0.0, -5.5), Vec3(0.0, 0.0, -1.0))
        assert not hit

    def test_tangent_ray_hits(self):
        hit, t0, t1 = _sphere().intersect(Vec3(1.0, 0.0, 0.0), Vec3(0.0, 0.0, -1.0))
        assert hit
        assert t0 == pytest.approx(5.0)
        assert t1 == pytest.approx(5.0)

    def test_nan_direction_reports_nan_roots(self):
        hit, t0, t1 = _sphere().intersect(Vec3(), Vec3(math.nan, math.nan, math.nan))
        assert hit
        assert math.isnan(t0) and math.isnan(t1)
