"""Tests for the Taichi Whitted integrator.

The kernel traces rays with an explicit stack instead of recursion; these
tests check it against the recursive reference tracer.
"""

import math

import numpy as np
import pytest

from whitted.camera.pinhole import PinholeCamera
from whitted.core.tracer import BACKGROUND_VALUE, render_reference, trace
from whitted.core.vector import Vec3
from whitted.geometry.sphere import Sphere

WHITE = Vec3(1.0, 1.0, 1.0)


def _light(center, emission=1.0):
    return Sphere(Vec3(*center), 1.0, Vec3(), emission_color=Vec3.full(emission))


def _trace_both(spheres, origin, direction):
    from whitted.core.integrator import trace_single_ray
    from whitted.scene.intersection import upload_scene

    upload_scene(spheres)
    expected = trace(Vec3(*origin), Vec3(*direction), spheres, 0).to_tuple()
    actual = trace_single_ray(origin, direction)
    return actual, expected


class TestRenderTarget:
    """Tests for render target setup."""

    def test_setup_dimensions(self):
        from whitted.core.integrator import get_image_dimensions, setup_render_target

        setup_render_target(PinholeCamera(width=40, height=30))
        assert get_image_dimensions() == (40, 30)

    def test_too_large(self):
        from whitted.core.integrator import MAX_IMAGE_WIDTH, setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(PinholeCamera(width=MAX_IMAGE_WIDTH + 1, height=10))

    def test_image_shape(self):
        from whitted.core.integrator import get_image_numpy, setup_render_target

        setup_render_target(PinholeCamera(width=7, height=5))
        image = get_image_numpy()
        assert image.shape == (5, 7, 3)
        assert image.dtype == np.float64
        assert np.all(image == 0.0)


class TestTraceRay:
    """Single-ray agreement with the reference tracer."""

    def test_empty_scene_background(self):
        actual, _ = _trace_both([], (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert actual == (BACKGROUND_VALUE, BACKGROUND_VALUE, BACKGROUND_VALUE)

    def test_diffuse_lit(self):
        surface = Sphere(Vec3(0.0, 0.0, -5.0), 1.0, Vec3(0.5, 0.25, 1.0))
        spheres = [surface, _light((0.0, 0.0, 10.0))]
        actual, expected = _trace_both(spheres, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert actual == pytest.approx(expected)
        assert actual == pytest.approx((0.5, 0.25, 1.0))

    def test_shadowed(self):
        spheres = [
            Sphere(Vec3(0.0, 0.0, -5.0), 1.0, WHITE),
            Sphere(Vec3(0.0, 0.0, 3.0), 1.0, WHITE),
            _light((0.0, 0.0, 10.0)),
        ]
        actual, _ = _trace_both(spheres, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert actual == pytest.approx((0.0, 0.0, 0.0))

    def test_emission(self):
        spheres = [_light((0.0, 0.0, -10.0), 3.0)]
        actual, _ = _trace_both(spheres, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert actual == pytest.approx((3.0, 3.0, 3.0))

    def test_reflective_head_on(self):
        spheres = [Sphere(Vec3(0.0, 0.0, -5.0), 1.0, WHITE, reflection=1.0)]
        actual, expected = _trace_both(spheres, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert actual == pytest.approx((0.2, 0.2, 0.2))
        assert actual == pytest.approx(expected)

    def test_mutual_reflection_terminates(self):
        spheres = [
            Sphere(Vec3(0.0, 0.0, -5.0), 1.0, WHITE, reflection=1.0),
            Sphere(Vec3(0.0, 0.0, 5.0), 1.0, WHITE, reflection=1.0),
        ]
        actual, _ = _trace_both(spheres, (0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert actual == pytest.approx((0.0, 0.0, 0.0))

    def test_total_internal_reflection(self):
        spheres = [Sphere(Vec3(0.0, 0.0, -5.0), 1.0, WHITE, transparency=1.0)]
        actual, expected = _trace_both(spheres, (0.0, 0.95, -5.0), (0.0, 0.0, -1.0))
        assert all(math.isfinite(c) for c in actual)
        assert actual == pytest.approx(expected, rel=1e-6, abs=1e-6)

    def test_reference_scene_rays(self, reference_spheres):
        """Rays through the glass sphere exercise the full reflection/refraction tree."""
        camera = PinholeCamera(width=64, height=48)
        for x, y in [(32, 24), (30, 20), (40, 30), (10, 40), (50, 26), (20, 24), (0, 0)]:
            direction = camera.ray_direction(x, y).to_tuple()
            actual, expected = _trace_both(reference_spheres, (0.0, 0.0, 0.0), direction)
            assert actual == pytest.approx(expected, rel=1e-6, abs=1e-6)


class TestRenderImage:
    """Whole-image rendering."""

    def test_render_pixel_matches_buffer(self, reference_spheres):
        from whitted.core.integrator import (
            get_image_numpy,
            render_image,
            render_pixel,
            setup_render_target,
        )
        from whitted.scene.intersection import upload_scene

        upload_scene(reference_spheres)
        setup_render_target(PinholeCamera(width=16, height=12))
        render_image()
        image = get_image_numpy()
        assert render_pixel(8, 6) == pytest.approx(tuple(image[6, 8]))

    def test_render_without_setup_raises(self):
        from whitted.core import integrator

        integrator._render_target_initialized[None] = 0
        with pytest.raises(RuntimeError):
            integrator.render_image()

    def test_matches_reference_image(self, reference_spheres):
        from whitted.core.integrator import get_image_numpy, render_image, setup_render_target
        from whitted.preview.export import compute_rmse
        from whitted.scene.intersection import upload_scene

        camera = PinholeCamera(width=32, height=24)
        upload_scene(reference_spheres)
        setup_render_target(camera)
        render_image()
        actual = get_image_numpy()
        expected = render_reference(reference_spheres, camera)

        assert np.all(np.isfinite(actual))
        assert compute_rmse(actual, expected) < 1e-3
        close = np.isclose(actual, expected, rtol=1e-6, atol=1e-6).all(axis=2)
        assert close.mean() > 0.98

    def test_render_rows_partial(self, reference_spheres):
        from whitted.core.integrator import get_image_numpy, render_rows, setup_render_target
        from whitted.scene.intersection import upload_scene

        upload_scene(reference_spheres)
        setup_render_target(PinholeCamera(width=16, height=12))
        render_rows(0, 1)
        image = get_image_numpy()
        # The top row looks above every sphere
        assert np.allclose(image[0], BACKGROUND_VALUE)
        assert np.all(image[1:] == 0.0)
