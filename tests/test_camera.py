"""Tests for the pinhole camera.

Tests cover:
- Camera validation
- Primary ray directions in Python and in a Taichi kernel
- Pixel traversal order
"""

import math

import pytest
import taichi as ti

from whitted.camera.pinhole import PinholeCamera


def _expected_direction(x, y, width, height, fov):
    angle = math.tan(math.pi * 0.5 * fov / 180.0)
    xx = (2.0 * ((x + 0.5) / width) - 1.0) * angle * (width / height)
    yy = (1.0 - 2.0 * ((y + 0.5) / height)) * angle
    norm = math.sqrt(xx * xx + yy * yy + 1.0)
    return (xx / norm, yy / norm, -1.0 / norm)


class TestPinholeCamera:
    """Tests for PinholeCamera."""

    def test_defaults(self):
        camera = PinholeCamera()
        assert camera.width == 640
        assert camera.height == 480
        assert camera.fov == 30.0
        assert camera.aspect_ratio == pytest.approx(4.0 / 3.0)
        assert camera.angle == pytest.approx(math.tan(math.pi / 12.0))

    def test_aspect_ratio_is_not_truncated(self):
        """640x480 uses 4/3, not the integer quotient 640 // 480 == 1."""
        camera = PinholeCamera()
        assert camera.aspect_ratio == pytest.approx(4.0 / 3.0)

        direction = camera.ray_direction(0, 0)
        assert direction.to_tuple() == pytest.approx((-0.32580, 0.24422, -0.91335), abs=1e-5)

        angle = math.tan(math.pi / 12.0)
        xx = (2.0 * (0.5 / 640) - 1.0) * angle * (640 // 480)
        yy = (1.0 - 2.0 * (0.5 / 480)) * angle
        norm = math.sqrt(xx * xx + yy * yy + 1.0)
        assert direction.x != pytest.approx(xx / norm, abs=1e-3)

    @pytest.mark.parametrize("width,height", [(0, 480), (640, 0), (-1, 10)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(ValueError):
            PinholeCamera(width=width, height=height)

    @pytest.mark.parametrize("fov", [0.0, 180.0, -30.0])
    def test_invalid_fov(self, fov):
        with pytest.raises(ValueError):
            PinholeCamera(fov=fov)

    def test_top_left_pixel_direction(self):
        camera = PinholeCamera()
        direction = camera.ray_direction(0, 0)
        assert direction.to_tuple() == pytest.approx(_expected_direction(0, 0, 640, 480, 30.0))
        assert direction.x < 0 and direction.y > 0

    def test_bottom_right_pixel_direction(self):
        camera = PinholeCamera()
        direction = camera.ray_direction(639, 479)
        assert direction.x > 0 and direction.y < 0
        assert direction.length() == pytest.approx(1.0)

    def test_center_pixel_points_forward(self):
        direction = PinholeCamera(width=3, height=3).ray_direction(1, 1)
        assert direction.to_tuple() == pytest.approx((0.0, 0.0, -1.0))

    def test_ray_origin_is_fresh(self):
        camera = PinholeCamera(origin=(1.0, 2.0, 3.0))
        a = camera.ray_origin()
        a.x = 10.0
        assert camera.ray_origin().to_tuple() == (1.0, 2.0, 3.0)

    def test_primary_rays_order(self):
        rays = list(PinholeCamera(width=4, height=3).primary_rays())
        assert len(rays) == 12
        assert [(x, y) for x, y, _, _ in rays[:5]] == [(0, 0), (1, 0), (2, 0), (3, 0), (0, 1)]


class TestCameraRayDirectionKernel:
    """Tests for the Taichi version of the primary ray mapping."""

    @pytest.mark.parametrize(
        "module_name",
        [
            "whitted.camera.pinhole",
            "whitted.core.ray",
            "whitted.scene.intersection",
            "whitted.core.integrator",
        ],
    )
    def test_taichi_modules_keep_real_annotations(self, module_name):
        """Taichi rejects string annotations on ti.func/ti.kernel parameters."""
        import importlib

        module = importlib.import_module(module_name)
        assert "annotations" not in vars(module)

    def test_package_and_cli_import(self):
        from whitted.camera import camera_ray_direction
        from whitted.cli import main

        assert callable(camera_ray_direction)
        assert callable(main)

    def test_matches_python(self):
        from whitted.camera.pinhole import camera_ray_direction

        camera = PinholeCamera(width=64, height=48, fov=45.0)
        result = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def compute(x: ti.i32, y: ti.i32):
            result[None] = camera_ray_direction(
                x, y, camera.inv_width, camera.inv_height, camera.angle, camera.aspect_ratio
            )

        for x, y in [(0, 0), (63, 0), (17, 29), (63, 47)]:
            compute(x, y)
            expected = camera.ray_direction(x, y).to_tuple()
            assert tuple(result[None]) == pytest.approx(expected, abs=1e-12)
