"""Pytest configuration for whitted tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    A second ti.init() discards every field declared by the scene and
    integrator modules, so everything goes through the idempotent
    init_taichi().
    """
    from whitted.core.runtime import init_taichi

    init_taichi("cpu")
    yield


@pytest.fixture(autouse=True)
def clear_scene_data():
    """Clear the uploaded scene and the color buffer around each test."""
    # Import here so the fields are declared after Taichi is initialized
    from whitted.core.integrator import clear_render_target
    from whitted.scene.intersection import clear_scene

    clear_scene()
    clear_render_target()

    yield

    clear_scene()
    clear_render_target()


@pytest.fixture
def reference_spheres():
    """The six-sphere reference scene."""
    from whitted.scene.reference import create_reference_scene

    return create_reference_scene()
