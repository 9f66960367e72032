"""Pytest configuration for glint tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the module-level fields of already imported modules.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear world, materials and render target before and after each test."""
    # Import here so that Taichi is initialized before fields are allocated
    from glint.core.integrator import clear_render_target
    from glint.materials.material import clear_materials
    from glint.scene.world import clear_world

    def _clear_all():
        clear_world()
        clear_materials()
        clear_render_target()

    _clear_all()
    yield
    _clear_all()


@pytest.fixture
def default_camera():
    """Pinhole camera at the origin looking down -z, 90 degree vfov, 2:1."""
    from glint.camera.camera import Camera, setup_camera

    camera = Camera(
        look_from=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        view_up=(0.0, 1.0, 0.0),
        vfov=90.0,
        aspect_ratio=2.0,
        aperture=0.0,
        focus_distance=1.0,
    )
    setup_camera(camera)
    return camera
