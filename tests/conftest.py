"""Pytest configuration for spheretrace tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Empty the sphere and material arenas around each test.

    Kernels read whatever was uploaded last, so tests that upload directly
    must not see another test's data.
    """
    # Import here so the Taichi fields are created after ti.init()
    from spheretrace.materials.material import clear_materials
    from spheretrace.scene.intersection import clear_spheres

    clear_spheres()
    clear_materials()

    yield

    clear_spheres()
    clear_materials()
