"""Pytest configuration for sunray tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls, which would
    invalidate the module-level fields. 64-bit floats are required by every
    kernel.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_scene_data():
    """Clear loaded triangles before and after each test."""
    # Import here so Taichi is initialized before fields are declared
    from src.sunray.scene.intersection import clear_scene

    clear_scene()
    yield
    clear_scene()


@pytest.fixture
def facing_triangle():
    """Triangle in the plane z = 5 whose normal points along +z."""
    from src.sunray.core.vector import Vector
    from src.sunray.geometry.triangle import Triangle

    return Triangle(Vector(-1.0, -1.0, 5.0), Vector(1.0, -1.0, 5.0), Vector(0.0, 1.0, 5.0))
