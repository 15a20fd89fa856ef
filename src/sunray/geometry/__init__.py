"""Geometry module for triangle primitives.

Components:
    triangle: Triangle and Plane value types, plane derivation, and the
        kernel-side plane intersection and same-side containment tests

Ray-triangle intersection follows the pattern:
    point, is_forward = plane_intersection(normal, k, ray)
    inside = point_in_triangle(point, v1, v2, v3)
"""

from .triangle import (
    DegenerateTriangleError,
    Plane,
    Triangle,
    plane_intersection,
    point_in_triangle,
    same_side,
)

__all__ = [
    "Triangle",
    "Plane",
    "DegenerateTriangleError",
    "plane_intersection",
    "point_in_triangle",
    "same_side",
]
