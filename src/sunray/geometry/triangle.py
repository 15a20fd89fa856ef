"""Triangle primitive, its plane equation, and ray-triangle helpers.

A triangle is three vertices (v1, v2, v3). The vertex order fixes the normal:

    normal = normalize((v1 - v2) x (v1 - v3))

Its plane is stored as (a, b, c, k) with a*x + b*y + c*z + k = 0 and (a, b, c)
the unit normal. Planes are derived once when a scene is built.

Ray-triangle intersection is done in two steps:
1. Intersect the ray with the triangle's plane:
       lambda = -(normal . origin + k) / (normal . direction)
   Only lambda > 0 (a forward intersection) counts.
2. Check the plane point lies inside the triangle with the same-side test:
   for each edge, the point and the vertex opposite the edge must be strictly
   on the same side. Points exactly on an edge are treated as outside.

Host-side (Triangle, Plane) and kernel-side (plane_intersection, same_side,
point_in_triangle) versions are provided. The kernel versions operate on the
per-triangle Taichi fields in src.sunray.scene.intersection.

Example:
    >>> from src.sunray.core.vector import Vector
    >>> from src.sunray.geometry.triangle import Plane, Triangle
    >>> tri = Triangle(Vector(-1, -1, 5), Vector(1, -1, 5), Vector(0, 1, 5))
    >>> Plane.from_triangle(tri)
    Plane(a=0.0, b=0.0, c=1.0, k=-5.0)
"""

import math
from dataclasses import dataclass

import taichi as ti

from src.sunray.core.ray import Ray, cross, dot, ray_at, vec3
from src.sunray.core.vector import DegenerateVectorError, Vector


class DegenerateTriangleError(ValueError):
    """Raised when a triangle has zero area and therefore no plane."""


@dataclass(frozen=True)
class Triangle:
    """A triangle defined by three vertices.

    Attributes:
        v1: First vertex.
        v2: Second vertex.
        v3: Third vertex.
    """

    v1: Vector
    v2: Vector
    v3: Vector

    def vertices(self) -> tuple[Vector, Vector, Vector]:
        return (self.v1, self.v2, self.v3)

    def raw_normal(self) -> Vector:
        """Unnormalized normal (v1 - v2) x (v1 - v3)."""
        return (self.v1 - self.v2).cross_product(self.v1 - self.v3)

    def contains(self, point: Vector) -> bool:
        """Check whether a point in the triangle's plane lies strictly inside it."""
        return (
            _same_side(point, self.v1, self.v2, self.v3)
            and _same_side(point, self.v2, self.v1, self.v3)
            and _same_side(point, self.v3, self.v1, self.v2)
        )


def _same_side(point: Vector, opposite: Vector, edge_start: Vector, edge_end: Vector) -> bool:
    """Host-side same-side test for one edge (see same_side)."""
    edge = edge_start - edge_end
    side_point = edge.cross_product(point - edge_end)
    side_opposite = edge.cross_product(opposite - edge_end)
    return side_point.dot_product(side_opposite) > 0.0


@dataclass(frozen=True)
class Plane:
    """Plane a*x + b*y + c*z + k = 0 with (a, b, c) of unit length.

    Attributes:
        a: X component of the unit normal.
        b: Y component of the unit normal.
        c: Z component of the unit normal.
        k: Plane constant.
    """

    a: float
    b: float
    c: float
    k: float

    @classmethod
    def from_triangle(cls, triangle: Triangle) -> "Plane":
        """Derive the plane containing a triangle.

        Raises:
            DegenerateTriangleError: If the triangle has zero area.
        """
        try:
            normal = triangle.raw_normal().normalized()
        except DegenerateVectorError as e:
            raise DegenerateTriangleError(f"Triangle {triangle} has zero area") from e
        k = -normal.dot_product(triangle.v1)
        return cls(normal.dx, normal.dy, normal.dz, k)

    def normal(self) -> Vector:
        return Vector(self.a, self.b, self.c)

    def evaluate(self, point: Vector) -> float:
        """Signed distance of point from the plane."""
        return self.normal().dot_product(point) + self.k

    def intersection(self, origin: Vector, direction: Vector) -> tuple[Vector, bool]:
        """Intersect the ray origin + lambda * direction with this plane.

        Args:
            origin: Ray origin.
            direction: Ray direction (need not be normalized).

        Returns:
            Tuple of (point, is_forward). is_forward is True only when the
            intersection lies strictly ahead of the origin. For a ray parallel
            to the plane, lambda is NaN, so the point has NaN components and
            is_forward is False.
        """
        denom = self.normal().dot_product(direction)
        if denom == 0.0:
            lam = math.nan
        else:
            lam = -self.evaluate(origin) / denom
        point = origin + direction * lam
        is_forward = math.isfinite(lam) and lam > 0.0
        return point, is_forward


# =============================================================================
# Kernel-side helpers
# =============================================================================


@ti.func
def plane_intersection(normal: vec3, k: ti.f64, ray: Ray):
    """Intersect a ray with the plane normal . p + k = 0.

    Args:
        normal: Unit plane normal.
        k: Plane constant.
        ray: The ray to intersect.

    Returns:
        Tuple of (point, is_forward) where is_forward is 1 only for an
        intersection strictly ahead of the ray origin. A ray parallel to the
        plane gives is_forward == 0 and the ray origin as point.
    """
    denom = dot(normal, ray.direction)
    point = ray.origin
    is_forward = 0
    if denom != 0.0:
        lam = -(dot(normal, ray.origin) + k) / denom
        if lam > 0.0:
            point = ray_at(ray, lam)
            is_forward = 1
    return point, is_forward


@ti.func
def same_side(point: vec3, opposite: vec3, edge_start: vec3, edge_end: vec3) -> ti.i32:
    """Check that point and opposite are strictly on the same side of an edge.

    Compares the directions of edge x (point - edge_end) and
    edge x (opposite - edge_end). A point on the edge line gives a zero cross
    product and fails the test.

    Returns:
        1 if both lie strictly on the same side, 0 otherwise.
    """
    edge = edge_start - edge_end
    side_point = cross(edge, point - edge_end)
    side_opposite = cross(edge, opposite - edge_end)
    return dot(side_point, side_opposite) > 0.0


@ti.func
def point_in_triangle(point: vec3, v1: vec3, v2: vec3, v3: vec3) -> ti.i32:
    """Same-side containment test against all three edges.

    Returns:
        1 if point lies strictly inside the triangle, 0 otherwise.
    """
    inside = 0
    if same_side(point, v1, v2, v3) and same_side(point, v2, v1, v3) and same_side(point, v3, v1, v2):
        inside = 1
    return inside
