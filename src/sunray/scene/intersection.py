"""Scene-level ray-triangle intersection searches.

This module stores the scene's triangles and planes in Taichi fields and
provides the two searches every pixel needs:

- intersect_scene: closest forward, in-triangle hit along a ray. Candidates
  behind the origin or outside their triangle get distance +inf so they can
  never win. Among valid candidates the smallest squared distance from the
  origin wins, and an exact tie keeps the lowest triangle index.
- intersect_scene_any: visibility-only query for shadow rays. Stops at the
  first forward, in-triangle hit on any triangle except one skipped index.

Both are brute-force linear scans over all triangles; there is no
acceleration structure.

Inside kernels a miss is reported as index -1. Host-side callers use
closest_hit(), which returns a Hit or None.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.sunray.scene.intersection import closest_hit, load_scene
    >>> load_scene(scene)
    >>> closest_hit(Vector(0, 0, 0), Vector(0, 0, 1))
    Hit(triangle_index=0, point=Vector(dx=0.0, dy=0.0, dz=5.0))
"""

import logging
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.sunray.core.ray import Ray, length_squared, make_ray
from src.sunray.core.vector import Vector
from src.sunray.geometry.triangle import plane_intersection, point_in_triangle
from src.sunray.scene.scene import Scene

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Hit:
    """Nearest valid intersection of a ray with the scene.

    Attributes:
        triangle_index: Index of the hit triangle in Scene.triangles.
        point: World-space intersection point.
    """

    triangle_index: int
    point: Vector


# Maximum number of triangles supported in the scene
MAX_TRIANGLES = 1 << 16

# Triangle storage: Structure of Arrays layout
tri_v1 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TRIANGLES)
tri_v2 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TRIANGLES)
tri_v3 = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TRIANGLES)

# Plane storage, index-aligned with the triangles
plane_normals = ti.Vector.field(3, dtype=ti.f64, shape=MAX_TRIANGLES)
plane_k = ti.field(dtype=ti.f64, shape=MAX_TRIANGLES)

num_triangles = ti.field(dtype=ti.i32, shape=())

# Single-ray query inputs and outputs
_query_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_query_direction = ti.Vector.field(3, dtype=ti.f64, shape=())
_query_skip = ti.field(dtype=ti.i32, shape=())
_query_index = ti.field(dtype=ti.i32, shape=())
_query_point = ti.Vector.field(3, dtype=ti.f64, shape=())

# Scene whose data currently occupies the fields
_loaded_scene: Scene | None = None


def clear_scene() -> None:
    """Remove all triangles.

    The field data is not cleared but will be overwritten by the next load.
    """
    global _loaded_scene
    num_triangles[None] = 0
    _loaded_scene = None


def load_scene(scene: Scene) -> None:
    """Upload a scene's triangles and planes.

    Args:
        scene: The scene to upload. Any previously loaded triangles are
            replaced.

    Raises:
        RuntimeError: If the scene has more than MAX_TRIANGLES triangles.
    """
    global _loaded_scene
    count = len(scene.triangles)
    if count > MAX_TRIANGLES:
        raise RuntimeError(f"Maximum number of triangles ({MAX_TRIANGLES}) exceeded: {count}")

    vertices = np.zeros((3, MAX_TRIANGLES, 3), dtype=np.float64)
    normals = np.zeros((MAX_TRIANGLES, 3), dtype=np.float64)
    constants = np.zeros(MAX_TRIANGLES, dtype=np.float64)

    for idx, (tri, plane) in enumerate(zip(scene.triangles, scene.planes)):
        vertices[0, idx] = tri.v1.to_tuple()
        vertices[1, idx] = tri.v2.to_tuple()
        vertices[2, idx] = tri.v3.to_tuple()
        normals[idx] = (plane.a, plane.b, plane.c)
        constants[idx] = plane.k

    tri_v1.from_numpy(vertices[0])
    tri_v2.from_numpy(vertices[1])
    tri_v3.from_numpy(vertices[2])
    plane_normals.from_numpy(normals)
    plane_k.from_numpy(constants)
    num_triangles[None] = count
    _loaded_scene = scene
    logger.info("Loaded %d triangles", count)


def is_scene_loaded(scene: Scene) -> bool:
    """Check whether scene is the one currently uploaded by load_scene()."""
    return _loaded_scene is scene


def get_triangle_count() -> int:
    """Get the number of triangles currently loaded."""
    return int(num_triangles[None])


@ti.func
def _candidate(t: ti.i32, ray: Ray):
    """Intersect one triangle and score it.

    Returns:
        Tuple of (distance_squared, point). distance_squared is +inf when the
        plane intersection is behind the origin, the ray is parallel to the
        plane, or the point is outside the triangle.
    """
    point, is_forward = plane_intersection(plane_normals[t], plane_k[t], ray)
    dist2 = ti.cast(tm.inf, ti.f64)
    if is_forward == 1 and point_in_triangle(point, tri_v1[t], tri_v2[t], tri_v3[t]) == 1:
        dist2 = length_squared(point - ray.origin)
    return dist2, point


@ti.func
def intersect_scene(ray: Ray):
    """Find the nearest triangle hit along a ray.

    Args:
        ray: The ray to trace.

    Returns:
        Tuple of (triangle_index, point). triangle_index is -1 on a miss, in
        which case point is meaningless.
    """
    closest_index = -1
    closest_dist2 = ti.cast(tm.inf, ti.f64)
    closest_point = ray.origin

    for t in range(num_triangles[None]):
        dist2, point = _candidate(t, ray)
        # Strictly smaller only, so equal distances keep the lower index
        if dist2 < closest_dist2:
            closest_index = t
            closest_dist2 = dist2
            closest_point = point

    return closest_index, closest_point


@ti.func
def intersect_scene_any(ray: Ray, skip_index: ti.i32) -> ti.i32:
    """Test whether any triangle other than skip_index blocks a ray.

    Used for shadow rays, where only the existence of a blocker matters, so
    the scan stops at the first forward, in-triangle hit.

    Args:
        ray: The shadow ray.
        skip_index: Triangle to ignore (the surface the ray leaves from).

    Returns:
        1 if some other triangle is hit, 0 otherwise.
    """
    blocked = 0
    for t in range(num_triangles[None]):
        if t != skip_index:
            dist2, _ = _candidate(t, ray)
            if dist2 < tm.inf:
                blocked = 1
                break
    return blocked


# =============================================================================
# Host-side single-ray queries
# =============================================================================


@ti.kernel
def _closest_hit_kernel():
    for _ in range(1):
        ray = make_ray(_query_origin[None], _query_direction[None])
        index, point = intersect_scene(ray)
        _query_index[None] = index
        _query_point[None] = point


@ti.kernel
def _any_hit_kernel():
    for _ in range(1):
        ray = make_ray(_query_origin[None], _query_direction[None])
        _query_index[None] = intersect_scene_any(ray, _query_skip[None])


def _set_query_ray(origin: Vector, direction: Vector) -> None:
    _query_origin[None] = list(origin.to_tuple())
    _query_direction[None] = list(direction.to_tuple())


def closest_hit(origin: Vector, direction: Vector) -> Hit | None:
    """Find the nearest hit of one ray against the loaded scene.

    Args:
        origin: Ray origin.
        direction: Ray direction (need not be normalized).

    Returns:
        The nearest Hit, or None when the ray hits nothing.
    """
    _set_query_ray(origin, direction)
    _closest_hit_kernel()
    index = int(_query_index[None])
    if index < 0:
        return None
    point = _query_point[None]
    return Hit(triangle_index=index, point=Vector(float(point[0]), float(point[1]), float(point[2])))


def is_occluded(origin: Vector, direction: Vector, skip_index: int = -1) -> bool:
    """Check whether a ray hits any loaded triangle except skip_index.

    Args:
        origin: Ray origin.
        direction: Ray direction.
        skip_index: Triangle to ignore; -1 ignores none.

    Returns:
        True if the ray is blocked.
    """
    _set_query_ray(origin, direction)
    _query_skip[None] = skip_index
    _any_hit_kernel()
    return bool(_query_index[None])


__all__ = [
    "Hit",
    "MAX_TRIANGLES",
    "clear_scene",
    "load_scene",
    "get_triangle_count",
    "is_scene_loaded",
    "intersect_scene",
    "intersect_scene_any",
    "closest_hit",
    "is_occluded",
]
