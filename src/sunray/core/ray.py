"""Ray data structure and vector utilities for Taichi kernels.

This module provides the kernel-side Ray dataclass and the vector helpers the
intersection and shading code is written against. All values are 64-bit, so
Taichi must be initialised with ``default_fp=ti.f64``.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.sunray.core.ray import Ray, ray_at, vec3
    >>> @ti.kernel
    ... def probe() -> ti.f64:
    ...     ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, 1.0))
    ...     return ray_at(ray, 5.0).z
"""

import taichi as ti
import taichi.math as tm

# 3D vector of 64-bit floats
vec3 = ti.types.vector(3, ti.f64)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Not required to be
            normalized; intersection parameters are expressed in multiples of it.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    return Ray(origin=origin, direction=direction)


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point ray.origin + t * ray.direction."""
    return ray.origin + t * ray.direction


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b (order matters)."""
    return tm.cross(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f64:
    """Compute the squared length of a vector.

    Used for all distance comparisons, where the ordering is all that matters.
    """
    return tm.dot(v, v)
