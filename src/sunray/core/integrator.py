"""Direct-light integrator with hard shadows.

Each pixel casts at most two rays:
1. A camera ray, resolved to the closest triangle hit.
2. On a hit, a shadow ray from the hit point toward the sun. If any other
   triangle blocks it the pixel gets the shadow color. Otherwise the sun color
   is scaled by the Lambertian term dot(normal, sun direction), clamped to
   [0, 1].
A camera ray that hits nothing gives the background color.

There are no bounces: no reflection, refraction or indirect light.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.sunray.camera.viewplane import setup_camera
    >>> from src.sunray.core.integrator import (
    ...     render_rows, setup_lighting, setup_render_target
    ... )
    >>> from src.sunray.scene.intersection import load_scene
    >>> load_scene(scene)
    >>> setup_camera(scene.camera)
    >>> setup_lighting(scene.sunlight)
    >>> setup_render_target(400, 300)
    >>> render_rows(0, 300)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.sunray.camera.viewplane import get_ray
from src.sunray.core.color import BACKGROUND_COLOR, SHADOW_COLOR, Color
from src.sunray.core.ray import Ray, dot, make_ray, vec3
from src.sunray.scene.intersection import (
    intersect_scene,
    intersect_scene_any,
    plane_normals,
)
from src.sunray.scene.scene import Sunlight

# =============================================================================
# Light and Palette Configuration
# =============================================================================

# Unit direction from surfaces toward the sun
_sun_direction = ti.Vector.field(3, dtype=ti.f64, shape=())

# Channel values on the 0..255 scale
_sun_color = ti.Vector.field(3, dtype=ti.f64, shape=())
_shadow_color = ti.Vector.field(3, dtype=ti.f64, shape=())
_background_color = ti.Vector.field(3, dtype=ti.f64, shape=())


def setup_lighting(
    sunlight: Sunlight,
    shadow_color: Color = SHADOW_COLOR,
    background_color: Color = BACKGROUND_COLOR,
) -> None:
    """Upload the sun and the fixed shadow/background colors.

    Args:
        sunlight: The scene's directional light.
        shadow_color: Color of pixels whose shadow ray is blocked.
        background_color: Color of pixels whose camera ray hits nothing.
    """
    _sun_direction[None] = list(sunlight.angle.to_tuple())
    _sun_color[None] = [float(c) for c in sunlight.color.to_tuple()]
    _shadow_color[None] = [float(c) for c in shadow_color.to_tuple()]
    _background_color[None] = [float(c) for c in background_color.to_tuple()]


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Pixel buffer indexed [row j, column i]
_pixels = ti.Vector.field(3, dtype=ti.u8, shape=(MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH))

_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the pixel buffer.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If a dimension is not positive or exceeds the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Clear the pixel buffer to zero."""
    _pixels.fill(0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def get_image_numpy() -> npt.NDArray[np.uint8]:
    """Copy the active region of the pixel buffer.

    Returns:
        Array of shape (height, width, 3) with dtype uint8; element [j, i] is
        pixel (i, j).

    Raises:
        RuntimeError: If the render target has not been set up.
    """
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")
    width, height = get_image_dimensions()
    return _pixels.to_numpy()[:height, :width].copy()


# =============================================================================
# Shading
# =============================================================================


@ti.func
def _to_channels(color: vec3):
    """Round half up and saturate 0..255 floats into u8 channels."""
    return ti.cast(ti.floor(tm.clamp(color, 0.0, 255.0) + 0.5), ti.u8)


@ti.func
def shade_hit(triangle_index: ti.i32, point: vec3) -> vec3:
    """Color of a surface point lit only by the sun.

    Args:
        triangle_index: Index of the triangle the point lies on; skipped by
            the shadow ray.
        point: The hit point.

    Returns:
        The color on the 0..255 scale.
    """
    sun = _sun_direction[None]
    color = _shadow_color[None]
    if intersect_scene_any(make_ray(point, sun), triangle_index) == 0:
        brightness = tm.clamp(dot(plane_normals[triangle_index], sun), 0.0, 1.0)
        color = _sun_color[None] * brightness
    return color


@ti.func
def shade(ray: Ray) -> vec3:
    """Color seen along a camera ray on the 0..255 scale."""
    color = _background_color[None]
    index, point = intersect_scene(ray)
    if index >= 0:
        color = shade_hit(index, point)
    return color


# =============================================================================
# Frame Kernels
# =============================================================================


@ti.kernel
def render_rows(row_start: ti.i32, row_end: ti.i32):
    """Render rows [row_start, row_end) of the active image.

    Every pixel is independent and writes only its own buffer slot, so the
    outer loop runs in parallel.
    """
    width = _image_width[None]
    for j, i in ti.ndrange((row_start, row_end), width):
        _pixels[j, i] = _to_channels(shade(get_ray(i, j)))


_trace_result = ti.Vector.field(3, dtype=ti.u8, shape=())
_trace_origin = ti.Vector.field(3, dtype=ti.f64, shape=())
_trace_direction = ti.Vector.field(3, dtype=ti.f64, shape=())


@ti.kernel
def _trace_kernel():
    for _ in range(1):
        ray = make_ray(_trace_origin[None], _trace_direction[None])
        _trace_result[None] = _to_channels(shade(ray))


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
) -> tuple[int, int, int]:
    """Shade a single ray against the uploaded scene and lighting.

    Args:
        origin: Ray origin.
        direction: Ray direction.

    Returns:
        The (r, g, b) channel values.
    """
    _trace_origin[None] = list(origin)
    _trace_direction[None] = list(direction)
    _trace_kernel()
    result = _trace_result[None]
    return int(result[0]), int(result[1]), int(result[2])
