"""Camera and view-plane model for primary ray generation.

The camera sits at a position with two orientation angles (pitch and yaw). Its
view plane is a grid of res_width x res_height square pixels of edge
pixel_size, one unit in front of the camera along its local +z axis.

Pixel (i, j), with i across the width and j across the height, maps to the
camera-local direction:

    local = (pixel_size * (i - i_center), pixel_size * (j - j_center), 1.0)

where i_center = (res_width - 1) // 2 and j_center = (res_height - 1) // 2, so
the center favors the lower index for even counts. The world direction is
local.yaw(camera.yaw).pitch(camera.pitch) and the origin is always the camera
position.

Since both rotations are linear, setup_camera() uploads the images of the
three unit axes under yaw-then-pitch, and get_ray() rebuilds each direction as
a linear combination of them inside the kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.sunray.camera.viewplane import Camera, ViewPlane, setup_camera
    >>> camera = Camera(view_plane=ViewPlane(pixel_size=0.01, res_width=64, res_height=48))
    >>> setup_camera(camera)
    >>> camera.ray_direction(0, 0)  # doctest: +SKIP
"""

from dataclasses import dataclass, field

import numpy as np
import taichi as ti

from src.sunray.core.ray import Ray, make_ray
from src.sunray.core.vector import Angle, Vector

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class ViewPlane:
    """Discretized pixel grid one unit in front of the camera.

    Attributes:
        pixel_size: Edge length of one pixel in world units at unit distance.
        res_width: Number of pixels across (i index).
        res_height: Number of pixels down (j index).
    """

    pixel_size: float = 0.0025
    res_width: int = 400
    res_height: int = 300

    @property
    def i_center(self) -> int:
        return (self.res_width - 1) // 2

    @property
    def j_center(self) -> int:
        return (self.res_height - 1) // 2

    @property
    def pixel_count(self) -> int:
        return self.res_width * self.res_height


@dataclass(frozen=True)
class Camera:
    """Camera position, orientation and view plane.

    Attributes:
        position: Origin of every camera ray.
        pitch: Rotation about the camera's horizontal (x) axis.
        yaw: Rotation about the camera's vertical (y) axis.
        view_plane: Pixel grid defining one ray direction per pixel.
    """

    position: Vector = field(default_factory=lambda: Vector(0.0, 0.0, -5.0))
    pitch: Angle = field(default_factory=Angle)
    yaw: Angle = field(default_factory=Angle)
    view_plane: ViewPlane = field(default_factory=ViewPlane)

    def local_direction(self, i: int, j: int) -> Vector:
        """Camera-local direction through pixel (i, j), before rotation.

        Raises:
            IndexError: If (i, j) is outside the view plane.
        """
        vp = self.view_plane
        if not (0 <= i < vp.res_width and 0 <= j < vp.res_height):
            raise IndexError(
                f"Pixel ({i}, {j}) outside view plane {vp.res_width}x{vp.res_height}"
            )
        return Vector(
            vp.pixel_size * (i - vp.i_center),
            vp.pixel_size * (j - vp.j_center),
            1.0,
        )

    def ray_direction(self, i: int, j: int) -> Vector:
        """World-space direction of the ray through pixel (i, j).

        Yaw is applied before pitch.
        """
        return self.local_direction(i, j).yaw(self.yaw).pitch(self.pitch)

    def basis(self) -> tuple[Vector, Vector, Vector]:
        """Images of the x, y and z unit axes under yaw-then-pitch."""
        return tuple(
            axis.yaw(self.yaw).pitch(self.pitch)
            for axis in (Vector(1.0, 0.0, 0.0), Vector(0.0, 1.0, 0.0), Vector(0.0, 0.0, 1.0))
        )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f64, shape=())

# Rotated camera axes
_camera_x = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_y = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_z = ti.Vector.field(3, dtype=ti.f64, shape=())

_pixel_size = ti.field(dtype=ti.f64, shape=())
_i_center = ti.field(dtype=ti.i32, shape=())
_j_center = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per render)
# =============================================================================


def setup_camera(camera: Camera) -> None:
    """Upload camera state for get_ray().

    Args:
        camera: Camera configuration with position, orientation and view plane.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    axes = np.array([axis.to_tuple() for axis in camera.basis()], dtype=np.float64)

    _camera_origin[None] = list(camera.position.to_tuple())
    _camera_x[None] = axes[0].tolist()
    _camera_y[None] = axes[1].tolist()
    _camera_z[None] = axes[2].tolist()

    _pixel_size[None] = camera.view_plane.pixel_size
    _i_center[None] = camera.view_plane.i_center
    _j_center[None] = camera.view_plane.j_center


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray(i: ti.i32, j: ti.i32) -> Ray:
    """Generate the camera ray through pixel (i, j).

    Args:
        i: Pixel column (0 = first column).
        j: Pixel row (0 = first row).

    Returns:
        A Ray from the camera position through the pixel. The direction is
        not normalized; its local z component is 1.
    """
    size = _pixel_size[None]
    lx = size * ti.cast(i - _i_center[None], ti.f64)
    ly = size * ti.cast(j - _j_center[None], ti.f64)
    direction = lx * _camera_x[None] + ly * _camera_y[None] + _camera_z[None]
    return make_ray(_camera_origin[None], direction)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin and the rotated x, y, z axes.
    """
    info = {}
    for name, value in (
        ("origin", _camera_origin),
        ("x", _camera_x),
        ("y", _camera_y),
        ("z", _camera_z),
    ):
        vec = value[None]
        info[name] = (float(vec[0]), float(vec[1]), float(vec[2]))
    return info
