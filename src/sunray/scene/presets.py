"""Built-in demo scene.

The demo scene is a ground plane with a square pyramid hovering above it, so
that the default sun casts a visible shadow onto the ground.

Scene coordinates follow the view plane: +x is to the right of the image, +y
is toward the bottom of the image and the default camera looks along +z. The
ground therefore sits at positive y and "up" is -y.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.sunray.scene.presets import create_demo_scene
    >>> scene = create_demo_scene()
    >>> len(scene)
    8
"""

from dataclasses import dataclass, field

from src.sunray.camera.viewplane import Camera
from src.sunray.core.vector import Vector
from src.sunray.geometry.triangle import Triangle
from src.sunray.scene.scene import Scene, Sunlight

# =============================================================================
# Demo Scene Parameters
# =============================================================================


@dataclass(frozen=True)
class DemoSceneParams:
    """Parameters for the demo scene.

    Attributes:
        ground_level: y coordinate of the ground plane.
        ground_half_width: Half extent of the ground along x.
        ground_near: Nearest z of the ground.
        ground_far: Farthest z of the ground.
        pyramid_center: Center of the pyramid's base.
        pyramid_half_base: Half edge length of the square base.
        pyramid_height: Height of the apex above the base (toward -y).
    """

    ground_level: float = 1.0
    ground_half_width: float = 8.0
    ground_near: float = -5.0
    ground_far: float = 15.0
    pyramid_center: Vector = field(default_factory=lambda: Vector(0.0, 0.2, 2.5))
    pyramid_half_base: float = 1.0
    pyramid_height: float = 1.5


def _facing_away(v1: Vector, v2: Vector, v3: Vector, inside: Vector) -> Triangle:
    """Order the vertices so the triangle normal points away from inside."""
    triangle = Triangle(v1, v2, v3)
    if triangle.raw_normal().dot_product(v1 - inside) < 0.0:
        triangle = Triangle(v1, v3, v2)
    return triangle


def ground_triangles(params: DemoSceneParams) -> list[Triangle]:
    """Two triangles forming the ground, with normals facing up (-y)."""
    y = params.ground_level
    w = params.ground_half_width
    a = Vector(-w, y, params.ground_near)
    b = Vector(w, y, params.ground_near)
    c = Vector(w, y, params.ground_far)
    d = Vector(-w, y, params.ground_far)
    below = Vector(0.0, y + 1.0, 0.0)
    return [_facing_away(a, b, c, below), _facing_away(a, c, d, below)]


def pyramid_triangles(params: DemoSceneParams) -> list[Triangle]:
    """Six triangles of a closed square pyramid, with outward normals."""
    center = params.pyramid_center
    h = params.pyramid_half_base
    corners = [
        center + Vector(-h, 0.0, -h),
        center + Vector(h, 0.0, -h),
        center + Vector(h, 0.0, h),
        center + Vector(-h, 0.0, h),
    ]
    apex = center + Vector(0.0, -params.pyramid_height, 0.0)
    inside = center + Vector(0.0, -params.pyramid_height / 4.0, 0.0)

    triangles = [
        _facing_away(corners[n], corners[(n + 1) % 4], apex, inside) for n in range(4)
    ]
    triangles.append(_facing_away(corners[0], corners[1], corners[2], inside))
    triangles.append(_facing_away(corners[0], corners[2], corners[3], inside))
    return triangles


def create_demo_scene(
    params: DemoSceneParams | None = None,
    camera: Camera | None = None,
    sunlight: Sunlight | None = None,
) -> Scene:
    """Create the ground-and-pyramid demo scene.

    Args:
        params: Geometry parameters; defaults to DemoSceneParams().
        camera: Camera override; defaults to Camera().
        sunlight: Light override; defaults to Sunlight().

    Returns:
        The demo Scene (ground triangles first, then the pyramid).
    """
    if params is None:
        params = DemoSceneParams()
    triangles = ground_triangles(params) + pyramid_triangles(params)
    return Scene.from_triangles(triangles, camera=camera, sunlight=sunlight)
