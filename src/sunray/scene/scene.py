"""Immutable scene container: camera, triangles, their planes and the sun.

A Scene owns an ordered tuple of triangles and a parallel tuple of planes:
planes[i] is always the plane of triangles[i]. Both are fixed at construction
and rendering only reads them.

Example:
    >>> from src.sunray.core.vector import Vector
    >>> from src.sunray.geometry.triangle import Triangle
    >>> from src.sunray.scene.scene import Scene
    >>> scene = Scene.from_triangles(
    ...     [Triangle(Vector(-1, -1, 5), Vector(1, -1, 5), Vector(0, 1, 5))]
    ... )
    >>> len(scene)
    1
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from src.sunray.camera.viewplane import Camera
from src.sunray.core.color import Color
from src.sunray.core.vector import Vector
from src.sunray.geometry.triangle import Plane, Triangle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sunlight:
    """A single infinitely distant directional light.

    Attributes:
        angle: Unit direction from surfaces toward the light. Light travels
            along its negation. Normalized on construction.
        color: Light color; a surface facing the light head-on gets exactly
            this color.

    Raises:
        DegenerateVectorError: If angle has zero length.
    """

    angle: Vector = field(default_factory=lambda: Vector(0.3, -0.8, -0.5))
    color: Color = field(default_factory=lambda: Color(255, 244, 229))

    def __post_init__(self) -> None:
        object.__setattr__(self, "angle", self.angle.normalized())


@dataclass(frozen=True)
class Scene:
    """Everything a render reads.

    Use Scene.from_triangles() to build a scene; it derives the planes.

    Attributes:
        triangles: Ordered triangles.
        planes: Plane of each triangle, index-aligned with triangles.
        camera: Camera the frame is rendered from.
        sunlight: The scene's only light.

    Raises:
        ValueError: If triangles and planes differ in length.
    """

    triangles: tuple[Triangle, ...]
    planes: tuple[Plane, ...]
    camera: Camera = field(default_factory=Camera)
    sunlight: Sunlight = field(default_factory=Sunlight)

    def __post_init__(self) -> None:
        object.__setattr__(self, "triangles", tuple(self.triangles))
        object.__setattr__(self, "planes", tuple(self.planes))
        if len(self.triangles) != len(self.planes):
            raise ValueError(
                f"Scene has {len(self.triangles)} triangles but {len(self.planes)} planes"
            )

    @classmethod
    def from_triangles(
        cls,
        triangles: Iterable[Triangle],
        camera: Camera | None = None,
        sunlight: Sunlight | None = None,
    ) -> Scene:
        """Build a scene, deriving one plane per triangle.

        Args:
            triangles: Triangles in scene order.
            camera: Camera override; defaults to Camera().
            sunlight: Light override; defaults to Sunlight().

        Raises:
            DegenerateTriangleError: If any triangle has zero area.
        """
        triangles = tuple(triangles)
        planes = tuple(Plane.from_triangle(t) for t in triangles)
        logger.debug("Derived %d planes", len(planes))
        return cls(
            triangles=triangles,
            planes=planes,
            camera=camera if camera is not None else Camera(),
            sunlight=sunlight if sunlight is not None else Sunlight(),
        )

    def __len__(self) -> int:
        return len(self.triangles)
