"""Frame driver: renders a Scene into a fresh pixel buffer.

The Renderer uploads the scene, camera and light, then renders the view plane
in bands of rows, optionally reporting progress after each band. Within a band
all pixels are shaded in parallel by the Taichi kernel.

Pixels come back as a NumPy array of shape (res_height, res_width, 3) with
image[j, i] being pixel (i, j), or as a flat row-major list of Colors where
pixel (i, j) sits at index j * res_width + i.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.sunray.core.renderer import Renderer
    >>> from src.sunray.scene.presets import create_demo_scene
    >>>
    >>> renderer = Renderer(create_demo_scene())
    >>> image = renderer.render(rows_per_batch=32)
    >>> image.shape
    (300, 400, 3)
"""

import logging
import time
from collections.abc import Callable, Generator

import numpy as np
import numpy.typing as npt

from src.sunray.camera.viewplane import setup_camera
from src.sunray.core.color import BACKGROUND_COLOR, SHADOW_COLOR, Color
from src.sunray.core.integrator import (
    get_image_numpy,
    render_rows,
    setup_lighting,
    setup_render_target,
    trace_ray,
)
from src.sunray.core.vector import Vector
from src.sunray.scene.intersection import is_scene_loaded, load_scene
from src.sunray.scene.scene import Scene

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]


class Renderer:
    """Renders one Scene with direct sunlight and hard shadows.

    The renderer delegates to the global integrator buffers (which are Taichi
    fields), so it re-uploads its scene at the start of every render. Two
    renderers can be used alternately but not interleaved within one render.

    Attributes:
        scene: The scene being rendered.
        shadow_color: Color of shadowed pixels.
        background_color: Color of pixels that hit nothing.
    """

    def __init__(
        self,
        scene: Scene,
        *,
        shadow_color: Color = SHADOW_COLOR,
        background_color: Color = BACKGROUND_COLOR,
    ) -> None:
        """Initialize the renderer.

        Args:
            scene: The scene to render.
            shadow_color: Color of pixels whose shadow ray is blocked.
            background_color: Color of pixels whose camera ray hits nothing.
        """
        self.scene = scene
        self.shadow_color = shadow_color
        self.background_color = background_color

    @property
    def width(self) -> int:
        return self.scene.camera.view_plane.res_width

    @property
    def height(self) -> int:
        return self.scene.camera.view_plane.res_height

    def _upload(self) -> None:
        """Upload scene, camera and light, and reset the pixel buffer."""
        load_scene(self.scene)
        setup_camera(self.scene.camera)
        setup_lighting(self.scene.sunlight, self.shadow_color, self.background_color)
        setup_render_target(self.width, self.height)

    def render_progressive(
        self,
        rows_per_batch: int | None = None,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the frame band by band, yielding progress after each band.

        Args:
            rows_per_batch: Rows rendered per kernel launch. None renders the
                whole frame in one launch.

        Yields:
            Tuple of (rows_done, total_rows).

        Raises:
            ValueError: If rows_per_batch is not positive.
        """
        if rows_per_batch is not None and rows_per_batch <= 0:
            raise ValueError(f"rows_per_batch must be positive, got {rows_per_batch}")

        self._upload()
        total = self.height
        batch = rows_per_batch or total

        row = 0
        while row < total:
            end = min(row + batch, total)
            render_rows(row, end)
            row = end
            yield (row, total)

    def render(
        self,
        rows_per_batch: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> npt.NDArray[np.uint8]:
        """Render the frame.

        Args:
            rows_per_batch: Rows rendered per kernel launch. None renders the
                whole frame in one launch.
            callback: Optional function called after each band with
                (rows_done, total_rows).

        Returns:
            A new array of shape (height, width, 3) with dtype uint8.

        Example:
            >>> def progress(done, total):
            ...     print(f"{done}/{total} rows")
            >>> image = renderer.render(rows_per_batch=50, callback=progress)
        """
        start_time = time.time()
        logger.info(
            "Rendering %dx%d frame against %d triangles",
            self.width,
            self.height,
            len(self.scene),
        )

        for done, total in self.render_progressive(rows_per_batch):
            if callback is not None:
                callback(done, total)

        image = get_image_numpy()
        logger.info("Frame rendered in %.2fs", time.time() - start_time)
        return image

    def render_pixels(self, rows_per_batch: int | None = None) -> list[Color]:
        """Render the frame as a flat row-major list of Colors.

        Pixel (i, j) is at index j * width + i.
        """
        image = self.render(rows_per_batch=rows_per_batch)
        return [Color(int(r), int(g), int(b)) for r, g, b in image.reshape(-1, 3)]

    def trace(self, origin: Vector, direction: Vector) -> Color:
        """Shade one arbitrary ray against this renderer's scene.

        The scene is uploaded only when it is not already the loaded one.
        """
        if not is_scene_loaded(self.scene):
            load_scene(self.scene)
        setup_lighting(self.scene.sunlight, self.shadow_color, self.background_color)
        return Color(*trace_ray(origin.to_tuple(), direction.to_tuple()))

    def trace_pixel(self, i: int, j: int) -> Color:
        """Shade the camera ray through pixel (i, j)."""
        return self.trace(self.scene.camera.position, self.scene.camera.ray_direction(i, j))

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"triangles={len(self.scene)})"
        )
