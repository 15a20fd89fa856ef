"""Tests for the integrator kernels and the Renderer frame driver.

Tests cover:
- Background color for rays that hit nothing
- Lambertian brightness and its clamp for surfaces facing away from the sun
- Hard shadows cast by another triangle
- Pixel ordering of the returned image and flat pixel list
- Progressive rendering by bands of rows
- Render target validation

Note: Imports are done inside test methods to avoid Taichi initialization
issues.
"""

import numpy as np
import pytest


def make_camera(width, height, pixel_size):
    from src.sunray.camera.viewplane import Camera, ViewPlane
    from src.sunray.core.vector import Vector

    return Camera(
        position=Vector(0.0, 0.0, 0.0),
        view_plane=ViewPlane(pixel_size=pixel_size, res_width=width, res_height=height),
    )


def make_sun(dx, dy, dz):
    from src.sunray.core.color import WHITE
    from src.sunray.core.vector import Vector
    from src.sunray.scene.scene import Sunlight

    return Sunlight(angle=Vector(dx, dy, dz), color=WHITE)


@pytest.fixture
def single_triangle_scene(facing_triangle):
    """One triangle filling only the center of a 3x3 view, lit head-on."""
    from src.sunray.scene.scene import Scene

    return Scene.from_triangles(
        [facing_triangle],
        camera=make_camera(3, 3, 0.3),
        sunlight=make_sun(0.0, 0.0, 1.0),
    )


@pytest.fixture
def shadow_scene():
    """A large wall facing the camera with a small blocker between it and the sun.

    The sun comes from +x behind the camera, so the blocker at x = 2 shades
    the wall straight ahead of the camera.
    """
    from src.sunray.core.vector import Vector
    from src.sunray.geometry.triangle import Triangle
    from src.sunray.scene.scene import Scene

    wall = Triangle(Vector(-10.0, -10.0, 10.0), Vector(0.0, 10.0, 10.0), Vector(10.0, -10.0, 10.0))
    blocker = Triangle(Vector(1.5, -0.5, 8.0), Vector(2.5, -0.5, 8.0), Vector(2.0, 0.5, 8.0))
    return Scene.from_triangles(
        [wall, blocker],
        camera=make_camera(5, 5, 0.05),
        sunlight=make_sun(1.0, 0.0, -1.0),
    )


class TestRenderFrame:
    """End-to-end tests for Renderer.render()."""

    def test_single_triangle(self, single_triangle_scene):
        from src.sunray.core.color import BACKGROUND_COLOR
        from src.sunray.core.renderer import Renderer

        image = Renderer(single_triangle_scene).render()

        assert image.shape == (3, 3, 3)
        assert image.dtype == np.uint8
        assert tuple(image[1, 1]) == (255, 255, 255)
        for j in range(3):
            for i in range(3):
                if (i, j) != (1, 1):
                    assert tuple(image[j, i]) == BACKGROUND_COLOR.to_tuple()

    def test_empty_scene_is_all_background(self):
        from src.sunray.core.color import BACKGROUND_COLOR
        from src.sunray.core.renderer import Renderer
        from src.sunray.scene.scene import Scene

        scene = Scene.from_triangles([], camera=make_camera(4, 2, 0.1))
        image = Renderer(scene).render()

        assert image.shape == (2, 4, 3)
        assert np.all(image == np.array(BACKGROUND_COLOR.to_tuple(), dtype=np.uint8))

    def test_surface_facing_away_from_sun_is_black(self, facing_triangle):
        from src.sunray.core.color import BLACK
        from src.sunray.core.renderer import Renderer
        from src.sunray.scene.scene import Scene

        scene = Scene.from_triangles(
            [facing_triangle],
            camera=make_camera(3, 3, 0.3),
            sunlight=make_sun(0.0, 0.0, -1.0),
        )
        image = Renderer(scene).render()
        assert tuple(image[1, 1]) == BLACK.to_tuple()

    def test_oblique_sun_scales_sun_color(self, facing_triangle):
        from src.sunray.core.color import Color
        from src.sunray.core.renderer import Renderer
        from src.sunray.scene.scene import Scene, Sunlight
        from src.sunray.core.vector import Vector

        scene = Scene.from_triangles(
            [facing_triangle],
            camera=make_camera(3, 3, 0.3),
            sunlight=Sunlight(angle=Vector(0.0, 3.0, 4.0), color=Color(200, 100, 50)),
        )
        image = Renderer(scene).render()
        # brightness = 0.8
        assert tuple(image[1, 1]) == (160, 80, 40)

    def test_blocked_point_gets_shadow_color(self, shadow_scene):
        from src.sunray.core.color import SHADOW_COLOR
        from src.sunray.core.renderer import Renderer

        image = Renderer(shadow_scene).render()
        assert tuple(image[2, 2]) == SHADOW_COLOR.to_tuple()

    def test_unblocked_neighbors_are_lit(self, shadow_scene):
        from src.sunray.core.renderer import Renderer

        image = Renderer(shadow_scene).render()
        # 255 * cos(45 degrees) = 180.3
        assert tuple(image[2, 3]) == (180, 180, 180)
        assert tuple(image[2, 1]) == (180, 180, 180)

    def test_custom_palette(self, shadow_scene):
        from src.sunray.core.color import Color
        from src.sunray.core.renderer import Renderer

        renderer = Renderer(
            shadow_scene,
            shadow_color=Color(1, 2, 3),
            background_color=Color(4, 5, 6),
        )
        image = renderer.render()
        assert tuple(image[2, 2]) == (1, 2, 3)

    def test_demo_scene_smoke(self):
        from src.sunray.camera.viewplane import Camera, ViewPlane
        from src.sunray.core.color import BACKGROUND_COLOR
        from src.sunray.core.renderer import Renderer
        from src.sunray.scene.presets import create_demo_scene

        camera = Camera(view_plane=ViewPlane(pixel_size=0.025, res_width=40, res_height=30))
        image = Renderer(create_demo_scene(camera=camera)).render(rows_per_batch=8)

        assert image.shape == (30, 40, 3)
        # Top rows look above the pyramid, bottom rows see the ground
        assert tuple(image[0, 0]) == BACKGROUND_COLOR.to_tuple()
        assert tuple(image[-1, 0]) != BACKGROUND_COLOR.to_tuple()


class TestPixelOrdering:
    """Tests for the mapping between pixel coordinates and output order."""

    @pytest.fixture
    def corner_scene(self):
        """A small triangle seen only through pixel (3, 0) of a 4x3 view."""
        from src.sunray.core.vector import Vector
        from src.sunray.geometry.triangle import Triangle
        from src.sunray.scene.scene import Scene

        tri = Triangle(Vector(0.9, -0.6, 5.0), Vector(1.1, -0.6, 5.0), Vector(1.0, -0.4, 5.0))
        return Scene.from_triangles(
            [tri],
            camera=make_camera(4, 3, 0.1),
            sunlight=make_sun(0.0, 0.0, 1.0),
        )

    def test_image_is_indexed_row_then_column(self, corner_scene):
        from src.sunray.core.renderer import Renderer

        image = Renderer(corner_scene).render()

        assert image.shape == (3, 4, 3)
        lit = np.argwhere(np.all(image == 255, axis=2))
        assert lit.tolist() == [[0, 3]]

    def test_flat_pixels_are_row_major(self, corner_scene):
        from src.sunray.core.color import BACKGROUND_COLOR, WHITE
        from src.sunray.core.renderer import Renderer

        pixels = Renderer(corner_scene).render_pixels()

        assert len(pixels) == 12
        assert pixels[3] == WHITE
        assert [idx for idx, p in enumerate(pixels) if p != BACKGROUND_COLOR] == [3]

    def test_trace_pixel_matches_frame(self, shadow_scene):
        from src.sunray.core.color import Color
        from src.sunray.core.renderer import Renderer

        renderer = Renderer(shadow_scene)
        image = renderer.render()
        for i, j in [(0, 0), (2, 2), (3, 2), (4, 4)]:
            assert renderer.trace_pixel(i, j) == Color(*(int(c) for c in image[j, i]))

    def test_trace_arbitrary_ray(self, single_triangle_scene):
        from src.sunray.core.color import BACKGROUND_COLOR, WHITE
        from src.sunray.core.renderer import Renderer
        from src.sunray.core.vector import Vector

        renderer = Renderer(single_triangle_scene)
        assert renderer.trace(Vector(0.0, 0.0, 0.0), Vector(0.0, 0.0, 1.0)) == WHITE
        assert renderer.trace(Vector(0.0, 0.0, 0.0), Vector(0.0, 1.0, 0.0)) == BACKGROUND_COLOR


class TestProgressiveRendering:
    """Tests for band-by-band rendering."""

    def test_progress_reports_each_band(self, shadow_scene):
        from src.sunray.core.renderer import Renderer

        progress = list(Renderer(shadow_scene).render_progressive(rows_per_batch=2))
        assert progress == [(2, 5), (4, 5), (5, 5)]

    def test_single_band_by_default(self, shadow_scene):
        from src.sunray.core.renderer import Renderer

        progress = list(Renderer(shadow_scene).render_progressive())
        assert progress == [(5, 5)]

    def test_callback_receives_progress(self, shadow_scene):
        from src.sunray.core.renderer import Renderer

        calls = []
        Renderer(shadow_scene).render(rows_per_batch=3, callback=lambda d, t: calls.append((d, t)))
        assert calls == [(3, 5), (5, 5)]

    def test_batching_does_not_change_image(self, shadow_scene):
        from src.sunray.core.renderer import Renderer

        renderer = Renderer(shadow_scene)
        whole = renderer.render()
        banded = renderer.render(rows_per_batch=1)
        np.testing.assert_array_equal(whole, banded)

    def test_invalid_batch_size(self, shadow_scene):
        from src.sunray.core.renderer import Renderer

        with pytest.raises(ValueError, match="rows_per_batch"):
            Renderer(shadow_scene).render(rows_per_batch=0)

    def test_repr(self, shadow_scene):
        from src.sunray.core.renderer import Renderer

        assert repr(Renderer(shadow_scene)) == "Renderer(width=5, height=5, triangles=2)"


class TestRenderTarget:
    """Tests for render target setup."""

    def test_setup_sets_dimensions(self):
        from src.sunray.core.integrator import get_image_dimensions, get_image_numpy, setup_render_target

        setup_render_target(7, 3)
        assert get_image_dimensions() == (7, 3)
        image = get_image_numpy()
        assert image.shape == (3, 7, 3)
        assert not image.any()

    @pytest.mark.parametrize("width, height", [(0, 10), (10, -1)])
    def test_non_positive_size_rejected(self, width, height):
        from src.sunray.core.integrator import setup_render_target

        with pytest.raises(ValueError, match="positive"):
            setup_render_target(width, height)

    def test_oversized_image_rejected(self):
        from src.sunray.core.integrator import MAX_IMAGE_WIDTH, setup_render_target

        with pytest.raises(ValueError, match="exceed"):
            setup_render_target(MAX_IMAGE_WIDTH + 1, 10)


class TestSceneReuse:
    """Tests that single-ray tracing uploads the scene only when needed."""

    def test_trace_pixel_uploads_once(self, monkeypatch, shadow_scene):
        from src.sunray.core import renderer as renderer_module
        from src.sunray.core.renderer import Renderer

        uploads = []
        original = renderer_module.load_scene

        def counting_load_scene(scene):
            uploads.append(scene)
            original(scene)

        monkeypatch.setattr(renderer_module, "load_scene", counting_load_scene)

        renderer = Renderer(shadow_scene)
        for i in range(5):
            renderer.trace_pixel(i, 2)
        assert len(uploads) == 1

    def test_alternating_renderers_reload(self, shadow_scene, single_triangle_scene):
        from src.sunray.core.color import SHADOW_COLOR, WHITE
        from src.sunray.core.renderer import Renderer

        shadowed = Renderer(shadow_scene)
        single = Renderer(single_triangle_scene)

        assert shadowed.trace_pixel(2, 2) == SHADOW_COLOR
        assert single.trace_pixel(1, 1) == WHITE
        assert shadowed.trace_pixel(2, 2) == SHADOW_COLOR

    def test_cleared_scene_is_reloaded(self, single_triangle_scene):
        from src.sunray.core.color import WHITE
        from src.sunray.core.renderer import Renderer
        from src.sunray.scene.intersection import clear_scene, is_scene_loaded

        renderer = Renderer(single_triangle_scene)
        assert renderer.trace_pixel(1, 1) == WHITE
        assert is_scene_loaded(single_triangle_scene)

        clear_scene()
        assert not is_scene_loaded(single_triangle_scene)
        assert renderer.trace_pixel(1, 1) == WHITE
