"""Render a triangle mesh (or the built-in demo scene) to an image file.

Usage:
    sunray [MESH] [options]
    python -m src.sunray.cli [MESH] [options]

Options:
    --output OUTPUT         Output file; .png goes through Pillow, anything
                            else is written as plain PPM (default: render.ppm)
    --width WIDTH           Image width in pixels (default: 400)
    --height HEIGHT         Image height in pixels (default: 300)
    --pixel-size SIZE       Pixel edge length on the view plane (default: 0.0025)
    --camera X Y Z          Camera position (default: 0 0 -5)
    --pitch DEGREES         Camera pitch (default: 0)
    --yaw DEGREES           Camera yaw (default: 0)
    --sun X Y Z             Direction toward the sun (default: 0.3 -0.8 -0.5)
    --rows-per-batch ROWS   Rows per progress update (default: 32)
    --cpu                   Force the CPU backend
    --quiet                 Suppress progress output
    --verbose               Enable info logging

Example:
    sunray examples/pyramid.obj --width 320 --height 240 --output pyramid.png
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from src.sunray import init_taichi

DEFAULTS = {
    "width": 400,
    "height": 300,
    "pixel_size": 0.0025,
    "camera": (0.0, 0.0, -5.0),
    "sun": (0.3, -0.8, -0.5),
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a triangle mesh lit by a single sun.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "mesh",
        nargs="?",
        default=None,
        help="OBJ-style mesh file (default: built-in demo scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="render.ppm",
        help="Output file path (default: render.ppm)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULTS["width"],
        help=f"Image width in pixels (default: {DEFAULTS['width']})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULTS["height"],
        help=f"Image height in pixels (default: {DEFAULTS['height']})",
    )
    parser.add_argument(
        "--pixel-size",
        type=float,
        default=DEFAULTS["pixel_size"],
        help=f"Pixel edge length on the view plane (default: {DEFAULTS['pixel_size']})",
    )
    parser.add_argument(
        "--camera",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=DEFAULTS["camera"],
        help="Camera position (default: 0 0 -5)",
    )
    parser.add_argument(
        "--pitch",
        type=float,
        default=0.0,
        help="Camera pitch in degrees (default: 0)",
    )
    parser.add_argument(
        "--yaw",
        type=float,
        default=0.0,
        help="Camera yaw in degrees (default: 0)",
    )
    parser.add_argument(
        "--sun",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        default=DEFAULTS["sun"],
        help="Direction from surfaces toward the sun (default: 0.3 -0.8 -0.5)",
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=32,
        help="Rows rendered per progress update (default: 32)",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable info logging",
    )
    return parser.parse_args(argv)


def render_to_file(args: argparse.Namespace) -> Path:
    """Build the scene described by args, render it and save the image.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so Taichi is initialised before fields are declared
    from src.sunray.camera.viewplane import Camera, ViewPlane
    from src.sunray.core.renderer import Renderer
    from src.sunray.core.vector import Angle, Vector
    from src.sunray.io.export import save_png, save_ppm
    from src.sunray.io.mesh import load_mesh
    from src.sunray.scene.presets import create_demo_scene
    from src.sunray.scene.scene import Scene, Sunlight

    camera = Camera(
        position=Vector(*args.camera),
        pitch=Angle.from_degrees(args.pitch),
        yaw=Angle.from_degrees(args.yaw),
        view_plane=ViewPlane(
            pixel_size=args.pixel_size,
            res_width=args.width,
            res_height=args.height,
        ),
    )
    sunlight = Sunlight(angle=Vector(*args.sun))

    if args.mesh is None:
        if not args.quiet:
            print("Using built-in demo scene")
        scene = create_demo_scene(camera=camera, sunlight=sunlight)
    else:
        if not args.quiet:
            print(f"Loading mesh {args.mesh}...")
        scene = Scene.from_triangles(load_mesh(args.mesh), camera=camera, sunlight=sunlight)

    renderer = Renderer(scene)

    if not args.quiet:
        print(f"Rendering {args.width}x{args.height} against {len(scene)} triangles...")

    start_time = time.time()

    def progress_callback(done: int, total: int) -> None:
        if not args.quiet:
            progress_pct = (done / total) * 100 if total > 0 else 0
            print(
                f"\r  Progress: {done}/{total} rows ({progress_pct:.1f}%)",
                end="",
                flush=True,
            )

    image = renderer.render(rows_per_batch=args.rows_per_batch, callback=progress_callback)

    if not args.quiet:
        print()  # Newline after progress

    output_file = Path(args.output)
    if output_file.suffix.lower() == ".png":
        save_png(image, output_file)
    else:
        save_ppm(image, output_file)

    if not args.quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    import taichi as ti

    init_taichi(arch=ti.cpu if args.cpu else None)

    try:
        render_to_file(args)
        return 0
    except (OSError, ValueError, ZeroDivisionError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
