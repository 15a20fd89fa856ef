"""Input/output adapters around the renderer.

Components:
    mesh: OBJ-style mesh ingestion into Triangle lists
    export: Plain PPM (P3) output, PPM reading and PNG conversion
"""

from .export import convert_ppm_to_png, format_ppm, read_ppm, save_png, save_ppm
from .mesh import MeshFormatError, load_mesh, parse_mesh

__all__ = [
    "parse_mesh",
    "load_mesh",
    "MeshFormatError",
    "format_ppm",
    "save_ppm",
    "read_ppm",
    "save_png",
    "convert_ppm_to_png",
]
