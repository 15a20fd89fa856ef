"""Mesh ingestion from OBJ-style text.

Only two record types carry geometry:

    v x y z      a vertex with exactly three numeric coordinates
    f a b c      a triangle referencing three 1-based vertex indices

Face tokens may carry texture/normal references (``3/1/2``); only the part
before the first slash is used. Blank lines and ``#`` comments are ignored, and
other OBJ records (normals, texture coordinates, groups, materials) are
skipped.

Any malformed record is fatal: a MeshFormatError naming the line is raised and
no triangles are returned.

Example:
    >>> from src.sunray.io.mesh import parse_mesh
    >>> parse_mesh(["v 0 0 0", "v 1 0 0", "v 0 1 0", "f 1 2 3"])  # doctest: +SKIP
    [Triangle(v1=Vector(dx=0.0, ...), ...)]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from src.sunray.core.vector import Vector
from src.sunray.geometry.triangle import Triangle

logger = logging.getLogger(__name__)

# Record types that are valid OBJ but carry nothing this renderer uses
IGNORED_RECORDS = frozenset({"vn", "vt", "vp", "o", "g", "s", "usemtl", "mtllib", "l"})


class MeshFormatError(ValueError):
    """Raised for a mesh record that cannot be turned into geometry."""

    def __init__(self, line_number: int, message: str) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


def _parse_vertex(fields: list[str], line_number: int) -> Vector:
    if len(fields) != 3:
        raise MeshFormatError(line_number, f"vertex needs 3 coordinates, got {len(fields)}")
    try:
        x, y, z = (float(value) for value in fields)
    except ValueError as e:
        raise MeshFormatError(line_number, f"non-numeric vertex coordinate in {fields}") from e
    return Vector(x, y, z)


def _parse_face(fields: list[str], vertices: list[Vector], line_number: int) -> Triangle:
    if len(fields) != 3:
        raise MeshFormatError(line_number, f"face needs 3 vertex indices, got {len(fields)}")
    corners = []
    for token in fields:
        try:
            index = int(token.split("/", 1)[0])
        except ValueError as e:
            raise MeshFormatError(line_number, f"non-integer vertex index {token!r}") from e
        if not 1 <= index <= len(vertices):
            raise MeshFormatError(
                line_number,
                f"vertex index {index} out of range 1..{len(vertices)}",
            )
        corners.append(vertices[index - 1])
    return Triangle(*corners)


def parse_mesh(lines: Iterable[str]) -> list[Triangle]:
    """Parse OBJ-style lines into triangles in face order.

    Args:
        lines: Text lines of the mesh.

    Returns:
        One Triangle per face record.

    Raises:
        MeshFormatError: On any malformed vertex or face record.
    """
    vertices: list[Vector] = []
    triangles: list[Triangle] = []

    for line_number, line in enumerate(lines, start=1):
        content = line.split("#", 1)[0].strip()
        if not content:
            continue
        record, *fields = content.split()
        if record == "v":
            vertices.append(_parse_vertex(fields, line_number))
        elif record == "f":
            triangles.append(_parse_face(fields, vertices, line_number))
        elif record in IGNORED_RECORDS:
            logger.debug("Skipping %r record on line %d", record, line_number)
        else:
            raise MeshFormatError(line_number, f"unknown record type {record!r}")

    return triangles


def load_mesh(path: str | Path) -> list[Triangle]:
    """Read and parse a mesh file.

    Args:
        path: Path to the OBJ-style file.

    Returns:
        The mesh triangles in face order.

    Raises:
        MeshFormatError: On any malformed record.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        triangles = parse_mesh(f)
    logger.info("Loaded %d triangles from %s", len(triangles), path)
    return triangles
