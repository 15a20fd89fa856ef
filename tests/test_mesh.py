"""Unit tests for OBJ-style mesh ingestion."""

from pathlib import Path

import pytest

from src.sunray.core.vector import Vector
from src.sunray.io.mesh import MeshFormatError, load_mesh, parse_mesh

EXAMPLE_MESH = Path(__file__).resolve().parent.parent / "examples" / "pyramid.obj"

UNIT_TRIANGLE = ["v 0 0 0", "v 1 0 0", "v 0 1 0", "f 1 2 3"]


class TestParseMesh:
    """Tests for parse_mesh()."""

    def test_single_face(self):
        triangles = parse_mesh(UNIT_TRIANGLE)
        assert len(triangles) == 1
        tri = triangles[0]
        assert tri.v1 == Vector(0.0, 0.0, 0.0)
        assert tri.v2 == Vector(1.0, 0.0, 0.0)
        assert tri.v3 == Vector(0.0, 1.0, 0.0)

    def test_indices_are_one_based_and_order_preserved(self):
        lines = ["v 0 0 0", "v 1 0 0", "v 0 1 0", "v 0 0 1", "f 4 1 2", "f 3 4 1"]
        first, second = parse_mesh(lines)
        assert (first.v1, first.v2, first.v3) == (
            Vector(0.0, 0.0, 1.0),
            Vector(0.0, 0.0, 0.0),
            Vector(1.0, 0.0, 0.0),
        )
        assert second.v1 == Vector(0.0, 1.0, 0.0)

    def test_faces_may_reference_shared_vertices(self):
        lines = UNIT_TRIANGLE + ["v 1 1 0", "f 2 4 3"]
        first, second = parse_mesh(lines)
        assert first.v2 is second.v1

    def test_slash_tokens_use_vertex_index(self):
        lines = ["v 0 0 0", "v 1 0 0", "v 0 1 0", "vt 0 0", "vn 0 0 1", "f 1/1/1 2//1 3/1"]
        (tri,) = parse_mesh(lines)
        assert tri.v3 == Vector(0.0, 1.0, 0.0)

    def test_comments_blank_lines_and_groups_are_skipped(self):
        lines = [
            "# header comment",
            "",
            "o thing",
            "   ",
            "v 0 0 0  # origin",
            "v 1.5 0 0",
            "g side",
            "v 0 -2e1 0",
            "s off",
            "f 1 2 3",
        ]
        (tri,) = parse_mesh(lines)
        assert tri.v2 == Vector(1.5, 0.0, 0.0)
        assert tri.v3 == Vector(0.0, -20.0, 0.0)

    def test_vertices_without_faces(self):
        assert parse_mesh(["v 0 0 0", "v 1 1 1"]) == []

    def test_empty_input(self):
        assert parse_mesh([]) == []


class TestMalformedMesh:
    """Tests for MeshFormatError reporting."""

    @pytest.mark.parametrize(
        "line, message",
        [
            ("v 1 2", "vertex needs 3 coordinates"),
            ("v 1 2 3 4", "vertex needs 3 coordinates"),
            ("v 1 two 3", "non-numeric"),
            ("f 1 2", "face needs 3 vertex indices"),
            ("f 1 2 3 4", "face needs 3 vertex indices"),
            ("f 1 x 3", "non-integer"),
            ("f 1 2 5", "out of range"),
            ("f 0 1 2", "out of range"),
            ("f -1 1 2", "out of range"),
            ("curv 1 2", "unknown record"),
        ],
    )
    def test_bad_record_names_line(self, line, message):
        lines = ["v 0 0 0", "v 1 0 0", "v 0 1 0", line]
        with pytest.raises(MeshFormatError, match=message) as excinfo:
            parse_mesh(lines)
        assert excinfo.value.line_number == 4
        assert str(excinfo.value).startswith("line 4:")

    def test_face_before_its_vertices(self):
        with pytest.raises(MeshFormatError, match="out of range"):
            parse_mesh(["v 0 0 0", "f 1 2 3", "v 1 0 0", "v 0 1 0"])

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_mesh(["f 1 2 3"])


class TestLoadMesh:
    """Tests for load_mesh()."""

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "tri.obj"
        path.write_text("\n".join(UNIT_TRIANGLE) + "\n")
        triangles = load_mesh(path)
        assert len(triangles) == 1

    def test_accepts_string_path(self, tmp_path):
        path = tmp_path / "tri.obj"
        path.write_text("\n".join(UNIT_TRIANGLE))
        assert len(load_mesh(str(path))) == 1

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_mesh(tmp_path / "missing.obj")

    def test_example_mesh(self):
        triangles = load_mesh(EXAMPLE_MESH)
        assert len(triangles) == 8

    def test_example_mesh_builds_scene(self):
        from src.sunray.scene.scene import Scene

        scene = Scene.from_triangles(load_mesh(EXAMPLE_MESH))
        # Ground faces up (-y)
        assert scene.planes[0].normal().dy == pytest.approx(-1.0)
        assert scene.planes[1].normal().dy == pytest.approx(-1.0)
