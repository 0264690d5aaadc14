import pytest

from pyaffgeom.core.geometrytype import (
    GeometryType, BasicType, simplex, cube, none,
    VERTEX, LINE, TRIANGLE, QUADRILATERAL, TETRAHEDRON, HEXAHEDRON,
)


def test_line_and_vertex_are_simplex_and_cube():
    assert cube(1) == simplex(1) == LINE
    assert cube(0) == VERTEX
    assert LINE.is_simplex and LINE.is_cube
    assert VERTEX.is_vertex and not VERTEX.is_line


def test_predicates():
    assert TRIANGLE.is_triangle and not TRIANGLE.is_cube
    assert QUADRILATERAL.is_quadrilateral and QUADRILATERAL.is_cube
    assert TETRAHEDRON.is_tetrahedron
    assert HEXAHEDRON.is_hexahedron and not HEXAHEDRON.is_simplex
    assert none(2).is_none and not none(0).is_vertex


def test_names():
    assert str(TRIANGLE) == "triangle"
    assert str(HEXAHEDRON) == "hexahedron"
    assert str(simplex(4)) == "(simplex, 4)"


def test_string_basic_type_and_hashing():
    gt = GeometryType("cube", 3)
    assert gt.basic_type is BasicType.CUBE
    table = {TRIANGLE: "t", HEXAHEDRON: "h"}
    assert table[simplex(2)] == "t"
    assert table[gt] == "h"


@pytest.mark.parametrize("args", [("simplex", -1), ("prism", 3)])
def test_invalid_types(args):
    with pytest.raises(ValueError):
        GeometryType(*args)
