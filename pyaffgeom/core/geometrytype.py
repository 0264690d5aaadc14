# pyaffgeom/core/geometrytype.py
"""Classification tags for reference elements (topology + dimension)."""
from dataclasses import dataclass
from enum import Enum


class BasicType(str, Enum):
    SIMPLEX = "simplex"
    CUBE = "cube"
    NONE = "none"


_NAMES = {
    (BasicType.SIMPLEX, 0): "vertex",
    (BasicType.SIMPLEX, 1): "line",
    (BasicType.SIMPLEX, 2): "triangle",
    (BasicType.CUBE, 2): "quadrilateral",
    (BasicType.SIMPLEX, 3): "tetrahedron",
    (BasicType.CUBE, 3): "hexahedron",
}


@dataclass(frozen=True)
class GeometryType:
    """
    Immutable tag identifying a reference element.

    A vertex and a line are both simplices and cubes; the tag is stored
    normalised to ``simplex`` for ``dim <= 1`` so that ``cube(1) == simplex(1)``.
    """
    basic_type: BasicType
    dim: int

    def __post_init__(self):
        try:
            basic_type = BasicType(self.basic_type)
        except ValueError:
            raise ValueError(f"Unknown basic geometry type {self.basic_type!r}.") from None
        dim = int(self.dim)
        if dim < 0:
            raise ValueError(f"Geometry dimension must be non-negative, got {self.dim}.")
        if basic_type is BasicType.CUBE and dim <= 1:
            basic_type = BasicType.SIMPLEX
        object.__setattr__(self, "basic_type", basic_type)
        object.__setattr__(self, "dim", dim)

    # ---- predicates -------------------------------------------------
    @property
    def is_simplex(self) -> bool:
        return self.basic_type is BasicType.SIMPLEX

    @property
    def is_cube(self) -> bool:
        return self.basic_type is BasicType.CUBE or (self.is_simplex and self.dim <= 1)

    @property
    def is_none(self) -> bool:
        return self.basic_type is BasicType.NONE

    @property
    def is_vertex(self) -> bool:
        return self.dim == 0 and not self.is_none

    @property
    def is_line(self) -> bool:
        return self.dim == 1 and not self.is_none

    @property
    def is_triangle(self) -> bool:
        return self.is_simplex and self.dim == 2

    @property
    def is_quadrilateral(self) -> bool:
        return self.basic_type is BasicType.CUBE and self.dim == 2

    @property
    def is_tetrahedron(self) -> bool:
        return self.is_simplex and self.dim == 3

    @property
    def is_hexahedron(self) -> bool:
        return self.basic_type is BasicType.CUBE and self.dim == 3

    def __str__(self):
        name = _NAMES.get((self.basic_type, self.dim))
        if name is not None:
            return name
        return f"({self.basic_type.value}, {self.dim})"


def simplex(dim: int) -> GeometryType:
    return GeometryType(BasicType.SIMPLEX, dim)


def cube(dim: int) -> GeometryType:
    return GeometryType(BasicType.CUBE, dim)


def none(dim: int) -> GeometryType:
    """Tag for a polytope without a reference element."""
    return GeometryType(BasicType.NONE, dim)


VERTEX = simplex(0)
LINE = simplex(1)
TRIANGLE = simplex(2)
QUADRILATERAL = cube(2)
TETRAHEDRON = simplex(3)
HEXAHEDRON = cube(3)
