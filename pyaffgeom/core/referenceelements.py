# pyaffgeom/core/referenceelements.py
"""
Reference simplices and cubes of arbitrary dimension.

The reference simplex is the convex hull of 0, e_1, ..., e_d and the
reference cube is [0, 1]^d. Subentity positions and volumes are evaluated
exactly with sympy and stored as read-only float64 arrays.
"""
from functools import lru_cache
from itertools import combinations
import logging
from typing import Dict, List, Tuple

import numpy as np
import sympy as sp

from pyaffgeom.core.geometrytype import GeometryType

logger = logging.getLogger(__name__)


# ---------- corner and subentity enumeration ----------

def _simplex_corners(dim: int) -> List[Tuple[sp.Integer, ...]]:
    corners = [tuple(sp.S(0) for _ in range(dim))]
    for k in range(dim):
        corners.append(tuple(sp.S(1) if j == k else sp.S(0) for j in range(dim)))
    return corners


def _cube_corners(dim: int) -> List[Tuple[sp.Integer, ...]]:
    # corner i has x_k = k-th bit of i
    return [tuple(sp.S((i >> k) & 1) for k in range(dim)) for i in range(2 ** dim)]


def _simplex_subentities(dim: int, codim: int) -> List[Tuple[int, ...]]:
    return list(combinations(range(dim + 1), dim - codim + 1))


def _cube_subentities(dim: int, codim: int) -> List[Tuple[int, ...]]:
    """Fix ``codim`` directions; the first fixed direction varies fastest."""
    result = []
    for dirs in combinations(range(dim), codim):
        for pattern in range(2 ** codim):
            fixed = [(d, (pattern >> k) & 1) for k, d in enumerate(dirs)]
            result.append(tuple(
                i for i in range(2 ** dim)
                if all(((i >> d) & 1) == v for d, v in fixed)
            ))
    return result


def _barycenter(points) -> Tuple[sp.Rational, ...]:
    n = len(points)
    dim = len(points[0])
    return tuple(sum((p[k] for p in points), sp.S(0)) / n for k in range(dim))


def _frozen(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class ReferenceElement:
    """
    Reference element of a given GeometryType.

    Subentities of codimension ``c`` are numbered per codimension;
    ``position(i, c)`` is the barycenter of subentity ``i``, so
    ``position(i, dim)`` is corner ``i`` and ``position(0, 0)`` the centroid.
    """

    def __init__(self, geometry_type: GeometryType):
        if geometry_type.is_none:
            raise KeyError(f"No reference element for geometry type {geometry_type}.")
        self._type = geometry_type
        dim = geometry_type.dim
        self._dim = dim

        if geometry_type.is_simplex:
            corners = _simplex_corners(dim)
            subentities = _simplex_subentities
            volume = sp.Rational(1, sp.factorial(dim))
        else:
            corners = _cube_corners(dim)
            subentities = _cube_subentities
            volume = sp.S(1)

        self._subentities: Dict[int, List[Tuple[int, ...]]] = {}
        self._positions: Dict[int, np.ndarray] = {}
        for codim in range(dim + 1):
            subs = subentities(dim, codim)
            self._subentities[codim] = subs
            exact = [_barycenter([corners[i] for i in sub]) for sub in subs]
            self._positions[codim] = _frozen(
                np.array([[float(c) for c in p] for p in exact], dtype=np.float64).reshape(len(subs), dim)
            )
        self._volume = float(volume)
        logger.debug(f"Built reference element {geometry_type} with {len(corners)} corners, volume {volume}.")

    def __repr__(self):
        return f"<ReferenceElement {self._type} corners={self.size(self._dim)} volume={self._volume:g}>"

    @property
    def type(self) -> GeometryType:
        return self._type

    @property
    def dimension(self) -> int:
        return self._dim

    @property
    def corners(self) -> np.ndarray:
        """(n_corners, dim) read-only array of corner positions."""
        return self._positions[self._dim]

    def _check_codim(self, codim: int) -> int:
        codim = int(codim)
        if not 0 <= codim <= self._dim:
            raise IndexError(f"Codimension {codim} out of range [0, {self._dim}] for {self._type}.")
        return codim

    def size(self, codim: int) -> int:
        """Number of subentities of codimension ``codim``."""
        return len(self._subentities[self._check_codim(codim)])

    def position(self, i: int, codim: int) -> np.ndarray:
        """Barycenter of the ``i``-th subentity of codimension ``codim``."""
        codim = self._check_codim(codim)
        n = len(self._subentities[codim])
        if not 0 <= i < n:
            raise IndexError(f"Subentity index {i} out of range [0, {n}) for codim {codim} of {self._type}.")
        return self._positions[codim][i]

    def corner_indices(self, i: int, codim: int) -> Tuple[int, ...]:
        codim = self._check_codim(codim)
        n = len(self._subentities[codim])
        if not 0 <= i < n:
            raise IndexError(f"Subentity index {i} out of range [0, {n}) for codim {codim} of {self._type}.")
        return self._subentities[codim][i]

    def volume(self) -> float:
        return self._volume

    def check_inside(self, local, tol: float = 1e-12) -> bool:
        x = np.asarray(local, dtype=float).ravel()
        if x.shape != (self._dim,):
            raise ValueError(f"Expected a local coordinate of length {self._dim}, got shape {x.shape}.")
        if np.any(x < -tol):
            return False
        if self._type.is_simplex:
            return bool(x.sum() <= 1.0 + tol)
        return bool(np.all(x <= 1.0 + tol))


@lru_cache(maxsize=None)
def general(geometry_type: GeometryType) -> ReferenceElement:
    """Process-wide, memoised reference element lookup."""
    return ReferenceElement(geometry_type)
