"""pyaffgeom.integration.quadrature
Quadrature rules on reference simplices and cubes of any dimension.
"""
# pyaffgeom.integration.quadrature
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache
from itertools import product
import logging
from typing import Dict, Iterator, Tuple

import numpy as np
from numpy.polynomial.legendre import leggauss
from scipy.special import roots_jacobi

from pyaffgeom.core.geometrytype import GeometryType

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------
# 1‑D building blocks
# -------------------------------------------------------------------------
def gauss_legendre(order: int):
    if order < 1:
        raise ValueError(order)
    return leggauss(order)  # (points, weights)


def _gl01(order: int):
    """Gauss–Legendre nodes and weights mapped to [0,1]."""
    xi, w = gauss_legendre(int(order))
    return 0.5 * (xi + 1.0), 0.5 * w


def _gj01(order: int, alpha: int):
    """Gauss–Jacobi nodes/weights on [0,1] for the weight (1-u)^alpha."""
    t, w = roots_jacobi(int(order), float(alpha), 0.0)
    return 0.5 * (t + 1.0), w / 2.0 ** (alpha + 1)


def _frozen(pts, wts):
    pts = np.array(pts, dtype=np.float64)
    wts = np.array(wts, dtype=np.float64)
    pts.setflags(write=False)
    wts.setflags(write=False)
    return pts, wts


def _points_per_direction(degree: int) -> int:
    if degree < 0:
        raise ValueError(f"Quadrature degree must be non-negative, got {degree}.")
    return max(1, (degree + 2) // 2)


# -------------------------------------------------------------------------
# Reference-element rules
# -------------------------------------------------------------------------
@lru_cache(maxsize=None)
def cube_rule(dim: int, degree: int):
    """Tensor Gauss–Legendre rule on [0,1]^dim, exact up to ``degree`` per direction."""
    n = _points_per_direction(degree)
    if dim == 0:
        return _frozen(np.zeros((1, 0)), np.ones(1))
    x, w = _gl01(n)
    pts = np.array(list(product(x, repeat=dim)))[:, ::-1]   # x_0 fastest
    wts = np.array([np.prod(ws) for ws in product(w, repeat=dim)])
    return _frozen(pts, wts)


@lru_cache(maxsize=None)
def simplex_rule(dim: int, degree: int):
    """
    Conical-product rule on the reference simplex, exact for total degree <= ``degree``.

    Collapsed coordinates x_k = u_k * prod_{j<k} (1 - u_j) have Jacobian
    prod_j (1 - u_j)^(dim-1-j), absorbed into Gauss–Jacobi weights.
    """
    n = _points_per_direction(degree)
    if dim == 0:
        return _frozen(np.zeros((1, 0)), np.ones(1))
    rules = [_gj01(n, dim - 1 - j) for j in range(dim)]
    pts, wts = [], []
    for idx in product(range(n), repeat=dim):
        u = [rules[j][0][idx[j]] for j in range(dim)]
        x = np.empty(dim)
        scale = 1.0
        for j in range(dim):
            x[j] = u[j] * scale
            scale *= 1.0 - u[j]
        pts.append(x)
        wts.append(np.prod([rules[j][1][idx[j]] for j in range(dim)]))
    return _frozen(pts, wts)


def volume(geometry_type: GeometryType, degree: int = 2):
    if geometry_type.is_none:
        raise KeyError(geometry_type)
    if geometry_type.is_simplex:
        return simplex_rule(geometry_type.dim, int(degree))
    return cube_rule(geometry_type.dim, int(degree))


# -------------------------------------------------------------------------
# Pooled rule objects
# -------------------------------------------------------------------------
@dataclass(frozen=True, eq=False)
class QuadratureRule:
    type: GeometryType
    degree: int
    points: np.ndarray
    weights: np.ndarray

    def __len__(self):
        return len(self.weights)

    def __iter__(self) -> Iterator[Tuple[np.ndarray, float]]:
        for x, w in zip(self.points, self.weights):
            yield x, float(w)

    def __repr__(self):
        return f"<QuadratureRule {self.type} degree={self.degree} points={len(self)}>"


class QuadratureFactory:
    """Process-wide pool of rules handed out by ``create`` and returned by ``release``."""
    _pool: Dict[Tuple[GeometryType, int], QuadratureRule] = {}
    _refcount: Dict[Tuple[GeometryType, int], int] = {}

    @classmethod
    def create(cls, geometry_type: GeometryType, degree: int) -> QuadratureRule:
        key = (geometry_type, int(degree))
        rule = cls._pool.get(key)
        if rule is None:
            pts, wts = volume(geometry_type, degree)
            rule = QuadratureRule(geometry_type, int(degree), pts, wts)
            cls._pool[key] = rule
            cls._refcount[key] = 0
        cls._refcount[key] += 1
        logger.debug(f"Acquired {rule!r} (refcount={cls._refcount[key]}).")
        return rule

    @classmethod
    def release(cls, rule: QuadratureRule) -> None:
        key = (rule.type, rule.degree)
        if cls._pool.get(key) is not rule:
            raise ValueError(f"{rule!r} was not created by this factory or was already released.")
        cls._refcount[key] -= 1
        logger.debug(f"Released {rule!r} (refcount={cls._refcount[key]}).")
        if cls._refcount[key] == 0:
            del cls._pool[key]
            del cls._refcount[key]

    @classmethod
    def pooled(cls) -> int:
        """Number of distinct rules currently in the pool."""
        return len(cls._pool)


@contextmanager
def quadrature_rule(geometry_type: GeometryType, degree: int = 2):
    rule = QuadratureFactory.create(geometry_type, degree)
    try:
        yield rule
    finally:
        QuadratureFactory.release(rule)
