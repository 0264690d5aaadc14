"""pyaffgeom.geometry.affinegeometry
Reference → world mapping with a constant Jacobian.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Sequence, Union

import numpy as np

from pyaffgeom.core import tolerances
from pyaffgeom.core.geometrytype import GeometryType
from pyaffgeom.core.referenceelements import ReferenceElement, general
from pyaffgeom.integration.quadrature import volume as quadrature_volume
from pyaffgeom.linalg.matrixhelper import right_inverse
from pyaffgeom.geometry.kernels import affine_forward, affine_inverse

logger = logging.getLogger(__name__)

ReferenceLike = Union[ReferenceElement, GeometryType]


def _resolve_reference(reference: ReferenceLike) -> ReferenceElement:
    if isinstance(reference, ReferenceElement):
        return reference
    if isinstance(reference, GeometryType):
        return general(reference)
    raise TypeError(f"Expected a ReferenceElement or GeometryType, got {type(reference).__name__}.")


def _readonly(array) -> np.ndarray:
    array = np.array(array, dtype=np.float64)
    array.setflags(write=False)
    return array


class AffineGeometry:
    """
    Affine mapping x = origin + local @ jt of a reference element into R^cdim.

    The transposed Jacobian ``jt`` has shape (mydim, cdim) with mydim <= cdim.
    Its pseudo-inverse ``jit`` (cdim, mydim) and the integration element
    sqrt(det(jt jt^T)) are computed once at construction. A rank-deficient
    ``jt`` is accepted; its integration element is zero.

    ``user_data`` is an arbitrary payload carried along with the geometry
    and the only state that may change after construction.
    """

    def __init__(self, reference: ReferenceLike, origin, jacobian_transposed, user_data: Any = None):
        ref = _resolve_reference(reference)
        origin = np.asarray(origin, dtype=np.float64)
        jt = np.asarray(jacobian_transposed, dtype=np.float64)
        mydim = ref.dimension
        if origin.ndim != 1:
            raise ValueError(f"Origin must be a 1-D coordinate, got shape {origin.shape}.")
        cdim = origin.shape[0]
        if mydim > cdim:
            raise ValueError(f"Reference dimension {mydim} exceeds world dimension {cdim}.")
        if jt.size == 0 and mydim * cdim == 0:
            jt = jt.reshape(mydim, cdim)
        if jt.shape != (mydim, cdim):
            raise ValueError(f"Transposed Jacobian must have shape {(mydim, cdim)}, got {jt.shape}.")

        self._ref = ref
        self._origin = _readonly(origin)
        self._jt = _readonly(jt)
        jit, det = right_inverse(self._jt)
        self._jit = _readonly(jit)
        self._integration_element = float(det)
        self.user_data = user_data

        if det == 0.0 and mydim > 0:
            logger.debug(f"Degenerate Jacobian for {ref.type} geometry at origin {self._origin}.")
        logger.debug(f"Built {self!r}.")

    @classmethod
    def from_corners(cls, reference: ReferenceLike, corners: Sequence, user_data: Any = None) -> "AffineGeometry":
        """
        Build the mapping from the images of the reference corners.

        ``corners`` holds either the images of the first mydim+1 reference
        corners (row i of jt is corners[i+1] - corners[0]) or the images of
        all reference corners, in which case row i is taken from the corner
        located at e_i and every other corner must be the image of its
        reference corner within ``TOL.absolute``.
        """
        ref = _resolve_reference(reference)
        mydim = ref.dimension
        n_all = ref.size(mydim)
        n = len(corners)
        if n == mydim + 1:
            axis_corners = range(1, mydim + 1)
        elif n == n_all:
            axis_corners = [_axis_corner(ref, i) for i in range(mydim)]
        else:
            raise ValueError(
                f"{ref.type} geometry needs {mydim + 1} or {n_all} corner coordinates, got {n}."
            )
        origin = np.asarray(corners[0], dtype=np.float64)
        if origin.ndim != 1:
            raise ValueError(f"Corner coordinates must be 1-D, got shape {origin.shape}.")
        jt = np.empty((mydim, origin.shape[0]), dtype=np.float64)
        for i, k in enumerate(axis_corners):
            corner = np.asarray(corners[k], dtype=np.float64)
            if corner.shape != origin.shape:
                raise ValueError(f"Corner {k} has shape {corner.shape}, expected {origin.shape}.")
            jt[i] = corner - origin
        geometry = cls(ref, origin, jt, user_data)
        if n != mydim + 1:
            for k in range(n):
                corner = np.asarray(corners[k], dtype=np.float64)
                if corner.shape != origin.shape:
                    raise ValueError(f"Corner {k} has shape {corner.shape}, expected {origin.shape}.")
                if np.linalg.norm(geometry.corner(k) - corner) > tolerances.TOL.absolute:
                    raise ValueError(f"Corner {k} {corner.tolist()} is not an affine image of the {ref.type}.")
        return geometry

    def __repr__(self):
        return (f"AffineGeometry(type={self.type}, mydim={self.mydim}, cdim={self.cdim}, "
                f"integration_element={self._integration_element:.6g})")

    # ---- static information ----------------------------------------
    @property
    def type(self) -> GeometryType:
        return self._ref.type

    @property
    def reference_element(self) -> ReferenceElement:
        return self._ref

    @property
    def mydim(self) -> int:
        return self._jt.shape[0]

    @property
    def cdim(self) -> int:
        return self._jt.shape[1]

    def affine(self) -> bool:
        return True

    # ---- corners ------------------------------------------------------
    def corners(self) -> int:
        return self._ref.size(self.mydim)

    def corner(self, i: int) -> np.ndarray:
        n = self.corners()
        if not 0 <= i < n:
            raise IndexError(f"Corner index {i} out of range [0, {n}).")
        return self.to_global(self._ref.position(i, self.mydim))

    def center(self) -> np.ndarray:
        return self.to_global(self._ref.position(0, 0))

    # ---- mapping ----------------------------------------------------
    def to_global(self, local) -> np.ndarray:
        x = np.asarray(local, dtype=np.float64)
        if x.shape != (self.mydim,):
            raise ValueError(f"Expected a local coordinate of shape ({self.mydim},), got {x.shape}.")
        return self._origin + x @ self._jt

    def to_local(self, global_point) -> np.ndarray:
        """Minimum-norm minimiser of |to_global(y) - global_point|."""
        x = np.asarray(global_point, dtype=np.float64)
        if x.shape != (self.cdim,):
            raise ValueError(f"Expected a global coordinate of shape ({self.cdim},), got {x.shape}.")
        return (x - self._origin) @ self._jit

    def to_global_many(self, local_points) -> np.ndarray:
        pts = np.ascontiguousarray(local_points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != self.mydim:
            raise ValueError(f"Expected local points of shape (n, {self.mydim}), got {pts.shape}.")
        out = np.empty((pts.shape[0], self.cdim), dtype=np.float64)
        affine_forward(self._origin, self._jt, pts, out)
        return out

    def to_local_many(self, global_points) -> np.ndarray:
        pts = np.ascontiguousarray(global_points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != self.cdim:
            raise ValueError(f"Expected global points of shape (n, {self.cdim}), got {pts.shape}.")
        out = np.empty((pts.shape[0], self.mydim), dtype=np.float64)
        affine_inverse(self._origin, self._jit, pts, out)
        return out

    # ---- derivatives (constant) -------------------------------------
    def jacobian_transposed(self, local=None) -> np.ndarray:
        return self._jt

    def jacobian_inverse_transposed(self, local=None) -> np.ndarray:
        return self._jit

    def jacobian(self, local=None) -> np.ndarray:
        return self._jt.T

    def jacobian_inverse(self, local=None) -> np.ndarray:
        return self._jit.T

    def integration_element(self, local=None) -> float:
        return self._integration_element

    def volume(self) -> float:
        return self._integration_element * self._ref.volume()

    def integrate(self, func: Callable[[np.ndarray], float], degree: int = 2) -> float:
        """∫ func dx over the image, using a reference rule of the given degree."""
        pts, wts = quadrature_volume(self.type, degree)
        xs = self.to_global_many(np.asarray(pts).reshape(len(wts), self.mydim))
        vals = np.array([func(x) for x in xs], dtype=np.float64)
        return float((vals * wts).sum() * self._integration_element)


def _axis_corner(ref: ReferenceElement, axis: int) -> int:
    """Index of the reference corner located at the unit vector e_axis."""
    target = np.zeros(ref.dimension)
    target[axis] = 1.0
    for k, c in enumerate(ref.corners):
        if np.array_equal(c, target):
            return k
    raise ValueError(f"{ref.type} has no corner at e_{axis}.")
