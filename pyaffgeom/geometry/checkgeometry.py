"""pyaffgeom.geometry.checkgeometry
Consistency checks for every feature of a geometry mapping.

The checked object needs the AffineGeometry interface: ``type``, ``corners()``,
``corner(i)``, ``center()``, ``to_global``, ``to_local``,
``jacobian_transposed``, ``jacobian_inverse_transposed``,
``integration_element``, ``volume()`` and ``affine()``. The Jacobians are
only required to support ``matrix @ vector``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import List, Optional

import numpy as np

from pyaffgeom.core.referenceelements import general
from pyaffgeom.core import tolerances
from pyaffgeom.core.tolerances import GeometryTolerances
from pyaffgeom.integration.quadrature import quadrature_rule

logger = logging.getLogger(__name__)


@dataclass
class GeometryCheckResult:
    """Outcome of :func:`check_geometry`; falsy as soon as one check failed."""
    passed: bool = True
    messages: List[str] = field(default_factory=list)
    checked_points: int = 0

    def fail(self, message: str) -> None:
        logger.error(f"Error: {message}")
        self.passed = False
        self.messages.append(message)

    def __bool__(self):
        return self.passed

    def raise_if_failed(self) -> "GeometryCheckResult":
        if not self.passed:
            raise AssertionError("Geometry check failed:\n  " + "\n  ".join(self.messages))
        return self


def _dense_jacobian_transposed(jt, mydim: int, cdim: int) -> np.ndarray:
    """Rebuild (mydim, cdim) coefficients using only jt @ e_j."""
    dense = np.empty((mydim, cdim))
    for j in range(cdim):
        e = np.zeros(cdim)
        e[j] = 1.0
        dense[:, j] = np.asarray(jt @ e, dtype=float).reshape(mydim)
    return dense


def _dense_jacobian_inverse_transposed(jit, mydim: int, cdim: int) -> np.ndarray:
    """Rebuild (cdim, mydim) coefficients using only jit @ e_j."""
    dense = np.empty((cdim, mydim))
    for j in range(mydim):
        e = np.zeros(mydim)
        e[j] = 1.0
        dense[:, j] = np.asarray(jit @ e, dtype=float).reshape(cdim)
    return dense


def check_geometry(geometry, tol: Optional[GeometryTolerances] = None) -> GeometryCheckResult:
    """
    Run every consistency check on ``geometry`` and collect the violations.

    Checks do not stop at the first failure; each violation is logged and
    appended to ``result.messages``.
    """
    tol = tolerances.TOL if tol is None else tol
    result = GeometryCheckResult()

    ref = general(geometry.type)
    mydim = ref.dimension

    def ok(what: str) -> None:
        if tol.verbose:
            logger.debug(f"passed: {what}")

    # number and placement of corners
    n_corners = geometry.corners()
    if n_corners == ref.size(mydim):
        for i in range(n_corners):
            expected = geometry.to_global(ref.position(i, mydim))
            if np.linalg.norm(np.asarray(geometry.corner(i)) - expected) > tol.absolute:
                result.fail(f"corner() and to_global() are inconsistent (corner {i}).")
        ok("corners")
    else:
        result.fail(f"Incorrect number of corners ({n_corners}, should be {ref.size(mydim)}).")

    # center
    center = geometry.to_global(ref.position(0, 0))
    cdim = len(center)
    if np.linalg.norm(np.asarray(geometry.center()) - center) > tol.absolute:
        result.fail("center() is not consistent with to_global(reference.position(0, 0)).")
    else:
        ok("center")

    # quadrature points as test points
    with quadrature_rule(geometry.type, tol.quadrature_degree) as quadrature:
        for q, (x, _) in enumerate(quadrature):
            result.checked_points += 1

            # local and global are inverse to each other
            roundtrip = geometry.to_local(geometry.to_global(x))
            if np.linalg.norm(x - roundtrip) > tol.roundtrip:
                result.fail(f"to_global and to_local are not inverse to each other at point {q} {x}.")

            # jacobian_transposed and jacobian_inverse_transposed are inverse to each other
            jt = _dense_jacobian_transposed(geometry.jacobian_transposed(x), mydim, cdim)
            jit = _dense_jacobian_inverse_transposed(geometry.jacobian_inverse_transposed(x), mydim, cdim)
            identity = jt @ jit
            if not np.all(np.abs(identity - np.eye(mydim)) < tol.absolute):
                result.fail(
                    "jacobian_transposed and jacobian_inverse_transposed are not inverse to each other "
                    f"at point {q}: id != {identity.tolist()}."
                )

            mu = geometry.integration_element(x)
            if mu < 0:
                result.fail(f"Negative integration_element found at point {q} ({mu}).")

            jtj = jt @ jt.T
            if abs(np.sqrt(abs(np.linalg.det(jtj))) - mu) > tol.absolute:
                result.fail(f"integration_element is not consistent with jacobian_transposed at point {q}.")

            if geometry.affine():
                if abs(geometry.volume() - ref.volume() * mu) > tol.absolute:
                    result.fail(f"volume is not consistent with jacobian_transposed at point {q}.")
        ok(f"{result.checked_points} quadrature points")

    return result


def assert_geometry(geometry, tol: Optional[GeometryTolerances] = None) -> GeometryCheckResult:
    return check_geometry(geometry, tol).raise_if_failed()
