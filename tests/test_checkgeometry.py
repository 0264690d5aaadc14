import logging

import numpy as np
import pytest
from scipy.sparse.linalg import aslinearoperator

from pyaffgeom.core.geometrytype import simplex, cube, VERTEX, LINE, TRIANGLE, QUADRILATERAL, HEXAHEDRON
from pyaffgeom.core.tolerances import GeometryTolerances
from pyaffgeom.geometry import AffineGeometry, check_geometry, assert_geometry
from pyaffgeom.integration.quadrature import QuadratureFactory, volume


def _random_geometry(gt, cdim, seed):
    rng = np.random.default_rng(seed)
    return AffineGeometry(gt, rng.normal(size=cdim), rng.normal(size=(gt.dim, cdim)))


GOOD = [
    AffineGeometry(TRIANGLE, [0.0, 0.0], np.eye(2)),
    AffineGeometry.from_corners(TRIANGLE, [(0, 0), (2, 0), (0, 2)]),
    AffineGeometry.from_corners(TRIANGLE, [(0, 0, 0), (1, 0, 0), (0, 1, 0)]),
    AffineGeometry.from_corners(QUADRILATERAL, [(1, 1), (3, 1), (1.5, 2)]),
    AffineGeometry.from_corners(LINE, [(0, 0, 0), (1, 2, 2)]),
    AffineGeometry(VERTEX, [1.0, 2.0, 3.0], np.zeros((0, 3))),
    _random_geometry(simplex(3), 3, 1),
    _random_geometry(simplex(3), 4, 2),
    _random_geometry(HEXAHEDRON, 3, 3),
    _random_geometry(cube(2), 5, 4),
    _random_geometry(simplex(4), 4, 5),
]


@pytest.mark.parametrize("geo", GOOD, ids=repr)
def test_valid_geometries_pass(geo):
    result = check_geometry(geo)
    assert result
    assert result.passed and result.messages == []
    assert result.checked_points == len(volume(geo.type, 2)[1])


def test_quadrature_pool_is_released():
    before = QuadratureFactory.pooled()
    check_geometry(GOOD[0])
    assert QuadratureFactory.pooled() == before


def test_higher_degree_uses_more_points():
    geo = GOOD[1]
    low = check_geometry(geo)
    high = check_geometry(geo, GeometryTolerances(quadrature_degree=6))
    assert high and high.checked_points > low.checked_points


def test_degenerate_geometry_is_reported_not_raised():
    geo = AffineGeometry.from_corners(TRIANGLE, [(0, 0), (1, 0), (2, 0)])
    result = check_geometry(geo)
    assert not result
    assert any(m.startswith("to_global and to_local are not inverse") for m in result.messages)
    assert any(m.startswith("jacobian_transposed and jacobian_inverse_transposed are not inverse") for m in result.messages)
    # integration element and volume stay consistent with the Jacobian
    assert not any("integration_element" in m for m in result.messages)
    assert not any("volume" in m for m in result.messages)


class WrongVolume(AffineGeometry):
    def volume(self):
        return 42.0


class WrongCorners(AffineGeometry):
    def corners(self):
        return 2


class ShiftedCenter(AffineGeometry):
    def center(self):
        return super().center() + 1.0


class NegativeIntegrationElement(AffineGeometry):
    def integration_element(self, local=None):
        return -super().integration_element(local)


class ShiftedCorner(AffineGeometry):
    def corner(self, i):
        return super().corner(i) + 0.5


class BrokenLocal(AffineGeometry):
    def to_local(self, global_point):
        return super().to_local(global_point) * 0.5


def test_all_violations_are_collected():
    geo = WrongVolume(TRIANGLE, [0.0, 0.0], np.eye(2))
    result = check_geometry(geo)
    assert not result
    # one volume violation per test point, no early exit
    assert len(result.messages) == result.checked_points == 4
    assert all("volume is not consistent" in m for m in result.messages)


def test_corner_count_and_center():
    result = check_geometry(WrongCorners(TRIANGLE, [0.0, 0.0], np.eye(2)))
    assert any("Incorrect number of corners (2, should be 3)" in m for m in result.messages)
    result = check_geometry(ShiftedCenter(TRIANGLE, [0.0, 0.0], np.eye(2)))
    assert result.messages == ["center() is not consistent with to_global(reference.position(0, 0))."]


def test_misplaced_corners():
    result = check_geometry(ShiftedCorner(TRIANGLE, [0.0, 0.0], np.eye(2)))
    assert result.messages == [
        f"corner() and to_global() are inconsistent (corner {i})." for i in range(3)
    ]


def test_broken_inverse_mapping():
    result = check_geometry(BrokenLocal(QUADRILATERAL, [1.0, 2.0], np.eye(2)))
    assert not result
    assert len(result.messages) == result.checked_points == 4
    for q, m in enumerate(result.messages):
        assert m.startswith(f"to_global and to_local are not inverse to each other at point {q} ")


def test_negative_integration_element():
    result = check_geometry(NegativeIntegrationElement(TRIANGLE, [0.0, 0.0], 2 * np.eye(2)))
    assert any("Negative integration_element" in m for m in result.messages)
    assert any("integration_element is not consistent" in m for m in result.messages)


def test_violations_are_logged(caplog):
    with caplog.at_level(logging.ERROR, logger="pyaffgeom.geometry.checkgeometry"):
        check_geometry(WrongVolume(TRIANGLE, [0.0, 0.0], np.eye(2)))
    assert sum("volume is not consistent" in r.getMessage() for r in caplog.records) == 4


class LinearOperatorGeometry:
    """Exposes the Jacobians only through matrix-vector products."""

    def __init__(self, geometry):
        self._geometry = geometry

    def __getattr__(self, name):
        return getattr(self._geometry, name)

    def jacobian_transposed(self, local=None):
        return aslinearoperator(self._geometry.jacobian_transposed(local))

    def jacobian_inverse_transposed(self, local=None):
        return aslinearoperator(self._geometry.jacobian_inverse_transposed(local))


def test_jacobians_are_probed_through_matvec():
    geo = LinearOperatorGeometry(_random_geometry(simplex(2), 3, 7))
    assert check_geometry(geo)


def test_assert_geometry():
    assert assert_geometry(GOOD[0]).passed
    with pytest.raises(AssertionError, match="volume is not consistent"):
        assert_geometry(WrongVolume(TRIANGLE, [0.0, 0.0], np.eye(2)))
