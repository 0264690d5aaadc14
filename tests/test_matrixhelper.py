import numpy as np
import pytest

from pyaffgeom.linalg.matrixhelper import right_inverse, pseudo_determinant


def test_square_reduces_to_inverse():
    jt = np.array([[2.0, 0.0], [1.0, 3.0]])
    jit, det = right_inverse(jt)
    assert np.isclose(det, 6.0)
    assert np.allclose(jit, np.linalg.inv(jt))


def test_surface_in_3d():
    jt = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
    jit, det = right_inverse(jt)
    assert jit.shape == (3, 2)
    assert np.isclose(det, 1.0)
    assert np.allclose(jit, jt.T)


def test_line_in_3d():
    jit, det = right_inverse([[1.0, 1.0, 0.0]])
    assert np.isclose(det, np.sqrt(2.0))
    assert np.allclose(jit, [[0.5], [0.5], [0.0]])


def test_pseudo_determinant_matches_gram_determinant():
    rng = np.random.default_rng(3)
    jt = rng.normal(size=(2, 4))
    jit, det = right_inverse(jt)
    assert np.isclose(det, np.sqrt(np.linalg.det(jt @ jt.T)))
    assert np.isclose(pseudo_determinant(jt), det)
    assert np.allclose(jt @ jit, np.eye(2))


def test_rank_deficient_gives_minimum_norm_inverse():
    jt = np.array([[1.0, 0.0], [2.0, 0.0]])
    jit, det = right_inverse(jt)
    assert det == 0.0
    assert pseudo_determinant(jt) == 0.0
    assert np.allclose(jit, np.linalg.pinv(jt))


def test_zero_matrix():
    jit, det = right_inverse(np.zeros((2, 3)))
    assert det == 0.0
    assert np.allclose(jit, 0.0)


def test_zero_local_dimension():
    jit, det = right_inverse(np.zeros((0, 3)))
    assert jit.shape == (3, 0)
    assert det == 1.0


@pytest.mark.parametrize("bad", [np.ones((3, 2)), np.ones(3)])
def test_invalid_shapes(bad):
    with pytest.raises(ValueError):
        right_inverse(bad)
