"""pyaffgeom.linalg.matrixhelper
Pseudo-inverse and pseudo-determinant of (possibly non-square) transposed Jacobians.
"""
from typing import Tuple

import numpy as np
import scipy.linalg as sla


def _as_jacobian_transposed(jt) -> np.ndarray:
    jt = np.asarray(jt, dtype=np.float64)
    if jt.ndim != 2:
        raise ValueError(f"Expected a 2-D (mydim, cdim) matrix, got shape {jt.shape}.")
    mydim, cdim = jt.shape
    if mydim > cdim:
        raise ValueError(f"Local dimension {mydim} exceeds world dimension {cdim}.")
    return jt


def right_inverse(jt) -> Tuple[np.ndarray, float]:
    """
    Moore–Penrose pseudo-inverse of ``jt`` together with its pseudo-determinant.

    Args:
        jt: (mydim, cdim) transposed Jacobian with mydim <= cdim.

    Returns:
        jit: (cdim, mydim) pseudo-inverse, ``jt @ jit = I`` for full row rank.
        det: sqrt(det(jt jt^T)) >= 0, the product of the singular values.

    Singular values below ``max(mydim, cdim) * eps * s_max`` are treated as
    zero, so a rank-deficient ``jt`` yields the minimum-norm least-squares
    inverse and a zero determinant.
    """
    jt = _as_jacobian_transposed(jt)
    mydim, cdim = jt.shape
    if mydim == 0:
        return np.zeros((cdim, 0), dtype=np.float64), 1.0

    # jt = U diag(s) Vh  ->  pinv(jt) = Vh^T diag(1/s) U^T
    U, s, Vh = sla.svd(jt, full_matrices=False)
    cutoff = max(mydim, cdim) * np.finfo(np.float64).eps * (s[0] if s.size else 0.0)
    rank_mask = s > cutoff
    s_inv = np.zeros_like(s)
    s_inv[rank_mask] = 1.0 / s[rank_mask]
    jit = (Vh.T * s_inv) @ U.T

    det = float(np.prod(s)) if np.all(rank_mask) else 0.0
    return jit, det


def pseudo_determinant(jt) -> float:
    """sqrt(det(jt jt^T)) without forming the inverse."""
    jt = _as_jacobian_transposed(jt)
    if jt.shape[0] == 0:
        return 1.0
    s = sla.svdvals(jt)
    cutoff = max(jt.shape) * np.finfo(np.float64).eps * (s[0] if s.size else 0.0)
    return float(np.prod(s)) if np.all(s > cutoff) else 0.0
