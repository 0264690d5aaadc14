import numba


@numba.njit(cache=True, fastmath=True)
def affine_forward(origin, jt, local_pts, out):
    """
    out[q] = origin + local_pts[q] @ jt  for every point q.

    origin: (cdim,), jt: (mydim, cdim), local_pts: (nQ, mydim), out: (nQ, cdim)
    """
    nQ = local_pts.shape[0]
    mydim, cdim = jt.shape
    for q in range(nQ):
        for c in range(cdim):
            acc = origin[c]
            for m in range(mydim):
                acc += local_pts[q, m] * jt[m, c]
            out[q, c] = acc


@numba.njit(cache=True, fastmath=True)
def affine_inverse(origin, jit, global_pts, out):
    """
    out[q] = (global_pts[q] - origin) @ jit  for every point q.

    origin: (cdim,), jit: (cdim, mydim), global_pts: (nQ, cdim), out: (nQ, mydim)
    """
    nQ = global_pts.shape[0]
    cdim, mydim = jit.shape
    for q in range(nQ):
        for m in range(mydim):
            acc = 0.0
            for c in range(cdim):
                acc += (global_pts[q, c] - origin[c]) * jit[c, m]
            out[q, m] = acc
