"""pyaffgeom.plotting.geometry"""
import numpy as np
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection
from mpl_toolkits.mplot3d.art3d import Line3DCollection

from pyaffgeom.integration.quadrature import volume as quadrature_volume


def _edges(geometry):
    """World-space segments of the 1-D subentities of the geometry's image."""
    ref = geometry.reference_element
    mydim = ref.dimension
    if mydim == 0:
        return np.empty((0, 2, geometry.cdim))
    codim = mydim - 1
    segs = []
    for e in range(ref.size(codim)):
        i, j = ref.corner_indices(e, codim)
        segs.append([geometry.corner(i), geometry.corner(j)])
    return np.array(segs, dtype=float)


def _lift(points, cdim):
    # 1-D images are drawn on the x-axis
    points = np.asarray(points, dtype=float)
    if cdim == 1:
        return np.column_stack([points[..., 0].ravel(), np.zeros(points[..., 0].size)]).reshape(points.shape[:-1] + (2,))
    return points


def plot_geometry(geometry, ax=None, *, degree=2, annotate=True, show=False):
    """
    Draw the image of the reference element under ``geometry``.

    Args:
        geometry: AffineGeometry with cdim in {1, 2, 3}.
        ax: Existing axes (a 3-D axes for cdim == 3); created if None.
        degree: Degree of the quadrature rule whose mapped points are drawn.
        annotate: Label corners with their reference index.
        show: Call plt.show() at the end.
    Returns:
        matplotlib.axes.Axes: The axes object containing the plot.
    """
    cdim = geometry.cdim
    if cdim not in (1, 2, 3):
        raise ValueError(f"Cannot plot a geometry in {cdim}-D world space.")
    if ax is None:
        fig = plt.figure(figsize=(6, 6))
        ax = fig.add_subplot(projection="3d" if cdim == 3 else None)

    corners = _lift([geometry.corner(i) for i in range(geometry.corners())], cdim)
    segs = _lift(_edges(geometry), cdim)
    pts, _ = quadrature_volume(geometry.type, degree)
    qpts = _lift(geometry.to_global_many(np.asarray(pts).reshape(-1, geometry.mydim)), cdim)
    center = _lift(geometry.center()[None, :], cdim)[0]

    if cdim == 3:
        ax.add_collection3d(Line3DCollection(segs, colors="black", linewidths=1.2))
        ax.scatter(corners[:, 0], corners[:, 1], corners[:, 2], color="black", s=25, label="corners")
        ax.scatter(qpts[:, 0], qpts[:, 1], qpts[:, 2], color="tab:blue", s=12, label="quadrature points")
        ax.scatter([center[0]], [center[1]], [center[2]], color="tab:red", marker="x", s=40, label="center")
    else:
        ax.add_collection(LineCollection(segs, colors="black", linewidths=1.2))
        ax.plot(corners[:, 0], corners[:, 1], "ko", ms=5, label="corners")
        ax.plot(qpts[:, 0], qpts[:, 1], ".", color="tab:blue", ms=6, label="quadrature points")
        ax.plot(center[0], center[1], "x", color="tab:red", ms=8, label="center")
        ax.set_aspect("equal", adjustable="datalim")
        ax.autoscale_view()

    if annotate:
        for i, c in enumerate(corners):
            if cdim == 3:
                ax.text(c[0], c[1], c[2], str(i))
            else:
                ax.annotate(str(i), c[:2], textcoords="offset points", xytext=(4, 4))

    ax.set_title(f"{geometry.type}: volume = {geometry.volume():.4g}")
    ax.legend(loc="best")
    if show:
        plt.show()
    return ax
