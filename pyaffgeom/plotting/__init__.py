from .geometry import plot_geometry
__all__=['plot_geometry']
