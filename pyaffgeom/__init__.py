"""pyaffgeom
Affine reference-to-world mappings with pseudo-inverse Jacobians.
"""
from pyaffgeom.core import GeometryType, simplex, cube, general, GeometryTolerances, TOL
from pyaffgeom.geometry import AffineGeometry, check_geometry, assert_geometry, GeometryCheckResult

__version__ = "0.1.0"
__all__=['GeometryType','simplex','cube','general','GeometryTolerances','TOL',
         'AffineGeometry','check_geometry','assert_geometry','GeometryCheckResult']
