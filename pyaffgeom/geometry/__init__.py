from .affinegeometry import AffineGeometry
from .checkgeometry import check_geometry, assert_geometry, GeometryCheckResult
__all__=['AffineGeometry','check_geometry','assert_geometry','GeometryCheckResult']
