from .geometrytype import GeometryType, BasicType, simplex, cube, none
from .referenceelements import ReferenceElement, general
from .tolerances import GeometryTolerances, TOL
__all__=['GeometryType','BasicType','simplex','cube','none','ReferenceElement','general','GeometryTolerances','TOL']
