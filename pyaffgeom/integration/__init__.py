from .quadrature import (
    gauss_legendre, cube_rule, simplex_rule, volume,
    QuadratureRule, QuadratureFactory, quadrature_rule,
)
__all__=['gauss_legendre','cube_rule','simplex_rule','volume',
         'QuadratureRule','QuadratureFactory','quadrature_rule']
