from .matrixhelper import right_inverse, pseudo_determinant
__all__=['right_inverse','pseudo_determinant']
