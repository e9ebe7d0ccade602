from .matrix import Matrix2, Transpose, Vector2, quadratic_form
from .utils import add_diag_jitter, symmetrize_pd, check_positive_definite
