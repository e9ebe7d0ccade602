
import pytest
import numpy as np
from kdecore import Matrix2, Interval, STANDARD_NORMAL

@pytest.fixture
def rng():
    return np.random.default_rng(42)

@pytest.fixture
def kernel():
    return STANDARD_NORMAL

@pytest.fixture
def bandwidth_matrix():
    return Matrix2((2.0, 0.3), (0.3, 0.5))

@pytest.fixture
def interval():
    return Interval(-1.0, 3.0)  # width 4

@pytest.fixture
def spd_matrix(rng):
    A = rng.normal(size=(2, 2))
    return Matrix2.from_array(A @ A.T + 0.5 * np.eye(2))
