""" Shared fixtures: a two equation SUR model with four coefficients each """

import numpy as np
import pandas as pd
import pytest

NAMES = [
    'Intercept_1', 'UN83_1', 'NMR83_1', 'SMSA_1',
    'Intercept_2', 'UN80_2', 'NMR80_2', 'SMSA_2',
]


@pytest.fixture
def names():
    return list(NAMES)


@pytest.fixture
def betas():
    return pd.Series([1., 2., 3., 4., 1., 2., 3., 5.], index=NAMES)


@pytest.fixture
def cov():
    return pd.DataFrame(np.eye(8), index=NAMES, columns=NAMES)


@pytest.fixture
def cov_dense():
    """ A positive definite covariance matrix with correlated equations """
    rng = np.random.default_rng(1984)
    A = rng.normal(size=(8, 8))
    return pd.DataFrame(A @ A.T + 8 * np.eye(8), index=NAMES, columns=NAMES)


@pytest.fixture
def R_smsa():
    """ Equality of the SMSA coefficients in both equations """
    return np.array([[0, 0, 0, 1, 0, 0, 0, -1]])
