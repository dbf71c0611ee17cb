"""
Tests for the restriction builders.
"""

import numpy as np
import pytest

from spsurwald import (
    AlignmentError, DimensionMismatchError, equality, joint_significance,
    wald_test
)


class TestJointSignificance:

    def test_by_name(self, names):
        R = joint_significance(names, ['UN83_1', 'SMSA_2'])

        assert R.shape == (2, 8)
        assert list(R.columns) == names
        assert list(R.index) == ['UN83_1', 'SMSA_2']
        assert R.loc['UN83_1', 'UN83_1'] == 1
        assert R.to_numpy().sum() == 2

    def test_by_mask(self, names):
        mask = [0, 1, 1, 0, 0, 0, 0, 0]
        R = joint_significance(names, mask)

        np.testing.assert_array_equal(R.to_numpy(), np.eye(8)[[1, 2], :])

        Rb = joint_significance(names, np.array(mask, dtype=bool))
        np.testing.assert_array_equal(Rb.to_numpy(), R.to_numpy())

    def test_everything(self, names):
        np.testing.assert_array_equal(
            joint_significance(names).to_numpy(), np.eye(8)
        )

    def test_unknown_name(self, names):
        with pytest.raises(AlignmentError):
            joint_significance(names, ['SMSA_3'])

    def test_bad_mask(self, names):
        with pytest.raises(DimensionMismatchError):
            joint_significance(names, [1, 0])

        with pytest.raises(DimensionMismatchError):
            joint_significance(names, [0] * 8)


class TestEquality:

    def test_cross_equation(self, names, betas, cov):
        R = equality(names, [('Intercept_1', 'Intercept_2'),
                             ('SMSA_1', 'SMSA_2')])

        assert list(R.index) == ['Intercept_1 = Intercept_2',
                                 'SMSA_1 = SMSA_2']
        np.testing.assert_array_equal(
            R.to_numpy(),
            [[1, 0, 0, 0, -1, 0, 0, 0], [0, 0, 0, 1, 0, 0, 0, -1]]
        )

        res = wald_test(betas, cov, R)
        assert res.df == 2
        assert res.statistic == pytest.approx(0.5)
        assert res.restriction_names == tuple(R.index)

    def test_unknown_name(self, names):
        with pytest.raises(AlignmentError):
            equality(names, [('SMSA_1', 'SMSA_3')])

    def test_self_pair(self, names):
        with pytest.raises(DimensionMismatchError):
            equality(names, [('SMSA_1', 'SMSA_1')])

    def test_no_pairs(self, names):
        with pytest.raises(DimensionMismatchError):
            equality(names, [])

    def test_duplicate_names(self):
        with pytest.raises(AlignmentError):
            equality(['a', 'a', 'b'], [('a', 'b')])
