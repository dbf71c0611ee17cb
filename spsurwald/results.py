""" Define the container for Wald test results """

################################################################################
# 1: Setup
################################################################################

# Import necessary packages
from dataclasses import dataclass

import numpy as np
import pandas as pd

################################################################################
# 2: Define WaldResult
################################################################################


# Define the result record. Fields hold unrounded values; rounding only happens
# in the reporting methods.
@dataclass(frozen=True, eq=False)
class WaldResult:
    """ Result of a Wald test of R @ beta = b

    Fields
    statistic: Float, the Wald statistic (R beta - b)' (R V R')^(-1) (R beta - b)
    p_value: Float in [0,1], upper tail probability of a chi-squared
             distribution with df degrees of freedom
    df: Integer, degrees of freedom, equal to the number of rows of R
    discrepancy: r by 1 NumPy array, R @ beta - b
    R: r by P NumPy array, restriction matrix with columns in the order of the
       coefficient vector
    b: r by 1 NumPy array, hypothesized values of R @ beta
    names: length P tuple, coefficient names
    restriction_names: length r tuple, names of the restrictions
    """

    statistic: float
    p_value: float
    df: int
    discrepancy: np.ndarray
    R: np.ndarray
    b: np.ndarray
    names: tuple = ()
    restriction_names: tuple = ()

    def summary_line(self, nround=3):
        """ One line summary, with statistic and p-value rounded to nround """
        return 'Wald stat.: {} p-value: ({})'.format(
            round(self.statistic, nround), round(self.p_value, nround)
        )

    def table(self, nround=None):
        """ Produce a 2 by 1 DataFrame containing the statistic and p-value

        Input
        nround: Integer or None, if not None, round the table to this number of
                decimal points
        """
        waldtable = pd.DataFrame(
            [[self.statistic], [self.p_value]],
            index=['Wald statistic', 'p-value'], columns=['Estimate']
        )

        if nround is not None:
            waldtable = waldtable.round(nround)

        return waldtable

    def discrepancies(self):
        """ Return R @ beta - b as a pandas Series indexed by restriction """
        return pd.Series(
            self.discrepancy[:, 0], index=list(self.restriction_names),
            name='Discrepancy'
        )

    def __str__(self):
        return self.summary_line()
