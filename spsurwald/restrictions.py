""" Functions to build restriction matrices by coefficient name """

################################################################################
# 1: Setup
################################################################################

# Import necessary packages
import numpy as np
import pandas as pd

from spsurwald.errors import AlignmentError, DimensionMismatchError

################################################################################
# 2: Auxiliary functions
################################################################################


# Define a function which maps coefficient names to their positions
def name_positions(names, fname):
    """ Map coefficient names to their positions, checking for duplicates """
    names = list(names)

    # Get positions, and check that every name only shows up once
    pos = {v: i for i, v in enumerate(names)}
    if len(pos) < len(names):
        raise AlignmentError(
            'Error in {}(): Coefficient names have to be unique'.format(fname)
        )

    return names, pos


################################################################################
# 3: Restriction builders
################################################################################

################################################################################
# 3.1: Joint significance
################################################################################


# Define a function to set up a joint significance test
def joint_significance(names, jointsig=None):
    """ Set up R for a test that a group of coefficients are all zero

    Inputs
    names: length P list-like, coefficient names, in the order of the
           coefficient vector
    jointsig: list-like, either Boolean, 0-1 integer or strings, or None;
              denotes coefficients to be tested. If this is a string-type, it
              has to contain names of coefficients which appear in names. If it
              is a Boolean or 0-1 integer, it has to be of length P, and all
              True or 1 elements denote coefficients which will be tested. If
              None, all coefficients are tested.

    Output
    R: r by P DataFrame, with one row per tested coefficient and columns named
       after the coefficients
    """
    names, pos = name_positions(names, 'joint_significance')

    # Check whether a selection was provided
    if jointsig is None:
        # If not, test everything
        select = np.ones(len(names), dtype=bool)
    else:
        # Make sure the selection is a one dimensional array (so I can iterate
        # over it)
        jointsig = np.array(jointsig).flatten()

        # Check whether jointsig is a list of strings
        if jointsig.size > 0 and isinstance(jointsig[0], str):
            unknown = [v for v in jointsig if v not in pos]
            if unknown:
                raise AlignmentError(
                    'Error in joint_significance(): The coefficient(s) '
                    + '{} '.format(unknown)
                    + 'could not be found among the coefficient names'
                )

            wanted = set(jointsig.tolist())
            select = np.array([v in wanted for v in names], dtype=bool)
        else:
            # Otherwise, this has to be a mask with one entry per coefficient
            if jointsig.size != len(names):
                raise DimensionMismatchError(
                    'Error in joint_significance(): A Boolean or 0-1 selection '
                    + 'needs one entry per coefficient '
                    + '({} provided, {} needed)'.format(
                        jointsig.size, len(names)
                    )
                )

            select = jointsig.astype(int) != 0

    if not select.any():
        raise DimensionMismatchError(
            'Error in joint_significance(): No coefficients were selected'
        )

    # Keep only those rows of the identity matrix which correspond to
    # coefficients being restricted
    R = np.eye(len(names))[select, :]

    return pd.DataFrame(
        R, index=[v for v, s in zip(names, select) if s], columns=names
    )


################################################################################
# 3.2: Equality of coefficients
################################################################################


# Define a function to set up tests of equality between pairs of coefficients,
# e.g. homogeneity of a regressor's coefficient across SUR equations
def equality(names, pairs):
    """ Set up R for a test that pairs of coefficients are equal

    Inputs
    names: length P list-like, coefficient names
    pairs: list of (first, second) tuples of coefficient names; each pair adds
           the restriction beta_first - beta_second = 0

    Output
    R: r by P DataFrame, one row per pair, columns named after the coefficients
    """
    names, pos = name_positions(names, 'equality')

    rows = []
    rnames = []

    for first, second in pairs:
        unknown = [v for v in (first, second) if v not in pos]
        if unknown:
            raise AlignmentError(
                'Error in equality(): The coefficient(s) '
                + '{} '.format(unknown)
                + 'could not be found among the coefficient names'
            )

        # A coefficient is trivially equal to itself, and the row would be zero
        if first == second:
            raise DimensionMismatchError(
                'Error in equality(): The pair ({0}, {0}) '.format(first)
                + 'does not restrict anything'
            )

        row = np.zeros(len(names))
        row[pos[first]] = 1
        row[pos[second]] = -1

        rows.append(row)
        rnames.append('{} = {}'.format(first, second))

    if not rows:
        raise DimensionMismatchError(
            'Error in equality(): At least one pair of coefficients is needed'
        )

    return pd.DataFrame(np.array(rows), index=rnames, columns=names)
