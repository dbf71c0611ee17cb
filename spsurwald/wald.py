''' Define Wald test class '''

################################################################################
# 1: Setup
################################################################################

# Import necessary packages
from collections.abc import Mapping

import numpy as np
import pandas as pd
import scipy.linalg as scl
import scipy.stats as scs

from spsurwald.errors import (
    AlignmentError, DimensionMismatchError, NumericInstabilityError,
    SingularCovarianceError
)
from spsurwald.restrictions import joint_significance
from spsurwald.results import WaldResult

################################################################################
# 2: Auxiliary functions
################################################################################


# Define a function which turn a list or vector-like object into a proper two
# dimensional column vector
def cvec(a):
    """ Turn a list or vector-like object into a proper column vector

    Input
    a: List or vector-like object, has to be a potential input for np.array()

    Output
    vec: two dimensional NumPy array, with the first dimension weakly greater
         than the second (resulting in a column vector for a vector-like input)
    """
    # Conver input into a two dimensional NumPy array
    vec = np.array(a, ndmin=2)

    # Check whether the second dimension is strictly greater than the first
    # (remembering Python's zero indexing)
    if vec.shape[0] < vec.shape[1]:
        # If so, transpose the input vector
        vec = vec.T

    # Return the column vector
    return vec


# Define a function which checks whether a pandas index carries actual labels
def is_labelled(index):
    """ False for a default 0, 1, ..., n-1 pandas index """
    return not isinstance(index, pd.RangeIndex)


# Define a function which returns the position of each name among a set of
# labels, so that everything afterwards can be done on plain arrays
def label_index(labels, names, what, fname):
    """ Get the position of every coefficient name among a set of labels

    Inputs
    labels: list-like, labels to search (e.g. the index of a covariance matrix)
    names: length P list, coefficient names
    what: string, description of the labels, used in error messages
    fname: string, name of the calling function, used in error messages

    Output
    idx: length P integer array, such that labels[idx] == names
    """
    labels = pd.Index(labels)

    # Each coefficient needs exactly one match
    if labels.has_duplicates:
        raise AlignmentError(
            'Error in {}(): The {} contain duplicate labels '.format(fname, what)
            + '({})'.format(list(labels[labels.duplicated()]))
        )

    missing = [v for v in names if v not in labels]
    if missing:
        raise AlignmentError(
            'Error in {}(): The coefficient(s) {} '.format(fname, missing)
            + 'could not be found among the {}'.format(what)
        )

    # Labels which do not belong to any coefficient cannot be placed either
    wanted = set(names)
    foreign = [v for v in labels if v not in wanted]
    if foreign:
        raise AlignmentError(
            'Error in {}(): The {} contain label(s) {} '.format(
                fname, what, foreign
            )
            + 'which are not coefficient names'
        )

    return labels.get_indexer(names)


# Define a function which gets the coefficient vector and covariance matrix out
# of a fitted model
def model_parts(results):
    """ Get coefficients and their covariance matrix from a fitted model

    Input
    results: fitted model, either an object with attributes betas and cov, a
             dictionary with keys 'betas' and 'cov', or a dictionary of
             estimates with keys 'coefficients' and 'covariance matrix'
             (objects carrying such a dictionary as attribute est work, too)

    Outputs
    betas: the coefficient vector, as stored in results
    cov: the covariance matrix, as stored in results
    """
    # Check for the attribute layout first
    if hasattr(results, 'betas') and hasattr(results, 'cov'):
        betas, cov = results.betas, results.cov
    elif isinstance(results, Mapping) and ('betas' in results):
        betas, cov = results['betas'], results.get('cov')
    elif isinstance(results, Mapping) and ('coefficients' in results):
        betas, cov = results['coefficients'], results.get('covariance matrix')
    elif isinstance(getattr(results, 'est', None), Mapping):
        return model_parts(results.est)
    else:
        raise AlignmentError(
            'Error in wald_betas(): The fitted model does not provide a '
            + 'coefficient vector (betas or coefficients)'
        )

    if cov is None:
        raise AlignmentError(
            'Error in wald_betas(): The fitted model does not provide a '
            + 'covariance matrix for its coefficients'
        )

    return betas, cov


################################################################################
# 3: Define Wald test class
################################################################################


# Define Wald test
class wald():
    """ Runs Wald tests of linear restrictions on estimated coefficients """

    # Define initialization function
    def __init__(self, verbose=True, nround=3, tol=1e-12, name_gen='beta'):
        """ Initialize wald() class

        Inputs
        verbose: Boolean, if True, a one line summary of each test is printed
        nround: Integer, the printed summary and wald.summarize() will be
                rounded to this number of decimal points
        tol: Positive scalar, R @ V @ R' is treated as singular if its smallest
             singular value is no larger than tol times its largest one
        name_gen: String, generic name prefix for coefficients, used if no
                  coefficient names are provided in wald.test()
        """
        # Instantiate parameters
        self.verbose = verbose
        self.nround = nround
        self.tol = tol
        self.name_gen = name_gen

        # Variables created by self.test()
        self.names = None
        self.W = None
        self.pW = None
        self.q = None
        self.result = None

        # Variables created by self.summarize()
        self.waldtable = None

    # Define a function to get the coefficients, their names, and the aligned
    # covariance matrix
    def align(self, betas, cov, names=None):
        """ Align coefficients and covariance matrix by name

        Inputs
        betas: P by 1 vector-like, coefficients. If this is a pandas Series or
               DataFrame with a non-default index, the index provides the
               coefficient names.
        cov: P by P matrix-like, covariance matrix of the coefficients. If this
             is a pandas DataFrame with a non-default index, its rows and
             columns are reordered to match the coefficient names.
        names: length P list or None, coefficient names; overrides names
               inferred from betas

        Outputs
        beta: P by 1 NumPy array, coefficients
        V: P by P NumPy array, covariance matrix, in the order of beta
        names: length P list, coefficient names
        """
        # Instantiate coefficient vector
        if isinstance(betas, pd.DataFrame) and (betas.shape[1] != 1):
            raise DimensionMismatchError(
                'Error in wald.test(): The coefficients have to be a vector, '
                + 'but a DataFrame with {} columns '.format(betas.shape[1])
                + 'was provided'
            )

        beta = cvec(np.array(betas, dtype=np.float64))

        if (beta.ndim != 2) or (beta.shape[1] != 1):
            raise DimensionMismatchError(
                'Error in wald.test(): The coefficients have to be a vector, '
                + 'but an array of shape {} '.format(np.shape(betas))
                + 'was provided'
            )

        P = beta.shape[0]

        # Instantiate covariance matrix
        V = np.array(cov, dtype=np.float64)

        if (V.ndim != 2) or (V.shape != (P, P)):
            raise DimensionMismatchError(
                'Error in wald.test(): The covariance matrix has to be '
                + '{0} by {0}, one row and column per coefficient, '.format(P)
                + 'but has shape {}'.format(V.shape)
            )

        # Get coefficient names
        #
        # Check whether names were provided
        if names is not None:
            names = list(names)

            if len(names) != P:
                raise DimensionMismatchError(
                    'Error in wald.test(): {} names were '.format(len(names))
                    + 'provided for {} coefficients'.format(P)
                )

        # Alternatively, check whether the coefficients are a labelled pandas
        # object
        elif (
                isinstance(betas, (pd.Series, pd.DataFrame))
                and is_labelled(betas.index)
        ):
            names = list(betas.index)

        # Alternatively, check whether the covariance matrix is labelled
        elif isinstance(cov, pd.DataFrame) and is_labelled(cov.index):
            names = list(cov.index)

        # If all else fails...
        else:
            # ... use generic names
            names = [self.name_gen + str(i+1) for i in np.arange(P)]

        if len(set(names)) < P:
            raise AlignmentError(
                'Error in wald.test(): Coefficient names have to be unique'
            )

        # Reorder a labelled covariance matrix to match the coefficients, by
        # computing the permutation once and applying it to the array
        if isinstance(cov, pd.DataFrame):
            if is_labelled(cov.index):
                rows = label_index(
                    cov.index, names, 'covariance matrix rows', 'wald.test'
                )
                V = V[rows, :]

            if is_labelled(cov.columns):
                cols = label_index(
                    cov.columns, names, 'covariance matrix columns', 'wald.test'
                )
                V = V[:, cols]

        # A covariance matrix has to be symmetric, up to rounding error
        scale = np.abs(V).max() if V.size > 0 else 0
        if np.all(np.isfinite(V)) and not np.allclose(
                V, V.T, rtol=1e-8, atol=1e-12 * scale
        ):
            raise NumericInstabilityError(
                'Error in wald.test(): The covariance matrix is not symmetric '
                + '(largest difference to its transpose is '
                + '{:.3g})'.format(np.abs(V - V.T).max())
            )

        return beta, V, names

    # Define a function to set up the restriction matrix and null values
    def restrictions(self, R, b, names):
        """ Set up R and b as arrays, aligning R's columns with the coefficients

        Inputs
        R: r by P matrix-like, or flat vector of length r*P listing the
           restrictions one after the other. If R is a pandas DataFrame with a
           non-default column index, its columns are matched to the coefficient
           names, and a non-default row index names the restrictions.
        b: r by 1 vector-like or None; if None, b will be a vector of zeroes
        names: length P list, coefficient names

        Outputs
        R: r by P NumPy array
        b: r by 1 NumPy array
        rnames: length r list, names of the restrictions
        """
        P = len(names)
        rnames = None

        # Check whether R is a pandas DataFrame
        if isinstance(R, pd.DataFrame):
            Rm = R.to_numpy(dtype=np.float64, copy=True)

            # If the columns are labelled, match them to the coefficients
            if is_labelled(R.columns):
                cols = label_index(R.columns, names, 'columns of R', 'wald.test')
                Rm = Rm[:, cols]

            elif Rm.shape[1] != P:
                raise DimensionMismatchError(
                    'Error in wald.test(): R needs one column per coefficient '
                    + '({} columns provided, {} needed)'.format(Rm.shape[1], P)
                )

            if is_labelled(R.index):
                rnames = list(R.index)
        else:
            Rm = np.array(R, dtype=np.float64)

            # Get the number of restrictions implied by b, which is needed if R
            # lists the restrictions one after the other
            r = 1 if b is None else np.size(b)

            # Check whether R is a flat vector, or a single row holding
            # several restrictions back to back
            if (Rm.ndim <= 1) or (
                    (Rm.ndim == 2) and (Rm.shape[0] == 1) and (r > 1)
                    and (Rm.shape[1] == r * P)
            ):
                if Rm.size != r * P:
                    raise DimensionMismatchError(
                        'Error in wald.test(): A flat R has to contain '
                        + '{} restriction(s) of {} '.format(r, P)
                        + 'coefficients each, but has {} entries'.format(Rm.size)
                    )

                Rm = Rm.reshape(r, P)

            elif Rm.ndim != 2:
                raise DimensionMismatchError(
                    'Error in wald.test(): R has to be a matrix, but has '
                    + '{} dimensions'.format(Rm.ndim)
                )

            elif Rm.shape[1] != P:
                raise DimensionMismatchError(
                    'Error in wald.test(): R needs one column per coefficient '
                    + '({} columns provided, {} needed)'.format(Rm.shape[1], P)
                )

        # Get number of restrictions
        r = Rm.shape[0]

        if r < 1:
            raise DimensionMismatchError(
                'Error in wald.test(): R has to contain at least one restriction'
            )

        # Instantiate RHS null vector
        #
        # Check whether null values were provided
        if b is None:
            # If not, use the default null of everything being zero
            bv = np.zeros(shape=(r, 1))
        else:
            bv = np.array(b, dtype=np.float64)

            if (bv.size != r) or ((bv.ndim == 2) and (min(bv.shape) != 1)):
                raise DimensionMismatchError(
                    'Error in wald.test(): b needs one entry per row of R '
                    + '({} entries provided, {} needed)'.format(bv.size, r)
                )

            if bv.ndim > 2:
                raise DimensionMismatchError(
                    'Error in wald.test(): b has to be a vector'
                )

            bv = bv.reshape(r, 1)

        if rnames is None:
            rnames = ['R' + str(i+1) for i in np.arange(r)]

        return Rm, bv, rnames

    # Define a function to calculate the Wald test
    def test(self, betas, cov, R=None, b=None, names=None, jointsig=None,
             verbose=None, tol=None):
        """ Calculate a Wald test

        The Wald test can be used to test linear restrictions of the form

        R @ beta = b

        where R is a matrix of restrictions, beta are the true coefficients of
        the underlying model, and b is a hypothesis about the value of their
        linear combination

        Inputs
        betas: P by 1 vector-like, estimated coefficients; see wald.align()
        cov: P by P matrix-like, their estimated covariance; see wald.align()
        R: r by P matrix-like or None; restrictions being tested, see
           wald.restrictions(). If R is None, the restrictions are set up by
           joint_significance() from jointsig.
        b: r by 1 vector-like or None; if None, b will be a vector of zeroes
        names: length P list or None, coefficient names
        jointsig: list-like or None; coefficients to be tested for joint
                  significance, only used if R is None. If both are None, all
                  coefficients are tested.
        verbose: Boolean or None, see __init()__; if None, uses the value
                 provided in __init()__
        tol: Scalar or None, see __init()__; if None, uses the value provided
             in __init()__

        Output
        result: WaldResult
        """
        # Forget the previous test
        self.names = None
        self.W = None
        self.pW = None
        self.q = None
        self.result = None
        self.waldtable = None

        if verbose is None:
            verbose = self.verbose

        if tol is None:
            tol = self.tol

        beta, V, names = self.align(betas, cov, names=names)

        # Check whether the restriction matrix R was left at its default None
        if R is None:
            R = joint_significance(names, jointsig)

        R, b, rnames = self.restrictions(R, b, names)

        # Everything has to be finite for the statistic to mean anything
        for arr, what in [(beta, 'coefficients'), (V, 'covariance matrix'),
                          (R, 'R'), (b, 'b')]:
            if not np.all(np.isfinite(arr)):
                raise NumericInstabilityError(
                    'Error in wald.test(): The {} '.format(what)
                    + 'contain non-finite values'
                )

        # Calculate Wald statistic
        #
        # Calculate outer parts of the Wald 'sandwich', R beta - b
        Rbdiff = R @ beta - b

        # Calculate inner part of the Wald 'sandwich', R V R'
        RVR = R @ V @ R.T

        # Check whether R V R' can be inverted, using the ratio of its smallest
        # to its largest singular value
        sv = scl.svdvals(RVR)
        if (sv.max() <= 0) or (sv.min() <= tol * sv.max()):
            raise SingularCovarianceError(
                'Error in wald.test(): R @ V @ R\' is singular (condition '
                + 'number {:.3g}); '.format(
                    np.inf if sv.min() <= 0 else sv.max() / sv.min()
                )
                + 'check whether some restrictions are redundant, or whether '
                + 'the covariance matrix is degenerate for the coefficients '
                + 'being tested'
            )

        # Solve R V R' x = R beta - b instead of inverting R V R'
        try:
            x = scl.solve(RVR, Rbdiff)
        except scl.LinAlgError as e:
            raise SingularCovarianceError(
                'Error in wald.test(): R @ V @ R\' could not be factorized '
                + '({})'.format(e)
            ) from e

        # Calculate the Wald statistic
        W = (Rbdiff.T @ x).item()

        if (not np.isfinite(W)) or (W < 0):
            raise NumericInstabilityError(
                'Error in wald.test(): The Wald statistic is '
                + '{}; the covariance matrix is probably '.format(W)
                + 'not positive semi-definite, or badly conditioned'
            )

        # Degrees of freedom are the number of restrictions
        q = R.shape[0]

        # Calculate p-value using the upper tail of the appropriate chi-squared
        # distribution
        pW = float(scs.chi2(df=q).sf(W))

        # Store the results
        self.names = names
        self.W = W
        self.pW = pW
        self.q = q
        self.result = WaldResult(
            statistic=W, p_value=pW, df=q, discrepancy=Rbdiff, R=R, b=b,
            names=tuple(names), restriction_names=tuple(rnames)
        )

        if verbose:
            print(self.result.summary_line(nround=self.nround))

        return self.result

    # Define a function to return the results as a table
    def summarize(self):
        """ Produce a pandas DataFrame containing the last test's results """
        if self.result is None:
            raise ValueError(
                'Error in wald.summarize(): There are no results to '
                + 'summarize; run wald.test() successfully first'
            )

        # Make a rounded table of the Wald statistic and p-value
        self.waldtable = self.result.table(nround=self.nround)

        # Return the result, to make it easily printable
        return self.waldtable


################################################################################
# 4: Functional interface
################################################################################


# Define a function that runs a single Wald test without printing anything
def wald_test(betas, cov, R=None, b=None, names=None, verbose=False, **kwargs):
    """ Calculate a Wald test of R @ beta = b

    Inputs
    betas, cov, R, b, names: see wald.test()
    verbose: Boolean, if True, print a one line summary
    kwargs: passed on to wald()

    Output
    result: WaldResult
    """
    return wald(verbose=verbose, **kwargs).test(betas, cov, R=R, b=b,
                                                names=names)


# Define a function that runs a Wald test on a fitted SUR model
def wald_betas(results, R=None, b=None, jointsig=None, verbose=True, **kwargs):
    """ Calculate a Wald test on the coefficients of a fitted SUR model

    Restrictions may involve coefficients of the same equation or coefficients
    from different equations

    Inputs
    results: fitted model; see model_parts()
    R: r by P matrix-like, flat vector of length r*P, or None; see
       wald.restrictions()
    b: r by 1 vector-like or None; if None, b will be a vector of zeroes
    jointsig: list-like or None; see wald.test()
    verbose: Boolean, if True, print a one line summary
    kwargs: passed on to wald()

    Output
    result: WaldResult
    """
    betas, cov = model_parts(results)

    return wald(verbose=verbose, **kwargs).test(
        betas, cov, R=R, b=b, jointsig=jointsig
    )
