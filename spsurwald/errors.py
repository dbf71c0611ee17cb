""" Define exceptions raised by spsurwald """

################################################################################
# 1: Base class
################################################################################


# Define the base class for all errors raised by the package (this subclasses
# ValueError, so handlers written for bad inputs still catch everything)
class WaldError(ValueError):
    """ Base class for all errors raised while computing a Wald test """
    pass


################################################################################
# 2: Input errors
################################################################################


class DimensionMismatchError(WaldError):
    """ Shapes of the coefficients, covariance matrix, R or b do not agree

    Raised if R does not have one column per coefficient, if b does not have
    one entry per row of R, or if the covariance matrix is not square with one
    row per coefficient
    """
    pass


class AlignmentError(WaldError):
    """ Labels cannot be matched to coefficient names one to one

    Raised if coefficient names are not unique, or if the labels of the
    covariance matrix or the columns of R do not contain every coefficient
    name exactly once
    """
    pass


################################################################################
# 3: Numerical errors
################################################################################


class SingularCovarianceError(WaldError):
    """ R @ V @ R' is not invertible

    Usually this means the restrictions are linearly redundant (e.g. the same
    row appears twice), or the covariance matrix is degenerate on the subspace
    being tested
    """
    pass


class NumericInstabilityError(WaldError):
    """ The inputs or the Wald statistic are negative or not finite """
    pass
