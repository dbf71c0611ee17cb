""" Initialize spsurwald """

################################################################################
# 1: Load all parts of the project
################################################################################

# Import all parts of the module
from spsurwald.errors import (
    AlignmentError, DimensionMismatchError, NumericInstabilityError,
    SingularCovarianceError, WaldError
)
from spsurwald.restrictions import equality, joint_significance
from spsurwald.results import WaldResult
from spsurwald.wald import wald, wald_betas, wald_test
