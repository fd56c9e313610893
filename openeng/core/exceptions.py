"""
OpenEng exceptions.

Every toolbox failure derives from OpenEngError. Errors from numpy, scipy
or torch are re-raised as one of these only when the facade can say
something more useful (which matrix, which solver status); otherwise they
propagate unchanged.

Diagnostic details are attributes, not just message text, so callers can
branch on them.
"""


class OpenEngError(Exception):
    """Root of the OpenEng exception tree."""


class ValidationError(OpenEngError):
    """Bad argument: wrong type, non-finite data, unknown option string."""


class DimensionError(ValidationError):
    """Array shapes are wrong or disagree with each other."""


class NumericalError(OpenEngError):
    """A numerical routine could not produce a trustworthy answer."""


class SingularMatrixError(NumericalError):
    """
    A matrix that must be inverted (or solved against) is singular.

    Attributes:
        matrix_name: Argument name of the offending matrix
        condition_number: 1-norm condition estimate, when one was computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number


class NotPositiveDefiniteError(NumericalError):
    """
    Cholesky factorization failed.

    Attributes:
        matrix_name: Argument name of the offending matrix
        min_eigenvalue: Smallest eigenvalue of the symmetric part, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue


class ConvergenceError(OpenEngError):
    """
    An integrator or optimizer stopped without a solution.

    Attributes:
        iterations: Iterations (or steps) taken, if the backend reports them
        reason: Backend message, verbatim
        status: Normalized outcome, e.g. 'infeasible' or 'numerical_error'
    """

    def __init__(
        self,
        message: str,
        iterations: int | None = None,
        reason: str | None = None,
        status: str | None = None,
    ):
        super().__init__(message)
        self.iterations = iterations
        self.reason = reason
        self.status = status


class DeviceUnavailableError(OpenEngError):
    """
    An explicit prefer='gpu' found no usable accelerator.

    The 'auto' path never raises this, and neither does OPENENG_DEVICE=gpu:
    both fall back to the host.
    """


class UnitError(OpenEngError):
    """
    Unknown unit symbol, or a conversion between different dimensions.

    Attributes:
        unit: The symbol that could not be used
    """

    def __init__(self, message: str, unit: str | None = None):
        super().__init__(message)
        self.unit = unit
