"""
Tests for the OpenEng exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via OpenEngError)
    - Diagnostic attributes on SingularMatrixError, NotPositiveDefiniteError,
      ConvergenceError, UnitError
    - Default attribute values (None for optional attributes)
"""

import pytest

from openeng.core.exceptions import (
    ConvergenceError,
    DeviceUnavailableError,
    DimensionError,
    NotPositiveDefiniteError,
    NumericalError,
    OpenEngError,
    SingularMatrixError,
    UnitError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via OpenEngError."""

    @pytest.mark.parametrize("exc", [
        ValidationError,
        DimensionError,
        NumericalError,
        SingularMatrixError,
        NotPositiveDefiniteError,
        ConvergenceError,
        DeviceUnavailableError,
        UnitError,
    ])
    def test_is_openeng_error(self, exc):
        with pytest.raises(OpenEngError):
            raise exc("failure")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_singular_matrix_error_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise SingularMatrixError("singular")

    def test_not_positive_definite_is_numerical_error(self):
        with pytest.raises(NumericalError):
            raise NotPositiveDefiniteError("not PD")

    def test_convergence_error_is_not_numerical_error(self):
        err = ConvergenceError("did not converge", iterations=100)
        assert not isinstance(err, NumericalError)

    def test_unit_error_is_not_validation_error(self):
        assert not isinstance(UnitError("bad unit"), ValidationError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestSingularMatrixError:

    def test_all_attributes(self):
        err = SingularMatrixError("A is singular", matrix_name="A", condition_number=1e18)
        assert str(err) == "A is singular"
        assert err.matrix_name == "A"
        assert err.condition_number == 1e18

    def test_defaults_are_none(self):
        err = SingularMatrixError("singular")
        assert err.matrix_name is None
        assert err.condition_number is None


class TestNotPositiveDefiniteError:

    def test_all_attributes(self):
        err = NotPositiveDefiniteError(
            "Cholesky failed", matrix_name="K", min_eigenvalue=-0.001,
        )
        assert str(err) == "Cholesky failed"
        assert err.matrix_name == "K"
        assert err.min_eigenvalue == -0.001

    def test_catchable_with_attributes(self):
        with pytest.raises(NotPositiveDefiniteError) as exc_info:
            raise NotPositiveDefiniteError("not PD", min_eigenvalue=-1e-8)
        assert exc_info.value.min_eigenvalue == pytest.approx(-1e-8)


class TestConvergenceError:

    def test_all_attributes(self):
        err = ConvergenceError(
            "LP not solved",
            iterations=12,
            reason="The problem is infeasible.",
            status="infeasible",
        )
        assert err.iterations == 12
        assert err.reason == "The problem is infeasible."
        assert err.status == "infeasible"

    def test_defaults_are_none(self):
        err = ConvergenceError("failed")
        assert err.iterations is None
        assert err.reason is None
        assert err.status is None

    def test_zero_iterations(self):
        err = ConvergenceError("immediate failure", iterations=0)
        assert err.iterations == 0


class TestUnitError:

    def test_unit_attribute(self):
        err = UnitError("Unknown unit: 'furlong'", unit="furlong")
        assert err.unit == "furlong"
        assert "furlong" in str(err)

    def test_default_unit_none(self):
        assert UnitError("mismatch").unit is None
