"""
Core infrastructure for OpenEng.

This module provides shared abstractions and utilities used by all
facade submodules (linalg, signal, simulation, optimization, ...).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    config: Environment configuration and logging setup
    compute: Hardware detection, timing, tolerance tiers
"""

from openeng.core.result import Result
from openeng.core.exceptions import (
    OpenEngError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
    DeviceUnavailableError,
    UnitError,
)
from openeng.core.config import configure_logging, get_device_preference

__all__ = [
    # Result
    "Result",
    # Exceptions
    "OpenEngError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
    "DeviceUnavailableError",
    "UnitError",
    # Configuration
    "configure_logging",
    "get_device_preference",
]
