"""
CPU array backend (host fallback path).

NumPy operators on host memory. Transfers are identities.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray


class CPUArrayBackend:
    """
    Host backend using NumPy.

    This is the reference path: the GPU backend is validated against it.
    """

    @property
    def name(self) -> str:
        return 'cpu_numpy'

    @property
    def is_accelerated(self) -> bool:
        return False

    def is_device_handle(self, obj: Any) -> bool:
        return False

    def to_device(self, array: Any) -> Any:
        return array

    def to_host(self, array: Any) -> Any:
        return array

    def add(self, a: NDArray, b: NDArray) -> NDArray:
        return a + b

    def subtract(self, a: NDArray, b: NDArray) -> NDArray:
        return a - b

    def multiply(self, a: NDArray, b: NDArray) -> NDArray:
        return a * b

    def matmul(self, a: NDArray, b: NDArray) -> NDArray:
        # BLAS via numpy
        return a @ b

    def transpose(self, a: NDArray) -> NDArray:
        return a.T
