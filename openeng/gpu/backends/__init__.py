"""
Array backends for the dispatch layer.

    cpu: CPUArrayBackend (NumPy, always available)
    gpu: GPUArrayBackend (PyTorch on CUDA, MPS or the CPU device; imported lazily)
"""

from typing import Any, Protocol, runtime_checkable

from openeng.gpu.backends.cpu import CPUArrayBackend


@runtime_checkable
class ArrayBackend(Protocol):
    """
    Protocol for array backends.

    Convention for name: '{device}_{library}' or '{device}_{type}_{precision}',
    e.g. 'cpu_numpy', 'gpu_cuda_fp64', 'torch_cpu_fp64'.
    """

    @property
    def name(self) -> str: ...

    @property
    def is_accelerated(self) -> bool: ...

    def is_device_handle(self, obj: Any) -> bool: ...

    def to_device(self, array: Any) -> Any: ...

    def to_host(self, array: Any) -> Any: ...

    def add(self, a: Any, b: Any) -> Any: ...

    def subtract(self, a: Any, b: Any) -> Any: ...

    def multiply(self, a: Any, b: Any) -> Any: ...

    def matmul(self, a: Any, b: Any) -> Any: ...

    def transpose(self, a: Any) -> Any: ...


__all__ = ["ArrayBackend", "CPUArrayBackend"]
