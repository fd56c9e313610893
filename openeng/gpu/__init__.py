"""
GPU-accelerated array operations with automatic CPU fallback.

Uses PyTorch (CUDA or Apple MPS) when a functional device is found, and
NumPy on the host otherwise. Callers never branch: every operation takes
and returns host arrays.

Public API:
    is_accelerated()          - Whether the default dispatcher uses a GPU
    transfer_to_device(A)     - Device copy (identity without a GPU)
    transfer_to_host(A)       - Host copy of a device handle (identity otherwise)
    add, subtract, multiply   - Elementwise operations
    matrix_multiply, transpose
    create_dispatcher(...)    - Explicit dispatcher with an injected provider

Example:
    >>> import numpy as np
    >>> from openeng import gpu
    >>> A = np.random.rand(1000, 1000)
    >>> C = gpu.matrix_multiply(A, A)   # runs on the GPU if there is one
"""

from openeng.gpu.capabilities import (
    CapabilityProvider,
    StaticCapabilityProvider,
    TorchCapabilityProvider,
)
from openeng.gpu.dispatch import (
    ArrayDispatcher,
    create_dispatcher,
    get_dispatcher,
    set_dispatcher,
    reset_dispatcher,
    is_accelerated,
    transfer_to_device,
    transfer_to_host,
    add,
    subtract,
    multiply,
    matrix_multiply,
    transpose,
    maybe_gpu,
)

# Names kept from the MATLAB-style toolbox API
gpu_available = is_accelerated
has_cuda = is_accelerated
gpu_enabled = is_accelerated
to_gpu = transfer_to_device
to_cpu = transfer_to_host
device_array = transfer_to_device
gpu_add = add
gpu_subtract = subtract
gpu_multiply = multiply
gpu_matmul = matrix_multiply
gpu_transpose = transpose

__all__ = [
    "CapabilityProvider",
    "StaticCapabilityProvider",
    "TorchCapabilityProvider",
    "ArrayDispatcher",
    "create_dispatcher",
    "get_dispatcher",
    "set_dispatcher",
    "reset_dispatcher",
    "is_accelerated",
    "transfer_to_device",
    "transfer_to_host",
    "add",
    "subtract",
    "multiply",
    "matrix_multiply",
    "transpose",
    "maybe_gpu",
    # Aliases
    "gpu_available",
    "has_cuda",
    "gpu_enabled",
    "to_gpu",
    "to_cpu",
    "device_array",
    "gpu_add",
    "gpu_subtract",
    "gpu_multiply",
    "gpu_matmul",
    "gpu_transpose",
]
