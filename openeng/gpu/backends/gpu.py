"""
Torch array backend.

Supports CUDA (Linux/Windows), MPS (macOS Apple Silicon) and the torch CPU
device. The CPU device is not an accelerator; it runs the same tensor code
path on machines without a GPU.

CUDA and the torch CPU device run in FP64 by default, so a host round trip
is exact and results agree with the numpy reference to machine precision.
MPS has no float64 support: float64 input is downcast to FP32 on transfer,
so a round trip returns A.astype(float32).astype(float64), not A.
"""

from __future__ import annotations

from typing import Any
import numpy as np

from openeng.core.compute.device import DeviceInfo


class GPUArrayBackend:
    """
    Device backend using torch tensors.

    Operands are moved with torch.from_numpy(...).to(device); results are
    brought back with .cpu().numpy(). Device failures (out of memory,
    driver errors) propagate as torch raises them.
    """

    def __init__(self, device: DeviceInfo, use_fp64: bool | None = None):
        """
        Initialize the torch backend.

        Args:
            device: Device info from detect_gpu(), get_cpu_info() or a
                    capability provider.
            use_fp64: Keep float64 on the device. Defaults to True on CUDA
                      and CPU. Must be False (or None) on MPS.
        """
        import torch

        self._torch = torch

        if device.device_type == 'cuda':
            if not torch.cuda.is_available():
                raise RuntimeError(
                    "CUDA not available. Install PyTorch with CUDA support, "
                    "or use prefer='cpu'."
                )
            self.use_fp64 = True if use_fp64 is None else use_fp64
        elif device.device_type == 'mps':
            if use_fp64:
                raise RuntimeError(
                    "MPS does not support float64. Use use_fp64=False "
                    "or prefer='cpu' for double precision."
                )
            self.use_fp64 = False
        elif device.device_type == 'cpu':
            self.use_fp64 = True if use_fp64 is None else use_fp64
        else:
            raise ValueError(f"Unknown device type {device.device_type!r}")

        self.device_info = device
        self.device = torch.device(device.torch_device)

    @property
    def name(self) -> str:
        precision = "fp64" if self.use_fp64 else "fp32"
        if not self.device_info.is_gpu:
            return f'torch_cpu_{precision}'
        return f'gpu_{self.device_info.device_type}_{precision}'

    @property
    def is_accelerated(self) -> bool:
        return self.device_info.is_gpu

    def is_device_handle(self, obj: Any) -> bool:
        return isinstance(obj, self._torch.Tensor)

    def to_device(self, array: Any) -> Any:
        torch = self._torch
        if isinstance(array, torch.Tensor):
            tensor = array
        else:
            tensor = torch.from_numpy(np.ascontiguousarray(array))
        if tensor.dtype == torch.float64 and not self.use_fp64:
            tensor = tensor.to(torch.float32)
        return tensor.to(self.device)

    def to_host(self, array: Any) -> Any:
        if not isinstance(array, self._torch.Tensor):
            return array
        host = array.detach().cpu().numpy()
        if not self.use_fp64 and host.dtype == np.float32:
            host = host.astype(np.float64)
        return host

    def add(self, a, b):
        return a + b

    def subtract(self, a, b):
        return a - b

    def multiply(self, a, b):
        return a * b

    def matmul(self, a, b):
        return a @ b

    def transpose(self, a):
        return a.T
