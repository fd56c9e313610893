"""
GPU/CPU dispatch.

ArrayDispatcher runs elementwise and matrix operations on whichever
backend it was built with. create_dispatcher() is the factory: it asks a
capability provider once and returns a dispatcher bound to the GPU
backend when a device is functional, or to the CPU backend otherwise.

The module-level functions in openeng.gpu use a default dispatcher
created on first use and cached for the life of the process.
"""

from __future__ import annotations

import functools
import logging
import warnings
from typing import Any, Callable, Literal, TypeVar

from openeng.core.compute.device import DeviceInfo, get_cpu_info
from openeng.core.config import DEVICE_ENV_VAR, get_device_preference
from openeng.core.exceptions import DeviceUnavailableError, ValidationError
from openeng.core.validation import (
    check_array,
    check_2d,
    check_matmul_compatible,
    check_option,
    check_same_shape,
)
from openeng.gpu.backends import ArrayBackend, CPUArrayBackend
from openeng.gpu.capabilities import CapabilityProvider, TorchCapabilityProvider

logger = logging.getLogger(__name__)

Preference = Literal['auto', 'cpu', 'gpu']
F = TypeVar('F', bound=Callable[..., Any])


class ArrayDispatcher:
    """
    Uniform array-operation interface over one backend.

    Every operation transfers its operands to the backend's device (a
    no-op on the CPU backend), applies the backend's native operator and
    transfers the result back, so callers only ever receive host arrays.
    """

    def __init__(self, backend: ArrayBackend, device: DeviceInfo):
        self._backend = backend
        self._device = device

    def __repr__(self) -> str:
        return f"ArrayDispatcher(backend={self._backend.name!r}, device={self._device})"

    @property
    def backend(self) -> ArrayBackend:
        return self._backend

    @property
    def backend_name(self) -> str:
        return self._backend.name

    @property
    def device(self) -> DeviceInfo:
        return self._device

    def is_accelerated(self) -> bool:
        return self._backend.is_accelerated

    # === Transfers ===

    def transfer_to_device(self, array: Any) -> Any:
        """Device-resident copy when accelerated, else the input unchanged."""
        return self._backend.to_device(array)

    def transfer_to_host(self, array: Any) -> Any:
        """Host copy of a device-resident handle, else the input unchanged."""
        return self._backend.to_host(array)

    # === Operations ===

    def add(self, a: Any, b: Any) -> Any:
        a, b = self._operands(a, b, elementwise=True)
        return self._binary(self._backend.add, a, b)

    def subtract(self, a: Any, b: Any) -> Any:
        a, b = self._operands(a, b, elementwise=True)
        return self._binary(self._backend.subtract, a, b)

    def multiply(self, a: Any, b: Any) -> Any:
        a, b = self._operands(a, b, elementwise=True)
        return self._binary(self._backend.multiply, a, b)

    def matrix_multiply(self, a: Any, b: Any) -> Any:
        a, b = self._operands(a, b, elementwise=False)
        return self._binary(self._backend.matmul, a, b)

    def transpose(self, a: Any) -> Any:
        a = self._operand(a, 'A')
        check_2d(a, 'A')
        a_dev = self._backend.to_device(a)
        return self._backend.to_host(self._backend.transpose(a_dev))

    # === Internals ===

    def _operand(self, x: Any, name: str) -> Any:
        if self._backend.is_device_handle(x):
            return x
        return check_array(x, name)

    def _operands(self, a: Any, b: Any, elementwise: bool) -> tuple[Any, Any]:
        a = self._operand(a, 'A')
        b = self._operand(b, 'B')
        if elementwise:
            check_same_shape(a, b, ('A', 'B'))
        else:
            check_matmul_compatible(a, b, ('A', 'B'))
        return a, b

    def _binary(self, op: Callable[[Any, Any], Any], a: Any, b: Any) -> Any:
        a_dev = self._backend.to_device(a)
        b_dev = self._backend.to_device(b)
        return self._backend.to_host(op(a_dev, b_dev))


def create_dispatcher(
    provider: CapabilityProvider | None = None,
    prefer: Preference | None = None,
) -> ArrayDispatcher:
    """
    Build a dispatcher for the best available backend.

    Args:
        provider: Capability provider to consult. Defaults to a fresh
            TorchCapabilityProvider.
        prefer: Device preference
            - 'cpu': Always use the host backend (provider not consulted)
            - 'gpu': Require an accelerator (raises if unavailable)
            - 'auto': Accelerator if available, else host
            Defaults to OPENENG_DEVICE from the environment.

    Only an explicit prefer='gpu' is strict. A preference read from
    OPENENG_DEVICE that is invalid, or asks for a GPU that is not there,
    warns and falls back to the CPU backend.

    Returns:
        ArrayDispatcher bound to the selected backend

    Raises:
        DeviceUnavailableError: If prefer='gpu' but no device available
    """
    strict = prefer is not None
    if prefer is None:
        prefer = _env_preference()
    check_option(prefer, ('auto', 'cpu', 'gpu'), 'device preference')

    if prefer == 'cpu':
        return ArrayDispatcher(CPUArrayBackend(), get_cpu_info())

    if provider is None:
        provider = TorchCapabilityProvider()
    device = provider.probe()

    if device is None or not device.is_gpu:
        if prefer == 'gpu':
            if strict:
                raise DeviceUnavailableError(
                    "GPU requested but no GPU available. "
                    "Ensure PyTorch is installed with CUDA/MPS support."
                )
            _warn_env_fallback("no GPU available")
        return ArrayDispatcher(CPUArrayBackend(), get_cpu_info())

    if prefer == 'gpu' and strict:
        from openeng.gpu.backends.gpu import GPUArrayBackend
        return ArrayDispatcher(GPUArrayBackend(device), device)

    try:
        from openeng.gpu.backends.gpu import GPUArrayBackend
        backend = GPUArrayBackend(device)
    except (ImportError, RuntimeError) as e:
        logger.debug("GPU backend unavailable for %s, using CPU fallback: %s", device, e)
        if prefer == 'gpu':
            _warn_env_fallback(f"GPU backend failed ({e})")
        return ArrayDispatcher(CPUArrayBackend(), get_cpu_info())
    return ArrayDispatcher(backend, device)


def _env_preference() -> Preference:
    """OPENENG_DEVICE, or 'auto' (with a warning) if it holds junk."""
    try:
        return get_device_preference()
    except ValidationError as e:
        warnings.warn(f"{e} Using 'auto'.", RuntimeWarning, stacklevel=4)
        return 'auto'


def _warn_env_fallback(reason: str) -> None:
    warnings.warn(
        f"{DEVICE_ENV_VAR}=gpu but {reason}; using the CPU backend",
        RuntimeWarning,
        stacklevel=4,
    )


_default_dispatcher: ArrayDispatcher | None = None


def get_dispatcher() -> ArrayDispatcher:
    """Return the process-wide dispatcher, creating it on first use."""
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = create_dispatcher()
        logger.debug("Default dispatcher: %r", _default_dispatcher)
    return _default_dispatcher


def set_dispatcher(dispatcher: ArrayDispatcher) -> None:
    """Replace the process-wide dispatcher (e.g. to pin a device)."""
    global _default_dispatcher
    _default_dispatcher = dispatcher


def reset_dispatcher() -> None:
    """Forget the process-wide dispatcher; the next call re-probes."""
    global _default_dispatcher
    _default_dispatcher = None


# === Module-level API (default dispatcher) ===

def is_accelerated() -> bool:
    """True if the default dispatcher runs on an accelerator."""
    return get_dispatcher().is_accelerated()


def transfer_to_device(array: Any) -> Any:
    return get_dispatcher().transfer_to_device(array)


def transfer_to_host(array: Any) -> Any:
    return get_dispatcher().transfer_to_host(array)


def add(a: Any, b: Any) -> Any:
    """Elementwise a + b, on the accelerator when available."""
    return get_dispatcher().add(a, b)


def subtract(a: Any, b: Any) -> Any:
    """Elementwise a - b, on the accelerator when available."""
    return get_dispatcher().subtract(a, b)


def multiply(a: Any, b: Any) -> Any:
    """Elementwise a * b, on the accelerator when available."""
    return get_dispatcher().multiply(a, b)


def matrix_multiply(a: Any, b: Any) -> Any:
    """Matrix product a @ b, on the accelerator when available."""
    return get_dispatcher().matrix_multiply(a, b)


def transpose(a: Any) -> Any:
    """Transpose of a 2D array, on the accelerator when available."""
    return get_dispatcher().transpose(a)


def maybe_gpu(func: F) -> F:
    """
    Run the decorated function only when an accelerator is available.

    Without one, emits a RuntimeWarning and returns None.

    Example:
        @maybe_gpu
        def warm_up():
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if is_accelerated():
            return func(*args, **kwargs)
        warnings.warn(
            f"GPU not available, skipped {func.__name__}(); "
            f"consider running on CPU explicitly",
            RuntimeWarning,
            stacklevel=2,
        )
        return None
    return wrapper  # type: ignore[return-value]
