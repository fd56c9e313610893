"""
Torch backend tests on the torch CPU device.

Exercises the tensor code path of GPUArrayBackend (transfers, dtype
handling, device-handle passthrough) on any machine with torch installed.
Skipped when torch is missing.
"""

import numpy as np
import pytest

torch = pytest.importorskip("torch")

from openeng.core.compute.device import get_cpu_info
from openeng.gpu import ArrayDispatcher, StaticCapabilityProvider, create_dispatcher
from openeng.gpu.backends.gpu import GPUArrayBackend


@pytest.fixture
def torch_dispatcher():
    cpu = get_cpu_info()
    return ArrayDispatcher(GPUArrayBackend(cpu), cpu)


@pytest.fixture
def torch_fp32_dispatcher():
    cpu = get_cpu_info()
    return ArrayDispatcher(GPUArrayBackend(cpu, use_fp64=False), cpu)


@pytest.fixture
def cpu_dispatcher():
    return create_dispatcher(StaticCapabilityProvider(), prefer='cpu')


# ═══════════════════════════════════════════════════════════════════════
# Backend identity
# ═══════════════════════════════════════════════════════════════════════


class TestTorchBackend:

    def test_name_and_acceleration(self, torch_dispatcher, torch_fp32_dispatcher):
        assert torch_dispatcher.backend_name == 'torch_cpu_fp64'
        assert torch_fp32_dispatcher.backend_name == 'torch_cpu_fp32'
        assert not torch_dispatcher.is_accelerated()

    def test_unknown_device_type_rejected(self):
        from openeng.core.compute.device import DeviceInfo

        with pytest.raises(ValueError):
            GPUArrayBackend(DeviceInfo('tpu', 0, 'x', None, None))  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════════════
# Transfers
# ═══════════════════════════════════════════════════════════════════════


class TestTorchTransfers:

    def test_transfer_returns_tensor(self, torch_dispatcher, rng):
        A = rng.standard_normal((8, 8))
        handle = torch_dispatcher.transfer_to_device(A)
        assert isinstance(handle, torch.Tensor)
        assert handle.dtype == torch.float64
        assert handle.device.type == 'cpu'

    def test_fp64_round_trip_exact(self, torch_dispatcher, rng):
        A = rng.standard_normal((32, 16))
        B = torch_dispatcher.transfer_to_host(torch_dispatcher.transfer_to_device(A))
        assert isinstance(B, np.ndarray)
        assert B.dtype == np.float64
        np.testing.assert_array_equal(B, A)

    def test_fp32_round_trip_rounds_to_single(self, torch_fp32_dispatcher, rng):
        A = rng.standard_normal((32, 16))
        handle = torch_fp32_dispatcher.transfer_to_device(A)
        assert handle.dtype == torch.float32
        B = torch_fp32_dispatcher.transfer_to_host(handle)
        assert B.dtype == np.float64
        np.testing.assert_array_equal(B, A.astype(np.float32).astype(np.float64))

    def test_to_host_passes_arrays_through(self, torch_dispatcher, rng):
        A = rng.standard_normal(10)
        assert torch_dispatcher.transfer_to_host(A) is A

    def test_integer_dtype_preserved(self, torch_dispatcher):
        A = np.arange(6).reshape(2, 3)
        B = torch_dispatcher.transfer_to_host(torch_dispatcher.transfer_to_device(A))
        assert B.dtype == A.dtype
        np.testing.assert_array_equal(B, A)


# ═══════════════════════════════════════════════════════════════════════
# Operations against the numpy reference
# ═══════════════════════════════════════════════════════════════════════


class TestTorchOperations:

    def test_matmul_matches_cpu(self, torch_dispatcher, cpu_dispatcher, rng):
        A = rng.standard_normal((50, 50))
        B = rng.standard_normal((50, 50))
        np.testing.assert_allclose(
            torch_dispatcher.matrix_multiply(A, B),
            cpu_dispatcher.matrix_multiply(A, B),
            rtol=1e-10, atol=1e-10,
        )

    def test_elementwise_matches_cpu(self, torch_dispatcher, cpu_dispatcher, rng):
        A = rng.standard_normal((20, 30))
        B = rng.standard_normal((20, 30))
        for op in ('add', 'subtract', 'multiply'):
            np.testing.assert_array_equal(
                getattr(torch_dispatcher, op)(A, B),
                getattr(cpu_dispatcher, op)(A, B),
            )

    def test_transpose(self, torch_dispatcher, rng):
        A = rng.standard_normal((3, 7))
        np.testing.assert_array_equal(torch_dispatcher.transpose(A), A.T)

    def test_device_handles_accepted(self, torch_dispatcher, rng):
        A = rng.standard_normal((5, 5))
        B = rng.standard_normal((5, 5))
        ha = torch_dispatcher.transfer_to_device(A)
        hb = torch_dispatcher.transfer_to_device(B)
        np.testing.assert_allclose(
            torch_dispatcher.matrix_multiply(ha, hb), A @ B, rtol=1e-10, atol=1e-10,
        )
        np.testing.assert_array_equal(torch_dispatcher.transpose(ha), A.T)

    def test_fp32_matmul_within_single_tolerance(self, torch_fp32_dispatcher, rng):
        from openeng.core.compute.tolerances import select_tolerance

        A = rng.standard_normal((30, 30))
        B = rng.standard_normal((30, 30))
        tol = select_tolerance(torch_fp32_dispatcher.backend_name)
        np.testing.assert_allclose(
            torch_fp32_dispatcher.matrix_multiply(A, B), A @ B,
            rtol=tol.rtol, atol=tol.atol * 30,
        )

    def test_shape_checks_apply(self, torch_dispatcher):
        from openeng.core.exceptions import DimensionError

        with pytest.raises(DimensionError):
            torch_dispatcher.add(np.zeros((2, 2)), np.zeros((3, 3)))
