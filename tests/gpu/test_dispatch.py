"""
Tests for the GPU/CPU dispatch layer on the host path.

Every test here forces the CPU backend (StaticCapabilityProvider() or
prefer='cpu'), so the suite runs identically with or without an
accelerator.
"""

import numpy as np
import pytest

from openeng import gpu
from openeng.core.compute.device import DeviceInfo
from openeng.core.compute.tolerances import CPU_FP64
from openeng.core.config import DEVICE_ENV_VAR
from openeng.core.exceptions import DeviceUnavailableError, DimensionError, ValidationError
from openeng.gpu import (
    ArrayDispatcher,
    CapabilityProvider,
    StaticCapabilityProvider,
    TorchCapabilityProvider,
    create_dispatcher,
)


def _cuda_available():
    try:
        import torch
        return torch.cuda.is_available()
    except ImportError:
        return False


@pytest.fixture
def cpu_dispatcher():
    return create_dispatcher(StaticCapabilityProvider(), prefer='auto')


@pytest.fixture
def forced_cpu(cpu_dispatcher):
    """Install a CPU dispatcher as the process default."""
    gpu.set_dispatcher(cpu_dispatcher)
    return cpu_dispatcher


# ═══════════════════════════════════════════════════════════════════════
# Factory and backend selection
# ═══════════════════════════════════════════════════════════════════════


class TestCreateDispatcher:

    def test_no_device_gives_cpu(self, cpu_dispatcher):
        assert isinstance(cpu_dispatcher, ArrayDispatcher)
        assert cpu_dispatcher.backend_name == 'cpu_numpy'
        assert not cpu_dispatcher.is_accelerated()
        assert cpu_dispatcher.device.device_type == 'cpu'

    def test_prefer_cpu_skips_probe(self):
        class ExplodingProvider:
            def probe(self):
                raise AssertionError("probe must not run for prefer='cpu'")

        d = create_dispatcher(ExplodingProvider(), prefer='cpu')
        assert d.backend_name == 'cpu_numpy'

    def test_prefer_gpu_without_device_raises(self):
        with pytest.raises(DeviceUnavailableError):
            create_dispatcher(StaticCapabilityProvider(), prefer='gpu')

    def test_invalid_preference(self):
        with pytest.raises(ValidationError, match="device preference"):
            create_dispatcher(StaticCapabilityProvider(), prefer='tpu')

    def test_cpu_device_info_from_provider_means_host(self):
        cpu_info = DeviceInfo('cpu', None, 'host', None, None)
        d = create_dispatcher(StaticCapabilityProvider(cpu_info), prefer='auto')
        assert not d.is_accelerated()

    @pytest.mark.skipif(_cuda_available(), reason="a real CUDA device is present")
    def test_unusable_device_falls_back_to_cpu(self):
        """A provider reporting CUDA that torch cannot use degrades to the host."""
        fake = DeviceInfo('cuda', 0, 'Phantom GPU', None, (8, 0))
        d = create_dispatcher(StaticCapabilityProvider(fake), prefer='auto')
        assert d.backend_name == 'cpu_numpy'
        assert not d.is_accelerated()

    def test_providers_satisfy_protocol(self):
        assert isinstance(StaticCapabilityProvider(), CapabilityProvider)
        assert isinstance(TorchCapabilityProvider(), CapabilityProvider)

    def test_torch_provider_caches_probe(self, monkeypatch):
        import openeng.gpu.capabilities as capabilities

        calls = []
        monkeypatch.setattr(capabilities, 'detect_gpu', lambda: calls.append(1))
        provider = TorchCapabilityProvider()
        assert provider.probe() is None
        assert provider.probe() is None
        assert len(calls) == 1


# ═══════════════════════════════════════════════════════════════════════
# Transfers
# ═══════════════════════════════════════════════════════════════════════


class TestTransfers:

    def test_round_trip_identity(self, cpu_dispatcher, rng):
        A = rng.standard_normal((10, 10))
        B = cpu_dispatcher.transfer_to_host(cpu_dispatcher.transfer_to_device(A))
        np.testing.assert_array_equal(B, A)

    def test_to_device_is_identity_on_host(self, cpu_dispatcher, rng):
        A = rng.standard_normal(5)
        assert cpu_dispatcher.transfer_to_device(A) is A

    def test_to_host_idempotent(self, cpu_dispatcher, rng):
        A = rng.standard_normal((3, 3))
        once = cpu_dispatcher.transfer_to_host(A)
        twice = cpu_dispatcher.transfer_to_host(once)
        np.testing.assert_array_equal(once, twice)


# ═══════════════════════════════════════════════════════════════════════
# Operations
# ═══════════════════════════════════════════════════════════════════════


class TestOperations:

    def test_elementwise(self, cpu_dispatcher, rng):
        A = rng.standard_normal((4, 5))
        B = rng.standard_normal((4, 5))
        np.testing.assert_array_equal(cpu_dispatcher.add(A, B), A + B)
        np.testing.assert_array_equal(cpu_dispatcher.subtract(A, B), A - B)
        np.testing.assert_array_equal(cpu_dispatcher.multiply(A, B), A * B)

    def test_matmul_matches_numpy(self, cpu_dispatcher, rng):
        A = rng.standard_normal((50, 50))
        B = rng.standard_normal((50, 50))
        np.testing.assert_allclose(
            cpu_dispatcher.matrix_multiply(A, B), A @ B,
            rtol=CPU_FP64.rtol, atol=1e-10,
        )

    def test_transpose(self, cpu_dispatcher, rng):
        A = rng.standard_normal((3, 7))
        np.testing.assert_array_equal(cpu_dispatcher.transpose(A), A.T)

    def test_lists_accepted(self, cpu_dispatcher):
        np.testing.assert_array_equal(
            cpu_dispatcher.matrix_multiply([[1, 2], [3, 4]], [[1], [1]]),
            [[3.0], [7.0]],
        )

    def test_elementwise_shape_mismatch(self, cpu_dispatcher):
        with pytest.raises(DimensionError):
            cpu_dispatcher.add(np.zeros((2, 2)), np.zeros((3, 3)))

    def test_matmul_inner_mismatch(self, cpu_dispatcher):
        with pytest.raises(DimensionError, match="Inner dimensions"):
            cpu_dispatcher.matrix_multiply(np.zeros((2, 3)), np.zeros((2, 3)))

    def test_transpose_requires_2d(self, cpu_dispatcher):
        with pytest.raises(DimensionError):
            cpu_dispatcher.transpose(np.zeros(3))

    def test_non_numeric_rejected(self, cpu_dispatcher):
        with pytest.raises(ValidationError):
            cpu_dispatcher.add(np.array(["a"]), np.array(["b"]))


# ═══════════════════════════════════════════════════════════════════════
# Default dispatcher and module-level API
# ═══════════════════════════════════════════════════════════════════════


class TestModuleAPI:

    def test_default_dispatcher_cached(self):
        assert gpu.get_dispatcher() is gpu.get_dispatcher()

    def test_reset_reprobes(self):
        first = gpu.get_dispatcher()
        gpu.reset_dispatcher()
        assert gpu.get_dispatcher() is not first

    def test_env_cpu_preference(self, monkeypatch):
        monkeypatch.setenv(DEVICE_ENV_VAR, 'cpu')
        gpu.reset_dispatcher()
        assert not gpu.is_accelerated()
        assert gpu.get_dispatcher().backend_name == 'cpu_numpy'

    @pytest.mark.parametrize("value", ['gpu', 'GPU '])
    def test_env_gpu_without_device_falls_back(self, monkeypatch, value):
        import openeng.gpu.capabilities as capabilities

        monkeypatch.setattr(capabilities, 'detect_gpu', lambda: None)
        monkeypatch.setenv(DEVICE_ENV_VAR, value)
        gpu.reset_dispatcher()
        with pytest.warns(RuntimeWarning, match="using the CPU backend"):
            assert gpu.is_accelerated() is False
        A = np.ones((2, 2))
        assert gpu.transfer_to_device(A) is A

    def test_env_invalid_value_falls_back(self, monkeypatch):
        import openeng.gpu.capabilities as capabilities

        monkeypatch.setattr(capabilities, 'detect_gpu', lambda: None)
        monkeypatch.setenv(DEVICE_ENV_VAR, 'tpu')
        gpu.reset_dispatcher()
        with pytest.warns(RuntimeWarning, match="OPENENG_DEVICE"):
            assert gpu.is_accelerated() is False
        A = np.ones((2, 2))
        assert gpu.transfer_to_device(A) is A

    def test_explicit_gpu_still_strict_with_env_set(self, monkeypatch):
        monkeypatch.setenv(DEVICE_ENV_VAR, 'gpu')
        with pytest.raises(DeviceUnavailableError):
            create_dispatcher(StaticCapabilityProvider(), prefer='gpu')

    def test_env_gpu_with_unusable_device_falls_back(self, monkeypatch):
        """CUDA reported but the backend cannot start: warn, use the host."""
        import openeng.gpu.backends.gpu as gpu_backend

        def broken(*args, **kwargs):
            raise RuntimeError("driver exploded")

        monkeypatch.setattr(gpu_backend, 'GPUArrayBackend', broken)
        monkeypatch.setenv(DEVICE_ENV_VAR, 'gpu')
        fake = DeviceInfo('cuda', 0, 'Phantom GPU', None, (8, 0))
        with pytest.warns(RuntimeWarning, match="driver exploded"):
            d = create_dispatcher(StaticCapabilityProvider(fake))
        assert d.backend_name == 'cpu_numpy'

    def test_is_accelerated_never_raises_on_auto(self):
        assert isinstance(gpu.is_accelerated(), bool)

    def test_module_functions(self, forced_cpu, rng):
        A = rng.standard_normal((6, 6))
        B = rng.standard_normal((6, 6))
        np.testing.assert_allclose(gpu.matrix_multiply(A, B), A @ B)
        np.testing.assert_array_equal(gpu.add(A, B), A + B)
        np.testing.assert_array_equal(gpu.subtract(A, B), A - B)
        np.testing.assert_array_equal(gpu.multiply(A, B), A * B)
        np.testing.assert_array_equal(gpu.transpose(A), A.T)
        np.testing.assert_array_equal(gpu.transfer_to_host(gpu.transfer_to_device(A)), A)

    def test_aliases(self, forced_cpu, rng):
        A = rng.standard_normal((4, 4))
        assert gpu.gpu_available() is False
        assert gpu.has_cuda() is False
        assert gpu.gpu_enabled() is False
        np.testing.assert_array_equal(gpu.to_cpu(gpu.to_gpu(A)), A)
        np.testing.assert_array_equal(gpu.device_array(A), A)
        np.testing.assert_allclose(gpu.gpu_matmul(A, A), A @ A)
        np.testing.assert_array_equal(gpu.gpu_add(A, A), 2 * A)
        np.testing.assert_array_equal(gpu.gpu_subtract(A, A), np.zeros_like(A))
        np.testing.assert_array_equal(gpu.gpu_multiply(A, A), A * A)
        np.testing.assert_array_equal(gpu.gpu_transpose(A), A.T)


class TestMaybeGpu:

    def test_skipped_with_warning_on_host(self, forced_cpu):
        calls = []

        @gpu.maybe_gpu
        def kernel(x):
            calls.append(x)
            return x * 2

        with pytest.warns(RuntimeWarning, match="GPU not available"):
            assert kernel(3) is None
        assert calls == []

    def test_preserves_name(self):
        @gpu.maybe_gpu
        def warm_up():
            pass

        assert warm_up.__name__ == 'warm_up'
