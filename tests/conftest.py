"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from openeng.core.config import DEVICE_ENV_VAR
from openeng.gpu import reset_dispatcher


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def spd_matrix(rng):
    """Well-conditioned symmetric positive definite matrix."""
    n = 6
    M = rng.standard_normal((n, n))
    return M @ M.T + n * np.eye(n)


@pytest.fixture
def sine_signal():
    """Two-tone signal sampled at 1 kHz: 50 Hz + 120 Hz, 1 second."""
    fs = 1000.0
    t = np.arange(0, 1.0, 1.0 / fs)
    x = np.sin(2 * np.pi * 50 * t) + 0.5 * np.sin(2 * np.pi * 120 * t)
    return x, t, fs


@pytest.fixture(autouse=True)
def _isolated_dispatcher(monkeypatch):
    """Each test starts with no cached default dispatcher and no device override."""
    monkeypatch.delenv(DEVICE_ENV_VAR, raising=False)
    reset_dispatcher()
    yield
    reset_dispatcher()
