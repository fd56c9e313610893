"""
Accelerator capability providers.

A capability provider answers one question: which accelerator, if any,
should the dispatch layer use? The dispatcher factory asks it once and
picks a backend from the answer, so tests can force either branch by
handing in a StaticCapabilityProvider.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from openeng.core.compute.device import DeviceInfo, detect_gpu

logger = logging.getLogger(__name__)


@runtime_checkable
class CapabilityProvider(Protocol):
    """
    Protocol for accelerator discovery.

    Implementations must never raise from probe(): a failure to load or
    query the accelerator stack is reported as None.
    """

    def probe(self) -> DeviceInfo | None:
        """Return the accelerator to use, or None for the host path."""
        ...


class TorchCapabilityProvider:
    """
    Probe PyTorch for a CUDA or MPS device.

    The probe runs on the first call only; later calls return the cached
    answer. Recomputing would give the same result, so no lock is taken.
    """

    def __init__(self):
        self._probed = False
        self._device: DeviceInfo | None = None

    def probe(self) -> DeviceInfo | None:
        if not self._probed:
            self._device = detect_gpu()
            self._probed = True
            if self._device is None:
                logger.info("No functional GPU detected, using CPU fallback")
            else:
                logger.info("GPU acceleration enabled on %s", self._device)
        return self._device


class StaticCapabilityProvider:
    """
    Provider with a fixed answer.

    StaticCapabilityProvider() forces the host path;
    StaticCapabilityProvider(device) forces that device.
    """

    def __init__(self, device: DeviceInfo | None = None):
        self._device = device

    def probe(self) -> DeviceInfo | None:
        return self._device
