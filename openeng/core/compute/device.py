"""
Accelerator discovery.

The array dispatcher only ever needs one answer: which torch device, if
any, should GPU arrays live on. detect_gpu() asks torch for CUDA first and
Apple MPS second; torch itself is imported inside the probe, so OpenEng
imports and runs on machines without it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Literal
import logging
import platform

logger = logging.getLogger(__name__)

DeviceType = Literal['cpu', 'cuda', 'mps']

_GIB = 1024 ** 3


@dataclass(frozen=True)
class DeviceInfo:
    """
    One compute device as seen by the dispatcher.

    Attributes:
        device_type: 'cpu', 'cuda' or 'mps'
        device_index: Ordinal for CUDA/MPS, None for the host
        name: Marketing or processor name
        memory_bytes: Device memory, None when the driver does not report it
        compute_capability: CUDA (major, minor); None elsewhere
    """
    device_type: DeviceType
    device_index: int | None
    name: str
    memory_bytes: int | None
    compute_capability: tuple[int, int] | None

    @property
    def is_gpu(self) -> bool:
        return self.device_type != 'cpu'

    @property
    def torch_device(self) -> str:
        """Argument for torch.device(), e.g. 'cuda:0' or 'mps'."""
        if self.device_type == 'cuda':
            return f"cuda:{self.device_index or 0}"
        return self.device_type

    def __str__(self) -> str:
        if not self.is_gpu:
            return f"CPU ({self.name})"
        extra = "" if self.memory_bytes is None else f", {self.memory_bytes / _GIB:.1f}GB"
        return f"{self.device_type.upper()}:{self.device_index} ({self.name}{extra})"


def _probe_cuda(torch: Any) -> DeviceInfo | None:
    if not torch.cuda.is_available():
        return None
    idx = torch.cuda.current_device()
    props = torch.cuda.get_device_properties(idx)
    return DeviceInfo('cuda', idx, props.name, props.total_memory, (props.major, props.minor))


def _probe_mps(torch: Any) -> DeviceInfo | None:
    mps = getattr(torch.backends, 'mps', None)
    if mps is None or not mps.is_available():
        return None
    # MPS reports neither memory size nor a capability level
    return DeviceInfo('mps', 0, 'Apple Silicon GPU', None, None)


_PROBES: tuple[tuple[str, Callable[[Any], DeviceInfo | None]], ...] = (
    ('CUDA', _probe_cuda),
    ('MPS', _probe_mps),
)


def detect_gpu() -> DeviceInfo | None:
    """
    Find the accelerator GPU arrays should use.

    Returns:
        DeviceInfo for CUDA if present, else MPS, else None.

    Never raises: a missing torch, a broken driver or a failing device
    query is logged at DEBUG and treated as "no GPU".
    """
    try:
        import torch
    except Exception as e:
        logger.debug("torch not importable, no accelerator: %s", e)
        return None

    for label, probe in _PROBES:
        try:
            device = probe(torch)
        except Exception as e:
            logger.debug("%s query failed, treating as unavailable: %s", label, e)
            continue
        if device is not None:
            return device
    return None


def get_cpu_info() -> DeviceInfo:
    """DeviceInfo describing the host processor."""
    name = platform.processor() or platform.machine() or "Unknown CPU"
    return DeviceInfo('cpu', None, name, None, None)
