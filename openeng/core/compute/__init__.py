"""
Shared compute infrastructure for OpenEng.

This module provides hardware detection, timing utilities and tolerance
tiers shared by the dispatch layer and the facade modules.

Submodules:
    device: Hardware detection
    timing: Section timer for solver results
    tolerances: Host vs accelerator comparison tolerances
"""

from openeng.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
)
from openeng.core.compute.timing import Timer
from openeng.core.compute.tolerances import ToleranceTier, select_tolerance

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    # Timing
    "Timer",
    # Tolerances
    "ToleranceTier",
    "select_tolerance",
]
