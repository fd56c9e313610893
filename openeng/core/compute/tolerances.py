"""
Tolerance tiers for comparing accelerated and host results.

- CPU FP64 (reference)
- GPU FP64: CUDA devices run float64 and must match the host path
- GPU FP32: MPS has no float64, so results are single precision. Any
  backend running FP32 (including torch on the CPU) uses this tier

Used by the test suite and by callers checking the dispatch layer.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance pair for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='cpu_fp64',
    description='CPU double precision reference',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-10,
    name='gpu_fp64',
    description='GPU double precision, matches CPU reference',
)

GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='gpu_fp32',
    description='GPU single precision',
)

# MPS (Apple Silicon GPU) is float32 only
MPS_FP32 = GPU_FP32


def select_tolerance(backend_name: str) -> ToleranceTier:
    """Select appropriate tolerance tier for a given backend name."""
    if backend_name.endswith("fp32"):
        return GPU_FP32
    if "gpu" in backend_name:
        return GPU_FP64
    return CPU_FP64
