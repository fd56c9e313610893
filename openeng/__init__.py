"""
OpenEng: a MATLAB-style engineering toolbox for Python.

Thin, validated wrappers over NumPy, SciPy, pandas, h5py and matplotlib,
with optional GPU acceleration through PyTorch.

Submodules:
    gpu: GPU/CPU array dispatch with automatic fallback
    linalg: Decompositions, matrix functions, sparse helpers
    signal: FFT, IIR filter design, filtering, spectra
    simulation: ODE solvers and linear system responses
    optimization: LP/NLP solvers and a model builder
    viz: matplotlib plotting helpers
    utils: File I/O, units, physical constants, timers
"""

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

from openeng import core
from openeng import gpu
from openeng import linalg
from openeng import signal
from openeng import simulation
from openeng import optimization
from openeng import viz
from openeng import utils


def greet() -> str:
    """Print and return the welcome banner."""
    banner = (
        f"OpenEng v{__version__}: scientific computing toolbox for Python\n"
        "\n"
        "Available modules:\n"
        "  - linalg        linear algebra\n"
        "  - signal        signal processing\n"
        "  - simulation    ODEs and control systems\n"
        "  - optimization  linear and nonlinear programming\n"
        "  - viz           2D/3D plotting\n"
        "  - gpu           GPU arrays with CPU fallback\n"
        "  - utils         I/O, units and constants\n"
    )
    print(banner)
    return banner


__all__ = [
    "__version__",
    "greet",
    "core",
    "gpu",
    "linalg",
    "signal",
    "simulation",
    "optimization",
    "viz",
    "utils",
]
