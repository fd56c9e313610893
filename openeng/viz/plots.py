"""
Plotting helpers over matplotlib's object-oriented API.

Every plot function returns (fig, ax) and accepts an existing ax to draw
into. pyplot is imported locally so importing openeng never initializes
a GUI backend.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence
import logging
import warnings
import numpy as np
from numpy.typing import ArrayLike

from openeng.core.exceptions import DimensionError, ValidationError
from openeng.core.validation import check_array, check_1d, check_2d, check_option

logger = logging.getLogger(__name__)


def set_default_backend(backend: str = 'agg') -> str:
    """
    Select the matplotlib backend used for subsequent figures.

    Unknown or unusable backends fall back to 'agg' with a RuntimeWarning.

    Returns:
        Name of the backend actually in use
    """
    import matplotlib

    try:
        matplotlib.use(backend, force=True)
    except (ValueError, ImportError) as e:
        warnings.warn(
            f"Backend {backend!r} unavailable ({e}); falling back to 'agg'",
            RuntimeWarning,
            stacklevel=2,
        )
        matplotlib.use('agg', force=True)
        backend = 'agg'

    logger.debug("matplotlib backend set to %s", backend)
    return backend


def _figure(ax: Any = None, projection: str | None = None) -> tuple[Any, Any]:
    import matplotlib.pyplot as plt  # local import

    if ax is not None:
        return ax.figure, ax
    if projection is None:
        return plt.subplots()
    fig = plt.figure()
    return fig, fig.add_subplot(111, projection=projection)


def _time_axis(t: ArrayLike | None, n: int) -> np.ndarray:
    if t is None:
        return np.arange(n, dtype=np.float64)
    t = check_array(t, 't')
    check_1d(t, 't')
    if t.shape[0] != n:
        raise DimensionError(f"Inconsistent lengths: t={t.shape[0]}, signal={n}")
    return t


def plot_signal(
    x: ArrayLike,
    t: ArrayLike | None = None,
    *,
    title: str = 'Signal',
    xlabel: str = 'Time',
    ylabel: str = 'Amplitude',
    ax: Any = None,
    **kwargs: Any,
) -> tuple[Any, Any]:
    """
    Line plot of a single signal.

    Args:
        x: Samples (1D)
        t: Sample times; defaults to sample index
        **kwargs: Passed to Axes.plot
    """
    x = check_array(x, 'x')
    check_1d(x, 'x')
    t = _time_axis(t, x.shape[0])
    fig, ax = _figure(ax)
    ax.plot(t, np.real(x), **kwargs)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.grid(True)
    return fig, ax


def plot_signals(
    signals: ArrayLike | Sequence[ArrayLike],
    t: ArrayLike | None = None,
    labels: Sequence[str] | None = None,
    *,
    title: str = 'Signals',
    xlabel: str = 'Time',
    ylabel: str = 'Amplitude',
    ax: Any = None,
) -> tuple[Any, Any]:
    """
    Overlay several signals on one axes.

    signals is either a 2D array (one signal per column) or a list of
    equal-length vectors.
    """
    if isinstance(signals, (list, tuple)):
        columns = [check_array(s, f'signals[{i}]') for i, s in enumerate(signals)]
        lengths = {c.shape[0] for c in columns}
        if len(lengths) > 1:
            raise DimensionError(f"signals: vectors have different lengths {sorted(lengths)}")
        data = np.column_stack(columns) if columns else np.empty((0, 0))
    else:
        data = check_array(signals, 'signals')
        if data.ndim == 1:
            data = data.reshape(-1, 1)
        check_2d(data, 'signals')

    n_signals = data.shape[1]
    if n_signals == 0:
        raise ValidationError("signals: nothing to plot")
    if labels is not None and len(labels) != n_signals:
        raise DimensionError(f"labels: expected {n_signals}, got {len(labels)}")

    t = _time_axis(t, data.shape[0])
    fig, ax = _figure(ax)
    for j in range(n_signals):
        label = labels[j] if labels is not None else f'Signal {j + 1}'
        ax.plot(t, np.real(data[:, j]), label=label)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.legend()
    ax.grid(True)
    return fig, ax


def plot_spectrum(
    f: ArrayLike,
    P: ArrayLike,
    *,
    xscale: str = 'linear',
    yscale: str = 'log',
    title: str = 'Power Spectrum',
    ax: Any = None,
) -> tuple[Any, Any]:
    """Spectrum P(f), log power axis by default."""
    f = check_array(f, 'f')
    P = np.abs(check_array(P, 'P'))
    check_1d(f, 'f')
    if P.shape[0] != f.shape[0]:
        raise DimensionError(f"Inconsistent lengths: f={f.shape[0]}, P={P.shape[0]}")
    check_option(xscale, ('linear', 'log', 'symlog'), 'xscale')
    check_option(yscale, ('linear', 'log', 'symlog'), 'yscale')

    fig, ax = _figure(ax)
    ax.plot(f, P)
    ax.set_xscale(xscale)
    ax.set_yscale(yscale)
    ax.set_title(title)
    ax.set_xlabel('Frequency')
    ax.set_ylabel('Power')
    ax.grid(True, which='both')
    return fig, ax


def plot_surface(
    X: ArrayLike,
    Y: ArrayLike,
    Z: ArrayLike,
    *,
    cmap: str = 'viridis',
    title: str = 'Surface',
    ax: Any = None,
) -> tuple[Any, Any]:
    """
    3D surface plot.

    X and Y may be 1D axes (meshed internally) or 2D grids matching Z.
    """
    X = check_array(X, 'X')
    Y = check_array(Y, 'Y')
    Z = check_array(Z, 'Z')
    check_2d(Z, 'Z')
    if X.ndim == 1 and Y.ndim == 1:
        X, Y = np.meshgrid(X, Y)
    if X.shape != Z.shape or Y.shape != Z.shape:
        raise DimensionError(f"Grid shapes X={X.shape}, Y={Y.shape} do not match Z={Z.shape}")

    fig, ax = _figure(ax, projection='3d')
    ax.plot_surface(X, Y, Z, cmap=cmap)
    ax.set_title(title)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_zlabel('Z')
    return fig, ax


def plot_heatmap(
    data: ArrayLike,
    *,
    cmap: str = 'viridis',
    title: str = 'Heatmap',
    colorbar: bool = True,
    ax: Any = None,
) -> tuple[Any, Any]:
    """Image plot of a 2D array with optional colorbar."""
    data = check_array(data, 'data')
    check_2d(data, 'data')
    fig, ax = _figure(ax)
    im = ax.imshow(np.real(data), cmap=cmap, aspect='auto', origin='lower')
    if colorbar:
        fig.colorbar(im, ax=ax)
    ax.set_title(title)
    return fig, ax


def plot_spectrogram(
    S: ArrayLike,
    f: ArrayLike,
    t: ArrayLike,
    *,
    db: bool = True,
    cmap: str = 'viridis',
    title: str = 'Spectrogram',
    ax: Any = None,
) -> tuple[Any, Any]:
    """
    Time-frequency plot of a spectrogram as returned by compute_spectrogram.

    Args:
        S: Power, shape (len(f), len(t))
        db: Plot 10*log10(S) instead of linear power
    """
    S = np.abs(check_array(S, 'S'))
    f = check_array(f, 'f')
    t = check_array(t, 't')
    check_2d(S, 'S')
    if S.shape != (f.shape[0], t.shape[0]):
        raise DimensionError(
            f"S: expected shape {(f.shape[0], t.shape[0])}, got {S.shape}"
        )
    values = 10.0 * np.log10(S + np.finfo(np.float64).tiny) if db else S

    fig, ax = _figure(ax)
    mesh = ax.pcolormesh(t, f, values, cmap=cmap, shading='auto')
    fig.colorbar(mesh, ax=ax, label='Power (dB)' if db else 'Power')
    ax.set_title(title)
    ax.set_xlabel('Time')
    ax.set_ylabel('Frequency')
    return fig, ax


def plot_response(
    t: ArrayLike,
    y: ArrayLike,
    response_type: str = 'Step',
    *,
    ax: Any = None,
) -> tuple[Any, Any]:
    """Plot a system time response, e.g. from step_response or impulse_response."""
    y = check_array(y, 'y')
    t = _time_axis(t, y.shape[0])
    fig, ax = _figure(ax)
    ax.plot(t, y)
    ax.set_title(f'{response_type} Response')
    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Output')
    ax.grid(True)
    return fig, ax


def save_plot(fig: Any, filename: str | Path, dpi: int = 300) -> Path:
    """Save a figure; the format follows the file extension."""
    path = Path(filename)
    fig.savefig(path, dpi=dpi, bbox_inches='tight')
    logger.info("Plot saved to %s", path)
    return path
