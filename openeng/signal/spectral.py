"""
FFT helpers and spectral estimation.
"""

from __future__ import annotations

from typing import Any, Literal
import numpy as np
import scipy.fft
import scipy.signal
from numpy.typing import ArrayLike, NDArray

from openeng.core.exceptions import ValidationError
from openeng.core.validation import check_array, check_1d, check_option, check_positive_int

PSDMethod = Literal['welch', 'periodogram']


def fft(x: ArrayLike, n: int | None = None, axis: int = -1) -> NDArray[Any]:
    """Discrete Fourier transform."""
    return scipy.fft.fft(check_array(x, 'x'), n=n, axis=axis)


def ifft(X: ArrayLike, n: int | None = None, axis: int = -1) -> NDArray[Any]:
    """Inverse discrete Fourier transform."""
    return scipy.fft.ifft(check_array(X, 'X'), n=n, axis=axis)


def rfft(x: ArrayLike, n: int | None = None, axis: int = -1) -> NDArray[Any]:
    """FFT of a real signal (non-negative frequencies only)."""
    return scipy.fft.rfft(check_array(x, 'x'), n=n, axis=axis)


def irfft(X: ArrayLike, n: int | None = None, axis: int = -1) -> NDArray[Any]:
    """
    Inverse of rfft.

    Pass the original length as n: odd lengths cannot be recovered
    from the half spectrum alone.
    """
    return scipy.fft.irfft(check_array(X, 'X'), n=n, axis=axis)


def fftshift(x: ArrayLike, axes: Any = None) -> NDArray[Any]:
    """Move the zero-frequency term to the centre of the spectrum."""
    return scipy.fft.fftshift(np.asarray(x), axes=axes)


def ifftshift(x: ArrayLike, axes: Any = None) -> NDArray[Any]:
    """Inverse of fftshift."""
    return scipy.fft.ifftshift(np.asarray(x), axes=axes)


def _check_spacing(n: int, d: float) -> int:
    n = check_positive_int(n, 'n')
    if not d > 0:
        raise ValidationError(f"d: sample spacing must be positive, got {d}")
    return n


def fftfreq(n: int, d: float = 1.0) -> NDArray[np.floating[Any]]:
    """
    Frequency bins for an n-point FFT with sample spacing d.

    Order matches fft(): [0, 1, ..., n/2-1, -n/2, ..., -1] / (d*n).

    Example:
        >>> freqs = fftfreq(1000, 1 / 1000.0)   # 1 kHz sampling
    """
    n = _check_spacing(n, d)
    return scipy.fft.fftfreq(n, d)


def rfftfreq(n: int, d: float = 1.0) -> NDArray[np.floating[Any]]:
    """Non-negative frequency bins (length n // 2 + 1) for rfft()."""
    n = _check_spacing(n, d)
    return scipy.fft.rfftfreq(n, d)


def compute_spectrogram(
    x: ArrayLike,
    n: int = 256,
    noverlap: int = 128,
    window: Any = None,
    fs: float = 1.0,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Spectrogram of a 1D signal.

    Args:
        x: Input signal
        n: Segment (FFT) length
        noverlap: Overlapping samples between segments, < n
        window: Window spec or array (default: Hamming of length n)
        fs: Sampling frequency

    Returns:
        (S, f, t) with S of shape (len(f), len(t)) holding power
        spectral density per segment.
    """
    x = check_array(x, 'x')
    check_1d(x, 'x')
    n = check_positive_int(n, 'n')
    noverlap = check_positive_int(noverlap, 'noverlap', allow_zero=True)
    if noverlap >= n:
        raise ValidationError(f"noverlap: must be less than n={n}, got {noverlap}")
    if n > len(x):
        raise ValidationError(f"n: segment length {n} exceeds signal length {len(x)}")
    if window is None:
        window = 'hamming'

    f, t, S = scipy.signal.spectrogram(
        x, fs=fs, window=window, nperseg=n, noverlap=noverlap,
    )
    return S, f, t


def power_spectrum(
    x: ArrayLike,
    *,
    method: PSDMethod = 'welch',
    fs: float = 1.0,
    **kwargs: Any,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Power spectral density estimate.

    Args:
        x: Input signal
        method: 'welch' (averaged segments) or 'periodogram'
        fs: Sampling frequency
        **kwargs: Passed through to scipy.signal.welch / periodogram
            (nperseg, window, detrend, ...)

    Returns:
        (P, f) power spectral density and non-negative frequencies
    """
    x = check_array(x, 'x')
    check_option(method, ('welch', 'periodogram'), 'PSD method')
    if method == 'welch':
        f, P = scipy.signal.welch(x, fs=fs, **kwargs)
    else:
        f, P = scipy.signal.periodogram(x, fs=fs, **kwargs)
    return P, f
