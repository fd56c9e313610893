"""
IIR filter design and application.

Designs return transfer-function coefficients (b, a) like MATLAB.
Digital cutoffs are normalized to the Nyquist frequency (0 < Wn < 1)
unless a sampling rate fs is given, in which case they are in the same
units as fs and must lie below fs / 2.
"""

from __future__ import annotations

from typing import Any, Literal
import numpy as np
import scipy.signal
from numpy.typing import ArrayLike, NDArray

from openeng.core.exceptions import ValidationError
from openeng.core.validation import (
    check_array,
    check_1d,
    check_finite,
    check_option,
    check_positive_int,
)

BType = Literal['lowpass', 'highpass', 'bandpass', 'bandstop']

_BTYPES = ('lowpass', 'highpass', 'bandpass', 'bandstop')


def _check_cutoff(
    Wn: Any,
    btype: str,
    analog: bool,
    fs: float | None,
) -> float | NDArray[np.floating[Any]]:
    """Validate the cutoff frequencies against the band type."""
    check_option(btype, _BTYPES, 'filter type')
    wn = check_array(Wn, 'Wn')
    check_finite(wn, 'Wn')

    if btype in ('bandpass', 'bandstop'):
        if wn.shape != (2,):
            raise ValidationError(
                f"Wn: {btype} needs two cutoff frequencies [low, high], got shape {wn.shape}"
            )
        if not wn[0] < wn[1]:
            raise ValidationError(f"Wn: low cutoff must be below high cutoff, got {wn.tolist()}")
    elif wn.ndim != 0 and wn.shape != (1,):
        raise ValidationError(
            f"Wn: {btype} needs a single cutoff frequency, got shape {wn.shape}"
        )

    if np.any(wn <= 0):
        raise ValidationError(f"Wn: cutoff frequencies must be positive, got {wn.tolist()}")
    if not analog:
        upper = 1.0 if fs is None else fs / 2.0
        if np.any(wn >= upper):
            raise ValidationError(
                f"Wn: digital cutoff frequencies must be below {upper} "
                f"({'Nyquist-normalized' if fs is None else 'fs/2'}), got {wn.tolist()}"
            )

    if wn.ndim == 0 or wn.shape == (1,):
        return float(wn.reshape(-1)[0])
    return wn


def butter(
    n: int,
    Wn: Any,
    btype: BType = 'lowpass',
    analog: bool = False,
    fs: float | None = None,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Butterworth filter design.

    Args:
        n: Filter order
        Wn: Cutoff frequency, or [low, high] for band filters
        btype: 'lowpass', 'highpass', 'bandpass' or 'bandstop'
        analog: Design an analog filter (Wn in rad/s)
        fs: Sampling frequency, optional

    Returns:
        (b, a) numerator and denominator coefficients, equal length

    Example:
        >>> b, a = butter(4, 0.2)          # lowpass at 0.2 * Nyquist
        >>> y = filter_signal(b, a, x)
    """
    n = check_positive_int(n, 'n')
    wn = _check_cutoff(Wn, btype, analog, fs)
    b, a = scipy.signal.butter(n, wn, btype=btype, analog=analog, output='ba', fs=fs)
    return b, a


def cheby1(
    n: int,
    rp: float,
    Wn: Any,
    btype: BType = 'lowpass',
    analog: bool = False,
    fs: float | None = None,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Chebyshev type I filter design.

    Args:
        n: Filter order
        rp: Passband ripple in dB (> 0)
        Wn: Cutoff frequency
        btype: Filter type
    """
    n = check_positive_int(n, 'n')
    if rp <= 0:
        raise ValidationError(f"rp: passband ripple must be positive, got {rp}")
    wn = _check_cutoff(Wn, btype, analog, fs)
    b, a = scipy.signal.cheby1(n, rp, wn, btype=btype, analog=analog, output='ba', fs=fs)
    return b, a


def cheby2(
    n: int,
    rs: float,
    Wn: Any,
    btype: BType = 'lowpass',
    analog: bool = False,
    fs: float | None = None,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Chebyshev type II filter design.

    Args:
        n: Filter order
        rs: Stopband attenuation in dB (> 0)
        Wn: Stopband edge frequency
        btype: Filter type
    """
    n = check_positive_int(n, 'n')
    if rs <= 0:
        raise ValidationError(f"rs: stopband attenuation must be positive, got {rs}")
    wn = _check_cutoff(Wn, btype, analog, fs)
    b, a = scipy.signal.cheby2(n, rs, wn, btype=btype, analog=analog, output='ba', fs=fs)
    return b, a


def ellip(
    n: int,
    rp: float,
    rs: float,
    Wn: Any,
    btype: BType = 'lowpass',
    analog: bool = False,
    fs: float | None = None,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Elliptic (Cauer) filter design.

    Args:
        n: Filter order
        rp: Passband ripple in dB
        rs: Stopband attenuation in dB (must exceed rp)
        Wn: Cutoff frequency
        btype: Filter type
    """
    n = check_positive_int(n, 'n')
    if rp <= 0 or rs <= 0:
        raise ValidationError(f"rp, rs: must be positive, got rp={rp}, rs={rs}")
    wn = _check_cutoff(Wn, btype, analog, fs)
    b, a = scipy.signal.ellip(n, rp, rs, wn, btype=btype, analog=analog, output='ba', fs=fs)
    return b, a


def _coefficients(b: ArrayLike, a: ArrayLike) -> tuple[NDArray, NDArray]:
    b = check_array(b, 'b')
    a = check_array(a, 'a')
    check_1d(b, 'b')
    check_1d(a, 'a')
    if a[0] == 0:
        raise ValidationError("a: leading denominator coefficient must be non-zero")
    return b, a


def filter_signal(b: ArrayLike, a: ArrayLike, x: ArrayLike) -> NDArray[Any]:
    """
    Apply a digital filter (direct form II transposed).

    Output has the same length as x.
    """
    b, a = _coefficients(b, a)
    x = check_array(x, 'x')
    return scipy.signal.lfilter(b, a, x)


def filtfilt(b: ArrayLike, a: ArrayLike, x: ArrayLike) -> NDArray[Any]:
    """Zero-phase forward-backward filtering."""
    b, a = _coefficients(b, a)
    x = check_array(x, 'x')
    return scipy.signal.filtfilt(b, a, x)


def resample(x: ArrayLike, num: int) -> NDArray[Any]:
    """Resample x to num samples (Fourier method)."""
    x = check_array(x, 'x')
    num = check_positive_int(num, 'num')
    return scipy.signal.resample(x, num)


def convolve(x: ArrayLike, h: ArrayLike, mode: str = 'full') -> NDArray[Any]:
    """Linear convolution of x and h ('full', 'same' or 'valid')."""
    check_option(mode, ('full', 'same', 'valid'), 'convolution mode')
    return scipy.signal.convolve(check_array(x, 'x'), check_array(h, 'h'), mode=mode)


def xcorr(
    x: ArrayLike,
    y: ArrayLike | None = None,
) -> tuple[NDArray[Any], NDArray[np.integer[Any]]]:
    """
    Cross-correlation of x and y (auto-correlation when y is omitted).

    Returns:
        (r, lags) with r[k] the correlation at lag lags[k]
    """
    x = check_array(x, 'x')
    check_1d(x, 'x')
    y = x if y is None else check_array(y, 'y')
    check_1d(y, 'y')
    r = scipy.signal.correlate(x, y, mode='full')
    lags = scipy.signal.correlation_lags(len(x), len(y), mode='full')
    return r, lags


def hilbert(x: ArrayLike) -> NDArray[np.complexfloating[Any, Any]]:
    """Analytic signal via the Hilbert transform."""
    x = check_array(x, 'x')
    return scipy.signal.hilbert(x)
