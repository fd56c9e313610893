"""
Signal processing module.

FFT, IIR filter design and spectral analysis over scipy.fft and
scipy.signal, with MATLAB-style (b, a) and (P, f) return values.

Public API:
    fft, ifft, rfft, irfft, fftshift, ifftshift, fftfreq, rfftfreq
    butter, cheby1, cheby2, ellip         - Filter design
    filter_signal, filtfilt               - Filtering
    resample, convolve, xcorr, hilbert
    compute_spectrogram, power_spectrum   - Spectral estimation
"""

from openeng.signal.spectral import (
    fft,
    ifft,
    rfft,
    irfft,
    fftshift,
    ifftshift,
    fftfreq,
    rfftfreq,
    compute_spectrogram,
    power_spectrum,
)
from openeng.signal.filters import (
    butter,
    cheby1,
    cheby2,
    ellip,
    filter_signal,
    filtfilt,
    resample,
    convolve,
    xcorr,
    hilbert,
)

__all__ = [
    "fft",
    "ifft",
    "rfft",
    "irfft",
    "fftshift",
    "ifftshift",
    "fftfreq",
    "rfftfreq",
    "compute_spectrogram",
    "power_spectrum",
    "butter",
    "cheby1",
    "cheby2",
    "ellip",
    "filter_signal",
    "filtfilt",
    "resample",
    "convolve",
    "xcorr",
    "hilbert",
]
