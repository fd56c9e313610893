"""
Visualization module (matplotlib).

Public API:
    set_default_backend(backend)
    plot_signal, plot_signals, plot_spectrum, plot_spectrogram
    plot_surface, plot_heatmap, plot_response
    save_plot(fig, filename, dpi)
"""

from openeng.viz.plots import (
    set_default_backend,
    plot_signal,
    plot_signals,
    plot_spectrum,
    plot_surface,
    plot_heatmap,
    plot_spectrogram,
    plot_response,
    save_plot,
)

__all__ = [
    "set_default_backend",
    "plot_signal",
    "plot_signals",
    "plot_spectrum",
    "plot_surface",
    "plot_heatmap",
    "plot_spectrogram",
    "plot_response",
    "save_plot",
]
