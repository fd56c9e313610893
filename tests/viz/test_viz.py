"""
Tests for plotting helpers.

Runs on the non-interactive Agg backend; checks the returned figure/axes
contents rather than rendered pixels.
"""

import logging

import matplotlib
matplotlib.use('Agg')

import matplotlib.pyplot as plt
import numpy as np
import pytest

from openeng.core.exceptions import DimensionError, ValidationError
from openeng.viz import (
    plot_heatmap,
    plot_response,
    plot_signal,
    plot_signals,
    plot_spectrogram,
    plot_spectrum,
    plot_surface,
    save_plot,
    set_default_backend,
)


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close('all')


# ═══════════════════════════════════════════════════════════════════════
# Backend
# ═══════════════════════════════════════════════════════════════════════


class TestBackend:

    def test_agg(self):
        assert set_default_backend('agg') == 'agg'
        assert matplotlib.get_backend().lower() == 'agg'

    def test_unknown_backend_falls_back(self):
        with pytest.warns(RuntimeWarning, match="falling back"):
            assert set_default_backend('no_such_backend') == 'agg'
        assert matplotlib.get_backend().lower() == 'agg'


# ═══════════════════════════════════════════════════════════════════════
# Line plots
# ═══════════════════════════════════════════════════════════════════════


class TestLinePlots:

    def test_plot_signal_default_axis(self):
        fig, ax = plot_signal([1.0, 2.0, 3.0], title='Test')
        line = ax.get_lines()[0]
        np.testing.assert_array_equal(line.get_xdata(), [0.0, 1.0, 2.0])
        assert ax.get_title() == 'Test'
        assert fig is ax.figure

    def test_plot_signal_existing_axes(self, sine_signal):
        x, t, _ = sine_signal
        fig, ax = plt.subplots()
        fig2, ax2 = plot_signal(x, t, ax=ax)
        assert ax2 is ax
        assert fig2 is fig
        np.testing.assert_allclose(ax.get_lines()[0].get_xdata(), t)

    def test_plot_signal_length_mismatch(self):
        with pytest.raises(DimensionError, match="Inconsistent lengths"):
            plot_signal([1.0, 2.0, 3.0], t=[0.0, 1.0])

    def test_plot_signals_list(self):
        fig, ax = plot_signals([[1.0, 2.0], [3.0, 4.0]], labels=['a', 'b'])
        assert len(ax.get_lines()) == 2
        labels = [text.get_text() for text in ax.get_legend().get_texts()]
        assert labels == ['a', 'b']

    def test_plot_signals_matrix_default_labels(self):
        fig, ax = plot_signals(np.zeros((10, 3)))
        labels = [text.get_text() for text in ax.get_legend().get_texts()]
        assert labels == ['Signal 1', 'Signal 2', 'Signal 3']

    def test_plot_signals_errors(self):
        with pytest.raises(DimensionError, match="different lengths"):
            plot_signals([[1.0, 2.0], [1.0, 2.0, 3.0]])
        with pytest.raises(DimensionError, match="labels"):
            plot_signals(np.zeros((4, 2)), labels=['only one'])
        with pytest.raises(ValidationError, match="nothing to plot"):
            plot_signals([])

    def test_plot_spectrum_scales(self):
        f = np.linspace(1.0, 100.0, 50)
        fig, ax = plot_spectrum(f, 1.0 / f, xscale='log')
        assert ax.get_xscale() == 'log'
        assert ax.get_yscale() == 'log'

    def test_plot_spectrum_bad_scale(self):
        with pytest.raises(ValidationError, match="yscale"):
            plot_spectrum([1.0, 2.0], [1.0, 2.0], yscale='decibel')

    def test_plot_response_title(self):
        t = np.linspace(0.0, 1.0, 11)
        fig, ax = plot_response(t, 1.0 - np.exp(-t), 'Impulse')
        assert ax.get_title() == 'Impulse Response'
        assert ax.get_xlabel() == 'Time (s)'


# ═══════════════════════════════════════════════════════════════════════
# 2D and 3D plots
# ═══════════════════════════════════════════════════════════════════════


class TestGridPlots:

    def test_surface_from_axes(self):
        x = np.linspace(-1.0, 1.0, 5)
        y = np.linspace(-1.0, 1.0, 4)
        X, Y = np.meshgrid(x, y)
        fig, ax = plot_surface(x, y, X ** 2 + Y ** 2)
        assert ax.name == '3d'
        assert ax.get_zlabel() == 'Z'

    def test_surface_shape_mismatch(self):
        with pytest.raises(DimensionError, match="do not match"):
            plot_surface(np.zeros((3, 3)), np.zeros((3, 3)), np.zeros((4, 4)))

    def test_heatmap_colorbar(self):
        fig, ax = plot_heatmap(np.eye(4))
        assert len(fig.axes) == 2
        fig, ax = plot_heatmap(np.eye(4), colorbar=False)
        assert len(fig.axes) == 1

    def test_heatmap_requires_2d(self):
        with pytest.raises(DimensionError):
            plot_heatmap(np.ones(5))

    def test_spectrogram(self):
        f = np.linspace(0.0, 500.0, 65)
        t = np.linspace(0.0, 1.0, 14)
        S = np.ones((65, 14))
        fig, ax = plot_spectrogram(S, f, t)
        assert ax.get_ylabel() == 'Frequency'
        assert len(fig.axes) == 2

    def test_spectrogram_shape(self):
        with pytest.raises(DimensionError, match="expected shape"):
            plot_spectrogram(np.ones((3, 4)), np.arange(4), np.arange(3))


# ═══════════════════════════════════════════════════════════════════════
# Saving
# ═══════════════════════════════════════════════════════════════════════


class TestSavePlot:

    def test_save_png(self, tmp_path, caplog):
        fig, _ = plot_signal(np.sin(np.linspace(0, 6, 100)))
        target = tmp_path / 'signal.png'
        with caplog.at_level(logging.INFO, logger='openeng.viz.plots'):
            path = save_plot(fig, target, dpi=50)
        assert path == target
        assert target.exists()
        assert target.stat().st_size > 0
        assert "Plot saved to" in caplog.text

    def test_format_from_extension(self, tmp_path):
        fig, _ = plot_heatmap(np.eye(3))
        path = save_plot(fig, str(tmp_path / 'heat.pdf'))
        assert path.read_bytes().startswith(b'%PDF')
