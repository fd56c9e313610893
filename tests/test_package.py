"""
Package-level smoke tests: version, banner, submodule wiring.
"""

import logging

import openeng


def test_version():
    assert openeng.__version__ == "0.1.0"


def test_greet_prints_and_returns_banner(capsys):
    banner = openeng.greet()
    out = capsys.readouterr().out
    assert f"v{openeng.__version__}" in banner
    assert "linalg" in out
    assert "optimization" in out


def test_submodules_reachable():
    for name in ('core', 'gpu', 'linalg', 'signal', 'simulation', 'optimization', 'viz', 'utils'):
        assert name in openeng.__all__
        assert hasattr(openeng, name)


def test_library_logger_has_null_handler():
    handlers = logging.getLogger('openeng').handlers
    assert any(isinstance(h, logging.NullHandler) for h in handlers)
