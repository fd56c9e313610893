"""
Environment-driven configuration for OpenEng.

- OPENENG_DEVICE: auto | cpu | gpu (default: auto). Default preference for
  the array dispatcher. Explicit arguments always win over the environment.
- OPENENG_LOG_LEVEL: logging level name applied by configure_logging()
  when no level is passed.
"""

from __future__ import annotations

import logging
import os
from typing import Literal

from openeng.core.exceptions import ValidationError

DevicePreference = Literal['auto', 'cpu', 'gpu']

DEVICE_ENV_VAR = "OPENENG_DEVICE"
LOG_LEVEL_ENV_VAR = "OPENENG_LOG_LEVEL"

_VALID_PREFERENCES = ('auto', 'cpu', 'gpu')
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_device_preference() -> DevicePreference:
    """
    Return OPENENG_DEVICE from env: auto | cpu | gpu.
    Default: auto.

    Raises:
        ValidationError: If the variable holds anything else
    """
    raw = (os.getenv(DEVICE_ENV_VAR) or "auto").strip().lower()
    if raw not in _VALID_PREFERENCES:
        raise ValidationError(
            f"{DEVICE_ENV_VAR}={raw!r} is invalid. Must be one of {_VALID_PREFERENCES}."
        )
    return raw  # type: ignore[return-value]


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """
    Attach a stream handler to the 'openeng' logger.

    Intended for scripts and notebooks; library code never calls this.
    Calling it again only updates the level.

    Args:
        level: Logging level (name or number). Falls back to
            OPENENG_LOG_LEVEL, then INFO.

    Returns:
        The configured 'openeng' logger
    """
    if level is None:
        level = (os.getenv(LOG_LEVEL_ENV_VAR) or "INFO").strip().upper()

    logger = logging.getLogger("openeng")
    logger.setLevel(level)

    if not any(getattr(h, "_openeng_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler._openeng_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
