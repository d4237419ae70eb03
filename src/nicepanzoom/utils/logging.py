"""Logging for nicepanzoom.

Every module logs through a child of the ``nicepanzoom`` logger, named after
the module:

- ``nicepanzoom.image_panel.image_panel``: panel setup, committed and stale
  loads at INFO; abandoned loads and a missing loading screen at WARNING;
  resize and reset at DEBUG; repaint handler errors via ``logger.exception``.
- ``nicepanzoom.image_panel.pixel_source``: one DEBUG line per decoded file.
- ``nicepanzoom.image_panel.transform``: DEBUG when a fit is computed or a
  zoom step is dropped at a scale bound.
- ``nicepanzoom.image_panel.input_controller``: DEBUG per zoom step and
  committed pan; the secondary-click pixel report at INFO.
- ``nicepanzoom.image_panel.widget``: DEBUG when a drag is ended by a move
  with the pan button already released.

``import nicepanzoom`` attaches a NullHandler to ``nicepanzoom``, so nothing is
printed until the host application configures logging. Standalone scripts
(see ``examples/sample_image_panel.py``) call ``configure_logging()``, which
attaches a single stderr handler to ``nicepanzoom`` only, never to root. Its
level comes from the argument, else ``NICEPANZOOM_LOG_LEVEL``, else INFO.
No log files are written.

    from nicepanzoom.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG")
    get_logger("nicepanzoom.image_panel.transform").setLevel("INFO")
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "nicepanzoom"
LOG_LEVEL_ENV = "NICEPANZOOM_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the nicepanzoom logger only (never root).

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO"). Defaults to the
        NICEPANZOOM_LOG_LEVEL env var, or "INFO" if unset.
    fmt:
        Log message format. Defaults to DEFAULT_FMT.
    datefmt:
        Date format. Defaults to "%Y-%m-%d %H:%M:%S".
    force:
        If True, remove existing handlers before adding a new one. If False,
        do nothing when a stderr handler is already attached.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt=fmt if fmt is not None else DEFAULT_FMT,
        datefmt=datefmt if datefmt is not None else DEFAULT_DATEFMT,
    )

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name, or the 'nicepanzoom' logger if name is None.

    Use like:
        logger = get_logger(__name__)
    """
    if name is None:
        name = LOGGER_NAME
    return logging.getLogger(name)
