"""Logging setup for the meshmaker CLI."""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "meshmaker"


def setup_logging(verbose: bool = False) -> None:
    """Log to stdout; stage progress (INFO) only with ``verbose``, otherwise warnings and errors.

    The level is set on the package logger so that VTK/pyvista chatter on the
    root logger is left alone.
    """
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
