"""Central logging configuration for the package.

Library modules only call get_logger(); the package logger carries a
NullHandler so importing dotx_import never configures the host's root
logger. The server entry point calls configure_logging().
"""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "dotx_import"

_DEFAULT_LEVEL = logging.INFO
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-level logger."""
    return logging.getLogger(name)


def configure_logging(level: int = _DEFAULT_LEVEL) -> None:
    """Apply the default configuration if the root logger has no handlers."""
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=_FORMAT)
