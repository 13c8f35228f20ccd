"""Logger shared by the decoder, builder and verifier."""

import structlog
from structlog.stdlib import BoundLogger

LOGGER_NAME = "jwtkit"


def get_logger() -> BoundLogger:
    """Return the package logger.

    Configuration is left to the host application; without it structlog
    falls back to its development defaults.
    """
    return structlog.get_logger(LOGGER_NAME)
