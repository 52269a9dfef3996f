"""Process-wide logging configuration."""

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def config_configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the running process.

    Args:
        level: Logging level name such as `INFO` or `DEBUG`.

    Returns:
        None: Logging handlers are installed as side effect.

    Raises:
        ValueError: Raised when level is blank.
    """

    normalized_level = level.strip().upper()
    if not normalized_level:
        raise ValueError("level must not be blank")

    logging.basicConfig(
        level=getattr(logging, normalized_level, logging.INFO),
        format=_LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
