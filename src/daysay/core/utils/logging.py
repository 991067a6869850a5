"""
Logging configuration using loguru.

Call setup_logging() once at startup (the CLI does this), or just use
loguru directly. Library modules only ever import ``logger``.
"""

import sys

from loguru import logger


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    fmt: str = "<level>[{level.name}]</level> {message}",
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Configure loguru with console and optional file output.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Path to log file. If None or empty, only logs to stderr.
        fmt: Loguru format string.
        rotation: Log file rotation size.
        retention: How long to keep rotated logs.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=fmt)

    if log_file:
        logger.add(
            log_file,
            level=level.upper(),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function} | {message}",
            rotation=rotation,
            retention=retention,
        )
