"""Logging configuration for NetPulse application."""

import logging
import os
import sys


def configure_logging() -> None:
    """Configure application-wide logging.

    Respects NETPULSE_LOG_LEVEL environment variable (default: INFO).
    Logs to stderr with timestamp, level, module name, and message.

    Environment Variables:
        NETPULSE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                            Default is INFO. Unknown values fall back to INFO.

    Examples:
        # Per-tick statistics
        $ NETPULSE_LOG_LEVEL=DEBUG python -m netpulse

        # Quiet mode
        $ NETPULSE_LOG_LEVEL=WARNING python -m netpulse
    """
    log_level_str = os.environ.get("NETPULSE_LOG_LEVEL", "INFO").upper()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    log_level = log_level_map.get(log_level_str, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    logger.info("Logging configured: level=%s", logging.getLevelName(log_level))
