"""Logging setup for the Sandman CLI."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are noisy at DEBUG level
QUIET_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")


def setup_logging(verbose: bool = False) -> None:
    """Configure the sandman logger to write to stdout.

    Replaces any handler installed by a previous call.

    Args:
        verbose: Log at DEBUG level instead of INFO.
    """
    formatter = logging.Formatter(LOG_FORMAT)

    sandman_logger = logging.getLogger("sandman")
    for handler in sandman_logger.handlers[:]:
        sandman_logger.removeHandler(handler)
    sandman_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    sandman_logger.addHandler(stdout_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
