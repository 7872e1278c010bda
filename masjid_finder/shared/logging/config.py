"""Logging configuration"""
import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Chatty dependencies kept at WARNING
NOISY_LOGGERS: tuple[str, ...] = ("urllib3", "httpx", "google", "uvicorn.access")

_console_handler: Optional[logging.Handler] = None


def setup_logging(
    level: str = "INFO",
    enable_cloud_logging: bool = False,
    project_id: Optional[str] = None,
    stream: Optional[TextIO] = None,
    log_name: str = "masjid-finder",
) -> None:
    """
    Configure the root logger

    Calling it again only changes the level, so a CLI flag can override
    whatever the first call set.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_cloud_logging: Also ship records to Google Cloud Logging
        project_id: GCP project ID (needed when Cloud Logging is enabled)
        stream: Console stream (stderr, so stdout stays free for CLI output)
        log_name: Cloud Logging log name
    """
    global _console_handler

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if _console_handler is not None:
        _console_handler.setLevel(log_level)
        return

    root_logger.handlers.clear()

    _console_handler = logging.StreamHandler(stream or sys.stderr)
    _console_handler.setLevel(log_level)
    _console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(_console_handler)

    if enable_cloud_logging:
        _add_cloud_handler(root_logger, log_level, project_id, log_name)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(f"Logging configured with level: {level}")


def _add_cloud_handler(
    root_logger: logging.Logger,
    log_level: int,
    project_id: Optional[str],
    log_name: str,
) -> None:
    # Console logging keeps working when Cloud Logging is unavailable
    try:
        from google.cloud import logging as cloud_logging

        client = cloud_logging.Client(project=project_id)
        handler = cloud_logging.handlers.CloudLoggingHandler(client, name=log_name)
        handler.setLevel(log_level)
        root_logger.addHandler(handler)
        root_logger.info(f"Cloud Logging enabled (log={log_name})")
    except Exception as e:
        root_logger.warning(f"Failed to enable Cloud Logging: {e}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass __name__)"""
    return logging.getLogger(name)
