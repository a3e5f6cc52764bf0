"""
Logging setup for the revision loader.

Modules log through ``logging.getLogger(__name__)``; this module attaches
handlers to the ``revloader`` logger according to LoggingSettings. Records
can be rendered as plain text or as one JSON object per line, optionally to a
daily rotating file.
"""

import json
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from ..config.settings import LoggingSettings

ROOT_LOGGER = "revloader"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """JSON line formatter for loader logs."""

    def __init__(self, component: str | None = None):
        super().__init__()
        self.component = component

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "file": record.filename,
            "line": record.lineno,
        }

        if self.component:
            log_record["component"] = self.component

        # Structured extras passed as extra={"json_data": {...}}
        if hasattr(record, "json_data"):
            log_record.update(record.json_data)

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record, ensure_ascii=False)


class DailyLogHandler(TimedRotatingFileHandler):
    """Daily rotating file handler that creates its directory."""

    def __init__(self, file_path: str, backup_count: int = 7):
        log_file = Path(file_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            filename=str(log_file),
            when="midnight",
            interval=1,
            backupCount=backup_count,
            encoding="utf-8",
        )


def _make_formatter(settings: LoggingSettings) -> logging.Formatter:
    if settings.format == "json":
        return JsonFormatter(component="loader")
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(settings: LoggingSettings | None = None, stream=None) -> logging.Logger:
    """
    Configure the ``revloader`` logger.

    Args:
        settings: Logging settings; defaults are used when omitted
        stream: Stream for the console handler (default: stderr)

    Returns:
        The configured package logger
    """
    settings = settings or LoggingSettings()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(settings.level)

    # Clear any existing handlers to avoid duplicates on reconfiguration
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = _make_formatter(settings)

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if settings.file_path:
        file_handler = DailyLogHandler(settings.file_path, settings.backup_count)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
