"""
Application Logging Module.

Builds the single application logger used across the package. Log records are
written to stderr and, optionally, to a rotating file inside the log directory.

Messages are usually dictionaries (``{"message": ..., "repository": ...}``);
the production formatter merges them into one JSON object per line, while the
development formatter prints them as readable ``key=value`` pairs.
"""

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional


class JSONFormatter(logging.Formatter):
    """JSON line formatter for production runs."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }

        if isinstance(record.msg, dict):
            log_data.update(record.msg)
        else:
            log_data["message"] = record.getMessage()

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for local development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        if isinstance(record.msg, dict):
            fields = dict(record.msg)
            message = str(fields.pop("message", ""))
            extras = " ".join(f"{key}={value}" for key, value in fields.items())
            message = f"{message} [{extras}]" if extras else message
        else:
            message = record.getMessage()

        line = f"[{timestamp}] {record.levelname:8} {record.name}: {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class LogManager:
    """
    Configures and owns the application logger.

    Attributes:
        logger (logging.Logger): Configured logger instance.
    """

    def __init__(
        self,
        app_name: str,
        log_dir: Optional[str] = None,
        development: bool = False,
        level: int = logging.INFO,
    ):
        """Initialize the logger with console and optional file output.

        Args:
            app_name (str): Logger name, also used for the log file name.
            log_dir (Optional[str]): Directory for the rotating log file.
                No file handler is attached when empty.
            development (bool): Use the human-readable formatter.
            level (int): Logging level.
        """
        self.logger = logging.getLogger(app_name)
        self.logger.setLevel(level)
        self.logger.propagate = False

        # Re-instantiation (tests, repeated imports) must not duplicate output
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        formatter = DevelopmentFormatter() if development else JSONFormatter()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, f"{app_name}.log"),
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
            file_handler.setFormatter(JSONFormatter())
            self.logger.addHandler(file_handler)
