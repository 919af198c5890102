"""
Logger Service Module
Logging configuration with rotation, colored console output and JSON files
"""

import json
import logging
import sys
import time
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import colorlog

# LogRecord attributes that are not user-supplied extras
_RECORD_FIELDS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class LoggerService:
    """
    Configures the root logger with:
    - Colored console output
    - Rotating app.log and errors.log files
    - Optional JSON structured file logs
    """

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = self._default_config()
        if config:
            self.config.update({k: v for k, v in config.items() if v is not None})
        self.handlers: list[logging.Handler] = []

        self.log_dir = Path(self.config["log_dir"])
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            # Unwritable location, file handlers fall back to stderr
            pass

        self._setup_root_logger()

    def _default_config(self) -> dict[str, Any]:
        """Default logging configuration"""
        return {
            "log_dir": "./logs",
            "log_level": "INFO",
            "file_level": "DEBUG",
            "max_bytes": 5 * 1024 * 1024,  # 5MB
            "backup_count": 3,
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "date_format": "%Y-%m-%d %H:%M:%S",
            "colored_output": True,
            "console_output": True,
            "json_logs": False,
        }

    def _setup_root_logger(self):
        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)  # Filter at handler level

        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)

        if self.config.get("console_output"):
            self._add(root_logger, self._create_console_handler())
        self._add(root_logger, self._create_file_handler("app.log"))
        self._add(root_logger, self._create_file_handler("errors.log", level=logging.ERROR))

    def _add(self, logger: logging.Logger, handler: logging.Handler):
        logger.addHandler(handler)
        self.handlers.append(handler)

    def _create_console_handler(self) -> logging.Handler:
        """Console handler, colored unless disabled"""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(_level(self.config.get("log_level")))

        if self.config.get("colored_output"):
            formatter = colorlog.ColoredFormatter(
                "%(log_color)s" + self.config["format"],
                datefmt=self.config.get("date_format"),
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "red,bg_white",
                },
            )
        else:
            formatter = logging.Formatter(
                self.config["format"], datefmt=self.config.get("date_format")
            )

        console_handler.setFormatter(formatter)
        return console_handler

    def _create_file_handler(self, filename: str, level: int | None = None) -> logging.Handler:
        """Rotating file handler"""
        try:
            handler: logging.Handler = RotatingFileHandler(
                self.log_dir / filename,
                maxBytes=self.config["max_bytes"],
                backupCount=self.config["backup_count"],
            )
        except OSError:
            handler = logging.StreamHandler(sys.stderr)

        handler.setLevel(level or _level(self.config.get("file_level")))

        if self.config.get("json_logs"):
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(
                logging.Formatter(self.config["format"], datefmt=self.config.get("date_format"))
            )
        return handler

    def set_level(self, level: str, logger_name: str | None = None):
        """Set logging level for a specific logger or the console"""
        if logger_name:
            logging.getLogger(logger_name).setLevel(_level(level))
            return
        for handler in self.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(
                handler, RotatingFileHandler
            ):
                handler.setLevel(_level(level))

    def cleanup(self):
        """Detach and close every handler this service installed"""
        root_logger = logging.getLogger()
        for handler in self.handlers:
            root_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()


def _level(name: str | None) -> int:
    level = logging.getLevelName(str(name or "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extras passed via logger.info(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in _RECORD_FIELDS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class PerformanceLogger:
    """
    Context manager that times a block and logs its duration

    Usage:
        with PerformanceLogger(logger, "bet"):
            result = await session.post(...)
    """

    def __init__(self, logger: logging.Logger, operation: str, level: int = logging.DEBUG):
        self.logger = logger
        self.operation = operation
        self.level = level
        self.start_time: float | None = None
        self.duration: float | None = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time

        if exc_type:
            self.logger.error(
                f"Operation '{self.operation}' failed after {self.duration:.3f}s: {exc_val}"
            )
        else:
            self.logger.log(
                self.level, f"Operation '{self.operation}' completed in {self.duration:.3f}s"
            )
        return False


_logger_service: LoggerService | None = None


def setup_logging(config: dict | None = None) -> logging.Logger:
    """
    Configure logging once and return the root logger

    Args:
        config: Optional overrides on top of the application config

    Returns:
        Configured root logger
    """
    global _logger_service

    if _logger_service is not None:
        if config and config.get("log_level"):
            _logger_service.set_level(config["log_level"])
        return logging.getLogger()

    from config import config as app_config

    log_config = {
        "log_dir": str(app_config.FILES["log_dir"]),
        "log_level": app_config.get("logging", "level", "INFO"),
        "max_bytes": app_config.get("logging", "max_bytes"),
        "backup_count": app_config.get("logging", "backup_count"),
        "format": app_config.get("logging", "format"),
        "date_format": app_config.get("logging", "date_format"),
        "console_output": app_config.get("logging", "console_output", True),
        "json_logs": app_config.get("logging", "json_logs", False),
    }
    if config:
        log_config.update(config)

    _logger_service = LoggerService(log_config)
    app_config.set_logger(logging.getLogger("config"))
    return logging.getLogger()


def get_logger(name: str) -> logging.Logger:
    """Get a named logger, configuring logging on first use"""
    if _logger_service is None:
        setup_logging()
    return logging.getLogger(name)


def cleanup_logging():
    """Remove installed handlers and allow setup_logging() to run again"""
    global _logger_service

    if _logger_service:
        _logger_service.cleanup()
        _logger_service = None
