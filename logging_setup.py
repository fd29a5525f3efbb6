# logging_setup.py
from __future__ import annotations
import logging
import logging.config
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

APP_LOGGER = "sitemap"


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path | str] = None,
    log_file_name: str = "sitemap.log",
    file_max_bytes: int = 5 * 1024 * 1024,  # 5MB
    file_backup_count: int = 3,
) -> None:
    """
    Configure logging for the sitemap build step:
    - colored console output (colorlog)
    - optional rotating log file when log_dir is given
    - quiet third-party HTTP loggers
    """
    log_level = log_level.upper()
    fmt_plain = "%(levelname)s | %(asctime)s | %(name)s | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    formatters = {
        "plain": {
            "format": fmt_plain,
            "datefmt": datefmt,
        },
        "color": {
            "()": "colorlog.ColoredFormatter",
            "format": "%(log_color)s%(levelname)-8s%(reset)s | %(asctime)s | %(name)s | %(message)s",
            "datefmt": datefmt,
            "log_colors": {
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        },
    }

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "color",
        },
    }
    app_handlers = ["console"]

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "()": RotatingFileHandler,
            "level": "INFO",
            "filename": str(log_dir / log_file_name),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
            "formatter": "plain",
        }
        app_handlers.append("file")

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {
            # every pipeline module logs under "sitemap.<component>"
            APP_LOGGER: {
                "level": log_level,
                "handlers": app_handlers,
                "propagate": False,
            },
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
        "root": {
            "level": "WARNING",
            "handlers": app_handlers,
        },
    })

    logging.getLogger(APP_LOGGER).debug("Logging configured")


def get_app_logger(name: str = APP_LOGGER) -> logging.Logger:
    """Return a logger under the app namespace."""
    if name != APP_LOGGER and not name.startswith(APP_LOGGER + "."):
        name = f"{APP_LOGGER}.{name}"
    return logging.getLogger(name)
