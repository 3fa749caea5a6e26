import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_LEVEL_ENV_VAR = "LOG_LEVEL"
LOG_DIR_ENV_VAR = "CFRS_LOG_DIR"
MAX_LOG_BYTES = 5 * 1024 * 1024  # 5 MiB
BACKUP_COUNT = 3


def _resolve_log_directory() -> Path | None:
    """Return the directory for log files, or ``None`` when file logging is off."""

    log_dir = os.getenv(LOG_DIR_ENV_VAR)
    if not log_dir:
        return None
    path = Path(log_dir).expanduser()
    path.mkdir(parents=True, exist_ok=True)
    return path


def _sanitize_logger_name(name: str) -> str:
    sanitized = name.replace("/", "_").replace(os.sep, "_")
    return sanitized.replace(".", "_") or "root"


def _configure_logger(logger: logging.Logger, log_level: str) -> None:
    level = getattr(logging, log_level, logging.WARNING)
    logger.setLevel(level)

    if logger.handlers:
        # Logger already configured elsewhere; respect existing handlers.
        return

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    stream_handler.setLevel(level)
    logger.addHandler(stream_handler)

    log_dir = _resolve_log_directory()
    if log_dir is not None:
        file_handler = RotatingFileHandler(
            log_dir / f"{_sanitize_logger_name(logger.name)}.log",
            maxBytes=MAX_LOG_BYTES,
            backupCount=BACKUP_COUNT,
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        logger.addHandler(file_handler)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger with a stream handler and, if configured, a rolling file."""

    log_level = os.getenv(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    logger = logging.getLogger(name)
    _configure_logger(logger, log_level)
    return logger
