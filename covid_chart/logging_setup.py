from __future__ import annotations

import os
import sys
import time
from contextlib import contextmanager

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "[<level>{level:<8}</level>] | "
    "<blue>{extra[component]:<12}</blue> | "
    "<white>{name}.{function}:{line}</white> | "
    "<level>{message}</level>"
)

_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _level_name(value: str, fallback: str) -> str:
    name = str(value or "").strip().upper()
    return name if name in _LEVELS else fallback


def setup_logging(
    app_name: str = "covid_chart",
    log_dir: str = "log",
    log_level: str = "INFO",
    file_level: str = "DEBUG",
) -> str:
    """
    Console sink (colored) plus a rotating file sink:
    - 10 MB rotation with zip compression
    - 50 rotated files kept
    Records without a bound component are shown as "app".
    Returns the log file path.
    """
    console_level = _level_name(log_level, "INFO")
    resolved_file_level = _level_name(file_level, "DEBUG")

    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, f"{app_name}.log")

    logger.remove()
    logger.configure(
        handlers=[
            {
                "sink": sys.stdout,
                "format": LOG_FORMAT,
                "colorize": True,
                "level": console_level,
            },
            {
                "sink": log_path,
                "format": LOG_FORMAT,
                "rotation": "10 MB",
                "compression": "zip",
                "retention": 50,
                "colorize": False,
                "level": resolved_file_level,
            },
        ],
        extra={"component": "app"},
    )

    logger.info(
        f"[setup_logging] - logger_initialized - console_level={console_level} "
        f"file_level={resolved_file_level} log_path={log_path}"
    )
    return log_path


def get_logger(component: str):
    return logger.bind(component=component)


@contextmanager
def log_timing(step: str, **context):
    """Log how long the wrapped block took; failures are logged with their traceback."""
    details = " ".join(f"{k}={v}" for k, v in context.items())
    started = time.perf_counter()
    try:
        yield
    except Exception:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.exception(f"[{step}] - failed - elapsed_ms={elapsed_ms:.1f} {details}".rstrip())
        raise
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug(f"[{step}] - done - elapsed_ms={elapsed_ms:.1f} {details}".rstrip())
