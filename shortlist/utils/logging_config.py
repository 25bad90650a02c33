"""
Logging setup for the shortlisting service.

Every module logs through ``get_logger`` under the ``shortlist.`` namespace;
``configure_for_environment`` picks console/file output from ``ENVIRONMENT``.
"""
import functools
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-32s | %(funcName)-20s:%(lineno)-4d | %(message)s",
}

# ENVIRONMENT -> (level, console, file, format); None level means LOG_LEVEL
ENVIRONMENTS = {
    "production": (None, True, True, "detailed"),
    "development": ("DEBUG", True, True, "detailed"),
    "testing": ("WARNING", True, False, "simple"),
}

ROTATE_BYTES = 10 * 1024 * 1024


def _rotating(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(path),
        "maxBytes": ROTATE_BYTES,
        "backupCount": 5,
        "encoding": "utf8",
    }


def _handlers(level: str, log_file: Path, console: bool, to_file: bool, format_style: str) -> Dict[str, Dict]:
    handlers: Dict[str, Dict] = {}
    if console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": format_style,
            "stream": "ext://sys.stdout",
        }
    if to_file:
        handlers["file"] = _rotating(log_file, level)
        handlers["error_file"] = _rotating(log_file.with_name(log_file.stem + "_errors.log"), "ERROR")
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    enable_file: bool = True,
    format_style: str = "detailed"
) -> None:
    """
    Configure the root, uvicorn and pdfminer loggers.

    Args:
        level: Root logging level
        log_file: Log file path (defaults to $LOG_DIR/shortlist_<date>.log)
        enable_console: Log to stdout
        enable_file: Log to rotating files, plus a separate ERROR-only file
        format_style: 'simple' or 'detailed'
    """
    if format_style not in FORMATS:
        format_style = "detailed"
    path = Path(log_file) if log_file else Path(os.getenv("LOG_DIR", "logs")) / f"shortlist_{datetime.now():%Y%m%d}.log"
    if enable_file:
        path.parent.mkdir(parents=True, exist_ok=True)

    handlers = _handlers(level, path, enable_console, enable_file, format_style)
    names: List[str] = list(handlers)
    server_names = [n for n in names if n != "error_file"]

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in FORMATS.items()},
        "handlers": handlers,
        "root": {"level": level, "handlers": names},
        "loggers": {
            "uvicorn": {"level": "INFO", "handlers": server_names, "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": server_names, "propagate": False},
            # pdfminer is chatty on malformed uploads
            "pdfminer": {"level": "ERROR"},
        },
    })

    logger = get_logger("logging")
    logger.info(f"Logging configured - Level: {level}, Console: {enable_console}, File: {enable_file}")
    if enable_file:
        logger.info(f"Log file: {path}")


def configure_for_environment() -> str:
    """Configure logging from ENVIRONMENT / LOG_LEVEL and return the environment name"""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    level, console, to_file, style = ENVIRONMENTS.get(environment, (None, True, True, "detailed"))
    setup_logging(level=level or log_level, enable_console=console, enable_file=to_file, format_style=style)
    return environment


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``shortlist.`` namespace"""
    if name.startswith("shortlist."):
        return logging.getLogger(name)
    return logging.getLogger(f"shortlist.{name}")


def log_function_call(func):
    """Debug-log entry, exit and failures of a synchronous function"""
    logger = get_logger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        logger.debug(f"-> {func.__name__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__name__} raised after {time.perf_counter() - start:.3f}s: {e}")
            raise
        logger.debug(f"<- {func.__name__} in {time.perf_counter() - start:.3f}s")
        return result

    return wrapper


def log_api_call(operation: str):
    """Info-log start, completion time and failures of an async endpoint"""
    def decorator(func):
        logger = get_logger(f"api.{operation}")

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            start = time.perf_counter()
            logger.info(f"API {operation} started")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed = time.perf_counter() - start
                logger.error(f"API {operation} failed after {elapsed:.3f}s: {e}", extra={"execution_time": elapsed})
                raise
            elapsed = time.perf_counter() - start
            logger.info(f"API {operation} completed in {elapsed:.3f}s", extra={"execution_time": elapsed})
            return result

        return wrapper
    return decorator


class PerformanceMonitor:
    """Times a block; warns when it runs over ``threshold_ms``"""

    def __init__(self, operation_name: str, logger: Optional[logging.Logger] = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.elapsed_ms = 0.0
        self._start = 0.0

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000
        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(
                f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)"
            )
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
        return False
