"""Rotating file + console logging for the CLI and the web app."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE = "job_aggregator.log"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("openai", "httpx", "httpcore", "urllib3")


def resolve_level(level: int | str) -> int:
    """Accept "debug"/"INFO"/logging.DEBUG; anything unrecognised means INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(log_dir: Optional[str] = "logs", level: int | str = logging.INFO) -> logging.Logger:
    """Configure the job_aggregator logger; every module logs under it.

    Calling it again replaces the handlers. With log_dir=None only the console
    handler is installed.
    """
    level = resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logger = logging.getLogger("job_aggregator")
    logger.setLevel(level)
    logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_path / LOG_FILE,
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger
