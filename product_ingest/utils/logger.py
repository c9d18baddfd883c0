"""Logging for Product Ingest.

Every module logs through get_logger(__name__), so all loggers live under
the "product_ingest" namespace. Each one writes colored lines to the
console and plain lines to a shared rotating product_ingest.log.

Pipeline runs wrap their logger in SubmissionLoggerAdapter so lines from
concurrent submissions can be told apart, and time their stages with
log_stage_duration.
"""

import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, MutableMapping, Optional, Union

import colorlog


LOGGER_NAMESPACE = "product_ingest"
LOG_FILE_NAME = "product_ingest.log"
LOG_DIR_ENV = "PRODUCT_INGEST_LOG_DIR"

CONSOLE_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}

# 10MB per file, 5 backups
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _parse_level(level: Optional[str]) -> int:
    """Map a level name to its number; unknown names fall back to INFO."""
    if level is None:
        level = os.environ.get('LOG_LEVEL', 'INFO')
    return getattr(logging, level.upper(), logging.INFO)


def resolve_log_dir(log_dir: Optional[Path] = None) -> Path:
    """Directory holding product_ingest.log.

    An explicit directory wins, then $PRODUCT_INGEST_LOG_DIR, then logs/
    at the project root.
    """
    if log_dir is not None:
        return Path(log_dir)

    env_log_dir = os.environ.get(LOG_DIR_ENV)
    if env_log_dir:
        return Path(env_log_dir)

    return Path(__file__).parent.parent.parent / "logs"


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        colorlog.ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT, log_colors=LOG_COLORS)
    )
    return handler


def _file_handler(level: int, log_dir: Optional[Path]) -> logging.Handler:
    directory = resolve_log_dir(log_dir)
    directory.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        directory / LOG_FILE_NAME,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def get_logger(name: str, log_dir: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Get a module logger with console and file handlers attached.

    Args:
        name: Logger name, normally the calling module's __name__
        log_dir: Directory for product_ingest.log (see resolve_log_dir)
        level: Level name; defaults to $LOG_LEVEL, then INFO

    Returns:
        The logger, configured on first use only
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        log_level = _parse_level(level)
        logger.setLevel(log_level)
        logger.addHandler(_console_handler(log_level))
        logger.addHandler(_file_handler(log_level, log_dir))

        # Propagate so pytest's caplog and host applications still see records
        logger.propagate = True

    return logger


def _set_level(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def configure_logging(level: str) -> int:
    """Apply one level to every Product Ingest logger created so far.

    Module loggers are created at import time with $LOG_LEVEL, so the
    level from the config file or command line is applied afterwards.

    Returns:
        The numeric level applied
    """
    log_level = _parse_level(level)
    prefix = LOGGER_NAMESPACE + "."

    for name, logger in list(logging.root.manager.loggerDict.items()):
        if not isinstance(logger, logging.Logger):
            continue
        if name == LOGGER_NAMESPACE or name.startswith(prefix):
            _set_level(logger, log_level)

    return log_level


class SubmissionLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every message with the id of the submission being processed."""

    def __init__(self, logger: logging.Logger, submission_id: str):
        super().__init__(logger, {"submission_id": submission_id})

    @property
    def submission_id(self) -> str:
        return self.extra["submission_id"]

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[submission {self.submission_id}] {msg}", kwargs


LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


@contextmanager
def log_stage_duration(logger: LoggerLike, stage: str) -> Iterator[None]:
    """Log at DEBUG how long a pipeline stage took, or how long until it failed.

    Usage:
        with log_stage_duration(self._log, "encoding 3 image(s)"):
            payloads = await self._encode_all(images)
    """
    logger.debug(f"Starting: {stage}")
    start_time = time.perf_counter()

    try:
        yield
    except BaseException:
        duration = time.perf_counter() - start_time
        logger.debug(f"Aborted: {stage} after {duration:.3f}s")
        raise

    duration = time.perf_counter() - start_time
    logger.debug(f"Completed: {stage} in {duration:.3f}s")


def log_failure(logger: LoggerLike, operation: str, error: BaseException) -> None:
    """Log a failed operation.

    The traceback is only attached when DEBUG is enabled; bad user input
    such as an invalid color is otherwise reported on one line.
    """
    exc_info = error if logger.isEnabledFor(logging.DEBUG) else None
    logger.error(f"Failed: {operation}: {error}", exc_info=exc_info)
