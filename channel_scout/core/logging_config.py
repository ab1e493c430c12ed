"""Logging setup and structured log helpers for Channel Scout."""

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "channel_scout"
FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(request_id)s] %(message)s"

console = Console(stderr=True)


class _RequestIdDefault(logging.Filter):
    """Give records without a request ID a placeholder so file formatting never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        return True


def setup_logging(
    level: str = "INFO",
    log_file: Path | str | None = None,
    rich_tracebacks: bool = True,
) -> logging.Logger:
    """
    Configure the ``channel_scout`` logger.

    Every module logs through ``logging.getLogger(__name__)``; those loggers
    are children of ``channel_scout`` and share its handlers. Calling this
    again replaces the handlers, so the API factory and the CLI can both call it.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a plain-text log file
        rich_tracebacks: Render exceptions with rich

    Returns:
        The configured ``channel_scout`` logger
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(numeric_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(
        console=console,
        level=numeric_level,
        rich_tracebacks=rich_tracebacks,
        tracebacks_show_locals=numeric_level <= logging.DEBUG,
        show_path=numeric_level <= logging.DEBUG,
        markup=False,
    )
    root.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(_RequestIdDefault())
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(file_handler)

    root.propagate = False
    root.debug("Logging configured (level=%s, file=%s)", level.upper(), log_file or "-")
    return root


def log_api_request(
    logger_instance: logging.Logger,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    request_id: str | None = None,
) -> None:
    """
    Write one access-log line for a finished HTTP request.

    Client errors log at WARNING, everything else at INFO.
    """
    extra: dict[str, Any] = {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }
    if request_id:
        extra["request_id"] = request_id

    level = logging.WARNING if 400 <= status_code < 500 else logging.INFO
    logger_instance.log(
        level, "%s %s -> %d (%.1f ms)", method, path, status_code, duration_ms, extra=extra
    )


def log_discovery_event(
    logger_instance: logging.Logger,
    keyword: str,
    event: str,
    pages: int | None = None,
    channels_found: int | None = None,
    error: str | None = None,
) -> None:
    """
    Log a discovery run milestone.

    Args:
        logger_instance: Logger to use
        keyword: Search keyword of the run
        event: ``started``, ``completed`` or ``failed``
        pages: Search pages fetched so far
        channels_found: Channel records collected
        error: Failure message
    """
    extra: dict[str, Any] = {"keyword": keyword, "discovery_event": event}
    if pages is not None:
        extra["pages"] = pages
    if channels_found is not None:
        extra["channels_found"] = channels_found

    if event == "failed":
        extra["error"] = error
        logger_instance.error(
            "Discovery for %r failed after %s page(s): %s", keyword, pages, error, extra=extra
        )
    elif event == "completed":
        logger_instance.info(
            "Discovery for %r found %s channel(s) in %s page(s)",
            keyword,
            channels_found,
            pages,
            extra=extra,
        )
    else:
        logger_instance.info("Discovery for %r %s", keyword, event, extra=extra)
