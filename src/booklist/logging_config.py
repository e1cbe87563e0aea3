"""structlog setup.

Log output goes to a file as JSON lines so it never draws over the TUI.
"""

import logging
from pathlib import Path

import structlog


def configure_logging(log_path: Path, level: int = logging.INFO) -> None:
    """Route structlog output to *log_path*.

    Parameters
    ----------
    log_path : Path
        Destination file. Parent directories are created if needed.
    level : int, optional
        Minimum level to emit, by default ``logging.INFO``.
    """
    log_path.parent.mkdir(parents=True, exist_ok=True)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(
            file=log_path.open("a", encoding="utf-8")
        ),
        cache_logger_on_first_use=True,
    )
