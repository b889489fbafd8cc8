from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "~/.local/state/sys-bootstrap/sys-bootstrap.log"

_LEVEL_TAGS = {
    logging.DEBUG: ("DEBUG", "\033[90m"),
    logging.INFO: ("INFO ", "\033[92m"),
    logging.WARNING: ("WARN ", "\033[93m"),
    logging.ERROR: ("ERROR", "\033[91m"),
    logging.CRITICAL: ("FATAL", "\033[91m"),
}
_RESET = "\033[0m"


class UtcFormatter(logging.Formatter):
    """`2024-01-01T12:00:00.123Z [INFO ] message`"""

    converter = time.gmtime
    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"

    def __init__(self, *, color: bool = False) -> None:
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        tag, color = _LEVEL_TAGS.get(record.levelno, (record.levelname[:5].ljust(5), ""))
        message = record.getMessage()
        if self.color and color:
            message = f"{color}{message}{_RESET}"
        line = f"{self.formatTime(record)} [{tag}] {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def debug_enabled() -> bool:
    """DEBUG set to anything turns on command tracing."""

    return "DEBUG" in os.environ


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: Optional[int] = None,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Console output is colored when stderr is a terminal; the file gets the
    same lines without escape codes. If the requested log file is not
    writable we fall back to a file in the current directory.

    Returns the actual file path being used.
    """

    if level is None:
        level = logging.DEBUG if debug_enabled() else logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_sys_bootstrap_configured", False):
        return getattr(logger, "_sys_bootstrap_log_path", log_path)

    requested = os.path.expanduser(log_path)
    chosen_path = requested
    handlers: list[logging.Handler] = []

    try:
        Path(os.path.dirname(requested) or ".").mkdir(parents=True, exist_ok=True)
        file_handler: logging.Handler = logging.FileHandler(requested)
    except OSError:
        chosen_path = str(Path.cwd() / "sys-bootstrap.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(UtcFormatter(color=False))
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(UtcFormatter(color=sys.stderr.isatty()))
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_sys_bootstrap_configured", True)
    setattr(logger, "_sys_bootstrap_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", requested, chosen_path
    )
    return chosen_path
