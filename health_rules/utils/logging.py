"""
Logging Setup

Console lines look like ``[<utc iso time>] LEVEL    [logger.name] message``;
the optional log file uses a plain pipe-separated layout. Nothing here runs
on import; applications call ``setup_logging`` (usually through
``settings.configure_logging()``).
"""
import logging
import sys
from typing import Optional
from datetime import datetime, timezone

FILE_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'


class StructuredFormatter(logging.Formatter):
    """Console formatter: UTC timestamp, padded level, logger name, optional ANSI colour."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def _wrap(self, levelname: str, text: str) -> str:
        if not self.use_color:
            return text
        color = self.COLORS.get(levelname, self.COLORS['RESET'])
        return f"{color}{text}{self.COLORS['RESET']}"

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.now(timezone.utc).isoformat()
        line = self._wrap(
            record.levelname,
            f"[{stamp}] {record.levelname:8} [{record.name}] {record.getMessage()}",
        )
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Replace the root handlers with a stdout handler and, if ``log_file`` is
    given, a file handler. Colour is only used when stdout is a terminal.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: Optional path appended to alongside the console
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter(use_color=sys.stdout.isatty()))
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)
