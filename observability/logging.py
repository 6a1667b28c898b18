"""Logging setup for the Inkwell entry points.

``setup_logging`` is called once by ``inkwell-sync`` and ``inkwell-api``
with the process ``Settings``. Log calls attach context through ``extra=``
(the sync job passes ``document`` and ``slug``); the JSON formatter emits it
as top-level keys and the console formatter appends it as ``key=value``.
"""

from __future__ import annotations
import logging
import sys
import json
from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pathlib import Path

from config.settings import Settings

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {'message', 'asctime'}

QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "aiohttp", "asyncio")


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields passed to the log call through ``extra``."""
    return {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers and the log file."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "service": self.service_name,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(record_context(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines; the level name is colored on a terminal."""

    LEVEL_COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = False):
        super().__init__()
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        if self.use_colors and record.levelname in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelname]}{level}{self.RESET}"

        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        line = f"{timestamp} {level} {record.name}: {record.getMessage()}"

        context = record_context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(settings: Settings,
                  service_name: str,
                  level: Optional[str] = None,
                  use_json: Optional[bool] = None,
                  use_colors: Optional[bool] = None) -> None:
    """Install the root handlers for one process.

    Args:
        settings: Source of ``log_level``, ``log_json`` and ``log_file``
        service_name: ``service`` field of JSON lines
        level: Overrides ``settings.log_level`` (command-line flag)
        use_json: Overrides ``settings.log_json`` (command-line flag)
        use_colors: Colored level names; defaults to whether stdout is a TTY
    """
    level_name = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    if use_json is None:
        use_json = settings.log_json
    if use_colors is None:
        use_colors = sys.stdout.isatty()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter(service_name) if use_json else ConsoleFormatter(use_colors))
    root_logger.addHandler(console_handler)

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        # The file always gets JSON, whatever the console shows
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(JSONFormatter(service_name))
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
