"""Observability package for Inkwell."""

from .logging import setup_logging, record_context, JSONFormatter, ConsoleFormatter

__all__ = [
    'setup_logging',
    'record_context',
    'JSONFormatter',
    'ConsoleFormatter'
]
