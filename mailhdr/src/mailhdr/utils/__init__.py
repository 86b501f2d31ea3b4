"""Expose the shared utility surface for mailhdr.

What:
  Re-export the structured logging helpers used by the field facade, the
  configuration loader and the CLI.

Interfaces:
  ``get_logger`` and ``JsonLogger``.
"""

from .logging import JsonLogger, get_logger

__all__ = [
    "JsonLogger",
    "get_logger",
]
