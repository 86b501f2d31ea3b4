"""
Module: mailhdr.__init__

What:
  Aggregate package exports for mailhdr, a library that renders structured
  email header fields with RFC 5322 folding and parses them back into typed
  values.

Why:
  Header assembly code needs a handful of entry points (value types,
  formatters, render options, the field facade) and should not depend on the
  internal module layout.

How:
  Re-export the public subpackages and the most used names explicitly through
  ``__all__``.

Interfaces:
  - builder / layout: Fold-aware document construction and rendering.
  - formatters / parse: Field grammars in both directions.
  - fields: Whole-field rendering and parsing.
  - values / errors / config: Value types, error types, configuration.

Invariants:
  - Importing the package performs no I/O; configuration is loaded lazily on
    first use.
"""

from . import builder, config, fields, formatters, layout, parse, values
from .builder import Builder
from .config.schema import RenderOptions
from .errors import HeaderError, InvalidValueError, MalformedHeaderError
from .fields import parse_field, render_field
from .values import Address, Group, Individual, Mailbox, MessageID, MimeType, Parameters

__all__ = [
    "builder",
    "config",
    "fields",
    "formatters",
    "layout",
    "parse",
    "values",
    "Builder",
    "RenderOptions",
    "HeaderError",
    "InvalidValueError",
    "MalformedHeaderError",
    "parse_field",
    "render_field",
    "Address",
    "Group",
    "Individual",
    "Mailbox",
    "MessageID",
    "MimeType",
    "Parameters",
]
