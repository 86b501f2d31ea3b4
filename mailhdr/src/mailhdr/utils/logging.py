"""Structured JSON log lines for mailhdr with header-content redaction.

What:
  Give every mailhdr component a logger that writes one JSON object per line
  with a fixed set of fields, and never writes header text.

Why:
  Header values carry personal data (display names, addresses, subjects). When
  a field fails to parse, operators need the field name, the offset and what
  the grammar expected; the value itself stays out of the log.

How:
  :class:`JsonLogger` binds a stream and a component label. Keyword context is
  passed through :func:`redact`, merged under the canonical fields and written
  with ``json.dump``; values JSON cannot represent are stringified.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`, :func:`redact`.

Invariants & Safety:
  - Every entry has ``ts``, ``lvl``, ``msg`` and ``component``; context keys
    never overwrite them.
  - Keys in :data:`SENSITIVE_KEYS` are replaced with ``[redacted]`` at any
    depth, including dictionaries nested in lists.
  - Entries go to ``stderr`` so command output on ``stdout`` stays parseable.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, TextIO


REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"value", "raw", "text", "name"})
_RESERVED = ("ts", "lvl", "msg", "component")


def redact(data: Any) -> Any:
    """Return a copy of ``data`` with sensitive keys masked."""

    if isinstance(data, Mapping):
        return {
            key: REDACTED if key in SENSITIVE_KEYS else redact(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [redact(item) for item in data]
    return data


@dataclass
class JsonLogger:
    """JSON-lines logger bound to one component."""

    stream: TextIO = field(default_factory=lambda: sys.stderr)
    component: str = "mailhdr"

    def log(self, level: str, message: str, **context: Any) -> None:
        """Write one entry.

        Args:
          level: Severity label; stored upper-cased.
          message: Event name, e.g. ``"malformed_header_field"``.
          **context: Extra fields, redacted before writing.
        """

        entry: Dict[str, Any] = {
            key: value for key, value in redact(context).items() if key not in _RESERVED
        }
        entry.update(
            ts=datetime.now(timezone.utc).isoformat(),
            lvl=level.upper(),
            msg=message,
            component=self.component,
        )
        self.stream.write(json.dumps(entry, separators=(",", ":"), default=str) + "\n")
        self.stream.flush()

    def info(self, message: str, **context: Any) -> None:
        self.log("info", message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log("warn", message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.log("error", message, **context)


def get_logger(component: str) -> JsonLogger:
    """Return a :class:`JsonLogger` for ``component`` writing to ``stderr``."""

    return JsonLogger(component=component)
