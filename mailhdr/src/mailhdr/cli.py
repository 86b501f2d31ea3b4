"""mailhdr command-line interface.

What:
  Provide a Typer application for folding free text into a header field,
  normalising address lists, and inspecting ``Content-Type`` and
  ``MIME-Version`` values.

Why:
  Operators debugging mail pipelines want to see how a value folds at a
  given width, or why a field is rejected, without writing Python.

How:
  Each command loads the configuration (optionally from ``--config``), applies
  width and indent overrides, and delegates to :mod:`mailhdr.fields`,
  :mod:`mailhdr.formatters` and :mod:`mailhdr.parse`. Malformed input is
  logged through the structured logger and ends the command with exit code 1.

Interfaces:
  ``app`` (Typer application), ``fold``, ``addresses``, ``content_type``,
  ``mime_version``, :func:`main`.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure).
  - Command results go to ``stdout``; logs go to ``stderr``.
"""
from __future__ import annotations

import enum
import json
from pathlib import Path
from typing import Callable, Optional, TypeVar

import typer

from . import formatters, parse
from .config.loader import ConfigLoadError, load_config
from .config.schema import MailhdrConfig, RenderOptions
from .errors import MalformedHeaderError
from .fields import parse_field, render_field
from .parse.primitives import Cursor
from .utils.logging import get_logger

T = TypeVar("T")

app = typer.Typer(help="Fold and parse structured email header fields")

LOGGER = get_logger("mailhdr.cli")


class TextKind(str, enum.Enum):
    unstructured = "unstructured"
    phrase = "phrase"


def _load_config(config_path: Optional[Path]) -> MailhdrConfig:
    try:
        return load_config(config_path)
    except ConfigLoadError as exc:
        LOGGER.error("config_load_failed", error=str(exc))
        raise typer.Exit(code=1) from exc


def _render_options(config_path: Optional[Path], width: Optional[int], indent: Optional[int]) -> RenderOptions:
    """Resolve render options from the configuration and CLI overrides."""

    base = _load_config(config_path).render
    return RenderOptions(
        max_width=base.max_width if width is None else width,
        indent=base.indent if indent is None else indent,
    )


def _parse_or_exit(rule: Callable[[Cursor], T], value: str, field: str) -> T:
    try:
        return parse_field(rule, value, field=field)
    except MalformedHeaderError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


_CONFIG_OPTION = typer.Option(None, "--config", help="Path to a mailhdr config.yaml")
_WIDTH_OPTION = typer.Option(None, "--width", min=1, help="Maximum line width")
_INDENT_OPTION = typer.Option(None, "--indent", min=0, help="Continuation indent in spaces")


@app.command("fold")
def fold(
    name: str = typer.Argument(..., help="Field name, e.g. Subject"),
    text: str = typer.Argument(..., help="Field text"),
    kind: TextKind = typer.Option(TextKind.unstructured, "--kind", help="Text grammar"),
    width: Optional[int] = _WIDTH_OPTION,
    indent: Optional[int] = _INDENT_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Print TEXT folded as a NAME header field."""

    options = _render_options(config, width, indent)
    render = formatters.phrase if kind is TextKind.phrase else formatters.unstructured
    field = render_field(name, render(text), options)
    typer.echo(field.decode("utf-8", "surrogateescape"))


@app.command("addresses")
def addresses(
    name: str = typer.Argument(..., help="Field name, e.g. To"),
    value: str = typer.Argument(..., help="Address list to normalise"),
    width: Optional[int] = _WIDTH_OPTION,
    indent: Optional[int] = _INDENT_OPTION,
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Parse an address list and print it re-rendered."""

    options = _render_options(config, width, indent)
    recipients = _parse_or_exit(parse.address_list, value, name)
    field = render_field(name, formatters.recipient_list(recipients), options)
    typer.echo(field.decode("utf-8", "surrogateescape"))


@app.command("content-type")
def content_type(
    value: str = typer.Argument(..., help="Content-Type field value"),
    config: Optional[Path] = _CONFIG_OPTION,
) -> None:
    """Parse a Content-Type value and print it as JSON."""

    _load_config(config)
    mime_type, parameters = _parse_or_exit(parse.content_type, value, "Content-Type")
    payload = {
        "type": mime_type.type,
        "subtype": mime_type.subtype,
        "parameters": dict(parameters),
    }
    typer.echo(json.dumps(payload, ensure_ascii=False))


@app.command("mime-version")
def mime_version(value: str = typer.Argument(..., help="MIME-Version field value")) -> None:
    """Parse a MIME-Version value and print it as MAJOR.MINOR."""

    major, minor = _parse_or_exit(parse.mime_version, value, "MIME-Version")
    typer.echo(f"{major}.{minor}")


def main() -> None:
    """Execute the Typer application entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
