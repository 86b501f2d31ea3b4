"""mailhdr configuration package.

What:
  Expose the configuration loader and the pydantic models that carry render
  options, encoded-word settings and parser policy.

Why:
  Formatters and parsers read their defaults from here; keeping the import
  surface explicit stops callers from reaching into the loader internals.

How:
  Re-export the loader helpers and schema classes listed in ``__all__``.

Interfaces:
  - load_config / get_config / reset_config: Resolve and cache ``config.yaml``.
  - MailhdrConfig / RenderOptions / EncodingConfig / ParserConfig: Models.
  - ConfigLoadError / ConfigError / ValidationError: Error types.
"""

from .loader import ConfigError, ConfigLoadError, get_config, load_config, reset_config
from .schema import EncodingConfig, MailhdrConfig, ParserConfig, RenderOptions, ValidationError

__all__ = [
    "load_config",
    "get_config",
    "reset_config",
    "MailhdrConfig",
    "RenderOptions",
    "EncodingConfig",
    "ParserConfig",
    "ConfigLoadError",
    "ConfigError",
    "ValidationError",
]
