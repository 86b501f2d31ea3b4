"""Pydantic models describing mailhdr configuration and render options."""
from __future__ import annotations

import codecs
from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError as _PydanticValidationError
from pydantic import field_validator, model_validator


_LONGEST_ENCODED_CHARACTER = 12


class ValidationError(ValueError):
    """Raised when configuration data does not satisfy the schema."""


class RenderOptions(BaseModel):
    """Width budget and continuation indent applied when folding."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    max_width: int = Field(default=78, gt=0)
    indent: int = Field(default=1, ge=0)


class EncodingConfig(BaseModel):
    """Settings for RFC 2047 encoded words."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    charset: str = "utf-8"
    max_word_length: int = Field(default=75, gt=0, le=75)

    @field_validator("charset")
    @classmethod
    def _known_charset(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown charset '{value}'") from exc
        return value.lower()

    @model_validator(mode="after")
    def _word_fits_one_character(self) -> "EncodingConfig":
        # Any charset the encoder may pick, plus one 4-byte character in Q.
        longest = max((self.charset, "us-ascii", "utf-8"), key=len)
        minimum = len(f"=?{longest}?Q??=") + _LONGEST_ENCODED_CHARACTER
        if self.max_word_length < minimum:
            raise ValueError(
                f"max_word_length {self.max_word_length} leaves no room for a character "
                f"encoded in '{self.charset}' (minimum {minimum})"
            )
        return self


class ParserConfig(BaseModel):
    """Parser behaviour that the grammar leaves open."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    duplicate_parameters: Literal["last", "first", "reject"] = "last"


class MailhdrConfig(BaseModel):
    """Root configuration loaded from ``config.yaml``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: Literal[1] = 1
    render: RenderOptions = Field(default_factory=RenderOptions)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)

    @classmethod
    def model_validate(cls, data: Dict[str, Any]) -> "MailhdrConfig":  # type: ignore[override]
        try:
            return super().model_validate(data)
        except _PydanticValidationError as exc:
            raise ValidationError(str(exc)) from exc
