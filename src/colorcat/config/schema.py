"""Pydantic models for rule stanzas and tool settings."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class CountPolicy(str, Enum):
    """How often a rule may apply over the lifetime of a stream."""

    UNLIMITED = "unlimited"
    ONCE = "once"
    MORE = "more"
    STOP = "stop"
    PREVIOUS = "previous"
    BLOCK = "block"
    UNBLOCK = "unblock"


class RuleStanza(BaseModel):
    """One stanza of a rule file, before patterns and colors are compiled."""

    line: int = Field(description="Line number of the first directive")
    regexps: list[str] = Field(default_factory=list, description="Alternative patterns, in order")
    colours: str | None = Field(default=None, description="Raw colours value, comma separated per group")
    colours_line: int | None = Field(default=None, description="Line of the colours directive")
    count: CountPolicy = Field(default=CountPolicy.MORE, description="Count policy")
    skip: bool = Field(default=False, description="Suppress matching lines")

    @field_validator("count", mode="before")
    @classmethod
    def parse_count(cls, v: Any) -> Any:
        """Normalize count values before enum validation."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("skip", mode="before")
    @classmethod
    def parse_skip(cls, v: Any) -> Any:
        """Accept grc skip markers such as 'yes', '1' and 'true'."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def check_pattern(self) -> RuleStanza:
        """Only count=previous stanzas may (and must) omit a regexp."""
        if self.count is CountPolicy.PREVIOUS:
            if self.regexps:
                raise ValueError("count=previous does not take a regexp")
        elif not self.regexps:
            raise ValueError("stanza has no regexp")
        return self


class Settings(BaseModel):
    """Tool settings loaded from YAML."""

    color: bool = Field(default=True, description="Enable/disable colors")
    search_path: list[str] = Field(
        default_factory=list,
        description="Extra directories searched for rule files, before the grc ones",
    )
    log_level: str = Field(default="WARNING", description="Logging level name")

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> Any:
        """Accept level names in any case."""
        if isinstance(v, str):
            v = v.strip().upper()
            if v not in LOG_LEVELS:
                raise ValueError(f"Unknown log level: {v}")
        return v
