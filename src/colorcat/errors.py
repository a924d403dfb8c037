"""Exceptions raised while loading rules and settings."""

from __future__ import annotations

from pathlib import Path


class ColorcatError(Exception):
    """Base user-facing error."""


class InvalidColorToken(ColorcatError):
    """A color specification contains a token outside the grc vocabulary."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(f"Invalid color token: {token!r}")


class ConfigParseError(ColorcatError):
    """A rule file could not be parsed."""

    def __init__(self, line: int, message: str) -> None:
        self.line = line
        self.message = message
        super().__init__(f"line {line}: {message}")


class RulesFileNotFoundError(ColorcatError):
    """No rule file with the given name exists in any searched location."""

    def __init__(self, name: str, searched: list[Path]) -> None:
        self.name = name
        self.searched = searched
        super().__init__(f"Rules file not found: {name}")


class SettingsError(ColorcatError):
    """The settings file could not be read or validated."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid settings ({detail}): {path}")
