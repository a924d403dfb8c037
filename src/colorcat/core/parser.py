"""Fold the directive stream of a rule file into compiled rules."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from colorcat.config.schema import CountPolicy, RuleStanza
from colorcat.core.color import ColorSpec, parse_colors
from colorcat.core.tokenizer import Directive, StanzaBreak, tokenize
from colorcat.errors import ConfigParseError, InvalidColorToken

logger = logging.getLogger(__name__)

COLOUR_KEYS = ("colours", "colors", "colour", "color")

# grc directives this implementation reads but does not act on
UNSUPPORTED_KEYS = ("command", "concat", "replace")


@dataclass
class Rule:
    """A compiled rule together with its firing state.

    Attributes:
        patterns: Alternative patterns, tried in order
        colors: Color for the whole match (index 0) and each capture group
        count: Count policy
        skip: Suppress lines this rule matches
        line: Line number of the stanza in the rule file
        has_fired: The rule matched at least once in this stream
        is_active: A ``more`` rule has been armed by its first match
    """

    patterns: list[re.Pattern[str]]
    colors: list[ColorSpec] = field(default_factory=list)
    count: CountPolicy = CountPolicy.MORE
    skip: bool = False
    line: int = 0
    has_fired: bool = False
    is_active: bool = False

    @property
    def is_exhausted(self) -> bool:
        """Check if a ``once`` rule has already been used up."""
        return self.count is CountPolicy.ONCE and self.has_fired

    def mark_fired(self) -> None:
        self.has_fired = True
        if self.count is CountPolicy.MORE:
            self.is_active = True


@dataclass
class RuleSet:
    """Ordered rules parsed from one rule file."""

    rules: list[Rule] = field(default_factory=list)
    source: str | None = None

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __getitem__(self, index: int) -> Rule:
        return self.rules[index]


class RuleParser:
    """Parser turning rule file text into a RuleSet."""

    def __init__(self, text: str, source: str | None = None) -> None:
        self.text = text
        self.source = source

    def parse(self) -> RuleSet:
        """Parse the whole rule file.

        Raises:
            ConfigParseError: On the first malformed stanza
        """
        rules: list[Rule] = []
        stanza: list[Directive] = []

        for token in tokenize(self.text):
            if isinstance(token, StanzaBreak):
                if stanza:
                    rules.append(self._build_rule(stanza))
                stanza = []
            else:
                stanza.append(token)

        if stanza:
            rules.append(self._build_rule(stanza))

        logger.debug("Parsed %d rules from %s", len(rules), self.source or "<string>")
        return RuleSet(rules=rules, source=self.source)

    def _build_rule(self, directives: list[Directive]) -> Rule:
        stanza, regexp_lines = self._build_stanza(directives)
        patterns = [
            self._compile(pattern, line, stanza.line)
            for pattern, line in zip(stanza.regexps, regexp_lines)
        ]

        colors: list[ColorSpec] = []
        if stanza.colours is not None:
            try:
                colors = parse_colors(stanza.colours)
            except InvalidColorToken as e:
                raise ConfigParseError(stanza.colours_line or stanza.line, str(e)) from e

        return Rule(
            patterns=patterns,
            colors=colors,
            count=stanza.count,
            skip=stanza.skip,
            line=stanza.line,
        )

    def _build_stanza(self, directives: list[Directive]) -> tuple[RuleStanza, list[int]]:
        """Collect directives into a validated RuleStanza."""
        first_line = directives[0].line
        data: dict[str, object] = {"line": first_line}
        regexps: list[str] = []
        regexp_lines: list[int] = []
        field_lines: dict[str, int] = {}

        for directive in directives:
            key = directive.key
            if key == "regexp":
                regexps.append(directive.value)
                regexp_lines.append(directive.line)
            elif key in COLOUR_KEYS:
                data["colours"] = directive.value
                data["colours_line"] = directive.line
            elif key in ("count", "skip"):
                data[key] = directive.value
                field_lines[key] = directive.line
            elif key in UNSUPPORTED_KEYS:
                logger.warning(
                    "line %d: %r directive is not supported and was ignored",
                    directive.line,
                    key,
                )
            else:
                raise ConfigParseError(directive.line, f"unknown directive {key!r}")

        data["regexps"] = regexps

        try:
            stanza = RuleStanza(**data)
        except ValidationError as e:
            error = e.errors()[0]
            loc = error["loc"][0] if error["loc"] else None
            line = field_lines.get(str(loc), first_line)
            message = error["msg"]
            if loc in field_lines:
                message = f"invalid {loc} value {data[str(loc)]!r}: {message}"
            raise ConfigParseError(line, message) from e

        return stanza, regexp_lines

    def _compile(self, pattern: str, line: int, stanza_line: int) -> re.Pattern[str]:
        try:
            return re.compile(pattern)
        except re.error as e:
            raise ConfigParseError(
                line,
                f"invalid regexp {pattern!r} in stanza starting at line {stanza_line}: {e}",
            ) from e


def parse_rules(text: str, source: str | None = None) -> RuleSet:
    """Parse rule file text.

    Args:
        text: Raw rule file contents
        source: Name used in log messages

    Returns:
        RuleSet in file order
    """
    return RuleParser(text, source).parse()


def load_rules(path: Path | str) -> RuleSet:
    """Read and parse a rule file from disk."""
    path = Path(path)
    return parse_rules(path.read_text(encoding="utf-8"), source=str(path))
