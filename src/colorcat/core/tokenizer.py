"""Line-oriented tokenizer for grc rule files."""

from __future__ import annotations

from dataclasses import dataclass

from colorcat.errors import ConfigParseError

COMMENT_MARKER = "#"


@dataclass
class Directive:
    """A ``key=value`` line from a rule file.

    Attributes:
        key: Directive keyword with surrounding whitespace removed
        value: Everything after the first ``=``, kept verbatim
        line: 1-based line number in the rule file
    """

    key: str
    value: str
    line: int


@dataclass
class StanzaBreak:
    """A blank or separator line ending the current stanza."""

    line: int


ConfigToken = Directive | StanzaBreak


def is_separator_line(line: str) -> bool:
    """Check if a line separates stanzas.

    Blank lines and lines starting with anything other than an ASCII letter
    (``-----``, ``=====``) are separators. Comment lines are not.
    """
    if not line.strip():
        return True
    if line.startswith(COMMENT_MARKER):
        return False
    first = line[0]
    return not (first.isascii() and first.isalpha())


class Tokenizer:
    """Tokenizer for rule files."""

    def __init__(self, text: str) -> None:
        lines = text.split("\n")
        if lines[-1] == "":
            lines.pop()
        self.lines = [line.removesuffix("\r") for line in lines]

    def tokenize(self) -> list[ConfigToken]:
        """Tokenize the rule file into directives and stanza breaks."""
        tokens: list[ConfigToken] = []

        for lineno, line in enumerate(self.lines, start=1):
            if line.startswith(COMMENT_MARKER):
                continue

            if is_separator_line(line):
                tokens.append(StanzaBreak(line=lineno))
                continue

            tokens.append(self._parse_directive(line, lineno))

        return tokens

    def _parse_directive(self, line: str, lineno: int) -> Directive:
        key, sep, value = line.partition("=")
        if not sep:
            raise ConfigParseError(lineno, f"expected keyword=value, got {line!r}")
        return Directive(key=key.strip(), value=value, line=lineno)


def tokenize(text: str) -> list[ConfigToken]:
    """Tokenize rule file text.

    Args:
        text: Raw rule file contents

    Returns:
        List of Directive and StanzaBreak tokens

    Examples:
        >>> [type(t).__name__ for t in tokenize("regexp=foo\\ncolours=red\\n-\\n")]
        ['Directive', 'Directive', 'StanzaBreak']
    """
    return Tokenizer(text).tokenize()
