"""ANSI color parsing for grc color specifications."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from colorcat.errors import InvalidColorToken

RESET = "\033[0m"
BEEP = "\a"

# Standard ANSI color names
COLORS = {
    "black": 0,
    "red": 1,
    "green": 2,
    "yellow": 3,
    "blue": 4,
    "magenta": 5,
    "cyan": 6,
    "white": 7,
}

# Text attributes, keyed by their grc token
ATTRIBUTES = {
    "bold": 1,
    "dark": 2,
    "italic": 3,
    "underline": 4,
    "blink": 5,
    "rapidblink": 6,
    "reverse": 7,
    "concealed": 8,
    "strikethrough": 9,
}

GROUP_SEPARATOR = ","


@dataclass(frozen=True)
class ColorSpec:
    """Resolved display attributes for one match or capture group.

    Attributes:
        fg: Foreground color token ("red", "bright_red") or None
        bg: Background color token without the "on_" prefix, or None
        bold .. strikethrough: Text attributes
        reset: "default" was given; drops any styling layered below
        beep: Ring the terminal bell when the span starts
        unchanged: Leave the span exactly as it is
        previous: Reuse the color of the span colored just before
    """

    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    dark: bool = False
    italic: bool = False
    underline: bool = False
    blink: bool = False
    rapidblink: bool = False
    reverse: bool = False
    concealed: bool = False
    strikethrough: bool = False
    reset: bool = False
    beep: bool = False
    unchanged: bool = False
    previous: bool = False

    def codes(self) -> list[int]:
        """SGR parameter codes, attributes first, then colors."""
        codes = [code for name, code in ATTRIBUTES.items() if getattr(self, name)]

        if self.fg is not None:
            codes.extend(_color_to_codes(self.fg, foreground=True))
        if self.bg is not None:
            codes.extend(_color_to_codes(self.bg, foreground=False))

        return codes

    def to_ansi(self) -> str:
        """Convert to ANSI escape sequence."""
        codes = self.codes()
        if not codes:
            return ""
        return f"\033[{';'.join(str(c) for c in codes)}m"

    @property
    def is_plain(self) -> bool:
        """True when the spec produces no visible styling."""
        return not self.codes()


NO_STYLE = ColorSpec()


def _color_to_codes(color: str, foreground: bool) -> list[int]:
    """Convert a color token to ANSI codes.

    Bright colors are prefixed with the standard code so terminals without
    aixterm support still show the base color.
    """
    base = 30 if foreground else 40

    if color.startswith("bright_"):
        number = COLORS[color[len("bright_"):]]
        bright_base = 90 if foreground else 100
        return [base + number, bright_base + number]

    return [base + COLORS[color]]


def _is_color_name(name: str) -> bool:
    if name.startswith("bright_"):
        name = name[len("bright_"):]
    return name in COLORS


class ColorParser:
    """Parser for grc color specification strings."""

    def parse(self, color_spec: str) -> ColorSpec:
        """Parse one group's color specification.

        Args:
            color_spec: Whitespace separated tokens like "bold red on_white"

        Returns:
            ColorSpec object

        Raises:
            InvalidColorToken: If a token is not part of the vocabulary

        Examples:
            >>> color = ColorParser().parse("bold red on_white")
            >>> color.fg, color.bg, color.bold
            ('red', 'white', True)
        """
        result = NO_STYLE

        for part in color_spec.lower().split():
            if part in ATTRIBUTES:
                result = replace(result, **{part: True})
            elif _is_color_name(part):
                result = replace(result, fg=part)
            elif part.startswith("on_") and _is_color_name(part[3:]):
                result = replace(result, bg=part[3:])
            elif part == "default":
                result = replace(result, reset=True)
            elif part in ("beep", "unchanged", "previous"):
                result = replace(result, **{part: True})
            elif part != "none":
                raise InvalidColorToken(part)

        return result

    def parse_groups(self, colours: str) -> list[ColorSpec]:
        """Parse a comma separated list of specifications, one per group.

        Empty entries keep their position and resolve to no styling.
        """
        return [self.parse(group) for group in colours.split(GROUP_SEPARATOR)]


def parse_color(color_spec: str) -> ColorSpec:
    """Parse a color specification string.

    Args:
        color_spec: Color string like "bold red"

    Returns:
        ColorSpec object
    """
    return ColorParser().parse(color_spec)


def parse_colors(colours: str) -> list[ColorSpec]:
    """Parse a grc colours value like "bold,red,green on_black"."""
    return ColorParser().parse_groups(colours)


def combine_colors(base: ColorSpec, overlay: ColorSpec) -> ColorSpec:
    """Combine two colors, with overlay taking precedence.

    Attributes accumulate the way consecutive SGR sequences do on a terminal:
    overlay colors replace base colors, flags are added. An overlay with
    reset set discards the base entirely.

    Args:
        base: Base color
        overlay: Color to overlay

    Returns:
        Combined color
    """
    if overlay.reset:
        return replace(overlay, reset=False, beep=False)

    flags = {
        f.name: getattr(base, f.name) or getattr(overlay, f.name)
        for f in fields(ColorSpec)
        if f.name in ATTRIBUTES
    }
    return ColorSpec(
        fg=overlay.fg if overlay.fg is not None else base.fg,
        bg=overlay.bg if overlay.bg is not None else base.bg,
        **flags,
    )
