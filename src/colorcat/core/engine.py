"""Per-line rule evaluation and recoloring."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import reduce

from colorcat.config.schema import CountPolicy
from colorcat.core.color import BEEP, NO_STYLE, RESET, ColorSpec, combine_colors
from colorcat.core.parser import Rule, RuleSet

logger = logging.getLogger(__name__)

# Layer of the block span: below every rule
BLOCK_LAYER = (-1, 0)


@dataclass
class MatchSpan:
    """A colored region of one line.

    Attributes:
        start: Start offset in the original line
        end: End offset (exclusive)
        group: 0 for the whole match, otherwise the capture group index
        color: Color applied to the region
        layer: (rule index, group index); higher layers are applied later
    """

    start: int
    end: int
    group: int
    color: ColorSpec
    layer: tuple[int, int]


@dataclass
class _Fired:
    """Regions of the rule that fired most recently on the current line."""

    regions: list[tuple[int, int, int]]
    colors: list[ColorSpec]


def find_matches(rule: Rule, line: str) -> list[re.Match[str]]:
    """Match a rule's alternatives in order.

    Returns every non-empty, non-overlapping match of the first alternative
    that has one. Zero-length matches never count.
    """
    for pattern in rule.patterns:
        matches = [m for m in pattern.finditer(line) if m.end() > m.start()]
        if matches:
            return matches
    return []


def match_regions(matches: list[re.Match[str]]) -> list[tuple[int, int, int]]:
    """Extract (start, end, group index) for each match and capture group."""
    regions: list[tuple[int, int, int]] = []

    for match in matches:
        regions.append((match.start(), match.end(), 0))
        for i in range(1, match.re.groups + 1):
            start, end = match.span(i)
            # Groups that did not participate report -1
            if start != -1 and end > start:
                regions.append((start, end, i))

    return regions


class RuleEngine:
    """Applies an ordered RuleSet to lines, one line at a time.

    The engine owns the rules for its lifetime: per-rule firing state and
    the block state carry over from one line to the next.
    """

    def __init__(self, rules: RuleSet, color: bool = True) -> None:
        """Initialize the engine.

        Args:
            rules: Parsed rules, in rule file order
            color: Emit escape sequences; when False lines are only filtered
        """
        self.rules = rules
        self.color = color
        self._block: ColorSpec | None = None

    @property
    def in_block(self) -> bool:
        return self._block is not None

    def process(self, line: str) -> str | None:
        """Recolor one line.

        Args:
            line: Input line without its line terminator

        Returns:
            The recolored line, or None if a skip rule suppressed it
        """
        spans = self.collect_spans(line)
        if spans is None:
            return None
        if not self.color:
            return line
        return render(line, spans)

    def collect_spans(self, line: str) -> list[MatchSpan] | None:
        """Evaluate every rule against a line and collect its colored spans.

        Returns None when the line is suppressed.
        """
        spans: list[MatchSpan] = []
        fired: _Fired | None = None

        # Spans of the open block on this line, trimmed by an unblock match
        block_spans: list[MatchSpan] = []
        if self._block is not None:
            block_spans.append(MatchSpan(0, len(line), 0, self._block, BLOCK_LAYER))
            spans.append(block_spans[-1])

        for index, rule in enumerate(self.rules):
            if rule.is_exhausted:
                continue

            if rule.count is CountPolicy.PREVIOUS:
                if fired is None:
                    continue
                regions = fired.regions
                colors = rule.colors or fired.colors
            else:
                matches = find_matches(rule, line)
                if not matches:
                    continue
                regions = match_regions(matches)
                colors = rule.colors

            rule.mark_fired()

            if rule.skip:
                logger.debug("Line suppressed by rule at line %d", rule.line)
                return None

            if rule.count is CountPolicy.BLOCK:
                self._block = colors[0] if colors else NO_STYLE
                block_spans.append(MatchSpan(regions[0][0], len(line), 0, self._block, (index, 0)))
                spans.append(block_spans[-1])
                logger.debug("Block started by rule at line %d", rule.line)
            elif rule.count is CountPolicy.UNBLOCK and self._block is not None:
                for span in block_spans:
                    span.end = regions[0][1]
                self._block = None
                logger.debug("Block ended by rule at line %d", rule.line)

            spans.extend(self._color_regions(regions, colors, index, spans))
            fired = _Fired(regions=regions, colors=colors)

            if rule.count is CountPolicy.STOP:
                break

        return spans

    def _color_regions(
        self,
        regions: list[tuple[int, int, int]],
        colors: list[ColorSpec],
        index: int,
        previous_spans: list[MatchSpan],
    ) -> list[MatchSpan]:
        """Pair regions with the rule's colors."""
        result: list[MatchSpan] = []

        for start, end, group in regions:
            if group >= len(colors):
                continue
            color = colors[group]
            if color.unchanged:
                continue
            if color.previous:
                earlier = result or previous_spans
                if not earlier:
                    continue
                color = earlier[-1].color
            result.append(MatchSpan(start, end, group, color, (index, group)))

        return result


def render(line: str, spans: list[MatchSpan]) -> str:
    """Render a line with its spans in a single pass.

    Spans are layered by (rule index, group index), so later rules and inner
    groups win where they overlap. Every styled run is closed with a reset;
    when an inner span ends, the outer styling is emitted again.
    """
    ordered = sorted(
        (s for s in spans if s.end > s.start),
        key=lambda s: s.layer,
    )
    if not ordered:
        return line

    boundaries = sorted({0, len(line)} | {s.start for s in ordered} | {s.end for s in ordered})
    parts: list[str] = []
    current = ""

    for a, b in zip(boundaries, boundaries[1:]):
        if any(s.start == a and s.color.beep for s in ordered):
            parts.append(BEEP)

        active = [s.color for s in ordered if s.start <= a and s.end >= b]
        sequence = reduce(combine_colors, active, NO_STYLE).to_ansi()

        if sequence != current:
            if current:
                parts.append(RESET)
            if sequence:
                parts.append(sequence)
            current = sequence

        parts.append(line[a:b])

    if current:
        parts.append(RESET)

    return "".join(parts)
