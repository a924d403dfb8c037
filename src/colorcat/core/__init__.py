"""Core functionality: color resolver, rule parser and rule engine."""

from colorcat.core.color import ColorParser, ColorSpec, combine_colors, parse_color, parse_colors
from colorcat.core.engine import MatchSpan, RuleEngine, render
from colorcat.core.parser import Rule, RuleSet, load_rules, parse_rules
from colorcat.core.tokenizer import Directive, StanzaBreak, tokenize

__all__ = [
    "ColorParser",
    "ColorSpec",
    "combine_colors",
    "parse_color",
    "parse_colors",
    "MatchSpan",
    "RuleEngine",
    "render",
    "Rule",
    "RuleSet",
    "load_rules",
    "parse_rules",
    "Directive",
    "StanzaBreak",
    "tokenize",
]
