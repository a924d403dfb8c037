"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest

from colorcat.core.engine import RuleEngine
from colorcat.core.parser import RuleSet, parse_rules

BOLD_RED = "\033[1;31m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RESET = "\033[0m"


SAMPLE_RULES = r"""
# sample rules in grc format
regexp=\bERROR\b
colours=bold red
count=unlimited
-
regexp=^DEBUG
skip=yes
======
regexp=(\d+) ms
colours=default,yellow

regexp=started
colours=green
count=once
"""


@pytest.fixture
def sample_rules() -> RuleSet:
    """Sample rule set for testing."""
    return parse_rules(SAMPLE_RULES, source="sample")


@pytest.fixture
def make_engine() -> Callable[..., RuleEngine]:
    """Factory building an engine from rule file text."""

    def _make(text: str, color: bool = True) -> RuleEngine:
        return RuleEngine(parse_rules(text), color=color)

    return _make


@pytest.fixture
def rules_file(tmp_path: Path) -> Path:
    """Sample rule file written to disk."""
    path = tmp_path / "conf.sample"
    path.write_text(SAMPLE_RULES, encoding="utf-8")
    return path
