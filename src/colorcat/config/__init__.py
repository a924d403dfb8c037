"""Configuration loading and schema definitions."""

from colorcat.config.loader import find_rules_file, load_settings
from colorcat.config.schema import CountPolicy, RuleStanza, Settings

__all__ = [
    "CountPolicy",
    "RuleStanza",
    "Settings",
    "find_rules_file",
    "load_settings",
]
