"""Patience variants."""

from .base import RuleSet
from .klondike import KlondikeRules, KlondikeOptions
from .freecell import FreeCellRules, FreeCellOptions
from .registry import RuleSetRegistry

RuleSetRegistry.register("klondike", KlondikeRules)
RuleSetRegistry.register("freecell", FreeCellRules)

__all__ = [
    "RuleSet",
    "KlondikeRules",
    "KlondikeOptions",
    "FreeCellRules",
    "FreeCellOptions",
    "RuleSetRegistry",
]
