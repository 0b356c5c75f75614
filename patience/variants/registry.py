"""Registry for patience rule sets."""

from typing import Dict, List, Type

from patience.errors import UnknownRuleSet
from patience.variants.base import RuleSet


class RuleSetRegistry:
    """Registry mapping rule set ids to rule set classes."""

    _rule_sets: Dict[str, Type[RuleSet]] = {}

    @classmethod
    def register(cls, name: str, rule_set_class: Type[RuleSet]) -> None:
        """Register a new rule set."""
        cls._rule_sets[name.lower()] = rule_set_class

    @classmethod
    def get(cls, name: str) -> Type[RuleSet]:
        """Get a rule set class by name."""
        rule_set = cls._rule_sets.get(name.lower())
        if not rule_set:
            raise UnknownRuleSet(f"Unknown rule set: {name}")
        return rule_set

    @classmethod
    def create(cls, name: str, **options) -> RuleSet:
        """
        Build a rule set from keyword options.

        Unknown option names raise TypeError, invalid values ValueError.
        """
        rule_set_class = cls.get(name)
        return rule_set_class(rule_set_class.options_class(**options))

    @classmethod
    def list_rule_sets(cls) -> List[str]:
        """List all registered rule sets."""
        return list(cls._rule_sets.keys())
