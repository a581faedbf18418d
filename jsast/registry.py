"""Rule registry built for each analysis run."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .rules import Rule
from .rules import (
    code_execution,
    code_quality,
    command_injection,
    crypto,
    deserialization,
    filesystem,
    nosql_injection,
    prototype_pollution,
    sql_injection,
    xss,
)

logger = logging.getLogger(__name__)

RULE_MODULES = (
    code_quality,
    command_injection,
    sql_injection,
    nosql_injection,
    filesystem,
    xss,
    code_execution,
    crypto,
    prototype_pollution,
    deserialization,
)


def builtin_rules() -> List[Rule]:
    """Return fresh instances of every built-in rule, in reporting order."""

    rules: List[Rule] = []
    for module in RULE_MODULES:
        rules.extend(module.get_rules())
    return rules


class RuleRegistry:
    """Map rule names to rule instances, preserving registration order."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: Dict[str, Rule] = {}
        for rule in rules:
            self.register(rule)

    @classmethod
    def with_builtin_rules(cls) -> "RuleRegistry":
        return cls(builtin_rules())

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "RuleRegistry":
        registry = cls()
        registry.register_by_name(names)
        return registry

    def register(self, rule: Rule) -> None:
        if not rule.name:
            raise ValueError(f"Rule {rule!r} has no name")
        if rule.name in self._rules:
            raise ValueError(f"Rule {rule.name!r} is already registered")
        self._rules[rule.name] = rule

    def register_builtin(self) -> None:
        for rule in builtin_rules():
            if rule.name not in self._rules:
                self.register(rule)

    def register_by_name(self, names: Iterable[str]) -> List[str]:
        """Activate the named built-in rules; unknown names are skipped.

        Returns the names that were registered.
        """

        available = {rule.name: rule for rule in builtin_rules()}
        registered: List[str] = []
        for name in names:
            rule = available.get(name)
            if rule is None:
                logger.warning("Unknown rule %r ignored", name)
                continue
            if name in self._rules:
                continue
            self.register(rule)
            registered.append(name)
        return registered

    def get(self, name: str) -> Optional[Rule]:
        return self._rules.get(name)

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules.values())

    @property
    def names(self) -> List[str]:
        return list(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)
