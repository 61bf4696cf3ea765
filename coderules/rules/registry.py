"""Keyed collection of rules; constructed explicitly and injected into the engine."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator

from coderules.core.types import ProjectType, RuleCategory
from coderules.rules.base_rule import BaseRule

__all__ = ["RuleRegistry"]

logger = logging.getLogger(__name__)


class RuleRegistry:
    def __init__(self, rules: Iterable[BaseRule] = ()) -> None:
        self._rules: dict[str, BaseRule] = {}
        self.register_all(rules)

    def register(self, rule: BaseRule) -> None:
        """Add *rule*; an existing rule with the same id is replaced."""
        if rule.rule_id in self._rules:
            logger.warning("Rule %s is already registered; overwriting", rule.rule_id)
        self._rules[rule.rule_id] = rule

    def register_all(self, rules: Iterable[BaseRule]) -> None:
        for rule in rules:
            self.register(rule)

    def get(self, rule_id: str) -> BaseRule | None:
        return self._rules.get(rule_id)

    def get_all(self) -> list[BaseRule]:
        return list(self._rules.values())

    def get_by_project_type(self, project_type: ProjectType) -> list[BaseRule]:
        return [r for r in self._rules.values() if r.applies_to(project_type)]

    def get_by_category(self, category: RuleCategory) -> list[BaseRule]:
        return [r for r in self._rules.values() if r.category is category]

    def get_auto_fixable(self) -> list[BaseRule]:
        return [r for r in self._rules.values() if r.can_auto_fix]

    def unregister(self, rule_id: str) -> bool:
        return self._rules.pop(rule_id, None) is not None

    def clear(self) -> None:
        self._rules.clear()

    @property
    def size(self) -> int:
        return len(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._rules

    def __iter__(self) -> Iterator[BaseRule]:
        return iter(list(self._rules.values()))
