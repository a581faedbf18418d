"""Code-quality rules: stray console output and ``var`` declarations."""

from __future__ import annotations

from typing import List

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import NodeKind, kind_of
from jsast.utils.patterns import call_target

from . import BaseRule, Category, Rule


class NoConsoleLogRule(BaseRule):
    """Flag ``console.log`` calls left in source."""

    name = "no-console-log"
    description = "Disallow console.log statements"
    severity = Severity.NOTE
    category = Category.CODE_QUALITY

    def check(self, node: Node) -> List[RuleFinding]:
        if kind_of(node) is not NodeKind.CALL:
            return []
        target = call_target(node)
        if target is None or target.receiver != "console" or target.method != "log":
            return []
        return [self.finding(node, "Do not use console.log")]


class NoVarRule(BaseRule):
    """Flag function-scoped ``var`` declarations."""

    name = "no-var"
    description = "Disallow var declarations, use let or const instead"
    severity = Severity.WARNING
    category = Category.CODE_QUALITY

    def check(self, node: Node) -> List[RuleFinding]:
        if kind_of(node) is not NodeKind.VARIABLE_DECLARATION:
            return []
        return [self.finding(node, "Unexpected var, use let or const instead: `var` is not allowed")]


def get_rules() -> List[Rule]:
    return [NoConsoleLogRule(), NoVarRule()]
