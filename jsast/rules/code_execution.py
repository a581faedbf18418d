"""Detect dynamic code evaluation."""

from __future__ import annotations

from typing import Collection, List

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import NodeKind, call_arguments, kind_of
from jsast.utils.patterns import call_target

from . import BaseRule, Category, Rule

TIMER_FUNCTIONS = frozenset({"setTimeout", "setInterval"})


class NoEvalRule(BaseRule):
    """Flag ``eval`` and timers that evaluate a string."""

    name = "no-eval"
    description = "Disallow eval and string arguments to setTimeout/setInterval"
    severity = Severity.ERROR
    category = Category.XSS

    def __init__(self, timers: Collection[str] = TIMER_FUNCTIONS) -> None:
        self._timers = frozenset(timers)

    def check(self, node: Node) -> List[RuleFinding]:
        target = call_target(node)
        if target is None or not target.bare or kind_of(node) is not NodeKind.CALL:
            return []
        if target.method == "eval":
            return [
                self.finding(
                    node,
                    "Avoid using eval: eval executes arbitrary code and can lead to code injection vulnerabilities",
                )
            ]
        if target.method in self._timers:
            arguments = call_arguments(node)
            if arguments and kind_of(arguments[0]) in (NodeKind.STRING, NodeKind.TEMPLATE):
                return [
                    self.finding(
                        node,
                        f"Avoid using {target.method} with a string argument: the string is evaluated as code "
                        "and can lead to code injection vulnerabilities",
                    )
                ]
        return []


def get_rules() -> List[Rule]:
    return [NoEvalRule()]
