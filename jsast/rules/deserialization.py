"""Detect JSON.parse on unvalidated input."""

from __future__ import annotations

from typing import List

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import NodeKind, call_arguments, kind_of
from jsast.utils.patterns import call_target

from . import BaseRule, Category, Rule


class ValidateJsonParseRule(BaseRule):
    """Flag ``JSON.parse`` unless its argument is a string literal."""

    name = "validate-json-parse"
    description = "Validate input before passing it to JSON.parse"
    severity = Severity.WARNING
    category = Category.INSECURE_DESERIALIZATION

    def check(self, node: Node) -> List[RuleFinding]:
        if kind_of(node) is not NodeKind.CALL:
            return []
        target = call_target(node)
        if target is None or target.receiver != "JSON" or target.method != "parse":
            return []
        arguments = call_arguments(node)
        if not arguments or kind_of(arguments[0]) is NodeKind.STRING:
            return []
        return [
            self.finding(
                node,
                "Unsafe JSON.parse: JSON.parse uses unvalidated input, vulnerable to injection attacks. "
                "Use try-catch and validate input before parsing",
            )
        ]


def get_rules() -> List[Rule]:
    return [ValidateJsonParseRule()]
