"""Detect MongoDB queries built from unguarded user input."""

from __future__ import annotations

from typing import Collection, FrozenSet, List, Mapping

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import NodeKind, array_elements, call_arguments, kind_of, object_properties
from jsast.utils.patterns import is_dynamic_string, match_call

from . import BaseRule, Category, Rule

MONGO_METHODS = frozenset(
    {"find", "findOne", "update", "updateOne", "updateMany", "deleteOne", "deleteMany", "remove"}
)
MODEL_NAMES = ("User", "Product", "Order", "Account", "Session", "Document")
COLLECTION_RECEIVERS = ("collection", "db", "db.collection")
LOGICAL_OPERATORS = frozenset({"$or", "$and"})

MONGO_RECEIVERS: Mapping[str, FrozenSet[str]] = {
    name: MONGO_METHODS for name in MODEL_NAMES + COLLECTION_RECEIVERS
}


def _where_is_dynamic(query: Node) -> bool:
    for prop in object_properties(query):
        if prop.spread or prop.key != "$where":
            continue
        if is_dynamic_string(prop.value):
            return True
    return False


def _has_operator_key(node: Node) -> bool:
    return any(prop.key is not None and prop.key.startswith("$") for prop in object_properties(node))


def count_direct_inputs(query: Node) -> int:
    """Count field values taken straight from identifiers, outside any ``$`` operator.

    ``$or``/``$and`` clauses and nested plain objects are searched too.
    """

    count = 0
    for prop in object_properties(query):
        if prop.spread or prop.computed or prop.key is None or prop.value is None:
            continue
        if prop.key.startswith("$"):
            if prop.key in LOGICAL_OPERATORS and kind_of(prop.value) is NodeKind.ARRAY:
                for element in array_elements(prop.value):
                    if kind_of(element) is NodeKind.OBJECT:
                        count += count_direct_inputs(element)
            continue
        kind = kind_of(prop.value)
        if kind is NodeKind.IDENTIFIER:
            count += 1
        elif kind is NodeKind.OBJECT and not _has_operator_key(prop.value):
            count += count_direct_inputs(prop.value)
    return count


class DetectMongoDbInjectionRule(BaseRule):
    """Flag Mongo queries that splice identifiers in without operators."""

    name = "detect-mongodb-injection"
    description = "Detect MongoDB injection through $where and unguarded query values"
    severity = Severity.ERROR
    category = Category.SQL_INJECTION

    def __init__(self, receivers: Mapping[str, Collection[str]] = MONGO_RECEIVERS) -> None:
        self._receivers = receivers

    def check(self, node: Node) -> List[RuleFinding]:
        target = match_call(node, self._receivers)
        if target is None:
            return []
        arguments = call_arguments(node)
        if not arguments or kind_of(arguments[0]) is not NodeKind.OBJECT:
            return []
        query = arguments[0]
        sink = target.qualified

        findings: List[RuleFinding] = []
        if _where_is_dynamic(query):
            findings.append(
                self.finding(
                    node,
                    f"MongoDB injection vulnerability: {sink} uses $where operator with dynamic content, "
                    "vulnerable to MongoDB injection",
                )
            )
        for _ in range(count_direct_inputs(query)):
            findings.append(
                self.finding(
                    node,
                    f"MongoDB injection vulnerability: {sink} uses direct user input without "
                    "MongoDB operators, consider using $eq operator",
                )
            )
        return findings


def get_rules() -> List[Rule]:
    return [DetectMongoDbInjectionRule()]
