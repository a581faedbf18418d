"""Detect writes and merges that can reach ``Object.prototype``."""

from __future__ import annotations

from typing import Collection, List, Optional

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import (
    NodeKind,
    assignment_parts,
    call_arguments,
    identifier_name,
    is_computed_member,
    kind_of,
    member_index,
    member_object,
    member_property,
    object_properties,
    string_value,
)
from jsast.utils.patterns import CallTarget, call_target, describe_receiver, has_reserved_key

from . import BaseRule, Category, Rule

RESERVED_KEYS = frozenset({"__proto__", "constructor", "prototype"})
UNTRUSTED_INPUT_NAMES = frozenset({"userInput", "input", "data", "params", "query", "body", "req", "request"})
SAFE_PROTOTYPES = frozenset({"Object", "Array", "Function", "String", "Number", "Boolean", "null"})
DEEP_MERGE_CALLS = frozenset({"lodash.merge", "_.merge", "jQuery.extend", "$.extend"})
DEFINE_PROPERTY_CALLS = frozenset({"Object.defineProperty", "Reflect.defineProperty"})

_SUFFIX = "vulnerable to prototype pollution attacks"


class DetectPrototypePollutionRule(BaseRule):
    """Flag ``__proto__`` writes, prototype indexing and unsafe deep merges.

    The recursive scan for reserved keys descends into nested object
    literals; identifiers passed to deep-merge helpers are judged by name
    alone.
    """

    name = "detect-prototype-pollution"
    description = "Detect prototype pollution through __proto__, prototype writes and unsafe merges"
    severity = Severity.ERROR
    category = Category.INSECURE_DESERIALIZATION

    def __init__(
        self,
        reserved_keys: Collection[str] = RESERVED_KEYS,
        untrusted_names: Collection[str] = UNTRUSTED_INPUT_NAMES,
        safe_prototypes: Collection[str] = SAFE_PROTOTYPES,
    ) -> None:
        self._reserved_keys = frozenset(reserved_keys)
        self._untrusted_names = frozenset(untrusted_names)
        self._safe_prototypes = frozenset(safe_prototypes)

    def check(self, node: Node) -> List[RuleFinding]:
        kind = kind_of(node)
        if kind is NodeKind.ASSIGNMENT:
            return self._check_assignment(node)
        if kind is NodeKind.CALL:
            target = call_target(node)
            if target is None or target.bare:
                return []
            return self._check_call(node, target)
        if kind is NodeKind.OBJECT:
            return self._check_spread(node)
        return []

    def _is_reserved(self, key: str) -> bool:
        return key in self._reserved_keys

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------
    def _check_assignment(self, node: Node) -> List[RuleFinding]:
        left, _ = assignment_parts(node)
        if kind_of(left) is not NodeKind.MEMBER:
            return []
        if not is_computed_member(left):
            if member_property(left) == "__proto__":
                return [self.finding(node, f"Prototype pollution: assignment to __proto__ property, {_SUFFIX}")]
            return []

        index = member_index(left)
        if kind_of(index) is NodeKind.STRING:
            if string_value(index) == "__proto__":
                return [self.finding(node, f"Prototype pollution: assignment to __proto__ property, {_SUFFIX}")]
            return []

        message = self._prototype_target_message(member_object(left))
        if message is None:
            return []
        return [self.finding(node, message)]

    def _prototype_target_message(self, target: Optional[Node]) -> Optional[str]:
        if kind_of(target) is not NodeKind.MEMBER or member_property(target) != "prototype":
            return None
        owner = member_object(target)
        if describe_receiver(owner) == "Object":
            return f"Prototype pollution: dynamic property assignment on Object.prototype, {_SUFFIX}"
        if identifier_name(owner) == "constructor" or (
            kind_of(owner) is NodeKind.MEMBER and member_property(owner) == "constructor"
        ):
            return f"Prototype pollution: dynamic property assignment on constructor.prototype, {_SUFFIX}"
        return f"Prototype pollution: dynamic property assignment on a prototype object, {_SUFFIX}"

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------
    def _check_call(self, node: Node, target: CallTarget) -> List[RuleFinding]:
        qualified = target.qualified
        arguments = call_arguments(node)
        if qualified == "Object.assign":
            return self._check_assign(node, arguments)
        if qualified in DEFINE_PROPERTY_CALLS:
            if len(arguments) > 1 and kind_of(arguments[1]) is NodeKind.STRING:
                if string_value(arguments[1]) == "__proto__":
                    return [self.finding(node, f"Prototype pollution: {qualified} defines __proto__, {_SUFFIX}")]
            return []
        if qualified == "Object.create":
            if arguments and has_reserved_key(arguments[0], self._is_reserved):
                return [
                    self.finding(
                        node, f"Prototype pollution: Object.create with a reserved key in its prototype, {_SUFFIX}"
                    )
                ]
            return []
        if qualified == "Object.setPrototypeOf":
            if len(arguments) > 1 and not self._is_safe_prototype(arguments[1]):
                return [
                    self.finding(
                        node, f"Prototype pollution: Object.setPrototypeOf with an untrusted prototype, {_SUFFIX}"
                    )
                ]
            return []
        if qualified in DEEP_MERGE_CALLS:
            return self._check_merge(node, qualified, arguments)
        return []

    def _check_assign(self, node: Node, arguments: List[Node]) -> List[RuleFinding]:
        findings: List[RuleFinding] = []
        for argument in arguments:
            if kind_of(argument) is not NodeKind.OBJECT:
                continue
            properties = [prop for prop in object_properties(argument) if not prop.spread]
            if any(prop.key == "__proto__" for prop in properties):
                findings.append(
                    self.finding(node, f"Prototype pollution: Object.assign with __proto__ property, {_SUFFIX}")
                )
            if any(prop.computed for prop in properties):
                findings.append(
                    self.finding(node, f"Prototype pollution: Object.assign with computed property key, {_SUFFIX}")
                )
        return findings

    def _check_merge(self, node: Node, qualified: str, arguments: List[Node]) -> List[RuleFinding]:
        findings: List[RuleFinding] = []
        for argument in arguments:
            if has_reserved_key(argument, self._is_reserved):
                findings.append(
                    self.finding(node, f"Prototype pollution: {qualified} merges an object with reserved keys, {_SUFFIX}")
                )
            elif identifier_name(argument) in self._untrusted_names:
                findings.append(
                    self.finding(node, f"Prototype pollution: {qualified} merges untrusted input, {_SUFFIX}")
                )
        return findings

    def _is_safe_prototype(self, node: Node) -> bool:
        if kind_of(node) is NodeKind.NULL:
            return True
        described = describe_receiver(node)
        if described is None:
            return False
        if described.endswith(".prototype"):
            described = described[: -len(".prototype")]
        return described in self._safe_prototypes

    # ------------------------------------------------------------------
    # Object literals
    # ------------------------------------------------------------------
    def _check_spread(self, node: Node) -> List[RuleFinding]:
        return [
            self.finding(prop.node, f"Prototype pollution: spreading an object with reserved keys, {_SUFFIX}")
            for prop in object_properties(node)
            if prop.spread and has_reserved_key(prop.value, self._is_reserved)
        ]


def get_rules() -> List[Rule]:
    return [DetectPrototypePollutionRule()]
