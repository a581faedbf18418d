"""Detect cross-site scripting sinks fed with dynamic content."""

from __future__ import annotations

from typing import Collection, List, Optional

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import (
    NodeKind,
    assignment_parts,
    call_arguments,
    find_property,
    jsx_attribute_parts,
    jsx_children,
    jsx_expression_value,
    kind_of,
    member_property,
    template_expressions,
)
from jsast.utils.patterns import call_target, has_dynamic_content, is_html_string, might_contain_html

from . import BaseRule, Category, Rule

DOCUMENT_WRITE_METHODS = frozenset({"write", "writeln"})


def assigned_property(node: Node) -> Optional[str]:
    """Return ``"innerHTML"`` for ``el.innerHTML = ...`` and similar assignments."""

    left, _ = assignment_parts(node)
    if kind_of(left) is not NodeKind.MEMBER:
        return None
    return member_property(left)


def is_unsafe_jsx_child(node: Optional[Node]) -> bool:
    """Identifiers, member accesses, calls and interpolated templates render unescaped data."""

    kind = kind_of(node)
    if kind in (NodeKind.IDENTIFIER, NodeKind.MEMBER, NodeKind.CALL):
        return True
    if kind is NodeKind.TEMPLATE:
        return bool(template_expressions(node))
    return False


class AvoidDangerouslySetInnerHtmlRule(BaseRule):
    """Flag dynamic values written through innerHTML or dangerouslySetInnerHTML."""

    name = "avoid-dangerously-set-innerhtml"
    description = "Avoid innerHTML and dangerouslySetInnerHTML with untrusted input"
    severity = Severity.WARNING
    category = Category.XSS

    def check(self, node: Node) -> List[RuleFinding]:
        kind = kind_of(node)
        if kind is NodeKind.ASSIGNMENT:
            return self._check_assignment(node)
        if kind is NodeKind.JSX_ATTRIBUTE:
            return self._check_attribute(node)
        return []

    def _check_assignment(self, node: Node) -> List[RuleFinding]:
        if assigned_property(node) != "innerHTML":
            return []
        _, right = assignment_parts(node)
        if not has_dynamic_content(right):
            return []
        return [
            self.finding(
                node,
                "Unsafe innerHTML assignment: Using innerHTML with untrusted input can lead to XSS attacks. "
                "Consider using textContent, innerText, or a sanitization library like DOMPurify",
            )
        ]

    def _check_attribute(self, node: Node) -> List[RuleFinding]:
        name, value = jsx_attribute_parts(node)
        if name != "dangerouslySetInnerHTML" or kind_of(value) is not NodeKind.JSX_EXPRESSION:
            return []
        expression = jsx_expression_value(value)
        if kind_of(expression) is not NodeKind.OBJECT:
            return []
        html = find_property(expression, "__html")
        if html is None or not has_dynamic_content(html.value):
            return []
        return [
            self.finding(
                node,
                "Unsafe dangerouslySetInnerHTML: Using dangerouslySetInnerHTML with untrusted input can lead "
                "to XSS attacks. Consider using a sanitization library like DOMPurify or avoid using this prop",
            )
        ]


class AvoidUnsafeHtmlRule(BaseRule):
    """Flag HTML responses, DOM writes and JSX children built from dynamic data."""

    name = "avoid-unsafe-html"
    description = "Avoid rendering dynamic HTML content"
    severity = Severity.WARNING
    category = Category.XSS

    def check(self, node: Node) -> List[RuleFinding]:
        kind = kind_of(node)
        if kind is NodeKind.CALL:
            return self._check_call(node)
        if kind is NodeKind.ASSIGNMENT:
            return self._check_assignment(node)
        if kind is NodeKind.JSX_ELEMENT:
            return self._check_jsx(node)
        return []

    # ------------------------------------------------------------------
    # Sinks
    # ------------------------------------------------------------------
    def _check_call(self, node: Node) -> List[RuleFinding]:
        target = call_target(node)
        if target is None or target.bare:
            return []
        arguments = call_arguments(node)
        if target.receiver == "res" and target.method == "send":
            if arguments and has_dynamic_content(arguments[0]) and might_contain_html(arguments[0]):
                return [
                    self.finding(
                        node,
                        "Avoid using res.send with dynamic HTML content. This may lead to XSS vulnerabilities.",
                    )
                ]
        elif target.receiver == "document" and target.method == "write":
            if arguments and self._dynamic_html(arguments[0]):
                return [
                    self.finding(
                        node,
                        "Avoid using document.write with dynamic HTML content. "
                        "This may lead to XSS vulnerabilities.",
                    )
                ]
        elif target.method == "insertAdjacentHTML":
            if len(arguments) > 1 and self._dynamic_html(arguments[1]):
                return [
                    self.finding(
                        node,
                        "Avoid using insertAdjacentHTML with dynamic HTML content. "
                        "This may lead to XSS vulnerabilities.",
                    )
                ]
        return []

    def _check_assignment(self, node: Node) -> List[RuleFinding]:
        if assigned_property(node) != "outerHTML":
            return []
        _, right = assignment_parts(node)
        if not self._dynamic_html(right):
            return []
        return [
            self.finding(node, "Avoid assigning dynamic HTML to outerHTML. This may lead to XSS vulnerabilities.")
        ]

    def _check_jsx(self, node: Node) -> List[RuleFinding]:
        findings: List[RuleFinding] = []
        for child in jsx_children(node):
            if kind_of(child) is not NodeKind.JSX_EXPRESSION:
                continue
            if is_unsafe_jsx_child(jsx_expression_value(child)):
                findings.append(
                    self.finding(
                        child,
                        "Avoid rendering untrusted input in JSX without proper escaping. "
                        "This may lead to XSS vulnerabilities.",
                    )
                )
        return findings

    @staticmethod
    def _dynamic_html(node: Optional[Node]) -> bool:
        return has_dynamic_content(node) and is_html_string(node)


class NoDocumentWriteRule(BaseRule):
    """Flag document.write and document.writeln with dynamic arguments."""

    name = "no-document-write"
    description = "Disallow document.write with untrusted input"
    severity = Severity.WARNING
    category = Category.XSS

    def __init__(self, methods: Collection[str] = DOCUMENT_WRITE_METHODS) -> None:
        self._methods = frozenset(methods)

    def check(self, node: Node) -> List[RuleFinding]:
        target = call_target(node)
        if target is None or target.receiver != "document" or target.method not in self._methods:
            return []
        arguments = call_arguments(node)
        if not arguments or not has_dynamic_content(arguments[0]):
            return []
        return [
            self.finding(
                node,
                f"Avoid using document.{target.method} with untrusted input. This may lead to XSS "
                "vulnerabilities. Use DOM manipulation methods like createElement and appendChild instead.",
            )
        ]


def get_rules() -> List[Rule]:
    return [AvoidDangerouslySetInnerHtmlRule(), AvoidUnsafeHtmlRule(), NoDocumentWriteRule()]
