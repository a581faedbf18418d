"""Reusable syntactic predicates shared by the built-in rules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Collection, Iterator, Mapping, Optional, Pattern

from tree_sitter import Node

from .nodes import (
    NodeKind,
    Property,
    binary_operands,
    call_arguments,
    call_callee,
    kind_of,
    member_object,
    member_property,
    object_properties,
    string_value,
    template_expressions,
    template_quasis,
    text_of,
)

HTML_TAG_PATTERN = re.compile(r"<[a-zA-Z][^>]*>")

_DYNAMIC_KINDS = frozenset(
    {NodeKind.BINARY, NodeKind.IDENTIFIER, NodeKind.CALL, NodeKind.MEMBER, NodeKind.OBJECT}
)
_HTML_CARRIER_KINDS = frozenset({NodeKind.IDENTIFIER, NodeKind.CALL, NodeKind.MEMBER})


def has_dynamic_content(node: Optional[Node]) -> bool:
    """Return True when ``node`` may carry runtime-controlled content.

    Interpolated templates, concatenations, identifiers, calls, member
    accesses and object literals count as dynamic. Literals and templates
    without substitutions do not.
    """

    kind = kind_of(node)
    if kind is NodeKind.TEMPLATE:
        return bool(template_expressions(node))
    return kind in _DYNAMIC_KINDS


def is_dynamic_string(node: Optional[Node]) -> bool:
    """Return True for an interpolated template literal or a binary expression."""

    kind = kind_of(node)
    if kind is NodeKind.TEMPLATE:
        return bool(template_expressions(node))
    return kind is NodeKind.BINARY


def contains_keyword(node: Optional[Node], keywords: Collection[str]) -> bool:
    """Match upper-cased keywords against the static text of ``node``.

    Only the static parts of a template are inspected. A binary expression
    is always treated as a match.
    """

    kind = kind_of(node)
    if kind is NodeKind.STRING:
        text = string_value(node).upper()
    elif kind is NodeKind.TEMPLATE:
        text = "".join(template_quasis(node)).upper()
    elif kind is NodeKind.BINARY:
        return True
    else:
        return False
    return any(keyword in text for keyword in keywords)


def is_html_string(node: Optional[Node], pattern: Pattern[str] = HTML_TAG_PATTERN) -> bool:
    kind = kind_of(node)
    if kind is NodeKind.STRING:
        return bool(pattern.search(string_value(node)))
    if kind is NodeKind.TEMPLATE:
        return any(pattern.search(quasi) for quasi in template_quasis(node))
    if kind is NodeKind.BINARY:
        left, right = binary_operands(node)
        return is_html_string(left, pattern) or is_html_string(right, pattern)
    return False


def might_contain_html(node: Optional[Node], pattern: Pattern[str] = HTML_TAG_PATTERN) -> bool:
    """Identifiers, calls and member accesses might hold markup."""

    if kind_of(node) in _HTML_CARRIER_KINDS:
        return True
    return is_html_string(node, pattern)


# ----------------------------------------------------------------------
# Callee matching
# ----------------------------------------------------------------------
def require_module(node: Optional[Node]) -> Optional[str]:
    """Return ``"fs"`` for ``require('fs')``, otherwise ``None``."""

    if kind_of(node) is not NodeKind.CALL:
        return None
    callee = call_callee(node)
    if kind_of(callee) is not NodeKind.IDENTIFIER or text_of(callee) != "require":
        return None
    arguments = call_arguments(node)
    if arguments and kind_of(arguments[0]) is NodeKind.STRING:
        return string_value(arguments[0])
    return None


def describe_receiver(node: Optional[Node]) -> Optional[str]:
    """Render a callee receiver as a canonical dotted path.

    ``fs`` -> ``fs``; ``db.collection`` -> ``db.collection``;
    ``require('pg')`` -> ``require('pg')``; ``new pg.Client()`` -> ``new pg.Client()``;
    ``require('pg').Client()`` -> ``require('pg').Client()``.
    Returns ``None`` for anything else.
    """

    kind = kind_of(node)
    if kind is NodeKind.IDENTIFIER:
        return text_of(node)
    if kind is NodeKind.THIS:
        return "this"
    if kind is NodeKind.MEMBER:
        prop = member_property(node)
        base = describe_receiver(member_object(node))
        if prop is None or base is None:
            return None
        return f"{base}.{prop}"
    if kind is NodeKind.CALL:
        module = require_module(node)
        if module is not None:
            return f"require('{module}')"
        base = describe_receiver(call_callee(node))
        return f"{base}()" if base is not None else None
    if kind is NodeKind.NEW:
        base = describe_receiver(call_callee(node))
        return f"new {base}()" if base is not None else None
    return None


@dataclass(frozen=True)
class CallTarget:
    """The receiver and method name a call resolves to syntactically."""

    receiver: Optional[str]
    method: str
    bare: bool = False

    @property
    def qualified(self) -> str:
        if self.receiver is None:
            return self.method
        return f"{self.receiver}.{self.method}"


def call_target(node: Node) -> Optional[CallTarget]:
    if kind_of(node) not in (NodeKind.CALL, NodeKind.TAGGED_TEMPLATE):
        return None
    callee = call_callee(node)
    kind = kind_of(callee)
    if kind is NodeKind.IDENTIFIER:
        return CallTarget(None, text_of(callee), bare=True)
    if kind is NodeKind.MEMBER:
        method = member_property(callee)
        if method is None:
            return None
        return CallTarget(describe_receiver(member_object(callee)), method)
    return None


def match_call(
    node: Node,
    receivers: Mapping[str, Collection[str]],
    bare: Collection[str] = (),
) -> Optional[CallTarget]:
    """Match ``receiver.method(...)`` or a bare ``method(...)`` call.

    ``receivers`` maps a canonical receiver (see ``describe_receiver``) to the
    method names that count as sinks on it.
    """

    target = call_target(node)
    if target is None:
        return None
    if target.bare:
        return target if target.method in bare else None
    if target.receiver is None:
        return None
    methods = receivers.get(target.receiver)
    if methods is not None and target.method in methods:
        return target
    return None


# ----------------------------------------------------------------------
# Object literal scanning
# ----------------------------------------------------------------------
def iter_nested_properties(node: Node) -> Iterator[Property]:
    """Yield properties of an object literal and of object literals nested in its values."""

    for prop in object_properties(node):
        yield prop
        if not prop.spread and kind_of(prop.value) is NodeKind.OBJECT:
            yield from iter_nested_properties(prop.value)


def has_reserved_key(node: Optional[Node], is_reserved: Callable[[str], bool]) -> bool:
    if kind_of(node) is not NodeKind.OBJECT:
        return False
    return any(
        prop.key is not None and not prop.computed and is_reserved(prop.key)
        for prop in iter_nested_properties(node)
    )
