"""Closed node-kind view and accessors over tree-sitter syntax nodes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from tree_sitter import Node


class NodeKind(str, Enum):
    """Node kinds the rules distinguish. Everything else is ``OTHER``."""

    CALL = "call"
    TAGGED_TEMPLATE = "tagged_template"
    NEW = "new"
    MEMBER = "member"
    IDENTIFIER = "identifier"
    STRING = "string"
    TEMPLATE = "template"
    NUMBER = "number"
    BIGINT = "bigint"
    BOOLEAN = "boolean"
    NULL = "null"
    REGEX = "regex"
    BINARY = "binary"
    LOGICAL = "logical"
    UNARY = "unary"
    ASSIGNMENT = "assignment"
    OBJECT = "object"
    ARRAY = "array"
    SPREAD = "spread"
    FUNCTION = "function"
    ARROW_FUNCTION = "arrow_function"
    CONDITIONAL = "conditional"
    VARIABLE_DECLARATION = "variable_declaration"
    LEXICAL_DECLARATION = "lexical_declaration"
    JSX_ELEMENT = "jsx_element"
    JSX_SELF_CLOSING_ELEMENT = "jsx_self_closing_element"
    JSX_EXPRESSION = "jsx_expression"
    JSX_ATTRIBUTE = "jsx_attribute"
    JSX_TEXT = "jsx_text"
    THIS = "this"
    OTHER = "other"


_TYPE_KINDS = {
    "call_expression": NodeKind.CALL,
    "new_expression": NodeKind.NEW,
    "member_expression": NodeKind.MEMBER,
    "subscript_expression": NodeKind.MEMBER,
    "identifier": NodeKind.IDENTIFIER,
    "shorthand_property_identifier": NodeKind.IDENTIFIER,
    "undefined": NodeKind.IDENTIFIER,
    "string": NodeKind.STRING,
    "template_string": NodeKind.TEMPLATE,
    "number": NodeKind.NUMBER,
    "true": NodeKind.BOOLEAN,
    "false": NodeKind.BOOLEAN,
    "null": NodeKind.NULL,
    "regex": NodeKind.REGEX,
    "binary_expression": NodeKind.BINARY,
    "unary_expression": NodeKind.UNARY,
    "assignment_expression": NodeKind.ASSIGNMENT,
    "augmented_assignment_expression": NodeKind.ASSIGNMENT,
    "object": NodeKind.OBJECT,
    "array": NodeKind.ARRAY,
    "spread_element": NodeKind.SPREAD,
    "function_expression": NodeKind.FUNCTION,
    "function": NodeKind.FUNCTION,
    "generator_function": NodeKind.FUNCTION,
    "arrow_function": NodeKind.ARROW_FUNCTION,
    "ternary_expression": NodeKind.CONDITIONAL,
    "variable_declaration": NodeKind.VARIABLE_DECLARATION,
    "lexical_declaration": NodeKind.LEXICAL_DECLARATION,
    "jsx_element": NodeKind.JSX_ELEMENT,
    "jsx_self_closing_element": NodeKind.JSX_SELF_CLOSING_ELEMENT,
    "jsx_expression": NodeKind.JSX_EXPRESSION,
    "jsx_attribute": NodeKind.JSX_ATTRIBUTE,
    "jsx_text": NodeKind.JSX_TEXT,
    "this": NodeKind.THIS,
}

LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})


def kind_of(node: Optional[Node]) -> NodeKind:
    """Classify a tree-sitter node into the closed ``NodeKind`` set."""

    if node is None:
        return NodeKind.OTHER
    kind = _TYPE_KINDS.get(node.type, NodeKind.OTHER)
    if kind is NodeKind.CALL:
        arguments = node.child_by_field_name("arguments")
        if arguments is not None and arguments.type == "template_string":
            return NodeKind.TAGGED_TEMPLATE
    elif kind is NodeKind.NUMBER:
        if text_of(node).endswith("n"):
            return NodeKind.BIGINT
    elif kind is NodeKind.BINARY:
        if operator_of(node) in LOGICAL_OPERATORS:
            return NodeKind.LOGICAL
    return kind


def text_of(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def unwrap(node: Optional[Node]) -> Optional[Node]:
    """Strip any parenthesized expression wrappers."""

    while node is not None and node.type == "parenthesized_expression":
        inner = named_children(node)
        node = inner[0] if inner else None
    return node


def named_children(node: Optional[Node]) -> List[Node]:
    """Return named children, leaving out comments."""

    if node is None:
        return []
    return [child for child in node.named_children if child.type != "comment"]


def child_field(node: Optional[Node], name: str) -> Optional[Node]:
    if node is None:
        return None
    return unwrap(node.child_by_field_name(name))


def operator_of(node: Node) -> str:
    operator = node.child_by_field_name("operator")
    return text_of(operator)


def position(node: Node) -> Tuple[int, int]:
    """Return the 1-based line and 0-based byte column of ``node``.

    ``IssueCollector`` turns the byte column into a character column once the
    finding is stamped, so no source text is touched per node here.
    """

    row, byte_column = node.start_point
    return row + 1, byte_column


# ----------------------------------------------------------------------
# Expression accessors
# ----------------------------------------------------------------------
def identifier_name(node: Optional[Node]) -> Optional[str]:
    node = unwrap(node)
    if kind_of(node) is NodeKind.IDENTIFIER:
        return text_of(node)
    return None


def call_callee(node: Node) -> Optional[Node]:
    """Return the callee of a call, tagged template or ``new`` expression."""

    if node.type == "new_expression":
        return child_field(node, "constructor")
    return child_field(node, "function")


def call_arguments(node: Node) -> List[Node]:
    """Return argument expressions of a call or ``new`` expression."""

    arguments = node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return []
    return [unwrap(child) for child in named_children(arguments)]


def tagged_template(node: Node) -> Optional[Node]:
    if kind_of(node) is not NodeKind.TAGGED_TEMPLATE:
        return None
    return node.child_by_field_name("arguments")


def member_object(node: Node) -> Optional[Node]:
    return child_field(node, "object")


def member_property(node: Node) -> Optional[str]:
    """Return the static property name of a member access, if any.

    ``a.b`` yields ``"b"``; ``a["b"]`` yields ``"b"``; ``a[b]`` yields ``None``.
    """

    if node.type == "member_expression":
        prop = node.child_by_field_name("property")
        return text_of(prop) if prop is not None else None
    if node.type == "subscript_expression":
        index = child_field(node, "index")
        if kind_of(index) is NodeKind.STRING:
            return string_value(index)
    return None


def is_computed_member(node: Node) -> bool:
    return node.type == "subscript_expression"


def member_index(node: Node) -> Optional[Node]:
    if node.type != "subscript_expression":
        return None
    return child_field(node, "index")


def assignment_parts(node: Node) -> Tuple[Optional[Node], Optional[Node]]:
    return child_field(node, "left"), child_field(node, "right")


def binary_operands(node: Node) -> Tuple[Optional[Node], Optional[Node]]:
    return child_field(node, "left"), child_field(node, "right")


def conditional_branches(node: Node) -> Tuple[Optional[Node], Optional[Node]]:
    return child_field(node, "consequence"), child_field(node, "alternative")


def spread_argument(node: Node) -> Optional[Node]:
    children = named_children(node)
    return unwrap(children[0]) if children else None


def string_value(node: Node) -> str:
    """Return the contents of a string literal without its quotes."""

    raw = text_of(node)
    if len(raw) >= 2 and raw[0] in "'\"" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def template_expressions(node: Node) -> List[Node]:
    """Return the interpolated expressions of a template literal."""

    expressions: List[Node] = []
    for child in named_children(node):
        if child.type == "template_substitution":
            inner = named_children(child)
            if inner:
                expressions.append(unwrap(inner[0]))
    return expressions


def template_quasis(node: Node) -> List[str]:
    """Return the static text segments of a template literal."""

    source = node.text or b""
    base = node.start_byte
    quasis: List[str] = []
    cursor = 1
    for child in named_children(node):
        if child.type != "template_substitution":
            continue
        quasis.append(source[cursor:child.start_byte - base].decode("utf-8", errors="replace"))
        cursor = child.end_byte - base
    quasis.append(source[cursor:max(cursor, len(source) - 1)].decode("utf-8", errors="replace"))
    return quasis


def array_elements(node: Node) -> List[Node]:
    return [unwrap(child) for child in named_children(node)]


# ----------------------------------------------------------------------
# Object literals
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Property:
    """One member of an object literal."""

    node: Node
    key: Optional[str]
    value: Optional[Node]
    computed: bool = False
    spread: bool = False


def _property_key(key: Optional[Node]) -> Tuple[Optional[str], bool]:
    if key is None:
        return None, False
    if key.type == "computed_property_name":
        return None, True
    if key.type == "string":
        return string_value(key), False
    return text_of(key), False


def object_properties(node: Node) -> List[Property]:
    """List the properties of an object literal in source order."""

    properties: List[Property] = []
    for child in named_children(node):
        if child.type == "pair":
            key, computed = _property_key(child.child_by_field_name("key"))
            properties.append(Property(child, key, child_field(child, "value"), computed=computed))
        elif child.type == "shorthand_property_identifier":
            properties.append(Property(child, text_of(child), child))
        elif child.type == "spread_element":
            properties.append(Property(child, None, spread_argument(child), spread=True))
        elif child.type == "method_definition":
            key, computed = _property_key(child.child_by_field_name("name"))
            properties.append(Property(child, key, None, computed=computed))
    return properties


def find_property(node: Node, key: str) -> Optional[Property]:
    for prop in object_properties(node):
        if not prop.spread and prop.key == key:
            return prop
    return None


# ----------------------------------------------------------------------
# JSX
# ----------------------------------------------------------------------
def jsx_attribute_parts(node: Node) -> Tuple[Optional[str], Optional[Node]]:
    """Return the name and value node of a JSX attribute."""

    children = named_children(node)
    if not children:
        return None, None
    name = text_of(children[0])
    value = children[1] if len(children) > 1 else None
    return name, value


def jsx_expression_value(node: Node) -> Optional[Node]:
    children = named_children(node)
    return unwrap(children[0]) if children else None


def jsx_children(node: Node) -> List[Node]:
    """Return children of a JSX element between its opening and closing tags."""

    return [
        child
        for child in named_children(node)
        if child.type not in {"jsx_opening_element", "jsx_closing_element"}
    ]
