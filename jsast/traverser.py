"""Single-pass syntax tree traversal and rule dispatch."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from tree_sitter import Node

from .result import IssueCollector, ReportIssue
from .rules import Rule


def walk(root: Node) -> Iterator[Node]:
    """Yield every named node below ``root`` in depth-first pre-order.

    Anonymous tokens (punctuation, keywords) are skipped. The walk uses an
    explicit stack so deeply nested sources do not hit the recursion limit.
    """

    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.named_children))


def tree_source(root: Node) -> bytes:
    """Return the source bytes of ``root`` with its byte offsets intact."""

    row, column = root.start_point
    # Leading whitespace lies outside the root node; only its line breaks matter.
    padding = b" " * (root.start_byte - row - column) + b"\n" * row + b" " * column
    return padding + (root.text or b"")


def traverse_and_check(
    root: Node, rules: Iterable[Rule], filename: str, source: Optional[bytes] = None
) -> List[ReportIssue]:
    """Offer each node to each rule, in rule order, and collect the issues."""

    active = list(rules)
    collector = IssueCollector(filename, tree_source(root) if source is None else source)
    for node in walk(root):
        for rule in active:
            findings = rule.check(node)
            if findings:
                collector.add(rule, findings)
    return collector.issues
