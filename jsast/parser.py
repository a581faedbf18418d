"""Parse JavaScript and TypeScript sources with tree-sitter."""

from __future__ import annotations

from functools import lru_cache
from pathlib import PurePath
from typing import Optional

import tree_sitter_javascript as tsjs
import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

TYPESCRIPT_EXTENSIONS = frozenset({".ts", ".mts", ".cts"})
TSX_EXTENSIONS = frozenset({".tsx"})
JAVASCRIPT_EXTENSIONS = frozenset({".js", ".jsx", ".mjs", ".cjs"})


class ParseError(Exception):
    """Raised when a source file cannot be parsed into a syntax tree."""

    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason


@lru_cache(maxsize=None)
def _language(grammar: str) -> Language:
    if grammar == "javascript":
        return Language(tsjs.language())
    if grammar == "typescript":
        return Language(tsts.language_typescript())
    return Language(tsts.language_tsx())


def select_grammar(filename: str, *, jsx: Optional[bool] = None, typescript: Optional[bool] = None) -> str:
    """Pick a grammar from the file extension; explicit hints win."""

    suffix = PurePath(filename).suffix.lower()
    if typescript is None:
        typescript = suffix in TYPESCRIPT_EXTENSIONS or suffix in TSX_EXTENSIONS or suffix not in JAVASCRIPT_EXTENSIONS
    if jsx is None:
        jsx = suffix not in TYPESCRIPT_EXTENSIONS
    if not typescript:
        return "javascript"
    return "tsx" if jsx else "typescript"


def _first_error(node: Node) -> Optional[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_error or current.is_missing:
            return current
        if current.has_error:
            stack.extend(reversed(current.children))
    return None


def parse_source(
    code: str,
    filename: str = "<source>",
    *,
    jsx: Optional[bool] = None,
    typescript: Optional[bool] = None,
) -> Node:
    """Parse ``code`` and return the root node of its syntax tree.

    Raises ``ParseError`` when the tree contains syntax errors.
    """

    parser = Parser(_language(select_grammar(filename, jsx=jsx, typescript=typescript)))
    tree = parser.parse(code.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        error = _first_error(root)
        if error is not None:
            line, column = error.start_point[0] + 1, error.start_point[1]
            raise ParseError(filename, f"syntax error at line {line}, column {column}")
        raise ParseError(filename, "syntax error")
    return root
