"""Rule contract shared by every built-in rule."""

from __future__ import annotations

from enum import Enum
from typing import List, Protocol

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import position


class Category(str, Enum):
    """Closed set of rule categories."""

    COMMAND_INJECTION = "command-injection"
    SQL_INJECTION = "sql-injection"
    XSS = "xss"
    PATH_TRAVERSAL = "path-traversal"
    INSECURE_DESERIALIZATION = "insecure-deserialization"
    INSECURE_RANDOMNESS = "insecure-randomness"
    HARDCODED_SECRETS = "hardcoded-secrets"
    INSECURE_HTTP = "insecure-http"
    INSECURE_AUTH = "insecure-auth"
    INSECURE_DEPENDENCIES = "insecure-dependencies"
    CODE_QUALITY = "code-quality"
    OTHER_SECURITY = "other-security"


class Rule(Protocol):
    """Protocol implemented by all rules."""

    name: str
    description: str
    severity: Severity
    category: Category

    def check(self, node: Node) -> List[RuleFinding]:
        """Inspect one syntax node and return what was found at it."""


class BaseRule:
    """Common metadata and helpers for rule implementations.

    Subclasses set the class attributes and implement ``check``. Rules keep
    no state between calls, so one instance serves every file of a run.
    """

    name = ""
    description = ""
    severity = Severity.WARNING
    category = Category.OTHER_SECURITY

    def check(self, node: Node) -> List[RuleFinding]:
        raise NotImplementedError

    def finding(self, node: Node, message: str) -> RuleFinding:
        line, column = position(node)
        return RuleFinding(message=message, line=line, column=column)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
