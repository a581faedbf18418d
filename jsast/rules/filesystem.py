"""Detect file-system calls whose paths are built from dynamic strings."""

from __future__ import annotations

from typing import Collection, FrozenSet, List, Mapping

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import call_arguments
from jsast.utils.patterns import is_dynamic_string, match_call

from . import BaseRule, Category, Rule


def _with_sync(*names: str) -> FrozenSet[str]:
    return frozenset(names) | frozenset(f"{name}Sync" for name in names)


PATH_TRAVERSAL_METHODS = _with_sync(
    "readFile", "writeFile", "unlink", "stat", "readdir", "mkdir", "rmdir", "appendFile",
    "rename", "copyFile", "access", "lstat", "realpath", "readlink", "chmod", "chown",
    "utimes", "open", "close", "read", "write",
) | frozenset({"existsSync"})

UNSAFE_FS_METHODS = _with_sync(
    "readFile", "writeFile", "unlink", "mkdir", "rmdir", "readdir", "stat", "appendFile",
    "rename", "copyFile",
) | frozenset({"existsSync"})

# Methods taking a source and a destination path.
TWO_PATH_METHODS = _with_sync("rename", "copyFile")

PATH_TRAVERSAL_RECEIVERS: Mapping[str, FrozenSet[str]] = {
    "fs": PATH_TRAVERSAL_METHODS,
    "path": PATH_TRAVERSAL_METHODS,
    "require('fs')": PATH_TRAVERSAL_METHODS,
    "new FileHandle()": frozenset({"read", "write", "close", "stat"}),
}

UNSAFE_FS_RECEIVERS: Mapping[str, FrozenSet[str]] = {
    "fs": UNSAFE_FS_METHODS,
    "require('fs')": UNSAFE_FS_METHODS,
}


class _DynamicPathRule(BaseRule):
    """Shared matching for rules that check path arguments of fs calls."""

    message_prefix = ""

    def __init__(
        self,
        receivers: Mapping[str, Collection[str]],
        bare: Collection[str],
        two_path_methods: Collection[str] = TWO_PATH_METHODS,
    ) -> None:
        self._receivers = receivers
        self._bare = frozenset(bare)
        self._two_path_methods = frozenset(two_path_methods)

    def check(self, node: Node) -> List[RuleFinding]:
        target = match_call(node, self._receivers, self._bare)
        if target is None:
            return []
        checked = 2 if target.method in self._two_path_methods else 1
        return [
            self.finding(
                node,
                f"{self.message_prefix}: {target.qualified} uses dynamically concatenated path, "
                "vulnerable to path traversal",
            )
            for argument in call_arguments(node)[:checked]
            if is_dynamic_string(argument)
        ]


class DetectPathTraversalRule(_DynamicPathRule):
    """Flag fs and path calls fed with concatenated or interpolated paths."""

    name = "detect-path-traversal"
    description = "Detect path traversal through dynamically built file paths"
    severity = Severity.ERROR
    category = Category.PATH_TRAVERSAL
    message_prefix = "Path traversal vulnerability"

    def __init__(
        self,
        receivers: Mapping[str, Collection[str]] = PATH_TRAVERSAL_RECEIVERS,
        bare: Collection[str] = PATH_TRAVERSAL_METHODS,
    ) -> None:
        super().__init__(receivers, bare)


class AvoidUnsafeFsAccessRule(_DynamicPathRule):
    """Flag common fs reads and writes on dynamic paths."""

    name = "avoid-unsafe-fs-access"
    description = "Avoid file system access with dynamically built paths"
    severity = Severity.WARNING
    category = Category.PATH_TRAVERSAL
    message_prefix = "Unsafe file system access"

    def __init__(
        self,
        receivers: Mapping[str, Collection[str]] = UNSAFE_FS_RECEIVERS,
        bare: Collection[str] = UNSAFE_FS_METHODS,
    ) -> None:
        super().__init__(receivers, bare)


def get_rules() -> List[Rule]:
    return [DetectPathTraversalRule(), AvoidUnsafeFsAccessRule()]
