"""Detect command execution through ``child_process`` with dynamic input."""

from __future__ import annotations

from typing import Collection, Dict, FrozenSet, List, Optional

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import NodeKind, call_arguments, find_property, kind_of, string_value, text_of
from jsast.utils.patterns import is_dynamic_string, match_call

from . import BaseRule, Category, Rule

CHILD_PROCESS_RECEIVERS = ("child_process", "require('child_process')")
EXEC_METHODS = frozenset({"exec", "execSync", "execFile", "execFileSync"})
BARE_EXEC_METHODS = frozenset({"exec", "execSync"})
SPAWN_METHODS = frozenset({"spawn", "spawnSync"})
SHELL_METHODS = EXEC_METHODS | SPAWN_METHODS


def _receivers(methods: Collection[str]) -> Dict[str, FrozenSet[str]]:
    return {receiver: frozenset(methods) for receiver in CHILD_PROCESS_RECEIVERS}


def shell_option_enabled(node: Optional[Node], allow_string: bool = True) -> bool:
    """Return True when an options object sets ``shell`` to ``true`` or a shell path."""

    if kind_of(node) is not NodeKind.OBJECT:
        return False
    prop = find_property(node, "shell")
    if prop is None or prop.value is None:
        return False
    kind = kind_of(prop.value)
    if kind is NodeKind.BOOLEAN:
        return text_of(prop.value) == "true"
    if kind is NodeKind.STRING and allow_string:
        return bool(string_value(prop.value))
    return False


class CommandInjectionRule(BaseRule):
    """Flag exec-family calls whose command string is built at runtime."""

    name = "command-injection"
    description = "Detect potential command injection vulnerabilities in child_process calls"
    severity = Severity.ERROR
    category = Category.COMMAND_INJECTION

    def __init__(self, methods: Collection[str] = EXEC_METHODS, bare: Collection[str] = BARE_EXEC_METHODS) -> None:
        self._receivers = _receivers(methods)
        self._bare = frozenset(bare)

    def check(self, node: Node) -> List[RuleFinding]:
        target = match_call(node, self._receivers, self._bare)
        if target is None:
            return []
        arguments = call_arguments(node)
        if not arguments or not is_dynamic_string(arguments[0]):
            return []
        return [
            self.finding(
                node,
                f"Unsafe command execution: {target.qualified} uses dynamically concatenated "
                "command string, vulnerable to command injection",
            )
        ]


class NoUnsafeSpawnRule(BaseRule):
    """Flag spawn calls with a dynamic command or ``shell: true``."""

    name = "no-unsafe-spawn"
    description = "Detect unsafe usage of spawn and spawnSync"
    severity = Severity.ERROR
    category = Category.COMMAND_INJECTION

    def __init__(self, methods: Collection[str] = SPAWN_METHODS) -> None:
        self._receivers = _receivers(methods)
        self._bare = frozenset(methods)

    def check(self, node: Node) -> List[RuleFinding]:
        target = match_call(node, self._receivers, self._bare)
        if target is None:
            return []
        arguments = call_arguments(node)
        findings: List[RuleFinding] = []
        if arguments and is_dynamic_string(arguments[0]):
            findings.append(
                self.finding(
                    node,
                    f"Unsafe command execution: {target.qualified} uses dynamically concatenated "
                    "command string, vulnerable to command injection",
                )
            )
        if len(arguments) > 1 and shell_option_enabled(arguments[1], allow_string=False):
            findings.append(
                self.finding(
                    node,
                    f"Unsafe command execution: {target.qualified} uses shell: true option, "
                    "which may lead to command injection vulnerabilities",
                )
            )
        return findings


class NoUnsafeShellRule(BaseRule):
    """Flag any child_process call that enables shell interpretation."""

    name = "no-unsafe-shell"
    description = "Detect child_process calls that enable the shell option"
    severity = Severity.WARNING
    category = Category.COMMAND_INJECTION

    def __init__(self, methods: Collection[str] = SHELL_METHODS) -> None:
        self._receivers = _receivers(methods)
        self._bare = frozenset(methods)

    def check(self, node: Node) -> List[RuleFinding]:
        target = match_call(node, self._receivers, self._bare)
        if target is None:
            return []
        if not any(shell_option_enabled(argument) for argument in call_arguments(node)):
            return []
        return [
            self.finding(
                node,
                f"Unsafe command execution: {target.qualified} uses shell option, which enables "
                "shell interpretation and may lead to command injection vulnerabilities",
            )
        ]


def get_rules() -> List[Rule]:
    return [CommandInjectionRule(), NoUnsafeSpawnRule(), NoUnsafeShellRule()]
