"""Detect weak hashing algorithms and non-cryptographic randomness."""

from __future__ import annotations

from typing import Collection, List

from tree_sitter import Node

from jsast.result import RuleFinding
from jsast.severity import Severity
from jsast.utils.nodes import NodeKind, call_arguments, kind_of, string_value
from jsast.utils.patterns import call_target

from . import BaseRule, Category, Rule

WEAK_HASH_ALGORITHMS = frozenset({"md5", "sha1", "md4", "ripemd160"})


class AvoidWeakCryptoRule(BaseRule):
    """Flag ``crypto.createHash`` with a broken algorithm name."""

    name = "avoid-weak-crypto"
    description = "Avoid weak cryptographic hash algorithms"
    severity = Severity.WARNING
    category = Category.INSECURE_RANDOMNESS

    def __init__(self, weak_algorithms: Collection[str] = WEAK_HASH_ALGORITHMS) -> None:
        self._weak = frozenset(algorithm.lower() for algorithm in weak_algorithms)

    def check(self, node: Node) -> List[RuleFinding]:
        if kind_of(node) is not NodeKind.CALL:
            return []
        target = call_target(node)
        if target is None or target.receiver != "crypto" or target.method != "createHash":
            return []
        arguments = call_arguments(node)
        # Only literal algorithm names can be checked statically.
        if not arguments or kind_of(arguments[0]) is not NodeKind.STRING:
            return []
        algorithm = string_value(arguments[0])
        if algorithm.lower() not in self._weak:
            return []
        return [
            self.finding(
                node,
                f"Weak cryptographic algorithm: {algorithm.lower()} is not secure. "
                "Use sha256, sha384, or sha512 instead for better security",
            )
        ]


class UseSecureRandomRule(BaseRule):
    """Flag ``Math.random`` calls."""

    name = "use-secure-random"
    description = "Use cryptographically secure random number generation"
    severity = Severity.WARNING
    category = Category.INSECURE_RANDOMNESS

    def check(self, node: Node) -> List[RuleFinding]:
        if kind_of(node) is not NodeKind.CALL:
            return []
        target = call_target(node)
        if target is None or target.receiver != "Math" or target.method != "random":
            return []
        return [
            self.finding(
                node,
                "Insecure random number generation: Math.random() is not cryptographically secure. "
                "Use crypto.randomBytes(), crypto.randomInt(), or crypto.randomUUID() for "
                "security-sensitive operations",
            )
        ]


def get_rules() -> List[Rule]:
    return [AvoidWeakCryptoRule(), UseSecureRandomRule()]
