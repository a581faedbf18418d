from typing import Callable, List

import pytest

from jsast.analyzer import StaticAnalyzer
from jsast.registry import RuleRegistry
from jsast.result import ReportIssue


@pytest.fixture
def scan() -> Callable[..., List[ReportIssue]]:
    """Run the named rules over a source snippet."""

    def _scan(code: str, *rule_names: str, filename: str = "test.js") -> List[ReportIssue]:
        registry = RuleRegistry.from_names(rule_names)
        assert len(registry) == len(rule_names)
        return StaticAnalyzer(registry).analyze_source(filename, code)

    return _scan
