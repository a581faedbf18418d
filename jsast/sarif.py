"""SARIF 2.1.0 report generation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from . import __version__
from .result import ReportIssue
from .rules import Rule

SARIF_SCHEMA = "https://json.schemastore.org/sarif-2.1.0.json"
SARIF_VERSION = "2.1.0"
TOOL_NAME = "jsast"
TOOL_URI = "https://github.com/belos-street/jsast"


def _rule_descriptor(rule: Rule) -> Dict[str, Any]:
    return {
        "id": rule.name,
        "name": rule.name,
        "shortDescription": {"text": rule.description},
        "fullDescription": {"text": rule.description},
        "defaultConfiguration": {"level": rule.severity.sarif_level},
        "properties": {"category": rule.category.value},
    }


def _result(issue: ReportIssue) -> Dict[str, Any]:
    # SARIF columns are 1-based.
    column = issue.column + 1
    return {
        "ruleId": issue.rule,
        "level": issue.severity.sarif_level,
        "message": {"text": issue.message},
        "locations": [
            {
                "physicalLocation": {
                    "artifactLocation": {"uri": Path(issue.filename).as_posix()},
                    "region": {
                        "startLine": issue.line,
                        "startColumn": column,
                        "endLine": issue.line,
                        "endColumn": column,
                    },
                }
            }
        ],
    }


def build_sarif(issues: Iterable[ReportIssue], rules: Iterable[Rule]) -> Dict[str, Any]:
    """Assemble a SARIF log with one run for ``issues``."""

    results: List[Dict[str, Any]] = [_result(issue) for issue in issues]
    return {
        "$schema": SARIF_SCHEMA,
        "version": SARIF_VERSION,
        "runs": [
            {
                "tool": {
                    "driver": {
                        "name": TOOL_NAME,
                        "version": __version__,
                        "informationUri": TOOL_URI,
                        "rules": [_rule_descriptor(rule) for rule in rules],
                    }
                },
                "results": results,
            }
        ],
    }


def write_sarif(path: Path, issues: Iterable[ReportIssue], rules: Iterable[Rule]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(build_sarif(issues, rules), indent=2), encoding="utf-8")
    return path
