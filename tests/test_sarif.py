import json

from jsast.registry import RuleRegistry
from jsast.result import ReportIssue
from jsast.sarif import build_sarif, write_sarif
from jsast.severity import Severity


def _issue():
    return ReportIssue(
        rule="no-eval",
        message="Avoid using eval",
        line=3,
        column=4,
        filename="src/app.js",
        severity=Severity.ERROR,
    )


def test_build_sarif_document():
    registry = RuleRegistry.from_names(["no-eval", "no-var"])

    document = build_sarif([_issue()], registry.rules)

    assert document["version"] == "2.1.0"
    run = document["runs"][0]
    driver = run["tool"]["driver"]
    assert driver["name"] == "jsast"
    assert [rule["id"] for rule in driver["rules"]] == ["no-eval", "no-var"]
    assert driver["rules"][1]["defaultConfiguration"]["level"] == "warning"
    assert driver["rules"][0]["properties"]["category"] == "xss"

    result = run["results"][0]
    assert result["ruleId"] == "no-eval"
    assert result["level"] == "error"
    location = result["locations"][0]["physicalLocation"]
    assert location["artifactLocation"]["uri"] == "src/app.js"
    assert location["region"]["startLine"] == 3
    assert location["region"]["startColumn"] == 5


def test_write_sarif_creates_parent_directories(tmp_path):
    target = tmp_path / "reports" / "project-sarif.json"

    write_sarif(target, [_issue()], RuleRegistry.from_names(["no-eval"]).rules)

    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["runs"][0]["results"][0]["message"]["text"] == "Avoid using eval"
