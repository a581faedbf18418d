import pytest

from jsast.registry import RuleRegistry, builtin_rules
from jsast.rules import Category
from jsast.rules.code_quality import NoVarRule
from jsast.severity import Severity


def test_builtin_rules_have_unique_names_and_metadata():
    rules = builtin_rules()
    names = [rule.name for rule in rules]

    assert len(names) == len(set(names)) == 18
    for rule in rules:
        assert rule.description
        assert isinstance(rule.severity, Severity)
        assert isinstance(rule.category, Category)


def test_register_by_name_ignores_unknown_rules(caplog):
    registry = RuleRegistry()

    registered = registry.register_by_name(["no-eval", "does-not-exist", "no-var", "no-eval"])

    assert registered == ["no-eval", "no-var"]
    assert registry.names == ["no-eval", "no-var"]
    assert "does-not-exist" in caplog.text


def test_register_rejects_duplicates():
    registry = RuleRegistry([NoVarRule()])

    with pytest.raises(ValueError):
        registry.register(NoVarRule())


def test_registries_are_independent():
    first = RuleRegistry.from_names(["no-var"])
    second = RuleRegistry.with_builtin_rules()

    assert len(first) == 1
    assert "no-var" in first
    assert "no-eval" not in first
    assert len(second) == 18
    assert first.get("no-var") is not second.get("no-var")


def test_register_builtin_keeps_existing_entries():
    custom = NoVarRule()
    registry = RuleRegistry([custom])

    registry.register_builtin()

    assert registry.get("no-var") is custom
    assert registry.names[0] == "no-var"
    assert len(registry) == 18
