import pytest

from jsast.config import ConfigError, find_default_rules_file, load_rule_config


def test_only_value_one_enables_rules(tmp_path):
    rules = tmp_path / "rules.json"
    rules.write_text('{"rules": {"no-eval": 1, "no-var": 0, "unknown-rule": 1, "no-console-log": true}}', encoding="utf-8")

    assert load_rule_config(rules) == ["no-eval", "unknown-rule"]


def test_yaml_rules_file(tmp_path):
    rules = tmp_path / "rules.yaml"
    rules.write_text("rules:\n  no-var: 1\n  avoid-raw-sql: 0\n", encoding="utf-8")

    assert load_rule_config(rules) == ["no-var"]


@pytest.mark.parametrize(
    "content, message",
    [
        ("{not json", "Invalid JSON file"),
        ('{"other": {}}', "Missing or invalid 'rules' field"),
        ('{"rules": ["no-var"]}', "Missing or invalid 'rules' field"),
        ("[1, 2]", "is not a mapping"),
    ],
)
def test_invalid_rules_files(tmp_path, content, message):
    rules = tmp_path / "rules.json"
    rules.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_rule_config(rules)

    assert message in str(excinfo.value)


def test_missing_rules_file(tmp_path):
    with pytest.raises(ConfigError):
        load_rule_config(tmp_path / "absent.json")


def test_find_default_rules_file(tmp_path):
    assert find_default_rules_file(tmp_path) is None

    default = tmp_path / "jsast.rules.json"
    default.write_text('{"rules": {}}', encoding="utf-8")

    assert find_default_rules_file(tmp_path) == default
