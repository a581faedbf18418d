"""Rule-selection configuration."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .utils.fileio import read_yaml_file

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILENAMES = ("jsast.rules.json", "jsast.rules.yaml", "jsast.rules.yml")
YAML_SUFFIXES = (".yaml", ".yml")


class ConfigError(ValueError):
    """Raised when a rules file is missing or malformed."""


def _load_document(path: Path) -> Any:
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return read_yaml_file(path)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML file: {path}") from exc
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON file: {path}") from exc


def load_rule_config(path: Path) -> List[str]:
    """Return the names of rules enabled in the rules file at ``path``.

    The document must look like ``{"rules": {"no-eval": 1, "no-var": 0}}``.
    Only an integer ``1`` enables a rule.
    """

    if not path.is_file():
        raise ConfigError(f"Rules file not found: {path}")
    document = _load_document(path)
    if not isinstance(document, dict):
        raise ConfigError(f"Rules file is not a mapping: {path}")
    rules = document.get("rules")
    if not isinstance(rules, dict):
        raise ConfigError(f"Missing or invalid 'rules' field in: {path}")

    enabled = [
        str(name)
        for name, value in rules.items()
        if isinstance(value, int) and not isinstance(value, bool) and value == 1
    ]
    logger.debug("Enabled rules from %s: %s", path, ", ".join(enabled) or "<none>")
    return enabled


def find_default_rules_file(project: Path) -> Optional[Path]:
    """Return the first default rules file present in ``project``."""

    for filename in DEFAULT_RULES_FILENAMES:
        candidate = project / filename
        if candidate.is_file():
            return candidate
    return None
