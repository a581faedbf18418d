"""Command-line entry point for the jsast scanner."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from .analyzer import StaticAnalyzer
from .config import ConfigError, find_default_rules_file, load_rule_config
from .registry import RuleRegistry, builtin_rules
from .result import ScanResult, format_issue_report, format_summary_table
from .sarif import build_sarif, write_sarif
from .utils.code import DEFAULT_EXCLUDES, DEFAULT_EXTENSIONS, iter_code_files

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsast",
        description="Static analysis security scanner for JavaScript and TypeScript",
    )
    parser.add_argument(
        "--project",
        "-p",
        default=".",
        help="Project directory to scan (defaults to the current directory).",
    )
    parser.add_argument(
        "--rules",
        "-r",
        dest="rules_path",
        default=None,
        help="Rules file ({\"rules\": {\"name\": 0|1}}). Defaults to jsast.rules.json in the project, "
        "or every built-in rule.",
    )
    parser.add_argument(
        "--format",
        choices=["console", "json", "sarif"],
        default="console",
        help="Report format (defaults to console).",
    )
    parser.add_argument(
        "--out",
        "--output",
        dest="output_path",
        type=str,
        default=None,
        help="File or existing directory to write the json/sarif report to.",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Directory name to skip, in addition to node_modules and .git (repeatable).",
    )
    parser.add_argument(
        "--ext",
        dest="extensions",
        action="append",
        default=[],
        help="Extra file extension to scan, e.g. .vue (repeatable).",
    )
    parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=None,
        help="Number of worker threads (defaults to the executor's choice).",
    )
    parser.add_argument(
        "--list-rules",
        action="store_true",
        help="List the built-in rules and exit.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def load_registry(project: Path, rules_path: Optional[str]) -> RuleRegistry:
    config_path = Path(rules_path) if rules_path else find_default_rules_file(project)
    if config_path is None:
        logger.debug("No rules file found, enabling every built-in rule")
        return RuleRegistry.with_builtin_rules()
    try:
        names = load_rule_config(config_path)
    except ConfigError as exc:
        raise SystemExit(f"Failed to load rules: {exc}") from exc
    return RuleRegistry.from_names(names)


def run_scan(
    project: Path,
    registry: RuleRegistry,
    extensions: Sequence[str] = (),
    excludes: Sequence[str] = (),
    jobs: Optional[int] = None,
) -> ScanResult:
    if not project.exists():
        raise SystemExit(f"Project path does not exist: {project}")
    if not project.is_dir():
        raise SystemExit(f"Project path is not a directory: {project}")
    files = iter_code_files(
        project,
        extensions=tuple(DEFAULT_EXTENSIONS) + tuple(extensions),
        excludes=tuple(DEFAULT_EXCLUDES) + tuple(excludes),
    )
    logger.debug("Scanning %d file(s) with %d rule(s)", len(files), len(registry))
    return StaticAnalyzer(registry).analyze_files(files, max_workers=jobs)


def _resolve_output(output_path: str, project: Path, report_format: str) -> Path:
    target = Path(output_path)
    if target.is_dir():
        return target / f"{project.resolve().name}-{report_format}.json"
    return target


def write_output(
    result: ScanResult,
    registry: RuleRegistry,
    project: Path,
    output_path: Optional[str],
    report_format: str,
) -> None:
    print(format_summary_table(result))

    if report_format == "console":
        print()
        print(format_issue_report(result))
        return

    if report_format == "sarif":
        if output_path:
            output_file = write_sarif(
                _resolve_output(output_path, project, report_format), result.issues, registry.rules
            )
            print(f"\nReport written to {output_file}")
            return
        document = build_sarif(result.issues, registry.rules)
    else:
        document = result.to_dict()
    payload = json.dumps(document, indent=2)
    if output_path:
        output_file = _resolve_output(output_path, project, report_format)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding="utf-8")
        print(f"\nReport written to {output_file}")
    else:
        print(f"\n{report_format.upper()} Report")
        print(payload)


def list_rules() -> None:
    for rule in builtin_rules():
        print(f"{rule.name:<34} {rule.severity.value:<8} {rule.category.value:<25} {rule.description}")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_rules:
        list_rules()
        return 0

    project = Path(args.project)
    registry = load_registry(project, args.rules_path)
    result = run_scan(project, registry, args.extensions, args.exclude, args.jobs)
    write_output(result, registry, project, args.output_path, args.format)
    return result.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
