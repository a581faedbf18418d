"""Analyzer facade: parse, traverse and aggregate for one or many files."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .parser import ParseError, parse_source
from .registry import RuleRegistry
from .result import FileResult, ReportIssue, ScanResult
from .rules import Rule
from .traverser import traverse_and_check
from .utils.fileio import read_text_file

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class StaticAnalyzer:
    """Run a fixed rule set over source text or files."""

    def __init__(self, rules: Union[RuleRegistry, Iterable[Rule]]) -> None:
        self.rules: List[Rule] = list(rules)

    def analyze_source(
        self,
        filename: str,
        code: str,
        *,
        jsx: Optional[bool] = None,
        typescript: Optional[bool] = None,
    ) -> List[ReportIssue]:
        """Return the issues found in ``code``; a parse failure yields no issues."""

        return self._analyze(filename, code, jsx=jsx, typescript=typescript).issues

    def analyze_file(self, path: PathLike) -> FileResult:
        filename = str(path)
        try:
            code = read_text_file(Path(path))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read %s: %s", filename, exc)
            return FileResult(filename=filename, error=f"unreadable: {exc}")
        return self._analyze(filename, code)

    def analyze_files(self, paths: Sequence[PathLike], max_workers: Optional[int] = None) -> ScanResult:
        """Analyze ``paths`` concurrently; results keep the input order."""

        result = ScanResult()
        if not paths:
            return result
        if max_workers == 1 or len(paths) == 1:
            file_results = [self.analyze_file(path) for path in paths]
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                file_results = list(executor.map(self.analyze_file, paths))
        for file_result in file_results:
            result.add_file(file_result)
        return result

    def _analyze(
        self,
        filename: str,
        code: str,
        *,
        jsx: Optional[bool] = None,
        typescript: Optional[bool] = None,
    ) -> FileResult:
        try:
            root = parse_source(code, filename, jsx=jsx, typescript=typescript)
        except ParseError as exc:
            logger.warning("Failed to parse %s: %s", filename, exc.reason)
            return FileResult(filename=filename, error=exc.reason)
        issues = traverse_and_check(root, self.rules, filename, code.encode("utf-8"))
        logger.debug("Analyzed %s: %d issue(s)", filename, len(issues))
        return FileResult(filename=filename, issues=issues)
