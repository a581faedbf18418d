"""Core result data structures for the analyzer."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Tuple

from .severity import Severity

if TYPE_CHECKING:  # pragma: no cover
    from .rules import Rule

SEVERITY_ORDER: Sequence[Severity] = (
    Severity.ERROR,
    Severity.WARNING,
    Severity.NOTE,
)


@dataclass(frozen=True)
class RuleFinding:
    """What a rule observed at one node, before identity is attached.

    ``column`` is a byte offset into the line until ``IssueCollector`` stamps
    the finding.
    """

    message: str
    line: int
    column: int


@dataclass(frozen=True)
class ReportIssue:
    """A finding stamped with the rule, severity and file that produced it."""

    rule: str
    message: str
    line: int
    column: int
    filename: str
    severity: Severity

    def to_dict(self) -> Dict[str, object]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


class IssueCollector:
    """Accumulate rule findings for one file in dispatch order.

    When the file's ``source`` bytes are given, byte columns are converted to
    character columns. Line offsets are computed once, on the first
    finding.
    """

    def __init__(self, filename: str, source: bytes = b"") -> None:
        self.filename = filename
        self.source = source
        self._issues: List[ReportIssue] = []
        self._line_starts: Optional[List[int]] = None

    def add(self, rule: "Rule", findings: Iterable[RuleFinding]) -> None:
        for finding in findings:
            self._issues.append(
                ReportIssue(
                    rule=rule.name,
                    message=finding.message,
                    line=finding.line,
                    column=self.character_column(finding.line, finding.column),
                    filename=self.filename,
                    severity=rule.severity,
                )
            )

    def character_column(self, line: int, byte_column: int) -> int:
        if not self.source or byte_column == 0:
            return byte_column
        if self._line_starts is None:
            self._line_starts = [0]
            newline = self.source.find(b"\n")
            while newline != -1:
                self._line_starts.append(newline + 1)
                newline = self.source.find(b"\n", newline + 1)
        if not 0 < line <= len(self._line_starts):
            return byte_column
        start = self._line_starts[line - 1]
        prefix = self.source[start:start + byte_column]
        if prefix.isascii():
            return byte_column
        return len(prefix.decode("utf-8", errors="replace"))

    @property
    def issues(self) -> List[ReportIssue]:
        return list(self._issues)

    def __len__(self) -> int:
        return len(self._issues)


@dataclass
class FileResult:
    """Outcome of analyzing a single file."""

    filename: str
    issues: List[ReportIssue] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def parsed(self) -> bool:
        return self.error is None


@dataclass
class Summary:
    """Aggregate issue counts by severity."""

    error: int = 0
    warning: int = 0
    note: int = 0

    def increment(self, severity: Severity) -> None:
        attr = severity.value
        setattr(self, attr, getattr(self, attr) + 1)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def as_rows(self) -> List[Tuple[str, int]]:
        """Return severity/count pairs ordered for reporting."""

        return [(severity.value, getattr(self, severity.value)) for severity in SEVERITY_ORDER]

    @property
    def total(self) -> int:
        return sum(getattr(self, severity.value) for severity in SEVERITY_ORDER)


@dataclass
class ScanResult:
    """Bundle per-file results with their severity summary."""

    summary: Summary = field(default_factory=Summary)
    files: List[FileResult] = field(default_factory=list)

    def add_file(self, file_result: FileResult) -> None:
        for issue in file_result.issues:
            self.summary.increment(issue.severity)
        self.files.append(file_result)

    @property
    def issues(self) -> List[ReportIssue]:
        return [issue for file_result in self.files for issue in file_result.issues]

    @property
    def files_scanned(self) -> int:
        return len(self.files)

    @property
    def parse_failures(self) -> List[FileResult]:
        return [file_result for file_result in self.files if not file_result.parsed]

    @property
    def complete(self) -> bool:
        """False when files were given but none of them could be parsed."""

        return not self.files or len(self.parse_failures) < len(self.files)

    @property
    def passed(self) -> bool:
        return self.complete and self.summary.error == 0 and self.summary.warning == 0

    @property
    def status(self) -> str:
        if not self.complete:
            return "INCOMPLETE"
        return "PASS" if self.passed else "FAIL"

    def by_file(self) -> Dict[str, List[ReportIssue]]:
        """Group issues by filename, keeping files without issues out."""

        grouped: Dict[str, List[ReportIssue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.filename, []).append(issue)
        return grouped

    def to_dict(self) -> Dict[str, object]:
        return {
            "summary": self.summary.to_dict(),
            "files_scanned": self.files_scanned,
            "parse_failures": [
                {"filename": failure.filename, "error": failure.error} for failure in self.parse_failures
            ],
            "issues": [issue.to_dict() for issue in self.issues],
            "status": self.status,
            "passed": self.passed,
        }

    def exit_code(self) -> int:
        if self.summary.error > 0:
            return 2
        if self.summary.warning > 0:
            return 1
        if not self.complete:
            return 3
        return 0


def format_summary_table(result: ScanResult) -> str:
    """Create a human-readable summary table for console output."""

    lines: List[str] = []
    lines.append("Scan Summary")
    lines.append("=" * 40)
    header = f"{'Severity':<10} | {'Count':>5}"
    lines.append(header)
    lines.append("-" * len(header))
    for severity, count in result.summary.as_rows():
        lines.append(f"{severity:<10} | {count:>5}")
    lines.append("-" * len(header))
    lines.append(f"Status    : {result.status}")
    lines.append(f"Issues    : {result.summary.total}")
    lines.append(f"Files     : {result.files_scanned}")
    failures = result.parse_failures
    if failures:
        lines.append(f"Unparsed  : {len(failures)}")
        for failure in failures:
            lines.append(f"  {failure.filename}: {failure.error}")
    return "\n".join(lines)


def format_issue_report(result: ScanResult) -> str:
    """Render issues grouped by file."""

    grouped = result.by_file()
    if not grouped:
        return "No issues found"

    lines: List[str] = ["Issues found:", "=" * 60]
    for filename, issues in grouped.items():
        lines.append(f"File: {filename}")
        lines.append("-" * 60)
        for issue in issues:
            lines.append(f"  [{issue.rule}] ({issue.severity.value}) {issue.message}")
            lines.append(f"     Location: Line {issue.line}, Column {issue.column}")
        lines.append("")
    lines.append(f"Total: {result.summary.total} issues found")
    return "\n".join(lines)
