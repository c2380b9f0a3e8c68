"""Scanner data models — issues, scan results and cleaning records."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MAX_MATCHED_TEXT = 80


class Severity(enum.Enum):
    """Issue severity level."""

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"

    @property
    def rank(self) -> int:
        """Sort rank, critical first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.MAJOR: 1,
    Severity.MINOR: 2,
}


class ChangeType(enum.Enum):
    """How a file was altered by the cleaner."""

    REMOVED = "removed"
    MODIFIED = "modified"
    REPLACED = "replaced"


@dataclass(frozen=True)
class ScanIssue:
    """A single located proprietary signature."""

    file: str
    line: int
    column: int
    matched_text: str
    severity: Severity
    pattern_name: str
    suggestion: str = ""
    message: str = ""

    def __post_init__(self) -> None:
        if len(self.matched_text) > MAX_MATCHED_TEXT:
            object.__setattr__(
                self, "matched_text", self.matched_text[:MAX_MATCHED_TEXT]
            )
        if not self.message:
            object.__setattr__(self, "message", self.pattern_name)

    @property
    def key(self) -> tuple[str, int, str]:
        return (self.file, self.line, self.message)

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "matched_text": self.matched_text,
            "severity": self.severity.value,
            "pattern_name": self.pattern_name,
            "suggestion": self.suggestion,
            "message": self.message,
        }


@dataclass
class SeveritySummary:
    critical: int = 0
    major: int = 0
    minor: int = 0

    @classmethod
    def from_issues(cls, issues: list[ScanIssue]) -> SeveritySummary:
        summary = cls()
        for issue in issues:
            if issue.severity == Severity.CRITICAL:
                summary.critical += 1
            elif issue.severity == Severity.MAJOR:
                summary.major += 1
            else:
                summary.minor += 1
        return summary

    def to_dict(self) -> dict[str, int]:
        return {"critical": self.critical, "major": self.major, "minor": self.minor}


@dataclass
class ScanResult:
    """Aggregate result of scanning one file-map snapshot."""

    issues: list[ScanIssue] = field(default_factory=list)
    proprietary_files: list[str] = field(default_factory=list)
    total_files_scanned: int = 0
    total_lines: int = 0
    score: int = 100
    grade: str = "A+"
    summary: SeveritySummary = field(default_factory=SeveritySummary)

    @property
    def files_with_issues(self) -> int:
        return len({issue.file for issue in self.issues})

    def to_dict(self) -> dict:
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "proprietary_files": list(self.proprietary_files),
            "total_files_scanned": self.total_files_scanned,
            "total_lines": self.total_lines,
            "score": self.score,
            "grade": self.grade,
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class CleanChange:
    """One entry per file that was altered or deleted during cleaning."""

    file: str
    type: ChangeType
    details: str

    def to_dict(self) -> dict[str, str]:
        return {"file": self.file, "type": self.type.value, "details": self.details}


@dataclass
class CleanResult:
    """Counters and change log of a cleaning run."""

    files_processed: int = 0
    files_cleaned: int = 0
    files_removed: int = 0
    lines_removed: int = 0
    changes: list[CleanChange] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "files_processed": self.files_processed,
            "files_cleaned": self.files_cleaned,
            "files_removed": self.files_removed,
            "lines_removed": self.lines_removed,
            "changes": [change.to_dict() for change in self.changes],
        }


@dataclass
class CleanOutput:
    """Cleaned file-map plus the result describing how it was produced."""

    files: dict[str, str | bytes]
    result: CleanResult
