"""Report assembly — a pure projection of scan and clean results."""

from __future__ import annotations

from dataclasses import dataclass, field

from sovereign.scanner.models import (
    CleanChange,
    CleanResult,
    ScanIssue,
    ScanResult,
    Severity,
    SeveritySummary,
)

_RULE = "=" * 60
_THIN_RULE = "-" * 60
_MATCH_PREVIEW = 50


@dataclass
class Report:
    """Everything a caller needs to present one liberation run."""

    summary: SeveritySummary
    score_before: int
    grade_before: str
    total_files_scanned: int
    files_with_issues: int
    issues: list[ScanIssue] = field(default_factory=list)
    proprietary_files: list[str] = field(default_factory=list)
    score_after: int | None = None
    grade_after: str | None = None
    files_processed: int = 0
    files_cleaned: int = 0
    files_removed: int = 0
    cleaned_ratio: float | None = None
    lines_removed: int = 0
    changes: list[CleanChange] = field(default_factory=list)
    validation_issues: int = 0

    def to_dict(self) -> dict:
        return {
            "summary": self.summary.to_dict(),
            "score_before": self.score_before,
            "grade_before": self.grade_before,
            "score_after": self.score_after,
            "grade_after": self.grade_after,
            "total_files_scanned": self.total_files_scanned,
            "files_with_issues": self.files_with_issues,
            "issues": [issue.to_dict() for issue in self.issues],
            "proprietary_files": list(self.proprietary_files),
            "files_processed": self.files_processed,
            "files_cleaned": self.files_cleaned,
            "files_removed": self.files_removed,
            "cleaned_ratio": self.cleaned_ratio,
            "lines_removed": self.lines_removed,
            "changes": [change.to_dict() for change in self.changes],
            "validation_issues": self.validation_issues,
        }


def assemble(
    scan_result: ScanResult,
    clean_result: CleanResult | None = None,
    rescan: ScanResult | None = None,
    validation: list[ScanIssue] | None = None,
) -> Report:
    """Project results into a :class:`Report`.

    ``rescan`` is the caller's scan of the cleaned output; without it the
    "after" score stays unset. Clean fields stay empty without
    ``clean_result``.
    """
    report = Report(
        summary=scan_result.summary,
        score_before=scan_result.score,
        grade_before=scan_result.grade,
        total_files_scanned=scan_result.total_files_scanned,
        files_with_issues=scan_result.files_with_issues,
        issues=list(scan_result.issues),
        proprietary_files=list(scan_result.proprietary_files),
        validation_issues=len(validation) if validation else 0,
    )
    if rescan is not None:
        report.score_after = rescan.score
        report.grade_after = rescan.grade
    if clean_result is not None:
        report.files_processed = clean_result.files_processed
        report.files_cleaned = clean_result.files_cleaned
        report.files_removed = clean_result.files_removed
        report.lines_removed = clean_result.lines_removed
        report.changes = list(clean_result.changes)
        if clean_result.files_processed:
            report.cleaned_ratio = round(
                100 * clean_result.files_cleaned / clean_result.files_processed, 1
            )
        else:
            report.cleaned_ratio = 0.0
    return report


def format_text(report: Report) -> str:
    """Render a plain-text summary of a report."""
    lines = [
        _RULE,
        "SOVEREIGNTY REPORT".center(60).rstrip(),
        _RULE,
        "",
        f"Score: {report.score_before}/100 (Grade: {report.grade_before})",
    ]
    if report.score_after is not None:
        lines.append(
            f"After cleaning: {report.score_after}/100 (Grade: {report.grade_after})"
        )
    lines += [
        "",
        f"Files scanned: {report.total_files_scanned}",
        f"Files with issues: {report.files_with_issues}",
        f"Proprietary files: {len(report.proprietary_files)}",
        "",
        _THIN_RULE,
        f"Critical: {report.summary.critical}",
        f"Major:    {report.summary.major}",
        f"Minor:    {report.summary.minor}",
        "",
    ]

    if report.issues:
        lines += [_THIN_RULE, "ISSUES", ""]
        for severity in Severity:
            group = [i for i in report.issues if i.severity == severity]
            if not group:
                continue
            lines.append(f"{severity.value.upper()} ({len(group)})")
            lines.append("")
            for issue in group:
                match = issue.matched_text
                if len(match) > _MATCH_PREVIEW:
                    match = match[:_MATCH_PREVIEW] + "..."
                lines.append(f"  {issue.file}:{issue.line}:{issue.column}")
                lines.append(f"     Pattern: {issue.pattern_name}")
                lines.append(f'     Match: "{match}"')
                if issue.suggestion:
                    lines.append(f"     Fix: {issue.suggestion}")
                lines.append("")
    elif not report.proprietary_files:
        lines += ["No proprietary patterns detected.", ""]

    if report.cleaned_ratio is not None:
        lines += [
            _THIN_RULE,
            f"Files cleaned: {report.files_cleaned}/{report.files_processed} "
            f"({report.cleaned_ratio}%)",
            f"Files removed: {report.files_removed}",
            f"Lines removed: {report.lines_removed}",
        ]
        for change in report.changes:
            lines.append(f"  [{change.type.value}] {change.file}: {change.details}")
        lines.append("")

    if report.validation_issues:
        lines += [f"Validation issues: {report.validation_issues}", ""]

    lines.append(_RULE)
    return "\n".join(lines)
