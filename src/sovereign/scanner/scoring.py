"""Sovereignty score and letter grade."""

from __future__ import annotations

from collections.abc import Iterable

from sovereign.scanner.models import ScanIssue, Severity

SEVERITY_PENALTIES = {
    Severity.CRITICAL: 10,
    Severity.MAJOR: 5,
    Severity.MINOR: 1,
}
PROPRIETARY_FILE_PENALTY = 15

# (minimum score, grade), highest first
GRADE_TABLE: tuple[tuple[int, str], ...] = (
    (95, "A+"),
    (90, "A"),
    (85, "A-"),
    (80, "B+"),
    (75, "B"),
    (70, "B-"),
    (65, "C+"),
    (60, "C"),
    (55, "C-"),
    (50, "D"),
)
FAILING_GRADE = "F"


def calculate_score(issues: Iterable[ScanIssue], proprietary_file_count: int) -> int:
    """Subtract weighted penalties from 100, clamped to [0, 100]."""
    score = 100
    for issue in issues:
        score -= SEVERITY_PENALTIES[issue.severity]
    score -= proprietary_file_count * PROPRIETARY_FILE_PENALTY
    return max(0, min(100, score))


def grade_for(score: int) -> str:
    for minimum, grade in GRADE_TABLE:
        if score >= minimum:
            return grade
    return FAILING_GRADE


def passes_threshold(score: int, min_score: int) -> bool:
    """Return True if the score clears the build gate."""
    return score >= min_score
