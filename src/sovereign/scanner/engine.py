"""Scan engine — applies the pattern registry across a file-map."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from sovereign.cleaner.manifest import PackageManifest, locate
from sovereign.scanner.classifier import (
    is_manifest_candidate,
    is_source_file,
    matches_removal_marker,
)
from sovereign.scanner.filemap import FileMap, decode, ensure_file_map
from sovereign.scanner.models import (
    ScanIssue,
    ScanResult,
    Severity,
    SeveritySummary,
)
from sovereign.scanner.patterns import DEFAULT_REGISTRY, PatternDefinition, Registry
from sovereign.scanner.scoring import calculate_score, grade_for

logger = logging.getLogger(__name__)


class ScanEngine:
    """Detects proprietary signatures in an in-memory file-map."""

    def __init__(self, registry: Registry | None = None) -> None:
        self._registry = registry or DEFAULT_REGISTRY

    @property
    def registry(self) -> Registry:
        return self._registry

    def scan(self, file_map: FileMap) -> ScanResult:
        """Scan every file and return issues, score and grade."""
        ensure_file_map(file_map)
        result = ScanResult()
        issues: list[ScanIssue] = []

        for path, raw in file_map.items():
            result.total_files_scanned += 1

            if matches_removal_marker(path, self._registry.file_markers):
                result.proprietary_files.append(path)
                continue
            if not is_source_file(path):
                continue

            content = decode(raw)
            if content is None:
                logger.debug("Skipping binary or undecodable file %s", path)
                continue

            lines = content.split("\n")
            result.total_lines += len(lines)
            issues.extend(self._analyze_file(path, content, lines))

        result.issues = _finalize(issues)
        result.summary = SeveritySummary.from_issues(result.issues)
        result.score = calculate_score(result.issues, len(result.proprietary_files))
        result.grade = grade_for(result.score)
        logger.debug(
            "Scanned %d files, %d issues, score %d",
            result.total_files_scanned,
            len(result.issues),
            result.score,
        )
        return result

    def _analyze_file(
        self, path: str, content: str, lines: list[str]
    ) -> list[ScanIssue]:
        findings: list[ScanIssue] = []
        patterns = list(self._registry.content_patterns)
        telemetry = self._registry.telemetry_pattern
        if telemetry is not None:
            patterns.append(telemetry)

        for pattern in patterns:
            if pattern.multiline:
                match = pattern.regex.search(content)
                if match:
                    # Whole-file patterns are anchored at the top of the file
                    findings.append(_issue(path, 1, 1, match.group(0), pattern))
                continue
            findings.extend(_scan_lines(path, lines, pattern))

        if is_manifest_candidate(path):
            findings.extend(self._scan_manifest(path, content))
        return findings

    def _scan_manifest(self, path: str, content: str) -> list[ScanIssue]:
        try:
            manifest = PackageManifest.parse(content)
        except ValueError as e:
            logger.debug("Not scanning dependencies of %s: %s", path, e)
            return []
        if manifest is None:
            return []

        findings: list[ScanIssue] = []
        for _section, name, version in manifest.disallowed(
            self._registry.disallowed_packages
        ):
            line, column = locate(content, name)
            findings.append(
                ScanIssue(
                    file=path,
                    line=line,
                    column=column,
                    matched_text=f'"{name}": "{version}"',
                    severity=Severity.MAJOR,
                    pattern_name="proprietary dependency",
                    suggestion=f'Remove "{name}" from the manifest',
                    message=f"proprietary dependency {name}",
                )
            )
        return findings


def scan(file_map: FileMap, registry: Registry | None = None) -> ScanResult:
    """Scan a file-map with the given (or default) registry."""
    return ScanEngine(registry).scan(file_map)


def _scan_lines(
    path: str, lines: list[str], pattern: PatternDefinition
) -> Iterator[ScanIssue]:
    regex = pattern.regex
    for line_num, line in enumerate(lines, start=1):
        if pattern.global_match:
            matches: Iterator[re.Match[str]] = regex.finditer(line)
        else:
            first = regex.search(line)
            matches = iter([first] if first else [])
        for match in matches:
            text = match.group(0)
            indent = len(text) - len(text.lstrip())
            yield _issue(
                path, line_num, match.start() + indent + 1, text.strip(), pattern
            )


def _issue(
    path: str, line: int, column: int, text: str, pattern: PatternDefinition
) -> ScanIssue:
    return ScanIssue(
        file=path,
        line=line,
        column=column,
        matched_text=text,
        severity=pattern.severity,
        pattern_name=pattern.name,
        suggestion=pattern.suggestion,
    )


def _finalize(issues: list[ScanIssue]) -> list[ScanIssue]:
    """Collapse duplicate (file, line, message) issues, then sort."""
    seen: set[tuple[str, int, str]] = set()
    unique: list[ScanIssue] = []
    for issue in issues:
        if issue.key in seen:
            continue
        seen.add(issue.key)
        unique.append(issue)
    return sorted(unique, key=lambda i: (i.severity.rank, i.file))
