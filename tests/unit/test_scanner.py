"""Tests for the scan engine and scoring."""

from __future__ import annotations

import pytest

from sovereign.scanner.engine import ScanEngine, scan
from sovereign.scanner.models import ScanIssue, Severity
from sovereign.scanner.patterns import DEFAULT_REGISTRY, PatternDefinition, Registry
from sovereign.scanner.scoring import (
    calculate_score,
    grade_for,
    passes_threshold,
)


def _issue(severity: Severity, line: int = 1) -> ScanIssue:
    return ScanIssue(
        file="a.ts",
        line=line,
        column=1,
        matched_text="x",
        severity=severity,
        pattern_name="p",
    )


class TestScoring:
    def test_clean_score(self):
        assert calculate_score([], 0) == 100

    def test_weighted_penalties(self):
        issues = [
            _issue(Severity.CRITICAL),
            _issue(Severity.MAJOR),
            _issue(Severity.MINOR),
        ]
        assert calculate_score(issues, 1) == 100 - 10 - 5 - 1 - 15

    def test_clamped_at_zero(self):
        issues = [_issue(Severity.CRITICAL, line=n) for n in range(20)]
        assert calculate_score(issues, 3) == 0

    def test_monotonic_in_issues(self):
        issues: list[ScanIssue] = []
        previous = calculate_score(issues, 0)
        for n, severity in enumerate([Severity.MINOR, Severity.MAJOR] * 6):
            issues.append(_issue(severity, line=n))
            score = calculate_score(issues, 0)
            assert score <= previous
            previous = score

    @pytest.mark.parametrize(
        "score,grade",
        [
            (100, "A+"),
            (95, "A+"),
            (94, "A"),
            (90, "A"),
            (85, "A-"),
            (80, "B+"),
            (75, "B"),
            (70, "B-"),
            (65, "C+"),
            (60, "C"),
            (55, "C-"),
            (50, "D"),
            (49, "F"),
            (0, "F"),
        ],
    )
    def test_grade_table(self, score, grade):
        assert grade_for(score) == grade

    def test_threshold(self):
        assert passes_threshold(95, 95)
        assert not passes_threshold(94, 95)


class TestScanEngine:
    def test_clean_project_is_sovereign(self, clean_files):
        result = scan(clean_files)
        assert result.issues == []
        assert result.proprietary_files == []
        assert result.score == 100
        assert result.grade == "A+"
        assert result.total_files_scanned == 2

    def test_lovable_project(self, lovable_files):
        result = scan(lovable_files)

        assert result.proprietary_files == ["lovable.config.json"]
        assert result.total_files_scanned == 5
        assert result.summary.critical == 1
        assert result.summary.major == 5
        assert result.summary.minor == 2
        assert result.score == 48
        assert result.grade == "F"
        assert result.files_with_issues == 3

    def test_sorted_by_severity_then_file(self, lovable_files):
        result = scan(lovable_files)
        ranks = [(i.severity.rank, i.file) for i in result.issues]
        assert ranks == sorted(ranks)
        assert result.issues[0].severity == Severity.CRITICAL
        assert result.issues[0].pattern_name == "lovableApi"

    def test_tagger_import_is_one_major_issue(self):
        files = {"vite.config.ts": 'import { componentTagger } from "lovable-tagger";\n'}
        result = scan(files)
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.severity == Severity.MAJOR
        assert issue.line == 1
        assert issue.pattern_name == "vendor tooling import"

    def test_single_quoted_tagger_import(self):
        files = {"vite.config.ts": "import { componentTagger } from 'lovable-tagger';\n"}
        result = scan(files)
        assert len(result.issues) == 1
        assert result.issues[0].severity == Severity.MAJOR
        assert result.issues[0].pattern_name == "vendor tooling import"

    def test_data_attribute_location(self):
        files = {"src/Box.tsx": 'const el = <div data-lov-id="abc" class="x"/>;\n'}
        result = scan(files)
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.severity == Severity.MINOR
        assert issue.column == 17
        assert issue.matched_text == 'data-lov-id="abc"'

    def test_telemetry_literal(self):
        files = {"src/track.ts": "send('https://telemetry.lovable.dev/e');\n"}
        result = scan(files)
        assert [i.pattern_name for i in result.issues] == ["telemetry endpoint"]
        assert result.issues[0].column == 6

    def test_manifest_dependency_line(self, lovable_files):
        result = scan({"package.json": lovable_files["package.json"]})
        deps = [i for i in result.issues if i.pattern_name == "proprietary dependency"]
        assert len(deps) == 1
        assert deps[0].line == 12
        assert deps[0].message == "proprietary dependency lovable-tagger"

    def test_malformed_manifest_is_not_fatal(self):
        result = scan({"package.json": '{"dependencies": {"lovable-tagger": "1"'})
        assert result.issues == []
        assert result.total_files_scanned == 1

    def test_multiline_pattern_anchors_at_top(self):
        content = "const a = 1;\n\n/* @lovable\n   generated */\nconst b = 2;\n"
        result = scan({"src/a.ts": content})
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.pattern_name == "vendor block annotation"
        assert (issue.line, issue.column) == (1, 1)

    def test_binary_and_undecodable_files_skipped(self):
        files = {
            "src/blob.ts": b"\xff\xfe\x00lovable.generate(",
            "src/nul.ts": "lovable.generate(\x00)",
            "logo.png": b"\x89PNG",
        }
        result = scan(files)
        assert result.issues == []
        assert result.total_files_scanned == 3
        assert result.total_lines == 0

    def test_bytes_content_decoded(self):
        result = scan({"src/a.ts": b"const r = lovable.generate(prompt);\n"})
        assert [i.severity for i in result.issues] == [Severity.CRITICAL]

    def test_total_lines(self):
        result = scan({"a.ts": "one\ntwo\n", "b.md": "three"})
        assert result.total_lines == 4

    def test_non_global_pattern_first_match_only(self):
        pattern = PatternDefinition(
            name="todo",
            source=r"TODO",
            severity=Severity.MINOR,
            suggestion="",
            global_match=False,
        )
        engine = ScanEngine(Registry(content_patterns=(pattern,)))
        result = engine.scan({"a.ts": "x TODO TODO\n"})
        assert len(result.issues) == 1
        assert result.issues[0].column == 3

    def test_duplicate_rows_collapse(self):
        pattern = PatternDefinition(
            name="todo",
            source=r"TODO",
            severity=Severity.MINOR,
            suggestion="",
        )
        engine = ScanEngine(Registry(content_patterns=(pattern, pattern)))
        result = engine.scan({"a.ts": "TODO\nTODO TODO\n"})
        assert [(i.line, i.column) for i in result.issues] == [(1, 1), (2, 1)]
        assert result.score == 98

    def test_zero_width_pattern_terminates(self):
        pattern = PatternDefinition(
            name="before x",
            source=r"(?=x)",
            severity=Severity.MINOR,
            suggestion="",
        )
        engine = ScanEngine(Registry(content_patterns=(pattern,)))
        result = engine.scan({"a.ts": "xxxx\n"})
        assert len(result.issues) == 1

    def test_matched_text_truncated(self):
        literal = "https://lovable.app/" + "a" * 200
        result = scan({"a.ts": f'const u = "{literal}";\n'})
        assert len(result.issues[0].matched_text) == 80

    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            scan(["src/a.ts"])

    def test_rejects_bad_content_before_scanning(self):
        with pytest.raises(TypeError):
            scan({"src/a.ts": "lovable.generate(x)", "src/b.ts": 42})

    def test_default_registry(self):
        assert ScanEngine().registry is DEFAULT_REGISTRY
