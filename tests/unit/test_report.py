"""Tests for report assembly and the liberation pipeline."""

from __future__ import annotations

import json

from sovereign.cleaner.rewriter import clean
from sovereign.pipeline import liberate, validate
from sovereign.report import assemble, format_text
from sovereign.scanner.engine import scan


class TestAssemble:
    def test_scan_only(self, lovable_files):
        report = assemble(scan(lovable_files))
        assert report.score_before == 48
        assert report.grade_before == "F"
        assert report.score_after is None
        assert report.cleaned_ratio is None
        assert report.files_cleaned == 0
        assert report.changes == []
        assert report.summary.critical == 1

    def test_with_clean_and_rescan(self, lovable_files):
        before = scan(lovable_files)
        output = clean(lovable_files, before)
        after = scan(output.files)
        report = assemble(before, output.result, rescan=after)

        assert report.score_after == 100
        assert report.grade_after == "A+"
        assert report.files_processed == 5
        assert report.files_cleaned == 3
        assert report.cleaned_ratio == 60.0
        assert len(report.changes) == 4

    def test_empty_clean_result(self):
        output = clean({})
        report = assemble(scan({}), output.result)
        assert report.cleaned_ratio == 0.0

    def test_to_dict_is_json_serializable(self, lovable_files):
        result = liberate(lovable_files)
        data = json.loads(json.dumps(result.report.to_dict()))
        assert data["summary"] == {"critical": 1, "major": 5, "minor": 2}
        assert data["proprietary_files"] == ["lovable.config.json"]
        assert data["changes"][0]["type"] in {"removed", "modified", "replaced"}


class TestFormatText:
    def test_lists_issues(self, lovable_files):
        text = format_text(assemble(scan(lovable_files)))
        assert "Score: 48/100 (Grade: F)" in text
        assert "CRITICAL (1)" in text
        assert "src/App.tsx:6:" in text
        assert "Files cleaned" not in text

    def test_clean_project(self, clean_files):
        text = format_text(assemble(scan(clean_files)))
        assert "No proprietary patterns detected." in text

    def test_includes_cleaning_section(self, lovable_files):
        text = format_text(liberate(lovable_files).report)
        assert "After cleaning: 100/100 (Grade: A+)" in text
        assert "Files cleaned: 3/5 (60.0%)" in text
        assert "[removed] lovable.config.json" in text


class TestPipeline:
    def test_liberate(self, lovable_files):
        result = liberate(lovable_files)
        assert result.scan.score == 48
        assert result.rescan.score == 100
        assert result.validation == []
        assert "lovable.config.json" not in result.files
        assert result.report.validation_issues == 0

    def test_validate_only_checks_scripts(self):
        issues = validate({"a.ts": "{", "b.css": "{", "c.js": "()"})
        assert len(issues) == 1
        assert issues[0].file == "a.ts"

    def test_validate_skips_binary(self):
        assert validate({"a.js": b"\xff\xfe{"}) == []
