"""Tests for the pattern registry and YAML registry extensions."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from sovereign.scanner.engine import ScanEngine
from sovereign.scanner.loader import load_registry, load_registry_from_string
from sovereign.scanner.models import Severity
from sovereign.scanner.patterns import (
    DEFAULT_REGISTRY,
    REGISTRY_VERSION,
    PatternDefinition,
    Registry,
)

EXTENSION_YAML = """\
patterns:
  - name: acme runtime import
    regex: "^import .*@acme/runtime.*$"
    severity: major
    suggestion: Remove the import
    global: false
file_markers: [acme.config.json]
telemetry_domains: [telemetry.acme.dev]
disallowed_packages: ["@acme/runtime"]
script_terms: [acme]
"""


class TestRegistry:
    def test_default_registry_versioned(self):
        assert DEFAULT_REGISTRY.version == REGISTRY_VERSION

    def test_default_tables_populated(self):
        assert "lovable.config.json" in DEFAULT_REGISTRY.file_markers
        assert "lovable-tagger" in DEFAULT_REGISTRY.disallowed_packages
        assert "lovable.app" in DEFAULT_REGISTRY.telemetry_domains

    def test_pattern_names_unique(self):
        names = [p.name for p in DEFAULT_REGISTRY.content_patterns]
        assert len(names) == len(set(names))

    def test_all_patterns_compile(self):
        for pattern in DEFAULT_REGISTRY.content_patterns:
            assert isinstance(pattern.regex, re.Pattern)

    def test_regex_compiled_on_access(self):
        pattern = PatternDefinition(
            name="p", source="a+", severity=Severity.MINOR, suggestion=""
        )
        assert pattern.regex.pattern == "a+"
        assert pattern.regex.findall("aa b aaa") == ["aa", "aaa"]
        assert pattern.regex.findall("aa b aaa") == ["aa", "aaa"]

    def test_telemetry_prefers_longest_domain(self):
        registry = Registry(telemetry_domains=("lovable.dev", "api.lovable.dev"))
        telemetry = registry.telemetry_pattern
        assert telemetry.severity == Severity.MAJOR
        assert telemetry.regex.search("x = 'https://api.lovable.dev/v1'")
        assert not telemetry.regex.search("x = 'https://example.com'")

    def test_no_telemetry_without_domains(self):
        assert Registry().telemetry_pattern is None

    def test_extend_appends_without_duplicates(self):
        extended = DEFAULT_REGISTRY.extend(
            file_markers=("lovable.config.json", "acme.json"),
        )
        assert extended.file_markers.count("lovable.config.json") == 1
        assert extended.file_markers[-1] == "acme.json"
        assert "acme.json" not in DEFAULT_REGISTRY.file_markers

    def test_extend_rebuilds_telemetry(self):
        extended = DEFAULT_REGISTRY.extend(telemetry_domains=("beacon.acme.dev",))
        assert extended.telemetry_pattern.regex.search("'https://beacon.acme.dev'")
        assert not DEFAULT_REGISTRY.telemetry_pattern.regex.search(
            "'https://beacon.acme.dev'"
        )


class TestLoader:
    def test_extension_adds_rows(self):
        registry = load_registry_from_string(EXTENSION_YAML)
        assert len(registry.content_patterns) == len(DEFAULT_REGISTRY.content_patterns) + 1
        assert registry.file_markers[-1] == "acme.config.json"
        assert registry.disallowed_packages[-1] == "@acme/runtime"
        assert registry.script_terms[-1] == "acme"

        added = registry.content_patterns[-1]
        assert added.severity == Severity.MAJOR
        assert added.global_match is False

    def test_extension_is_used_by_scanner(self):
        registry = load_registry_from_string(EXTENSION_YAML)
        files = {
            "src/a.ts": 'import { boot } from "@acme/runtime";\n',
            "acme.config.json": "{}",
            "src/b.ts": "ping('https://telemetry.acme.dev/x');\n",
        }
        result = ScanEngine(registry).scan(files)
        names = sorted(i.pattern_name for i in result.issues)
        assert names == ["acme runtime import", "telemetry endpoint"]
        assert result.proprietary_files == ["acme.config.json"]

    def test_empty_document(self):
        assert load_registry_from_string("") is DEFAULT_REGISTRY

    def test_load_from_file(self, tmp_path: Path):
        path = tmp_path / "registry.yaml"
        path.write_text(EXTENSION_YAML)
        registry = load_registry(path)
        assert "telemetry.acme.dev" in registry.telemetry_domains

    def test_flags(self):
        registry = load_registry_from_string(
            "patterns:\n"
            "  - name: shout\n"
            "    regex: acme\n"
            "    severity: minor\n"
            "    flags: [ignorecase]\n"
        )
        assert registry.content_patterns[-1].regex.search("ACME")

    @pytest.mark.parametrize(
        "text",
        [
            "- just\n- a list\n",
            "patterns: {name: x}\n",
            "patterns:\n  - name: x\n",
            "patterns:\n  - name: x\n    regex: a\n    severity: fatal\n",
            "patterns:\n  - name: x\n    regex: '('\n",
            "patterns:\n  - name: x\n    regex: a\n    flags: [verbose]\n",
            "file_markers: {a: b}\n",
            "patterns: [\n",
        ],
    )
    def test_malformed_raises(self, text):
        with pytest.raises(ValueError):
            load_registry_from_string(text)
