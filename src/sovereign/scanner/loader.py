"""Load registry extensions from YAML files.

An extension file adds rows to the built-in registry::

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

from __future__ import annotations

import re
from pathlib import Path

import yaml

from sovereign.scanner.models import Severity
from sovereign.scanner.patterns import DEFAULT_REGISTRY, PatternDefinition, Registry

_FLAG_NAMES = {
    "ignorecase": re.IGNORECASE,
    "multiline": re.MULTILINE,
    "dotall": re.DOTALL,
}


def load_registry(path: str | Path, base: Registry = DEFAULT_REGISTRY) -> Registry:
    """Load a YAML extension file and merge it onto ``base``."""
    text = Path(path).read_text(encoding="utf-8")
    return load_registry_from_string(text, base=base)


def load_registry_from_string(
    text: str, base: Registry = DEFAULT_REGISTRY
) -> Registry:
    """Parse a YAML extension string and merge it onto ``base``."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid registry YAML: {e}") from e
    if data is None:
        return base
    if not isinstance(data, dict):
        raise ValueError("Registry YAML must be a mapping")
    return base.extend(
        content_patterns=tuple(_parse_patterns(data.get("patterns", []))),
        file_markers=_string_list(data, "file_markers"),
        telemetry_domains=_string_list(data, "telemetry_domains"),
        disallowed_packages=_string_list(data, "disallowed_packages"),
        script_terms=_string_list(data, "script_terms"),
    )


def _parse_patterns(patterns_data: list) -> list[PatternDefinition]:
    if not isinstance(patterns_data, list):
        raise ValueError("'patterns' must be a list")
    patterns: list[PatternDefinition] = []
    for p in patterns_data:
        if not isinstance(p, dict):
            raise ValueError(f"Pattern entry must be a mapping, got {p!r}")
        if "name" not in p or "regex" not in p:
            raise ValueError(f"Pattern entry needs 'name' and 'regex': {p!r}")
        try:
            severity = Severity(p.get("severity", "major"))
        except ValueError:
            raise ValueError(
                f"Unknown severity {p.get('severity')!r} for pattern {p['name']!r}"
            ) from None
        flags = re.MULTILINE
        for flag_name in p.get("flags", []):
            try:
                flags |= _FLAG_NAMES[str(flag_name).lower()]
            except KeyError:
                raise ValueError(f"Unknown regex flag {flag_name!r}") from None
        pattern = PatternDefinition(
            name=str(p["name"]),
            source=str(p["regex"]),
            severity=severity,
            suggestion=str(p.get("suggestion", "")),
            flags=flags,
            multiline=bool(p.get("multiline", False)),
            global_match=bool(p.get("global", True)),
            replacement=p.get("replacement"),
        )
        try:
            pattern.regex
        except re.error as e:
            raise ValueError(f"Invalid regex for pattern {pattern.name!r}: {e}") from e
        patterns.append(pattern)
    return patterns


def _string_list(data: dict, key: str) -> tuple[str, ...]:
    raw = data.get(key, [])
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValueError(f"'{key}' must be a list of strings")
    return tuple(str(item) for item in raw)
