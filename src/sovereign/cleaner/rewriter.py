"""Cleaner — rewrites a file-map so it no longer carries vendor signatures."""

from __future__ import annotations

import enum
import logging
import re
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field

from sovereign.cleaner.manifest import PackageManifest
from sovereign.scanner.classifier import (
    is_manifest_candidate,
    is_source_file,
    matches_removal_marker,
)
from sovereign.scanner.filemap import FileMap, count_lines, decode, ensure_file_map
from sovereign.scanner.models import (
    ChangeType,
    CleanChange,
    CleanOutput,
    CleanResult,
    ScanResult,
    Severity,
)
from sovereign.scanner.patterns import DEFAULT_REGISTRY, PatternDefinition, Registry

logger = logging.getLogger(__name__)

MARKER_TEMPLATE = "/* [sovereign] {suggestion} */"

# Rewriting stops as soon as a pass changes nothing
MAX_PASSES = 5

_BLANK_RUN = re.compile(r"\n(?:[ \t]*\n){3,}")


class CleanAction(enum.Enum):
    """What the cleaner does with a matched signature."""

    COMMENT_OUT = "comment-out"
    DELETE = "delete"
    SUBSTITUTE = "substitute"


_SEVERITY_ACTIONS = {
    Severity.CRITICAL: CleanAction.COMMENT_OUT,
    Severity.MAJOR: CleanAction.DELETE,
    Severity.MINOR: CleanAction.DELETE,
}

_ACTION_VERBS = {
    CleanAction.COMMENT_OUT: "flagged",
    CleanAction.DELETE: "removed",
    CleanAction.SUBSTITUTE: "replaced",
}


def action_for(pattern: PatternDefinition) -> CleanAction:
    """Severity decides the action; an explicit replacement overrides deletion."""
    action = _SEVERITY_ACTIONS[pattern.severity]
    if action is CleanAction.DELETE and pattern.replacement is not None:
        return CleanAction.SUBSTITUTE
    return action


def _replacer(
    pattern: PatternDefinition, action: CleanAction
) -> Callable[[re.Match[str]], str]:
    if action is CleanAction.COMMENT_OUT:
        marker = MARKER_TEMPLATE.format(suggestion=pattern.suggestion)
        return lambda m: marker
    if action is CleanAction.SUBSTITUTE:
        replacement = pattern.replacement or ""
        return lambda m: replacement
    return lambda m: ""


def _empty_literal(match: re.Match[str]) -> str:
    quote = match.group(1)
    return quote + quote


@dataclass
class _FileRewrite:
    text: str
    notes: Counter = field(default_factory=Counter)
    flagged: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.notes)


class Cleaner:
    """Produces a cleaned copy of a file-map plus a per-file change log."""

    def __init__(self, registry: Registry | None = None) -> None:
        self._registry = registry or DEFAULT_REGISTRY

    def clean(
        self, file_map: FileMap, scan_result: ScanResult | None = None
    ) -> CleanOutput:
        """Return a new file-map with removals and rewrites applied.

        The input mapping is never modified.
        """
        ensure_file_map(file_map)
        proprietary = set(scan_result.proprietary_files) if scan_result else set()
        result = CleanResult()
        cleaned: dict[str, str | bytes] = {}

        for path, raw in file_map.items():
            result.files_processed += 1

            if path in proprietary or matches_removal_marker(
                path, self._registry.file_markers
            ):
                result.files_removed += 1
                result.changes.append(
                    CleanChange(
                        file=path,
                        type=ChangeType.REMOVED,
                        details="proprietary file removed",
                    )
                )
                continue

            content = decode(raw) if is_source_file(path) else None
            if content is None:
                cleaned[path] = raw
                continue

            rewrite = self._clean_text(path, content)
            if not rewrite.changed:
                cleaned[path] = raw
                continue

            cleaned[path] = rewrite.text
            result.files_cleaned += 1
            result.lines_removed += max(
                0, count_lines(content) - count_lines(rewrite.text)
            )
            result.changes.append(
                CleanChange(
                    file=path,
                    type=ChangeType.REPLACED if rewrite.flagged else ChangeType.MODIFIED,
                    details=_describe(rewrite.notes),
                )
            )

        logger.debug(
            "Cleaned %d of %d files, removed %d",
            result.files_cleaned,
            result.files_processed,
            result.files_removed,
        )
        return CleanOutput(files=cleaned, result=result)

    def _clean_text(self, path: str, content: str) -> _FileRewrite:
        rewrite = _FileRewrite(text=content)
        for _ in range(MAX_PASSES):
            if not self._rewrite_pass(rewrite):
                break
        else:
            logger.warning("Rewriting %s did not settle after %d passes", path, MAX_PASSES)

        if is_manifest_candidate(path):
            try:
                self._clean_manifest(rewrite, content.endswith("\n"))
            except ValueError as e:
                logger.warning("Leaving %s unchanged, invalid JSON: %s", path, e)
                return _FileRewrite(text=content)

        if rewrite.changed:
            rewrite.text = _BLANK_RUN.sub("\n\n\n", rewrite.text)
        return rewrite

    def _rewrite_pass(self, rewrite: _FileRewrite) -> bool:
        before = rewrite.text
        for pattern in self._registry.content_patterns:
            action = action_for(pattern)
            rewrite.text, count = pattern.regex.subn(
                _replacer(pattern, action), rewrite.text
            )
            if count:
                rewrite.notes[f"{_ACTION_VERBS[action]} {pattern.name}"] += count
                if action is CleanAction.COMMENT_OUT:
                    rewrite.flagged = True

        telemetry = self._registry.telemetry_pattern
        if telemetry is not None:
            rewrite.text, count = telemetry.regex.subn(_empty_literal, rewrite.text)
            if count:
                rewrite.notes[f"neutralized {telemetry.name}"] += count
        return rewrite.text != before

    def _clean_manifest(self, rewrite: _FileRewrite, trailing_newline: bool) -> None:
        manifest = PackageManifest.parse(rewrite.text)
        if manifest is None:
            return
        removed = manifest.remove_disallowed(self._registry.disallowed_packages)
        removed += manifest.remove_scripts(self._registry.script_terms)
        if not removed:
            return
        rewrite.text = manifest.dumps(trailing_newline=trailing_newline)
        for note in removed:
            rewrite.notes[note] += 1


def clean(
    file_map: FileMap,
    scan_result: ScanResult | None = None,
    registry: Registry | None = None,
) -> CleanOutput:
    """Clean a file-map with the given (or default) registry."""
    return Cleaner(registry).clean(file_map, scan_result)


def _describe(notes: Counter) -> str:
    parts = []
    for note, count in notes.items():
        parts.append(note if count == 1 else f"{note} (x{count})")
    return "; ".join(parts)
