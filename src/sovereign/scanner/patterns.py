"""Built-in registry of proprietary vendor signatures.

The registry is data, not behaviour: scanner and cleaner both walk the same
tables, so supporting another vendor means adding rows here (or in a YAML
extension file, see :mod:`sovereign.scanner.loader`).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace

from sovereign.scanner.models import Severity

REGISTRY_VERSION = "2.0.0"

_VENDOR_SCOPES = r"(?:lovable|gptengineer|bolt|v0|cursor|replit)"
_VENDOR_PACKAGES = (
    r"(?:lovable-[\w-]+|gpt-engineer[\w-]*|gptengineer-[\w-]+"
    r"|v0-(?:tagger|runtime|sdk)|replit-(?:runtime|sdk)"
    r"|cursor-(?:sdk|runtime)|bolt-core)"
)
_DEV_MODE_GUARD = r"(?:mode\s*===\s*['\"]development['\"]\s*&&\s*)?"


@dataclass(frozen=True)
class PatternDefinition:
    """A detection pattern: regex source plus severity and remediation hint.

    Only the regex source is stored. ``regex`` compiles on access so no
    match iterator state outlives a single scan.
    """

    name: str
    source: str
    severity: Severity
    suggestion: str
    flags: int = re.MULTILINE
    multiline: bool = False
    global_match: bool = True
    replacement: str | None = None

    @property
    def regex(self) -> re.Pattern[str]:
        return re.compile(self.source, self.flags)


@dataclass(frozen=True)
class Registry:
    """Read-only collections consumed by the scanner and the cleaner."""

    content_patterns: tuple[PatternDefinition, ...] = ()
    file_markers: tuple[str, ...] = ()
    telemetry_domains: tuple[str, ...] = ()
    disallowed_packages: tuple[str, ...] = ()
    script_terms: tuple[str, ...] = ()
    version: str = REGISTRY_VERSION
    _telemetry: PatternDefinition | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def telemetry_pattern(self) -> PatternDefinition | None:
        """Pattern matching a string literal that references a telemetry domain."""
        if not self.telemetry_domains:
            return None
        if self._telemetry is None:
            object.__setattr__(
                self, "_telemetry", _telemetry_pattern(self.telemetry_domains)
            )
        return self._telemetry

    def extend(
        self,
        content_patterns: tuple[PatternDefinition, ...] = (),
        file_markers: tuple[str, ...] = (),
        telemetry_domains: tuple[str, ...] = (),
        disallowed_packages: tuple[str, ...] = (),
        script_terms: tuple[str, ...] = (),
    ) -> Registry:
        """Return a new registry with extra rows appended."""
        return replace(
            self,
            content_patterns=self.content_patterns + tuple(content_patterns),
            file_markers=_merge(self.file_markers, file_markers),
            telemetry_domains=_merge(self.telemetry_domains, telemetry_domains),
            disallowed_packages=_merge(
                self.disallowed_packages, disallowed_packages
            ),
            script_terms=_merge(self.script_terms, script_terms),
        )


def _merge(base: tuple[str, ...], extra: tuple[str, ...]) -> tuple[str, ...]:
    seen = set(base)
    merged = list(base)
    for item in extra:
        if item not in seen:
            seen.add(item)
            merged.append(item)
    return tuple(merged)


def _telemetry_pattern(domains: tuple[str, ...]) -> PatternDefinition:
    # Longest first so "api.lovable.dev" wins over "lovable.dev".
    alternatives = "|".join(
        re.escape(d) for d in sorted(domains, key=len, reverse=True)
    )
    return PatternDefinition(
        name="telemetry endpoint",
        # Literal bodies are URL-like, so apostrophes in prose never open a match
        source=rf"([\"'`])[^\s\"'`]*?(?:{alternatives})[^\s\"'`]*\1",
        severity=Severity.MAJOR,
        suggestion="Remove the call to the vendor telemetry endpoint",
        flags=re.IGNORECASE,
    )


CONTENT_PATTERNS: tuple[PatternDefinition, ...] = (
    # Critical: functional vendor API calls. Lookaheads keep the argument
    # list in place so the rewritten call still parses.
    PatternDefinition(
        name="lovable.generate()",
        source=r"\blovable\.generate(?=\s*\()",
        severity=Severity.CRITICAL,
        suggestion="Replace with a self-hosted LLM client completion call",
    ),
    PatternDefinition(
        name="lovableApi",
        # Member access drops the dot so the marker is followed by the method name
        source=r"\blovableApi\s*\.\s*(?=[A-Za-z_$])|\blovableApi(?=\s*\()",
        severity=Severity.CRITICAL,
        suggestion="Replace with a standard REST client",
    ),
    PatternDefinition(
        name="getAIAssistant()",
        source=r"\bgetAIAssistant(?=\s*\()",
        severity=Severity.CRITICAL,
        suggestion="Replace with a self-hosted assistant factory",
    ),
    PatternDefinition(
        name="runAssistant()",
        source=r"\brunAssistant(?=\s*\()",
        severity=Severity.CRITICAL,
        suggestion="Replace with the run method of a self-hosted assistant",
    ),
    PatternDefinition(
        name="@agent/* import",
        source=r"^[ \t]*import\s[^\n]*?['\"]@agent/[^'\"\n]+['\"][ \t]*;?",
        severity=Severity.CRITICAL,
        suggestion="Reimplement the agent module with local code",
        global_match=False,
    ),
    PatternDefinition(
        name="@agent/* require",
        source=(
            r"^[ \t]*(?:const|let|var)\s[^\n]*?=\s*require\s*\(\s*"
            r"['\"]@agent/[^'\"\n]+['\"]\s*\)[ \t]*;?"
        ),
        severity=Severity.CRITICAL,
        suggestion="Reimplement the agent module with local code",
        global_match=False,
    ),
    PatternDefinition(
        name="vendor WebSocket",
        source=r"\bnew\s+WebSocket(?=\s*\([^)\n]*lovable)",
        severity=Severity.CRITICAL,
        suggestion="Connect to a self-hosted WebSocket server",
        flags=re.MULTILINE | re.IGNORECASE,
    ),
    PatternDefinition(
        name="vendor service worker",
        source=r"\bnavigator\.serviceWorker\.register(?=\s*\([^)\n]*lovable)",
        severity=Severity.CRITICAL,
        suggestion="Register a project-owned service worker",
        flags=re.MULTILINE | re.IGNORECASE,
    ),
    # Major: imports and build plugins, safe to delete outright.
    PatternDefinition(
        name="vendor package import",
        source=(
            rf"^[ \t]*import\s[^\n]*?['\"]@{_VENDOR_SCOPES}/[^'\"\n]*['\"]"
            r"[ \t]*;?[ \t]*\n?"
        ),
        severity=Severity.MAJOR,
        suggestion="Remove the import or use an open-source equivalent",
        global_match=False,
    ),
    PatternDefinition(
        name="vendor tooling import",
        source=(
            rf"^[ \t]*import\s[^\n]*?['\"]{_VENDOR_PACKAGES}['\"]"
            r"[ \t]*;?[ \t]*\n?"
        ),
        severity=Severity.MAJOR,
        suggestion="Remove the import, the tool is only used by the vendor editor",
        global_match=False,
    ),
    PatternDefinition(
        name="vendor require",
        source=(
            r"^[ \t]*(?:const|let|var)\s[^\n]*?=\s*require\s*\(\s*['\"]"
            rf"(?:@{_VENDOR_SCOPES}/[^'\"\n]*|{_VENDOR_PACKAGES})['\"]\s*\)"
            r"[ \t]*;?[ \t]*\n?"
        ),
        severity=Severity.MAJOR,
        suggestion="Remove the require or use an open-source equivalent",
        global_match=False,
    ),
    PatternDefinition(
        name="vendor script tag",
        source=(
            r"^[ \t]*<script\b[^>\n]*(?:lovable|gptengineer|gpteng\.co)[^>\n]*>"
            r".*?</script>[ \t]*\n?"
        ),
        severity=Severity.MAJOR,
        suggestion="Remove the editor script, it is not needed to run the app",
        flags=re.MULTILINE | re.IGNORECASE,
        global_match=False,
    ),
    PatternDefinition(
        name="componentTagger plugin",
        source=(
            rf",\s*{_DEV_MODE_GUARD}componentTagger\(\)"
            rf"|{_DEV_MODE_GUARD}componentTagger\(\)[ \t]*,?"
        ),
        severity=Severity.MAJOR,
        suggestion="Remove the development-only tagger plugin",
    ),
    PatternDefinition(
        name="vendor environment variable",
        source=r"\bVITE_(?:LOVABLE|GPTENGINEER)_(?=[A-Z0-9_])",
        severity=Severity.MAJOR,
        suggestion="Use a project-owned environment variable",
        replacement="VITE_",
    ),
    # Minor: annotations and tracking attributes.
    PatternDefinition(
        name="vendor annotation comment",
        source=r"[ \t]*//[ \t]*@(?:lovable|gptengineer|bolt|v0)\b[^\n]*",
        severity=Severity.MINOR,
        suggestion="Remove the annotation comment",
        global_match=False,
    ),
    PatternDefinition(
        name="generated-by comment",
        source=(
            r"[ \t]*//[ \t]*Generated (?:by|with) "
            r"(?:Lovable|GPT[ -]?Engineer|Bolt|v0)\b[^\n]*"
        ),
        severity=Severity.MINOR,
        suggestion="Remove the generator comment",
        flags=re.MULTILINE | re.IGNORECASE,
        global_match=False,
    ),
    PatternDefinition(
        name="vendor HTML comment",
        source=r"[ \t]*<!--[ \t]*@?(?:lovable|gptengineer)\b.*?-->",
        severity=Severity.MINOR,
        suggestion="Remove the HTML comment",
        flags=re.MULTILINE | re.IGNORECASE,
    ),
    PatternDefinition(
        name="vendor block annotation",
        source=r"[ \t]*/\*\s*(?:@(?:lovable|gptengineer|bolt)\b|lovable:)[\s\S]*?\*/",
        severity=Severity.MINOR,
        suggestion="Remove the annotation block",
        multiline=True,
    ),
    PatternDefinition(
        name="vendor data attribute",
        source=(
            r"[ \t]*\bdata-(?:lov|lovable|gpt|gptengineer|bolt|v0|cursor|replit)"
            r"-[a-z][a-z0-9-]*=(?:\"[^\"\n]*\"|'[^'\n]*'|\{[^}\n]*\})"
        ),
        severity=Severity.MINOR,
        suggestion="Remove the tracking data attribute",
    ),
)

FILE_MARKERS: tuple[str, ...] = (
    # Lovable / GPT Engineer
    ".lovable",
    ".lovablerc",
    ".lovable.json",
    "lovable.config.ts",
    "lovable.config.js",
    "lovable.config.json",
    "lovable-lock.json",
    "__lovable__",
    ".gptengineer",
    ".gptengineer.json",
    ".gpteng",
    ".gpt-engineer",
    "gptengineer.config.json",
    "gpt-engineer.toml",
    ".agent",
    "agent.config.ts",
    # Bolt
    ".bolt",
    ".bolt.json",
    "bolt.config.json",
    # v0
    ".v0",
    ".v0.json",
    "v0.config.json",
    "v0-manifest.json",
    # Cursor
    ".cursorrc",
    ".cursor.json",
    "cursor.config.json",
    # Replit
    ".replit",
    ".replit.json",
    "replit.nix",
)

TELEMETRY_DOMAINS: tuple[str, ...] = (
    "lovable.app",
    "lovable.dev",
    "events.lovable",
    "telemetry.lovable",
    "analytics.lovable",
    "tracking.lovable",
    "assets.lovable",
    "static.lovable",
    "gptengineer.app",
    "gpteng.co",
    "v0.dev",
    "bolt.new",
)

DISALLOWED_PACKAGES: tuple[str, ...] = (
    "lovable-tagger",
    "lovable-core",
    "lovable-analytics",
    "@lovable/core",
    "@lovable/cli",
    "@lovable/ui",
    "@lovable/runtime",
    "@lovable/sdk",
    "@lovable/plugin-react",
    "@gptengineer/core",
    "@gptengineer/cli",
    "@gptengineer/ui",
    "gpt-engineer",
    "gpt-engineer-tracker",
    "gptengineer-core",
    "bolt-core",
    "@bolt/core",
    "@bolt/cli",
    "@bolt/runtime",
    "@v0/core",
    "@v0/cli",
    "@v0/runtime",
    "@v0/ui",
    "@v0/components",
    "v0-tagger",
    "v0-sdk",
    "@cursor/core",
    "@cursor/sdk",
    "cursor-runtime",
    "@replit/core",
    "@replit/extensions",
    "replit-sdk",
)

SCRIPT_TERMS: tuple[str, ...] = (
    "lovable",
    "gpteng",
    "gpt-engineer",
    "@bolt/",
    "bolt-core",
    "v0-tagger",
    "@v0/",
)

DEFAULT_REGISTRY = Registry(
    content_patterns=CONTENT_PATTERNS,
    file_markers=FILE_MARKERS,
    telemetry_domains=TELEMETRY_DOMAINS,
    disallowed_packages=DISALLOWED_PACKAGES,
    script_terms=SCRIPT_TERMS,
)
