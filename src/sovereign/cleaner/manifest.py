"""Typed view of an npm ``package.json`` manifest."""

from __future__ import annotations

import json
from dataclasses import dataclass, field

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies")

_SECTION_LABELS = {
    "dependencies": "dependency",
    "devDependencies": "dev dependency",
    "peerDependencies": "peer dependency",
}


@dataclass
class PackageManifest:
    """Dependency sections and scripts of a manifest, in declaration order.

    ``document`` keeps every other key untouched so re-serialising only
    changes what was removed.
    """

    document: dict
    sections: dict[str, dict[str, str]] = field(default_factory=dict)
    scripts: dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> PackageManifest | None:
        """Parse manifest JSON.

        Returns None if the JSON is valid but declares no dependencies.
        Raises ``ValueError`` if the text is not valid JSON.
        """
        document = json.loads(text)
        if not isinstance(document, dict):
            return None
        if not any(isinstance(document.get(s), dict) for s in DEPENDENCY_SECTIONS[:2]):
            return None
        sections = {
            name: dict(document[name])
            for name in DEPENDENCY_SECTIONS
            if isinstance(document.get(name), dict)
        }
        scripts = document.get("scripts")
        return cls(
            document=document,
            sections=sections,
            scripts=dict(scripts) if isinstance(scripts, dict) else {},
        )

    def disallowed(self, packages: tuple[str, ...]) -> list[tuple[str, str, str]]:
        """Return ``(section, name, version)`` for every disallowed entry."""
        blocked = set(packages)
        return [
            (section, name, str(version))
            for section, deps in self.sections.items()
            for name, version in deps.items()
            if name in blocked
        ]

    def remove_disallowed(self, packages: tuple[str, ...]) -> list[str]:
        """Drop disallowed entries and describe each removal."""
        removed: list[str] = []
        for section, name, _version in self.disallowed(packages):
            del self.sections[section][name]
            removed.append(f"removed {_SECTION_LABELS[section]} {name}")
        return removed

    def remove_scripts(self, terms: tuple[str, ...]) -> list[str]:
        """Drop scripts whose command references a vendor tool."""
        removed: list[str] = []
        for key, value in list(self.scripts.items()):
            if isinstance(value, str) and any(term in value for term in terms):
                del self.scripts[key]
                removed.append(f"removed script {key}")
        return removed

    def dumps(self, trailing_newline: bool = True) -> str:
        """Serialise with original key order and 2-space indentation."""
        document = dict(self.document)
        for section, deps in self.sections.items():
            document[section] = deps
        if "scripts" in document and isinstance(document["scripts"], dict):
            document["scripts"] = self.scripts
        text = json.dumps(document, indent=2, ensure_ascii=False)
        return text + "\n" if trailing_newline else text


def locate(text: str, name: str) -> tuple[int, int]:
    """Return the 1-based (line, column) where ``"name"`` is first declared."""
    needle = f'"{name}"'
    for line_num, line in enumerate(text.splitlines(), start=1):
        index = line.find(needle)
        if index >= 0:
            return line_num, index + 1
    return 1, 1
