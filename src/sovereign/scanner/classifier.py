"""File classification — which paths are scanned, skipped or deleted."""

from __future__ import annotations

from pathlib import PurePosixPath

# Source, markup, style, config and docs. No binary, image or lock formats.
_SOURCE_EXTENSIONS = {
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
    ".vue",
    ".svelte",
    ".astro",
    ".json",
    ".yaml",
    ".yml",
    ".toml",
    ".css",
    ".scss",
    ".sass",
    ".less",
    ".html",
    ".htm",
    ".xml",
    ".md",
    ".mdx",
    ".txt",
    ".env",
    ".sh",
    ".bash",
    ".zsh",
    ".sql",
    ".graphql",
    ".gql",
}

_LOCK_FILES = {
    "package-lock.json",
    "npm-shrinkwrap.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "bun.lockb",
}

# JS-family extensions checked by the bracket balance validator
_SCRIPT_EXTENSIONS = {".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs"}

_IGNORED_DIRS = {
    "node_modules",
    ".git",
    ".hg",
    ".svn",
    "dist",
    "build",
    ".next",
    ".nuxt",
    ".cache",
    ".turbo",
    ".vercel",
    "coverage",
}


def _posix(path: str) -> PurePosixPath:
    return PurePosixPath(path.replace("\\", "/"))


def is_source_file(path: str) -> bool:
    """Return True if the path is a text/source file eligible for scanning."""
    p = _posix(path)
    name = p.name.lower()
    if name in _LOCK_FILES:
        return False
    if name == ".env" or name.startswith(".env."):
        return True
    return p.suffix.lower() in _SOURCE_EXTENSIONS


def is_script_file(path: str) -> bool:
    """Return True for JavaScript/TypeScript sources."""
    return _posix(path).suffix.lower() in _SCRIPT_EXTENSIONS


def is_directory_ignored(name: str) -> bool:
    """Return True for build, dependency and VCS directories."""
    return name in _IGNORED_DIRS or name.endswith(".egg-info")


def matches_removal_marker(path: str, markers: tuple[str, ...]) -> bool:
    """Return True if the file must be deleted rather than edited.

    Matches case-insensitively when the filename equals a marker or a
    directory segment equals a marker. Dot-prefixed markers (``.lovable``)
    also match as a path suffix.
    """
    p = _posix(path)
    lowered = str(p).lower()
    name = p.name.lower()
    segments = {part.lower() for part in p.parent.parts}
    for marker in markers:
        m = marker.lower()
        if name == m or m in segments:
            return True
        if m.startswith(".") and lowered.endswith(m):
            return True
    return False


def is_manifest_candidate(path: str) -> bool:
    """Return True for JSON files that may declare npm dependencies."""
    p = _posix(path)
    name = p.name.lower()
    return p.suffix.lower() == ".json" and name not in _LOCK_FILES
