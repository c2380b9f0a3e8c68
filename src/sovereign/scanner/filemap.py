"""Helpers for the ``path -> content`` mapping exchanged with callers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Union

FileContent = Union[str, bytes]
FileMap = Mapping[str, FileContent]


def ensure_file_map(file_map: object) -> None:
    """Reject structurally invalid input before any file is processed."""
    if not isinstance(file_map, Mapping):
        raise TypeError(
            f"file map must be a mapping of path to content, "
            f"got {type(file_map).__name__}"
        )
    for path, content in file_map.items():
        if not isinstance(path, str):
            raise TypeError(f"file map keys must be str, got {type(path).__name__}")
        if not isinstance(content, (str, bytes)):
            raise TypeError(
                f"content of {path!r} must be str or bytes, "
                f"got {type(content).__name__}"
            )


def decode(content: FileContent) -> str | None:
    """Return text content, or None for binary/undecodable data."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if "\x00" in content:
        return None
    return content


def count_lines(text: str) -> int:
    return len(text.split("\n"))
