"""Filesystem boundary — builds file-maps from directories and writes them back."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from sovereign.config import SovereignConfig
from sovereign.scanner.classifier import is_directory_ignored
from sovereign.scanner.filemap import FileMap

logger = logging.getLogger(__name__)


@dataclass
class SourceTree:
    """Files read from a directory, keyed by POSIX path relative to it."""

    root: Path
    files: dict[str, str | bytes] = field(default_factory=dict)
    oversized: list[str] = field(default_factory=list)
    unreadable: list[str] = field(default_factory=list)


def read_file_map(
    directory: str | Path, config: SovereignConfig | None = None
) -> SourceTree:
    """Walk ``directory`` and load every file below the size limit.

    Content is decoded as UTF-8 when possible and kept as bytes otherwise.
    Oversized files are listed but not loaded.
    """
    config = config or SovereignConfig()
    root = Path(directory)
    tree = SourceTree(root=root)

    for dirpath, dirnames, filenames in os.walk(root):
        # Prune ignored directories in-place
        dirnames[:] = sorted(d for d in dirnames if not is_directory_ignored(d))
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            rel = path.relative_to(root).as_posix()
            try:
                if path.stat().st_size > config.max_file_size:
                    logger.debug("Skipping oversized file %s", rel)
                    tree.oversized.append(rel)
                    continue
                raw = path.read_bytes()
            except OSError as e:
                logger.debug("Cannot read %s: %s", rel, e)
                tree.unreadable.append(rel)
                continue
            try:
                tree.files[rel] = raw.decode("utf-8")
            except UnicodeDecodeError:
                tree.files[rel] = raw

    logger.debug("Read %d files from %s", len(tree.files), root)
    return tree


def write_file_map(files: FileMap, out_dir: str | Path) -> int:
    """Write every entry of ``files`` below ``out_dir``; return the count."""
    out = Path(out_dir)
    for rel, content in files.items():
        target = out / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_text(content, encoding="utf-8", newline="")
    return len(files)
