"""Environment template built from the variables a project actually reads."""

from __future__ import annotations

import re

from sovereign.scanner.classifier import is_source_file
from sovereign.scanner.filemap import FileMap, decode, ensure_file_map

ENV_TEMPLATE_NAME = ".env.example"

_ENV_REFERENCE = re.compile(
    r"(?:import\.meta\.env\.|process\.env\.)((?:VITE|REACT_APP)_[A-Z0-9_]+)"
)
# Variables that only configure the vendor editor
_VENDOR_MARKERS = ("LOVABLE", "GPTENGINEER", "GPT_ENGINEER", "GPTENG")

_EMPTY_TEMPLATE = """\
# Environment variables
# Add your variables here, for example:
# VITE_API_URL=https://api.example.com
"""

_HEADER = """\
# Environment variables used by this project
# Fill in the values for your deployment

"""


def collect_env_vars(file_map: FileMap) -> list[str]:
    """Return client env variable names in first-seen order, vendor ones dropped."""
    ensure_file_map(file_map)
    found: dict[str, None] = {}
    for path, raw in file_map.items():
        if not is_source_file(path):
            continue
        content = decode(raw)
        if content is None:
            continue
        for match in _ENV_REFERENCE.finditer(content):
            name = match.group(1)
            if any(marker in name for marker in _VENDOR_MARKERS):
                continue
            found.setdefault(name, None)
    return list(found)


def generate_env_example(file_map: FileMap) -> str:
    """Render a ``.env.example`` with one empty assignment per variable."""
    names = collect_env_vars(file_map)
    if not names:
        return _EMPTY_TEMPLATE
    return _HEADER + "".join(f"{name}=\n" for name in names)
