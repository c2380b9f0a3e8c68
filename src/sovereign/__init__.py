"""Detect and remove proprietary code-generator signatures from source trees."""

from __future__ import annotations

__version__ = "0.1.0"

from sovereign.cleaner.rewriter import clean
from sovereign.envtemplate import generate_env_example
from sovereign.pipeline import liberate, validate
from sovereign.report import assemble, format_text
from sovereign.scanner.balance import check_balance
from sovereign.scanner.engine import scan
from sovereign.scanner.loader import load_registry
from sovereign.scanner.patterns import DEFAULT_REGISTRY

__all__ = [
    "DEFAULT_REGISTRY",
    "__version__",
    "assemble",
    "check_balance",
    "clean",
    "format_text",
    "generate_env_example",
    "liberate",
    "load_registry",
    "scan",
    "validate",
]
