"""Liberation pipeline — scan, clean, rescan, validate and report."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sovereign.cleaner.rewriter import Cleaner
from sovereign.report import Report, assemble
from sovereign.scanner.balance import check_balance
from sovereign.scanner.classifier import is_script_file
from sovereign.scanner.engine import ScanEngine
from sovereign.scanner.filemap import FileMap, decode, ensure_file_map
from sovereign.scanner.models import CleanOutput, ScanIssue, ScanResult
from sovereign.scanner.patterns import Registry

logger = logging.getLogger(__name__)


@dataclass
class LiberationResult:
    scan: ScanResult
    output: CleanOutput
    rescan: ScanResult
    validation: list[ScanIssue]
    report: Report

    @property
    def files(self) -> dict[str, str | bytes]:
        return self.output.files


def validate(file_map: FileMap) -> list[ScanIssue]:
    """Run the bracket balance checker over every JS/TS file."""
    ensure_file_map(file_map)
    issues: list[ScanIssue] = []
    for path, raw in file_map.items():
        if not is_script_file(path):
            continue
        content = decode(raw)
        if content is None:
            continue
        issues.extend(check_balance(content, path))
    return issues


def liberate(file_map: FileMap, registry: Registry | None = None) -> LiberationResult:
    """Clean a file-map and report how much sovereignty was recovered."""
    engine = ScanEngine(registry)
    before = engine.scan(file_map)
    output = Cleaner(engine.registry).clean(file_map, before)
    after = engine.scan(output.files)
    validation = validate(output.files)
    if validation:
        logger.warning(
            "%d structural issue(s) remain after cleaning", len(validation)
        )
    report = assemble(before, output.result, rescan=after, validation=validation)
    return LiberationResult(
        scan=before,
        output=output,
        rescan=after,
        validation=validation,
        report=report,
    )
