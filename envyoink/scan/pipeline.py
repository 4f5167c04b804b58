"""Scan pipeline: enumerate -> extract (per file, per pattern) -> aggregate.

Error policy for per-file failures (``on_error``):
  skip   log a warning, record a ScanError and continue with the next
         (file, pattern) pair. Default.
  abort  re-raise the first ExtractError; the caller writes nothing.

NoCaptureGroupError is a usage error, not a data problem, so it propagates
under both policies.

Single-threaded; the ResultSet accumulator is owned by the run and returned
as the sorted ``ScanReport.names``.
"""
from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Sequence

from ..config.presets import validate_pattern
from ..metrics.scan_metrics import ScanMetrics
from ..utils.exceptions import ConfigError, ExtractError, NoCaptureGroupError
from .aggregator import ResultSet
from .enumerator import enumerate_files
from .extractor import extract
from .models import ScanError, ScanReport

logger = logging.getLogger(__name__)

ON_ERROR_POLICIES = ('skip', 'abort')


def _compile_all(patterns: Sequence[str]) -> list[re.Pattern[str]]:
    # raises ConfigError for a pattern that fails to compile or has no capture group
    return [validate_pattern(pat) for pat in patterns]


def run_scan(
    root: str | os.PathLike[str],
    patterns: Sequence[str],
    *,
    on_error: str = 'skip',
    exclude: Iterable[str] = (),
    metrics: ScanMetrics | None = None,
) -> ScanReport:
    if on_error not in ON_ERROR_POLICIES:
        raise ConfigError(f"on_error must be one of {ON_ERROR_POLICIES}, got {on_error!r}")
    if not patterns:
        raise ConfigError("At least one pattern is required")
    regexes = _compile_all(patterns)

    report = ScanReport()
    results = ResultSet()
    for entry in enumerate_files(root, exclude=exclude, on_warning=report.warnings.append):
        report.files_scanned += 1
        if metrics is not None:
            metrics.files_scanned.inc()
        file_count = 0
        for regex in regexes:
            try:
                names = extract(regex, entry)
            except NoCaptureGroupError:
                if metrics is not None:
                    metrics.extract_errors.labels(kind=NoCaptureGroupError.kind).inc()
                raise
            except ExtractError as e:
                if metrics is not None:
                    metrics.extract_errors.labels(kind=e.kind).inc()
                if on_error == 'abort':
                    raise
                logger.warning("Skipping %s: %s", entry.path, e)
                report.errors.append(ScanError(entry.path, regex.pattern, e.kind, str(e)))
                # the remaining patterns would fail the same way on this file
                break
            results.extend(names)
            file_count += len(names)
        if file_count:
            report.per_file[entry.path] = file_count

    report.matches = results.added
    report.names = results.sorted()
    if metrics is not None:
        metrics.names_extracted.inc(report.matches)
        metrics.unique_names.set(len(report.names))
    logger.info(
        "Scanned %d file(s): %d match(es), %d unique name(s), %d skipped",
        report.files_scanned, report.matches, len(report.names), len(report.errors),
    )
    return report


__all__ = ['ON_ERROR_POLICIES', 'run_scan']
