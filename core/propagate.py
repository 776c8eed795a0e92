"""End-to-end propagation: scan, resolve, update, diff and write."""

import asyncio
import logging

from .config import RunOptions
from .discover import build_index
from .models import RunReport, UpdateResult
from .report import ManifestWriter, diff_dependents
from .resolve_node import resolve_dependents
from .update import apply_version, determine_version

logger = logging.getLogger(__name__)


def compute_update(options: RunOptions) -> tuple[UpdateResult, str, list[str]]:
    """Scan the roots and compute updated dependents without writing.

    Returns:
        The original/updated dependents, the version propagated and any
        scan warnings

    Raises:
        ScanError: If no manifests could be found
        VersionNotFoundError: If no version to propagate is available
    """
    index = build_index(options.roots, options.exclude_dirs, options.manifest_name)
    new_version = determine_version(options.target, index, options.new_version)
    logger.info("Propagating %s@%s with prefix %r", options.target, new_version, options.prefix)

    original = resolve_dependents(options.target, index)
    updated = apply_version(options.target, new_version, original, options.prefix)

    warnings = list(index.warnings) + list(index.scan_errors)
    return UpdateResult(original=original, updated=updated), new_version, warnings


def propagate(options: RunOptions) -> RunReport:
    """Run a full propagation and, unless dry-running, write the results."""
    result, new_version, warnings = compute_update(options)
    events = diff_dependents(options.target, result.original, result.updated)

    report = RunReport(
        target=options.target,
        new_version=new_version,
        prefix=options.prefix,
        dry_run=options.dry_run,
        events=events,
        warnings=warnings,
    )

    if options.dry_run or not events:
        return report

    writer = ManifestWriter(max_concurrency=options.max_concurrency)
    report.written, report.failures = asyncio.run(writer.write_all(events, result.updated))
    return report
