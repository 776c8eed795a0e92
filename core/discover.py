"""Workspace scanning: build the manifest index from directory roots."""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .errors import ManifestParseError, ScanError
from .models import ManifestIndex, ManifestRecord
from .parse_node import MANIFEST_NAME, load_manifest

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDES = frozenset({"node_modules"})


def discover_manifests(
    root: Path,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDES,
    manifest_name: str = MANIFEST_NAME,
    warnings: list[str] | None = None,
) -> list[Path]:
    """Find manifest files recursively under root, pruning excluded dirs.

    Directories are visited in sorted order so the result is stable. A
    subdirectory that cannot be listed is logged, appended to ``warnings``
    when given, and skipped.

    Raises:
        ScanError: If root itself cannot be listed
    """
    root = Path(root)
    excluded = set(exclude_dirs)
    found: list[Path] = []

    def on_error(error: OSError) -> None:
        if error.filename is None or Path(error.filename) == root:
            raise ScanError(f"Root {root} is not readable ({error.strerror})") from error
        message = f"Skipping unreadable directory {error.filename} ({error.strerror})"
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        if manifest_name in filenames:
            found.append(Path(dirpath) / manifest_name)

    return found


def scan_root(
    root: Path,
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDES,
    manifest_name: str = MANIFEST_NAME,
) -> tuple[list[ManifestRecord], list[str]]:
    """Load every manifest under a single root.

    Returns:
        The loaded records and a list of warnings for skipped manifests

    Raises:
        ScanError: If root does not exist, is not a directory or is unreadable
    """
    root = Path(root).resolve()
    if not root.exists():
        raise ScanError(f"Root {root} does not exist")
    if not root.is_dir():
        raise ScanError(f"Root {root} is not a directory")

    records: list[ManifestRecord] = []
    warnings: list[str] = []

    for manifest_path in discover_manifests(root, exclude_dirs, manifest_name, warnings):
        try:
            records.append(load_manifest(manifest_path))
        except ManifestParseError as e:
            message = f"Skipping {e.path}: {e.reason}"
            logger.warning(message)
            warnings.append(message)

    logger.debug("Found %d manifest(s) under %s", len(records), root)
    return records, warnings


def build_index(
    roots: Iterable[Path],
    exclude_dirs: Iterable[str] = DEFAULT_EXCLUDES,
    manifest_name: str = MANIFEST_NAME,
) -> ManifestIndex:
    """Scan all roots and index their manifests by package name.

    An unusable root is logged and skipped; the remaining roots are still
    scanned. If two manifests share a name the later one wins and a
    collision warning is recorded.

    Raises:
        ScanError: If no manifest could be indexed from any root
    """
    exclude_dirs = frozenset(exclude_dirs)
    records: dict[str, ManifestRecord] = {}
    warnings: list[str] = []
    scan_errors: list[str] = []

    for root in roots:
        try:
            found, root_warnings = scan_root(root, exclude_dirs, manifest_name)
        except ScanError as e:
            logger.error("%s", e)
            scan_errors.append(str(e))
            continue

        warnings.extend(root_warnings)
        for record in found:
            previous = records.get(record.name)
            if previous is not None and previous.abs_path != record.abs_path:
                message = (
                    f"Package {record.name} found in both {previous.abs_path} "
                    f"and {record.abs_path}; using the latter"
                )
                logger.warning(message)
                warnings.append(message)
            records[record.name] = record

    if not records:
        details = "; ".join(scan_errors)
        raise ScanError(
            "No manifests found in any of the given paths" + (f" ({details})" if details else "")
        )

    return ManifestIndex(records, warnings=warnings, scan_errors=scan_errors)
