"""Change detection and persistence of updated manifests."""

import asyncio
import logging
import re
from pathlib import Path

from packaging.version import InvalidVersion, Version

from .models import ChangeEvent, DependentSets, ManifestRecord, WriteFailure
from .parse_node import dump_manifest

logger = logging.getLogger(__name__)

_RANGE_OPERATORS = re.compile(r"^[\s~^=v<>]+")


def calculate_semver_delta(from_range: str, to_range: str) -> str:
    """Classify a range bump as "major", "minor", "patch" or "unknown".

    Only simple ranges (an optional operator followed by one version) can be
    compared; anything else is "unknown".
    """
    try:
        old_ver = Version(_RANGE_OPERATORS.sub("", from_range))
        new_ver = Version(_RANGE_OPERATORS.sub("", to_range))
    except (InvalidVersion, TypeError):
        return "unknown"

    if new_ver > old_ver:
        if new_ver.major > old_ver.major:
            return "major"
        elif new_ver.minor > old_ver.minor:
            return "minor"
        elif new_ver.micro > old_ver.micro:
            return "patch"

    return "unknown"


def diff_dependents(target: str, original: DependentSets, updated: DependentSets) -> list[ChangeEvent]:
    """Compare the target's range in every dependent before and after.

    Dependents whose range did not change produce no event. Events come out
    in canonical kind order, then by dependent name.
    """
    events: list[ChangeEvent] = []

    for kind, name, after in updated.items():
        before = original.by_kind(kind).get(name)
        if before is None:
            continue

        old_range = before.ranges(kind).get(target)
        new_range = after.ranges(kind).get(target)
        if old_range == new_range:
            continue

        events.append(
            ChangeEvent(
                dependent_name=name,
                kind=kind,
                target=target,
                from_range=str(old_range),
                to_range=str(new_range),
                manifest_path=after.abs_path,
                semver_delta=calculate_semver_delta(str(old_range), str(new_range)),
            )
        )

    return events


def format_change(event: ChangeEvent, dry_run: bool) -> str:
    """Render an event as a single plain-text console line."""
    action = "would update" if dry_run else "updated"
    return (
        f"{action} {event.dependent_name}.{event.kind.value}.{event.target} "
        f"from {event.from_range} to {event.to_range}"
    )


class ManifestWriter:
    """Writes updated manifests back to disk, one file at a time per task."""

    def __init__(self, max_concurrency: int = 6):
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def write_all(
        self, events: list[ChangeEvent], updated: DependentSets
    ) -> tuple[list[Path], list[WriteFailure]]:
        """Persist every manifest touched by ``events``.

        Each file is written once even when several of its entries changed.
        All writes are awaited before returning; a failing file is reported
        and never stops the others.

        Returns:
            The paths written and the failures encountered
        """
        records = {name: record for _, name, record in updated.items()}
        pending: dict[Path, ManifestRecord] = {}
        for event in events:
            pending.setdefault(event.manifest_path, records[event.dependent_name])

        targets = list(pending.values())
        results = await asyncio.gather(
            *(self._write(record) for record in targets), return_exceptions=True
        )

        written: list[Path] = []
        failures: list[WriteFailure] = []
        for record, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.error("Could not write %s: %s", record.abs_path, result)
                failures.append(
                    WriteFailure(
                        dependent_name=record.name,
                        manifest_path=record.abs_path,
                        error=str(result),
                    )
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                written.append(record.abs_path)

        return written, failures

    async def _write(self, record: ManifestRecord) -> None:
        async with self._semaphore:
            await asyncio.to_thread(self._write_sync, record)

    @staticmethod
    def _write_sync(record: ManifestRecord) -> None:
        # encode first so an unencodable manifest leaves the file untouched
        payload = dump_manifest(record.data, record.trailing_newline).encode("utf-8")
        # r+ so a manifest deleted since the scan fails instead of reappearing
        with record.abs_path.open("r+b") as fh:
            fh.write(payload)
            fh.truncate()
        logger.debug("Wrote %s", record.abs_path)
