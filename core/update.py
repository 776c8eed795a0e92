"""Rewriting dependents to reference a new version of the target."""

import logging

from .errors import VersionNotFoundError
from .models import DependentSets, ManifestIndex, ManifestRecord

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "~"


def build_range(prefix: str, version: str) -> str:
    """Join a range prefix and a version; neither is validated."""
    return f"{prefix}{version}"


def determine_version(target: str, index: ManifestIndex, override: str | None = None) -> str:
    """Pick the version to propagate.

    An explicit override always wins; otherwise the target's own manifest
    version is used.

    Raises:
        VersionNotFoundError: If there is no override and the target is not
            indexed or has no version
    """
    if override:
        return override

    record = index.get(target)
    if record is None:
        raise VersionNotFoundError(
            f"Package {target} was not found in the scanned paths and no version was given"
        )
    if record.version is None:
        raise VersionNotFoundError(f"Package {target} ({record.abs_path}) has no version")

    return record.version


def apply_version(
    target: str,
    new_version: str,
    sets: DependentSets,
    prefix: str = DEFAULT_PREFIX,
) -> DependentSets:
    """Return updated copies of every dependent; ``sets`` is left untouched.

    Each dependent is copied once, so a package listed under several kinds
    gets a single updated manifest carrying every rewritten entry.
    """
    new_range = build_range(prefix, new_version)
    updated = DependentSets(target=target)
    copies: dict[str, ManifestRecord] = {}

    for kind, name, record in sets.items():
        dependent = copies.get(name)
        if dependent is None:
            dependent = copies[name] = record.copy()

        ranges = dependent.ranges(kind)
        if target in ranges:
            ranges[target] = new_range
        else:
            logger.debug("%s has no %s entry for %s; leaving it as is", name, kind.value, target)

        updated.by_kind(kind)[name] = dependent

    return updated
