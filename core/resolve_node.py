"""Dependent resolution for Node.js workspaces."""

import logging

from .models import DependencyKind, DependentSets, ManifestIndex

logger = logging.getLogger(__name__)


def resolve_dependents(target: str, index: ManifestIndex) -> DependentSets:
    """Partition indexed manifests by how they depend on ``target``.

    The target itself need not be in the index; a package with no dependents
    yields empty sets rather than an error. A manifest that declares the
    target under several kinds appears in each matching set.

    Args:
        target: Name of the package whose dependents are wanted
        index: The manifest index to search

    Returns:
        The dependency, peer and dev dependent sets for ``target``
    """
    sets = DependentSets(target=target)

    for name in index:
        if name == target:
            continue
        record = index[name]
        for kind in DependencyKind:
            if target in record.ranges(kind):
                sets.by_kind(kind)[name] = record

    logger.debug(
        "%s has %d dependency, %d peer and %d dev dependent(s)",
        target,
        len(sets.dependencies),
        len(sets.peer_dependencies),
        len(sets.dev_dependencies),
    )
    return sets
