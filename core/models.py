"""Core data models for update-dependents."""

import copy
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType


class DependencyKind(str, Enum):
    """Dependency sections of a package.json, in canonical order."""

    DEPENDENCIES = "dependencies"
    PEER = "peerDependencies"
    DEV = "devDependencies"


@dataclass
class ManifestRecord:
    """A parsed package.json together with where it came from."""

    data: dict
    absolute_path: Path  # owning package directory
    abs_path: Path  # the manifest file itself
    trailing_newline: bool = True

    @property
    def name(self) -> str:
        return self.data.get("name", "")

    @property
    def version(self) -> str | None:
        version = self.data.get("version")
        return version if isinstance(version, str) and version else None

    def ranges(self, kind: DependencyKind) -> dict:
        """Return the dependency mapping for ``kind`` (empty if absent)."""
        section = self.data.get(kind.value)
        return section if isinstance(section, dict) else {}

    def copy(self) -> "ManifestRecord":
        return ManifestRecord(
            data=copy.deepcopy(self.data),
            absolute_path=self.absolute_path,
            abs_path=self.abs_path,
            trailing_newline=self.trailing_newline,
        )


class ManifestIndex(Mapping):
    """Read-only mapping of package name to ManifestRecord.

    Iteration is always in ascending package-name order so that everything
    derived from the index is deterministic across runs.
    """

    def __init__(
        self,
        records: dict[str, ManifestRecord],
        warnings: list[str] | None = None,
        scan_errors: list[str] | None = None,
    ):
        self._records = MappingProxyType(dict(records))
        self.warnings = tuple(warnings or ())
        self.scan_errors = tuple(scan_errors or ())

    def __getitem__(self, name: str) -> ManifestRecord:
        return self._records[name]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"ManifestIndex({list(self)!r})"


@dataclass
class DependentSets:
    """Dependents of one target package, split by dependency kind."""

    target: str
    dependencies: dict[str, ManifestRecord] = field(default_factory=dict)
    peer_dependencies: dict[str, ManifestRecord] = field(default_factory=dict)
    dev_dependencies: dict[str, ManifestRecord] = field(default_factory=dict)

    def by_kind(self, kind: DependencyKind) -> dict[str, ManifestRecord]:
        if kind is DependencyKind.DEPENDENCIES:
            return self.dependencies
        if kind is DependencyKind.PEER:
            return self.peer_dependencies
        return self.dev_dependencies

    def items(self) -> Iterator[tuple[DependencyKind, str, ManifestRecord]]:
        """Yield (kind, dependent name, record) in canonical order."""
        for kind in DependencyKind:
            members = self.by_kind(kind)
            for name in sorted(members):
                yield kind, name, members[name]

    def names(self) -> list[str]:
        """All dependent names across every kind, sorted and unique."""
        return sorted({name for _, name, _ in self.items()})

    def is_empty(self) -> bool:
        return not (self.dependencies or self.peer_dependencies or self.dev_dependencies)


@dataclass
class UpdateResult:
    """Original and updated dependents for a single run."""

    original: DependentSets
    updated: DependentSets


@dataclass
class ChangeEvent:
    """A single rewritten (or would-be rewritten) dependency range."""

    dependent_name: str
    kind: DependencyKind
    target: str
    from_range: str
    to_range: str
    manifest_path: Path
    semver_delta: str = "unknown"  # major, minor, patch, unknown


@dataclass
class WriteFailure:
    """A manifest that could not be persisted."""

    dependent_name: str
    manifest_path: Path
    error: str


@dataclass
class RunReport:
    """Outcome of one propagation run."""

    target: str
    new_version: str
    prefix: str
    dry_run: bool
    events: list[ChangeEvent] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    failures: list[WriteFailure] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.events)
