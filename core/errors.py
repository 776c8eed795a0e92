"""Exceptions raised by the update-dependents core."""


class UpdateDependentsError(Exception):
    """Base class for errors raised by the update-dependents core.

    Most subclasses end a run; ManifestParseError is caught during scanning
    and only turned into a warning.
    """


class ScanError(UpdateDependentsError):
    """A root could not be scanned, or no manifest was found at all."""


class ManifestParseError(UpdateDependentsError):
    """A package.json could not be parsed into a usable manifest."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class VersionNotFoundError(UpdateDependentsError):
    """No version to propagate was given and none could be read."""
