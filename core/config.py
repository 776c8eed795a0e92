"""Run configuration for update-dependents."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .discover import DEFAULT_EXCLUDES
from .parse_node import MANIFEST_NAME
from .update import DEFAULT_PREFIX


class RunOptions(BaseModel):
    """Options for a single propagation run.

    Roots are always explicit; callers decide what the default root is.
    """

    target: str
    roots: list[Path] = Field(min_length=1)
    prefix: str = DEFAULT_PREFIX
    new_version: Optional[str] = None
    dry_run: bool = False
    exclude_dirs: frozenset[str] = DEFAULT_EXCLUDES
    manifest_name: str = MANIFEST_NAME
    max_concurrency: int = Field(default=6, ge=1)

    @field_validator("target")
    @classmethod
    def _target_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("target package name must not be empty")
        return value

    @field_validator("new_version")
    @classmethod
    def _blank_version_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None
