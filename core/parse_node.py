"""Node.js package.json parsing and serialisation."""

import json
from pathlib import Path

from .errors import ManifestParseError
from .models import ManifestRecord

MANIFEST_NAME = "package.json"


def parse_package_json(content: str, path: Path | None = None) -> dict:
    """Parse package.json content into a plain mapping.

    Args:
        content: The package.json file content
        path: Optional source path, used in error messages

    Returns:
        The decoded manifest, with key order preserved

    Raises:
        ManifestParseError: If the content is not a JSON object with a name
    """
    source = path or "<string>"
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestParseError(source, f"invalid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(data, dict):
        raise ManifestParseError(source, "top-level value is not an object")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ManifestParseError(source, "missing package name")

    return data


def load_manifest(path: Path) -> ManifestRecord:
    """Read and parse the package.json at ``path``."""
    path = Path(path).resolve()
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestParseError(path, f"unreadable ({e})") from e

    data = parse_package_json(content, path)
    return ManifestRecord(
        data=data,
        absolute_path=path.parent,
        abs_path=path,
        trailing_newline=content.endswith("\n"),
    )


def dump_manifest(data: dict, trailing_newline: bool = True) -> str:
    """Serialise a manifest with two-space indentation.

    Key order is kept as loaded, and non-ASCII text is written as-is.
    """
    text = json.dumps(data, indent=2, ensure_ascii=False)
    return text + "\n" if trailing_newline else text
