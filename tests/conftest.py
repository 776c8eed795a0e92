"""Pytest configuration and fixtures."""

import json

import pytest


def write_package(directory, data, trailing_newline=True):
    """Write ``data`` as directory/package.json and return the file path."""
    directory.mkdir(parents=True, exist_ok=True)
    manifest = directory / "package.json"
    text = json.dumps(data, indent=2)
    manifest.write_text(text + "\n" if trailing_newline else text)
    return manifest


@pytest.fixture
def sample_package_json():
    """Sample package.json content for testing."""
    return """
{
  "name": "test-project",
  "version": "1.2.3",
  "dependencies": {
    "express": "^4.18.0",
    "lodash": "~4.17.21"
  }
}
"""


@pytest.fixture
def workspace(tmp_path):
    """A workspace with a@2.0.0 and dependents b (dep), c (peer), d (dev)."""
    root = tmp_path / "workspace"
    write_package(root / "a", {"name": "a", "version": "2.0.0"})
    write_package(root / "b", {
        "name": "b",
        "version": "0.1.0",
        "description": "depends on a",
        "dependencies": {"a": "~1.0.0", "left-pad": "^1.3.0"},
    })
    write_package(root / "c", {
        "name": "c",
        "version": "0.1.0",
        "peerDependencies": {"a": "^1.0.0"},
    })
    write_package(root / "d", {
        "name": "d",
        "version": "0.1.0",
        "devDependencies": {"a": "1.0.0"},
        "scripts": {"test": "jest"},
    })
    write_package(root / "e", {
        "name": "e",
        "version": "0.1.0",
        "dependencies": {"left-pad": "^1.3.0"},
    })
    return root


@pytest.fixture
def snapshot():
    """Return a callable capturing every package.json under a root."""

    def _snapshot(root):
        return {
            str(path.relative_to(root)): path.read_text()
            for path in sorted(root.rglob("package.json"))
        }

    return _snapshot


@pytest.fixture
def make_package():
    """Expose write_package to tests."""
    return write_package
