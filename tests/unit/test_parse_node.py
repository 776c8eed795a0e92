"""Tests for package.json parsing and serialisation."""

import json

import pytest

from core.errors import ManifestParseError
from core.models import DependencyKind
from core.parse_node import dump_manifest, load_manifest, parse_package_json


class TestPackageJsonParser:
    """Test package.json parsing."""

    def test_parse_sample(self, sample_package_json):
        """Should decode a manifest and keep its fields."""
        data = parse_package_json(sample_package_json)

        assert data["name"] == "test-project"
        assert data["dependencies"] == {"express": "^4.18.0", "lodash": "~4.17.21"}

    def test_parse_invalid_json(self):
        """Should raise ManifestParseError on malformed JSON."""
        with pytest.raises(ManifestParseError) as exc_info:
            parse_package_json('{"name": "broken",')

        assert "invalid JSON" in exc_info.value.reason

    def test_parse_non_object(self):
        """Should reject manifests whose top level is not an object."""
        with pytest.raises(ManifestParseError):
            parse_package_json('["a", "b"]')

    @pytest.mark.parametrize("content", ['{"version": "1.0.0"}', '{"name": ""}', '{"name": 3}'])
    def test_parse_missing_name(self, content):
        """Should reject manifests without a usable name."""
        with pytest.raises(ManifestParseError) as exc_info:
            parse_package_json(content)

        assert "name" in exc_info.value.reason


class TestLoadManifest:
    """Test loading manifests from disk."""

    def test_load_record_paths(self, tmp_path, make_package):
        """Should record the owning directory and the manifest path."""
        path = make_package(tmp_path / "pkg", {"name": "pkg", "version": "1.0.0"})

        record = load_manifest(path)

        assert record.name == "pkg"
        assert record.version == "1.0.0"
        assert record.abs_path == path.resolve()
        assert record.absolute_path == path.parent.resolve()
        assert record.trailing_newline is True

    def test_load_without_trailing_newline(self, tmp_path, make_package):
        """Should remember that the source had no trailing newline."""
        path = make_package(tmp_path / "pkg", {"name": "pkg"}, trailing_newline=False)

        assert load_manifest(path).trailing_newline is False

    def test_load_missing_file(self, tmp_path):
        """Should turn an unreadable file into ManifestParseError."""
        with pytest.raises(ManifestParseError):
            load_manifest(tmp_path / "nope" / "package.json")

    def test_ranges_for_absent_section(self, tmp_path, make_package):
        """Should return an empty mapping for missing dependency sections."""
        path = make_package(tmp_path / "pkg", {"name": "pkg", "peerDependencies": "oops"})
        record = load_manifest(path)

        assert record.ranges(DependencyKind.DEPENDENCIES) == {}
        assert record.ranges(DependencyKind.PEER) == {}


class TestDumpManifest:
    """Test manifest serialisation."""

    def test_dump_two_space_indent_and_order(self):
        """Should keep key order and indent with two spaces."""
        data = {"name": "b", "version": "1.0.0", "dependencies": {"z": "1", "a": "2"}}

        text = dump_manifest(data)

        assert text == json.dumps(data, indent=2) + "\n"
        assert text.index('"z"') < text.index('"a"')
        assert '\n  "version"' in text

    def test_dump_keeps_unicode(self):
        """Should not escape non-ASCII text."""
        text = dump_manifest({"name": "b", "author": "Zoë"}, trailing_newline=False)

        assert "Zoë" in text
        assert not text.endswith("\n")
