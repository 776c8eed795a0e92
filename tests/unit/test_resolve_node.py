"""Tests for dependent resolution."""

from core.discover import build_index
from core.models import DependencyKind
from core.resolve_node import resolve_dependents


class TestResolveDependents:
    """Test classification of dependents by kind."""

    def test_classifies_each_kind(self, workspace):
        """Should put b, c and d into their respective sets."""
        sets = resolve_dependents("a", build_index([workspace]))

        assert list(sets.dependencies) == ["b"]
        assert list(sets.peer_dependencies) == ["c"]
        assert list(sets.dev_dependencies) == ["d"]
        assert sets.names() == ["b", "c", "d"]

    def test_sound_and_complete(self, workspace):
        """Every member lists the target under its kind and nobody else is included."""
        index = build_index([workspace])
        sets = resolve_dependents("left-pad", index)

        for kind, name, record in sets.items():
            assert "left-pad" in record.ranges(kind)

        expected = {
            name for name in index
            if any("left-pad" in index[name].ranges(kind) for kind in DependencyKind)
        }
        assert set(sets.names()) == expected == {"b", "e"}

    def test_record_in_multiple_sets(self, tmp_path, make_package):
        """Should list a package under every kind that references the target."""
        make_package(tmp_path / "x", {
            "name": "x",
            "dependencies": {"a": "^1.0.0"},
            "devDependencies": {"a": "^1.0.0"},
        })

        sets = resolve_dependents("a", build_index([tmp_path]))

        assert "x" in sets.dependencies
        assert "x" in sets.dev_dependencies
        assert sets.peer_dependencies == {}

    def test_target_need_not_be_indexed(self, workspace):
        """Should resolve dependents even when the target lives elsewhere."""
        sets = resolve_dependents("left-pad", build_index([workspace]))

        assert not sets.is_empty()

    def test_unknown_target_is_empty(self, workspace):
        """Should return empty sets when nothing references the target."""
        sets = resolve_dependents("nobody-uses-me", build_index([workspace]))

        assert sets.is_empty()

    def test_target_excluded_from_own_dependents(self, tmp_path, make_package):
        """Should not list the target as its own dependent."""
        make_package(tmp_path / "a", {"name": "a", "version": "1.0.0", "devDependencies": {"a": "1.0.0"}})
        make_package(tmp_path / "b", {"name": "b", "dependencies": {"a": "1.0.0"}})

        sets = resolve_dependents("a", build_index([tmp_path]))

        assert sets.names() == ["b"]
