"""Tests for filter_tree() and filter_by_text()."""

from suitetree.models.node import Node, NodeKind
from suitetree.tree.builder import build_root
from suitetree.tree.filtering import filter_by_text, filter_tree


def _dir(path: str, *children: Node) -> Node:
    return Node(path=path, label=path.rsplit("/", 1)[-1], kind=NodeKind.DIRECTORY, child_nodes=list(children))


def _file(path: str, is_test: bool = False) -> Node:
    return Node(
        path=path,
        label=path.rsplit("/", 1)[-1],
        kind=NodeKind.TEST if is_test else NodeKind.FILE,
    )


class TestFilterTree:
    """Tests for structural pruning."""

    def test_removes_empty_directories(self):
        keep = _file("src/a.ts")
        root = build_root([_dir("empty"), _dir("src", keep, _dir("src/nested"))])
        result = filter_tree(root)
        assert [c.path for c in result.child_nodes] == ["src"]
        assert [c.path for c in result.child_nodes[0].child_nodes] == ["src/a.ts"]
        assert result.child_nodes[0].child_nodes[0] is keep

    def test_does_not_mutate_source(self):
        src = _dir("src", _file("src/a.ts"), _dir("src/empty"))
        root = build_root([src])
        filter_tree(root)
        assert len(src.child_nodes) == 2

    def test_unpruned_tree_is_returned_as_is(self):
        root = build_root([_dir("src", _file("src/a.ts")), _file("README.md")])
        assert filter_tree(root) is root

    def test_keep_predicate_excludes_leaves(self):
        spec = _file("test/a.spec.ts", is_test=True)
        root = build_root([
            _dir("src", _file("src/a.ts")),
            _dir("test", _file("test/helper.ts"), spec),
        ])
        result = filter_tree(root, keep=lambda n: n.is_test)
        assert [c.path for c in result.child_nodes] == ["test"]
        assert result.child_nodes[0].child_nodes == [spec]

    def test_preserves_child_order(self):
        root = build_root([_file("z.ts"), _file("a.ts"), _file("m.ts")])
        result = filter_tree(root)
        assert [c.path for c in result.child_nodes] == ["z.ts", "a.ts", "m.ts"]

    def test_everything_pruned_leaves_empty_root(self):
        root = build_root([_dir("a", _dir("a/b"))])
        result = filter_tree(root)
        assert result.child_nodes == []
        assert result.label == "root"


class TestFilterByText:
    """Tests for flat text search."""

    def _index(self):
        nodes = [_dir("src"), _file("src/a.ts"), _file("src/b.ts"), _file("test/a.spec.ts", is_test=True)]
        return {n.path: n for n in nodes}

    def test_case_insensitive_substring(self):
        result = filter_by_text(self._index(), "A")
        assert [n.path for n in result] == ["src/a.ts", "test/a.spec.ts"]

    def test_matches_path_as_well_as_label(self):
        result = filter_by_text(self._index(), "test/")
        assert [n.path for n in result] == ["test/a.spec.ts"]

    def test_predicate_restricts_candidates(self):
        result = filter_by_text(self._index(), "a", predicate=lambda n: n.is_test)
        assert [n.path for n in result] == ["test/a.spec.ts"]

    def test_directories_never_match(self):
        assert filter_by_text(self._index(), "src") == [
            n for n in self._index().values() if n.path.startswith("src/")
        ]

    def test_blank_query_returns_default_identity(self):
        forest = [_dir("src")]
        assert filter_by_text(self._index(), "  ", default=forest) is forest

    def test_blank_query_without_default_returns_all_candidates(self):
        result = filter_by_text(self._index(), "")
        assert [n.path for n in result] == ["src/a.ts", "src/b.ts", "test/a.spec.ts"]

    def test_no_match(self):
        assert filter_by_text(self._index(), "zzz") == []
