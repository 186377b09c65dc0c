"""Build node forests and flat path indices from a flat list of project files."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import PurePosixPath

from suitetree.models.node import ItBlock, Node, NodeKind
from suitetree.models.project import Project, ProjectFile

logger = logging.getLogger(__name__)

ROOT_LABEL = "root"


def build_root(children: Sequence[Node]) -> Node:
    """Wrap top-level nodes under a synthetic root that is never displayed."""
    return Node(
        path="",
        label=ROOT_LABEL,
        kind=NodeKind.DIRECTORY,
        child_nodes=list(children),
    )


def _relative_parts(path: str, root_dir: str) -> tuple[str, ...]:
    pure = PurePosixPath(path)
    root = PurePosixPath(root_dir)
    if root_dir not in ("", ".") and pure.is_relative_to(root):
        pure = pure.relative_to(root)
    return tuple(p for p in pure.parts if p not in ("", "/"))


def _node_for_file(entry: ProjectFile) -> Node:
    return Node(
        path=entry.path,
        label=PurePosixPath(entry.path).name,
        kind=NodeKind.TEST if entry.is_test else NodeKind.FILE,
        it_blocks=[ItBlock(name=name) for name in entry.it_blocks],
    )


def _sort_children(node: Node) -> None:
    """Directories first, then by lower-cased label."""
    node.child_nodes.sort(key=lambda child: (not child.is_directory, child.label.lower()))
    for child in node.child_nodes:
        if child.is_directory:
            _sort_children(child)


def build_forest(
    project: Project,
    include: Callable[[ProjectFile], bool] | None = None,
) -> tuple[list[Node], dict[str, Node]]:
    """Build a directory tree for the project's files.

    Every node created, directories included, is registered in the returned
    flat index under its path. Directory paths are the file path prefixes
    (joined under ``project.root_dir`` when that is set). A file listed twice
    keeps its first entry; a file whose path collides with a directory path
    is skipped, whichever of the two was listed first.
    """
    root = build_root([])
    index: dict[str, Node] = {}
    directories: dict[tuple[str, ...], Node] = {(): root}
    base = PurePosixPath(project.root_dir)

    def dir_path_for(key: tuple[str, ...]) -> str:
        if project.root_dir in ("", "."):
            return "/".join(key)
        return str(base.joinpath(*key))

    for entry in _iter_included(project.files, include):
        existing = index.get(entry.path)
        if existing is not None:
            if existing.is_directory:
                logger.warning("Project file %s collides with a directory; skipped", entry.path)
            else:
                logger.debug("Duplicate project file ignored: %s", entry.path)
            continue
        parts = _relative_parts(entry.path, project.root_dir)
        if not parts:
            continue

        prefixes = [parts[:depth] for depth in range(1, len(parts))]
        blocked = [
            dir_path_for(key) for key in prefixes
            if key not in directories and dir_path_for(key) in index
        ]
        if blocked:
            logger.warning(
                "Project file %s needs directory %s, which is already a file; skipped",
                entry.path, blocked[0],
            )
            continue

        parent = root
        for key in prefixes:
            directory = directories.get(key)
            if directory is None:
                dir_path = dir_path_for(key)
                directory = Node(path=dir_path, label=key[-1], kind=NodeKind.DIRECTORY)
                directories[key] = directory
                parent.child_nodes.append(directory)
                index[dir_path] = directory
            parent = directory

        node = _node_for_file(entry)
        parent.child_nodes.append(node)
        index[entry.path] = node

    _sort_children(root)
    logger.debug("Built forest: %d top-level nodes, %d indexed", len(root.child_nodes), len(index))
    return root.child_nodes, index


def _iter_included(
    files: Iterable[ProjectFile], include: Callable[[ProjectFile], bool] | None
) -> Iterable[ProjectFile]:
    for entry in files:
        if include is None or include(entry):
            yield entry
