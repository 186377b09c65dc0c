"""Derived views over node trees: structural pruning and flat text search.

Nothing here mutates the nodes it is given. Pruned trees share every
subtree that survived intact with the source tree, so consumers can compare
nodes by identity to find what changed.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Optional

from suitetree.models.node import Node

NodePredicate = Callable[[Node], bool]


def filter_tree(root: Node, keep: Optional[NodePredicate] = None) -> Node:
    """Return ``root`` with empty directories pruned and excluded leaves dropped.

    ``keep`` decides which leaves survive (all of them by default). A
    directory survives only if at least one descendant leaf does; the root
    itself is always returned. Child order follows the source.
    """
    pruned = _prune(root, keep)
    if pruned is None:
        return root.model_copy(update={"child_nodes": []})
    return pruned


def _prune(node: Node, keep: Optional[NodePredicate]) -> Optional[Node]:
    if not node.is_directory:
        if keep is None or keep(node):
            return node
        return None

    survivors = []
    changed = False
    for child in node.child_nodes:
        kept = _prune(child, keep)
        if kept is None:
            changed = True
            continue
        if kept is not child:
            changed = True
        survivors.append(kept)

    if not survivors:
        return None
    if not changed:
        return node
    return node.model_copy(update={"child_nodes": survivors})


def filter_by_text(
    nodes: Mapping[str, Node],
    query: str,
    predicate: Optional[NodePredicate] = None,
    default: Optional[Sequence[Node]] = None,
) -> Sequence[Node]:
    """Flat case-insensitive substring search over label and path.

    Directories never match; depth is irrelevant. Results keep the index
    order. A blank query returns ``default`` itself when given.
    """
    needle = query.strip().lower()
    if not needle and default is not None:
        return default

    matches = []
    for node in nodes.values():
        if node.is_directory:
            continue
        if predicate is not None and not predicate(node):
            continue
        if not needle or needle in node.label.lower() or needle in node.path.lower():
            matches.append(node)
    return matches
