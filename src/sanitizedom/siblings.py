"""Merging of adjacent same-tag siblings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .matcher import node_name
from .node import is_element_node, is_text_node

if TYPE_CHECKING:
    from collections.abc import Collection

    from .options import ReportCallback


def _is_whitespace_text(node: Any) -> bool:
    if not is_text_node(node):
        return False
    text = node.text_content
    return bool(text) and not text.strip()


def _move_children(source: Any, target: Any) -> None:
    for child in list(source.children):
        target.append_child(child)


def _join_first(parent: Any, joinable: Collection[str], report: ReportCallback | None) -> bool:
    siblings = list(parent.children)
    count = len(siblings)
    for i in range(count - 1):
        node = siblings[i]
        if not is_element_node(node):
            continue
        name = node_name(node)
        if name not in joinable:
            continue

        neighbour = siblings[i + 1]
        if node_name(neighbour) == name:
            _move_children(neighbour, node)
            parent.remove_child(neighbour)
            if report is not None:
                report(f"Joined adjacent <{name.lower()}> siblings", node=node)
            return True

        # Look ahead across a single whitespace-only text node.
        if i + 2 < count and _is_whitespace_text(neighbour) and node_name(siblings[i + 2]) == name:
            after = siblings[i + 2]
            node.append_child(neighbour)
            _move_children(after, node)
            parent.remove_child(after)
            if report is not None:
                report(f"Joined <{name.lower()}> siblings across whitespace", node=node)
            return True
    return False


def join_siblings(parent: Any, joinable: Collection[str], report: ReportCallback | None = None) -> int:
    """Join same-tag element siblings of the given (upper-case) tag names.

    Two siblings join when they are adjacent or separated by nothing but a
    whitespace-only text node. A join can create a new adjacency, so the
    scan restarts after every join until nothing changes. Returns the
    number of joins performed.
    """
    joins = 0
    while _join_first(parent, joinable, report):
        joins += 1
    return joins
