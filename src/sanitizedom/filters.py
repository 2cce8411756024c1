"""User filter callbacks and the pipeline that runs them.

A filter is called as ``filter(node, context)`` and can:

1. modify ``node`` in place and return it (keep),
2. return a new node, or a list of nodes, to replace ``node`` with,
3. return ``None`` (or an empty list) to remove ``node``.

Filters may also return a :class:`FilterOutcome` directly.

Replacement nodes are processed as if they had been part of the original
tree, filters included. A replacement with the same tag name as ``node``
would hit the same filters again, so the filter must declare its intent in
the side table (``context.side_table.mark(new, skip_filters=True|False)``);
otherwise :class:`~sanitizedom.errors.InfiniteLoopError` is raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import InfiniteLoopError
from .matcher import node_name

if TYPE_CHECKING:
    from collections.abc import Generator, Sequence

    from .options import FilterCallback
    from .sanitizer import Sanitizer
    from .side_table import SideTable

    Step = Generator[Any, Any, bool]


class _StrEnum(str, Enum):
    """Backport of enum.StrEnum (Python 3.11+)."""


class FilterAction(_StrEnum):
    KEEP = "keep"
    REPLACE = "replace"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class FilterOutcome:
    action: FilterAction
    nodes: tuple[Any, ...] = ()

    @classmethod
    def keep(cls) -> FilterOutcome:
        return _KEEP

    @classmethod
    def remove(cls) -> FilterOutcome:
        return _REMOVE

    @classmethod
    def replace(cls, *nodes: Any) -> FilterOutcome:
        if not nodes:
            return _REMOVE
        return cls(FilterAction.REPLACE, tuple(nodes))


_KEEP = FilterOutcome(FilterAction.KEEP)
_REMOVE = FilterOutcome(FilterAction.REMOVE)


@dataclass(frozen=True, slots=True)
class FilterContext:
    """What a filter knows about the node's position.

    ``parents`` and ``parent_tag_names`` run from the immediate parent up
    to the traversal root. Tag names are upper-case.
    """

    parents: tuple[Any, ...]
    parent_tag_names: tuple[str, ...]
    index: int
    document: Any
    side_table: SideTable


def classify_result(node: Any, result: Any) -> FilterOutcome:
    """Normalize a filter's return value into a :class:`FilterOutcome`."""
    if result is node:
        return _KEEP
    if result is None:
        return _REMOVE
    if isinstance(result, FilterOutcome):
        nodes = result.nodes
    elif isinstance(result, (list, tuple)):
        nodes = tuple(result)
        if not nodes:
            return _REMOVE
    elif hasattr(result, "tag_name"):
        return FilterOutcome(FilterAction.REPLACE, (result,))
    else:
        raise TypeError(f"Unsupported filter result: {type(result).__name__}")

    for replacement in nodes:
        if replacement is node:
            raise TypeError("A filter may not return the original node inside a replacement list")
        if not hasattr(replacement, "tag_name"):
            raise TypeError(f"Unsupported replacement node: {type(replacement).__name__}")
    return result if isinstance(result, FilterOutcome) else FilterOutcome(FilterAction.REPLACE, nodes)


def filter_name(func: Any) -> str:
    return getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or "anonymous"


def run_filters(sanitizer: Sanitizer, node: Any, filters: Sequence[FilterCallback], index: int) -> Step:
    """Run ``filters`` on ``node``.

    A processing step for the sanitizer's work stack: replacements are
    yielded for processing, and the step finishes with True when the node
    was removed or replaced.
    """
    side_table = sanitizer.side_table
    if side_table.consume(node, "skip_filters"):
        if sanitizer.env_debug:
            sanitizer.debug(f"skip_filters set on {node_name(node)}, filters bypassed")
        return False

    report = sanitizer.options.report
    for func in filters:
        outcome = classify_result(node, func(node, sanitizer.filter_context(index)))

        if outcome.action is FilterAction.KEEP:
            # The filter may have asked to stop filtering this node.
            if side_table.consume(node, "skip_filters"):
                break
            continue

        name = node_name(node)
        parent = node.parent

        if outcome.action is FilterAction.REMOVE:
            if parent is not None:
                parent.remove_child(node)
            if sanitizer.env_debug:
                sanitizer.debug(f"filter {filter_name(func)} removed {name}")
            if report is not None:
                report(f"Filter '{filter_name(func)}' removed <{name.lower()}>", node=node)
            return True

        replacements = outcome.nodes
        if parent is not None:
            for replacement in replacements:
                parent.insert_before(replacement, node)
            parent.remove_child(node)

        for replacement in replacements:
            if node_name(replacement) == name and not side_table.is_defined(replacement, "skip_filters"):
                raise InfiniteLoopError(filter_name(func), name)

        if sanitizer.env_debug:
            sanitizer.debug(f"filter {filter_name(func)} replaced {name} with {len(replacements)} node(s)")
        if report is not None:
            report(f"Filter '{filter_name(func)}' replaced <{name.lower()}>", node=node)

        for replacement in replacements:
            yield sanitizer.process_replacement(replacement)
        return True

    return False
