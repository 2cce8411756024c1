"""Recursive, in-place sanitizer for DOM-like trees.

"Flatten" means replacing a node with its children. For example, if the
``b`` node in ``<i>abc<b>def<u>ghi</u></b></i>`` is flattened, the result is
``<i>abcdef<u>ghi</u></i>``.

Each node is processed in this order, stopping at the first step that
applies:

1. ``skip`` is set in the side table: the node and its subtree are left
   untouched.
2. Filters matching ``filters_by_tag`` run. If one removes or replaces the
   node, processing of the node stops (replacements are processed anew).
3. Text nodes stop here.
4. ``remove_tags_direct`` (immediate parent) or ``remove_tags_deep`` (any
   ancestor) matches: the node is removed.
5. ``flatten_tags_direct`` / ``flatten_tags_deep`` matches: the node is
   flattened.
6. ``allow_tags_direct`` / ``allow_tags_deep`` matches: disallowed classes
   and attributes are dropped and the children are processed.
7. Otherwise the node is flattened.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .attributes import filter_attributes, filter_classes
from .errors import InterfaceContractError
from .filters import FilterContext, run_filters
from .matcher import matches_ancestor, matches_parent, node_name, values_for_tag
from .node import is_element_node, is_text_node
from .options import compile_options
from .parser import find_body
from .serialize import inner_html, to_html
from .side_table import SideTable
from .siblings import join_siblings

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

    from .options import CompiledOptions, ProcessingOptions

    Options = ProcessingOptions | CompiledOptions | Mapping[str, Any] | None
    Step = Generator[Any, Any, Any]


logger = logging.getLogger(__name__)

_NODE_METHODS = ("append_child", "insert_before", "remove_child")


def _check_document(doc: Any) -> None:
    if doc is None or not callable(getattr(doc, "create_element", None)):
        raise InterfaceContractError("Need DOM Document interface (function create_element missing)")
    if not callable(getattr(doc, "create_document_fragment", None)):
        raise InterfaceContractError("Need DOM Document interface (function create_document_fragment missing)")


def _check_node(node: Any) -> None:
    if node is None:
        raise InterfaceContractError("Need DOM Node interface (got None)")
    missing = [name for name in _NODE_METHODS if not callable(getattr(node, name, None))]
    if not hasattr(node, "children"):
        missing.append("children")
    if missing:
        raise InterfaceContractError(f"Need DOM Node interface ({', '.join(missing)} missing)")


class Sanitizer:
    """Applies compiled processing options to a live tree.

    The ancestor stack is rebuilt by every ``process_*`` call, so one
    instance may be reused for several trees (sequentially).

    Processing steps are generators run from an explicit stack by
    :meth:`_drive`: a step yields the step it needs done next and is
    resumed with that step's result. Nesting depth is therefore bounded by
    memory, not by the interpreter recursion limit.
    """

    __slots__ = ("_parent_names", "_parents", "doc", "env_debug", "options", "side_table")

    def __init__(
        self,
        doc: Any,
        options: Options = None,
        side_table: SideTable | None = None,
        *,
        debug: bool = False,
    ) -> None:
        _check_document(doc)
        self.doc = doc
        self.options = compile_options(options)
        self.side_table = side_table if side_table is not None else SideTable()
        self.env_debug = bool(debug)
        # Root first, immediate parent last
        self._parents: list[Any] = []
        self._parent_names: list[str] = []

    def debug(self, message: str) -> None:
        logger.debug("%s%s", "  " * len(self._parents), message)

    # -----------------
    # Entry points
    # -----------------

    def process_node(self, node: Any) -> None:
        """Process ``node`` itself and, recursively, its descendants.

        A detached node has no position to be removed from or flattened
        into: it becomes the traversal root, stays in place and only its
        descendants are processed.
        """
        _check_node(node)
        parent = node.parent
        if parent is None:
            self._reset(node)
            self._drive(self._process_child_list(node))
            return
        self._reset(parent)
        self._drive(self._process(node, parent.children.index(node)))

    def process_children(self, node: Any) -> None:
        """Process the descendants of ``node`` but not ``node`` itself."""
        _check_node(node)
        self._reset(node)
        self._drive(self._process_child_list(node))

    def process_replacement(self, node: Any) -> Step:
        """Step processing a node a filter inserted, as if it had been there all along."""
        parent = node.parent
        index = parent.children.index(node) if parent is not None else 0
        return self._process(node, index)

    def filter_context(self, index: int) -> FilterContext:
        return FilterContext(
            parents=tuple(reversed(self._parents)),
            parent_tag_names=tuple(reversed(self._parent_names)),
            index=index,
            document=self.doc,
            side_table=self.side_table,
        )

    def _reset(self, root: Any) -> None:
        self._parents = [root]
        self._parent_names = [node_name(root)]

    @staticmethod
    def _drive(step: Step) -> Any:
        """Run ``step`` and every step it yields, depth first, without recursion."""
        stack = [step]
        value = None
        while stack:
            try:
                pending = stack[-1].send(value)
            except StopIteration as stop:
                stack.pop()
                value = stop.value
            else:
                stack.append(pending)
                value = None
        return value

    # -----------------
    # Decision engine
    # -----------------

    def _process(self, node: Any, index: int) -> Step:
        side_table = self.side_table
        if side_table.consume(node, "skip"):
            if self.env_debug:
                self.debug(f"skip {node_name(node)}")
            return

        opts = self.options
        name = node_name(node)

        filters = values_for_tag(opts.filters_by_tag, name)
        if (yield run_filters(self, node, filters, index)):
            return

        if is_text_node(node):
            return

        parent_name = self._parent_names[-1]
        ancestor_names = self._parent_names

        if matches_parent(opts.remove_tags_direct, parent_name, name) or matches_ancestor(
            opts.remove_tags_deep, ancestor_names, name
        ):
            self._remove(node, name)
            return

        if matches_parent(opts.flatten_tags_direct, parent_name, name) or matches_ancestor(
            opts.flatten_tags_deep, ancestor_names, name
        ):
            yield self._flatten(node, name)
            return

        if matches_parent(opts.allow_tags_direct, parent_name, name) or matches_ancestor(
            opts.allow_tags_deep, ancestor_names, name
        ):
            if self.env_debug:
                self.debug(f"keep {name}")
            if not side_table.consume(node, "skip_classes"):
                filter_classes(node, opts.allow_classes_by_tag, name, opts.report)
            if not side_table.consume(node, "skip_attributes"):
                filter_attributes(node, opts.allow_attributes_by_tag, name, opts.report)

            self._parents.append(node)
            self._parent_names.append(name)
            yield self._process_child_list(node)
            self._parents.pop()
            self._parent_names.pop()
            return

        # Nothing else handled the node: flatten it.
        yield self._flatten(node, name)

    def _process_child_list(self, parent: Any) -> Step:
        opts = self.options
        # Snapshot: processing inserts and removes siblings.
        children = list(parent.children)
        for index, child in enumerate(children):
            yield self._process(child, index)

            if (
                opts.remove_empty
                and child.parent is parent
                and is_element_node(child)
                and not child.children
                and node_name(child) not in opts.allowed_empty_tags
            ):
                parent.remove_child(child)
                if self.env_debug:
                    self.debug(f"prune empty {node_name(child)}")
                if opts.report is not None:
                    opts.report(f"Removed empty <{child.tag_name}>", node=child)

        if opts.join_siblings:
            join_siblings(parent, opts.join_siblings, opts.report)

    def _remove(self, node: Any, name: str) -> None:
        if self.env_debug:
            self.debug(f"remove {name}")
        parent = node.parent
        if parent is not None:
            parent.remove_child(node)
        if self.options.report is not None:
            self.options.report(f"Removed <{name.lower()}>", node=node)

    def _flatten(self, node: Any, name: str) -> Step:
        """Replace ``node`` with its processed children.

        The children are processed inside a detached fragment first, under
        the current ancestor context, and only then take the node's place.
        A node without a parent gets its processed children back.
        """
        if self.env_debug:
            self.debug(f"flatten {name}")
        fragment = self.doc.create_document_fragment()
        for child in list(node.children):
            fragment.append_child(child)

        yield self._process_child_list(fragment)

        parent = node.parent
        if parent is None:
            for child in list(fragment.children):
                node.append_child(child)
            return
        for child in list(fragment.children):
            parent.insert_before(child, node)
        parent.remove_child(node)
        if self.options.report is not None:
            self.options.report(f"Flattened <{name.lower()}>", node=node)


# -----------------
# Public API
# -----------------


def process_node(doc: Any, node: Any, options: Options = None, side_table: SideTable | None = None) -> None:
    """Process ``node`` and its subtree in place.

    A detached ``node`` is kept as the root and only its subtree is processed.
    """
    Sanitizer(doc, options, side_table).process_node(node)


def process_children(doc: Any, node: Any, options: Options = None, side_table: SideTable | None = None) -> None:
    """Process the subtree below ``node`` in place (use for body or fragment roots)."""
    Sanitizer(doc, options, side_table).process_children(node)


def _parse_and_process(
    doc: Any,
    markup: str,
    options: Options,
    full_document: bool,
    side_table: SideTable | None,
) -> tuple[Any, Any]:
    sanitizer = Sanitizer(doc, options, side_table)
    if not callable(getattr(doc, "parse_html", None)):
        raise InterfaceContractError("Need DOM Document interface (function parse_html missing)")
    root = doc.parse_html(markup, full_document=full_document)
    container = find_body(root) if full_document else root
    sanitizer.process_children(container)
    return root, container


def process_markup(
    doc: Any,
    markup: str,
    options: Options = None,
    full_document: bool = False,
    side_table: SideTable | None = None,
) -> str:
    """Parse ``markup`` in a sandbox, process it and serialize it back.

    Fragments are parsed into a detached ``body`` element, so rules keyed on
    ``BODY`` apply to top-level nodes. With ``full_document`` the children of
    the document's body are processed and the whole document is returned.
    """
    root, container = _parse_and_process(doc, markup, options, full_document, side_table)
    if full_document:
        return to_html(root)
    return inner_html(container)


def process_markup_nodes(
    doc: Any,
    markup: str,
    options: Options = None,
    full_document: bool = False,
    side_table: SideTable | None = None,
) -> list[Any]:
    """Like :func:`process_markup`, but return the processed top-level nodes."""
    _, container = _parse_and_process(doc, markup, options, full_document, side_table)
    return list(container.children)
