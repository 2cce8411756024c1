"""Markup parsing for the host tree.

Parsing is delegated to BeautifulSoup with the ``html.parser`` backend: it
runs no scripts and fetches nothing. The parsed soup is converted into
:class:`~sanitizedom.node.Node` objects so the sanitizer never touches
BeautifulSoup objects directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup, CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from .node import Node

if TYPE_CHECKING:
    from .node import Document


def _convert(doc: Document, source: Any, target: Any) -> None:
    # Iterative, so deeply nested markup does not hit the recursion limit.
    stack = [(source, target)]
    while stack:
        src, dst = stack.pop()
        for child in src.contents:
            if isinstance(child, Tag):
                attrs = {k: (" ".join(v) if isinstance(v, list) else v) for k, v in child.attrs.items()}
                element = doc.create_element(child.name, attrs)
                dst.append_child(element)
                stack.append((child, element))
            elif isinstance(child, Comment):
                dst.append_child(doc.create_comment(str(child)))
            elif isinstance(child, Doctype):
                dst.append_child(Node("!doctype", text_content=str(child)))
            elif isinstance(child, (CData, Declaration, ProcessingInstruction)):
                continue
            elif isinstance(child, NavigableString):
                dst.append_child(doc.create_text_node(str(child)))


def parse_html(doc: Document, markup: str, full_document: bool = False) -> Node:
    """Parse ``markup`` into a detached host tree.

    Returns a ``#document`` node for full documents, otherwise a detached
    ``body`` element holding the fragment.
    """
    soup = BeautifulSoup(markup or "", "html.parser", multi_valued_attributes=None)
    root = Node("#document") if full_document else doc.create_element("body")
    _convert(doc, soup, root)
    return root


def find_body(root: Any) -> Any:
    """Find the ``body`` element below ``root``; fall back to ``root`` itself."""
    if root.tag_name == "body":
        return root
    stack = list(reversed(root.children))
    while stack:
        node = stack.pop()
        if node.tag_name == "body":
            return node
        stack.extend(reversed(node.children))
    return root
