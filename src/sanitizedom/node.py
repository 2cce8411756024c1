"""DOM-like host tree for sanitizedom.

The engine only touches a small capability subset of these classes
(``tag_name``, ``children``, ``parent``, ``attributes``, ``append_child``,
``insert_before`` and ``remove_child``), so any tree offering the same
methods can be processed. This module is the default implementation and the
one produced by :func:`sanitizedom.parser.parse_html`.
"""

from __future__ import annotations

CONTAINER_NAMES = frozenset({"#document", "#document-fragment"})


def is_text_node(node) -> bool:
    return node.tag_name == "#text"


def is_element_node(node) -> bool:
    """True for real elements (not text, comments, doctypes or containers)."""
    name = node.tag_name
    return not name.startswith("#") and name != "!doctype"


class Node:
    """Represents a DOM-like node.
    - tag_name: e.g., 'div', 'p', etc. Use '#text' for text nodes.
    - attributes: dict of tag attributes
    - children: list of child Nodes
    - parent: reference to parent Node (or None when detached)
    - next_sibling/previous_sibling: references to adjacent nodes in the tree.
    """

    __slots__ = (
        "__weakref__",
        "attributes",
        "children",
        "next_sibling",
        "parent",
        "previous_sibling",
        "tag_name",
        "text_content",
    )

    def __init__(self, tag_name, attributes=None, text_content=None):
        if tag_name is None or tag_name == "":
            msg = "Empty tag_name passed to Node constructor"
            raise ValueError(msg)

        self.tag_name = tag_name
        if attributes:
            # Lowercase attribute names deterministically; keep first occurrence
            lowered = {}
            for k, v in attributes.items():
                lk = k.lower()
                if lk not in lowered:
                    lowered[lk] = "" if v is None else str(v)
            self.attributes = lowered
        else:
            self.attributes = {}
        self.children = []
        self.parent = None
        # For text and comment nodes store inline text; unused for elements
        self.text_content = text_content if text_content is not None else ""
        self.next_sibling = None
        self.previous_sibling = None

    # -----------------
    # Tree mutation
    # -----------------

    def _unlink(self):
        """Detach from the current parent, fixing sibling links."""
        parent = self.parent
        if parent is None:
            return
        if self.previous_sibling:
            self.previous_sibling.next_sibling = self.next_sibling
        if self.next_sibling:
            self.next_sibling.previous_sibling = self.previous_sibling
        parent.children.remove(self)
        self.parent = None
        self.next_sibling = None
        self.previous_sibling = None

    def append_child(self, child):
        if self._would_create_circular_reference(child):
            msg = f"Adding {child.tag_name} as child of {self.tag_name} would create circular reference"
            raise ValueError(msg)

        child._unlink()

        if self.children:
            self.children[-1].next_sibling = child
            child.previous_sibling = self.children[-1]
        else:
            child.previous_sibling = None

        child.parent = self
        child.next_sibling = None
        self.children.append(child)
        return child

    def _would_create_circular_reference(self, child):
        """Check if adding child would make self a descendant of itself."""
        if child is self:
            return True
        current = self.parent
        while current is not None:
            if current is child:
                return True
            current = current.parent
        return False

    def insert_before(self, new_node, reference_node):
        """Insert new_node right before reference_node (append when reference is None)."""
        if reference_node is None:
            return self.append_child(new_node)
        if reference_node.parent is not self:
            msg = f"{reference_node!r} is not a child of {self!r}"
            raise ValueError(msg)
        if new_node is reference_node:
            return new_node
        if self._would_create_circular_reference(new_node):
            msg = f"Inserting {new_node.tag_name} into {self.tag_name} would create circular reference"
            raise ValueError(msg)

        new_node._unlink()

        idx = self.children.index(reference_node)
        new_node.parent = self
        self.children.insert(idx, new_node)

        # Update sibling pointers
        new_node.next_sibling = reference_node
        new_node.previous_sibling = reference_node.previous_sibling
        reference_node.previous_sibling = new_node
        if new_node.previous_sibling:
            new_node.previous_sibling.next_sibling = new_node
        return new_node

    def remove_child(self, child):
        """Remove a child node, updating all sibling links.

        Args:
            child: The Node to remove

        """
        if child.parent is not self:
            return None
        child._unlink()
        return child

    def replace_children(self, nodes):
        for child in list(self.children):
            self.remove_child(child)
        for node in nodes:
            self.append_child(node)

    # -----------------
    # Attributes and classes
    # -----------------

    def get_attribute(self, name):
        return self.attributes.get(name.lower())

    def set_attribute(self, name, value):
        self.attributes[name.lower()] = "" if value is None else str(value)

    def remove_attribute(self, name):
        self.attributes.pop(name.lower(), None)

    def has_attribute(self, name):
        return name.lower() in self.attributes

    @property
    def class_list(self):
        """Class tokens in document order, without duplicates."""
        raw = self.attributes.get("class")
        if not raw:
            return []
        return list(dict.fromkeys(raw.split()))

    def add_class(self, token):
        tokens = self.class_list
        if token not in tokens:
            tokens.append(token)
            self.attributes["class"] = " ".join(tokens)

    def remove_class(self, token):
        if "class" not in self.attributes:
            return
        tokens = [t for t in self.class_list if t != token]
        if tokens:
            self.attributes["class"] = " ".join(tokens)
        else:
            del self.attributes["class"]

    # -----------------
    # Text helpers
    # -----------------

    @property
    def text(self):
        """Concatenated text of this node and its descendants."""
        if self.tag_name == "#text":
            return self.text_content
        parts = []
        stack = list(reversed(self.children))
        while stack:
            current = stack.pop()
            if current.tag_name == "#text":
                parts.append(current.text_content)
            else:
                stack.extend(reversed(current.children))
        return "".join(parts)

    @text.setter
    def text(self, value):
        if self.tag_name == "#text":
            self.text_content = value
            return
        self.replace_children([Node("#text", text_content=value)] if value else [])

    def find_ancestor(self, tag_name):
        """Find the nearest ancestor (excluding self) with the given tag name."""
        current = self.parent
        while current is not None:
            if current.tag_name == tag_name:
                return current
            current = current.parent
        return None

    def iter_descendants(self):
        """Yield descendants depth-first, in document order."""
        stack = list(reversed(self.children))
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def find_all(self, tag_name):
        return [n for n in self.iter_descendants() if n.tag_name == tag_name]

    def __repr__(self):
        if self.tag_name == "#text":
            return f"Node(#text='{self.text_content[:30]}')"
        if self.tag_name == "#comment":
            return f"Node(#comment='{self.text_content[:30]}')"
        return f"Node(<{self.tag_name}>, children={len(self.children)})"


class Document:
    """Node factory and markup entry point for the host tree."""

    __slots__ = ("root",)

    def __init__(self):
        self.root = Node("#document")

    def create_element(self, tag_name, attributes=None):
        return Node(tag_name.lower(), attributes)

    def create_text_node(self, text):
        return Node("#text", text_content=text)

    def create_comment(self, text):
        return Node("#comment", text_content=text)

    def create_document_fragment(self):
        return Node("#document-fragment")

    def parse_html(self, markup, full_document=False):
        """Parse markup into a detached tree.

        Fragments are returned inside a detached ``body`` element; full
        documents are returned as a ``#document`` node.
        """
        from .parser import parse_html

        root = parse_html(self, markup, full_document=full_document)
        if full_document:
            self.root = root
        return root
