"""HTML serialization utilities for sanitizedom nodes."""

from __future__ import annotations

from typing import Any

from .constants import RAWTEXT_ELEMENTS, VOID_ELEMENTS
from .node import CONTAINER_NAMES


def escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("\xa0", "&nbsp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    return value.replace("&", "&amp;").replace("\xa0", "&nbsp;").replace('"', "&quot;")


def serialize_start_tag(name: str, attrs: dict[str, str] | None) -> str:
    if not attrs:
        return f"<{name}>"
    parts = []
    for key, value in attrs.items():
        if value is None or value == "":
            parts.append(key)
        else:
            parts.append(f'{key}="{escape_attribute(str(value))}"')
    return f"<{name} {' '.join(parts)}>"


def to_html(node: Any) -> str:
    """Serialize ``node`` (outer HTML; containers render their children)."""
    parts: list[str] = []
    _node_to_html(node, parts, raw=False)
    return "".join(parts)


def inner_html(node: Any) -> str:
    """Serialize the children of ``node``."""
    parts: list[str] = []
    raw = node.tag_name.lower() in RAWTEXT_ELEMENTS
    for child in node.children:
        _node_to_html(child, parts, raw)
    return "".join(parts)


def _node_to_html(node: Any, parts: list[str], raw: bool) -> None:
    # Explicit stack: end tags are pushed as plain strings below the children.
    stack: list[tuple[Any, bool]] = [(node, raw)]
    while stack:
        current, raw = stack.pop()
        if isinstance(current, str):
            parts.append(current)
            continue

        name = current.tag_name

        if name == "#text":
            text = current.text_content or ""
            parts.append(text if raw else escape_text(text))
            continue

        if name == "#comment":
            parts.append(f"<!--{current.text_content or ''}-->")
            continue

        if name == "!doctype":
            parts.append(f"<!DOCTYPE {current.text_content or 'html'}>")
            continue

        if name in CONTAINER_NAMES:
            stack.extend((child, raw) for child in reversed(current.children))
            continue

        parts.append(serialize_start_tag(name, current.attributes))
        if name.lower() in VOID_ELEMENTS and not current.children:
            continue

        child_raw = name.lower() in RAWTEXT_ELEMENTS
        stack.append((f"</{name}>", raw))
        stack.extend((child, child_raw) for child in reversed(current.children))
