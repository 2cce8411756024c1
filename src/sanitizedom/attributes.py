"""Attribute and class-token filtering for retained elements."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .matcher import matches_any

if TYPE_CHECKING:
    from .options import CompiledRule, ReportCallback


def filter_classes(node: Any, rule: CompiledRule, tag_name: str, report: ReportCallback | None = None) -> None:
    """Drop class tokens not allowed for ``tag_name``.

    The class attribute is removed altogether once no token is left.
    """
    attrs = node.attributes
    raw = attrs.get("class")
    if raw is None:
        return

    # Snapshot first: tokens are removed while iterating.
    tokens = list(dict.fromkeys(raw.split()))
    kept = [token for token in tokens if matches_any(rule, tag_name, token)]
    if not kept:
        del attrs["class"]
    elif len(kept) != len(tokens):
        attrs["class"] = " ".join(kept)

    if report is not None and len(kept) != len(tokens):
        dropped = ", ".join(t for t in tokens if t not in kept)
        report(f"Dropped class(es) {dropped} from <{tag_name.lower()}>", node=node)


def filter_attributes(node: Any, rule: CompiledRule, tag_name: str, report: ReportCallback | None = None) -> None:
    """Drop attributes not allowed for ``tag_name``. ``class`` is left to :func:`filter_classes`."""
    attrs = node.attributes
    for name in list(attrs):
        if name == "class":
            continue
        if not matches_any(rule, tag_name, name):
            del attrs[name]
            if report is not None:
                report(f"Dropped attribute '{name}' from <{tag_name.lower()}>", node=node)
