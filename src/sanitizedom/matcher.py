"""Tag-keyed regular expression rules.

A rule is a sequence of ``(key, values)`` pairs of compiled patterns. The
key is matched against a tag name; values of every matching key are
unioned and matched against the value under test (a child tag name, an
attribute name or a class token). All patterns are whole-string matches.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from .constants import COMMENT_NAME, TEXT_NAME

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    CompiledRule = Sequence[tuple[re.Pattern[str], Sequence[Any]]]


def compile_regex(pattern: str) -> re.Pattern[str]:
    """Compile a rule pattern. Matching uses ``fullmatch``, so no anchors are needed."""
    return re.compile(pattern, re.IGNORECASE)


def node_name(node: Any) -> str:
    """Upper-cased tag name used for matching; 'TEXT'/'COMMENT' for character nodes."""
    name = node.tag_name
    if name == "#text":
        return TEXT_NAME
    if name == "#comment":
        return COMMENT_NAME
    return name.upper()


def values_for_tag(rule: CompiledRule, tag_name: str) -> list[Any]:
    """Union of the values of every key matching ``tag_name``, in rule order."""
    values: list[Any] = []
    for key, key_values in rule:
        if key.fullmatch(tag_name) is not None:
            values.extend(key_values)
    return values


def matches_any(rule: CompiledRule, tag_name: str, value: str) -> bool:
    for key, patterns in rule:
        if key.fullmatch(tag_name) is None:
            continue
        for pattern in patterns:
            if pattern.fullmatch(value) is not None:
                return True
    return False


def matches_parent(rule: CompiledRule, parent_name: str | None, name: str) -> bool:
    """Direct rule: only the immediate parent is considered."""
    if not rule or parent_name is None:
        return False
    return matches_any(rule, parent_name, name)


def matches_ancestor(rule: CompiledRule, ancestor_names: Iterable[str], name: str) -> bool:
    """Deep rule: any ancestor up to and including the traversal root may match."""
    if not rule:
        return False
    return any(matches_any(rule, ancestor, name) for ancestor in ancestor_names)
