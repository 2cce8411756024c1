"""Identity-keyed storage for transient per-node processing flags.

Flags live outside the nodes so externally owned trees are never decorated
with extra fields. Entries are held weakly: a node that is garbage
collected drops its flags with it.

Recognized flags:

- ``skip``: leave the node and its subtree untouched.
- ``skip_filters``: do not run filters on the node.
- ``skip_classes``: do not filter the node's class tokens.
- ``skip_attributes``: do not filter the node's attributes.

The engine consumes a flag when it reads it, so each one is a one-shot
signal for the next time the node is visited.
"""

from __future__ import annotations

import weakref
from typing import Any

from .constants import SIDE_TABLE_FLAGS


def _check_flag(flag: str) -> None:
    if flag not in SIDE_TABLE_FLAGS:
        allowed = ", ".join(sorted(SIDE_TABLE_FLAGS))
        raise ValueError(f"Unknown side table flag: {flag!r} (expected one of {allowed})")


class SideTable:
    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: weakref.WeakKeyDictionary[Any, dict[str, bool]] = weakref.WeakKeyDictionary()

    def mark(self, node: Any, **flags: bool) -> None:
        """Set one or more flags on ``node``.

        ``False`` is stored, not dropped: for ``skip_filters`` an explicit
        ``False`` is what the infinite-loop guard looks for.
        """
        for flag in flags:
            _check_flag(flag)
        entry = self._entries.get(node)
        if entry is None:
            entry = {}
            self._entries[node] = entry
        for flag, value in flags.items():
            entry[flag] = bool(value)

    def is_defined(self, node: Any, flag: str) -> bool:
        _check_flag(flag)
        entry = self._entries.get(node)
        return entry is not None and flag in entry

    def peek(self, node: Any, flag: str) -> bool | None:
        """Return the flag value without consuming it (None when undefined)."""
        _check_flag(flag)
        entry = self._entries.get(node)
        if entry is None:
            return None
        return entry.get(flag)

    def consume(self, node: Any, flag: str) -> bool:
        """Return the flag value and clear it. Undefined flags read as False."""
        _check_flag(flag)
        entry = self._entries.get(node)
        if entry is None:
            return False
        value = entry.pop(flag, False)
        if not entry:
            del self._entries[node]
        return value

    def clear(self, node: Any) -> None:
        self._entries.pop(node, None)

    def __contains__(self, node: Any) -> bool:
        return node in self._entries

    def __len__(self) -> int:
        return len(self._entries)
