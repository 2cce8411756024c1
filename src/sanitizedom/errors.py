"""Exceptions raised by sanitizedom."""

from __future__ import annotations


class SanitizeError(Exception):
    """Base class for all sanitizedom errors."""


class InterfaceContractError(SanitizeError, TypeError):
    """The supplied document or node lacks a required capability."""


class InfiniteLoopError(SanitizeError, RuntimeError):
    """A filter returned a same-tag replacement without declaring ``skip_filters``.

    Re-processing such a node would run the same filters again, which never
    terminates for a filter that always returns the same result. The filter
    must mark every same-tag replacement in the side table, with
    ``skip_filters=True`` (do not filter again) or ``skip_filters=False``
    (filter again, the filter knows it will converge).
    """

    def __init__(self, filter_name: str, tag_name: str) -> None:
        self.filter_name = filter_name
        self.tag_name = tag_name
        msg = (
            f"Prevented possible infinite loop. Filter function '{filter_name}' has returned "
            f"a node of type '{tag_name}' which has the same tag name as the original node. "
            "Mark the returned node with side_table.mark(node, skip_filters=True) to stop "
            "re-filtering, or skip_filters=False to filter it again."
        )
        super().__init__(msg)
