"""Processing options and their compiled form.

User options are plain strings: every key and value is a regular
expression matched case-insensitively against the whole tag name,
attribute name or class token. Values may be a single string or a list of
strings. ``compile_options`` turns them into patterns once per call so the
traversal only ever sees compiled rules.

Example::

    ProcessingOptions(
        allow_tags_direct={".*": ["P", "H[1-3]"]},
        allow_tags_deep={"P": "B|I"},
        allow_attributes_by_tag={"A": "href"},
        join_siblings=["B"],
    )
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

from .constants import DEFAULT_ALLOWED_EMPTY_TAGS, DEFAULT_REMOVE_TAGS_DEEP
from .matcher import compile_regex

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import Protocol

    from .filters import FilterContext

    class FilterCallback(Protocol):
        def __call__(self, node: Any, context: FilterContext) -> Any: ...

    class ReportCallback(Protocol):
        def __call__(self, msg: str, *, node: Any | None = None) -> None: ...

    RuleSpec = Mapping[str, str | Sequence[str]]
    FilterSpec = Mapping[str, FilterCallback | Sequence[FilterCallback]]
    CompiledRule = tuple[tuple[re.Pattern[str], tuple[re.Pattern[str], ...]], ...]
    CompiledFilters = tuple[tuple[re.Pattern[str], tuple[FilterCallback, ...]], ...]


RULE_FIELDS = (
    "remove_tags_direct",
    "remove_tags_deep",
    "flatten_tags_direct",
    "flatten_tags_deep",
    "allow_tags_direct",
    "allow_tags_deep",
    "allow_attributes_by_tag",
    "allow_classes_by_tag",
)


def _copy_rule(spec: RuleSpec | None, field_name: str) -> dict[str, Any]:
    if spec is None:
        return {}
    if not isinstance(spec, Mapping):
        raise TypeError(f"{field_name} must be a mapping, got {type(spec).__name__}")
    return dict(spec)


def _names(value: str | Sequence[str] | None, default: Sequence[str], field_name: str) -> tuple[str, ...]:
    if value is None:
        return tuple(default)
    if isinstance(value, str):
        return (value,)
    out = []
    for item in value:
        if not isinstance(item, str):
            raise TypeError(f"{field_name} entries must be strings, got {type(item).__name__}")
        out.append(item)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class ProcessingOptions:
    """Raw, user-facing configuration for one processing call.

    ``remove_tags_deep`` defaults to removing style, script, textarea and
    noscript everywhere; pass ``{}`` to disable that. ``allowed_empty_tags``
    defaults to IMG, IFRAME, HR, BR and INPUT.
    """

    filters_by_tag: dict[str, Any]
    remove_tags_direct: dict[str, Any]
    remove_tags_deep: dict[str, Any]
    flatten_tags_direct: dict[str, Any]
    flatten_tags_deep: dict[str, Any]
    allow_tags_direct: dict[str, Any]
    allow_tags_deep: dict[str, Any]
    allow_attributes_by_tag: dict[str, Any]
    allow_classes_by_tag: dict[str, Any]
    remove_empty: bool
    allowed_empty_tags: tuple[str, ...]
    join_siblings: tuple[str, ...]
    report: ReportCallback | None

    def __init__(
        self,
        *,
        filters_by_tag: FilterSpec | None = None,
        remove_tags_direct: RuleSpec | None = None,
        remove_tags_deep: RuleSpec | None = None,
        flatten_tags_direct: RuleSpec | None = None,
        flatten_tags_deep: RuleSpec | None = None,
        allow_tags_direct: RuleSpec | None = None,
        allow_tags_deep: RuleSpec | None = None,
        allow_attributes_by_tag: RuleSpec | None = None,
        allow_classes_by_tag: RuleSpec | None = None,
        remove_empty: bool = False,
        allowed_empty_tags: Sequence[str] | None = None,
        join_siblings: Sequence[str] | None = None,
        report: ReportCallback | None = None,
    ) -> None:
        object.__setattr__(self, "filters_by_tag", _copy_rule(filters_by_tag, "filters_by_tag"))
        object.__setattr__(self, "remove_tags_direct", _copy_rule(remove_tags_direct, "remove_tags_direct"))
        if remove_tags_deep is None:
            object.__setattr__(self, "remove_tags_deep", dict(DEFAULT_REMOVE_TAGS_DEEP))
        else:
            object.__setattr__(self, "remove_tags_deep", _copy_rule(remove_tags_deep, "remove_tags_deep"))
        object.__setattr__(self, "flatten_tags_direct", _copy_rule(flatten_tags_direct, "flatten_tags_direct"))
        object.__setattr__(self, "flatten_tags_deep", _copy_rule(flatten_tags_deep, "flatten_tags_deep"))
        object.__setattr__(self, "allow_tags_direct", _copy_rule(allow_tags_direct, "allow_tags_direct"))
        object.__setattr__(self, "allow_tags_deep", _copy_rule(allow_tags_deep, "allow_tags_deep"))
        object.__setattr__(
            self, "allow_attributes_by_tag", _copy_rule(allow_attributes_by_tag, "allow_attributes_by_tag")
        )
        object.__setattr__(self, "allow_classes_by_tag", _copy_rule(allow_classes_by_tag, "allow_classes_by_tag"))
        object.__setattr__(self, "remove_empty", bool(remove_empty))
        object.__setattr__(
            self,
            "allowed_empty_tags",
            _names(allowed_empty_tags, DEFAULT_ALLOWED_EMPTY_TAGS, "allowed_empty_tags"),
        )
        object.__setattr__(self, "join_siblings", _names(join_siblings, (), "join_siblings"))
        object.__setattr__(self, "report", report)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> ProcessingOptions:
        """Build options from a plain dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        for key in options:
            if key not in known:
                raise TypeError(f"Unknown processing option: {key!r}")
        return cls(**options)


@dataclass(frozen=True, slots=True)
class CompiledOptions:
    filters_by_tag: CompiledFilters
    remove_tags_direct: CompiledRule
    remove_tags_deep: CompiledRule
    flatten_tags_direct: CompiledRule
    flatten_tags_deep: CompiledRule
    allow_tags_direct: CompiledRule
    allow_tags_deep: CompiledRule
    allow_attributes_by_tag: CompiledRule
    allow_classes_by_tag: CompiledRule
    remove_empty: bool
    allowed_empty_tags: frozenset[str]
    join_siblings: frozenset[str]
    report: ReportCallback | None


def _one_or_many(value: Any, key: str, field_name: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        for item in value:
            if not isinstance(item, str):
                raise TypeError(f"{field_name}[{key!r}] entries must be strings, got {type(item).__name__}")
        return tuple(value)
    raise TypeError(f"{field_name}[{key!r}] must be a string or a list of strings, got {type(value).__name__}")


def compile_rule(spec: Mapping[str, Any], field_name: str = "rule") -> CompiledRule:
    compiled = []
    for key, value in spec.items():
        if not isinstance(key, str):
            raise TypeError(f"{field_name} keys must be strings, got {type(key).__name__}")
        patterns = tuple(compile_regex(v) for v in _one_or_many(value, key, field_name))
        compiled.append((compile_regex(key), patterns))
    return tuple(compiled)


def compile_filters(spec: Mapping[str, Any]) -> CompiledFilters:
    compiled = []
    for key, value in spec.items():
        if not isinstance(key, str):
            raise TypeError(f"filters_by_tag keys must be strings, got {type(key).__name__}")
        callbacks = (value,) if callable(value) else tuple(value)
        for cb in callbacks:
            if not callable(cb):
                raise TypeError(f"filters_by_tag[{key!r}] contains a non-callable: {cb!r}")
        compiled.append((compile_regex(key), callbacks))
    return tuple(compiled)


def compile_options(options: ProcessingOptions | Mapping[str, Any] | None = None) -> CompiledOptions:
    """Compile options once; the result is reused for the whole traversal."""
    if options is None:
        options = ProcessingOptions()
    elif isinstance(options, CompiledOptions):
        return options
    elif isinstance(options, Mapping):
        options = ProcessingOptions.from_mapping(options)
    elif not isinstance(options, ProcessingOptions):
        raise TypeError(f"Unsupported options: {type(options).__name__}")

    rules = {name: compile_rule(getattr(options, name), name) for name in RULE_FIELDS}
    return CompiledOptions(
        filters_by_tag=compile_filters(options.filters_by_tag),
        remove_empty=options.remove_empty,
        allowed_empty_tags=frozenset(t.upper() for t in options.allowed_empty_tags),
        join_siblings=frozenset(t.upper() for t in options.join_siblings),
        report=options.report,
        **rules,
    )
