"""Shared constants for sanitizedom."""

# HTML5 void elements (no closing tag)
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

# Elements whose text content is serialized verbatim
RAWTEXT_ELEMENTS = frozenset({"script", "style", "xmp", "iframe", "noembed", "noframes", "plaintext"})

# Pseudo tag names used when matching rules against non-element nodes
TEXT_NAME = "TEXT"
COMMENT_NAME = "COMMENT"

# Matches are anchored on both ends, so '.*' means "any tag"
DEFAULT_REMOVE_TAGS_DEEP = {".*": ("style", "script", "textarea", "noscript")}

DEFAULT_ALLOWED_EMPTY_TAGS = ("IMG", "IFRAME", "HR", "BR", "INPUT")

SIDE_TABLE_FLAGS = frozenset({"skip", "skip_filters", "skip_classes", "skip_attributes"})
