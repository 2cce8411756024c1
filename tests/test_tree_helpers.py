"""Tests for attribute filtering and sibling joining on bare trees."""

import unittest

from sanitizedom import Document, inner_html
from sanitizedom.attributes import filter_attributes, filter_classes
from sanitizedom.options import compile_rule
from sanitizedom.siblings import join_siblings


class TestFilterClasses(unittest.TestCase):
    def setUp(self):
        self.doc = Document()

    def test_keeps_allowed_tokens_in_order(self):
        node = self.doc.create_element("p", {"class": "lead x-1 note"})
        filter_classes(node, compile_rule({"P": ["note", "lead"]}), "P")
        assert node.get_attribute("class") == "lead note"

    def test_removes_attribute_when_nothing_is_kept(self):
        node = self.doc.create_element("p", {"class": "a b"})
        filter_classes(node, compile_rule({"DIV": ".*"}), "P")
        assert not node.has_attribute("class")

    def test_untouched_when_everything_is_kept(self):
        node = self.doc.create_element("p", {"class": "a  b"})
        filter_classes(node, compile_rule({".*": ".*"}), "P")
        assert node.get_attribute("class") == "a  b"

    def test_duplicate_tokens(self):
        node = self.doc.create_element("p", {"class": "a a b"})
        filter_classes(node, compile_rule({"P": "a"}), "P")
        assert node.get_attribute("class") == "a"

    def test_reports_dropped_tokens(self):
        messages = []
        node = self.doc.create_element("p", {"class": "a b c"})
        filter_classes(node, compile_rule({"P": "b"}), "P", lambda msg, node=None: messages.append(msg))
        assert messages == ["Dropped class(es) a, c from <p>"]


class TestFilterAttributes(unittest.TestCase):
    def setUp(self):
        self.doc = Document()

    def test_drops_disallowed(self):
        node = self.doc.create_element("a", {"href": "/x", "onclick": "evil()", "title": "t"})
        filter_attributes(node, compile_rule({"A": ["href", "title"]}), "A")
        assert node.attributes == {"href": "/x", "title": "t"}

    def test_class_is_never_judged_here(self):
        node = self.doc.create_element("p", {"class": "c", "id": "i"})
        filter_attributes(node, (), "P")
        assert node.attributes == {"class": "c"}

    def test_attribute_patterns_are_regexes(self):
        node = self.doc.create_element("div", {"data-a": "1", "data-b": "2", "style": "x"})
        filter_attributes(node, compile_rule({".*": "data-.*"}), "DIV")
        assert list(node.attributes) == ["data-a", "data-b"]

    def test_reports_dropped_attributes(self):
        messages = []
        node = self.doc.create_element("p", {"id": "x"})
        filter_attributes(node, (), "P", lambda msg, node=None: messages.append(msg))
        assert messages == ["Dropped attribute 'id' from <p>"]


class TestJoinSiblings(unittest.TestCase):
    def setUp(self):
        self.doc = Document()

    def parse(self, html):
        return self.doc.parse_html(html)

    def test_joins_adjacent(self):
        body = self.parse("<b>a</b><b>b</b><i>c</i>")
        assert join_siblings(body, frozenset({"B"})) == 1
        assert inner_html(body) == "<b>ab</b><i>c</i>"

    def test_joins_across_whitespace(self):
        body = self.parse("<b>a</b> <b>b</b>")
        join_siblings(body, frozenset({"B"}))
        assert inner_html(body) == "<b>a b</b>"

    def test_does_not_join_across_text(self):
        body = self.parse("<b>a</b>x<b>b</b>")
        assert join_siblings(body, frozenset({"B"})) == 0
        assert inner_html(body) == "<b>a</b>x<b>b</b>"

    def test_only_listed_tags(self):
        body = self.parse("<i>a</i><i>b</i>")
        assert join_siblings(body, frozenset({"B"})) == 0

    def test_runs_of_three(self):
        body = self.parse("<b>1</b><b>2</b> <b>3</b>")
        assert join_siblings(body, frozenset({"B"})) == 2
        assert inner_html(body) == "<b>12 3</b>"

    def test_keeps_nested_children(self):
        body = self.parse("<b><u>a</u></b><b><i>b</i></b>")
        join_siblings(body, frozenset({"B"}))
        assert inner_html(body) == "<b><u>a</u><i>b</i></b>"
        first = body.children[0]
        assert first.children[1].parent is first

    def test_reports_joins(self):
        messages = []
        body = self.parse("<b>a</b><b>b</b>")
        join_siblings(body, frozenset({"B"}), lambda msg, node=None: messages.append(msg))
        assert messages == ["Joined adjacent <b> siblings"]


if __name__ == "__main__":
    unittest.main()
