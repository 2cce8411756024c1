"""Tests for the host tree, markup parsing and serialization."""

import unittest

from sanitizedom import Document, Node, inner_html, to_html
from sanitizedom.parser import find_body


class TestNode(unittest.TestCase):
    def setUp(self):
        self.doc = Document()

    def test_append_child_links_siblings(self):
        parent = self.doc.create_element("div")
        a = parent.append_child(self.doc.create_element("a"))
        b = parent.append_child(self.doc.create_element("b"))
        assert a.next_sibling is b
        assert b.previous_sibling is a
        assert a.parent is parent

    def test_append_moves_node(self):
        first = self.doc.create_element("div")
        second = self.doc.create_element("div")
        child = first.append_child(self.doc.create_element("span"))
        second.append_child(child)
        assert first.children == []
        assert child.parent is second

    def test_circular_reference(self):
        outer = self.doc.create_element("div")
        inner = outer.append_child(self.doc.create_element("div"))
        with self.assertRaises(ValueError):
            inner.append_child(outer)
        with self.assertRaises(ValueError):
            outer.append_child(outer)

    def test_insert_before(self):
        parent = self.doc.create_element("div")
        a = parent.append_child(self.doc.create_element("a"))
        c = parent.append_child(self.doc.create_element("c"))
        b = parent.insert_before(self.doc.create_element("b"), c)
        assert [n.tag_name for n in parent.children] == ["a", "b", "c"]
        assert a.next_sibling is b
        assert b.next_sibling is c
        assert c.previous_sibling is b

    def test_insert_before_none_appends(self):
        parent = self.doc.create_element("div")
        node = parent.insert_before(self.doc.create_element("a"), None)
        assert parent.children == [node]

    def test_insert_before_foreign_reference(self):
        parent = self.doc.create_element("div")
        with self.assertRaises(ValueError):
            parent.insert_before(self.doc.create_element("a"), self.doc.create_element("b"))

    def test_remove_child(self):
        parent = self.doc.create_element("div")
        a = parent.append_child(self.doc.create_element("a"))
        b = parent.append_child(self.doc.create_element("b"))
        c = parent.append_child(self.doc.create_element("c"))
        assert parent.remove_child(b) is b
        assert b.parent is None
        assert a.next_sibling is c
        assert c.previous_sibling is a
        # Not a child: nothing happens
        assert parent.remove_child(b) is None

    def test_attributes_are_lower_cased(self):
        node = self.doc.create_element("A", {"HREF": "/x", "href": "/y", "Disabled": None})
        assert node.tag_name == "a"
        assert node.attributes == {"href": "/x", "disabled": ""}
        assert node.get_attribute("HREF") == "/x"

    def test_attribute_helpers(self):
        node = self.doc.create_element("a")
        node.set_attribute("Href", "/x")
        assert node.has_attribute("href")
        node.set_attribute("hidden", None)
        assert node.attributes == {"href": "/x", "hidden": ""}
        node.remove_attribute("HREF")
        node.remove_attribute("missing")
        assert node.attributes == {"hidden": ""}

    def test_class_helpers(self):
        node = self.doc.create_element("p")
        node.add_class("a")
        node.add_class("b")
        node.add_class("a")
        assert node.class_list == ["a", "b"]
        node.remove_class("a")
        assert node.get_attribute("class") == "b"
        node.remove_class("b")
        assert not node.has_attribute("class")
        node.remove_class("b")

    def test_text_property(self):
        body = self.doc.parse_html("<p>a<b>b</b>c</p>")
        p = body.children[0]
        assert p.text == "abc"
        p.text = "new"
        assert inner_html(body) == "<p>new</p>"
        p.text = ""
        assert p.children == []

    def test_empty_tag_name(self):
        with self.assertRaises(ValueError):
            Node("")

    def test_find_ancestor(self):
        body = self.doc.parse_html("<div><p><b>x</b></p></div>")
        b = body.find_all("b")[0]
        assert b.find_ancestor("div") is body.children[0]
        assert b.find_ancestor("table") is None


class TestParser(unittest.TestCase):
    def setUp(self):
        self.doc = Document()

    def test_fragment_is_wrapped_in_detached_body(self):
        body = self.doc.parse_html("<p>x</p>text")
        assert body.tag_name == "body"
        assert body.parent is None
        assert [n.tag_name for n in body.children] == ["p", "#text"]

    def test_comments_and_text(self):
        body = self.doc.parse_html("a<!-- note -->b")
        assert [n.tag_name for n in body.children] == ["#text", "#comment", "#text"]
        assert body.children[1].text_content == " note "

    def test_class_attribute_is_a_string(self):
        body = self.doc.parse_html('<p class="a  b">x</p>')
        assert body.children[0].get_attribute("class") == "a  b"

    def test_entities_are_decoded(self):
        body = self.doc.parse_html("<p>a &amp; b&nbsp;c</p>")
        assert body.children[0].text == "a & b\xa0c"

    def test_full_document(self):
        root = self.doc.parse_html("<!DOCTYPE html><html><head></head><body><p>x</p></body></html>", full_document=True)
        assert root.tag_name == "#document"
        assert self.doc.root is root
        body = find_body(root)
        assert body.tag_name == "body"
        assert inner_html(body) == "<p>x</p>"

    def test_find_body_falls_back_to_root(self):
        root = self.doc.parse_html("<p>x</p>", full_document=True)
        assert find_body(root) is root

    def test_empty_markup(self):
        assert self.doc.parse_html("").children == []
        assert self.doc.parse_html(None).children == []


class TestSerialize(unittest.TestCase):
    def setUp(self):
        self.doc = Document()

    def roundtrip(self, html):
        return inner_html(self.doc.parse_html(html))

    def test_void_elements(self):
        assert self.roundtrip("<p>a<br>b<img src=x.png></p>") == '<p>a<br>b<img src="x.png"></p>'

    def test_escapes_text_and_attributes(self):
        assert self.roundtrip('<a title="&quot;q&quot; &amp;">1 &lt; 2</a>') == '<a title="&quot;q&quot; &amp;">1 &lt; 2</a>'

    def test_nbsp(self):
        assert self.roundtrip("a&nbsp;b") == "a&nbsp;b"

    def test_empty_attribute_value(self):
        assert self.roundtrip("<input disabled>") == "<input disabled>"

    def test_rawtext_is_not_escaped(self):
        assert self.roundtrip("<style>a > b {}</style>") == "<style>a > b {}</style>"

    def test_comment(self):
        assert self.roundtrip("<!--c-->") == "<!--c-->"

    def test_to_html_outer(self):
        body = self.doc.parse_html("<p>x</p>")
        assert to_html(body.children[0]) == "<p>x</p>"
        assert to_html(body) == "<body><p>x</p></body>"

    def test_deep_tree(self):
        depth = 2000
        root = self.doc.create_element("div")
        current = root
        for _ in range(depth - 1):
            current = current.append_child(self.doc.create_element("div"))
        current.append_child(self.doc.create_text_node("x"))
        assert to_html(root) == "<div>" * depth + "x" + "</div>" * depth

    def test_doctype(self):
        root = self.doc.parse_html("<!DOCTYPE html><p>x</p>", full_document=True)
        assert to_html(root) == "<!DOCTYPE html><p>x</p>"


if __name__ == "__main__":
    unittest.main()
