"""Tests for HTML and test-format serialization."""

import unittest
from pathlib import Path

from pipehtml import Node, PipeHTML, parse_file, to_html, to_test_format

RESOURCES = Path(__file__).parent / "resources"


class TestToHTML(unittest.TestCase):
    def test_canonical_markup_unchanged(self):
        html = (
            '<!DOCTYPE html><html><head><title>t</title></head>'
            '<body><p id="a" class="b">x<br>y</p><!-- c --><![CDATA[d]]></body></html>'
        )
        assert PipeHTML(html).to_html() == html

    def test_missing_end_tags_written(self):
        doc = PipeHTML("<html><body><ul><li>a<li>b</ul><p>c</body></html>")
        assert doc.to_html() == "<html><body><ul><li>a</li><li>b</li></ul><p>c</p></body></html>"

    def test_valueless_and_unquoted_attributes_quoted(self):
        doc = PipeHTML("<html><body><input type=checkbox checked></body></html>")
        assert doc.to_html() == '<html><body><input type="checkbox" checked="checked"></body></html>'

    def test_attribute_quote_selection(self):
        doc = PipeHTML("""<html><body><p title='say "hi"' alt="it's">x</p></body></html>""")
        assert doc.to_html() == """<html><body><p title='say "hi"' alt="it's">x</p></body></html>"""

    def test_attribute_with_both_quotes(self):
        p = Node("p", attributes={"title": "a\"b'c"})
        assert to_html(p) == '<p title="a&quot;b\'c"></p>'

    def test_self_closed_element_written_out(self):
        doc = PipeHTML("<html><body><div/></body></html>")
        assert doc.to_html() == "<html><body><div></div></body></html>"

    def test_text_written_verbatim(self):
        doc = PipeHTML("<html><body>a &amp; b &lt; c</body></html>")
        assert doc.to_html() == "<html><body>a &amp; b &lt; c</body></html>"

    def test_raw_text_written_verbatim(self):
        html = "<html><script>if (a < b) { x = '</p>'; }</script></html>"
        assert PipeHTML(html).to_html() == html

    def test_empty_doctype(self):
        assert PipeHTML("<!DOCTYPE><html></html>").to_html() == "<!DOCTYPE><html></html>"

    def test_tag_case_preserved(self):
        html = '<HTML><Body CLASS="x"></Body></HTML>'
        assert PipeHTML(html).to_html() == html

    def test_element_subtree(self):
        root = PipeHTML("<html><body><p>a<b>b</b></p></body></html>").root
        assert to_html(root.find_element_by_tag_name("p")) == "<p>a<b>b</b></p>"

    def test_resources_rescan_to_same_tree(self):
        for path in sorted(RESOURCES.glob("*.html")):
            with self.subTest(resource=path.name):
                document = parse_file(path).result
                rescanned = PipeHTML(to_html(document)).root
                assert to_test_format(rescanned) == to_test_format(document)
                assert rescanned.doctype == document.doctype


class TestToTestFormat(unittest.TestCase):
    def test_document(self):
        doc = PipeHTML('<!DOCTYPE html><html><body><p b="2" a="1">x<!--c--></p></body></html>')
        expected = "\n".join(
            [
                "| <!DOCTYPE html>",
                "| <html>",
                "|   <body>",
                "|     <p>",
                '|       a="1"',
                '|       b="2"',
                '|       "x"',
                "|       <!-- c -->",
            ],
        )
        assert doc.to_test_format() == expected

    def test_no_doctype_line(self):
        assert PipeHTML("<html></html>").to_test_format() == "| <html>"

    def test_cdata_and_top_level_comments(self):
        doc = PipeHTML("<!--a--><html><![CDATA[x]]></html><!--b-->")
        assert doc.to_test_format() == "| <!-- a -->\n| <html>\n|   <![CDATA[x]]>\n| <!-- b -->"

    def test_element_indent(self):
        p = Node("p")
        p.append_child(Node("#text", text_content="t"))
        assert to_test_format(p, indent=4) == '|     <p>\n|       "t"'


if __name__ == "__main__":
    unittest.main()
