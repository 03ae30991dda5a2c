"""Tests for elements closed without an explicit end tag."""

import unittest

from pipehtml import PipeHTML, Scanner, UnterminatedTagError


def body_of(html):
    return PipeHTML(f"<html><body>{html}</body></html>").root.find_element_by_tag_name("body")


def shape(node):
    """Compact (tag, children) outline of the element structure, text as strings."""
    if node.is_text:
        return node.data
    return (node.tag_name, [shape(child) for child in node.children])


class TestListsAndDefinitions(unittest.TestCase):
    def test_li_closes_li(self):
        body = body_of("<ul><li>A<li>B</ul>")
        assert shape(body.children[0]) == ("ul", [("li", ["A"]), ("li", ["B"])])

    def test_nested_list_not_closed_by_outer_li(self):
        body = body_of("<ul><li>A<ul><li>a1<li>a2</ul><li>B</ul>")
        ul = body.children[0]
        assert [child.tag_name for child in ul.children] == ["li", "li"]
        inner = ul.children[0].children[1]
        assert shape(inner) == ("ul", [("li", ["a1"]), ("li", ["a2"])])

    def test_dt_dd(self):
        body = body_of("<dl><dt>T1<dd>D1<dt>T2<dd>D2</dl>")
        dl = body.children[0]
        assert [child.tag_name for child in dl.children] == ["dt", "dd", "dt", "dd"]
        assert [child.text_content for child in dl.children] == ["T1", "D1", "T2", "D2"]


class TestParagraphs(unittest.TestCase):
    def test_p_closes_p(self):
        body = body_of("<p>one<p>two")
        assert shape(body) == ("body", [("p", ["one"]), ("p", ["two"])])

    def test_block_closes_p(self):
        for tag in ("div", "table", "ul", "h1", "h6", "section", "pre", "hr", "form", "blockquote"):
            with self.subTest(tag=tag):
                body = body_of(f"<p>text<{tag}></{tag}>" if tag != "hr" else "<p>text<hr>")
                assert [child.tag_name for child in body.children] == ["p", tag]
                assert body.children[0].text_content == "text"

    def test_inline_does_not_close_p(self):
        body = body_of("<p>a<span>b</span><em>c</em></p>")
        assert len(body.children) == 1
        assert [child.tag_name for child in body.children[0].children] == ["#text", "span", "em"]

    def test_uppercase_tags(self):
        body = body_of("<P>one<DIV>two</DIV>")
        assert [child.tag_name for child in body.children] == ["P", "DIV"]

    def test_end_tag_of_ancestor_closes_p(self):
        root = PipeHTML("<html><body><div><p>a</div></body></html>").root
        div = root.find_element_by_tag_name("div")
        assert shape(div) == ("div", [("p", ["a"])])


class TestHeadBody(unittest.TestCase):
    def test_body_closes_head(self):
        root = PipeHTML("<html><head><title>t</title><body><p>x</p></body></html>").root
        html = root.document_element
        assert [child.tag_name for child in html.children] == ["head", "body"]

    def test_head_end_tag_not_implicit(self):
        with self.assertRaises(UnterminatedTagError):
            PipeHTML("<html><head><title>t</html>")


class TestSelect(unittest.TestCase):
    def test_option_closes_option(self):
        body = body_of("<select><option>A<option>B</select>")
        assert shape(body.children[0]) == ("select", [("option", ["A"]), ("option", ["B"])])

    def test_optgroup_closes_option_and_optgroup(self):
        body = body_of("<select><optgroup label=a><option>A1<optgroup label=b><option>B1</select>")
        select = body.children[0]
        assert [child.tag_name for child in select.children] == ["optgroup", "optgroup"]
        assert select.children[0].get_attribute("label") == "a"
        assert shape(select.children[0]) == ("optgroup", [("option", ["A1"])])
        assert shape(select.children[1]) == ("optgroup", [("option", ["B1"])])

    def test_optgroup_after_optgroup(self):
        body = body_of("<select><optgroup><optgroup></select>")
        assert [child.tag_name for child in body.children[0].children] == ["optgroup", "optgroup"]


class TestTables(unittest.TestCase):
    def test_cells_close_cells(self):
        body = body_of("<table><tr><td>1<th>2<td>3</table>")
        tr = body.children[0].children[0]
        assert shape(tr) == ("tr", [("td", ["1"]), ("th", ["2"]), ("td", ["3"])])

    def test_tr_closes_cell_and_row(self):
        body = body_of("<table><tr><td>1<tr><td>2</table>")
        table = body.children[0]
        assert shape(table) == ("table", [("tr", [("td", ["1"])]), ("tr", [("td", ["2"])])])

    def test_tr_closes_row_without_cells(self):
        body = body_of("<table><tr><tr></table>")
        assert [child.tag_name for child in body.children[0].children] == ["tr", "tr"]

    def test_sections_close_cells_rows_and_sections(self):
        body = body_of("<table><thead><tr><th>H<tbody><tr><td>B<tfoot><tr><td>F</table>")
        table = body.children[0]
        assert shape(table) == (
            "table",
            [
                ("thead", [("tr", [("th", ["H"])])]),
                ("tbody", [("tr", [("td", ["B"])])]),
                ("tfoot", [("tr", [("td", ["F"])])]),
            ],
        )

    def test_section_after_section(self):
        body = body_of("<table><tbody><tbody></table>")
        assert [child.tag_name for child in body.children[0].children] == ["tbody", "tbody"]

    def test_nested_table_in_cell(self):
        body = body_of("<table><tr><td><table><tr><td>in</table><td>out</table>")
        outer_row = body.children[0].children[0]
        assert [child.tag_name for child in outer_row.children] == ["td", "td"]
        assert outer_row.children[1].text_content == "out"
        assert outer_row.children[0].find_element_by_tag_name("td").text_content == "in"

    def test_no_foster_parenting(self):
        body = body_of("<table><div>x</div><tr><td>1</table>")
        table = body.children[0]
        assert [child.tag_name for child in table.children] == ["div", "tr"]


class TestEndTagReconciliation(unittest.TestCase):
    def test_end_tag_pops_implicitly_unclosed(self):
        body = body_of("<div><ul><li><p>deep</ul>after</div>")
        div = body.children[0]
        assert [child.tag_name for child in div.children] == ["ul", "#text"]
        assert div.children[1].data == "after"

    def test_end_tag_blocked_by_explicit_element(self):
        with self.assertRaises(UnterminatedTagError) as ctx:
            PipeHTML("<html><body><div><span>x</div></body></html>")
        assert ctx.exception.message == "Tag not closed - span"

    def test_end_tag_case_insensitive(self):
        body = body_of("<Div>x</DIV>")
        assert body.children[0].tag_name == "Div"

    def test_stack_untouched_on_failed_end_tag(self):
        scanner = Scanner()
        scanner.feed("<html><body><div><li>x")
        with self.assertRaises(UnterminatedTagError) as ctx:
            scanner.feed("</span>")
        assert ctx.exception.message == "Tag not closed - div"
        assert [element.tag_name for element in scanner.open_elements] == ["html", "body", "div", "li"]


if __name__ == "__main__":
    unittest.main()
