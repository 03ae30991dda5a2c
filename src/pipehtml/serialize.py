"""Serialization of scanned trees.

``to_html`` writes markup back out; scanning its output again yields the same
tree. ``to_test_format`` produces the html5lib-tests style dump used by the
test suite.
"""

from __future__ import annotations

from typing import Any

from .constants import VOID_ELEMENTS
from .node import CDATA, COMMENT, DOCUMENT, TEXT


def _choose_attr_quote(value: str) -> str:
    if '"' in value and "'" not in value:
        return "'"
    return '"'


def _escape_attr_value(value: str, quote_char: str) -> str:
    # Character references are never decoded on the way in, so "&" stays as is
    if quote_char == '"':
        return value.replace('"', "&quot;")
    return value


def serialize_start_tag(name: str, attrs: dict[str, str] | None) -> str:
    parts: list[str] = ["<", name]
    for key, value in (attrs or {}).items():
        value = "" if value is None else str(value)
        quote = _choose_attr_quote(value)
        parts.extend([" ", key, "=", quote, _escape_attr_value(value, quote), quote])
    parts.append(">")
    return "".join(parts)


def serialize_end_tag(name: str) -> str:
    return f"</{name}>"


def to_html(node: Any) -> str:
    """Convert node (usually a Document) to an HTML string."""
    parts: list[str] = []
    if node.tag_name == DOCUMENT:
        if node.doctype is not None:
            parts.append(f"<!DOCTYPE {node.doctype}>" if node.doctype else "<!DOCTYPE>")
        for child in node.children:
            _node_to_html(child, parts)
    else:
        _node_to_html(node, parts)
    return "".join(parts)


def _node_to_html(node: Any, parts: list[str]) -> None:
    name: str = node.tag_name
    if name == TEXT:
        parts.append(node.data)
        return
    if name == COMMENT:
        parts.append(f"<!--{node.data}-->")
        return
    if name == CDATA:
        parts.append(f"<![CDATA[{node.data}]]>")
        return

    parts.append(serialize_start_tag(name, node.attributes))
    if name.lower() in VOID_ELEMENTS and not node.children:
        return
    for child in node.children:
        _node_to_html(child, parts)
    parts.append(serialize_end_tag(name))


def to_test_format(node: Any, indent: int = 0) -> str:
    """Convert node to html5lib test format string.

    Uses '| ' prefixes and two-space indentation per nesting level.
    Attributes are listed below their element, sorted by name.
    """
    if node.tag_name == DOCUMENT:
        parts: list[str] = []
        if node.doctype is not None:
            parts.append(f"| <!DOCTYPE {node.doctype}>")
        parts.extend(_node_to_test_format(child, 0) for child in node.children)
        return "\n".join(parts)
    return _node_to_test_format(node, indent)


def _node_to_test_format(node: Any, indent: int) -> str:
    name: str = node.tag_name
    if name == COMMENT:
        return f"| {' ' * indent}<!-- {node.data} -->"
    if name == CDATA:
        return f"| {' ' * indent}<![CDATA[{node.data}]]>"
    if name == TEXT:
        return f'| {" " * indent}"{node.data}"'

    sections: list[str] = [f"| {' ' * indent}<{name}>"]
    padding = " " * (indent + 2)
    for attr_name, value in sorted(node.attributes.items()):
        sections.append(f'| {padding}{attr_name}="{value}"')
    sections.extend(_node_to_test_format(child, indent + 2) for child in node.children)
    return "\n".join(sections)
