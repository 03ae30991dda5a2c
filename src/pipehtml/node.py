from .constants import HTML_WHITESPACE

DOCUMENT = "#document"
TEXT = "#text"
COMMENT = "#comment"
CDATA = "#cdata-section"

_CHARACTER_NODES = frozenset([TEXT, COMMENT, CDATA])


def attribute_key(attributes, name):
    """Key of ``attributes`` that ``name`` refers to: the exact name if present,
    otherwise the first key equal to it ignoring case."""
    if name in attributes:
        return name
    lowered = name.lower()
    for key in attributes:
        if key.lower() == lowered:
            return key
    return None


class Node:
    """Represents a DOM-like node.
    - tag_name: e.g., 'div', 'P', etc. Character nodes use '#text', '#comment'
      or '#cdata-section'; the document uses '#document'.
    - attributes: insertion-ordered dict of tag attributes, names as written
    - children: list of child Nodes
    - parent: reference to parent Node (or None for the document / detached nodes)
    - next_sibling/previous_sibling: references to adjacent nodes in the tree.
    """

    __slots__ = (
        "attributes",
        "children",
        "next_sibling",
        "parent",
        "previous_sibling",
        "tag_name",
        "data",
    )

    def __init__(self, tag_name, attributes=None, text_content=None):
        if tag_name is None or tag_name == "":
            msg = "Empty tag_name passed to Node constructor"
            raise ValueError(msg)

        self.tag_name = tag_name
        self.attributes = dict(attributes) if attributes else {}
        self.children = []
        self.parent = None
        # Character data for text, comment and CDATA nodes; unused on elements
        self.data = text_content if text_content is not None else ""
        self.next_sibling = None
        self.previous_sibling = None

    @property
    def is_element(self):
        return not self.tag_name.startswith("#")

    @property
    def is_text(self):
        return self.tag_name == TEXT

    @property
    def is_comment(self):
        return self.tag_name == COMMENT

    @property
    def is_cdata(self):
        return self.tag_name == CDATA

    @property
    def local_name(self):
        """Lower-cased tag name, used for all case-insensitive comparisons."""
        return self.tag_name.lower()

    def matches_tag(self, tag_name):
        return self.is_element and self.tag_name.lower() == tag_name.lower()

    def append_child(self, child):
        if self.tag_name in _CHARACTER_NODES:
            msg = f"{self.tag_name} nodes cannot have children"
            raise ValueError(msg)
        if self._is_self_or_ancestor(child):
            msg = f"Appending {child.tag_name} to {self.tag_name} would create a cycle"
            raise ValueError(msg)
        if child.parent is not None:
            child.parent.remove_child(child)

        last = self.children[-1] if self.children else None
        if last is not None:
            last.next_sibling = child
        child.previous_sibling = last
        child.next_sibling = None
        child.parent = self
        self.children.append(child)

    def remove_child(self, child):
        if child.parent is not self:
            return
        before, after = child.previous_sibling, child.next_sibling
        if before is not None:
            before.next_sibling = after
        if after is not None:
            after.previous_sibling = before
        self.children.remove(child)
        child.parent = child.previous_sibling = child.next_sibling = None

    def _is_self_or_ancestor(self, node):
        ancestor = self
        while ancestor is not None:
            if ancestor is node:
                return True
            ancestor = ancestor.parent
        return False

    # Attributes

    def set_attribute(self, name, value):
        self.attributes[name] = value

    def _attribute_key(self, name):
        return attribute_key(self.attributes, name)

    def get_attribute(self, name):
        key = self._attribute_key(name)
        return None if key is None else self.attributes[key]

    def has_attribute(self, name):
        return self._attribute_key(name) is not None

    # Queries

    def child_elements(self):
        return [child for child in self.children if child.is_element]

    def iter_descendants(self):
        """Yield every descendant in document order (depth-first, pre-order)."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if node.children:
                stack.extend(reversed(node.children))

    def find_element_by_tag_name(self, tag_name):
        for node in self.iter_descendants():
            if node.matches_tag(tag_name):
                return node
        return None

    def find_elements_by_tag_name(self, tag_name):
        return [node for node in self.iter_descendants() if node.matches_tag(tag_name)]

    def find_ancestor(self, match):
        """Nearest node, starting with this one, whose tag matches ``match``.

        ``match`` is a tag name (compared case-insensitively) or a predicate.
        """
        if not callable(match):
            tag_name = match

            def match(node):
                return node.matches_tag(tag_name)

        node = self
        while node is not None and not match(node):
            node = node.parent
        return node

    @property
    def text_content(self):
        """DOM textContent: own data for character nodes, otherwise the
        concatenated text and CDATA of every descendant."""
        if self.tag_name in _CHARACTER_NODES:
            return self.data
        return "".join(node.data for node in self.iter_descendants() if node.is_text or node.is_cdata)

    def is_whitespace(self):
        """True for a text node holding nothing but HTML whitespace."""
        return self.is_text and self.data.strip(HTML_WHITESPACE) == ""

    def __repr__(self):
        if self.tag_name in _CHARACTER_NODES:
            return f"Node({self.tag_name}='{self.data[:30]}')"
        return f"Node(<{self.tag_name}>, children={len(self.children)})"


class Document(Node):
    """Root of a scanned tree.

    ``doctype`` is ``None`` when no DOCTYPE directive was seen, ``""`` for a
    bare ``<!DOCTYPE>`` and otherwise the trimmed directive body.
    """

    __slots__ = ("doctype",)

    def __init__(self):
        super().__init__(DOCUMENT)
        self.doctype = None

    @property
    def document_element(self):
        for child in self.children:
            if child.is_element:
                return child
        return None

    def __repr__(self):
        return f"Document(doctype={self.doctype!r}, children={len(self.children)})"
