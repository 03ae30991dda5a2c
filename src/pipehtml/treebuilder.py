from .node import CDATA, COMMENT, TEXT, Document, Node


class TreeBuilder:
    """Builds the node tree on behalf of the scanner.

    The scanner only ever calls the methods below, so any object providing
    them (for example one producing lxml or xml.dom nodes) can be substituted.
    """

    __slots__ = ("document",)

    def __init__(self):
        self.document = Document()

    def create_element(self, tag_name):
        return Node(tag_name)

    def create_text(self, data):
        return Node(TEXT, text_content=data)

    def create_comment(self, data):
        return Node(COMMENT, text_content=data)

    def create_cdata(self, data):
        return Node(CDATA, text_content=data)

    def append_child(self, parent, node):
        parent.append_child(node)

    def set_attribute(self, element, name, value):
        element.set_attribute(name, value)

    def tag_name(self, element):
        return element.tag_name

    def set_doctype(self, name):
        self.document.doctype = name

    def finish(self):
        return self.document
