from .errors import (
    DuplicateDoctypeError,
    IncompleteDocumentError,
    ParseError,
    StructuralError,
    UnrecognizedDirectiveError,
    UnterminatedTagError,
)
from .node import Document, Node
from .parser import PipeHTML
from .scanner import Scanner, ScannerOpts, State
from .serialize import to_html, to_test_format
from .stream import ByteStreamParser, parse_bytes, parse_file
from .treebuilder import TreeBuilder

__all__ = [
    "ByteStreamParser",
    "Document",
    "DuplicateDoctypeError",
    "IncompleteDocumentError",
    "Node",
    "ParseError",
    "PipeHTML",
    "Scanner",
    "ScannerOpts",
    "State",
    "StructuralError",
    "TreeBuilder",
    "UnrecognizedDirectiveError",
    "UnterminatedTagError",
    "parse_bytes",
    "parse_file",
    "to_html",
    "to_test_format",
]
