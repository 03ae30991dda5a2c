"""Scan failures.

Every failure is fatal to the document being scanned: the scanner moves to its
terminal error state before raising, and ignores any further input.
"""


class ParseError(Exception):
    """A scan failure with location information.

    ``line`` is 1-based, ``column`` is the 0-based offset of the offending
    character within its line.
    """

    code = "parse-error"

    def __init__(self, message=None, line=None, column=None):
        self.line = line
        self.column = column
        self.message = message or self.code
        super().__init__(self.message)

    def __repr__(self):
        name = type(self).__name__
        if self.line is not None and self.column is not None:
            return f"{name}({self.message!r}, line={self.line}, column={self.column})"
        return f"{name}({self.message!r})"

    def __str__(self):
        if self.line is not None and self.column is not None:
            if self.message != self.code:
                return f"({self.line},{self.column}): {self.code} - {self.message}"
            return f"({self.line},{self.column}): {self.code}"
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other):
        if not isinstance(other, ParseError):
            return NotImplemented
        return (
            self.code == other.code
            and self.message == other.message
            and self.line == other.line
            and self.column == other.column
        )

    # Raised exceptions must stay hashable for traceback bookkeeping
    __hash__ = Exception.__hash__


class StructuralError(ParseError):
    """Illegal character for the current state, or an impossible tree shape."""

    code = "structural-error"


class UnrecognizedDirectiveError(ParseError):
    """``<!X...>`` where X is not DOCTYPE."""

    code = "unrecognized-directive"


class DuplicateDoctypeError(ParseError):
    code = "duplicate-doctype"


class UnterminatedTagError(ParseError):
    """An end tag whose opener is not reachable through implicitly closable elements."""

    code = "unterminated-tag"


class IncompleteDocumentError(ParseError):
    """End of input in the middle of a construct."""

    code = "incomplete-document"
