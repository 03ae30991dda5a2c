"""Push-based HTML scanner.

Code points are delivered one at a time through ``Scanner.accept``. Each one
is dispatched against the current state; a handler returns True when the same
code point must be dispatched again against the state it just switched to
(for example the character that ends a tag name also starts whatever follows
it). Tree construction is delegated to a tree builder, see ``TreeBuilder``.
"""

import enum

from .constants import CLOSES_P, IMPLICIT_CLOSE_RULES, IMPLICITLY_UNCLOSED, RAW_TEXT_ELEMENTS, VOID_ELEMENTS
from .node import attribute_key
from .errors import (
    DuplicateDoctypeError,
    IncompleteDocumentError,
    StructuralError,
    UnrecognizedDirectiveError,
    UnterminatedTagError,
)
from .smallset import LETTERS, WHITESPACE, WORD_CHARS
from .treebuilder import TreeBuilder

# No transition chain is longer than WORD -> ELEMENT -> ELEMENT1
_MAX_DISPATCHES = 8


class State(enum.IntEnum):
    TEXT = 0
    ANGLE_BRACKET_SEEN = 1
    EXCLAMATION_MARK_SEEN = 2
    DIRECTIVE = 3
    DOCTYPE = 4
    COMMENT1 = 5
    COMMENT2 = 6
    COMMENT3 = 7
    COMMENT4 = 8
    CDATA1 = 9
    CDATA2 = 10
    SCRIPT = 11
    ELEMENT = 12
    ELEMENT1 = 13
    ELEMENT2 = 14
    ELEMENT3 = 15
    ATTRIBUTE = 16
    ATTRIBUTE1 = 17
    QUOTED_ATTRIBUTE = 18
    UNQUOTED_ATTRIBUTE = 19
    END_ELEMENT = 20
    WORD = 21
    ERROR = 22


class ScannerOpts:
    __slots__ = ("debug", "discard_bom", "is_whitespace", "void_elements")

    def __init__(self, void_elements=None, is_whitespace=None, discard_bom=True, debug=False):
        if void_elements is None:
            self.void_elements = VOID_ELEMENTS
        else:
            self.void_elements = frozenset(name.lower() for name in void_elements)
        self.is_whitespace = is_whitespace or WHITESPACE.contains
        self.discard_bom = bool(discard_bom)
        self.debug = bool(debug)


class Scanner:
    __slots__ = (
        "charset_callback",
        "close_quote",
        "closed",
        "column",
        "current_attrs",
        "doc_type",
        "has_root",
        "line",
        "next_state",
        "open_elements",
        "opts",
        "raw_text_end",
        "started",
        "state",
        "text_buffer",
        "tree_builder",
        "word",
    )

    def __init__(self, tree_builder=None, charset_callback=None, opts=None):
        self.tree_builder = tree_builder or TreeBuilder()
        self.charset_callback = charset_callback
        self.opts = opts or ScannerOpts()

        self.state = State.TEXT
        self.next_state = State.ERROR
        self.word = []
        self.text_buffer = []
        self.close_quote = '"'
        self.raw_text_end = ""
        # Attributes of the element whose start tag is being scanned
        self.current_attrs = {}
        # Non-owning; the tree owns the elements
        self.open_elements = []
        self.doc_type = None
        self.has_root = False
        self.started = False
        self.closed = False
        self.line = 1
        self.column = 0

    def debug(self, message, indent=4):
        if self.opts.debug:
            print(f"{' ' * indent}{message}")

    # Public interface

    def accept(self, ch):
        if self.closed:
            msg = "accept() called after close()"
            raise ValueError(msg)
        if isinstance(ch, int):
            ch = chr(ch)
        if not self.started:
            self.started = True
            if ch == "\ufeff" and self.opts.discard_bom:
                return

        for _ in range(_MAX_DISPATCHES):
            if not self._dispatch(ch):
                break
        else:
            msg = f"Scanner did not settle on {ch!r} in state {self.state.name}"
            raise AssertionError(msg)

        if ch == "\n":
            self.line += 1
            self.column = 0
        elif ch >= " ":
            self.column += 1

    def feed(self, text):
        for ch in text:
            self.accept(ch)

    def close(self):
        if self.closed:
            return
        if self.state != State.TEXT or self.text_buffer:
            self._fail(IncompleteDocumentError, "Document incomplete")
        self.closed = True
        self.debug(f"close: {len(self.open_elements)} element(s) left open", indent=0)

    def get_result(self):
        return self.tree_builder.document

    @property
    def result(self):
        return self.tree_builder.document

    # Dispatch

    def _dispatch(self, ch):
        state = self.state
        if state == State.TEXT:
            reprocess = self._state_text(ch)
        elif state == State.WORD:
            reprocess = self._state_word(ch)
        elif state == State.ANGLE_BRACKET_SEEN:
            reprocess = self._state_angle_bracket_seen(ch)
        elif state == State.EXCLAMATION_MARK_SEEN:
            reprocess = self._state_exclamation_mark_seen(ch)
        elif state == State.DIRECTIVE:
            reprocess = self._state_directive(ch)
        elif state == State.DOCTYPE:
            reprocess = self._state_doctype(ch)
        elif state == State.COMMENT1:
            reprocess = self._state_comment1(ch)
        elif state == State.COMMENT2:
            reprocess = self._state_comment2(ch)
        elif state == State.COMMENT3:
            reprocess = self._state_comment3(ch)
        elif state == State.COMMENT4:
            reprocess = self._state_comment4(ch)
        elif state == State.CDATA1:
            reprocess = self._state_cdata1(ch)
        elif state == State.CDATA2:
            reprocess = self._state_cdata2(ch)
        elif state == State.SCRIPT:
            reprocess = self._state_script(ch)
        elif state == State.ELEMENT:
            reprocess = self._state_element(ch)
        elif state == State.ELEMENT1:
            reprocess = self._state_element1(ch)
        elif state == State.ELEMENT2:
            reprocess = self._state_element2(ch)
        elif state == State.ELEMENT3:
            reprocess = self._state_element3(ch)
        elif state == State.ATTRIBUTE:
            reprocess = self._state_attribute(ch)
        elif state == State.ATTRIBUTE1:
            reprocess = self._state_attribute1(ch)
        elif state == State.QUOTED_ATTRIBUTE:
            reprocess = self._state_quoted_attribute(ch)
        elif state == State.UNQUOTED_ATTRIBUTE:
            reprocess = self._state_unquoted_attribute(ch)
        elif state == State.END_ELEMENT:
            reprocess = self._state_end_element(ch)
        else:
            # ERROR swallows everything
            return False

        if self.opts.debug and self.state != state:
            self.debug(f"{state.name} -> {self.state.name} on {ch!r}", indent=2)
        return reprocess

    # States

    def _state_text(self, ch):
        if not self.open_elements:
            if ch == "<":
                self.state = State.ANGLE_BRACKET_SEEN
            elif not self.opts.is_whitespace(ch):
                self._fail(StructuralError, "Text outside elements")
            return False
        if ch == "<":
            self._flush_text()
            self.state = State.ANGLE_BRACKET_SEEN
        else:
            self.text_buffer.append(ch)
        return False

    def _state_word(self, ch):
        if ch in WORD_CHARS:
            self.word.append(ch)
            return False
        self.state = self.next_state
        return True

    def _state_angle_bracket_seen(self, ch):
        if ch == "!":
            self.state = State.EXCLAMATION_MARK_SEEN
        elif ch == "/":
            self._expect_word(State.END_ELEMENT)
        elif ch in LETTERS:
            self._expect_word(State.ELEMENT, ch)
        else:
            self._fail(StructuralError, "Illegal character following <")
        return False

    def _state_exclamation_mark_seen(self, ch):
        if ch in LETTERS:
            self._expect_word(State.DIRECTIVE, ch)
        elif ch == "-":
            self.state = State.COMMENT1
        elif ch == "[":
            self._expect_word(State.CDATA1)
        else:
            self._fail(StructuralError, "Illegal character following <!")
        return False

    def _state_directive(self, ch):
        directive = "".join(self.word)
        if directive.upper() != "DOCTYPE":
            self._fail(UnrecognizedDirectiveError, f"Unrecognised directive - {directive}")
        if self.doc_type is not None:
            self._fail(DuplicateDoctypeError, "Duplicate DOCTYPE")
        self.text_buffer.clear()
        if self.opts.is_whitespace(ch):
            self.state = State.DOCTYPE
        elif ch == ">":
            self._set_doctype("")
            self.state = State.TEXT
        else:
            self._fail(StructuralError, "Illegal character in DOCTYPE")
        return False

    def _state_doctype(self, ch):
        if ch == ">":
            self._set_doctype(self._trim("".join(self.text_buffer)))
            self._expect_text()
        else:
            self.text_buffer.append(ch)
        return False

    def _state_comment1(self, ch):
        if ch != "-":
            self._fail(StructuralError, "Illegal comment")
        self.text_buffer.clear()
        self.state = State.COMMENT2
        return False

    def _state_comment2(self, ch):
        if ch == "-":
            self.state = State.COMMENT3
        else:
            self.text_buffer.append(ch)
        return False

    def _state_comment3(self, ch):
        # One "-" seen; anything but a second one puts it back into the body
        if ch == "-":
            self.state = State.COMMENT4
        else:
            self.text_buffer.append("-")
            self.text_buffer.append(ch)
            self.state = State.COMMENT2
        return False

    def _state_comment4(self, ch):
        if ch == ">":
            self._append_node(self.tree_builder.create_comment("".join(self.text_buffer)))
            self._expect_text()
        elif ch == "-":
            self.text_buffer.append("-")
        else:
            self.text_buffer.extend(("-", "-", ch))
            self.state = State.COMMENT2
        return False

    def _state_cdata1(self, ch):
        if "".join(self.word) != "CDATA" or ch != "[":
            self._fail(StructuralError, "Illegal directive")
        if not self.open_elements:
            self._fail(StructuralError, "CDATA outside elements")
        self.text_buffer.clear()
        self.state = State.CDATA2
        return False

    def _state_cdata2(self, ch):
        buffer = self.text_buffer
        if ch == ">" and len(buffer) >= 2 and buffer[-1] == "]" and buffer[-2] == "]":
            del buffer[-2:]
            node = self.tree_builder.create_cdata("".join(buffer))
            self.tree_builder.append_child(self.open_elements[-1], node)
            self._expect_text()
        else:
            buffer.append(ch)
        return False

    def _state_script(self, ch):
        buffer = self.text_buffer
        if ch == ">":
            end = self.raw_text_end
            size = len(end)
            if len(buffer) >= size and "".join(buffer[-size:]) == end:
                del buffer[-size:]
                self._flush_text()
                self._pop()
                self.state = State.TEXT
                return False
        buffer.append(ch)
        return False

    def _state_element(self, ch):
        tag_name = "".join(self.word)
        self._close_implied(tag_name.lower())
        if not self.open_elements:
            if self.has_root:
                self._fail(StructuralError, "Multiple root elements")
            self.has_root = True
        element = self.tree_builder.create_element(tag_name)
        self._append_node(element)
        self._push(element)
        self.state = State.ELEMENT1
        return True

    def _state_element1(self, ch):
        if self.opts.is_whitespace(ch):
            return False
        if ch in LETTERS:
            self._expect_word(State.ATTRIBUTE, ch)
        elif ch == ">":
            self._element_open()
        elif ch == "/":
            self.state = State.ELEMENT2
        else:
            self._fail(StructuralError, "Illegal character in element")
        return False

    def _state_element2(self, ch):
        if ch != ">":
            self._fail(StructuralError, "Illegal character in element")
        self._sniff_charset(self.open_elements[-1])
        self._pop()
        self._expect_text()
        return False

    def _state_element3(self, ch):
        if self.opts.is_whitespace(ch):
            self.state = State.ELEMENT1
        elif ch == ">":
            self._element_open()
        elif ch == "/":
            self.state = State.ELEMENT2
        else:
            self._fail(StructuralError, "Illegal character following attribute")
        return False

    def _state_attribute(self, ch):
        if self.opts.is_whitespace(ch):
            return False
        if ch == "=":
            self.state = State.ATTRIBUTE1
            return False
        # No value: the name doubles as the value, as in <option selected>
        name = "".join(self.word)
        self._set_attribute(name, name)
        self.state = State.ELEMENT1
        return True

    def _state_attribute1(self, ch):
        if self.opts.is_whitespace(ch):
            return False
        self.text_buffer.clear()
        if ch in "\"'":
            self.close_quote = ch
            self.state = State.QUOTED_ATTRIBUTE
            return False
        self.state = State.UNQUOTED_ATTRIBUTE
        return True

    def _state_quoted_attribute(self, ch):
        if ch == self.close_quote:
            self._set_attribute("".join(self.word), "".join(self.text_buffer))
            self.state = State.ELEMENT3
        else:
            self.text_buffer.append(ch)
        return False

    def _state_unquoted_attribute(self, ch):
        if self.opts.is_whitespace(ch) or ch == ">" or ch == "/":
            self._set_attribute("".join(self.word), "".join(self.text_buffer))
            self.state = State.ELEMENT3
            return True
        self.text_buffer.append(ch)
        return False

    def _state_end_element(self, ch):
        if ch != ">":
            self._fail(StructuralError, "Closing tag error")
        depth = self._end_tag_depth("".join(self.word).lower())
        for _ in range(depth):
            self._pop()
        self._expect_text()
        return False

    # Tag stack reconciliation

    def _top_name(self):
        return self.tree_builder.tag_name(self.open_elements[-1]).lower()

    def _close_implied(self, tag_name):
        """Pop elements that cannot contain a new ``tag_name`` start tag."""
        if not self.open_elements:
            return
        if tag_name in CLOSES_P and self._top_name() == "p":
            self._pop(reason=f"implied by <{tag_name}>")
            return
        for group in IMPLICIT_CLOSE_RULES.get(tag_name, ()):
            if self.open_elements and self._top_name() in group:
                self._pop(reason=f"implied by <{tag_name}>")

    def _end_tag_depth(self, tag_name):
        """Number of stack entries an end tag for ``tag_name`` closes.

        Everything above the matching element must be implicitly closable.
        The stack is left untouched when the end tag cannot be honoured.
        """
        for depth, element in enumerate(reversed(self.open_elements), 1):
            name = self.tree_builder.tag_name(element).lower()
            if name == tag_name:
                return depth
            if name not in IMPLICITLY_UNCLOSED:
                self._fail(UnterminatedTagError, f"Tag not closed - {name}")
        self._fail(UnterminatedTagError, f"Unmatched closing tag - {tag_name}")
        return 0

    def _element_open(self):
        """Finish a start tag on its closing ``>``."""
        element = self.open_elements[-1]
        tag_name = self.tree_builder.tag_name(element)
        self._sniff_charset(element)
        self.text_buffer.clear()
        if tag_name.lower() in RAW_TEXT_ELEMENTS:
            self.raw_text_end = "</" + tag_name
            self.state = State.SCRIPT
            return
        if tag_name.lower() in self.opts.void_elements:
            self._pop()
        self.state = State.TEXT

    def _push(self, element):
        self.open_elements.append(element)
        self.current_attrs = {}
        self.debug(f"push <{self.tree_builder.tag_name(element)}> depth={len(self.open_elements)}")

    def _pop(self, reason=None):
        element = self.open_elements.pop()
        if self.opts.debug:
            suffix = f" ({reason})" if reason else ""
            self.debug(f"pop <{self.tree_builder.tag_name(element)}>{suffix}")
        return element

    # Charset sniffing

    def _find_attribute(self, name):
        key = attribute_key(self.current_attrs, name)
        return None if key is None else self.current_attrs[key]

    def _sniff_charset(self, element):
        if self.tree_builder.tag_name(element).lower() != "meta":
            return
        charset = self._find_attribute("charset")
        if charset is not None:
            self._notify_charset(charset)
            return
        http_equiv = self._find_attribute("http-equiv")
        if http_equiv is None or http_equiv.lower() != "content-type":
            return
        content = self._find_attribute("content")
        if content is None:
            return
        for part in content.split(";"):
            key, sep, value = part.partition("=")
            if sep and self._trim(key).lower() == "charset":
                self._notify_charset(self._trim(value))

    def _notify_charset(self, charset):
        self.debug(f"charset: {charset!r}")
        if self.charset_callback is not None:
            self.charset_callback(charset)

    # Helpers

    def _append_node(self, node):
        parent = self.open_elements[-1] if self.open_elements else self.tree_builder.document
        self.tree_builder.append_child(parent, node)

    def _flush_text(self):
        if self.text_buffer:
            node = self.tree_builder.create_text("".join(self.text_buffer))
            self.tree_builder.append_child(self.open_elements[-1], node)
            self.text_buffer.clear()

    def _set_attribute(self, name, value):
        self.current_attrs[name] = value
        self.tree_builder.set_attribute(self.open_elements[-1], name, value)

    def _set_doctype(self, name):
        self.doc_type = name
        self.tree_builder.set_doctype(name)
        self.debug(f"doctype: {name!r}")

    def _expect_text(self):
        self.text_buffer.clear()
        self.state = State.TEXT

    def _expect_word(self, next_state, first=None):
        self.word.clear()
        if first is not None:
            self.word.append(first)
        self.next_state = next_state
        self.state = State.WORD

    def _trim(self, value):
        is_whitespace = self.opts.is_whitespace
        start = 0
        end = len(value)
        while start < end and is_whitespace(value[start]):
            start += 1
        while end > start and is_whitespace(value[end - 1]):
            end -= 1
        return value[start:end]

    def _fail(self, error_class, message):
        self.state = State.ERROR
        self.debug(f"error ({self.line},{self.column}): {message}", indent=0)
        raise error_class(message, line=self.line, column=self.column)
