import string

from .constants import HTML_WHITESPACE


class SmallCharSet:
    """ASCII-only character class backed by a 128-bit mask."""

    __slots__ = ("_mask",)

    def __init__(self, chars):
        mask = 0
        for c in chars:
            code = ord(c)
            if code >= 128:
                raise ValueError("SmallCharSet only supports ASCII")
            mask |= 1 << code
        self._mask = mask

    def contains(self, c):
        code = ord(c)
        if code >= 128:
            return False
        return (self._mask >> code) & 1 == 1

    __contains__ = contains

    def union(self, other):
        merged = SmallCharSet("")
        merged._mask = self._mask | other._mask
        return merged


LETTERS = SmallCharSet(string.ascii_letters)
DIGITS = SmallCharSet(string.digits)
WORD_CHARS = LETTERS.union(DIGITS).union(SmallCharSet("-"))
WHITESPACE = SmallCharSet(HTML_WHITESPACE)
