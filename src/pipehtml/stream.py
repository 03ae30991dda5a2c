"""Byte-level front end.

Bytes are decoded one at a time so that a ``<meta charset>`` announcement can
switch the codec for everything that follows the tag, without re-decoding
anything already handed to the scanner.
"""

import codecs

from .scanner import Scanner, ScannerOpts


class ByteStreamParser:
    __slots__ = ("_decoder", "charset_callback", "encoding", "scanner")

    def __init__(self, encoding="utf-8", *, charset_callback=None, opts=None, tree_builder=None):
        self.encoding = codecs.lookup(encoding).name
        self.charset_callback = charset_callback
        self._decoder = codecs.getincrementaldecoder(self.encoding)()
        self.scanner = Scanner(tree_builder, charset_callback=self._on_charset, opts=opts or ScannerOpts())

    @property
    def result(self):
        return self.scanner.result

    @property
    def doc_type(self):
        return self.scanner.doc_type

    def _on_charset(self, charset):
        if self.charset_callback is not None:
            self.charset_callback(charset)
        try:
            name = codecs.lookup(charset).name
        except LookupError:
            self.scanner.debug(f"unknown charset {charset!r}, keeping {self.encoding}")
            return
        if name != self.encoding:
            self.scanner.debug(f"switching decoder {self.encoding} -> {name}")
            self.encoding = name
            self._decoder = codecs.getincrementaldecoder(name)()

    def feed(self, data):
        accept = self.scanner.accept
        for byte in data:
            # The decoder may be replaced while accepting, so look it up per byte
            for ch in self._decoder.decode(bytes((byte,))):
                accept(ch)

    def close(self):
        for ch in self._decoder.decode(b"", final=True):
            self.scanner.accept(ch)
        self.scanner.close()
        return self.scanner.result


def parse_bytes(data, encoding="utf-8", **kwargs):
    parser = ByteStreamParser(encoding, **kwargs)
    parser.feed(data)
    parser.close()
    return parser


def parse_file(path, encoding="utf-8", chunk_size=65536, **kwargs):
    parser = ByteStreamParser(encoding, **kwargs)
    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            parser.feed(chunk)
    parser.close()
    return parser
