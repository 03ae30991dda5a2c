"""Minimal pipehtml entry point."""

from .scanner import Scanner, ScannerOpts
from .serialize import to_html, to_test_format
from .treebuilder import TreeBuilder


class PipeHTML:
    __slots__ = ("charsets", "debug", "doc_type", "root", "scanner", "tree_builder")

    def __init__(
        self,
        html,
        *,
        charset_callback=None,
        debug=False,
        scanner_opts=None,
        tree_builder=None,
    ):
        opts = scanner_opts or ScannerOpts(debug=debug)
        if debug and not opts.debug:
            # Trace without touching the caller's options
            opts = ScannerOpts(
                void_elements=opts.void_elements,
                is_whitespace=opts.is_whitespace,
                discard_bom=opts.discard_bom,
                debug=True,
            )
        self.debug = opts.debug
        self.charsets = []
        self.tree_builder = tree_builder or TreeBuilder()

        def on_charset(charset):
            self.charsets.append(charset)
            if charset_callback is not None:
                charset_callback(charset)

        self.scanner = Scanner(self.tree_builder, charset_callback=on_charset, opts=opts)
        self.scanner.feed(html or "")
        self.scanner.close()
        self.root = self.tree_builder.finish()
        self.doc_type = self.scanner.doc_type

    def to_html(self):
        return to_html(self.root)

    def to_test_format(self):
        return to_test_format(self.root)
