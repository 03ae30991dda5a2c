#!/usr/bin/env python3
"""Debug script to trace the scanner over a file or a literal string."""

import argparse
import sys
from pathlib import Path

from pipehtml import ByteStreamParser, ParseError, ScannerOpts, to_test_format


def debug_scan(data, encoding, quiet=False):
    charsets = []
    parser = ByteStreamParser(encoding, charset_callback=charsets.append, opts=ScannerOpts(debug=not quiet))
    scanner = parser.scanner
    error = None
    try:
        parser.feed(data)
        parser.close()
    except ParseError as exc:
        error = exc

    print("\n=== Result ===")
    print(f"State: {scanner.state.name} at ({scanner.line},{scanner.column})")
    print(f"Encoding: {parser.encoding}")
    if charsets:
        print(f"Announced charsets: {charsets}")
    if scanner.open_elements:
        names = " > ".join(element.tag_name for element in scanner.open_elements)
        print(f"Left open: {names}")
    if error is not None:
        print(f"\n!!! {type(error).__name__}: {error} !!!")
    print("\nTree:")
    print(to_test_format(parser.result) or "(empty)")
    return error is None


def main():
    parser = argparse.ArgumentParser(description="Print the scanner's state trace and resulting tree")
    parser.add_argument("source", help="Path to an HTML file, or literal markup")
    parser.add_argument("--encoding", "-e", default="utf-8", help="Initial encoding (default: utf-8)")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only print the result, not the trace")
    args = parser.parse_args()

    path = Path(args.source)
    if path.is_file():
        data = path.read_bytes()
        print(f"=== {path} ({len(data)} bytes) ===")
    else:
        data = args.source.encode(args.encoding)
        print(f"=== Input: {args.source!r} ===")

    sys.exit(0 if debug_scan(data, args.encoding, quiet=args.quiet) else 1)


if __name__ == "__main__":
    main()
