#!/usr/bin/env python3
"""
Random fuzzer for the pipehtml scanner.
Generates tag soup (mostly plausible, partly broken) and checks that the
scanner either builds a tree or rejects the input with a ParseError. Any other
exception, or a document taking longer than 5 seconds, is a failure.
"""

import argparse
import random
import string
import sys
import time
import traceback

from pipehtml import ByteStreamParser, ParseError, PipeHTML, parse_bytes, to_html, to_test_format

TAGS = [
    "div", "span", "p", "a", "b", "i", "em", "table", "thead", "tbody", "tfoot", "tr", "td", "th",
    "ul", "ol", "li", "dl", "dt", "dd", "select", "option", "optgroup", "form", "h1", "h2", "h6",
    "section", "article", "header", "footer", "nav", "pre", "blockquote", "title", "head", "body",
]
VOID_TAGS = ["area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"]
RAW_TEXT_TAGS = ["script", "style"]
IMPLICIT_TAGS = ["p", "li", "dt", "dd", "option", "optgroup", "td", "th", "tr", "tbody", "thead", "tfoot"]

ATTRIBUTES = [
    "id", "class", "href", "src", "alt", "title", "name", "value", "type", "data-x", "aria-label",
    "disabled", "checked", "selected", "charset", "http-equiv", "content", "data-2x",
]
CHARSETS = ["utf-8", "UTF-8", "iso-8859-1", "latin1", "x-unknown", " utf-8 ", ""]

# Characters that each drive the scanner into a different branch
SPECIAL_CHARS = ["<", ">", "/", "!", "-", "[", "]", "=", '"', "'", " ", "\t", "\n", "\r", "\f", "\ufeff", "\x00"]


def random_string(min_len=0, max_len=12, alphabet=string.ascii_letters + string.digits + " "):
    return "".join(random.choice(alphabet) for _ in range(random.randint(min_len, max_len)))


def random_whitespace():
    return "".join(random.choice(" \t\n\r\f") for _ in range(random.randint(0, 3)))


def fuzz_tag_name():
    strategies = [
        lambda: random.choice(TAGS),
        lambda: random.choice(TAGS).upper(),
        lambda: random.choice(TAGS).capitalize(),
        lambda: random.choice(VOID_TAGS),
        lambda: random.choice(IMPLICIT_TAGS),
        lambda: random.choice(string.ascii_letters) + random_string(0, 6, string.ascii_letters + string.digits + "-"),
    ]
    return random.choice(strategies)()


def fuzz_attribute_value():
    strategies = [
        lambda: f'"{random_string()}"',
        lambda: f"'{random_string()}'",
        lambda: f"'say \"{random_string(1, 4)}\"'",
        lambda: f'"it\'s {random_string(1, 4)}"',
        lambda: random_string(0, 8, string.ascii_letters + string.digits + "-_."),
        lambda: f'"{random.choice(["<p>", "&amp;", "a>b", "</div>"])}"',
    ]
    return random.choice(strategies)()


def fuzz_attribute():
    name = random.choice(ATTRIBUTES)
    if random.random() < 0.2:
        return name
    return f"{name}{random_whitespace() if random.random() < 0.2 else ''}={fuzz_attribute_value()}"


def fuzz_open_tag(tag_name=None):
    tag_name = tag_name or fuzz_tag_name()
    attrs = "".join(" " + fuzz_attribute() for _ in range(random.randint(0, 3)))
    close = random.choice([">", ">", ">", "/>", " />", random_whitespace() + ">"])
    return f"<{tag_name}{attrs}{close}"


def fuzz_close_tag(tag_name=None):
    tag_name = tag_name or fuzz_tag_name()
    return random.choice([f"</{tag_name}>", f"</{tag_name.upper()}>", f"</{tag_name} >", f"</{tag_name}"])


def fuzz_comment():
    body = random.choice(
        [
            random_string(),
            " - ",
            "a--b",
            "--",
            "-",
            "---",
            "<p>not a tag</p>",
            "]]>",
        ],
    )
    return random.choice([f"<!--{body}-->", f"<!--{body}--->", f"<!-{body}-->", f"<!--{body}"])


def fuzz_doctype():
    return random.choice(
        [
            "<!DOCTYPE html>",
            "<!doctype html>",
            "<!DOCTYPE>",
            '<!DOCTYPE html PUBLIC "-//W3C//DTD HTML 4.01//EN">',
            "<!DOCTYPE  html  >",
            "<!DOCTYPEhtml>",
            "<!ELEMENT foo>",
        ],
    )


def fuzz_cdata():
    body = random.choice([random_string(), "]]", "[[X]]", "<QQQ/>", "a]]b", "]", ""])
    return random.choice([f"<![CDATA[{body}]]>", f"<![CDATA[{body}]]]>", f"<![CDAT[{body}]]>", f"<![CDATA[{body}"])


def fuzz_raw_text():
    tag_name = random.choice(RAW_TEXT_TAGS)
    written = random.choice([tag_name, tag_name.upper()])
    content = random.choice(
        [
            "if (a < b) { x = '</p>'; }",
            f"</{tag_name} >still inside",
            f"</{tag_name.upper()}>",
            "<!-- not a comment -->",
            random_string(),
        ],
    )
    end = random.choice([f"</{written}>", f"</{written}>", f"</{tag_name}>", ""])
    return f"<{written}>{content}{end}"


def fuzz_meta():
    charset = random.choice(CHARSETS)
    return random.choice(
        [
            f'<meta charset="{charset}">',
            f"<META CHARSET={charset.strip() or 'x'}/>",
            f'<meta http-equiv="Content-Type" content="text/html; charset={charset}">',
            f'<meta http-equiv="refresh" content="0; charset={charset}">',
        ],
    )


def fuzz_text():
    strategies = [
        lambda: random_string(1, 20),
        lambda: random.choice(["&amp;", "&lt;", "&nbsp;", "&#123;", "&"]),
        lambda: "".join(random.choice(SPECIAL_CHARS) for _ in range(random.randint(1, 3))),
        lambda: random.choice(["café", "naïve", "☕", "\u00a0", " "]),
        random_whitespace,
    ]
    return random.choice(strategies)()


def fuzz_implicit_structure():
    """Markup that leans on the implicit close rules."""
    return random.choice(
        [
            "<ul><li>a<li>b</ul>",
            "<dl><dt>t<dd>d<dt>t2</dl>",
            "<p>one<p>two<div>three</div>",
            "<select><option>a<optgroup><option>b</select>",
            "<table><thead><tr><th>h<tbody><tr><td>1<td>2<tr><td>3</table>",
            "<table><tr><td><table><tr><td>in</table><td>out</table>",
            "<div><ul><li><p>deep</ul></div>",
            "<div><span>x</div>",
        ],
    )


def fuzz_content(depth=0, max_depth=6):
    parts = []
    for _ in range(random.randint(0, 6)):
        roll = random.random()
        if roll < 0.3:
            parts.append(fuzz_text())
        elif roll < 0.5 and depth < max_depth:
            tag_name = fuzz_tag_name()
            inner = fuzz_content(depth + 1, max_depth)
            end = fuzz_close_tag(tag_name) if random.random() < 0.8 else ""
            parts.append(fuzz_open_tag(tag_name) + inner + end)
        elif roll < 0.6:
            parts.append(fuzz_open_tag(random.choice(VOID_TAGS)))
        elif roll < 0.7:
            parts.append(fuzz_implicit_structure())
        elif roll < 0.78:
            parts.append(fuzz_comment())
        elif roll < 0.84:
            parts.append(fuzz_cdata())
        elif roll < 0.9:
            parts.append(fuzz_raw_text())
        elif roll < 0.95:
            parts.append(fuzz_meta())
        else:
            parts.append(random.choice([fuzz_close_tag(), fuzz_open_tag()]))
    return "".join(parts)


def generate_fuzzed_html():
    prolog = ""
    if random.random() < 0.6:
        prolog += fuzz_doctype() + random_whitespace()
    if random.random() < 0.2:
        prolog += fuzz_comment() + random_whitespace()
    if random.random() < 0.05:
        prolog += random.choice(["x", "\ufeff", "<![CDATA[x]]>", "</html>"])

    head = fuzz_meta() + f"<title>{random_string()}</title>"
    body = fuzz_content()
    document = f"<html><head>{head}</head><body>{body}</body></html>"
    if random.random() < 0.1:
        document = document[: random.randint(0, len(document))]
    epilog = ""
    if random.random() < 0.1:
        epilog = random.choice([fuzz_comment(), "<html></html>", "trailing", random_whitespace()])
    return prolog + document + epilog


def random_chunks(data):
    """Split bytes at random offsets, including inside multi-byte sequences."""
    chunks = []
    pos = 0
    while pos < len(data):
        size = random.randint(1, 64)
        chunks.append(data[pos : pos + size])
        pos += size
    return chunks


def check_tree(root):
    """Shape guarantees every accepted document must satisfy."""
    elements = [child for child in root.children if child.is_element]
    if len(elements) > 1:
        msg = f"{len(elements)} root elements"
        raise AssertionError(msg)
    if any(child.is_text or child.is_cdata for child in root.children):
        msg = "character data outside the root element"
        raise AssertionError(msg)
    for node in root.iter_descendants():
        if node.local_name in VOID_TAGS and node.children:
            msg = f"void element <{node.tag_name}> has children"
            raise AssertionError(msg)
        if node.local_name in RAW_TEXT_TAGS and (len(node.children) > 1 or any(not c.is_text for c in node.children)):
            msg = f"raw text element <{node.tag_name}> has markup children"
            raise AssertionError(msg)
        if node.is_text and not node.data:
            msg = "empty text node"
            raise AssertionError(msg)


def scan_text(html):
    doc = PipeHTML(html)
    check_tree(doc.root)
    # Serializing must not fail on anything the scanner produced
    to_html(doc.root)


def scan_bytes(html):
    parser = ByteStreamParser()
    for chunk in random_chunks(html.encode("utf-8")):
        parser.feed(chunk)
    parser.close()
    check_tree(parser.result)
    reference = parse_bytes(html.encode("utf-8")).result
    if to_test_format(parser.result) != to_test_format(reference):
        msg = "chunked feeding built a different tree"
        raise AssertionError(msg)


MODES = {"text": scan_text, "bytes": scan_bytes}


def run_fuzzer(mode, num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer; returns True when nothing crashed or hung."""
    if seed is not None:
        random.seed(seed)
    scan = MODES[mode]

    crashes = []
    hangs = []
    accepted = 0
    rejected = 0

    print(f"Fuzzing pipehtml ({mode}) with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()
        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        start = time.perf_counter()
        try:
            scan(html)
            accepted += 1
        except ParseError:
            rejected += 1
        except Exception as e:
            crashes.append({"test_num": i, "html": html, "error": repr(e), "traceback": traceback.format_exc()})
            if verbose:
                print(f"  CRASH: Test {i}: {e!r}")
        elapsed = time.perf_counter() - start
        if elapsed > 5.0:
            hangs.append({"test_num": i, "html": html, "time": elapsed})
            if verbose:
                print(f"  HANG: Test {i} took {elapsed:.2f}s")

    elapsed_total = time.time() - start_time

    print(f"\n{'=' * 60}")
    print(f"FUZZING RESULTS: pipehtml ({mode})")
    print(f"{'=' * 60}")
    print(f"Total tests:    {num_tests}")
    print(f"Accepted:       {accepted}")
    print(f"Rejected:       {rejected}")
    print(f"Crashes:        {len(crashes)}")
    print(f"Hangs (>5s):    {len(hangs)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests / elapsed_total:.1f}")

    if crashes:
        print(f"\n{'=' * 60}")
        print("CRASH DETAILS:")
        print(f"{'=' * 60}")
        for crash in crashes[:10]:
            print(f"\nTest #{crash['test_num']}:")
            print(f"  HTML: {crash['html'][:200]!r}...")
            print(f"  Error: {crash['error']}")
        if len(crashes) > 10:
            print(f"\n... and {len(crashes) - 10} more crashes")

    if hangs:
        print(f"\n{'=' * 60}")
        print("HANG DETAILS:")
        print(f"{'=' * 60}")
        for hang in hangs[:5]:
            print(f"\nTest #{hang['test_num']} ({hang['time']:.2f}s):")
            print(f"  HTML: {hang['html'][:200]!r}...")

    if save_failures and (crashes or hangs):
        filename = f"fuzz_failures_{mode}_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Fuzzing results for pipehtml ({mode})\n")
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Error: {crash['error']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not crashes and not hangs


def main():
    parser = argparse.ArgumentParser(description="Fuzz the pipehtml scanner with tag soup")
    parser.add_argument(
        "--mode", "-m",
        choices=sorted(MODES),
        default="text",
        help="Feed decoded text or randomly chunked bytes (default: text)",
    )
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--save-failures", action="store_true", help="Save failures to a file")
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed HTML documents (no parsing)",
    )
    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i + 1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(
        args.mode,
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
