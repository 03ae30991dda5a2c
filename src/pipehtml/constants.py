"""Element Constants

Lookup tables used by the scanner to decide when an element is closed without
an explicit end tag. They approximate the HTML5 optional-tag rules closely
enough for tag-soup scraping; foster parenting and formatting-element
reconstruction are deliberately not modelled.

Usage:
    from pipehtml.constants import VOID_ELEMENTS, IMPLICITLY_UNCLOSED

References:
    - https://html.spec.whatwg.org/multipage/syntax.html#void-elements
    - https://html.spec.whatwg.org/multipage/syntax.html#optional-tags
"""

HTML_WHITESPACE = " \t\n\f\r"

# Elements with no content and no end tag
VOID_ELEMENTS = frozenset(
    [
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    ],
)

# Content is taken verbatim up to the matching end tag
RAW_TEXT_ELEMENTS = frozenset(["script", "style"])

# Start tags that close an open <p>
CLOSES_P = frozenset(
    [
        "address",
        "article",
        "aside",
        "blockquote",
        "details",
        "div",
        "dl",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "main",
        "menu",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "ul",
    ],
)

_CELLS = ("td", "th")
_DEFINITIONS = ("dt", "dd")
_TABLE_SECTIONS = ("tbody", "thead", "tfoot")

# New start tag -> ordered groups. Each group is checked against the current
# top of stack in turn and pops it on a match.
IMPLICIT_CLOSE_RULES = {
    "body": (("head",),),
    "li": (("li",),),
    "dt": (_DEFINITIONS,),
    "dd": (_DEFINITIONS,),
    "option": (("option",),),
    "optgroup": (("option",), ("optgroup",)),
    "td": (_CELLS,),
    "th": (_CELLS,),
    "tr": (_CELLS, ("tr",)),
    "tbody": (_CELLS, ("tr",), _TABLE_SECTIONS),
    "thead": (_CELLS, ("tr",), _TABLE_SECTIONS),
    "tfoot": (_CELLS, ("tr",), _TABLE_SECTIONS),
}

# Elements that may be popped without their own end tag when an ancestor's
# end tag arrives
IMPLICITLY_UNCLOSED = frozenset(
    [
        "td",
        "th",
        "tr",
        "thead",
        "tbody",
        "tfoot",
        "li",
        "dt",
        "dd",
        "p",
        "option",
        "optgroup",
    ],
)
