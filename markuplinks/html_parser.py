"""Parsers for HTML hyperlinks (``<a href="..." title="...">name</a>``).

Entity decoding is not performed: the link name is returned verbatim.
"""
from typing import List, Optional, Tuple

import attr

from markuplinks.errors import ErrorKind, ParseError
from markuplinks.text import EMPTY, Borrowed, Hyperlink, TextLike, as_view

OPENING_TAG = "<a "
CLOSING_TAG = "</a>"
MANDATORY_ATTR = "href"
OPTIONAL_ATTR = "title"

IDENTIFIER_CHARS = "-_:."


@attr.s(slots=True, frozen=True)
class Attribute(object):
    key: Borrowed = attr.ib(default=EMPTY)
    value: Borrowed = attr.ib(default=EMPTY)

    @property
    def is_boolean(self) -> bool:
        return not self.key


BOOLEAN_ATTRIBUTE = Attribute()


def html_link(i: TextLike) -> Tuple[Borrowed, Hyperlink]:
    """Parse an HTML hyperlink starting exactly at ``<a ``.

    >>> html_link('<a href="destination" title="title">name</a>abc')[1]
    (Borrowed('name', offset=36), Borrowed('destination', offset=9), Borrowed('title', offset=29))
    """
    view = as_view(i)
    rest, (link_destination, link_title) = tag_a_opening(view)
    close = rest.find(CLOSING_TAG)
    if close < 0:
        raise ParseError(ErrorKind.UNTERMINATED_CONSTRUCT, rest, "missing %r" % CLOSING_TAG)
    link_name = rest.slice(0, close)
    return rest.advance(close + len(CLOSING_TAG)), (link_name, link_destination, link_title)


def _find_tag_end(view: Borrowed, idx: int) -> int:
    quoted = False
    while idx < len(view):
        c = view.char_at(idx)
        if c == '"':
            quoted = not quoted
        elif c == ">" and not quoted:
            return idx
        idx += 1
    return -1


def tag_a_opening(view: Borrowed) -> Tuple[Borrowed, Tuple[Borrowed, Borrowed]]:
    """Parse ``<a ...>`` and return ``(rest, (link_destination, link_title))``."""
    if not view.startswith(OPENING_TAG):
        raise ParseError(ErrorKind.MISSING_OPENING_MARKER, view, "expected %r" % OPENING_TAG)
    end = _find_tag_end(view, len(OPENING_TAG))
    if end < 0:
        raise ParseError(ErrorKind.UNTERMINATED_CONSTRUCT, view, "opening tag is not closed")
    attrs = parse_attributes(view.slice(len(OPENING_TAG), end))
    return view.advance(end + 1), attrs


def _identifier_end(view: Borrowed) -> int:
    if not view.char_at(0).isalpha():
        raise ParseError(
            ErrorKind.INVALID_FIELD_NAME, view, "attribute name must start with a letter"
        )
    idx = 1
    while idx < len(view):
        c = view.char_at(idx)
        if not (c.isalnum() or c in IDENTIFIER_CHARS):
            break
        idx += 1
    return idx


def attribute(view: Borrowed) -> Tuple[Borrowed, Attribute]:
    """Parse one ``name="value"`` pair or a boolean attribute.

    Boolean attributes are consumed and returned as an empty `Attribute`.
    """
    end = _identifier_end(view)
    if view.startswith('="', end):
        close = view.find('"', end + 2)
        if close < 0:
            raise ParseError(
                ErrorKind.MALFORMED_ATTRIBUTE, view.advance(end), "unterminated attribute value"
            )
        return view.advance(close + 1), Attribute(view.slice(0, end), view.slice(end + 2, close))
    if view.char_at(end) == "=":
        raise ParseError(
            ErrorKind.MALFORMED_ATTRIBUTE, view.advance(end), "attribute value must be quoted"
        )
    return view.advance(end), BOOLEAN_ATTRIBUTE


def attribute_list(view: Borrowed) -> List[Attribute]:
    """Parse a whitespace separated list of attributes, left to right."""
    view = view.strip()
    attrs: List[Attribute] = []
    while view:
        view, attr_ = attribute(view)
        attrs.append(attr_)
        if not view:
            break
        separator = len(view) - len(view.lstrip())
        if separator == 0:
            raise ParseError(
                ErrorKind.MALFORMED_ATTRIBUTE, view, "expected whitespace between attributes"
            )
        view = view.advance(separator)
    return attrs


def parse_attributes(view: Borrowed) -> Tuple[Borrowed, Borrowed]:
    """Extract ``(link_destination, link_title)`` from the interior of a tag.

    `href` is mandatory and must not be empty, `title` is optional. Each of them
    may occur only once.
    """
    href: Optional[Attribute] = None
    title: Optional[Attribute] = None

    for attr_ in attribute_list(view):
        if attr_.key == MANDATORY_ATTR:
            if href is not None:
                raise ParseError(
                    ErrorKind.DUPLICATE_FIELD, attr_.key, "duplicate %r attribute" % MANDATORY_ATTR
                )
            href = attr_
        elif attr_.key == OPTIONAL_ATTR:
            if title is not None:
                raise ParseError(
                    ErrorKind.DUPLICATE_FIELD, attr_.key, "duplicate %r attribute" % OPTIONAL_ATTR
                )
            title = attr_

    if href is None or not href.value:
        raise ParseError(
            ErrorKind.MISSING_MANDATORY_FIELD,
            href.value if href is not None else view,
            "missing or empty %r attribute" % MANDATORY_ATTR,
        )
    link_title = title.value if title is not None else EMPTY
    return href.value, link_title
