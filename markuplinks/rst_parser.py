"""Parsers for reStructuredText hyperlinks.

Two constructs are recognized::

    abc `Python home page <http://www.python.org>`_ abc

    .. _Python home page: http://www.python.org
    .. _`Python: home page`: http://www.python.org

Both parsers always return an empty link title.
"""
import logging
from typing import Callable, List, Sequence, Tuple

from markuplinks.errors import ErrorKind, ParseError
from markuplinks.escape import link_destination_transform, link_name_transform, scan_escaped
from markuplinks.text import EMPTY, Borrowed, Hyperlink, Owned, Text, TextLike, as_view

logger = logging.getLogger(__name__)

INLINE_LINK_START = "`"
INLINE_LINK_END = "`_"
ANONYMOUS_SUFFIX = "_"
MARKUP_START = ".. "
REFERENCE_START = "_"

LabelParser = Callable[[Borrowed], Tuple[Borrowed, Borrowed]]


def rst_link(i: TextLike) -> Tuple[Borrowed, Hyperlink]:
    """Parse an inline hyperlink with an embedded destination.

    The parser must start at the opening backtick. ```name <dest>`__`` (the
    anonymous form) yields the same result as ```name <dest>`_``.

    >>> rst_link("`name <destination>`_abc")[1]
    (Borrowed('name', offset=1), Borrowed('destination', offset=7), Borrowed('', offset=0))
    """
    view = as_view(i)
    rest, (raw_name, raw_destination) = rst_parse_link(view)
    link_name, link_destination = _decode(raw_name, raw_destination)
    return rest, (link_name, link_destination, EMPTY)


def rst_parse_link(view: Borrowed) -> Tuple[Borrowed, Tuple[Borrowed, Borrowed]]:
    """Locate name and destination of an inline link without unescaping them."""
    if not view.startswith(INLINE_LINK_START):
        raise ParseError(
            ErrorKind.MISSING_OPENING_MARKER, view, "expected %r" % INLINE_LINK_START
        )
    inner = view.advance(len(INLINE_LINK_START))
    close = scan_escaped(inner, "`")
    if close == len(inner):
        raise ParseError(ErrorKind.UNTERMINATED_CONSTRUCT, view, "missing closing backtick")
    if not inner.startswith(INLINE_LINK_END, close):
        raise ParseError(
            ErrorKind.UNTERMINATED_CONSTRUCT, inner.advance(close), "expected %r" % INLINE_LINK_END
        )
    rest = inner.advance(close + len(INLINE_LINK_END))
    if rest.startswith(ANONYMOUS_SUFFIX):
        rest = rest.advance(len(ANONYMOUS_SUFFIX))

    span = inner.slice(0, close)
    bracket = scan_escaped(span, "<")
    if bracket == len(span):
        raise ParseError(
            ErrorKind.MISSING_MANDATORY_FIELD, span, "missing embedded destination '<...>'"
        )
    link_name = _rstrip_unescaped(span.slice(0, bracket))

    bracketed = span.advance(bracket + 1)
    close = scan_escaped(bracketed, "<>")
    if close == len(bracketed) or bracketed.char_at(close) != ">":
        raise ParseError(
            ErrorKind.UNTERMINATED_CONSTRUCT, bracketed.advance(close), "missing closing '>'"
        )
    link_destination = bracketed.slice(0, close)

    trailing = bracketed.advance(close + 1)
    if trailing:
        raise ParseError(
            ErrorKind.TRAILING_CONTENT_AFTER_DESTINATION,
            trailing,
            "embedded destination must be the last text in the link",
        )
    return rest, (link_name, link_destination)


def _rstrip_unescaped(view: Borrowed) -> Borrowed:
    """Trim trailing whitespace, but keep a space escaped as ``\\ ``."""
    end = len(view)
    while end > 0 and view.char_at(end - 1).isspace():
        backslashes = 0
        while view.char_at(end - 2 - backslashes) == "\\":
            backslashes += 1
        if backslashes % 2:
            break
        end -= 1
    return view.slice(0, end)


def rst_link_ref(i: TextLike) -> Tuple[Borrowed, Hyperlink]:
    """Parse a hyperlink target (link reference definition).

    The parser must start at the beginning of a line. The definition may span
    several lines, as long as the continuation lines are indented.

    >>> rst_link_ref("   .. _`name`: destination\\nabc")[0]
    Borrowed('\\nabc', offset=26)
    """
    view = as_view(i)
    rest, fragments = _block_fragments(view)

    if len(fragments) == 1:
        block = fragments[0]
        try:
            raw_name, raw_destination = rst_parse_link_ref(block)
        except ParseError as e:
            if e.kind == ErrorKind.UNTERMINATED_CONSTRUCT and _has_underindented_body(block, rest):
                raise ParseError(
                    ErrorKind.INSUFFICIENT_INDENTATION,
                    rest.lstrip(),
                    "link block must be indented relative to '%s'" % MARKUP_START.strip(),
                ) from e
            raise
        link_name, link_destination = _decode(raw_name, raw_destination)
        return rest, (link_name, link_destination, EMPTY)

    # the block was joined into a new string, views into it must not escape
    joined = Borrowed.of(" ".join(f.value for f in fragments))
    try:
        raw_name, raw_destination = rst_parse_link_ref(joined)
        link_name, link_destination = _decode(raw_name, raw_destination)
    except ParseError as e:
        position = Borrowed(view.source, _source_offset(fragments, e.offset), rest.offset)
        raise ParseError(e.kind, position, e.message) from e
    return rest, (link_name.to_owned(), link_destination.to_owned(), EMPTY)


def _has_underindented_body(block: Borrowed, rest: Borrowed) -> bool:
    eol = _line_ending_len(rest)
    if not eol or not block.rstrip().value.endswith(":"):
        return False
    next_line = rest.advance(eol)
    return bool(next_line.slice(0, _line_end(next_line)).strip())


def _alt(view: Borrowed, parsers: Sequence[LabelParser]) -> Tuple[Borrowed, Borrowed]:
    error = None
    for parser in parsers:
        try:
            return parser(view)
        except ParseError as e:
            error = e
    assert error is not None
    raise error


def _quoted_label(view: Borrowed) -> Tuple[Borrowed, Borrowed]:
    if not view.startswith("`"):
        raise ParseError(ErrorKind.MISSING_OPENING_MARKER, view, "expected '`'")
    inner = view.advance(1)
    close = scan_escaped(inner, "`")
    if close == len(inner):
        raise ParseError(ErrorKind.UNTERMINATED_CONSTRUCT, view, "missing closing backtick")
    if not inner.startswith("`: ", close):
        raise ParseError(ErrorKind.UNTERMINATED_CONSTRUCT, inner.advance(close), "expected '`: '")
    return inner.slice(0, close), inner.advance(close + 3)


def _unquoted_label(view: Borrowed) -> Tuple[Borrowed, Borrowed]:
    colon = scan_escaped(view, ":")
    if colon >= len(view) - 1:
        raise ParseError(ErrorKind.UNTERMINATED_CONSTRUCT, view, "expected ': '")
    if not view.startswith(": ", colon):
        raise ParseError(
            ErrorKind.MALFORMED_REFERENCE_LABEL,
            view.advance(colon),
            "colons in a reference name must be escaped or quoted with backticks",
        )
    return view.slice(0, colon), view.advance(colon + 2)


def rst_parse_link_ref(view: Borrowed) -> Tuple[Borrowed, Borrowed]:
    """Split a joined link block ``_name: destination`` into raw name and
    destination. No transformation is done here.
    """
    if not view.startswith(REFERENCE_START):
        raise ParseError(ErrorKind.MISSING_OPENING_MARKER, view, "expected %r" % REFERENCE_START)
    return _alt(view.advance(len(REFERENCE_START)), (_quoted_label, _unquoted_label))


def _line_end(view: Borrowed) -> int:
    idx = view.find("\n")
    if idx < 0:
        return len(view)
    if idx > 0 and view.char_at(idx - 1) == "\r":
        return idx - 1
    return idx


def _line_ending_len(view: Borrowed) -> int:
    if view.startswith("\n"):
        return 1
    if view.startswith("\r\n"):
        return 2
    return 0


def _leading_space(view: Borrowed) -> int:
    idx = 0
    while view.char_at(idx) in (" ", "\t"):
        idx += 1
    return idx


def _block_fragments(view: Borrowed) -> Tuple[Borrowed, List[Borrowed]]:
    indent = _leading_space(view)
    if not view.startswith(MARKUP_START, indent):
        raise ParseError(
            ErrorKind.MISSING_OPENING_MARKER, view.advance(indent), "expected %r" % MARKUP_START
        )
    continuation = view.slice(0, indent).value + " " * len(MARKUP_START)

    rest = view.advance(indent + len(MARKUP_START))
    end = _line_end(rest)
    fragments: List[Borrowed] = [rest.slice(0, end)]
    rest = rest.advance(end)
    while True:
        eol = _line_ending_len(rest)
        if not eol or not rest.startswith(continuation, eol):
            break
        rest = rest.advance(eol + len(continuation))
        end = _line_end(rest)
        fragments.append(rest.slice(0, end))
        rest = rest.advance(end)
    return rest, fragments


def _source_offset(fragments: Sequence[Borrowed], joined_offset: int) -> int:
    """Map an offset in the joined block back to the source text."""
    start = 0
    for fragment in fragments:
        if joined_offset <= start + len(fragment):
            return fragment.offset + joined_offset - start
        start += len(fragment) + 1
    return fragments[-1].end


def rst_explicit_markup_block(i: TextLike) -> Tuple[Borrowed, Text]:
    """Parse an explicit markup block and join it into one logical line.

    ::

        +-------+----------------------+
        | ".. " | in  1                |
        +-------+ in  2                |
                |    in  3             |
                +----------------------+
        out

    Continuation lines must repeat the indentation of the first line plus
    three spaces (the width of ``.. ``). Deeper indentation is kept. A single
    line is returned as a view, several lines are joined with one space.
    """
    view = as_view(i)
    rest, fragments = _block_fragments(view)
    if len(fragments) == 1:
        return rest, fragments[0]
    logger.debug("joined %d lines of explicit markup block at %d", len(fragments), view.offset)
    return rest, Owned(" ".join(f.value for f in fragments))


def _decode(raw_name: Borrowed, raw_destination: Borrowed) -> Tuple[Text, Text]:
    link_name = link_name_transform(raw_name)
    link_destination = link_destination_transform(raw_destination)
    if not link_destination:
        raise ParseError(
            ErrorKind.MISSING_MANDATORY_FIELD, raw_destination, "empty link destination"
        )
    return link_name, link_destination
