import enum
import logging
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple

import attr

from markuplinks.errors import ErrorKind, ParseError, line_column
from markuplinks.escape import scan_escaped
from markuplinks.html_parser import OPENING_TAG, html_link
from markuplinks.rst_parser import INLINE_LINK_START, MARKUP_START, rst_link, rst_link_ref
from markuplinks.text import Borrowed, Hyperlink, Text, TextLike, as_view

logger = logging.getLogger(__name__)


class Dialect(str, enum.Enum):
    HTML = "html"
    RST = "rst"
    RST_REFERENCE = "rst-reference"


LinkParser = Callable[[TextLike], Tuple[Borrowed, Hyperlink]]

PARSERS: Dict[Dialect, LinkParser] = {
    Dialect.HTML: html_link,
    Dialect.RST: rst_link,
    Dialect.RST_REFERENCE: rst_link_ref,
}

ALL_DIALECTS: Tuple[Dialect, ...] = tuple(Dialect)


@attr.s(frozen=True)
class FoundLink:
    dialect: Dialect = attr.ib()
    offset: int = attr.ib()
    line: int = attr.ib()
    column: int = attr.ib()
    name: Text = attr.ib()
    destination: Text = attr.ib()
    title: Text = attr.ib()


@attr.s(frozen=True)
class Diagnostic:
    """A construct that opened like a link but failed to parse.

    `offset`, `line` and `column` locate the start of the construct,
    `error_offset` the place where parsing failed.
    """

    dialect: Dialect = attr.ib()
    kind: ErrorKind = attr.ib()
    offset: int = attr.ib()
    line: int = attr.ib()
    column: int = attr.ib()
    message: str = attr.ib()
    error_offset: int = attr.ib()

    @classmethod
    def from_error(cls, dialect: Dialect, text: str, start: int, error: ParseError) -> "Diagnostic":
        line, column = line_column(text, start)
        return cls(dialect, error.kind, start, line, column, error.message, error.offset)


def parse_hyperlink(
    i: TextLike, dialects: Sequence[Dialect] = ALL_DIALECTS
) -> Tuple[Dialect, Borrowed, Hyperlink]:
    """Try each dialect parser in turn at the start of `i`.

    Returns the first success together with the dialect that matched; when no
    dialect matches, the error of the last one tried is raised.
    """
    view = as_view(i)
    error: Optional[ParseError] = None
    for dialect in dialects:
        try:
            rest, link = PARSERS[dialect](view)
        except ParseError as e:
            error = e
            continue
        return dialect, rest, link
    if error is None:
        raise ValueError("no dialect given")
    raise error


def _is_literal_backtick(text: str, pos: int) -> bool:
    # part of ``inline literal`` markup
    return text.startswith("``", pos) or (pos > 0 and text[pos - 1] == "`")


def _candidates(text: str, pos: int, at_line_start: bool, dialects: Sequence[Dialect]):
    c = text[pos]
    for dialect in dialects:
        if dialect == Dialect.HTML and text.startswith(OPENING_TAG, pos):
            yield dialect
        elif (
            dialect == Dialect.RST
            and c == INLINE_LINK_START
            and not _is_literal_backtick(text, pos)
        ):
            yield dialect
        elif dialect == Dialect.RST_REFERENCE and at_line_start:
            marker = pos
            while marker < len(text) and text[marker] in " \t":
                marker += 1
            if text.startswith(MARKUP_START, marker):
                yield dialect


def _closing_backtick(text: str, pos: int) -> int:
    inner = Borrowed(text, pos + 1, len(text))
    try:
        close = scan_escaped(inner, INLINE_LINK_START)
    except ParseError:
        return -1
    if close == len(inner):
        return -1
    return inner.offset + close


def iter_links(
    text: str,
    dialects: Sequence[Dialect] = ALL_DIALECTS,
    on_error: Optional[Callable[[Diagnostic], None]] = None,
) -> Iterator[FoundLink]:
    """Scan a whole document and yield every hyperlink found, in order.

    Link reference definitions are only tried at the beginning of a line, the
    inline constructs wherever their opening character appears.

    Failures are passed to `on_error` unless the construct merely lacked its
    opening marker (e.g. a ``.. note::`` directive), or the backtick closes an
    inline construct that was already reported.
    """
    pos = 0
    length = len(text)
    reported_backtick = -1
    while pos < length:
        at_line_start = pos == 0 or text[pos - 1] == "\n"
        for dialect in _candidates(text, pos, at_line_start, dialects):
            try:
                rest, (name, destination, title) = PARSERS[dialect](Borrowed(text, pos, length))
            except ParseError as e:
                logger.debug("no %s link at offset %d: %s", dialect.value, pos, e)
                if dialect == Dialect.RST:
                    if pos == reported_backtick:
                        continue
                    reported_backtick = _closing_backtick(text, pos)
                if on_error is not None and e.kind != ErrorKind.MISSING_OPENING_MARKER:
                    on_error(Diagnostic.from_error(dialect, text, pos, e))
                continue
            line, column = line_column(text, pos)
            yield FoundLink(dialect, pos, line, column, name, destination, title)
            pos = rest.offset
            break
        else:
            pos += 1
