import textwrap
from typing import List

import pytest

from markuplinks.dispatcher import Diagnostic, Dialect, iter_links, parse_hyperlink
from markuplinks.errors import ErrorKind, ParseError


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        ('<a href="d" title="t">n</a>x', (Dialect.HTML, "x", ("n", "d", "t"))),
        ("`n <d>`_x", (Dialect.RST, "x", ("n", "d", ""))),
        (".. _n: d\nx", (Dialect.RST_REFERENCE, "\nx", ("n", "d", ""))),
    ],
)
def test_parse_hyperlink(data: str, expected):
    assert parse_hyperlink(data) == expected


def test_parse_hyperlink_reports_last_failure():
    with pytest.raises(ParseError) as exc_info:
        parse_hyperlink("plain text")
    # the link reference parser is tried last
    assert exc_info.value.kind == ErrorKind.MISSING_OPENING_MARKER

    with pytest.raises(ParseError) as exc_info:
        parse_hyperlink('<a href="d1" href="d2">n</a>', dialects=[Dialect.HTML])
    assert exc_info.value.kind == ErrorKind.DUPLICATE_FIELD


def test_parse_hyperlink_restricted_dialects():
    with pytest.raises(ParseError):
        parse_hyperlink("`n <d>`_", dialects=[Dialect.HTML, Dialect.RST_REFERENCE])
    with pytest.raises(ValueError):
        parse_hyperlink("`n <d>`_", dialects=[])


def test_iter_links():
    text = textwrap.dedent("""\
    Intro <a href="https://a.test/">A</a> and `B <https://b.test/>`_.

    .. _C: https://c.test/
    .. _`D: d`: https://d.
       test/
    not a reference: .. _E: https://e.test/
    """)
    links = list(iter_links(text))
    assert [(link.dialect, link.name, link.destination) for link in links] == [
        (Dialect.HTML, "A", "https://a.test/"),
        (Dialect.RST, "B", "https://b.test/"),
        (Dialect.RST_REFERENCE, "C", "https://c.test/"),
        (Dialect.RST_REFERENCE, "D: d", "https://d.test/"),
    ]
    assert [(link.line, link.column) for link in links] == [(1, 7), (1, 43), (3, 1), (4, 1)]
    assert links[0].offset == 6


def test_iter_links_dialect_filter():
    text = '<a href="h">h</a> `r <r>`_'
    links = list(iter_links(text, dialects=[Dialect.RST]))
    assert [link.destination for link in links] == ["r"]


def test_iter_links_diagnostics():
    diagnostics: List[Diagnostic] = []
    text = 'ok <a href="d1" href="d2">n</a>\n`broken <x> y`_'
    links = list(iter_links(text, on_error=diagnostics.append))
    assert links == []
    # the closing backtick of the broken link is not reported on its own
    assert [(d.dialect, d.kind, d.offset, d.line, d.column) for d in diagnostics] == [
        (Dialect.HTML, ErrorKind.DUPLICATE_FIELD, 3, 1, 4),
        (Dialect.RST, ErrorKind.TRAILING_CONTENT_AFTER_DESTINATION, 32, 2, 1),
    ]
    # the error itself is still located
    assert diagnostics[0].error_offset == 16


def test_iter_links_ignores_non_link_markup():
    diagnostics: List[Diagnostic] = []
    text = textwrap.dedent("""\
    Plain ``literal`` text.

    .. note:: hello

    A `x <y>`_ link.
    """)
    links = list(iter_links(text, on_error=diagnostics.append))
    assert [(link.name, link.destination) for link in links] == [("x", "y")]
    assert diagnostics == []


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        # a failed link does not hide a real one after its closing backtick
        ("`a`_ `b <c>`_", ["c"]),
        ("`a` `b <c>`_", ["c"]),
    ],
)
def test_iter_links_after_failed_inline(data: str, expected: List[str]):
    assert [link.destination for link in iter_links(data)] == expected


def test_iter_links_diagnostic_position_is_construct_start():
    diagnostics: List[Diagnostic] = []
    text = "line one\n  see `name\n  <dest> tail`_ here"
    assert list(iter_links(text, on_error=diagnostics.append)) == []
    assert len(diagnostics) == 1
    d = diagnostics[0]
    assert (d.kind, d.offset, d.line, d.column) == (
        ErrorKind.TRAILING_CONTENT_AFTER_DESTINATION,
        15,
        2,
        7,
    )
    assert d.error_offset > d.offset
