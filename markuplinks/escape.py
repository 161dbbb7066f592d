"""Backslash escapes shared by the reStructuredText parsers.

A backslash may precede a backslash, a backtick, ``:``, ``<``, ``>`` or a space.
Any other character after a backslash is an error.
"""
from typing import Dict

from markuplinks.errors import ErrorKind, ParseError
from markuplinks.text import Borrowed, Owned, Text

ESCAPABLE = "\\`:<> "
WHITESPACE = " \t\r\n"

# an escaped space disappears from a name but survives in a destination
LINK_NAME_ESCAPES: Dict[str, str] = {
    "\\": "\\",
    "`": "`",
    ":": ":",
    "<": "<",
    ">": ">",
    " ": "",
}
LINK_DESTINATION_ESCAPES: Dict[str, str] = dict(LINK_NAME_ESCAPES, **{" ": " "})


def _check_escape(view: Borrowed, idx: int, escapable: str = ESCAPABLE) -> str:
    escaped = view.char_at(idx + 1)
    if not escaped or escaped not in escapable:
        raise ParseError(
            ErrorKind.INVALID_ESCAPE_SEQUENCE,
            view.slice(idx),
            "invalid escape sequence %r" % view.slice(idx, min(idx + 2, len(view))).value,
        )
    return escaped


def scan_escaped(view: Borrowed, stop: str, escapable: str = ESCAPABLE) -> int:
    """Scan an escaped run and return the relative index of the first unescaped
    character contained in `stop`, or ``len(view)`` when there is none.

    Nothing is unescaped here; the run stays a view.
    """
    length = len(view)
    idx = 0
    while idx < length:
        c = view.char_at(idx)
        if c == "\\":
            _check_escape(view, idx, escapable)
            idx += 2
            continue
        if c in stop:
            return idx
        idx += 1
    return length


def _unescape(view: Borrowed, escapes: Dict[str, str], drop_whitespace: bool) -> Text:
    pieces = []
    changed = False
    length = len(view)
    run_start = 0
    idx = 0
    while idx < length:
        c = view.char_at(idx)
        if c == "\\":
            escaped = _check_escape(view, idx)
            pieces.append(view.slice(run_start, idx).value)
            pieces.append(escapes[escaped])
            changed = True
            idx += 2
            run_start = idx
        elif drop_whitespace and c in WHITESPACE:
            pieces.append(view.slice(run_start, idx).value)
            changed = True
            idx += 1
            run_start = idx
        else:
            idx += 1

    if not changed:
        return view
    pieces.append(view.slice(run_start).value)
    return Owned("".join(pieces))


def link_name_transform(view: Borrowed) -> Text:
    """Unescape a link name. Literal whitespace is kept, ``\\ `` is removed.

    >>> link_name_transform(Borrowed.of(r"a\\ b"))
    Owned('ab')
    """
    return _unescape(view, LINK_NAME_ESCAPES, drop_whitespace=False)


def link_destination_transform(view: Borrowed) -> Text:
    """Unescape a link destination. All literal whitespace (line breaks included)
    is deleted, while every ``\\ `` becomes exactly one space.

    This lets a destination wrap over several source lines.
    """
    return _unescape(view, LINK_DESTINATION_ESCAPES, drop_whitespace=True)
