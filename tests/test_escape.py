import pytest

from markuplinks.errors import ErrorKind, ParseError
from markuplinks.escape import link_destination_transform, link_name_transform, scan_escaped
from markuplinks.text import Borrowed


@pytest.mark.parametrize(
    ("data", "expected", "borrowed"),
    [
        ("", "", True),
        ("   ", "   ", True),
        ("a b", "a b", True),
        (r"a\ b", "ab", False),
        (r"\ \ \ ", "", False),
        (r"abc`:<>abc", r"abc`:<>abc", True),
        (r"\:\`\<\>\\", ":`<>\\", False),
        (r"Python\ \<home\> page", "Python<home> page", False),
    ],
)
def test_link_name_transform(data: str, expected: str, borrowed: bool):
    ret = link_name_transform(Borrowed.of(data))
    assert ret == expected
    assert ret.is_borrowed is borrowed
    if borrowed:
        assert ret.is_view_of(data)


@pytest.mark.parametrize(
    ("data", "expected", "borrowed"),
    [
        ("", "", True),
        ("  ", "", False),
        (" x x", "xx", False),
        ("a b", "ab", False),
        ("a\nb", "ab", False),
        ("a\r\n\tb", "ab", False),
        (r"a\ b", "a b", False),
        (r"\ \ \ ", "   ", False),
        (r"abc`:<>abc", r"abc`:<>abc", True),
        (r"\:\`\<\>\\", ":`<>\\", False),
        ("http://www.py\n     thon.org", "http://www.python.org", False),
        (r"http:// news.\ \<python\>.org", "http://news. <python>.org", False),
    ],
)
def test_link_destination_transform(data: str, expected: str, borrowed: bool):
    ret = link_destination_transform(Borrowed.of(data))
    assert ret == expected
    assert ret.is_borrowed is borrowed


def test_unchanged_destination_is_same_view():
    src = "see http://example.org/ now"
    view = Borrowed(src, 4, 23)
    ret = link_destination_transform(view)
    assert ret is view
    assert ret.is_view_of(src)


@pytest.mark.parametrize(
    "data",
    [
        "http://www.py\n     thon.org",
        " a b c ",
        r"\:\`\<\>",
    ],
)
def test_link_destination_transform_idempotent(data: str):
    once = link_destination_transform(Borrowed.of(data))
    twice = link_destination_transform(Borrowed.of(once.value))
    assert twice == once
    assert twice.is_borrowed


@pytest.mark.parametrize(
    ("data", "offset"),
    [
        (r"abc\x", 3),
        ("abc\\", 3),
        (r"a\:b\n", 4),
    ],
)
def test_invalid_escape(data: str, offset: int):
    for transform in (link_name_transform, link_destination_transform):
        with pytest.raises(ParseError) as exc_info:
            transform(Borrowed.of(data))
        assert exc_info.value.kind == ErrorKind.INVALID_ESCAPE_SEQUENCE
        assert exc_info.value.offset == offset


@pytest.mark.parametrize(
    ("data", "stop", "expected"),
    [
        ("abc`def", "`", 3),
        (r"ab\`c`d", "`", 5),
        ("abcdef", "`", 6),
        (r"a\<b <c>", "<", 5),
        ("", "`", 0),
    ],
)
def test_scan_escaped(data: str, stop: str, expected: int):
    assert scan_escaped(Borrowed.of(data), stop) == expected


def test_link_destination_transform_not_idempotent_on_escapes():
    # an escaped space comes out as a literal one, which a second pass drops
    once = link_destination_transform(Borrowed.of(r"a\ b"))
    assert once == "a b"
    assert link_destination_transform(Borrowed.of(once.value)) == "ab"

    once = link_destination_transform(Borrowed.of("a\\\\b"))
    assert once == "a\\b"
    with pytest.raises(ParseError) as exc_info:
        link_destination_transform(Borrowed.of(once.value))
    assert exc_info.value.kind == ErrorKind.INVALID_ESCAPE_SEQUENCE
