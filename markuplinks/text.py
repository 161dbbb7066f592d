from __future__ import annotations

from typing import Union

import attr


class Text(object):
    """Either a zero-copy view into the scanned input (`Borrowed`) or a
    detached string built by a transformation (`Owned`).

    Both kinds compare and hash by content, so callers may treat them alike;
    parsers keep the distinction so no allocation happens when nothing changes.
    """

    __slots__ = ()

    @property
    def value(self) -> str:
        raise NotImplementedError

    @property
    def is_borrowed(self) -> bool:
        raise NotImplementedError

    def to_owned(self) -> Owned:
        return Owned(self.value)

    def __str__(self) -> str:
        return self.value

    def __len__(self) -> int:
        return len(self.value)

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Text):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)


@attr.s(slots=True, frozen=True, eq=False, repr=False)
class Borrowed(Text):
    source: str = attr.ib()
    start: int = attr.ib()
    end: int = attr.ib()

    @end.validator
    def _check_bounds(self, attribute: attr.Attribute, value: int) -> None:
        if not (0 <= self.start <= value <= len(self.source)):
            raise ValueError("view out of bounds: start=%d end=%d" % (self.start, value))

    @classmethod
    def of(cls, s: str) -> Borrowed:
        return cls(s, 0, len(s))

    def __repr__(self) -> str:
        return "Borrowed(%r, offset=%d)" % (self.value, self.start)

    @property
    def value(self) -> str:
        return self.source[self.start:self.end]

    @property
    def is_borrowed(self) -> bool:
        return True

    @property
    def offset(self) -> int:
        return self.start

    def __len__(self) -> int:
        return self.end - self.start

    def is_view_of(self, s: str) -> bool:
        return self.source is s

    def char_at(self, idx: int) -> str:
        """Return the character at relative index `idx`, or '' past the end."""
        pos = self.start + idx
        if 0 <= idx and pos < self.end:
            return self.source[pos]
        return ""

    def slice(self, start: int, end: int | None = None) -> Borrowed:
        if end is None:
            end = len(self)
        return Borrowed(self.source, self.start + start, self.start + end)

    def advance(self, n: int) -> Borrowed:
        return self.slice(n)

    def startswith(self, prefix: str, idx: int = 0) -> bool:
        return self.source.startswith(prefix, self.start + idx, self.end)

    def find(self, sub: str, idx: int = 0) -> int:
        pos = self.source.find(sub, self.start + idx, self.end)
        if pos < 0:
            return -1
        return pos - self.start

    def rstrip(self) -> Borrowed:
        end = self.end
        while end > self.start and self.source[end - 1].isspace():
            end -= 1
        return Borrowed(self.source, self.start, end)

    def lstrip(self) -> Borrowed:
        start = self.start
        while start < self.end and self.source[start].isspace():
            start += 1
        return Borrowed(self.source, start, self.end)

    def strip(self) -> Borrowed:
        return self.lstrip().rstrip()


@attr.s(slots=True, frozen=True, eq=False, repr=False)
class Owned(Text):
    _value: str = attr.ib()

    def __repr__(self) -> str:
        return "Owned(%r)" % self._value

    @property
    def value(self) -> str:
        return self._value

    @property
    def is_borrowed(self) -> bool:
        return False

    def to_owned(self) -> Owned:
        return self


EMPTY = Borrowed("", 0, 0)

TextLike = Union[str, Text]
Hyperlink = tuple[Text, Text, Text]


def as_view(i: TextLike) -> Borrowed:
    """Wrap parser input so every parser works on a `Borrowed` view."""
    if isinstance(i, Borrowed):
        return i
    if isinstance(i, Owned):
        return Borrowed.of(i.value)
    return Borrowed.of(i)
