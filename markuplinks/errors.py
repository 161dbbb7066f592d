import enum
from typing import Optional, Tuple

from markuplinks.text import Borrowed


class ErrorKind(enum.Enum):
    MISSING_OPENING_MARKER = "missing-opening-marker"
    UNTERMINATED_CONSTRUCT = "unterminated-construct"
    MISSING_MANDATORY_FIELD = "missing-mandatory-field"
    DUPLICATE_FIELD = "duplicate-field"
    INVALID_FIELD_NAME = "invalid-field-name"
    MALFORMED_ATTRIBUTE = "malformed-attribute"
    INVALID_ESCAPE_SEQUENCE = "invalid-escape-sequence"
    MALFORMED_REFERENCE_LABEL = "malformed-reference-label"
    TRAILING_CONTENT_AFTER_DESTINATION = "trailing-content-after-destination"
    INSUFFICIENT_INDENTATION = "insufficient-indentation"


def line_column(text: str, offset: int) -> Tuple[int, int]:
    """Map an absolute offset into `text` to a 1-based (line, column) pair."""
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return (line, offset - line_start + 1)


class ParseError(Exception):
    def __init__(self, kind: ErrorKind, position: Borrowed, message: Optional[str] = None):
        self.kind = kind
        self.position = position
        self.message = message or kind.value.replace("-", " ")
        super().__init__(kind, position, self.message)

    @property
    def offset(self) -> int:
        return self.position.offset

    def line_column(self) -> Tuple[int, int]:
        return line_column(self.position.source, self.offset)

    def __str__(self) -> str:
        line, column = self.line_column()
        return "%s at line %d, column %d" % (self.message, line, column)
