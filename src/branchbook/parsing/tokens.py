"""
Token contract between the script lexer and the command parser.

The lexer (not part of this package) turns script text into an ordered
sequence of tokens: directive lines, with their comment marker already
removed, and paragraphs of narrative text. Each token keeps the 1-based
line it came from so parse errors can point back at the script.
"""

import re
from enum import Enum

from attrs import field, frozen

# Directive fields are separated by spaces and non-breaking spaces
DIRECTIVE_SEPARATOR = re.compile("[ \u00a0]+")

COMMAND_MARKER = "//"


class TokenType(Enum):
    """Kind of token produced by the lexer."""

    DIRECTIVE = "directive"
    PARAGRAPH = "paragraph"


class CommandType(Enum):
    """Directive vocabulary understood by the parser."""

    BOOK = "book"
    CHAPTER = "chapter"
    SECTION = "section"
    IF = "if"
    ELSE = "else"
    ENDIF = "endif"
    ITEM = "item"
    STATE = "state"
    NEXT = ">"  # Link within the current chapter
    JUMP = ">>"  # Link to another chapter


@frozen
class Token:
    type: TokenType
    data: str
    line: int

    @classmethod
    def directive(cls, data: str, line: int) -> "Token":
        return cls(TokenType.DIRECTIVE, data, line)

    @classmethod
    def paragraph(cls, data: str, line: int) -> "Token":
        return cls(TokenType.PARAGRAPH, data, line)

    @property
    def is_directive(self) -> bool:
        return self.type == TokenType.DIRECTIVE


@frozen
class Command:
    """A directive split into its lower-cased name and positional fields."""

    type: str
    fields: tuple[str, ...] = field(converter=tuple)
    line: int
    raw: str = ""

    def get(self, index: int) -> str | None:
        """Return the field at ``index`` or None when the directive is too short."""
        if index < len(self.fields):
            return self.fields[index]
        return None

    def joined_fields(self, start: int = 0) -> str:
        """Join fields from ``start`` onward with single spaces."""
        return " ".join(self.fields[start:])

    def source_text(self) -> str:
        """Directive as written, falling back to the normalized form."""
        if self.raw.strip():
            return f"{COMMAND_MARKER} {self.raw.strip()}"
        return str(self)

    def __str__(self) -> str:
        return " ".join([COMMAND_MARKER, self.type, *self.fields])


def split_directive(text: str) -> list[str]:
    """
    Split directive text into non-empty fragments.

    Params:
        text: Directive payload without its marker

    Returns:
        Fragments in order, trimmed, with empty ones dropped
    """
    fragments = (fragment.strip() for fragment in DIRECTIVE_SEPARATOR.split(text))
    return [fragment for fragment in fragments if fragment]
