"""
Shared test fixtures and utilities for the branchbook test suite.
"""

import pytest

from branchbook.parsing.tokens import COMMAND_MARKER, Token


def lex(*lines: str) -> list[Token]:
    """Build tokens from script lines, one token per line.

    Lines starting with ``//`` become directive tokens with the marker
    stripped; every other line becomes a paragraph token. Line numbers are
    1-based positions in ``lines``.
    """
    tokens = []
    for line_number, line in enumerate(lines, start=1):
        if line.startswith(COMMAND_MARKER):
            tokens.append(Token.directive(line[len(COMMAND_MARKER) :], line_number))
        else:
            tokens.append(Token.paragraph(line, line_number))
    return tokens


@pytest.fixture
def make_tokens():
    """Factory fixture turning script lines into a token list.

    Usage:
        def test_something(make_tokens):
            tokens = make_tokens("// book", "My Book")
    """
    return lex


@pytest.fixture
def opening_lines():
    """Script prefix that opens a book, chapter c1 and section s1."""
    return [
        "// book",
        "The Cave",
        "// chapter c1",
        "Into the Dark",
        "// section s1",
        "The Entrance",
    ]
