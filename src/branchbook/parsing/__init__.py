"""
branchbook parsing components.

This package provides the token contract consumed from the script lexer and
the command parser that builds the book tree.
"""

from branchbook.parsing.parser import CommandParser, parse_tokens
from branchbook.parsing.tokens import (
    COMMAND_MARKER,
    Command,
    CommandType,
    Token,
    TokenType,
    split_directive,
)

__all__ = [
    "COMMAND_MARKER",
    "Command",
    "CommandParser",
    "CommandType",
    "Token",
    "TokenType",
    "parse_tokens",
    "split_directive",
]
