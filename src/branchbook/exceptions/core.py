"""
Exception classes for branchbook script parsing.

This module defines the error payload raised when a token stream cannot be
turned into a book tree, together with the location context used to format
messages for script authors and for developers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from branchbook.parsing.tokens import Token


class ErrorLevel(Enum):
    """Error message detail level for end users vs developers."""

    USER = "user"  # Script line and command only
    DEVELOPER = "developer"  # Adds token index and token payload


class ParseErrorKind(Enum):
    """Category of a parse failure."""

    EMPTY_INPUT = "empty_input"
    MISSING_BOOK = "missing_book"
    DUPLICATE_BOOK = "duplicate_book"
    ORDERING = "ordering"
    CONDITIONAL_BALANCE = "conditional_balance"
    UNCLOSED_CONDITIONAL = "unclosed_conditional"
    MALFORMED_TITLE = "malformed_title"
    MISSING_FIELD = "missing_field"
    UNKNOWN_COMMAND = "unknown_command"
    NOT_A_COMMAND = "not_a_command"
    PARSER_NOT_RESET = "parser_not_reset"


@dataclass
class ErrorContext:
    """
    Context information for error messages.

    Captures where an error occurred in script terms (source line, command
    text) and in tree terms (path of the nodes open at the time). Nodes are
    referenced by id, never by live object.

    Params:
        line: 1-based source line of the offending token
        command_text: The directive text as written, or paragraph text
        node_path: Open scope at failure, e.g. "chapter 'c1' > section 's2'"
        token_index: Position of the offending token in the token sequence
        token_data: Raw token payload
    """

    line: int | None = None
    command_text: str | None = None
    node_path: str | None = None
    token_index: int | None = None
    token_data: str | None = None

    def format_location(self, error_level: ErrorLevel) -> str:
        """
        Format location information based on error level.

        Params:
            error_level: Whether to show USER or DEVELOPER level details

        Returns:
            Formatted location string with appropriate detail level
        """
        lines = []

        if self.line is not None:
            lines.append(f"  at line {self.line}")

        if self.node_path:
            lines.append(f"  in {self.node_path}")

        if error_level == ErrorLevel.DEVELOPER:
            if self.token_index is not None:
                lines.append(f"  token index {self.token_index}")
            if self.token_data is not None:
                lines.append(f"  token data: {self.token_data!r}")

        if self.command_text:
            lines.append(f"  command: {self.command_text}")

        return "\n".join(lines)


class BranchbookError(Exception):
    """Base exception for all branchbook errors."""

    pass


class ParserError(BranchbookError):
    """Raised when a token stream violates the script grammar."""

    def __init__(
        self,
        message: str,
        kind: ParseErrorKind,
        token: Token | None = None,
        context: ErrorContext | None = None,
        error_level: ErrorLevel = ErrorLevel.USER,
    ):
        """
        Initialize the exception.

        Params:
            message: Human readable description of the violation
            kind: Category of the violation
            token: Offending token, None for end-of-input conditions
            context: ErrorContext with source location information
            error_level: Level of detail to show in error message
        """
        self.message = message
        self.kind = kind
        self.token = token
        self.context = context
        self.error_level = error_level

        if context:
            location_info = context.format_location(error_level)
            full_message = f"{message}\n{location_info}" if location_info else message
        else:
            full_message = message

        super().__init__(full_message)

    @property
    def line(self) -> int | None:
        """Source line of the offending token, if any."""
        if self.token is not None:
            return self.token.line
        if self.context is not None:
            return self.context.line
        return None
