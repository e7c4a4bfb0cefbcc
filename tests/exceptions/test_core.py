"""
Tests for error context and formatting system.

This module tests ErrorContext, ErrorLevel enum, and how ParserError
formats messages based on error level (user vs developer).
"""

from branchbook.exceptions.core import (
    BranchbookError,
    ErrorContext,
    ErrorLevel,
    ParseErrorKind,
    ParserError,
)
from branchbook.parsing.tokens import Token


class TestErrorContext:
    """Tests for ErrorContext dataclass."""

    def test_create_minimal_context(self):
        """Test creating ErrorContext with minimal information."""
        ctx = ErrorContext(line=3, command_text="// else")
        assert ctx.line == 3
        assert ctx.command_text == "// else"
        assert ctx.node_path is None

    def test_format_user_level(self):
        """User level shows line, scope and command only."""
        ctx = ErrorContext(
            line=14,
            command_text="// if again",
            node_path="chapter 'c1' > section 's1'",
            token_index=9,
            token_data=" if again",
        )
        formatted = ctx.format_location(ErrorLevel.USER)

        assert "line 14" in formatted
        assert "chapter 'c1' > section 's1'" in formatted
        assert "command: // if again" in formatted
        assert "token index" not in formatted
        assert "token data" not in formatted

    def test_format_developer_level(self):
        """Developer level adds the token position and payload."""
        ctx = ErrorContext(line=14, token_index=9, token_data=" if again")
        formatted = ctx.format_location(ErrorLevel.DEVELOPER)

        assert "line 14" in formatted
        assert "token index 9" in formatted
        assert "' if again'" in formatted

    def test_format_without_optional_fields(self):
        """An empty context formats to an empty string."""
        assert ErrorContext().format_location(ErrorLevel.DEVELOPER) == ""


class TestParserError:
    """Tests for ParserError payload and message."""

    def test_is_branchbook_error(self):
        """ParserError shares the package base class."""
        error = ParserError("No tokens to parse", ParseErrorKind.EMPTY_INPUT)

        assert isinstance(error, BranchbookError)
        assert str(error) == "No tokens to parse"
        assert error.line is None

    def test_message_includes_location(self):
        """Context lines follow the message."""
        token = Token.directive(" endif", 7)
        error = ParserError(
            'Found "// endif" before first "// if"',
            ParseErrorKind.CONDITIONAL_BALANCE,
            token=token,
            context=ErrorContext(line=7, command_text="// endif"),
        )

        lines = str(error).splitlines()
        assert lines[0] == 'Found "// endif" before first "// if"'
        assert "  at line 7" in lines
        assert error.message == lines[0]
        assert error.token is token
        assert error.line == 7

    def test_line_falls_back_to_context(self):
        """Without a token the context line is reported."""
        error = ParserError(
            "unclosed",
            ParseErrorKind.UNCLOSED_CONDITIONAL,
            context=ErrorContext(line=21),
        )

        assert error.line == 21
