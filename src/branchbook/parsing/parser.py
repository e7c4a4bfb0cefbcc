"""
Parser for branchbook script directives.

This module turns the lexer's token stream into a Book tree in a single pass.
The parser tracks the open scope (book, chapter, section and the open
conditional branch), validates every directive against it and stops at the
first violation with a ParserError.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import NoReturn

from branchbook.config import ParserConfig
from branchbook.core.document import (
    AddItem,
    Book,
    ChangeState,
    Chapter,
    ConditionalBlock,
    Element,
    ElseBlock,
    IfBlock,
    Link,
    Paragraph,
    RemoveItem,
    Section,
)
from branchbook.exceptions.core import ErrorContext, ParseErrorKind, ParserError
from branchbook.parsing.tokens import (
    COMMAND_MARKER,
    Command,
    CommandType,
    Token,
    split_directive,
)

logger = logging.getLogger(__name__)

_COMMAND_TYPES = {command_type.value: command_type for command_type in CommandType}


def _directive(name: str) -> str:
    return f'"{COMMAND_MARKER} {name}"'


@dataclass
class _ParseState:
    """Scope pointers for one pass over a token sequence."""

    tokens: Sequence[Token]
    book: Book | None = None
    chapter: Chapter | None = None
    section: Section | None = None
    if_block: IfBlock | None = None
    else_block: ElseBlock | None = None

    def close_conditional(self) -> None:
        self.if_block = None
        self.else_block = None

    def node_path(self) -> str | None:
        """Describe the open scope by node ids, outermost first."""
        parts = []
        if self.chapter is not None:
            parts.append(f"chapter '{self.chapter.id}'")
        if self.section is not None:
            parts.append(f"section '{self.section.id}'")
        if self.if_block is not None:
            parts.append(f"if '{self.if_block.condition}'")
        if self.else_block is not None:
            parts.append("else")
        return " > ".join(parts) or None

    def missing_antecedent(self) -> str:
        """Name the outermost scope directive that has not been seen yet."""
        if self.book is None:
            return _directive(CommandType.BOOK.value)
        if self.chapter is None:
            return f"first {_directive(CommandType.CHAPTER.value)}"
        return f"first {_directive(CommandType.SECTION.value)}"


class CommandParser:
    """
    Single-pass parser from tokens to a Book tree.

    A parser instance keeps its position after a pass, whether it succeeded
    or failed. Call reset() before reusing it. Instances are not safe to
    share between concurrent callers.
    """

    def __init__(self, config: ParserConfig | None = None):
        self.config = config or ParserConfig()
        self.position = 0
        self._handlers: dict[
            CommandType, Callable[[_ParseState, Command, Token], None]
        ] = {
            CommandType.BOOK: self._parse_book,
            CommandType.CHAPTER: self._parse_chapter,
            CommandType.SECTION: self._parse_section,
            CommandType.NEXT: self._parse_next,
            CommandType.JUMP: self._parse_jump,
            CommandType.STATE: self._parse_state,
            CommandType.ITEM: self._parse_item,
            CommandType.IF: self._parse_if,
            CommandType.ELSE: self._parse_else,
            CommandType.ENDIF: self._parse_endif,
        }

    def reset(self) -> None:
        self.position = 0

    def parse(self, tokens: Sequence[Token]) -> Book:
        """
        Build a Book from a token sequence.

        Params:
            tokens: Ordered directive and paragraph tokens from the lexer

        Returns:
            The fully built Book

        Raises:
            ParserError: On the first token that violates the script grammar,
                or when the input is empty or declares no book
        """
        if self.position != 0:
            self._error(
                f"Parser is at position {self.position}, call reset() before parsing again",
                ParseErrorKind.PARSER_NOT_RESET,
            )
        if len(tokens) < 1:
            self._error("No tokens to parse", ParseErrorKind.EMPTY_INPUT)

        state = _ParseState(tokens=tokens)
        while self.position < len(tokens):
            token = tokens[self.position]
            if token.is_directive:
                command = self.parse_command(token)
                command_type = _COMMAND_TYPES.get(command.type)
                if command_type is None:
                    self._error(
                        f"Command type {command.type} not implemented",
                        ParseErrorKind.UNKNOWN_COMMAND,
                        token,
                        state,
                        command,
                    )
                logger.debug("Line %d: %s", command.line, command)
                self._handlers[command_type](state, command, token)
            else:
                self._container(state, token).elements.append(
                    Paragraph(text=token.data)
                )
            self.position += 1

        if state.if_block is not None:
            if self.config.strict_conditionals:
                self._error(
                    f'"{COMMAND_MARKER} if {state.if_block.condition}" is never closed '
                    f"by {_directive(CommandType.ENDIF.value)}",
                    ParseErrorKind.UNCLOSED_CONDITIONAL,
                    state=state,
                )
            logger.warning(
                "Conditional '%s' left open at end of input", state.if_block.condition
            )
            state.close_conditional()

        if state.book is None:
            self._error(
                f"{_directive(CommandType.BOOK.value)} not found",
                ParseErrorKind.MISSING_BOOK,
            )

        logger.debug(
            "Parsed book '%s': %d chapters, %d sections",
            state.book.title,
            len(state.book.chapters),
            sum(1 for _ in state.book.iter_sections()),
        )
        return state.book

    def parse_command(self, token: Token) -> Command:
        """
        Split a directive token into its command name and fields.

        Params:
            token: A directive token

        Returns:
            Command with a lower-cased name and the remaining fields in order

        Raises:
            ParserError: If the token is not a directive or has no command name
        """
        if not token.is_directive:
            self._error(
                "Cannot parse command, token is not a command",
                ParseErrorKind.NOT_A_COMMAND,
                token,
            )
        fragments = split_directive(token.data)
        if not fragments:
            self._error(
                f'Found an empty "{COMMAND_MARKER}" directive',
                ParseErrorKind.UNKNOWN_COMMAND,
                token,
            )
        return Command(
            type=fragments[0].lower(),
            fields=fragments[1:],
            line=token.line,
            raw=token.data,
        )

    # Directive handlers

    def _parse_book(self, state: _ParseState, command: Command, token: Token) -> None:
        if state.book is not None:
            self._error(
                f"Found a second {_directive(command.type)} command, "
                f"book '{state.book.title}' already initialized",
                ParseErrorKind.DUPLICATE_BOOK,
                token,
                state,
                command,
            )
        state.book = Book(title=self._read_title(state, command, token))

    def _parse_chapter(self, state: _ParseState, command: Command, token: Token) -> None:
        if state.book is None:
            self._error(
                f"Found a {_directive(command.type)} before {_directive(CommandType.BOOK.value)}",
                ParseErrorKind.ORDERING,
                token,
                state,
                command,
            )
        self._leave_conditional(state, command, token)
        chapter_id = self._require_field(state, command, token, 0, "chapter id")
        chapter = Chapter(id=chapter_id, title=self._read_title(state, command, token))
        state.book.chapters.append(chapter)
        state.chapter = chapter
        state.section = None

    def _parse_section(self, state: _ParseState, command: Command, token: Token) -> None:
        if state.chapter is None:
            self._error(
                f"Found a {_directive(command.type)} before {state.missing_antecedent()}",
                ParseErrorKind.ORDERING,
                token,
                state,
                command,
            )
        self._leave_conditional(state, command, token)
        section_id = self._require_field(state, command, token, 0, "section id")
        section = Section(id=section_id, title=self._read_title(state, command, token))
        state.chapter.sections.append(section)
        state.section = section

    def _parse_next(self, state: _ParseState, command: Command, token: Token) -> None:
        self._require_section(state, command, token)
        section_id = self._require_field(state, command, token, 0, "target section id")
        state.section.next.append(
            Link(
                title=command.joined_fields(1),
                chapter_id=state.chapter.id,
                section_id=section_id,
            )
        )

    def _parse_jump(self, state: _ParseState, command: Command, token: Token) -> None:
        self._require_section(state, command, token)
        chapter_id = self._require_field(state, command, token, 0, "target chapter id")
        section_id = self._require_field(state, command, token, 1, "target section id")
        state.section.next.append(
            Link(
                title=command.joined_fields(2),
                chapter_id=chapter_id,
                section_id=section_id,
            )
        )

    def _parse_state(self, state: _ParseState, command: Command, token: Token) -> None:
        container = self._container(state, token, command)
        state_id = self._require_field(state, command, token, 0, "state id")
        modifier = self._require_field(state, command, token, 1, "state modifier")
        container.elements.append(ChangeState(id=state_id, modifier=modifier))

    def _parse_item(self, state: _ParseState, command: Command, token: Token) -> None:
        container = self._container(state, token, command)
        first = self._require_field(state, command, token, 0, "item id")
        item: Element
        if first.lower() == "remove":
            item = RemoveItem(id=self._require_field(state, command, token, 1, "item id"))
        else:
            item = AddItem(id=first)
        container.elements.append(item)

    def _parse_if(self, state: _ParseState, command: Command, token: Token) -> None:
        if state.if_block is not None:
            self._error(
                f"Found another {_directive(command.type)} before {_directive(CommandType.ENDIF.value)}",
                ParseErrorKind.CONDITIONAL_BALANCE,
                token,
                state,
                command,
            )
        self._require_section(state, command, token)
        condition = command.joined_fields()
        if not condition:
            self._error(
                f"{_directive(command.type)} is missing its condition",
                ParseErrorKind.MISSING_FIELD,
                token,
                state,
                command,
            )
        if_block = IfBlock(condition=condition)
        state.section.elements.append(if_block)
        state.if_block = if_block

    def _parse_else(self, state: _ParseState, command: Command, token: Token) -> None:
        self._require_open_if(state, command, token)
        if state.else_block is not None:
            self._error(
                f'Found a second {_directive(command.type)} for "{COMMAND_MARKER} if '
                f'{state.if_block.condition}"',
                ParseErrorKind.CONDITIONAL_BALANCE,
                token,
                state,
                command,
            )
        assert state.section is not None, "an open if implies a current section"
        else_block = ElseBlock(if_condition=state.if_block.condition)
        state.section.elements.append(else_block)
        state.else_block = else_block

    def _parse_endif(self, state: _ParseState, command: Command, token: Token) -> None:
        self._require_open_if(state, command, token)
        state.close_conditional()

    # Scope helpers

    def _container(
        self, state: _ParseState, token: Token, command: Command | None = None
    ) -> Section | ConditionalBlock:
        """Resolve the innermost open container: else, then if, then section."""
        if state.else_block is not None or state.if_block is not None:
            assert state.section is not None, "an open if implies a current section"
            return state.else_block if state.else_block is not None else state.if_block
        if state.section is None:
            found = f"a {_directive(command.type)}" if command else "text"
            self._error(
                f"Found {found} before {state.missing_antecedent()}",
                ParseErrorKind.ORDERING,
                token,
                state,
                command,
            )
        return state.section

    def _require_section(self, state: _ParseState, command: Command, token: Token) -> None:
        if state.section is None:
            self._error(
                f"Found a {_directive(command.type)} before {state.missing_antecedent()}",
                ParseErrorKind.ORDERING,
                token,
                state,
                command,
            )

    def _require_open_if(self, state: _ParseState, command: Command, token: Token) -> None:
        if state.if_block is not None:
            return
        self._require_section(state, command, token)
        self._error(
            f"Found {_directive(command.type)} before first {_directive(CommandType.IF.value)}",
            ParseErrorKind.CONDITIONAL_BALANCE,
            token,
            state,
            command,
        )

    def _leave_conditional(self, state: _ParseState, command: Command, token: Token) -> None:
        """Handle a chapter or section boundary reached while an if is open."""
        if state.if_block is None:
            return
        if self.config.strict_conditionals:
            self._error(
                f"Found a {_directive(command.type)} before "
                f'"{COMMAND_MARKER} if {state.if_block.condition}" was closed '
                f"by {_directive(CommandType.ENDIF.value)}",
                ParseErrorKind.UNCLOSED_CONDITIONAL,
                token,
                state,
                command,
            )
        logger.warning(
            "Line %d: closing conditional '%s' at %s boundary",
            token.line,
            state.if_block.condition,
            command.type,
        )
        state.close_conditional()

    def _require_field(
        self,
        state: _ParseState,
        command: Command,
        token: Token,
        index: int,
        name: str,
    ) -> str:
        value = command.get(index)
        if value is None:
            self._error(
                f'"{command}" is missing its {name}',
                ParseErrorKind.MISSING_FIELD,
                token,
                state,
                command,
            )
        return value

    def _read_title(self, state: _ParseState, command: Command, token: Token) -> str:
        """Consume the paragraph token following a book, chapter or section directive."""
        index = self.position + 1
        following = state.tokens[index] if index < len(state.tokens) else None
        if following is None or following.is_directive:
            self._error(
                f"{_directive(command.type)} needs a title as text on the line after it",
                ParseErrorKind.MALFORMED_TITLE,
                following or token,
                state,
                command,
            )
        self.position = index
        return following.data

    def _error(
        self,
        message: str,
        kind: ParseErrorKind,
        token: Token | None = None,
        state: _ParseState | None = None,
        command: Command | None = None,
    ) -> NoReturn:
        context = None
        if token is not None or state is not None:
            context = ErrorContext(
                line=token.line if token is not None else None,
                command_text=command.source_text() if command is not None else None,
                node_path=state.node_path() if state is not None else None,
                token_index=self.position if token is not None else None,
                token_data=token.data if token is not None else None,
            )
        error = ParserError(
            message,
            kind,
            token=token,
            context=context,
            error_level=self.config.error_level,
        )
        logger.warning("Parsing error: %s", error)
        raise error


def parse_tokens(tokens: Sequence[Token], config: ParserConfig | None = None) -> Book:
    """
    Parse a token sequence with a fresh parser.

    Params:
        tokens: Ordered directive and paragraph tokens from the lexer
        config: Optional parser configuration

    Returns:
        The parsed Book
    """
    return CommandParser(config).parse(tokens)
