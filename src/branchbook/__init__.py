"""
branchbook - Parser for branching gamebook scripts

branchbook turns a lexed script of directives and narrative paragraphs into a
Book tree of chapters, sections, conditional blocks and navigation links.
"""

from importlib.metadata import version

from branchbook.config import ParserConfig
from branchbook.core.document import Book
from branchbook.exceptions.core import ParserError
from branchbook.parsing.parser import CommandParser, parse_tokens
from branchbook.parsing.tokens import Token, TokenType

__version__ = version("branchbook")

__all__ = [
    "__version__",
    "Book",
    "CommandParser",
    "ParserConfig",
    "ParserError",
    "Token",
    "TokenType",
    "parse_tokens",
]
