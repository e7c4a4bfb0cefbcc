"""
branchbook exception classes.

This package provides all exception types used throughout branchbook for
consistent error handling and reporting.
"""

from branchbook.exceptions.core import (
    BranchbookError,
    ErrorContext,
    ErrorLevel,
    ParseErrorKind,
    ParserError,
)

__all__ = [
    "BranchbookError",
    "ErrorContext",
    "ErrorLevel",
    "ParseErrorKind",
    "ParserError",
]
