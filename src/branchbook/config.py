"""Local configuration for branchbook."""

from __future__ import annotations

import os

from attrs import frozen

from branchbook.exceptions.core import ErrorLevel

DEFAULT_STRICT_CONDITIONALS = True
DEFAULT_ERROR_LEVEL = ErrorLevel.USER.value

_TRUE_VALUES = {"1", "true", "yes", "on"}

# Reject chapter/section boundaries and end of input while an if is open.
BRANCHBOOK_STRICT_CONDITIONALS = (
    os.getenv("BRANCHBOOK_STRICT_CONDITIONALS", str(DEFAULT_STRICT_CONDITIONALS)).strip().lower()
    in _TRUE_VALUES
)
_error_level = os.getenv("BRANCHBOOK_ERROR_LEVEL", DEFAULT_ERROR_LEVEL).strip().lower()
try:
    BRANCHBOOK_ERROR_LEVEL = ErrorLevel(_error_level)
except ValueError as exc:
    raise ValueError(
        f"BRANCHBOOK_ERROR_LEVEL must be one of "
        f"{', '.join(level.value for level in ErrorLevel)}, got '{_error_level}'"
    ) from exc


@frozen
class ParserConfig:
    strict_conditionals: bool = BRANCHBOOK_STRICT_CONDITIONALS
    error_level: ErrorLevel = BRANCHBOOK_ERROR_LEVEL
