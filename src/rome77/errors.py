"""Structured errors for Rome77 (lexical, syntax, semantic)."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional


class ErrorKind(Enum):
    LEXICAL = "lexical"
    SYNTAX = "syntax"
    SEMANTIC = "semantic"


@dataclass
class Rome77Error(Exception):
    """Base for all Rome77 errors. Line is 1-based, column is 0-based."""
    message: str
    line: int = 1
    column: int = 0
    path: Optional[str] = None

    kind: ClassVar[Optional[ErrorKind]] = None

    def __str__(self) -> str:
        loc = ""
        if self.path:
            loc = f"{self.path}:"
        loc += f"{self.line}:{self.column}: "
        return f"{loc}{self.message}"


class LexicalError(Rome77Error):
    """Unrecognized character or malformed Roman numeral."""
    kind = ErrorKind.LEXICAL


class SyntaxError(Rome77Error):
    """Token sequence did not match the grammar."""
    kind = ErrorKind.SYNTAX


class SemanticError(Rome77Error):
    """Naming or arity rule violated."""
    kind = ErrorKind.SEMANTIC
