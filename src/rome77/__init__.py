"""Rome77 front end: lexer, parser, semantic analyzer and IR."""

__version__ = "0.1.0"

from rome77.analyzer import analyze
from rome77.errors import ErrorKind, LexicalError, Rome77Error, SemanticError, SyntaxError
from rome77.lexer import Token, TokenKind, tokenize
from rome77.parser import parse
from rome77.pipeline import CompileResult, compile_source

__all__ = [
    "__version__",
    "analyze",
    "compile_source",
    "CompileResult",
    "ErrorKind",
    "LexicalError",
    "parse",
    "Rome77Error",
    "SemanticError",
    "SyntaxError",
    "Token",
    "TokenKind",
    "tokenize",
]
