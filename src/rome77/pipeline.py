"""Full front end: source -> tokens -> syntax tree -> IR, with the first error returned as a value."""

import logging
from dataclasses import dataclass
from typing import Optional

from rome77.analyzer import analyze
from rome77.errors import ErrorKind, Rome77Error
from rome77.ir import Program
from rome77.lexer import tokenize
from rome77.parser import parse_tokens

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
    """Exactly one of program / error is set."""
    program: Optional[Program] = None
    error: Optional[Rome77Error] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error is not None else None

    def unwrap(self) -> Program:
        """Return the program or raise the stored error."""
        if self.error is not None:
            raise self.error
        if self.program is None:
            raise ValueError("CompileResult holds neither a program nor an error")
        return self.program


def compile_source(source: str, path: Optional[str] = None) -> CompileResult:
    """Run every stage in order; later stages never run once one fails."""
    try:
        tokens = tokenize(source, path)
        logger.debug("lexed %d tokens from %s", len(tokens), path or "<string>")
        tree = parse_tokens(tokens, path)
        logger.debug("parsed %d top-level statements", len(tree.statements()))
        program = analyze(tree)
    except Rome77Error as e:
        logger.info("%s error: %s", e.kind.value, e)
        return CompileResult(error=e)
    logger.debug(
        "lowered %d functions and %d statements",
        len(program.functions),
        len(program.statements),
    )
    return CompileResult(program=program)
