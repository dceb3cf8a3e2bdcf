"""Tokenizer for Rome77: source text -> tokens with keyword and Roman numeral recognition."""

from dataclasses import dataclass
from typing import Optional

from rome77 import roman
from rome77.errors import LexicalError
from rome77.keywords import get_keywords


class TokenKind:
    # Keywords
    AS = "AS"
    MUNUS = "MUNUS"
    GRAFO = "GRAFO"
    ANAGNOSI = "ANAGNOSI"
    SINON = "SINON"
    # Operators / punctuation
    PLUS = "PLUS"
    MINUS = "MINUS"
    MULT = "MULT"
    DIV = "DIV"
    EQUALS = "EQUALS"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    # Literals
    ROMAN = "ROMAN"
    IDENTIFIER = "IDENTIFIER"
    EOF = "EOF"


_PUNCTUATION = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MULT,
    "/": TokenKind.DIV,
    "=": TokenKind.EQUALS,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}

_WHITESPACE = " \t\r\n"


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.text!r}, L{self.line}:{self.column})"


def tokenize(source: str, path: Optional[str] = None) -> tuple[Token, ...]:
    """Produce the token sequence for Rome77 source. Always ends with one EOF token."""
    keywords = get_keywords()
    tokens: list[Token] = []
    i = 0
    line_no = 1
    col = 0

    def advance(count: int = 1) -> None:
        nonlocal i, col, line_no
        for _ in range(count):
            if source[i] == "\n":
                line_no += 1
                col = 0
            else:
                col += 1
            i += 1

    def keyword_at() -> Optional[str]:
        best = None
        for word in keywords:
            if source.startswith(word, i) and (best is None or len(word) > len(best)):
                best = word
        return best

    def numeral_run() -> str:
        end = i
        while end < len(source) and source[end] in roman.NUMERAL_CHARS:
            end += 1
        return source[i:end]

    while i < len(source):
        c = source[i]

        if c in _WHITESPACE:
            advance()
            continue

        if c in _PUNCTUATION:
            tokens.append(Token(_PUNCTUATION[c], c, line_no, col))
            advance()
            continue

        # Identifier: lowercase-leading alphanumeric word
        if "a" <= c <= "z":
            start = i
            end = i
            while end < len(source) and source[end].isascii() and source[end].isalnum():
                end += 1
            tokens.append(Token(TokenKind.IDENTIFIER, source[start:end], line_no, col))
            advance(end - start)
            continue

        # Keyword or Roman numeral; the longer match wins, keywords win ties
        if "A" <= c <= "Z":
            word = keyword_at()
            run = numeral_run()
            if word is not None and len(word) >= len(run):
                tokens.append(Token(keywords[word], word, line_no, col))
                advance(len(word))
                continue
            if run:
                if not roman.is_valid(run):
                    raise LexicalError(f"Invalid Roman numeral: {run}", line_no, col, path)
                tokens.append(Token(TokenKind.ROMAN, run, line_no, col))
                advance(len(run))
                continue

        raise LexicalError(f"Unexpected character: {c!r}", line_no, col, path)

    tokens.append(Token(TokenKind.EOF, "", line_no, col))
    return tuple(tokens)
