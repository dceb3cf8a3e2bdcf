"""Recursive-descent parser: tokens -> syntax tree. One method per grammar rule.

Expressions are bounded so that every later pass can recurse over the tree:
nesting parentheses, conditionals and unary signs deeper than MAX_NESTING, or
building an expression tree taller than MAX_DEPTH (a long ``I + I + ...``
chain), is a SyntaxError located at the token where the limit was crossed.
"""

from typing import Callable, Optional, Sequence, Union

from rome77.errors import SyntaxError
from rome77.lexer import Token, TokenKind, tokenize
from rome77.syntax_tree import SyntaxNode, SyntaxTree

# Tokens that can start an atom (and therefore a call argument).
_ATOM_START = (TokenKind.ROMAN, TokenKind.IDENTIFIER, TokenKind.ANAGNOSI, TokenKind.LPAREN)

MAX_NESTING = 64
MAX_DEPTH = 256


class Parser:
    def __init__(self, tokens: Sequence[Token], path: Optional[str] = None):
        self.tokens = tokens
        self.path = path
        self.pos = 0
        # Juxtaposition calls are recognized unless a conditional turned them off.
        self.calls = True
        self.nesting = 0
        # (rule, start) -> (node, end, error); parenExpr and conditional parse the same wherever they start.
        self.memo: dict[tuple[str, int], tuple[Optional[SyntaxNode], int, Optional[SyntaxError]]] = {}

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[idx]

    def advance(self) -> Token:
        t = self.peek()
        if self.pos < len(self.tokens):
            self.pos += 1
        return t

    def at(self, *kinds: str) -> bool:
        return self.peek().kind in kinds

    def error(self, expected: str) -> SyntaxError:
        t = self.peek()
        return SyntaxError(f"Expected {expected}, got {t.kind} {t.text!r}", t.line, t.column, self.path)

    def expect(self, kind: str) -> SyntaxNode:
        if not self.at(kind):
            raise self.error(kind)
        return SyntaxNode.leaf(self.advance())

    def parse_program(self) -> SyntaxTree:
        statements: list[SyntaxNode] = []
        while not self.at(TokenKind.EOF):
            statements.append(self.parse_statement())
        eof = SyntaxNode.leaf(self.advance())
        return SyntaxTree(SyntaxNode.rule("program", *statements, eof), self.path)

    def parse_statement(self) -> SyntaxNode:
        if self.at(TokenKind.MUNUS):
            inner = self.parse_function_def()
        elif self.at(TokenKind.AS):
            inner = self.parse_variable_decl()
        elif self.at(TokenKind.GRAFO):
            inner = self.parse_output()
        else:
            raise self.error("a statement")
        return SyntaxNode.rule("statement", inner)

    def parse_function_def(self) -> SyntaxNode:
        # Munus name {param} = expression
        parts = [SyntaxNode.leaf(self.advance()), self.expect(TokenKind.IDENTIFIER)]
        while self.at(TokenKind.IDENTIFIER):
            parts.append(SyntaxNode.leaf(self.advance()))
        parts.append(self.expect(TokenKind.EQUALS))
        parts.append(self.parse_expression())
        return SyntaxNode.rule("functionDef", *parts)

    def parse_variable_decl(self) -> SyntaxNode:
        # As name = expression
        keyword = SyntaxNode.leaf(self.advance())
        name = self.expect(TokenKind.IDENTIFIER)
        equals = self.expect(TokenKind.EQUALS)
        value = self.parse_expression()
        return SyntaxNode.rule("variableDecl", keyword, name, equals, value)

    def parse_output(self) -> SyntaxNode:
        keyword = SyntaxNode.leaf(self.advance())
        return SyntaxNode.rule("outputStmt", keyword, self.parse_expression())

    def rule(self, name: str, *children: SyntaxNode) -> SyntaxNode:
        """Build an expression node, rejecting trees too tall for the later passes."""
        node = SyntaxNode.rule(name, *children)
        if node.depth > MAX_DEPTH:
            last = children[-1]
            raise SyntaxError(
                f"Expression nested more than {MAX_DEPTH} levels deep", last.line, last.column, self.path
            )
        return node

    def enter(self) -> None:
        self.nesting += 1
        if self.nesting > MAX_NESTING:
            t = self.peek()
            raise SyntaxError(
                f"Expression nested more than {MAX_NESTING} levels deep", t.line, t.column, self.path
            )

    def parse_expression(self) -> SyntaxNode:
        self.enter()
        try:
            return self.parse_additive()
        finally:
            self.nesting -= 1

    def parse_additive(self) -> SyntaxNode:
        left = self.parse_multiplicative()
        while self.at(TokenKind.PLUS, TokenKind.MINUS):
            op = SyntaxNode.leaf(self.advance())
            right = self.parse_multiplicative()
            left = self.rule("addExpr", left, op, right)
        return left

    def parse_multiplicative(self) -> SyntaxNode:
        left = self.parse_unary()
        while self.at(TokenKind.MULT, TokenKind.DIV):
            op = SyntaxNode.leaf(self.advance())
            right = self.parse_unary()
            left = self.rule("mulExpr", left, op, right)
        return left

    def parse_unary(self) -> SyntaxNode:
        if not self.at(TokenKind.PLUS, TokenKind.MINUS):
            return self.parse_call_or_atom()
        op = SyntaxNode.leaf(self.advance())
        self.enter()
        try:
            return self.rule("unaryExpr", op, self.parse_unary())
        finally:
            self.nesting -= 1

    def parse_call_or_atom(self) -> SyntaxNode:
        if self.at(TokenKind.SINON):
            return self.memoized("conditional", self.parse_conditional)
        if self.calls and self.at(TokenKind.IDENTIFIER) and self.peek(1).kind in _ATOM_START:
            parts = [SyntaxNode.leaf(self.advance())]
            while self.at(*_ATOM_START):
                parts.append(self.parse_atom())
            return self.rule("funcCall", *parts)
        return self.parse_atom()

    def memoized(self, name: str, parse: Callable[[], SyntaxNode]) -> SyntaxNode:
        """Parse a context-free rule once per start position, replaying its node or error."""
        key = (name, self.pos)
        if key in self.memo:
            node, end, error = self.memo[key]
            if error is not None:
                raise error
            self.pos = end
            return node
        try:
            node = parse()
        except SyntaxError as e:
            self.memo[key] = (None, key[1], e)
            raise
        self.memo[key] = (node, self.pos, None)
        return node

    def parse_conditional(self) -> SyntaxNode:
        """Sinon condition then else. Falls back to call-free operands when greedy calls starve it."""
        keyword = SyntaxNode.leaf(self.advance())
        start = self.pos
        try:
            operands = self._conditional_operands(calls=True)
        except SyntaxError as greedy_error:
            self.pos = start
            try:
                operands = self._conditional_operands(calls=False)
            except SyntaxError:
                raise greedy_error from None
        return self.rule("conditional", keyword, *operands)

    def _conditional_operands(self, calls: bool) -> list[SyntaxNode]:
        saved = self.calls
        self.calls = calls
        try:
            operands = []
            for _ in range(3):
                operands.append(self.parse_expression())
            return operands
        finally:
            self.calls = saved

    def parse_atom(self) -> SyntaxNode:
        if self.at(TokenKind.ROMAN, TokenKind.IDENTIFIER, TokenKind.ANAGNOSI):
            return SyntaxNode.leaf(self.advance())
        if self.at(TokenKind.LPAREN):
            return self.memoized("parenExpr", self.parse_paren)
        raise self.error("expression")

    def parse_paren(self) -> SyntaxNode:
        lparen = SyntaxNode.leaf(self.advance())
        saved = self.calls
        self.calls = True
        try:
            inner = self.parse_expression()
        finally:
            self.calls = saved
        rparen = self.expect(TokenKind.RPAREN)
        return self.rule("parenExpr", lparen, inner, rparen)


def parse_tokens(tokens: Sequence[Token], path: Optional[str] = None) -> SyntaxTree:
    """Parse an already tokenized program."""
    if not tokens or tokens[-1].kind != TokenKind.EOF:
        raise ValueError("token sequence must end with an EOF token")
    return Parser(tokens, path).parse_program()


def parse(source: Union[str, Sequence[Token]], path: Optional[str] = None) -> SyntaxTree:
    """Parse Rome77 source (or its tokens) into a syntax tree."""
    tokens = tokenize(source, path) if isinstance(source, str) else source
    return parse_tokens(tokens, path)
