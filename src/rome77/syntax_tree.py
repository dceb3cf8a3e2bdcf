"""Syntax tree produced by the parser. Rule nodes are named after grammar rules, terminals after token kinds."""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from rome77.lexer import Token


@dataclass(frozen=True)
class SyntaxNode:
    name: str
    text: str
    line: int
    column: int
    children: tuple["SyntaxNode", ...] = ()
    terminal: bool = False
    # Height of the subtree rooted here; a terminal is 1.
    depth: int = field(default=1, compare=False)

    @classmethod
    def leaf(cls, token: Token) -> "SyntaxNode":
        return cls(token.kind, token.text, token.line, token.column, terminal=True)

    @classmethod
    def rule(cls, name: str, *children: "SyntaxNode") -> "SyntaxNode":
        """Rule node located at its first child, text joined from its children."""
        first = children[0]
        return cls(
            name,
            "".join(child.text for child in children),
            first.line,
            first.column,
            tuple(children),
            depth=1 + max(child.depth for child in children),
        )

    def walk(self) -> Iterator["SyntaxNode"]:
        """Pre-order traversal, this node first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> Optional["SyntaxNode"]:
        for node in self.walk():
            if node.name == name:
                return node
        return None

    def pretty(self, indent: int = 0) -> str:
        pad = "  " * indent
        if self.terminal:
            return f"{pad}{self.name} {self.text!r} L{self.line}:{self.column}"
        lines = [f"{pad}{self.name} L{self.line}:{self.column}"]
        lines.extend(child.pretty(indent + 1) for child in self.children)
        return "\n".join(lines)


@dataclass(frozen=True)
class SyntaxTree:
    root: SyntaxNode
    path: Optional[str] = field(default=None, compare=False)

    def statements(self) -> tuple[SyntaxNode, ...]:
        return tuple(c for c in self.root.children if c.name == "statement")
