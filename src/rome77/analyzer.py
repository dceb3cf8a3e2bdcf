"""Semantic analysis: resolve names, check arity, and lower the syntax tree to IR."""

from typing import AbstractSet, Sequence, Union

from rome77 import roman
from rome77.errors import SemanticError
from rome77.ir import (
    BinaryOp,
    Call,
    Conditional,
    Declaration,
    Expression,
    Function,
    Input,
    Literal,
    Operator,
    Output,
    Program,
    Statement,
    UnaryOp,
    Variable,
)
from rome77.lexer import TokenKind
from rome77.syntax_tree import SyntaxNode, SyntaxTree

_OPERATORS = {
    TokenKind.PLUS: Operator.ADD,
    TokenKind.MINUS: Operator.SUB,
    TokenKind.MULT: Operator.MUL,
    TokenKind.DIV: Operator.DIV,
}


def _parameters(node: SyntaxNode) -> Sequence[SyntaxNode]:
    # functionDef: MUNUS name {param} EQUALS expression
    return node.children[2:-2]


def analyze(tree: Union[SyntaxTree, SyntaxNode]) -> Program:
    """Check the program and produce its IR. Raises SemanticError on the first violation."""
    if isinstance(tree, SyntaxTree):
        root, path = tree.root, tree.path
    else:
        root, path = tree, None
    statements = [c.children[0] for c in root.children if c.name == "statement"]
    function_defs = [s for s in statements if s.name == "functionDef"]
    arities: dict[str, int] = {}

    def fail(message: str, node: SyntaxNode) -> SemanticError:
        return SemanticError(message, node.line, node.column, path)

    def call(ident: SyntaxNode, args: Sequence[SyntaxNode], scope: AbstractSet[str]) -> Call:
        name = ident.text
        if name not in arities:
            raise fail(f"Undefined function: {name}", ident)
        arguments = tuple(lower(arg, scope) for arg in args)
        if len(arguments) != arities[name]:
            raise fail(f"Function {name} expects {arities[name]} arguments, got {len(arguments)}", ident)
        return Call(name, arguments)

    def reference(ident: SyntaxNode, scope: AbstractSet[str]) -> Expression:
        if ident.text in scope:
            return Variable(ident.text)
        if ident.text in arities:
            return call(ident, (), scope)
        raise fail(f"Undefined variable: {ident.text}", ident)

    def lower(node: SyntaxNode, scope: AbstractSet[str]) -> Expression:
        kind = node.name
        if kind == TokenKind.ROMAN:
            return Literal(roman.to_int(node.text))
        if kind == TokenKind.ANAGNOSI:
            return Input()
        if kind == TokenKind.IDENTIFIER:
            return reference(node, scope)
        if kind in ("addExpr", "mulExpr"):
            left, op, right = node.children
            return BinaryOp(_OPERATORS[op.name], lower(left, scope), lower(right, scope))
        if kind == "unaryExpr":
            op, operand = node.children
            return UnaryOp(_OPERATORS[op.name], lower(operand, scope))
        if kind == "parenExpr":
            return lower(node.children[1], scope)
        if kind == "conditional":
            _, condition, then_branch, else_branch = node.children
            return Conditional(lower(condition, scope), lower(then_branch, scope), lower(else_branch, scope))
        if kind == "funcCall":
            return call(node.children[0], node.children[1:], scope)
        raise ValueError(f"Unexpected syntax node {kind!r} at {node.line}:{node.column}")

    # Pass 1: hoist every function signature so bodies can call forward.
    for node in function_defs:
        ident = node.children[1]
        if ident.text in arities:
            raise fail(f"Function {ident.text} is already defined", ident)
        arities[ident.text] = len(_parameters(node))

    # Pass 2: function bodies see only their own parameters.
    functions: list[Function] = []
    for node in function_defs:
        params: list[str] = []
        for param in _parameters(node):
            if param.text in params:
                raise fail(f"Duplicate parameter name: {param.text}", param)
            params.append(param.text)
        body = lower(node.children[-1], frozenset(params))
        functions.append(Function(node.children[1].text, tuple(params), body))

    # Pass 3: main body, each statement sees only earlier declarations.
    variables: set[str] = set()
    main: list[Statement] = []
    for node in statements:
        if node.name == "variableDecl":
            ident = node.children[1]
            if ident.text in arities:
                raise fail(f"Function {ident.text} is already defined", ident)
            if ident.text in variables:
                raise fail(f"Variable {ident.text} is already defined", ident)
            value = lower(node.children[3], frozenset(variables))
            variables.add(ident.text)
            main.append(Declaration(ident.text, value))
        elif node.name == "outputStmt":
            main.append(Output(lower(node.children[1], frozenset(variables))))

    return Program(tuple(functions), tuple(main))
